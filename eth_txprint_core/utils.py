# eth_txprint_core/utils.py
"""
Normalisation helpers for values returned by JSON-RPC / web3.py. Depending on the
provider and middleware a quantity may arrive as int, hex string or bytes.
"""
from typing import Any, Optional

from eth_utils import big_endian_to_int, to_bytes, to_checksum_address, to_hex
from hexbytes import HexBytes


def to_int(value: Any, default: int = 0) -> int:
    """Converts an RPC quantity (int, '0x..' string, decimal string or bytes) to int."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (bytes, bytearray)):
        return big_endian_to_int(bytes(value))
    if isinstance(value, str):
        return int(value, 16) if value.lower().startswith("0x") else int(value)
    raise TypeError(f"Cannot interpret {value!r} as an integer quantity")


def to_optional_int(value: Any) -> Optional[int]:
    return None if value is None else to_int(value)


def to_data_bytes(value: Any) -> bytes:
    """Converts RPC data (HexBytes, bytes or '0x..' string) to bytes. None becomes b''."""
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return to_bytes(hexstr=value) if value not in ("", "0x") else b""
    raise TypeError(f"Cannot interpret {value!r} as byte data")


def to_hash_str(value: Any) -> str:
    """Returns a 0x-prefixed lowercase hex string for a hash given as bytes or str."""
    if isinstance(value, (bytes, bytearray)):
        return to_hex(HexBytes(value))
    text = str(value).lower()
    return text if text.startswith("0x") else "0x" + text


def to_optional_address(value: Any) -> Optional[str]:
    """Checksums an address; None and empty values (contract creation) stay None."""
    if value is None or value in ("", "0x", b""):
        return None
    if isinstance(value, (bytes, bytearray)):
        return to_checksum_address(bytes(value))
    return to_checksum_address(value)
