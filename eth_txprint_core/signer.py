# eth_txprint_core/signer.py
"""
Recovers the sender of a transaction from its signature. The unsigned payload is
rebuilt per fee model (legacy: EIP-155 or pre-EIP-155, fee market: EIP-1559 typed
envelope), hashed with keccak and fed to secp256k1 public key recovery.
"""
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import rlp
from eth_hash.auto import keccak
from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_keys.exceptions import ValidationError as KeyValidationError
from eth_utils import to_canonical_address
from rlp.exceptions import SerializationError
from rlp.sedes import Binary, CountableList, big_endian_int, binary
from rlp.sedes import List as RlpList

from . import config as core_config
from .errors import SenderRecoveryError
from .snapshot import FeeModel
from .utils import to_data_bytes, to_int

logger = logging.getLogger(__name__)

SECP256K1_N: int = 115792089237316195423570985008687907852837564279074904382605163141518161494337
EIP155_V_OFFSET: int = 35
PRE_EIP155_V_VALUES: Tuple[int, int] = (27, 28)

access_list_sedes = CountableList(
    RlpList([Binary.fixed_length(20), CountableList(Binary.fixed_length(32))])
)


class LegacyUnsignedTx(rlp.Serializable):
    """Pre-EIP-155 signing payload (no replay protection)."""
    fields = (
        ("nonce", big_endian_int),
        ("gas_price", big_endian_int),
        ("gas_limit", big_endian_int),
        ("to_address", binary),
        ("value", big_endian_int),
        ("call_data", binary),
    )


class Eip155UnsignedTx(rlp.Serializable):
    """EIP-155 signing payload: the legacy fields followed by (chain_id, 0, 0)."""
    fields = (
        ("nonce", big_endian_int),
        ("gas_price", big_endian_int),
        ("gas_limit", big_endian_int),
        ("to_address", binary),
        ("value", big_endian_int),
        ("call_data", binary),
        ("chain_id", big_endian_int),
        ("empty_r", big_endian_int),
        ("empty_s", big_endian_int),
    )


class FeeMarketUnsignedTx(rlp.Serializable):
    """EIP-1559 signing payload, prefixed with the type byte before hashing."""
    fields = (
        ("chain_id", big_endian_int),
        ("nonce", big_endian_int),
        ("max_priority_fee_per_gas", big_endian_int),
        ("max_fee_per_gas", big_endian_int),
        ("gas_limit", big_endian_int),
        ("to_address", binary),
        ("value", big_endian_int),
        ("call_data", binary),
        ("access_list", access_list_sedes),
    )


def resolve_chain_id(tx: Mapping[str, Any]) -> Optional[int]:
    """
    Returns the chain id a transaction was signed for: the explicit ``chainId`` field,
    else the value encoded in an EIP-155 ``v``. None for unprotected legacy transactions.
    """
    if tx.get("chainId") is not None:
        return to_int(tx["chainId"])
    v = to_int(tx.get("v"))
    if v >= EIP155_V_OFFSET:
        return (v - EIP155_V_OFFSET) // 2
    return None


def _to_address_bytes(tx: Mapping[str, Any]) -> bytes:
    to_value = tx.get("to")
    if not to_value:
        return b"" # contract creation
    return to_canonical_address(to_value)


def _call_data(tx: Mapping[str, Any]) -> bytes:
    return to_data_bytes(tx.get("input", tx.get("data")))


def _access_list(tx: Mapping[str, Any]) -> list:
    entries = []
    for entry in tx.get("accessList") or []:
        storage_keys = [to_data_bytes(key).rjust(32, b"\x00") for key in entry.get("storageKeys", [])]
        entries.append([to_canonical_address(entry["address"]), storage_keys])
    return entries


def _legacy_signing(tx: Mapping[str, Any], chain_id: Optional[int]) -> Tuple[bytes, int]:
    """Returns (message hash, recovery id) for a type 0x0 transaction."""
    v = to_int(tx.get("v"))
    base_fields = dict(
        nonce=to_int(tx.get("nonce")),
        gas_price=to_int(tx.get("gasPrice")),
        gas_limit=to_int(tx.get("gas")),
        to_address=_to_address_bytes(tx),
        value=to_int(tx.get("value")),
        call_data=_call_data(tx),
    )
    if v in PRE_EIP155_V_VALUES:
        return keccak(rlp.encode(LegacyUnsignedTx(**base_fields))), v - PRE_EIP155_V_VALUES[0]

    if chain_id is None:
        raise SenderRecoveryError(f"Legacy transaction with v={v} carries no chain id")
    recovery_id = v - EIP155_V_OFFSET - 2 * chain_id
    if recovery_id not in (0, 1):
        raise SenderRecoveryError(f"Signature v={v} does not match chain id {chain_id}")
    payload = Eip155UnsignedTx(chain_id=chain_id, empty_r=0, empty_s=0, **base_fields)
    return keccak(rlp.encode(payload)), recovery_id


def _fee_market_signing(tx: Mapping[str, Any], chain_id: Optional[int]) -> Tuple[bytes, int]:
    """Returns (message hash, recovery id) for a type 0x2 transaction."""
    if chain_id is None:
        raise SenderRecoveryError("Fee market transaction carries no chain id")
    recovery_id = to_int(tx.get("yParity", tx.get("v")))
    if recovery_id not in (0, 1):
        raise SenderRecoveryError(f"Invalid y parity {recovery_id} for a fee market transaction")
    payload = FeeMarketUnsignedTx(
        chain_id=chain_id,
        nonce=to_int(tx.get("nonce")),
        max_priority_fee_per_gas=to_int(tx.get("maxPriorityFeePerGas")),
        max_fee_per_gas=to_int(tx.get("maxFeePerGas")),
        gas_limit=to_int(tx.get("gas")),
        to_address=_to_address_bytes(tx),
        value=to_int(tx.get("value")),
        call_data=_call_data(tx),
        access_list=_access_list(tx),
    )
    envelope = bytes([core_config.TX_TYPE_FEE_MARKET]) + rlp.encode(payload)
    return keccak(envelope), recovery_id


SigningScheme = Callable[[Mapping[str, Any], Optional[int]], Tuple[bytes, int]]

SIGNING_SCHEMES: Dict[FeeModel, Optional[SigningScheme]] = {
    FeeModel.LEGACY: _legacy_signing,
    FeeModel.FEE_MARKET: _fee_market_signing,
    FeeModel.UNKNOWN: None,
}


def recover_sender(tx: Mapping[str, Any], fee_model: FeeModel, chain_id: Optional[int]) -> str:
    """
    Recovers the checksummed sender address of a signed transaction.

    :param tx: Transaction fields as returned by eth_getTransactionByHash.
    :param fee_model: Selects the signing scheme.
    :param chain_id: The chain id the signature is verified against.
    :return: The checksummed sender address.
    :raises SenderRecoveryError: If the signature cannot be verified.
    """
    signing_scheme = SIGNING_SCHEMES[fee_model]
    if signing_scheme is None:
        raise SenderRecoveryError(f"No signature scheme for transaction type {tx.get('type')!r}")

    try:
        r = to_int(tx.get("r"))
        s = to_int(tx.get("s"))
        if not (0 < r < SECP256K1_N and 0 < s < SECP256K1_N):
            raise SenderRecoveryError(f"Invalid signature values: r={r} s={s}")

        msg_hash, recovery_id = signing_scheme(tx, chain_id)
        signature = keys.Signature(vrs=(recovery_id, r, s))
        public_key = signature.recover_public_key_from_msg_hash(msg_hash)
    except SenderRecoveryError:
        raise
    except (BadSignature, KeyValidationError, SerializationError,
            KeyError, TypeError, ValueError) as e:
        raise SenderRecoveryError(f"Invalid signature: {e}") from e

    sender = public_key.to_checksum_address()
    logger.debug("Recovered sender %s for %s transaction", sender, fee_model.name)
    return sender
