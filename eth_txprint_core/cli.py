"""CLI interface for eth_txprint_core: print a summary of one Ethereum transaction."""

import logging
import sys
from argparse import ArgumentParser
from typing import List, Optional

from eth_utils import is_hexstr
from hexbytes import HexBytes

from eth_txprint_core import config as core_config
from eth_txprint_core.client_factory import create_client
from eth_txprint_core.derivation import DerivationEngine
from eth_txprint_core.errors import InvalidTransactionHashError, TxPrintError
from eth_txprint_core.formatter import render_snapshot
from eth_txprint_core.log_utils import configure_logging

logger = logging.getLogger(__name__)


def parse_tx_hash(raw_hash: str) -> HexBytes:
    """
    Validates a hex encoded transaction hash (with or without 0x prefix).

    :raises InvalidTransactionHashError: If it is not exactly 32 bytes of hex.
    """
    text = raw_hash.strip()
    digits = text[2:] if text.lower().startswith("0x") else text
    if not digits or not is_hexstr("0x" + digits):
        raise InvalidTransactionHashError(raw_hash, "not hex encoded")
    if len(digits) != core_config.TX_HASH_BYTE_LENGTH * 2:
        raise InvalidTransactionHashError(
            raw_hash, f"expected {core_config.TX_HASH_BYTE_LENGTH} bytes, got {len(digits) / 2:g}")
    return HexBytes("0x" + digits)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="ethtxprint", description="Print a summary of an Ethereum transaction")
    parser.add_argument("tx_hash", help="Transaction hash, hex encoded (32 bytes)")
    parser.add_argument(
        "--node", default=core_config.DEFAULT_NODE_URL, help="Ethereum node URL (http, ws or IPC path)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=core_config.DEFAULT_REQUEST_TIMEOUT_SECONDS,
        help="Per-request timeout in seconds",
    )
    parser.add_argument(
        "--strict-sender-recovery",
        action="store_true",
        default=core_config.STRICT_SENDER_RECOVERY,
        help="Fail when the sender cannot be recovered from the signature",
    )
    parser.add_argument(
        "--show-status",
        action="store_true",
        default=core_config.REPORT_SHOW_STATUS,
        help="Add a Status line to the report",
    )
    parser.add_argument("--log-level", default=core_config.LOG_LEVEL, help="Logging level (e.g. INFO, DEBUG)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        tx_hash = parse_tx_hash(args.tx_hash)
        client = create_client(args.node, timeout=args.timeout)
        engine = DerivationEngine(client, strict_sender_recovery=args.strict_sender_recovery)
        snapshot = engine.derive(tx_hash)
    except (TxPrintError, ValueError) as e:
        print(e)
        return 1

    for soft_failure in snapshot.soft_failures:
        logger.warning("%s: %s", snapshot.hash, soft_failure)
    print(render_snapshot(snapshot, include_status=args.show_status))
    return 0


if __name__ == "__main__":
    sys.exit(main())
