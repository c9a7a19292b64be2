# eth_txprint_core/errors.py
"""
Exception taxonomy for transaction lookups.
"""
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .snapshot import TransactionSnapshot


class TxPrintError(Exception):
    """Base class for every error raised by this package."""


class InvalidTransactionHashError(TxPrintError, ValueError):
    """The supplied transaction hash is not 32 bytes of hex."""

    def __init__(self, raw_hash: str, reason: str):
        super().__init__(f"Invalid transaction hash provided: {raw_hash!r} ({reason})")
        self.raw_hash = raw_hash
        self.reason = reason


class ChainDataError(TxPrintError):
    """A chain-data read failed (node unreachable, timeout, RPC error)."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class ChainDataNotFoundError(ChainDataError):
    """The node answered, but does not know the requested object."""


class SenderRecoveryError(TxPrintError):
    """The sender address could not be recovered from the transaction signature."""

    def __init__(self, message: str, snapshot: Optional["TransactionSnapshot"] = None):
        super().__init__(message)
        self.snapshot = snapshot


class SnapshotDerivationError(TxPrintError):
    """
    A chain read failed part way through a derivation. ``snapshot`` holds the fields
    that were populated before the failure; the underlying error is chained as
    ``__cause__``.
    """

    def __init__(self, snapshot: "TransactionSnapshot", cause: BaseException):
        super().__init__(str(cause))
        self.snapshot = snapshot
        self.cause = cause
