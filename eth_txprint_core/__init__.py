# eth_txprint_core/__init__.py

# Key classes and functions, so callers can do `from eth_txprint_core import DerivationEngine`.
# Scenarios and tests may still import directly from the modules.
from .derivation import DerivationEngine
from .errors import (
    ChainDataError,
    ChainDataNotFoundError,
    InvalidTransactionHashError,
    SenderRecoveryError,
    SnapshotDerivationError,
    TxPrintError,
)
from .formatter import render_snapshot
from .snapshot import FeeModel, MinedState, PendingState, TransactionSnapshot, TxStatus

__version__ = "0.1.0"
