# eth_txprint_core/config.py
"""
Default configuration values for the Ethereum transaction printer.
These can be overridden per call or by command-line flags.
"""

# --- Client Communication ---
DEFAULT_NODE_URL: str = "http://localhost:8545" # Default JSON-RPC endpoint of the Ethereum node
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 10.0  # Timeout for a single RPC request
DEFAULT_HEAD_SELECTOR: str = "latest"          # Block selector used as the confirmation baseline
VERIFY_CONNECTION_ON_DIAL: bool = True         # Ping the node when the client is created

# --- Transaction Hash Input ---
TX_HASH_BYTE_LENGTH: int = 32

# --- Transaction Types ---
TX_TYPE_LEGACY: int = 0x0
TX_TYPE_FEE_MARKET: int = 0x2

# --- Receipt Status Codes ---
RECEIPT_STATUS_FAILED: int = 0x0
RECEIPT_STATUS_SUCCESSFUL: int = 0x1

# --- Sender Recovery ---
# False keeps the historical behaviour: a failed recovery leaves the sender unset,
# is recorded on the snapshot and logged, and the lookup still succeeds.
# True turns the failure into a SenderRecoveryError.
STRICT_SENDER_RECOVERY: bool = False

# --- Report ---
REPORT_LABEL_WIDTH: int = 26      # Column where values start in the rendered report
REPORT_SHOW_STATUS: bool = False  # Insert a "Status" line after the transaction hash

# --- Logging ---
LOG_LEVEL: str = "WARNING"
LOG_FORMAT: str = "%(levelname)s: %(name)s: %(message)s"
LOG_TO_FILE: bool = False
LOG_FILE_PATH: str = "ethtxprint.log"
