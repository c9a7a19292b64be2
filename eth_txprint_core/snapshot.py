# eth_txprint_core/snapshot.py
"""
Data structures describing a transaction lookup: status and fee model enums,
the pending / mined state records, and the immutable TransactionSnapshot.
"""
import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple, Union

from . import config as core_config


class TxStatus(Enum):
    UNKNOWN = "Unknown"
    PENDING = "Pending"
    FAILED = "Failed"
    SUCCESSFUL = "Successful"

    @classmethod
    def from_receipt_status(cls, status_code: Optional[int]) -> "TxStatus":
        """Maps a receipt status code. Anything other than 0 or 1 is UNKNOWN."""
        if status_code == core_config.RECEIPT_STATUS_FAILED:
            return cls.FAILED
        if status_code == core_config.RECEIPT_STATUS_SUCCESSFUL:
            return cls.SUCCESSFUL
        return cls.UNKNOWN

    def __str__(self) -> str:
        return self.value


class FeeModel(Enum):
    LEGACY = "Legacy"
    FEE_MARKET = "EIP-1559"
    UNKNOWN = "Unknown"

    @classmethod
    def from_tx_type(cls, tx_type: Optional[int]) -> "FeeModel":
        if tx_type == core_config.TX_TYPE_LEGACY:
            return cls.LEGACY
        if tx_type == core_config.TX_TYPE_FEE_MARKET:
            return cls.FEE_MARKET
        return cls.UNKNOWN

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PendingState:
    """Fields known for a transaction that is still in the mempool."""
    gas_price_effective: int # tip cap + base fee of the current head
    max_fee_per_gas: int = 0
    max_priority_fee_per_gas: int = 0


@dataclass(frozen=True)
class MinedState:
    """Fields reconciled from the receipt and the block that includes the transaction."""
    block_number: int
    block_hash: str
    transaction_index: int
    block_timestamp: datetime
    confirmations: int
    gas_used: int
    gas_used_percent: float
    gas_price_effective: int
    base_fee_per_gas: Optional[int]
    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    transaction_fee_paid: int
    burnt_fees: Optional[int]
    priority_fee_savings: Optional[int] # FEE_MARKET only, can be negative


ChainState = Union[PendingState, MinedState]


@dataclass(frozen=True)
class TransactionSnapshot:
    """
    Immutable view of one transaction. The fields below ``state`` come straight
    from the transaction body; everything that depends on whether the transaction
    is mined lives in ``state``.

    ``state`` is None only for a partial snapshot attached to an error, in which
    case any of the transaction fields may be None as well.
    """
    hash: str
    status: TxStatus = TxStatus.UNKNOWN
    state: Optional[ChainState] = None
    fee_model: FeeModel = FeeModel.UNKNOWN
    tx_type: Optional[int] = None
    from_address: Optional[str] = None
    to_address: Optional[str] = None # None for contract creation
    value: Optional[int] = None
    gas_limit: Optional[int] = None
    nonce: Optional[int] = None
    input_data: bytes = b""
    soft_failures: Tuple[str, ...] = ()

    @property
    def is_pending(self) -> bool:
        return isinstance(self.state, PendingState)

    @property
    def is_mined(self) -> bool:
        return isinstance(self.state, MinedState)

    @property
    def is_contract_creation(self) -> bool:
        return self.to_address is None and self.tx_type is not None

    def _mined_field(self, name: str):
        return getattr(self.state, name) if isinstance(self.state, MinedState) else None

    @property
    def block_number(self) -> Optional[int]:
        return self._mined_field("block_number")

    @property
    def block_index(self) -> Optional[int]:
        return self._mined_field("transaction_index")

    @property
    def block_timestamp(self) -> Optional[datetime]:
        return self._mined_field("block_timestamp")

    @property
    def confirmations(self) -> int:
        return self.state.confirmations if isinstance(self.state, MinedState) else 0

    @property
    def gas_used(self) -> Optional[int]:
        return self._mined_field("gas_used")

    @property
    def gas_used_percent(self) -> Optional[float]:
        return self._mined_field("gas_used_percent")

    @property
    def base_fee_per_gas(self) -> Optional[int]:
        return self._mined_field("base_fee_per_gas")

    @property
    def transaction_fee_paid(self) -> Optional[int]:
        return self._mined_field("transaction_fee_paid")

    @property
    def burnt_fees(self) -> Optional[int]:
        return self._mined_field("burnt_fees")

    @property
    def priority_fee_savings(self) -> Optional[int]:
        return self._mined_field("priority_fee_savings")

    @property
    def gas_price_effective(self) -> Optional[int]:
        return self.state.gas_price_effective if self.state is not None else None

    @property
    def max_fee_per_gas(self) -> Optional[int]:
        return self.state.max_fee_per_gas if self.state is not None else None

    @property
    def max_priority_fee_per_gas(self) -> Optional[int]:
        return self.state.max_priority_fee_per_gas if self.state is not None else None

    def __repr__(self) -> str:
        return (f"TransactionSnapshot(hash='{self.hash[:10]}...', status={self.status.name}, "
                f"fee_model={self.fee_model.name}, block={self.block_number}, "
                f"confirmations={self.confirmations})")


@dataclass
class SnapshotDraft:
    """
    Mutable builder filled progressively while chain data is read, then frozen.
    """
    hash: str
    status: TxStatus = TxStatus.UNKNOWN
    state: Optional[ChainState] = None
    fee_model: FeeModel = FeeModel.UNKNOWN
    tx_type: Optional[int] = None
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    value: Optional[int] = None
    gas_limit: Optional[int] = None
    nonce: Optional[int] = None
    input_data: bytes = b""
    soft_failures: List[str] = field(default_factory=list)

    def freeze(self) -> TransactionSnapshot:
        values = {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}
        values["soft_failures"] = tuple(self.soft_failures)
        return TransactionSnapshot(**values)
