# eth_txprint_core/derivation.py
"""
The derivation engine: reads a transaction, its receipt and the blocks around it
from a chain-data source and reconciles them into a TransactionSnapshot, including
the fee economics (effective gas price, fee paid, burnt fees, priority fee savings).
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from . import config as core_config
from .clients.base_client import IChainDataSource, TxHash
from .errors import ChainDataError, SenderRecoveryError, SnapshotDerivationError
from .signer import recover_sender, resolve_chain_id
from .snapshot import (
    FeeModel,
    MinedState,
    PendingState,
    SnapshotDraft,
    TransactionSnapshot,
    TxStatus,
)
from .utils import to_data_bytes, to_hash_str, to_int, to_optional_address, to_optional_int

logger = logging.getLogger(__name__)

T = TypeVar("T")

SenderRecoverer = Callable[[Mapping[str, Any], FeeModel, Optional[int]], str]

# Fee models whose caps make "priority fee savings" meaningful
SAVINGS_BY_FEE_MODEL: Dict[FeeModel, bool] = {
    FeeModel.LEGACY: False,
    FeeModel.FEE_MARKET: True,
    FeeModel.UNKNOWN: False,
}


def tip_cap(tx: Mapping[str, Any]) -> int:
    """Priority fee per gas the sender offered. Legacy transactions: the gas price."""
    if tx.get("maxPriorityFeePerGas") is not None:
        return to_int(tx["maxPriorityFeePerGas"])
    return to_int(tx.get("gasPrice"))


def fee_cap(tx: Mapping[str, Any]) -> int:
    """Maximum fee per gas the sender accepted. Legacy transactions: the gas price."""
    if tx.get("maxFeePerGas") is not None:
        return to_int(tx["maxFeePerGas"])
    return to_int(tx.get("gasPrice"))


def priority_fee_savings(gas_used: int, max_fee: int, base_fee: int, max_priority_fee: int) -> int:
    """(Max Fee Per Gas - (Base Fee Per Gas + Max Priority Fee Per Gas)) * Gas Used, unclamped."""
    return gas_used * (max_fee - (base_fee + max_priority_fee))


class DerivationEngine:
    """
    Produces one TransactionSnapshot per call to ``derive``. Every chain read is
    attempted once; failures are raised as SnapshotDerivationError carrying the
    partially populated snapshot.
    """

    def __init__(self,
                 chain_source: IChainDataSource,
                 sender_recoverer: SenderRecoverer = recover_sender,
                 strict_sender_recovery: Optional[bool] = None
                ):
        """
        :param chain_source: Where transactions, receipts and blocks are read from.
        :param sender_recoverer: Signature recovery capability, see signer.recover_sender.
        :param strict_sender_recovery: Raise on sender recovery failure instead of
                                        recording it on the snapshot. Defaults to
                                        core_config.STRICT_SENDER_RECOVERY.
        """
        self.chain_source = chain_source
        self.sender_recoverer = sender_recoverer
        self.strict_sender_recovery: bool = (core_config.STRICT_SENDER_RECOVERY
                                             if strict_sender_recovery is None
                                             else strict_sender_recovery)

    def derive(self, tx_hash: TxHash) -> TransactionSnapshot:
        """
        Looks up a transaction and derives its snapshot.

        :param tx_hash: 32 byte transaction hash, validated by the caller.
        :return: The frozen snapshot.
        :raises SnapshotDerivationError: If a chain read fails.
        :raises SenderRecoveryError: In strict mode, if the sender cannot be recovered.
        """
        draft = SnapshotDraft(hash=to_hash_str(tx_hash))

        tx, is_pending = self._read(draft, lambda: self.chain_source.get_transaction_by_hash(tx_hash))
        head = self._read(draft, lambda: self.chain_source.get_block_by_number(None))

        self._populate_from_body(draft, tx)
        self._populate_sender(draft, tx)

        if is_pending:
            self._populate_pending(draft, tx, head)
            logger.info("Transaction %s is pending", draft.hash)
            return draft.freeze()

        receipt = self._read(draft, lambda: self.chain_source.get_transaction_receipt(tx_hash))
        # By hash, so a reorg between the reads cannot pair the receipt with another block
        block = self._read(draft, lambda: self.chain_source.get_block_by_hash(receipt["blockHash"]))

        self._populate_mined(draft, tx, head, receipt, block)
        logger.info("Transaction %s: %s in block %s", draft.hash, draft.status.value, draft.state.block_number)
        return draft.freeze()

    def _read(self, draft: SnapshotDraft, request: Callable[[], T]) -> T:
        try:
            return request()
        except ChainDataError as e:
            logger.error("Chain read failed for %s: %s", draft.hash, e)
            raise SnapshotDerivationError(draft.freeze(), e) from e

    def _populate_from_body(self, draft: SnapshotDraft, tx: Mapping[str, Any]) -> None:
        draft.tx_type = to_int(tx.get("type"))
        draft.fee_model = FeeModel.from_tx_type(draft.tx_type)
        draft.to_address = to_optional_address(tx.get("to"))
        draft.value = to_int(tx.get("value"))
        draft.gas_limit = to_int(tx.get("gas"))
        draft.nonce = to_int(tx.get("nonce"))
        draft.input_data = to_data_bytes(tx.get("input", tx.get("data")))

    def _populate_sender(self, draft: SnapshotDraft, tx: Mapping[str, Any]) -> None:
        try:
            draft.from_address = self.sender_recoverer(tx, draft.fee_model, resolve_chain_id(tx))
        except SenderRecoveryError as e:
            if self.strict_sender_recovery:
                logger.error("Sender recovery failed for %s: %s", draft.hash, e)
                raise SenderRecoveryError(str(e), snapshot=draft.freeze()) from e
            logger.warning("Sender recovery failed for %s, continuing without sender: %s", draft.hash, e)
            draft.soft_failures.append(f"sender recovery failed: {e}")

    def _populate_pending(self, draft: SnapshotDraft, tx: Mapping[str, Any], head: Mapping[str, Any]) -> None:
        draft.status = TxStatus.PENDING
        head_base_fee = to_int(head.get("baseFeePerGas"))
        draft.state = PendingState(gas_price_effective=tip_cap(tx) + head_base_fee)

    def _populate_mined(self,
                        draft: SnapshotDraft,
                        tx: Mapping[str, Any],
                        head: Mapping[str, Any],
                        receipt: Mapping[str, Any],
                        block: Mapping[str, Any]
                       ) -> None:
        draft.status = TxStatus.from_receipt_status(to_optional_int(receipt.get("status")))
        if draft.status is TxStatus.UNKNOWN:
            logger.warning("Receipt of %s has unrecognised status %r", draft.hash, receipt.get("status"))

        inclusion_block_number = to_int(receipt.get("blockNumber"))
        head_number = to_int(head.get("number"))
        confirmations = head_number - inclusion_block_number
        if confirmations < 0:
            logger.warning("Head block %d is behind inclusion block %d of %s",
                           head_number, inclusion_block_number, draft.hash)
            confirmations = 0

        base_fee = to_optional_int(block.get("baseFeePerGas")) # None before London
        base_fee_or_zero = base_fee or 0
        gas_used = to_int(receipt.get("gasUsed"))
        gas_price_effective = tip_cap(tx) + base_fee_or_zero
        max_fee = fee_cap(tx)
        max_priority_fee = tip_cap(tx)

        savings = None
        if SAVINGS_BY_FEE_MODEL[draft.fee_model]:
            savings = priority_fee_savings(gas_used, max_fee, base_fee_or_zero, max_priority_fee)

        draft.state = MinedState(
            block_number=to_int(block.get("number", inclusion_block_number)),
            block_hash=to_hash_str(receipt["blockHash"]),
            transaction_index=to_int(receipt.get("transactionIndex")),
            block_timestamp=datetime.fromtimestamp(to_int(block.get("timestamp")), tz=timezone.utc),
            confirmations=confirmations,
            gas_used=gas_used,
            gas_used_percent=(gas_used / draft.gas_limit * 100) if draft.gas_limit else 0.0,
            gas_price_effective=gas_price_effective,
            base_fee_per_gas=base_fee,
            max_fee_per_gas=max_fee,
            max_priority_fee_per_gas=max_priority_fee,
            transaction_fee_paid=gas_price_effective * gas_used,
            burnt_fees=base_fee * gas_used if base_fee is not None else None,
            priority_fee_savings=savings,
        )
