# eth_txprint_core/formatter.py
"""
Renders a TransactionSnapshot as the fixed, labelled text report.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Union

from web3 import Web3

from . import config as core_config
from .snapshot import FeeModel, MinedState, TransactionSnapshot

PENDING_TEXT = "Pending"
UNAVAILABLE_TEXT = "Unavailable"
NOT_APPLICABLE_TEXT = "N/A"

# Fee models that declare fee caps (Max Fee / Max Priority Fee lines, Txn Savings)
SHOWS_FEE_CAPS: Dict[FeeModel, bool] = {
    FeeModel.LEGACY: False,
    FeeModel.FEE_MARKET: True,
    FeeModel.UNKNOWN: False,
}


def decimal_text(amount: Union[Decimal, int]) -> str:
    """Plain decimal notation without exponent or trailing zeros."""
    if isinstance(amount, int):
        return str(amount)
    text = format(amount, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_units(amount: int, unit: str = "ether") -> str:
    """
    Exact decimal rendering of a wei amount in a larger unit ("ether", "gwei", ...).
    Negative amounts keep their sign.
    """
    if amount == 0:
        return "0"
    sign = "-" if amount < 0 else ""
    return sign + decimal_text(Web3.from_wei(abs(amount), unit))


def ether(amount: int) -> str:
    return format_units(amount, "ether")


def gwei(amount: int) -> str:
    return format_units(amount, "gwei")


def ether_and_gwei(amount: int) -> str:
    return f"{ether(amount)} Ether ({gwei(amount)} Gwei)"


def humanize_age(age: timedelta) -> str:
    """
    Relative age using the largest unit that is at least one:
    days and hours, hours and minutes, minutes, or seconds.
    """
    total_seconds = max(int(age.total_seconds()), 0)
    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)
    if days >= 1:
        return f"{days} days {hours} hours ago"
    if hours >= 1:
        return f"{hours} hours {minutes} minutes ago"
    if minutes >= 1:
        return f"{minutes} mins ago"
    return f"{seconds} seconds ago"


def format_block_time(block_time: datetime) -> str:
    return block_time.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S +0000 UTC")


def _line(label: str, value: str) -> str:
    return f"{label + ':':<{core_config.REPORT_LABEL_WIDTH}}{value}"


def _optional(value: Optional[int], render, placeholder: str = UNAVAILABLE_TEXT) -> str:
    return placeholder if value is None else render(value)


def render_snapshot(snapshot: TransactionSnapshot,
                    now: Optional[datetime] = None,
                    include_status: Optional[bool] = None) -> str:
    """
    Renders the report for a snapshot.

    :param snapshot: The snapshot to render.
    :param now: Reference time for the block age, defaults to the current UTC time.
    :param include_status: Insert a "Status" line after the hash, defaults to
                           core_config.REPORT_SHOW_STATUS.
    :return: The multi-line report, newline terminated.
    """
    if include_status is None:
        include_status = core_config.REPORT_SHOW_STATUS
    now = now or datetime.now(timezone.utc)
    state = snapshot.state
    shows_fee_caps = SHOWS_FEE_CAPS[snapshot.fee_model]

    if isinstance(state, MinedState):
        age = humanize_age(now - state.block_timestamp)
        block_msg = f"{state.block_number} ({state.confirmations} confirmations)"
        time_msg = f"{age} ({format_block_time(state.block_timestamp)})"
        fee_msg = f"{ether(state.transaction_fee_paid)} Ether"
        gas_used_msg = f"{state.gas_used} ({state.gas_used_percent:.2f}%)"
        base_fee_msg = _optional(state.base_fee_per_gas, lambda fee: f"{fee} Wei ({gwei(fee)} Gwei)",
                                 NOT_APPLICABLE_TEXT)
        position_msg = str(state.transaction_index)
    else:
        placeholder = PENDING_TEXT if snapshot.is_pending else UNAVAILABLE_TEXT
        block_msg = f"({placeholder})"
        time_msg = fee_msg = gas_used_msg = base_fee_msg = position_msg = placeholder

    lines: List[Tuple[str, str]] = [("Transaction Hash", snapshot.hash)]
    if include_status:
        lines.append(("Status", str(snapshot.status)))
    lines += [
        ("Block", block_msg),
        ("Timestamp", time_msg),
        ("From", snapshot.from_address or "(Unknown)"),
        ("To", snapshot.to_address or ("(Contract Creation)" if snapshot.is_contract_creation else "(Unknown)")),
        ("Value", _optional(snapshot.value, lambda value: f"{ether(value)} Ether")),
        ("Transaction Fee", fee_msg),
        ("Gas Price", _optional(snapshot.gas_price_effective, ether_and_gwei)),
        ("Txn Type", f"{_optional(snapshot.tx_type, str)} ({snapshot.fee_model})"),
        ("Gas Limit", _optional(snapshot.gas_limit, str)),
        ("Gas Used By Transaction", gas_used_msg),
        ("Base Fee Per Gas", base_fee_msg),
    ]
    if shows_fee_caps:
        lines += [
            ("Max Fee Per Gas", _optional(snapshot.max_fee_per_gas, ether_and_gwei)),
            ("Max Priority Fee Per Gas", _optional(snapshot.max_priority_fee_per_gas, ether_and_gwei)),
        ]
    if isinstance(state, MinedState):
        lines.append(("Burnt Fees", _optional(state.burnt_fees, lambda fee: f"{ether(fee)} Ether",
                                              NOT_APPLICABLE_TEXT)))
        if shows_fee_caps:
            lines.append(("Txn Savings", _optional(state.priority_fee_savings, lambda fee: f"{ether(fee)} Ether")))
    lines += [
        ("Nonce (position)", f"{_optional(snapshot.nonce, str)} ({position_msg})"),
        ("Input Data", snapshot.input_data.hex()),
    ]
    return "\n".join(_line(label, value) for label, value in lines) + "\n"
