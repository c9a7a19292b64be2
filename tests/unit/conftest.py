from datetime import datetime, timezone
from typing import Any, Dict, Optional
from unittest.mock import Mock

import pytest
from eth_account import Account
from eth_utils import to_checksum_address
from hexbytes import HexBytes

from eth_txprint_core.clients.base_client import IChainDataSource

# Well known throwaway key from the eth-account documentation
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
SENDER = Account.from_key(PRIVATE_KEY).address
RECIPIENT = to_checksum_address("0x" + "ab" * 20)
CHAIN_ID = 1

TX_HASH = HexBytes("0x" + "11" * 32)
BLOCK_HASH = HexBytes("0x" + "22" * 32)
INCLUSION_BLOCK = 15_000_000
BLOCK_TIMESTAMP = 1_660_000_000
GWEI = 10**9


def _signature_fields(signed) -> Dict[str, Any]:
    return {
        "v": signed.v,
        "r": HexBytes(signed.r.to_bytes(32, "big")),
        "s": HexBytes(signed.s.to_bytes(32, "big")),
    }


def make_legacy_tx(chain_id: Optional[int] = CHAIN_ID, **overrides) -> Dict[str, Any]:
    """A signed type 0x0 transaction in eth_getTransactionByHash shape."""
    fields = {
        "nonce": 42,
        "gasPrice": 30 * GWEI,
        "gas": 21000,
        "to": RECIPIENT,
        "value": 10**18,
        "data": "0x",
    }
    if chain_id is not None:
        fields["chainId"] = chain_id
    fields.update(overrides)
    signed = Account.sign_transaction(fields, PRIVATE_KEY)

    rpc_tx = {
        "hash": HexBytes(signed.hash),
        "type": 0,
        "nonce": fields["nonce"],
        "gasPrice": fields["gasPrice"],
        "gas": fields["gas"],
        "to": fields["to"],
        "value": fields["value"],
        "input": HexBytes(fields["data"]),
    }
    if chain_id is not None:
        rpc_tx["chainId"] = chain_id
    rpc_tx.update(_signature_fields(signed))
    return rpc_tx


def make_fee_market_tx(**overrides) -> Dict[str, Any]:
    """A signed type 0x2 transaction in eth_getTransactionByHash shape."""
    fields = {
        "type": 2,
        "chainId": CHAIN_ID,
        "nonce": 7,
        "maxFeePerGas": 100 * GWEI,
        "maxPriorityFeePerGas": 2 * GWEI,
        "gas": 50000,
        "to": RECIPIENT,
        "value": 25 * 10**16,
        "data": "0xdeadbeef",
        "accessList": [],
    }
    fields.update(overrides)
    signed = Account.sign_transaction(fields, PRIVATE_KEY)

    rpc_tx = {
        "hash": HexBytes(signed.hash),
        "type": 2,
        "chainId": fields["chainId"],
        "nonce": fields["nonce"],
        "maxFeePerGas": fields["maxFeePerGas"],
        "maxPriorityFeePerGas": fields["maxPriorityFeePerGas"],
        "gasPrice": fields["maxFeePerGas"],
        "gas": fields["gas"],
        "to": fields["to"],
        "value": fields["value"],
        "input": HexBytes(fields["data"]),
        "accessList": fields["accessList"],
        "yParity": signed.v,
    }
    rpc_tx.update(_signature_fields(signed))
    return rpc_tx


def make_block(number: int, base_fee: Optional[int] = 20 * GWEI, timestamp: int = BLOCK_TIMESTAMP,
               block_hash: HexBytes = BLOCK_HASH) -> Dict[str, Any]:
    block = {"number": number, "hash": block_hash, "timestamp": timestamp}
    if base_fee is not None:
        block["baseFeePerGas"] = base_fee
    return block


def make_receipt(gas_used: int, status: int = 1, block_number: int = INCLUSION_BLOCK,
                 transaction_index: int = 3) -> Dict[str, Any]:
    return {
        "transactionHash": TX_HASH,
        "blockHash": BLOCK_HASH,
        "blockNumber": block_number,
        "transactionIndex": transaction_index,
        "gasUsed": gas_used,
        "status": status,
    }


def make_chain_source(tx: Dict[str, Any],
                      is_pending: bool = False,
                      head: Optional[Dict[str, Any]] = None,
                      receipt: Optional[Dict[str, Any]] = None,
                      block: Optional[Dict[str, Any]] = None) -> Mock:
    """A mocked IChainDataSource answering one transaction lookup."""
    source = Mock(spec=IChainDataSource)
    source.get_transaction_by_hash.return_value = (tx, is_pending)
    source.get_block_by_number.return_value = head or make_block(INCLUSION_BLOCK + 12, block_hash=HexBytes("0x" + "33" * 32))
    source.get_transaction_receipt.return_value = receipt or make_receipt(gas_used=tx["gas"])
    source.get_block_by_hash.return_value = block or make_block(INCLUSION_BLOCK)
    return source


@pytest.fixture
def legacy_tx():
    return make_legacy_tx()


@pytest.fixture
def fee_market_tx():
    return make_fee_market_tx()


@pytest.fixture
def fixed_recoverer():
    """A sender recovery stub that always returns SENDER."""
    return Mock(return_value=SENDER)


@pytest.fixture
def now():
    return datetime.fromtimestamp(BLOCK_TIMESTAMP, tz=timezone.utc)
