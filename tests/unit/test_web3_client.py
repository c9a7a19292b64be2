from unittest.mock import Mock, patch

import pytest
import requests
from web3 import Web3
from web3.exceptions import BlockNotFound, TransactionNotFound

from eth_txprint_core.client_factory import create_client, create_provider
from eth_txprint_core.clients.web3_client import Web3ChainClient
from eth_txprint_core.errors import ChainDataError, ChainDataNotFoundError

from conftest import BLOCK_HASH, TX_HASH, make_block, make_legacy_tx


@pytest.fixture
def mock_w3():
    """A Web3 stand-in whose eth module is fully mocked."""
    w3 = Mock()
    w3.eth.get_block.return_value = make_block(100)
    return w3


@pytest.fixture
def client(mock_w3):
    return Web3ChainClient(mock_w3, node_url="http://node.test:8545")


class TestWeb3ChainClient:
    def test_mined_transaction_is_not_pending(self, client, mock_w3):
        tx = dict(make_legacy_tx(), blockHash=BLOCK_HASH, blockNumber=100)
        mock_w3.eth.get_transaction.return_value = tx

        result, is_pending = client.get_transaction_by_hash(TX_HASH)

        assert result is tx
        assert is_pending is False
        mock_w3.eth.get_transaction.assert_called_once_with(TX_HASH)

    def test_transaction_without_block_is_pending(self, client, mock_w3):
        mock_w3.eth.get_transaction.return_value = dict(make_legacy_tx(), blockHash=None, blockNumber=None)
        _, is_pending = client.get_transaction_by_hash(TX_HASH)
        assert is_pending is True

    def test_head_selector_defaults_to_latest(self, client, mock_w3):
        client.get_block_by_number(None)
        mock_w3.eth.get_block.assert_called_once_with("latest")

    def test_block_by_hash(self, client, mock_w3):
        assert client.get_block_by_hash(BLOCK_HASH)["number"] == 100
        mock_w3.eth.get_block.assert_called_once_with(BLOCK_HASH)

    def test_receipt(self, client, mock_w3):
        mock_w3.eth.get_transaction_receipt.return_value = {"status": 1}
        assert client.get_transaction_receipt(TX_HASH) == {"status": 1}

    def test_not_found_errors(self, client, mock_w3):
        mock_w3.eth.get_transaction.side_effect = TransactionNotFound("Transaction with hash: '0x11' not found.")
        with pytest.raises(ChainDataNotFoundError, match="TransactionByHash failed"):
            client.get_transaction_by_hash(TX_HASH)

        mock_w3.eth.get_block.side_effect = BlockNotFound("Block with id: '0x22' not found.")
        with pytest.raises(ChainDataNotFoundError):
            client.get_block_by_hash(BLOCK_HASH)

    def test_connection_errors(self, client, mock_w3):
        mock_w3.eth.get_transaction_receipt.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(ChainDataError, match="request to http://node.test:8545 failed") as exc_info:
            client.get_transaction_receipt(TX_HASH)
        assert not isinstance(exc_info.value, ChainDataNotFoundError)
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_timeouts(self, client, mock_w3):
        mock_w3.eth.get_block.side_effect = requests.exceptions.ReadTimeout("read timed out")
        with pytest.raises(ChainDataError, match="timed out"):
            client.get_block_by_number("latest")

    def test_rpc_errors(self, client, mock_w3):
        mock_w3.eth.get_transaction.side_effect = ValueError({"code": -32000, "message": "header not found"})
        with pytest.raises(ChainDataError, match="header not found"):
            client.get_transaction_by_hash(TX_HASH)


class TestClientFactory:
    def test_http_provider(self):
        provider = create_provider("http://localhost:8545", timeout=3)
        assert isinstance(provider, Web3.HTTPProvider)

    def test_ipc_provider(self, tmp_path):
        provider = create_provider(str(tmp_path / "geth.ipc"))
        assert isinstance(provider, Web3.IPCProvider)

    def test_unsupported_endpoint(self):
        with pytest.raises(ValueError, match="Unsupported node endpoint"):
            create_provider("ftp://localhost:8545")

    def test_create_client_without_ping(self):
        client = create_client("http://localhost:8545", verify_connection=False)
        assert isinstance(client, Web3ChainClient)
        assert client.node_url == "http://localhost:8545"

    def test_unreachable_node(self):
        with patch.object(Web3, "is_connected", return_value=False):
            with pytest.raises(ChainDataError, match="failed to connect"):
                create_client("http://localhost:1", verify_connection=True)
