# eth_txprint_core/clients/web3_client.py
"""
web3.py implementation of the chain-data source.
"""
import logging
from typing import Any, Callable, Mapping, Tuple, TypeVar

import requests
from web3 import Web3
from web3.exceptions import BlockNotFound, TransactionNotFound, Web3Exception

from .. import config as core_config
from ..errors import ChainDataError, ChainDataNotFoundError
from .base_client import BlockSelector, IChainDataSource, TxHash

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Web3ChainClient(IChainDataSource):
    """
    Reads transactions, receipts and blocks through a web3.py instance and maps
    web3 / transport failures onto ChainDataError.
    """

    def __init__(self, w3: Web3, node_url: str = ""):
        """
        :param w3: A configured Web3 instance (see client_factory.create_client).
        :param node_url: Endpoint description, used in log and error messages only.
        """
        self.w3 = w3
        self.node_url = node_url

    def _call(self, operation: str, request: Callable[[], T]) -> T:
        logger.debug("RPC %s -> %s", operation, self.node_url)
        try:
            return request()
        except (TransactionNotFound, BlockNotFound) as e:
            raise ChainDataNotFoundError(operation, str(e)) from e
        except requests.exceptions.Timeout as e:
            raise ChainDataError(operation, f"request to {self.node_url} timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ChainDataError(operation, f"request to {self.node_url} failed: {e}") from e
        except (Web3Exception, ValueError, OSError) as e:
            # web3 surfaces JSON-RPC error objects as Web3RPCError (a ValueError on older releases)
            raise ChainDataError(operation, str(e)) from e

    def get_transaction_by_hash(self, tx_hash: TxHash) -> Tuple[Mapping[str, Any], bool]:
        tx = self._call("TransactionByHash", lambda: self.w3.eth.get_transaction(tx_hash))
        is_pending = tx.get("blockHash") is None or tx.get("blockNumber") is None
        return tx, is_pending

    def get_block_by_number(self, selector: BlockSelector = core_config.DEFAULT_HEAD_SELECTOR) -> Mapping[str, Any]:
        block_id = core_config.DEFAULT_HEAD_SELECTOR if selector is None else selector
        return self._call("BlockByNumber", lambda: self.w3.eth.get_block(block_id))

    def get_transaction_receipt(self, tx_hash: TxHash) -> Mapping[str, Any]:
        return self._call("TransactionReceipt", lambda: self.w3.eth.get_transaction_receipt(tx_hash))

    def get_block_by_hash(self, block_hash: TxHash) -> Mapping[str, Any]:
        return self._call("BlockByHash", lambda: self.w3.eth.get_block(block_hash))
