import abc
from typing import Any, Mapping, Tuple, Union

from hexbytes import HexBytes

TxHash = Union[str, bytes, HexBytes]
BlockSelector = Union[str, int, None]


class IChainDataSource(abc.ABC):
    """
    Abstract Base Class for the chain reads needed to describe a transaction.
    Every method performs exactly one request and never retries.

    Implementations raise ChainDataNotFoundError when the node does not know the
    object and ChainDataError for any other failure (connectivity, timeout, RPC error).
    Returned mappings use the JSON-RPC field names (camelCase).
    """

    @abc.abstractmethod
    def get_transaction_by_hash(self, tx_hash: TxHash) -> Tuple[Mapping[str, Any], bool]:
        """
        Fetches a transaction body.

        Returns:
            The transaction fields and a flag that is True while the transaction is
            still pending (not yet included in a block).
        """
        pass

    @abc.abstractmethod
    def get_block_by_number(self, selector: BlockSelector = "latest") -> Mapping[str, Any]:
        """
        Fetches a block header by number. A selector of "latest" or None means the
        current chain head.
        """
        pass

    @abc.abstractmethod
    def get_transaction_receipt(self, tx_hash: TxHash) -> Mapping[str, Any]:
        """Fetches the receipt of a mined transaction."""
        pass

    @abc.abstractmethod
    def get_block_by_hash(self, block_hash: TxHash) -> Mapping[str, Any]:
        """Fetches a block header by its hash."""
        pass
