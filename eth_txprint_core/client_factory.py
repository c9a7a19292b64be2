# eth_txprint_core/client_factory.py
"""
Builds a chain-data source from a node endpoint, picking the web3 provider that
matches the endpoint: http(s) URL, ws(s) URL or IPC socket path.
"""
import logging
from typing import Optional
from urllib.parse import urlparse

from web3 import LegacyWebSocketProvider, Web3
from web3.middleware import ExtraDataToPOAMiddleware
from web3.providers.base import BaseProvider

from . import config as core_config
from .clients.web3_client import Web3ChainClient
from .errors import ChainDataError

logger = logging.getLogger(__name__)


def create_provider(node_url: str,
                    timeout: float = core_config.DEFAULT_REQUEST_TIMEOUT_SECONDS) -> BaseProvider:
    """
    Creates the web3 provider for an endpoint.

    :param node_url: http(s)://, ws(s):// URL or a path to a geth.ipc socket.
    :param timeout: Per-request timeout in seconds.
    :raises ValueError: If the endpoint scheme is not supported.
    """
    scheme = urlparse(node_url).scheme.lower()
    if scheme in ("http", "https"):
        return Web3.HTTPProvider(node_url, request_kwargs={"timeout": timeout})
    if scheme in ("ws", "wss"):
        return LegacyWebSocketProvider(node_url, websocket_timeout=timeout)
    if scheme in ("", "file") and node_url.endswith(".ipc"):
        return Web3.IPCProvider(urlparse(node_url).path or node_url, timeout=timeout)
    raise ValueError(f"Unsupported node endpoint: {node_url}")


def create_client(node_url: str = core_config.DEFAULT_NODE_URL,
                  timeout: float = core_config.DEFAULT_REQUEST_TIMEOUT_SECONDS,
                  verify_connection: Optional[bool] = None) -> Web3ChainClient:
    """
    Dials an Ethereum node and wraps it as a chain-data source.

    :param node_url: Endpoint of the node.
    :param timeout: Per-request timeout in seconds.
    :param verify_connection: Ping the node before returning, defaults to
                              core_config.VERIFY_CONNECTION_ON_DIAL.
    :raises ChainDataError: If the node cannot be reached.
    """
    w3 = Web3(create_provider(node_url, timeout))
    # Clique / POA networks put 97 byte extraData in headers
    w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

    if verify_connection if verify_connection is not None else core_config.VERIFY_CONNECTION_ON_DIAL:
        if not w3.is_connected():
            logger.error("Failed to connect to Ethereum node at %s", node_url)
            raise ChainDataError("Dial", f"failed to connect to Ethereum node at {node_url}")
        logger.info("Connected to Ethereum node at %s", node_url)
    return Web3ChainClient(w3, node_url=node_url)
