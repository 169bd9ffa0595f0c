"""JSON-RPC chain client initialization helpers."""

from .client import EvmRpcClient, EvmRpcError, TransactionTimeoutError
from .config import EvmRpcSettings, get_evm_settings

__all__ = [
    "EvmRpcClient",
    "EvmRpcError",
    "EvmRpcSettings",
    "TransactionTimeoutError",
    "get_evm_settings",
]
