from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


@dataclass(slots=True)
class EvmRpcSettings:
    """Runtime configuration for the JSON-RPC chain client.

    Transactions are sent with ``eth_sendTransaction`` from ``wallet_address``;
    the node (or a signing proxy in front of it) holds the key.
    """

    rpc_url: str
    wallet_address: str
    chain_id: Optional[int] = None
    request_timeout: float = 20.0
    poll_interval: float = 1.0

    @classmethod
    def load(cls) -> "EvmRpcSettings":
        rpc_url = os.getenv("EVM_RPC_URL")
        if not rpc_url:
            raise ValueError("EVM_RPC_URL environment variable is required.")

        wallet_address = os.getenv("EVM_WALLET_ADDRESS")
        if not wallet_address:
            raise ValueError("EVM_WALLET_ADDRESS environment variable is required.")

        chain_id = os.getenv("EVM_CHAIN_ID")
        return cls(
            rpc_url=rpc_url,
            wallet_address=wallet_address,
            chain_id=int(chain_id) if chain_id else None,
            request_timeout=float(os.getenv("EVM_RPC_TIMEOUT", "20")),
            poll_interval=float(os.getenv("EVM_RECEIPT_POLL_INTERVAL", "1")),
        )


@lru_cache(maxsize=1)
def get_evm_settings() -> EvmRpcSettings:
    """Memoized accessor so callers share a single settings instance."""

    return EvmRpcSettings.load()
