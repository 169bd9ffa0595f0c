from .models import (
    NATIVE_ADDRESS,
    NATIVE_DECIMALS,
    PricedTokenBalance,
    PricedWalletSnapshot,
    Token,
    TokenBalance,
    TokenPrice,
    WalletSnapshot,
)
from .provider import ChainClient, TokenAggregator, WalletProvider, pouch_key

__all__ = [
    "ChainClient",
    "NATIVE_ADDRESS",
    "NATIVE_DECIMALS",
    "PricedTokenBalance",
    "PricedWalletSnapshot",
    "Token",
    "TokenAggregator",
    "TokenBalance",
    "TokenPrice",
    "WalletProvider",
    "WalletSnapshot",
    "pouch_key",
]
