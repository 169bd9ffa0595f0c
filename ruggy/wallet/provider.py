"""
Wallet provider: token list, prices and the agent's balances ("pouch").

Token metadata and prices come from the aggregator; balances come from the
chain client through one batched ``balanceOf`` round trip plus a native
balance query. Everything is cached in the injected cache manager.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Any, Dict, List, Optional, Protocol, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError

from ruggy.cache import CacheManager
from ruggy.integrations.oogabooga import AggregatorError
from ruggy.wallet.models import (
    NATIVE_ADDRESS,
    PricedTokenBalance,
    PricedWalletSnapshot,
    Token,
    TokenBalance,
    TokenPrice,
    WalletSnapshot,
)

logger = logging.getLogger(__name__)

TOKEN_LIST_KEY = "ruggy/token-list"
TOKEN_PRICES_KEY = "ruggy/token-prices"

_TOKENS = TypeAdapter(List[Token])
_PRICES = TypeAdapter(List[TokenPrice])


def pouch_key(address: str) -> str:
    return f"ruggy/pouch/{address.lower()}"


class ChainClient(Protocol):
    """Chain collaborator used for balances and transactions."""

    @property
    def address(self) -> str:
        ...

    async def get_native_balance(self, owner: str | None = None) -> int:
        ...

    async def get_token_balances(self, tokens: Sequence[str], owner: str | None = None) -> List[int]:
        ...

    async def get_allowance(self, token: str, spender: str, owner: str | None = None) -> int:
        ...

    async def approve(self, token: str, spender: str, amount: int) -> str:
        ...

    async def transfer(self, token: str, to: str, amount: int) -> str:
        ...

    async def send_transaction(self, to: str, *, value: int = 0, data: str | None = None) -> str:
        ...

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 60.0) -> Dict[str, Any]:
        ...


class TokenAggregator(Protocol):
    """Aggregator collaborator for token metadata, prices and swap routes."""

    @property
    def router_address(self) -> str:
        ...

    async def list_tokens(self) -> List[Dict[str, Any]]:
        ...

    async def get_prices(self, currency: str = "USD") -> List[Dict[str, Any]]:
        ...

    async def get_swap(
        self, *, token_in: str, token_out: str, amount: int, to: str, slippage: str
    ) -> Dict[str, Any]:
        ...


class WalletProvider:
    """Reads and caches the agent wallet's holdings."""

    def __init__(
        self,
        *,
        cache: CacheManager,
        chain: ChainClient,
        aggregator: TokenAggregator,
        native_symbol: str = "BERA",
        pouch_ttl: float = 300.0,
        price_ttl: float = 3600.0,
    ) -> None:
        self._cache = cache
        self.chain = chain
        self.aggregator = aggregator
        self.native_symbol = native_symbol
        self._pouch_ttl = pouch_ttl
        self._price_ttl = price_ttl

    @property
    def address(self) -> str:
        return self.chain.address

    async def fetch_token_list(self) -> List[Token]:
        cached = await self._cache.get(TOKEN_LIST_KEY)
        if cached:
            return _TOKENS.validate_python(cached)

        raw = await self.aggregator.list_tokens()
        tokens: List[Token] = []
        for entry in raw:
            try:
                token = Token.model_validate(entry)
            except ValidationError:
                logger.debug("Skipping malformed token entry: %s", entry)
                continue
            if token.address.lower() == NATIVE_ADDRESS:
                continue
            tokens.append(token)

        await self._cache.set(TOKEN_LIST_KEY, [token.model_dump() for token in tokens])
        return tokens

    async def fetch_token_prices(self) -> List[TokenPrice]:
        cached = await self._cache.get(TOKEN_PRICES_KEY)
        if cached:
            return _PRICES.validate_python(cached)

        raw = await self.aggregator.get_prices("USD")
        prices = [
            TokenPrice.model_validate(entry)
            for entry in raw
            if isinstance(entry, dict) and entry.get("address")
        ]
        await self._cache.set(
            TOKEN_PRICES_KEY,
            [price.model_dump() for price in prices],
            expires=self._price_ttl,
        )
        return prices

    async def get_pouch(self, *, refresh: bool = False) -> WalletSnapshot:
        key = pouch_key(self.address)
        if not refresh:
            cached = await self._cache.get(key)
            if cached:
                return WalletSnapshot.model_validate(cached)

        tokens = await self.fetch_token_list()
        balances = await self.chain.get_token_balances([token.address for token in tokens])
        native = await self.chain.get_native_balance()

        snapshot = WalletSnapshot(
            address=self.address,
            native_symbol=self.native_symbol,
            native=native,
            tokens=[
                TokenBalance(
                    address=token.address,
                    symbol=token.symbol,
                    decimals=token.decimals,
                    balance=balance,
                )
                for token, balance in zip(tokens, balances)
            ],
            last_updated=time.time(),
        )
        await self._cache.set(key, snapshot.model_dump(mode="json"), expires=self._pouch_ttl)
        return snapshot

    async def clear_pouch_cache(self) -> None:
        await self._cache.delete(pouch_key(self.address))

    async def get_pouch_with_prices(self) -> PricedWalletSnapshot:
        pouch = await self.get_pouch()
        try:
            prices = await self.fetch_token_prices()
        except AggregatorError:
            logger.error("Failed to fetch prices; reporting balances without USD values", exc_info=True)
            prices = []

        by_address = {price.address.lower(): price.price for price in prices}
        priced_tokens = []
        for token in pouch.tokens:
            price = by_address.get(token.address.lower(), 0.0)
            priced_tokens.append(
                PricedTokenBalance(
                    **token.model_dump(),
                    price_usd=price,
                    value_usd=float(Decimal(token.formatted_balance) * Decimal(str(price))),
                )
            )

        native_price = by_address.get(NATIVE_ADDRESS, 0.0)
        native_value = float(Decimal(pouch.formatted_native) * Decimal(str(native_price)))
        total = native_value + sum(token.value_usd for token in priced_tokens)

        return PricedWalletSnapshot(
            address=pouch.address,
            native_symbol=pouch.native_symbol,
            native=pouch.native,
            tokens=priced_tokens,
            last_updated=pouch.last_updated,
            native_price_usd=native_price,
            native_value_usd=native_value,
            total_value_usd=total,
        )

    async def describe(self) -> Optional[str]:
        """One-line balance context for prompts, or ``None`` when unavailable."""
        try:
            pouch = await self.get_pouch()
        except (AggregatorError, RuntimeError, ValidationError, httpx.HTTPError):
            logger.error("Error reading wallet balances", exc_info=True)
            return None
        holdings = [f"{token.formatted_balance} {token.symbol}" for token in pouch.tokens]
        holdings.append(f"{pouch.formatted_native} {pouch.native_symbol}")
        return f"Current balances: {', '.join(holdings)}\nWallet address: {pouch.address}"


__all__ = [
    "ChainClient",
    "TokenAggregator",
    "WalletProvider",
    "pouch_key",
]
