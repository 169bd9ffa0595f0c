"""Wallet snapshot models; balances are integer base units."""
from __future__ import annotations

import time
from typing import List, Optional

from pydantic import BaseModel, Field

from ruggy.intents.base import normalize_symbol
from ruggy.units import format_units

NATIVE_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_DECIMALS = 18


class Token(BaseModel):
    address: str
    symbol: str
    name: Optional[str] = None
    decimals: int = 18


class TokenBalance(BaseModel):
    address: str
    symbol: str
    decimals: int
    balance: int = 0

    @property
    def formatted_balance(self) -> str:
        return format_units(self.balance, self.decimals)


class PricedTokenBalance(TokenBalance):
    price_usd: float = 0.0
    value_usd: float = 0.0


class TokenPrice(BaseModel):
    address: str
    price: float = 0.0


class WalletSnapshot(BaseModel):
    """Balances of the agent wallet as of ``last_updated``."""

    address: str
    native_symbol: str = "BERA"
    native: int = 0
    tokens: List[TokenBalance] = Field(default_factory=list)
    last_updated: float = Field(default_factory=time.time)

    @property
    def formatted_native(self) -> str:
        return format_units(self.native, NATIVE_DECIMALS)

    def is_native(self, symbol: str) -> bool:
        return normalize_symbol(symbol) == normalize_symbol(self.native_symbol)

    def find(self, symbol: str) -> Optional[TokenBalance]:
        """Look up a held token by symbol; the native token is reported with the zero address."""
        wanted = normalize_symbol(symbol)
        if wanted is None:
            return None
        if self.is_native(wanted):
            return TokenBalance(
                address=NATIVE_ADDRESS,
                symbol=self.native_symbol,
                decimals=NATIVE_DECIMALS,
                balance=self.native,
            )
        for token in self.tokens:
            if normalize_symbol(token.symbol) == wanted:
                return token
        return None

    def symbols(self) -> List[str]:
        return [token.symbol for token in self.tokens] + [self.native_symbol]


class PricedWalletSnapshot(WalletSnapshot):
    tokens: List[PricedTokenBalance] = Field(default_factory=list)
    native_price_usd: float = 0.0
    native_value_usd: float = 0.0
    total_value_usd: float = 0.0
