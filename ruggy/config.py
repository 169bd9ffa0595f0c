"""Runtime settings for the Ruggy agent host."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


@dataclass(slots=True)
class RuggySettings:
    """Agent-level configuration loaded from the environment."""

    agent_name: Optional[str] = None
    character_path: Optional[str] = None
    llm_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.7
    history_limit: int = 20
    receipt_timeout: float = 60.0
    pouch_ttl: float = 300.0
    price_ttl: float = 3600.0
    swap_slippage: str = "0.05"
    fee_amount: str = "0.1"
    native_symbol: str = "BERA"

    @classmethod
    def load(cls) -> "RuggySettings":
        load_dotenv()
        return cls(
            agent_name=os.getenv("AGENT_NAME") or None,
            character_path=os.getenv("CHARACTER_PATH") or None,
            llm_model=os.getenv("LLM_MODEL", "gemini-2.5-flash"),
            llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
            history_limit=int(os.getenv("HISTORY_LIMIT", "20")),
            receipt_timeout=float(os.getenv("RECEIPT_TIMEOUT", "60")),
            pouch_ttl=float(os.getenv("POUCH_TTL", "300")),
            price_ttl=float(os.getenv("PRICE_TTL", "3600")),
            swap_slippage=os.getenv("SWAP_SLIPPAGE", "0.05"),
            fee_amount=os.getenv("FEE_AMOUNT", "0.1"),
            native_symbol=os.getenv("NATIVE_SYMBOL", "BERA").strip().upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> RuggySettings:
    """Memoized accessor so callers share a single settings instance."""

    return RuggySettings.load()
