from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(slots=True)
class OogaBoogaSettings:
    """Runtime configuration for the OogaBooga aggregator client."""

    base_url: str
    api_key: str
    router_address: str
    request_timeout: float = 15.0
    max_attempts: int = 3

    @classmethod
    def load(cls) -> "OogaBoogaSettings":
        base_url = os.getenv("OOGABOOGA_API_URL")
        if not base_url:
            raise ValueError("OOGABOOGA_API_URL environment variable is required.")

        api_key = os.getenv("OOGABOOGA_API_KEY")
        if not api_key:
            raise ValueError("OOGABOOGA_API_KEY environment variable is required.")

        router_address = os.getenv("OOGABOOGA_ROUTER_ADDRESS")
        if not router_address:
            raise ValueError("OOGABOOGA_ROUTER_ADDRESS environment variable is required.")

        return cls(
            base_url=base_url.rstrip("/"),
            api_key=api_key,
            router_address=router_address,
            request_timeout=float(os.getenv("OOGABOOGA_TIMEOUT", "15")),
            max_attempts=int(os.getenv("OOGABOOGA_MAX_ATTEMPTS", "3")),
        )


@lru_cache(maxsize=1)
def get_oogabooga_settings() -> OogaBoogaSettings:
    """Memoized accessor so callers share a single settings instance."""

    return OogaBoogaSettings.load()
