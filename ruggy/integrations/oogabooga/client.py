from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import OogaBoogaSettings, get_oogabooga_settings

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NO_ROUTE_STATUS = "NoWay"


class AggregatorError(RuntimeError):
    """Raised when the aggregator returns an error response or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class OogaBoogaClient:
    """Async HTTP client for the OogaBooga token, price and swap endpoints."""

    def __init__(
        self,
        settings: OogaBoogaSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_oogabooga_settings()
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.request_timeout,
            transport=transport,
        )

    @property
    def router_address(self) -> str:
        return self._settings.router_address

    async def __aenter__(self) -> "OogaBoogaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- low-level helpers -------------------------------------------------
    def _default_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Accept": "application/json",
        }

    async def _get(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self._client.get(
                    path, params=params, headers=self._default_headers()
                )

        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            raise AggregatorError(
                f"Aggregator request failed ({response.status_code}): {payload}",
                response.status_code,
                payload,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise AggregatorError(
                f"Invalid response from {path}", response.status_code, response.text
            ) from exc

    # ---- endpoints ---------------------------------------------------------
    async def list_tokens(self) -> List[Dict[str, Any]]:
        logger.info("Fetching token list from OogaBooga API")
        data = await self._get("/v1/tokens")
        if not isinstance(data, list):
            raise AggregatorError("Token list response is not a list", payload=data)
        return data

    async def get_prices(self, currency: str = "USD") -> List[Dict[str, Any]]:
        logger.info("Fetching token prices from OogaBooga API")
        data = await self._get("/v1/prices", params={"currency": currency})
        if not isinstance(data, list):
            raise AggregatorError("Price response is not a list", payload=data)
        return data

    async def get_swap(
        self,
        *,
        token_in: str,
        token_out: str,
        amount: int,
        to: str,
        slippage: str,
    ) -> Dict[str, Any]:
        """Request a routed swap transaction for ``amount`` base units of ``token_in``."""
        params = {
            "tokenIn": token_in,
            "tokenOut": token_out,
            "amount": str(amount),
            "to": to,
            "slippage": slippage,
        }
        data = await self._get("/v1/swap", params=params)
        if not isinstance(data, dict):
            raise AggregatorError("Invalid response from swap API", payload=data)
        if data.get("status") == NO_ROUTE_STATUS:
            raise AggregatorError("No way to swap these tokens: insufficient liquidity", payload=data)
        tx = data.get("tx")
        if not isinstance(tx, dict) or not tx.get("to"):
            raise AggregatorError("Invalid swap transaction data", payload=data)
        return data
