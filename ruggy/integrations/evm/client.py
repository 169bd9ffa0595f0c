from __future__ import annotations

import asyncio
import itertools
import logging
import time
from typing import Any, Dict, List, Sequence

import httpx

from .config import EvmRpcSettings, get_evm_settings

logger = logging.getLogger(__name__)

# ERC20 function selectors
BALANCE_OF = "0x70a08231"
ALLOWANCE = "0xdd62ed3e"
APPROVE = "0x095ea7b3"
TRANSFER = "0xa9059cbb"

RECEIPT_STATUS_FAILED = "0x0"


class EvmRpcError(RuntimeError):
    """Raised when the node rejects a request or returns a JSON-RPC error."""

    def __init__(self, message: str, code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.payload = payload


class TransactionTimeoutError(EvmRpcError):
    """No receipt arrived before the wait deadline."""

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout:g}s waiting for transaction {tx_hash}")
        self.tx_hash = tx_hash


def _encode_address(address: str) -> str:
    return address.lower().removeprefix("0x").rjust(64, "0")


def _encode_uint(value: int) -> str:
    if value < 0:
        raise ValueError("uint256 values cannot be negative.")
    return format(value, "064x")


def _decode_uint(raw: Any) -> int:
    if not raw or raw == "0x":
        return 0
    return int(raw, 16)


class EvmRpcClient:
    """Minimal async JSON-RPC client for balances, ERC20 calls and transactions."""

    def __init__(
        self,
        settings: EvmRpcSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_evm_settings()
        self._client = client or httpx.AsyncClient(
            timeout=self._settings.request_timeout,
            transport=transport,
        )
        self._ids = itertools.count(1)

    @property
    def address(self) -> str:
        return self._settings.wallet_address

    async def __aenter__(self) -> "EvmRpcClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- low-level helpers -------------------------------------------------
    def _payload(self, method: str, params: List[Any]) -> Dict[str, Any]:
        return {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}

    async def _post(self, body: Any) -> Any:
        response = await self._client.post(self._settings.rpc_url, json=body)
        if response.status_code >= 400:
            raise EvmRpcError(
                f"RPC request failed ({response.status_code})",
                response.status_code,
                response.text,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise EvmRpcError("RPC returned a non-JSON body", payload=response.text) from exc

    @staticmethod
    def _result(reply: Dict[str, Any]) -> Any:
        error = reply.get("error")
        if error:
            raise EvmRpcError(
                error.get("message", "RPC error"),
                error.get("code"),
                error,
            )
        return reply.get("result")

    async def call(self, method: str, params: List[Any]) -> Any:
        reply = await self._post(self._payload(method, params))
        return self._result(reply)

    async def batch(self, calls: Sequence[tuple[str, List[Any]]]) -> List[Any]:
        """Send several calls in one request and return results in call order."""
        if not calls:
            return []
        payloads = [self._payload(method, params) for method, params in calls]
        replies = await self._post(payloads)
        if not isinstance(replies, list):
            raise EvmRpcError("Batch reply is not a list", payload=replies)
        by_id = {reply.get("id"): reply for reply in replies}
        results = []
        for payload in payloads:
            reply = by_id.get(payload["id"])
            if reply is None:
                raise EvmRpcError(f"Missing reply for request {payload['id']}", payload=replies)
            results.append(self._result(reply))
        return results

    # ---- reads -------------------------------------------------------------
    async def get_native_balance(self, owner: str | None = None) -> int:
        result = await self.call("eth_getBalance", [owner or self.address, "latest"])
        return _decode_uint(result)

    async def get_token_balances(self, tokens: Sequence[str], owner: str | None = None) -> List[int]:
        data = BALANCE_OF + _encode_address(owner or self.address)
        calls = [("eth_call", [{"to": token, "data": data}, "latest"]) for token in tokens]
        return [_decode_uint(result) for result in await self.batch(calls)]

    async def get_allowance(self, token: str, spender: str, owner: str | None = None) -> int:
        data = ALLOWANCE + _encode_address(owner or self.address) + _encode_address(spender)
        result = await self.call("eth_call", [{"to": token, "data": data}, "latest"])
        return _decode_uint(result)

    # ---- writes ------------------------------------------------------------
    async def send_transaction(self, to: str, *, value: int = 0, data: str | None = None) -> str:
        tx: Dict[str, Any] = {"from": self.address, "to": to, "value": hex(value)}
        if data:
            tx["data"] = data
        if self._settings.chain_id is not None:
            tx["chainId"] = hex(self._settings.chain_id)
        tx_hash = await self.call("eth_sendTransaction", [tx])
        logger.info("Submitted transaction %s to %s", tx_hash, to)
        return tx_hash

    async def approve(self, token: str, spender: str, amount: int) -> str:
        data = APPROVE + _encode_address(spender) + _encode_uint(amount)
        return await self.send_transaction(token, data=data)

    async def transfer(self, token: str, to: str, amount: int) -> str:
        data = TRANSFER + _encode_address(to) + _encode_uint(amount)
        return await self.send_transaction(token, data=data)

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 60.0) -> Dict[str, Any]:
        """Poll for a receipt until ``timeout`` seconds pass; reverted receipts raise."""
        deadline = time.monotonic() + timeout
        while True:
            receipt = await self.call("eth_getTransactionReceipt", [tx_hash])
            if receipt:
                if receipt.get("status") == RECEIPT_STATUS_FAILED:
                    raise EvmRpcError(f"Transaction {tx_hash} reverted", payload=receipt)
                return receipt
            if time.monotonic() >= deadline:
                raise TransactionTimeoutError(tx_hash, timeout)
            await asyncio.sleep(self._settings.poll_interval)
