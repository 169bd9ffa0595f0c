"""Executes a confirmed swap through the aggregator router."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel

from ruggy.agents.base import EXTERNAL_ERRORS, StatusCallback, notify, to_int
from ruggy.conversation.exceptions import (
    ExternalCallError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidTokenError,
)
from ruggy.intents import SwapIntent
from ruggy.units import format_units, parse_units
from ruggy.wallet import NATIVE_ADDRESS, WalletProvider

logger = logging.getLogger(__name__)


class SwapReceipt(BaseModel):
    from_token: str
    to_token: str
    amount_in: str
    amount_out: Optional[str] = None
    tx_hash: str


class SwapExecutor:
    """Checks a swap against the pouch, then approves, routes and submits it.

    All local checks run before the first external call; a failed check
    raises without touching the chain or the aggregator.
    """

    def __init__(
        self,
        wallet: WalletProvider,
        *,
        slippage: str = "0.05",
        receipt_timeout: float = 60.0,
    ) -> None:
        self._wallet = wallet
        self._slippage = slippage
        self._receipt_timeout = receipt_timeout

    async def execute(self, intent: SwapIntent, on_status: StatusCallback | None = None) -> SwapReceipt:
        if not intent.is_complete():
            raise ValueError(f"Swap intent is missing {', '.join(intent.missing_fields())}.")

        pouch = await self._wallet.get_pouch()
        source = pouch.find(intent.from_token)
        target = pouch.find(intent.to_token)
        if source is None or target is None:
            invalid = intent.from_token if source is None else intent.to_token
            raise InvalidTokenError(invalid, pouch.symbols())

        required = parse_units(intent.amount, source.decimals)
        if required <= 0:
            raise InvalidAmountError(source.symbol, intent.amount, source.decimals)
        if source.balance < required:
            raise InsufficientBalanceError(source.symbol, source.formatted_balance, intent.amount)

        await notify(on_status, "preparing")
        chain = self._wallet.chain
        aggregator = self._wallet.aggregator
        try:
            if source.address.lower() != NATIVE_ADDRESS:
                await self._ensure_allowance(source.address, required, on_status)

            route = await aggregator.get_swap(
                token_in=source.address,
                token_out=target.address,
                amount=required,
                to=chain.address,
                slippage=self._slippage,
            )
            tx: Dict[str, Any] = route["tx"]
            logger.info("Submitting swap of %s %s for %s", intent.amount, source.symbol, target.symbol)
            tx_hash = await chain.send_transaction(
                tx["to"], value=to_int(tx.get("value")), data=tx.get("data")
            )
            receipt = await chain.wait_for_receipt(tx_hash, timeout=self._receipt_timeout)
        except EXTERNAL_ERRORS as exc:
            logger.error("Swap execution error: %s", exc)
            raise ExternalCallError.from_exception(exc) from exc

        amount_out = route.get("assumedAmountOut")
        return SwapReceipt(
            from_token=source.symbol,
            to_token=target.symbol,
            amount_in=intent.amount,
            amount_out=format_units(to_int(amount_out), target.decimals) if amount_out else None,
            tx_hash=receipt.get("transactionHash") or tx_hash,
        )

    async def _ensure_allowance(self, token: str, required: int, on_status: StatusCallback | None) -> None:
        chain = self._wallet.chain
        router = self._wallet.aggregator.router_address
        allowance = await chain.get_allowance(token, router)
        if allowance >= required:
            return
        await notify(on_status, "approving")
        approval_hash = await chain.approve(token, router, required)
        await chain.wait_for_receipt(approval_hash, timeout=self._receipt_timeout)
        await notify(on_status, "approved", hash=approval_hash)
