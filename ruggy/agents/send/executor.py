"""Executes a confirmed transfer from the pouch."""
from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel

from ruggy.agents.base import EXTERNAL_ERRORS, StatusCallback, notify
from ruggy.conversation.exceptions import (
    ExternalCallError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidTokenError,
)
from ruggy.intents import SendIntent, is_valid_address
from ruggy.units import parse_units
from ruggy.wallet import NATIVE_ADDRESS, NATIVE_DECIMALS, WalletProvider

logger = logging.getLogger(__name__)


class SendReceipt(BaseModel):
    token: str
    amount: str
    to: str
    tx_hash: str
    include_fee: bool = False
    fee_amount: Optional[str] = None
    fee_hash: Optional[str] = None


class SendExecutor:
    """Sends a native or ERC20 amount, plus an optional native fee top-up."""

    def __init__(
        self,
        wallet: WalletProvider,
        *,
        fee_amount: str = "0.1",
        receipt_timeout: float = 60.0,
    ) -> None:
        self._wallet = wallet
        self._fee_amount = fee_amount
        self._receipt_timeout = receipt_timeout

    async def execute(self, intent: SendIntent, on_status: StatusCallback | None = None) -> SendReceipt:
        if not intent.is_complete():
            raise ValueError(f"Send intent is missing {', '.join(intent.missing_fields())}.")

        pouch = await self._wallet.get_pouch()
        token = pouch.find(intent.token)
        if token is None:
            raise InvalidTokenError(intent.token, pouch.symbols())
        if not is_valid_address(intent.address):
            raise InvalidAddressError(intent.address)

        required = parse_units(intent.amount, token.decimals)
        if required <= 0:
            raise InvalidAmountError(token.symbol, intent.amount, token.decimals)
        if token.balance < required:
            raise InsufficientBalanceError(token.symbol, token.formatted_balance, intent.amount)

        await notify(on_status, "checking")
        chain = self._wallet.chain
        logger.info("Sending %s %s to %s", intent.amount, token.symbol, intent.address)
        try:
            if token.address.lower() == NATIVE_ADDRESS:
                tx_hash = await chain.send_transaction(intent.address, value=required)
            else:
                tx_hash = await chain.transfer(token.address, intent.address, required)
            receipt = await chain.wait_for_receipt(tx_hash, timeout=self._receipt_timeout)
        except EXTERNAL_ERRORS as exc:
            logger.error("Transfer failed: %s", exc)
            raise ExternalCallError.from_exception(exc) from exc

        result = SendReceipt(
            token=token.symbol,
            amount=intent.amount,
            to=intent.address,
            tx_hash=receipt.get("transactionHash") or tx_hash,
        )
        if intent.wants_fee:
            fee_hash = await self._send_fee(intent.address)
            if fee_hash is not None:
                result.include_fee = True
                result.fee_amount = self._fee_amount
                result.fee_hash = fee_hash
        return result

    async def _send_fee(self, to: str) -> Optional[str]:
        chain = self._wallet.chain
        try:
            fee_hash = await chain.send_transaction(to, value=parse_units(self._fee_amount, NATIVE_DECIMALS))
            await chain.wait_for_receipt(fee_hash, timeout=self._receipt_timeout)
        except EXTERNAL_ERRORS:
            logger.error("Failed to send fee to %s", to, exc_info=True)
            return None
        return fee_hash
