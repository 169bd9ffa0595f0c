from __future__ import annotations

from typing import Optional

from ruggy.agents.base import IntentAgent
from ruggy.conversation import ExternalCallCategory
from ruggy.intents import SendIntent

from .executor import SendReceipt


class SendAgent(IntentAgent):
    """SEND_TOKEN: collects, previews and executes token transfers."""

    kind = "send"
    action = "SEND_TOKEN"
    label = "token send"
    STATUS_TEXT = {"checking": "Checking token availability and preparing transfer"}
    FAILURE_TEXT = {
        ExternalCallCategory.TIMEOUT: (
            "Transfer submitted but not confirmed in time: {}",
            "Transaction timeout",
        ),
        ExternalCallCategory.INSUFFICIENT_LIQUIDITY: ("Transfer failed: {}", "{}"),
        ExternalCallCategory.HIGH_SLIPPAGE: ("Transfer failed: {}", "{}"),
        ExternalCallCategory.FAILED: ("Transfer failed: {}", "{}"),
    }

    def spend_symbol(self, intent: SendIntent) -> Optional[str]:
        return intent.token

    def preview_text(self, intent: SendIntent, balance: Optional[str]) -> str:
        text = f"Preparing to transfer {intent.amount} {intent.token} to {intent.address}"
        if intent.wants_fee:
            text += "\nA small BERA top-up for fees will follow"
        if balance is not None:
            text += f"\nCurrent balance: {balance} {intent.token}"
        return text + "\nPlease confirm this transaction."

    def success_text(self, receipt: SendReceipt) -> str:
        fee = f" Additional fee transfer: {receipt.fee_amount} BERA." if receipt.include_fee else ""
        return (
            f"Successfully transferred {receipt.amount} {receipt.token} to {receipt.to}.{fee} "
            f"Transaction hash: {receipt.tx_hash}"
        )
