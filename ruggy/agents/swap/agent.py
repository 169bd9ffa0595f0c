from __future__ import annotations

from typing import Optional

from ruggy.agents.base import IntentAgent
from ruggy.conversation import ExternalCallCategory
from ruggy.intents import SwapIntent

from .executor import SwapReceipt


class SwapAgent(IntentAgent):
    """SWAP_TOKEN: collects, previews and executes token swaps."""

    kind = "swap"
    action = "SWAP_TOKEN"
    label = "swap"
    STATUS_TEXT = {
        "preparing": "Preparing swap transaction",
        "approving": "Token approval initiated",
        "approved": "Token approval confirmed",
    }
    FAILURE_TEXT = {
        ExternalCallCategory.INSUFFICIENT_LIQUIDITY: (
            "Insufficient liquidity available for this swap",
            "Insufficient liquidity",
        ),
        ExternalCallCategory.HIGH_SLIPPAGE: ("Price impact too high for this swap", "High slippage"),
        ExternalCallCategory.TIMEOUT: (
            "Swap submitted but not confirmed in time: {}",
            "Transaction timeout",
        ),
        ExternalCallCategory.FAILED: ("Swap failed: {}", "{}"),
    }

    def spend_symbol(self, intent: SwapIntent) -> Optional[str]:
        return intent.from_token

    def preview_text(self, intent: SwapIntent, balance: Optional[str]) -> str:
        text = f"Preparing to swap {intent.amount} {intent.from_token} for {intent.to_token}"
        if balance is not None:
            text += f"\nCurrent balance: {balance} {intent.from_token}"
        return text + "\nPlease confirm this transaction."

    def success_text(self, receipt: SwapReceipt) -> str:
        received = f"{receipt.amount_out} {receipt.to_token}" if receipt.amount_out else receipt.to_token
        return (
            f"Successfully swapped {receipt.amount_in} {receipt.from_token} for {received}. "
            f"Transaction hash: {receipt.tx_hash}"
        )
