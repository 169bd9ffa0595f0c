"""CHECK_BALANCE: report the pouch, one token or the native balance."""
from __future__ import annotations

from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from ruggy.agents.base import EXTERNAL_ERRORS, ResponseCallback
from ruggy.agents.responses import ResponseGenerator
from ruggy.conversation.extraction import StructuredGenerator, render_prompt
from ruggy.infrastructure import LoggerMixin
from ruggy.intents.base import normalize_symbol
from ruggy.models.chat import ChatMessage, ChatResponse
from ruggy.wallet import PricedWalletSnapshot, WalletProvider

from .prompt import BALANCE_TEMPLATE


class BalanceQuery(BaseModel):
    token: Optional[str] = Field(
        None, description="Token symbol the user asks about, null for a general balance check."
    )


def _usd(value: float) -> str:
    return f"${value:.2f}"


def summarize_pouch(pouch: PricedWalletSnapshot, token: Optional[str]) -> tuple[str, dict, Optional[str]]:
    """Return ``(text, data, error)`` describing the requested balance."""
    native_line = f"{pouch.native_symbol}: {pouch.formatted_native} ({_usd(pouch.native_value_usd)})"
    if token is not None and pouch.is_native(token):
        return (
            f"Current {native_line}",
            {"token": pouch.native_symbol, "balance": pouch.formatted_native, "value_usd": pouch.native_value_usd},
            None,
        )

    if token is not None:
        wanted = normalize_symbol(token)
        match = next((t for t in pouch.tokens if normalize_symbol(t.symbol) == wanted), None)
        if match is None:
            return f"Token {wanted} not found in wallet", {}, "Token not found"
        return (
            f"{match.symbol}: {match.formatted_balance} ({_usd(match.value_usd)})",
            {
                "token": match.symbol,
                "balance": match.formatted_balance,
                "value_usd": match.value_usd,
                "decimals": match.decimals,
            },
            None,
        )

    held = [t for t in pouch.tokens if t.balance > 0]
    text = f"{native_line} Total: {_usd(pouch.total_value_usd)}"
    if held:
        lines: List[str] = [f"{t.symbol}: {t.formatted_balance} ({_usd(t.value_usd)})" for t in held]
        text += "\n\nOther tokens:\n" + "\n".join(lines)
        text += f"\n\nTotal portfolio value: {_usd(pouch.total_value_usd)}"
    data = {
        "native": pouch.formatted_native,
        "tokens": [
            {"token": t.symbol, "balance": t.formatted_balance, "value_usd": t.value_usd} for t in held
        ],
        "total_value_usd": pouch.total_value_usd,
    }
    return text, data, None


class BalanceAgent(LoggerMixin):
    """Answers balance questions from the priced wallet snapshot."""

    kind = "balance"
    action = "CHECK_BALANCE"

    def __init__(
        self,
        *,
        generator: StructuredGenerator,
        responder: ResponseGenerator,
        wallet: Optional[WalletProvider] = None,
    ) -> None:
        self._generator = generator
        self.responder = responder
        self.wallet = wallet

    async def _requested_token(self, history: Sequence[ChatMessage]) -> Optional[str]:
        try:
            output = await self._generator.generate(render_prompt(BALANCE_TEMPLATE, history), BalanceQuery)
            query = output if isinstance(output, BalanceQuery) else BalanceQuery.model_validate(output)
        except Exception:
            self.logger.warning("Balance token extraction failed; showing all balances", exc_info=True)
            return None
        return normalize_symbol(query.token)

    async def handle(
        self,
        user_id: str,
        history: Sequence[ChatMessage],
        callback: ResponseCallback | None = None,
    ) -> List[ChatResponse]:
        self.logger.info("Starting balance check for %s", user_id)
        if self.wallet is None:
            response = await self.responder.action_response(
                "Wallet not initialized or accessible",
                history,
                error="Wallet client not initialized",
                action=self.action,
            )
        else:
            token = await self._requested_token(history)
            try:
                pouch = await self.wallet.get_pouch_with_prices()
            except EXTERNAL_ERRORS as exc:
                self.logger.error("Balance action error: %s", exc)
                response = await self.responder.action_response(
                    "Unable to access wallet data", history, error=str(exc), action=self.action
                )
            else:
                text, data, error = summarize_pouch(pouch, token)
                response = await self.responder.action_response(
                    text,
                    history,
                    success=error is None,
                    error=error,
                    data=data,
                    action=self.action,
                )
        if callback is not None:
            await callback(response)
        return [response]
