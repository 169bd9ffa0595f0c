"""Shared turn handling for the slot-filling intent agents."""
from __future__ import annotations

from typing import Any, Awaitable, Callable, ClassVar, Dict, List, Optional, Sequence

import httpx
from pydantic import BaseModel

from ruggy.agents.responses import ResponseGenerator
from ruggy.conversation import (
    Evaluation,
    ExternalCallCategory,
    ExternalCallError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidTokenError,
    SlotFillingError,
    SlotFillingEvaluator,
    TurnEvent,
    WalletUnavailableError,
)
from ruggy.infrastructure import LoggerMixin
from ruggy.integrations.evm import EvmRpcError
from ruggy.integrations.oogabooga import AggregatorError
from ruggy.intents.base import SlotIntent
from ruggy.models.chat import ChatMessage, ChatResponse
from ruggy.wallet import WalletProvider

StatusCallback = Callable[[str, Dict[str, Any]], Awaitable[None]]
ResponseCallback = Callable[[ChatResponse], Awaitable[None]]

EXTERNAL_ERRORS = (AggregatorError, EvmRpcError, httpx.HTTPError)


async def notify(on_status: StatusCallback | None, status: str, **data: Any) -> None:
    if on_status is not None:
        await on_status(status, data)


def to_int(value: Any) -> int:
    """Parse a decimal or 0x-prefixed quantity, treating empty values as zero."""
    if value is None or value == "":
        return 0
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text)


class IntentAgent(LoggerMixin):
    """Acts on each :class:`TurnEvent` of one intent kind.

    Subclasses supply the wording: the preview, the progress messages and the
    success reply. Every error is turned into a chat response carrying an
    ``error`` entry; nothing propagates to the caller.
    """

    kind: ClassVar[str]
    action: ClassVar[str]
    label: ClassVar[str]
    STATUS_TEXT: ClassVar[Dict[str, str]] = {}
    FAILURE_TEXT: ClassVar[Dict[ExternalCallCategory, tuple[str, str]]] = {}

    def __init__(
        self,
        *,
        evaluator: SlotFillingEvaluator,
        responder: ResponseGenerator,
        executor: Any = None,
        wallet: Optional[WalletProvider] = None,
    ) -> None:
        self.evaluator = evaluator
        self.responder = responder
        self.executor = executor
        self.wallet = wallet

    # ---- wording hooks -----------------------------------------------------
    def spend_symbol(self, intent: SlotIntent) -> Optional[str]:
        raise NotImplementedError

    def preview_text(self, intent: SlotIntent, balance: Optional[str]) -> str:
        raise NotImplementedError

    def success_text(self, receipt: BaseModel) -> str:
        raise NotImplementedError

    # ---- turn handling -----------------------------------------------------
    async def handle(
        self,
        user_id: str,
        history: Sequence[ChatMessage],
        callback: ResponseCallback | None = None,
    ) -> List[ChatResponse]:
        responses: List[ChatResponse] = []

        async def emit(response: ChatResponse) -> None:
            responses.append(response)
            if callback is not None:
                await callback(response)

        async def reply(context: str, **options: Any) -> None:
            await emit(
                await self.responder.action_response(context, history, action=self.action, **options)
            )

        async with self.evaluator.lock(user_id):
            try:
                evaluation = await self.evaluator.evaluate(user_id, history)
                if evaluation.event is TurnEvent.COLLECTING:
                    await self._guidance(evaluation, reply)
                elif evaluation.event is TurnEvent.PREVIEW:
                    await self._preview(evaluation, reply)
                elif evaluation.event is TurnEvent.CONFIRMED:
                    await self._execute(evaluation, reply)
                elif evaluation.event is TurnEvent.DENIED:
                    await reply(
                        f"Cancelled the {self.label} request.",
                        success=True,
                        data={"status": "cancelled"},
                    )
            except Exception as exc:
                await self._failure(exc, reply)
        return responses

    async def _guidance(self, evaluation: Evaluation, reply) -> None:
        guidance = evaluation.state.guidance
        details = "\n\n".join(
            f"{item.description}\nexamples: {', '.join(item.examples)}" for item in guidance.guidance
        )
        await reply(
            f"Need more details for {self.label}: \n{details}",
            error=f"Incomplete {self.label} details",
            data={
                "guidance": [item.model_dump() for item in guidance.guidance],
                "missing_fields": guidance.missing_fields,
            },
        )

    async def _preview(self, evaluation: Evaluation, reply) -> None:
        intent = evaluation.intent
        balance = await self._current_balance(self.spend_symbol(intent))
        await reply(
            self.preview_text(intent, balance),
            success=True,
            data={
                "status": "preview",
                **intent.slot_values(),
                "balance": balance,
                "awaiting_confirmation": True,
            },
        )

    async def _current_balance(self, symbol: Optional[str]) -> Optional[str]:
        if self.wallet is None or symbol is None:
            return None
        try:
            pouch = await self.wallet.get_pouch()
        except EXTERNAL_ERRORS:
            self.logger.warning("Could not read balance for preview", exc_info=True)
            return None
        token = pouch.find(symbol)
        return token.formatted_balance if token is not None else None

    async def _execute(self, evaluation: Evaluation, reply) -> None:
        if self.executor is None:
            raise WalletUnavailableError()

        async def on_status(status: str, data: Dict[str, Any]) -> None:
            text = self.STATUS_TEXT.get(status)
            if text:
                await reply(text, success=True, data={"status": status, **data})

        receipt = await self.executor.execute(evaluation.intent, on_status)
        await self.evaluator.complete(evaluation)
        if self.wallet is not None:
            await self.wallet.clear_pouch_cache()
        self.logger.info("%s completed: %s", self.kind, receipt.tx_hash)
        await reply(self.success_text(receipt), success=True, data=receipt.model_dump())

    async def _failure(self, exc: Exception, reply) -> None:
        if isinstance(exc, InvalidTokenError):
            await reply(str(exc), error="Invalid token", data={"available_tokens": exc.available})
        elif isinstance(exc, InvalidAddressError):
            await reply(
                str(exc),
                error="Invalid address",
                data={"expected_format": InvalidAddressError.EXPECTED_FORMAT},
            )
        elif isinstance(exc, InvalidAmountError):
            await reply(
                str(exc),
                error="Invalid amount",
                data={"token": exc.token, "amount": exc.amount, "decimals": exc.decimals},
            )
        elif isinstance(exc, InsufficientBalanceError):
            await reply(
                str(exc),
                error="Insufficient balance",
                data={"token": exc.token, "available": exc.available, "required": exc.required},
            )
        elif isinstance(exc, ExternalCallError):
            self.logger.error("%s failed (%s): %s", self.kind, exc.category.value, exc)
            text, error = self.FAILURE_TEXT.get(exc.category, (f"{self.label.capitalize()} failed: {{}}", "{}"))
            await reply(
                text.format(exc),
                error=error.format(exc),
                data={"category": exc.category.value, "tx_hash": exc.tx_hash},
            )
        elif isinstance(exc, WalletUnavailableError):
            await reply(str(exc), error="Wallet client not initialized")
        elif isinstance(exc, SlotFillingError):
            await reply(str(exc), error=str(exc))
        else:
            self.logger.exception("Unexpected %s error", self.kind)
            await reply(f"Error occurred during {self.label}: {exc}", error=str(exc) or "Unknown error")
