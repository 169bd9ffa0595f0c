"""Classifies a reply to a preview as a confirmation or a denial."""
from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from ruggy.conversation.exceptions import ConfirmationAmbiguousError
from ruggy.conversation.extraction import StructuredGenerator, render_prompt
from ruggy.models.chat import ChatMessage

logger = logging.getLogger(__name__)


class ConfirmationDecision(BaseModel):
    type: Literal["confirm", "deny"] = Field(
        ..., description="'confirm' when the user approves the pending request, otherwise 'deny'."
    )
    content: Optional[Dict[str, Any]] = Field(
        None, description="Fields of the request being confirmed, if restated."
    )

    @property
    def confirmed(self) -> bool:
        return self.type == "confirm"


DENY = ConfirmationDecision(type="deny")


class ConfirmationGate:
    """Asks the model whether the latest reply approves the pending request.

    Anything other than a clean ``confirm`` is treated as a denial so an
    unclear answer never submits a transaction.
    """

    def __init__(self, generator: StructuredGenerator) -> None:
        self._generator = generator

    async def _classify(self, history: Sequence[ChatMessage], template: str) -> ConfirmationDecision:
        prompt = render_prompt(template, history)
        try:
            output = await self._generator.generate(prompt, ConfirmationDecision)
        except Exception as exc:
            raise ConfirmationAmbiguousError(f"Confirmation call failed: {exc}") from exc
        if isinstance(output, ConfirmationDecision):
            return output
        try:
            if isinstance(output, BaseModel):
                output = output.model_dump()
            return ConfirmationDecision.model_validate(output)
        except ValidationError as exc:
            raise ConfirmationAmbiguousError(f"Unrecognised confirmation output: {output!r}") from exc

    async def classify(self, history: Sequence[ChatMessage], template: str) -> ConfirmationDecision:
        try:
            return await self._classify(history, template)
        except ConfirmationAmbiguousError as exc:
            logger.warning("Treating ambiguous confirmation as deny: %s", exc)
            return DENY
