"""Intent variants collected through slot-filling conversations."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Dict, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ruggy.intents.base import SlotIntent
from ruggy.intents.send import SendExtraction, SendIntent, is_valid_address
from ruggy.intents.swap import SwapExtraction, SwapIntent

IntentKind = Literal["swap", "send"]

Intent = Annotated[Union[SwapIntent, SendIntent], Field(discriminator="kind")]

INTENT_MODELS: Dict[str, Type[SlotIntent]] = {
    "swap": SwapIntent,
    "send": SendIntent,
}

EXTRACTION_SCHEMAS: Dict[str, Type[BaseModel]] = {
    "swap": SwapExtraction,
    "send": SendExtraction,
}

_INTENT_ADAPTER: TypeAdapter = TypeAdapter(Intent)


@dataclass(frozen=True)
class IntentResult:
    """Outcome of validating raw data into an intent; never both set."""

    intent: Optional[SlotIntent] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.intent is not None


def validate_intent(kind: str, data: Any) -> IntentResult:
    """Validate ``data`` as an intent of ``kind`` without raising."""
    if kind not in INTENT_MODELS:
        return IntentResult(error=f"Unknown intent kind '{kind}'.")
    if isinstance(data, BaseModel):
        data = data.model_dump()
    if not isinstance(data, Mapping):
        return IntentResult(error=f"Expected an object for {kind} intent, got {type(data).__name__}.")
    try:
        intent = _INTENT_ADAPTER.validate_python({**data, "kind": kind})
    except ValidationError as exc:
        return IntentResult(error=str(exc))
    return IntentResult(intent=intent)


def empty_intent(kind: str) -> SlotIntent:
    return INTENT_MODELS[kind]()


__all__ = [
    "Intent",
    "IntentKind",
    "IntentResult",
    "INTENT_MODELS",
    "EXTRACTION_SCHEMAS",
    "SlotIntent",
    "SwapIntent",
    "SendIntent",
    "SwapExtraction",
    "SendExtraction",
    "empty_intent",
    "is_valid_address",
    "validate_intent",
]
