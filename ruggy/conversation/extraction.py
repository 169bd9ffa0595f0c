"""Structured extraction of intent fields from recent chat messages."""
from __future__ import annotations

import logging
from typing import Any, Dict, Protocol, Sequence, Type

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import PromptTemplate
from pydantic import BaseModel

from ruggy.conversation.exceptions import ExtractionError
from ruggy.intents import EXTRACTION_SCHEMAS, validate_intent
from ruggy.intents.base import SlotIntent
from ruggy.memory import format_recent_messages
from ruggy.models.chat import ChatMessage

logger = logging.getLogger(__name__)


class StructuredGenerator(Protocol):
    """Anything that turns a prompt into an object matching ``schema``."""

    async def generate(self, prompt: str, schema: Type[BaseModel]) -> Any:
        ...


class LangChainStructuredGenerator:
    """Structured generation through a LangChain chat model."""

    def __init__(self, llm: BaseChatModel) -> None:
        self._llm = llm

    async def generate(self, prompt: str, schema: Type[BaseModel]) -> Any:
        runnable = self._llm.with_structured_output(schema)
        return await runnable.ainvoke(prompt)


def render_prompt(template: str, history: Sequence[ChatMessage]) -> str:
    return PromptTemplate.from_template(template).format(
        recent_messages=format_recent_messages(history)
    )


def _as_dict(output: Any) -> Dict[str, Any]:
    if isinstance(output, BaseModel):
        return output.model_dump()
    if isinstance(output, dict):
        return output
    raise ExtractionError(f"Structured output must be an object, got {type(output).__name__}.")


class Extractor:
    """Runs one extraction call and validates the result into an intent."""

    def __init__(self, generator: StructuredGenerator) -> None:
        self._generator = generator

    async def extract(
        self,
        history: Sequence[ChatMessage],
        template: str,
        kind: str,
    ) -> SlotIntent:
        schema = EXTRACTION_SCHEMAS[kind]
        prompt = render_prompt(template, history)
        try:
            output = await self._generator.generate(prompt, schema)
        except Exception as exc:
            raise ExtractionError(f"{kind} extraction failed: {exc}") from exc

        data = _as_dict(output)
        result = validate_intent(kind, data)
        if not result.ok:
            raise ExtractionError(f"{kind} extraction returned invalid data: {result.error}")
        logger.debug("Extracted %s fields: %s", kind, result.intent.slot_values())
        return result.intent
