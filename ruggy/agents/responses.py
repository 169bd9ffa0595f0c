"""Character-voiced replies built from an action's plain result text."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.prompts import PromptTemplate

from ruggy.character import Character
from ruggy.memory import format_recent_messages
from ruggy.models.chat import ChatMessage, ChatResponse

logger = logging.getLogger(__name__)

RESPONSE_FAILED_TEXT = "An error occurred while generating response"

MESSAGE_TEMPLATE = """You are {agent_name}, speaking in your authentic voice.

Your core traits and background:
{bio}

Your deeper history and lore:
{lore}

Recent conversation history:
{recent_messages}

Translate this information into your natural way of speaking:
{context}

Important guidelines:
- Stay completely in character as {agent_name}
- Express the information naturally in your unique voice and mannerisms
- Keep your response concise and to a single line
- Keep every number, token symbol, address and transaction hash exactly as given
- Maintain conversational continuity with recent messages

Respond as {agent_name} would genuinely speak."""

GENERAL_TEMPLATE = """You are {agent_name}.

Your core traits and background:
{bio}

Your deeper history and lore:
{lore}

Your speaking style: {style}

{wallet}

Recent conversation history:
{recent_messages}

Reply to the last message in character, in one or two short lines. You can swap tokens,
send tokens and check balances when asked. Never invent balances or transaction hashes."""


def _text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        content = "".join(part.get("text", "") if isinstance(part, dict) else str(part) for part in content)
    return str(content).strip()


class ResponseGenerator:
    """Rephrases action results in the character's voice."""

    def __init__(self, llm: BaseChatModel, character: Character) -> None:
        self._llm = llm
        self.character = character

    def _render(self, template: str, history: Sequence[ChatMessage], **extra: str) -> str:
        return PromptTemplate.from_template(template).format(
            agent_name=self.character.name,
            bio=self.character.bio_text(),
            lore=self.character.lore_text(),
            recent_messages=format_recent_messages(history),
            **extra,
        )

    async def action_response(
        self,
        context: str,
        history: Sequence[ChatMessage],
        *,
        success: Optional[bool] = None,
        error: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        action: Optional[str] = None,
    ) -> ChatResponse:
        """Voice ``context`` and attach the structured payload.

        ``success`` defaults to the absence of ``error``; the error string is
        carried as ``content["error"]``.
        """
        content: Dict[str, Any] = {"success": success if success is not None else error is None}
        content.update(data or {})
        if error is not None:
            content["error"] = error
        try:
            prompt = self._render(MESSAGE_TEMPLATE, history, context=context)
            reply = await self._llm.ainvoke([HumanMessage(content=prompt)])
            text = _text(reply)
        except Exception:
            logger.exception("Response generation failed for action %s", action)
            return ChatResponse(
                text=RESPONSE_FAILED_TEXT,
                content={"error": "Response generation failed"},
                action=action,
            )
        return ChatResponse(text=text or context, content=content, action=action)

    async def general_reply(
        self,
        history: Sequence[ChatMessage],
        wallet_context: Optional[str] = None,
    ) -> ChatResponse:
        try:
            prompt = self._render(
                GENERAL_TEMPLATE,
                history,
                style=", ".join(self.character.style),
                wallet=wallet_context or "",
            )
            reply = await self._llm.ainvoke(
                [SystemMessage(content=prompt), HumanMessage(content=history[-1].text if history else "")]
            )
            text = _text(reply)
        except Exception:
            logger.exception("General reply generation failed")
            return ChatResponse(text=RESPONSE_FAILED_TEXT, content={"error": "Response generation failed"})
        return ChatResponse(text=text, content={"success": True})
