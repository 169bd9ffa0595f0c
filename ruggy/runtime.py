"""
Agent runtime: wires the collaborators together and dispatches each inbound
message to one agent.

Dispatch order for a message:
1. an open conversation awaiting confirmation takes the reply;
2. otherwise a keyword route picks swap, send or balance;
3. otherwise the user's most recent open conversation continues;
4. otherwise the character answers in free form.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from langchain_core.language_models import BaseChatModel

from ruggy.agents.balance import BalanceAgent
from ruggy.agents.base import IntentAgent, ResponseCallback
from ruggy.agents.responses import ResponseGenerator
from ruggy.agents.router import route
from ruggy.agents.send import (
    SEND_CONFIRMATION_TEMPLATE,
    SEND_EXTRACTION_TEMPLATE,
    SendAgent,
    SendExecutor,
)
from ruggy.agents.swap import (
    SWAP_CONFIRMATION_TEMPLATE,
    SWAP_EXTRACTION_TEMPLATE,
    SwapAgent,
    SwapExecutor,
)
from ruggy.cache import CacheManager, InMemoryCacheManager
from ruggy.character import Character, load_character
from ruggy.config import RuggySettings, get_settings
from ruggy.conversation import (
    ConfirmationGate,
    ConversationStateStore,
    Extractor,
    LangChainStructuredGenerator,
    SlotFillingEvaluator,
    StructuredGenerator,
)
from ruggy.integrations.evm import EvmRpcClient, get_evm_settings
from ruggy.integrations.oogabooga import OogaBoogaClient, get_oogabooga_settings
from ruggy.llm import LLMFactory
from ruggy.memory import RoomHistory
from ruggy.models.chat import (
    ChatMessage,
    ChatResponse,
    ConversationSummary,
    InboundMessage,
    MessageRole,
)
from ruggy.wallet import WalletProvider

logger = logging.getLogger(__name__)


class AgentRuntime:
    """Holds the agents for one character and processes inbound messages."""

    def __init__(
        self,
        *,
        llm: BaseChatModel,
        settings: RuggySettings | None = None,
        character: Character | None = None,
        generator: StructuredGenerator | None = None,
        cache: CacheManager | None = None,
        wallet: WalletProvider | None = None,
        history: RoomHistory | None = None,
    ) -> None:
        self.settings = settings or RuggySettings()
        self.character = character or load_character(self.settings.character_path)
        self.agent_name = self.settings.agent_name or self.character.name
        self.cache = cache or InMemoryCacheManager()
        self.wallet = wallet
        self.history = history or RoomHistory(max_recent=self.settings.history_limit)
        self.store = ConversationStateStore(self.cache)
        self.responder = ResponseGenerator(llm, self.character)

        generator = generator or LangChainStructuredGenerator(llm)
        extractor = Extractor(generator)
        gate = ConfirmationGate(generator)

        def evaluator(kind: str, extraction: str, confirmation: str) -> SlotFillingEvaluator:
            return SlotFillingEvaluator(
                agent_name=self.agent_name,
                kind=kind,
                store=self.store,
                extractor=extractor,
                gate=gate,
                extraction_template=extraction,
                confirmation_template=confirmation,
            )

        swap_executor = send_executor = None
        if wallet is not None:
            swap_executor = SwapExecutor(
                wallet,
                slippage=self.settings.swap_slippage,
                receipt_timeout=self.settings.receipt_timeout,
            )
            send_executor = SendExecutor(
                wallet,
                fee_amount=self.settings.fee_amount,
                receipt_timeout=self.settings.receipt_timeout,
            )

        self.intent_agents: Dict[str, IntentAgent] = {
            "swap": SwapAgent(
                evaluator=evaluator("swap", SWAP_EXTRACTION_TEMPLATE, SWAP_CONFIRMATION_TEMPLATE),
                responder=self.responder,
                executor=swap_executor,
                wallet=wallet,
            ),
            "send": SendAgent(
                evaluator=evaluator("send", SEND_EXTRACTION_TEMPLATE, SEND_CONFIRMATION_TEMPLATE),
                responder=self.responder,
                executor=send_executor,
                wallet=wallet,
            ),
        }
        self.balance_agent = BalanceAgent(generator=generator, responder=self.responder, wallet=wallet)

    @classmethod
    def from_settings(cls, settings: RuggySettings | None = None) -> "AgentRuntime":
        """Build a runtime from environment configuration.

        The wallet is optional: without aggregator and RPC settings the agent
        still chats and collects intents but reports that no wallet is
        available when asked to act.
        """
        settings = settings or get_settings()
        llm = LLMFactory.create(settings.llm_model, temperature=settings.llm_temperature)
        cache = InMemoryCacheManager()
        wallet = None
        try:
            chain_settings = get_evm_settings()
            aggregator_settings = get_oogabooga_settings()
        except ValueError as exc:
            # Wallet settings not configured; run without on-chain actions.
            logger.warning("Wallet disabled: %s", exc)
        else:
            wallet = WalletProvider(
                cache=cache,
                chain=EvmRpcClient(chain_settings),
                aggregator=OogaBoogaClient(aggregator_settings),
                native_symbol=settings.native_symbol,
                pouch_ttl=settings.pouch_ttl,
                price_ttl=settings.price_ttl,
            )
        return cls(llm=llm, settings=settings, cache=cache, wallet=wallet)

    # ---- dispatch ----------------------------------------------------------
    async def _select_agent(self, message: InboundMessage) -> Optional[str]:
        active = await self.store.active(self.agent_name, message.user_id)
        for kind, state in active.items():
            if state.awaiting_confirmation:
                return kind

        routed = route(message.text, [*self.intent_agents, "balance"])
        if routed is not None:
            return routed

        if active:
            return max(active.items(), key=lambda item: item[1].timestamp)[0]
        return None

    async def process_message(
        self,
        message: InboundMessage,
        callback: ResponseCallback | None = None,
    ) -> List[ChatResponse]:
        room_id = message.resolved_room()
        self.history.append(
            room_id,
            ChatMessage(
                role=MessageRole.USER,
                text=message.text,
                user_id=message.user_id,
                user_name=message.user_name,
                room_id=room_id,
            ),
        )
        recent = self.history.recent(room_id)

        selected = await self._select_agent(message)
        logger.info("Message from %s routed to %s", message.user_id, selected or "general")

        if selected == "balance":
            responses = await self.balance_agent.handle(message.user_id, recent, callback)
        elif selected is not None:
            responses = await self.intent_agents[selected].handle(message.user_id, recent, callback)
        else:
            wallet_context = await self.wallet.describe() if self.wallet is not None else None
            response = await self.responder.general_reply(recent, wallet_context)
            if callback is not None:
                await callback(response)
            responses = [response]

        for response in responses:
            self.history.append(
                room_id,
                ChatMessage(
                    role=MessageRole.AGENT,
                    text=response.text,
                    user_name=self.character.name,
                    room_id=room_id,
                    content=response.content,
                ),
            )
        return responses

    async def conversations(self, user_id: str) -> List[ConversationSummary]:
        active = await self.store.active(self.agent_name, user_id)
        return [
            ConversationSummary(
                kind=kind,
                status=state.status.value,
                content=state.content.slot_values(),
                missing_fields=state.guidance.missing_fields,
                timestamp=state.timestamp,
            )
            for kind, state in active.items()
        ]
