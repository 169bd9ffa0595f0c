"""Slot-filling conversation protocol shared by the swap and send agents."""

from .confirmation import ConfirmationDecision, ConfirmationGate
from .evaluator import Evaluation, SlotFillingEvaluator, TurnEvent
from .exceptions import (
    ConfirmationAmbiguousError,
    ExternalCallCategory,
    ExternalCallError,
    ExtractionError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidTokenError,
    InvalidTransitionError,
    SlotFillingError,
    WalletUnavailableError,
)
from .extraction import Extractor, LangChainStructuredGenerator, StructuredGenerator
from .guidance import FieldGuidance, Guidance, generate_guidance
from .merge import merge
from .state import ConversationState, ConversationStatus
from .store import ConversationStateStore, conversation_key

__all__ = [
    "ConfirmationAmbiguousError",
    "ConfirmationDecision",
    "ConfirmationGate",
    "ConversationState",
    "ConversationStateStore",
    "ConversationStatus",
    "Evaluation",
    "ExternalCallCategory",
    "ExternalCallError",
    "ExtractionError",
    "Extractor",
    "FieldGuidance",
    "Guidance",
    "InsufficientBalanceError",
    "InvalidAddressError",
    "InvalidAmountError",
    "InvalidTokenError",
    "InvalidTransitionError",
    "LangChainStructuredGenerator",
    "SlotFillingError",
    "SlotFillingEvaluator",
    "StructuredGenerator",
    "TurnEvent",
    "WalletUnavailableError",
    "conversation_key",
    "generate_guidance",
    "merge",
]
