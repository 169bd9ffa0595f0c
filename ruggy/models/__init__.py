from .chat import ChatMessage, ChatResponse, ConversationSummary, InboundMessage, MessageRole

__all__ = [
    "ChatMessage",
    "ChatResponse",
    "ConversationSummary",
    "InboundMessage",
    "MessageRole",
]
