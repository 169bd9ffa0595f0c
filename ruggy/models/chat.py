from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    """Enum for message roles"""
    USER = "user"
    AGENT = "agent"


class ChatMessage(BaseModel):
    """A single message in a room's history"""

    role: MessageRole = Field(..., description="Role of the message sender")
    text: str = Field(..., description="Message text")
    user_id: Optional[str] = Field(None, description="Sender identifier")
    user_name: Optional[str] = Field(None, description="Display name used in prompts")
    room_id: Optional[str] = Field(None, description="Room the message was posted in")
    content: Dict[str, Any] = Field(default_factory=dict, description="Structured payload attached by an action")
    timestamp: datetime = Field(default_factory=_utc_now, description="Message timestamp")

    @property
    def speaker(self) -> str:
        return self.user_name or self.user_id or self.role.value


class InboundMessage(BaseModel):
    """Message posted to the agent by a host or client"""

    text: str = Field(..., min_length=1, description="What the user typed")
    user_id: str = Field(..., min_length=1, description="Stable user identifier")
    user_name: Optional[str] = Field(None, description="Display name")
    room_id: Optional[str] = Field(None, description="Room identifier, defaults to the user id")

    def resolved_room(self) -> str:
        return self.room_id or self.user_id


class ChatResponse(BaseModel):
    """Reply emitted by an action or the general responder"""

    text: str = Field(..., description="Reply text shown to the user")
    content: Dict[str, Any] = Field(default_factory=dict, description="Structured payload")
    action: Optional[str] = Field(None, description="Action that produced the reply")


class ConversationSummary(BaseModel):
    """Public view of an open slot-filling conversation"""

    kind: str
    status: str
    content: Dict[str, Any]
    missing_fields: List[str] = Field(default_factory=list)
    timestamp: float
