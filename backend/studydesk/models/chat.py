from __future__ import annotations

from datetime import datetime
from enum import Enum

from studydesk.models.common import WireModel


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(WireModel):
    role: ChatRole
    content: str
    timestamp: datetime | None = None


class ChatSnapshot(WireModel):
    document_id: str
    messages: list[ChatMessage]
    draft: str
    awaiting_response: bool
    initial_loading: bool
