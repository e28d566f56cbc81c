from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class WireModel(BaseModel):
    """Base for payloads exchanged with the remote API (``_id``, camelCase)."""

    model_config = {"populate_by_name": True}


class ViewState(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    ERROR = "error"


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notification(BaseModel):
    id: int
    level: NotificationLevel
    message: str


class ModalSnapshot(BaseModel):
    open: bool
    title: str
    message: str
    target_id: str | None = None
    busy: bool = False
