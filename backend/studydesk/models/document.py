from __future__ import annotations

from datetime import datetime

from pydantic import Field

from studydesk.models.common import ModalSnapshot, ViewState, WireModel


class Document(WireModel):
    id: str = Field(alias="_id")
    title: str
    file_name: str | None = Field(default=None, alias="fileName")
    file_size: int | None = Field(default=None, alias="fileSize")
    status: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    last_accessed: datetime | None = Field(default=None, alias="lastAccessed")


class DocumentListSnapshot(WireModel):
    state: ViewState
    items: list[Document]
    error: str | None = None
    uploading: bool = False
    delete_modal: ModalSnapshot
