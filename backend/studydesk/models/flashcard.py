from __future__ import annotations

from datetime import datetime

from pydantic import Field

from studydesk.models.common import ModalSnapshot, ViewState, WireModel


class Flashcard(WireModel):
    id: str = Field(alias="_id")
    question: str
    answer: str
    difficulty: str | None = None
    is_starred: bool = Field(default=False, alias="isStarred")
    last_reviewed: datetime | None = Field(default=None, alias="lastReviewed")
    review_count: int = Field(default=0, alias="reviewCount")


class FlashcardSet(WireModel):
    id: str = Field(alias="_id")
    document_id: str | None = Field(default=None, alias="documentId")
    cards: list[Flashcard] = []
    created_at: datetime | None = Field(default=None, alias="createdAt")


class CardView(WireModel):
    """The current card as the shell renders it."""

    card: Flashcard
    starred: bool
    star_pending: bool
    reviewed: bool


class FlashcardStudySnapshot(WireModel):
    set_id: str
    current_index: int
    total: int
    revealed: bool
    current: CardView | None = None


class FlashcardSetsSnapshot(WireModel):
    state: ViewState
    items: list[FlashcardSet]
    error: str | None = None
    generating: bool = False
    delete_modal: ModalSnapshot
    study: FlashcardStudySnapshot | None = None
