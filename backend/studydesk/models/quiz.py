from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field

from studydesk.models.common import ModalSnapshot, ViewState, WireModel


class Question(WireModel):
    id: str = Field(alias="_id")
    question: str
    options: list[str]

    model_config = {"populate_by_name": True, "frozen": True}


class QuizAnswer(WireModel):
    question_index: int = Field(alias="questionIndex")
    selected_answer: str = Field(alias="selectedAnswer")


class Quiz(WireModel):
    id: str = Field(alias="_id")
    document_id: str | None = Field(default=None, alias="documentId")
    title: str = ""
    questions: list[Question] = []
    score: float | None = None
    total_questions: int | None = Field(default=None, alias="totalQuestions")
    user_answers: list[dict] | None = Field(default=None, alias="userAnswers")
    completed_at: datetime | None = Field(default=None, alias="completedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")


class QuizPhase(str, Enum):
    ANSWERING = "answering"
    RESULTS = "results"


class QuizTakeSnapshot(WireModel):
    quiz_id: str
    title: str
    phase: QuizPhase
    current_index: int
    total: int
    current: Question | None = None
    selected: dict[str, int]
    answered_count: int
    progress_percent: float
    submitting: bool
    score: float | None = None


class QuizzesSnapshot(WireModel):
    state: ViewState
    items: list[Quiz]
    error: str | None = None
    generating: bool = False
    delete_modal: ModalSnapshot
