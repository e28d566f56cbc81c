from __future__ import annotations

from pydantic import Field

from studydesk.models.common import WireModel


class AIActionsSnapshot(WireModel):
    document_id: str
    loading_action: str | None = None
    concept: str = ""
    modal_open: bool = False
    modal_title: str = ""
    modal_content: str = ""


class ExplainRequest(WireModel):
    concept: str


class GenerateQuizRequest(WireModel):
    num_questions: int | None = Field(default=None, alias="numQuestions")
    title: str | None = None
