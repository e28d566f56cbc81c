from __future__ import annotations

from datetime import datetime

from pydantic import Field

from studydesk.models.common import ViewState, WireModel


class DashboardOverview(WireModel):
    total_documents: int = Field(default=0, alias="totalDocuments")
    total_flashcard_sets: int = Field(default=0, alias="totalFlashcardSets")
    total_flashcards: int = Field(default=0, alias="totalFlashcards")
    reviewed_flashcards: int = Field(default=0, alias="reviewedFlashcards")
    starred_flashcards: int = Field(default=0, alias="starredFlashcards")
    total_quizzes: int = Field(default=0, alias="totalQuizzes")
    completed_quizzes: int = Field(default=0, alias="completedQuizzes")
    average_score: float = Field(default=0, alias="averageScore")
    study_streak: int = Field(default=0, alias="studyStreak")


class RecentItem(WireModel):
    id: str = Field(alias="_id")
    title: str = ""
    last_accessed: datetime | None = Field(default=None, alias="lastAccessed")
    last_attempted: datetime | None = Field(default=None, alias="lastAttempted")


class RecentActivity(WireModel):
    documents: list[RecentItem] = []
    quizzes: list[RecentItem] = []


class DashboardData(WireModel):
    overview: DashboardOverview | None = None
    recent_activity: RecentActivity = Field(
        default_factory=RecentActivity, alias="recentActivity"
    )


class ActivityEntry(WireModel):
    id: str
    type: str  # document | quiz
    description: str
    timestamp: datetime | None = None
    link: str


class DashboardSnapshot(WireModel):
    state: ViewState
    overview: DashboardOverview | None = None
    activities: list[ActivityEntry] = []
