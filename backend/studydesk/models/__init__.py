from studydesk.models.auth import AuthResult, SessionSnapshot, User
from studydesk.models.chat import ChatMessage, ChatRole, ChatSnapshot
from studydesk.models.common import (
    ModalSnapshot,
    Notification,
    NotificationLevel,
    ViewState,
    WireModel,
)
from studydesk.models.dashboard import DashboardData, DashboardSnapshot
from studydesk.models.document import Document, DocumentListSnapshot
from studydesk.models.flashcard import (
    Flashcard,
    FlashcardSet,
    FlashcardSetsSnapshot,
    FlashcardStudySnapshot,
)
from studydesk.models.quiz import (
    Question,
    Quiz,
    QuizAnswer,
    QuizPhase,
    QuizTakeSnapshot,
    QuizzesSnapshot,
)

__all__ = [
    "AuthResult",
    "ChatMessage",
    "ChatRole",
    "ChatSnapshot",
    "DashboardData",
    "DashboardSnapshot",
    "Document",
    "DocumentListSnapshot",
    "Flashcard",
    "FlashcardSet",
    "FlashcardSetsSnapshot",
    "FlashcardStudySnapshot",
    "ModalSnapshot",
    "Notification",
    "NotificationLevel",
    "Question",
    "Quiz",
    "QuizAnswer",
    "QuizPhase",
    "QuizTakeSnapshot",
    "QuizzesSnapshot",
    "SessionSnapshot",
    "User",
    "ViewState",
    "WireModel",
]
