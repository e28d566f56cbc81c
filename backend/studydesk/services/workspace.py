from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

import httpx
from fastapi import Request

from studydesk.config import Settings
from studydesk.flows.ai_actions import AIActions
from studydesk.flows.auth import AuthFlow
from studydesk.flows.chat import ConversationThread
from studydesk.flows.dashboard import Dashboard
from studydesk.flows.documents import DocumentLibrary
from studydesk.flows.flashcards import FlashcardManager
from studydesk.flows.quizzes import QuizManager
from studydesk.flows.study import QuizTake
from studydesk.services.gateway import (
    AIGateway,
    ApiClient,
    AuthGateway,
    DocumentGateway,
    DocumentResource,
    FlashcardGateway,
    FlashcardSetResource,
    GatewayError,
    ProgressGateway,
    QuizGateway,
    QuizResource,
)
from studydesk.services.invalidation import InvalidationBus
from studydesk.services.notifications import Notifier
from studydesk.services.session import SessionContext

logger = logging.getLogger(__name__)


class View(Protocol):
    async def close(self) -> None: ...


V = TypeVar("V", bound=View)


class Workspace:
    """Everything one sidecar process holds: session, gateways, open views.

    Views are keyed by name (e.g. ``flashcards:<documentId>``). Opening a key
    that is already open returns the existing view; closing it cancels its
    pending calls.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self.session = SessionContext()
        self.bus = InvalidationBus()
        self.notifier = Notifier(limit=settings.max_notifications)
        self.client = ApiClient(settings, self.session, transport=transport)
        self.documents = DocumentGateway(self.client)
        self.flashcards = FlashcardGateway(self.client)
        self.quizzes = QuizGateway(self.client)
        self.ai = AIGateway(self.client)
        self.progress = ProgressGateway(self.client)
        self.auth = AuthFlow(AuthGateway(self.client), self.session, self.notifier)
        self._views: dict[str, View] = {}

    async def _open(self, key: str, factory: Callable[[], V], mount: Callable[[V], Awaitable[Any]] | None) -> V:
        view = self._views.get(key)
        if view is not None:
            return view  # type: ignore[return-value]
        view = factory()
        self._views[key] = view
        if mount is not None:
            await mount(view)
        return view

    def get(self, key: str) -> View | None:
        return self._views.get(key)

    @property
    def open_views(self) -> list[str]:
        return sorted(self._views)

    async def close_view(self, key: str) -> bool:
        view = self._views.pop(key, None)
        if view is None:
            return False
        await view.close()
        return True

    async def teardown(self) -> None:
        """Close every open view (logout, shutdown)."""
        for key in list(self._views):
            await self.close_view(key)

    async def close_document_views(self, document_id: str) -> list[str]:
        """Close every view that hangs off *document_id* (it was deleted)."""
        keys = [
            f"flashcards:{document_id}",
            f"quizzes:{document_id}",
            f"chat:{document_id}",
            f"ai:{document_id}",
        ]
        keys += [
            key
            for key, view in self._views.items()
            if isinstance(view, QuizTake) and view.quiz.document_id == document_id
        ]
        closed = [key for key in keys if await self.close_view(key)]
        if closed:
            logger.info("Closed %s after deleting document %s", ", ".join(closed), document_id)
        return closed

    async def logout(self) -> None:
        self.auth.logout()
        await self.teardown()
        self.notifier.clear()

    # --- View factories ---

    async def document_library(self) -> DocumentLibrary:
        return await self._open(
            "documents",
            lambda: DocumentLibrary(
                DocumentResource(self.documents),
                self.bus,
                self.notifier,
                on_deleted=self.close_document_views,
            ),
            lambda v: v.mount(),
        )

    async def flashcard_manager(self, document_id: str) -> FlashcardManager:
        return await self._open(
            f"flashcards:{document_id}",
            lambda: FlashcardManager(
                FlashcardSetResource(self.flashcards, self.ai, document_id),
                self.flashcards,
                self.bus,
                self.notifier,
                rollback_star_on_failure=self.settings.rollback_star_on_failure,
            ),
            lambda v: v.mount(),
        )

    async def quiz_manager(self, document_id: str) -> QuizManager:
        return await self._open(
            f"quizzes:{document_id}",
            lambda: QuizManager(
                QuizResource(self.quizzes, self.ai, document_id),
                self.bus,
                self.notifier,
                default_questions=self.settings.default_quiz_questions,
            ),
            lambda v: v.mount(),
        )

    async def quiz_take(self, quiz_id: str) -> QuizTake | None:
        key = f"quiz:{quiz_id}"
        existing = self._views.get(key)
        if existing is not None:
            return existing  # type: ignore[return-value]
        try:
            quiz = await self.quizzes.get(quiz_id)
        except GatewayError as e:
            logger.error("Fetching quiz %s failed: %s", quiz_id, e.message)
            self.notifier.error("Failed to fetch quiz.")
            return None
        return await self._open(
            key, lambda: QuizTake(quiz, self.quizzes, self.notifier, self.bus), None
        )

    async def chat(self, document_id: str) -> ConversationThread:
        return await self._open(
            f"chat:{document_id}",
            lambda: ConversationThread(document_id, self.ai),
            lambda v: v.load_history(),
        )

    async def ai_actions(self, document_id: str) -> AIActions:
        return await self._open(
            f"ai:{document_id}",
            lambda: AIActions(document_id, self.ai, self.notifier),
            None,
        )

    async def dashboard(self) -> Dashboard:
        return await self._open(
            "dashboard",
            lambda: Dashboard(self.progress, self.bus, self.notifier),
            lambda v: v.mount(),
        )

    async def aclose(self) -> None:
        await self.teardown()
        await self.client.aclose()


def get_workspace(request: Request) -> Workspace:
    return request.app.state.workspace
