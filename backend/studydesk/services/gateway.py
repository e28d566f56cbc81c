"""
Remote Resource Gateway: typed async client for the learning API.

Every call is a single attempt. Failures surface as GatewayError with a
message fit to show the user. Nothing is cached locally.

Usage:
    client = ApiClient(settings, session)
    docs = await DocumentGateway(client).list()
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from studydesk.config import Settings
from studydesk.models.auth import AuthResult, User
from studydesk.models.chat import ChatMessage
from studydesk.models.dashboard import DashboardData
from studydesk.models.document import Document
from studydesk.models.flashcard import Flashcard, FlashcardSet
from studydesk.models.quiz import Quiz, QuizAnswer
from studydesk.services.invalidation import (
    DASHBOARD,
    DOCUMENTS,
    flashcard_sets_key,
    quizzes_key,
)
from studydesk.services.session import SessionContext

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class GatewayError(Exception):
    """A remote call failed; ``message`` is human-readable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    value: T
    invalidates: frozenset[str]


def _error_message(res: httpx.Response) -> str:
    try:
        body = res.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for field in ("message", "error", "detail"):
            if isinstance(body.get(field), str) and body[field]:
                return body[field]
    return f"Request failed with status {res.status_code}"


def _validate(model: type[M], data: Any) -> M:
    """Parse a response body; a payload of the wrong shape is a GatewayError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error("Invalid %s payload: %s", model.__name__, e)
        raise GatewayError("The server returned an invalid response.") from e


def _validate_list(model: type[M], data: Any) -> list[M]:
    if data is None:
        return []
    if not isinstance(data, list):
        logger.error("Expected a list of %s, got %s", model.__name__, type(data).__name__)
        raise GatewayError("The server returned an invalid response.")
    return [_validate(model, item) for item in data]


def _field(data: Any, name: str) -> str:
    if data is None:
        return ""
    if not isinstance(data, dict):
        logger.error("Expected an object with %r, got %s", name, type(data).__name__)
        raise GatewayError("The server returned an invalid response.")
    return str(data.get(name) or "")


class ApiClient:
    """Shared HTTP transport. Attaches the session's bearer token."""

    def __init__(
        self,
        settings: Settings,
        session: SessionContext,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._session = session
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url.rstrip("/"),
            timeout=settings.request_timeout,
            transport=transport,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    def _headers(self) -> dict[str, str]:
        token = self._session.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: dict[str, str] | None = None,
        files: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        try:
            res = await self._client.request(
                method,
                path,
                json=json,
                data=data,
                files=files,
                headers=self._headers(),
                timeout=timeout if timeout is not None else self._settings.request_timeout,
            )
        except httpx.TimeoutException as e:
            logger.error("%s %s timed out", method, path)
            raise GatewayError("The request timed out. Please try again.") from e
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise GatewayError(f"Network error: {e}") from e

        if res.is_error:
            message = _error_message(res)
            logger.error("%s %s -> %d: %s", method, path, res.status_code, message)
            raise GatewayError(message, status_code=res.status_code)

        if res.status_code == 204 or not res.content:
            return None
        try:
            body = res.json()
        except ValueError as e:
            raise GatewayError("The server returned an invalid response.", res.status_code) from e
        # Unwrap the {"success": ..., "data": ...} envelope
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    async def aclose(self) -> None:
        await self._client.aclose()


class DocumentGateway:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self) -> list[Document]:
        data = await self._client.request("GET", "/documents")
        return _validate_list(Document, data)

    async def get(self, doc_id: str) -> Document:
        return _validate(Document, await self._client.request("GET", f"/documents/{doc_id}"))

    async def create(self, title: str, file_name: str, content: bytes) -> MutationResult[Document | None]:
        data = await self._client.request(
            "POST",
            "/documents/upload",
            data={"title": title},
            files={"file": (file_name, content, "application/pdf")},
        )
        doc = _validate(Document, data) if isinstance(data, dict) else None
        return MutationResult(doc, frozenset({DOCUMENTS, DASHBOARD}))

    async def delete(self, doc_id: str) -> MutationResult[None]:
        await self._client.request("DELETE", f"/documents/{doc_id}")
        return MutationResult(
            None,
            frozenset({DOCUMENTS, DASHBOARD, flashcard_sets_key(doc_id), quizzes_key(doc_id)}),
        )


class FlashcardGateway:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self, document_id: str) -> list[FlashcardSet]:
        data = await self._client.request("GET", f"/flashcards/{document_id}")
        return _validate_list(FlashcardSet, data)

    async def starred(self) -> list[Flashcard]:
        data = await self._client.request("GET", "/flashcards/starred")
        return _validate_list(Flashcard, data)

    async def delete(self, set_id: str, document_id: str) -> MutationResult[None]:
        await self._client.request("DELETE", f"/flashcards/{set_id}")
        return MutationResult(None, frozenset({flashcard_sets_key(document_id), DASHBOARD}))

    async def toggle_star(self, card_id: str) -> None:
        await self._client.request("PUT", f"/flashcards/{card_id}/star")

    async def review(self, card_id: str, card_index: int) -> None:
        await self._client.request(
            "POST", f"/flashcards/{card_id}/review", json={"cardIndex": card_index}
        )


class QuizGateway:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self, document_id: str) -> list[Quiz]:
        data = await self._client.request("GET", f"/quizzes/{document_id}")
        return _validate_list(Quiz, data)

    async def get(self, quiz_id: str) -> Quiz:
        return _validate(Quiz, await self._client.request("GET", f"/quizzes/quiz/{quiz_id}"))

    async def submit(self, quiz_id: str, answers: list[QuizAnswer]) -> MutationResult[Quiz | None]:
        data = await self._client.request(
            "POST",
            f"/quizzes/{quiz_id}/submit",
            json={"answers": [a.model_dump(by_alias=True) for a in answers]},
        )
        quiz = _validate(Quiz, data) if isinstance(data, dict) and "_id" in data else None
        return MutationResult(quiz, frozenset({DASHBOARD}))

    async def results(self, quiz_id: str) -> Quiz:
        data = await self._client.request("GET", f"/quizzes/{quiz_id}/results")
        # Results come back either bare or as {"quiz": {...}, "results": [...]}
        if isinstance(data, dict) and "quiz" in data:
            data = data["quiz"]
        return _validate(Quiz, data)

    async def delete(self, quiz_id: str, document_id: str) -> MutationResult[None]:
        await self._client.request("DELETE", f"/quizzes/{quiz_id}")
        return MutationResult(None, frozenset({quizzes_key(document_id), DASHBOARD}))


class AIGateway:
    """Generation endpoints. These can be slow; they get the longer timeout."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def _post(self, path: str, payload: dict[str, Any]) -> Any:
        return await self._client.request(
            "POST", path, json=payload, timeout=self._client.settings.generation_timeout
        )

    async def generate_flashcards(
        self, document_id: str, count: int | None = None
    ) -> MutationResult[FlashcardSet | None]:
        payload: dict[str, Any] = {"documentId": document_id}
        if count is not None:
            payload["count"] = count
        data = await self._post("/ai/generate-flashcards", payload)
        created = _validate(FlashcardSet, data) if isinstance(data, dict) and "_id" in data else None
        return MutationResult(created, frozenset({flashcard_sets_key(document_id), DASHBOARD}))

    async def generate_quiz(
        self, document_id: str, num_questions: int, title: str | None = None
    ) -> MutationResult[Quiz | None]:
        payload: dict[str, Any] = {"documentId": document_id, "numQuestions": num_questions}
        if title:
            payload["title"] = title
        data = await self._post("/ai/generate-quiz", payload)
        created = _validate(Quiz, data) if isinstance(data, dict) and "_id" in data else None
        return MutationResult(created, frozenset({quizzes_key(document_id), DASHBOARD}))

    async def generate_summary(self, document_id: str) -> str:
        data = await self._post("/ai/generate-summary", {"documentId": document_id})
        return _field(data, "summary")

    async def explain_concept(self, document_id: str, concept: str) -> str:
        data = await self._post(
            "/ai/explain-concept", {"documentId": document_id, "concept": concept}
        )
        return _field(data, "explanation")

    async def chat(self, document_id: str, question: str) -> str:
        data = await self._post("/ai/chat", {"documentId": document_id, "question": question})
        if not isinstance(data, dict) or "answer" not in data:
            raise GatewayError("The assistant returned no answer.")
        return str(data["answer"])

    async def chat_history(self, document_id: str) -> list[ChatMessage]:
        data = await self._client.request("GET", f"/ai/chat-history/{document_id}")
        return _validate_list(ChatMessage, data)


class AuthGateway:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def login(self, email: str, password: str) -> AuthResult:
        data = await self._client.request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        return _validate(AuthResult, data)

    async def register(self, username: str, email: str, password: str) -> None:
        await self._client.request(
            "POST",
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )

    async def profile(self) -> User:
        return _validate(User, await self._client.request("GET", "/auth/profile"))

    async def update_profile(self, **fields: str) -> User:
        return _validate(User, await self._client.request("PUT", "/auth/profile", json=fields))

    async def change_password(self, current_password: str, new_password: str) -> None:
        await self._client.request(
            "POST",
            "/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )


class ProgressGateway:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def dashboard(self) -> DashboardData:
        return _validate(
            DashboardData, await self._client.request("GET", "/progress/dashboard") or {}
        )


# --- Collection adapters ---
# Bind a parent id so collection views and generation triggers can work
# against one uniform list / delete / generate contract.


class DocumentResource:
    def __init__(self, gateway: DocumentGateway) -> None:
        self._gateway = gateway
        self.key = DOCUMENTS

    async def list(self) -> list[Document]:
        return await self._gateway.list()

    async def create(self, title: str, file_name: str, content: bytes) -> MutationResult[Document | None]:
        return await self._gateway.create(title, file_name, content)

    async def delete(self, item_id: str) -> MutationResult[None]:
        return await self._gateway.delete(item_id)


class FlashcardSetResource:
    def __init__(self, gateway: FlashcardGateway, ai: AIGateway, document_id: str) -> None:
        self._gateway = gateway
        self._ai = ai
        self.document_id = document_id
        self.key = flashcard_sets_key(document_id)

    async def list(self) -> list[FlashcardSet]:
        return await self._gateway.list(self.document_id)

    async def delete(self, item_id: str) -> MutationResult[None]:
        return await self._gateway.delete(item_id, self.document_id)

    async def generate(self, count: int | None = None) -> MutationResult[FlashcardSet | None]:
        return await self._ai.generate_flashcards(self.document_id, count)


class QuizResource:
    def __init__(self, gateway: QuizGateway, ai: AIGateway, document_id: str) -> None:
        self._gateway = gateway
        self._ai = ai
        self.document_id = document_id
        self.key = quizzes_key(document_id)

    async def list(self) -> list[Quiz]:
        return await self._gateway.list(self.document_id)

    async def delete(self, item_id: str) -> MutationResult[None]:
        return await self._gateway.delete(item_id, self.document_id)

    async def generate(self, num_questions: int, title: str | None = None) -> MutationResult[Quiz | None]:
        return await self._ai.generate_quiz(self.document_id, num_questions, title)
