"""Shared pytest fixtures for the StudyDesk test suite.

The remote learning API is faked with httpx.MockTransport; nothing leaves
the process.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import pytest

from studydesk.config import Settings
from studydesk.services.gateway import ApiClient
from studydesk.services.invalidation import InvalidationBus
from studydesk.services.notifications import Notifier
from studydesk.services.session import SessionContext
from studydesk.services.workspace import Workspace

API_ROOT = "/api"

Handler = Callable[[httpx.Request], "httpx.Response | Awaitable[httpx.Response]"]


class FakeApi:
    """Route table keyed by (method, path relative to /api).

    Unrouted requests answer 404 with a JSON message. Every request is
    recorded, routed or not.
    """

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        status: int = 200,
        handler: Handler | None = None,
    ) -> None:
        if handler is None:

            def handler(_request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, json=json_body)

        self._routes[(method.upper(), path)] = handler

    def fail(self, method: str, path: str, status: int = 500, message: str = "Server exploded") -> None:
        self.on(method, path, {"success": False, "message": message}, status=status)

    async def _dispatch(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_ROOT):
            path = path[len(API_ROOT):]
        handler = self._routes.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"message": f"No route for {request.method} {path}"})
        response = handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._dispatch)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        full = API_ROOT + path
        return [r for r in self.requests if r.method == method.upper() and r.url.path == full]

    def last_json(self, method: str, path: str) -> Any:
        return json.loads(self.calls(method, path)[-1].content)


def envelope(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


def card(card_id: str, starred: bool = False) -> dict[str, Any]:
    return {
        "_id": card_id,
        "question": f"Question {card_id}?",
        "answer": f"Answer {card_id}",
        "isStarred": starred,
    }


def flashcard_set(set_id: str, n_cards: int = 3, document_id: str = "doc1") -> dict[str, Any]:
    return {
        "_id": set_id,
        "documentId": document_id,
        "cards": [card(f"{set_id}-c{i}") for i in range(n_cards)],
        "createdAt": "2026-02-22T10:00:00Z",
    }


def quiz(quiz_id: str = "quiz1", n_questions: int = 3) -> dict[str, Any]:
    return {
        "_id": quiz_id,
        "documentId": "doc1",
        "title": "Chapter 1",
        "questions": [
            {"_id": f"q{i}", "question": f"Prompt {i}?", "options": ["A", "B", "C", "D"]}
            for i in range(n_questions)
        ],
    }


def document(doc_id: str, title: str | None = None) -> dict[str, Any]:
    return {"_id": doc_id, "title": title or f"Doc {doc_id}", "createdAt": "2026-02-20T09:00:00Z"}


@pytest.fixture
def test_settings() -> Settings:
    return Settings(api_base_url="http://api.test/api", request_timeout=5.0)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def session() -> SessionContext:
    return SessionContext()


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def bus() -> InvalidationBus:
    return InvalidationBus()


@pytest.fixture
async def client(test_settings, session, fake_api):
    api_client = ApiClient(test_settings, session, transport=fake_api.transport)
    yield api_client
    await api_client.aclose()


@pytest.fixture
async def workspace(test_settings, fake_api):
    ws = Workspace(test_settings, transport=fake_api.transport)
    yield ws
    await ws.aclose()
