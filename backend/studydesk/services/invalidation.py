"""
Explicit cache invalidation between views.

Mutating gateway calls declare the collection keys they invalidate; views
subscribe to the key of the collection they display and get refetched when a
mutation names it.

Keys:
  documents                    the document list
  flashcard-sets:<documentId>  flashcard sets of one document
  quizzes:<documentId>         quizzes of one document
  dashboard                    dashboard overview
"""
from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable

logger = logging.getLogger(__name__)

Refetch = Callable[[], Awaitable[None]]

DOCUMENTS = "documents"
DASHBOARD = "dashboard"


def flashcard_sets_key(document_id: str) -> str:
    return f"flashcard-sets:{document_id}"


def quizzes_key(document_id: str) -> str:
    return f"quizzes:{document_id}"


class InvalidationBus:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[tuple[object, Refetch]]] = defaultdict(list)

    def subscribe(self, key: str, owner: object, refetch: Refetch) -> None:
        self._subscribers[key].append((owner, refetch))

    def unsubscribe(self, owner: object) -> None:
        for key in list(self._subscribers):
            remaining = [(o, r) for o, r in self._subscribers[key] if o is not owner]
            if remaining:
                self._subscribers[key] = remaining
            else:
                del self._subscribers[key]

    def subscribers(self, key: str) -> int:
        return len(self._subscribers.get(key, ()))

    async def publish(self, keys: Iterable[str], origin: object | None = None) -> int:
        """Refetch every view subscribed to one of *keys*, except *origin*.

        Each subscriber is refetched at most once. Returns how many ran.
        """
        seen: set[int] = set()
        pending: list[Awaitable[None]] = []
        for key in keys:
            for owner, refetch in self._subscribers.get(key, ()):
                if owner is origin or id(owner) in seen:
                    continue
                seen.add(id(owner))
                pending.append(refetch())
        if not pending:
            return 0
        results = await asyncio.gather(*pending, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.warning("Refetch after invalidation failed: %s", result)
        return len(pending)
