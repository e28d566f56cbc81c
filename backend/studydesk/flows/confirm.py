from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from studydesk.models.common import ModalSnapshot

T = TypeVar("T")


class ConfirmationModal(Generic[T]):
    """Yes/no gate in front of a destructive action.

    The action itself belongs to the caller. The modal only tracks the
    target, disables confirm while the action runs, and closes once it
    resolves either way.
    """

    def __init__(self, title: str, message: str) -> None:
        self.title = title
        self.message = message
        self.open = False
        self.busy = False
        self.target: T | None = None

    def request(self, target: T) -> None:
        if self.busy:
            return
        self.target = target
        self.open = True

    def cancel(self) -> None:
        if self.busy:
            return
        self.open = False
        self.target = None

    async def confirm(self, action: Callable[[T], Awaitable[bool]]) -> bool:
        if not self.open or self.busy or self.target is None:
            return False
        self.busy = True
        try:
            return await action(self.target)
        finally:
            self.busy = False
            self.open = False
            self.target = None

    def snapshot(self, target_id: str | None = None) -> ModalSnapshot:
        return ModalSnapshot(
            open=self.open,
            title=self.title,
            message=self.message,
            target_id=target_id,
            busy=self.busy,
        )
