from __future__ import annotations

import itertools
from collections import deque

from studydesk.models.common import Notification, NotificationLevel


class Notifier:
    """Transient, dismissible user notifications (the toast queue).

    Oldest entries are dropped once ``limit`` is exceeded.
    """

    def __init__(self, limit: int = 20) -> None:
        self._items: deque[Notification] = deque(maxlen=limit)
        self._ids = itertools.count(1)

    def push(self, level: NotificationLevel, message: str) -> Notification:
        note = Notification(id=next(self._ids), level=level, message=message)
        self._items.append(note)
        return note

    def success(self, message: str) -> Notification:
        return self.push(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.push(NotificationLevel.ERROR, message)

    def info(self, message: str) -> Notification:
        return self.push(NotificationLevel.INFO, message)

    def dismiss(self, note_id: int) -> bool:
        for note in self._items:
            if note.id == note_id:
                self._items.remove(note)
                return True
        return False

    def clear(self) -> None:
        self._items.clear()

    def items(self) -> list[Notification]:
        return list(self._items)

    def last(self) -> Notification | None:
        return self._items[-1] if self._items else None
