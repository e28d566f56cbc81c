from __future__ import annotations

import logging
from datetime import datetime, timezone

from studydesk.models.common import ViewState
from studydesk.models.dashboard import ActivityEntry, DashboardData, DashboardSnapshot
from studydesk.services.gateway import GatewayError, ProgressGateway
from studydesk.services.invalidation import DASHBOARD, InvalidationBus
from studydesk.services.notifications import Notifier
from studydesk.services.task_registry import ScopeClosedError, TaskScope

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(entry: ActivityEntry) -> datetime:
    ts = entry.timestamp
    if ts is None:
        return _OLDEST
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def merge_activity(data: DashboardData) -> list[ActivityEntry]:
    """Recent documents and quiz attempts as one feed, newest first."""
    entries = [
        ActivityEntry(
            id=doc.id,
            type="document",
            description=doc.title,
            timestamp=doc.last_accessed,
            link=f"/documents/{doc.id}",
        )
        for doc in data.recent_activity.documents
    ]
    entries += [
        ActivityEntry(
            id=quiz.id,
            type="quiz",
            description=quiz.title,
            timestamp=quiz.last_attempted,
            link=f"/quizzes/{quiz.id}",
        )
        for quiz in data.recent_activity.quizzes
    ]
    return sorted(entries, key=_sort_key, reverse=True)


class Dashboard:
    def __init__(self, gateway: ProgressGateway, bus: InvalidationBus, notifier: Notifier) -> None:
        self.state = ViewState.LOADING
        self.data: DashboardData | None = None
        self.activities: list[ActivityEntry] = []
        self._gateway = gateway
        self._bus = bus
        self._notifier = notifier
        self._scope = TaskScope("dashboard")
        self._mounted = False

    async def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        self._bus.subscribe(DASHBOARD, self, self.refresh)
        await self.refresh()

    async def refresh(self) -> None:
        self.state = ViewState.LOADING
        try:
            data = await self._scope.call(self._gateway.dashboard())
        except ScopeClosedError:
            return
        except GatewayError as e:
            logger.error("Fetching dashboard failed: %s", e.message)
            self._notifier.error("Failed to fetch dashboard data.")
            self.state = ViewState.ERROR
            return
        self.data = data
        self.activities = merge_activity(data)
        self.state = ViewState.LOADED if data.overview is not None else ViewState.EMPTY

    def snapshot(self) -> DashboardSnapshot:
        return DashboardSnapshot(
            state=self.state,
            overview=self.data.overview if self.data else None,
            activities=list(self.activities),
        )

    async def close(self) -> None:
        self._bus.unsubscribe(self)
        await self._scope.close()
