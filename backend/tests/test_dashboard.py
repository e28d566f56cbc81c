"""Tests for the progress dashboard and its activity feed."""

from __future__ import annotations

from conftest import envelope
from studydesk.flows.dashboard import Dashboard, merge_activity
from studydesk.models.common import ViewState
from studydesk.models.dashboard import DashboardData
from studydesk.services.gateway import ProgressGateway
from studydesk.services.invalidation import DASHBOARD

PAYLOAD = {
    "overview": {"totalDocuments": 2, "totalQuizzes": 1, "averageScore": 80},
    "recentActivity": {
        "documents": [
            {"_id": "d1", "title": "Biology", "lastAccessed": "2026-03-01T10:00:00Z"},
            {"_id": "d2", "title": "Chemistry"},
        ],
        "quizzes": [
            {"_id": "q1", "title": "Cells", "lastAttempted": "2026-03-02T08:00:00Z"},
        ],
    },
}


class TestMergeActivity:
    def test_newest_first_and_missing_timestamps_last(self):
        entries = merge_activity(DashboardData.model_validate(PAYLOAD))
        assert [(e.type, e.id) for e in entries] == [
            ("quiz", "q1"),
            ("document", "d1"),
            ("document", "d2"),
        ]
        assert entries[0].link == "/quizzes/q1"
        assert entries[1].description == "Biology"

    def test_no_activity(self):
        assert merge_activity(DashboardData()) == []


class TestDashboard:
    async def test_mount_loads_overview(self, client, bus, notifier, fake_api):
        fake_api.on("GET", "/progress/dashboard", envelope(PAYLOAD))
        dashboard = Dashboard(ProgressGateway(client), bus, notifier)

        await dashboard.mount()

        snap = dashboard.snapshot()
        assert snap.state is ViewState.LOADED
        assert snap.overview.total_documents == 2
        assert len(snap.activities) == 3
        assert bus.subscribers(DASHBOARD) == 1

    async def test_failure_is_error_state(self, client, bus, notifier, fake_api):
        fake_api.fail("GET", "/progress/dashboard")
        dashboard = Dashboard(ProgressGateway(client), bus, notifier)

        await dashboard.mount()

        assert dashboard.state is ViewState.ERROR
        assert notifier.last().message == "Failed to fetch dashboard data."

    async def test_refetches_on_invalidation(self, client, bus, notifier, fake_api):
        fake_api.on("GET", "/progress/dashboard", envelope(PAYLOAD))
        dashboard = Dashboard(ProgressGateway(client), bus, notifier)
        await dashboard.mount()

        await bus.publish({DASHBOARD})

        assert len(fake_api.calls("GET", "/progress/dashboard")) == 2
        await dashboard.close()
        assert bus.subscribers(DASHBOARD) == 0
