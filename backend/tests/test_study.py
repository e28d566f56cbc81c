"""Tests for index traversal and the flashcard study flow."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import envelope, flashcard_set
from studydesk.flows.study import FlashcardStudy, ItemCursor
from studydesk.models.common import NotificationLevel
from studydesk.models.flashcard import FlashcardSet
from studydesk.services.gateway import FlashcardGateway


class TestItemCursor:
    @pytest.mark.parametrize("length", [1, 2, 5])
    def test_advance_length_times_returns_to_start(self, length):
        cursor = ItemCursor(length)
        cursor.jump_to(length - 1)
        start = cursor.current_index
        for _ in range(length):
            cursor.advance()
        assert cursor.current_index == start

    def test_advance_wraps_last_to_first(self):
        cursor = ItemCursor(3)
        cursor.jump_to(2)
        cursor.advance()
        assert cursor.current_index == 0

    def test_retreat_wraps_first_to_last(self):
        cursor = ItemCursor(3)
        cursor.retreat()
        assert cursor.current_index == 2

    @pytest.mark.parametrize("start", [0, 1, 3])
    def test_retreat_then_advance_is_identity(self, start):
        cursor = ItemCursor(4)
        cursor.jump_to(start)
        cursor.retreat()
        cursor.advance()
        assert cursor.current_index == start
        cursor.advance()
        cursor.retreat()
        assert cursor.current_index == start

    def test_single_item_navigation_is_noop(self):
        moves = []
        cursor = ItemCursor(1, on_move=moves.append)
        cursor.advance()
        cursor.retreat()
        assert cursor.current_index == 0
        assert moves == []

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_jump_out_of_range_is_ignored(self, index):
        cursor = ItemCursor(3)
        cursor.jump_to(1)
        assert cursor.jump_to(index) is False
        assert cursor.current_index == 1

    def test_empty_cursor_stays_at_zero(self):
        cursor = ItemCursor(0)
        cursor.advance()
        cursor.retreat()
        assert cursor.jump_to(0) is False
        assert cursor.current_index == 0


def _study(client, notifier, n_cards=3, rollback=True) -> FlashcardStudy:
    flashcard_set_model = FlashcardSet.model_validate(flashcard_set("s1", n_cards))
    return FlashcardStudy(
        flashcard_set_model,
        FlashcardGateway(client),
        notifier,
        rollback_star_on_failure=rollback,
    )


class TestReveal:
    async def test_navigation_resets_revealed(self, client, notifier, fake_api):
        for i in range(3):
            fake_api.on("POST", f"/flashcards/s1-c{i}/review", envelope({}))
        study = _study(client, notifier)

        study.flip()
        assert study.revealed
        await study.next()
        assert not study.revealed

        study.flip()
        await study.previous()
        assert not study.revealed

        study.flip()
        study.jump_to(2)
        assert not study.revealed

    async def test_jump_to_same_index_keeps_revealed(self, client, notifier):
        study = _study(client, notifier)
        study.flip()
        study.jump_to(0)
        assert study.revealed


class TestReview:
    async def test_next_reviews_current_card_then_moves(self, client, notifier, fake_api):
        fake_api.on("POST", "/flashcards/s1-c0/review", envelope({}))
        study = _study(client, notifier)

        await study.next()

        assert fake_api.last_json("POST", "/flashcards/s1-c0/review") == {"cardIndex": 0}
        assert study.is_reviewed("s1-c0")
        assert study.cursor.current_index == 1

    async def test_failed_review_still_navigates(self, client, notifier, fake_api):
        fake_api.fail("POST", "/flashcards/s1-c0/review")
        study = _study(client, notifier)

        await study.next()

        assert study.cursor.current_index == 1
        assert not study.is_reviewed("s1-c0")
        assert notifier.last().message == "Failed to review flashcard."


class TestStar:
    async def test_toggle_confirmed(self, client, notifier, fake_api):
        fake_api.on("PUT", "/flashcards/s1-c1/star", envelope({}))
        study = _study(client, notifier)

        assert await study.toggle_star("s1-c1") is True

        assert study.is_starred("s1-c1")
        assert not study.is_starred("s1-c0")
        assert not study.is_starred("s1-c2")
        assert notifier.last().level is NotificationLevel.SUCCESS

    async def test_failure_rolls_back_by_default(self, client, notifier, fake_api):
        fake_api.fail("PUT", "/flashcards/s1-c1/star")
        study = _study(client, notifier)

        assert await study.toggle_star("s1-c1") is False

        assert not study.is_starred("s1-c1")
        assert notifier.last().message == "Failed to update star status."

    async def test_failure_without_rollback_keeps_optimistic_value(self, client, notifier, fake_api):
        fake_api.fail("PUT", "/flashcards/s1-c1/star")
        study = _study(client, notifier, rollback=False)

        assert await study.toggle_star("s1-c1") is True
        assert study.is_starred("s1-c1")

    async def test_unknown_card(self, client, notifier):
        study = _study(client, notifier)
        assert await study.toggle_star("nope") is None

    async def test_snapshot_shows_pending_star_while_in_flight(self, client, notifier, fake_api):
        release = asyncio.Event()

        async def slow(_request):
            await release.wait()
            return httpx.Response(200, json=envelope({}))

        fake_api.on("PUT", "/flashcards/s1-c0/star", handler=slow)
        study = _study(client, notifier)
        toggling = asyncio.create_task(study.toggle_star("s1-c0"))
        await asyncio.sleep(0.01)

        snap = study.snapshot()
        assert snap.current.starred is True
        assert snap.current.star_pending is True

        release.set()
        await toggling
        assert study.snapshot().current.star_pending is False


class TestInvalidate:
    async def test_parent_deletion_drops_item_state(self, client, notifier):
        study = _study(client, notifier)
        study.jump_to(2)
        study.flip()

        study.invalidate()

        assert study.current is None
        assert study.cursor.current_index == 0
        assert not study.revealed
        assert not study.is_starred("s1-c0")
        assert study.snapshot().total == 0
