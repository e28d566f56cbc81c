"""
Item Study/Take flows.

ItemCursor is the index bookkeeping shared by both flows: exactly one item is
current, and advance/retreat wrap around. FlashcardStudy adds the flip state,
review tracking and the optimistic star toggle; QuizTake adds answer
selection and the one-shot submit.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from studydesk.models.flashcard import (
    CardView,
    Flashcard,
    FlashcardSet,
    FlashcardStudySnapshot,
)
from studydesk.models.quiz import (
    Question,
    Quiz,
    QuizAnswer,
    QuizPhase,
    QuizTakeSnapshot,
)
from studydesk.services.gateway import FlashcardGateway, GatewayError, QuizGateway
from studydesk.services.invalidation import InvalidationBus
from studydesk.services.notifications import Notifier
from studydesk.services.task_registry import ScopeClosedError, TaskScope

logger = logging.getLogger(__name__)


class ItemCursor:
    def __init__(self, length: int, on_move: Callable[[int], None] | None = None) -> None:
        self.length = length
        self.current_index = 0
        self._on_move = on_move

    def _move_to(self, index: int) -> None:
        if index != self.current_index:
            self.current_index = index
            if self._on_move is not None:
                self._on_move(index)

    def advance(self) -> None:
        if self.length <= 1:
            return
        self._move_to((self.current_index + 1) % self.length)

    def retreat(self) -> None:
        if self.length <= 1:
            return
        self._move_to((self.current_index - 1 + self.length) % self.length)

    def jump_to(self, index: int) -> bool:
        """Move to *index*; out-of-range indexes are ignored."""
        if not 0 <= index < self.length:
            return False
        self._move_to(index)
        return True

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index == max(self.length - 1, 0)


# --- Flashcards ---


@dataclass
class StarState:
    value: bool
    pending: int = 0  # unconfirmed remote toggles

    @property
    def confirmed(self) -> bool:
        return self.pending == 0


@dataclass
class CardState:
    star: StarState
    reviewed: bool = False


class FlashcardStudy:
    def __init__(
        self,
        flashcard_set: FlashcardSet,
        gateway: FlashcardGateway,
        notifier: Notifier,
        rollback_star_on_failure: bool = True,
        scope: TaskScope | None = None,
    ) -> None:
        self.set_id = flashcard_set.id
        self.cards: list[Flashcard] = list(flashcard_set.cards)
        self.revealed = False
        self.rollback_star_on_failure = rollback_star_on_failure
        self._gateway = gateway
        self._notifier = notifier
        self._scope = scope or TaskScope(f"study-{flashcard_set.id}")
        self._states: dict[str, CardState] = {
            card.id: CardState(star=StarState(card.is_starred)) for card in self.cards
        }
        self.cursor = ItemCursor(len(self.cards), on_move=self._on_move)

    def _on_move(self, _index: int) -> None:
        # A card always shows its question side when navigated to
        self.revealed = False

    @property
    def current(self) -> Flashcard | None:
        if not self.cards:
            return None
        return self.cards[self.cursor.current_index]

    def flip(self) -> bool:
        if self.current is not None:
            self.revealed = not self.revealed
        return self.revealed

    def is_starred(self, card_id: str) -> bool:
        state = self._states.get(card_id)
        return state.star.value if state else False

    def is_reviewed(self, card_id: str) -> bool:
        state = self._states.get(card_id)
        return state.reviewed if state else False

    async def review_current(self) -> None:
        """Best-effort: a failed review is reported, never blocks navigation."""
        card = self.current
        if card is None:
            return
        index = self.cursor.current_index
        try:
            await self._scope.call(self._gateway.review(card.id, index))
        except ScopeClosedError:
            return
        except GatewayError as e:
            logger.warning("Review failed for card %s: %s", card.id, e.message)
            self._notifier.error("Failed to review flashcard.")
            return
        self._states[card.id].reviewed = True

    async def next(self) -> None:
        await self.review_current()
        self.cursor.advance()

    async def previous(self) -> None:
        await self.review_current()
        self.cursor.retreat()

    def jump_to(self, index: int) -> bool:
        return self.cursor.jump_to(index)

    async def toggle_star(self, card_id: str) -> bool | None:
        """Flip the star immediately, then confirm it remotely.

        Returns the visible value after the call resolves, or None for an
        unknown card.
        """
        state = self._states.get(card_id)
        if state is None:
            return None
        state.star.value = not state.star.value
        state.star.pending += 1
        try:
            await self._scope.call(self._gateway.toggle_star(card_id))
        except ScopeClosedError:
            return None
        except GatewayError as e:
            state.star.pending -= 1
            logger.warning("Star toggle failed for card %s: %s", card_id, e.message)
            self._notifier.error("Failed to update star status.")
            if self.rollback_star_on_failure:
                state.star.value = not state.star.value
            return state.star.value
        state.star.pending -= 1
        self._notifier.success("Flashcard starred status updated!")
        return state.star.value

    def invalidate(self) -> None:
        """Drop all card state; the parent set was deleted."""
        self.cards = []
        self._states.clear()
        self.revealed = False
        self.cursor = ItemCursor(0, on_move=self._on_move)

    def snapshot(self) -> FlashcardStudySnapshot:
        card = self.current
        current = None
        if card is not None:
            state = self._states[card.id]
            current = CardView(
                card=card,
                starred=state.star.value,
                star_pending=not state.star.confirmed,
                reviewed=state.reviewed,
            )
        return FlashcardStudySnapshot(
            set_id=self.set_id,
            current_index=self.cursor.current_index,
            total=len(self.cards),
            revealed=self.revealed,
            current=current,
        )

    async def close(self) -> None:
        await self._scope.close()


# --- Quizzes ---


class QuizTake:
    def __init__(
        self,
        quiz: Quiz,
        gateway: QuizGateway,
        notifier: Notifier,
        bus: InvalidationBus | None = None,
        scope: TaskScope | None = None,
    ) -> None:
        self.quiz = quiz
        self.questions: list[Question] = list(quiz.questions)
        self.selected: dict[str, int] = {}
        self.phase = QuizPhase.ANSWERING
        self.submitting = False
        self.result: Quiz | None = None
        self._gateway = gateway
        self._notifier = notifier
        self._bus = bus
        self._scope = scope or TaskScope(f"quiz-{quiz.id}")
        self._positions = {q.id: i for i, q in enumerate(self.questions)}
        self.cursor = ItemCursor(len(self.questions))

    @property
    def current(self) -> Question | None:
        if not self.questions:
            return None
        return self.questions[self.cursor.current_index]

    @property
    def answered_count(self) -> int:
        return len(self.selected)

    @property
    def progress_percent(self) -> float:
        if not self.questions:
            return 0.0
        return (self.cursor.current_index + 1) / len(self.questions) * 100

    def is_answered(self, question_id: str) -> bool:
        return question_id in self.selected

    def record_answer(self, question_id: str, option_index: int) -> bool:
        """Last write wins. Rejected once results are showing or while submitting."""
        if self.phase is not QuizPhase.ANSWERING or self.submitting:
            return False
        position = self._positions.get(question_id)
        if position is None:
            return False
        if not 0 <= option_index < len(self.questions[position].options):
            return False
        self.selected[question_id] = option_index
        return True

    def build_answers(self) -> list[QuizAnswer]:
        answers = []
        for position, question in enumerate(self.questions):
            if question.id not in self.selected:
                continue
            answers.append(
                QuizAnswer(
                    question_index=position,
                    selected_answer=question.options[self.selected[question.id]],
                )
            )
        return answers

    async def submit(self) -> bool:
        if self.phase is not QuizPhase.ANSWERING or self.submitting:
            return False
        self.submitting = True
        try:
            result = await self._scope.call(
                self._gateway.submit(self.quiz.id, self.build_answers())
            )
        except ScopeClosedError:
            return False
        except GatewayError as e:
            logger.error("Submitting quiz %s failed: %s", self.quiz.id, e.message)
            self._notifier.error(e.message or "Failed to submit quiz.")
            return False
        finally:
            self.submitting = False

        self.phase = QuizPhase.RESULTS
        self.result = result.value
        self._notifier.success("Quiz submitted successfully!")
        if self._bus is not None:
            await self._bus.publish(result.invalidates)
        return True

    async def load_results(self) -> Quiz | None:
        if self.phase is not QuizPhase.RESULTS:
            return None
        try:
            self.result = await self._scope.call(self._gateway.results(self.quiz.id))
        except ScopeClosedError:
            return None
        except GatewayError as e:
            logger.error("Fetching results for quiz %s failed: %s", self.quiz.id, e.message)
            self._notifier.error("Failed to fetch quiz results.")
        return self.result

    def snapshot(self) -> QuizTakeSnapshot:
        return QuizTakeSnapshot(
            quiz_id=self.quiz.id,
            title=self.quiz.title or "Take Quiz",
            phase=self.phase,
            current_index=self.cursor.current_index,
            total=len(self.questions),
            current=self.current,
            selected=dict(self.selected),
            answered_count=self.answered_count,
            progress_percent=round(self.progress_percent, 1),
            submitting=self.submitting,
            score=self.result.score if self.result else None,
        )

    async def close(self) -> None:
        await self._scope.close()
