from __future__ import annotations

from typing import Any

from studydesk.flows.collection import CollectionView
from studydesk.flows.confirm import ConfirmationModal
from studydesk.flows.forms import validate_question_count
from studydesk.flows.generation import GenerationTrigger
from studydesk.models.quiz import Quiz, QuizzesSnapshot
from studydesk.services.gateway import QuizResource
from studydesk.services.invalidation import InvalidationBus
from studydesk.services.notifications import Notifier


class QuizManager:
    def __init__(
        self,
        resource: QuizResource,
        bus: InvalidationBus,
        notifier: Notifier,
        default_questions: int = 5,
    ) -> None:
        self.document_id = resource.document_id
        self.default_questions = default_questions
        self.view: CollectionView[Quiz] = CollectionView(resource, bus, notifier, "quizzes")
        self.trigger = GenerationTrigger(
            resource.generate,
            bus,
            notifier,
            self.view.scope,
            "quiz",
            validate=self._validate_options,
        )
        self.delete_modal: ConfirmationModal[Quiz] = ConfirmationModal(
            "Delete Quiz?", "This action cannot be undone. All results will be lost."
        )
        self._notifier = notifier

    def _validate_options(self, num_questions: Any = None, title: str | None = None) -> dict[str, Any]:
        if num_questions is None:
            num_questions = self.default_questions
        return {"num_questions": validate_question_count(num_questions), "title": title}

    async def mount(self) -> None:
        await self.view.mount()

    async def generate(self, num_questions: Any = None, title: str | None = None) -> bool:
        result = await self.trigger.fire(num_questions=num_questions, title=title)
        return result is not None

    def request_delete(self, quiz_id: str) -> bool:
        quiz = self.view.find(quiz_id)
        if quiz is None:
            return False
        self.delete_modal.request(quiz)
        return True

    async def confirm_delete(self) -> bool:
        async def _delete(quiz: Quiz) -> bool:
            removed = await self.view.remove(quiz.id)
            if removed:
                self._notifier.success("Quiz deleted.")
            return removed

        return await self.delete_modal.confirm(_delete)

    def snapshot(self) -> QuizzesSnapshot:
        target = self.delete_modal.target
        return QuizzesSnapshot(
            state=self.view.state,
            items=list(self.view.items),
            error=self.view.error,
            generating=self.trigger.disabled,
            delete_modal=self.delete_modal.snapshot(target.id if target else None),
        )

    async def close(self) -> None:
        await self.view.close()
