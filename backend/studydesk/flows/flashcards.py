from __future__ import annotations

from studydesk.flows.collection import CollectionView
from studydesk.flows.confirm import ConfirmationModal
from studydesk.flows.generation import GenerationTrigger
from studydesk.flows.study import FlashcardStudy
from studydesk.models.flashcard import FlashcardSet, FlashcardSetsSnapshot
from studydesk.services.gateway import FlashcardGateway, FlashcardSetResource
from studydesk.services.invalidation import InvalidationBus
from studydesk.services.notifications import Notifier


class FlashcardManager:
    """Flashcard sets of one document, plus the set being studied."""

    def __init__(
        self,
        resource: FlashcardSetResource,
        gateway: FlashcardGateway,
        bus: InvalidationBus,
        notifier: Notifier,
        rollback_star_on_failure: bool = True,
    ) -> None:
        self.document_id = resource.document_id
        self.view: CollectionView[FlashcardSet] = CollectionView(
            resource, bus, notifier, "flashcard sets"
        )
        self.trigger = GenerationTrigger(
            resource.generate, bus, notifier, self.view.scope, "flashcards"
        )
        self.delete_modal: ConfirmationModal[FlashcardSet] = ConfirmationModal(
            "Delete Set?",
            "This action cannot be undone. All cards will be permanently removed.",
        )
        self.study: FlashcardStudy | None = None
        self._gateway = gateway
        self._notifier = notifier
        self._rollback = rollback_star_on_failure

    async def mount(self) -> None:
        await self.view.mount()

    async def generate(self, count: int | None = None) -> bool:
        result = await self.trigger.fire(count=count)
        return result is not None

    async def open_set(self, set_id: str) -> FlashcardStudy | None:
        flashcard_set = self.view.select(set_id)
        if flashcard_set is None:
            return None
        await self.close_set()
        self.study = FlashcardStudy(
            flashcard_set,
            self._gateway,
            self._notifier,
            rollback_star_on_failure=self._rollback,
        )
        return self.study

    async def close_set(self) -> None:
        if self.study is not None:
            study, self.study = self.study, None
            await study.close()

    def request_delete(self, set_id: str) -> bool:
        flashcard_set = self.view.find(set_id)
        if flashcard_set is None:
            return False
        self.delete_modal.request(flashcard_set)
        return True

    async def confirm_delete(self) -> bool:
        async def _delete(flashcard_set: FlashcardSet) -> bool:
            removed = await self.view.remove(flashcard_set.id)
            if removed:
                self._notifier.success("Set deleted!")
                if self.study is not None and self.study.set_id == flashcard_set.id:
                    self.study.invalidate()
                    await self.close_set()
            return removed

        return await self.delete_modal.confirm(_delete)

    def snapshot(self) -> FlashcardSetsSnapshot:
        target = self.delete_modal.target
        return FlashcardSetsSnapshot(
            state=self.view.state,
            items=list(self.view.items),
            error=self.view.error,
            generating=self.trigger.disabled,
            delete_modal=self.delete_modal.snapshot(target.id if target else None),
            study=self.study.snapshot() if self.study else None,
        )

    async def close(self) -> None:
        if self.study is not None:
            self.study.invalidate()
        await self.close_set()
        await self.view.close()
