from __future__ import annotations

import logging

from studydesk.flows.forms import FormValidationError, validate_concept
from studydesk.models.ai import AIActionsSnapshot
from studydesk.services.gateway import AIGateway, GatewayError
from studydesk.services.notifications import Notifier
from studydesk.services.task_registry import ScopeClosedError, TaskScope

logger = logging.getLogger(__name__)

SUMMARY = "summary"
EXPLAIN = "explain"


class AIActions:
    """Summary and concept explanation for one document.

    One action runs at a time; its markdown result opens the result modal.
    """

    def __init__(self, document_id: str, gateway: AIGateway, notifier: Notifier) -> None:
        self.document_id = document_id
        self.loading_action: str | None = None
        self.concept = ""
        self.modal_open = False
        self.modal_title = ""
        self.modal_content = ""
        self._gateway = gateway
        self._notifier = notifier
        self._scope = TaskScope(f"ai-{document_id}")

    def _show(self, title: str, content: str) -> None:
        self.modal_title = title
        self.modal_content = content
        self.modal_open = True

    async def summarize(self) -> bool:
        if self.loading_action is not None:
            return False
        self.loading_action = SUMMARY
        try:
            summary = await self._scope.call(self._gateway.generate_summary(self.document_id))
        except ScopeClosedError:
            return False
        except GatewayError as e:
            logger.error("Summary for %s failed: %s", self.document_id, e.message)
            self._notifier.error("Failed to generate summary.")
            return False
        finally:
            self.loading_action = None
        self._show("Generated Summary", summary)
        return True

    async def explain(self, concept: str | None = None) -> bool:
        if self.loading_action is not None:
            return False
        if concept is not None:
            self.concept = concept
        try:
            concept = validate_concept(self.concept)
        except FormValidationError as e:
            self._notifier.error(e.message)
            return False
        self.loading_action = EXPLAIN
        try:
            explanation = await self._scope.call(
                self._gateway.explain_concept(self.document_id, concept)
            )
        except ScopeClosedError:
            return False
        except GatewayError as e:
            logger.error("Explaining %r for %s failed: %s", concept, self.document_id, e.message)
            self._notifier.error("Failed to explain concept.")
            return False
        finally:
            self.loading_action = None
        self._show(f'Explanation of "{concept}"', explanation)
        self.concept = ""
        return True

    def close_modal(self) -> None:
        self.modal_open = False

    def snapshot(self) -> AIActionsSnapshot:
        return AIActionsSnapshot(
            document_id=self.document_id,
            loading_action=self.loading_action,
            concept=self.concept,
            modal_open=self.modal_open,
            modal_title=self.modal_title,
            modal_content=self.modal_content,
        )

    async def close(self) -> None:
        await self._scope.close()
