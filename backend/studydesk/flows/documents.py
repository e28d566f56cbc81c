from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from studydesk.flows.collection import CollectionView
from studydesk.flows.confirm import ConfirmationModal
from studydesk.flows.forms import FormValidationError, UploadForm
from studydesk.models.document import Document, DocumentListSnapshot
from studydesk.services.gateway import DocumentResource, GatewayError
from studydesk.services.invalidation import InvalidationBus
from studydesk.services.notifications import Notifier
from studydesk.services.task_registry import ScopeClosedError

logger = logging.getLogger(__name__)


class DocumentLibrary:
    """My Documents: list, upload form, delete confirmation."""

    def __init__(
        self,
        resource: DocumentResource,
        bus: InvalidationBus,
        notifier: Notifier,
        on_deleted: Callable[[str], Awaitable[None]] | None = None,
    ) -> None:
        self.view: CollectionView[Document] = CollectionView(resource, bus, notifier, "documents")
        self.form = UploadForm()
        self.uploading = False
        self.delete_modal: ConfirmationModal[Document] = ConfirmationModal(
            "Delete Document?", "This action cannot be undone."
        )
        self._resource = resource
        self._bus = bus
        self._notifier = notifier
        self._on_deleted = on_deleted

    async def mount(self) -> None:
        await self.view.mount()

    async def upload(self, file_name: str | None = None, content: bytes | None = None, title: str | None = None) -> Document | None:
        if self.uploading:
            return None
        if file_name is not None and content is not None:
            self.form.choose_file(file_name, content)
        if title is not None:
            self.form.title = title
        try:
            title, file_name, content = self.form.validate()
        except FormValidationError as e:
            self._notifier.error(e.message)
            return None

        self.uploading = True
        try:
            result = await self.view.scope.call(self._resource.create(title, file_name, content))
        except ScopeClosedError:
            return None
        except GatewayError as e:
            logger.error("Upload of %s failed: %s", file_name, e.message)
            self._notifier.error("Upload failed.")
            return None
        finally:
            self.uploading = False

        self._notifier.success("Document uploaded successfully!")
        self.form.reset()
        await self._bus.publish(result.invalidates)
        return result.value

    def request_delete(self, doc_id: str) -> bool:
        doc = self.view.find(doc_id)
        if doc is None:
            return False
        self.delete_modal.request(doc)
        return True

    async def confirm_delete(self) -> bool:
        async def _delete(doc: Document) -> bool:
            removed = await self.view.remove(doc.id, on_removed=self._on_deleted)
            if removed:
                self._notifier.success(f"'{doc.title}' deleted.")
            return removed

        return await self.delete_modal.confirm(_delete)

    def snapshot(self) -> DocumentListSnapshot:
        target = self.delete_modal.target
        return DocumentListSnapshot(
            state=self.view.state,
            items=list(self.view.items),
            error=self.view.error,
            uploading=self.uploading,
            delete_modal=self.delete_modal.snapshot(target.id if target else None),
        )

    async def close(self) -> None:
        await self.view.close()
