"""Tests for the document library: upload form and delete confirmation."""

from __future__ import annotations

from conftest import document, envelope, flashcard_set, quiz
from studydesk.flows.documents import DocumentLibrary
from studydesk.models.common import NotificationLevel, ViewState
from studydesk.services.gateway import DocumentGateway, DocumentResource
from studydesk.services.invalidation import DASHBOARD


def _library(client, bus, notifier) -> DocumentLibrary:
    return DocumentLibrary(DocumentResource(DocumentGateway(client)), bus, notifier)


class TestUpload:
    async def test_missing_file_issues_no_call(self, client, bus, notifier, fake_api):
        fake_api.on("GET", "/documents", envelope([]))
        library = _library(client, bus, notifier)
        await library.mount()

        assert await library.upload(title="Notes") is None

        assert fake_api.calls("POST", "/documents/upload") == []
        assert notifier.last().message == "Please provide title and file."

    async def test_upload_refetches_list_and_resets_form(self, client, bus, notifier, fake_api):
        fake_api.on("GET", "/documents", envelope([]))
        library = _library(client, bus, notifier)
        await library.mount()

        fake_api.on("POST", "/documents/upload", envelope(document("new", "ch1")), status=201)
        fake_api.on("GET", "/documents", envelope([document("new", "ch1")]))
        created = await library.upload("ch1.pdf", b"%PDF-1.4")

        assert created.id == "new"
        request = fake_api.calls("POST", "/documents/upload")[0]
        assert b'name="title"' in request.content
        assert b"ch1" in request.content
        assert b'filename="ch1.pdf"' in request.content
        assert library.view.state is ViewState.LOADED
        assert library.form.file_name is None
        assert notifier.last().message == "Document uploaded successfully!"

    async def test_failed_upload_keeps_form(self, client, bus, notifier, fake_api):
        fake_api.on("GET", "/documents", envelope([]))
        fake_api.fail("POST", "/documents/upload")
        library = _library(client, bus, notifier)
        await library.mount()

        assert await library.upload("ch1.pdf", b"%PDF", title="Chapter 1") is None

        assert library.form.file_name == "ch1.pdf"
        assert library.form.title == "Chapter 1"
        assert not library.uploading
        assert notifier.last().message == "Upload failed."


class TestDelete:
    async def test_confirmed_delete(self, client, bus, notifier, fake_api):
        fake_api.on("GET", "/documents", envelope([document("A", "Bio"), document("B")]))
        fake_api.on("DELETE", "/documents/A", status=204)
        refetched = []

        async def refetch():
            refetched.append(True)

        bus.subscribe(DASHBOARD, object(), refetch)
        library = _library(client, bus, notifier)
        await library.mount()

        assert library.request_delete("A")
        assert library.snapshot().delete_modal.target_id == "A"
        assert await library.confirm_delete() is True

        assert [d.id for d in library.view.items] == ["B"]
        assert notifier.last().message == "'Bio' deleted."
        assert not library.snapshot().delete_modal.open
        assert refetched == [True]

    async def test_unknown_document_opens_nothing(self, client, bus, notifier, fake_api):
        fake_api.on("GET", "/documents", envelope([document("A")]))
        library = _library(client, bus, notifier)
        await library.mount()
        assert library.request_delete("missing") is False
        assert not library.delete_modal.open

    async def test_failed_delete_closes_modal_and_keeps_item(self, client, bus, notifier, fake_api):
        fake_api.on("GET", "/documents", envelope([document("A")]))
        fake_api.fail("DELETE", "/documents/A")
        library = _library(client, bus, notifier)
        await library.mount()

        library.request_delete("A")
        assert await library.confirm_delete() is False

        assert [d.id for d in library.view.items] == ["A"]
        assert not library.delete_modal.open


class TestDeleteTearsDownDependentViews:
    async def test_views_of_deleted_document_are_closed(self, workspace, fake_api):
        fake_api.on("GET", "/documents", envelope([document("doc1"), document("doc2")]))
        fake_api.on("DELETE", "/documents/doc1", status=204)
        fake_api.on("GET", "/flashcards/doc1", envelope([flashcard_set("s1")]))
        fake_api.on("GET", "/flashcards/doc2", envelope([flashcard_set("s2", document_id="doc2")]))
        fake_api.on("GET", "/quizzes/doc1", envelope([quiz("quiz1")]))
        fake_api.on("GET", "/quizzes/quiz/quiz1", envelope(quiz("quiz1")))
        fake_api.on("GET", "/ai/chat-history/doc1", envelope([]))

        library = await workspace.document_library()
        cards = await workspace.flashcard_manager("doc1")
        study = await cards.open_set("s1")
        await workspace.flashcard_manager("doc2")
        await workspace.quiz_manager("doc1")
        await workspace.quiz_take("quiz1")
        await workspace.chat("doc1")
        await workspace.ai_actions("doc1")

        library.request_delete("doc1")
        assert await library.confirm_delete() is True

        assert workspace.open_views == ["documents", "flashcards:doc2"]
        assert cards.study is None
        assert study.current is None
        assert study.snapshot().total == 0
        # Closed before the invalidation fan-out, so no refetch of the dead collections
        assert len(fake_api.calls("GET", "/flashcards/doc1")) == 1
        assert len(fake_api.calls("GET", "/quizzes/doc1")) == 1
        assert all(n.level is not NotificationLevel.ERROR for n in workspace.notifier.items())

    async def test_failed_delete_keeps_dependent_views(self, workspace, fake_api):
        fake_api.on("GET", "/documents", envelope([document("doc1")]))
        fake_api.fail("DELETE", "/documents/doc1")
        fake_api.on("GET", "/flashcards/doc1", envelope([]))

        library = await workspace.document_library()
        await workspace.flashcard_manager("doc1")
        library.request_delete("doc1")
        await library.confirm_delete()

        assert workspace.open_views == ["documents", "flashcards:doc1"]
