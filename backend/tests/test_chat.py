"""Tests for the append-only conversational thread."""

from __future__ import annotations

import asyncio

import httpx

from conftest import envelope
from studydesk.flows.chat import FALLBACK_REPLY, ConversationThread
from studydesk.models.chat import ChatRole
from studydesk.services.gateway import AIGateway


class TestSend:
    async def test_reply_is_appended_after_user_message(self, client, fake_api):
        fake_api.on("POST", "/ai/chat", envelope({"answer": "Hello!"}))
        thread = ConversationThread("doc1", AIGateway(client))

        await thread.send("hi")

        assert [(m.role, m.content) for m in thread.messages] == [
            (ChatRole.USER, "hi"),
            (ChatRole.ASSISTANT, "Hello!"),
        ]
        assert fake_api.last_json("POST", "/ai/chat") == {"documentId": "doc1", "question": "hi"}

    async def test_failure_appends_one_fallback_reply(self, client, fake_api):
        fake_api.fail("POST", "/ai/chat")
        thread = ConversationThread("doc1", AIGateway(client))

        reply = await thread.send("hi")

        assert reply.content == FALLBACK_REPLY
        assert [(m.role, m.content) for m in thread.messages] == [
            (ChatRole.USER, "hi"),
            (ChatRole.ASSISTANT, FALLBACK_REPLY),
        ]
        assert len(fake_api.calls("POST", "/ai/chat")) == 1
        assert not thread.awaiting_response

    async def test_blank_message_is_ignored(self, client, fake_api):
        thread = ConversationThread("doc1", AIGateway(client))
        assert await thread.send("   ") is None
        assert thread.messages == []
        assert fake_api.requests == []

    async def test_draft_is_sent_and_cleared(self, client, fake_api):
        fake_api.on("POST", "/ai/chat", envelope({"answer": "ok"}))
        thread = ConversationThread("doc1", AIGateway(client))
        thread.draft = "what is a hook?"

        await thread.send()

        assert thread.draft == ""
        assert thread.messages[0].content == "what is a hook?"
        assert thread.messages[0].timestamp is not None

    async def test_user_message_shows_while_awaiting(self, client, fake_api):
        release = asyncio.Event()

        async def slow(_request):
            await release.wait()
            return httpx.Response(200, json=envelope({"answer": "done"}))

        fake_api.on("POST", "/ai/chat", handler=slow)
        thread = ConversationThread("doc1", AIGateway(client))
        sending = asyncio.create_task(thread.send("first"))
        await asyncio.sleep(0.01)

        assert thread.awaiting_response
        assert [m.content for m in thread.messages] == ["first"]
        assert await thread.send("second") is None

        release.set()
        await sending
        assert [m.content for m in thread.messages] == ["first", "done"]


class TestHistory:
    async def test_history_loaded_in_order(self, client, fake_api):
        fake_api.on(
            "GET",
            "/ai/chat-history/doc1",
            envelope(
                [
                    {"role": "user", "content": "q", "timestamp": "2026-02-22T10:00:00Z"},
                    {"role": "assistant", "content": "a", "timestamp": "2026-02-22T10:00:05Z"},
                ]
            ),
        )
        thread = ConversationThread("doc1", AIGateway(client))
        await thread.load_history()
        assert [m.content for m in thread.messages] == ["q", "a"]
        assert not thread.initial_loading

    async def test_history_failure_leaves_empty_thread(self, client, fake_api):
        fake_api.fail("GET", "/ai/chat-history/doc1")
        thread = ConversationThread("doc1", AIGateway(client))
        await thread.load_history()
        assert thread.messages == []
        assert not thread.initial_loading
