from __future__ import annotations

import logging
from datetime import datetime, timezone

from studydesk.models.chat import ChatMessage, ChatRole, ChatSnapshot
from studydesk.services.gateway import AIGateway, GatewayError
from studydesk.services.task_registry import ScopeClosedError, TaskScope

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I encountered an error. Please try again."


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ConversationThread:
    """Append-only chat log for one document.

    A failed send never raises: the failure becomes one assistant message
    with FALLBACK_REPLY.
    """

    def __init__(self, document_id: str, gateway: AIGateway) -> None:
        self.document_id = document_id
        self.messages: list[ChatMessage] = []
        self.draft = ""
        self.awaiting_response = False
        self.initial_loading = True
        self._gateway = gateway
        self._scope = TaskScope(f"chat-{document_id}")

    async def load_history(self) -> None:
        self.initial_loading = True
        try:
            history = await self._scope.call(self._gateway.chat_history(self.document_id))
        except ScopeClosedError:
            return
        except GatewayError as e:
            logger.error("Failed to fetch chat history for %s: %s", self.document_id, e.message)
        else:
            self.messages = list(history) + self.messages
        finally:
            self.initial_loading = False

    async def send(self, text: str | None = None) -> ChatMessage | None:
        """Send *text* (or the current draft). Returns the assistant reply."""
        content = self.draft if text is None else text
        if self.awaiting_response or not content.strip():
            return None

        self.messages.append(ChatMessage(role=ChatRole.USER, content=content, timestamp=_now()))
        self.draft = ""
        self.awaiting_response = True
        try:
            answer = await self._scope.call(self._gateway.chat(self.document_id, content))
        except ScopeClosedError:
            return None
        except GatewayError as e:
            logger.warning("Chat request failed for %s: %s", self.document_id, e.message)
            answer = FALLBACK_REPLY
        finally:
            self.awaiting_response = False

        reply = ChatMessage(role=ChatRole.ASSISTANT, content=answer, timestamp=_now())
        self.messages.append(reply)
        return reply

    def snapshot(self) -> ChatSnapshot:
        return ChatSnapshot(
            document_id=self.document_id,
            messages=list(self.messages),
            draft=self.draft,
            awaiting_response=self.awaiting_response,
            initial_loading=self.initial_loading,
        )

    async def close(self) -> None:
        await self._scope.close()
