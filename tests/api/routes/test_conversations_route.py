"""Testes da API de conversas (operador)."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.app import create_app
from app.bootstrap import get_conversation_manager, get_outbound_dispatcher
from app.domain.conversation import Channel, ConversationInit, Message
from app.infra.stores.memory_stores import MemoryConversationStore
from app.use_cases.conversations.manage_conversations import ConversationManager


def _seed(store: MemoryConversationStore, participant: str, channel: Channel) -> str:
    async def seed() -> str:
        conversation = await store.create(ConversationInit(participant, channel))
        await store.append_message(conversation.id, Message.user("hello"))
        await store.append_message(conversation.id, Message.assistant("Hi! How can I help?"))
        return conversation.id

    return asyncio.run(seed())


@pytest.fixture
def store() -> MemoryConversationStore:
    return MemoryConversationStore()


@pytest.fixture
def dispatcher() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(store: MemoryConversationStore, dispatcher: MagicMock) -> Iterator[TestClient]:
    app = create_app()
    manager = ConversationManager(store)
    app.dependency_overrides[get_conversation_manager] = lambda: manager
    app.dependency_overrides[get_outbound_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestListAndGet:
    """Testes de consulta."""

    def test_list_with_stats(self, client: TestClient, store: MemoryConversationStore) -> None:
        _seed(store, "+15551234567", Channel.SMS)
        _seed(store, "web-1", Channel.WEB)

        body = client.get("/conversations").json()

        assert len(body["conversations"]) == 2
        assert body["stats"] == {"total": 2, "active": 2, "resolved": 0, "averageMessages": 2}
        assert "timestamp" in body

    def test_list_filters_participant(
        self, client: TestClient, store: MemoryConversationStore
    ) -> None:
        _seed(store, "+15551234567", Channel.SMS)
        _seed(store, "web-1", Channel.WEB)

        body = client.get("/conversations", params={"participantId": "web-1"}).json()

        assert [c["participantId"] for c in body["conversations"]] == ["web-1"]

    def test_get_conversation(self, client: TestClient, store: MemoryConversationStore) -> None:
        conversation_id = _seed(store, "web-1", Channel.WEB)

        body = client.get(f"/conversations/{conversation_id}").json()

        assert body["conversationId"] == conversation_id
        assert [m["content"] for m in body["messages"]] == ["hello", "Hi! How can I help?"]

    def test_get_missing_is_404(self, client: TestClient) -> None:
        response = client.get("/conversations/conv_missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Conversation not found"}


class TestUpdates:
    def test_update_status(self, client: TestClient, store: MemoryConversationStore) -> None:
        conversation_id = _seed(store, "web-1", Channel.WEB)

        response = client.post(
            f"/conversations/{conversation_id}/status", json={"status": "resolved"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["conversation"]["status"] == "resolved"

    def test_invalid_status_is_400(
        self, client: TestClient, store: MemoryConversationStore
    ) -> None:
        conversation_id = _seed(store, "web-1", Channel.WEB)

        response = client.post(
            f"/conversations/{conversation_id}/status", json={"status": "closed"}
        )

        assert response.status_code == 400
        assert "Invalid status" in response.json()["error"]

    def test_feedback(self, client: TestClient, store: MemoryConversationStore) -> None:
        conversation_id = _seed(store, "web-1", Channel.WEB)

        response = client.post(
            f"/conversations/{conversation_id}/feedback",
            json={"rating": 2, "comment": "too slow"},
        )

        metadata = response.json()["conversation"]["metadata"]
        assert metadata["feedback"]["rating"] == 2
        assert metadata["needs_review"] is True

    def test_invalid_rating_is_400(
        self, client: TestClient, store: MemoryConversationStore
    ) -> None:
        conversation_id = _seed(store, "web-1", Channel.WEB)

        response = client.post(f"/conversations/{conversation_id}/feedback", json={"rating": 9})

        assert response.status_code == 400

    def test_feedback_on_missing_is_404(self, client: TestClient) -> None:
        response = client.post("/conversations/conv_missing/feedback", json={"rating": 4})

        assert response.status_code == 404

    def test_store_failure_is_500(self) -> None:
        app = create_app()
        manager = MagicMock()
        manager.get_conversation = AsyncMock(side_effect=RuntimeError("boom"))
        app.dependency_overrides[get_conversation_manager] = lambda: manager

        response = TestClient(app).get("/conversations/conv_1")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestOperatorMessages:
    def test_adds_message(self, client: TestClient, store: MemoryConversationStore) -> None:
        conversation_id = _seed(store, "web-1", Channel.WEB)

        response = client.post(
            f"/conversations/{conversation_id}/messages",
            json={"message": "A specialist will call you", "role": "assistant"},
        )

        messages = response.json()["conversation"]["messages"]
        assert messages[-1]["content"] == "A specialist will call you"
        assert messages[-1]["role"] == "assistant"

    def test_missing_role_is_400(
        self, client: TestClient, store: MemoryConversationStore
    ) -> None:
        conversation_id = _seed(store, "web-1", Channel.WEB)

        response = client.post(
            f"/conversations/{conversation_id}/messages", json={"message": "x"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Message and role are required"}

    def test_deliver_sms_reply(
        self, client: TestClient, store: MemoryConversationStore, dispatcher: MagicMock
    ) -> None:
        conversation_id = _seed(store, "+15551234567", Channel.SMS)

        client.post(
            f"/conversations/{conversation_id}/messages",
            json={"message": "On our way", "role": "assistant", "deliver": True},
        )

        dispatcher.dispatch.assert_called_once_with("+15551234567", "On our way", conversation_id)

    def test_deliver_ignores_web_and_user_messages(
        self, client: TestClient, store: MemoryConversationStore, dispatcher: MagicMock
    ) -> None:
        web_id = _seed(store, "web-1", Channel.WEB)
        sms_id = _seed(store, "+15551234567", Channel.SMS)

        client.post(
            f"/conversations/{web_id}/messages",
            json={"message": "Hello", "role": "assistant", "deliver": True},
        )
        client.post(
            f"/conversations/{sms_id}/messages",
            json={"message": "Note from the customer", "role": "user", "deliver": True},
        )

        dispatcher.dispatch.assert_not_called()
