"""Testes do webhook SMS (POST /webhook/sms)."""

from __future__ import annotations

import asyncio
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from twilio.request_validator import RequestValidator

from ai.config.template_loader import get_template_table
from ai.core.mock_client import MockResponder
from ai.rules import SMS_APOLOGY_MESSAGE
from app.app import create_app
from app.bootstrap import get_dedupe_store, get_orchestrator, resolve_twilio_settings
from app.domain.conversation import Channel
from app.infra.stores.memory_stores import MemoryConversationStore, MemoryDedupeStore
from app.use_cases.conversations.handle_inbound import ConversationOrchestrator
from config.settings import DedupeSettings, TwilioSettings, get_dedupe_settings
from config.settings.riley import RileySettings
from utils.errors import RedisConnectionError

REPLY = "Happy to help with your roof!"
WEBHOOK_URL = "https://riley.example.com/webhook/sms"
AUTH_TOKEN = "twilio-test-token"

FORM = {
    "MessageSid": "SM0001",
    "From": "+15551234567",
    "To": "+15550000000",
    "Body": "Do you repair roofs?",
    "FromCity": "AUSTIN",
    "FromState": "TX",
}


def _messages(response) -> list[str]:
    root = ET.fromstring(response.text)
    assert root.tag == "Response"
    return [element.text or "" for element in root.iter("Message")]


@pytest.fixture
def store() -> MemoryConversationStore:
    return MemoryConversationStore()


@pytest.fixture
def build_client(store: MemoryConversationStore) -> Iterator:
    app = create_app()

    def build(
        *,
        orchestrator=None,
        dedupe=None,
        twilio: TwilioSettings | None = None,
    ) -> TestClient:
        orchestrator = orchestrator or ConversationOrchestrator(
            store=store,
            templates=get_template_table(),
            settings=RileySettings(),
            responders=[MockResponder(REPLY)],
        )
        dedupe = dedupe or MemoryDedupeStore()
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        app.dependency_overrides[get_dedupe_store] = lambda: dedupe
        app.dependency_overrides[resolve_twilio_settings] = lambda: twilio or TwilioSettings()
        app.dependency_overrides[get_dedupe_settings] = lambda: DedupeSettings()
        return TestClient(app)

    yield build
    app.dependency_overrides.clear()


class TestReceiveSms:
    """Testes do fluxo principal do webhook."""

    def test_replies_with_twiml(self, build_client) -> None:
        response = build_client().post("/webhook/sms", data=FORM)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert _messages(response) == [REPLY]

    def test_records_channel_metadata(
        self, build_client, store: MemoryConversationStore
    ) -> None:
        build_client().post("/webhook/sms", data=FORM)

        conversation = asyncio.run(
            store.find_by_participant("+15551234567", channel=Channel.SMS)
        )
        assert conversation is not None
        assert conversation.metadata["twilio_number"] == "+15550000000"
        assert conversation.metadata["from_city"] == "AUSTIN"
        assert conversation.metadata["from_state"] == "TX"
        assert [m.content for m in conversation.messages] == ["Do you repair roofs?", REPLY]

    @pytest.mark.parametrize("missing", ["From", "Body"])
    def test_incomplete_payload(self, build_client, missing: str) -> None:
        form = {key: value for key, value in FORM.items() if key != missing}

        response = build_client().post("/webhook/sms", data=form)

        assert response.status_code == 400
        assert _messages(response) == []

    def test_processing_error_returns_apology(self, build_client) -> None:
        orchestrator = MagicMock()
        orchestrator.handle_inbound = AsyncMock(side_effect=RuntimeError("boom"))

        response = build_client(orchestrator=orchestrator).post("/webhook/sms", data=FORM)

        assert response.status_code == 200
        assert _messages(response) == [SMS_APOLOGY_MESSAGE]


class TestDedupe:
    def test_retry_gets_empty_twiml(self, build_client) -> None:
        orchestrator = MagicMock()
        orchestrator.handle_inbound = AsyncMock(
            return_value=MagicMock(reply_text=REPLY, conversation_id="conv_1")
        )
        client = build_client(orchestrator=orchestrator)

        first = client.post("/webhook/sms", data=FORM)
        retry = client.post("/webhook/sms", data=FORM)

        assert _messages(first) == [REPLY]
        assert retry.status_code == 200
        assert _messages(retry) == []
        orchestrator.handle_inbound.assert_awaited_once()

    def test_redis_failure_does_not_block_reply(self, build_client) -> None:
        dedupe = MagicMock()
        dedupe.seen = AsyncMock(side_effect=RedisConnectionError("redis down"))

        response = build_client(dedupe=dedupe).post("/webhook/sms", data=FORM)

        assert response.status_code == 200
        assert _messages(response) == [REPLY]

    def test_uses_prefixed_message_sid(self, build_client) -> None:
        dedupe = MagicMock()
        dedupe.seen = AsyncMock(return_value=False)

        build_client(dedupe=dedupe).post("/webhook/sms", data=FORM)

        dedupe.seen.assert_awaited_once_with("sms:SM0001", DedupeSettings().ttl_seconds)


class TestSignature:
    SETTINGS = TwilioSettings(
        auth_token=AUTH_TOKEN,
        validate_signature=True,
        webhook_url=WEBHOOK_URL,
    )

    def test_valid_signature_is_processed(self, build_client) -> None:
        signature = RequestValidator(AUTH_TOKEN).compute_signature(WEBHOOK_URL, FORM)

        response = build_client(twilio=self.SETTINGS).post(
            "/webhook/sms", data=FORM, headers={"X-Twilio-Signature": signature}
        )

        assert response.status_code == 200
        assert _messages(response) == [REPLY]

    def test_invalid_signature_is_forbidden(self, build_client) -> None:
        response = build_client(twilio=self.SETTINGS).post(
            "/webhook/sms", data=FORM, headers={"X-Twilio-Signature": "bogus"}
        )

        assert response.status_code == 403
        assert response.text == "Forbidden"

    def test_missing_signature_is_forbidden(self, build_client) -> None:
        response = build_client(twilio=self.SETTINGS).post("/webhook/sms", data=FORM)

        assert response.status_code == 403
