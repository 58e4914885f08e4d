"""Testes do ConversationOrchestrator (fluxo inbound completo)."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from ai.config.template_loader import get_template_table
from ai.core.mock_client import MockResponder
from ai.models.analysis import Intent, MessageAnalysis, Urgency
from ai.models.generation import GenerationContext, IntentClassification
from ai.rules.response_selector import CONFIRMATION_REPLY, default_greeting
from app.domain.conversation import (
    Channel,
    ConversationInit,
    ConversationStatus,
    Message,
    MessageRole,
)
from app.infra.stores.memory_stores import MemoryConversationStore
from app.services.business_hours import BusinessHours
from app.use_cases.conversations.handle_inbound import (
    ConversationOrchestrator,
    escalation_metadata,
    parse_channel,
)
from config.settings.riley import RileySettings
from utils.errors import CollaboratorUnavailableError, ValidationError

SUNDAY_NOON_UTC = datetime(2024, 6, 2, 12, 0, tzinfo=UTC)
TUESDAY_NOON_UTC = datetime(2024, 6, 4, 16, 0, tzinfo=UTC)


class FailingResponder:
    def __init__(self, name: str = "failing") -> None:
        self.name = name
        self.calls = 0

    async def generate(self, prompt: str, context: GenerationContext) -> str:
        self.calls += 1
        raise CollaboratorUnavailableError(self.name, "HTTP 500")

    async def classify_intent(self, text: str) -> IntentClassification:
        return IntentClassification(fallback=True)


class SlowResponder(FailingResponder):
    async def generate(self, prompt: str, context: GenerationContext) -> str:
        self.calls += 1
        await asyncio.sleep(5)
        return "too late"


def _orchestrator(
    store: MemoryConversationStore | None = None,
    *,
    responders: tuple = (),
    settings: RileySettings | None = None,
    business_hours: BusinessHours | None = None,
    timeout: float = 1.0,
    clock=lambda: TUESDAY_NOON_UTC,
) -> ConversationOrchestrator:
    return ConversationOrchestrator(
        store=store or MemoryConversationStore(),
        templates=get_template_table(),
        settings=settings or RileySettings(),
        responders=responders,
        business_hours=business_hours,
        generation_timeout_seconds=timeout,
        clock=clock,
    )


class TestInputValidation:
    """Validação de input antes de qualquer efeito."""

    @pytest.mark.asyncio
    async def test_missing_participant(self) -> None:
        store = MemoryConversationStore()

        with pytest.raises(ValidationError) as exc_info:
            await _orchestrator(store).handle_inbound("  ", "web", "hi")

        assert exc_info.value.field == "participantId"
        assert await store.list_recent() == []

    @pytest.mark.asyncio
    async def test_missing_text(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await _orchestrator().handle_inbound("p1", "web", "   ")

        assert exc_info.value.field == "text"

    @pytest.mark.asyncio
    async def test_invalid_channel(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await _orchestrator().handle_inbound("p1", "fax", "hi")

        assert exc_info.value.field == "channel"

    def test_parse_channel_is_case_insensitive(self) -> None:
        assert parse_channel(" SMS ") is Channel.SMS
        assert parse_channel(Channel.WEB) is Channel.WEB

    @pytest.mark.parametrize("missing", [None, "", "   "])
    def test_parse_channel_defaults_to_web(self, missing: str | None) -> None:
        assert parse_channel(missing) is Channel.WEB


class TestRuleBasedReplies:
    """Sem colaborador generativo: respostas só por regras."""

    @pytest.mark.asyncio
    async def test_greeting_creates_conversation(self) -> None:
        store = MemoryConversationStore()

        result = await _orchestrator(store).handle_inbound("web-user-1", "web", "Hi there")

        assert result.reply_text == default_greeting("Panda Exteriors")
        assert result.reply_source == "rules:default"
        assert result.analysis.intent is Intent.GENERAL
        conversation = await store.find_by_id(result.conversation_id)
        assert conversation is not None
        assert [m.role for m in conversation.messages] == [
            MessageRole.USER,
            MessageRole.ASSISTANT,
        ]
        assert conversation.messages[0].analysis == result.analysis
        assert conversation.metadata["source"] == "web"
        assert conversation.metadata["last_intent"] == "general"

    @pytest.mark.asyncio
    async def test_company_name_in_greeting(self) -> None:
        orchestrator = _orchestrator(settings=RileySettings(company_name="Acme Roofing"))

        result = await orchestrator.handle_inbound("p1", "web", "Hello")

        assert "Riley from Acme Roofing" in result.reply_text

    @pytest.mark.asyncio
    async def test_urgent_leak_uses_storm_template_and_escalates(self) -> None:
        store = MemoryConversationStore()

        with patch(
            "app.use_cases.conversations.handle_inbound.record_escalation"
        ) as record:
            result = await _orchestrator(store).handle_inbound(
                "+15551234567", "sms", "URGENT: storm damage, roof leak!"
            )

        assert result.analysis.urgency is Urgency.HIGH
        assert result.reply_source == "rules:emergency"
        assert "{" not in result.reply_text
        conversation = await store.find_by_id(result.conversation_id)
        assert conversation is not None
        assert conversation.metadata["escalation_requested"] is True
        assert conversation.metadata["escalation_reason"] == "high_urgency"
        assert conversation.status is ConversationStatus.ACTIVE
        record.assert_called_once_with("high_urgency", result.conversation_id, "sms")

    @pytest.mark.asyncio
    async def test_roof_cost_uses_roofing_template(self) -> None:
        result = await _orchestrator().handle_inbound(
            "p1", "web", "How much does a new roof cost?"
        )

        assert result.reply_source == "rules:service_inquiry"
        assert result.reply_text.startswith("Great question about roofing, there!")

    @pytest.mark.asyncio
    async def test_yes_confirms(self) -> None:
        result = await _orchestrator().handle_inbound("p1", "sms", "yes")

        assert result.reply_text == CONFIRMATION_REPLY

    @pytest.mark.asyncio
    async def test_metadata_personalizes_reply(self) -> None:
        result = await _orchestrator().handle_inbound(
            "p1",
            "sms",
            "urgent leak",
            metadata={"customer_name": "Dana", "address": "12 Oak St"},
        )

        assert result.reply_text.startswith("Hi Dana,")
        assert "12 Oak St" in result.reply_text


class TestGenerativeResponders:
    @pytest.mark.asyncio
    async def test_uses_first_successful_responder(self) -> None:
        responder = MockResponder("Generated reply", name="primary")

        result = await _orchestrator(responders=(responder,)).handle_inbound(
            "p1", "web", "Hi there"
        )

        assert result.reply_text == "Generated reply"
        assert result.reply_source == "generative:primary"

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_rules(self) -> None:
        """Colaborador indisponível deve cair para a resposta por regras."""
        failing = FailingResponder()

        result = await _orchestrator(responders=(failing,)).handle_inbound(
            "p1", "web", "Hi there"
        )

        assert failing.calls == 1
        assert result.reply_text == default_greeting()
        assert result.reply_source == "rules:default"

    @pytest.mark.asyncio
    async def test_secondary_responder_after_primary_fails(self) -> None:
        secondary = MockResponder("From secondary", name="secondary")

        result = await _orchestrator(
            responders=(FailingResponder(), secondary)
        ).handle_inbound("p1", "web", "Hi there")

        assert result.reply_source == "generative:secondary"
        assert len(secondary.calls) == 1

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self) -> None:
        slow = SlowResponder("slow")

        result = await _orchestrator(responders=(slow,), timeout=0.01).handle_inbound(
            "p1", "web", "yes"
        )

        assert result.reply_text == CONFIRMATION_REPLY

    @pytest.mark.asyncio
    async def test_empty_generation_falls_back(self) -> None:
        result = await _orchestrator(responders=(MockResponder("   "),)).handle_inbound(
            "p1", "web", "yes"
        )

        assert result.reply_source == "rules:confirmation"

    @pytest.mark.asyncio
    async def test_history_excludes_current_message(self) -> None:
        store = MemoryConversationStore()
        responder = MockResponder("ok")
        orchestrator = _orchestrator(store, responders=(responder,))

        await orchestrator.handle_inbound("p1", "web", "first")
        await orchestrator.handle_inbound("p1", "web", "second")

        prompt, context = responder.calls[-1]
        assert prompt == "second"
        assert [(t.role, t.content) for t in context.thread_history] == [
            ("user", "first"),
            ("assistant", "ok"),
        ]
        assert context.analysis["intent"] == "general"


class TestConversationResolution:
    @pytest.mark.asyncio
    async def test_reuses_active_conversation(self) -> None:
        store = MemoryConversationStore()
        orchestrator = _orchestrator(store)

        first = await orchestrator.handle_inbound("p1", "sms", "hello")
        second = await orchestrator.handle_inbound("p1", "sms", "hello again")

        assert first.conversation_id == second.conversation_id
        conversation = await store.find_by_id(first.conversation_id)
        assert conversation is not None
        assert len(conversation.messages) == 4

    @pytest.mark.asyncio
    async def test_resolved_conversation_starts_new_one(self) -> None:
        store = MemoryConversationStore()
        orchestrator = _orchestrator(store)
        first = await orchestrator.handle_inbound("p1", "sms", "hello")
        await store.update_status(first.conversation_id, ConversationStatus.RESOLVED)

        second = await orchestrator.handle_inbound("p1", "sms", "hello")

        assert second.conversation_id != first.conversation_id

    @pytest.mark.asyncio
    async def test_explicit_conversation_id(self) -> None:
        store = MemoryConversationStore()
        existing = await store.create(ConversationInit("p1", Channel.WEB))

        result = await _orchestrator(store).handle_inbound(
            "p1", "web", "hi", conversation_id=existing.id
        )

        assert result.conversation_id == existing.id

    @pytest.mark.asyncio
    async def test_unknown_conversation_id_creates_new(self) -> None:
        result = await _orchestrator().handle_inbound(
            "p1", "web", "hi", conversation_id="conv_unknown"
        )

        assert result.conversation_id != "conv_unknown"

    @pytest.mark.asyncio
    async def test_other_participant_conversation_not_reused(self) -> None:
        store = MemoryConversationStore()
        foreign = await store.create(ConversationInit("p2", Channel.WEB))

        result = await _orchestrator(store).handle_inbound(
            "p1", "web", "hi", conversation_id=foreign.id
        )

        assert result.conversation_id != foreign.id

    @pytest.mark.asyncio
    async def test_concurrent_messages_same_participant(self) -> None:
        """Mensagens simultâneas do mesmo participante usam uma só conversa."""
        store = MemoryConversationStore()
        orchestrator = _orchestrator(store)

        results = await asyncio.gather(
            *(orchestrator.handle_inbound("p1", "sms", f"msg {i}") for i in range(5))
        )

        assert len({r.conversation_id for r in results}) == 1
        conversation = await store.find_by_id(results[0].conversation_id)
        assert conversation is not None
        roles = [m.role for m in conversation.messages]
        assert roles == [MessageRole.USER, MessageRole.ASSISTANT] * 5


class TestAfterHours:
    @pytest.mark.asyncio
    async def test_closed_sends_after_hours_message(self) -> None:
        settings = RileySettings(after_hours_enabled=True)
        orchestrator = _orchestrator(
            settings=settings,
            business_hours=BusinessHours(settings),
            responders=(MockResponder("never"),),
            clock=lambda: SUNDAY_NOON_UTC,
        )

        result = await orchestrator.handle_inbound("p1", "sms", "Hi there")

        assert result.reply_source == "after_hours"
        assert "Monday at 8:00 AM" in result.reply_text

    @pytest.mark.asyncio
    async def test_open_uses_normal_flow(self) -> None:
        settings = RileySettings(after_hours_enabled=True)
        orchestrator = _orchestrator(
            settings=settings,
            business_hours=BusinessHours(settings),
            clock=lambda: TUESDAY_NOON_UTC,
        )

        result = await orchestrator.handle_inbound("p1", "sms", "yes")

        assert result.reply_source == "rules:confirmation"


class TestEscalationMetadata:
    def test_complaint_escalates(self) -> None:
        flags = escalation_metadata(MessageAnalysis(intent=Intent.COMPLAINT))

        assert flags == {
            "last_intent": "complaint",
            "escalation_requested": True,
            "escalation_reason": "complaint",
        }

    def test_general_does_not_escalate(self) -> None:
        assert escalation_metadata(MessageAnalysis()) == {"last_intent": "general"}

