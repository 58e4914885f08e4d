"""Testes da personalização de templates e dos fallbacks por regras."""

from __future__ import annotations

from ai.config.template_loader import get_template_table
from ai.models.analysis import Intent, MessageAnalysis, Urgency
from ai.models.caller_context import CallerContext
from ai.rules.fallbacks import fallback_intent_classification, rule_based_reply
from ai.rules.personalizer import personalize_response


class TestPersonalizeResponse:
    """Testes de personalize_response."""

    def test_fills_all_defaults(self) -> None:
        """Contexto vazio deve usar os defaults documentados."""
        template = (
            "{customer_name}|{service_type}|{date}|{time}|"
            "{specialist_name}|{address}|{eta_minutes}"
        )

        result = personalize_response(template, CallerContext())

        assert result == (
            "there|home exterior|TBD|TBD|our specialist|your property|30"
        )

    def test_uses_context_values(self) -> None:
        context = CallerContext(customer_name="Dana", address="12 Oak St")

        result = personalize_response("Hi {customer_name}, see you at {address}", context)

        assert result == "Hi Dana, see you at 12 Oak St"

    def test_empty_string_uses_default(self) -> None:
        result = personalize_response("Hi {customer_name}", CallerContext(customer_name=""))

        assert result == "Hi there"

    def test_replaces_every_occurrence(self) -> None:
        result = personalize_response(
            "{customer_name} {customer_name}", CallerContext(customer_name="Lee")
        )

        assert result == "Lee Lee"

    def test_unknown_placeholder_is_kept(self) -> None:
        """Chaves desconhecidas ficam literais e não levantam exceção."""
        result = personalize_response("Hello {nickname} {0} {", CallerContext())

        assert result == "Hello {nickname} {0} {"

    def test_company_name_from_configuration(self) -> None:
        result = personalize_response(
            "Riley from {company_name}", CallerContext(), company_name="Acme Roofing"
        )

        assert result == "Riley from Acme Roofing"

    def test_company_name_default(self) -> None:
        assert personalize_response("{company_name}", CallerContext()) == "Panda Exteriors"

    def test_idempotent(self) -> None:
        context = CallerContext(customer_name="Sam")
        once = personalize_response("Hi {customer_name} on {date}", context)

        assert personalize_response(once, context) == once

    def test_none_template_is_empty(self) -> None:
        assert personalize_response(None, CallerContext()) == ""  # type: ignore[arg-type]


class TestRuleBasedReply:
    """Testes de rule_based_reply."""

    def test_personalizes_selected_template(self) -> None:
        """A resposta por regras deve sair sem placeholders conhecidos."""
        analysis = MessageAnalysis(urgency=Urgency.HIGH)
        context = CallerContext(customer_name="Pat", address="5 Elm Rd", eta_minutes="45")

        reply = rule_based_reply(analysis, context, get_template_table())

        assert reply.rule == "emergency"
        assert "Pat" in reply.text
        assert "5 Elm Rd" in reply.text
        assert "45 minutes" in reply.text
        assert "{" not in reply.text

    def test_appointment_confirmation_names_configured_company(self) -> None:
        analysis = MessageAnalysis(intent=Intent.APPOINTMENT)
        context = CallerContext(has_appointment=True, customer_name="Pat")

        reply = rule_based_reply(
            analysis, context, get_template_table(), company_name="Acme Roofing"
        )

        assert "Riley from Acme Roofing" in reply.text
        assert "Panda Exteriors" not in reply.text

    def test_literal_reply_unchanged(self) -> None:
        reply = rule_based_reply(MessageAnalysis(), CallerContext(), get_template_table())

        assert reply.rule == "default"
        assert reply.template_ref is None


class TestFallbackIntentClassification:
    def test_defaults_with_fallback_flag(self) -> None:
        classification = fallback_intent_classification()

        assert classification.intent == "other"
        assert classification.sentiment == "neutral"
        assert classification.urgency == "medium"
        assert classification.suggested_action == "Provide general assistance"
        assert classification.fallback is True
