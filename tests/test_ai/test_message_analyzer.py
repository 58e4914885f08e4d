"""Testes do analisador determinístico de mensagens."""

from __future__ import annotations

import pytest

from ai.models.analysis import Intent, Sentiment, Service, Urgency
from ai.rules.message_analyzer import (
    analyze_message,
    analyze_sentiment,
    detect_intent,
    detect_service,
    detect_urgency,
    extract_keywords,
    is_question,
)


class TestDetectIntent:
    """Ordem fixa de categorias: a primeira que casa vence."""

    def test_empty_text_is_general(self) -> None:
        """Texto vazio ou None deve cair em general."""
        assert detect_intent("") is Intent.GENERAL
        assert detect_intent(None) is Intent.GENERAL

    def test_no_keyword_is_general(self) -> None:
        assert detect_intent("Hi there") is Intent.GENERAL

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("I want to book a visit", Intent.APPOINTMENT),
            ("My gutter is loose", Intent.SERVICE_INQUIRY),
            ("What is the price?", Intent.PRICING),
            ("It is an emergency", Intent.EMERGENCY),
            ("Any progress?", Intent.FOLLOWUP),
            ("Something went wrong", Intent.COMPLAINT),
            ("sure", Intent.CONFIRMATION),
            ("please cancel", Intent.CANCELLATION),
        ],
    )
    def test_single_category(self, text: str, expected: Intent) -> None:
        """Cada categoria isolada deve ser detectada."""
        assert detect_intent(text) is expected

    def test_estimate_resolves_to_appointment_before_pricing(self) -> None:
        """'estimate' está em appointment e pricing; appointment vem antes."""
        assert detect_intent("Can I get an estimate") is Intent.APPOINTMENT

    def test_service_keyword_wins_over_pricing(self) -> None:
        """'roof' (service_inquiry) é avaliado antes de 'how much' (pricing)."""
        assert detect_intent("How much does a new roof cost?") is Intent.SERVICE_INQUIRY

    def test_case_insensitive(self) -> None:
        """Caixa não deve alterar a intenção."""
        assert detect_intent("SCHEDULE AN APPOINTMENT") is detect_intent(
            "schedule an appointment"
        )

    def test_substring_match(self) -> None:
        """Casamento por substring: 'no' casa dentro de 'know'."""
        assert detect_intent("I know") is Intent.CANCELLATION


class TestDetectService:
    def test_no_service(self) -> None:
        assert detect_service("hello") is None

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("new shingle please", Service.ROOFING),
            ("vinyl panels", Service.SIDING),
            ("broken glass", Service.WINDOWS),
            ("downspout clogged", Service.GUTTERS),
        ],
    )
    def test_detects_service(self, text: str, expected: Service) -> None:
        assert detect_service(text) is expected

    def test_first_service_wins(self) -> None:
        """Roofing vem antes de gutters na ordem de serviços."""
        assert detect_service("roof and gutter work") is Service.ROOFING


class TestDetectUrgency:
    def test_zero_words_is_low(self) -> None:
        assert detect_urgency("hello") is Urgency.LOW

    def test_one_word_is_medium(self) -> None:
        assert detect_urgency("this is urgent") is Urgency.MEDIUM

    def test_two_words_is_high(self) -> None:
        assert detect_urgency("urgent leak") is Urgency.HIGH

    def test_monotonic_in_urgent_words(self) -> None:
        """Adicionar palavras urgentes nunca reduz a urgência."""
        order = [Urgency.LOW, Urgency.MEDIUM, Urgency.HIGH]
        texts = ["hello", "hello urgent", "hello urgent storm", "hello urgent storm asap"]
        levels = [order.index(detect_urgency(text)) for text in texts]
        assert levels == sorted(levels)


class TestAnalyzeSentiment:
    def test_positive(self) -> None:
        assert analyze_sentiment("great, thanks") is Sentiment.POSITIVE

    def test_negative(self) -> None:
        assert analyze_sentiment("terrible and angry") is Sentiment.NEGATIVE

    def test_tie_is_neutral(self) -> None:
        assert analyze_sentiment("good but bad") is Sentiment.NEUTRAL


class TestIsQuestionAndKeywords:
    def test_question_mark(self) -> None:
        assert is_question("really?") is True

    def test_leading_question_word(self) -> None:
        assert is_question("how are you") is True

    def test_inner_question_word(self) -> None:
        assert is_question("tell me what to do") is True

    def test_statement(self) -> None:
        assert is_question("hi there") is False

    def test_keywords_drop_short_and_stop_words(self) -> None:
        """Tokens com ≤2 caracteres e stop words são descartados."""
        assert extract_keywords("The roof is on fire and it leaks") == (
            "roof",
            "fire",
            "leaks",
        )

    def test_keywords_keep_duplicates_in_order(self) -> None:
        assert extract_keywords("roof roof gutter") == ("roof", "roof", "gutter")


class TestAnalyzeMessageScenarios:
    """Cenários de ponta a ponta do analisador."""

    def test_greeting(self) -> None:
        """'Hi there' → general, low, neutral, sem pergunta."""
        analysis = analyze_message("Hi there")

        assert analysis.intent is Intent.GENERAL
        assert analysis.urgency is Urgency.LOW
        assert analysis.sentiment is Sentiment.NEUTRAL
        assert analysis.has_question is False
        assert analysis.service is None

    def test_storm_emergency(self) -> None:
        analysis = analyze_message("I have an urgent leak, need emergency help today")

        assert analysis.urgency is Urgency.HIGH
        assert analysis.intent is Intent.EMERGENCY

    def test_roof_cost_question(self) -> None:
        analysis = analyze_message("How much does a new roof cost?")

        assert analysis.intent is Intent.SERVICE_INQUIRY
        assert analysis.service is Service.ROOFING
        assert analysis.sentiment is Sentiment.NEUTRAL
        assert analysis.has_question is True

    def test_plain_yes(self) -> None:
        analysis = analyze_message("yes")

        assert analysis.intent is Intent.CONFIRMATION
        assert analysis.sentiment is Sentiment.POSITIVE

    def test_none_returns_defaults(self) -> None:
        """Entrada None nunca levanta exceção."""
        analysis = analyze_message(None)

        assert analysis.intent is Intent.GENERAL
        assert analysis.keywords == ()

    def test_to_dict_roundtrip(self) -> None:
        analysis = analyze_message("Need a window quote asap?")
        restored = type(analysis).from_dict(analysis.to_dict())
        assert restored == analysis
