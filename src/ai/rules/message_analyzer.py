"""Análise determinística de mensagens inbound (sem LLM).

Transforma texto bruto em `MessageAnalysis`: intenção, sentimento,
urgência, serviço, palavras-chave e se é pergunta.

Propriedades:
    - Pura e total: nunca levanta exceção; texto vazio/None gera defaults.
    - Case-insensitive: todo casamento é feito sobre o texto em minúsculas.
    - Casamento por substring (ex.: "no" casa dentro de "know").

A ordem das regras é parte do contrato: listas de categorias diferentes se
sobrepõem ("estimate" está em appointment e pricing; "roof" está em
service_inquiry e impede que "how much does a roof cost" vire pricing).
"""

from __future__ import annotations

from ai.models.analysis import Intent, MessageAnalysis, Sentiment, Service, Urgency

# (intenção, palavras-chave) avaliadas em ordem; a primeira que casa vence
INTENT_RULES: tuple[tuple[Intent, tuple[str, ...]], ...] = (
    (
        Intent.APPOINTMENT,
        ("appointment", "schedule", "book", "inspection", "estimate", "confirm", "reschedule"),
    ),
    (
        Intent.SERVICE_INQUIRY,
        ("roof", "siding", "window", "gutter", "repair", "replace", "fix"),
    ),
    (
        Intent.PRICING,
        ("price", "cost", "quote", "estimate", "how much", "afford", "payment"),
    ),
    (
        Intent.EMERGENCY,
        ("urgent", "emergency", "leak", "damage", "asap", "immediately", "today"),
    ),
    (
        Intent.FOLLOWUP,
        ("status", "update", "when", "follow up", "check", "progress"),
    ),
    (
        Intent.COMPLAINT,
        ("unhappy", "problem", "issue", "wrong", "mistake", "bad"),
    ),
    (
        Intent.CONFIRMATION,
        ("yes", "confirm", "agree", "ok", "sure", "sounds good"),
    ),
    (
        Intent.CANCELLATION,
        ("cancel", "stop", "no", "not interested", "remove"),
    ),
)

SERVICE_RULES: tuple[tuple[Service, tuple[str, ...]], ...] = (
    (Service.ROOFING, ("roof", "shingle", "tile", "flat roof", "metal roof")),
    (Service.SIDING, ("siding", "vinyl", "hardie", "wood siding", "fiber cement")),
    (Service.WINDOWS, ("window", "glass", "double pane", "replacement window")),
    (Service.GUTTERS, ("gutter", "downspout", "drainage", "leaf guard")),
)

URGENT_WORDS = ("urgent", "emergency", "asap", "immediately", "today", "leak", "damage", "storm")

POSITIVE_WORDS = ("yes", "great", "good", "perfect", "excellent", "thanks", "appreciate", "happy")
NEGATIVE_WORDS = ("no", "bad", "terrible", "angry", "upset", "disappointed", "unhappy", "problem")

QUESTION_WORDS = ("how", "what", "when", "where", "why", "can", "could", "would", "should")

STOP_WORDS = frozenset(
    {"the", "is", "at", "which", "on", "and", "a", "an", "as", "are", "was", "were"}
)

# Pontuação de urgência a partir da qual a mensagem é "high"
HIGH_URGENCY_SCORE = 2


def _normalize(text: str | None) -> str:
    return (text or "").lower()


def _count_matches(message: str, words: tuple[str, ...]) -> int:
    return sum(1 for word in words if word in message)


def detect_intent(text: str | None) -> Intent:
    """Retorna a primeira intenção cujo keyword aparece no texto."""
    message = _normalize(text)
    for intent, keywords in INTENT_RULES:
        if any(keyword in message for keyword in keywords):
            return intent
    return Intent.GENERAL


def detect_service(text: str | None) -> Service | None:
    """Retorna o primeiro serviço cujo keyword aparece no texto."""
    message = _normalize(text)
    for service, keywords in SERVICE_RULES:
        if any(keyword in message for keyword in keywords):
            return service
    return None


def detect_urgency(text: str | None) -> Urgency:
    """Urgência monotônica no número de palavras urgentes distintas.

    0 → low, 1 → medium, ≥2 → high.
    """
    score = _count_matches(_normalize(text), URGENT_WORDS)
    if score >= HIGH_URGENCY_SCORE:
        return Urgency.HIGH
    if score == 1:
        return Urgency.MEDIUM
    return Urgency.LOW


def analyze_sentiment(text: str | None) -> Sentiment:
    """Compara contagens de palavras positivas e negativas; empate é neutro."""
    message = _normalize(text)
    positive_count = _count_matches(message, POSITIVE_WORDS)
    negative_count = _count_matches(message, NEGATIVE_WORDS)

    if positive_count > negative_count:
        return Sentiment.POSITIVE
    if negative_count > positive_count:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def is_question(text: str | None) -> bool:
    """True se há '?' ou uma palavra interrogativa no início/meio do texto."""
    message = _normalize(text)
    if "?" in message:
        return True
    return any(
        message.startswith(word) or f" {word} " in message for word in QUESTION_WORDS
    )


def extract_keywords(text: str | None) -> tuple[str, ...]:
    """Tokens por espaço, com mais de 2 caracteres e fora da stop-list."""
    return tuple(
        word
        for word in _normalize(text).split()
        if len(word) > 2 and word not in STOP_WORDS
    )


def analyze_message(text: str | None) -> MessageAnalysis:
    """Analisa a mensagem e retorna o sinal estruturado completo.

    Args:
        text: Texto bruto recebido (qualquer caixa; None tratado como vazio).

    Returns:
        MessageAnalysis; sem sinal algum, todos os campos ficam no default.
    """
    message = _normalize(text)
    return MessageAnalysis(
        intent=detect_intent(message),
        sentiment=analyze_sentiment(message),
        urgency=detect_urgency(message),
        service=detect_service(message),
        keywords=extract_keywords(message),
        has_question=is_question(message),
    )
