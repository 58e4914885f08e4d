"""Regras determinísticas para IA.

Re-exporta analisador, seletor, personalizador e fallbacks.
"""

from ai.rules.fallbacks import (
    SMS_APOLOGY_MESSAGE,
    fallback_intent_classification,
    rule_based_reply,
)
from ai.rules.message_analyzer import analyze_message
from ai.rules.personalizer import personalize_response
from ai.rules.response_selector import default_greeting, select_response

__all__ = [
    "SMS_APOLOGY_MESSAGE",
    "analyze_message",
    "default_greeting",
    "fallback_intent_classification",
    "personalize_response",
    "rule_based_reply",
    "select_response",
]
