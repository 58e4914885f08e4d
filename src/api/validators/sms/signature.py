"""Validação de assinatura do webhook do Twilio (X-Twilio-Signature).

A assinatura cobre a URL pública do webhook mais os parâmetros do form;
atrás de proxy/load balancer a URL do request não serve, por isso ela
vem das settings (TWILIO_WEBHOOK_URL).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from twilio.request_validator import RequestValidator

if TYPE_CHECKING:
    from collections.abc import Mapping

SIGNATURE_HEADER = "x-twilio-signature"


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação (skipped quando a validação está desligada)."""

    valid: bool
    skipped: bool = False
    error: str | None = None


def verify_twilio_signature(
    *,
    url: str,
    params: Mapping[str, str],
    headers: Mapping[str, str],
    auth_token: str,
    enabled: bool,
) -> SignatureResult:
    """Verifica a assinatura do request.

    Args:
        url: URL pública configurada no Twilio
        params: Campos do form recebido
        headers: Headers do request (chaves em minúsculas)
        auth_token: Auth Token da conta
        enabled: Se a validação está habilitada
    """
    if not enabled:
        return SignatureResult(valid=True, skipped=True)
    signature = headers.get(SIGNATURE_HEADER, "")
    if not signature:
        return SignatureResult(valid=False, error="missing_signature")
    if not auth_token or not url:
        return SignatureResult(valid=False, error="validator_not_configured")
    if not RequestValidator(auth_token).validate(url, dict(params), signature):
        return SignatureResult(valid=False, error="signature_mismatch")
    return SignatureResult(valid=True)
