"""Settings específicas de SMS (Twilio).

Credenciais podem vir de env (dev) ou do Secret Manager (staging/production,
ver app/infra/secrets). O webhook responde TwiML de forma síncrona.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class TwilioSettings:
    """Configurações do canal SMS via Twilio.

    Attributes:
        account_sid: Account SID
        auth_token: Auth Token (também usado na validação de assinatura)
        from_number: Número de origem para envios outbound
        validate_signature: Exige X-Twilio-Signature válido no webhook
        webhook_url: URL pública do webhook (base da assinatura)
        request_timeout_seconds: Timeout para envio outbound
    """

    account_sid: str = ""
    auth_token: str = ""
    from_number: str = ""
    validate_signature: bool = False
    webhook_url: str = ""
    request_timeout_seconds: float = 10.0

    @property
    def can_send(self) -> bool:
        """Retorna True se há credenciais suficientes para envio outbound."""
        return bool(self.account_sid and self.auth_token and self.from_number)

    def validate(self) -> list[str]:
        """Valida configurações mínimas de SMS."""
        errors: list[str] = []

        if self.validate_signature and not self.auth_token:
            errors.append("TWILIO_VALIDATE_SIGNATURE=true requer TWILIO_AUTH_TOKEN")

        if self.validate_signature and not self.webhook_url:
            errors.append("TWILIO_VALIDATE_SIGNATURE=true requer TWILIO_WEBHOOK_URL")

        if self.request_timeout_seconds <= 0:
            errors.append("TWILIO_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_twilio_from_env() -> TwilioSettings:
    """Carrega TwilioSettings de variáveis de ambiente."""
    return TwilioSettings(
        account_sid=os.getenv("TWILIO_ACCOUNT_SID", ""),
        auth_token=os.getenv("TWILIO_AUTH_TOKEN", ""),
        from_number=os.getenv("TWILIO_FROM_NUMBER", ""),
        validate_signature=os.getenv("TWILIO_VALIDATE_SIGNATURE", "false").lower()
        in ("true", "1", "yes"),
        webhook_url=os.getenv("TWILIO_WEBHOOK_URL", ""),
        request_timeout_seconds=float(os.getenv("TWILIO_REQUEST_TIMEOUT_SECONDS", "10")),
    )


@lru_cache(maxsize=1)
def get_twilio_settings() -> TwilioSettings:
    """Retorna instância cacheada de TwilioSettings."""
    return _load_twilio_from_env()
