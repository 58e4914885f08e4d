"""Validators por canal: validação de requests de provedores externos.

Estrutura:
- sms/: assinatura do webhook do Twilio
"""

__all__: list[str] = []
