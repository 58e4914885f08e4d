"""Normalizers por canal: conversão de payloads externos para modelos internos.

Estrutura:
- sms/: form do webhook SMS do Twilio
"""

from .sms import InboundSms, extract_inbound_sms

__all__ = [
    "InboundSms",
    "extract_inbound_sms",
]
