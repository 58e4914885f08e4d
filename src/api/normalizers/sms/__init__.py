"""Normalizer SMS (Twilio): extração do form do webhook."""

from .extractor import InboundSms, extract_inbound_sms

__all__ = ["InboundSms", "extract_inbound_sms"]
