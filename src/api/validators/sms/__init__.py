"""Validators para SMS (Twilio): assinatura do webhook."""

from .signature import SIGNATURE_HEADER, SignatureResult, verify_twilio_signature

__all__ = ["SIGNATURE_HEADER", "SignatureResult", "verify_twilio_signature"]
