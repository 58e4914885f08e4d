"""Canal SMS (Twilio): envio outbound."""

from app.infra.sms.twilio_sender import TwilioSmsSender, create_twilio_client

__all__ = ["TwilioSmsSender", "create_twilio_client"]
