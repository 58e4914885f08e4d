"""Rotas HTTP da API: adapters de entrada.

Estrutura:
- routes/messages/: POST /message (web e integrações, JSON síncrono)
- routes/sms/: POST /webhook/sms (Twilio, TwiML)
- routes/conversations/: consulta e gestão pelo operador
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
