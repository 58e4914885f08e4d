"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.business_hours import BusinessHours, format_time

__all__ = [
    "BusinessHours",
    "format_time",
]
