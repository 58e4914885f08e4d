"""Resultado da seleção de resposta por regras."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TemplateRef:
    """Chave de um template: (categoria, subcategoria)."""

    category: str
    subcategory: str

    def __str__(self) -> str:
        return f"{self.category}/{self.subcategory}"


@dataclass(frozen=True, slots=True)
class SelectedResponse:
    """Resposta escolhida pelo seletor.

    Atributos:
        rule: Nome da regra que disparou (auditoria/testes)
        text: Template bruto (com placeholders) ou literal fixo
        template_ref: Template usado; None para respostas literais
    """

    rule: str
    text: str
    template_ref: TemplateRef | None = None

    @property
    def is_literal(self) -> bool:
        return self.template_ref is None
