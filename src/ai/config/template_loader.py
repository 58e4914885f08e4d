"""Carregamento da tabela de templates de resposta (YAML).

A tabela é configuração estática versionada no repositório: carregada uma
única vez (cache) e somente leitura em runtime, podendo ser compartilhada
entre requisições concorrentes.

Observação: IO local (filesystem) é permitido aqui por se tratar de asset
do repositório (sem rede).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

_AI_DIR = Path(__file__).resolve().parents[1]
DEFAULT_TEMPLATES_PATH = _AI_DIR / "templates" / "response_templates.yaml"


class TemplateAssetError(RuntimeError):
    """Erro ao carregar/validar o YAML de templates."""


class TemplateNotFoundError(KeyError):
    """Template (categoria, subcategoria) inexistente na tabela."""


@dataclass(frozen=True, slots=True)
class ResponseTemplateTable:
    """Tabela imutável de templates indexada por (categoria, subcategoria)."""

    templates: Mapping[tuple[str, str], str]

    def get(self, category: str, subcategory: str) -> str | None:
        """Retorna o template ou None se ausente."""
        return self.templates.get((category, subcategory))

    def require(self, category: str, subcategory: str) -> str:
        """Retorna o template ou levanta TemplateNotFoundError."""
        template = self.get(category, subcategory)
        if template is None:
            raise TemplateNotFoundError(f"{category}/{subcategory}")
        return template

    def __contains__(self, key: object) -> bool:
        return key in self.templates

    def __len__(self) -> int:
        return len(self.templates)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ResponseTemplateTable:
        """Constrói a tabela a partir do dict do YAML.

        Formato esperado:
            categoria:
              subcategoria:
                template: "texto com {placeholders}"

        Chaves de topo que não são dict (ex.: `version`) são ignoradas.
        """
        templates: dict[tuple[str, str], str] = {}
        for category, entries in data.items():
            if not isinstance(entries, dict):
                continue
            for subcategory, entry in entries.items():
                template = entry.get("template") if isinstance(entry, dict) else None
                if not isinstance(template, str) or not template.strip():
                    raise TemplateAssetError(
                        f"Template vazio ou inválido: {category}/{subcategory}"
                    )
                templates[(str(category), str(subcategory))] = template.strip()
        return cls(templates=MappingProxyType(templates))


def load_template_table(path: Path) -> ResponseTemplateTable:
    """Lê e valida um arquivo YAML de templates.

    Raises:
        TemplateAssetError: Arquivo ausente, YAML inválido ou template vazio.
    """
    if not path.is_file():
        raise TemplateAssetError(f"Arquivo de templates não encontrado: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise TemplateAssetError(f"YAML inválido em {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise TemplateAssetError(f"Raiz do YAML deve ser um mapa: {path.name}")

    table = ResponseTemplateTable.from_mapping(data)
    logger.info(
        "response_templates_loaded",
        extra={"component": "template_loader", "templates": len(table)},
    )
    return table


@lru_cache(maxsize=1)
def get_template_table() -> ResponseTemplateTable:
    """Retorna a tabela padrão (carregada uma vez por processo)."""
    return load_template_table(DEFAULT_TEMPLATES_PATH)
