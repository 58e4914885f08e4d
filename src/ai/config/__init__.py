"""Configuração de IA.

Re-exporta o loader da tabela de templates.
"""

from ai.config.template_loader import (
    DEFAULT_TEMPLATES_PATH,
    ResponseTemplateTable,
    TemplateAssetError,
    TemplateNotFoundError,
    get_template_table,
    load_template_table,
)

__all__ = [
    "DEFAULT_TEMPLATES_PATH",
    "ResponseTemplateTable",
    "TemplateAssetError",
    "TemplateNotFoundError",
    "get_template_table",
    "load_template_table",
]
