"""Settings do Firestore (conversas persistidas)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_DATABASE = "(default)"
DEFAULT_COLLECTION = "riley_conversations"


@dataclass(frozen=True)
class FirestoreSettings:
    """Configurações do Firestore.

    Attributes:
        project_id: Projeto GCP; vazio cai no GCP_PROJECT
        database: Banco Firestore nomeado
        collection_conversations: Collection dos documentos de conversa
    """

    project_id: str = ""
    database: str = DEFAULT_DATABASE
    collection_conversations: str = DEFAULT_COLLECTION

    def resolve_project(self, gcp_project: str) -> str:
        return self.project_id or gcp_project

    def validate(self, gcp_project: str) -> list[str]:
        errors: list[str] = []
        if not self.resolve_project(gcp_project):
            errors.append("FIRESTORE_PROJECT_ID ou GCP_PROJECT deve estar configurado")
        if not self.database:
            errors.append("FIRESTORE_DATABASE não pode ser vazio")
        if not self.collection_conversations or "/" in self.collection_conversations:
            errors.append("FIRESTORE_COLLECTION_CONVERSATIONS inválida")
        return errors


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    """Retorna FirestoreSettings lido do ambiente (cacheado)."""
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        database=os.getenv("FIRESTORE_DATABASE", DEFAULT_DATABASE),
        collection_conversations=os.getenv(
            "FIRESTORE_COLLECTION_CONVERSATIONS", DEFAULT_COLLECTION
        ),
    )
