"""Firestore Conversation Store: persistência permanente de conversas.

Estrutura no Firestore:
    {collection}/{conversation_id}
        participant_id, channel, status, messages[], metadata{},
        created_at, updated_at, expires_at

Características:
    - Mensagens anexadas com ArrayUnion (append-only)
    - Metadata com merge aditivo (update por field path `metadata.<chave>`)
    - Conversa inexistente: o `NotFound` do update vira ConversationNotFoundError
    - TTL via Firestore TTL policy no campo `expires_at` (configurar no console)
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud.firestore import ArrayUnion, Query
from google.cloud.firestore_v1.field_path import FieldPath

from app.domain.conversation import (
    Channel,
    Conversation,
    ConversationStatus,
    Message,
    new_conversation_id,
    utc_now,
)
from app.protocols.conversation_store import ConversationStoreProtocol
from utils.errors import ConversationNotFoundError, PersistenceError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from google.cloud.firestore import Client as FirestoreClient
    from google.cloud.firestore import DocumentReference, DocumentSnapshot

    from app.domain.conversation import ConversationInit

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION = "riley_conversations"
DEFAULT_TTL_DAYS = 30


class FirestoreConversationStore(ConversationStoreProtocol):
    """Store de conversas usando Firestore.

    Usa asyncio.to_thread pois o Firestore SDK não tem async nativo.
    Erros do SDK viram PersistenceError (sem retry aqui).

    Args:
        firestore_client: Cliente Firestore
        collection: Nome da collection
        ttl_days: Validade do documento após a última atualização
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        *,
        collection: str = DEFAULT_COLLECTION,
        ttl_days: int = DEFAULT_TTL_DAYS,
    ) -> None:
        self._db = firestore_client
        self._collection = collection
        self._ttl = timedelta(days=ttl_days)

    def _doc(self, conversation_id: str) -> DocumentReference:
        return self._db.collection(self._collection).document(conversation_id)

    def _touch(self) -> dict[str, Any]:
        now = utc_now()
        return {"updated_at": now, "expires_at": now + self._ttl}

    async def find_by_participant(
        self,
        participant_id: str,
        *,
        channel: Channel | None = None,
    ) -> Conversation | None:
        return await self._run(
            "find_by_participant",
            self._find_by_participant_sync,
            participant_id,
            channel,
        )

    def _find_by_participant_sync(
        self,
        participant_id: str,
        channel: Channel | None,
    ) -> Conversation | None:
        query = self._db.collection(self._collection).where("participant_id", "==", participant_id)
        if channel is not None:
            query = query.where("channel", "==", channel.value)
        docs = list(query.order_by("updated_at", direction=Query.DESCENDING).limit(1).stream())
        return _from_snapshot(docs[0]) if docs else None

    async def find_by_id(self, conversation_id: str) -> Conversation | None:
        return await self._run("find_by_id", self._find_by_id_sync, conversation_id)

    def _find_by_id_sync(self, conversation_id: str) -> Conversation | None:
        snapshot = self._doc(conversation_id).get()
        return _from_snapshot(snapshot) if snapshot.exists else None

    async def create(self, init: ConversationInit) -> Conversation:
        return await self._run("create", self._create_sync, init)

    def _create_sync(self, init: ConversationInit) -> Conversation:
        now = utc_now()
        conversation = Conversation(
            id=new_conversation_id(),
            participant_id=init.participant_id,
            channel=init.channel,
            metadata=dict(init.metadata),
            created_at=now,
            updated_at=now,
        )
        self._doc(conversation.id).create(
            {
                "participant_id": conversation.participant_id,
                "channel": conversation.channel.value,
                "status": conversation.status.value,
                "messages": [],
                "metadata": conversation.metadata,
                "created_at": now,
                **self._touch(),
            }
        )
        logger.debug("conversation_created", extra={"conversation_id": conversation.id})
        return conversation

    async def append_message(self, conversation_id: str, message: Message) -> Conversation:
        return await self._run(
            "append_message",
            self._update_sync,
            conversation_id,
            {"messages": ArrayUnion([message.to_dict()])},
        )

    async def update_status(
        self,
        conversation_id: str,
        status: ConversationStatus,
    ) -> Conversation:
        return await self._run(
            "update_status",
            self._update_sync,
            conversation_id,
            {"status": status.value},
        )

    async def update_metadata(
        self,
        conversation_id: str,
        updates: Mapping[str, Any],
    ) -> Conversation:
        fields = {
            FieldPath("metadata", key).to_api_repr(): value for key, value in updates.items()
        }
        return await self._run("update_metadata", self._update_sync, conversation_id, fields)

    def _update_sync(self, conversation_id: str, fields: dict[str, Any]) -> Conversation:
        doc = self._doc(conversation_id)
        try:
            doc.update({**fields, **self._touch()})
        except NotFound as exc:
            raise ConversationNotFoundError(conversation_id) from exc
        snapshot = doc.get()
        if not snapshot.exists:
            raise ConversationNotFoundError(conversation_id)
        return _from_snapshot(snapshot)

    async def list_recent(
        self,
        *,
        limit: int = 50,
        status: ConversationStatus | None = None,
        participant_id: str | None = None,
    ) -> Sequence[Conversation]:
        return await self._run(
            "list_recent",
            self._list_recent_sync,
            limit,
            status,
            participant_id,
        )

    def _list_recent_sync(
        self,
        limit: int,
        status: ConversationStatus | None,
        participant_id: str | None,
    ) -> list[Conversation]:
        query = self._db.collection(self._collection)
        if status is not None:
            query = query.where("status", "==", status.value)
        if participant_id is not None:
            query = query.where("participant_id", "==", participant_id)
        query = query.order_by("updated_at", direction=Query.DESCENDING)
        docs = query.limit(max(limit, 0)).stream()
        return [_from_snapshot(doc) for doc in docs]

    async def _run(self, operation: str, func: Any, *args: Any) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except GoogleAPIError as exc:
            logger.error(
                "conversation_store_error",
                extra={"operation": operation, "error_type": type(exc).__name__},
            )
            raise PersistenceError(f"Erro no Firestore ({operation}): {exc}") from exc


def _from_snapshot(snapshot: DocumentSnapshot) -> Conversation:
    data = snapshot.to_dict() or {}
    created_at = data.get("created_at") or utc_now()
    return Conversation(
        id=snapshot.id,
        participant_id=str(data.get("participant_id", "")),
        channel=Channel(data.get("channel", Channel.SMS.value)),
        status=ConversationStatus(data.get("status", ConversationStatus.ACTIVE.value)),
        messages=tuple(Message.from_dict(item) for item in data.get("messages") or ()),
        metadata=dict(data.get("metadata") or {}),
        created_at=created_at,
        updated_at=data.get("updated_at") or created_at,
    )
