"""Caso de uso: processar mensagem inbound e produzir a resposta.

Fluxo (estritamente sequencial, uma task por mensagem):
1. Valida input
2. Serializa por participante
3. Localiza ou cria a conversa
4. Analisa e persiste a mensagem do usuário (com análise anexada)
5. Gera resposta: after-hours → colaboradores generativos → regras
6. Persiste a resposta e registra flags de escalonamento na metadata

Falhas do colaborador generativo nunca sobem: caem para as regras.
Falhas de persistência propagam sem retry.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ai.models.analysis import Intent, MessageAnalysis, Urgency
from ai.models.generation import GenerationContext, HistoryTurn
from ai.rules.fallbacks import rule_based_reply
from ai.rules.message_analyzer import analyze_message
from app.domain.conversation import (
    Channel,
    Conversation,
    ConversationInit,
    Message,
    MessageRole,
    caller_context_from_metadata,
    utc_now,
)
from app.observability import record_escalation, record_latency, record_reply_source
from app.use_cases.conversations.participant_locks import ParticipantLocks
from config.logging import log_fallback
from utils.errors import ValidationError

if TYPE_CHECKING:
    from ai.config.template_loader import ResponseTemplateTable
    from ai.core.client import GenerativeResponderProtocol
    from ai.models.caller_context import CallerContext
    from app.protocols.conversation_store import ConversationStoreProtocol
    from app.services.business_hours import BusinessHours
    from config.settings.riley import RileySettings

logger = logging.getLogger(__name__)

DEFAULT_GENERATION_TIMEOUT_SECONDS = 5.0
DEFAULT_HISTORY_WINDOW = 10

REPLY_SOURCE_AFTER_HOURS = "after_hours"
REPLY_SOURCE_GENERATIVE_PREFIX = "generative:"
REPLY_SOURCE_RULES_PREFIX = "rules:"

ESCALATION_INTENTS = frozenset({Intent.EMERGENCY, Intent.COMPLAINT})


@dataclass(frozen=True, slots=True)
class InboundResult:
    """Resultado do processamento de uma mensagem inbound.

    Atributos:
        conversation_id: Conversa onde a troca foi registrada
        reply_text: Texto entregue ao participante
        timestamp: Momento em que a resposta foi registrada
        analysis: Análise da mensagem do usuário
        reply_source: Origem da resposta (after_hours, generative:<nome>,
            rules:<regra>)
    """

    conversation_id: str
    reply_text: str
    timestamp: datetime
    analysis: MessageAnalysis
    reply_source: str


def parse_channel(channel: str | Channel | None) -> Channel:
    """Converte o canal informado; ausente vira web, desconhecido levanta ValidationError."""
    if isinstance(channel, Channel):
        return channel
    value = (channel or "").strip().lower()
    if not value:
        return Channel.WEB
    try:
        return Channel(value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in Channel)
        raise ValidationError("channel", f"channel must be one of: {allowed}") from exc


def escalation_metadata(analysis: MessageAnalysis) -> dict[str, Any]:
    """Flags de escalonamento registradas após cada troca (sem mudar status)."""
    updates: dict[str, Any] = {"last_intent": analysis.intent.value}
    if analysis.urgency is Urgency.HIGH:
        updates["escalation_requested"] = True
        updates["escalation_reason"] = "high_urgency"
    elif analysis.intent in ESCALATION_INTENTS:
        updates["escalation_requested"] = True
        updates["escalation_reason"] = analysis.intent.value
    return updates


class ConversationOrchestrator:
    """Orquestra analisador, seletor, colaboradores generativos e store.

    Args:
        store: Conversation store
        templates: Tabela de templates (somente leitura)
        settings: Settings de negócio (empresa, persona)
        responders: Colaboradores generativos, tentados em ordem, uma vez cada
        business_hours: Horário de atendimento (None desativa after-hours)
        generation_timeout_seconds: Timeout por colaborador generativo
        history_window: Quantidade de turnos recentes enviados ao LLM
        locks: Registro de locks por participante
        clock: Relógio (UTC) usado para after-hours e metadata
    """

    def __init__(
        self,
        *,
        store: ConversationStoreProtocol,
        templates: ResponseTemplateTable,
        settings: RileySettings,
        responders: Sequence[GenerativeResponderProtocol] = (),
        business_hours: BusinessHours | None = None,
        generation_timeout_seconds: float = DEFAULT_GENERATION_TIMEOUT_SECONDS,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        locks: ParticipantLocks | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._templates = templates
        self._settings = settings
        self._responders = tuple(responders)
        self._business_hours = business_hours
        self._timeout = generation_timeout_seconds
        self._history_window = history_window
        self._locks = locks or ParticipantLocks()
        self._clock = clock

    async def handle_inbound(
        self,
        participant_id: str,
        channel: str | Channel | None,
        text: str,
        *,
        conversation_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> InboundResult:
        """Processa uma mensagem inbound.

        Raises:
            ValidationError: participantId ou text ausente, channel desconhecido
            PersistenceError: Falha do store (propaga sem retry)
        """
        participant = (participant_id or "").strip()
        if not participant:
            raise ValidationError("participantId")
        if not text or not text.strip():
            raise ValidationError("text")
        resolved_channel = parse_channel(channel)

        started = time.perf_counter()
        async with self._locks.hold(participant):
            conversation = await self._resolve_conversation(
                participant, resolved_channel, conversation_id, metadata or {}
            )
            analysis = analyze_message(text)
            conversation = await self._store.append_message(
                conversation.id, Message.user(text, analysis)
            )

            context = caller_context_from_metadata(conversation.metadata)
            reply_text, reply_source = await self._compose_reply(
                text, analysis, context, conversation
            )
            reply = Message.assistant(reply_text, reply_source=reply_source)
            conversation = await self._store.append_message(conversation.id, reply)
            flags = escalation_metadata(analysis)
            await self._store.update_metadata(conversation.id, flags)

        if flags.get("escalation_requested"):
            record_escalation(flags["escalation_reason"], conversation.id, resolved_channel.value)
        record_reply_source(reply_source, resolved_channel.value)
        record_latency(
            "orchestrator",
            "handle_inbound",
            (time.perf_counter() - started) * 1000,
        )
        logger.info(
            "inbound_message_handled",
            extra={
                "conversation_id": conversation.id,
                "participant_id": participant,
                "channel": resolved_channel.value,
                "intent": analysis.intent.value,
                "urgency": analysis.urgency.value,
                "reply_source": reply_source,
            },
        )
        return InboundResult(
            conversation_id=conversation.id,
            reply_text=reply_text,
            timestamp=reply.timestamp,
            analysis=analysis,
            reply_source=reply_source,
        )

    async def _resolve_conversation(
        self,
        participant_id: str,
        channel: Channel,
        conversation_id: str | None,
        metadata: dict[str, Any],
    ) -> Conversation:
        conversation: Conversation | None
        if conversation_id:
            conversation = await self._store.find_by_id(conversation_id)
            if conversation is None or conversation.participant_id != participant_id:
                logger.info(
                    "conversation_not_found_creating",
                    extra={"conversation_id": conversation_id},
                )
                conversation = None
        else:
            conversation = await self._store.find_by_participant(participant_id, channel=channel)

        if conversation is None or not conversation.is_active:
            init = ConversationInit(
                participant_id=participant_id,
                channel=channel,
                metadata={
                    "source": channel.value,
                    "start_time": self._clock().isoformat(),
                    **metadata,
                },
            )
            conversation = await self._store.create(init)
            logger.info(
                "conversation_created",
                extra={"conversation_id": conversation.id, "channel": channel.value},
            )
            return conversation

        new_keys = {k: v for k, v in metadata.items() if conversation.metadata.get(k) != v}
        if new_keys:
            conversation = await self._store.update_metadata(conversation.id, new_keys)
        return conversation

    async def _compose_reply(
        self,
        text: str,
        analysis: MessageAnalysis,
        context: CallerContext,
        conversation: Conversation,
    ) -> tuple[str, str]:
        now = self._clock()
        if self._business_hours is not None and self._business_hours.should_send_after_hours(now):
            message = self._business_hours.after_hours_message(context.customer_name or "", now)
            if message:
                return message, REPLY_SOURCE_AFTER_HOURS

        if self._responders:
            generation_context = self._generation_context(analysis, conversation)
            for responder in self._responders:
                generated = await self._try_generate(responder, text, generation_context)
                if generated:
                    return generated, f"{REPLY_SOURCE_GENERATIVE_PREFIX}{responder.name}"

        selected = rule_based_reply(
            analysis,
            context,
            self._templates,
            company_name=self._settings.company_name,
        )
        return selected.text, f"{REPLY_SOURCE_RULES_PREFIX}{selected.rule}"

    async def _try_generate(
        self,
        responder: GenerativeResponderProtocol,
        text: str,
        context: GenerationContext,
    ) -> str | None:
        started = time.perf_counter()
        try:
            generated = await asyncio.wait_for(responder.generate(text, context), self._timeout)
        except TimeoutError:
            reason = "timeout"
        except Exception as exc:
            # Qualquer falha do colaborador é recuperada localmente
            reason = type(exc).__name__
        else:
            if generated and generated.strip():
                return generated.strip()
            reason = "empty_response"

        log_fallback(
            logger,
            f"reply_generation:{responder.name}",
            reason,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return None

    def _generation_context(
        self,
        analysis: MessageAnalysis,
        conversation: Conversation,
    ) -> GenerationContext:
        # A última mensagem é o próprio input do usuário (vai como prompt)
        previous = conversation.messages[:-1]
        recent = previous[-self._history_window :] if self._history_window > 0 else ()
        history = tuple(
            HistoryTurn(
                role="user" if message.role is MessageRole.USER else "assistant",
                content=message.content,
            )
            for message in recent
        )
        return GenerationContext(
            company_name=self._settings.company_name,
            personality=self._settings.personality,
            company_details=dict(self._settings.company_details),
            negative_filters=self._settings.negative_filters,
            thread_history=history,
            analysis=analysis.to_dict(),
        )
