"""Audit orchestrator: the public operations of the provider layer.

Operations
----------
``analyze_structured_data``
    Scenario-specific structured audit of pasted transaction data, returned
    as a validated :class:`StructuredAuditResult`.
``analyze_document``
    Forensic analysis of a receipt/document image or PDF, returned as
    Markdown. Providers without vision support are redirected to their
    configured ``vision_fallback`` (DeepSeek -> Gemini) with a note prefixed
    to the result; without a fallback the call fails before any I/O.
``send_chat_message``
    Consultant-persona chat. With an ``on_increment`` sink the reply is
    streamed and the sink receives the full text so far after every
    increment; without one a single non-streaming call is made.

Every call is independent: it snapshots its conversation, builds its own
request and decoder state, and shares only the read-only registry and the
pooled HTTP clients. Nothing is retried. Each call is tracked by a
``CallTracker`` (see ``audit.state``) and every failure propagates as a
``ProviderError`` subclass or ``CancelledError``.

Module-level async functions with the same names use a process-wide default
orchestrator bound to ``get_registry()``.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from functools import lru_cache
from typing import Awaitable, Optional, Sequence, Tuple, Type, TypeVar, Union

from ..base.cancellation import CancellationToken, CancelledError
from ..base.dto import StructuredAuditResult
from ..base.errors import ConfigurationError, ErrorCode, ProviderError, TransportError
from ..base.factory import get_family
from ..base.http import TransportClient
from ..base.logging import get_logger, log_event
from ..base.models import (
    Attachment,
    AuditScenario,
    ChatTurn,
    Conversation,
    Language,
    OutputSchema,
    ProviderConfig,
    ProviderId,
)
from ..base.payloads import build_request
from ..base.streaming import Sink, StreamAccumulator
from ..base.timeouts import get_timeout_config
from ..registry import ProviderRegistry, get_registry
from .parsing import parse_audit_result
from .prompts import (
    NO_ANALYSIS_TEXT,
    document_prompt,
    persona_instruction,
    redirect_note,
    scenario_instruction,
    structured_audit_prompt,
)
from .schema import AUDIT_RESULT_SCHEMA
from .state import CallPhase, CallTracker

_logger = get_logger("audit")

E = TypeVar("E", bound=Enum)
T = TypeVar("T")


def _coerce(enum_cls: Type[E], value: Union[E, str], label: str, provider: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise ConfigurationError(f"Unsupported {label}: {value!r}", provider=provider) from None


class AuditOrchestrator:
    """Composes registry, payload builder, transport and stream decoding.

    Args:
        registry: Provider configs; defaults to the process-wide
            :func:`get_registry` (resolved lazily on first use).
        transport: Transport to send requests through; tests inject one
            wrapping ``httpx.MockTransport``.
    """

    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        transport: Optional[TransportClient] = None,
    ) -> None:
        self._registry = registry
        self._transport = transport or TransportClient()

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry if self._registry is not None else get_registry()

    def config_for(self, provider_id: Union[ProviderId, str, None]) -> ProviderConfig:
        """OpenAI-compatible config when ``resolve`` finds one, else the primary provider."""
        cfg = self.registry.resolve(provider_id)
        if cfg is not None:
            return cfg
        if ProviderId.parse(provider_id) is None:
            log_event(
                _logger,
                "audit.unknown_provider",
                level=logging.WARNING,
                requested=str(provider_id),
                using=self.registry.primary().identifier.value,
            )
        return self.registry.primary()

    # ------------------------------------------------------------------ ops

    async def analyze_structured_data(
        self,
        raw_text: str,
        provider_id: Union[ProviderId, str] = "gemini",
        language: Union[Language, str] = "en",
        scenario: Union[AuditScenario, str] = "general",
    ) -> StructuredAuditResult:
        """Run a structured audit over ``raw_text``.

        Raises:
            ConfigurationError: missing credential or invalid selector.
            ParseError: empty reply, invalid JSON, or schema mismatch.
            TransportError, CredentialRevokedError, ModelUnreachableError,
            ProviderError: the provider call failed.
        """
        config = self.config_for(provider_id)
        provider = config.identifier.value
        lang = _coerce(Language, language, "language", provider)
        scen = _coerce(AuditScenario, scenario, "scenario", provider)
        tracker = CallTracker("audit.structured", provider, config.model)

        async def _run() -> StructuredAuditResult:
            text = await self._exchange(
                tracker,
                config,
                None,
                ChatTurn.user(structured_audit_prompt(raw_text, lang)),
                system_instruction=scenario_instruction(scen, lang),
                output_schema=AUDIT_RESULT_SCHEMA,
            )
            return parse_audit_result(text, provider, config.model)

        return await self._guard(tracker, _run())

    async def analyze_document(
        self,
        file_bytes: bytes,
        mime_type: str,
        provider_id: Union[ProviderId, str] = "gemini",
        language: Union[Language, str] = "en",
        scenario: Union[AuditScenario, str] = "general",
    ) -> str:
        """Forensic analysis of one image/PDF; returns Markdown.

        Raises:
            ConfigurationError: the provider lacks vision support and has no
                fallback, or the credential is missing. Raised before any I/O.
        """
        requested = self.config_for(provider_id)
        lang = _coerce(Language, language, "language", requested.identifier.value)
        scen = _coerce(AuditScenario, scenario, "scenario", requested.identifier.value)
        target, note = self._vision_target(requested)
        tracker = CallTracker("audit.document", target.identifier.value, target.model_for(vision=True))
        message = ChatTurn.user(
            document_prompt(scen, lang),
            [Attachment(mime_type=mime_type, data=file_bytes)],
        )

        async def _run() -> str:
            text = await self._exchange(tracker, target, None, message)
            return note + (text if text.strip() else NO_ANALYSIS_TEXT)

        return await self._guard(tracker, _run())

    async def send_chat_message(
        self,
        conversation: Conversation,
        new_message: str,
        provider_id: Union[ProviderId, str] = "gemini",
        language: Union[Language, str] = "en",
        on_increment: Optional[Sink] = None,
        cancel_token: Optional[CancellationToken] = None,
        attachments: Sequence[Attachment] = (),
    ) -> str:
        """Send ``new_message`` after ``conversation`` and return the reply.

        With ``on_increment`` the call streams; the sink receives the full
        accumulated text after each increment and the final text (a single
        space when nothing was decoded) is returned. ``cancel_token`` stops a
        stream between chunks with ``CancelledError``.
        """
        config = self.config_for(provider_id)
        lang = _coerce(Language, language, "language", config.identifier.value)
        history = tuple(conversation)
        message = ChatTurn.user(new_message, attachments)
        tracker = CallTracker("chat", config.identifier.value, config.model_for(vision=message.has_attachments))

        async def _run() -> str:
            return await self._exchange(
                tracker,
                config,
                history,
                message,
                system_instruction=persona_instruction(lang),
                sink=on_increment,
                cancel_token=cancel_token,
            )

        return await self._guard(tracker, _run())

    # -------------------------------------------------------------- helpers

    def _vision_target(self, requested: ProviderConfig) -> Tuple[ProviderConfig, str]:
        family = get_family(requested.identifier)
        if family.supports_vision(requested):
            return requested, ""
        if requested.vision_fallback is not None:
            target = self.registry.get(requested.vision_fallback)
            log_event(
                _logger,
                "audit.vision_redirect",
                requested=requested.identifier.value,
                using=target.identifier.value,
            )
            return target, redirect_note(requested.display_name, target.display_name)
        raise ConfigurationError(
            f"{requested.display_name} does not support image or document input.",
            requested.identifier.value,
            requested.model,
        )

    async def _exchange(
        self,
        tracker: CallTracker,
        config: ProviderConfig,
        conversation: Optional[Conversation],
        message: ChatTurn,
        *,
        system_instruction: Optional[str] = None,
        output_schema: Optional[OutputSchema] = None,
        sink: Optional[Sink] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """Build, send and read one request; returns the reply text."""
        stream = sink is not None
        tracker.advance(CallPhase.BUILDING, stream=stream)
        request = build_request(
            config,
            conversation,
            message,
            system_instruction=system_instruction,
            output_schema=output_schema,
            stream=stream,
        )
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        tracker.advance(CallPhase.SENT, endpoint=request.url)
        response = await self._transport.send(request, config, tracker.ctx)
        family = get_family(config.identifier)
        if stream:
            tracker.advance(CallPhase.STREAMING)
            accumulator = StreamAccumulator(
                family.stream_decoder(config),
                family.extract_text,
                extract_usage=family.extract_usage,
                cancel_token=cancel_token,
                ctx=tracker.ctx,
            )
            return await accumulator.run(response.iter_bytes(), sink)
        tracker.advance(CallPhase.AWAITING_RESPONSE)
        body = response.json()
        tokens = family.extract_usage(body) if isinstance(body, dict) else None
        if tokens is not None:
            log_event(_logger, "audit.usage", tracker.ctx, tokens=tokens)
        return family.extract_response_text(body) if isinstance(body, dict) else ""

    async def _guard(self, tracker: CallTracker, work: Awaitable[T]) -> T:
        """Apply the overall deadline and record the terminal phase."""
        deadline = get_timeout_config().overall_timeout_seconds
        try:
            if deadline is None:
                result = await work
            else:
                result = await asyncio.wait_for(work, timeout=deadline)
        except asyncio.TimeoutError as exc:
            tracker.fail(ErrorCode.TIMEOUT)
            if deadline is None:
                raise
            raise TransportError(
                code=ErrorCode.TIMEOUT,
                message=f"Request exceeded the {deadline:g}s deadline.",
                provider=tracker.ctx.provider or "unknown",
                model=tracker.ctx.model,
                raw=exc,
            ) from exc
        except ProviderError as exc:
            tracker.fail(exc.code)
            raise
        except (CancelledError, asyncio.CancelledError):
            tracker.fail(ErrorCode.CANCELLED)
            raise
        tracker.advance(CallPhase.COMPLETED)
        return result


@lru_cache(maxsize=1)
def get_orchestrator() -> AuditOrchestrator:
    """Process-wide orchestrator bound to :func:`get_registry`."""
    return AuditOrchestrator()


async def analyze_structured_data(
    raw_text: str,
    provider_id: Union[ProviderId, str] = "gemini",
    language: Union[Language, str] = "en",
    scenario: Union[AuditScenario, str] = "general",
) -> StructuredAuditResult:
    return await get_orchestrator().analyze_structured_data(raw_text, provider_id, language, scenario)


async def analyze_document(
    file_bytes: bytes,
    mime_type: str,
    provider_id: Union[ProviderId, str] = "gemini",
    language: Union[Language, str] = "en",
    scenario: Union[AuditScenario, str] = "general",
) -> str:
    return await get_orchestrator().analyze_document(file_bytes, mime_type, provider_id, language, scenario)


async def send_chat_message(
    conversation: Conversation,
    new_message: str,
    provider_id: Union[ProviderId, str] = "gemini",
    language: Union[Language, str] = "en",
    on_increment: Optional[Sink] = None,
    cancel_token: Optional[CancellationToken] = None,
    attachments: Sequence[Attachment] = (),
) -> str:
    return await get_orchestrator().send_chat_message(
        conversation, new_message, provider_id, language, on_increment, cancel_token, attachments
    )


__all__ = [
    "AuditOrchestrator",
    "get_orchestrator",
    "analyze_structured_data",
    "analyze_document",
    "send_chat_message",
]
