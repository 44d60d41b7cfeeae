"""
Gateway orchestrator.

Runs one user turn against one or more (provider, model) targets
concurrently, forwards their streamed chunks to a single sink and merges
the results into one assistant message.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, List, Optional, Protocol, Sequence

from opentelemetry import trace
from pydantic import ValidationError

from .core.errors import (
    AllProvidersFailedError,
    GatewayDecodeError,
    GatewayError,
    GatewayNotFoundError,
    NoValidProvidersError,
)
from .core.history import ConversationStore
from .core.interface import ChatProvider
from .core.registry import ProviderRegistry, get_registry
from .models.message import Message, ModelSelection, ProviderConfig
from .models.stream import ChunkCallback, StreamChunk

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

TRANSCRIPT_SEPARATOR = "\n\n"


class ProviderSettingsSource(Protocol):
    """What the orchestrator needs from settings storage."""

    def get_provider_config(self, provider_id: str) -> Optional[ProviderConfig]:
        ...

    def is_streaming_enabled(self, provider_id: str) -> bool:
        ...


class TargetStatus(str, Enum):
    """Lifecycle of one target within a turn."""
    PENDING = "pending"
    SENDING = "sending"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TargetOutcome:
    """Result of one target; failures are recorded, never raised."""
    selection: ModelSelection
    status: TargetStatus = TargetStatus.PENDING
    text: str = ""
    error: Optional[GatewayError] = None
    chunks_received: int = 0

    @property
    def label(self) -> str:
        return f"{self.selection.provider_id}/{self.selection.model_id}"


@dataclass
class TurnResult:
    """Aggregated outcome of a turn."""
    message: Message
    outcomes: List[TargetOutcome] = field(default_factory=list)

    @property
    def failures(self) -> List[TargetOutcome]:
        return [o for o in self.outcomes if o.status == TargetStatus.FAILED]


@dataclass
class _Target:
    selection: ModelSelection
    client: ChatProvider
    streaming: bool


_TURN_FINISHED = object()


class GatewayOrchestrator:
    """
    Fans a user turn out to the selected providers.

    Targets share one history snapshot, run as independent asyncio tasks and
    fail independently. The conversation lock is only taken to snapshot and
    append, never while a request is in flight.
    """

    def __init__(
        self,
        history: ConversationStore,
        settings: ProviderSettingsSource,
        registry: Optional[ProviderRegistry] = None,
        max_concurrency: Optional[int] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            history: Conversation the turn reads from and appends to
            settings: Source of per-provider configuration
            registry: Provider registry (defaults to the global one)
            max_concurrency: Upper bound on simultaneous targets (None = unbounded)
        """
        self.history = history
        self.settings = settings
        self.registry = registry or get_registry()
        self.max_concurrency = max_concurrency

    async def send_turn(
        self,
        message: str,
        selections: Sequence[ModelSelection],
        on_chunk: Optional[ChunkCallback] = None,
    ) -> Message:
        """
        Run one turn and return the aggregated assistant message.

        Raises:
            NoValidProvidersError: No selection resolved to a usable provider
            AllProvidersFailedError: Every target failed
        """
        result = await self.run_turn(message, selections, on_chunk=on_chunk)
        return result.message

    async def stream_turn(
        self,
        message: str,
        selections: Sequence[ModelSelection],
    ) -> AsyncIterator[StreamChunk]:
        """
        Run one turn, yielding tagged chunks as they arrive.

        The assistant message is appended to the conversation when the turn
        succeeds; turn errors are raised after the last chunk. Closing the
        iterator early cancels the turn.
        """
        queue: asyncio.Queue = asyncio.Queue()
        turn = asyncio.create_task(
            self.run_turn(message, selections, on_chunk=queue.put_nowait)
        )
        turn.add_done_callback(lambda _: queue.put_nowait(_TURN_FINISHED))

        try:
            while True:
                item = await queue.get()
                if item is _TURN_FINISHED:
                    break
                yield item
            turn.result()
        finally:
            if not turn.done():
                turn.cancel()
                try:
                    await turn
                except asyncio.CancelledError:
                    pass

    async def run_turn(
        self,
        message: str,
        selections: Sequence[ModelSelection],
        on_chunk: Optional[ChunkCallback] = None,
    ) -> TurnResult:
        """Run one turn and return the message plus per-target outcomes."""
        with tracer.start_as_current_span("send_turn") as span:
            user_message = Message.user(message)
            snapshot = self.history.get_history() + [user_message]
            self.history.append_message(user_message)

            targets = self._resolve_targets(selections)
            span.set_attribute("targets", len(targets))
            if not targets:
                raise NoValidProvidersError("No configured provider for the selected models")

            tagged = len(targets) > 1
            semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
            outcomes = [TargetOutcome(selection=t.selection) for t in targets]

            tasks = [
                asyncio.create_task(
                    self._run_target(target, outcome, snapshot, on_chunk, tagged, semaphore)
                )
                for target, outcome in zip(targets, outcomes)
            ]
            try:
                await asyncio.gather(*tasks)
            finally:
                for task in tasks:
                    if not task.done():
                        task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)

            succeeded = [o for o in outcomes if o.status == TargetStatus.COMPLETED]
            failed = [o for o in outcomes if o.status == TargetStatus.FAILED]
            span.set_attribute("succeeded", len(succeeded))
            span.set_attribute("failed", len(failed))

            if not succeeded:
                raise AllProvidersFailedError(
                    "All providers failed: "
                    + "; ".join(f"{o.label}: {o.error.message}" for o in failed),
                    errors=[o.error for o in failed],
                )

            reply = Message.assistant(
                TRANSCRIPT_SEPARATOR.join(o.text for o in succeeded),
                model=", ".join(o.selection.model_id for o in succeeded),
            )
            self.history.append_message(reply)
            logger.info(
                f"Turn completed: {len(succeeded)} succeeded, {len(failed)} failed"
            )
            return TurnResult(message=reply, outcomes=outcomes)

    def _resolve_targets(self, selections: Sequence[ModelSelection]) -> List[_Target]:
        targets = []
        for selection in selections:
            try:
                base_config = self.settings.get_provider_config(selection.provider_id)
                if base_config is None:
                    logger.warning(f"Dropping {selection.model_id}: provider {selection.provider_id} is not configured")
                    continue
                client = self.registry.create(
                    selection.provider_id, base_config.with_model(selection.model_id)
                )
            except (GatewayNotFoundError, ValidationError) as e:
                logger.warning(f"Dropping {selection.model_id}: {e}")
                continue
            targets.append(_Target(
                selection=selection,
                client=client,
                streaming=self.settings.is_streaming_enabled(selection.provider_id),
            ))
        return targets

    async def _run_target(
        self,
        target: _Target,
        outcome: TargetOutcome,
        history: List[Message],
        on_chunk: Optional[ChunkCallback],
        tagged: bool,
        semaphore: Optional[asyncio.Semaphore],
    ) -> None:
        if semaphore is not None:
            async with semaphore:
                await self._send(target, outcome, history, on_chunk, tagged)
        else:
            await self._send(target, outcome, history, on_chunk, tagged)

    async def _send(
        self,
        target: _Target,
        outcome: TargetOutcome,
        history: List[Message],
        on_chunk: Optional[ChunkCallback],
        tagged: bool,
    ) -> None:
        selection = target.selection

        def forward(chunk: StreamChunk) -> None:
            if not chunk.is_done:
                outcome.status = TargetStatus.STREAMING
                outcome.chunks_received += 1
            text = chunk.text
            if tagged and text:
                text = f"[{selection.model_id}] {text}"
            on_chunk(StreamChunk(
                text=text,
                is_done=chunk.is_done,
                model=selection.model_id,
                provider=selection.provider_id,
            ))

        with tracer.start_as_current_span("provider_send") as span:
            span.set_attribute("provider", selection.provider_id)
            span.set_attribute("model", selection.model_id)
            span.set_attribute("streaming", target.streaming and on_chunk is not None)

            outcome.status = TargetStatus.SENDING
            try:
                outcome.text = await target.client.send(
                    history,
                    forward if on_chunk is not None else None,
                    streaming=target.streaming,
                )
            except GatewayError as e:
                self._fail(outcome, e, span)
                return
            except Exception as e:
                # CancelledError is not an Exception and still propagates.
                logger.error(f"Unexpected {e.__class__.__name__} from {outcome.label}")
                self._fail(outcome, GatewayDecodeError(
                    f"Unexpected {e.__class__.__name__} from provider",
                    gateway=selection.provider_id,
                ), span)
                return

            outcome.status = TargetStatus.COMPLETED

    @staticmethod
    def _fail(outcome: TargetOutcome, error: GatewayError, span) -> None:
        outcome.status = TargetStatus.FAILED
        outcome.error = error
        span.set_attribute("error", error.kind.value)
        logger.warning(f"Target {outcome.label} failed ({error.kind.value}): {error.message}")
