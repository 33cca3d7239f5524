"""
LLM Provider Base Interface

Abstract base class and data types for provider adapters.

Every adapter speaks its vendor's raw HTTP protocol through httpx and
normalizes it into one contract:
- complete(): one blocking call to the non-streaming endpoint
- stream(): incremental read of the streaming endpoint, reported to the caller
  as StreamingProgressEvent snapshots through an on_event callback

Subclasses only describe the wire format (URL, headers, body, frame parsing);
the read loop, progress accounting and terminal-event rules live here.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing, asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Literal
from uuid import uuid4

import httpx

from codeforge.core.cancellation import CancellationToken
from codeforge.core.exceptions import ProviderError
from codeforge.models.contracts.generation import GenerationOptions, StreamingProgressEvent
from codeforge.models.enums import Provider

logger = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response generated"

# Estimated time remaining reported on non-terminal events
ESTIMATED_REMAINING = timedelta(seconds=5)

EventCallback = Callable[[StreamingProgressEvent], Awaitable[None] | None]


async def emit_event(on_event: EventCallback, event: StreamingProgressEvent) -> None:
    """Invoke a sync or async progress callback."""
    result = on_event(event)
    if inspect.isawaitable(result):
        await result


@dataclass
class ProviderConfig:
    """Configuration for one adapter instance."""

    api_key: str
    model: str  # Vendor model name sent on the wire
    display_name: str
    base_url: str
    default_temperature: float = 0.7
    default_max_tokens: int = 2000
    timeout: float = 120.0
    extra_headers: dict[str, str] = field(default_factory=dict)


@dataclass
class Frame:
    """Outcome of parsing one vendor framing unit."""

    kind: Literal["delta", "done", "error", "ignore", "malformed"]
    text: str = ""
    error: str | None = None

    @classmethod
    def delta(cls, text: str) -> "Frame":
        return cls(kind="delta", text=text)

    @classmethod
    def done(cls, text: str = "") -> "Frame":
        return cls(kind="done", text=text)

    @classmethod
    def failed(cls, error: str) -> "Frame":
        return cls(kind="error", error=error)

    @classmethod
    def ignore(cls) -> "Frame":
        return cls(kind="ignore")

    @classmethod
    def malformed(cls) -> "Frame":
        return cls(kind="malformed")


@dataclass
class StreamState:
    """Per-call accumulation buffer for one streaming generation."""

    generation_id: str
    model_used: str
    content: str = ""
    skipped_frames: int = 0

    def snapshot(self) -> StreamingProgressEvent:
        return StreamingProgressEvent(
            id=self.generation_id,
            model_used=self.model_used,
            content=self.content,
            progress=min(len(self.content) / 10, 95),
            stage="Generating...",
            estimated_completion=datetime.now(timezone.utc) + ESTIMATED_REMAINING,
            is_complete=False,
            skipped_frames=self.skipped_frames,
        )

    def terminal(self, error: str | None = None) -> StreamingProgressEvent:
        return StreamingProgressEvent(
            id=self.generation_id,
            model_used=self.model_used,
            content=self.content,
            progress=100.0 if error is None else min(len(self.content) / 10, 95),
            stage="Complete" if error is None else "Error",
            estimated_completion=datetime.now(timezone.utc),
            is_complete=True,
            error=error,
            skipped_frames=self.skipped_frames,
        )


def error_detail(payload: Any) -> str:
    """Extract a readable message from a vendor error payload."""
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error") or payload.get("status")
        if message:
            return str(message)
    if isinstance(payload, str) and payload:
        return payload
    return "Unknown provider error"


class BaseLLMClient(ABC):
    """
    Abstract base class for provider adapters.

    Implementations describe their vendor's wire format; no adapter holds
    session state between calls.
    """

    provider: Provider

    def __init__(self, config: ProviderConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return self.provider.value

    @property
    def display_name(self) -> str:
        return self.config.display_name

    @property
    def model_name(self) -> str:
        return self.config.model

    # ------------------------------------------------------------------
    # Wire format (implemented per vendor)
    # ------------------------------------------------------------------

    @abstractmethod
    def request_url(self, *, stream: bool) -> str:
        ...

    @abstractmethod
    def request_headers(self) -> dict[str, str]:
        ...

    def request_params(self) -> dict[str, str]:
        return {}

    @abstractmethod
    def request_body(
        self, prompt: str, system_prompt: str, options: GenerationOptions, *, stream: bool
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    def extract_text(self, data: dict[str, Any]) -> str | None:
        """Pull the generated text out of a non-streaming response body."""
        ...

    def parse_frame(self, line: str) -> Frame:
        """Classify one line of the streaming body."""
        raise NotImplementedError(f"{type(self).__name__} must implement parse_frame or iter_frames")

    async def iter_frames(self, lines: AsyncIterator[str]) -> AsyncIterator[Frame]:
        """
        Turn the streaming body into frames.

        Line-framed protocols get one frame per line from parse_frame();
        adapters whose units span lines override this instead.
        """
        async for line in lines:
            yield self.parse_frame(line)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def temperature(self, options: GenerationOptions) -> float:
        if options.temperature is not None:
            return options.temperature
        return self.config.default_temperature

    def max_tokens(self, options: GenerationOptions) -> int:
        return options.max_tokens or self.config.default_max_tokens

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the injected client, or a per-call client that is closed afterwards."""
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.config.timeout) as client:
            yield client

    def _status_error(self, response: httpx.Response) -> ProviderError:
        detail = response.reason_phrase or "request failed"
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("error"):
            detail = error_detail(data["error"])
        return ProviderError(self.provider_name, detail, status_code=response.status_code)

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    async def complete(
        self,
        prompt: str,
        system_prompt: str,
        options: GenerationOptions,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> str:
        """
        Non-streaming generation.

        Returns:
            Generated text, or "No response generated" if the body carried none

        Raises:
            ProviderError: On a non-success response or transport failure
            GenerationCancelledError: If the token was cancelled before the call
        """
        if cancel_token:
            cancel_token.raise_if_cancelled()

        logger.debug(f"{self.provider_name} completion request (model={self.model_name})")
        try:
            async with self._client() as client:
                response = await client.post(
                    self.request_url(stream=False),
                    headers=self.request_headers(),
                    params=self.request_params(),
                    json=self.request_body(prompt, system_prompt, options, stream=False),
                )
        except httpx.HTTPError as e:
            raise ProviderError(self.provider_name, f"{type(e).__name__}: {e}") from e

        if response.is_error:
            raise self._status_error(response)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(
                self.provider_name, "Invalid JSON response", status_code=response.status_code
            ) from e

        text = self.extract_text(data) if isinstance(data, dict) else None
        return text or NO_RESPONSE_TEXT

    async def stream(
        self,
        prompt: str,
        system_prompt: str,
        options: GenerationOptions,
        on_event: EventCallback,
        *,
        generation_id: str | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        """
        Streaming generation.

        Emits a non-terminal event after every successfully parsed unit and exactly one
        terminal event (on completion or vendor-reported error), then stops
        reading. Malformed units are skipped and counted.

        Raises:
            ProviderError: On a non-success response, transport failure, or a
                body that ends without a completion signal
            GenerationCancelledError: If the token is cancelled while reading
        """
        state = StreamState(
            generation_id=generation_id or str(uuid4()),
            model_used=self.display_name,
        )

        if cancel_token:
            cancel_token.raise_if_cancelled()

        logger.debug(f"{self.provider_name} streaming request (model={self.model_name})")
        try:
            async with self._client() as client:
                async with client.stream(
                    "POST",
                    self.request_url(stream=True),
                    headers=self.request_headers(),
                    params=self.request_params(),
                    json=self.request_body(prompt, system_prompt, options, stream=True),
                ) as response:
                    if response.is_error:
                        await response.aread()
                        raise self._status_error(response)

                    async with aclosing(self.iter_frames(response.aiter_lines())) as frames:
                        async for frame in frames:
                            if cancel_token:
                                cancel_token.raise_if_cancelled()

                            if frame.kind == "delta":
                                state.content += frame.text
                                await emit_event(on_event, state.snapshot())

                            elif frame.kind == "done":
                                state.content += frame.text
                                self._log_skipped(state)
                                await emit_event(on_event, state.terminal())
                                return

                            elif frame.kind == "error":
                                logger.warning(f"{self.provider_name} stream reported error: {frame.error}")
                                self._log_skipped(state)
                                await emit_event(on_event, state.terminal(error=frame.error))
                                return

                            elif frame.kind == "malformed":
                                state.skipped_frames += 1

        except httpx.HTTPError as e:
            raise ProviderError(self.provider_name, f"{type(e).__name__}: {e}") from e

        raise ProviderError(self.provider_name, "Stream ended without a completion signal")

    def _log_skipped(self, state: StreamState) -> None:
        if state.skipped_frames:
            logger.warning(
                f"{self.provider_name} stream skipped {state.skipped_frames} malformed frame(s) "
                f"(generation {state.generation_id})"
            )
