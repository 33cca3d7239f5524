"""
Cancellation Token

Cooperative cancellation for generation requests. A token is passed down
through the orchestrator into adapter read loops and the simulated fallback,
which check it at every suspension point.
"""

import asyncio

from codeforge.core.exceptions import GenerationCancelledError


class CancellationToken:
    """
    Caller-owned cancellation signal.

    Usage:
        token = CancellationToken()
        task = asyncio.create_task(service.generate_code(request, cancel_token=token))
        ...
        token.cancel()  # the generation raises GenerationCancelledError
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelledError(self.reason or "Generation cancelled")

    async def sleep(self, seconds: float) -> None:
        """Sleep for `seconds`, waking early (and raising) if cancelled."""
        self.raise_if_cancelled()
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        self.raise_if_cancelled()
