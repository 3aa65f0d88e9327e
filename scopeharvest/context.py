"""Cancellable run context with an overall deadline.

A single ``RunContext`` is shared by every fetcher in a run. Network calls
bound their timeout by ``remaining()`` and backoff waits go through
``sleep()``, so a cancellation or an expired deadline interrupts the run at
the next suspension point instead of after it.
"""

import threading
import time
from collections.abc import Callable

import structlog

from scopeharvest.errors import CancelledError, DeadlineExceededError, HarvestError


logger = structlog.get_logger()


class RunContext:
    """Deadline plus explicit cancellation, safe to cancel from any thread."""

    def __init__(
        self,
        timeout_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the run context.

        Args:
            timeout_seconds: Overall budget for the run, None for no deadline.
            clock: Monotonic clock, injectable for tests.
        """
        self._clock = clock
        self._cancelled = threading.Event()
        self._deadline = (
            clock() + timeout_seconds if timeout_seconds is not None else None
        )

    @property
    def deadline(self) -> float | None:
        """Get the deadline on the context clock, if any."""
        return self._deadline

    def cancel(self) -> None:
        """Cancel the context; pending and future waits fail immediately."""
        if not self._cancelled.is_set():
            logger.info("context_cancelled", component="context")
        self._cancelled.set()

    def remaining(self) -> float | None:
        """Get seconds left before the deadline.

        Returns:
            Seconds remaining (never negative), or None without a deadline.
        """
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def error(self) -> HarvestError | None:
        """Get the reason the context is done.

        Explicit cancellation wins over an expired deadline.

        Returns:
            CancelledError, DeadlineExceededError, or None while still live.
        """
        if self._cancelled.is_set():
            return CancelledError()
        if self._deadline is not None and self._clock() >= self._deadline:
            return DeadlineExceededError()
        return None

    def done(self) -> bool:
        """Check if the context is cancelled or expired."""
        return self.error() is not None

    def raise_if_done(self) -> None:
        """Raise the context error if the context is done.

        Raises:
            CancelledError: If the context was cancelled.
            DeadlineExceededError: If the deadline passed.
        """
        err = self.error()
        if err is not None:
            raise err

    def bound_timeout(self, timeout: float) -> float:
        """Clamp a per-operation timeout to the time left in the context.

        Args:
            timeout: Desired timeout in seconds.

        Returns:
            The smaller of ``timeout`` and the remaining budget.
        """
        remaining = self.remaining()
        if remaining is None:
            return timeout
        return min(timeout, remaining)

    def sleep(self, seconds: float) -> None:
        """Wait for ``seconds`` unless the context ends first.

        Args:
            seconds: Time to wait.

        Raises:
            CancelledError: If cancelled before or during the wait.
            DeadlineExceededError: If the deadline passes before the wait ends.
        """
        self.raise_if_done()
        wait = self.bound_timeout(seconds)
        if self._cancelled.wait(wait):
            raise CancelledError()
        if wait < seconds:
            # Deadline cut the wait short
            raise DeadlineExceededError()
