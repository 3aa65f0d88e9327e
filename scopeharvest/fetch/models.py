"""Retry policy for the HTTP fetch layer."""

import random
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from scopeharvest.errors import HarvestError


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    ``max_attempts`` counts the first try. The wait before retry ``n``
    (1-indexed) is ``base_delay_seconds * exponential_base ** (n - 1)``,
    capped by ``max_delay_seconds``: 1s, 2s, 4s with the defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: Annotated[int, Field(ge=1, le=10)] = 3
    base_delay_seconds: Annotated[float, Field(ge=0.0, le=60.0)] = 1.0
    max_delay_seconds: Annotated[float, Field(ge=0.0, le=300.0)] = 30.0
    exponential_base: Annotated[float, Field(ge=1.0, le=5.0)] = 2.0
    jitter_factor: Annotated[float, Field(ge=0.0, le=1.0)] = 0.0

    def should_retry(self, error: HarvestError, attempt: int) -> bool:
        """Determine if a request should be retried.

        Args:
            error: The error that occurred.
            attempt: Attempt that just failed (1-indexed).

        Returns:
            True if another attempt is allowed and the error is transient.
        """
        if attempt >= self.max_attempts:
            return False
        return error.retryable

    def get_delay_seconds(self, retry: int) -> float:
        """Calculate the wait before a retry.

        Args:
            retry: Retry number (1 for the second attempt).

        Returns:
            Delay in seconds.
        """
        delay = self.base_delay_seconds * (self.exponential_base ** (retry - 1))
        delay = min(delay, self.max_delay_seconds)

        if self.jitter_factor:
            delay += delay * self.jitter_factor * random.random()  # noqa: S311
        return delay
