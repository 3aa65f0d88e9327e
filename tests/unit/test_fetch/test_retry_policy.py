"""Unit tests for retry policy decisions."""

import pytest
from pydantic import ValidationError

from scopeharvest.errors import (
    ClientError,
    DecodeError,
    DeadlineExceededError,
    RequestTimeoutError,
    ServiceUnavailableError,
)
from scopeharvest.fetch.models import RetryPolicy


class TestRetryPolicy:
    """Tests for RetryPolicy model."""

    def test_default_values(self) -> None:
        """Test default retry policy values."""
        policy = RetryPolicy()

        assert policy.max_attempts == 3
        assert policy.base_delay_seconds == 1.0
        assert policy.max_delay_seconds == 30.0
        assert policy.exponential_base == 2.0
        assert policy.jitter_factor == 0.0

    def test_at_least_one_attempt(self) -> None:
        """Test that a policy must allow the first attempt."""
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=0)

    def test_frozen(self) -> None:
        """Test that policies are immutable."""
        policy = RetryPolicy()

        with pytest.raises(ValidationError):
            policy.max_attempts = 5  # type: ignore[misc]


class TestShouldRetry:
    """Tests for retry decision logic."""

    @pytest.fixture
    def policy(self) -> RetryPolicy:
        """Create a standard retry policy."""
        return RetryPolicy(max_attempts=3)

    def test_retry_on_request_timeout(self, policy: RetryPolicy) -> None:
        """Test that request timeouts are retried until the budget is spent."""
        error = RequestTimeoutError("timed out")

        assert policy.should_retry(error, attempt=1) is True
        assert policy.should_retry(error, attempt=2) is True
        assert policy.should_retry(error, attempt=3) is False

    def test_retry_on_5xx(self, policy: RetryPolicy) -> None:
        """Test that 5xx errors are retried."""
        error = ServiceUnavailableError(503, "API unavailable: 503")

        assert policy.should_retry(error, attempt=1) is True

    def test_no_retry_on_4xx(self, policy: RetryPolicy) -> None:
        """Test that 4xx errors are not retried."""
        for status in [400, 401, 403, 404, 422, 429]:
            error = ClientError(status, f"API returned error {status}")

            assert policy.should_retry(error, attempt=1) is False

    def test_no_retry_on_decode_error(self, policy: RetryPolicy) -> None:
        """Test that a malformed body is not retried."""
        assert policy.should_retry(DecodeError("bad json"), attempt=1) is False

    def test_no_retry_on_deadline(self, policy: RetryPolicy) -> None:
        """Test that the run deadline is never retried."""
        assert policy.should_retry(DeadlineExceededError(), attempt=1) is False

    def test_single_attempt_policy(self) -> None:
        """Test policy with no retries."""
        policy = RetryPolicy(max_attempts=1)

        assert policy.should_retry(RequestTimeoutError("t"), attempt=1) is False


class TestGetDelay:
    """Tests for backoff delay calculation."""

    def test_exponential_delays(self) -> None:
        """Test that delays double: 1s, 2s, 4s."""
        policy = RetryPolicy()

        assert policy.get_delay_seconds(1) == 1.0
        assert policy.get_delay_seconds(2) == 2.0
        assert policy.get_delay_seconds(3) == 4.0

    def test_delay_capped(self) -> None:
        """Test that delays never exceed the cap."""
        policy = RetryPolicy(max_delay_seconds=3.0)

        assert policy.get_delay_seconds(5) == 3.0

    def test_jitter_bounds(self) -> None:
        """Test that jitter only adds up to the configured fraction."""
        policy = RetryPolicy(jitter_factor=0.5)

        for _ in range(20):
            delay = policy.get_delay_seconds(2)
            assert 2.0 <= delay <= 3.0
