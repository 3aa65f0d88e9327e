"""Authenticated JSON API requests with status classification and retries."""

from io import BytesIO
from types import TracebackType
from typing import Protocol, Self

import httpx
import structlog

from scopeharvest.context import RunContext
from scopeharvest.errors import (
    ClientError,
    HarvestError,
    NetworkError,
    RequestTimeoutError,
    ResponseTooLargeError,
    RetriesExhaustedError,
    ServiceUnavailableError,
)
from scopeharvest.fetch.config import FetchConfig
from scopeharvest.fetch.constants import (
    AUTH_ERROR_HINT,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_UNAUTHORIZED,
    JSON_CONTENT_TYPE,
)
from scopeharvest.fetch.metrics import FetchMetrics
from scopeharvest.fetch.redact import redact_headers


logger = structlog.get_logger()


class Requester(Protocol):
    """Protocol for API requesters.

    Allows fetchers to be driven by a fake requester in tests.
    """

    def request_with_retry(self, ctx: RunContext, url: str, auth_token: str) -> bytes:
        """GET a URL with retries and return the response body."""
        ...


class HttpRequester:
    """HTTP GET client for the platform API.

    Provides:
    - Basic auth and JSON headers on every request
    - Per-request timeout clamped to the run deadline
    - 5xx/4xx classification into retryable and fatal errors
    - Bounded exponential backoff that stops as soon as the run ends
    - Maximum response size enforcement
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        client: httpx.Client | None = None,
        run_id: str = "",
    ) -> None:
        """Initialize the requester.

        Args:
            config: Fetch configuration.
            client: Optional httpx client (e.g. with a mock transport).
            run_id: Run identifier for logging.
        """
        self._config = config or FetchConfig()
        self._owns_client = client is None
        self._client = client or httpx.Client(follow_redirects=True)
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="fetch", run_id=run_id)

    @property
    def config(self) -> FetchConfig:
        """Get the fetch configuration."""
        return self._config

    def close(self) -> None:
        """Close the underlying client if this requester created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def request_with_retry(self, ctx: RunContext, url: str, auth_token: str) -> bytes:
        """GET a URL, retrying transient failures with exponential backoff.

        Args:
            ctx: Run context; cancellation interrupts both requests and waits.
            url: URL to fetch.
            auth_token: Base64 Basic auth token.

        Returns:
            Response body bytes.

        Raises:
            RetriesExhaustedError: If every attempt failed with a transient error.
            HarvestError: Any non-transient error, raised on first occurrence.
        """
        policy = self._config.retry_policy
        log = self._log.bind(url=url)
        attempt = 1

        while True:
            try:
                return self.request(ctx, url, auth_token)
            except HarvestError as e:
                # Non-transient error, or the attempt budget is spent
                if not policy.should_retry(e, attempt):
                    self._metrics.record_failure(e.error_class)
                    if not e.retryable:
                        raise
                    raise RetriesExhaustedError(attempt, e) from e
                log.warning(
                    "transient_failure",
                    attempt=attempt,
                    error_class=e.error_class.value,
                    error=e.message,
                )

            delay = policy.get_delay_seconds(attempt)
            attempt += 1
            self._metrics.record_retry()
            log.debug(
                "retry_attempt",
                attempt=attempt,
                delay_seconds=delay,
                max_attempts=policy.max_attempts,
            )
            ctx.sleep(delay)

    def request(self, ctx: RunContext, url: str, auth_token: str) -> bytes:
        """Execute a single authenticated GET.

        Args:
            ctx: Run context.
            url: URL to fetch.
            auth_token: Base64 Basic auth token.

        Returns:
            Response body bytes for any status below 400.

        Raises:
            CancelledError: If the context was cancelled.
            DeadlineExceededError: If the run deadline passed.
            RequestTimeoutError: If this request alone timed out.
            ServiceUnavailableError: On a 5xx status.
            ClientError: On a 4xx status.
            NetworkError: On connection or protocol failures.
            ResponseTooLargeError: If the body exceeds the size limit.
        """
        ctx.raise_if_done()

        headers = self._build_headers(auth_token)
        timeout = ctx.bound_timeout(self._config.request_timeout_seconds)
        log = self._log.bind(url=url)
        log.debug("request_started", headers=redact_headers(headers), timeout=timeout)

        try:
            with self._client.stream(
                "GET", url, headers=headers, timeout=timeout
            ) as response:
                self._raise_for_status(response, url)
                body = self._read_body_with_limit(ctx, response, url)
        except httpx.TimeoutException as e:
            ctx_error = ctx.error()
            if ctx_error is not None:
                raise ctx_error from e
            msg = f"request timed out after {timeout:.1f}s: {e}"
            raise RequestTimeoutError(msg, url=url) from e
        except httpx.RequestError as e:
            # Transport failures, bad Content-Encoding, redirect loops
            ctx_error = ctx.error()
            if ctx_error is not None:
                raise ctx_error from e
            raise NetworkError(f"request failed: {e}", url=url) from e

        self._metrics.record_request(response.status_code, len(body))
        log.debug("request_complete", status_code=response.status_code, bytes=len(body))
        return body

    def _build_headers(self, auth_token: str) -> dict[str, str]:
        """Build request headers.

        Args:
            auth_token: Base64 Basic auth token.

        Returns:
            Complete headers dictionary.
        """
        return {
            "Content-Type": JSON_CONTENT_TYPE,
            "Accept": JSON_CONTENT_TYPE,
            "Authorization": f"Basic {auth_token}",
            "User-Agent": self._config.user_agent,
        }

    def _raise_for_status(self, response: httpx.Response, url: str) -> None:
        """Classify an error status.

        Args:
            response: HTTP response (body not yet read).
            url: Requested URL.

        Raises:
            ServiceUnavailableError: For 5xx.
            ClientError: For 4xx.
        """
        status = response.status_code
        if status < HTTP_STATUS_BAD_REQUEST:
            return

        self._metrics.record_request(status, 0)
        status_text = f"{status} {response.reason_phrase}".strip()

        if status >= HTTP_STATUS_SERVER_ERROR_MIN:
            raise ServiceUnavailableError(
                status, f"API unavailable: {status_text}", url=url
            )

        message = f"API returned error {status_text}"
        if status in (HTTP_STATUS_UNAUTHORIZED, HTTP_STATUS_FORBIDDEN):
            message = f"{message}. {AUTH_ERROR_HINT}"
        raise ClientError(status, message, url=url)

    def _read_body_with_limit(
        self,
        ctx: RunContext,
        response: httpx.Response,
        url: str,
    ) -> bytes:
        """Read response body with size limit.

        Chunks are taken as they arrive and the run context is checked after
        each one, so a body that trickles in past the deadline fails instead
        of completing.

        Args:
            ctx: Run context.
            response: Streaming HTTP response.
            url: Requested URL.

        Returns:
            Response body bytes.

        Raises:
            ResponseTooLargeError: If the size limit is exceeded.
            CancelledError: If the context was cancelled mid-read.
            DeadlineExceededError: If the deadline passed mid-read.
        """
        buffer = BytesIO()
        total_read = 0
        max_size = self._config.max_response_size_bytes

        for chunk in response.iter_bytes():
            ctx.raise_if_done()
            total_read += len(chunk)
            if total_read > max_size:
                raise ResponseTooLargeError(max_size, url=url)
            buffer.write(chunk)

        return buffer.getvalue()
