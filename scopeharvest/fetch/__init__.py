"""HTTP fetch layer for the platform API.

This module provides authenticated GET requests with:
- Status classification into retryable and fatal errors
- Exponential backoff bounded by the run context
- Maximum response size enforcement
- Header redaction for logging
- Metrics collection
"""

from scopeharvest.fetch.client import HttpRequester, Requester
from scopeharvest.fetch.config import FetchConfig
from scopeharvest.fetch.metrics import FetchMetrics
from scopeharvest.fetch.models import RetryPolicy
from scopeharvest.fetch.redact import redact_headers


__all__ = [
    "FetchConfig",
    "FetchMetrics",
    "HttpRequester",
    "Requester",
    "RetryPolicy",
    "redact_headers",
]
