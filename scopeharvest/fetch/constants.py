"""HTTP constants for the fetch layer."""

# HTTP Status Code Ranges
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_UNAUTHORIZED = 401
HTTP_STATUS_FORBIDDEN = 403
HTTP_STATUS_SERVER_ERROR_MIN = 500

# Response Size Limits
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

# Per-request timeout, applied under the run deadline
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0

DEFAULT_USER_AGENT = "scopeharvest/0.1"

# Request headers sent on every API call
JSON_CONTENT_TYPE = "application/json"

AUTH_ERROR_HINT = (
    "Check the username and API token; HackerOne API tokens are created "
    "under Settings > API Token."
)
