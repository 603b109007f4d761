"""HTTP constants for the Jira request layer.

Centralizes status codes and the fixed request tunables.
"""

from jira_bearer import __version__


# HTTP Status Codes
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_NO_CONTENT = 204
HTTP_STATUS_UNAUTHORIZED = 401
HTTP_STATUS_FORBIDDEN = 403
HTTP_STATUS_NOT_FOUND = 404
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_INTERNAL_SERVER_ERROR = 500
HTTP_STATUS_BAD_GATEWAY = 502
HTTP_STATUS_SERVICE_UNAVAILABLE = 503
HTTP_STATUS_GATEWAY_TIMEOUT = 504

# Request tunables
REQUEST_TIMEOUT_SECONDS = 30.0
MAX_RETRIES = 3  # additional attempts after the first
RETRY_DELAY_BASE_MS = 1000

# Metadata cache lifetime (5 minutes)
CACHE_TTL_SECONDS = 5 * 60.0

USER_AGENT = f"jira-bearer-mcp/{__version__}"
