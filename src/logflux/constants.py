"""
Package-wide constants for logflux.

This module contains the default values and limits shared by the logger,
the transports and the middleware so they are defined in one place.
"""

# Logger defaults
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_INCLUDE_STACK = "ERROR"

# Error serialization
MAX_CAUSE_DEPTH = 5

# Timer metadata key
DURATION_META_KEY = "durationMs"

# Ring buffer defaults
DEFAULT_RING_BUFFER_SIZE = 1000

# Batching defaults
DEFAULT_BATCH_SIZE = 100
DEFAULT_FLUSH_INTERVAL_MS = 5000

# Webhook defaults
DEFAULT_WEBHOOK_BATCH_SIZE = 1
DEFAULT_WEBHOOK_TIMEOUT_SECONDS = 10
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY_SECONDS = 1.0
MAX_RETRY_DELAY_SECONDS = 30.0

# HTTP status code ranges
HTTP_STATUS_CLIENT_ERROR_MIN = 400
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 599

# Middleware defaults
DEFAULT_DEDUP_WINDOW_MS = 1000
DUPLICATE_COUNT_META_KEY = "duplicateCount"
DEFAULT_SAMPLING_MAX_PER_WINDOW = 100
DEFAULT_SAMPLING_WINDOW_MS = 60_000
SAMPLING_BUCKET_CLEANUP_THRESHOLD = 2000
DEFAULT_LEVEL_OVERRIDE_KEY = "x-log-level"
DEFAULT_CORRELATION_HEADER = "x-correlation-id"
DEFAULT_REQUEST_ID_KEY = "request_id"
DEFAULT_REDACT_VALUE = "[REDACTED]"

# Internal diagnostics logger name
INTERNAL_LOGGER_NAME = "logflux.internal"
