"""Application configuration."""

import os

# Logging
LOG_LEVEL = os.getenv("LIBRARYTAG_LOG_LEVEL", "INFO").upper()

# HTTP API
API_HOST = os.getenv("LIBRARYTAG_HOST", "0.0.0.0")
API_PORT = int(os.getenv("LIBRARYTAG_PORT", "8000"))

# Tag format used when a request does not name one
DEFAULT_FORMAT = os.getenv("LIBRARYTAG_DEFAULT_FORMAT", "ub-dortmund")

# Shown in place of a field that fails to decode
INVALID_PLACEHOLDER = os.getenv("LIBRARYTAG_INVALID_PLACEHOLDER", "(invalid)")
