"""
Rate limiting for API endpoints.

Uses slowapi keyed on client address. Storage defaults to in-memory (per
process); point RATE_LIMIT_STORAGE_URI at Redis to share limits across
instances. Limits are not enforced in the test environment.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from ...core.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_settings.rate_limit_default],
    storage_uri=_settings.rate_limit_storage_uri,
    enabled=_settings.environment != "test",
)

# Limits per endpoint type
READ_LIMIT = "60/minute"
WRITE_LIMIT = "30/minute"
AUTH_LIMIT = "10/minute"  # Credential guessing
