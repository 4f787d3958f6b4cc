"""
Configuration for the /api/build endpoint.

Settings are read from the environment once, when the application starts, and
handed to request handlers through ``app.state.settings``. The credential is
allowed to be missing at startup; the endpoint checks it on every request.
"""

import os
from typing import Optional


# Upstream build endpoint of the document processing API
DEFAULT_UPSTREAM_URL = "https://api.nutrient.io/build"

# A converted document must be strictly larger than this
MIN_OUTPUT_BYTES = 10 * 1024

PDF_MEDIA_TYPE = "application/pdf"

# Fallback content type for uploads that do not declare one
DEFAULT_UPLOAD_CONTENT_TYPE = "application/octet-stream"

DEFAULT_HTTP_TIMEOUT = 60.0
DEFAULT_CONNECT_TIMEOUT = 10.0

# Largest non-file form field (the instructions) the endpoint will parse
DEFAULT_MAX_FIELD_BYTES = 50 * 1024 * 1024


def _float_from_env(name: str, default: float) -> float:
    value = os.getenv(name, '')
    if not value.strip():
        return default
    return float(value)


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name, '')
    if not value.strip():
        return default
    return int(value)


class Settings:
    """Runtime settings for the build proxy."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        upstream_url: str = DEFAULT_UPSTREAM_URL,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        min_output_bytes: int = MIN_OUTPUT_BYTES,
        max_field_bytes: int = DEFAULT_MAX_FIELD_BYTES,
    ):
        self.api_key = api_key or None
        self.upstream_url = upstream_url
        self.http_timeout = http_timeout
        self.connect_timeout = connect_timeout
        self.min_output_bytes = min_output_bytes
        self.max_field_bytes = max_field_bytes

    @classmethod
    def from_env(cls) -> 'Settings':
        """Create settings from environment variables."""
        return cls(
            api_key=os.getenv('NUTRIENT_API_KEY'),
            upstream_url=os.getenv('BUILDPROXY_UPSTREAM_URL', DEFAULT_UPSTREAM_URL),
            http_timeout=_float_from_env('BUILDPROXY_HTTP_TIMEOUT', DEFAULT_HTTP_TIMEOUT),
            connect_timeout=_float_from_env('BUILDPROXY_CONNECT_TIMEOUT', DEFAULT_CONNECT_TIMEOUT),
            max_field_bytes=_int_from_env('BUILDPROXY_MAX_FIELD_BYTES', DEFAULT_MAX_FIELD_BYTES),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def __repr__(self) -> str:
        # Never print the credential itself
        return (
            f"Settings(upstream_url={self.upstream_url!r}, "
            f"api_key={'set' if self.api_key else 'unset'!r}, "
            f"http_timeout={self.http_timeout}, connect_timeout={self.connect_timeout})"
        )
