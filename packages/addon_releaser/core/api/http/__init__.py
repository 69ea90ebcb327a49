"""HTTPX wrapper used for remote `add_file` sources and the update check.

Exposes a small, ergonomic surface:
- AsyncApiClient: high-level client
- HttpByteFetcher: ByteFetcher implementation over AsyncApiClient
- HttpClientConfig / RetryPolicy: configuration
- Exceptions: ApiError and subclasses
"""

from addon_releaser.core.api.http.client import AsyncApiClient, HttpByteFetcher
from addon_releaser.core.api.http.config import HttpClientConfig
from addon_releaser.core.api.http.errors import (
    ApiError,
    ClientError,
    DecodeError,
    NetworkError,
    RateLimitError,
    ServerError,
    TimeoutError,
)
from addon_releaser.core.api.http.retry import RetryPolicy
from addon_releaser.core.api.http.utils import is_absolute_uri

__all__ = [
    "AsyncApiClient",
    "HttpByteFetcher",
    "HttpClientConfig",
    "RetryPolicy",
    "is_absolute_uri",
    "ApiError",
    "NetworkError",
    "TimeoutError",
    "DecodeError",
    "RateLimitError",
    "ClientError",
    "ServerError",
]
