"""Async HTTP client wrapper built on HTTPX.

Provides:
- Automatic retries with exponential backoff
- Structured error handling
- Request/response logging with redaction
- Pydantic response parsing
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

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
from addon_releaser.core.api.http.retry import RetryPolicy, parse_retry_after_seconds
from addon_releaser.core.api.http.utils import join_url, redact_headers, safe_snippet

logger = logging.getLogger(__name__)

# httpx transport failures, most specific first
_TRANSPORT_ERRORS: tuple[tuple[type[httpx.RequestError], type[ApiError], str], ...] = (
    (httpx.TimeoutException, TimeoutError, "Request timed out"),
    (httpx.RequestError, NetworkError, "Network error while sending request"),
)


def _categorize_http_error(status_code: int) -> type[ApiError]:
    """Map HTTP status code to appropriate error class."""
    if status_code == 429:
        return RateLimitError
    if 500 <= status_code < 600:
        return ServerError
    return ClientError


def _build_api_error(
    *,
    exc_type: type[ApiError],
    message: str,
    method: str,
    url: str,
    response: httpx.Response | None = None,
    body_snippet_limit: int = 4096,
    cause: BaseException | None = None,
) -> ApiError:
    """Build API error with response context."""
    headers: dict[str, str] | None = None
    snippet: str | None = None
    status_code: int | None = None
    if response is not None:
        headers = dict(response.headers)
        snippet = safe_snippet(response.content or b"", body_snippet_limit)
        status_code = response.status_code

    return exc_type(
        message=message,
        method=method,
        url=url,
        status_code=status_code,
        response_headers=headers,
        response_body_snippet=snippet,
        cause=cause,
    )


class AsyncApiClient:
    """Async HTTP client with retries, structured errors, and logging.

    Args:
        config: Client configuration
        retry_policy: Retry policy (defaults to RetryPolicy())
        transport: Optional custom transport (useful for testing)

    Example:
        >>> config = HttpClientConfig(base_url="https://pypi.org")
        >>> async with AsyncApiClient(config) as client:
        ...     resp = await client.get("/pypi/addon-releaser/json")
        ...     data = client.json(resp)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        *,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or HttpClientConfig()
        self.retry_policy = retry_policy or RetryPolicy()
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self.config.user_agent, **self.config.headers},
            timeout=self.config.timeout,
            follow_redirects=self.config.follow_redirects,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncApiClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        """Async context manager exit."""
        await self.aclose()

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying transient failures per the retry policy.

        Raises:
            ApiError: On network failure or a >= 400 response
        """
        method_u = method.upper()
        url = join_url(self.config.base_url, path)
        attempts = 0

        while True:
            attempts += 1
            logger.debug(
                "HTTP request",
                extra={
                    "method": method_u,
                    "url": url,
                    "attempt": attempts,
                    "headers": redact_headers(self._client.headers, self.config.redact_headers),
                },
            )
            start = time.perf_counter()

            try:
                resp = await self._client.request(method_u, url, **kwargs)
            except httpx.RequestError as e:
                if self.retry_policy.should_retry(attempts, None):
                    await asyncio.sleep(self.retry_policy.compute_delay(attempts))
                    continue
                exc_type, message = next(
                    (api_error, msg)
                    for httpx_error, api_error, msg in _TRANSPORT_ERRORS
                    if isinstance(e, httpx_error)
                )
                raise _build_api_error(
                    exc_type=exc_type, message=message, method=method_u, url=url, cause=e
                ) from e

            logger.debug(
                "HTTP response",
                extra={
                    "method": method_u,
                    "url": url,
                    "attempt": attempts,
                    "status_code": resp.status_code,
                    "elapsed_ms": int((time.perf_counter() - start) * 1000),
                },
            )

            if resp.status_code < 400:
                return resp

            if self.retry_policy.should_retry(attempts, resp.status_code):
                retry_after = parse_retry_after_seconds(resp.headers.get("Retry-After"))
                await asyncio.sleep(
                    retry_after
                    if retry_after is not None
                    else self.retry_policy.compute_delay(attempts)
                )
                continue

            raise _build_api_error(
                exc_type=_categorize_http_error(resp.status_code),
                message="HTTP error response",
                method=method_u,
                url=url,
                response=resp,
                body_snippet_limit=self.config.max_response_body_for_error,
            )

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Perform async GET request."""
        return await self.request("GET", path, **kwargs)

    async def get_bytes(self, path: str, **kwargs: Any) -> bytes:
        """Perform async GET request and return the raw body."""
        resp = await self.get(path, **kwargs)
        return resp.content

    def json(self, response: httpx.Response) -> Any:
        """Decode JSON response with structured error handling.

        Raises:
            DecodeError: If the body is not valid JSON
        """
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise _build_api_error(
                exc_type=DecodeError,
                message="Failed to parse JSON response",
                method=response.request.method,
                url=str(response.request.url),
                response=response,
                body_snippet_limit=self.config.max_response_body_for_error,
                cause=e,
            ) from e

    def parse_pydantic(self, response: httpx.Response, model: Any) -> Any:
        """Parse and validate JSON response with Pydantic model.

        Raises:
            DecodeError: If JSON parsing or validation fails
        """
        data = self.json(response)
        try:
            return model.model_validate(data)
        except Exception as e:
            raise _build_api_error(
                exc_type=DecodeError,
                message="Failed to validate response with Pydantic model",
                method=response.request.method,
                url=str(response.request.url),
                response=response,
                body_snippet_limit=self.config.max_response_body_for_error,
                cause=e,
            ) from e


class HttpByteFetcher:
    """`ByteFetcher` that downloads `add_file` sources over HTTP(S)."""

    def __init__(self, client: AsyncApiClient) -> None:
        self._client = client

    async def fetch(self, uri: str) -> bytes:
        """Download ``uri`` and return its body."""
        return await self._client.get_bytes(uri)
