"""Async HTTP client for downloading caption payloads and metadata.

WHY: Caption tracks are served from signed YouTube URLs. The pipeline
needs the raw bytes, with a hard size cap (a json3 track is a few hundred
KB; anything huge is a wrong URL) and a timeout, and typed errors the CLI
can report.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. CaptionFetcher is an
async context manager: enter it to get a configured client, exit to close
the connection pool. fetch_bytes() streams the body and aborts as soon as
the size cap is exceeded.

RULES:
- Always use the async context manager (async with CaptionFetcher() as f:)
- Only http:// and https:// URLs are accepted
- Content-Length above max_bytes fails before the body is read
- Bodies are streamed; reading stops past max_bytes
- Non-2xx → FetchError carrying the status code
- Timeout defaults to FETCH_TIMEOUT_S; the User-Agent header is always sent
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from subscribe.config import FETCH_MAX_BYTES, FETCH_TIMEOUT_S, USER_AGENT

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a download fails (bad URL, transport error, HTTP status).

    RULES:
    - status_code is None for errors that happened before a response
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ResponseTooLargeError(FetchError):
    """Raised when the response body exceeds the configured size cap."""


def _validate_url(url: str) -> httpx.URL:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise FetchError("fetch: invalid url {!r}: {}".format(url, e)) from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise FetchError("fetch: invalid url {!r}".format(url))
    return parsed


class CaptionFetcher:
    """Async downloader with timeout and size limits.

    RULES:
    - Use as: async with CaptionFetcher() as fetcher: ...
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        timeout_s: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout_s = float(timeout_s) if timeout_s else float(FETCH_TIMEOUT_S)
        self._user_agent = user_agent or USER_AGENT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> CaptionFetcher:
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self._user_agent},
            timeout=httpx.Timeout(self._timeout_s),
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "CaptionFetcher must be used as an async context manager: "
                "async with CaptionFetcher() as fetcher: ..."
            )
        return self._client

    async def fetch_bytes(self, url: str, max_bytes: Optional[int] = None) -> bytes:
        """Download ``url`` and return the body.

        Args:
            url: http(s) URL of the caption track or metadata document.
            max_bytes: Size cap; defaults to FETCH_MAX_BYTES.

        Returns:
            The response body.

        Raises:
            FetchError: invalid URL, transport error or non-2xx status.
            ResponseTooLargeError: the body exceeds max_bytes.
        """
        client = self._ensure_client()
        limit = max_bytes if max_bytes and max_bytes > 0 else FETCH_MAX_BYTES
        parsed = _validate_url(url)
        logger.debug("Fetching from %s (limit %d bytes)", parsed.host, limit)

        try:
            async with client.stream("GET", parsed) as resp:
                if not 200 <= resp.status_code < 300:
                    raise FetchError(
                        "fetch: unexpected http status {}".format(resp.status_code),
                        status_code=resp.status_code,
                    )

                length = resp.headers.get("Content-Length")
                if length and length.isdigit() and int(length) > limit:
                    raise ResponseTooLargeError(
                        "fetch: content-length {} exceeds limit {}".format(length, limit),
                        status_code=resp.status_code,
                    )

                chunks = []
                received = 0
                async for chunk in resp.aiter_bytes():
                    received += len(chunk)
                    if received > limit:
                        raise ResponseTooLargeError(
                            "fetch: body too large (>{} bytes)".format(limit),
                            status_code=resp.status_code,
                        )
                    chunks.append(chunk)
        except httpx.HTTPError as e:
            raise FetchError("fetch: request failed: {}".format(e)) from e

        logger.debug("Fetched %d bytes", received)
        return b"".join(chunks)
