"""HTTP byte source.

Exposes the body of a streaming httpx GET as a readable byte-stream so it can
be wrapped by a throttle like any socket or file.
"""

from __future__ import annotations

import io
import logging
from typing import Iterator, Optional

import httpx

from core.errors import ExternalServiceError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class HttpSource(io.RawIOBase):
    """Readable stream over an HTTP response body.

    The request is sent on the first read. Closing the source closes the
    response, and the client too when the source created it.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 20.0,
        verify: bool = True,
        client: Optional[httpx.Client] = None,
    ) -> None:
        super().__init__()
        self._response: Optional[httpx.Response] = None
        self._chunks: Optional[Iterator[bytes]] = None
        self._pending = b""
        self._offset = 0
        self._owns_client = False

        self._url = (url or "").strip()
        if not self._url.startswith(("http://", "https://")):
            raise ValidationError(f"Not an HTTP(S) URL: {url!r}")

        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, verify=verify, follow_redirects=True)

    @property
    def url(self) -> str:
        return self._url

    def readable(self) -> bool:
        return True

    def _open(self) -> Iterator[bytes]:
        if self._chunks is not None:
            return self._chunks

        try:
            request = self._client.build_request("GET", self._url)
            response = self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Failed to fetch {self._url}: {e}") from e

        if response.status_code == 404:
            response.close()
            raise NotFoundError(f"Not found: {self._url}")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            response.close()
            raise ExternalServiceError(f"Server returned an error: {e}") from e

        logger.debug("Streaming %s (status %d)", self._url, response.status_code)

        self._response = response
        self._chunks = response.iter_bytes()
        return self._chunks

    def readinto(self, buffer) -> int:
        self._checkClosed()
        view = memoryview(buffer).cast("B")
        if len(view) == 0:
            return 0

        chunks = self._open()

        # Refill from the body; an exhausted body leaves _pending empty (EOF).
        while self._offset >= len(self._pending):
            try:
                data = next(chunks, None)
            except httpx.HTTPError as e:
                raise ExternalServiceError(f"Failed while reading {self._url}: {e}") from e
            if data is None:
                return 0
            self._pending = data
            self._offset = 0

        n = min(len(view), len(self._pending) - self._offset)
        view[:n] = self._pending[self._offset:self._offset + n]
        self._offset += n
        return n

    def close(self) -> None:
        if not self.closed:
            if self._response is not None:
                self._response.close()
            if self._owns_client:
                self._client.close()
        super().close()
