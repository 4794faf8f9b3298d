"""Pacing for asyncio byte-streams.

Asyncio counterpart of core.throttle.PacedReader for streams with an
``async read(n)`` method such as asyncio.StreamReader. The residual of each
chunk interval is awaited inline in the calling task; no background task or
timer is involved.
"""

from __future__ import annotations

import asyncio
import logging
import time

from core.interfaces import AsyncByteSource
from core.throttle import CHUNK_SIZE_BYTES, chunk_interval_for

logger = logging.getLogger(__name__)


class AsyncPacedReader:
    def __init__(self, source: AsyncByteSource, *, rate_kbps: float) -> None:
        self._chunk_interval = chunk_interval_for(rate_kbps)
        self._rate_kbps = float(rate_kbps)
        self._source = source

        logger.debug(
            "AsyncPacedReader created: rate=%.3f kbps, interval=%.6fs",
            self._rate_kbps,
            self._chunk_interval,
        )

    @property
    def source(self) -> AsyncByteSource:
        return self._source

    @property
    def chunk_interval(self) -> float:
        return self._chunk_interval

    async def read(self, n: int = -1) -> bytes:
        # n < 0 means "whatever is available", still bounded by one chunk.
        start = time.monotonic()
        request_size = CHUNK_SIZE_BYTES if n < 0 else min(n, CHUNK_SIZE_BYTES)

        try:
            data = await self._source.read(request_size)
        except Exception:
            await self._sleep_residual(start)
            raise

        await self._sleep_residual(start)
        return data

    async def _sleep_residual(self, start: float) -> None:
        elapsed = time.monotonic() - start
        if elapsed < self._chunk_interval:
            await asyncio.sleep(self._chunk_interval - elapsed)


def throttle_async(source: AsyncByteSource, kbps: float) -> AsyncPacedReader:
    """Wrap an asyncio stream so it reads no faster than ``kbps`` kilobits per second."""
    return AsyncPacedReader(source, rate_kbps=kbps)
