"""Bandwidth throttling for readable byte-streams.

PacedReader wraps any stream exposing ``readinto`` (or, failing that,
``read``) and paces it to a ceiling expressed in kilobits per second.

Each call reads at most one chunk of CHUNK_SIZE_BYTES (one kilobit) from the
wrapped stream and then sleeps whatever remains of the per-chunk interval.
There is no carry-over between calls: time saved by a fast read is lost and a
slow read is never compensated, so the stream can only ever be slowed down.

Units: 1 kb = 1000 bits. With a 125 byte chunk this gives
``chunk_interval = 125 * 8 / (kbps * 1000) = 1 / kbps`` seconds, and a
partially filled chunk still costs a full interval.
"""

from __future__ import annotations

import io
import logging
import math
import time
from typing import Optional, Union

from core.errors import InvalidRateError
from core.interfaces import ByteSource, ReadableSource

logger = logging.getLogger(__name__)

# One kilobit.
CHUNK_SIZE_BYTES = 125

Source = Union[ByteSource, ReadableSource]


def chunk_interval_for(rate_kbps: float) -> float:
    """Return the seconds one chunk may take at ``rate_kbps``.

    Raises InvalidRateError unless the rate is a finite number above zero.
    """
    try:
        rate = float(rate_kbps)
    except (TypeError, ValueError) as e:
        raise InvalidRateError(f"Rate must be a number of kbps, got {rate_kbps!r}") from e

    if not math.isfinite(rate) or rate <= 0:
        raise InvalidRateError(f"Rate must be a positive, finite number of kbps, got {rate_kbps!r}")

    return CHUNK_SIZE_BYTES * 8 / (rate * 1000)


class PacedReader(io.RawIOBase):
    """Readable stream that limits ``source`` to ``rate_kbps`` kilobits per second.

    The wrapped source is borrowed: closing the reader never closes it.
    Instances are not thread-safe; read from one thread at a time.
    """

    def __init__(self, source: Source, *, rate_kbps: float) -> None:
        super().__init__()
        self._chunk_interval = chunk_interval_for(rate_kbps)
        self._rate_kbps = float(rate_kbps)
        self._source = source

        logger.debug(
            "PacedReader created: rate=%.3f kbps, chunk=%d bytes, interval=%.6fs",
            self._rate_kbps,
            CHUNK_SIZE_BYTES,
            self._chunk_interval,
        )

    @property
    def source(self) -> Source:
        return self._source

    @property
    def rate_kbps(self) -> float:
        return self._rate_kbps

    @property
    def chunk_interval(self) -> float:
        return self._chunk_interval

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> Optional[int]:
        """Read at most one chunk into the front of ``buffer``.

        Returns the wrapped stream's own result: a byte count (0 means end of
        stream for a non-empty buffer) or None when a non-blocking source has
        nothing ready. The pacing sleep runs on every call, including end of
        stream and before an error from the source is re-raised.
        """
        self._checkClosed()
        start = time.monotonic()

        view = memoryview(buffer).cast("B")
        request_size = min(len(view), CHUNK_SIZE_BYTES)

        try:
            n = self._read_chunk(view[:request_size])
        except Exception:
            self._sleep_residual(start)
            raise

        self._sleep_residual(start)
        return n

    def _read_chunk(self, chunk: memoryview) -> Optional[int]:
        readinto = getattr(self._source, "readinto", None)
        if readinto is not None:
            return readinto(chunk)

        data = self._source.read(len(chunk))
        if data is None:
            return None

        n = len(data)
        chunk[:n] = data
        return n

    def _sleep_residual(self, start: float) -> None:
        elapsed = time.monotonic() - start
        if elapsed < self._chunk_interval:
            time.sleep(self._chunk_interval - elapsed)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source={self._source!r}, rate_kbps={self._rate_kbps})"


def throttle(source: Source, kbps: float) -> PacedReader:
    """Wrap ``source`` so it reads no faster than ``kbps`` kilobits per second.

    For example, to limit a socket file to 100 kilobits per second::

        slow = throttle(sock.makefile("rb"), 100)

    Raises InvalidRateError if ``kbps`` is zero, negative or not finite.
    Nothing is read from ``source`` until the reader is used.
    """
    return PacedReader(source, rate_kbps=kbps)
