"""Core protocol definitions.

Structural contracts for the streams the throttles wrap. Anything with a
matching method qualifies; no base class is required.
"""

from __future__ import annotations

from typing import Optional, Protocol


class ByteSource(Protocol):
    """Contract for a stream that fills a caller-supplied buffer."""
    def readinto(self, buffer: memoryview) -> Optional[int]:
        ...


class ReadableSource(Protocol):
    """Contract for a stream that returns up to ``size`` bytes per call."""
    def read(self, size: int = -1) -> Optional[bytes]:
        ...


class AsyncByteSource(Protocol):
    """Contract for an asyncio stream (e.g. asyncio.StreamReader)."""
    async def read(self, n: int = -1) -> bytes:
        ...
