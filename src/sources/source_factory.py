"""Factory for opening the byte-stream a throttle should wrap.

Exposes get_byte_source which returns stdin, an HttpSource or a local file
depending on the location string.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO, Optional

import httpx

from core.errors import ValidationError
from sources.http_source import HttpSource
from sources.local_source import LocalSource


def get_byte_source(
    location: str,
    *,
    project_root: Path,
    http_timeout: float = 20.0,
    http_verify: bool = True,
    http_client: Optional[httpx.Client] = None,
    stdin: Optional[BinaryIO] = None,
) -> BinaryIO:
    """
    Factory that opens the stream named by ``location``.

    Priority Logic:
    1. "-" -> standard input (binary).
    2. http:// or https:// -> HttpSource.
    3. Default -> a file under project_root.
    """
    loc = (location or "").strip()
    if not loc:
        raise ValidationError("Missing source location")

    if loc == "-":
        return stdin if stdin is not None else sys.stdin.buffer

    if loc.startswith(("http://", "https://")):
        return HttpSource(loc, timeout=http_timeout, verify=http_verify, client=http_client)

    return LocalSource(project_root=project_root).open(loc)
