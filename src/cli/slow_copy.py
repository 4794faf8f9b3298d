"""Copy a byte-stream to stdout at a limited bandwidth.

    slow-copy --kbps 64 some/file.bin > out.bin
    curl -s https://example.test/x | slow-copy --kbps 8
    slow-copy --kbps 100 https://example.test/big.iso > /dev/null
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import BinaryIO, List, Optional

from config import HTTP_TIMEOUT, HTTP_VERIFY, LOG_LEVEL, PROJECT_ROOT, THROTTLE_KBPS
from core.errors import ThrottleError
from core.throttle import CHUNK_SIZE_BYTES, PacedReader, throttle
from sources.source_factory import get_byte_source

logger = logging.getLogger("slow_copy")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slow-copy",
        description="Copy SOURCE to stdout no faster than the given rate.",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default="-",
        help=(
            "http(s) URL, '-' for stdin (default), or a file path; files must be "
            "inside PROJECT_ROOT (default: current directory), paths outside it are refused"
        ),
    )
    parser.add_argument(
        "--kbps",
        type=float,
        default=THROTTLE_KBPS,
        help=f"rate limit in kilobits per second (default: {THROTTLE_KBPS:g})",
    )
    return parser


def copy_stream(reader: PacedReader, writer: BinaryIO) -> int:
    """Copy ``reader`` to ``writer`` until end of stream. Returns the byte count."""
    buffer = bytearray(CHUNK_SIZE_BYTES)
    total = 0
    while True:
        n = reader.readinto(buffer)
        if n is None:
            continue
        if n == 0:
            break
        writer.write(buffer[:n])
        total += n
    writer.flush()
    return total


def main(argv: Optional[List[str]] = None, *, stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None) -> int:
    logging.basicConfig(level=LOG_LEVEL, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

    args = build_parser().parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout.buffer

    try:
        source = get_byte_source(
            args.source,
            project_root=PROJECT_ROOT,
            http_timeout=HTTP_TIMEOUT,
            http_verify=HTTP_VERIFY,
            stdin=stdin,
        )
    except ThrottleError as e:
        logger.error("%s", e)
        return 2

    try:
        reader = throttle(source, args.kbps)
        logger.info("Copying %s to stdout with a rate limit of %g kbps...", args.source, args.kbps)

        start = time.monotonic()
        total = copy_stream(reader, stdout)
        elapsed = time.monotonic() - start
    except ThrottleError as e:
        logger.error("%s", e)
        return 2
    except KeyboardInterrupt:
        return 130
    finally:
        # The throttle borrows its source; we opened it, so we close it.
        if source is not stdin:
            source.close()

    logger.info("Finished! Wrote %d bytes in %.2fs", total, elapsed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
