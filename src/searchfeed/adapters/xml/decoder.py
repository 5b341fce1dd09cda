"""Response body decoding — Conditional gzip decompression of the raw stream."""

from __future__ import annotations

import logging
import zlib
from collections.abc import Generator, Iterable

import httpx

from searchfeed.models.response import GZIP, UNCOMPRESSED

logger = logging.getLogger(__name__)

# zlib window bits selecting the gzip container format
_GZIP_WBITS = 16 + zlib.MAX_WBITS

_GZIP_MAGIC = b"\x1f\x8b"

STREAM_ERRORS: tuple[type[BaseException], ...] = (httpx.TransportError, OSError, EOFError, zlib.error)
"""Exceptions signalling that reading or decompressing the body failed."""


def decode_body(response: httpx.Response) -> tuple[Generator[bytes, None, None], str]:
    """Return the response body as a chunk generator plus the compression method used.

    The ``Content-Encoding`` header is inspected before any byte of the body
    is read. A ``gzip`` body is decompressed on the fly; anything else is
    passed through unchanged.
    """
    encoding = response.headers.get("Content-Encoding")
    if encoding is not None and encoding.strip().lower() == GZIP:
        logger.debug("Unwrapping GZIP compressed stream.")
        return gunzip(response.iter_raw()), GZIP
    return response.iter_raw(), UNCOMPRESSED


def gunzip(chunks: Iterable[bytes]) -> Generator[bytes, None, None]:
    """Decompress a (possibly multi-member) gzip stream chunk by chunk.

    Bytes after a complete member that do not start a new gzip header
    (e.g. padding) are ignored.

    Raises:
        zlib.error: If the data is not valid gzip.
        EOFError: If the stream ends inside a gzip member.
    """
    decompressor = zlib.decompressobj(_GZIP_WBITS)
    pending = False
    members = 0
    for chunk in chunks:
        while chunk:
            if members and not pending and not _GZIP_MAGIC.startswith(chunk[:2]):
                logger.debug("Ignoring trailing bytes after gzip stream.")
                return
            pending = True
            data = decompressor.decompress(chunk)
            if data:
                yield data
            if decompressor.eof:
                chunk = decompressor.unused_data
                decompressor = zlib.decompressobj(_GZIP_WBITS)
                pending = False
                members += 1
            else:
                chunk = b""

    tail = decompressor.flush()
    if tail:
        yield tail
    if pending and not decompressor.eof:
        raise EOFError("Compressed stream ended before the end-of-stream marker was reached")


def is_stream_failure(exc: BaseException) -> bool:
    """Whether ``exc`` or any exception in its cause chain is an I/O failure."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, STREAM_ERRORS):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False
