"""zlib and zstd handling for PoB payloads.

Older PoB releases deflate the XML with zlib, newer producers may emit a zstd
frame.  Decompression tries zlib first and only falls back to zstd when zlib
rejects the data as "not zlib"; a damaged zlib stream is reported as such.
"""
from __future__ import annotations

import zlib
from typing import List, Literal, Optional

import zstandard as zstd

from ..errors import CorruptData, UnsupportedCompression

Algorithm = Literal["zlib", "zstd"]

ZLIB = "zlib"
ZSTD = "zstd"
DEFAULT_ALGORITHM: Algorithm = ZLIB

ZLIB_LEVEL = 9
ZSTD_LEVEL = 3

# Cap on decompressed output; guards against decompression bombs.
MAX_XML_SIZE = 10_000_000

_ZLIB_HEADER_SIZE = 2
_ZSTD_FEED_SIZE = 256

# zlib messages meaning the input is not a zlib stream at all.
_NOT_ZLIB_MARKERS = (
    "incorrect header check",
    "unknown compression method",
    "invalid window size",
    "invalid block type",
)


def _is_not_zlib(exc: zlib.error) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _NOT_ZLIB_MARKERS)


def _inflate_zlib(data: bytes, max_size: int) -> bytes:
    decompressor = zlib.decompressobj()
    output = decompressor.decompress(data, max_size)
    if not decompressor.eof:
        if decompressor.unconsumed_tail or len(output) >= max_size:
            raise CorruptData(f"Decompressed data exceeds maximum size ({max_size} bytes)")
        raise CorruptData("Incomplete or truncated zlib stream")
    return output


def _inflate_zstd(data: bytes, max_size: int) -> bytes:
    # Fed in small slices so output is checked against the cap as it grows,
    # including frames that do not record their content size.
    decompressor = zstd.ZstdDecompressor().decompressobj()
    chunks: List[bytes] = []
    total = 0
    for start in range(0, len(data), _ZSTD_FEED_SIZE):
        chunk = decompressor.decompress(data[start:start + _ZSTD_FEED_SIZE])
        total += len(chunk)
        if total > max_size:
            raise CorruptData(f"Decompressed data exceeds maximum size ({max_size} bytes)")
        chunks.append(chunk)
        if decompressor.eof:
            break
    if not decompressor.eof:
        raise zstd.ZstdError("incomplete or truncated zstd frame")
    return b"".join(chunks)


def inflate(data: bytes, *, max_size: int = MAX_XML_SIZE) -> bytes:
    """Inflate a PoB payload and return the raw XML bytes.

    Raises
    ------
    CorruptData
        If the payload is a zlib stream that is truncated or damaged, or the
        output exceeds ``max_size``.
    UnsupportedCompression
        If neither zlib nor zstd accepts the payload, or it is shorter than
        any zlib header.
    """

    if len(data) < _ZLIB_HEADER_SIZE:
        raise UnsupportedCompression(f"PoB data is too short to be compressed ({len(data)} bytes)")

    try:
        return _inflate_zlib(data, max_size)
    except zlib.error as zlib_exc:
        if not _is_not_zlib(zlib_exc):
            raise CorruptData(f"Unable to decompress PoB data: {zlib_exc}") from zlib_exc
        try:
            return _inflate_zstd(data, max_size)
        except zstd.ZstdError as zstd_exc:
            raise UnsupportedCompression(
                "PoB data is neither a zlib stream nor a zstd frame",
                causes=(zlib_exc, zstd_exc),
            ) from zstd_exc


def decompress(data: bytes, *, max_size: int = MAX_XML_SIZE) -> str:
    """Inflate a PoB payload and return the XML text.

    Same failures as :func:`inflate`, plus :class:`CorruptData` when the
    output is not UTF-8.
    """

    raw = inflate(data, max_size=max_size)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptData("Decompressed PoB data is not valid UTF-8") from exc


def compress(text: str, algorithm: Algorithm = DEFAULT_ALGORITHM, *, level: Optional[int] = None) -> bytes:
    """Compress XML text into a zlib stream or a zstd frame."""

    raw = text.encode("utf-8")
    if algorithm == ZLIB:
        return zlib.compress(raw, ZLIB_LEVEL if level is None else level)
    if algorithm == ZSTD:
        compressor = zstd.ZstdCompressor(level=ZSTD_LEVEL if level is None else level)
        return compressor.compress(raw)
    raise ValueError(f"Unsupported compression algorithm: {algorithm!r}")


__all__ = [
    "Algorithm",
    "ZLIB",
    "ZSTD",
    "DEFAULT_ALGORITHM",
    "MAX_XML_SIZE",
    "compress",
    "decompress",
    "inflate",
]
