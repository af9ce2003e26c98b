"""Exceptions raised while decoding Path of Building (PoB) build codes.

Every decoding failure is terminal for its input.  The exceptions subclass
:class:`ValueError` so callers that only care about "bad build code" can keep
catching that, while richer callers can inspect :attr:`PobDecodeError.stage`
and the chained ``__cause__`` to render a diagnostic.
"""
from __future__ import annotations

from typing import Optional, Sequence


class PobDecodeError(ValueError):
    """Base class for every failure of the PoB codec."""

    stage = "decode"

    def __init__(self, message: str, *, stage: Optional[str] = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class MalformedInput(PobDecodeError):
    """The build code is not valid URL-safe Base64."""

    stage = "base64"


class CorruptData(PobDecodeError):
    """The payload has a valid header but the stream is truncated or damaged."""

    stage = "decompress"


class UnsupportedCompression(PobDecodeError):
    """Neither zlib nor zstd accepted the payload."""

    stage = "decompress"

    def __init__(self, message: str, causes: Sequence[BaseException] = ()) -> None:
        super().__init__(message)
        self.causes = tuple(causes)

    def __str__(self) -> str:
        message = super().__str__()
        if not self.causes:
            return message
        details = "; ".join(f"{type(cause).__name__}: {cause}" for cause in self.causes)
        return f"{message} ({details})"


class MalformedMarkup(PobDecodeError):
    """The decompressed text is not well-formed XML."""

    stage = "markup"


class IncompleteBuild(PobDecodeError):
    """The XML parsed but lacks the mandatory ``<Build>`` element."""

    stage = "markup"


class PasteFetchError(RuntimeError):
    """Raised when a build code cannot be fetched from a paste host."""


__all__ = [
    "PobDecodeError",
    "MalformedInput",
    "CorruptData",
    "UnsupportedCompression",
    "MalformedMarkup",
    "IncompleteBuild",
    "PasteFetchError",
]
