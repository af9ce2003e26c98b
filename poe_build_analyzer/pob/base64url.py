"""URL-safe Base64 transcoding for PoB build codes."""
from __future__ import annotations

import base64
import binascii

from ..errors import MalformedInput

_TO_STANDARD = str.maketrans("-_", "+/")


def decode(code: str) -> bytes:
    """Decode a URL-safe Base64 build code, with or without padding.

    Raises
    ------
    MalformedInput
        If the code contains characters outside the Base64 alphabet, has a
        length no Base64 string can have, or carries invalid padding.
    """

    if not isinstance(code, str):
        raise TypeError("build code must be a string")

    cleaned = code.strip().translate(_TO_STANDARD)
    if not cleaned:
        raise MalformedInput("Build code is empty")

    body = cleaned.rstrip("=")
    padding = len(cleaned) - len(body)
    if padding and (padding > 2 or len(cleaned) % 4):
        raise MalformedInput("Invalid Base64 padding in build code")
    if len(body) % 4 == 1:
        raise MalformedInput("Invalid Base64 length for build code")

    padded = body + "=" * (-len(body) % 4)
    try:
        decoded = base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedInput("Invalid base64-encoded PoB string") from exc

    # Unused trailing bits must be zero so that re-encoding gives the code back.
    if base64.b64encode(decoded).decode("ascii").rstrip("=") != body:
        raise MalformedInput("Non-canonical Base64 in build code")
    return decoded


def encode(data: bytes) -> str:
    """Encode bytes with the URL-safe alphabet (``-`` and ``_``)."""

    return base64.urlsafe_b64encode(bytes(data)).decode("ascii")


__all__ = ["decode", "encode"]
