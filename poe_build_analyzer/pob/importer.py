"""Import utilities for Path of Building (PoB) build strings."""
from __future__ import annotations

from typing import Any, Dict

from ..errors import MalformedInput
from ..models import NormalizedBuild
from . import base64url
from .compression import MAX_XML_SIZE, inflate
from .markup import normalize, parse_markup

# Most PoB codes are well under 50KB.
MAX_CODE_SIZE = 500_000


def decode_build_code(
    encoded: str,
    *,
    max_code_size: int = MAX_CODE_SIZE,
    max_xml_size: int = MAX_XML_SIZE,
) -> NormalizedBuild:
    """Decode a PoB build code into a :class:`NormalizedBuild`.

    Parameters
    ----------
    encoded:
        The URL-safe base64 build code, zlib or zstd compressed.
    max_code_size:
        Longest accepted code, in characters.
    max_xml_size:
        Largest accepted decompressed document, in bytes.

    Returns
    -------
    NormalizedBuild
        Character, skills, items, keystones and tree URL of the export.

    Raises
    ------
    MalformedInput
        If the code is not valid URL-safe base64 or is too large.
    CorruptData
        If the compressed stream is truncated or damaged.
    UnsupportedCompression
        If the payload is neither zlib nor zstd data.
    MalformedMarkup
        If the decompressed text is not XML.
    IncompleteBuild
        If the XML has no ``<Build>`` element.
    """

    if not isinstance(encoded, str):
        raise TypeError("encoded build must be a string")
    if len(encoded) > max_code_size:
        raise MalformedInput(f"PoB code too large ({len(encoded)} characters, max {max_code_size})")

    compressed = base64url.decode(encoded)
    # lxml reads the bytes so the document's declared encoding is honoured.
    xml_bytes = inflate(compressed, max_size=max_xml_size)
    return normalize(parse_markup(xml_bytes))


def parse_pob_build(encoded: str) -> Dict[str, Any]:
    """Decode a PoB build string into plain, JSON-serializable records."""

    return decode_build_code(encoded).as_dict()


__all__ = [
    "MAX_CODE_SIZE",
    "decode_build_code",
    "parse_pob_build",
]
