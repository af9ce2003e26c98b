"""Utilities for working with Path of Building (PoB) build exports."""

from .exporter import encode_build, render_markup
from .importer import decode_build_code, parse_pob_build
from .markup import MarkupDocument, as_list, normalize, parse_build_xml, parse_markup
from .party import build_from_party_json

__all__ = [
    "MarkupDocument",
    "as_list",
    "build_from_party_json",
    "decode_build_code",
    "encode_build",
    "normalize",
    "parse_build_xml",
    "parse_markup",
    "parse_pob_build",
    "render_markup",
]
