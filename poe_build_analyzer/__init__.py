"""Decode Path of Building build codes and prepare them for analysis."""

from .errors import (
    CorruptData,
    IncompleteBuild,
    MalformedInput,
    MalformedMarkup,
    PasteFetchError,
    PobDecodeError,
    UnsupportedCompression,
)
from .models import CharacterInfo, Gem, Item, NormalizedBuild, SkillGroup
from .pob import decode_build_code, encode_build

__all__ = [
    "CharacterInfo",
    "CorruptData",
    "Gem",
    "IncompleteBuild",
    "Item",
    "MalformedInput",
    "MalformedMarkup",
    "NormalizedBuild",
    "PasteFetchError",
    "PobDecodeError",
    "SkillGroup",
    "UnsupportedCompression",
    "decode_build_code",
    "encode_build",
]
