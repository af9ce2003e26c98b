"""Serialized build payload handed to the text-generation model.

The schema mirrors :meth:`NormalizedBuild.as_dict` so the model always sees
the same camelCase field names no matter where the build came from.
"""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from .models import NormalizedBuild


class CharacterSummary(BaseModel):
    """Class, ascendancy, level and stat sheet of the character."""

    model_config = ConfigDict(populate_by_name=True)

    class_name: str = Field(default="", alias="class", description="Base character class.")
    ascendancy: str = Field(default="", description="Ascendancy class, empty when unascended.")
    level: str = Field(default="", description="Character level as exported.")
    stats: Dict[str, str] = Field(
        default_factory=dict,
        description="PoB stat sheet; values are kept as text to avoid precision loss.",
    )


class SkillSummary(BaseModel):
    """A socketed skill group as shown to the model."""

    model_config = ConfigDict(populate_by_name=True)

    main_skill_id: str = Field(alias="mainSkillId", description="Name of the first gem in the group.")
    slot: str = Field(default="Unknown", description="Equipment slot holding the group.")
    is_enabled: bool = Field(default=False, alias="isEnabled", description="Whether the group is enabled in PoB.")
    links: List[str] = Field(default_factory=list, description="Names of the linked gems.")


class ItemSummary(BaseModel):
    """An equipped item with its raw tooltip text."""

    name: str = Field(default="Unknown Item", description="Display name of the item.")
    data: str = Field(default="", description="Item text exactly as exported by PoB.")


class BuildPayload(BaseModel):
    """Top-level structure serialized into the analysis prompt."""

    model_config = ConfigDict(populate_by_name=True)

    character: CharacterSummary
    skills: List[SkillSummary] = Field(default_factory=list)
    items: List[ItemSummary] = Field(default_factory=list)
    keystones: List[str] = Field(default_factory=list, description="Allocated keystone names.")
    tree_url: str = Field(default="", alias="treeURL", description="Shareable passive tree link.")

    @classmethod
    def from_build(cls, build: NormalizedBuild) -> "BuildPayload":
        return cls.model_validate(build.as_dict())

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


__all__ = [
    "CharacterSummary",
    "SkillSummary",
    "ItemSummary",
    "BuildPayload",
]
