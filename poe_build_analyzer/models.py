"""Typed build records produced by the PoB codec."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

UNKNOWN_SLOT = "Unknown"
UNKNOWN_ITEM = "Unknown Item"


@dataclass(frozen=True)
class Gem:
    """A socketed skill gem."""

    name: str
    level: Optional[str] = None
    quality: Optional[str] = None

    @property
    def is_support(self) -> bool:
        return "Support" in self.name


@dataclass(frozen=True)
class SkillGroup:
    """A linked group of gems; the first gem is the main skill."""

    slot: str
    enabled: bool
    gems: Sequence[Gem] = field(default_factory=tuple)

    @property
    def main_skill_id(self) -> str:
        return self.gems[0].name

    @property
    def links(self) -> Sequence[str]:
        return tuple(gem.name for gem in self.gems[1:])

    @property
    def is_active(self) -> bool:
        """Enabled and carrying at least one non-support gem."""

        return self.enabled and any(not gem.is_support for gem in self.gems)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "mainSkillId": self.main_skill_id,
            "slot": self.slot,
            "isEnabled": self.enabled,
            "links": list(self.links),
        }


@dataclass(frozen=True)
class Item:
    """An item block kept verbatim plus its display name."""

    name: str
    data: str

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "data": self.data}


@dataclass(frozen=True)
class PassiveTreeNode:
    """An allocated passive node listed in a tree spec."""

    name: str
    is_keystone: bool = False


@dataclass(frozen=True)
class CharacterInfo:
    """Class, ascendancy, level and the exported stat sheet."""

    class_name: str = ""
    ascendancy: str = ""
    level: str = ""
    stats: Mapping[str, str] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "class": self.class_name,
            "ascendancy": self.ascendancy,
            "level": self.level,
            "stats": dict(self.stats),
        }


@dataclass(frozen=True)
class NormalizedBuild:
    """Decoder output shared by every build source."""

    character: CharacterInfo
    skills: Sequence[SkillGroup] = field(default_factory=tuple)
    items: Sequence[Item] = field(default_factory=tuple)
    keystones: Sequence[str] = field(default_factory=tuple)
    tree_url: str = ""

    def active_skills(self) -> Sequence[SkillGroup]:
        return tuple(group for group in self.skills if group.is_active)

    def as_dict(self) -> Dict[str, Any]:
        """Return the build as plain JSON-serializable records."""

        return {
            "character": self.character.as_dict(),
            "skills": [group.as_dict() for group in self.skills],
            "items": [item.as_dict() for item in self.items],
            "keystones": list(self.keystones),
            "treeURL": self.tree_url,
        }


__all__ = [
    "UNKNOWN_SLOT",
    "UNKNOWN_ITEM",
    "Gem",
    "SkillGroup",
    "Item",
    "PassiveTreeNode",
    "CharacterInfo",
    "NormalizedBuild",
]
