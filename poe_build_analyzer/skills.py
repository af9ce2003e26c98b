"""Skill listings used when asking the player which skill to analyse."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .models import NormalizedBuild, SkillGroup

# Six-link slots, in order of preference, for guessing the main skill.
PREFERRED_SLOTS: Sequence[str] = ("Body Armour", "Weapon 1")


def _primary_gem_name(group: SkillGroup) -> str:
    for gem in group.gems:
        if not gem.is_support:
            return gem.name
    return group.main_skill_id


def active_skill_names(build: NormalizedBuild) -> List[str]:
    """Return the distinct active skill names of enabled, non-support groups."""

    names: List[str] = []
    for group in build.active_skills():
        name = _primary_gem_name(group)
        if name not in names:
            names.append(name)
    return names


def default_main_skill(build: NormalizedBuild, preferred_slots: Sequence[str] = PREFERRED_SLOTS) -> Optional[str]:
    """Guess the build's main skill.

    The first active group socketed in a preferred slot wins; otherwise the
    first active skill is returned, or ``None`` when the build has none.
    """

    active = build.active_skills()
    for slot in preferred_slots:
        for group in active:
            if group.slot == slot:
                return _primary_gem_name(group)
    if active:
        return _primary_gem_name(active[0])
    return None


__all__ = ["PREFERRED_SLOTS", "active_skill_names", "default_main_skill"]
