"""Convert pob.party JSON exports into :class:`NormalizedBuild` records.

pob.party serves already-parsed builds as loosely typed JSON: numbers where
PoB uses strings, single objects where a list is expected.  The helpers here
coerce that shape once so the result matches what the XML decoder produces.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..errors import IncompleteBuild
from ..models import UNKNOWN_ITEM, UNKNOWN_SLOT, CharacterInfo, Gem, Item, NormalizedBuild, SkillGroup
from .markup import item_display_name


def _as_mappings(value: Any) -> Sequence[Mapping[str, Any]]:
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [entry for entry in value if isinstance(entry, Mapping)]
    return []


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value).strip()
    return text or None


def _coerce_enabled(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return _text(value) == "true"


def _coerce_gem(gem_data: Mapping[str, Any]) -> Optional[Gem]:
    name = _text(gem_data.get("id") or gem_data.get("name") or gem_data.get("nameSpec"))
    if name is None:
        return None
    return Gem(name=name, level=_text(gem_data.get("level")), quality=_text(gem_data.get("quality")))


def _coerce_group(group_data: Mapping[str, Any]) -> Optional[SkillGroup]:
    gem_entries = _as_mappings(group_data.get("gems"))
    if not gem_entries:
        return None
    main = _coerce_gem(gem_entries[0])
    if main is None:
        return None

    links = [gem for gem in (_coerce_gem(entry) for entry in gem_entries[1:]) if gem is not None]
    return SkillGroup(
        slot=_text(group_data.get("slot")) or UNKNOWN_SLOT,
        enabled=_coerce_enabled(group_data.get("enabled")),
        gems=(main, *links),
    )


def _coerce_item(item_data: Mapping[str, Any]) -> Item:
    data = str(item_data.get("raw") or item_data.get("data") or "").strip()
    name = _text(item_data.get("name")) or item_display_name(data)
    return Item(name=name or UNKNOWN_ITEM, data=data)


def _coerce_stats(stats_data: Any) -> Dict[str, str]:
    if isinstance(stats_data, Mapping) and "id" not in stats_data:
        return {str(key): _text(value) or "" for key, value in stats_data.items()}

    stats: Dict[str, str] = {}
    for entry in _as_mappings(stats_data):
        key = _text(entry.get("id") or entry.get("stat"))
        if key is None:
            continue
        stats[key] = _text(entry.get("value")) or ""
    return stats


def _coerce_keystones(keystones_data: Any) -> List[str]:
    names: List[str] = []
    entries = keystones_data if isinstance(keystones_data, Sequence) and not isinstance(keystones_data, str) else [keystones_data]
    for entry in entries:
        name = _text(entry.get("name")) if isinstance(entry, Mapping) else _text(entry)
        if name is not None:
            names.append(name)
    return names


def build_from_party_json(payload: Mapping[str, Any]) -> NormalizedBuild:
    """Normalize a pob.party ``/api/v2/pastebin`` response.

    Raises
    ------
    IncompleteBuild
        If the payload carries no ``build`` object.
    """

    build = payload.get("build") if isinstance(payload, Mapping) else None
    if not isinstance(build, Mapping):
        raise IncompleteBuild("pob.party response has no build object")

    groups = [_coerce_group(entry) for entry in _as_mappings(build.get("skills"))]
    keystones = build.get("keystones")

    return NormalizedBuild(
        character=CharacterInfo(
            class_name=_text(build.get("class")) or "",
            ascendancy=_text(build.get("ascendancy")) or "",
            level=_text(build.get("level")) or "",
            stats=_coerce_stats(build.get("stats")),
        ),
        skills=tuple(group for group in groups if group is not None),
        items=tuple(_coerce_item(entry) for entry in _as_mappings(build.get("items"))),
        keystones=tuple(_coerce_keystones(keystones)) if keystones else (),
        tree_url=_text(build.get("treeURL") or build.get("treeUrl")) or "",
    )


__all__ = ["build_from_party_json"]
