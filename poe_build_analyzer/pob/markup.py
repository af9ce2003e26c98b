"""Parse PoB XML and normalize it into a :class:`NormalizedBuild`.

Parsing and normalization are separate steps.  :func:`parse_markup` turns the
XML into a nested mapping where attributes live under ``"@name"`` keys, text
under ``"#text"`` and child elements under their tag.  A lone child element is
collapsed to a mapping unless ``force_list`` is set, so consumers must go
through :func:`as_list` before iterating children; :func:`normalize` does that
at every extraction site and therefore accepts both shapes.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from lxml import etree

from ..errors import IncompleteBuild, MalformedMarkup
from ..models import (
    UNKNOWN_ITEM,
    UNKNOWN_SLOT,
    CharacterInfo,
    Gem,
    Item,
    NormalizedBuild,
    PassiveTreeNode,
    SkillGroup,
)

MarkupNode = Dict[str, Any]

BUILD_TAG = "Build"
STAT_TAGS = ("PlayerStat", "Stat")
TEXT_KEY = "#text"

_RARITY_NAME = re.compile(r"^[ \t]*Rarity: [^\n]*\n[ \t]*([^\n]*)", re.MULTILINE)
_XML_DECLARATION = re.compile(r"^<\?xml[^>]*\?>")


@dataclass(frozen=True)
class MarkupDocument:
    """Parsed XML: the document element's tag and its converted contents."""

    root_tag: str
    root: MarkupNode


def as_list(value: Any) -> List[Any]:
    """Coerce a collapsed child (``None``, mapping or list) to a list."""

    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def parse_markup(text: Union[str, bytes], *, force_list: bool = False) -> MarkupDocument:
    """Parse XML text or raw XML bytes into a :class:`MarkupDocument`.

    Bytes are handed to lxml untouched so their encoding declaration applies.
    Text is already decoded, so any declaration it carries is dropped.

    Raises
    ------
    MalformedMarkup
        If the text is empty or not well-formed XML.
    """

    if not text or not text.strip():
        raise MalformedMarkup("PoB XML document is empty")

    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
    try:
        root = etree.fromstring(_as_xml_bytes(text), parser)
    except etree.XMLSyntaxError as exc:
        raise MalformedMarkup("Unable to parse PoB XML data") from exc

    return MarkupDocument(root_tag=root.tag, root=_convert(root, force_list))


def _as_xml_bytes(text: Union[str, bytes]) -> bytes:
    if isinstance(text, bytes):
        return text.strip()
    return _XML_DECLARATION.sub("", text.strip(), count=1).encode("utf-8")


def _convert(element: etree._Element, force_list: bool) -> MarkupNode:
    node: MarkupNode = {f"@{key}": value for key, value in element.attrib.items()}

    text = "".join(element.itertext())
    if text.strip():
        node[TEXT_KEY] = text

    for child in element:
        if not isinstance(child.tag, str):
            continue
        converted = _convert(child, force_list)
        existing = node.get(child.tag)
        if existing is None:
            node[child.tag] = [converted] if force_list else converted
        elif isinstance(existing, list):
            existing.append(converted)
        else:
            node[child.tag] = [existing, converted]
    return node


def _first(value: Any) -> Optional[MarkupNode]:
    values = as_list(value)
    return values[0] if values else None


def _attr(node: Mapping[str, Any], *names: str) -> Optional[str]:
    for name in names:
        value = node.get(f"@{name}")
        if value is not None:
            return str(value)
    return None


def _build_node(document: MarkupDocument) -> MarkupNode:
    if document.root_tag == BUILD_TAG:
        return document.root
    build = _first(document.root.get(BUILD_TAG))
    if build is None:
        raise IncompleteBuild(f"PoB XML has no <{BUILD_TAG}> element")
    return build


def normalize(document: MarkupDocument) -> NormalizedBuild:
    """Convert a parsed document into a :class:`NormalizedBuild`.

    Raises
    ------
    IncompleteBuild
        If the document has no ``<Build>`` element.
    """

    build = _build_node(document)
    # Sections are siblings of <Build> under <PathOfBuilding>, or children
    # of <Build> when it is the document element.
    sections = document.root

    return NormalizedBuild(
        character=extract_character(build),
        skills=tuple(extract_skills(sections.get("Skills"))),
        items=tuple(extract_items(sections.get("Items"))),
        keystones=tuple(node.name for node in extract_tree_nodes(sections.get("Tree")) if node.is_keystone),
        tree_url=extract_tree_url(sections.get("Tree")),
    )


def parse_build_xml(text: str) -> NormalizedBuild:
    return normalize(parse_markup(text))


def extract_character(build: Mapping[str, Any]) -> CharacterInfo:
    stats: Dict[str, str] = {}
    for tag in STAT_TAGS:
        for entry in as_list(build.get(tag)):
            key = _attr(entry, "stat")
            if key is None:
                continue
            stats[key] = _attr(entry, "value") or ""

    return CharacterInfo(
        class_name=_attr(build, "className", "class") or "",
        ascendancy=_attr(build, "ascendClassName", "ascendancyName") or "",
        level=_attr(build, "level") or "",
        stats=stats,
    )


def _skill_nodes(skills: Mapping[str, Any]) -> List[MarkupNode]:
    nodes = list(as_list(skills.get("Skill")))

    skill_sets = as_list(skills.get("SkillSet"))
    if skill_sets:
        active_id = _attr(skills, "activeSkillSet")
        chosen = next((entry for entry in skill_sets if _attr(entry, "id") == active_id), skill_sets[0])
        nodes.extend(as_list(chosen.get("Skill")))
    return nodes


def extract_skills(skills: Any) -> List[SkillGroup]:
    section = _first(skills)
    if section is None:
        return []

    groups: List[SkillGroup] = []
    for skill in _skill_nodes(section):
        gem_nodes = as_list(skill.get("Gem"))
        if not gem_nodes:
            continue
        if _attr(gem_nodes[0], "nameSpec", "name") is None:
            continue

        gems = []
        for gem in gem_nodes:
            name = _attr(gem, "nameSpec", "name")
            if name is None:
                continue
            gems.append(Gem(name=name, level=_attr(gem, "level"), quality=_attr(gem, "quality")))

        groups.append(
            SkillGroup(
                slot=_attr(skill, "slot") or UNKNOWN_SLOT,
                enabled=_attr(skill, "enabled") == "true",
                gems=tuple(gems),
            )
        )
    return groups


def item_display_name(data: str) -> str:
    """Return the line following the ``Rarity:`` header of an item block."""

    match = _RARITY_NAME.search(data)
    if match is None:
        return UNKNOWN_ITEM
    name = match.group(1).strip()
    return name or UNKNOWN_ITEM


def extract_items(items: Any) -> List[Item]:
    section = _first(items)
    if section is None:
        return []

    extracted: List[Item] = []
    for item in as_list(section.get("Item")):
        data = str(item.get(TEXT_KEY, "")).strip()
        extracted.append(Item(name=item_display_name(data), data=data))
    return extracted


def extract_tree_nodes(tree: Any) -> List[PassiveTreeNode]:
    section = _first(tree)
    if section is None:
        return []
    spec = _first(section.get("Spec"))
    if spec is None:
        return []

    nodes: List[PassiveTreeNode] = []
    for node in as_list(spec.get("Node")):
        name = _attr(node, "name")
        if name is None:
            continue
        nodes.append(PassiveTreeNode(name=name, is_keystone=_attr(node, "isKeystone") == "true"))
    return nodes


def extract_tree_url(tree: Any) -> str:
    section = _first(tree)
    if section is None:
        return ""
    spec = _first(section.get("Spec")) or {}

    url = _attr(spec, "url") or _attr(section, "url")
    if url is None:
        url_node = _first(spec.get("URL"))
        url = str(url_node.get(TEXT_KEY, "")) if url_node else ""
    return url.strip()


__all__ = [
    "MarkupDocument",
    "as_list",
    "parse_markup",
    "normalize",
    "parse_build_xml",
    "item_display_name",
]
