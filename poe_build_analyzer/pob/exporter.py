"""Render a :class:`NormalizedBuild` back into a PoB build code."""
from __future__ import annotations

from lxml import etree

from ..models import NormalizedBuild
from . import base64url
from .compression import DEFAULT_ALGORITHM, Algorithm, compress


def render_markup(build: NormalizedBuild) -> str:
    """Return a ``<PathOfBuilding>`` XML document describing ``build``."""

    root = etree.Element("PathOfBuilding")

    character = build.character
    build_element = etree.SubElement(root, "Build")
    if character.level:
        build_element.set("level", character.level)
    if character.class_name:
        build_element.set("className", character.class_name)
    if character.ascendancy:
        build_element.set("ascendClassName", character.ascendancy)
    for stat, value in character.stats.items():
        etree.SubElement(build_element, "PlayerStat", stat=stat, value=value)

    skills = etree.SubElement(root, "Skills", activeSkillSet="1")
    skill_set = etree.SubElement(skills, "SkillSet", id="1")
    for group in build.skills:
        skill = etree.SubElement(
            skill_set,
            "Skill",
            slot=group.slot,
            enabled="true" if group.enabled else "false",
        )
        for gem in group.gems:
            gem_element = etree.SubElement(skill, "Gem", nameSpec=gem.name)
            if gem.level is not None:
                gem_element.set("level", gem.level)
            if gem.quality is not None:
                gem_element.set("quality", gem.quality)

    items = etree.SubElement(root, "Items")
    for item in build.items:
        etree.SubElement(items, "Item").text = item.data

    tree = etree.SubElement(root, "Tree")
    spec = etree.SubElement(tree, "Spec")
    if build.tree_url:
        spec.set("url", build.tree_url)
    for keystone in build.keystones:
        etree.SubElement(spec, "Node", name=keystone, isKeystone="true")

    return etree.tostring(root, xml_declaration=True, encoding="UTF-8", pretty_print=True).decode("utf-8")


def encode_build(build: NormalizedBuild, algorithm: Algorithm = DEFAULT_ALGORITHM) -> str:
    """Encode ``build`` as a URL-safe base64 PoB code."""

    return base64url.encode(compress(render_markup(build), algorithm))


__all__ = ["render_markup", "encode_build"]
