"""Prompt templates for asking a text-generation model about a build."""
from __future__ import annotations

from typing import Optional

from .models import NormalizedBuild
from .schemas import BuildPayload
from .skills import default_main_skill


def build_analysis_prompt(
    build: NormalizedBuild,
    question: str,
    primary_skill: Optional[str] = None,
    secondary_skill: Optional[str] = None,
) -> str:
    """Return a prompt asking the model to answer ``question`` about ``build``."""

    if not question or not question.strip():
        raise ValueError("A question about the build is required")

    primary = primary_skill or default_main_skill(build) or "Unknown"
    payload = BuildPayload.from_build(build).to_json()

    lines = [
        "You are a world-class expert on the video game Path of Exile (PoE).",
        "Your task is to analyze a player's build data and answer their specific question.",
        "The data includes character stats, skills, keystones, and item data.",
        "",
        "Here is the player's build data:",
        "```json",
        payload,
        "```",
        "",
        f"The user has identified their Primary Damage Skill as: \"{primary}\".",
    ]
    if secondary_skill and secondary_skill != "None":
        lines.append(f"They are also interested in a Secondary Skill: \"{secondary_skill}\".")

    lines.extend(
        [
            "",
            "Here is the user's question:",
            f"\"{question.strip()}\"",
            "",
            "Please provide a detailed analysis and answer based on all the provided data and the user's question. "
            "If the user asks about DPS, use your extensive knowledge to estimate the damage potential based on "
            "the provided gems, links, and item data.",
        ]
    )
    return "\n".join(lines)


__all__ = ["build_analysis_prompt"]
