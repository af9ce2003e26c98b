#!/usr/bin/env python3
"""Decode a Path of Building code or paste link and print the build."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from poe_build_analyzer.errors import PasteFetchError, PobDecodeError
from poe_build_analyzer.pob.sources import fetch_party_build, load_build
from poe_build_analyzer.prompt_builder import build_analysis_prompt

LOGGER = logging.getLogger("decode_build")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("source", nargs="?", help="Build code or paste URL. Read from stdin when omitted.")
    parser.add_argument("--party", action="store_true", help="Resolve the paste through the pob.party API.")
    parser.add_argument("--prompt", metavar="QUESTION", help="Print the analysis prompt for QUESTION instead of JSON.")
    parser.add_argument("--primary-skill", help="Primary damage skill to mention in the prompt.")
    parser.add_argument("--secondary-skill", help="Secondary skill to mention in the prompt.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    source = args.source if args.source is not None else sys.stdin.read()
    if not source.strip():
        LOGGER.error("No build code provided.")
        return 1

    try:
        build = fetch_party_build(source) if args.party else load_build(source)
    except PobDecodeError as exc:
        LOGGER.error("Could not decode build (%s stage): %s", exc.stage, exc)
        return 1
    except PasteFetchError as exc:
        LOGGER.error("%s", exc)
        return 1

    LOGGER.debug(
        "Decoded %s %s with %d skill groups and %d items",
        build.character.ascendancy or build.character.class_name,
        build.character.level,
        len(build.skills),
        len(build.items),
    )

    if args.prompt:
        print(build_analysis_prompt(build, args.prompt, args.primary_skill, args.secondary_skill))
    else:
        print(json.dumps(build.as_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
