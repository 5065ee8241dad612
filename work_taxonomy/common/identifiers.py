"""
Identifier derivation for taxonomy nodes and skills.

Ids are slugs derived deterministically from human-readable names:

    derive_id("UX Research & Analysis")  ->  "ux-research-analysis"

Different names can collapse to the same slug ("C++" and "C" both give "c").
Creation paths must treat that as a collision and walk suffixed_ids() rather
than overwrite the existing row.
"""

import re
from itertools import count
from typing import Iterator

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

FALLBACK_SKILL_BASE = "skill"

# Column widths of skill.id and skill.name / skill.name_key
SKILL_ID_MAX_LENGTH = 250
SKILL_NAME_MAX_LENGTH = 250


def derive_id(name: str) -> str:
    """Lower-case, drop characters outside [a-z0-9 whitespace -], hyphenate."""
    slug = _DISALLOWED.sub("", name.lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def derive_child_id(parent_id: str, label: str) -> str:
    """Id for a node owned by parent_id, e.g. "design" + "UX Research"."""
    return derive_id(f"{parent_id} {label}")


def normalize_name(name: str) -> str:
    """Key used for case-insensitive, whitespace-insensitive name matching."""
    return " ".join(name.split()).casefold()


def skill_id_base(name: str) -> str:
    return derive_id(name) or FALLBACK_SKILL_BASE


def suffixed_ids(base: str) -> Iterator[str]:
    """Yield base, base-1, base-2, ... without end."""
    yield base
    for n in count(1):
        yield f"{base}-{n}"
