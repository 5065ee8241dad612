from itertools import islice

import pytest

from work_taxonomy.common.identifiers import (
    derive_child_id,
    derive_id,
    normalize_name,
    skill_id_base,
    suffixed_ids,
)


@pytest.mark.parametrize("name, expected", [
    ("UX Research & Analysis", "ux-research-analysis"),
    ("  Design   Systems  ", "design-systems"),
    ("React.js", "reactjs"),
    ("C++", "c"),
    ("Front-End -- Development", "front-end-development"),
    ("--Leading and trailing--", "leading-and-trailing"),
    ("!!!", ""),
])
def test_derive_id(name: str, expected: str) -> None:
    assert derive_id(name) == expected


def test_derive_id_is_deterministic() -> None:
    assert derive_id("UX Research & Analysis") == derive_id("UX Research & Analysis")


def test_derive_child_id_prefixes_parent() -> None:
    assert derive_child_id("design", "UX Research") == "design-ux-research"
    assert derive_child_id("design-ux", "User Research") == "design-ux-user-research"


def test_normalize_name_folds_case_and_whitespace() -> None:
    assert normalize_name("React.js") == normalize_name("react.js ")
    assert normalize_name("  User   Research ") == "user research"
    assert normalize_name("   ") == ""


def test_skill_id_base_falls_back_for_empty_slug() -> None:
    assert skill_id_base("!!!") == "skill"
    assert skill_id_base("Figma") == "figma"


def test_suffixed_ids() -> None:
    assert list(islice(suffixed_ids("c"), 4)) == ["c", "c-1", "c-2", "c-3"]
