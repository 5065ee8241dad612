import json
from pathlib import Path

import pytest

from work_taxonomy.common.exceptions import KnowledgeBaseError
from work_taxonomy.services.knowledge_base import KnowledgeBase, unique_names

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def test_unique_names_dedupes_case_insensitively():
    assert unique_names(["User Research", "user  research", "", "  ", "Figma"]) == ["User Research", "Figma"]


def test_suggest_for_work_type():
    kb = KnowledgeBase(work_types={"wt": ["Figma", "FIGMA", "Sketch"]})
    assert kb.suggest_for_work_type("wt") == ["Figma", "Sketch"]
    assert kb.suggest_for_work_type("missing") == []


def test_suggest_for_category_combines_sources():
    kb = KnowledgeBase(
        focus_area_defaults={"operations": ["Operations Management", "Process Improvement", "Vendor Management"]},
    )
    names = kb.suggest_for_category("Process Management", "operations")
    # "process" and "management" keywords; "Process Improvement" deduped
    assert names == [
        "Operations Management", "Process Improvement", "Management", "Process Management",
    ]
    assert kb.suggest_for_category("Process Management", "operations", limit=2) == [
        "Operations Management", "Process Improvement",
    ]


def test_suggest_for_category_without_label():
    kb = KnowledgeBase(category_keywords={}, use_category_label=False)
    assert kb.suggest_for_category("Anything", "unknown") == []


def test_from_file(tmp_path):
    path = tmp_path / "kb.json"
    path.write_text(json.dumps({"work_types": {"wt": ["Figma"]}}))
    kb = KnowledgeBase.from_file(path)
    assert kb.suggest_for_work_type("wt") == ["Figma"]


def test_from_file_missing(tmp_path):
    with pytest.raises(KnowledgeBaseError):
        KnowledgeBase.from_file(tmp_path / "missing.json")


def test_from_file_invalid_json(tmp_path):
    path = tmp_path / "kb.json"
    path.write_text("{not json")
    with pytest.raises(KnowledgeBaseError):
        KnowledgeBase.from_file(path)


def test_from_file_invalid_shape(tmp_path):
    path = tmp_path / "kb.json"
    path.write_text(json.dumps({"work_types": ["Figma"]}))
    with pytest.raises(KnowledgeBaseError):
        KnowledgeBase.from_file(path)


def test_bundled_knowledge_base_loads():
    kb = KnowledgeBase.from_file(DATA_DIR / "knowledge_base.json")
    assert "User Research" in kb.suggest_for_work_type("design-ux-01-research")
