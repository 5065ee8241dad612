from unittest.mock import patch

import pytest

from work_taxonomy.models.records import WorkCategoryRecord, WorkTypeRecord
from work_taxonomy.schemas.taxonomy_schemas import (
    CoverageReport,
    CoverageScope,
    FocusAreaCoverage,
    GapKind,
)
from work_taxonomy.services.reconciliation import ReconciliationOrchestrator, choose_target_work_type


def _requests_by_work_type(report):
    return {r.work_type_id: r.skill_names for r in report.planned_requests}


def test_first_pass_fills_gaps(design_store, knowledge_base):
    report = ReconciliationOrchestrator(design_store, knowledge_base, threshold=4).run()

    planned = _requests_by_work_type(report)
    # Capped at threshold - current count
    assert planned["design-ux-01-research"] == [
        "User Research", "Usability Testing", "Interviewing", "Survey Design",
    ]
    assert planned["design-ux-02-usability"] == ["Usability Testing"]
    # Uncovered category falls back onto the "development" work type
    assert planned["design-visual-02-systems"] == [
        "Design Thinking", "User Experience", "Design", "Visual Design",
    ]
    assert "design-visual-01-branding" not in planned

    assert report.mapping.added == 9
    assert report.mapping.skills_created == 8
    assert not report.has_unresolved_items
    assert report.before.coverage_pct == 0.0
    assert report.after.coverage_pct == pytest.approx(75.0)
    assert report.after.depth_coverage_pct == pytest.approx(100.0)
    assert report.regressions == []
    assert report.completed_at is not None

    gaps = {(g.kind, g.id) for g in report.unresolved_gaps}
    assert gaps == {
        (GapKind.WORK_TYPE, "design-visual-01-branding"),
        (GapKind.WORK_TYPE, "design-visual-02-systems"),
    }


def test_second_pass_adds_nothing(design_store, knowledge_base):
    orchestrator = ReconciliationOrchestrator(design_store, knowledge_base, threshold=4)
    first = orchestrator.run()
    second = orchestrator.run()

    assert second.mapping.added == 0
    assert second.planned_requests == []
    assert second.regressions == []
    assert second.after.coverage_pct >= first.after.coverage_pct
    assert second.exhausted_work_types == ["design-ux-02-usability"]


def test_dry_run_plans_without_writing(design_store, knowledge_base):
    report = ReconciliationOrchestrator(design_store, knowledge_base).run(dry_run=True)

    assert report.dry_run is True
    assert len(report.planned_requests) == 3
    assert report.after is None
    assert report.mapping.added == 0
    assert design_store.list_linked_skills("design-ux-01-research") == []


def test_skips_already_linked_suggestions(design_store, knowledge_base):
    skill = design_store.create_skill("user research")
    design_store.link_work_type_skill("design-ux-01-research", skill.id)

    report = ReconciliationOrchestrator(design_store, knowledge_base, threshold=4).run(dry_run=True)

    assert _requests_by_work_type(report)["design-ux-01-research"] == [
        "Usability Testing", "Interviewing", "Survey Design",
    ]


def test_focus_area_scope(design_store, knowledge_base):
    report = ReconciliationOrchestrator(design_store, knowledge_base).run(
        scope=CoverageScope.for_focus_area("design")
    )
    assert report.scope.label == "focus_area:design"
    assert report.after.focus_area("design").full_depth_coverage is True


def test_category_without_work_types_is_unresolved(design_store, knowledge_base):
    design_store.upsert_work_category(WorkCategoryRecord(
        id="design-empty", label="Empty", focus_area_id="design"
    ))
    report = ReconciliationOrchestrator(design_store, knowledge_base).run(dry_run=True)

    assert any(
        g.kind == GapKind.WORK_CATEGORY and g.id == "design-empty"
        for g in report.unresolved_gaps
    )


def test_category_without_fallback_is_unresolved(design_store, knowledge_base):
    knowledge_base.focus_area_defaults = {}
    knowledge_base.category_keywords = {}
    knowledge_base.use_category_label = False

    report = ReconciliationOrchestrator(design_store, knowledge_base).run(dry_run=True)

    assert any(
        g.kind == GapKind.WORK_CATEGORY and g.id == "design-visual"
        for g in report.unresolved_gaps
    )


def test_regression_is_recorded_not_raised(design_store, knowledge_base):
    orchestrator = ReconciliationOrchestrator(design_store, knowledge_base)
    before = CoverageReport(
        threshold=4,
        coverage_pct=50.0,
        focus_areas=[FocusAreaCoverage(id="design", label="Design", coverage_pct=50.0)],
    )
    after = CoverageReport(
        threshold=4,
        coverage_pct=25.0,
        focus_areas=[FocusAreaCoverage(id="design", label="Design", coverage_pct=25.0)],
    )

    with patch.object(orchestrator.analyzer, "analyze", side_effect=[before, after]):
        report = orchestrator.run()

    assert [(r.scope, r.before_pct, r.after_pct) for r in report.regressions] == [
        ("all", 50.0, 25.0),
        ("focus_area:design", 50.0, 25.0),
    ]


def test_choose_target_work_type():
    work_types = [
        WorkTypeRecord(id="b", label="Brand Identity", work_category_id="c"),
        WorkTypeRecord(id="a", label="Asset Production", work_category_id="c"),
        WorkTypeRecord(id="z", label="Strategy Planning", work_category_id="c"),
    ]
    assert choose_target_work_type(work_types).id == "z"
    assert choose_target_work_type(work_types[:2]).id == "a"
    assert choose_target_work_type([]) is None


def test_unknown_knowledge_base_work_type_is_reported(design_store, knowledge_base, caplog):
    knowledge_base.work_types["design-ux-99-typo"] = ["User Research"]

    with caplog.at_level("WARNING", logger="work_taxonomy.services.reconciliation"):
        report = ReconciliationOrchestrator(design_store, knowledge_base, threshold=4).run()

    assert report.unknown_knowledge_base_work_types == ["design-ux-99-typo"]
    assert report.has_unresolved_items
    assert not report.mapping.has_failures
    assert "design-ux-99-typo" in caplog.text
    assert all(r.work_type_id != "design-ux-99-typo" for r in report.planned_requests)
