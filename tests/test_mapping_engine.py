from unittest.mock import patch

import pytest

from work_taxonomy.common.exceptions import TaxonomyPersistenceError
from work_taxonomy.models.records import WorkTypeRecord
from work_taxonomy.schemas.taxonomy_schemas import LinkOutcome, MappingRequest
from work_taxonomy.services.mapping_engine import MappingEngine


def test_end_to_end_creates_and_links_skills(design_store):
    engine = MappingEngine(design_store)
    report = engine.apply([
        MappingRequest(
            work_type_id="design-ux-01-research",
            skill_names=["User Research", "user research", "Usability Testing"],
        )
    ])

    assert report.added == 2
    assert report.skills_created == 2
    assert report.already_linked == 0
    assert report.duplicates == 1
    assert report.requests_processed == 1
    assert not report.has_failures
    linked = design_store.list_linked_skills("design-ux-01-research")
    assert sorted(s.name for s in linked) == ["Usability Testing", "User Research"]
    assert [r.outcome for r in report.links] == [
        LinkOutcome.ADDED, LinkOutcome.DUPLICATE, LinkOutcome.ADDED,
    ]


def test_apply_is_idempotent(design_store):
    batch = [
        MappingRequest(work_type_id="design-ux-01-research", skill_names=["User Research", "Interviewing"]),
        MappingRequest(work_type_id="design-visual-01-branding", skill_names=["Typography"]),
    ]
    engine = MappingEngine(design_store)

    first = engine.apply(batch)
    second = engine.apply(batch)

    assert first.added == 3
    assert second.added == 0
    assert second.skills_created == 0
    assert second.already_linked == first.added


def test_repeated_names_in_one_batch_stay_idempotent(design_store):
    batch = [MappingRequest(
        work_type_id="design-ux-01-research",
        skill_names=["User Research", "user research", "Usability Testing"],
    )]
    engine = MappingEngine(design_store)

    first = engine.apply(batch)
    second = engine.apply(batch)

    assert first.added == 2
    assert first.already_linked == 0
    assert second.added == 0
    assert second.already_linked == first.added == 2
    assert second.duplicates == 1


def test_same_pair_in_two_requests_counts_once(design_store):
    batch = [
        MappingRequest(work_type_id="design-visual-01-branding", skill_names=["Figma"]),
        MappingRequest(work_type_id="design-visual-01-branding", skill_names=["Figma"]),
    ]
    engine = MappingEngine(design_store)

    first = engine.apply(batch)
    second = engine.apply(batch)

    assert (first.added, first.already_linked, first.duplicates) == (1, 0, 1)
    assert (second.added, second.already_linked, second.duplicates) == (0, 1, 1)
    assert len(design_store.list_linked_skills("design-visual-01-branding")) == 1


def test_unknown_work_type_does_not_block_others(design_store):
    for n in range(9):
        design_store.upsert_work_type(WorkTypeRecord(
            id=f"design-ux-{n:02d}-extra", label=f"Extra {n}", work_category_id="design-ux"
        ))
    batch = [MappingRequest(work_type_id="design-ux-99-missing", skill_names=["User Research"])]
    batch += [
        MappingRequest(work_type_id=f"design-ux-{n:02d}-extra", skill_names=["User Research"])
        for n in range(9)
    ]

    report = MappingEngine(design_store).apply(batch)

    assert report.unknown_work_types == {"design-ux-99-missing"}
    assert report.requests_processed == 9
    assert report.added == 9
    assert report.skills_created == 1
    for n in range(9):
        assert len(design_store.list_linked_skills(f"design-ux-{n:02d}-extra")) == 1


def test_blank_skill_name_is_reported_not_raised(design_store):
    report = MappingEngine(design_store).apply([
        MappingRequest(work_type_id="design-ux-01-research", skill_names=["  ", "Interviewing"])
    ])

    assert report.added == 1
    assert report.unresolved_skill_names == {"  "}
    assert report.has_failures
    assert report.links[0].outcome == LinkOutcome.RESOLUTION_FAILED


def test_overlong_skill_name_is_reported_not_raised(design_store):
    too_long = "x" * 251
    report = MappingEngine(design_store).apply([
        MappingRequest(work_type_id="design-ux-01-research", skill_names=[too_long, "Interviewing"])
    ])

    assert report.added == 1
    assert report.unresolved_skill_names == {too_long}
    assert report.links[0].outcome == LinkOutcome.RESOLUTION_FAILED
    assert design_store.find_skill_by_name_ci(too_long) is None


def test_empty_batch(design_store):
    report = MappingEngine(design_store).apply([])
    assert report.added == 0
    assert report.requests_processed == 0
    assert not report.has_failures


def test_persistence_error_aborts_batch(design_store):
    engine = MappingEngine(design_store)

    with patch.object(design_store, "link_work_type_skill", side_effect=TaxonomyPersistenceError("db down")):
        with pytest.raises(TaxonomyPersistenceError):
            engine.apply([MappingRequest(work_type_id="design-ux-01-research", skill_names=["User Research"])])
