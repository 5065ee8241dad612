"""
Taxonomy Seeder

Non-destructive upsert of focus areas, work categories and work types from
a seed file. Parents are always written before children; a node whose parent
does not exist is reported as an orphan and never created. A node that
already exists under a different parent is reported as a conflict and left
where it is, together with the children the seed lists under it.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from work_taxonomy.common.exceptions import SeedDataError, UnknownParentError
from work_taxonomy.common.identifiers import derive_child_id, derive_id
from work_taxonomy.models.records import FocusAreaRecord, WorkCategoryRecord, WorkTypeRecord
from work_taxonomy.schemas.taxonomy_schemas import (
    OrphanNode,
    SeedConflict,
    SeedReport,
    TaxonomySeed,
    WorkCategorySeed,
    WorkTypeSeed,
)
from work_taxonomy.services.taxonomy_store import TaxonomyStore

logger = logging.getLogger(__name__)


def load_seed(path: Union[str, Path]) -> TaxonomySeed:
    path = Path(path)
    if not path.exists():
        raise SeedDataError(f"Seed file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return TaxonomySeed.model_validate(data)
    except json.JSONDecodeError as e:
        raise SeedDataError(f"Seed file {path} is not valid JSON: {e}") from e
    except ValidationError as e:
        raise SeedDataError(f"Invalid seed file {path}: {e}") from e


def _node_id(explicit_id: Optional[str], derived: str, label: str) -> str:
    node_id = explicit_id or derived
    if not node_id:
        raise SeedDataError(f"Cannot derive an id from label {label!r}")
    return node_id


class TaxonomySeeder:
    def __init__(self, store: TaxonomyStore):
        self.store = store

    def seed(self, seed: TaxonomySeed) -> SeedReport:
        report = SeedReport()

        for fa_seed in seed.focus_areas:
            fa_id = _node_id(fa_seed.id, derive_id(fa_seed.label), fa_seed.label)
            created = self.store.upsert_focus_area(FocusAreaRecord(
                id=fa_id,
                label=fa_seed.label,
                description=fa_seed.description,
            ))
            self._count(report, "focus_area", created)
            for cat_seed in fa_seed.categories:
                self._seed_category(cat_seed, fa_id, report)

        for cat_seed in seed.work_categories:
            if not self.store.focus_area_exists(cat_seed.focus_area_id):
                self._orphan(report, "work_category", cat_seed.id or cat_seed.label, cat_seed.focus_area_id)
                continue
            self._seed_category(cat_seed, cat_seed.focus_area_id, report)

        for wt_seed in seed.work_types:
            if not self.store.work_category_exists(wt_seed.work_category_id):
                self._orphan(report, "work_type", wt_seed.id or wt_seed.label, wt_seed.work_category_id)
                continue
            self._seed_work_type(wt_seed, wt_seed.work_category_id, report)

        logger.info(
            f"Seed applied: created={report.created}, existing={report.existing}, "
            f"orphans={len(report.orphans)}, conflicts={len(report.conflicts)}"
        )
        return report

    def _seed_category(self, cat_seed: WorkCategorySeed, focus_area_id: str, report: SeedReport) -> None:
        cat_id = _node_id(cat_seed.id, derive_child_id(focus_area_id, cat_seed.label), cat_seed.label)
        existing = self.store.get_work_category(cat_id)
        if existing is not None and existing.focus_area_id != focus_area_id:
            self._conflict(report, "work_category", cat_id, focus_area_id, existing.focus_area_id)
            return

        try:
            created = self.store.upsert_work_category(WorkCategoryRecord(
                id=cat_id,
                label=cat_seed.label,
                focus_area_id=focus_area_id,
                description=cat_seed.description,
            ))
        except UnknownParentError as e:
            self._orphan(report, "work_category", cat_id, e.parent_id)
            return

        self._count(report, "work_category", created)
        for wt_seed in cat_seed.work_types:
            self._seed_work_type(wt_seed, cat_id, report)

    def _seed_work_type(self, wt_seed: WorkTypeSeed, work_category_id: str, report: SeedReport) -> None:
        wt_id = _node_id(wt_seed.id, derive_child_id(work_category_id, wt_seed.label), wt_seed.label)
        existing = self.store.get_work_type(wt_id)
        if existing is not None and existing.work_category_id != work_category_id:
            self._conflict(report, "work_type", wt_id, work_category_id, existing.work_category_id)
            return

        try:
            created = self.store.upsert_work_type(WorkTypeRecord(
                id=wt_id,
                label=wt_seed.label,
                work_category_id=work_category_id,
            ))
        except UnknownParentError as e:
            self._orphan(report, "work_type", wt_id, e.parent_id)
            return
        self._count(report, "work_type", created)

    @staticmethod
    def _count(report: SeedReport, kind: str, created: bool) -> None:
        bucket = report.created if created else report.existing
        bucket[kind] += 1

    @staticmethod
    def _orphan(report: SeedReport, kind: str, node_id: str, parent_id: str) -> None:
        logger.warning(f"Rejected {kind} {node_id}: parent {parent_id} does not exist")
        report.orphans.append(OrphanNode(kind=kind, id=node_id, parent_id=parent_id))

    @staticmethod
    def _conflict(report: SeedReport, kind: str, node_id: str, parent_id: str, existing_parent_id: str) -> None:
        logger.warning(
            f"Skipped {kind} {node_id}: seeded under {parent_id} but already exists under {existing_parent_id}"
        )
        report.conflicts.append(SeedConflict(
            kind=kind,
            id=node_id,
            parent_id=parent_id,
            existing_parent_id=existing_parent_id,
        ))
