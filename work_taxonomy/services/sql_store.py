"""
SQLAlchemy-backed TaxonomyStore.

Each write is its own transaction: committed on success, rolled back on
failure. A pair linked before a later failure therefore stays committed and
valid, and no compensating cleanup is ever needed.

Concurrent writers are handled at the database boundary. Losing an insert
race on skill.name_key, skill.id or (work_type_id, skill_id) raises
IntegrityError; the session is rolled back and the winning row re-read.
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from work_taxonomy.common.db_utils import get_or_create
from work_taxonomy.common.exceptions import (
    DuplicateSkillNameError,
    TaxonomyPersistenceError,
    UnknownParentError,
    UnknownSkillError,
    UnknownWorkTypeError,
)
from work_taxonomy.common.identifiers import normalize_name, skill_id_base, suffixed_ids
from work_taxonomy.models.records import (
    FocusAreaRecord,
    WorkCategoryRecord,
    WorkTypeRecord,
    SkillRecord,
    FocusAreaNode,
    WorkCategoryNode,
    WorkTypeNode,
)
from work_taxonomy.models.taxonomy import (
    FocusArea, WorkCategory, WorkType, Skill, WorkTypeSkill
)
from work_taxonomy.services.taxonomy_store import TaxonomyStore
from work_taxonomy.services.repositories import (
    FocusAreaRepository,
    WorkCategoryRepository,
    WorkTypeRepository,
    SkillRepository,
    WorkTypeSkillRepository,
)

logger = logging.getLogger(__name__)

MAX_SKILL_ID_ATTEMPTS = 1000


def _focus_area_record(row: FocusArea) -> FocusAreaRecord:
    return FocusAreaRecord(id=row.id, label=row.label, description=row.description or "")


def _work_category_record(row: WorkCategory) -> WorkCategoryRecord:
    return WorkCategoryRecord(
        id=row.id,
        label=row.label,
        focus_area_id=row.focus_area_id,
        description=row.description,
    )


def _work_type_record(row: WorkType) -> WorkTypeRecord:
    return WorkTypeRecord(id=row.id, label=row.label, work_category_id=row.work_category_id)


def _skill_record(row: Skill) -> SkillRecord:
    return SkillRecord(id=row.id, name=row.name, category=row.category)


class SqlAlchemyTaxonomyStore(TaxonomyStore):
    """TaxonomyStore over a SQLAlchemy session (PostgreSQL in production)."""

    def __init__(self, db: Session):
        self.db = db
        self.focus_areas = FocusAreaRepository(db)
        self.work_categories = WorkCategoryRepository(db)
        self.work_types = WorkTypeRepository(db)
        self.skills = SkillRepository(db)
        self.links = WorkTypeSkillRepository(db)

    @contextmanager
    def _guard(self):
        """Roll back and wrap unexpected database failures."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Taxonomy store persistence failure: {e}")
            raise TaxonomyPersistenceError(str(e)) from e

    @contextmanager
    def _transaction(self):
        """One write: committed on success, rolled back on any failure."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def upsert_focus_area(self, record: FocusAreaRecord) -> bool:
        with self._guard():
            _, created = get_or_create(
                self.db,
                FocusArea,
                unique_keys={'id': record.id},
                defaults={'label': record.label, 'description': record.description or ""},
                commit=True,
            )
        return created

    def upsert_work_category(self, record: WorkCategoryRecord) -> bool:
        with self._guard():
            if self.focus_areas.get_by_id(record.focus_area_id) is None:
                raise UnknownParentError("work_category", record.id, record.focus_area_id)
            _, created = get_or_create(
                self.db,
                WorkCategory,
                unique_keys={'id': record.id},
                defaults={
                    'label': record.label,
                    'focus_area_id': record.focus_area_id,
                    'description': record.description,
                },
                commit=True,
            )
        return created

    def upsert_work_type(self, record: WorkTypeRecord) -> bool:
        with self._guard():
            if self.work_categories.get_by_id(record.work_category_id) is None:
                raise UnknownParentError("work_type", record.id, record.work_category_id)
            _, created = get_or_create(
                self.db,
                WorkType,
                unique_keys={'id': record.id},
                defaults={'label': record.label, 'work_category_id': record.work_category_id},
                commit=True,
            )
        return created

    def get_focus_area(self, focus_area_id: str) -> Optional[FocusAreaRecord]:
        with self._guard():
            row = self.focus_areas.get_by_id(focus_area_id)
            return _focus_area_record(row) if row else None

    def get_work_category(self, work_category_id: str) -> Optional[WorkCategoryRecord]:
        with self._guard():
            row = self.work_categories.get_by_id(work_category_id)
            return _work_category_record(row) if row else None

    def get_work_type(self, work_type_id: str) -> Optional[WorkTypeRecord]:
        with self._guard():
            row = self.work_types.get_by_id(work_type_id)
            return _work_type_record(row) if row else None

    # ------------------------------------------------------------------
    # Skills
    # ------------------------------------------------------------------

    def find_skill_by_name_ci(self, name: str) -> Optional[SkillRecord]:
        name_key = normalize_name(name)
        if not name_key:
            return None
        with self._guard():
            row = self.skills.get_by_name_key(name_key)
            return _skill_record(row) if row else None

    def get_skill(self, skill_id: str) -> Optional[SkillRecord]:
        with self._guard():
            row = self.skills.get_by_id(skill_id)
            return _skill_record(row) if row else None

    def create_skill(self, name: str, category: Optional[str] = None) -> SkillRecord:
        display_name, name_key = self.prepare_skill_name(name)

        with self._guard():
            candidates = suffixed_ids(skill_id_base(display_name))
            for _ in range(MAX_SKILL_ID_ATTEMPTS):
                existing = self.skills.get_by_name_key(name_key)
                if existing is not None:
                    raise DuplicateSkillNameError(display_name, existing=_skill_record(existing))

                skill_id = next(candidates)
                if self.skills.get_by_id(skill_id) is not None:
                    # Id taken by a differently-named skill
                    continue
                self.check_skill_id(display_name, skill_id)

                try:
                    with self._transaction():
                        row = self.skills.create(
                            Skill(id=skill_id, name=display_name, name_key=name_key, category=category)
                        )
                        record = _skill_record(row)
                except IntegrityError:
                    # Lost a race on name_key or id; the next loop tells which
                    logger.info(f"Concurrent insert while creating skill {display_name!r} as {skill_id!r}")
                    continue

                logger.info(f"Created skill {record.name!r} ({record.id})")
                return record

        raise TaxonomyPersistenceError(
            f"No free skill id for {display_name!r} after {MAX_SKILL_ID_ATTEMPTS} attempts"
        )

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def link_work_type_skill(self, work_type_id: str, skill_id: str) -> bool:
        with self._guard():
            if self.work_types.get_by_id(work_type_id) is None:
                raise UnknownWorkTypeError(work_type_id)
            if self.skills.get_by_id(skill_id) is None:
                raise UnknownSkillError(skill_id)
            if self.links.get(work_type_id, skill_id) is not None:
                return False

            try:
                with self._transaction():
                    self.links.create(WorkTypeSkill(work_type_id=work_type_id, skill_id=skill_id))
            except IntegrityError:
                if self.links.get(work_type_id, skill_id) is not None:
                    return False
                raise
            return True

    def list_linked_skills(self, work_type_id: str) -> List[SkillRecord]:
        with self._guard():
            return [_skill_record(row) for row in self.links.list_skills(work_type_id)]

    # ------------------------------------------------------------------
    # Coverage reads
    # ------------------------------------------------------------------

    def load_hierarchy(self, focus_area_id: Optional[str] = None) -> List[FocusAreaNode]:
        with self._guard():
            focus_areas = self.focus_areas.list(focus_area_id)
            categories = self.work_categories.list_by_focus_areas(fa.id for fa in focus_areas)
            work_types = self.work_types.list_by_categories(c.id for c in categories)
            counts = self.links.count_by_work_type(wt.id for wt in work_types)

            work_types_by_category = {}
            for row in work_types:
                work_types_by_category.setdefault(row.work_category_id, []).append(
                    WorkTypeNode(work_type=_work_type_record(row), skill_count=counts.get(row.id, 0))
                )

            categories_by_focus_area = {}
            for row in categories:
                categories_by_focus_area.setdefault(row.focus_area_id, []).append(
                    WorkCategoryNode(
                        category=_work_category_record(row),
                        work_types=work_types_by_category.get(row.id, []),
                    )
                )

            return [
                FocusAreaNode(
                    focus_area=_focus_area_record(row),
                    categories=categories_by_focus_area.get(row.id, []),
                )
                for row in focus_areas
            ]
