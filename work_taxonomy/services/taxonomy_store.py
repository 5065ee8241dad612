"""
TaxonomyStore interface.

The single point of truth for existence checks and writes against focus
areas, work categories, work types, skills and work-type/skill links. It is
the only writer of record; services receive a store explicitly and never hold
a global persistence handle.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from work_taxonomy.common.exceptions import SkillResolutionError
from work_taxonomy.common.identifiers import SKILL_ID_MAX_LENGTH, SKILL_NAME_MAX_LENGTH, normalize_name
from work_taxonomy.models.records import (
    FocusAreaRecord,
    WorkCategoryRecord,
    WorkTypeRecord,
    SkillRecord,
    FocusAreaNode,
)


class TaxonomyStore(ABC):
    """
    Abstract base class for taxonomy persistence.

    Upserts are non-destructive: an existing node is left untouched.
    create_skill and link_work_type_skill must stay correct when several
    processes call them at once; implementations rely on uniqueness enforced
    at the storage boundary, not on application locks.
    """

    # Nodes

    @abstractmethod
    def upsert_focus_area(self, record: FocusAreaRecord) -> bool:
        """Create the focus area if absent. Returns True when created."""

    @abstractmethod
    def upsert_work_category(self, record: WorkCategoryRecord) -> bool:
        """Create the category if absent. Raises UnknownParentError for a missing focus area."""

    @abstractmethod
    def upsert_work_type(self, record: WorkTypeRecord) -> bool:
        """Create the work type if absent. Raises UnknownParentError for a missing category."""

    @abstractmethod
    def get_focus_area(self, focus_area_id: str) -> Optional[FocusAreaRecord]:
        pass

    @abstractmethod
    def get_work_category(self, work_category_id: str) -> Optional[WorkCategoryRecord]:
        pass

    @abstractmethod
    def get_work_type(self, work_type_id: str) -> Optional[WorkTypeRecord]:
        pass

    def focus_area_exists(self, focus_area_id: str) -> bool:
        return self.get_focus_area(focus_area_id) is not None

    def work_category_exists(self, work_category_id: str) -> bool:
        return self.get_work_category(work_category_id) is not None

    def work_type_exists(self, work_type_id: str) -> bool:
        return self.get_work_type(work_type_id) is not None

    # Skills

    @abstractmethod
    def find_skill_by_name_ci(self, name: str) -> Optional[SkillRecord]:
        """Case-insensitive, whitespace-normalized lookup."""

    @abstractmethod
    def get_skill(self, skill_id: str) -> Optional[SkillRecord]:
        pass

    def skill_exists(self, skill_id: str) -> bool:
        return self.get_skill(skill_id) is not None

    @staticmethod
    def prepare_skill_name(name: str) -> Tuple[str, str]:
        """Display name and name key for a new skill.

        Blank names and names wider than the skill.name column are rejected
        with SkillResolutionError so callers can report them per item.
        """
        display_name = " ".join(name.split())
        name_key = normalize_name(name)
        if not name_key:
            raise SkillResolutionError(name, "blank skill name")
        if max(len(display_name), len(name_key)) > SKILL_NAME_MAX_LENGTH:
            raise SkillResolutionError(display_name, f"longer than {SKILL_NAME_MAX_LENGTH} characters")
        return display_name, name_key

    @staticmethod
    def check_skill_id(display_name: str, skill_id: str) -> None:
        if len(skill_id) > SKILL_ID_MAX_LENGTH:
            raise SkillResolutionError(display_name, f"no free id within {SKILL_ID_MAX_LENGTH} characters")

    @abstractmethod
    def create_skill(self, name: str, category: Optional[str] = None) -> SkillRecord:
        """
        Create a skill with an id derived from its name.

        An id already used by a differently-named skill gets a numeric
        suffix (-1, -2, ...). Raises DuplicateSkillNameError when a skill
        with the same normalized name exists.
        """

    # Links

    @abstractmethod
    def link_work_type_skill(self, work_type_id: str, skill_id: str) -> bool:
        """Link the pair. Returns False, without error, if it already exists."""

    @abstractmethod
    def list_linked_skills(self, work_type_id: str) -> List[SkillRecord]:
        pass

    # Reads for coverage

    @abstractmethod
    def load_hierarchy(self, focus_area_id: Optional[str] = None) -> List[FocusAreaNode]:
        """
        Snapshot of focus areas -> categories -> work types with skill counts,
        ordered by id at every level. Restricted to one focus area when given.
        """
