"""
In-memory TaxonomyStore.

Used as the test double for the services. A lock stands in for the
database's uniqueness constraints so the same concurrency contract holds:
one skill per normalized name and one link per (work_type_id, skill_id) pair.
"""

import threading
from typing import Dict, List, Optional, Set, Tuple

from work_taxonomy.common.exceptions import (
    DuplicateSkillNameError,
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
from work_taxonomy.services.taxonomy_store import TaxonomyStore


class InMemoryTaxonomyStore(TaxonomyStore):
    def __init__(self) -> None:
        """Initialize an empty in-memory taxonomy"""
        self._lock = threading.RLock()
        self.focus_areas: Dict[str, FocusAreaRecord] = {}
        self.work_categories: Dict[str, WorkCategoryRecord] = {}
        self.work_types: Dict[str, WorkTypeRecord] = {}
        self.skills: Dict[str, SkillRecord] = {}
        self.skill_ids_by_name_key: Dict[str, str] = {}
        self.links: Set[Tuple[str, str]] = set()

    # Nodes

    def upsert_focus_area(self, record: FocusAreaRecord) -> bool:
        with self._lock:
            if record.id in self.focus_areas:
                return False
            self.focus_areas[record.id] = record
            return True

    def upsert_work_category(self, record: WorkCategoryRecord) -> bool:
        with self._lock:
            if record.focus_area_id not in self.focus_areas:
                raise UnknownParentError("work_category", record.id, record.focus_area_id)
            if record.id in self.work_categories:
                return False
            self.work_categories[record.id] = record
            return True

    def upsert_work_type(self, record: WorkTypeRecord) -> bool:
        with self._lock:
            if record.work_category_id not in self.work_categories:
                raise UnknownParentError("work_type", record.id, record.work_category_id)
            if record.id in self.work_types:
                return False
            self.work_types[record.id] = record
            return True

    def get_focus_area(self, focus_area_id: str) -> Optional[FocusAreaRecord]:
        return self.focus_areas.get(focus_area_id)

    def get_work_category(self, work_category_id: str) -> Optional[WorkCategoryRecord]:
        return self.work_categories.get(work_category_id)

    def get_work_type(self, work_type_id: str) -> Optional[WorkTypeRecord]:
        return self.work_types.get(work_type_id)

    # Skills

    def find_skill_by_name_ci(self, name: str) -> Optional[SkillRecord]:
        skill_id = self.skill_ids_by_name_key.get(normalize_name(name))
        if skill_id is None:
            return None
        return self.skills[skill_id]

    def get_skill(self, skill_id: str) -> Optional[SkillRecord]:
        return self.skills.get(skill_id)

    def create_skill(self, name: str, category: Optional[str] = None) -> SkillRecord:
        display_name, name_key = self.prepare_skill_name(name)

        with self._lock:
            existing_id = self.skill_ids_by_name_key.get(name_key)
            if existing_id is not None:
                raise DuplicateSkillNameError(display_name, existing=self.skills[existing_id])

            for skill_id in suffixed_ids(skill_id_base(display_name)):
                if skill_id in self.skills:
                    continue
                self.check_skill_id(display_name, skill_id)
                record = SkillRecord(id=skill_id, name=display_name, category=category)
                self.skills[skill_id] = record
                self.skill_ids_by_name_key[name_key] = skill_id
                return record

    # Links

    def link_work_type_skill(self, work_type_id: str, skill_id: str) -> bool:
        with self._lock:
            if work_type_id not in self.work_types:
                raise UnknownWorkTypeError(work_type_id)
            if skill_id not in self.skills:
                raise UnknownSkillError(skill_id)
            if (work_type_id, skill_id) in self.links:
                return False
            self.links.add((work_type_id, skill_id))
            return True

    def list_linked_skills(self, work_type_id: str) -> List[SkillRecord]:
        skills = [self.skills[s_id] for wt_id, s_id in self.links if wt_id == work_type_id]
        return sorted(skills, key=lambda s: s.name)

    # Coverage reads

    def load_hierarchy(self, focus_area_id: Optional[str] = None) -> List[FocusAreaNode]:
        with self._lock:
            counts: Dict[str, int] = {}
            for wt_id, _ in self.links:
                counts[wt_id] = counts.get(wt_id, 0) + 1

            nodes = []
            for fa_id in sorted(self.focus_areas):
                if focus_area_id and fa_id != focus_area_id:
                    continue
                fa_node = FocusAreaNode(focus_area=self.focus_areas[fa_id])
                for cat_id in sorted(self.work_categories):
                    category = self.work_categories[cat_id]
                    if category.focus_area_id != fa_id:
                        continue
                    cat_node = WorkCategoryNode(category=category)
                    for wt_id in sorted(self.work_types):
                        work_type = self.work_types[wt_id]
                        if work_type.work_category_id == cat_id:
                            cat_node.work_types.append(
                                WorkTypeNode(work_type=work_type, skill_count=counts.get(wt_id, 0))
                            )
                    fa_node.categories.append(cat_node)
                nodes.append(fa_node)
            return nodes
