from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from work_taxonomy.models.taxonomy import (
    FocusArea, WorkCategory, WorkType, Skill, WorkTypeSkill
)


class FocusAreaRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, focus_area_id: str) -> Optional[FocusArea]:
        return self.db.query(FocusArea).filter(FocusArea.id == focus_area_id).first()

    def list(self, focus_area_id: Optional[str] = None) -> List[FocusArea]:
        query = self.db.query(FocusArea)
        if focus_area_id:
            query = query.filter(FocusArea.id == focus_area_id)
        return query.order_by(FocusArea.id).all()


class WorkCategoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, work_category_id: str) -> Optional[WorkCategory]:
        return self.db.query(WorkCategory).filter(WorkCategory.id == work_category_id).first()

    def list_by_focus_areas(self, focus_area_ids: Iterable[str]) -> List[WorkCategory]:
        focus_area_ids = list(focus_area_ids)
        if not focus_area_ids:
            return []
        return self.db.query(WorkCategory).filter(
            WorkCategory.focus_area_id.in_(focus_area_ids)
        ).order_by(WorkCategory.id).all()


class WorkTypeRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, work_type_id: str) -> Optional[WorkType]:
        return self.db.query(WorkType).filter(WorkType.id == work_type_id).first()

    def list_by_categories(self, work_category_ids: Iterable[str]) -> List[WorkType]:
        work_category_ids = list(work_category_ids)
        if not work_category_ids:
            return []
        return self.db.query(WorkType).filter(
            WorkType.work_category_id.in_(work_category_ids)
        ).order_by(WorkType.id).all()


class SkillRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, skill: Skill) -> Skill:
        self.db.add(skill)
        self.db.flush()
        return skill

    def get_by_id(self, skill_id: str) -> Optional[Skill]:
        return self.db.query(Skill).filter(Skill.id == skill_id).first()

    def get_by_name_key(self, name_key: str) -> Optional[Skill]:
        return self.db.query(Skill).filter(Skill.name_key == name_key).first()


class WorkTypeSkillRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, link: WorkTypeSkill) -> WorkTypeSkill:
        self.db.add(link)
        self.db.flush()
        return link

    def get(self, work_type_id: str, skill_id: str) -> Optional[WorkTypeSkill]:
        return self.db.query(WorkTypeSkill).filter(
            WorkTypeSkill.work_type_id == work_type_id,
            WorkTypeSkill.skill_id == skill_id
        ).first()

    def list_skills(self, work_type_id: str) -> List[Skill]:
        return self.db.query(Skill).join(
            WorkTypeSkill, WorkTypeSkill.skill_id == Skill.id
        ).filter(
            WorkTypeSkill.work_type_id == work_type_id
        ).order_by(Skill.name).all()

    def count_by_work_type(self, work_type_ids: Iterable[str]) -> Dict[str, int]:
        work_type_ids = list(work_type_ids)
        if not work_type_ids:
            return {}
        rows = self.db.query(
            WorkTypeSkill.work_type_id, func.count(WorkTypeSkill.id)
        ).filter(
            WorkTypeSkill.work_type_id.in_(work_type_ids)
        ).group_by(WorkTypeSkill.work_type_id).all()
        return {work_type_id: count for work_type_id, count in rows}
