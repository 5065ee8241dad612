from work_taxonomy.models.taxonomy import (
    FocusArea, WorkCategory, WorkType, Skill, WorkTypeSkill
)
from work_taxonomy.models.records import (
    FocusAreaRecord, WorkCategoryRecord, WorkTypeRecord, SkillRecord,
    FocusAreaNode, WorkCategoryNode, WorkTypeNode
)

__all__ = [
    'FocusArea', 'WorkCategory', 'WorkType', 'Skill', 'WorkTypeSkill',
    'FocusAreaRecord', 'WorkCategoryRecord', 'WorkTypeRecord', 'SkillRecord',
    'FocusAreaNode', 'WorkCategoryNode', 'WorkTypeNode'
]
