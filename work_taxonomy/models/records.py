"""
Plain records exchanged across the TaxonomyStore interface.

ORM rows never leave the SQL store; both store implementations speak these
dataclasses so services and tests are persistence-agnostic.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class FocusAreaRecord:
    """Top-level domain grouping (e.g. Design, Operations)."""
    id: str
    label: str
    description: str = ""


@dataclass
class WorkCategoryRecord:
    id: str
    label: str
    focus_area_id: str
    description: Optional[str] = None


@dataclass
class WorkTypeRecord:
    id: str
    label: str
    work_category_id: str


@dataclass
class SkillRecord:
    id: str
    name: str
    category: Optional[str] = None


# Hierarchy snapshot used by the coverage analyzer.

@dataclass
class WorkTypeNode:
    work_type: WorkTypeRecord
    skill_count: int = 0


@dataclass
class WorkCategoryNode:
    category: WorkCategoryRecord
    work_types: List[WorkTypeNode] = field(default_factory=list)


@dataclass
class FocusAreaNode:
    focus_area: FocusAreaRecord
    categories: List[WorkCategoryNode] = field(default_factory=list)
