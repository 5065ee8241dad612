"""
Request and report models for the mapping, coverage and reconciliation services.

Reports always carry explicit counts (added, already linked, unknown,
unresolved) so operators can tell "nothing to do" from "something is wrong".
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, Field, model_validator


# ============================================================================
# Mapping
# ============================================================================

class MappingRequest(BaseModel):
    """Attach the named skills to one work type."""
    work_type_id: str
    skill_names: List[str] = Field(default_factory=list)


class LinkOutcome(str, Enum):
    ADDED = "added"
    ALREADY_LINKED = "already_linked"
    DUPLICATE = "duplicate"
    RESOLUTION_FAILED = "resolution_failed"


class LinkResult(BaseModel):
    work_type_id: str
    skill_name: str
    skill_id: Optional[str] = None
    outcome: LinkOutcome


class MappingReport(BaseModel):
    """
    Aggregate outcome of MappingEngine.apply.

    Attributes:
        added: Links created by this batch
        already_linked: Pairs that existed before this batch (idempotent no-ops)
        duplicates: Pairs repeated within this batch, counted once above
        skills_created: Skills created on first reference
        requests_processed: Requests whose work type existed
        unknown_work_types: Work type ids that do not exist
        unresolved_skill_names: Names the resolver could not turn into a skill
        links: Per-pair detail
    """
    added: int = 0
    already_linked: int = 0
    duplicates: int = 0
    skills_created: int = 0
    requests_processed: int = 0
    unknown_work_types: Set[str] = Field(default_factory=set)
    unresolved_skill_names: Set[str] = Field(default_factory=set)
    links: List[LinkResult] = Field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.unknown_work_types or self.unresolved_skill_names)


# ============================================================================
# Coverage
# ============================================================================

class CoverageScope(BaseModel):
    """Whole taxonomy, one focus area, or one work category."""
    focus_area_id: Optional[str] = None
    work_category_id: Optional[str] = None

    @model_validator(mode="after")
    def _single_scope(self) -> "CoverageScope":
        if self.focus_area_id and self.work_category_id:
            raise ValueError("Scope accepts a focus area or a work category, not both")
        return self

    @classmethod
    def everything(cls) -> "CoverageScope":
        return cls()

    @classmethod
    def for_focus_area(cls, focus_area_id: str) -> "CoverageScope":
        return cls(focus_area_id=focus_area_id)

    @classmethod
    def for_work_category(cls, work_category_id: str) -> "CoverageScope":
        return cls(work_category_id=work_category_id)

    @property
    def label(self) -> str:
        if self.focus_area_id:
            return f"focus_area:{self.focus_area_id}"
        if self.work_category_id:
            return f"work_category:{self.work_category_id}"
        return "all"


class CategoryRef(BaseModel):
    id: str
    label: str
    focus_area_id: str
    work_type_count: int = 0


class WorkTypeRef(BaseModel):
    id: str
    label: str
    work_category_id: str
    skill_count: int = 0


class FocusAreaCoverage(BaseModel):
    id: str
    label: str
    total_categories: int = 0
    covered_categories: int = 0
    total_work_types: int = 0
    skilled_work_types: int = 0
    coverage_pct: float = 0.0
    depth_coverage_pct: float = 0.0
    full_depth_coverage: bool = False


class CoverageReport(BaseModel):
    """
    Coverage of one scope at one saturation threshold.

    coverage_pct is skilled / total work types; depth_coverage_pct is
    covered / total categories. Both are 0.0 for an empty scope.
    """
    scope: CoverageScope = Field(default_factory=CoverageScope)
    threshold: int
    total_work_types: int = 0
    skilled_work_types: int = 0
    saturated_work_types: int = 0
    coverage_pct: float = 0.0
    total_categories: int = 0
    covered_categories: int = 0
    depth_coverage_pct: float = 0.0
    uncovered_categories: List[CategoryRef] = Field(default_factory=list)
    unsaturated_work_types: List[WorkTypeRef] = Field(default_factory=list)
    focus_areas: List[FocusAreaCoverage] = Field(default_factory=list)
    computed_at: datetime = Field(default_factory=datetime.utcnow)

    def focus_area(self, focus_area_id: str) -> Optional[FocusAreaCoverage]:
        for item in self.focus_areas:
            if item.id == focus_area_id:
                return item
        return None


# ============================================================================
# Reconciliation
# ============================================================================

class GapKind(str, Enum):
    WORK_TYPE = "work_type"
    WORK_CATEGORY = "work_category"


class UnresolvedGap(BaseModel):
    kind: GapKind
    id: str
    reason: str


class CoverageRegression(BaseModel):
    scope: str
    before_pct: float
    after_pct: float


class PassReport(BaseModel):
    """Outcome of one reconciliation pass."""
    scope: CoverageScope = Field(default_factory=CoverageScope)
    dry_run: bool = False
    threshold: int
    before: CoverageReport
    after: Optional[CoverageReport] = None
    planned_requests: List[MappingRequest] = Field(default_factory=list)
    mapping: MappingReport = Field(default_factory=MappingReport)
    unknown_knowledge_base_work_types: List[str] = Field(default_factory=list)
    unresolved_gaps: List[UnresolvedGap] = Field(default_factory=list)
    exhausted_work_types: List[str] = Field(default_factory=list)
    regressions: List[CoverageRegression] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    @property
    def has_unresolved_items(self) -> bool:
        return bool(self.mapping.has_failures or self.unknown_knowledge_base_work_types)


# ============================================================================
# Seeding
# ============================================================================

class WorkTypeSeed(BaseModel):
    id: Optional[str] = None
    label: str


class WorkCategorySeed(BaseModel):
    id: Optional[str] = None
    label: str
    description: Optional[str] = None
    work_types: List[WorkTypeSeed] = Field(default_factory=list)


class FocusAreaSeed(BaseModel):
    id: Optional[str] = None
    label: str
    description: str = ""
    categories: List[WorkCategorySeed] = Field(default_factory=list)


class FlatWorkCategorySeed(WorkCategorySeed):
    focus_area_id: str


class FlatWorkTypeSeed(WorkTypeSeed):
    work_category_id: str


class TaxonomySeed(BaseModel):
    """Nested focus areas and/or flat nodes that name their parent id."""
    focus_areas: List[FocusAreaSeed] = Field(default_factory=list)
    work_categories: List[FlatWorkCategorySeed] = Field(default_factory=list)
    work_types: List[FlatWorkTypeSeed] = Field(default_factory=list)


class OrphanNode(BaseModel):
    kind: str
    id: str
    parent_id: str


class SeedConflict(BaseModel):
    """A node that already exists under a different parent than the seed names."""
    kind: str
    id: str
    parent_id: str
    existing_parent_id: str


class SeedReport(BaseModel):
    created: Dict[str, int] = Field(
        default_factory=lambda: {"focus_area": 0, "work_category": 0, "work_type": 0}
    )
    existing: Dict[str, int] = Field(
        default_factory=lambda: {"focus_area": 0, "work_category": 0, "work_type": 0}
    )
    orphans: List[OrphanNode] = Field(default_factory=list)
    conflicts: List[SeedConflict] = Field(default_factory=list)
