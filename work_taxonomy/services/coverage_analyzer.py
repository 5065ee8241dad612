"""
Coverage Analyzer

Read-only traversal of the taxonomy:

  WorkType      skilled    >= 1 linked skill
                saturated  >= threshold linked skills
  WorkCategory  covered    at least one skilled work type
  FocusArea     full depth every category covered

coverage_pct = skilled / total work types * 100, computed independently of
the saturation and coverage checks. depth_coverage_pct applies the same
ratio to categories. Both are 0.0 for an empty scope.
"""

import logging
from typing import List, Optional

from work_taxonomy.common.exceptions import UnknownScopeError
from work_taxonomy.models.records import FocusAreaNode
from work_taxonomy.schemas.taxonomy_schemas import (
    CategoryRef,
    CoverageReport,
    CoverageScope,
    FocusAreaCoverage,
    WorkTypeRef,
)
from work_taxonomy.services.taxonomy_store import TaxonomyStore

logger = logging.getLogger(__name__)

DEFAULT_SATURATION_THRESHOLD = 4


def percentage(part: int, total: int) -> float:
    return (part / total) * 100 if total > 0 else 0.0


class CoverageAnalyzer:
    """Computes coverage reports; never mutates the store."""

    def __init__(self, store: TaxonomyStore, threshold: int = DEFAULT_SATURATION_THRESHOLD):
        if threshold < 1:
            raise ValueError(f"Saturation threshold must be at least 1, got {threshold}")
        self.store = store
        self.threshold = threshold

    def _load_scope(self, scope: CoverageScope) -> List[FocusAreaNode]:
        if scope.focus_area_id:
            if not self.store.focus_area_exists(scope.focus_area_id):
                raise UnknownScopeError("focus_area", scope.focus_area_id)
            return self.store.load_hierarchy(scope.focus_area_id)

        if scope.work_category_id:
            category = self.store.get_work_category(scope.work_category_id)
            if category is None:
                raise UnknownScopeError("work_category", scope.work_category_id)
            nodes = self.store.load_hierarchy(category.focus_area_id)
            for fa_node in nodes:
                fa_node.categories = [
                    c for c in fa_node.categories if c.category.id == scope.work_category_id
                ]
            return nodes

        return self.store.load_hierarchy()

    def analyze(self, scope: Optional[CoverageScope] = None) -> CoverageReport:
        scope = scope or CoverageScope.everything()
        nodes = self._load_scope(scope)
        report = CoverageReport(scope=scope, threshold=self.threshold)

        for fa_node in nodes:
            fa = fa_node.focus_area
            fa_summary = FocusAreaCoverage(id=fa.id, label=fa.label)

            for cat_node in fa_node.categories:
                category = cat_node.category
                category_covered = False
                fa_summary.total_categories += 1

                for wt_node in cat_node.work_types:
                    fa_summary.total_work_types += 1
                    if wt_node.skill_count >= 1:
                        fa_summary.skilled_work_types += 1
                        category_covered = True
                    if wt_node.skill_count >= self.threshold:
                        report.saturated_work_types += 1
                    else:
                        report.unsaturated_work_types.append(WorkTypeRef(
                            id=wt_node.work_type.id,
                            label=wt_node.work_type.label,
                            work_category_id=category.id,
                            skill_count=wt_node.skill_count,
                        ))

                if category_covered:
                    fa_summary.covered_categories += 1
                else:
                    report.uncovered_categories.append(CategoryRef(
                        id=category.id,
                        label=category.label,
                        focus_area_id=fa.id,
                        work_type_count=len(cat_node.work_types),
                    ))

            fa_summary.coverage_pct = percentage(fa_summary.skilled_work_types, fa_summary.total_work_types)
            fa_summary.depth_coverage_pct = percentage(fa_summary.covered_categories, fa_summary.total_categories)
            fa_summary.full_depth_coverage = fa_summary.covered_categories == fa_summary.total_categories
            report.focus_areas.append(fa_summary)

            report.total_work_types += fa_summary.total_work_types
            report.skilled_work_types += fa_summary.skilled_work_types
            report.total_categories += fa_summary.total_categories
            report.covered_categories += fa_summary.covered_categories

        report.coverage_pct = percentage(report.skilled_work_types, report.total_work_types)
        report.depth_coverage_pct = percentage(report.covered_categories, report.total_categories)

        logger.info(
            f"Coverage for {scope.label}: {report.skilled_work_types}/{report.total_work_types} work types skilled "
            f"({report.coverage_pct:.1f}%), {report.saturated_work_types} saturated at {self.threshold}, "
            f"{len(report.uncovered_categories)} uncovered categories"
        )
        return report
