"""
Reconciliation Orchestrator

One pass = analyze -> plan -> apply -> re-analyze.

Planning draws only on the knowledge base: primary suggestions per
unsaturated work type, and a category-level fallback for categories that
have no skilled work type and received no primary suggestions. Nothing is
ever unlinked, so coverage can only grow between passes; a drop is reported
as a regression rather than raised.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from work_taxonomy.common.identifiers import normalize_name
from work_taxonomy.models.records import WorkTypeRecord
from work_taxonomy.schemas.taxonomy_schemas import (
    CategoryRef,
    CoverageRegression,
    CoverageReport,
    CoverageScope,
    GapKind,
    MappingRequest,
    PassReport,
    UnresolvedGap,
    WorkTypeRef,
)
from work_taxonomy.services.coverage_analyzer import DEFAULT_SATURATION_THRESHOLD, CoverageAnalyzer
from work_taxonomy.services.knowledge_base import KnowledgeBase
from work_taxonomy.services.mapping_engine import MappingEngine
from work_taxonomy.services.taxonomy_store import TaxonomyStore

logger = logging.getLogger(__name__)

# Work types whose label carries one of these receive a category's fallback skills
TARGET_LABEL_KEYWORDS = ("management", "strategy", "development")


def choose_target_work_type(work_types: List[WorkTypeRecord]) -> Optional[WorkTypeRecord]:
    """First work type (by id) whose label has a target keyword, else the first by id."""
    ordered = sorted(work_types, key=lambda wt: wt.id)
    for work_type in ordered:
        label = work_type.label.lower()
        if any(keyword in label for keyword in TARGET_LABEL_KEYWORDS):
            return work_type
    return ordered[0] if ordered else None


class ReconciliationOrchestrator:
    def __init__(
        self,
        store: TaxonomyStore,
        knowledge_base: KnowledgeBase,
        threshold: int = DEFAULT_SATURATION_THRESHOLD,
        engine: Optional[MappingEngine] = None
    ):
        self.store = store
        self.knowledge_base = knowledge_base
        self.analyzer = CoverageAnalyzer(store, threshold)
        self.threshold = threshold
        self.engine = engine or MappingEngine(store)

    def run(self, scope: Optional[CoverageScope] = None, dry_run: bool = False) -> PassReport:
        scope = scope or CoverageScope.everything()
        log_extra = {"reconciliation.scope": scope.label, "reconciliation.dry_run": dry_run}
        logger.info(f"Starting reconciliation pass for {scope.label} (dry_run={dry_run})", extra=log_extra)

        before = self.analyzer.analyze(scope)
        report = PassReport(scope=scope, dry_run=dry_run, threshold=self.threshold, before=before)
        report.unknown_knowledge_base_work_types = self._unknown_knowledge_base_work_types(log_extra)

        planned_work_types = set()
        for work_type in before.unsaturated_work_types:
            request = self._plan_work_type(work_type, report)
            if request is not None:
                report.planned_requests.append(request)
                planned_work_types.add(work_type.id)

        hierarchy_cache: Dict[str, Dict[str, List[WorkTypeRecord]]] = {}
        for category in before.uncovered_categories:
            work_types = self._work_types_of(category, hierarchy_cache)
            if any(wt.id in planned_work_types for wt in work_types):
                continue
            request = self._plan_category(category, work_types, report)
            if request is not None:
                report.planned_requests.append(request)

        logger.info(
            f"Planned {len(report.planned_requests)} mapping requests for {scope.label}, "
            f"{len(report.unresolved_gaps)} unresolved gaps, "
            f"{len(report.exhausted_work_types)} exhausted work types",
            extra=log_extra
        )

        if dry_run:
            report.completed_at = datetime.utcnow()
            logger.info(f"Dry run for {scope.label}: no changes applied", extra=log_extra)
            return report

        report.mapping = self.engine.apply(report.planned_requests)
        report.after = self.analyzer.analyze(scope)
        report.regressions = self._check_monotonic(before, report.after)
        report.completed_at = datetime.utcnow()

        logger.info(
            f"Reconciliation pass for {scope.label} complete: added={report.mapping.added}, "
            f"coverage {before.coverage_pct:.1f}% -> {report.after.coverage_pct:.1f}%, "
            f"depth {before.depth_coverage_pct:.1f}% -> {report.after.depth_coverage_pct:.1f}%",
            extra=log_extra
        )
        return report

    def _unknown_knowledge_base_work_types(self, log_extra: Dict[str, object]) -> List[str]:
        """Knowledge-base work type ids with no work type in the taxonomy, usually typos."""
        unknown = sorted(
            wt_id for wt_id in self.knowledge_base.work_types
            if not self.store.work_type_exists(wt_id)
        )
        for wt_id in unknown:
            logger.warning(f"Knowledge base names unknown work type: {wt_id}", extra=log_extra)
        return unknown

    def _plan_work_type(self, work_type: WorkTypeRef, report: PassReport) -> Optional[MappingRequest]:
        suggestions = self.knowledge_base.suggest_for_work_type(work_type.id)
        if not suggestions:
            report.unresolved_gaps.append(UnresolvedGap(
                kind=GapKind.WORK_TYPE,
                id=work_type.id,
                reason="no knowledge-base suggestions",
            ))
            return None

        linked = {normalize_name(s.name) for s in self.store.list_linked_skills(work_type.id)}
        missing = [name for name in suggestions if normalize_name(name) not in linked]
        if not missing:
            report.exhausted_work_types.append(work_type.id)
            return None

        remaining = self.threshold - work_type.skill_count
        return MappingRequest(work_type_id=work_type.id, skill_names=missing[:remaining])

    def _plan_category(
        self,
        category: CategoryRef,
        work_types: List[WorkTypeRecord],
        report: PassReport
    ) -> Optional[MappingRequest]:
        target = choose_target_work_type(work_types)
        if target is None:
            report.unresolved_gaps.append(UnresolvedGap(
                kind=GapKind.WORK_CATEGORY,
                id=category.id,
                reason="category has no work types",
            ))
            return None

        fallback = self.knowledge_base.suggest_for_category(
            category.label, category.focus_area_id, limit=self.threshold
        )
        if not fallback:
            report.unresolved_gaps.append(UnresolvedGap(
                kind=GapKind.WORK_CATEGORY,
                id=category.id,
                reason="no fallback skills for category",
            ))
            return None

        logger.debug(f"Category {category.id} uncovered, targeting {target.id} with {fallback}")
        return MappingRequest(work_type_id=target.id, skill_names=fallback)

    def _work_types_of(
        self,
        category: CategoryRef,
        cache: Dict[str, Dict[str, List[WorkTypeRecord]]]
    ) -> List[WorkTypeRecord]:
        if category.focus_area_id not in cache:
            by_category = {}
            for fa_node in self.store.load_hierarchy(category.focus_area_id):
                for cat_node in fa_node.categories:
                    by_category[cat_node.category.id] = [n.work_type for n in cat_node.work_types]
            cache[category.focus_area_id] = by_category
        return cache[category.focus_area_id].get(category.id, [])

    def _check_monotonic(self, before: CoverageReport, after: CoverageReport) -> List[CoverageRegression]:
        regressions = []
        if after.coverage_pct < before.coverage_pct:
            regressions.append(CoverageRegression(
                scope=before.scope.label,
                before_pct=before.coverage_pct,
                after_pct=after.coverage_pct,
            ))

        for fa_before in before.focus_areas:
            fa_after = after.focus_area(fa_before.id)
            after_pct = fa_after.coverage_pct if fa_after else 0.0
            if after_pct < fa_before.coverage_pct:
                regressions.append(CoverageRegression(
                    scope=f"focus_area:{fa_before.id}",
                    before_pct=fa_before.coverage_pct,
                    after_pct=after_pct,
                ))

        for regression in regressions:
            logger.warning(
                f"Coverage regressed for {regression.scope}: "
                f"{regression.before_pct:.1f}% -> {regression.after_pct:.1f}%"
            )
        return regressions
