"""
Mapping Engine

Applies batches of (work type, [skill name]) requests against the store,
linking each resolved skill exactly once. This is the only component that
writes work-type/skill links.
"""

import logging
from typing import Iterable, Optional, Set, Tuple

from work_taxonomy.common.exceptions import (
    SkillResolutionError,
    UnknownSkillError,
    UnknownWorkTypeError,
)
from work_taxonomy.schemas.taxonomy_schemas import (
    LinkOutcome,
    LinkResult,
    MappingReport,
    MappingRequest,
)
from work_taxonomy.services.skill_resolver import SkillResolver
from work_taxonomy.services.taxonomy_store import TaxonomyStore

logger = logging.getLogger(__name__)


class MappingEngine:
    """
    Per request:
    1. An unknown work type is recorded and the whole request skipped.
    2. Each skill name is resolved and linked; the outcome is classified as
       added, already linked, or a resolution failure. A pair repeated
       within the same batch is a duplicate, not already linked, so that
       already_linked only counts pairs that existed before the batch.
    3. Per-item failures never raise. TaxonomyPersistenceError does, since
       it is fatal for the whole batch.

    Every link is committed by the store as it is made, so all successfully
    processed pairs are durable by the time apply returns.
    """

    def __init__(self, store: TaxonomyStore, resolver: Optional[SkillResolver] = None):
        self.store = store
        self.resolver = resolver or SkillResolver(store)

    def apply(self, requests: Iterable[MappingRequest]) -> MappingReport:
        report = MappingReport()
        seen: Set[Tuple[str, str]] = set()

        for request in requests:
            if not self.store.work_type_exists(request.work_type_id):
                logger.warning(f"Work type not found: {request.work_type_id}")
                report.unknown_work_types.add(request.work_type_id)
                continue

            report.requests_processed += 1
            for skill_name in request.skill_names:
                self._apply_one(request.work_type_id, skill_name, report, seen)

        logger.info(
            f"Mapping batch applied: added={report.added}, already_linked={report.already_linked}, "
            f"duplicates={report.duplicates}, skills_created={report.skills_created}, "
            f"unknown_work_types={len(report.unknown_work_types)}, "
            f"unresolved_skill_names={len(report.unresolved_skill_names)}"
        )
        return report

    def _apply_one(
        self,
        work_type_id: str,
        skill_name: str,
        report: MappingReport,
        seen: Set[Tuple[str, str]]
    ) -> None:
        try:
            skill, created = self.resolver.resolve_with_status(skill_name)
        except SkillResolutionError as e:
            logger.warning(f"Could not resolve skill {skill_name!r} for {work_type_id}: {e}")
            report.unresolved_skill_names.add(skill_name)
            report.links.append(LinkResult(
                work_type_id=work_type_id,
                skill_name=skill_name,
                outcome=LinkOutcome.RESOLUTION_FAILED,
            ))
            return

        if created:
            report.skills_created += 1

        pair = (work_type_id, skill.id)
        if pair in seen:
            report.duplicates += 1
            report.links.append(LinkResult(
                work_type_id=work_type_id,
                skill_name=skill_name,
                skill_id=skill.id,
                outcome=LinkOutcome.DUPLICATE,
            ))
            return

        try:
            linked = self.store.link_work_type_skill(work_type_id, skill.id)
        except UnknownWorkTypeError:
            # Removed between the existence check and the write
            logger.warning(f"Work type disappeared while linking: {work_type_id}")
            report.unknown_work_types.add(work_type_id)
            return
        except UnknownSkillError:
            logger.warning(f"Skill disappeared while linking: {skill.id}")
            report.unresolved_skill_names.add(skill_name)
            report.links.append(LinkResult(
                work_type_id=work_type_id,
                skill_name=skill_name,
                skill_id=skill.id,
                outcome=LinkOutcome.RESOLUTION_FAILED,
            ))
            return

        seen.add(pair)
        outcome = LinkOutcome.ADDED if linked else LinkOutcome.ALREADY_LINKED
        if linked:
            report.added += 1
            logger.debug(f"Linked {skill.name!r} to {work_type_id}")
        else:
            report.already_linked += 1
        report.links.append(LinkResult(
            work_type_id=work_type_id,
            skill_name=skill_name,
            skill_id=skill.id,
            outcome=outcome,
        ))
