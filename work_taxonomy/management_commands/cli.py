#!/usr/bin/env python3
"""
work-taxonomy command line.

Usage:
    work-taxonomy reconcile --focus-area design --knowledge-base data/knowledge_base.json
    work-taxonomy reconcile --all --dry-run --json
    work-taxonomy coverage --focus-area design --threshold 4
    work-taxonomy seed data/taxonomy_seed.json

Exit codes:
    0  success
    1  unknown work types / unresolved skill names remain, unknown scope,
       rejected seed nodes, or an unreadable input file
    2  database failure
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

import click

from work_taxonomy.common.exceptions import (
    KnowledgeBaseError,
    SeedDataError,
    TaxonomyPersistenceError,
    UnknownScopeError,
)
from work_taxonomy.schemas.taxonomy_schemas import CoverageReport, CoverageScope, PassReport
from work_taxonomy.services.coverage_analyzer import CoverageAnalyzer
from work_taxonomy.services.knowledge_base import KnowledgeBase
from work_taxonomy.services.reconciliation import ReconciliationOrchestrator
from work_taxonomy.services.sql_store import SqlAlchemyTaxonomyStore
from work_taxonomy.services.taxonomy_seeder import TaxonomySeeder, load_seed
from work_taxonomy.services.taxonomy_store import TaxonomyStore
from work_taxonomy.settings.config import get_settings
from work_taxonomy.settings.database import get_session_factory
from work_taxonomy.settings.logging_config import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNRESOLVED = 1
EXIT_PERSISTENCE = 2


@contextmanager
def taxonomy_store() -> Iterator[TaxonomyStore]:
    db = get_session_factory()()
    try:
        yield SqlAlchemyTaxonomyStore(db)
    finally:
        db.close()


def _print_coverage(report: CoverageReport) -> None:
    click.echo(f"Coverage for {report.scope.label} (threshold {report.threshold})")
    click.echo(
        f"  Work types: {report.skilled_work_types}/{report.total_work_types} skilled "
        f"({report.coverage_pct:.1f}%), {report.saturated_work_types} saturated"
    )
    click.echo(
        f"  Categories: {report.covered_categories}/{report.total_categories} covered "
        f"({report.depth_coverage_pct:.1f}%)"
    )
    for fa in report.focus_areas:
        depth = "full depth" if fa.full_depth_coverage else "partial depth"
        click.echo(
            f"  - {fa.id}: {fa.skilled_work_types}/{fa.total_work_types} work types "
            f"({fa.coverage_pct:.1f}%), {fa.covered_categories}/{fa.total_categories} categories, {depth}"
        )
    for category in report.uncovered_categories:
        click.echo(f"  ⚠️  Uncovered category: {category.id} ({category.work_type_count} work types)")


def _print_pass(report: PassReport) -> None:
    mode = "Dry run" if report.dry_run else "Reconciliation"
    click.echo(f"{mode} for {report.scope.label}")
    click.echo(f"  Planned requests: {len(report.planned_requests)}")
    for request in report.planned_requests:
        click.echo(f"    {request.work_type_id}: {', '.join(request.skill_names)}")

    if not report.dry_run:
        mapping = report.mapping
        click.echo(
            f"  Links added: {mapping.added}, already linked: {mapping.already_linked}, "
            f"duplicates: {mapping.duplicates}, skills created: {mapping.skills_created}"
        )
        click.echo(
            f"  Coverage: {report.before.coverage_pct:.1f}% -> {report.after.coverage_pct:.1f}%, "
            f"depth: {report.before.depth_coverage_pct:.1f}% -> {report.after.depth_coverage_pct:.1f}%"
        )
        for work_type_id in sorted(mapping.unknown_work_types):
            click.echo(f"  ❌ Unknown work type: {work_type_id}")
        for name in sorted(mapping.unresolved_skill_names):
            click.echo(f"  ❌ Unresolved skill name: {name}")

    for work_type_id in report.unknown_knowledge_base_work_types:
        click.echo(f"  ❌ Knowledge base names unknown work type: {work_type_id}")
    for gap in report.unresolved_gaps:
        click.echo(f"  ⚠️  No suggestions for {gap.kind.value} {gap.id}: {gap.reason}")
    for regression in report.regressions:
        click.echo(
            f"  ⚠️  Coverage regressed for {regression.scope}: "
            f"{regression.before_pct:.1f}% -> {regression.after_pct:.1f}%"
        )


@click.group()
@click.option('--log-level', default=None, help='Override WORK_TAXONOMY_LOG_LEVEL')
def cli(log_level: Optional[str]):
    """Work taxonomy consistency and coverage tools."""
    configure_logging(log_level)


@cli.command()
@click.option('--focus-area', 'focus_area_id', default=None, help='Reconcile one focus area')
@click.option('--all', 'all_focus_areas', is_flag=True, help='Reconcile every focus area')
@click.option('--threshold', type=click.IntRange(min=1), default=None, help='Saturation threshold')
@click.option('--dry-run', is_flag=True, help='Plan only; apply nothing')
@click.option('--knowledge-base', 'knowledge_base_path', type=click.Path(dir_okay=False), default=None)
@click.option('--json', 'as_json', is_flag=True, help='Print the pass report as JSON')
def reconcile(focus_area_id, all_focus_areas, threshold, dry_run, knowledge_base_path, as_json):
    """Fill coverage gaps from the knowledge base."""
    if bool(focus_area_id) == all_focus_areas:
        raise click.UsageError("Pass exactly one of --focus-area or --all")

    settings = get_settings()
    threshold = threshold or settings.saturation_threshold
    knowledge_base_path = knowledge_base_path or settings.knowledge_base_path
    if not knowledge_base_path:
        raise click.UsageError("No knowledge base: pass --knowledge-base or set WORK_TAXONOMY_KNOWLEDGE_BASE_PATH")

    try:
        knowledge_base = KnowledgeBase.from_file(knowledge_base_path)
    except KnowledgeBaseError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(EXIT_UNRESOLVED)

    scope = CoverageScope.for_focus_area(focus_area_id) if focus_area_id else CoverageScope.everything()

    try:
        with taxonomy_store() as store:
            orchestrator = ReconciliationOrchestrator(store, knowledge_base, threshold=threshold)
            report = orchestrator.run(scope=scope, dry_run=dry_run)
    except UnknownScopeError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(EXIT_UNRESOLVED)
    except TaxonomyPersistenceError as e:
        logger.error(f"Reconciliation aborted: {e}")
        click.echo(f"❌ Database error: {e}", err=True)
        sys.exit(EXIT_PERSISTENCE)

    if as_json:
        click.echo(report.model_dump_json(indent=2))
    else:
        _print_pass(report)

    sys.exit(EXIT_UNRESOLVED if report.has_unresolved_items else EXIT_OK)


@cli.command()
@click.option('--focus-area', 'focus_area_id', default=None, help='Limit the report to one focus area')
@click.option('--threshold', type=click.IntRange(min=1), default=None, help='Saturation threshold')
@click.option('--json', 'as_json', is_flag=True, help='Print the report as JSON')
def coverage(focus_area_id, threshold, as_json):
    """Print the coverage report."""
    threshold = threshold or get_settings().saturation_threshold
    scope = CoverageScope.for_focus_area(focus_area_id) if focus_area_id else CoverageScope.everything()

    try:
        with taxonomy_store() as store:
            report = CoverageAnalyzer(store, threshold).analyze(scope)
    except UnknownScopeError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(EXIT_UNRESOLVED)
    except TaxonomyPersistenceError as e:
        click.echo(f"❌ Database error: {e}", err=True)
        sys.exit(EXIT_PERSISTENCE)

    if as_json:
        click.echo(report.model_dump_json(indent=2))
    else:
        _print_coverage(report)


@cli.command()
@click.argument('path', type=click.Path(dir_okay=False))
def seed(path):
    """Upsert focus areas, categories and work types from a seed file."""
    try:
        taxonomy_seed = load_seed(path)
    except SeedDataError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(EXIT_UNRESOLVED)

    try:
        with taxonomy_store() as store:
            report = TaxonomySeeder(store).seed(taxonomy_seed)
    except SeedDataError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(EXIT_UNRESOLVED)
    except TaxonomyPersistenceError as e:
        click.echo(f"❌ Database error: {e}", err=True)
        sys.exit(EXIT_PERSISTENCE)

    for kind in ("focus_area", "work_category", "work_type"):
        click.echo(f"✅ {kind}: {report.created[kind]} created, {report.existing[kind]} existing")
    for orphan in report.orphans:
        click.echo(f"❌ Rejected {orphan.kind} {orphan.id}: missing parent {orphan.parent_id}", err=True)
    for conflict in report.conflicts:
        click.echo(
            f"❌ Skipped {conflict.kind} {conflict.id}: exists under {conflict.existing_parent_id}, "
            f"not {conflict.parent_id}",
            err=True
        )

    sys.exit(EXIT_UNRESOLVED if report.orphans or report.conflicts else EXIT_OK)


if __name__ == '__main__':
    cli()
