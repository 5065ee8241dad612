"""
Work taxonomy consistency and coverage-reconciliation engine.

Keeps the Focus Area -> Work Category -> Work Type -> Skill taxonomy
consistent (one skill per case-insensitive name, one link per work type and
skill) and fills coverage gaps from a supplied knowledge base.
"""

from work_taxonomy.schemas.taxonomy_schemas import (
    CoverageReport,
    CoverageScope,
    MappingReport,
    MappingRequest,
    PassReport,
)
from work_taxonomy.services import (
    CoverageAnalyzer,
    InMemoryTaxonomyStore,
    KnowledgeBase,
    MappingEngine,
    ReconciliationOrchestrator,
    SkillResolver,
    SqlAlchemyTaxonomyStore,
    TaxonomySeeder,
    TaxonomyStore,
)

__version__ = "0.1.0"

__all__ = [
    "CoverageAnalyzer",
    "CoverageReport",
    "CoverageScope",
    "InMemoryTaxonomyStore",
    "KnowledgeBase",
    "MappingEngine",
    "MappingReport",
    "MappingRequest",
    "PassReport",
    "ReconciliationOrchestrator",
    "SkillResolver",
    "SqlAlchemyTaxonomyStore",
    "TaxonomySeeder",
    "TaxonomyStore",
]
