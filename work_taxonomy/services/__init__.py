from work_taxonomy.services.taxonomy_store import TaxonomyStore
from work_taxonomy.services.memory_store import InMemoryTaxonomyStore
from work_taxonomy.services.sql_store import SqlAlchemyTaxonomyStore
from work_taxonomy.services.skill_resolver import SkillResolver
from work_taxonomy.services.mapping_engine import MappingEngine
from work_taxonomy.services.coverage_analyzer import CoverageAnalyzer, DEFAULT_SATURATION_THRESHOLD
from work_taxonomy.services.knowledge_base import KnowledgeBase
from work_taxonomy.services.reconciliation import ReconciliationOrchestrator
from work_taxonomy.services.taxonomy_seeder import TaxonomySeeder, load_seed

__all__ = [
    'TaxonomyStore', 'InMemoryTaxonomyStore', 'SqlAlchemyTaxonomyStore',
    'SkillResolver', 'MappingEngine', 'CoverageAnalyzer', 'DEFAULT_SATURATION_THRESHOLD',
    'KnowledgeBase', 'ReconciliationOrchestrator', 'TaxonomySeeder', 'load_seed'
]
