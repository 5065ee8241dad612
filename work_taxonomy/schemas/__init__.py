from work_taxonomy.schemas.taxonomy_schemas import (
    MappingRequest, MappingReport, LinkOutcome, LinkResult,
    CoverageScope, CoverageReport, CategoryRef, WorkTypeRef, FocusAreaCoverage,
    PassReport, UnresolvedGap, GapKind, CoverageRegression,
    TaxonomySeed, FocusAreaSeed, WorkCategorySeed, WorkTypeSeed,
    FlatWorkCategorySeed, FlatWorkTypeSeed, SeedReport, OrphanNode
)

__all__ = [
    'MappingRequest', 'MappingReport', 'LinkOutcome', 'LinkResult',
    'CoverageScope', 'CoverageReport', 'CategoryRef', 'WorkTypeRef', 'FocusAreaCoverage',
    'PassReport', 'UnresolvedGap', 'GapKind', 'CoverageRegression',
    'TaxonomySeed', 'FocusAreaSeed', 'WorkCategorySeed', 'WorkTypeSeed',
    'FlatWorkCategorySeed', 'FlatWorkTypeSeed', 'SeedReport', 'OrphanNode'
]
