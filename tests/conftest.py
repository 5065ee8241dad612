"""
Pytest configuration and shared fixtures for work taxonomy tests.

This file provides:
- Both TaxonomyStore implementations (in-memory and SQLite-backed)
- A small Design taxonomy used across service tests
- Knowledge base fixtures
"""

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from work_taxonomy.models.records import FocusAreaRecord, WorkCategoryRecord, WorkTypeRecord
from work_taxonomy.services.knowledge_base import KnowledgeBase
from work_taxonomy.services.memory_store import InMemoryTaxonomyStore
from work_taxonomy.services.sql_store import SqlAlchemyTaxonomyStore
from work_taxonomy.settings.database import Base, create_db_engine
import work_taxonomy.models  # noqa: F401


def seed_design_taxonomy(store):
    """
    design
      design-ux      UX Research & Analysis
        design-ux-01-research     User Research
        design-ux-02-usability    Usability Evaluation
      design-visual  Visual Design
        design-visual-01-branding Brand Identity
        design-visual-02-systems  Design System Development
    """
    store.upsert_focus_area(FocusAreaRecord(id="design", label="Design"))
    store.upsert_work_category(WorkCategoryRecord(
        id="design-ux", label="UX Research & Analysis", focus_area_id="design"
    ))
    store.upsert_work_category(WorkCategoryRecord(
        id="design-visual", label="Visual Design", focus_area_id="design"
    ))
    for wt_id, label, category_id in [
        ("design-ux-01-research", "User Research", "design-ux"),
        ("design-ux-02-usability", "Usability Evaluation", "design-ux"),
        ("design-visual-01-branding", "Brand Identity", "design-visual"),
        ("design-visual-02-systems", "Design System Development", "design-visual"),
    ]:
        store.upsert_work_type(WorkTypeRecord(id=wt_id, label=label, work_category_id=category_id))
    return store


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def sql_engine():
    """In-memory SQLite engine shared across connections."""
    engine = create_db_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def sql_session(sql_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=sql_engine)()
    yield session
    session.close()


@pytest.fixture
def sql_store(sql_session):
    return SqlAlchemyTaxonomyStore(sql_session)


@pytest.fixture
def memory_store():
    return InMemoryTaxonomyStore()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Run the test against both store implementations."""
    if request.param == "memory":
        return InMemoryTaxonomyStore()
    return request.getfixturevalue("sql_store")


@pytest.fixture
def design_store(store):
    return seed_design_taxonomy(store)


# ============================================================================
# Knowledge Base Fixtures
# ============================================================================

@pytest.fixture
def knowledge_base():
    return KnowledgeBase(
        work_types={
            "design-ux-01-research": [
                "User Research", "Usability Testing", "Interviewing", "Survey Design", "Journey Mapping",
            ],
            "design-ux-02-usability": ["Usability Testing"],
        },
        focus_area_defaults={
            "design": ["Design Thinking", "User Experience", "Design Systems"],
        },
    )


@pytest.fixture
def sql_design_store(sql_store):
    return seed_design_taxonomy(sql_store)
