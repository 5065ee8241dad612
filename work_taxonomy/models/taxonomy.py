"""
Taxonomy database models.

Four-level hierarchy cross-linked to skills:
FocusArea -> WorkCategory -> WorkType <-> Skill (via WorkTypeSkill)

Uniqueness that must hold across concurrent writers lives here as table
constraints: skill.name_key (normalized name) and the
(work_type_id, skill_id) pair.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from work_taxonomy.common.identifiers import SKILL_ID_MAX_LENGTH, SKILL_NAME_MAX_LENGTH
from work_taxonomy.models.base_models import BaseModel


class FocusArea(BaseModel):
    """Top-level professional domain / persona grouping (e.g. Design)."""
    __tablename__ = 'focus_area'

    id = Column(String(200), primary_key=True)
    label = Column(String(250), nullable=False)
    description = Column(Text, nullable=False, server_default="")

    work_categories = relationship('WorkCategory', back_populates='focus_area')


class WorkCategory(BaseModel):
    """Thematic grouping of work types within a focus area."""
    __tablename__ = 'work_category'
    __table_args__ = (
        Index('idx_work_category_focus_area_id', 'focus_area_id'),
    )

    id = Column(String(200), primary_key=True)
    label = Column(String(250), nullable=False)
    description = Column(Text, nullable=True)
    focus_area_id = Column(
        String(200),
        ForeignKey('focus_area.id', ondelete='CASCADE'),
        nullable=False
    )

    focus_area = relationship('FocusArea', back_populates='work_categories')
    work_types = relationship('WorkType', back_populates='work_category')


class WorkType(BaseModel):
    """The classifiable unit of work that skills attach to."""
    __tablename__ = 'work_type'
    __table_args__ = (
        Index('idx_work_type_work_category_id', 'work_category_id'),
    )

    id = Column(String(200), primary_key=True)
    label = Column(String(250), nullable=False)
    work_category_id = Column(
        String(200),
        ForeignKey('work_category.id', ondelete='CASCADE'),
        nullable=False
    )

    work_category = relationship('WorkCategory', back_populates='work_types')
    skill_links = relationship('WorkTypeSkill', back_populates='work_type')


class Skill(BaseModel):
    """A named competency. name_key holds the normalized name."""
    __tablename__ = 'skill'
    __table_args__ = (
        UniqueConstraint('name_key', name='uix_skill_name_key'),
    )

    id = Column(String(SKILL_ID_MAX_LENGTH), primary_key=True)
    name = Column(String(SKILL_NAME_MAX_LENGTH), nullable=False)
    name_key = Column(String(SKILL_NAME_MAX_LENGTH), nullable=False)
    category = Column(String(200), nullable=True)

    work_type_links = relationship('WorkTypeSkill', back_populates='skill')


class WorkTypeSkill(BaseModel):
    """Association: this skill is relevant to this work type."""
    __tablename__ = 'work_type_skill'
    __table_args__ = (
        UniqueConstraint('work_type_id', 'skill_id', name='uix_work_type_skill'),
        Index('idx_work_type_skill_skill_id', 'skill_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    work_type_id = Column(
        String(200),
        ForeignKey('work_type.id', ondelete='CASCADE'),
        nullable=False
    )
    skill_id = Column(
        String(SKILL_ID_MAX_LENGTH),
        ForeignKey('skill.id', ondelete='CASCADE'),
        nullable=False
    )

    work_type = relationship('WorkType', back_populates='skill_links')
    skill = relationship('Skill', back_populates='work_type_links')
