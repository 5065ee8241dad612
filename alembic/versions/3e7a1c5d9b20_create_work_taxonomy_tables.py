"""create work taxonomy tables

Revision ID: 3e7a1c5d9b20
Revises:
Create Date: 2026-01-12 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3e7a1c5d9b20'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_on', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('modified_on', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('focus_area',
        sa.Column('id', sa.String(length=200), nullable=False),
        sa.Column('label', sa.String(length=250), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('work_category',
        sa.Column('id', sa.String(length=200), nullable=False),
        sa.Column('label', sa.String(length=250), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('focus_area_id', sa.String(length=200), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['focus_area_id'], ['focus_area.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_work_category_focus_area_id', 'work_category', ['focus_area_id'])

    op.create_table('work_type',
        sa.Column('id', sa.String(length=200), nullable=False),
        sa.Column('label', sa.String(length=250), nullable=False),
        sa.Column('work_category_id', sa.String(length=200), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['work_category_id'], ['work_category.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_work_type_work_category_id', 'work_type', ['work_category_id'])

    # name_key is the normalized (case/whitespace-folded) name
    op.create_table('skill',
        sa.Column('id', sa.String(length=250), nullable=False),
        sa.Column('name', sa.String(length=250), nullable=False),
        sa.Column('name_key', sa.String(length=250), nullable=False),
        sa.Column('category', sa.String(length=200), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name_key', name='uix_skill_name_key'),
    )

    op.create_table('work_type_skill',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('work_type_id', sa.String(length=200), nullable=False),
        sa.Column('skill_id', sa.String(length=250), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['work_type_id'], ['work_type.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['skill_id'], ['skill.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('work_type_id', 'skill_id', name='uix_work_type_skill'),
    )
    op.create_index('idx_work_type_skill_skill_id', 'work_type_skill', ['skill_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_work_type_skill_skill_id', table_name='work_type_skill')
    op.drop_table('work_type_skill')
    op.drop_table('skill')
    op.drop_index('idx_work_type_work_category_id', table_name='work_type')
    op.drop_table('work_type')
    op.drop_index('idx_work_category_focus_area_id', table_name='work_category')
    op.drop_table('work_category')
    op.drop_table('focus_area')
