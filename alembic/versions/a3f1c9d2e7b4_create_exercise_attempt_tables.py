"""create exercise and attempt tables

Revision ID: a3f1c9d2e7b4
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a3f1c9d2e7b4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

attempt_status_enum = postgresql.ENUM(
    'in_progress', 'completed', 'abandoned', name='attempt_status_enum'
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('exercises',
    sa.Column('exercise_id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('exercise_type', sa.String(), nullable=False),
    sa.Column('language', sa.String(), nullable=False),
    sa.Column('cefr_level', sa.String(length=2), nullable=True),
    sa.Column('instructions', sa.Text(), nullable=True),
    sa.Column('time_limit_seconds', sa.Integer(), nullable=True),
    sa.Column('passing_score_percent', sa.Integer(), server_default='70', nullable=False),
    sa.Column('is_published', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('exercise_id')
    )
    op.create_index(op.f('ix_exercises_exercise_id'), 'exercises', ['exercise_id'], unique=False)
    op.create_index(op.f('ix_exercises_is_published'), 'exercises', ['is_published'], unique=False)

    op.create_table('exercise_items',
    sa.Column('item_id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('exercise_id', sa.Integer(), nullable=False),
    sa.Column('order_index', sa.Integer(), nullable=False),
    sa.Column('question_text', sa.Text(), nullable=True),
    sa.Column('content', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('correct_answer', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('points', sa.Integer(), server_default='1', nullable=False),
    sa.Column('hint', sa.Text(), nullable=True),
    sa.Column('explanation', sa.Text(), nullable=True),
    sa.Column('audio_url', sa.String(), nullable=True),
    sa.Column('image_url', sa.String(), nullable=True),
    sa.ForeignKeyConstraint(['exercise_id'], ['exercises.exercise_id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('item_id'),
    sa.UniqueConstraint('exercise_id', 'order_index', name='uq_exercise_item_order')
    )
    op.create_index(op.f('ix_exercise_items_exercise_id'), 'exercise_items', ['exercise_id'], unique=False)
    op.create_index(op.f('ix_exercise_items_item_id'), 'exercise_items', ['item_id'], unique=False)

    attempt_status_enum.create(op.get_bind(), checkfirst=True)
    op.create_table('exercise_attempts',
    sa.Column('attempt_id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('exercise_id', sa.Integer(), nullable=False),
    sa.Column('student_id', sa.Integer(), nullable=False),
    sa.Column('status', postgresql.ENUM(name='attempt_status_enum', create_type=False), server_default='in_progress', nullable=False),
    sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('answers', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('score', sa.Integer(), nullable=True),
    sa.Column('max_score', sa.Integer(), nullable=True),
    sa.Column('percentage', sa.Integer(), nullable=True),
    sa.Column('passed', sa.Boolean(), nullable=True),
    sa.Column('time_spent_seconds', sa.Integer(), nullable=True),
    sa.Column('timed_out', sa.Boolean(), server_default=sa.false(), nullable=False),
    sa.Column('exercise_snapshot', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('version', sa.Integer(), server_default='0', nullable=False),
    sa.ForeignKeyConstraint(['exercise_id'], ['exercises.exercise_id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('attempt_id')
    )
    op.create_index(op.f('ix_exercise_attempts_attempt_id'), 'exercise_attempts', ['attempt_id'], unique=False)
    op.create_index(op.f('ix_exercise_attempts_exercise_id'), 'exercise_attempts', ['exercise_id'], unique=False)
    op.create_index('ix_exercise_attempts_student_started', 'exercise_attempts', ['student_id', 'started_at'], unique=False)
    op.create_index(
        'uq_exercise_attempts_in_progress',
        'exercise_attempts',
        ['exercise_id', 'student_id'],
        unique=True,
        postgresql_where=sa.text("status = 'in_progress'"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('uq_exercise_attempts_in_progress', table_name='exercise_attempts')
    op.drop_index('ix_exercise_attempts_student_started', table_name='exercise_attempts')
    op.drop_index(op.f('ix_exercise_attempts_exercise_id'), table_name='exercise_attempts')
    op.drop_index(op.f('ix_exercise_attempts_attempt_id'), table_name='exercise_attempts')
    op.drop_table('exercise_attempts')
    attempt_status_enum.drop(op.get_bind(), checkfirst=True)
    op.drop_index(op.f('ix_exercise_items_item_id'), table_name='exercise_items')
    op.drop_index(op.f('ix_exercise_items_exercise_id'), table_name='exercise_items')
    op.drop_table('exercise_items')
    op.drop_index(op.f('ix_exercises_is_published'), table_name='exercises')
    op.drop_index(op.f('ix_exercises_exercise_id'), table_name='exercises')
    op.drop_table('exercises')
