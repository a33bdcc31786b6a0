"""create workouts, body_weights, goals, personal_records

Revision ID: 3e1a9c6d0b47
Revises:
Create Date: 2026-09-14 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3e1a9c6d0b47'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'workouts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('exercise', sa.String(), nullable=False),
        sa.Column('sets', sa.Integer(), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('weight', sa.Numeric(7, 2), server_default='0', nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_workouts_id', 'workouts', ['id'])
    op.create_index('ix_workouts_user_id', 'workouts', ['user_id'])
    op.create_index('ix_workouts_exercise', 'workouts', ['exercise'])
    op.create_index('ix_workouts_date', 'workouts', ['date'])

    op.create_table(
        'body_weights',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('weight', sa.Numeric(6, 2), nullable=False),
        sa.Column('unit', sa.String(8), server_default='lbs', nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_body_weights_id', 'body_weights', ['id'])
    op.create_index('ix_body_weights_user_id', 'body_weights', ['user_id'])
    op.create_index('ix_body_weights_date', 'body_weights', ['date'])

    op.create_table(
        'goals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('goal_type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('exercise_name', sa.String(), nullable=True),
        sa.Column('target_value', sa.Numeric(10, 2), nullable=False),
        sa.Column('current_value', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('target_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), server_default='Active', nullable=False),
        sa.Column('priority', sa.String(10), server_default='Medium', nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_goals_id', 'goals', ['id'])
    op.create_index('ix_goals_user_id', 'goals', ['user_id'])
    op.create_index('ix_goals_status', 'goals', ['status'])

    op.create_table(
        'personal_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('exercise', sa.String(), nullable=False),
        sa.Column('max_weight', sa.Numeric(7, 2), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('date_achieved', sa.Date(), nullable=False),
        sa.Column('workout_id', sa.Integer(), nullable=True),
        sa.Column('previous_pr', sa.Numeric(7, 2), nullable=True),
        sa.ForeignKeyConstraint(['workout_id'], ['workouts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_personal_records_id', 'personal_records', ['id'])
    op.create_index('ix_personal_records_user_id', 'personal_records', ['user_id'])
    op.create_index('ix_personal_records_exercise', 'personal_records', ['exercise'])


def downgrade() -> None:
    op.drop_table('personal_records')
    op.drop_table('goals')
    op.drop_table('body_weights')
    op.drop_table('workouts')
