"""add buddy_connections, shared_goals, buddy_interactions, timer_sessions

Revision ID: 8f42d5b7e913
Revises: 3e1a9c6d0b47
Create Date: 2026-09-21 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8f42d5b7e913'
down_revision: Union[str, Sequence[str], None] = '3e1a9c6d0b47'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'buddy_connections',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('sender_id', sa.String(), nullable=False),
        sa.Column('receiver_id', sa.String(), nullable=False),
        sa.Column('status', sa.String(12), server_default='pending', nullable=False),
        sa.Column('message', sa.String(), nullable=True),
        sa.Column('request_date', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('connected_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_interaction', sa.DateTime(timezone=True), nullable=True),
        sa.Column('interaction_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('removed_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('removed_by', sa.String(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_buddy_connections_id', 'buddy_connections', ['id'])
    op.create_index('ix_buddy_connections_sender_id', 'buddy_connections', ['sender_id'])
    op.create_index('ix_buddy_connections_receiver_id', 'buddy_connections', ['receiver_id'])

    op.create_table(
        'shared_goals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.String(), nullable=False),
        sa.Column('goal_id', sa.Integer(), nullable=False),
        sa.Column('shared_with_id', sa.String(), nullable=False),
        sa.Column('share_level', sa.String(20), server_default='progress', nullable=False),
        sa.Column('shared_date', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_date', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.ForeignKeyConstraint(['goal_id'], ['goals.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_shared_goals_id', 'shared_goals', ['id'])
    op.create_index('ix_shared_goals_owner_id', 'shared_goals', ['owner_id'])
    op.create_index('ix_shared_goals_shared_with_id', 'shared_goals', ['shared_with_id'])

    op.create_table(
        'buddy_interactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('sender_id', sa.String(), nullable=False),
        sa.Column('receiver_id', sa.String(), nullable=False),
        sa.Column('interaction_type', sa.String(20), server_default='encouragement', nullable=False),
        sa.Column('subtype', sa.String(20), server_default='general', nullable=False),
        sa.Column('message', sa.String(), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_buddy_interactions_id', 'buddy_interactions', ['id'])
    op.create_index('ix_buddy_interactions_sender_id', 'buddy_interactions', ['sender_id'])
    op.create_index('ix_buddy_interactions_receiver_id', 'buddy_interactions', ['receiver_id'])

    op.create_table(
        'timer_sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('state', sa.JSON(), nullable=False),
        sa.Column('summary', sa.JSON(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_timer_sessions_id', 'timer_sessions', ['id'])
    op.create_index('ix_timer_sessions_user_id', 'timer_sessions', ['user_id'])
    op.create_index('ix_timer_sessions_completed_at', 'timer_sessions', ['completed_at'])


def downgrade() -> None:
    op.drop_table('timer_sessions')
    op.drop_table('buddy_interactions')
    op.drop_table('shared_goals')
    op.drop_table('buddy_connections')
