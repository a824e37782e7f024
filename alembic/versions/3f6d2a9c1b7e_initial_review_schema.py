"""initial_review_schema

Revision ID: 3f6d2a9c1b7e
Revises:
Create Date: 2026-10-17 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f6d2a9c1b7e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

team_role = sa.Enum('LEADER', 'MEMBER', name='teamrole')
access_level = sa.Enum('READ', 'WRITE', 'ADMIN', name='accesslevel')
activity_type = sa.Enum(
    'PR_APPROVAL',
    'PR_REJECTION',
    'PR_COMMENT',
    'PROJECT_CREATION',
    'TEAM_JOIN',
    'LOGIN',
    name='activitytype',
)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('avatar', sa.String(length=500), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'team_members',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('team_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role', team_role, nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('team_id', 'user_id', name='uq_team_member'),
    )
    op.create_index(op.f('ix_team_members_team_id'), 'team_members', ['team_id'])
    op.create_index(op.f('ix_team_members_user_id'), 'team_members', ['user_id'])

    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('key', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('github_owner', sa.String(length=255), nullable=True),
        sa.Column('github_repo', sa.String(length=255), nullable=True),
        sa.Column('github_installation_id', sa.BigInteger(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_projects_key'), 'projects', ['key'], unique=True)

    op.create_table(
        'project_teams',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('team_id', sa.Integer(), nullable=False),
        sa.Column('access_level', access_level, nullable=False),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('project_id', 'team_id', name='uq_project_team'),
    )
    op.create_index(op.f('ix_project_teams_project_id'), 'project_teams', ['project_id'])
    op.create_index(op.f('ix_project_teams_team_id'), 'project_teams', ['team_id'])

    op.create_table(
        'pr_reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('team_id', sa.Integer(), nullable=False),
        sa.Column('pull_request_number', sa.Integer(), nullable=False),
        sa.Column('pull_request_id', sa.BigInteger(), nullable=True),
        sa.Column('approved', sa.Boolean(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['team_id'], ['teams.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'user_id', 'project_id', 'pull_request_number', name='uq_review_user_project_pr'
        ),
    )
    op.create_index(op.f('ix_pr_reviews_user_id'), 'pr_reviews', ['user_id'])
    op.create_index(op.f('ix_pr_reviews_project_id'), 'pr_reviews', ['project_id'])
    op.create_index(op.f('ix_pr_reviews_team_id'), 'pr_reviews', ['team_id'])
    op.create_index(
        op.f('ix_pr_reviews_pull_request_number'), 'pr_reviews', ['pull_request_number']
    )

    op.create_table(
        'pr_comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('pull_request_number', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('file_path', sa.String(length=500), nullable=True),
        sa.Column('file_line', sa.Integer(), nullable=True),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('is_edited', sa.Boolean(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_id'], ['pr_comments.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_pr_comments_user_id'), 'pr_comments', ['user_id'])
    op.create_index(op.f('ix_pr_comments_parent_id'), 'pr_comments', ['parent_id'])
    op.create_index(
        'ix_pr_comments_project_pr', 'pr_comments', ['project_id', 'pull_request_number']
    )

    op.create_table(
        'user_activities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('activity_type', activity_type, nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=True),
        sa.Column('team_id', sa.Integer(), nullable=True),
        sa.Column('pull_request_number', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=500), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_user_activities_user_created', 'user_activities', ['user_id', 'created_at']
    )
    op.create_index(
        'ix_user_activities_project_created', 'user_activities', ['project_id', 'created_at']
    )


def downgrade() -> None:
    op.drop_table('user_activities')
    op.drop_table('pr_comments')
    op.drop_table('pr_reviews')
    op.drop_table('project_teams')
    op.drop_table('projects')
    op.drop_table('team_members')
    op.drop_table('teams')
    op.drop_table('users')
    activity_type.drop(op.get_bind(), checkfirst=True)
    access_level.drop(op.get_bind(), checkfirst=True)
    team_role.drop(op.get_bind(), checkfirst=True)
