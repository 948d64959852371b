"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(),
                  onupdate=sa.func.now(), nullable=False),
    ]


def _owner() -> sa.Column:
    return sa.Column('user_id', postgresql.UUID(as_uuid=True),
                     sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)


def upgrade() -> None:
    # Enum types store member names, matching SQLAlchemy's Enum(PyEnum) columns
    subscription_status = sa.Enum('ACTIVE', 'TRIALING', 'PAST_DUE', 'CANCELED', 'UNPAID',
                                  name='subscriptionstatus')
    domain_status = sa.Enum('PENDING', 'ACTIVE', 'ERROR', name='domainstatus')
    query_status = sa.Enum('ACTIVE', 'PAUSED', 'DELETED', name='querystatus')
    brief_status = sa.Enum('GENERATED', 'DOWNLOADED', 'IMPLEMENTED', name='briefstatus')

    # Profiles; the id is the auth provider's subject
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255)),
        sa.Column('plan', sa.String(50), nullable=False, server_default='free'),
        sa.Column('usage_queries', sa.Integer, nullable=False, server_default='0'),
        sa.Column('usage_domains', sa.Integer, nullable=False, server_default='0'),
        sa.Column('subscription_status', subscription_status),
        sa.Column('email_notifications', postgresql.JSONB, server_default='{}'),
        *_timestamps(),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table(
        'domains',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column('domain', sa.String(255), nullable=False),
        sa.Column('status', domain_status, nullable=False, server_default='PENDING'),
        sa.Column('queries_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('citations_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('last_check', sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index('ix_domains_user_id', 'domains', ['user_id'])
    op.create_index('ix_domains_domain', 'domains', ['domain'])

    op.create_table(
        'queries',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column('query_text', sa.Text, nullable=False),
        sa.Column('domain_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('domains.id', ondelete='SET NULL')),
        sa.Column('intent_tags', postgresql.JSONB, server_default='[]'),
        sa.Column('engines', postgresql.JSONB, server_default='[]'),
        sa.Column('status', query_status, nullable=False, server_default='ACTIVE'),
        sa.Column('last_run', sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index('ix_queries_user_id', 'queries', ['user_id'])
    op.create_index('ix_queries_domain_id', 'queries', ['domain_id'])
    op.create_index('ix_queries_status', 'queries', ['status'])

    # Written by the processing pipeline
    op.create_table(
        'citations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column('query_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('queries.id', ondelete='CASCADE'), nullable=False),
        sa.Column('engine', sa.String(50), nullable=False),
        sa.Column('response_text', sa.Text, nullable=False, server_default=''),
        sa.Column('cited', sa.Boolean, nullable=False, server_default='false'),
        sa.Column('position', sa.String(20)),
        sa.Column('confidence_score', sa.Float, nullable=False, server_default='0'),
        sa.Column('run_date', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_citations_user_id', 'citations', ['user_id'])
    op.create_index('ix_citations_query_id', 'citations', ['query_id'])
    op.create_index('ix_citations_engine', 'citations', ['engine'])
    op.create_index('ix_citations_run_date', 'citations', ['run_date'])

    op.create_table(
        'fix_it_briefs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        _owner(),
        sa.Column('query_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('queries.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('meta_description', sa.String(500)),
        sa.Column('schema_markup', sa.Text),
        sa.Column('content_brief', sa.Text),
        sa.Column('faq_entries', postgresql.JSONB, server_default='[]'),
        sa.Column('status', brief_status, nullable=False, server_default='GENERATED'),
        *_timestamps(),
    )
    op.create_index('ix_fix_it_briefs_user_id', 'fix_it_briefs', ['user_id'])
    op.create_index('ix_fix_it_briefs_query_id', 'fix_it_briefs', ['query_id'])


def downgrade() -> None:
    op.drop_table('fix_it_briefs')
    op.drop_table('citations')
    op.drop_table('queries')
    op.drop_table('domains')
    op.drop_table('users')

    op.execute("DROP TYPE IF EXISTS briefstatus")
    op.execute("DROP TYPE IF EXISTS querystatus")
    op.execute("DROP TYPE IF EXISTS domainstatus")
    op.execute("DROP TYPE IF EXISTS subscriptionstatus")
