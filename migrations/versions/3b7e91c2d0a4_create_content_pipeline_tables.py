"""create content pipeline tables

Revision ID: 3b7e91c2d0a4
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3b7e91c2d0a4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BRIEF_STATUSES = (
    'draft', 'approved', 'generating', 'generated',
    'reviewing', 'revision_requested', 'published',
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('clients',
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('domain', sa.String(), nullable=False),
    sa.Column('industry', sa.String(), nullable=True),
    sa.Column('target_keywords', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('brand_voice', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )

    op.create_table('competitive_analysis',
    sa.Column('client_id', sa.UUID(), nullable=False),
    sa.Column('analysis_type', sa.String(), nullable=False),
    sa.Column('data', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('expires_at', sa.DateTime(), nullable=False),
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_competitive_analysis_client_id'), 'competitive_analysis', ['client_id'], unique=False)
    op.create_index(op.f('ix_competitive_analysis_expires_at'), 'competitive_analysis', ['expires_at'], unique=False)

    op.create_table('ai_citations',
    sa.Column('client_id', sa.UUID(), nullable=False),
    sa.Column('platform', sa.String(), nullable=False),
    sa.Column('query', sa.Text(), nullable=False),
    sa.Column('cited', sa.Boolean(), nullable=True),
    sa.Column('share_of_voice', sa.Numeric(precision=5, scale=2), nullable=True),
    sa.Column('citation_url', sa.String(), nullable=True),
    sa.Column('data', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('tracked_at', sa.DateTime(), nullable=False),
    sa.Column('id', sa.UUID(), nullable=False),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_ai_citations_client_id'), 'ai_citations', ['client_id'], unique=False)

    op.create_table('content_briefs',
    sa.Column('client_id', sa.UUID(), nullable=False),
    sa.Column('title', sa.String(), nullable=False),
    sa.Column('target_keyword', sa.String(), nullable=False),
    sa.Column('content_type', sa.String(), nullable=False),
    sa.Column('status', sa.Enum(*BRIEF_STATUSES, name='brief_status'), nullable=False),
    sa.Column('unique_angle', sa.Text(), nullable=True),
    sa.Column('competitive_gap', sa.Text(), nullable=True),
    sa.Column('target_audience', sa.Text(), nullable=True),
    sa.Column('serp_content_analysis', sa.Text(), nullable=True),
    sa.Column('authority_signals', sa.Text(), nullable=True),
    sa.Column('controversial_positions', sa.Text(), nullable=True),
    sa.Column('ai_citation_opportunity', sa.Text(), nullable=True),
    sa.Column('target_word_count', sa.Integer(), nullable=False),
    sa.Column('required_sections', postgresql.ARRAY(sa.String()), nullable=True),
    sa.Column('semantic_keywords', postgresql.ARRAY(sa.String()), nullable=True),
    sa.Column('internal_links', postgresql.ARRAY(sa.String()), nullable=True),
    sa.Column('priority_level', sa.String(), nullable=False),
    sa.Column('competitive_gap_analysis', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('ai_citation_opportunity_data', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('client_voice_profile', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('approved_at', sa.DateTime(), nullable=True),
    sa.Column('approved_by', sa.UUID(), nullable=True),
    sa.Column('generation_started_at', sa.DateTime(), nullable=True),
    sa.Column('generated_at', sa.DateTime(), nullable=True),
    sa.Column('content_id', sa.UUID(), nullable=True),
    sa.Column('published_at', sa.DateTime(), nullable=True),
    sa.Column('published_url', sa.String(), nullable=True),
    sa.Column('revision_requested_at', sa.DateTime(), nullable=True),
    sa.Column('revision_notes', sa.Text(), nullable=True),
    sa.Column('revised_at', sa.DateTime(), nullable=True),
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_content_briefs_client_id'), 'content_briefs', ['client_id'], unique=False)
    op.create_index(op.f('ix_content_briefs_status'), 'content_briefs', ['status'], unique=False)

    op.create_table('generated_content',
    sa.Column('brief_id', sa.UUID(), nullable=False),
    sa.Column('client_id', sa.UUID(), nullable=False),
    sa.Column('title', sa.String(), nullable=True),
    sa.Column('meta_description', sa.String(length=155), nullable=True),
    sa.Column('excerpt', sa.Text(), nullable=True),
    sa.Column('content', sa.Text(), nullable=False),
    sa.Column('word_count', sa.Integer(), nullable=False),
    sa.Column('status', sa.String(), nullable=False),
    sa.Column('ai_model_used', sa.String(), nullable=False),
    sa.Column('generation_prompt', sa.Text(), nullable=True),
    sa.Column('generation_time_seconds', sa.Float(), nullable=True),
    sa.Column('internal_links_added', postgresql.ARRAY(sa.String()), nullable=True),
    sa.Column('external_references', postgresql.ARRAY(sa.String()), nullable=True),
    sa.Column('aeo_optimizations', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('quality_score', sa.Numeric(precision=5, scale=2), nullable=True),
    sa.Column('readability_score', sa.Numeric(precision=5, scale=2), nullable=True),
    sa.Column('authority_score', sa.Numeric(precision=5, scale=2), nullable=True),
    sa.Column('optimization_score', sa.Numeric(precision=5, scale=2), nullable=True),
    sa.Column('reviewer_notes', sa.Text(), nullable=True),
    sa.Column('revision_requests', postgresql.ARRAY(sa.String()), nullable=True),
    sa.Column('reviewed_at', sa.DateTime(), nullable=True),
    sa.Column('approved_at', sa.DateTime(), nullable=True),
    sa.Column('human_review_time_minutes', sa.Numeric(precision=8, scale=2), nullable=True),
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.Column('updated_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['brief_id'], ['content_briefs.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_generated_content_brief_id'), 'generated_content', ['brief_id'], unique=False)
    op.create_index(op.f('ix_generated_content_client_id'), 'generated_content', ['client_id'], unique=False)
    op.create_index(op.f('ix_generated_content_status'), 'generated_content', ['status'], unique=False)

    op.create_table('content_quality_analysis',
    sa.Column('content_id', sa.UUID(), nullable=False),
    sa.Column('overall_score', sa.Numeric(precision=5, scale=2), nullable=False),
    sa.Column('seo_score', sa.Numeric(precision=5, scale=2), nullable=False),
    sa.Column('readability_score', sa.Numeric(precision=5, scale=2), nullable=False),
    sa.Column('authority_score', sa.Numeric(precision=5, scale=2), nullable=False),
    sa.Column('engagement_score', sa.Numeric(precision=5, scale=2), nullable=False),
    sa.Column('aeo_score', sa.Numeric(precision=5, scale=2), nullable=False),
    sa.Column('detailed_feedback', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['content_id'], ['generated_content.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_content_quality_analysis_content_id'), 'content_quality_analysis', ['content_id'], unique=False)

    op.create_table('ai_usage_tracking',
    sa.Column('client_id', sa.UUID(), nullable=True),
    sa.Column('provider', sa.String(), nullable=False),
    sa.Column('model', sa.String(), nullable=False),
    sa.Column('operation', sa.String(), nullable=False),
    sa.Column('input_tokens', sa.Integer(), nullable=False),
    sa.Column('output_tokens', sa.Integer(), nullable=False),
    sa.Column('estimated_cost_usd', sa.Numeric(precision=10, scale=6), nullable=False),
    sa.Column('brief_id', sa.UUID(), nullable=True),
    sa.Column('content_id', sa.UUID(), nullable=True),
    sa.Column('id', sa.UUID(), nullable=False),
    sa.Column('created_at', sa.DateTime(), nullable=False),
    sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['brief_id'], ['content_briefs.id'], ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['content_id'], ['generated_content.id'], ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_ai_usage_tracking_client_id'), 'ai_usage_tracking', ['client_id'], unique=False)

    op.create_table('quality_score_cache',
    sa.Column('key', sa.String(), nullable=False),
    sa.Column('scores', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column('expires_at', sa.DateTime(), nullable=False),
    sa.PrimaryKeyConstraint('key')
    )
    op.create_index(op.f('ix_quality_score_cache_expires_at'), 'quality_score_cache', ['expires_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_quality_score_cache_expires_at'), table_name='quality_score_cache')
    op.drop_table('quality_score_cache')
    op.drop_index(op.f('ix_ai_usage_tracking_client_id'), table_name='ai_usage_tracking')
    op.drop_table('ai_usage_tracking')
    op.drop_index(op.f('ix_content_quality_analysis_content_id'), table_name='content_quality_analysis')
    op.drop_table('content_quality_analysis')
    op.drop_index(op.f('ix_generated_content_status'), table_name='generated_content')
    op.drop_index(op.f('ix_generated_content_client_id'), table_name='generated_content')
    op.drop_index(op.f('ix_generated_content_brief_id'), table_name='generated_content')
    op.drop_table('generated_content')
    op.drop_index(op.f('ix_content_briefs_status'), table_name='content_briefs')
    op.drop_index(op.f('ix_content_briefs_client_id'), table_name='content_briefs')
    op.drop_table('content_briefs')
    op.drop_index(op.f('ix_ai_citations_client_id'), table_name='ai_citations')
    op.drop_table('ai_citations')
    op.drop_index(op.f('ix_competitive_analysis_expires_at'), table_name='competitive_analysis')
    op.drop_index(op.f('ix_competitive_analysis_client_id'), table_name='competitive_analysis')
    op.drop_table('competitive_analysis')
    op.drop_table('clients')
    sa.Enum(name='brief_status').drop(op.get_bind(), checkfirst=True)
