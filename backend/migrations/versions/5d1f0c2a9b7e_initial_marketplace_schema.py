"""initial marketplace schema

Revision ID: 5d1f0c2a9b7e
Revises:
Create Date: 2026-09-02 10:12:44.318201

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5d1f0c2a9b7e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

company_status = sa.Enum('pending', 'published', 'archived', name='company_status')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'advisors',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('firm_name', sa.String(length=200), nullable=False),
        sa.Column('team_lead', sa.String(length=200), nullable=False),
        sa.Column('headshot_url', sa.String(), nullable=True),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('suburb', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('postcode', sa.String(length=20), nullable=True),
        sa.Column('country', sa.String(), nullable=False),
        sa.Column('website_url', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('specialties', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_advisors_status'), 'advisors', ['status'], unique=False)

    op.create_table(
        'companies',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('sector', sa.String(), nullable=False),
        sa.Column('industry', sa.String(), nullable=True),
        sa.Column('sub_industry', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('logo_url', sa.String(), nullable=True),
        sa.Column('website_url', sa.String(), nullable=True),
        sa.Column('email', sa.String(length=320), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('street', sa.String(), nullable=True),
        sa.Column('suburb', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('postcode', sa.String(length=20), nullable=True),
        sa.Column('country', sa.String(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('amount_seeking', sa.String(), nullable=True),
        sa.Column('raising_reason', sa.Text(), nullable=True),
        sa.Column('properties', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('project_photos', sa.JSON(), nullable=False),
        sa.Column('additional_sections', sa.JSON(), nullable=False),
        sa.Column('status', company_status, nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('advisor_id', sa.String(length=36), nullable=True),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['advisor_id'], ['advisors.id'], ),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_companies_slug'), 'companies', ['slug'], unique=True)
    op.create_index(op.f('ix_companies_sector'), 'companies', ['sector'], unique=False)
    op.create_index(op.f('ix_companies_state'), 'companies', ['state'], unique=False)
    op.create_index(op.f('ix_companies_status'), 'companies', ['status'], unique=False)
    op.create_index(op.f('ix_companies_advisor_id'), 'companies', ['advisor_id'], unique=False)
    op.create_index(op.f('ix_companies_created_by'), 'companies', ['created_by'], unique=False)

    op.create_table(
        'listings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=140), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=True),
        sa.Column('address', sa.String(), nullable=False),
        sa.Column('suburb', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('postcode', sa.String(length=20), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('additional_sections', sa.JSON(), nullable=False),
        sa.Column('company_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_listings_slug'), 'listings', ['slug'], unique=True)
    op.create_index(op.f('ix_listings_company_id'), 'listings', ['company_id'], unique=False)

    op.create_table(
        'saved_listings',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('company_id', sa.String(length=36), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'company_id', name='uq_saved_listing_user_company'),
    )
    op.create_index(op.f('ix_saved_listings_user_id'), 'saved_listings', ['user_id'], unique=False)
    op.create_index(op.f('ix_saved_listings_company_id'), 'saved_listings', ['company_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_saved_listings_company_id'), table_name='saved_listings')
    op.drop_index(op.f('ix_saved_listings_user_id'), table_name='saved_listings')
    op.drop_table('saved_listings')
    op.drop_index(op.f('ix_listings_company_id'), table_name='listings')
    op.drop_index(op.f('ix_listings_slug'), table_name='listings')
    op.drop_table('listings')
    op.drop_index(op.f('ix_companies_created_by'), table_name='companies')
    op.drop_index(op.f('ix_companies_advisor_id'), table_name='companies')
    op.drop_index(op.f('ix_companies_status'), table_name='companies')
    op.drop_index(op.f('ix_companies_state'), table_name='companies')
    op.drop_index(op.f('ix_companies_sector'), table_name='companies')
    op.drop_index(op.f('ix_companies_slug'), table_name='companies')
    op.drop_table('companies')
    company_status.drop(op.get_bind(), checkfirst=True)
    op.drop_index(op.f('ix_advisors_status'), table_name='advisors')
    op.drop_table('advisors')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
