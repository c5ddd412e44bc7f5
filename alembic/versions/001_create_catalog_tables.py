"""Create catalog tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create categories, subcategories, products, hero_slides and admins tables."""
    # Categories table
    op.create_table(
        'categories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False, index=True),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('product_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Subcategories table
    op.create_table(
        'subcategories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('category_id', sa.String(36),
                  sa.ForeignKey('categories.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
    )

    # One name per category; closes the add-subcategory race
    op.create_unique_constraint(
        'uq_subcategories_category_name',
        'subcategories',
        ['category_id', 'name'],
    )

    # Products table (category_id is a plain reference, no foreign key)
    op.create_table(
        'products',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category_id', sa.String(36), nullable=False, index=True),
        sa.Column('subcategory', sa.String(200), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('cost_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('unit', sa.String(50), nullable=False, server_default='kg'),
        sa.Column('default_quantity', sa.String(50), nullable=False, server_default='1'),
        sa.Column('custom_quantity_options', sa.JSON(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('display_in_latest', sa.Boolean(), nullable=False, server_default='false', index=True),
        sa.Column('display_in_best_selling', sa.Boolean(), nullable=False, server_default='false', index=True),
        sa.Column('on_sale', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('sale_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'), index=True),
    )

    # Hero slides table
    op.create_table(
        'hero_slides',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(300), nullable=False),
        sa.Column('subtitle', sa.String(500), nullable=True),
        sa.Column('image_url', sa.String(1000), nullable=False),
        sa.Column('link', sa.String(1000), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    # Admins table
    op.create_table(
        'admins',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('admins')
    op.drop_table('hero_slides')
    op.drop_table('products')
    op.drop_constraint('uq_subcategories_category_name', 'subcategories', type_='unique')
    op.drop_table('subcategories')
    op.drop_table('categories')
