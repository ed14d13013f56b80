"""Create catalog, favorites and promo code tables

Revision ID: s001_create_storefront
Revises:
Create Date: 2026-01-12

This migration creates the storefront tables:
- categories, products: catalog
- favorites: per-user favorite products
- promo_codes, promo_code_assignments: promo codes and their product/category scope
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 's001_create_storefront'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Catalog
    op.create_table(
        'categories',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('category_id', sa.String(), sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('category', sa.String(100), nullable=True),  # Legacy free-text category
        sa.Column('brand', sa.String(100), nullable=True),
        sa.Column('product_type', sa.String(50), nullable=True),
        sa.Column('images', sa.JSON(), nullable=True),

        # Pricing
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('list_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('count_in_stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('avg_rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('num_reviews', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('variations', sa.Text(), nullable=True),  # JSON text

        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_index('ix_products_slug', 'products', ['slug'], unique=True)
    op.create_index('ix_products_category_id', 'products', ['category_id'])

    # Favorites
    op.create_table(
        'favorites',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),  # No FK - users live in the auth service
        sa.Column('product_id', sa.String(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_favorites_user_product'),
    )
    op.create_index('ix_favorites_user_id', 'favorites', ['user_id'])
    op.create_index('ix_favorites_product_id', 'favorites', ['product_id'])

    # Promo codes
    op.create_table(
        'promo_codes',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('discount_percent', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('usage_limit', sa.Integer(), nullable=True),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_index('ix_promo_codes_code', 'promo_codes', ['code'], unique=True)
    op.create_check_constraint(
        'ck_promo_codes_discount_percent_range',
        'promo_codes',
        "discount_percent >= 1 AND discount_percent <= 100"
    )
    op.create_check_constraint(
        'ck_promo_codes_usage_within_limit',
        'promo_codes',
        "usage_limit IS NULL OR usage_count <= usage_limit"
    )

    op.create_table(
        'promo_code_assignments',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('promo_code_id', sa.String(), sa.ForeignKey('promo_codes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('target_type', sa.String(20), nullable=False),
        sa.Column('product_id', sa.String(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=True),
        sa.Column('category_id', sa.String(), sa.ForeignKey('categories.id', ondelete='CASCADE'), nullable=True),
        sa.Column('category_name', sa.String(100), nullable=True),
        sa.Column('max_discount_amount', sa.Numeric(10, 2), nullable=True),
        sa.Column('variation_names', sa.JSON(), nullable=True),
    )
    op.create_check_constraint(
        'ck_promo_code_assignments_single_scope',
        'promo_code_assignments',
        "(target_type = 'product' AND product_id IS NOT NULL"
        " AND category_id IS NULL AND category_name IS NULL)"
        " OR (target_type = 'category' AND product_id IS NULL"
        " AND (category_id IS NOT NULL OR category_name IS NOT NULL))"
    )
    op.create_index('ix_promo_code_assignments_promo_code_id', 'promo_code_assignments', ['promo_code_id'])
    op.create_index('ix_promo_code_assignments_product_id', 'promo_code_assignments', ['product_id'])
    op.create_index('ix_promo_code_assignments_category_id', 'promo_code_assignments', ['category_id'])


def downgrade() -> None:
    op.drop_table('promo_code_assignments')
    op.drop_table('promo_codes')
    op.drop_table('favorites')
    op.drop_table('products')
    op.drop_table('categories')
