"""create_products_and_carts

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-16 10:02:41.118305

"""
from alembic import op
import sqlalchemy as sa


revision = '3f1a9c2d7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'products',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=512), nullable=True),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_products_slug'), 'products', ['slug'], unique=True)

    op.create_table(
        'carts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('session_cart_id', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('items_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('shipping_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('tax_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_carts_session_cart_id'), 'carts', ['session_cart_id'], unique=False)
    op.create_index(op.f('ix_carts_user_id'), 'carts', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_carts_user_id'), table_name='carts')
    op.drop_index(op.f('ix_carts_session_cart_id'), table_name='carts')
    op.drop_table('carts')
    op.drop_index(op.f('ix_products_slug'), table_name='products')
    op.drop_table('products')
