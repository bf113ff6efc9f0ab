"""initial marketplace schema

Revision ID: 20261019_000001
Revises: 
Create Date: 2026-10-19 00:00:01
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '20261019_000001'
down_revision = None
branch_labels = None
depends_on = None

ENUMS = {
    'user_role': ('BUYER', 'SELLER', 'ADMIN'),
    'standard_time': ('3-5', '5-7', '7-9'),
    'express_time': ('0-1', '1-2', '2-3'),
    'admin_action_type': ('APPROVE_PRODUCT', 'REJECT_PRODUCT', 'APPROVE_STORE', 'REJECT_STORE', 'DEACTIVATE_USER'),
    'delivery_method': ('STANDARD', 'EXPRESS'),
    'seller_order_status': ('Processing', 'Packaging', 'Ready for Pickup', 'Shipped', 'Delivered', 'Cancelled'),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def upgrade() -> None:
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(op.get_bind(), checkfirst=True)

    op.create_table(
        'users',
        sa.Column('id', sa.String(length=255), primary_key=True),
        sa.Column('email', sa.String(length=320), nullable=True),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('role', _enum('user_role'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'stores',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('store_name', sa.Text(), nullable=False),
        sa.Column('standard_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('standard_time', _enum('standard_time'), nullable=False),
        sa.Column('express_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('express_time', _enum('express_time'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_stores_user_id', 'stores', ['user_id'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(length=2048), nullable=True),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('store_id', sa.Integer(), sa.ForeignKey('stores.id', ondelete='CASCADE'), nullable=False),
        sa.Column('store_name', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_products_category', 'products', ['category'])
    op.create_index('ix_products_user_id', 'products', ['user_id'])
    op.create_index('ix_products_store_id', 'products', ['store_id'])

    op.create_table(
        'cart_items',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('image', sa.String(length=2048), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'product_id', name='uq_cart_user_product'),
    )
    op.create_index('ix_cart_items_user_id', 'cart_items', ['user_id'])

    op.create_table(
        'admin_actions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('action_type', _enum('admin_action_type'), nullable=False),
        sa.Column('target_id', sa.String(length=255), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('admin_id', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_admin_actions_admin_id', 'admin_actions', ['admin_id'])

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('order_date', sa.DateTime(), nullable=False),
        sa.Column('grand_total', sa.Numeric(12, 2), nullable=False),
        sa.Column('pickup_area', sa.String(length=255), nullable=False),
        sa.Column('pickup_point', sa.String(length=255), nullable=False),
        sa.Column('payment_reference', sa.String(length=255), nullable=True),
    )
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])

    op.create_table(
        'seller_orders',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('store_id', sa.Integer(), sa.ForeignKey('stores.id', ondelete='SET NULL'), nullable=True),
        sa.Column('delivery_method', _enum('delivery_method'), nullable=False),
        sa.Column('delivery_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('delivery_time_estimate', sa.String(length=64), nullable=True),
        sa.Column('items_subtotal', sa.Numeric(12, 2), nullable=False),
        sa.Column('seller_total', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', _enum('seller_order_status'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_seller_orders_order_id', 'seller_orders', ['order_id'])
    op.create_index('ix_seller_orders_user_id', 'seller_orders', ['user_id'])

    op.create_table(
        'seller_order_items',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('seller_order_id', sa.Integer(), sa.ForeignKey('seller_orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='SET NULL'), nullable=True),
        sa.Column('quantity_ordered', sa.Integer(), nullable=False),
        sa.Column('price_per_unit', sa.Numeric(10, 2), nullable=False),
        sa.Column('product_name_snapshot', sa.String(length=255), nullable=True),
    )
    op.create_index('ix_seller_order_items_seller_order_id', 'seller_order_items', ['seller_order_id'])


def downgrade() -> None:
    op.drop_table('seller_order_items')
    op.drop_table('seller_orders')
    op.drop_table('orders')
    op.drop_table('admin_actions')
    op.drop_table('cart_items')
    op.drop_table('products')
    op.drop_table('stores')
    op.drop_table('users')

    for name, values in reversed(list(ENUMS.items())):
        postgresql.ENUM(*values, name=name).drop(op.get_bind(), checkfirst=True)
