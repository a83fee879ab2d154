"""create_store_tables

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-19 10:12:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ORDER_STATUSES = (
    'pending', 'confirmed', 'processing', 'shipped', 'delivered', 'cancelled'
)
ANALYTICS_EVENT_TYPES = (
    'page_view', 'product_view', 'add_to_cart', 'remove_from_cart',
    'begin_checkout', 'purchase_intent', 'purchase', 'search', 'custom_event',
)


def upgrade() -> None:
    """Upgrade schema - Create catalog, cart, order, counter and analytics tables."""

    # Catalog
    op.create_table(
        'store_products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('original_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('category', sa.String(length=100), server_default='General', nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('stock', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('variant_options', sa.JSON(), nullable=True),
        sa.Column('specifications', sa.JSON(), nullable=True),
        sa.Column('rating', sa.Float(), server_default='0', nullable=False),
        sa.Column('num_reviews', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_store_products'),
    )
    op.create_index('ix_store_products_category', 'store_products', ['category'])

    # Carts
    op.create_table(
        'store_carts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_store_carts'),
        sa.UniqueConstraint('user_id', name='uq_store_carts_user_id'),
    )
    op.create_table(
        'store_cart_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('cart_id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('selected_options', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['cart_id'], ['store_carts.id'],
            name='fk_store_cart_items_cart_id_store_carts', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['product_id'], ['store_products.id'],
            name='fk_store_cart_items_product_id_store_products', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_store_cart_items'),
        sa.UniqueConstraint('cart_id', 'product_id', name='unique_cart_product'),
        sa.CheckConstraint('quantity > 0', name='ck_store_cart_items_positive_quantity'),
    )

    # Orders
    op.create_table(
        'store_orders',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_number', sa.String(length=20), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=True),
        sa.Column('is_guest', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('guest_email', sa.String(length=255), nullable=True),
        sa.Column('guest_name', sa.String(length=255), nullable=True),
        sa.Column('shipping_address', sa.JSON(), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=False),
        sa.Column('items_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('shipping_price', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('tax_price', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('total_price', sa.Numeric(12, 2), nullable=False),
        sa.Column(
            'order_status',
            sa.Enum(*ORDER_STATUSES, name='store_order_status_enum'),
            server_default='pending',
            nullable=False,
        ),
        sa.Column('tracking_number', sa.String(length=100), nullable=True),
        sa.Column('is_paid', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_delivered', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('delivered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_store_orders'),
        sa.CheckConstraint(
            '(is_guest AND user_id IS NULL AND guest_email IS NOT NULL '
            'AND guest_name IS NOT NULL) OR (NOT is_guest AND user_id IS NOT NULL)',
            name='ck_store_orders_order_one_owner',
        ),
    )
    op.create_index(
        'ix_store_orders_order_number', 'store_orders', ['order_number'], unique=True
    )
    op.create_index('ix_store_orders_user_id', 'store_orders', ['user_id'])
    op.create_index('ix_store_orders_guest_email', 'store_orders', ['guest_email'])
    op.create_index('ix_store_orders_order_status', 'store_orders', ['order_status'])
    op.create_index(
        'ix_store_orders_user_id_created_at', 'store_orders', ['user_id', 'created_at']
    )

    op.create_table(
        'store_order_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('order_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.String(length=64), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('selected_options', sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(
            ['order_id'], ['store_orders.id'],
            name='fk_store_order_items_order_id_store_orders', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_store_order_items'),
        sa.CheckConstraint('quantity > 0', name='ck_store_order_items_positive_quantity'),
    )

    # Counters (order numbers)
    op.create_table(
        'store_counters',
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('value', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('name', name='pk_store_counters'),
    )

    # Analytics
    op.create_table(
        'store_analytics_events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column(
            'event_type',
            sa.Enum(*ANALYTICS_EVENT_TYPES, name='store_analytics_event_type_enum'),
            nullable=False,
        ),
        sa.Column('user_id', sa.String(length=255), server_default='anonymous', nullable=False),
        sa.Column('session_id', sa.String(length=255), nullable=True),
        sa.Column('product_id', sa.String(length=64), nullable=True),
        sa.Column('order_id', sa.String(length=64), nullable=True),
        sa.Column('page_url', sa.String(length=1024), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_store_analytics_events'),
    )
    op.create_index(
        'ix_store_analytics_events_type_created',
        'store_analytics_events',
        ['event_type', 'created_at'],
    )
    op.create_index(
        'ix_store_analytics_events_user_created',
        'store_analytics_events',
        ['user_id', 'created_at'],
    )


def downgrade() -> None:
    """Downgrade schema - Drop store tables."""
    op.drop_table('store_analytics_events')
    op.drop_table('store_counters')
    op.drop_table('store_order_items')
    op.drop_table('store_orders')
    op.drop_table('store_cart_items')
    op.drop_table('store_carts')
    op.drop_table('store_products')
    sa.Enum(name='store_analytics_event_type_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='store_order_status_enum').drop(op.get_bind(), checkfirst=True)
