"""add_reviews_and_customer_directory

Revision ID: 8c1e4b2d9a57
Revises: 3f2a9c1d7b40
Create Date: 2026-10-19 16:40:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c1e4b2d9a57'
down_revision: Union[str, Sequence[str], None] = '3f2a9c1d7b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ADDRESS_TYPES = ('home', 'work', 'other')
PAYMENT_METHOD_TYPES = ('card', 'bank', 'wallet')


def upgrade() -> None:
    """Upgrade schema - Reviews, saved addresses, saved payment methods."""

    op.create_table(
        'store_reviews',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=255), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column('helpful', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['product_id'], ['store_products.id'],
            name='fk_store_reviews_product_id_store_products', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_store_reviews'),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_store_reviews_rating_range'),
    )
    op.create_index(
        'ix_store_reviews_product_id_created_at',
        'store_reviews',
        ['product_id', 'created_at'],
    )

    op.create_table(
        'store_addresses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column(
            'type',
            sa.Enum(*ADDRESS_TYPES, name='store_address_type_enum'),
            server_default='home',
            nullable=False,
        ),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=100), nullable=False),
        sa.Column('postal_code', sa.String(length=20), nullable=True),
        sa.Column('country', sa.String(length=100), server_default='Pakistan', nullable=False),
        sa.Column('landmark', sa.String(length=255), nullable=True),
        sa.Column('is_default', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_store_addresses'),
    )
    op.create_index('ix_store_addresses_user_id', 'store_addresses', ['user_id'])
    op.create_index(
        'uq_store_addresses_user_default',
        'store_addresses',
        ['user_id'],
        unique=True,
        postgresql_where=sa.text('is_default'),
        sqlite_where=sa.text('is_default'),
    )

    op.create_table(
        'store_payment_methods',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column(
            'method_type',
            sa.Enum(*PAYMENT_METHOD_TYPES, name='store_payment_method_type_enum'),
            nullable=False,
        ),
        sa.Column('card', sa.JSON(), nullable=True),
        sa.Column('bank', sa.JSON(), nullable=True),
        sa.Column('wallet', sa.String(length=20), nullable=True),
        sa.Column('is_default', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_store_payment_methods'),
    )
    op.create_index(
        'ix_store_payment_methods_user_id', 'store_payment_methods', ['user_id']
    )
    op.create_index(
        'uq_store_payment_methods_user_default',
        'store_payment_methods',
        ['user_id'],
        unique=True,
        postgresql_where=sa.text('is_default'),
        sqlite_where=sa.text('is_default'),
    )


def downgrade() -> None:
    """Downgrade schema - Drop reviews and customer directory tables."""
    op.drop_table('store_payment_methods')
    op.drop_table('store_addresses')
    op.drop_table('store_reviews')
    sa.Enum(name='store_payment_method_type_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='store_address_type_enum').drop(op.get_bind(), checkfirst=True)
