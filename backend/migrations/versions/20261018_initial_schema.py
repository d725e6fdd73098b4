"""Initial schema: customers, orders, expenses, users and the product group tables

Revision ID: 20261018_initial
Revises:
Create Date: 2026-10-18

Creates:
1. One products_* table per product group (identical columns)
2. customers
3. orders and order_items (order_items.product_id is not a foreign key: it
   may point into any product table)
4. expenses
5. admins and managed_users
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261018_initial'
down_revision = None
branch_labels = None
depends_on = None


# Frozen copy of the group -> table mapping at this revision
PRODUCT_TABLES = (
    'products_bdr', 'products_la', 'products_ag', 'products_ab_cyr', 'products_ar_cyr',
    'products_bez_sokr', 'products_af', 'products_ds', 'products_m8', 'products_jda',
    'products_faith', 'products_ab_lat', 'products_gf', 'products_es', 'products_gp',
    'products_sd', 'products_ata', 'products_w',
)


def upgrade():
    # ==========================================================================
    # 1. PRODUCT GROUP TABLES
    # ==========================================================================
    for table_name in PRODUCT_TABLES:
        op.create_table(table_name,
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('price', sa.Float(), nullable=False),
            sa.Column('salon_price', sa.Float(), nullable=True),
            sa.Column('exchange_rate', sa.Float(), nullable=True),
            sa.Column('quantity', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        with op.batch_alter_table(table_name, schema=None) as batch_op:
            batch_op.create_index(f'ix_{table_name}_name', ['name'], unique=False)

    # ==========================================================================
    # 2. CUSTOMERS
    # ==========================================================================
    op.create_table('customers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=64), nullable=True),
        sa.Column('address_street', sa.String(length=255), nullable=True),
        sa.Column('address_city', sa.String(length=128), nullable=True),
        sa.Column('address_state', sa.String(length=128), nullable=True),
        sa.Column('address_zip', sa.String(length=32), nullable=True),
        sa.Column('address_country', sa.String(length=128), nullable=True),
        sa.Column('join_date', sa.Date(), server_default=sa.text('(CURRENT_DATE)'), nullable=False),
        sa.Column('instagram_handle', sa.String(length=128), nullable=True),
        sa.Column('viber_number', sa.String(length=64), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_customers_email'),
    )
    with op.batch_alter_table('customers', schema=None) as batch_op:
        batch_op.create_index('ix_customers_name', ['name'], unique=False)

    # ==========================================================================
    # 3. ORDERS AND ORDER ITEMS
    # ==========================================================================
    op.create_table('orders',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('managed_by_user_email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('orders', schema=None) as batch_op:
        batch_op.create_index('ix_orders_date', ['date'], unique=False)
        batch_op.create_index('ix_orders_customer_id', ['customer_id'], unique=False)
        batch_op.create_index('ix_orders_managed_by', ['managed_by_user_email'], unique=False)

    op.create_table('order_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('order_id', sa.String(length=36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=True),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('discount', sa.Float(), nullable=False),
        sa.Column('salon_price_usd', sa.Float(), nullable=True),
        sa.Column('exchange_rate', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('order_items', schema=None) as batch_op:
        batch_op.create_index('ix_order_items_order_id', ['order_id'], unique=False)
        batch_op.create_index('ix_order_items_product_id', ['product_id'], unique=False)

    # ==========================================================================
    # 4. EXPENSES
    # ==========================================================================
    op.create_table('expenses',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by_user_email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('expenses', schema=None) as batch_op:
        batch_op.create_index('ix_expenses_date', ['date'], unique=False)

    # ==========================================================================
    # 5. ADMINS AND MANAGED USERS
    # ==========================================================================
    op.create_table('admins',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('added_by', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_admins_email'),
    )

    op.create_table('managed_users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('added_by_admin_email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_managed_users_email'),
    )


def downgrade():
    op.drop_table('managed_users')
    op.drop_table('admins')

    with op.batch_alter_table('expenses', schema=None) as batch_op:
        batch_op.drop_index('ix_expenses_date')
    op.drop_table('expenses')

    with op.batch_alter_table('order_items', schema=None) as batch_op:
        batch_op.drop_index('ix_order_items_product_id')
        batch_op.drop_index('ix_order_items_order_id')
    op.drop_table('order_items')

    with op.batch_alter_table('orders', schema=None) as batch_op:
        batch_op.drop_index('ix_orders_managed_by')
        batch_op.drop_index('ix_orders_customer_id')
        batch_op.drop_index('ix_orders_date')
    op.drop_table('orders')

    with op.batch_alter_table('customers', schema=None) as batch_op:
        batch_op.drop_index('ix_customers_name')
    op.drop_table('customers')

    for table_name in reversed(PRODUCT_TABLES):
        with op.batch_alter_table(table_name, schema=None) as batch_op:
            batch_op.drop_index(f'ix_{table_name}_name')
        op.drop_table(table_name)
