"""Create leasing schema

Revision ID: 20261017_000001
Revises: None
Create Date: 2026-10-17

Creates properties, units, bedrooms, users, leases, invoices, the invoice
number counter and the transactions ledger, plus the partial unique indexes
that allow at most one Active lease per bedroom and one Active full-unit
lease per unit.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261017_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_BEDROOM_WHERE = "status = 'Active' AND bedroom_id IS NOT NULL"
ACTIVE_FULL_UNIT_WHERE = "status = 'Active' AND bedroom_id IS NULL"


def _partial(where: str) -> dict:
    clause = sa.text(where)
    return {"sqlite_where": clause, "postgresql_where": clause, "mssql_where": clause}


def upgrade() -> None:
    """Create all leasing tables."""
    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='Active'),
        sa.Column('street', sa.String(length=255), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('postal_code', sa.String(length=20), nullable=True),
        sa.Column('country', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_properties'),
    )

    op.create_table(
        'units',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('unit_number', sa.String(length=50), nullable=False),
        sa.Column('unit_type', sa.String(length=100), nullable=True),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column(
            'rental_mode',
            sa.Enum('FULL_UNIT', 'BEDROOM_WISE', name='rental_mode', create_constraint=True),
            nullable=False,
            server_default='FULL_UNIT'
        ),
        sa.Column(
            'status',
            sa.Enum('Vacant', 'Occupied', 'Fully Booked', name='unit_status', create_constraint=True),
            nullable=False,
            server_default='Vacant'
        ),
        sa.Column('bedroom_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_units'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_units_property_id'),
    )
    op.create_index('ix_units_property_id', 'units', ['property_id'])
    op.create_index('ix_units_status', 'units', ['status'])

    op.create_table(
        'bedrooms',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('bedroom_number', sa.String(length=50), nullable=False),
        sa.Column('room_number', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('Vacant', 'Occupied', name='bedroom_status', create_constraint=True),
            nullable=False,
            server_default='Vacant'
        ),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id', name='pk_bedrooms'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_bedrooms_unit_id'),
    )
    op.create_index('ix_bedrooms_unit_id', 'bedrooms', ['unit_id'])

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column(
            'role',
            sa.Enum('ADMIN', 'OWNER', 'TENANT', name='user_role', create_constraint=True),
            nullable=False,
            server_default='TENANT'
        ),
        sa.Column('building_id', sa.Integer(), nullable=True),
        sa.Column('unit_id', sa.Integer(), nullable=True),
        sa.Column('bedroom_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.ForeignKeyConstraint(['building_id'], ['properties.id'], name='fk_users_building_id', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_users_unit_id', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['bedroom_id'], ['bedrooms.id'], name='fk_users_bedroom_id', ondelete='SET NULL'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'leases',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('bedroom_id', sa.Integer(), nullable=True),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('DRAFT', 'Active', 'MOVED', name='lease_status', create_constraint=True),
            nullable=False,
            server_default='DRAFT'
        ),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('monthly_rent', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('security_deposit', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_leases'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_leases_unit_id'),
        sa.ForeignKeyConstraint(['bedroom_id'], ['bedrooms.id'], name='fk_leases_bedroom_id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id'], name='fk_leases_tenant_id'),
    )
    op.create_index('ix_leases_unit_id', 'leases', ['unit_id'])
    op.create_index('ix_leases_bedroom_id', 'leases', ['bedroom_id'])
    op.create_index('ix_leases_tenant_id', 'leases', ['tenant_id'])
    op.create_index('ix_leases_status', 'leases', ['status'])
    op.create_index(
        'uq_leases_active_bedroom', 'leases', ['bedroom_id'], unique=True, **_partial(ACTIVE_BEDROOM_WHERE)
    )
    op.create_index(
        'uq_leases_active_full_unit', 'leases', ['unit_id'], unique=True, **_partial(ACTIVE_FULL_UNIT_WHERE)
    )

    op.create_table(
        'invoices',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('invoice_no', sa.String(length=50), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('lease_id', sa.Integer(), nullable=True),
        sa.Column('month', sa.String(length=30), nullable=False),
        sa.Column('rent', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('service_fees', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('paid_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('balance_due', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column(
            'status',
            sa.Enum('draft', 'sent', 'paid', 'overdue', name='invoice_status', create_constraint=True),
            nullable=False,
            server_default='sent'
        ),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_invoices'),
        sa.UniqueConstraint('invoice_no', name='uq_invoices_invoice_no'),
        sa.UniqueConstraint('tenant_id', 'unit_id', 'month', name='uq_invoices_tenant_unit_month'),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id'], name='fk_invoices_tenant_id'),
        sa.ForeignKeyConstraint(['unit_id'], ['units.id'], name='fk_invoices_unit_id'),
        sa.ForeignKeyConstraint(['lease_id'], ['leases.id'], name='fk_invoices_lease_id', ondelete='SET NULL'),
    )
    op.create_index('ix_invoices_tenant_id', 'invoices', ['tenant_id'])
    op.create_index('ix_invoices_unit_id', 'invoices', ['unit_id'])
    op.create_index('ix_invoices_lease_id', 'invoices', ['lease_id'])
    op.create_index('ix_invoices_status', 'invoices', ['status'])
    op.create_index('ix_invoices_due_date', 'invoices', ['due_date'])

    op.create_table(
        'invoice_sequences',
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('last_value', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('name', name='pk_invoice_sequences'),
    )

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('date', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column(
            'type',
            sa.Enum('Income', 'Expense', 'Liability', name='transaction_type', create_constraint=True),
            nullable=False
        ),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('balance', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='Completed'),
        sa.Column('lease_id', sa.Integer(), nullable=True),
        sa.Column('invoice_id', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_transactions'),
        sa.ForeignKeyConstraint(['lease_id'], ['leases.id'], name='fk_transactions_lease_id', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(
            ['invoice_id'], ['invoices.id'], name='fk_transactions_invoice_id', ondelete='SET NULL'
        ),
    )
    op.create_index('ix_transactions_lease_id', 'transactions', ['lease_id'])


def downgrade() -> None:
    """Drop all leasing tables."""
    op.drop_index('ix_transactions_lease_id', table_name='transactions')
    op.drop_table('transactions')
    op.drop_table('invoice_sequences')

    for index in ('ix_invoices_due_date', 'ix_invoices_status', 'ix_invoices_lease_id',
                  'ix_invoices_unit_id', 'ix_invoices_tenant_id'):
        op.drop_index(index, table_name='invoices')
    op.drop_table('invoices')

    for index in ('uq_leases_active_full_unit', 'uq_leases_active_bedroom', 'ix_leases_status',
                  'ix_leases_tenant_id', 'ix_leases_bedroom_id', 'ix_leases_unit_id'):
        op.drop_index(index, table_name='leases')
    op.drop_table('leases')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.drop_index('ix_bedrooms_unit_id', table_name='bedrooms')
    op.drop_table('bedrooms')
    op.drop_index('ix_units_status', table_name='units')
    op.drop_index('ix_units_property_id', table_name='units')
    op.drop_table('units')
    op.drop_table('properties')
