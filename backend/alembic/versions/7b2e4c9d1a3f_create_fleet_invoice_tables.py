"""create trucks, vendors and invoices

Revision ID: 7b2e4c9d1a3f
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '7b2e4c9d1a3f'
down_revision = None
branch_labels = None
depends_on = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text('gen_random_uuid()')),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
    ]


def upgrade() -> None:
    op.create_table(
        'trucks',
        *_base_columns(),
        sa.Column('truck_eid', sa.String(100), nullable=False),
        sa.Column('make', sa.String(100), nullable=False),
        sa.Column('model', sa.String(100), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('body_type', sa.String(100), nullable=False),
        sa.Column('vin', sa.String(17), nullable=False),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default='false'),
    )
    op.create_index('ix_trucks_truck_eid', 'trucks', ['truck_eid'], unique=True)
    op.create_index('ix_trucks_vin', 'trucks', ['vin'])

    op.create_table(
        'vendors',
        *_base_columns(),
        sa.Column('vendor_eid', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False, server_default=''),
        sa.Column('city', sa.String(100), nullable=False, server_default=''),
        sa.Column('state', sa.String(50), nullable=False, server_default=''),
        sa.Column('zip_code', sa.String(20), nullable=False, server_default=''),
        sa.Column('phone', sa.String(50), nullable=False, server_default=''),
        sa.Column('is_archived', sa.Boolean(), nullable=False, server_default='false'),
    )
    op.create_index('ix_vendors_vendor_eid', 'vendors', ['vendor_eid'], unique=True)
    op.create_index('ix_vendors_name', 'vendors', ['name'])

    op.create_table(
        'invoices',
        *_base_columns(),
        sa.Column('invoice_eid', sa.String(100), nullable=False),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('vendors.id'), nullable=False),
        sa.Column('truck_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('trucks.id'), nullable=False),
        sa.Column('date_issued', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_amount', sa.Numeric(18, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(50), nullable=False, server_default='need_action'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column('analysis', sa.JSON(), nullable=True),
    )
    op.create_index('ix_invoices_invoice_eid', 'invoices', ['invoice_eid'], unique=True)
    op.create_index('ix_invoices_vendor_id', 'invoices', ['vendor_id'])
    op.create_index('ix_invoices_truck_id', 'invoices', ['truck_id'])
    op.create_index('ix_invoices_status', 'invoices', ['status'])
    op.create_index('ix_invoices_created_at', 'invoices', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_invoices_created_at', table_name='invoices')
    op.drop_index('ix_invoices_status', table_name='invoices')
    op.drop_index('ix_invoices_truck_id', table_name='invoices')
    op.drop_index('ix_invoices_vendor_id', table_name='invoices')
    op.drop_index('ix_invoices_invoice_eid', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('ix_vendors_name', table_name='vendors')
    op.drop_index('ix_vendors_vendor_eid', table_name='vendors')
    op.drop_table('vendors')
    op.drop_index('ix_trucks_vin', table_name='trucks')
    op.drop_index('ix_trucks_truck_eid', table_name='trucks')
    op.drop_table('trucks')
