"""create email_templates

Revision ID: c3d8f1a2b6e4
Revises: 7b2e4c9d1a3f
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = 'c3d8f1a2b6e4'
down_revision = '7b2e4c9d1a3f'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'email_templates',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('subject', sa.String(500), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('action', sa.String(100), nullable=True),
        sa.Column('recipient', sa.String(255), nullable=False, server_default=''),
        sa.Column('sender', sa.String(255), nullable=False, server_default=''),
        sa.Column('cc', sa.String(500), nullable=True),
        sa.Column('bcc', sa.String(500), nullable=True),
        sa.Column('company', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('email_templates')
