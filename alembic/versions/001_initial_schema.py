"""Initial schema: users, APARs, inspections and checklist items

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='petugas'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_users')
    )
    op.create_index('ix_users_id', 'users', ['id'], unique=False)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Create apars table
    op.create_table(
        'apars',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('number', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('capacity', sa.String(255), nullable=False),
        sa.Column('fill_date', sa.Date(), nullable=False),
        sa.Column('expiry_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('expiry_date > fill_date', name='ck_apars_expiry_after_fill'),
        sa.PrimaryKeyConstraint('id', name='pk_apars')
    )
    op.create_index('ix_apars_id', 'apars', ['id'], unique=False)
    op.create_index('ix_apars_number', 'apars', ['number'], unique=True)

    # Create inspections table
    op.create_table(
        'inspections',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('apar_id', sa.Integer(), nullable=False),
        sa.Column('inspector_id', sa.Integer(), nullable=False),
        sa.Column('inspection_date', sa.Date(), nullable=False),
        sa.Column('digital_signature', sa.Text(), nullable=True),
        sa.Column('overall_status', sa.String(20), nullable=False, server_default='good'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['apar_id'], ['apars.id'],
            name='fk_inspections_apar_id_apars', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['inspector_id'], ['users.id'],
            name='fk_inspections_inspector_id_users', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_inspections')
    )
    op.create_index('ix_inspections_id', 'inspections', ['id'], unique=False)
    op.create_index('ix_inspections_apar_id', 'inspections', ['apar_id'], unique=False)
    op.create_index('ix_inspections_inspector_id', 'inspections', ['inspector_id'], unique=False)
    op.create_index('ix_inspections_inspection_date', 'inspections', ['inspection_date'], unique=False)
    op.create_index('ix_inspections_apar_date', 'inspections', ['apar_id', 'inspection_date'], unique=False)

    # Create inspection_items table
    op.create_table(
        'inspection_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('inspection_id', sa.Integer(), nullable=False),
        sa.Column('item_type', sa.String(20), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='good'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ['inspection_id'], ['inspections.id'],
            name='fk_inspection_items_inspection_id_inspections', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_inspection_items')
    )
    op.create_index('ix_inspection_items_id', 'inspection_items', ['id'], unique=False)
    op.create_index('ix_inspection_items_inspection_id', 'inspection_items', ['inspection_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_inspection_items_inspection_id', table_name='inspection_items')
    op.drop_index('ix_inspection_items_id', table_name='inspection_items')
    op.drop_table('inspection_items')

    op.drop_index('ix_inspections_apar_date', table_name='inspections')
    op.drop_index('ix_inspections_inspection_date', table_name='inspections')
    op.drop_index('ix_inspections_inspector_id', table_name='inspections')
    op.drop_index('ix_inspections_apar_id', table_name='inspections')
    op.drop_index('ix_inspections_id', table_name='inspections')
    op.drop_table('inspections')

    op.drop_index('ix_apars_number', table_name='apars')
    op.drop_index('ix_apars_id', table_name='apars')
    op.drop_table('apars')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
