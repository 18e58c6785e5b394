"""create users and clients tables

Revision ID: 3f9a1c2b7d4e
Revises:
Create Date: 2026-10-19 12:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d4e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum('admin', 'user', name='roletype'), nullable=False),
        sa.Column('provider', sa.String(length=50), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('store_front_name', sa.String(length=255), nullable=False),
        sa.Column('cnpj', sa.String(length=20), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('cep', sa.String(length=9), nullable=False),
        sa.Column('street', sa.String(length=255), nullable=False),
        sa.Column('neighborhood', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=255), nullable=False),
        sa.Column('state', sa.String(length=2), nullable=False),
        sa.Column('number', sa.String(length=20), nullable=False),
        sa.Column('complement', sa.String(length=255), nullable=True),
        sa.Column('status', sa.Enum('Ativo', 'Inativo', 'Pendente', name='clientstatus'), nullable=False),
        sa.Column('phone', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('contact_person', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column(
            'assigned_user_id',
            sa.Integer(),
            sa.ForeignKey('users.id', name='fk_client_assigned_user', ondelete='SET NULL'),
            nullable=True,
        ),
    )
    op.create_index('ix_clients_id', 'clients', ['id'])
    op.create_index('ix_clients_cnpj', 'clients', ['cnpj'], unique=True)
    op.create_index('ix_clients_assigned_user_id', 'clients', ['assigned_user_id'])


def downgrade() -> None:
    op.drop_index('ix_clients_assigned_user_id', table_name='clients')
    op.drop_index('ix_clients_cnpj', table_name='clients')
    op.drop_index('ix_clients_id', table_name='clients')
    op.drop_table('clients')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
    sa.Enum(name='clientstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='roletype').drop(op.get_bind(), checkfirst=True)
