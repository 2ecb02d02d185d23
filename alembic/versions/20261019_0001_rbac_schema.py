"""RBAC registry schema - routes, roles, rbac

Revision ID: 0001
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Routes table; (method, path, service) is the reconciliation key
    op.create_table(
        'routes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('method', sa.String(10), nullable=False),
        sa.Column('path', sa.String(255), nullable=False),
        sa.Column('service', sa.Text(), nullable=False, index=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.UniqueConstraint('method', 'path', 'service', name='uq_routes_method_path_service'),
    )

    # Roles table
    op.create_table(
        'roles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
    )

    # Role <-> route grants, removed with either endpoint
    op.create_table(
        'rbac',
        sa.Column('route_id', sa.Uuid(), sa.ForeignKey('routes.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role_id', sa.Uuid(), sa.ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True, index=True),
    )


def downgrade() -> None:
    op.drop_table('rbac')
    op.drop_table('roles')
    op.drop_table('routes')
