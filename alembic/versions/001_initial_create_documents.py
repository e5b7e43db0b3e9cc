"""initial create documents

Revision ID: 001
Revises: 
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Criar tabela documents (uma linha por documento de qualquer coleção)
    op.create_table(
        'documents',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('collection', sa.String(length=100), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Listagem por coleção em ordem de criação
    op.create_index(
        'ix_documents_collection_created_at',
        'documents',
        ['collection', 'created_at'],
    )


def downgrade() -> None:
    op.drop_index('ix_documents_collection_created_at', table_name='documents')
    op.drop_table('documents')
