"""add decks and cards tables

Revision ID: add_decks_and_cards
Revises:
Create Date: 2026-10-17

Creates the decks and cards tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.engine.reflection import Inspector

# revision identifiers, used by Alembic.
revision: str = 'add_decks_and_cards'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    inspector = Inspector.from_engine(conn)
    existing_tables = inspector.get_table_names()

    if 'decks' not in existing_tables:
        op.create_table(
            'decks',
            sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('user_id', sa.String(255), nullable=False, index=True),
            sa.Column('name', sa.String(255), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column(
                'created_at',
                sa.DateTime(timezone=True),
                nullable=False,
                server_default=sa.func.now()
            ),
            sa.Column(
                'updated_at',
                sa.DateTime(timezone=True),
                nullable=False,
                server_default=sa.func.now()
            ),
        )

    if 'cards' not in existing_tables:
        op.create_table(
            'cards',
            sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column('deck_id', sa.Integer(), nullable=False, index=True),
            sa.Column('front', sa.Text(), nullable=False),
            sa.Column('back', sa.Text(), nullable=False),
            sa.Column(
                'created_at',
                sa.DateTime(timezone=True),
                nullable=False,
                server_default=sa.func.now()
            ),
            sa.Column(
                'updated_at',
                sa.DateTime(timezone=True),
                nullable=False,
                server_default=sa.func.now()
            ),
            sa.ForeignKeyConstraint(
                ['deck_id'],
                ['decks.id'],
                name='fk_cards_deck_id',
                ondelete='CASCADE'
            ),
        )
        op.create_index(
            'ix_cards_deck_updated',
            'cards',
            ['deck_id', 'updated_at'],
        )


def downgrade() -> None:
    op.drop_index('ix_cards_deck_updated', table_name='cards')
    op.drop_table('cards')
    op.drop_table('decks')
