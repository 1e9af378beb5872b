"""Create users and favorite_books tables

Revision ID: 3f9c1e7a2b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1e7a2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=20), nullable=False, comment='Unique lowercase username'),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Unique lowercase email address'),
        sa.Column('hashed_password', sa.String(length=255), nullable=False, comment='Bcrypt hashed password'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, comment='When the user registered'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, comment='When the user record was last updated'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('favorite_books',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False, comment='Owner of the favorite'),
        sa.Column('book_id', sa.String(length=255), nullable=False, comment='External catalog identifier'),
        sa.Column('title', sa.String(length=500), nullable=False, comment='Book title at the time it was favorited'),
        sa.Column('author', sa.String(length=500), nullable=False, comment='Comma-joined author names'),
        sa.Column('year', sa.Integer(), nullable=False, comment='First publication year'),
        sa.Column('cover', sa.Text(), nullable=True, comment='Cover image URL'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'book_id', name='uq_favorite_books_user_book')
    )
    op.create_index(op.f('ix_favorite_books_user_id'), 'favorite_books', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_favorite_books_user_id'), table_name='favorite_books')
    op.drop_table('favorite_books')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_table('users')
