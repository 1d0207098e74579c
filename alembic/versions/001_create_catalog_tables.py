"""Create catalog tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates authors, genres, books, book_genres and book_instances.
How:   Generic sa.Uuid columns (native UUID on PostgreSQL, CHAR(32) on
       SQLite). Identifiers are generated by the application, so there are
       no server defaults on the primary keys.

Rollback: downgrade() drops every table (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

COPY_STATUSES = ("Available", "Maintenance", "Loaned", "Reserved")


def upgrade() -> None:
    op.create_table(
        "authors",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("family_name", sa.String(100), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("date_of_death", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_authors"),
    )
    # Author list is ordered by family name
    op.create_index("ix_authors_family_name", "authors", ["family_name"])

    op.create_table(
        "genres",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_genres"),
        sa.UniqueConstraint("name", name="uq_genres_name"),
    )

    op.create_table(
        "books",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("author_id", sa.Uuid(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("isbn", sa.String(32), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_books"),
        sa.ForeignKeyConstraint(["author_id"], ["authors.id"], name="fk_books_author_id"),
    )
    op.create_index("ix_books_title", "books", ["title"])
    op.create_index("ix_books_author_id", "books", ["author_id"])

    op.create_table(
        "book_genres",
        sa.Column("book_id", sa.Uuid(), nullable=False),
        sa.Column("genre_id", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("book_id", "genre_id", name="pk_book_genres"),
        sa.ForeignKeyConstraint(
            ["book_id"], ["books.id"], name="fk_book_genres_book_id", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["genre_id"], ["genres.id"], name="fk_book_genres_genre_id", ondelete="CASCADE"
        ),
    )

    op.create_table(
        "book_instances",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("book_id", sa.Uuid(), nullable=False),
        sa.Column("imprint", sa.String(200), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*COPY_STATUSES, name="copy_status", native_enum=False, length=20,
                    create_constraint=True),
            nullable=False,
        ),
        sa.Column("due_back", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_book_instances"),
        # No ON DELETE: a book with copies must not disappear underneath them
        sa.ForeignKeyConstraint(["book_id"], ["books.id"], name="fk_book_instances_book_id"),
    )
    op.create_index("ix_book_instances_book_id", "book_instances", ["book_id"])


def downgrade() -> None:
    op.drop_index("ix_book_instances_book_id", table_name="book_instances")
    op.drop_table("book_instances")
    op.drop_table("book_genres")
    op.drop_index("ix_books_author_id", table_name="books")
    op.drop_index("ix_books_title", table_name="books")
    op.drop_table("books")
    op.drop_table("genres")
    op.drop_index("ix_authors_family_name", table_name="authors")
    op.drop_table("authors")
