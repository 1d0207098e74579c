"""
Local Library: Book Model
==========================

What:  ORM model for the `books` table and the `book_genres` link table.

Reference expansion:
    Every relationship is declared with lazy="raise". Touching `book.author`
    or `book.genres` on a record that was not loaded with an explicit
    selectinload/joinedload raises instead of silently issuing a query, so
    each service states exactly which references a view needs.
"""

import uuid
from typing import List

from sqlalchemy import Column, ForeignKey, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallibrary.database import Base
from locallibrary.models.author import Author
from locallibrary.models.genre import Genre


book_genres = Table(
    "book_genres",
    Base.metadata,
    Column("book_id", Uuid, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Uuid, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)


class Book(Base):
    """
    Bibliographic record. Physical copies live in `book_instances`.

    A book is refused deletion while any copy references it; that rule is
    enforced by the delete handler, not by the schema.
    """

    __tablename__ = "books"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("authors.id"), nullable=False, index=True
    )
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    isbn: Mapped[str] = mapped_column(String(32), nullable=False)

    author: Mapped[Author] = relationship(lazy="raise")
    genres: Mapped[List[Genre]] = relationship(
        secondary=book_genres,
        lazy="raise",
        order_by=Genre.name,
    )

    @property
    def url(self) -> str:
        return f"/catalog/book/{self.id}"

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}')>"
