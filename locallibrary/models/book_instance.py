"""
Local Library: Book Instance (Copy) Model
==========================================

What:  ORM model for `book_instances`, the physical lending copies of a book.

Status:
    Stored as a non-native enum (VARCHAR + CHECK) so the member set is fixed
    at the data layer on both PostgreSQL and SQLite:
        Available → Loaned → Available
        Available → Reserved → Loaned
        any       → Maintenance
"""

import enum
import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Date, Enum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from locallibrary.database import Base
from locallibrary.models.author import format_date
from locallibrary.models.book import Book


class CopyStatus(str, enum.Enum):
    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"


class BookInstance(Base):
    __tablename__ = "book_instances"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    book_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("books.id"), nullable=False, index=True
    )
    imprint: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[CopyStatus] = mapped_column(
        Enum(
            CopyStatus,
            name="copy_status",
            native_enum=False,
            length=20,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=CopyStatus.MAINTENANCE,
    )
    due_back: Mapped[Optional[date]] = mapped_column(Date, nullable=True, default=date.today)

    book: Mapped[Book] = relationship(lazy="raise")

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self) -> str:
        return format_date(self.due_back)

    def __repr__(self) -> str:
        return f"<BookInstance(id={self.id}, status='{self.status}')>"
