"""
Local Library: Author Model
============================

What:  ORM model for the `authors` table plus the derived display fields.
How:   Derived values (display name, lifespan, formatted dates, URL) are pure
       functions over the stored columns, exposed as read-only properties.
       Nothing derived is ever written to the database.
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import Date, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from locallibrary.database import Base


# ── Derived Fields ────────────────────────────────────────────────────────

def display_name(first_name: Optional[str], family_name: Optional[str]) -> str:
    """'first family' when both names are present, otherwise an empty string."""
    if first_name and family_name:
        return f"{first_name} {family_name}"
    return ""


def lifespan_years(
    date_of_birth: Optional[date],
    date_of_death: Optional[date],
    today: Optional[date] = None,
) -> Optional[int]:
    """
    Years between birth and death, or between birth and the current year for
    a living author. None when the birth date is unknown.

    Only calendar years are compared (no birthday adjustment).
    """
    if date_of_birth is None:
        return None
    if date_of_death is not None:
        return date_of_death.year - date_of_birth.year
    today = today or date.today()
    return today.year - date_of_birth.year


def format_date(value: Optional[date]) -> str:
    """Medium date format, e.g. 'Oct 14, 1983'. Empty string for no date."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def author_url(author_id) -> str:
    return f"/catalog/author/{author_id}"


class Author(Base):
    """
    A writer referenced by books.

    Deleting an author does not cascade to its books; there is no author
    delete handler in the catalog.
    """

    __tablename__ = "authors"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    family_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    date_of_death: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    @property
    def name(self) -> str:
        return display_name(self.first_name, self.family_name)

    @property
    def lifespan(self) -> Optional[int]:
        return lifespan_years(self.date_of_birth, self.date_of_death)

    @property
    def url(self) -> str:
        return author_url(self.id)

    @property
    def date_of_birth_formatted(self) -> str:
        return format_date(self.date_of_birth)

    @property
    def date_of_death_formatted(self) -> str:
        return format_date(self.date_of_death)

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name='{self.name}')>"
