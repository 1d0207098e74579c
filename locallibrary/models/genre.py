"""
Local Library: Genre Model
===========================

What:  ORM model for the `genres` table.
Who:   Read by the book form (checkbox options) and the genre pages.
       Genres are created by the seed script; there are no genre forms.
"""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from locallibrary.database import Base


class Genre(Base):
    __tablename__ = "genres"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, name='{self.name}')>"
