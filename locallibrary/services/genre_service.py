"""
Local Library: Genre Service
=============================

What:  Read-only data access for genres: the book form's checkbox options,
       the genre list and the genre detail page (genre + its books).
"""

import uuid
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from locallibrary.exceptions import NotFoundError
from locallibrary.models import Book, Genre, book_genres
from locallibrary.services.common import parse_identifier, storage_errors
from locallibrary.services.parallel import fetch_parallel


class GenreService:

    async def list_genres(self, db: AsyncSession) -> List[Genre]:
        with storage_errors("listing genres"):
            result = await db.execute(select(Genre).order_by(Genre.name))
            return list(result.scalars().all())

    async def get_genre(self, db: AsyncSession, genre_id: uuid.UUID) -> Genre:
        with storage_errors("fetching genre", genre_id=str(genre_id)):
            genre = await db.get(Genre, genre_id)
        if genre is None:
            raise NotFoundError(resource="genre", resource_id=str(genre_id))
        return genre

    async def list_books_in_genre(self, db: AsyncSession, genre_id: uuid.UUID) -> List[Book]:
        with storage_errors("listing books in genre", genre_id=str(genre_id)):
            result = await db.execute(
                select(Book)
                .join(book_genres, book_genres.c.book_id == Book.id)
                .where(book_genres.c.genre_id == genre_id)
                .order_by(Book.title)
            )
            return list(result.scalars().all())

    async def get_genre_detail(
        self,
        sessions: async_sessionmaker[AsyncSession],
        raw_id: str,
    ) -> Tuple[Genre, List[Book]]:
        """Genre plus its books, fetched concurrently. NotFoundError when absent."""
        genre_id = parse_identifier(raw_id, "genre")
        results = await fetch_parallel(
            sessions,
            genre=lambda s: self.get_genre(s, genre_id),
            books=lambda s: self.list_books_in_genre(s, genre_id),
        )
        return results["genre"], results["books"]


genre_service = GenreService()
