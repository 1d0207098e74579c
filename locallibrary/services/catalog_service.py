"""
Local Library: Catalog Summary Service
=======================================

What:  Record counts for the catalog home page.
How:   Five COUNT queries issued as one parallel group.
"""

from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from locallibrary.models import Author, Book, BookInstance, CopyStatus, Genre
from locallibrary.services.common import storage_errors
from locallibrary.services.parallel import fetch_parallel


def _counter(statement):
    async def count(db: AsyncSession) -> int:
        with storage_errors("counting catalog records"):
            return (await db.execute(statement)).scalar_one()
    return count


async def get_catalog_counts(sessions: async_sessionmaker[AsyncSession]) -> Dict[str, int]:
    """
    Returns:
        {"book_count", "book_instance_count", "book_instance_available_count",
         "author_count", "genre_count"}
    """
    return await fetch_parallel(
        sessions,
        book_count=_counter(select(func.count()).select_from(Book)),
        book_instance_count=_counter(select(func.count()).select_from(BookInstance)),
        book_instance_available_count=_counter(
            select(func.count())
            .select_from(BookInstance)
            .where(BookInstance.status == CopyStatus.AVAILABLE)
        ),
        author_count=_counter(select(func.count()).select_from(Author)),
        genre_count=_counter(select(func.count()).select_from(Genre)),
    )
