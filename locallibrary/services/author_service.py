"""
Local Library: Author Service
==============================

What:  Data access for the author pages: list, detail (with the author's
       books) and create.
Who:   Called by routes/authors.py.

Not implemented on purpose:
    Author update and delete. Their handlers are fixed placeholders and this
    service has no corresponding methods.
"""

import logging
import uuid
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from locallibrary.exceptions import NotFoundError
from locallibrary.models import Author, Book
from locallibrary.schemas.forms import AuthorForm, FieldError, FormSubmission, coerce_date
from locallibrary.services.common import parse_identifier, storage_errors
from locallibrary.services.parallel import fetch_parallel

logger = logging.getLogger(__name__)


class AuthorService:
    """Stateless; a module-level singleton is shared by all requests."""

    async def list_authors(self, db: AsyncSession) -> List[Author]:
        """All authors ordered by family name ascending."""
        with storage_errors("listing authors"):
            result = await db.execute(
                select(Author).order_by(Author.family_name, Author.first_name)
            )
            return list(result.scalars().all())

    async def get_author(self, db: AsyncSession, author_id: uuid.UUID) -> Author:
        with storage_errors("fetching author", author_id=str(author_id)):
            author = await db.get(Author, author_id)
        if author is None:
            raise NotFoundError(resource="author", resource_id=str(author_id))
        return author

    async def list_books_by_author(self, db: AsyncSession, author_id: uuid.UUID) -> List[Book]:
        with storage_errors("listing books by author", author_id=str(author_id)):
            result = await db.execute(
                select(Book).where(Book.author_id == author_id).order_by(Book.title)
            )
            return list(result.scalars().all())

    async def get_author_detail(
        self,
        sessions: async_sessionmaker[AsyncSession],
        raw_id: str,
    ) -> Tuple[Author, List[Book]]:
        """
        Author plus their books, fetched concurrently.

        Raises:
            NotFoundError: unknown or malformed identifier (→ 404)
        """
        author_id = parse_identifier(raw_id, "author")
        results = await fetch_parallel(
            sessions,
            author=lambda s: self.get_author(s, author_id),
            books=lambda s: self.list_books_by_author(s, author_id),
        )
        return results["author"], results["books"]

    def build_candidate(self, submission: FormSubmission[AuthorForm]) -> Author:
        """Transient Author from the sanitized payload, valid or not."""
        values = submission.values
        return Author(
            first_name=values["first_name"],
            family_name=values["family_name"],
            date_of_birth=coerce_date(values["date_of_birth"]),
            date_of_death=coerce_date(values["date_of_death"]),
        )

    async def save_author(
        self,
        db: AsyncSession,
        submission: FormSubmission[AuthorForm],
    ) -> Tuple[Author, List[FieldError]]:
        """
        Persist a new author when the submission is valid.

        Returns the candidate and the errors to show; the candidate is only
        added to the session when there are none.
        """
        author = self.build_candidate(submission)
        if not submission.is_valid:
            return author, submission.errors

        with storage_errors("creating author"):
            db.add(author)
            await db.commit()
        logger.info("Author created: %s (%s)", author.id, author.name)
        return author, []


# ── Singleton Instance ────────────────────────────────────────────────────
author_service = AuthorService()
