"""
Local Library: Book Service
============================

What:  Data access for the book pages: list, detail, create, update and
       delete, plus the reference lists the book form needs.
Who:   Called by routes/books.py.

Write paths (save_book):
    1. Build a candidate Book from the sanitized payload (always)
    2. Invalid form            → return candidate + form errors, no mutation
    3. Resolve references      → unknown author/genre becomes a form error
    4. Insert (no book_id)     → new identifier assigned on flush
       Update (book_id given)  → mutable fields of the stored row replaced,
                                 identifier unchanged
    5. Commit, so the redirect target exists before the response is sent

Delete rule:
    A book with copies is never deleted. The handler renders the blocking
    view instead; the check and the delete are not locked against each other.
"""

import logging
import uuid
from typing import List, Optional, Sequence, Set, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from locallibrary.exceptions import NotFoundError
from locallibrary.models import Author, Book, BookInstance, Genre, book_genres
from locallibrary.schemas.forms import (
    BookForm,
    FieldError,
    FormSubmission,
    coerce_uuid,
)
from locallibrary.services.author_service import author_service
from locallibrary.services.common import parse_identifier, storage_errors
from locallibrary.services.genre_service import genre_service
from locallibrary.services.parallel import fetch_parallel

logger = logging.getLogger(__name__)


class BookService:

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_books(self, db: AsyncSession) -> List[Book]:
        """All books ordered by title, each with its author expanded."""
        with storage_errors("listing books"):
            result = await db.execute(
                select(Book).options(selectinload(Book.author)).order_by(Book.title)
            )
            return list(result.scalars().all())

    async def find_book(self, db: AsyncSession, book_id: uuid.UUID) -> Optional[Book]:
        """Book with author and genres expanded, or None."""
        with storage_errors("fetching book", book_id=str(book_id)):
            result = await db.execute(
                select(Book)
                .options(selectinload(Book.author), selectinload(Book.genres))
                .where(Book.id == book_id)
            )
            return result.scalar_one_or_none()

    async def get_book(self, db: AsyncSession, book_id: uuid.UUID) -> Book:
        book = await self.find_book(db, book_id)
        if book is None:
            raise NotFoundError(resource="book", resource_id=str(book_id))
        return book

    async def list_copies(self, db: AsyncSession, book_id: uuid.UUID) -> List[BookInstance]:
        with storage_errors("listing copies of book", book_id=str(book_id)):
            result = await db.execute(
                select(BookInstance)
                .where(BookInstance.book_id == book_id)
                .order_by(BookInstance.imprint)
            )
            return list(result.scalars().all())

    async def get_book_detail(
        self,
        sessions: async_sessionmaker[AsyncSession],
        raw_id: str,
    ) -> Tuple[Book, List[BookInstance]]:
        """
        Book plus its copies, fetched concurrently.

        Raises:
            NotFoundError: unknown or malformed identifier (→ 404)
        """
        book_id = parse_identifier(raw_id, "book")
        results = await fetch_parallel(
            sessions,
            book=lambda s: self.get_book(s, book_id),
            copies=lambda s: self.list_copies(s, book_id),
        )
        return results["book"], results["copies"]

    async def get_form_options(
        self,
        sessions: async_sessionmaker[AsyncSession],
    ) -> Tuple[List[Author], List[Genre]]:
        """Every author and genre, for the form's select and checkboxes."""
        results = await fetch_parallel(
            sessions,
            authors=author_service.list_authors,
            genres=genre_service.list_genres,
        )
        return results["authors"], results["genres"]

    async def get_update_form(
        self,
        sessions: async_sessionmaker[AsyncSession],
        raw_id: str,
    ) -> Tuple[Book, List[Author], List[Genre]]:
        """Stored book and the reference lists, fetched concurrently."""
        book_id = parse_identifier(raw_id, "book")
        results = await fetch_parallel(
            sessions,
            book=lambda s: self.get_book(s, book_id),
            authors=author_service.list_authors,
            genres=genre_service.list_genres,
        )
        return results["book"], results["authors"], results["genres"]

    async def get_delete_view(
        self,
        sessions: async_sessionmaker[AsyncSession],
        raw_id: str,
    ) -> Tuple[Optional[Book], List[BookInstance]]:
        """
        Book (or None when absent) and the copies that block its deletion.

        Missing is not an error here: delete handlers redirect to the list.
        """
        book_id = coerce_uuid(raw_id)
        if book_id is None:
            return None, []
        results = await fetch_parallel(
            sessions,
            book=lambda s: self.find_book(s, book_id),
            copies=lambda s: self.list_copies(s, book_id),
        )
        return results["book"], results["copies"]

    # ── Writes ────────────────────────────────────────────────────────────

    def build_candidate(
        self,
        submission: FormSubmission[BookForm],
        book_id: Optional[uuid.UUID] = None,
    ) -> Tuple[Book, Set[uuid.UUID]]:
        """
        Transient Book from the sanitized payload plus the selected genre ids.

        With book_id the candidate carries the stored identifier, so a
        re-rendered update form still posts back to the same record.
        """
        values = submission.values
        book = Book(
            id=book_id,
            title=values["title"],
            author_id=coerce_uuid(values["author"]),
            summary=values["summary"],
            isbn=values["isbn"],
        )
        selected = {genre_id for genre_id in map(coerce_uuid, values["genre"]) if genre_id}
        return book, selected

    async def _genres_by_ids(self, db: AsyncSession, genre_ids: Sequence[uuid.UUID]) -> List[Genre]:
        if not genre_ids:
            return []
        result = await db.execute(select(Genre).where(Genre.id.in_(set(genre_ids))))
        return list(result.scalars().all())

    async def save_book(
        self,
        db: AsyncSession,
        submission: FormSubmission[BookForm],
        book_id: Optional[uuid.UUID] = None,
    ) -> Tuple[Book, Set[uuid.UUID], List[FieldError]]:
        """
        Create (book_id None) or update a book from a form submission.

        Returns:
            (book, selected genre ids, errors). With errors the book is the
            unsaved candidate; without, it is the persisted record.

        Raises:
            NotFoundError: update target no longer exists (→ 404)
            DatabaseError: storage failure (→ 500)
        """
        book, selected = self.build_candidate(submission, book_id)
        if not submission.is_valid:
            return book, selected, submission.errors

        form = submission.data
        with storage_errors("resolving book references"):
            author = await db.get(Author, form.author)
            genres = await self._genres_by_ids(db, form.genre)

        errors = []
        if author is None:
            errors.append(FieldError(field="author", message="Author not found."))
        if len(genres) != len(set(form.genre)):
            errors.append(FieldError(field="genre", message="Genre not found."))
        if errors:
            return book, selected, errors

        if book_id is None:
            with storage_errors("creating book"):
                book.genres = genres
                db.add(book)
                await db.commit()
            logger.info("Book created: %s (%s)", book.id, book.title)
            return book, selected, []

        stored = await self.find_book(db, book_id)
        if stored is None:
            raise NotFoundError(resource="book", resource_id=str(book_id))

        with storage_errors("updating book", book_id=str(book_id)):
            stored.title = book.title
            stored.author = author
            stored.summary = book.summary
            stored.isbn = book.isbn
            stored.genres = genres
            await db.commit()
        logger.info("Book updated: %s (%s)", stored.id, stored.title)
        return stored, selected, []

    async def delete_book(self, db: AsyncSession, book_id: uuid.UUID) -> bool:
        """
        Remove a book and its genre links. Returns False when it was already gone.

        Callers check for copies first; this method does not.
        """
        with storage_errors("deleting book", book_id=str(book_id)):
            await db.execute(delete(book_genres).where(book_genres.c.book_id == book_id))
            result = await db.execute(delete(Book).where(Book.id == book_id))
            await db.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Book deleted: %s", book_id)
        return deleted


# ── Singleton Instance ────────────────────────────────────────────────────
book_service = BookService()
