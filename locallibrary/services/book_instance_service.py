"""
Local Library: Book Instance (Copy) Service
============================================

What:  Data access for copies: list, detail and create.
Who:   Called by routes/book_instances.py.

Not implemented on purpose:
    Copy update and delete. Their handlers are fixed placeholders.
"""

import logging
import uuid
from datetime import date
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, joinedload

from locallibrary.exceptions import NotFoundError
from locallibrary.models import Book, BookInstance, CopyStatus
from locallibrary.schemas.forms import (
    BookInstanceForm,
    FieldError,
    FormSubmission,
    coerce_date,
    coerce_uuid,
)
from locallibrary.services.common import parse_identifier, storage_errors

logger = logging.getLogger(__name__)


class BookInstanceService:

    async def list_copies(self, db: AsyncSession) -> List[BookInstance]:
        """Every copy with its book expanded, ordered by book title then imprint."""
        with storage_errors("listing copies"):
            result = await db.execute(
                select(BookInstance)
                .join(BookInstance.book)
                .options(contains_eager(BookInstance.book))
                .order_by(Book.title, BookInstance.imprint)
            )
            return list(result.scalars().all())

    async def get_copy(self, db: AsyncSession, raw_id: str) -> BookInstance:
        """
        Copy with its book expanded.

        Raises:
            NotFoundError: unknown or malformed identifier (→ 404)
        """
        copy_id = parse_identifier(raw_id, "copy")
        with storage_errors("fetching copy", copy_id=str(copy_id)):
            result = await db.execute(
                select(BookInstance)
                .options(joinedload(BookInstance.book))
                .where(BookInstance.id == copy_id)
            )
            copy = result.scalar_one_or_none()
        if copy is None:
            raise NotFoundError(resource="copy", resource_id=str(copy_id))
        return copy

    async def list_book_options(self, db: AsyncSession) -> List[Book]:
        """Books for the form's select, title order."""
        with storage_errors("listing book options"):
            result = await db.execute(select(Book).order_by(Book.title))
            return list(result.scalars().all())

    def build_candidate(self, submission: FormSubmission[BookInstanceForm]) -> BookInstance:
        """Transient copy from the sanitized payload; unknown status falls back to Maintenance."""
        values = submission.values
        try:
            status = CopyStatus(values["status"])
        except ValueError:
            status = CopyStatus.MAINTENANCE
        return BookInstance(
            book_id=coerce_uuid(values["book"]),
            imprint=values["imprint"],
            status=status,
            due_back=coerce_date(values["due_back"]),
        )

    async def save_copy(
        self,
        db: AsyncSession,
        submission: FormSubmission[BookInstanceForm],
    ) -> Tuple[BookInstance, List[FieldError]]:
        """
        Persist a new copy when the submission is valid and its book exists.

        A missing due-back date defaults to today.
        """
        copy = self.build_candidate(submission)
        if not submission.is_valid:
            return copy, submission.errors

        with storage_errors("resolving copy book"):
            book = await db.get(Book, submission.data.book)
        if book is None:
            return copy, [FieldError(field="book", message="Book not found.")]

        if copy.due_back is None:
            copy.due_back = date.today()
        with storage_errors("creating copy"):
            db.add(copy)
            await db.commit()
        logger.info("Copy created: %s of book %s (%s)", copy.id, book.id, copy.status.value)
        return copy, []


book_instance_service = BookInstanceService()
