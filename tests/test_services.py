"""
Local Library: Service Unit Tests
==================================

What:  Service behavior that does not need a real database: storage error
       translation, identifier parsing, candidate records and the
       no-mutation guarantee of invalid submissions.
How:   Uses the mock_db_session fixture (no real DB).
"""

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from locallibrary.exceptions import DatabaseError, NotFoundError
from locallibrary.models import CopyStatus
from locallibrary.schemas.forms import AuthorForm, BookForm, BookInstanceForm, validate_form
from locallibrary.services.author_service import AuthorService
from locallibrary.services.book_instance_service import BookInstanceService
from locallibrary.services.book_service import BookService
from locallibrary.services.common import parse_identifier, storage_errors


class TestCommonHelpers:

    def test_storage_errors_wraps_sqlalchemy_error(self):
        with pytest.raises(DatabaseError) as exc_info:
            with storage_errors("listing books", page="list"):
                raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

        assert exc_info.value.status_code == 500
        assert exc_info.value.context["action"] == "listing books"
        assert exc_info.value.context["error_type"] == "OperationalError"
        assert exc_info.value.context["page"] == "list"
        # Rendered message never carries the driver error
        assert "disk" not in exc_info.value.message

    def test_storage_errors_leaves_other_errors_alone(self):
        with pytest.raises(KeyError):
            with storage_errors("listing books"):
                raise KeyError("title")

    def test_parse_identifier_accepts_uuid_text(self):
        value = uuid.uuid4()
        assert parse_identifier(str(value), "book") == value

    def test_parse_identifier_rejects_malformed_as_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            parse_identifier("not-a-uuid", "book")
        assert exc_info.value.message == "Book not found"


class TestAuthorService:

    def setup_method(self):
        self.service = AuthorService()

    @pytest.mark.asyncio
    async def test_invalid_submission_is_not_persisted(self, mock_db_session):
        submission = validate_form(AuthorForm, {"first_name": "", "family_name": "Asimov"})

        author, errors = await self.service.save_author(mock_db_session, submission)

        assert errors and errors[0].field == "first_name"
        assert author.family_name == "Asimov"
        mock_db_session.add.assert_not_called()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_valid_submission_is_committed(self, mock_db_session):
        submission = validate_form(AuthorForm, {"first_name": "Isaac", "family_name": "Asimov"})

        author, errors = await self.service.save_author(mock_db_session, submission)

        assert errors == []
        mock_db_session.add.assert_called_once_with(author)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_author_raises_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await self.service.get_author(mock_db_session, uuid.uuid4())


class TestBookService:

    def setup_method(self):
        self.service = BookService()

    def test_candidate_keeps_prior_input_and_selection(self):
        book_id = uuid.uuid4()
        genre_ids = [uuid.uuid4(), uuid.uuid4()]
        submission = validate_form(
            BookForm,
            {"title": "", "author": "", "summary": "S", "isbn": "1",
             "genre": [str(g) for g in genre_ids]},
        )

        book, selected = self.service.build_candidate(submission, book_id)

        assert book.id == book_id
        assert book.summary == "S"
        assert book.author_id is None
        assert selected == set(genre_ids)

    @pytest.mark.asyncio
    async def test_unknown_author_is_a_form_error(self, mock_db_session):
        mock_db_session.get.return_value = None
        submission = validate_form(
            BookForm,
            {"title": "T", "author": str(uuid.uuid4()), "summary": "S", "isbn": "1"},
        )

        _, _, errors = await self.service.save_book(mock_db_session, submission)

        assert [e.message for e in errors] == ["Author not found."]
        mock_db_session.commit.assert_not_awaited()


class TestBookInstanceService:

    def test_unknown_status_falls_back_to_maintenance(self):
        submission = validate_form(
            BookInstanceForm,
            {"book": str(uuid.uuid4()), "imprint": "Gnome Press", "status": "Lost"},
        )
        copy = BookInstanceService().build_candidate(submission)
        assert copy.status == CopyStatus.MAINTENANCE
        assert copy.imprint == "Gnome Press"

    @pytest.mark.asyncio
    async def test_missing_book_is_a_form_error(self, mock_db_session):
        mock_db_session.get.return_value = None
        submission = validate_form(
            BookInstanceForm, {"book": str(uuid.uuid4()), "imprint": "Gnome Press"}
        )

        _, errors = await BookInstanceService().save_copy(mock_db_session, submission)

        assert [e.message for e in errors] == ["Book not found."]
        mock_db_session.add.assert_not_called()
