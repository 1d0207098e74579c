"""
Local Library: Form Pipeline Tests
===================================

What:  Tests for normalize → sanitize → validate on every form schema.

What we test:
    ✅ Multi-value normalization (absent, scalar, list)
    ✅ Trimming and HTML escaping
    ✅ Author name and date rules, including death-after-birth
    ✅ Book required fields and genre references
    ✅ Copy status and due-back rules
    ✅ Sanitized values survive a failed validation
"""

import uuid
from datetime import date

from starlette.datastructures import FormData

from locallibrary.models import CopyStatus
from locallibrary.schemas.forms import (
    AuthorForm,
    BookForm,
    BookInstanceForm,
    clean_text,
    coerce_date,
    coerce_uuid,
    form_to_dict,
    normalize_multi_value,
    validate_form,
)
from locallibrary.templating import stored_text


def messages(submission):
    return [error.message for error in submission.errors]


class TestNormalization:

    def test_absent_becomes_empty_list(self):
        assert normalize_multi_value(None) == []

    def test_scalar_becomes_single_item_list(self):
        assert normalize_multi_value("x") == ["x"]

    def test_list_is_unchanged(self):
        assert normalize_multi_value(["x", "y"]) == ["x", "y"]

    def test_form_to_dict_collects_repeated_keys(self):
        form = FormData([("title", "T"), ("genre", "a"), ("genre", "b")])
        assert form_to_dict(form) == {"title": "T", "genre": ["a", "b"]}

    def test_form_to_dict_keeps_single_key_scalar(self):
        form = FormData([("genre", "a")])
        assert form_to_dict(form) == {"genre": "a"}


class TestSanitizing:

    def test_trims_and_escapes(self):
        assert clean_text("  <b>Tom & Jerry</b> ") == "&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;"

    def test_none_is_empty(self):
        assert clean_text(None) == ""

    def test_stored_text_undoes_input_escaping(self):
        assert stored_text(clean_text("Tom & Jerry")) == "Tom & Jerry"
        assert stored_text("Foundation") == "Foundation"
        assert stored_text(None) == ""

    def test_coerce_date_is_lenient(self):
        assert coerce_date("1983-10-14") == date(1983, 10, 14)
        assert coerce_date("not a date") is None
        assert coerce_date("") is None

    def test_coerce_date_out_of_range_is_none(self):
        # rolls past date.max
        assert coerce_date("9999-12-31T24:00") is None

    def test_coerce_uuid_is_lenient(self):
        value = uuid.uuid4()
        assert coerce_uuid(str(value)) == value
        assert coerce_uuid("create") is None


class TestAuthorForm:

    def test_valid_author(self):
        submission = validate_form(
            AuthorForm,
            {"first_name": " Isaac ", "family_name": "Asimov", "date_of_birth": "1920-01-02"},
        )
        assert submission.is_valid
        assert submission.data.first_name == "Isaac"
        assert submission.data.date_of_birth == date(1920, 1, 2)
        assert submission.data.date_of_death is None

    def test_empty_first_name_rejected(self):
        submission = validate_form(AuthorForm, {"first_name": "   ", "family_name": "Asimov"})
        assert not submission.is_valid
        assert submission.errors[0].field == "first_name"
        assert "First name is required." in messages(submission)

    def test_non_alphanumeric_name_rejected(self):
        submission = validate_form(AuthorForm, {"first_name": "Isaac!", "family_name": "Asimov"})
        assert "First name has non-alphanumeric characters." in messages(submission)

    def test_long_family_name_rejected(self):
        submission = validate_form(AuthorForm, {"first_name": "Isaac", "family_name": "A" * 101})
        assert "Family name must be at most 100 characters." in messages(submission)

    def test_invalid_date_rejected(self):
        submission = validate_form(
            AuthorForm,
            {"first_name": "Isaac", "family_name": "Asimov", "date_of_birth": "yesterday"},
        )
        assert messages(submission) == ["Invalid date of birth"]

    def test_out_of_range_date_rejected(self):
        submission = validate_form(
            AuthorForm,
            {"first_name": "Ann", "family_name": "Lee", "date_of_birth": "9999-12-31T24:00"},
        )
        assert messages(submission) == ["Invalid date of birth"]

    def test_death_before_birth_rejected(self):
        submission = validate_form(
            AuthorForm,
            {
                "first_name": "Isaac",
                "family_name": "Asimov",
                "date_of_birth": "1992-04-06",
                "date_of_death": "1920-01-02",
            },
        )
        assert messages(submission) == ["Date of death must be after date of birth."]
        assert submission.errors[0].field == "date_of_death"

    def test_death_on_birth_day_rejected(self):
        submission = validate_form(
            AuthorForm,
            {
                "first_name": "Isaac",
                "family_name": "Asimov",
                "date_of_birth": "1920-01-02",
                "date_of_death": "1920-01-02",
            },
        )
        assert not submission.is_valid

    def test_all_errors_reported_together(self):
        submission = validate_form(AuthorForm, {})
        assert [error.field for error in submission.errors] == ["first_name", "family_name"]

    def test_sanitized_values_kept_on_failure(self):
        submission = validate_form(AuthorForm, {"first_name": "<i>", "family_name": ""})
        assert submission.data is None
        assert submission.values["first_name"] == "&lt;i&gt;"


class TestBookForm:

    def payload(self, **overrides):
        payload = {
            "title": "Foundation",
            "author": str(uuid.uuid4()),
            "summary": "The Galactic Empire is falling.",
            "isbn": "9780553293357",
        }
        payload.update(overrides)
        return payload

    def test_scalar_genre_becomes_list(self):
        genre_id = uuid.uuid4()
        submission = validate_form(BookForm, self.payload(genre=str(genre_id)))
        assert submission.is_valid
        assert submission.data.genre == [genre_id]

    def test_missing_genre_is_empty_list(self):
        submission = validate_form(BookForm, self.payload())
        assert submission.data.genre == []

    def test_required_fields(self):
        submission = validate_form(BookForm, {"genre": []})
        assert messages(submission) == [
            "Title must not be empty.",
            "Author must not be empty.",
            "Summary must not be empty.",
            "ISBN must not be empty",
        ]

    def test_malformed_author_reference(self):
        submission = validate_form(BookForm, self.payload(author="nobody"))
        assert messages(submission) == ["Author must be chosen from the list."]

    def test_title_is_escaped(self):
        submission = validate_form(BookForm, self.payload(title="Tom & Jerry"))
        assert submission.data.title == "Tom &amp; Jerry"


class TestBookInstanceForm:

    def test_defaults(self):
        submission = validate_form(
            BookInstanceForm, {"book": str(uuid.uuid4()), "imprint": "Gnome Press"}
        )
        assert submission.is_valid
        assert submission.data.status == CopyStatus.MAINTENANCE
        assert submission.data.due_back is None

    def test_required_fields(self):
        submission = validate_form(BookInstanceForm, {"status": "Available"})
        assert messages(submission) == ["Book must be specified", "Imprint must be specified"]

    def test_unknown_status_rejected(self):
        submission = validate_form(
            BookInstanceForm,
            {"book": str(uuid.uuid4()), "imprint": "Gnome Press", "status": "Lost"},
        )
        assert messages(submission) == ["Invalid status"]

    def test_invalid_due_back_rejected(self):
        submission = validate_form(
            BookInstanceForm,
            {"book": str(uuid.uuid4()), "imprint": "Gnome Press", "due_back": "soon"},
        )
        assert messages(submission) == ["Invalid date"]

    def test_out_of_range_due_back_rejected(self):
        submission = validate_form(
            BookInstanceForm,
            {"book": str(uuid.uuid4()), "imprint": "Gnome Press", "due_back": "9999-12-31T24:00"},
        )
        assert messages(submission) == ["Invalid date"]
