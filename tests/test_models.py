"""
Local Library: Model Derived-Field Tests
=========================================

What:  Tests for the pure functions behind Author/Copy display fields.
How:   No database; the functions take plain values and models are built
       transient.
"""

import uuid
from datetime import date

from locallibrary.models import Author, BookInstance, CopyStatus
from locallibrary.models.author import display_name, format_date, lifespan_years


class TestDisplayName:

    def test_both_names_present(self):
        assert display_name("Isaac", "Asimov") == "Isaac Asimov"

    def test_missing_first_name_is_empty(self):
        assert display_name("", "Asimov") == ""

    def test_missing_family_name_is_empty(self):
        assert display_name("Isaac", None) == ""

    def test_author_name_property(self):
        author = Author(first_name="Ben", family_name="Bova")
        assert author.name == "Ben Bova"


class TestLifespan:

    def test_unknown_birth_is_none(self):
        assert lifespan_years(None, date(1992, 4, 6)) is None

    def test_birth_and_death(self):
        assert lifespan_years(date(1920, 1, 2), date(1992, 4, 6)) == 72

    def test_living_author_counts_to_current_year(self):
        assert lifespan_years(date(1973, 6, 6), None, today=date(2026, 1, 1)) == 53

    def test_calendar_years_only(self):
        # Born late December, died early January: one calendar year apart
        assert lifespan_years(date(1999, 12, 31), date(2000, 1, 1)) == 1

    def test_living_author_defaults_to_today(self):
        born = date(1950, 5, 5)
        assert lifespan_years(born, None) == date.today().year - 1950


class TestFormatting:

    def test_medium_date(self):
        assert format_date(date(1983, 10, 14)) == "Oct 14, 1983"

    def test_single_digit_day_is_not_padded(self):
        assert format_date(date(1920, 1, 2)) == "Jan 2, 1920"

    def test_no_date_is_empty(self):
        assert format_date(None) == ""

    def test_author_formatted_dates(self):
        author = Author(first_name="Isaac", family_name="Asimov", date_of_birth=date(1920, 1, 2))
        assert author.date_of_birth_formatted == "Jan 2, 1920"
        assert author.date_of_death_formatted == ""


class TestUrls:

    def test_author_url(self):
        author_id = uuid.uuid4()
        assert Author(id=author_id).url == f"/catalog/author/{author_id}"

    def test_copy_url_and_due_back(self):
        copy_id = uuid.uuid4()
        copy = BookInstance(id=copy_id, due_back=date(2026, 3, 9), status=CopyStatus.LOANED)
        assert copy.url == f"/catalog/bookinstance/{copy_id}"
        assert copy.due_back_formatted == "Mar 9, 2026"
