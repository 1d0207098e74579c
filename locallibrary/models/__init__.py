# Models package init
"""
Local Library: ORM Models
==========================

Importing this package registers every table with `Base.metadata`
(Alembic autogenerate and the test fixtures rely on that).
"""

from locallibrary.models.author import Author
from locallibrary.models.genre import Genre
from locallibrary.models.book import Book, book_genres
from locallibrary.models.book_instance import BookInstance, CopyStatus

__all__ = ["Author", "Genre", "Book", "book_genres", "BookInstance", "CopyStatus"]
