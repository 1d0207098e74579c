"""
Local Library: Sample Data Seeding
===================================

What:  Creates the schema (if missing) and loads a small fixed catalog.
Why:   Genres have no form handlers, so seeding is how they enter the
       catalog; the sample authors, books and copies make every page
       reachable on a fresh database.

Usage:
    python -m locallibrary.seed [--database-url URL] [--reset]

    --reset drops every catalog table first. Without it, seeding an already
    populated catalog is refused so records are never duplicated.
"""

import argparse
import asyncio
import logging
import sys
from datetime import date
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from locallibrary.config import settings
from locallibrary.database import Base, build_engine
from locallibrary.models import Author, Book, BookInstance, CopyStatus, Genre

logger = logging.getLogger("locallibrary.seed")


GENRES = ["Fantasy", "Science Fiction", "French Poetry"]

# (first name, family name, born, died)
AUTHORS = [
    ("Patrick", "Rothfuss", date(1973, 6, 6), None),
    ("Ben", "Bova", date(1932, 11, 8), None),
    ("Isaac", "Asimov", date(1920, 1, 2), date(1992, 4, 6)),
    ("Bob", "Billings", None, None),
    ("Jim", "Jones", date(1971, 12, 16), None),
]

# (title, author family name, summary, isbn, genre names)
BOOKS = [
    (
        "The Name of the Wind (The Kingkiller Chronicle, #1)",
        "Rothfuss",
        "I have stolen princesses back from sleeping barrow kings. I burned down "
        "the town of Trebon. I have spent the night with Felurian and left with "
        "both my sanity and my life.",
        "9781473211896",
        ["Fantasy"],
    ),
    (
        "The Wise Man's Fear (The Kingkiller Chronicle, #2)",
        "Rothfuss",
        "Picking up the tale of Kvothe Kingkiller once again, we follow him into "
        "exile, into political intrigue, courtship, adventure, love and magic.",
        "9788401352836",
        ["Fantasy"],
    ),
    (
        "The Slow Regard of Silent Things (Kingkiller Chronicle)",
        "Rothfuss",
        "Deep below the University, there is a dark place. Few people know of "
        "it: a broken web of ancient passageways and abandoned rooms.",
        "9780756411336",
        ["Fantasy"],
    ),
    (
        "Apes and Angels",
        "Bova",
        "Humankind headed out to the stars not for conquest, nor exploration, "
        "nor even for curiosity. Humans went to the stars in a desperate "
        "crusade to save intelligent life wherever they found it.",
        "9780765379528",
        ["Science Fiction"],
    ),
    (
        "Death Wave",
        "Bova",
        "In Ben Bova's previous novel New Earth, Jordan Kell led the first human "
        "mission beyond the solar system.",
        "9780765379504",
        ["Science Fiction"],
    ),
    ("Test Book 1", "Billings", "Summary of test book 1", "ISBN111111", ["Fantasy", "Science Fiction"]),
    ("Test Book 2", "Billings", "Summary of test book 2", "ISBN222222", []),
]

# (book title, imprint, status, due back)
COPIES = [
    ("The Name of the Wind (The Kingkiller Chronicle, #1)", "London Gollancz, 2014.", CopyStatus.AVAILABLE, None),
    ("The Wise Man's Fear (The Kingkiller Chronicle, #2)", "Gollancz, 2011.", CopyStatus.LOANED, date(2026, 11, 1)),
    ("The Slow Regard of Silent Things (Kingkiller Chronicle)", "Gollancz, 2015.", CopyStatus.MAINTENANCE, None),
    ("Apes and Angels", "New York Tom Doherty Associates, 2016.", CopyStatus.AVAILABLE, None),
    ("Apes and Angels", "New York Tom Doherty Associates, 2016.", CopyStatus.AVAILABLE, None),
    ("Apes and Angels", "New York Tom Doherty Associates, 2016.", CopyStatus.AVAILABLE, None),
    ("Death Wave", "New York, NY Tom Doherty Associates, LLC, 2015.", CopyStatus.AVAILABLE, None),
    ("Death Wave", "New York, NY Tom Doherty Associates, LLC, 2015.", CopyStatus.MAINTENANCE, None),
    ("Death Wave", "New York, NY Tom Doherty Associates, LLC, 2015.", CopyStatus.LOANED, date(2026, 12, 15)),
    ("Test Book 1", "Imprint XXX2", CopyStatus.AVAILABLE, None),
    ("Test Book 2", "Imprint XXX3", CopyStatus.RESERVED, date(2026, 11, 20)),
]


async def prepare_schema(engine: AsyncEngine, reset: bool = False) -> None:
    async with engine.begin() as conn:
        if reset:
            logger.warning("Dropping all catalog tables")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def load_sample_data(session: AsyncSession) -> Dict[str, int]:
    """
    Insert the sample catalog in one transaction.

    Returns:
        Number of records inserted per table.

    Raises:
        RuntimeError: the catalog already holds authors
    """
    existing = (await session.execute(select(func.count()).select_from(Author))).scalar_one()
    if existing:
        raise RuntimeError(
            f"Catalog already has {existing} authors; rerun with --reset to replace it."
        )

    genres = {name: Genre(name=name) for name in GENRES}
    authors = {
        family: Author(first_name=first, family_name=family, date_of_birth=born, date_of_death=died)
        for first, family, born, died in AUTHORS
    }
    books = {
        title: Book(
            title=title,
            author=authors[family],
            summary=summary,
            isbn=isbn,
            genres=[genres[name] for name in genre_names],
        )
        for title, family, summary, isbn, genre_names in BOOKS
    }
    copies = [
        BookInstance(book=books[title], imprint=imprint, status=status, due_back=due_back or date.today())
        for title, imprint, status, due_back in COPIES
    ]

    session.add_all([*genres.values(), *authors.values(), *books.values(), *copies])
    await session.commit()

    counts = {
        "genres": len(genres),
        "authors": len(authors),
        "books": len(books),
        "book_instances": len(copies),
    }
    logger.info("Sample catalog loaded: %s", counts)
    return counts


async def seed(database_url: Optional[str] = None, reset: bool = False) -> Dict[str, int]:
    engine = build_engine(database_url or settings.database_url)
    try:
        await prepare_schema(engine, reset=reset)
        sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with sessions() as session:
            return await load_sample_data(session)
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Load the Local Library sample catalog")
    parser.add_argument(
        "--database-url",
        help="Override DATABASE_URL from the environment",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate every catalog table before loading",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    try:
        asyncio.run(seed(args.database_url, reset=args.reset))
    except RuntimeError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
