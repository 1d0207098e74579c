"""
Local Library: Book Route Handlers
===================================

What:  Book list, detail, create, update and delete pages.

Request Flow (create/update POST):
    1. Flatten the form body (repeated `genre` keys become a list)
    2. validate_form: normalize genre → trim/escape → pydantic rules
    3. book_service.save_book: candidate record, reference checks, write
    4. Errors → re-render book_form.html with the candidate, the author and
       genre options (previous choices pre-selected) and the error list
       No errors → 303 redirect to the book's page

Delete Flow:
    GET  shows the book and its copies (redirects to the list when gone)
    POST deletes only when no copy references the book; otherwise it
         renders the same page listing the blocking copies
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from locallibrary.database import get_db_session, get_session_factory
from locallibrary.schemas.forms import BookForm, form_to_dict, validate_form
from locallibrary.services.book_service import book_service
from locallibrary.services.common import parse_identifier
from locallibrary.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["Books"])

BOOK_LIST_URL = "/catalog/books"


@router.get("/books", response_class=HTMLResponse)
async def book_list(request: Request, db: AsyncSession = Depends(get_db_session)):
    books = await book_service.list_books(db)
    return render(request, "book_list.html", {"title": "Book List", "book_list": books})


# ── Create ────────────────────────────────────────────────────────────────

@router.get("/book/create", response_class=HTMLResponse)
async def book_create_get(
    request: Request,
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    authors, genres = await book_service.get_form_options(sessions)
    return render(
        request,
        "book_form.html",
        {
            "title": "Create Book",
            "book": None,
            "authors": authors,
            "genres": genres,
            "selected_genres": set(),
        },
    )


@router.post("/book/create", response_class=HTMLResponse)
async def book_create_post(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    submission = validate_form(BookForm, form_to_dict(await request.form()))
    book, selected, errors = await book_service.save_book(db, submission)
    if errors:
        authors, genres = await book_service.get_form_options(sessions)
        return render(
            request,
            "book_form.html",
            {
                "title": "Create Book",
                "book": book,
                "authors": authors,
                "genres": genres,
                "selected_genres": selected,
                "errors": errors,
            },
        )
    return RedirectResponse(book.url, status_code=303)


# ── Delete ────────────────────────────────────────────────────────────────

@router.get("/book/{book_id}/delete", response_class=HTMLResponse)
async def book_delete_get(
    request: Request,
    book_id: str,
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    book, copies = await book_service.get_delete_view(sessions, book_id)
    if book is None:
        return RedirectResponse(BOOK_LIST_URL, status_code=302)
    return render(
        request,
        "book_delete.html",
        {"title": "Delete Book", "book": book, "book_instances": copies},
    )


@router.post("/book/{book_id}/delete", response_class=HTMLResponse)
async def book_delete_post(
    request: Request,
    book_id: str,
    db: AsyncSession = Depends(get_db_session),
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """
    The confirmation form posts the id as `bookid`; the path id is used
    when the body does not carry one.
    """
    form = await request.form()
    target = form.get("bookid") or book_id
    book, copies = await book_service.get_delete_view(sessions, target)

    if copies:
        logger.info("Delete refused for book %s: %d copies remain", target, len(copies))
        return render(
            request,
            "book_delete.html",
            {"title": "Delete Book", "book": book, "book_instances": copies},
        )

    if book is not None:
        await book_service.delete_book(db, book.id)
    return RedirectResponse(BOOK_LIST_URL, status_code=303)


# ── Update ────────────────────────────────────────────────────────────────

@router.get("/book/{book_id}/update", response_class=HTMLResponse)
async def book_update_get(
    request: Request,
    book_id: str,
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    book, authors, genres = await book_service.get_update_form(sessions, book_id)
    return render(
        request,
        "book_form.html",
        {
            "title": "Update Book",
            "book": book,
            "authors": authors,
            "genres": genres,
            "selected_genres": {genre.id for genre in book.genres},
        },
    )


@router.post("/book/{book_id}/update", response_class=HTMLResponse)
async def book_update_post(
    request: Request,
    book_id: str,
    db: AsyncSession = Depends(get_db_session),
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    record_id = parse_identifier(book_id, "book")
    submission = validate_form(BookForm, form_to_dict(await request.form()))
    book, selected, errors = await book_service.save_book(db, submission, record_id)
    if errors:
        authors, genres = await book_service.get_form_options(sessions)
        return render(
            request,
            "book_form.html",
            {
                "title": "Update Book",
                "book": book,
                "authors": authors,
                "genres": genres,
                "selected_genres": selected,
                "errors": errors,
            },
        )
    return RedirectResponse(book.url, status_code=303)


# ── Detail ────────────────────────────────────────────────────────────────

@router.get("/book/{book_id}", response_class=HTMLResponse)
async def book_detail(
    request: Request,
    book_id: str,
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    book, copies = await book_service.get_book_detail(sessions, book_id)
    return render(
        request,
        "book_detail.html",
        {"title": "Book Detail", "book": book, "book_instances": copies},
    )
