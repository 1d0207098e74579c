"""
Local Library: Author Route Handlers
=====================================

What:  /catalog/authors, /catalog/author/{id} and the author form.
How:   Each handler asks author_service for records and renders a template,
       or redirects after a successful create.

Author update and delete are placeholders: they answer with a fixed
"NOT IMPLEMENTED" text and touch nothing.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from locallibrary.database import get_db_session, get_session_factory
from locallibrary.schemas.forms import AuthorForm, form_to_dict, validate_form
from locallibrary.services.author_service import author_service
from locallibrary.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["Authors"])


@router.get("/authors", response_class=HTMLResponse)
async def author_list(request: Request, db: AsyncSession = Depends(get_db_session)):
    authors = await author_service.list_authors(db)
    return render(request, "author_list.html", {"title": "Author List", "author_list": authors})


@router.get("/author/create", response_class=HTMLResponse)
async def author_create_get(request: Request):
    return render(request, "author_form.html", {"title": "Create Author", "author": None})


@router.post("/author/create", response_class=HTMLResponse)
async def author_create_post(request: Request, db: AsyncSession = Depends(get_db_session)):
    """
    Validate the posted author and either re-render the form (errors) or
    redirect to the new author's page.
    """
    submission = validate_form(AuthorForm, form_to_dict(await request.form()))
    author, errors = await author_service.save_author(db, submission)
    if errors:
        return render(
            request,
            "author_form.html",
            {"title": "Create Author", "author": author, "errors": errors},
        )
    return RedirectResponse(author.url, status_code=303)


# ── Placeholders ──────────────────────────────────────────────────────────

@router.get("/author/{author_id}/delete", response_class=PlainTextResponse)
async def author_delete_get(author_id: str):
    return PlainTextResponse("NOT IMPLEMENTED: Author delete GET")


@router.post("/author/{author_id}/delete", response_class=PlainTextResponse)
async def author_delete_post(author_id: str):
    return PlainTextResponse("NOT IMPLEMENTED: Author delete POST")


@router.get("/author/{author_id}/update", response_class=PlainTextResponse)
async def author_update_get(author_id: str):
    return PlainTextResponse("NOT IMPLEMENTED: Author update GET")


@router.post("/author/{author_id}/update", response_class=PlainTextResponse)
async def author_update_post(author_id: str):
    return PlainTextResponse("NOT IMPLEMENTED: Author update POST")


# ── Detail (after /author/create so "create" is not taken as an id) ─────

@router.get("/author/{author_id}", response_class=HTMLResponse)
async def author_detail(
    request: Request,
    author_id: str,
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    author, books = await author_service.get_author_detail(sessions, author_id)
    return render(
        request,
        "author_detail.html",
        {"title": "Author Detail", "author": author, "author_books": books},
    )
