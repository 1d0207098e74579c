"""
Local Library: Book Instance (Copy) Route Handlers
===================================================

What:  Copy list, detail and create pages.

Copy update and delete are placeholders returning a fixed
"NOT IMPLEMENTED" text; they perform no action.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from locallibrary.database import get_db_session
from locallibrary.models import CopyStatus
from locallibrary.schemas.forms import BookInstanceForm, form_to_dict, validate_form
from locallibrary.services.book_instance_service import book_instance_service
from locallibrary.templating import render, stored_text

router = APIRouter(prefix="/catalog", tags=["Book Instances"])

STATUS_CHOICES = [status.value for status in CopyStatus]


@router.get("/bookinstances", response_class=HTMLResponse)
async def bookinstance_list(request: Request, db: AsyncSession = Depends(get_db_session)):
    copies = await book_instance_service.list_copies(db)
    return render(
        request,
        "bookinstance_list.html",
        {"title": "Book Instance List", "bookinstance_list": copies},
    )


@router.get("/bookinstance/create", response_class=HTMLResponse)
async def bookinstance_create_get(request: Request, db: AsyncSession = Depends(get_db_session)):
    books = await book_instance_service.list_book_options(db)
    return render(
        request,
        "bookinstance_form.html",
        {
            "title": "Create Book Instance",
            "book_list": books,
            "bookinstance": None,
            "selected_book": None,
            "status_choices": STATUS_CHOICES,
        },
    )


@router.post("/bookinstance/create", response_class=HTMLResponse)
async def bookinstance_create_post(request: Request, db: AsyncSession = Depends(get_db_session)):
    submission = validate_form(BookInstanceForm, form_to_dict(await request.form()))
    copy, errors = await book_instance_service.save_copy(db, submission)
    if errors:
        books = await book_instance_service.list_book_options(db)
        return render(
            request,
            "bookinstance_form.html",
            {
                "title": "Create Book Instance",
                "book_list": books,
                "bookinstance": copy,
                "selected_book": copy.book_id,
                "status_choices": STATUS_CHOICES,
                "errors": errors,
            },
        )
    return RedirectResponse(copy.url, status_code=303)


# ── Placeholders ──────────────────────────────────────────────────────────

@router.get("/bookinstance/{copy_id}/delete", response_class=PlainTextResponse)
async def bookinstance_delete_get(copy_id: str):
    return PlainTextResponse("NOT IMPLEMENTED: BookInstance delete GET")


@router.post("/bookinstance/{copy_id}/delete", response_class=PlainTextResponse)
async def bookinstance_delete_post(copy_id: str):
    return PlainTextResponse("NOT IMPLEMENTED: BookInstance delete POST")


@router.get("/bookinstance/{copy_id}/update", response_class=PlainTextResponse)
async def bookinstance_update_get(copy_id: str):
    return PlainTextResponse("NOT IMPLEMENTED: BookInstance update GET")


@router.post("/bookinstance/{copy_id}/update", response_class=PlainTextResponse)
async def bookinstance_update_post(copy_id: str):
    return PlainTextResponse("NOT IMPLEMENTED: BookInstance update POST")


@router.get("/bookinstance/{copy_id}", response_class=HTMLResponse)
async def bookinstance_detail(
    request: Request,
    copy_id: str,
    db: AsyncSession = Depends(get_db_session),
):
    copy = await book_instance_service.get_copy(db, copy_id)
    return render(
        request,
        "bookinstance_detail.html",
        {"title": f"Copy of {stored_text(copy.book.title)}", "bookinstance": copy},
    )
