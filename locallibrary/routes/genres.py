"""
Local Library: Genre Route Handlers
====================================

What:  Read-only genre pages: /catalog/genres and /catalog/genre/{id}.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from locallibrary.database import get_db_session, get_session_factory
from locallibrary.services.genre_service import genre_service
from locallibrary.templating import render

router = APIRouter(prefix="/catalog", tags=["Genres"])


@router.get("/genres", response_class=HTMLResponse)
async def genre_list(request: Request, db: AsyncSession = Depends(get_db_session)):
    genres = await genre_service.list_genres(db)
    return render(request, "genre_list.html", {"title": "Genre List", "genre_list": genres})


@router.get("/genre/{genre_id}", response_class=HTMLResponse)
async def genre_detail(
    request: Request,
    genre_id: str,
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    genre, books = await genre_service.get_genre_detail(sessions, genre_id)
    return render(
        request,
        "genre_detail.html",
        {"title": "Genre Detail", "genre": genre, "genre_books": books},
    )
