"""
Local Library: Catalog Home
============================

What:  The catalog landing page with record counts, and the site root
       redirect that points at it.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from locallibrary.database import get_session_factory
from locallibrary.services.catalog_service import get_catalog_counts
from locallibrary.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Catalog"])


@router.get("/", include_in_schema=False)
async def site_root():
    return RedirectResponse("/catalog/", status_code=302)


@router.get("/catalog/", response_class=HTMLResponse)
async def catalog_home(
    request: Request,
    sessions: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """
    Counts for books, copies, available copies, authors and genres.

    All five counts are read in one parallel group; if any of them fails the
    page is not rendered with partial numbers.
    """
    counts = await get_catalog_counts(sessions)
    return render(
        request,
        "index.html",
        {"title": "Local Library Home", **counts},
    )
