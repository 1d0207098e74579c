"""
Local Library: Template Rendering
==================================

What:  The shared Jinja2 environment and a small render helper.
Why:   Route handlers and the global error handlers render through the same
       environment, so every page shares layout.html.

Autoescaping is on for every .html template. Text fields are stored already
escaped, so templates pass them through `stored_text` to be escaped once.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates
from markupsafe import Markup
from starlette.responses import HTMLResponse

from locallibrary import __version__
from locallibrary.config import settings

PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATE_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"


def stored_text(value: Any) -> str:
    """Undo the input escaping of a stored text field."""
    if value is None:
        return ""
    return Markup(str(value)).unescape()


templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.globals["app_title"] = settings.app_title
templates.env.globals["app_version"] = __version__
templates.env.filters["stored_text"] = stored_text


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
) -> HTMLResponse:
    """Render `name` with `context`; `errors` defaults to an empty list."""
    context = dict(context or {})
    context.setdefault("errors", [])
    return templates.TemplateResponse(request, name, context, status_code=status_code)
