"""Bookstore pages.

The pages are static shells rendered by the template engine; their data
comes from client scripts calling the API portal.
"""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from core.engine.template_engine import TemplateEngine, TemplateNotFoundError

router = APIRouter()


def _render(request: Request, view: str, context: dict) -> HTMLResponse:
    templates: TemplateEngine = request.app.state.templates
    try:
        return HTMLResponse(templates.render(view, context))
    except TemplateNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return _render(request, "home", {"title": "Home", "message": "Hello world!"})


@router.get("/book-list", response_class=HTMLResponse)
async def book_list(request: Request):
    return _render(request, "book-list", {"title": "Books"})


@router.get("/admin/book-list", response_class=HTMLResponse)
async def admin_book_list(request: Request):
    return _render(request, "admin-book-list", {"title": "Books (administration)"})


@router.get("/book/{book_key}", response_class=HTMLResponse)
async def book_view(request: Request, book_key: int):
    """Details page of one book."""
    return _render(request, "book-view", {"title": "Book", "bookKey": book_key})


@router.get("/find-bestseller", response_class=HTMLResponse)
async def find_bestseller(request: Request):
    return _render(request, "find-bestseller", {"title": "Find bestseller"})
