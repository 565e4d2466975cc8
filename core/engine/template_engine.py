"""Template Engine — renders HTML views with ``#placeholder#`` substitution.

Views are plain HTML files in one directory. Rendering a view replaces
every ``#name#`` marker with the HTML-escaped value of ``context["name"]``.
Container values (dicts, lists, ...) are not substituted; their markers are
left in place. File contents are cached per path after the first read.

This is enough for the demo pages, which only need a title and a message
and leave the data to client scripts calling the API portal.
"""

import html
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("bookstore.templates")


class TemplateNotFoundError(LookupError):
    """The requested view has no file in the views directory."""


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def fmt_value(value: Any) -> str:
    """Format a scalar for insertion into HTML."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return html.escape(str(value))


def substitute(template: str, context: Dict[str, Any]) -> str:
    """Replace ``#key#`` markers of every scalar entry of ``context``."""
    rendered = template
    for key, value in context.items():
        if isinstance(value, (dict, list, tuple, set)):
            continue
        rendered = rendered.replace(f"#{key}#", fmt_value(value))
    return rendered


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class TemplateEngine:
    """Loads, caches and renders the views of one directory.

    Usage::

        engine = TemplateEngine(Path("verticals/bookstore/views"))
        page = engine.render("home", {"title": "Home", "message": "Hello world!"})
    """

    def __init__(self, views_dir: Path | str, extension: str = ".html"):
        self.views_dir = Path(views_dir)
        self.extension = extension
        self._cache: Dict[Path, str] = {}

    def _read(self, path: Path) -> str:
        cached = self._cache.get(path)
        if cached is not None:
            return cached
        if not path.is_file():
            raise TemplateNotFoundError(f"View not found: {path}")
        content = path.read_text(encoding="utf-8")
        self._cache[path] = content
        logger.debug("Loaded view %s", path)
        return content

    def render(self, name: str, context: Optional[Dict[str, Any]] = None) -> str:
        """Render the view ``name`` with ``context``.

        Args:
            name: View file name without extension.
            context: Values for the ``#key#`` markers.

        Returns:
            The rendered HTML.
        """
        path = self.views_dir / f"{name}{self.extension}"
        return substitute(self._read(path), context or {})

    def clear_cache(self) -> None:
        self._cache.clear()

    def list_views(self) -> list[str]:
        """Return the names of the views available in the directory."""
        return sorted(p.stem for p in self.views_dir.glob(f"*{self.extension}"))
