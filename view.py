"""Template rendering for controller actions."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import jinja2

from config import VIEWS_ROOT
from errors import TemplateNotFound
from response import HTTPResponse, html_response


@lru_cache(maxsize=None)
def _environment(views_root: Path) -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(views_root),
        autoescape=jinja2.select_autoescape(),
    )


def render(template: str, context: dict[str, Any] | None = None, *, views_root: Path = VIEWS_ROOT) -> str:
    """Render ``views/<template>`` with ``context``.

    Values are HTML-escaped on output; templates mark already-sanitized
    markup with ``|safe``.
    """
    try:
        loaded = _environment(Path(views_root)).get_template(template)
    except jinja2.TemplateNotFound:
        raise TemplateNotFound(f"Template {template} not found") from None
    return loaded.render(context or {})


def render_template(
    template: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
    *,
    views_root: Path = VIEWS_ROOT,
) -> HTTPResponse:
    return html_response(render(template, context, views_root=views_root), status_code)
