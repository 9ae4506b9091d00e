"""Translate exceptions raised while handling a request into HTTP responses."""

from __future__ import annotations

import html
import logging
import traceback

import config
from controllers.errors import render_error_page
from errors import TemplateNotFound
from response import REASON_PHRASES, HTTPResponse, html_response

logger = logging.getLogger(__name__)


def status_for(exc: BaseException) -> int:
    status_code = getattr(exc, "status_code", 500)
    if not isinstance(status_code, int) or status_code not in REASON_PHRASES or status_code < 400:
        return 500
    return status_code


def handle_exception(exc: Exception) -> HTTPResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.exception("Unhandled error while handling request", exc_info=exc)
    else:
        logger.warning("Request failed status=%s error=%s: %s", status_code, type(exc).__name__, exc)

    if config.SHOW_ERRORS:
        return html_response(_detailed_page(exc, status_code), status_code)

    try:
        return render_error_page(status_code)
    except TemplateNotFound:
        return HTTPResponse(status_code=status_code, body=REASON_PHRASES[status_code])


def _detailed_page(exc: Exception, status_code: int) -> str:
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return (
        f"<h1>{status_code} {REASON_PHRASES[status_code]}</h1>"
        f"<p>Uncaught exception: '{html.escape(type(exc).__name__)}'</p>"
        f"<p>Message: '{html.escape(str(exc))}'</p>"
        f"<p>Stack trace:<pre>{html.escape(trace)}</pre></p>"
    )
