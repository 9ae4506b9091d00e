"""Error pages reachable through the /403, /404, /500 ... routes."""

from controllers.base import Controller
from response import REASON_PHRASES, HTTPResponse
from view import render_template

ERROR_ACTIONS: dict[str, int] = {
    "forbidden": 403,
    "not_found": 404,
    "internal_server_error": 500,
    "bad_gateway": 502,
    "service_unavailable": 503,
    "gateway_timeout": 504,
}


def render_error_page(status_code: int, message: str = "") -> HTTPResponse:
    title = REASON_PHRASES.get(status_code, "Error")
    return render_template(
        "Errors/error.html",
        {"code": status_code, "title": title, "message": message or title},
        status_code,
    )


class Errors(Controller):
    def forbidden_action(self) -> HTTPResponse:
        return render_error_page(403, "You are not allowed to access this page.")

    def not_found_action(self) -> HTTPResponse:
        return render_error_page(404, "The page you requested could not be found.")

    def internal_server_error_action(self) -> HTTPResponse:
        return render_error_page(500)

    def bad_gateway_action(self) -> HTTPResponse:
        return render_error_page(502)

    def service_unavailable_action(self) -> HTTPResponse:
        return render_error_page(503)

    def gateway_timeout_action(self) -> HTTPResponse:
        return render_error_page(504)
