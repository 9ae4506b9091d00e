"""Base controller: action lookup wrapped in before/after hooks."""

from __future__ import annotations

from typing import Any

from errors import RouteNotFound
from request import HTTPRequest
from response import HTTPResponse

ACTION_SUFFIX = "_action"


def last_value(value: Any) -> str:
    """Collapse a repeated field to its last submitted value."""
    if isinstance(value, list):
        value = value[-1] if value else ""
    return value or ""


class Controller:
    def __init__(self, route_params: dict[str, Any], request: HTTPRequest) -> None:
        self.route_params = route_params
        self.request = request

    def has_action(self, action: str) -> bool:
        return callable(getattr(self, f"{action}{ACTION_SUFFIX}", None))

    def run(self, action: str) -> HTTPResponse:
        method = getattr(self, f"{action}{ACTION_SUFFIX}", None)
        if not callable(method):
            raise RouteNotFound(
                f"Method {action}{ACTION_SUFFIX} not found in controller {type(self).__name__}"
            )

        if self.before() is False:
            return HTTPResponse(status_code=204)
        response = method()
        self.after()
        return response

    def before(self) -> bool | None:
        return None

    def after(self) -> None:
        return None
