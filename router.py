"""Routing table mapping URL patterns to controller actions."""

from __future__ import annotations

import re
from typing import Any

from config import FRONT_CONTROLLER, PUBLIC_DIR
from controllers.base import Controller
from errors import RouteNotFound
from request import HTTPRequest
from response import HTTPResponse

_VARIABLE = re.compile(r"\{([a-z_]+)\}")
_CUSTOM_VARIABLE = re.compile(r"\{([a-z_]+):([^}]+)\}")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_controller_name(value: str) -> str:
    """``posts-admin`` -> ``PostsAdmin``."""
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_]", value) if part)


def to_action_name(value: str) -> str:
    """``not-found`` / ``notFound`` -> ``not_found``."""
    return _CAMEL_BOUNDARY.sub("_", value).replace("-", "_").lower()


class Router:
    def __init__(self, controllers: dict[str, type[Controller]] | None = None) -> None:
        self._routes: list[tuple[re.Pattern[str], dict[str, Any]]] = []
        self._controllers: dict[str, type[Controller]] = dict(controllers or {})

    @property
    def routes(self) -> list[tuple[re.Pattern[str], dict[str, Any]]]:
        return list(self._routes)

    def register(self, name: str, controller: type[Controller]) -> None:
        self._controllers[name] = controller

    def add(self, route: str, params: dict[str, Any] | None = None) -> None:
        """Add a route such as ``{controller}/{action}`` or ``posts/{id:\\d+}``."""
        pattern = _CUSTOM_VARIABLE.sub(r"(?P<\1>\2)", route)
        pattern = _VARIABLE.sub(r"(?P<\1>[a-z-]+)", pattern)
        self._routes.append((re.compile(f"^{pattern}$", re.IGNORECASE), dict(params or {})))

    def match(self, url: str) -> dict[str, Any] | None:
        for pattern, params in self._routes:
            matched = pattern.match(url)
            if matched is None:
                continue
            merged = dict(params)
            merged.update({key: value for key, value in matched.groupdict().items() if value is not None})
            return merged
        return None

    def dispatch(self, url: str, request: HTTPRequest) -> HTTPResponse:
        url = normalize_url(url)
        params = self.match(url)
        if params is None:
            raise RouteNotFound(f"No route matched '{url}'")

        controller_name = to_controller_name(str(params.get("controller", "")))
        controller_class = self._controllers.get(controller_name)
        if controller_class is None:
            raise RouteNotFound(f"Controller class {controller_name} not found")

        action = to_action_name(str(params.get("action", "index")))
        controller = controller_class(params, request)
        if not controller.has_action(action):
            raise RouteNotFound(f"Action {action} not found in controller {controller_name}")
        return controller.run(action)


def normalize_url(url: str) -> str:
    """Drop the query string, surrounding slashes and public dir / front controller prefixes."""
    path = url.split("?", 1)[0].strip("/")
    for prefix in (PUBLIC_DIR, FRONT_CONTROLLER):
        if path == prefix:
            return ""
        if path.startswith(f"{prefix}/"):
            path = path[len(prefix) + 1 :]
    return path
