"""Sanitization of submitted fields (query string, form body or a plain mapping).

Each field is cleaned by the first rule whose pattern matches its name:
names containing ``mail`` get the email rule, names containing ``url`` the
URL rule, everything else the generic text rule.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from errors import InvalidSource, KeyNotFound
from request import HTTPRequest

Sanitizer = Callable[[str], Any]

_EMAIL_ILLEGAL = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")
_URL_ILLEGAL = re.compile(r"[^A-Za-z0-9$\-_.+!*'(),{}|\\^~\[\]`<>#%\";/?:@&=]")
_TAG = re.compile(r"<[A-Za-z/!?][^>]*>?")

_LOCAL_ATOM = r"[A-Za-z0-9!#$%&'*+\-=?^_`{|}~]+"
_DOMAIN_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
_VALID_EMAIL = re.compile(
    rf"^{_LOCAL_ATOM}(?:\.{_LOCAL_ATOM})*@{_DOMAIN_LABEL}(?:\.{_DOMAIN_LABEL})+$"
)
_MAX_EMAIL_LENGTH = 320


def sanitize_email(value: str) -> str | None:
    """Strip characters illegal in an address; None if the rest is not a valid address."""
    sanitized = _EMAIL_ILLEGAL.sub("", value)
    if len(sanitized) > _MAX_EMAIL_LENGTH or not _VALID_EMAIL.match(sanitized):
        return None
    return sanitized


def sanitize_url(value: str) -> str:
    return _URL_ILLEGAL.sub("", value)


def sanitize_text(value: str) -> str:
    without_tags = _TAG.sub("", value).replace("\x00", "")
    return html.escape(without_tags, quote=True)


# Checked in order, first match wins.
FIELD_RULES: list[tuple[re.Pattern[str], Sanitizer]] = [
    (re.compile(r"mail", re.IGNORECASE), sanitize_email),
    (re.compile(r"url", re.IGNORECASE), sanitize_url),
]


def rule_for(field_name: str) -> Sanitizer:
    for pattern, sanitizer in FIELD_RULES:
        if pattern.search(field_name):
            return sanitizer
    return sanitize_text


def sanitize_value(field_name: str, value: Any) -> Any:
    sanitizer = rule_for(field_name)
    if isinstance(value, list):
        return [sanitizer(str(item)) for item in value]
    return sanitizer(str(value))


def _select_source(source: str | Mapping[str, Any], request: HTTPRequest | None) -> Mapping[str, Any]:
    if isinstance(source, Mapping):
        return source
    if not isinstance(source, str):
        raise InvalidSource(f"Cannot sanitize a {type(source).__name__}; expected a mapping")

    collection = source.lower()
    if collection not in {"get", "post"}:
        raise InvalidSource(f"Unknown input collection '{source}'")
    if request is None:
        raise InvalidSource(f"No request given to read '{collection}' data from")

    data = request.query if collection == "get" else request.form
    if not data:
        raise InvalidSource(f"The '{collection}' collection is empty")
    return data


def filter_fields(
    source: str | Mapping[str, Any],
    keys: str | Iterable[str] | None = None,
    *,
    request: HTTPRequest | None = None,
) -> Any:
    """Sanitize every field of ``source`` and return all, some or one of them.

    ``source`` is ``"get"`` or ``"post"`` (read from ``request``) or a mapping.
    ``keys`` selects a single value (a string) or a sub-map (an iterable of
    names); any requested name missing from the source raises ``KeyNotFound``.
    """
    data = _select_source(source, request)
    sanitized = {name: sanitize_value(name, value) for name, value in data.items()}

    if keys is None:
        return sanitized

    if isinstance(keys, str):
        if keys not in sanitized:
            raise KeyNotFound(keys)
        return sanitized[keys]

    result = {}
    for key in keys:
        if key not in sanitized:
            raise KeyNotFound(key)
        result[key] = sanitized[key]
    return result
