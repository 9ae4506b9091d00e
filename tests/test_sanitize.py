"""Unit tests for field-name driven input sanitization."""

import pytest

from errors import InvalidSource, KeyNotFound
from request import HTTPRequest
from sanitize import filter_fields, rule_for, sanitize_email, sanitize_text, sanitize_url

SUBMITTED = {
    "user_mail": "a b@@ex.com",
    "site_url": "http://x .com",
    "name": "<b>x</b>",
}


def _build_request(*, target_query: dict[str, list[str]] | None = None, body: bytes = b"") -> HTTPRequest:
    headers = {"host": "localhost"}
    if body:
        headers["content-type"] = "application/x-www-form-urlencoded"
        headers["content-length"] = str(len(body))
    return HTTPRequest(
        method="POST" if body else "GET",
        path="/contact/submit",
        http_version="HTTP/1.1",
        headers=headers,
        body=body,
        query_params=target_query or {},
    )


def test_filter_applies_rule_per_field_and_keeps_keys() -> None:
    result = filter_fields(SUBMITTED)

    assert set(result) == set(SUBMITTED)
    assert result["user_mail"] is None
    assert result["site_url"] == "http://x.com"
    assert result["name"] == "x"


def test_filter_does_not_mutate_source() -> None:
    source = dict(SUBMITTED)

    filter_fields(source)

    assert source == SUBMITTED


def test_email_rule_strips_then_validates() -> None:
    assert sanitize_email(" john.doe@example.com ") == "john.doe@example.com"
    assert sanitize_email("jo(hn)@exa mple.com") == "john@example.com"
    assert sanitize_email("no-at-sign.example.com") is None
    assert sanitize_email("user@localhost") is None
    assert sanitize_email("") is None


def test_url_rule_strips_without_validating() -> None:
    assert sanitize_url("http://x .com/a b?q=1") == "http://x.com/ab?q=1"
    assert sanitize_url("not a url") == "notaurl"
    assert sanitize_url("http://exämple.com") == "http://exmple.com"


def test_text_rule_removes_tags_and_escapes() -> None:
    assert sanitize_text("<script>alert(1)</script>") == "alert(1)"
    assert sanitize_text('He said "hi" & left') == "He said &quot;hi&quot; &amp; left"
    assert sanitize_text("it's") == "it&#x27;s"
    assert sanitize_text("broken <tag") == "broken "


def test_text_rule_keeps_comparison_operators() -> None:
    assert sanitize_text("1 < 2 and 3 > 2") == "1 &lt; 2 and 3 &gt; 2"
    assert sanitize_text("a <= b") == "a &lt;= b"


def test_rules_are_checked_in_order_case_insensitively() -> None:
    assert rule_for("USER_MAIL") is sanitize_email
    assert rule_for("Homepage_URL") is sanitize_url
    assert rule_for("email_url") is sanitize_email
    assert rule_for("comment") is sanitize_text

    assert filter_fields({"email_url": "http://a.com"}) == {"email_url": None}


def test_single_key_returns_only_that_value() -> None:
    assert filter_fields(SUBMITTED, "name") == "x"


def test_key_list_returns_restricted_map() -> None:
    result = filter_fields(SUBMITTED, ["user_mail", "name"])

    assert result == {"user_mail": None, "name": "x"}


def test_missing_requested_key_raises() -> None:
    with pytest.raises(KeyNotFound, match="phone"):
        filter_fields(SUBMITTED, "phone")

    with pytest.raises(KeyNotFound, match="phone"):
        filter_fields(SUBMITTED, ["name", "phone"])


def test_non_mapping_source_is_rejected() -> None:
    with pytest.raises(InvalidSource):
        filter_fields(["user_mail", "name"])  # type: ignore[arg-type]


def test_named_collections_read_from_request() -> None:
    request = _build_request(target_query={"name": ["<i>Bob</i>"], "tags": ["a", "<b>"]})

    assert filter_fields("get", request=request) == {"name": "Bob", "tags": ["a", ""]}


def test_post_collection_reads_form_body() -> None:
    request = _build_request(body=b"contact_email=bob%40example.com&message=%3Cb%3Ehi%3C%2Fb%3E")

    assert filter_fields("post", request=request) == {
        "contact_email": "bob@example.com",
        "message": "hi",
    }


def test_empty_or_unknown_collections_are_rejected() -> None:
    request = _build_request()

    with pytest.raises(InvalidSource, match="empty"):
        filter_fields("get", request=request)
    with pytest.raises(InvalidSource, match="empty"):
        filter_fields("post", request=request)
    with pytest.raises(InvalidSource, match="Unknown"):
        filter_fields("cookie", request=request)
    with pytest.raises(InvalidSource, match="No request"):
        filter_fields("get")


def test_invalid_source_maps_to_bad_request() -> None:
    assert InvalidSource("x").status_code == 400
