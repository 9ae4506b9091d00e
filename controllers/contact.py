"""Contact form controller."""

from __future__ import annotations

import logging

from assets import LinkEmitter
from controllers.base import Controller, last_value
from response import HTTPResponse
from sanitize import filter_fields
from view import render_template

logger = logging.getLogger(__name__)

FORM_FIELDS = ("contact_email", "homepage_url", "message")


class Contact(Controller):
    def before(self) -> bool | None:
        self.emitter = LinkEmitter.from_request(self.request)
        return None

    def index_action(self) -> HTTPResponse:
        return self._render_form({}, error="")

    def submit_action(self) -> HTTPResponse:
        if self.request.method != "POST":
            return self.index_action()

        fields = filter_fields("post", request=self.request)
        values = {name: last_value(fields.get(name)) for name in FORM_FIELDS}
        if not values["contact_email"]:
            logger.info("contact form rejected: invalid email")
            return self._render_form(
                values,
                error="Please enter a valid email address.",
                status_code=400,
            )

        return render_template("Contact/thanks.html", self._context(values))

    def _render_form(
        self,
        values: dict[str, str],
        *,
        error: str,
        status_code: int = 200,
    ) -> HTTPResponse:
        context = self._context(values)
        context["error"] = error
        context["action_url"] = self.emitter.site_url + "contact/submit"
        return render_template("Contact/form.html", context, status_code)

    def _context(self, values: dict[str, str]) -> dict[str, str]:
        context = {name: values.get(name, "") for name in FORM_FIELDS}
        context["stylesheet"] = self.emitter.emit_for("stylesheets/main.css")
        context["home_url"] = self.emitter.site_url
        return context
