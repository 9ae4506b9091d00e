"""Home controller."""

from assets import AssetCategory, LinkEmitter
from controllers.base import Controller, last_value
from response import HTTPResponse
from sanitize import filter_fields
from view import render_template


class Home(Controller):
    def index_action(self) -> HTTPResponse:
        """Show the index page. Route: /"""
        emitter = LinkEmitter.from_request(self.request)
        name = "World"
        if "name" in self.request.query:
            name = last_value(filter_fields("get", "name", request=self.request)) or name

        return render_template(
            "Home/index.html",
            {
                "stylesheet": emitter.emit("stylesheets/main.css", AssetCategory.STYLESHEET, True),
                "script": emitter.emit_for("javascripts/app.js"),
                "name": name,
                "contact_url": emitter.site_url + "contact",
            },
        )
