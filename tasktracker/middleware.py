"""
HTTP method override for HTML forms.

Browsers can only submit GET/POST. A POST to `/tasks/5?_method=PUT` is
dispatched as PUT. Only POST can be overridden and only to the methods below.
"""

from __future__ import annotations

from urllib.parse import parse_qs

OVERRIDE_PARAM = "_method"
ALLOWED_METHODS = frozenset({"PUT", "PATCH", "DELETE"})


class MethodOverrideMiddleware:
    def __init__(self, wsgi_app):
        self.wsgi_app = wsgi_app

    def __call__(self, environ, start_response):
        if environ.get("REQUEST_METHOD", "").upper() == "POST":
            query = parse_qs(environ.get("QUERY_STRING", ""))
            values = query.get(OVERRIDE_PARAM)
            if values:
                method = values[0].upper()
                if method in ALLOWED_METHODS:
                    environ["REQUEST_METHOD"] = method
        return self.wsgi_app(environ, start_response)
