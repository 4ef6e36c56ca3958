"""WSGI adapter — serves a switchyard handler from any WSGI server.

Translates the environ into a ``Request``, dispatches, and translates the
``Response`` back into ``start_response`` calls. This is the one place
where handler exceptions are caught: ``HTTPError`` becomes its status
response, anything else is logged and answered with a 500.
"""

import logging
import traceback
from collections.abc import Callable, Iterable, Mapping
from http import HTTPStatus
from typing import Any

from switchyard._internal.types import Handler
from switchyard.config import DEFAULT_CONFIG, AppConfig
from switchyard.errors import HTTPError, NotFound
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.render import render

logger = logging.getLogger("switchyard.server")

StartResponse = Callable[..., Any]


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def status_line(status: int) -> str:
    """``200`` -> ``"200 OK"``; unknown codes get an empty phrase."""
    try:
        phrase = HTTPStatus(status).phrase
    except ValueError:
        phrase = ""
    return f"{status} {phrase}".rstrip()


def response_headers(response: Response, body: bytes) -> list[tuple[str, str]]:
    """Build the WSGI header list for *response*."""
    headers = list(response.headers)
    if response.header("Content-Type") is None:
        headers.insert(0, ("Content-Type", response.content_type))
    headers.extend(("Set-Cookie", cookie.to_header_value()) for cookie in response.cookies)
    headers.append(("Content-Length", str(len(body))))
    return headers


def error_response(exc: HTTPError) -> Response:
    """Map an HTTPError to a plain-text Response."""
    return Response(
        body=exc.detail or status_line(exc.status),
        status=exc.status,
        content_type="text/plain; charset=utf-8",
    ).with_headers(exc.headers)


class WSGIApp:
    """A WSGI application dispatching to a switchyard handler.

    Usage::

        from wsgiref.simple_server import make_server

        app = WSGIApp(define_routes("site", ...))
        make_server("", 8000, app).serve_forever()

    A handler result of ``None`` becomes a 404.
    """

    __slots__ = ("config", "handler")

    def __init__(self, handler: Handler, config: AppConfig | None = None) -> None:
        self.handler = handler
        self.config = config or DEFAULT_CONFIG

    def respond(self, request: Request) -> Response:
        """Dispatch *request* and always produce a Response."""
        try:
            result = render(self.handler(request), request)
            if result is None:
                raise NotFound(f"No route matches {request.method} {request.uri!r}")
        except HTTPError as exc:
            logger.debug("%d %s %s: %s", exc.status, request.method, request.uri, exc.detail)
            return error_response(exc)
        except Exception:
            logger.exception("500 %s %s", request.method, request.uri)
            body = traceback.format_exc() if self.config.debug else "Internal Server Error"
            return Response(body=body, status=500, content_type="text/plain; charset=utf-8")
        return result

    def __call__(
        self,
        environ: Mapping[str, Any],
        start_response: StartResponse,
    ) -> Iterable[bytes]:
        try:
            request = Request.from_wsgi(environ, self.config.max_content_length)
        except HTTPError as exc:
            response = error_response(exc)
        else:
            response = self.respond(request)

        body = response.body_bytes if _body_allowed(response.status) else b""
        start_response(status_line(response.status), response_headers(response, body))
        return [body]
