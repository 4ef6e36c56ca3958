"""Responses produced by ``render`` and consumed by the WSGI adapter.

A ``Response`` is frozen; middleware adjusts one by chaining ``.with_*()``
calls, each returning a copy. ``Redirect`` is a route-body result that
``render`` turns into a ``Response`` with a ``Location`` header.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from switchyard.http.cookies import SetCookie

Header = tuple[str, str]


@dataclass(frozen=True, slots=True)
class Response:
    """Status, body, headers and cookies of a handled request.

    ``content_type`` is sent unless ``headers`` already carries a
    ``Content-Type`` of its own.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[Header, ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str] | Iterable[Header]) -> Response:
        """Append *headers*, given as a mapping or as name-value pairs."""
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        return replace(self, headers=(*self.headers, *pairs))

    def with_cookie(self, cookie: SetCookie) -> Response:
        return replace(self, cookies=(*self.cookies, cookie))

    def without_body(self) -> Response:
        """Same response, empty body. Used to answer HEAD with a GET route."""
        return replace(self, body=self.body[:0])

    def header(self, name: str) -> str | None:
        """First value of header *name*, compared case-insensitively."""
        wanted = name.lower()
        return next((value for key, value in self.headers if key.lower() == wanted), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body if isinstance(self.body, str) else self.body.decode("utf-8")


@dataclass(frozen=True, slots=True)
class Redirect:
    """Route-body result asking for a redirect to ``url``."""

    url: str
    status: int = 302
    headers: tuple[Header, ...] = ()
