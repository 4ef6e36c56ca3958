"""Cookie middleware — parses the ``Cookie`` header into ``request.cookies``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from switchyard.http.cookies import parse_cookies

if TYPE_CHECKING:
    from switchyard._internal.types import Handler
    from switchyard.http.request import Request


def wrap_cookies(handler: Handler) -> Handler:
    """Parse request cookies before calling *handler*.

    Cookies already present on the request are kept unless the header
    sends a new value for the same name.
    """

    def cookies_handler(request: Request) -> Any:
        parsed = parse_cookies(request.headers.get("cookie"))
        return handler(request.evolve(cookies={**request.cookies, **parsed}))

    return cookies_handler
