"""Rendering — maps handler return values to Response objects.

``render`` inspects the value a route body returned and produces the
appropriate Response. isinstance-based dispatch, no magic, fully
predictable.
"""

from __future__ import annotations

import json as json_module
import mimetypes
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from switchyard.errors import RenderError
from switchyard.http.response import Redirect, Response

if TYPE_CHECKING:
    from switchyard.http.request import Request


def render(value: Any, request: Request) -> Response | None:
    """Convert a route body's return value to a Response.

    Dispatch order:

    1. ``None``              -> ``None`` (the route did not handle the request)
    2. ``Response``          -> pass through
    3. ``Redirect``          -> status + Location header
    4. ``str``               -> 200, text/html
    5. ``bytes``             -> 200, application/octet-stream
    6. ``Path``              -> 200, file contents, type guessed from the name
    7. ``dict`` / ``list``   -> 200, application/json
    8. ``(value, int)``      -> render value, override status
    9. ``(value, int, dict)`` -> render value, override status + add headers
    10. callable             -> render ``value(request)``

    Raises ``RenderError`` for anything else.
    """
    match value:
        case None:
            return None
        case Response():
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(value.headers)
            )
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case Path():
            return _file_response(value)
        case dict() | list():
            return Response(
                body=json_module.dumps(value, default=str),
                content_type="application/json",
            )
        case (inner, int() as status):
            return _with_status(render(inner, request), status, None)
        case (inner, int() as status, Mapping() as headers):
            return _with_status(render(inner, request), status, headers)
        case _ if callable(value):
            return render(value(request), request)
        case _:
            msg = f"Cannot render value of type {type(value).__name__}: {value!r}"
            raise RenderError(msg)


def _with_status(
    response: Response | None,
    status: int,
    headers: Mapping[str, str] | None,
) -> Response:
    if response is None:
        response = Response(body="")
    response = response.with_status(status)
    if headers:
        response = response.with_headers(headers)
    return response


def _file_response(path: Path) -> Response | None:
    """Serve a file from disk; a missing file renders as not handled."""
    if not path.is_file():
        return None
    content_type, _ = mimetypes.guess_type(path.name)
    return Response(
        body=path.read_bytes(),
        content_type=content_type or "application/octet-stream",
    )
