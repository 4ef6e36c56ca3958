"""Parameter middleware — query string and form body parsing.

Fills ``query_params`` and ``form_params`` and merges both into
``params`` (form fields win over query fields of the same name), so
named bindings can read either source.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from switchyard.errors import HTTPError
from switchyard.http.forms import is_form, parse_form_body
from switchyard.http.query import parse_params
from switchyard.routing.params import merge_params

if TYPE_CHECKING:
    from switchyard._internal.types import Handler
    from switchyard.http.request import Request


def params_request(request: Request, encoding: str = "utf-8") -> Request:
    """Return *request* with its query string and form body parsed.

    Raises ``HTTPError(400)`` when a form body cannot be parsed.
    """
    query = parse_params(request.query_string, encoding)
    form: dict[str, Any] = {}
    if request.body and is_form(request.content_type):
        try:
            form = parse_form_body(request.body, request.content_type or "", encoding)
        except ValueError as exc:
            raise HTTPError(status=400, detail=f"Malformed form body: {exc}") from exc

    return request.evolve(
        query_params=merge_params(request.query_params, query),
        form_params=merge_params(request.form_params, form),
        params=merge_params(request.params, merge_params(query, form)),
    )


def wrap_params(handler: Handler, encoding: str = "utf-8") -> Handler:
    """Parse query and form params before calling *handler*."""

    def params_handler(request: Request) -> Any:
        return handler(params_request(request, encoding))

    return params_handler
