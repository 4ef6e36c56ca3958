"""Method and route gates.

A gate wraps a handler so it only runs when the request qualifies;
otherwise it returns ``None`` and the combinator moves on to the next
handler. Gates never modify the caller's request: the route gate hands
a new request (with captured params merged in) to its handler.
"""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPMethod
from typing import TYPE_CHECKING, Any

from switchyard.http.response import Response
from switchyard.routing.pattern import prepare_route

if TYPE_CHECKING:
    from switchyard._internal.types import Handler
    from switchyard.http.request import Request


def normalize_method(method: str | HTTPMethod | None) -> str | None:
    """Upper-case a method name; ``None`` stays ``None`` (any method)."""
    if method is None:
        return None
    return str(method).upper()


def method_matches(
    method: str,
    request: Request,
    override_field: str = "_method",
) -> bool:
    """True if *request* is a *method* request.

    A ``POST`` carrying a form field named *override_field* is treated as
    the method named by that field, compared case-insensitively.
    """
    form_method = request.form_params.get(override_field)
    if form_method is not None and request.method == "POST":
        return str(form_method).upper() == method
    return request.method == method


def _without_body(result: Any) -> Any:
    """Clear the body of a handler result, keeping every other field."""
    if isinstance(result, Response):
        return result.without_body()
    if isinstance(result, Mapping):
        return {**result, "body": None}
    return result


def if_method(
    method: str | HTTPMethod | None,
    handler: Handler,
    *,
    override_field: str = "_method",
    head_as_get: bool = True,
) -> Handler:
    """Run *handler* only for requests whose effective method is *method*.

    ``method=None`` accepts every method. When *head_as_get* is set, a
    ``GET`` handler also answers ``HEAD`` requests with its body cleared.
    """
    required = normalize_method(method)

    def method_gate(request: Request) -> Any:
        if required is None or method_matches(required, request, override_field):
            return handler(request)
        if head_as_get and required == "GET" and request.method == "HEAD":
            result = handler(request)
            if result is None:
                return None
            return _without_body(result)
        return None

    return method_gate


def if_route(route: Any, handler: Handler) -> Handler:
    """Run *handler* only when *route* matches the request path.

    The route is compiled once, here. Captured params are merged into
    ``route_params`` and ``params`` of the request passed to *handler*.
    """
    matcher = prepare_route(route)

    def route_gate(request: Request) -> Any:
        captured = matcher.match(request.path)
        if captured is None:
            return None
        return handler(request.with_route_params(captured))

    return route_gate
