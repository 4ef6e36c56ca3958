"""Route declarations compiled into guarded handlers.

``declare_route`` stacks the pieces of a route into one handler::

    method gate -> route gate -> bind params -> body(**bound) -> render

The verb helpers (``get``, ``post``, ...) are shorthands that work both
as plain calls and as decorators::

    hello = get("/hello/:name", ["name"], lambda name: f"Hi {name}")

    @get("/users/:id")
    def show_user(id, request): ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from switchyard.config import DEFAULT_CONFIG, AppConfig
from switchyard.render import render
from switchyard.routing.binding import (
    BindingSpec,
    bind,
    bindings_from_signature,
    parse_bindings,
)
from switchyard.routing.gates import if_method, if_route, normalize_method
from switchyard.routing.pattern import route_template

if TYPE_CHECKING:
    from switchyard._internal.types import Handler
    from switchyard.http.request import Request

logger = logging.getLogger("switchyard.routing")


@dataclass(frozen=True, slots=True)
class RouteMetadata:
    """Introspection record for one declared route.

    Fixed at declaration time; never consulted during dispatch.
    """

    method: str | None
    path: str | None
    bindings: BindingSpec
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class Route:
    """A declared route. Calling it dispatches a request.

    Created by ``declare_route``; immutable afterwards.
    """

    method: str | None
    path: str | None
    bindings: BindingSpec
    body: Callable[..., Any]
    metadata: Mapping[str, Any]
    dispatch: Handler = field(repr=False, compare=False)

    def __call__(self, request: Request) -> Any:
        return self.dispatch(request)

    @property
    def entry(self) -> RouteMetadata:
        """This route's introspection record."""
        return RouteMetadata(self.method, self.path, self.bindings, self.metadata)


def resolve_bindings(bindings: Any, body: Callable[..., Any]) -> BindingSpec:
    """Parse explicit *bindings*, or infer them from *body* when ``None``."""
    if bindings is None:
        return bindings_from_signature(body)
    return parse_bindings(bindings)


def declare_route(
    method: str | None,
    route: Any,
    bindings: Any = None,
    body: Callable[..., Any] | None = None,
    *,
    metadata: Mapping[str, Any] | None = None,
    config: AppConfig | None = None,
) -> Any:
    """Compile a route into a ``Route`` handler.

    Args:
        method: HTTP method the route answers, or ``None`` for any.
        route: Template string, ``(template, constraints)`` pair, compiled
            regex, or matcher.
        bindings: Binding tokens (see ``switchyard.routing.binding``).
            ``None`` infers them from *body*'s signature.
        body: Called with the bound values as keyword arguments; its
            return value is rendered. Omit to use as a decorator.
        metadata: Free-form data kept on the route for introspection.
        config: Method-gate settings; defaults to ``AppConfig()``.

    Raises ``BindingError`` or ``RoutePatternError`` immediately when the
    declaration is invalid.
    """
    if body is None:

        def decorator(func: Callable[..., Any]) -> Route:
            return declare_route(
                method, route, bindings, func, metadata=metadata, config=config
            )

        return decorator

    cfg = config or DEFAULT_CONFIG
    spec = resolve_bindings(bindings, body)
    _body = body

    def respond(request: Request) -> Any:
        return render(_body(**bind(spec, request)), request)

    dispatch = if_method(
        method,
        if_route(route, respond),
        override_field=cfg.method_override_field,
        head_as_get=cfg.head_as_get,
    )
    declared = Route(
        method=normalize_method(method),
        path=route_template(route),
        bindings=spec,
        body=body,
        metadata=MappingProxyType(dict(metadata or {})),
        dispatch=dispatch,
    )
    logger.debug("declared route %s %s", declared.method or "ANY", declared.path)
    return declared


def _verb(method: str | None, name: str) -> Callable[..., Any]:
    def declare(
        route: Any,
        bindings: Any = None,
        body: Callable[..., Any] | None = None,
        *,
        metadata: Mapping[str, Any] | None = None,
        config: AppConfig | None = None,
    ) -> Any:
        return declare_route(method, route, bindings, body, metadata=metadata, config=config)

    declare.__name__ = declare.__qualname__ = name
    declare.__doc__ = f"Declare a route answering {method or 'any method'}."
    return declare


get = _verb("GET", "get")
post = _verb("POST", "post")
put = _verb("PUT", "put")
delete = _verb("DELETE", "delete")
head = _verb("HEAD", "head")
patch = _verb("PATCH", "patch")
options = _verb("OPTIONS", "options")
any_route = _verb(None, "any_route")
