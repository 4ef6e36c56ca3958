"""Context mounts — routes that consume a path prefix.

``mount("/api", None, users, posts)`` matches any path that starts with
``/api`` (followed by nothing or by ``/...``), then runs ``users`` and
``posts`` against the remainder::

    uri        "/api/users/5"
    context    "/api"          (prefix consumed so far, across all mounts)
    path_info  "/users/5"      (what nested routes match against)

Params captured by the prefix template are merged into the request as
with any route. When the mount binds some of them, the nested routes are
built per request by a factory that receives the bound values::

    mount("/users/:uid", ["uid"], lambda uid: [
        get("/", None, lambda: f"user {uid}"),
    ])
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from switchyard.errors import BindingError, ConfigurationError, RoutePatternError
from switchyard.routing.binding import BindingSpec, bind, parse_bindings
from switchyard.routing.gates import if_route
from switchyard.routing.pattern import Matcher, compile_pattern, route_template
from switchyard.routing.route import RouteMetadata

if TYPE_CHECKING:
    from switchyard._internal.types import Handler
    from switchyard.http.request import Request

logger = logging.getLogger("switchyard.routing")

# Synthetic param holding the unmatched remainder of the path
PATH_INFO_KEY = "__path_info"
# The remainder is empty, or a slash followed by anything
REMAINDER_PATTERN = r"|/.*"


def context_route(route: Any) -> Matcher:
    """Compile a mount prefix with the synthetic remainder capture appended."""
    if isinstance(route, str):
        template, constraints = route, {}
    elif isinstance(route, tuple | list) and len(route) == 2 and isinstance(route[0], str):
        template, constraints = route
        if not isinstance(constraints, Mapping):
            msg = f"Route constraints must be a mapping, got {type(constraints).__name__}"
            raise RoutePatternError(msg)
    else:
        msg = f"Context routes must be a template or (template, constraints) pair, got {route!r}"
        raise RoutePatternError(msg)

    return compile_pattern(
        f"{template}:{PATH_INFO_KEY}",
        {**constraints, PATH_INFO_KEY: REMAINDER_PATTERN},
        verbatim=frozenset({PATH_INFO_KEY}),
    )


def remove_suffix(path: str, suffix: str) -> str:
    """Drop the last ``len(suffix)`` characters of *path*."""
    return path[: len(path) - len(suffix)]


def wrap_context(handler: Handler) -> Handler:
    """Rewrite ``path_info`` and ``context`` from the captured remainder."""

    def rewrite(request: Request) -> Any:
        subpath = request.route_params[PATH_INFO_KEY]
        rewritten = request.without_route_param(PATH_INFO_KEY).evolve(
            path_info=subpath or "/",
            context=remove_suffix(request.uri, subpath),
        )
        return handler(rewritten)

    return rewrite


@dataclass(frozen=True, slots=True)
class Context:
    """A mounted group of nested routes. Calling it dispatches a request."""

    path: str | None
    bindings: BindingSpec
    handlers: tuple[Handler, ...]
    dispatch: Handler = field(repr=False, compare=False)

    def __call__(self, request: Request) -> Any:
        return self.dispatch(request)

    @property
    def entry(self) -> RouteMetadata:
        """This mount's introspection record (method ``None``)."""
        return RouteMetadata(None, self.path, self.bindings, MappingProxyType({"context": True}))


def mount(route: Any, bindings: Any, *handlers: Any) -> Context:
    """Mount *handlers* under the path prefix *route*.

    With no bindings, *handlers* are the nested handlers. With bindings,
    *handlers* must be a single factory called per request with the bound
    values as keyword arguments; it returns the nested handlers, either
    as one handler or as an iterable of them. A factory returning
    ``None`` has no nested routes and the mount does not match.

    Raises ``BindingError`` or ``RoutePatternError`` at declaration time.
    """
    from switchyard.routing.router import routing

    spec = parse_bindings(bindings)
    matcher = context_route(route)

    if spec:
        if len(handlers) != 1 or not callable(handlers[0]):
            msg = (
                "A mount with bindings takes exactly one factory that builds "
                f"the nested routes, got {len(handlers)} arguments"
            )
            raise BindingError(msg)
        factory: Callable[..., Handler | Iterable[Handler]] = handlers[0]

        def nested(request: Request) -> Any:
            built = factory(**bind(spec, request))
            if built is None:
                return None
            if callable(built):
                return built(request)
            return routing(request, *built)

    else:
        for handler in handlers:
            if not callable(handler):
                msg = f"Mounted handler {handler!r} is not callable"
                raise ConfigurationError(msg)
        _handlers = tuple(handlers)

        def nested(request: Request) -> Any:
            return routing(request, *_handlers)

    context = Context(
        path=route_template(route),
        bindings=spec,
        handlers=tuple(handlers),
        dispatch=if_route(matcher, wrap_context(nested)),
    )
    logger.debug("declared mount %s", context.path)
    return context
