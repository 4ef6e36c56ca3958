"""Handler combination with first-match-wins semantics.

``routes(a, b, c)`` tries each handler in declared order and returns the
first result that is not ``None``. ``None`` is the only "not handled"
value: ``False``, ``0``, ``""`` and empty containers are real results
and stop the search.

``define_routes`` builds the same combination as a named ``RouteSet``
that also exposes the metadata of every declared route. The ``Routes``
builder collects declarations through decorators and builds a
``RouteSet`` at the end of setup.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from switchyard.config import DEFAULT_CONFIG, AppConfig
from switchyard.errors import ConfigurationError
from switchyard.routing.context import mount
from switchyard.routing.route import RouteMetadata, declare_route

if TYPE_CHECKING:
    from switchyard._internal.types import Handler
    from switchyard.http.request import Request

logger = logging.getLogger("switchyard.routing")


def routing(request: Request, *handlers: Handler) -> Any:
    """Apply *handlers* to *request* in order; return the first non-``None`` result."""
    for handler in handlers:
        result = handler(request)
        if result is not None:
            return result
    return None


def routes(*handlers: Handler) -> Handler:
    """Combine *handlers* into one handler (see ``routing``)."""
    _handlers = tuple(handlers)

    def combined(request: Request) -> Any:
        return routing(request, *_handlers)

    return combined


def routes_metadata(handlers: tuple[Handler, ...]) -> tuple[RouteMetadata, ...]:
    """Collect the metadata entries of every declared route and mount."""
    entries: list[RouteMetadata] = []
    for handler in handlers:
        entry = getattr(handler, "entry", None)
        if isinstance(entry, RouteMetadata):
            entries.append(entry)
    return tuple(entries)


@dataclass(frozen=True, slots=True)
class RouteSet:
    """A named, ordered combination of handlers.

    Callable like any handler. ``metadata`` lists one ``RouteMetadata``
    per declared route or mount, in declaration order, for tools such as
    documentation generators.
    """

    name: str
    handlers: tuple[Handler, ...]
    metadata: tuple[RouteMetadata, ...]
    doc: str | None = None

    def __call__(self, request: Request) -> Any:
        return routing(request, *self.handlers)

    def __iter__(self) -> Iterator[Handler]:
        return iter(self.handlers)

    def __len__(self) -> int:
        return len(self.handlers)


def define_routes(name: str, *handlers: Handler, doc: str | None = None) -> RouteSet:
    """Build a named ``RouteSet`` from *handlers*::

        api = define_routes(
            "api",
            get("/hello/:name", ["name"], lambda name: f"Hi {name}"),
            mount("/admin", None, admin_routes),
        )
    """
    for handler in handlers:
        if not callable(handler):
            msg = f"Route set {name!r} got a non-callable handler: {handler!r}"
            raise ConfigurationError(msg)
    combined = tuple(handlers)
    route_set = RouteSet(name=name, handlers=combined, metadata=routes_metadata(combined), doc=doc)
    logger.debug("defined route set %s with %d handlers", name, len(combined))
    return route_set


@dataclass(slots=True)
class Routes:
    """Collects route declarations during setup.

    Usage::

        api = Routes("api")

        @api.get("/users/:id")
        def show_user(id):
            return {"id": id}

        api.mount("/admin", None, admin_routes)

        handler = api.build()

    Decorators return the original function, so it stays callable
    directly. Declarations are compiled as they are added; ``build()``
    returns an immutable ``RouteSet``.
    """

    name: str
    config: AppConfig = DEFAULT_CONFIG
    doc: str | None = None
    _handlers: list[Handler] = field(default_factory=list)

    def route(
        self,
        method: str | None,
        path: Any,
        bindings: Any = None,
        *,
        metadata: Mapping[str, Any] | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register the decorated function as a route body."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._handlers.append(
                declare_route(
                    method, path, bindings, func, metadata=metadata, config=self.config
                )
            )
            return func

        return decorator

    def get(self, path: Any, bindings: Any = None, **metadata: Any) -> Callable[..., Any]:
        return self.route("GET", path, bindings, metadata=metadata)

    def post(self, path: Any, bindings: Any = None, **metadata: Any) -> Callable[..., Any]:
        return self.route("POST", path, bindings, metadata=metadata)

    def put(self, path: Any, bindings: Any = None, **metadata: Any) -> Callable[..., Any]:
        return self.route("PUT", path, bindings, metadata=metadata)

    def delete(self, path: Any, bindings: Any = None, **metadata: Any) -> Callable[..., Any]:
        return self.route("DELETE", path, bindings, metadata=metadata)

    def patch(self, path: Any, bindings: Any = None, **metadata: Any) -> Callable[..., Any]:
        return self.route("PATCH", path, bindings, metadata=metadata)

    def any(self, path: Any, bindings: Any = None, **metadata: Any) -> Callable[..., Any]:
        return self.route(None, path, bindings, metadata=metadata)

    def mount(self, path: Any, bindings: Any, *handlers: Handler) -> Handler:
        """Register a context mount; returns the mount handler."""
        mounted = mount(path, bindings, *handlers)
        self._handlers.append(mounted)
        return mounted

    def add(self, handler: Handler) -> Handler:
        """Register an already-built handler (a route, mount, or RouteSet)."""
        if not callable(handler):
            msg = f"Cannot add non-callable handler {handler!r} to {self.name!r}"
            raise ConfigurationError(msg)
        self._handlers.append(handler)
        return handler

    def build(self) -> RouteSet:
        """Return a ``RouteSet`` of everything registered so far."""
        return define_routes(self.name, *self._handlers, doc=self.doc)
