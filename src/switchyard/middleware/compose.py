"""Middleware composition.

A middleware wrapper is any callable matching::

    def wrap_something(handler: Handler, *args, **kwargs) -> Handler: ...

``wrap`` threads a handler through an ordered list of wrappers. Each
specification is one of:

- a tag: ``"session"`` resolves to the wrapper named ``wrap_session``
  (dashes become underscores); ``"myapp.middleware:auth"`` imports
  ``myapp.middleware`` and resolves ``wrap_auth`` there;
- a compound: ``("session", "secret")`` calls ``wrap_session(handler, "secret")``;
  the head may also be a wrapper itself, ``(wrap_session, "secret")``;
- a callable: used as-is, called with the handler only.

Composition returns a new handler and never touches shared state. To
swap the handler an application is serving, hold it in a ``HandlerCell``.
"""

from __future__ import annotations

import importlib
import threading
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from switchyard.errors import ConfigurationError

if TYPE_CHECKING:
    from switchyard._internal.types import Handler, Wrapper
    from switchyard.http.request import Request


def default_registry() -> dict[str, Wrapper]:
    """The built-in wrappers, keyed by function name."""
    from switchyard.middleware.cookies import wrap_cookies
    from switchyard.middleware.params import wrap_params
    from switchyard.middleware.sessions import wrap_session

    return {
        "wrap_cookies": wrap_cookies,
        "wrap_params": wrap_params,
        "wrap_session": wrap_session,
    }


def wrapper_name(tag: str) -> str:
    """``"session"`` -> ``"wrap_session"``; ``"content-type"`` -> ``"wrap_content_type"``."""
    return "wrap_" + tag.replace("-", "_")


def resolve_tag(tag: str, registry: Mapping[str, Wrapper] | None = None) -> Wrapper:
    """Find the wrapper function a tag refers to.

    Raises ``ConfigurationError`` if no such wrapper exists.
    """
    if ":" in tag:
        module_name, _, short = tag.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            msg = f"Cannot import middleware module {module_name!r} for tag {tag!r}"
            raise ConfigurationError(msg) from exc
        wrapper = getattr(module, wrapper_name(short), None)
    else:
        wrappers = default_registry() if registry is None else registry
        wrapper = wrappers.get(wrapper_name(tag))

    if wrapper is None or not callable(wrapper):
        msg = f"Unknown middleware tag {tag!r} (looked for {wrapper_name(tag.rpartition(':')[2])!r})"
        raise ConfigurationError(msg)
    return wrapper


def resolve_middleware(
    spec: Any,
    registry: Mapping[str, Wrapper] | None = None,
) -> Callable[[Handler], Handler]:
    """Turn one middleware specification into a ``handler -> handler`` function."""
    if isinstance(spec, str):
        wrapper = resolve_tag(spec, registry)
        return lambda handler: wrapper(handler)

    if isinstance(spec, tuple | list):
        if spec and callable(spec[0]):
            wrapper = spec[0]
        elif spec and isinstance(spec[0], str):
            wrapper = resolve_tag(spec[0], registry)
        else:
            msg = f"A compound middleware spec must start with a tag or wrapper, got {spec!r}"
            raise ConfigurationError(msg)
        args = tuple(spec[1:])
        return lambda handler: wrapper(handler, *args)

    if callable(spec):
        return spec

    msg = f"Cannot use {spec!r} as middleware"
    raise ConfigurationError(msg)


def wrap(
    handler: Handler,
    *specs: Any,
    registry: Mapping[str, Wrapper] | None = None,
) -> Handler:
    """Fold *handler* through *specs*, left to right.

    ``wrap(h, "params", ("session", key))`` is
    ``wrap_session(wrap_params(h), key)``. Every spec is resolved before
    any wrapper runs, so a bad tag fails without building anything.
    """
    wrappers = [resolve_middleware(spec, registry) for spec in specs]
    for apply in wrappers:
        handler = apply(handler)
    return handler


class HandlerCell:
    """A swappable reference to the handler an application serves.

    Reads and swaps are guarded by a lock, so a server thread can keep
    dispatching while another thread installs a new handler::

        cell = HandlerCell(app_routes)
        server = WSGIApp(cell)

        cell.wrap("params")          # compose the current handler in place
        cell.swap(new_routes)        # replace it outright
    """

    __slots__ = ("_handler", "_lock")

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self._lock = threading.Lock()

    @property
    def handler(self) -> Handler:
        with self._lock:
            return self._handler

    def __call__(self, request: Request) -> Any:
        return self.handler(request)

    def swap(self, handler: Handler) -> Handler:
        """Install *handler*; return the one it replaced."""
        with self._lock:
            previous, self._handler = self._handler, handler
        return previous

    def wrap(self, *specs: Any, registry: Mapping[str, Wrapper] | None = None) -> Handler:
        """Compose the current handler with *specs* and install the result."""
        with self._lock:
            self._handler = wrap(self._handler, *specs, registry=registry)
            return self._handler
