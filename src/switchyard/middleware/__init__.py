"""Middleware — plain functions that wrap handlers.

A wrapper is any callable matching::

    def wrap_x(handler: Handler, *args) -> Handler

No base class required. ``wrap`` composes wrappers from tags, compound
specs, or callables; ``HandlerCell`` holds a swappable handler.

Built-in wrappers:
    wrap_cookies -- Parse the Cookie header into request.cookies
    wrap_params -- Parse query string and form body into params
    wrap_session -- Signed cookie sessions (itsdangerous)
"""

from switchyard.middleware.compose import (
    HandlerCell,
    default_registry,
    resolve_middleware,
    wrap,
)
from switchyard.middleware.cookies import wrap_cookies
from switchyard.middleware.params import wrap_params
from switchyard.middleware.sessions import SessionConfig, get_session, wrap_session

__all__ = [
    "HandlerCell",
    "SessionConfig",
    "default_registry",
    "get_session",
    "resolve_middleware",
    "wrap",
    "wrap_cookies",
    "wrap_params",
    "wrap_session",
]
