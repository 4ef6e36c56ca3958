"""Shared type aliases used across switchyard modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Handler: receives a Request, returns a result or None ("not handled")
Handler: TypeAlias = Callable[..., Any]

# Middleware wrapper: receives a handler (plus options), returns a handler
Wrapper: TypeAlias = Callable[..., Handler]

# Route parameters captured by a matcher or parsed from the request
Params: TypeAlias = dict[str, Any]
