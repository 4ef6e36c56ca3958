"""Switchyard exception hierarchy.

Shared across the pattern compiler, binder, renderer, middleware and the
WSGI adapter so every module raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when routes or middleware are declared incorrectly.

    Always raised while handlers are being built, never while a request
    is being served.
    """


class BindingError(ConfigurationError):
    """A binding specification contains a token the binder does not understand."""


class RoutePatternError(ConfigurationError):
    """A route template or one of its constraints cannot be compiled."""


class RenderError(SwitchyardError):
    """A handler returned a value that has no known rendering."""


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or middleware. The WSGI adapter catches these and
    turns them into a response with the matching status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route produced a result for the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
