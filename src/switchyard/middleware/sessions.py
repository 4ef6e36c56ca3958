"""Session middleware — signed cookie sessions.

Session data is serialized as JSON and signed using ``itsdangerous``.
The session dict is available as ``request.session`` and, from anywhere
inside the wrapped handler, via ``get_session()``.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from itsdangerous import BadData, URLSafeTimedSerializer

from switchyard.errors import ConfigurationError
from switchyard.http.cookies import SetCookie, parse_cookies
from switchyard.http.response import Response

if TYPE_CHECKING:
    from switchyard._internal.types import Handler
    from switchyard.http.request import Request

logger = logging.getLogger("switchyard.middleware")

# -- Session ContextVar --

_session_var: ContextVar[dict[str, Any] | None] = ContextVar("switchyard_session", default=None)


def get_session() -> dict[str, Any]:
    """Return the current session dict.

    Raises ``LookupError`` if called outside a handler wrapped with
    ``wrap_session``.
    """
    session = _session_var.get()
    if session is None:
        msg = (
            "No active session. Ensure the handler is wrapped with "
            "wrap_session before accessing the session."
        )
        raise LookupError(msg)
    return session


# -- Configuration --


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session middleware configuration.

    ``secret_key`` is required. Sessions are signed, not encrypted.
    """

    secret_key: str
    cookie_name: str = "switchyard_session"
    max_age: int = 86400  # 24 hours
    salt: str = "switchyard.session"
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"

    def cookie(self, value: str) -> SetCookie:
        """The ``Set-Cookie`` carrying *value* with these attributes."""
        return SetCookie(
            name=self.cookie_name,
            value=value,
            max_age=self.max_age,
            path=self.path,
            domain=self.domain,
            secure=self.secure,
            httponly=self.httponly,
            samesite=self.samesite,
        )


# -- Middleware --


def wrap_session(
    handler: Handler,
    secret_key: str = "",
    *,
    config: SessionConfig | None = None,
    **options: Any,
) -> Handler:
    """Load the signed session cookie, run *handler*, write the session back.

    Usage::

        handler = wrap(routes, ("session", "my-secret-key"))

        def visit(request):
            session = get_session()
            session["visits"] = session.get("visits", 0) + 1
            return f"Visits: {session['visits']}"

    A ``None`` result stays ``None``: no cookie is written for a request
    nobody handled.
    """
    cfg = config or SessionConfig(secret_key=secret_key, **options)
    if not cfg.secret_key:
        msg = "Session secret_key must not be empty."
        raise ConfigurationError(msg)

    serializer = URLSafeTimedSerializer(cfg.secret_key, salt=cfg.salt)

    def load_session(request: Request) -> dict[str, Any]:
        cookie_value = request.cookies.get(cfg.cookie_name)
        if cookie_value is None:
            cookie_value = parse_cookies(request.headers.get("cookie")).get(cfg.cookie_name)
        if not cookie_value:
            return {}
        try:
            data = serializer.loads(cookie_value, max_age=cfg.max_age)
        except BadData:
            logger.debug("discarding session cookie with a bad or expired signature")
            return {}
        return data if isinstance(data, dict) else {}

    def save_session(response: Response, session: dict[str, Any]) -> Response:
        return response.with_cookie(cfg.cookie(serializer.dumps(session)))

    def session_handler(request: Request) -> Any:
        session = load_session(request)
        token = _session_var.set(session)
        try:
            result = handler(request.evolve(session=session))
        finally:
            _session_var.reset(token)

        # Always rewrite the cookie to refresh the signature timestamp
        if isinstance(result, Response):
            return save_session(result, session)
        return result

    return session_handler
