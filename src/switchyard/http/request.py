"""Immutable HTTP request.

Frozen metadata threaded through every gate and mount. The request is
honest about what it is: received data that doesn't change. Gates that
need to add information build a new request with ``evolve()``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import quote

from switchyard.errors import HTTPError
from switchyard.http.headers import Headers
from switchyard.routing.params import merge_params

# Characters left unescaped when rebuilding a URI from a decoded WSGI path
_URI_SAFE = "/:@!$&'()*+,;=-._~"


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``uri`` is the full request path. ``path_info`` is the part still to
    be routed (``None`` until a context mount rewrites it) and
    ``context`` is the prefix already consumed by outer mounts.

    ``params`` is the union of every parameter source (route captures,
    query string, form body); ``route_params``, ``query_params`` and
    ``form_params`` keep each source separately.
    """

    method: str
    uri: str
    path_info: str | None = None
    context: str = ""
    route_params: Mapping[str, Any] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    form_params: Mapping[str, Any] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)
    query_string: str = ""
    headers: Headers = field(default_factory=Headers)
    cookies: Mapping[str, str] = field(default_factory=dict)
    session: Mapping[str, Any] = field(default_factory=dict)
    body: bytes = b""
    scheme: str = "http"
    remote_addr: str | None = None
    extras: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

    # -- Computed properties --

    @property
    def path(self) -> str:
        """The path still to be routed: ``path_info``, falling back to ``uri``."""
        return self.path_info or self.uri

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query_string:
            return f"{self.uri}?{self.query_string}"
        return self.uri

    # -- Copy-on-write helpers --

    def evolve(self, **changes: Any) -> Request:
        """Return a new Request with *changes* applied."""
        return replace(self, **changes)

    def with_route_params(self, captured: Mapping[str, Any]) -> Request:
        """Merge *captured* into ``route_params`` and ``params`` together."""
        return replace(
            self,
            route_params=merge_params(self.route_params, captured),
            params=merge_params(self.params, captured),
        )

    def without_route_param(self, key: str) -> Request:
        """Drop *key* from ``route_params`` and ``params`` together."""
        return replace(
            self,
            route_params={k: v for k, v in self.route_params.items() if k != key},
            params={k: v for k, v in self.params.items() if k != key},
        )

    def with_extra(self, key: str, value: Any) -> Request:
        """Return a new Request carrying *value* under ``extras[key]``."""
        return replace(self, extras={**self.extras, key: value})

    # -- Factory --

    @classmethod
    def from_wsgi(
        cls,
        environ: Mapping[str, Any],
        max_content_length: int | None = None,
    ) -> Request:
        """Create a Request from a WSGI environ.

        Raises ``HTTPError(413)`` when the declared body exceeds
        *max_content_length*.
        """
        raw_path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
        uri = quote(raw_path.encode("latin-1"), safe=_URI_SAFE) or "/"

        pairs: list[tuple[str, str]] = []
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                pairs.append((key[5:].replace("_", "-").lower(), value))
        if environ.get("CONTENT_TYPE"):
            pairs.append(("content-type", environ["CONTENT_TYPE"]))
        if environ.get("CONTENT_LENGTH"):
            pairs.append(("content-length", environ["CONTENT_LENGTH"]))

        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        if max_content_length is not None and length > max_content_length:
            raise HTTPError(status=413, detail="Request body too large")

        stream = environ.get("wsgi.input")
        body = stream.read(length) if stream is not None and length > 0 else b""

        return cls(
            method=environ.get("REQUEST_METHOD", "GET"),
            uri=uri,
            query_string=environ.get("QUERY_STRING", ""),
            headers=Headers(pairs),
            body=body,
            scheme=environ.get("wsgi.url_scheme", "http"),
            remote_addr=environ.get("REMOTE_ADDR"),
        )
