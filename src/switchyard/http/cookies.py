"""Cookies in both directions.

``parse_cookies`` reads a request's ``Cookie`` header for ``wrap_cookies``
and ``wrap_session``. ``SetCookie`` is what a ``Response`` carries out;
the WSGI adapter serializes each one into a ``Set-Cookie`` header.
"""

from dataclasses import dataclass
from urllib.parse import unquote


def _unquote_value(raw: str) -> str:
    raw = raw.strip()
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        raw = raw[1:-1]
    return unquote(raw)


def parse_cookies(header: str | None) -> dict[str, str]:
    """``"a=1; b=%22x%22"`` -> ``{"a": "1", "b": '"x"'}``.

    Pairs without ``=`` are skipped. A name sent twice keeps its last
    value.
    """
    if not header:
        return {}
    pairs = (chunk.partition("=") for chunk in header.split(";"))
    return {
        name.strip(): _unquote_value(value)
        for name, sep, value in pairs
        if sep and name.strip()
    }


@dataclass(frozen=True, slots=True)
class SetCookie:
    """One outgoing cookie and its attributes."""

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str | None = "lax"

    def to_header_value(self) -> str:
        attributes: list[str | None] = [
            f"{self.name}={self.value}",
            None if self.max_age is None else f"Max-Age={self.max_age}",
            self.path and f"Path={self.path}",
            self.domain and f"Domain={self.domain}",
            "Secure" if self.secure else None,
            "HttpOnly" if self.httponly else None,
            self.samesite and f"SameSite={self.samesite}",
        ]
        return "; ".join(a for a in attributes if a)
