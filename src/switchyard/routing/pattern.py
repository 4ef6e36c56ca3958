"""Route templates compiled into cached matchers.

Template syntax::

    "/users"                  literal path
    "/users/:id"              ``id`` captures one segment (``[^/,;?]+``)
    "/files/*"                ``*`` captures anything, stored under ``"*"``
    "/img/:name.:ext"         params may share a segment with literals
    ("/users/:id", {"id": r"\\d+"})   per-parameter regex constraints

A name used twice collects its captures into a list. Captured values are
percent-decoded. Templates are compiled once per (template, constraints)
pair; compiling the same pair again returns the cached matcher.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable
from urllib.parse import unquote

from switchyard._internal.types import Params
from switchyard.errors import RoutePatternError

# Default regex for a ``:name`` parameter
SEGMENT_PATTERN = r"[^/,;?]+"
# Default regex for the ``*`` wildcard
WILDCARD_PATTERN = r".*?"

_PARAM_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")

Constraint = str | re.Pattern[str]


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed piece of a route template.

    Literal: ``/users/`` (is_param=False)
    Param:   ``:id``     (is_param=True, param_name="id")
    Wildcard: ``*``      (is_param=True, param_name="*")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@runtime_checkable
class RouteMatcher(Protocol):
    """Anything that maps a path to captured params, or ``None``."""

    def match(self, path: str) -> Mapping[str, Any] | None: ...


def parse_template(template: str) -> list[PathSegment]:
    """Split a route template into literal and parameter segments.

    Examples::

        "/users"        -> [PathSegment("/users")]
        "/users/:id"    -> [PathSegment("/users/"), PathSegment(":id", True, "id")]
        "/files/*"      -> [PathSegment("/files/"), PathSegment("*", True, "*")]

    Raises ``RoutePatternError`` when ``:`` is not followed by a name.
    """
    segments: list[PathSegment] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            segments.append(PathSegment("".join(literal)))
            literal.clear()

    pos = 0
    while pos < len(template):
        char = template[pos]
        if char == ":":
            found = _PARAM_NAME.match(template, pos + 1)
            if found is None:
                msg = f"Expected a parameter name after ':' at position {pos} in {template!r}"
                raise RoutePatternError(msg)
            flush()
            name = found.group()
            segments.append(PathSegment(f":{name}", is_param=True, param_name=name))
            pos = found.end()
        elif char == "*":
            flush()
            segments.append(PathSegment("*", is_param=True, param_name="*"))
            pos += 1
        else:
            literal.append(char)
            pos += 1
    flush()
    return segments


@dataclass(frozen=True, slots=True)
class Matcher:
    """A compiled route template. Immutable and safe to share.

    ``names[i]`` is the parameter captured by regex group ``_i``. Params
    listed in ``verbatim`` are returned without percent-decoding.
    """

    template: str
    regex: re.Pattern[str]
    names: tuple[str, ...]
    verbatim: frozenset[str] = frozenset()

    def match(self, path: str) -> Params | None:
        """Return the captured params for *path*, or ``None`` if it doesn't match."""
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        params: Params = {}
        for index, name in enumerate(self.names):
            value = found.group(f"_{index}") or ""
            if name not in self.verbatim:
                value = unquote(value)
            if name not in params:
                params[name] = value
            elif isinstance(params[name], list):
                params[name].append(value)
            else:
                params[name] = [params[name], value]
        return params

    def __repr__(self) -> str:
        return f"Matcher({self.template!r})"


@dataclass(frozen=True, slots=True)
class RegexMatcher:
    """A matcher built from a compiled regex; named groups become params."""

    regex: re.Pattern[str]

    @property
    def template(self) -> str:
        return self.regex.pattern

    def match(self, path: str) -> Params | None:
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        return {
            name: unquote(value)
            for name, value in found.groupdict().items()
            if value is not None
        }


def compile_pattern(
    template: str,
    constraints: Mapping[str, Constraint] | None = None,
    verbatim: frozenset[str] = frozenset(),
) -> Matcher:
    """Compile *template* (plus optional per-parameter regexes) into a Matcher.

    Results are cached: the same template and constraints always yield
    the same Matcher object.

    Raises ``RoutePatternError`` for malformed templates, constraints
    naming unknown parameters, or constraints that are not valid regexes.
    """
    if not isinstance(template, str):
        msg = f"Route template must be a string, got {type(template).__name__}"
        raise RoutePatternError(msg)
    frozen = tuple(sorted((constraints or {}).items(), key=lambda item: item[0]))
    for name, constraint in frozen:
        if not isinstance(constraint, str | re.Pattern):
            msg = f"Constraint for {name!r} must be a regex string or pattern, got {constraint!r}"
            raise RoutePatternError(msg)
    return _compile(template, frozen, frozenset(verbatim))


@lru_cache(maxsize=1024)
def _compile(
    template: str,
    constraints: tuple[tuple[str, Constraint], ...],
    verbatim: frozenset[str],
) -> Matcher:
    segments = parse_template(template)
    by_name = dict(constraints)

    declared = {seg.param_name for seg in segments if seg.is_param}
    unknown = sorted(set(by_name) - declared)
    if unknown:
        msg = f"Constraints for unknown parameters {unknown} in route {template!r}"
        raise RoutePatternError(msg)

    parts: list[str] = []
    names: list[str] = []
    for seg in segments:
        if not seg.is_param:
            parts.append(re.escape(seg.value))
            continue
        name = seg.param_name or ""
        default = WILDCARD_PATTERN if name == "*" else SEGMENT_PATTERN
        constraint = by_name.get(name, default)
        if isinstance(constraint, re.Pattern):
            constraint = constraint.pattern
        parts.append(f"(?P<_{len(names)}>(?:{constraint}))")
        names.append(name)

    try:
        regex = re.compile("".join(parts))
    except re.error as exc:
        msg = f"Invalid constraint in route {template!r}: {exc}"
        raise RoutePatternError(msg) from exc

    return Matcher(template=template, regex=regex, names=tuple(names), verbatim=verbatim)


def prepare_route(route: Any) -> RouteMatcher:
    """Turn a route declaration into a matcher.

    Accepts a template string, a ``(template, constraints)`` pair, a
    compiled ``re.Pattern``, or any object with a ``match(path)`` method.
    """
    if isinstance(route, str):
        return compile_pattern(route)
    if isinstance(route, tuple | list) and len(route) == 2 and isinstance(route[0], str):
        template, constraints = route
        if not isinstance(constraints, Mapping):
            msg = f"Route constraints must be a mapping, got {type(constraints).__name__}"
            raise RoutePatternError(msg)
        return compile_pattern(template, constraints)
    if isinstance(route, re.Pattern):
        return RegexMatcher(route)
    if isinstance(route, RouteMatcher):
        return route
    msg = f"Cannot build a route matcher from {route!r}"
    raise RoutePatternError(msg)


def route_template(route: Any) -> str | None:
    """The template string behind a route declaration, for introspection."""
    if isinstance(route, str):
        return route
    if isinstance(route, tuple | list) and route and isinstance(route[0], str):
        return route[0]
    if isinstance(route, re.Pattern):
        return route.pattern
    template = getattr(route, "template", None)
    return template if isinstance(template, str) else None
