"""Binding specifications — extracting handler arguments from a request.

A binding specification is parsed once, when a route is declared, into a
tuple of ``Named``, ``Rest`` and ``Alias`` entries. At request time
``bind()`` turns that tuple into keyword arguments for the route body.

Token forms accepted by ``parse_bindings``::

    ["name", "age"]             # Named("name"), Named("age")
    ["id", "&", "others"]       # Named("id"), Rest("others")
    ["id", "as", "request"]     # Named("id"), Alias("request")
    "req"                       # Alias("req"): the whole request
    None                        # nothing bound

Anything else raises ``BindingError`` before a single request is served.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from switchyard.errors import BindingError

if TYPE_CHECKING:
    from switchyard.http.request import Request

REST_MARKER = "&"
ALIAS_MARKER = "as"


@dataclass(frozen=True, slots=True)
class Named:
    """Bind ``params[key]`` (or its dashed spelling) to ``key``.

    An ``optional`` entry is left out of the arguments when neither key
    form is present, so the body's own default applies.
    """

    key: str
    optional: bool = False

    @property
    def name(self) -> str:
        return self.key


@dataclass(frozen=True, slots=True)
class Rest:
    """Bind every param not consumed by an earlier ``Named`` entry to ``name``."""

    name: str


@dataclass(frozen=True, slots=True)
class Alias:
    """Bind the whole request to ``name``."""

    name: str


Binding: TypeAlias = Named | Rest | Alias
BindingSpec: TypeAlias = tuple[Binding, ...]


def key_forms(key: str) -> tuple[str, str]:
    """Return the primary and secondary lookup keys for a named binding.

    The primary key is the name itself; the secondary is its dashed
    spelling, the usual form of HTTP parameter names (``user_id`` ->
    ``user-id``).
    """
    return key, key.replace("_", "-")


def _check_name(token: Any, what: str) -> str:
    if not isinstance(token, str) or not token.isidentifier():
        msg = f"Unexpected binding: {token!r} ({what} must be a Python identifier)"
        raise BindingError(msg)
    return token


def parse_bindings(tokens: Any) -> BindingSpec:
    """Parse binding tokens into a ``BindingSpec``.

    Raises ``BindingError`` for unknown tokens, markers with no name
    after them, and names bound twice.
    """
    if tokens is None:
        return ()
    if isinstance(tokens, Named | Rest | Alias):
        return (tokens,)
    if isinstance(tokens, str):
        return (Alias(_check_name(tokens, "a whole-request binding")),)
    if not isinstance(tokens, Iterable):
        msg = f"Unexpected binding: {tokens!r}"
        raise BindingError(msg)

    items = list(tokens)
    spec: list[Binding] = []
    index = 0
    while index < len(items):
        token = items[index]
        if token in (REST_MARKER, ALIAS_MARKER):
            if index + 1 >= len(items):
                msg = f"Binding marker {token!r} must be followed by a name"
                raise BindingError(msg)
            name = _check_name(items[index + 1], f"the name after {token!r}")
            spec.append(Rest(name) if token == REST_MARKER else Alias(name))
            index += 2
        elif isinstance(token, Named | Rest | Alias):
            spec.append(token)
            index += 1
        else:
            spec.append(Named(_check_name(token, "a named binding")))
            index += 1

    seen: set[str] = set()
    for entry in spec:
        if entry.name in seen:
            msg = f"Binding name {entry.name!r} is bound more than once"
            raise BindingError(msg)
        seen.add(entry.name)
    return tuple(spec)


def bindings_from_signature(func: Callable[..., Any]) -> BindingSpec:
    """Infer a binding spec from a route body's signature.

    A parameter named ``request`` (or annotated ``Request``) receives the
    whole request; every other named parameter is a ``Named`` binding.
    Parameters with a default become optional bindings. ``**kwargs`` is
    left unbound.
    """
    from switchyard.http.request import Request as RequestType

    owner = getattr(func, "__qualname__", repr(func))
    spec: list[Binding] = []
    for name, param in inspect.signature(func).parameters.items():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            continue
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.POSITIONAL_ONLY):
            msg = f"Cannot bind parameter {name!r} of {owner}: it is not a keyword"
            raise BindingError(msg)
        if name == "request" or param.annotation in (RequestType, "Request"):
            spec.append(Alias(name))
        else:
            spec.append(Named(name, optional=param.default is not inspect.Parameter.empty))
    return tuple(spec)


def bind(spec: BindingSpec, request: Request) -> dict[str, Any]:
    """Resolve *spec* against *request*, left to right."""
    params = request.params
    bound: dict[str, Any] = {}
    consumed: set[str] = set()

    for entry in spec:
        match entry:
            case Named(key=key, optional=optional):
                primary, secondary = key_forms(key)
                if primary in params:
                    bound[key] = params[primary]
                elif secondary in params:
                    bound[key] = params[secondary]
                elif not optional:
                    bound[key] = None
                consumed.update((primary, secondary))
            case Rest(name=name):
                bound[name] = {k: v for k, v in params.items() if k not in consumed}
            case Alias(name=name):
                bound[name] = request

    return bound
