"""Switchyard — request routing and handler composition.

Declare routes as guarded handlers, combine them first-match-wins, and
mount groups of routes under path prefixes.

Basic usage::

    from switchyard import WSGIApp, define_routes, get, mount

    site = define_routes(
        "site",
        get("/hello/:name", ["name"], lambda name: f"Hi {name}"),
        mount("/admin", None, get("/stats", None, lambda: {"ok": True})),
    )

    app = WSGIApp(site)

Middleware by tag::

    from switchyard import wrap

    handler = wrap(site, "params", "cookies", ("session", "secret-key"))
"""

__version__ = "0.1.0"

# name -> (module, attribute)
_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "AppConfig": ("switchyard.config", "AppConfig"),
    "BindingError": ("switchyard.errors", "BindingError"),
    "ConfigurationError": ("switchyard.errors", "ConfigurationError"),
    "HTTPError": ("switchyard.errors", "HTTPError"),
    "HandlerCell": ("switchyard.middleware.compose", "HandlerCell"),
    "NotFound": ("switchyard.errors", "NotFound"),
    "Redirect": ("switchyard.http.response", "Redirect"),
    "RenderError": ("switchyard.errors", "RenderError"),
    "Request": ("switchyard.http.request", "Request"),
    "Response": ("switchyard.http.response", "Response"),
    "RoutePatternError": ("switchyard.errors", "RoutePatternError"),
    "RouteSet": ("switchyard.routing.router", "RouteSet"),
    "Routes": ("switchyard.routing.router", "Routes"),
    "SwitchyardError": ("switchyard.errors", "SwitchyardError"),
    "WSGIApp": ("switchyard.wsgi", "WSGIApp"),
    "any_route": ("switchyard.routing.route", "any_route"),
    "compile_pattern": ("switchyard.routing.pattern", "compile_pattern"),
    "declare_route": ("switchyard.routing.route", "declare_route"),
    "define_routes": ("switchyard.routing.router", "define_routes"),
    "delete": ("switchyard.routing.route", "delete"),
    "get": ("switchyard.routing.route", "get"),
    "head": ("switchyard.routing.route", "head"),
    "mount": ("switchyard.routing.context", "mount"),
    "options": ("switchyard.routing.route", "options"),
    "patch": ("switchyard.routing.route", "patch"),
    "post": ("switchyard.routing.route", "post"),
    "put": ("switchyard.routing.route", "put"),
    "routes": ("switchyard.routing.router", "routes"),
    "wrap": ("switchyard.middleware.compose", "wrap"),
}

__all__ = sorted(_LAZY_IMPORTS)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    target = _LAZY_IMPORTS.get(name)
    if target is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    module_name, attr = target
    return getattr(importlib.import_module(module_name), attr)
