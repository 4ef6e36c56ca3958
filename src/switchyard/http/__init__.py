"""HTTP primitives — immutable request and response values.

Handlers receive a ``Request`` and the renderer produces a ``Response``.
Both are frozen; every change returns a new object.
"""
