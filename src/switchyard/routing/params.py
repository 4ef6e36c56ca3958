"""Route parameter merging.

Captured route parameters are merged into a request's parameter maps
rather than replacing them. Nested mappings merge recursively; a
colliding leaf takes the newer value. The merge is associative, so
nested mounts can merge their captures in any grouping.
"""

from collections.abc import Mapping
from typing import Any

from switchyard._internal.types import Params


def merge_params(base: Mapping[str, Any], extra: Mapping[str, Any]) -> Params:
    """Return a new dict with *extra* merged into *base*.

    Neither argument is modified::

        merge_params({"a": "1", "q": {"x": "1"}}, {"a": "2", "q": {"y": "2"}})
        # {"a": "2", "q": {"x": "1", "y": "2"}}
    """
    merged = dict(base)
    for key, value in extra.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_params(current, value)
        else:
            merged[key] = value
    return merged
