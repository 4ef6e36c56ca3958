"""URL-encoded parameter parsing.

Query strings and ``application/x-www-form-urlencoded`` bodies share one
parser. A key that appears once maps to a string; a repeated key maps to
a list of strings in arrival order.
"""

from urllib.parse import parse_qsl


def assoc_param(params: dict[str, str | list[str]], key: str, value: str) -> None:
    """Add *value* under *key*, turning repeated keys into lists."""
    if key not in params:
        params[key] = value
        return
    existing = params[key]
    if isinstance(existing, list):
        existing.append(value)
    else:
        params[key] = [existing, value]


def parse_params(text: str, encoding: str = "utf-8") -> dict[str, str | list[str]]:
    """Parse a URL-encoded string into a parameter dict.

    Blank values are kept (``"a="`` yields ``{"a": ""}``)::

        parse_params("tag=a&tag=b&q=x")  # {"tag": ["a", "b"], "q": "x"}
    """
    params: dict[str, str | list[str]] = {}
    if not text:
        return params
    for key, value in parse_qsl(text, keep_blank_values=True, encoding=encoding):
        assoc_param(params, key, value)
    return params
