"""Form body parsing — URL-encoded and multipart.

URL-encoded forms use the shared parameter parser. Multipart bodies are
parsed with ``python-multipart``; uploaded files become ``UploadFile``
values alongside the plain string fields.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from switchyard.errors import ConfigurationError
from switchyard.http.query import assoc_param, parse_params

FORM_URLENCODED = "application/x-www-form-urlencoded"
FORM_MULTIPART = "multipart/form-data"


@dataclass(frozen=True, slots=True)
class UploadFile:
    """An uploaded file from a multipart form submission.

    The file content is held in memory as bytes (suitable for typical
    web uploads).
    """

    filename: str
    content_type: str
    size: int
    _content: bytes

    def read(self) -> bytes:
        """Return the file content as bytes."""
        return self._content

    def save(self, path: Path) -> None:
        """Write the file content to disk.

        Args:
            path: Destination file path. Parent directories must exist.
        """
        path.write_bytes(self._content)

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


def media_type(content_type: str | None) -> str:
    """Return the bare, lower-cased media type of a Content-Type value."""
    if not content_type:
        return ""
    return content_type.split(";")[0].strip().lower()


def is_form(content_type: str | None) -> bool:
    """True if *content_type* is one of the two form encodings."""
    return media_type(content_type) in (FORM_URLENCODED, FORM_MULTIPART)


def parse_form_body(
    body: bytes,
    content_type: str,
    encoding: str = "utf-8",
) -> dict[str, Any]:
    """Parse a form body into a parameter dict.

    Supports:
    - ``application/x-www-form-urlencoded``
    - ``multipart/form-data`` (via ``python-multipart``)

    Raises:
        ValueError: If the content type is not a form encoding, or a
            multipart body has no boundary.
    """
    kind = media_type(content_type)

    if kind == FORM_URLENCODED:
        return parse_params(body.decode(encoding, errors="replace"), encoding)

    if kind == FORM_MULTIPART:
        return _parse_multipart(body, content_type, encoding)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_multipart(body: bytes, content_type: str, encoding: str) -> dict[str, Any]:
    """Parse multipart form data using python-multipart."""
    try:
        from python_multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart form parsing requires the 'python-multipart' package. "
            "Install it with: pip install python-multipart"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    params: dict[str, Any] = {}

    current_headers: dict[str, str] = {}
    current_data = bytearray()
    current_field_name: str | None = None
    current_filename: str | None = None

    def on_part_begin() -> None:
        nonlocal current_headers, current_data, current_field_name, current_filename
        current_headers = {}
        current_data = bytearray()
        current_field_name = None
        current_filename = None

    def on_part_data(data_chunk: bytes, start: int, end: int) -> None:
        current_data.extend(data_chunk[start:end])

    def on_part_end() -> None:
        if current_field_name is None:
            return

        if current_filename is not None:
            ct = current_headers.get("content-type", "application/octet-stream")
            content = bytes(current_data)
            upload = UploadFile(
                filename=current_filename,
                content_type=ct,
                size=len(content),
                _content=content,
            )
            assoc_param(params, current_field_name, upload)  # type: ignore[arg-type]
        else:
            value = current_data.decode(encoding, errors="replace")
            assoc_param(params, current_field_name, value)

    def on_header_field(hdata: bytes, start: int, end: int) -> None:
        current_headers["_pending_field"] = hdata[start:end].decode("latin-1").lower()

    def on_header_value(hdata: bytes, start: int, end: int) -> None:
        nonlocal current_field_name, current_filename
        field = current_headers.pop("_pending_field", "")
        value = hdata[start:end].decode("latin-1")
        current_headers[field] = value

        if field == "content-disposition":
            _, disposition = parse_options_header(value.encode("latin-1"))
            name = disposition.get(b"name")
            if name is not None:
                current_field_name = name.decode(encoding)
            fname = disposition.get(b"filename")
            if fname is not None:
                current_filename = fname.decode(encoding)

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return params
