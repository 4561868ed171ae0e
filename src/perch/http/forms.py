"""Form data parsing — URL-encoded and multipart.

``FormData`` shares the read-only, multi-valued interface of ``Headers``
and ``QueryParams``. URL-encoded bodies are parsed with ``urllib.parse``;
multipart bodies go through ``python-multipart``.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import parse_qsl


@dataclass(frozen=True, slots=True)
class UploadFile:
    """A file uploaded in a multipart form submission.

    The content is held in memory, which suits typical web uploads
    bounded by ``AppConfig.max_content_length``.
    """

    filename: str
    content_type: str
    size: int
    _content: bytes

    async def read(self) -> bytes:
        """Return the file content as bytes."""
        return self._content

    async def save(self, path: Path) -> None:
        """Write the file content to *path*. Parent directories must exist."""
        path.write_bytes(self._content)

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(Mapping[str, str]):
    """Immutable parsed form data.

    ``form[key]`` returns the first string value for a field,
    ``get_list`` returns all of them, and ``files`` holds uploads by
    field name::

        form = await request.form()
        username = form["username"]
        avatar = form.files.get("avatar")  # UploadFile or None
    """

    __slots__ = ("_data", "_files")

    def __init__(
        self,
        data: dict[str, list[str]],
        files: dict[str, UploadFile] | None = None,
    ) -> None:
        self._data = data
        self._files = files or {}

    @property
    def files(self) -> Mapping[str, UploadFile]:
        """Uploaded files by field name."""
        return self._files

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"FormData({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key* (checkboxes, multi-selects)."""
        return list(self._data.get(key, []))


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form body into ``FormData``.

    Supports ``application/x-www-form-urlencoded`` and
    ``multipart/form-data``.

    Raises:
        ValueError: If *content_type* is not a form encoding, or a
            multipart body has no boundary.
    """
    media_type = content_type.split(";")[0].strip().lower()

    if media_type == "application/x-www-form-urlencoded":
        return _parse_urlencoded(body)

    if media_type == "multipart/form-data":
        return _parse_multipart(body, content_type)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_urlencoded(body: bytes) -> FormData:
    data: dict[str, list[str]] = {}
    for key, value in parse_qsl(body.decode("utf-8"), keep_blank_values=True):
        data.setdefault(key, []).append(value)
    return FormData(data)


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    """Parse multipart form data with python-multipart's callback parser."""
    from python_multipart.multipart import MultipartParser, parse_options_header

    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}
    files: dict[str, UploadFile] = {}

    part_headers: dict[str, str] = {}
    header_field = bytearray()
    header_value = bytearray()
    part_data = bytearray()

    def on_part_begin() -> None:
        part_headers.clear()
        part_data.clear()

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        header_field.extend(chunk[start:end])

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        header_value.extend(chunk[start:end])

    def on_header_end() -> None:
        part_headers[header_field.decode("latin-1").lower()] = header_value.decode("latin-1")
        header_field.clear()
        header_value.clear()

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        part_data.extend(chunk[start:end])

    def on_part_end() -> None:
        disposition = part_headers.get("content-disposition")
        if disposition is None:
            return
        _, params = parse_options_header(disposition)
        name = params.get(b"name")
        if name is None:
            return
        field_name = name.decode("utf-8")
        filename = params.get(b"filename")

        if filename is not None:
            content = bytes(part_data)
            files[field_name] = UploadFile(
                filename=filename.decode("utf-8"),
                content_type=part_headers.get("content-type", "application/octet-stream"),
                size=len(content),
                _content=content,
            )
        else:
            value = part_data.decode("utf-8", errors="replace")
            data.setdefault(field_name, []).append(value)

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return FormData(data, files)
