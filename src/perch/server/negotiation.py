"""Response encoding — maps handler descriptors to transport Responses.

``encode_response`` dispatches on the descriptor's body variant: no
key probing, fully predictable.
"""

import json as json_module
from collections.abc import Mapping
from typing import Any

from perch.http.response import HTML, JSON, Empty, HTTPResponse, Response, Stream, Text

CONTENT_TYPES: dict[str, str] = {
    "json": "application/json",
    "js": "application/javascript",
    "html": "text/html",
    "css": "text/css",
    "txt": "text/html",
}

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def infer_content_type(filename: str) -> str:
    """Guess a MIME type from the suffix after the last ``.`` in *filename*.

    Unknown or missing suffixes give ``application/octet-stream``::

        infer_content_type("app.js")      # "application/javascript"
        infer_content_type("a.tar.gz")    # "application/octet-stream"
        infer_content_type("README")      # "application/octet-stream"
    """
    _, dot, suffix = filename.rpartition(".")
    if not dot:
        return DEFAULT_CONTENT_TYPE
    return CONTENT_TYPES.get(suffix, DEFAULT_CONTENT_TYPE)


def coerce_response(value: Any) -> HTTPResponse:
    """Accept what a handler returned and produce an ``HTTPResponse``.

    Handlers return an ``HTTPResponse``, or a plain mapping in the
    ``{"json": ..., "status": 201}`` shape.

    Raises:
        TypeError: For any other return value.
        ValueError: For a mapping with more than one body key.
    """
    match value:
        case HTTPResponse():
            return value
        case Mapping():
            return HTTPResponse.from_mapping(value)
    msg = f"Handler returned {type(value).__name__}; expected HTTPResponse or a mapping"
    raise TypeError(msg)


def _header_text(value: Any) -> str:
    """Stringify a header name or value; ASGI carries headers as latin-1."""
    text = str(value)
    try:
        text.encode("latin-1")
    except UnicodeEncodeError as exc:
        msg = f"Header {text!r} cannot be encoded as latin-1"
        raise ValueError(msg) from exc
    return text


def _to_bytes(value: str | bytes) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def encode_response(descriptor: HTTPResponse | Mapping[str, Any]) -> Response:
    """Encode a response descriptor into a transport ``Response``.

    The body variant sets both the body and a default content type:

    - ``JSON``   -> compact JSON, ``application/json``
    - ``Text``   -> as-is, ``text/plain``
    - ``HTML``   -> as-is, ``text/html``
    - ``Stream`` -> chunks passed through, no implied content type
    - ``Empty``  -> ``b""``

    Explicit descriptor headers are layered on top and may replace the
    default content type. Values are stringified; ``None`` drops the
    header and a list or tuple repeats it (e.g. several ``set-cookie``).
    A name or value that latin-1 cannot encode raises ``ValueError``.
    """
    descriptor = coerce_response(descriptor)
    headers: dict[str, list[str]] = {}

    match descriptor.body:
        case JSON(value=value):
            body: Any = json_module.dumps(value, separators=(",", ":"), ensure_ascii=False).encode(
                "utf-8"
            )
            headers["content-type"] = ["application/json"]
        case Text(value=value):
            body = _to_bytes(value)
            headers["content-type"] = ["text/plain"]
        case HTML(value=value):
            body = _to_bytes(value)
            headers["content-type"] = ["text/html"]
        case Stream(chunks=chunks):
            body = chunks
        case Empty():
            body = b""
        case other:
            msg = f"Unknown response body variant: {other!r}"
            raise TypeError(msg)

    for name, value in descriptor.headers.items():
        if value is None:
            continue
        values = value if isinstance(value, (list, tuple)) else [value]
        headers[_header_text(name).lower()] = [_header_text(v) for v in values]

    return Response(
        status=descriptor.status,
        headers=tuple((name, v) for name, values in headers.items() for v in values),
        body=body,
    )
