"""ASGI response sending — translates perch Responses to ASGI messages.

Complete bodies go out in one message with a ``content-length``;
streamed bodies use chunked transfer encoding.
"""

import logging
from collections.abc import AsyncIterable

from perch._internal.asgi import Send
from perch.http.response import Response

logger = logging.getLogger("perch.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(response: Response) -> list[tuple[bytes, bytes]]:
    return [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    ]


def _encode_chunk(chunk: str | bytes) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


async def send_response(response: Response, send: Send) -> None:
    """Translate a perch Response into ASGI send() calls."""
    if not isinstance(response.body, bytes):
        await send_streaming_response(response, send)
        return

    body = response.body if _body_allowed(response.status) else b""
    raw_headers = _raw_headers(response)
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


async def send_streaming_response(response: Response, send: Send) -> None:
    """Send a streamed body via chunked transfer encoding.

    Headers go out immediately, then each non-empty chunk as an ASGI
    body message with ``more_body=True``. A mid-stream error is logged
    and the stream is closed; the status line has already been sent.
    """
    raw_headers = _raw_headers(response)
    raw_headers.append((b"transfer-encoding", b"chunked"))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )

    async def emit(chunk: str | bytes) -> None:
        if chunk:
            await send(
                {
                    "type": "http.response.body",
                    "body": _encode_chunk(chunk),
                    "more_body": True,
                }
            )

    try:
        if isinstance(response.body, AsyncIterable):
            async for chunk in response.body:
                await emit(chunk)
        else:
            for chunk in response.body:
                await emit(chunk)
    except Exception:
        logger.exception("Response stream failed mid-body (status %d)", response.status)

    await send(
        {
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        }
    )
