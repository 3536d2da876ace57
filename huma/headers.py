"""Response headers and request body reading.

Response header fields are the dataclass fields of an output type other
than ``status`` and ``body``. A field's header name is its ``header``
metadata tag, or the field name when untagged. Date/time fields are written
with their ``time_format`` tag, or the HTTP date format by default.
"""

from __future__ import annotations

import datetime as _dt
import math
from dataclasses import dataclass
from decimal import Decimal
from http.cookies import Morsel
from typing import Any, BinaryIO, Callable

from huma.errors import StatusError
from huma.fields import FindResult, find_in_type
from huma.params import HTTP_TIME_FORMAT, RFC3339

_CHUNK_SIZE = 64 * 1024


class BodyTooLargeError(StatusError):
    """The request body reached the configured size limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"request body is too large limit={limit} bytes", 413)
        self.limit = limit


@dataclass(frozen=True)
class HeaderInfo:
    """A response header field and how its value is written."""

    field: Any
    name: str
    time_format: str = ""


def _is_datetime_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, _dt.datetime)


def find_headers(tp: Any) -> FindResult:
    """Find the response header fields of an output type."""

    def on_field(fld: Any, path: tuple[int, ...]) -> HeaderInfo | None:
        if fld.embedded:
            return None
        name = fld.tag("header") or fld.name
        time_format = ""
        if _is_datetime_type(fld.type):
            time_format = fld.tag("time_format") or HTTP_TIME_FORMAT
        return HeaderInfo(field=fld, name=name, time_format=time_format)

    return find_in_type(tp, None, on_field, False, "status", "body")


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(float(value))).normalize(), "f")
    return "0" if text == "-0" else text


def _format_time(value: _dt.datetime, fmt: str) -> str:
    if fmt == RFC3339:
        text = value.isoformat()
        if text.endswith("+00:00"):
            text = text[: -len("+00:00")] + "Z"
        return text
    return value.strftime(fmt)


def write_header(write: Callable[[str, str], None], info: HeaderInfo, value: Any) -> None:
    """Write one header value with ``write(name, text)``.

    Empty strings are not written. Numbers, booleans, date/times and cookies
    are formatted for the wire; anything else is written as ``str(value)``.
    """
    if isinstance(value, str):
        if value == "":
            return
        write(info.name, str(value))
    elif isinstance(value, bool):
        write(info.name, "true" if value else "false")
    elif isinstance(value, int):
        write(info.name, str(int(value)))
    elif isinstance(value, float):
        write(info.name, _format_float(value))
    elif isinstance(value, _dt.datetime):
        write(info.name, _format_time(value, info.time_format or HTTP_TIME_FORMAT))
    elif isinstance(value, Morsel):
        write(info.name, value.OutputString())
    else:
        write(info.name, str(value))


def read_body(reader: BinaryIO | None, max_bytes: int) -> bytes:
    """Read a request body, closing the reader afterwards.

    With a positive ``max_bytes``, reading stops at that many bytes and
    :class:`BodyTooLargeError` is raised if the limit was reached. A
    ``None`` reader gives an empty body. Read errors, including timeouts,
    propagate.
    """
    if reader is None:
        return b""
    chunks: list[bytes] = []
    count = 0
    try:
        while max_bytes <= 0 or count < max_bytes:
            size = _CHUNK_SIZE if max_bytes <= 0 else min(_CHUNK_SIZE, max_bytes - count)
            chunk = reader.read(size)
            if not chunk:
                break
            chunks.append(chunk)
            count += len(chunk)
    finally:
        close = getattr(reader, "close", None)
        if callable(close):
            close()
    if max_bytes > 0 and count == max_bytes:
        raise BodyTooLargeError(max_bytes)
    return b"".join(chunks)