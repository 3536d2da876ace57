"""Error models used in HTTP API responses.

The error model follows RFC 9457 Problem Details for HTTP APIs and is
augmented with an ``errors`` list of :class:`ErrorDetail` objects.
"""

from __future__ import annotations

from typing import Any, Iterable

_STATUS_TEXT: dict[int, str] = {
    100: "Continue",
    101: "Switching Protocols",
    102: "Processing",
    103: "Early Hints",
    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non-Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",
    207: "Multi-Status",
    208: "Already Reported",
    226: "IM Used",
    300: "Multiple Choices",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Request Entity Too Large",
    414: "Request URI Too Long",
    415: "Unsupported Media Type",
    416: "Requested Range Not Satisfiable",
    417: "Expectation Failed",
    418: "I'm a teapot",
    421: "Misdirected Request",
    422: "Unprocessable Entity",
    423: "Locked",
    424: "Failed Dependency",
    425: "Too Early",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    451: "Unavailable For Legal Reasons",
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
    506: "Variant Also Negotiates",
    507: "Insufficient Storage",
    508: "Loop Detected",
    510: "Not Extended",
    511: "Network Authentication Required",
}


def status_text(status: int) -> str:
    """Return the standard reason phrase for ``status``, or ``""`` if unknown."""
    return _STATUS_TEXT.get(status, "")


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return "[" + " ".join(str(b) for b in value) + "]"
    return str(value)


class ErrorDetail(Exception):
    """Details about one specific error, such as a validation failure."""

    def __init__(self, message: str = "", location: str = "", value: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location
        self.value = value

    def __str__(self) -> str:
        if self.location == "" and self.value is None:
            return self.message
        return f"{self.message} ({self.location}: {_format_value(self.value)})"

    def __repr__(self) -> str:
        return (
            f"ErrorDetail(message={self.message!r}, "
            f"location={self.location!r}, value={self.value!r})"
        )

    def error_detail(self) -> ErrorDetail:
        """Return this detail; any object with this method provides a detail."""
        return self


def _as_detail(err: BaseException | Any) -> ErrorDetail:
    provider = getattr(err, "error_detail", None)
    if callable(provider):
        return provider()
    return ErrorDetail(message=str(err))


class StatusError(Exception):
    """An error carrying the HTTP status code to send to the client."""

    def __init__(self, message: str = "", status: int = 500) -> None:
        super().__init__(message)
        self.status = status


class ErrorModel(StatusError):
    """RFC 9457 problem details with an optional list of error details."""

    def __init__(
        self,
        type: str = "",
        title: str = "",
        status: int = 0,
        detail: str = "",
        instance: str = "",
        errors: Iterable[ErrorDetail] | None = None,
    ) -> None:
        super().__init__(detail, status)
        self.type = type
        self.title = title
        self.detail = detail
        self.instance = instance
        self.errors: list[ErrorDetail] = list(errors) if errors is not None else []

    def __str__(self) -> str:
        return self.detail

    def __repr__(self) -> str:
        return (
            f"ErrorModel(status={self.status!r}, title={self.title!r}, "
            f"detail={self.detail!r}, errors={self.errors!r})"
        )

    def add(self, err: BaseException | Any) -> None:
        """Append an error; detail providers are used as-is, others by message."""
        self.errors.append(_as_detail(err))

    def content_type(self, ct: str) -> str:
        """Map a negotiated content type to its problem-details variant."""
        if ct == "application/json":
            return "application/problem+json"
        if ct == "application/cbor":
            return "application/problem+cbor"
        return ct


def new_error(status: int, msg: str, *args: BaseException | Any) -> StatusError:
    """Build an error model with the given status, message and details.

    ``None`` entries in ``args`` are ignored.
    """
    details = [_as_detail(err) for err in args if err is not None]
    return ErrorModel(
        status=status,
        title=status_text(status),
        detail=msg,
        errors=details,
    )


def status_304_not_modified() -> StatusError:
    """Return a 304; not an error, but a way to send a non-default response."""
    return new_error(304, "")


def error_400_bad_request(msg: str, *args: Any) -> StatusError:
    return new_error(400, msg, *args)


def error_401_unauthorized(msg: str, *args: Any) -> StatusError:
    return new_error(401, msg, *args)


def error_403_forbidden(msg: str, *args: Any) -> StatusError:
    return new_error(403, msg, *args)


def error_404_not_found(msg: str, *args: Any) -> StatusError:
    return new_error(404, msg, *args)


def error_405_method_not_allowed(msg: str, *args: Any) -> StatusError:
    return new_error(405, msg, *args)


def error_406_not_acceptable(msg: str, *args: Any) -> StatusError:
    return new_error(406, msg, *args)


def error_409_conflict(msg: str, *args: Any) -> StatusError:
    return new_error(409, msg, *args)


def error_410_gone(msg: str, *args: Any) -> StatusError:
    return new_error(410, msg, *args)


def error_412_precondition_failed(msg: str, *args: Any) -> StatusError:
    return new_error(412, msg, *args)


def error_415_unsupported_media_type(msg: str, *args: Any) -> StatusError:
    return new_error(415, msg, *args)


def error_422_unprocessable_entity(msg: str, *args: Any) -> StatusError:
    return new_error(422, msg, *args)


def error_429_too_many_requests(msg: str, *args: Any) -> StatusError:
    return new_error(429, msg, *args)


def error_500_internal_server_error(msg: str, *args: Any) -> StatusError:
    return new_error(500, msg, *args)


def error_501_not_implemented(msg: str, *args: Any) -> StatusError:
    return new_error(501, msg, *args)


def error_502_bad_gateway(msg: str, *args: Any) -> StatusError:
    return new_error(502, msg, *args)


def error_503_service_unavailable(msg: str, *args: Any) -> StatusError:
    return new_error(503, msg, *args)


def error_504_gateway_timeout(msg: str, *args: Any) -> StatusError:
    return new_error(504, msg, *args)