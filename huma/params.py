"""Request parameters: discovery on input types and parsing of raw values.

Parameters are dataclass fields tagged through ``dataclasses.field``
metadata with one of ``path``, ``query``, ``header`` or ``cookie``, whose
value is the parameter name. Other recognised keys are ``default``,
``required``, ``hidden``, ``example`` and ``time_format``. The field named
``body`` is never a parameter.
"""

from __future__ import annotations

import datetime as _dt
import re
import types
import typing
import uuid
from dataclasses import dataclass
from http.cookies import Morsel
from typing import Any, Callable, Iterable, TypeVar

from huma.errors import ErrorDetail
from huma.fields import FindResult, find_in_type

T = TypeVar("T")

RFC3339 = "RFC3339"
"""Time format for RFC 3339 timestamps with optional fractional seconds."""

HTTP_TIME_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"
"""Time format used by HTTP date headers."""

_LOCATIONS = ("path", "query", "header", "cookie")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")
_INF_RE = re.compile(r"[+-]?(inf|infinity)", re.IGNORECASE)
_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(\.\d+)?(Z|[+-]\d{2}:\d{2})"
)
_BOOLS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}
_TEXT_TYPES: tuple[type, ...] = (uuid.UUID,)


class ParamError(ErrorDetail):
    """A parameter value that is missing or cannot be parsed."""

    def __init__(self, message: str, location: str, value: Any = "") -> None:
        super().__init__(message=message, location=location, value=value)


@dataclass(frozen=True)
class ParamInfo:
    """Where a parameter comes from and how its raw text is interpreted."""

    type: Any
    name: str
    loc: str
    required: bool = False
    default: str = ""
    time_format: str = ""
    explode: bool | None = None
    hidden: bool = False
    example: str = ""

    @property
    def location(self) -> str:
        """The error location of this parameter, such as ``query.count``."""
        return f"{self.loc}.{self.name}"


def _is_optional(tp: Any) -> bool:
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        return type(None) in typing.get_args(tp)
    return False


def _bool_tag(fld: Any, key: str) -> bool:
    value = fld.tag(key, False)
    return value is True or value == "true"


def _is_subclass(tp: Any, base: type) -> bool:
    return isinstance(tp, type) and issubclass(tp, base)


def find_params(tp: Any) -> FindResult:
    """Find the path, query, header and cookie parameters of an input type.

    Raises :class:`TypeError` for optional (nullable) fields, which cannot
    be parameters.
    """

    def on_field(fld: Any, path: tuple[int, ...]) -> ParamInfo | None:
        if fld.embedded:
            return None
        if _is_optional(fld.type):
            raise TypeError(
                "pointers are not supported for path/query/header parameters"
            )

        loc = next((name for name in _LOCATIONS if fld.tag(name)), None)
        if loc is None:
            return None
        name = fld.tag(loc)

        required = loc == "path" or _bool_tag(fld, "required")
        # Comma-separated query values are far easier to parse than exploded ones.
        explode = False if loc == "query" else None

        time_format = ""
        if _is_subclass(fld.type, _dt.datetime):
            time_format = HTTP_TIME_FORMAT if loc == "header" else RFC3339
            time_format = fld.tag("time_format") or time_format

        return ParamInfo(
            type=fld.type,
            name=name,
            loc=loc,
            required=required,
            default=str(fld.tag("default") or ""),
            time_format=time_format,
            explode=explode,
            hidden=_bool_tag(fld, "hidden"),
            example=str(fld.tag("example") or ""),
        )

    return find_in_type(tp, None, on_field, False, "body")


def parse_list(values: Iterable[str], parse: Callable[[str], T]) -> list[T]:
    """Parse every value; the first failure propagates."""
    return [parse(value) for value in values]


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    number = int(text)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f"integer {text!r} out of range")
    return number


def _parse_float(text: str) -> float:
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid float {text!r}")
    number = float(text)
    if number in (float("inf"), float("-inf")) and not _INF_RE.fullmatch(text):
        raise ValueError(f"float {text!r} out of range")
    return number


def _parse_bool(text: str) -> bool:
    try:
        return _BOOLS[text]
    except KeyError:
        raise ValueError(f"invalid boolean {text!r}") from None


def _parse_rfc3339(text: str) -> _dt.datetime:
    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid RFC 3339 time {text!r}")
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction, zone = match.group(7), match.group(8)
    micro = int((fraction[1:] + "000000")[:6]) if fraction else 0
    if zone == "Z":
        tz = _dt.timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = _dt.timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tz = _dt.timezone(sign * offset)
    return _dt.datetime(year, month, day, hour, minute, second, micro, tzinfo=tz)


def _parse_time(text: str, fmt: str) -> _dt.datetime:
    if fmt == RFC3339:
        return _parse_rfc3339(text)
    parsed = _dt.datetime.strptime(text, fmt)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=_dt.timezone.utc)
    return parsed


def _convert_list(info: ParamInfo, value: str) -> list[Any]:
    args = typing.get_args(info.type)
    elem = args[0] if args else str
    parts = value.split(",")

    def fail(message: str) -> ParamError:
        return ParamError(message, info.location, value)

    if _is_subclass(elem, str):
        return [elem(part) for part in parts]
    if _is_subclass(elem, int) and not _is_subclass(elem, bool):
        try:
            return [elem(n) for n in parse_list(parts, _parse_int)]
        except ValueError:
            raise fail("invalid integer") from None
    if _is_subclass(elem, float):
        try:
            return [elem(n) for n in parse_list(parts, _parse_float)]
        except ValueError:
            raise fail("invalid floating value") from None
    raise TypeError(f"unsupported param type {info.type!r}")


def _convert(info: ParamInfo, value: str) -> Any:
    tp = info.type

    def fail(message: str) -> ParamError:
        return ParamError(message, info.location, value)

    if _is_subclass(tp, Morsel):
        # A whole cookie rather than only its value.
        morsel: Morsel[str] = tp()
        morsel.set(info.name, value, value)
        return morsel
    if _is_subclass(tp, str):
        return tp(value)
    if _is_subclass(tp, bool):
        try:
            return tp(_parse_bool(value))
        except ValueError:
            raise fail("invalid boolean") from None
    if _is_subclass(tp, int):
        try:
            return tp(_parse_int(value))
        except ValueError:
            raise fail("invalid integer") from None
    if _is_subclass(tp, float):
        try:
            return tp(_parse_float(value))
        except ValueError:
            raise fail("invalid float") from None
    if tp is list or typing.get_origin(tp) is list:
        return _convert_list(info, value)
    if _is_subclass(tp, _dt.datetime):
        fmt = info.time_format or RFC3339
        try:
            return _parse_time(value, fmt)
        except ValueError:
            raise fail("invalid date/time for format " + fmt) from None

    from_text = getattr(tp, "from_text", None)
    if callable(from_text):
        try:
            return from_text(value)
        except ValueError as err:
            raise fail(f"invalid value: {err}") from None
    if _is_subclass(tp, _TEXT_TYPES):
        try:
            return tp(value)
        except ValueError as err:
            raise fail(f"invalid value: {err}") from None

    raise TypeError(f"unsupported param type {tp!r}")


def parse_param(info: ParamInfo, value: str) -> Any:
    """Convert the raw text of a parameter into a value of its type.

    An empty value falls back to the parameter's default. If there is still
    no value, a required parameter raises :class:`ParamError` and an
    optional one gives ``None``. Text that does not parse raises
    :class:`ParamError`; a type that cannot be parsed at all raises
    :class:`TypeError`. Types other than the built-in ones can provide a
    ``from_text(text)`` class method that raises ``ValueError`` on bad input.
    """
    if value == "" and info.default:
        value = info.default
    if value == "":
        if info.required:
            raise ParamError(
                f"required {info.loc} parameter is missing", info.location, ""
            )
        return None
    return _convert(info, value)