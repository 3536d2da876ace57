"""Generation of operation IDs and summaries from method and path."""

from __future__ import annotations

import re
import typing
from typing import Any, Callable, Iterable

_RE_PATH_PARAMS = re.compile(r"\{([^}]+)\}")

_COMMON_INITIALISMS = frozenset(
    {
        "ACL", "API", "ASCII", "CPU", "CSS", "DNS", "EOF", "GUID", "HTML",
        "HTTP", "HTTPS", "ID", "IP", "JSON", "LHS", "QPS", "RAM", "RHS",
        "RPC", "SLA", "SMTP", "SQL", "SSH", "TCP", "TLS", "TTL", "UDP",
        "UI", "UID", "UUID", "URI", "URL", "UTF8", "VM", "XML", "XMPP",
        "XSRF", "XSS",
    }
)

_SEQUENCE_TYPES = (list, tuple, bytes, bytearray)

_SEQUENCE_NAMES = frozenset(
    {
        "list", "tuple", "bytes", "bytearray",
        "List", "Tuple", "typing.List", "typing.Tuple",
    }
)


def _kind(char: str) -> str:
    if char.isdigit():
        return "digit"
    if char.isupper():
        return "upper"
    if char.isalpha():
        return "lower"
    return "other"


def _split(value: str) -> list[str]:
    """Split ``value`` into words on separators, case changes and digits."""
    words: list[str] = []
    current: list[str] = []

    def flush() -> None:
        if current:
            words.append("".join(current))
            current.clear()

    for pos, char in enumerate(value):
        kind = _kind(char)
        if kind == "other":
            flush()
            continue
        if current:
            prev = _kind(current[-1])
            nxt = _kind(value[pos + 1]) if pos + 1 < len(value) else "other"
            if (
                (prev == "lower" and kind == "upper")
                or ((prev == "digit") != (kind == "digit"))
                or (prev == "upper" and kind == "upper" and nxt == "lower")
            ):
                flush()
        current.append(char)
    flush()
    return words


def _join(
    words: Iterable[str], sep: str, transforms: Iterable[Callable[[str], str]]
) -> str:
    transforms = list(transforms)
    out = []
    for word in words:
        for transform in transforms:
            word = transform(word)
        out.append(word)
    return sep.join(out)


def _initialism(word: str) -> str:
    upper = word.upper()
    return upper if upper in _COMMON_INITIALISMS else word


def kebab(value: str) -> str:
    """Return ``value`` as lower-case words joined by hyphens."""
    return _join(_split(value), "-", [str.lower])


def _strip_optional(tp: Any) -> Any:
    if isinstance(tp, str):
        text = tp.strip()
        if text.startswith("Optional[") and text.endswith("]"):
            return text[len("Optional["):-1].strip()
        parts = [p.strip() for p in text.split("|")]
        rest = [p for p in parts if p != "None"]
        if len(rest) == 1:
            return rest[0]
        return text
    if typing.get_origin(tp) is typing.Union:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _annotations(cls: type) -> dict[str, Any]:
    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        hints.update(klass.__dict__.get("__annotations__", {}))
    return hints


def _body_type(response: Any) -> Any:
    if response is None:
        return None
    cls = response if isinstance(response, type) else type(response)
    hints = _annotations(cls)
    if "body" not in hints:
        return None
    return _strip_optional(hints["body"])


def _is_sequence_type(tp: Any) -> bool:
    if isinstance(tp, str):
        return tp.split("[", 1)[0].strip() in _SEQUENCE_NAMES
    origin = typing.get_origin(tp) or tp
    return isinstance(origin, type) and issubclass(origin, _SEQUENCE_TYPES)


def _action(method: str, response: Any) -> str:
    body = _body_type(response)
    if body is not None and method == "GET" and _is_sequence_type(body):
        # A GET returning a sequence body is a list operation.
        return "list"
    return method


def generate_operation_id(method: str, path: str, response: Any) -> str:
    """Build a kebab-cased operation ID such as ``get-things-by-thing-id``.

    ``response`` is the output class (or an instance of it); a GET whose
    ``body`` field is a sequence becomes a ``list`` operation.
    """
    action = _action(method, response)
    return kebab(action + "-" + _RE_PATH_PARAMS.sub(r"by-\1", path))


def generate_summary(method: str, path: str, response: Any) -> str:
    """Build a capitalised summary such as ``Get things by thing ID``."""
    action = _action(method, response)
    path = _RE_PATH_PARAMS.sub(r"by-\1", path)
    words = _split(action.lower() + " " + path)
    phrase = _join(words, "-", [str.lower, _initialism]).replace("-", " ")
    if not phrase:
        raise ValueError("cannot generate a summary from an empty method and path")
    return phrase[:1].upper() + phrase[1:]