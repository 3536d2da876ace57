"""Locating fields of interest in dataclass types and visiting them in values.

A search runs once over a type and records the path (a tuple of field
positions) to each match. The recorded paths can then be followed through
any number of values of that type, descending into lists and dict values
along the way.

Field tags are read from ``dataclasses.field(metadata=...)``: ``json``,
``path``, ``query``, ``header`` and so on. A field whose metadata has
``embedded`` set to true is treated as an embedded struct: its fields are
always searched and it adds nothing to a location.

Field types are taken as declared; annotations kept as strings are
treated as ``Any``.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import functools
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, NamedTuple

_SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.Iterable,
)
_MAPPING_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)
_PARAM_LOCATIONS = ("path", "query", "header")


@dataclass(frozen=True)
class _Field:
    """A dataclass field with its resolved type and its tags."""

    name: str
    type: Any
    metadata: Mapping[str, Any]

    @property
    def embedded(self) -> bool:
        return bool(self.metadata.get("embedded", False))

    @property
    def exported(self) -> bool:
        return not self.name.startswith("_")

    def tag(self, key: str, default: str = "") -> Any:
        return self.metadata.get(key, default)


@functools.lru_cache(maxsize=None)
def _struct_fields(cls: type) -> tuple[_Field, ...]:
    result = []
    for f in dataclasses.fields(cls):
        tp = f.type
        if isinstance(tp, str):
            tp = Any
        result.append(_Field(name=f.name, type=tp, metadata=f.metadata))
    return tuple(result)


def _deref(tp: Any) -> Any:
    """Strip ``Optional`` wrappers from a type."""
    while True:
        origin = typing.get_origin(tp)
        if origin is typing.Union or origin is types.UnionType:
            args = [a for a in typing.get_args(tp) if a is not type(None)]
            if len(args) == 1:
                tp = args[0]
                continue
        return tp


def _is_struct_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _is_struct_value(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _type_kind(tp: Any) -> str:
    if _is_struct_type(tp):
        return "struct"
    origin = typing.get_origin(tp) or tp
    if origin in _MAPPING_ORIGINS:
        return "map"
    if origin in _SEQUENCE_ORIGINS:
        return "slice"
    return "other"


def _element_type(tp: Any) -> Any:
    args = typing.get_args(tp)
    origin = typing.get_origin(tp) or tp
    if origin in _MAPPING_ORIGINS:
        return args[1] if len(args) == 2 else Any
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return Any
    return args[0] if args else Any


class _Slot:
    """A settable reference to an attribute or item of a container."""

    __slots__ = ("_container", "_key", "_is_attr")

    def __init__(self, container: Any, key: Any, is_attr: bool) -> None:
        self._container = container
        self._key = key
        self._is_attr = is_attr

    @classmethod
    def root(cls, value: Any) -> _Slot:
        return cls([value], 0, False)

    @property
    def value(self) -> Any:
        if self._is_attr:
            return getattr(self._container, self._key)
        return self._container[self._key]

    @value.setter
    def value(self, new: Any) -> None:
        if self._is_attr:
            setattr(self._container, self._key, new)
        else:
            self._container[self._key] = new

    def __repr__(self) -> str:
        return f"_Slot(value={self.value!r})"


def _format_location(parts: list[str | int]) -> str:
    out: list[str] = []
    for part in parts:
        if isinstance(part, int):
            out.append(f"[{part}]")
        else:
            if out:
                out.append(".")
            out.append(part)
    return "".join(out)


def json_name(field: Any) -> str:
    """Return the wire name of a field: its ``json`` tag or its lower-cased name."""
    name = field.name.lower()
    tag = field.metadata.get("json", "")
    if tag:
        name = tag.split(",")[0]
    return name


class _FoundPath(NamedTuple):
    path: tuple[int, ...]
    value: Any


@dataclass
class FindResult:
    """Paths to matching types or fields, with the value found for each."""

    paths: list[_FoundPath] = field(default_factory=list)

    def every(self, value: Any, func: Callable[[_Slot, Any], None]) -> None:
        """Call ``func(slot, found)`` for each place a path leads to in ``value``.

        ``slot.value`` reads the item and assigning to it writes back.
        Missing (``None``) values along the way are skipped.
        """
        for found in self.paths:
            self._every(_Slot.root(value), found.path, found.value, func)

    def _every(
        self,
        slot: _Slot,
        path: tuple[int, ...],
        found: Any,
        func: Callable[[_Slot, Any], None],
    ) -> None:
        current = slot.value
        if current is None:
            return
        if not path:
            func(slot, found)
            return
        if _is_struct_value(current):
            name = _struct_fields(type(current))[path[0]].name
            self._every(_Slot(current, name, True), path[1:], found, func)
        elif isinstance(current, (list, tuple)):
            for index, _ in enumerate(current):
                self._every(_Slot(current, index, False), path, found, func)
        elif isinstance(current, dict):
            for key in list(current):
                self._every(_Slot(current, key, False), path, found, func)
        else:
            raise TypeError(f"unsupported value type {type(current).__name__}")

    def every_located(
        self, value: Any, func: Callable[[_Slot, Any, str], None]
    ) -> None:
        """Like :meth:`every`, also passing the location of each item.

        Locations read like ``path.id``, ``query.count`` or
        ``body.items[3].tags``.
        """
        for found in self.paths:
            self._every_located(_Slot.root(value), found.path, [], found.value, func)

    def _every_located(
        self,
        slot: _Slot,
        path: tuple[int, ...],
        parts: list[str | int],
        found: Any,
        func: Callable[[_Slot, Any, str], None],
    ) -> None:
        current = slot.value
        if current is None:
            return
        if _is_struct_value(current):
            if not path:
                func(slot, found, _format_location(parts))
                return
            fld = _struct_fields(type(current))[path[0]]
            pushed = 0
            if not fld.embedded:
                for loc in _PARAM_LOCATIONS:
                    name = fld.tag(loc)
                    if name and not parts:
                        parts.extend([loc, name])
                        pushed = 2
                        break
                else:
                    parts.append(json_name(fld))
                    pushed = 1
            self._every_located(
                _Slot(current, fld.name, True), path[1:], parts, found, func
            )
            if pushed:
                del parts[-pushed:]
        elif isinstance(current, (list, tuple)):
            for index, _ in enumerate(current):
                parts.append(index)
                self._every_located(
                    _Slot(current, index, False), path, parts, found, func
                )
                parts.pop()
        elif isinstance(current, dict):
            for key in list(current):
                parts.append(key if isinstance(key, str) else str(key))
                self._every_located(
                    _Slot(current, key, False), path, parts, found, func
                )
                parts.pop()
        else:
            if not path:
                func(slot, found, _format_location(parts))
                return
            raise TypeError(f"unsupported value type {type(current).__name__}")


def find_in_type(
    tp: Any,
    on_type: Callable[[Any, tuple[int, ...]], Any] | None,
    on_field: Callable[[_Field, tuple[int, ...]], Any] | None,
    recurse_fields: bool,
    *args: str,
) -> FindResult:
    """Search ``tp`` for matching types and fields.

    ``on_type(type, path)`` and ``on_field(field, path)`` return ``None`` for
    no match, anything else is recorded with its path. Fields named in
    ``args`` are ignored, as are names starting with an underscore. Embedded
    fields and non-dataclass fields are always searched; other dataclass
    fields only when ``recurse_fields`` is true. Each dataclass is searched
    at most once.
    """
    result = FindResult()
    _find_in_type(tp, (), result, on_type, on_field, recurse_fields, set(), args)
    return result


def _find_in_type(
    tp: Any,
    path: tuple[int, ...],
    result: FindResult,
    on_type: Callable[[Any, tuple[int, ...]], Any] | None,
    on_field: Callable[[_Field, tuple[int, ...]], Any] | None,
    recurse_fields: bool,
    visited: set[Any],
    ignore: tuple[str, ...],
) -> None:
    tp = _deref(tp)

    ignore_embedded = False
    if on_type is not None:
        found = on_type(tp, path)
        if found is not None:
            result.paths.append(_FoundPath(path, found))
            # Found in the type itself; embedded fields need no further search.
            ignore_embedded = True

    kind = _type_kind(tp)
    if kind == "struct":
        if tp in visited:
            return
        visited.add(tp)
        for index, fld in enumerate(_struct_fields(tp)):
            if not fld.exported or fld.name in ignore:
                continue
            if ignore_embedded and fld.embedded:
                continue
            field_path = path + (index,)
            if on_field is not None:
                found = on_field(fld, field_path)
                if found is not None:
                    result.paths.append(_FoundPath(field_path, found))
            if fld.embedded or recurse_fields or not _is_struct_type(_deref(fld.type)):
                _find_in_type(
                    fld.type, field_path, result, on_type, on_field,
                    recurse_fields, visited, ignore,
                )
    elif kind in ("slice", "map"):
        _find_in_type(
            _element_type(tp), path, result, on_type, on_field,
            recurse_fields, visited, ignore,
        )