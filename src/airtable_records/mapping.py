"""
Maps an untyped `fields` dict onto a user-declared dataclass.

A record shape is a mutable @dataclass whose fields all have defaults (the
"zero" values left in place when a column is missing or null). A field reads
the column named like the attribute, or the one given with `alias(...)`:

    @dataclass
    class Task:
        name: str = ""
        done: bool = alias("Done?", default=False)
        tags: List[str] = field(default_factory=list)

Supported annotations: bool, int, float, str, nested dataclasses, List[T]
(nested to any depth), Any/object (value kept verbatim) and Optional[T].
A type with a `from_raw(raw)` classmethod takes over its own parsing.

Shapes are compiled once per type and cached; a bad annotation raises
UnsupportedKindError at compile time, whatever the data looks like.
"""
from __future__ import annotations
import dataclasses, enum, threading, typing
from dataclasses import dataclass, field
from types import UnionType
from typing import Any, Dict, List, Optional, Protocol, Union, get_args, get_origin, runtime_checkable

from .errors import CoercionError, UnsupportedKindError

FROM_KEY = "from"

T = typing.TypeVar("T")


def alias(key: str, **kwargs: Any) -> Any:
    """dataclasses.field(...) that reads column `key` instead of the attribute name."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[FROM_KEY] = key
    return field(metadata=metadata, **kwargs)


@runtime_checkable
class ParsesRaw(Protocol):
    """Custom parse hook: build a value of this type from the raw JSON value."""

    @classmethod
    def from_raw(cls, raw: Any) -> Any: ...


class Kind(str, enum.Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    STRUCT = "struct"
    HOOK = "hook"
    LIST = "list"
    ANY = "any"


@dataclass
class Slot:
    kind: Kind
    type: Any = None
    shape: Optional["Shape"] = None
    element: Optional["Slot"] = None


@dataclass
class FieldSpec:
    name: str
    key: str
    slot: Slot


@dataclass
class Shape:
    type: type
    fields: List[FieldSpec] = field(default_factory=list)

    def keys(self) -> List[str]:
        return [f.key for f in self.fields]


_SHAPES: Dict[type, Shape] = {}
_LOCK = threading.RLock()


def shape_of(record_type: type) -> Shape:
    shape = _SHAPES.get(record_type)
    if shape is not None:
        return shape
    with _LOCK:
        pending: Dict[type, Shape] = {}
        shape = _compile(record_type, pending)
        _SHAPES.update(pending)
        return shape


def _compile(cls: type, pending: Dict[type, Shape]) -> Shape:
    if cls in _SHAPES:
        return _SHAPES[cls]
    if cls in pending:  # self-referencing shape
        return pending[cls]
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"record shape must be a dataclass type, got {cls!r}")
    if cls.__dataclass_params__.frozen:
        raise TypeError(f"record shape {cls.__name__} must not be frozen")

    shape = Shape(type=cls)
    pending[cls] = shape
    try:
        hints = typing.get_type_hints(cls)
    except NameError as e:
        raise UnsupportedKindError(cls.__name__, str(e)) from e

    for f in dataclasses.fields(cls):
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise TypeError(f"{cls.__name__}.{f.name} needs a default value")
        where = f"{cls.__name__}.{f.name}"
        slot = _slot_for(hints.get(f.name, Any), where, pending)
        shape.fields.append(FieldSpec(name=f.name, key=f.metadata.get(FROM_KEY, f.name), slot=slot))
    return shape


def _is_union(origin: Any) -> bool:
    return origin is Union or origin is UnionType


def _slot_for(annotation: Any, where: str, pending: Dict[type, Shape]) -> Slot:
    if annotation is Any or annotation is object:
        return Slot(Kind.ANY)

    origin = get_origin(annotation)
    if _is_union(origin):
        args = get_args(annotation)
        inner = [a for a in args if a is not type(None)]
        if len(inner) == 1 and len(args) == 2:
            return _slot_for(inner[0], where, pending)
        raise UnsupportedKindError(where, annotation)

    if origin is list:
        args = get_args(annotation)
        element = _slot_for(args[0], where, pending) if args else Slot(Kind.ANY)
        return Slot(Kind.LIST, type=annotation, element=element)
    if annotation is list:
        return Slot(Kind.LIST, type=list, element=Slot(Kind.ANY))

    # bool before int: bool is an int subclass
    if annotation is bool:
        return Slot(Kind.BOOL, type=bool)
    if annotation is int:
        return Slot(Kind.INT, type=int)
    if annotation is float:
        return Slot(Kind.FLOAT, type=float)
    if annotation is str:
        return Slot(Kind.STR, type=str)

    if isinstance(annotation, type):
        if callable(getattr(annotation, "from_raw", None)):
            return Slot(Kind.HOOK, type=annotation)
        if dataclasses.is_dataclass(annotation):
            return Slot(Kind.STRUCT, type=annotation, shape=_compile(annotation, pending))

    raise UnsupportedKindError(where, annotation)


def map_fields(dest: T, fields: Dict[str, Any]) -> T:
    """
    Fill `dest` in place from `fields` and return it.

    Missing or null columns keep their defaults. The first mismatch raises
    CoercionError; fields assigned before it stay assigned.
    """
    _fill(shape_of(type(dest)), dest, fields, "")
    return dest


def map_record(record_type: typing.Type[T], fields: Dict[str, Any]) -> T:
    shape_of(record_type)
    return map_fields(record_type(), fields)


def _fill(shape: Shape, obj: Any, data: Dict[str, Any], prefix: str) -> None:
    for spec in shape.fields:
        raw = data.get(spec.key)
        if raw is None:
            continue
        current = getattr(obj, spec.name, None)
        if current is getattr(type(obj), spec.name, None):
            current = None  # class-level default, shared by every instance
        value = coerce(spec.slot, raw, prefix + spec.key, current)
        setattr(obj, spec.name, value)


def coerce(slot: Slot, raw: Any, path: str, current: Any = None) -> Any:
    """Convert one raw JSON value into the slot's declared kind."""
    kind = slot.kind

    if kind is Kind.ANY:
        return raw

    if kind is Kind.BOOL:
        if isinstance(raw, bool):
            return raw
        raise CoercionError(path, "bool", raw)

    if kind is Kind.INT or kind is Kind.FLOAT:
        # JSON has only one number type; booleans are not numbers here
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            try:
                return int(raw) if kind is Kind.INT else float(raw)
            except (OverflowError, ValueError) as e:
                raise CoercionError(path, kind.value, raw) from e
        raise CoercionError(path, kind.value, raw)

    if kind is Kind.STR:
        if isinstance(raw, str):
            return raw
        raise CoercionError(path, "str", raw)

    if kind is Kind.HOOK:
        try:
            return slot.type.from_raw(raw)
        except CoercionError as e:
            raise CoercionError(path, e.expected, e.value) from e

    if kind is Kind.STRUCT:
        if not isinstance(raw, dict):
            raise CoercionError(path, "struct", raw)
        target = current if type(current) is slot.type else slot.type()
        _fill(slot.shape, target, raw, path + ".")
        return target

    if kind is Kind.LIST:
        if not isinstance(raw, list):
            raise CoercionError(path, "list", raw)
        element = slot.element
        return [coerce(element, item, path) for item in raw]

    raise UnsupportedKindError(path, slot.type)
