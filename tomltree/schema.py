"""
Decoding of document tables into dataclasses.

    @dataclass
    class Product:
        id: int
        name: str

    @dataclass
    class Config:
        host: str
        port: int | None = None
        ids: list[int] = field(default_factory=list)
        products: list[Product] = field(default_factory=list)

    config = decode(parse(text), Config)

Fields are matched by name. Missing fields fall back to the dataclass
default, or None for optional annotations; keys without a matching field are
ignored.
"""

import types
from dataclasses import MISSING, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

from .logging import get_logger
from .values import Table, Value


logger = get_logger("schema")

T = TypeVar("T")


class DecodeError(Exception):
    """Exception raised when a table does not fit the target dataclass."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        if path:
            super().__init__(f"{path}: {message}")
        else:
            super().__init__(message)


def _is_union(hint: Any) -> bool:
    origin = get_origin(hint)
    return origin is Union or origin is types.UnionType


def _is_optional(hint: Any) -> bool:
    return _is_union(hint) and type(None) in get_args(hint)


def decode(table: Table, cls: type[T]) -> T:
    """
    Build an instance of the dataclass cls from a Table.

    Raises:
        DecodeError: If a required field is missing or a value has the wrong type
    """
    if not is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")
    return _decode_dataclass(table, cls, "")


def _decode_dataclass(value: Value, cls: Any, path: str) -> Any:
    table = value.as_table()
    if table is None:
        raise DecodeError(f"Expected a table for {cls.__name__}, got {value.kind.value}", path)

    hints = get_type_hints(cls)
    kwargs: dict[str, Any] = {}

    for f in fields(cls):
        if not f.init:
            continue

        field_path = f"{path}.{f.name}" if path else f.name
        hint = hints[f.name]

        if f.name in table:
            kwargs[f.name] = _decode_value(table[f.name], hint, field_path)
        elif f.default is not MISSING or f.default_factory is not MISSING:
            continue
        elif _is_optional(hint):
            kwargs[f.name] = None
        else:
            raise DecodeError("Missing required field", field_path)

    known = {f.name for f in fields(cls)}
    for key in table:
        if key not in known:
            logger.debug("Ignoring key '%s' not declared on %s", key, cls.__name__)

    return cls(**kwargs)


def _decode_value(value: Value, hint: Any, path: str) -> Any:
    """Convert a Value according to a type annotation."""
    if hint is Any:
        return value.to_python()

    if isinstance(hint, type) and issubclass(hint, Value):
        if not isinstance(value, hint):
            raise DecodeError(f"Expected {hint.__name__}, got {value.kind.value}", path)
        return value

    if _is_union(hint):
        candidates = [arg for arg in get_args(hint) if arg is not type(None)]
        errors = []
        for candidate in candidates:
            try:
                return _decode_value(value, candidate, path)
            except DecodeError as e:
                errors.append(str(e))
        raise DecodeError(f"Value matches none of {hint}: {'; '.join(errors)}", path)

    origin = get_origin(hint)

    if origin is list:
        array = value.as_array()
        if array is None:
            raise DecodeError(f"Expected an array, got {value.kind.value}", path)
        (item_hint,) = get_args(hint) or (Any,)
        return [_decode_value(item, item_hint, f"{path}.{i}") for i, item in enumerate(array)]

    if origin is dict:
        table = value.as_table()
        if table is None:
            raise DecodeError(f"Expected a table, got {value.kind.value}", path)
        args = get_args(hint)
        item_hint = args[1] if len(args) == 2 else Any
        return {key: _decode_value(item, item_hint, f"{path}.{key}") for key, item in table.items()}

    if is_dataclass(hint):
        return _decode_dataclass(value, hint, path)

    if hint is bool:
        result = value.as_bool()
    elif hint is int:
        result = value.as_int()
    elif hint is float:
        # Integers widen to float
        result = value.as_float()
        if result is None and value.as_int() is not None:
            result = float(value.as_int())  # type: ignore[arg-type]
    elif hint is str:
        result = value.as_string()
    elif hint is datetime:
        result = value.as_datetime()
        if not isinstance(result, datetime):
            result = None
    elif hint is date:
        result = value.as_datetime()
    elif isinstance(hint, type) and issubclass(hint, Enum):
        raw = value.to_python()
        try:
            return hint(raw)
        except ValueError as e:
            raise DecodeError(f"{raw!r} is not a valid {hint.__name__}", path) from e
    else:
        raise DecodeError(f"Unsupported field type {hint!r}", path)

    if result is None:
        name = getattr(hint, "__name__", str(hint))
        raise DecodeError(f"Expected {name}, got {value.kind.value}", path)
    return result
