"""
Value model for parsed documents.

A document tree is built from a closed set of variants, each tagged with a
ValueKind:

    String, Integer, Float, Boolean, Datetime   scalars
    Array                                       ordered sequence of values
    Table                                       ordered key -> value mapping

Typed accessors (as_string, as_int, ...) return None when called on the
wrong variant. Trees are read-only for consumers: Table and Array expose the
Mapping and Sequence protocols, and only the parser uses their private
mutators while building a document.
"""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterator


class ValueKind(Enum):
    """Discriminator for the Value variants."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "bool"
    DATETIME = "datetime"
    ARRAY = "array"
    TABLE = "table"


class Value:
    """Base class of all document values."""

    kind: ValueKind

    def as_string(self) -> str | None:
        return None

    def as_int(self) -> int | None:
        return None

    def as_float(self) -> float | None:
        return None

    def as_bool(self) -> bool | None:
        return None

    def as_datetime(self) -> date | datetime | None:
        return None

    def as_array(self) -> "Array | None":
        return None

    def as_table(self) -> "Table | None":
        return None

    def to_python(self) -> Any:
        """Convert to plain Python objects (str, int, list, dict, ...)."""
        raise NotImplementedError


@dataclass(frozen=True)
class String(Value):
    value: str
    kind = ValueKind.STRING

    def as_string(self) -> str | None:
        return self.value

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class Integer(Value):
    value: int
    kind = ValueKind.INTEGER

    def as_int(self) -> int | None:
        return self.value

    def to_python(self) -> int:
        return self.value


@dataclass(frozen=True)
class Float(Value):
    value: float
    kind = ValueKind.FLOAT

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Float):
            return NotImplemented
        # nan compares equal to nan so re-parsed trees stay equal
        return self.value == other.value or (math.isnan(self.value) and math.isnan(other.value))

    def __hash__(self) -> int:
        return 0 if math.isnan(self.value) else hash(self.value)

    def as_float(self) -> float | None:
        return self.value

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True)
class Boolean(Value):
    value: bool
    kind = ValueKind.BOOLEAN

    def as_bool(self) -> bool | None:
        return self.value

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class Datetime(Value):
    """
    A date or datetime literal.

    The raw text is kept so the value is reported exactly as it was written.
    """

    value: date | datetime
    raw: str = field(default="", compare=False)
    kind = ValueKind.DATETIME

    def __str__(self) -> str:
        return self.raw or self.value.isoformat()

    def as_datetime(self) -> date | datetime | None:
        return self.value

    def to_python(self) -> date | datetime:
        return self.value


class Array(Value, Sequence):
    """
    Ordered sequence of values.

    table_array is True for arrays built from [[header]] blocks; such arrays
    only ever contain Tables.
    """

    kind = ValueKind.ARRAY

    def __init__(self, items: list[Value] | None = None, table_array: bool = False):
        self._items: list[Value] = list(items) if items else []
        self.table_array = table_array

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return self.table_array == other.table_array and self._items == other._items

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        prefix = "TableArray" if self.table_array else "Array"
        return f"{prefix}({self._items!r})"

    def _append(self, value: Value) -> None:
        self._items.append(value)

    def as_array(self) -> "Array | None":
        return self

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self._items]


class Table(Value, Mapping):
    """Ordered mapping from string keys to values."""

    kind = ValueKind.TABLE

    def __init__(self, entries: dict[str, Value] | None = None):
        self._entries: dict[str, Value] = dict(entries) if entries else {}

    def __getitem__(self, key: str) -> Value:
        return self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        # dict equality ignores order; key order is part of a table's identity
        return list(self._entries.items()) == list(other._entries.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Table({self._entries!r})"

    def _set(self, key: str, value: Value) -> None:
        self._entries[key] = value

    def as_table(self) -> "Table | None":
        return self

    def to_python(self) -> dict[str, Any]:
        return {key: value.to_python() for key, value in self._entries.items()}

    def lookup(self, path: str) -> Value | None:
        """Resolve a dotted path such as "servers.0.host"; see lookup.lookup."""
        from .lookup import lookup

        return lookup(self, path)

    def get_string(self, path: str) -> str | None:
        from .lookup import get_string

        return get_string(self, path)

    def get_int(self, path: str) -> int | None:
        from .lookup import get_int

        return get_int(self, path)

    def get_float(self, path: str) -> float | None:
        from .lookup import get_float

        return get_float(self, path)

    def get_bool(self, path: str) -> bool | None:
        from .lookup import get_bool

        return get_bool(self, path)

    def get_datetime(self, path: str) -> date | datetime | None:
        from .lookup import get_datetime

        return get_datetime(self, path)

    def get_array(self, path: str) -> "Array | None":
        from .lookup import get_array

        return get_array(self, path)

    def get_table(self, path: str) -> "Table | None":
        from .lookup import get_table

        return get_table(self, path)


def same_kind(first: Value, second: Value) -> bool:
    """
    Check whether two array elements are of compatible kinds.

    Nested arrays are always compatible with each other regardless of what
    they contain.
    """
    return first.kind == second.kind
