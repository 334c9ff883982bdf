"""
Dotted-path lookup into a parsed document.

    lookup(root, "servers.0.host")

walks Table keys and Array indices from the root. A purely numeric segment
is an array index; anything else is a table key. A path that does not
resolve gives None; only a malformed path (empty, or with an empty segment)
raises ValueError.
"""

from datetime import date, datetime

from .values import Array, Table, Value


def split_path(path: str) -> list[str | int]:
    """
    Split a dotted path into key and index segments.

    Examples:
        "a.b"       -> ["a", "b"]
        "p.0.id"    -> ["p", 0, "id"]
    """
    if not path:
        raise ValueError("Lookup path must not be empty")

    segments: list[str | int] = []
    for part in path.split("."):
        if not part:
            raise ValueError(f"Lookup path has an empty segment: {path!r}")
        segments.append(int(part) if part.isascii() and part.isdigit() else part)
    return segments


def lookup(root: Value, path: str) -> Value | None:
    """
    Resolve a dotted path against a document tree.

    Args:
        root: Table (or any Value) to start from
        path: Dotted path such as "a.b.0.c"

    Returns:
        The Value found at path, or None if any segment does not resolve
    """
    current: Value = root

    for segment in split_path(path):
        if isinstance(segment, int):
            if not isinstance(current, Array) or segment >= len(current):
                return None
            current = current[segment]
        else:
            if not isinstance(current, Table) or segment not in current:
                return None
            current = current[segment]

    return current


def get_string(root: Value, path: str) -> str | None:
    """Get the string at path, or None if absent or not a string."""
    value = lookup(root, path)
    return value.as_string() if value is not None else None


def get_int(root: Value, path: str) -> int | None:
    """Get the integer at path, or None if absent or not an integer."""
    value = lookup(root, path)
    return value.as_int() if value is not None else None


def get_float(root: Value, path: str) -> float | None:
    value = lookup(root, path)
    return value.as_float() if value is not None else None


def get_bool(root: Value, path: str) -> bool | None:
    value = lookup(root, path)
    return value.as_bool() if value is not None else None


def get_datetime(root: Value, path: str) -> date | datetime | None:
    value = lookup(root, path)
    return value.as_datetime() if value is not None else None


def get_array(root: Value, path: str) -> Array | None:
    value = lookup(root, path)
    return value.as_array() if value is not None else None


def get_table(root: Value, path: str) -> Table | None:
    value = lookup(root, path)
    return value.as_table() if value is not None else None
