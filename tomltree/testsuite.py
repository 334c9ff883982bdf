"""
Conformance runner for toml-test style fixture directories.

A fixture directory contains:
    invalid/**/*.toml   documents that must fail to parse
    valid/**/*.toml     documents that must parse; each has a sibling .json
                        file with the expected tree in tagged JSON form

Tagged JSON form (see to_json):
    table           -> {"key": ...}
    array of tables -> [{...}, {...}]
    array value     -> {"type": "array", "value": [...]}
    scalar          -> {"type": "integer", "value": "42"}
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .errors import ParseError
from .logging import get_logger
from .parser import parse
from .values import Array, Table, Value, ValueKind


logger = get_logger("testsuite")


def format_float(number: float) -> str:
    """Render a float with up to 15 decimals, keeping at least one."""
    if math.isnan(number):
        return "nan"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"

    text = f"{number:.15f}".rstrip("0")
    if text.endswith("."):
        text += "0"
    return text


def _tagged(type_name: str, value: Any) -> dict[str, Any]:
    return {"type": type_name, "value": value}


def to_json(value: Value) -> Any:
    """Encode a document tree in the toml-test tagged JSON form."""
    kind = value.kind

    if kind == ValueKind.TABLE:
        assert isinstance(value, Table)
        return {key: to_json(item) for key, item in value.items()}

    if kind == ValueKind.ARRAY:
        assert isinstance(value, Array)
        items = [to_json(item) for item in value]
        if value.table_array:
            return items
        return _tagged("array", items)

    if kind == ValueKind.STRING:
        return _tagged("string", value.as_string())

    if kind == ValueKind.INTEGER:
        return _tagged("integer", str(value.as_int()))

    if kind == ValueKind.FLOAT:
        return _tagged("float", format_float(value.as_float()))  # type: ignore[arg-type]

    if kind == ValueKind.BOOLEAN:
        return _tagged("bool", "true" if value.as_bool() else "false")

    if kind == ValueKind.DATETIME:
        return _tagged("datetime", str(value))

    raise ValueError(f"Unhandled value kind: {kind}")


class CaseCategory(Enum):
    """Whether a fixture must parse or must fail."""

    VALID = "valid"
    INVALID = "invalid"


@dataclass
class CaseResult:
    """Outcome of a single fixture."""

    name: str
    category: CaseCategory
    passed: bool
    message: str = ""
    expected: Any = None
    actual: Any = None


@dataclass
class SuiteResult:
    """Outcome of a whole fixture directory."""

    cases: list[CaseResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.cases)

    @property
    def passed(self) -> int:
        return sum(1 for case in self.cases if case.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def ok(self) -> bool:
        return self.failed == 0


def run_invalid_case(path: Path, allow_mixed_arrays: bool = False) -> CaseResult:
    """Run a fixture that must fail to parse."""
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return CaseResult(path.name, CaseCategory.INVALID, False, f"Failed to read fixture: {e}")

    try:
        parse(source, str(path), allow_mixed_arrays)
    except ParseError as e:
        return CaseResult(path.name, CaseCategory.INVALID, True, str(e))

    return CaseResult(path.name, CaseCategory.INVALID, False, "Document parsed but should have failed")


def run_valid_case(path: Path, allow_mixed_arrays: bool = False) -> CaseResult:
    """Run a fixture that must parse to the tree in its sibling JSON file."""
    json_path = path.with_suffix(".json")
    if not json_path.is_file():
        return CaseResult(path.name, CaseCategory.VALID, False, f"Missing expected output {json_path.name}")

    try:
        expected = json.loads(json_path.read_text(encoding="utf-8"))
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return CaseResult(path.name, CaseCategory.VALID, False, f"Failed to read fixture: {e}")

    try:
        document = parse(source, str(path), allow_mixed_arrays)
    except ParseError as e:
        return CaseResult(path.name, CaseCategory.VALID, False, f"Parse error: {e}", expected)

    actual = to_json(document)
    if actual != expected:
        return CaseResult(
            path.name, CaseCategory.VALID, False, "Parsed tree differs from expected", expected, actual
        )

    return CaseResult(path.name, CaseCategory.VALID, True, expected=expected, actual=actual)


def run_suite(directory: str | Path, allow_mixed_arrays: bool = False) -> SuiteResult:
    """
    Run every fixture under directory/invalid and directory/valid.

    Args:
        directory: Fixture root
        allow_mixed_arrays: Parser option passed to every case

    Returns:
        SuiteResult with one CaseResult per .toml file
    """
    root = Path(directory)
    result = SuiteResult()

    for path in sorted((root / "invalid").rglob("*.toml")):
        case = run_invalid_case(path, allow_mixed_arrays)
        logger.debug("invalid/%s: %s", path.name, "pass" if case.passed else "FAIL")
        result.cases.append(case)

    for path in sorted((root / "valid").rglob("*.toml")):
        case = run_valid_case(path, allow_mixed_arrays)
        logger.debug("valid/%s: %s", path.name, "pass" if case.passed else "FAIL")
        result.cases.append(case)

    logger.info("Suite %s: %d/%d passed", root, result.passed, result.total)
    return result
