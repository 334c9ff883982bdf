"""
Pytest configuration and fixtures.
"""

import json
from pathlib import Path

import pytest


SAMPLE_DOCUMENT = """\
# Sample document
title = "TOML Example"

[owner]
name = "Tom Preston-Werner"
dob = 1979-05-27T07:32:00Z

[database]
server = "192.168.1.1"
ports = [ 8001, 8001, 8002 ]
connection_max = 5000
enabled = true

[servers]

  [servers.alpha]
  ip = "10.0.0.1"
  dc = "eqdc10"

  [servers.beta]
  ip = "10.0.0.2"
  dc = "eqdc10"

[clients]
data = [ ["gamma", "delta"], [1, 2] ]

hosts = [
  "alpha",
  "omega",
]

[[products]]
name = "Hammer"
sku = 738594937

[[products]]
name = "Nail"
sku = 284758393
color = "gray"
"""


@pytest.fixture
def sample_document() -> str:
    """A document exercising tables, nested tables, arrays and table arrays."""
    return SAMPLE_DOCUMENT


@pytest.fixture
def sample_path(tmp_path: Path, sample_document: str) -> Path:
    """Sample document written to disk."""
    path = tmp_path / "sample.toml"
    path.write_text(sample_document, encoding="utf-8")
    return path


@pytest.fixture
def suite_dir(tmp_path: Path) -> Path:
    """A small toml-test style fixture directory with one failing case."""
    root = tmp_path / "suite"
    (root / "valid").mkdir(parents=True)
    (root / "invalid").mkdir(parents=True)

    (root / "valid" / "simple.toml").write_text('a = 1\n[b]\nc = "x"\n', encoding="utf-8")
    (root / "valid" / "simple.json").write_text(
        json.dumps(
            {
                "a": {"type": "integer", "value": "1"},
                "b": {"c": {"type": "string", "value": "x"}},
            }
        ),
        encoding="utf-8",
    )

    (root / "valid" / "wrong.toml").write_text("a = 2\n", encoding="utf-8")
    (root / "valid" / "wrong.json").write_text(
        json.dumps({"a": {"type": "integer", "value": "3"}}), encoding="utf-8"
    )

    (root / "invalid" / "duplicate.toml").write_text("a = 1\na = 2\n", encoding="utf-8")
    (root / "invalid" / "missing-value.toml").write_text("a = \n", encoding="utf-8")

    return root
