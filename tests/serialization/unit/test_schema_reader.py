"""Schema reader tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from versioned_schema_tools.serialization import SerializationError, parse_object, read_object


def test_parse_object_keeps_timestamps_as_strings() -> None:
    document = parse_object("dt: 2020-06-25T00:00:00Z\nday: 2020-06-25\n")

    assert document == {"dt": "2020-06-25T00:00:00Z", "day": "2020-06-25"}


def test_parse_object_reads_json_text() -> None:
    assert parse_object('{"maximum": 9007199254740991, "value": 1.0}') == {
        "maximum": 9007199254740991,
        "value": 1.0,
    }


def test_parse_object_reports_source_on_invalid_yaml() -> None:
    with pytest.raises(SerializationError, match="broken.yaml"):
        parse_object("key: [unclosed", "broken.yaml")


def test_read_object_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "current.yaml"
    path.write_text("title: basic\n$id: /basic/1.0.0\n", encoding="utf-8")

    assert read_object(path) == {"title": "basic", "$id": "/basic/1.0.0"}
