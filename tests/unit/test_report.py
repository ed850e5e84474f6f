from __future__ import annotations

import json
from pathlib import Path

import pytest

from lib_effective_config.domain.report import (
    EMPTY_REPORT,
    PropertyValue,
    Report,
    ReportEntry,
    SourceDescriptor,
    sources_to_json,
)


def test_report_sorts_entries_by_key() -> None:
    report = Report((ReportEntry("y", 2, "b"), ReportEntry("x", 1, "a"), ReportEntry("X", 0, "c")))
    assert report.keys() == ["X", "x", "y"]
    assert len(report) == 3


def test_report_entry_is_immutable() -> None:
    entry = ReportEntry("key", "value", "source")
    with pytest.raises(AttributeError):
        entry.value = "other"  # type: ignore[misc]


def test_to_dict_omits_missing_source_and_origin() -> None:
    assert ReportEntry("k", "v").to_dict() == {"name": "k", "value": "v"}
    assert ReportEntry("k", "v", "s", "app.toml").to_dict() == {
        "name": "k",
        "value": "v",
        "source": "s",
        "origin": "app.toml",
    }


def test_to_json_renders_properties_array() -> None:
    report = Report((ReportEntry("b", True, "s"), ReportEntry("a", None, None)))
    payload = json.loads(report.to_json(indent=2))
    assert payload == {"properties": [{"name": "a", "value": None}, {"name": "b", "value": True, "source": "s"}]}


def test_to_json_falls_back_to_str_for_unknown_values() -> None:
    report = Report((ReportEntry("path", Path("/etc/app"), "s"),))
    assert json.loads(report.to_json())["properties"][0]["value"] == str(Path("/etc/app"))


def test_get_and_as_mapping() -> None:
    report = Report((ReportEntry("a", 1, "s"), ReportEntry("b", 2, "s")))
    assert report.get("b") == ReportEntry("b", 2, "s")
    assert report.get("missing") is None
    assert report.as_mapping() == {"a": 1, "b": 2}


def test_reports_compare_by_value() -> None:
    left = Report((ReportEntry("a", 1, "s"), ReportEntry("b", 2, "s")))
    right = Report((ReportEntry("b", 2, "s"), ReportEntry("a", 1, "s")))
    assert left == right


def test_empty_report() -> None:
    assert EMPTY_REPORT.entries == ()
    assert EMPTY_REPORT.to_dict() == {"properties": []}


def test_source_descriptor_rendering() -> None:
    descriptor = SourceDescriptor("dotenv", {"TOKEN": PropertyValue("******", ".env:3"), "MODE": PropertyValue("dev")})
    payload = json.loads(sources_to_json([descriptor]))
    assert payload == {
        "propertySources": [
            {
                "name": "dotenv",
                "properties": {"TOKEN": {"value": "******", "origin": ".env:3"}, "MODE": {"value": "dev"}},
            }
        ]
    }
