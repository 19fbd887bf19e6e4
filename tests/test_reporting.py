"""Tests for report formatters."""

import json

import pytest

from codeintel.reporting import (
    BUILTIN_FORMATTERS,
    DEFAULT_FORMAT,
    FORMAT_CHOICES,
    HumanFormatter,
    JsonFormatter,
    get_formatter,
)
from codeintel.types import ValidationResult


def test_format_registry():
    assert FORMAT_CHOICES == ["human", "json"]
    assert DEFAULT_FORMAT in BUILTIN_FORMATTERS
    assert isinstance(get_formatter("json"), JsonFormatter)
    with pytest.raises(KeyError):
        get_formatter("xml")


@pytest.mark.asyncio
async def test_human_analysis_report(database_engine):
    analysis = await database_engine.analyze_code("SELECT * FROM users", "PostgreSQL")

    report = HumanFormatter().format_analysis(analysis, "database", "PostgreSQL")
    lines = report.splitlines()

    assert lines[0] == "Analysis of PostgreSQL code (database)"
    assert any(line.startswith("quality ") and "/100" in line for line in lines)
    assert "  - DB-QUALITY-SELECT-STAR: Using SELECT * instead of specific columns" in lines
    assert any(line.startswith("    → ") for line in lines)
    assert lines[-1].startswith("Summary: average score ")
    assert lines[-1].endswith("over 6 dimensions")


@pytest.mark.asyncio
async def test_json_analysis_report(database_engine):
    analysis = await database_engine.analyze_code("SELECT * FROM users", "PostgreSQL")

    payload = json.loads(JsonFormatter().format_analysis(analysis, "database", "PostgreSQL"))

    assert payload["category"] == "database"
    assert payload["analysis"] == analysis.to_dict()


@pytest.mark.parametrize(
    "result, status",
    [
        (ValidationResult(), "passed validation"),
        (ValidationResult(warnings=("w",)), "passed with warnings"),
        (ValidationResult(errors=("e",)), "failed validation"),
    ],
)
def test_human_validation_status(result, status):
    report = HumanFormatter().format_validation(result, "backend", "Go")

    assert report.splitlines()[0] == f"Go code {status} (backend)"


def test_human_validation_sections():
    result = ValidationResult(errors=("No primary key",), suggestions=("Add indexes", "Use LIMIT"))

    report = HumanFormatter().format_validation(result, "database", "MySQL")

    assert "\nErrors:\n  No primary key" in report
    assert "Warnings:" not in report
    assert "\nSuggestions:\n  Add indexes\n  Use LIMIT" in report
    assert report.endswith("Summary: 1 errors, 0 warnings, 2 suggestions")


def test_json_validation_report():
    result = ValidationResult(errors=("e",), warnings=("w",))

    payload = json.loads(JsonFormatter().format_validation(result, "frontend", "HTML"))

    assert payload == {
        "category": "frontend",
        "technology": "HTML",
        "valid": False,
        "errors": ["e"],
        "warnings": ["w"],
        "suggestions": [],
    }
