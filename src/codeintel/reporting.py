"""
Report formatters for codeintel results.

Each formatter renders an analysis or a validation result to a string for a
particular consumer: people at a terminal or tooling reading JSON.

codeintel/src/codeintel/reporting.py
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .types import CodeAnalysis, DimensionResult, Severity, ValidationResult

__all__ = [
    "BaseFormatter",
    "HumanFormatter",
    "JsonFormatter",
    "BUILTIN_FORMATTERS",
    "FORMAT_CHOICES",
    "DEFAULT_FORMAT",
    "get_formatter",
]

_BAR_WIDTH = 20


class BaseFormatter(ABC):
    """Base class for formatters."""

    name: str = ""
    description: str = ""

    @abstractmethod
    def format_analysis(self, analysis: CodeAnalysis, category: str, technology: str) -> str:
        """Format a multi-dimensional analysis for output."""

    @abstractmethod
    def format_validation(self, result: ValidationResult, category: str, technology: str) -> str:
        """Format a validation result for output."""


def _score_bar(score: int) -> str:
    filled = round(score * _BAR_WIDTH / 100)
    return "#" * filled + "." * (_BAR_WIDTH - filled)


def _dimension_lines(result: DimensionResult) -> List[str]:
    lines = [f"{result.dimension.name:<20} {result.score:>3}/100  {_score_bar(result.score)}"]
    for finding in result.findings:
        if finding.message is None:
            continue
        marker = "+" if finding.severity is Severity.BONUS else "-"
        lines.append(f"  {marker} {finding.rule_id}: {finding.message}")
    for suggestion in result.suggestions:
        lines.append(f"    → {suggestion}")
    return lines


class HumanFormatter(BaseFormatter):
    """Plain text report for terminals."""

    name = "human"
    description = "Human-readable report with per-dimension scores"

    def format_analysis(self, analysis: CodeAnalysis, category: str, technology: str) -> str:
        lines = [f"Analysis of {technology} code ({category})", ""]
        for result in analysis.dimensions():
            lines.extend(_dimension_lines(result))
        scores = [result.score for result in analysis.dimensions()]
        lines.append("")
        lines.append(f"Summary: average score {sum(scores) / len(scores):.0f}/100 over {len(scores)} dimensions")
        return "\n".join(lines)

    def format_validation(self, result: ValidationResult, category: str, technology: str) -> str:
        if result.valid and not result.warnings:
            lines = [f"{technology} code passed validation ({category})"]
        else:
            status = "passed with warnings" if result.valid else "failed validation"
            lines = [f"{technology} code {status} ({category})"]
        for title, messages in (
            ("Errors", result.errors),
            ("Warnings", result.warnings),
            ("Suggestions", result.suggestions),
        ):
            if messages:
                lines.append(f"\n{title}:")
                lines.extend(f"  {message}" for message in messages)
        lines.append(
            f"\nSummary: {len(result.errors)} errors, {len(result.warnings)} warnings, "
            f"{len(result.suggestions)} suggestions"
        )
        return "\n".join(lines)


class JsonFormatter(BaseFormatter):
    """JSON output formatter for machine processing."""

    name = "json"
    description = "JSON output format for CI/tooling integration"

    def _dump(self, payload: Dict[str, Any]) -> str:
        return json.dumps(payload, indent=2, default=str)

    def format_analysis(self, analysis: CodeAnalysis, category: str, technology: str) -> str:
        return self._dump({"category": category, "technology": technology, "analysis": analysis.to_dict()})

    def format_validation(self, result: ValidationResult, category: str, technology: str) -> str:
        return self._dump({"category": category, "technology": technology, **result.to_dict()})


# Built-in report formatters
BUILTIN_FORMATTERS = {
    "human": HumanFormatter,
    "json": JsonFormatter,
}

# Format choices for CLI - single source of truth
FORMAT_CHOICES = list(BUILTIN_FORMATTERS.keys())
DEFAULT_FORMAT = "human"


def get_formatter(name: str) -> BaseFormatter:
    """Instantiate a built-in formatter by name, raising KeyError for unknown names."""
    return BUILTIN_FORMATTERS[name]()
