"""Tests for result types and the dimension table."""

import pytest

from codeintel.types import (
    DATA_INTEGRITY,
    DIMENSIONS,
    QUALITY,
    QUERY_OPTIMIZATION,
    SCALABILITY,
    SECURITY,
    CodeAnalysis,
    DimensionResult,
    Finding,
    Severity,
    TechnologyInsights,
    ValidationResult,
)


def _result(dimension, score=50, **buckets):
    return DimensionResult(
        dimension=dimension,
        score=score,
        buckets={name: tuple(buckets.get(name, ())) for name in dimension.buckets},
    )


@pytest.mark.parametrize(
    "delta, severity",
    [
        (-30, Severity.CRITICAL),
        (-20, Severity.CRITICAL),
        (-19, Severity.HIGH),
        (-12, Severity.HIGH),
        (-11, Severity.MEDIUM),
        (-6, Severity.MEDIUM),
        (-5, Severity.LOW),
        (-1, Severity.LOW),
        (0, Severity.INFO),
        (4, Severity.BONUS),
    ],
)
def test_severity_from_delta(delta, severity):
    assert Finding("RULE", delta).severity is severity


def test_severity_ordering():
    assert sorted([Severity.CRITICAL, Severity.BONUS, Severity.MEDIUM]) == [
        Severity.BONUS,
        Severity.MEDIUM,
        Severity.CRITICAL,
    ]


def test_dimension_table_baselines():
    baselines = {name: d.baseline for name, d in DIMENSIONS.items()}
    assert baselines == {
        "quality": 100,
        "maintainability": 85,
        "performance": 85,
        "security": 85,
        "scalability": 75,
        "reliability": 80,
        "accessibility": 75,
        "seo": 70,
        "query_optimization": 75,
        "data_integrity": 80,
    }


def test_issue_and_advice_buckets_belong_to_dimension():
    for dimension in DIMENSIONS.values():
        assert dimension.issue_bucket in dimension.buckets
        assert dimension.advice_bucket in dimension.buckets


def test_dimension_result_reads_named_buckets():
    result = _result(SECURITY, vulnerabilities=["A03: injection"], recommendations=["Use parameters"])

    assert result.issues == ("A03: injection",)
    assert result.suggestions == ("Use parameters",)
    with pytest.raises(KeyError):
        result.get("issues")


def test_dimension_result_to_dict_uses_bucket_order_and_details():
    result = DimensionResult(
        dimension=SCALABILITY,
        score=81,
        buckets={"patterns": ("Caching layer",), "bottlenecks": (), "recommendations": ("Add queues",)},
        details={"extra": 1},
    )

    data = result.to_dict()

    assert list(data) == ["score", "patterns", "bottlenecks", "recommendations", "extra"]
    assert data["patterns"] == ["Caching layer"]


def test_code_analysis_omits_absent_dimensions():
    analysis = CodeAnalysis.from_results(
        [
            _result(QUALITY, suggestions=["a"]),
            _result(DIMENSIONS["maintainability"]),
            _result(DIMENSIONS["performance"], optimizations=["b", "a"]),
            _result(SECURITY),
            _result(QUERY_OPTIMIZATION),
            _result(DATA_INTEGRITY),
        ]
    )

    data = analysis.to_dict()

    assert "scalability" not in data
    assert "queryOptimization" in data and "dataIntegrity" in data
    assert analysis.scalability is None
    assert analysis.all_suggestions() == ["a", "b"]


def test_validation_result_valid_tracks_errors():
    assert ValidationResult().valid
    assert ValidationResult(warnings=("w",)).valid
    failing = ValidationResult(errors=("e",))
    assert not failing.valid
    assert failing.to_dict()["valid"] is False


def test_technology_insights_to_dict_uses_camel_case():
    insights = TechnologyInsights(best_practices=("x",))

    assert not insights.is_empty()
    assert insights.to_dict()["bestPractices"] == ["x"]
    assert TechnologyInsights().is_empty()
