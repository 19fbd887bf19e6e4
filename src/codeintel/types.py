"""
Core result types for codeintel.

Findings are produced by rules, folded into per-dimension results by the
score accumulator, and gathered into a CodeAnalysis per call. Every value
here is created per call and never mutated afterwards.

codeintel/src/codeintel/types.py
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

__all__ = [
    "Severity",
    "Finding",
    "Dimension",
    "QUALITY",
    "MAINTAINABILITY",
    "PERFORMANCE",
    "SECURITY",
    "SCALABILITY",
    "RELIABILITY",
    "ACCESSIBILITY",
    "SEO",
    "QUERY_OPTIMIZATION",
    "DATA_INTEGRITY",
    "DIMENSIONS",
    "DimensionResult",
    "CodeAnalysis",
    "ValidationResult",
    "TechnologyInsights",
]


class Severity(Enum):
    """Severity of a finding, derived from its score delta."""

    BONUS = "BONUS"
    INFO = "INFO"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    def __lt__(self, other):
        """Enable sorting by severity."""
        order = {"BONUS": 0, "INFO": 1, "LOW": 2, "MEDIUM": 3, "HIGH": 4, "CRITICAL": 5}
        return order[self.value] < order[other.value]

    @classmethod
    def from_delta(cls, delta: int) -> "Severity":
        if delta > 0:
            return cls.BONUS
        if delta == 0:
            return cls.INFO
        if delta <= -20:
            return cls.CRITICAL
        if delta <= -12:
            return cls.HIGH
        if delta <= -6:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class Finding:
    """One rule hit: a score delta plus optional message and advice."""

    rule_id: str
    delta: int = 0
    message: Optional[str] = None
    bucket: Optional[str] = None
    suggestion: Optional[str] = None

    @property
    def severity(self) -> Severity:
        return Severity.from_delta(self.delta)

    def to_dict(self) -> Dict[str, Any]:
        """Convert finding to dictionary for JSON output."""
        return {
            "rule": self.rule_id,
            "level": self.severity.value,
            "delta": self.delta,
            "msg": self.message,
            "bucket": self.bucket,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class Dimension:
    """Descriptor of an analysis axis: its baseline and its output buckets."""

    name: str
    key: str
    baseline: int
    buckets: Tuple[str, ...]
    issue_bucket: str
    advice_bucket: str


QUALITY = Dimension("quality", "quality", 100, ("issues", "suggestions"), "issues", "suggestions")
MAINTAINABILITY = Dimension(
    "maintainability", "maintainability", 85, ("issues", "suggestions"), "issues", "suggestions"
)
PERFORMANCE = Dimension(
    "performance", "performance", 85, ("bottlenecks", "optimizations"), "bottlenecks", "optimizations"
)
SECURITY = Dimension(
    "security", "security", 85, ("vulnerabilities", "recommendations"), "vulnerabilities", "recommendations"
)
SCALABILITY = Dimension(
    "scalability",
    "scalability",
    75,
    ("patterns", "bottlenecks", "recommendations"),
    "bottlenecks",
    "recommendations",
)
RELIABILITY = Dimension("reliability", "reliability", 80, ("issues", "improvements"), "issues", "improvements")
ACCESSIBILITY = Dimension(
    "accessibility", "accessibility", 75, ("issues", "improvements"), "issues", "improvements"
)
SEO = Dimension("seo", "seo", 70, ("issues", "improvements"), "issues", "improvements")
QUERY_OPTIMIZATION = Dimension(
    "query_optimization",
    "queryOptimization",
    75,
    ("indexUsage", "queryPatterns", "optimizations"),
    "queryPatterns",
    "optimizations",
)
DATA_INTEGRITY = Dimension(
    "data_integrity",
    "dataIntegrity",
    80,
    ("constraints", "relationships", "validations"),
    "constraints",
    "validations",
)

DIMENSIONS: Dict[str, Dimension] = {
    d.name: d
    for d in (
        QUALITY,
        MAINTAINABILITY,
        PERFORMANCE,
        SECURITY,
        SCALABILITY,
        RELIABILITY,
        ACCESSIBILITY,
        SEO,
        QUERY_OPTIMIZATION,
        DATA_INTEGRITY,
    )
}


@dataclass(frozen=True)
class DimensionResult:
    """Score and categorized messages for one dimension."""

    dimension: Dimension
    score: int
    buckets: Mapping[str, Tuple[str, ...]]
    details: Mapping[str, Any] = field(default_factory=dict)
    findings: Tuple[Finding, ...] = ()

    def get(self, bucket: str) -> Tuple[str, ...]:
        if bucket not in self.dimension.buckets:
            raise KeyError(f"{self.dimension.name} has no bucket {bucket!r}")
        return self.buckets.get(bucket, ())

    @property
    def issues(self) -> Tuple[str, ...]:
        return self.get(self.dimension.issue_bucket)

    @property
    def suggestions(self) -> Tuple[str, ...]:
        return self.get(self.dimension.advice_bucket)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"score": self.score}
        for bucket in self.dimension.buckets:
            data[bucket] = list(self.buckets.get(bucket, ()))
        data.update(self.details)
        return data


@dataclass(frozen=True)
class CodeAnalysis:
    """Multi-dimensional report for one code fragment."""

    quality: DimensionResult
    maintainability: DimensionResult
    performance: DimensionResult
    security: DimensionResult
    scalability: Optional[DimensionResult] = None
    reliability: Optional[DimensionResult] = None
    accessibility: Optional[DimensionResult] = None
    seo: Optional[DimensionResult] = None
    query_optimization: Optional[DimensionResult] = None
    data_integrity: Optional[DimensionResult] = None

    @classmethod
    def from_results(cls, results: List[DimensionResult]) -> "CodeAnalysis":
        return cls(**{result.dimension.name: result for result in results})

    def dimensions(self) -> Iterator[DimensionResult]:
        """Yield the present dimension results in declaration order."""
        for name in DIMENSIONS:
            result = getattr(self, name)
            if result is not None:
                yield result

    def all_suggestions(self) -> List[str]:
        """Advice from every dimension, first occurrence kept."""
        seen: Dict[str, None] = {}
        for result in self.dimensions():
            for suggestion in result.suggestions:
                seen.setdefault(suggestion, None)
        return list(seen)

    def to_dict(self) -> Dict[str, Any]:
        return {result.dimension.key: result.to_dict() for result in self.dimensions()}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate_code. `valid` is true exactly when there are no errors."""

    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class TechnologyInsights:
    """Insights for one technology extracted from Context7 data."""

    best_practices: Tuple[str, ...] = ()
    anti_patterns: Tuple[str, ...] = ()
    security_considerations: Tuple[str, ...] = ()
    performance_considerations: Tuple[str, ...] = ()
    frameworks: Tuple[str, ...] = ()
    libraries: Tuple[str, ...] = ()
    tools: Tuple[str, ...] = ()
    trends: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not any(
            (
                self.best_practices,
                self.anti_patterns,
                self.security_considerations,
                self.performance_considerations,
                self.frameworks,
                self.libraries,
                self.tools,
                self.trends,
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bestPractices": list(self.best_practices),
            "antiPatterns": list(self.anti_patterns),
            "securityConsiderations": list(self.security_considerations),
            "performanceConsiderations": list(self.performance_considerations),
            "frameworks": list(self.frameworks),
            "libraries": list(self.libraries),
            "tools": list(self.tools),
            "trends": list(self.trends),
        }
