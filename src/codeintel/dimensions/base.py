"""
Rule building blocks and the per-dimension analyzer.

A rule inspects one code fragment and yields Findings. A DimensionAnalyzer
runs an ordered rule list, folds the findings into a ScoreAccumulator and
returns a DimensionResult. Predicates receive the raw code and the
lower-cased technology name.

codeintel/src/codeintel/dimensions/base.py
"""

import logging
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from ..types import Dimension, DimensionResult, Finding

logger = logging.getLogger(__name__)

__all__ = [
    "Predicate",
    "contains",
    "contains_any",
    "lacks",
    "matches",
    "matches_any",
    "tech",
    "tech_word",
    "all_of",
    "any_of",
    "not_",
    "BaseRule",
    "PatternRule",
    "ScoreAccumulator",
    "DimensionAnalyzer",
]

Predicate = Callable[[str, str], bool]
DetailsFactory = Callable[[int, str, str], Dict[str, Any]]


def contains(*needles: str) -> Predicate:
    """True when every needle occurs in the code."""
    return lambda code, technology: all(needle in code for needle in needles)


def contains_any(*needles: str) -> Predicate:
    return lambda code, technology: any(needle in code for needle in needles)


def lacks(*needles: str) -> Predicate:
    """True when none of the needles occurs in the code."""
    return lambda code, technology: not any(needle in code for needle in needles)


def matches(pattern: str, flags: int = 0) -> Predicate:
    compiled = re.compile(pattern, flags)
    return lambda code, technology: compiled.search(code) is not None


def matches_any(*patterns: str, flags: int = 0) -> Predicate:
    compiled = [re.compile(p, flags) for p in patterns]
    return lambda code, technology: any(c.search(code) for c in compiled)


def tech(*keys: str) -> Predicate:
    """True when the technology name contains any of the keys."""
    return lambda code, technology: any(key in technology for key in keys)


def tech_word(*words: str) -> Predicate:
    """True when any of the words appears as a whole word in the technology name."""
    compiled = re.compile(r"\b(?:%s)\b" % "|".join(re.escape(w) for w in words))
    return lambda code, technology: compiled.search(technology) is not None


def all_of(*predicates: Predicate) -> Predicate:
    return lambda code, technology: all(p(code, technology) for p in predicates)


def any_of(*predicates: Predicate) -> Predicate:
    return lambda code, technology: any(p(code, technology) for p in predicates)


def not_(predicate: Predicate) -> Predicate:
    return lambda code, technology: not predicate(code, technology)


class BaseRule:
    """Base class for rules. Subclasses implement detect()."""

    rule_id: str = ""
    description: str = ""

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        """Yield findings for the code. Must not mutate anything."""
        raise NotImplementedError

    def create_finding(
        self,
        delta: int = 0,
        message: Optional[str] = None,
        suggestion: Optional[str] = None,
        bucket: Optional[str] = None,
    ) -> Finding:
        return Finding(
            rule_id=self.rule_id,
            delta=delta,
            message=message,
            bucket=bucket,
            suggestion=suggestion,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rule_id!r})"


class PatternRule(BaseRule):
    """Declarative rule: one finding whenever the predicate holds."""

    def __init__(
        self,
        rule_id: str,
        when: Predicate,
        message: Optional[str] = None,
        suggestion: Optional[str] = None,
        delta: int = 0,
        bucket: Optional[str] = None,
        description: str = "",
    ):
        if message is None and suggestion is None and delta == 0:
            raise ValueError(f"Rule {rule_id} would never have an effect")
        self.rule_id = rule_id
        self.when = when
        self.message = message
        self.suggestion = suggestion
        self.delta = delta
        self.bucket = bucket
        self.description = description or message or suggestion or ""

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        if self.when(code, technology):
            yield self.create_finding(self.delta, self.message, self.suggestion, self.bucket)


class ScoreAccumulator:
    """Folds findings into a clamped score and ordered message buckets."""

    def __init__(self, dimension: Dimension):
        self.dimension = dimension
        self.total_delta = 0
        self.findings: List[Finding] = []
        self._buckets: Dict[str, List[str]] = {name: [] for name in dimension.buckets}

    def add(self, finding: Finding) -> None:
        self.findings.append(finding)
        self.total_delta += finding.delta
        if finding.message:
            bucket = finding.bucket or self.dimension.issue_bucket
            if bucket not in self._buckets:
                raise KeyError(
                    f"Rule {finding.rule_id} targets unknown bucket {bucket!r} "
                    f"of dimension {self.dimension.name}"
                )
            self._buckets[bucket].append(finding.message)
        if finding.suggestion:
            self._buckets[self.dimension.advice_bucket].append(finding.suggestion)

    @property
    def score(self) -> int:
        return max(0, min(100, self.dimension.baseline + self.total_delta))

    def result(self, details: Optional[Dict[str, Any]] = None) -> DimensionResult:
        return DimensionResult(
            dimension=self.dimension,
            score=self.score,
            buckets={name: tuple(messages) for name, messages in self._buckets.items()},
            details=dict(details or {}),
            findings=tuple(self.findings),
        )


class DimensionAnalyzer:
    """Scores one dimension of a code fragment with an ordered rule list."""

    def __init__(
        self,
        dimension: Dimension,
        rules: Sequence[BaseRule],
        details: Optional[DetailsFactory] = None,
    ):
        self.dimension = dimension
        self.rules = tuple(rules)
        self.details = details

    def evaluate(self, code: str, technology: str) -> DimensionResult:
        code = code or ""
        technology = (technology or "").lower()
        accumulator = ScoreAccumulator(self.dimension)
        for rule in self.rules:
            for finding in rule.detect(code, technology):
                accumulator.add(finding)
        extra = self.details(accumulator.score, code, technology) if self.details else None
        return accumulator.result(extra)

    async def analyze(self, code: str, technology: str, context: Any = None) -> DimensionResult:
        """Analyze the fragment. Context is accepted for interface parity and unused by rules."""
        return self.evaluate(code, technology)

    def __repr__(self) -> str:
        return f"DimensionAnalyzer({self.dimension.name!r}, rules={len(self.rules)})"
