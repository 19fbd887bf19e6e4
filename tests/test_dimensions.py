"""Tests for rule building blocks and per-dimension rule sets."""

import pytest

from codeintel.dimensions import (
    BACKEND_SCALABILITY_RULES,
    DATABASE_DATA_INTEGRITY_RULES,
    DATABASE_QUALITY_RULES,
    DATABASE_QUERY_OPTIMIZATION_RULES,
    FRONTEND_ACCESSIBILITY_RULES,
    FRONTEND_QUALITY_RULES,
    BaseRule,
    DimensionAnalyzer,
    PatternRule,
    ScoreAccumulator,
)
from codeintel.dimensions.base import all_of, any_of, contains, contains_any, lacks, matches, not_, tech, tech_word
from codeintel.dimensions.security import owasp_compliance
from codeintel.types import ACCESSIBILITY, DATA_INTEGRITY, QUALITY, QUERY_OPTIMIZATION, SCALABILITY, SECURITY, Finding


class ExplodingRule(BaseRule):
    """Rule that fails, to check errors are not swallowed."""

    rule_id = "TEST-EXPLODES"

    def detect(self, code, technology):
        raise RuntimeError("rule failure")


class RecordingRule(BaseRule):
    """Rule that records the technology it was given."""

    rule_id = "TEST-RECORDS"

    def __init__(self):
        self.seen = []

    def detect(self, code, technology):
        self.seen.append(technology)
        return iter(())


def test_predicates_combine():
    code = "SELECT id FROM users WHERE id = 1"

    assert contains("SELECT", "WHERE")(code, "")
    assert not contains("SELECT", "LIMIT")(code, "")
    assert contains_any("LIMIT", "WHERE")(code, "")
    assert lacks("LIMIT", "JOIN")(code, "")
    assert matches(r"\bid\s*=")(code, "")
    assert tech("postgres")(code, "postgresql")
    assert tech_word("go")(code, "go 1.22")
    assert not tech_word("go")(code, "mongodb")
    assert all_of(contains("SELECT"), not_(contains("JOIN")))(code, "")
    assert any_of(contains("JOIN"), contains("FROM"))(code, "")


def test_pattern_rule_without_effect_is_rejected():
    with pytest.raises(ValueError):
        PatternRule("TEST-NOOP", contains("x"))


def test_score_accumulator_clamps_to_range():
    high = ScoreAccumulator(QUALITY)
    high.add(Finding("BONUS", 50))
    assert high.score == 100

    low = ScoreAccumulator(SECURITY)
    for _ in range(5):
        low.add(Finding("PENALTY", -30, message="bad"))
    assert low.score == 0
    assert low.result().issues == ("bad",) * 5


def test_score_accumulator_routes_messages_to_buckets():
    accumulator = ScoreAccumulator(DATA_INTEGRITY)
    accumulator.add(Finding("A", 5, message="Primary key constraint"))
    accumulator.add(Finding("B", 0, message="Referential integrity", bucket="relationships"))
    accumulator.add(Finding("C", -5, suggestion="Add CHECK constraints"))

    result = accumulator.result()

    assert result.get("constraints") == ("Primary key constraint",)
    assert result.get("relationships") == ("Referential integrity",)
    assert result.get("validations") == ("Add CHECK constraints",)
    assert result.score == 80


def test_score_accumulator_rejects_unknown_bucket():
    accumulator = ScoreAccumulator(QUALITY)
    with pytest.raises(KeyError):
        accumulator.add(Finding("A", -1, message="x", bucket="nowhere"))


@pytest.mark.asyncio
async def test_analyzer_propagates_rule_errors():
    analyzer = DimensionAnalyzer(QUALITY, [ExplodingRule()])

    with pytest.raises(RuntimeError):
        await analyzer.analyze("code", "python")


@pytest.mark.asyncio
async def test_analyzer_lower_cases_technology_once():
    rule = RecordingRule()
    analyzer = DimensionAnalyzer(QUALITY, [rule])

    await analyzer.analyze("code", "PostgreSQL")

    assert rule.seen == ["postgresql"]


@pytest.mark.asyncio
async def test_analyzer_handles_empty_and_missing_code():
    analyzer = DimensionAnalyzer(QUALITY, DATABASE_QUALITY_RULES)

    for code in ("", None):
        result = await analyzer.analyze(code, None)
        assert 0 <= result.score <= 100


@pytest.mark.asyncio
async def test_select_star_scenario():
    analyzer = DimensionAnalyzer(QUALITY, DATABASE_QUALITY_RULES)

    result = await analyzer.analyze("SELECT * FROM users", "postgresql")

    assert any("SELECT *" in issue for issue in result.issues)
    assert result.score < 100


@pytest.mark.asyncio
async def test_primary_key_scenario():
    analyzer = DimensionAnalyzer(DATA_INTEGRITY, DATABASE_DATA_INTEGRITY_RULES)

    result = await analyzer.analyze("CREATE TABLE t (id SERIAL PRIMARY KEY)", "postgresql")

    assert "Primary key constraint" in result.get("constraints")
    assert result.score >= 80


def test_findings_follow_rule_order():
    analyzer = DimensionAnalyzer(DATA_INTEGRITY, DATABASE_DATA_INTEGRITY_RULES)
    code = "CREATE TABLE t (id INT PRIMARY KEY, parent_id INT REFERENCES t (id), name TEXT NOT NULL UNIQUE)"

    result = analyzer.evaluate(code, "postgresql")

    assert [f.rule_id for f in result.findings] == [
        "DB-INT-PRIMARY-KEY",
        "DB-INT-FOREIGN-KEY",
        "DB-INT-RELATIONSHIPS",
        "DB-INT-NOT-NULL",
        "DB-INT-UNIQUE",
    ]


def test_join_count_rule():
    analyzer = DimensionAnalyzer(QUERY_OPTIMIZATION, DATABASE_QUERY_OPTIMIZATION_RULES)
    query = "SELECT a.id FROM a JOIN b ON a.id = b.a JOIN c ON c.id = b.c JOIN d ON d.id = c.d JOIN e ON e.id = d.e"

    result = analyzer.evaluate(query, "mysql")

    assert any("4 joins" in message for message in result.get("queryPatterns"))


def test_sequential_await_rule():
    analyzer = DimensionAnalyzer(SCALABILITY, BACKEND_SCALABILITY_RULES)
    code = "for (const id of ids) {\n  const row = await db.find(id);\n}\n"

    result = analyzer.evaluate(code, "node.js")

    assert "BE-SCALE-SEQUENTIAL-AWAIT" in [f.rule_id for f in result.findings]


def test_heading_count_rule_only_applies_to_markup():
    analyzer = DimensionAnalyzer(ACCESSIBILITY, FRONTEND_ACCESSIBILITY_RULES)

    stylesheet = analyzer.evaluate("body { margin: 0; }", "css")
    page = analyzer.evaluate("<div><h1>One</h1><h1>Two</h1></div>", "html")

    assert "FE-A11Y-H1-COUNT" not in [f.rule_id for f in stylesheet.findings]
    assert "Multiple H1 headings detected (WCAG 1.3.1)" in page.issues


def test_modern_syntax_rewards_and_penalizes():
    analyzer = DimensionAnalyzer(QUALITY, FRONTEND_QUALITY_RULES)
    modern = "const a = async () => { let b = await f(); return b?.c ?? `x`; };"
    legacy = "var a = 1;"

    assert analyzer.evaluate(modern, "javascript").score == 100
    legacy_result = analyzer.evaluate(legacy, "javascript")
    assert "Legacy var declarations" in legacy_result.issues
    assert legacy_result.score < 100


def test_rule_ids_are_unique_within_each_set():
    for rules in (
        DATABASE_QUALITY_RULES,
        DATABASE_DATA_INTEGRITY_RULES,
        DATABASE_QUERY_OPTIMIZATION_RULES,
        BACKEND_SCALABILITY_RULES,
        FRONTEND_QUALITY_RULES,
        FRONTEND_ACCESSIBILITY_RULES,
    ):
        ids = [rule.rule_id for rule in rules]
        assert len(ids) == len(set(ids))


@pytest.mark.parametrize("score, level", [(95, "High"), (80, "High"), (70, "Medium"), (10, "Low")])
def test_owasp_compliance_bands(score, level):
    assert owasp_compliance(score, "", "")["compliance"]["level"] == level
