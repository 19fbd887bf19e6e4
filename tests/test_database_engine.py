"""Tests for the database category engine."""

import pytest

from codeintel.engines import DatabaseEngine
from codeintel.rules import RuleEngine

DATABASE_DIMENSIONS = ("quality", "maintainability", "performance", "security", "query_optimization", "data_integrity")


@pytest.mark.asyncio
async def test_analysis_covers_database_dimensions(database_engine, schema_sql):
    analysis = await database_engine.analyze_code(schema_sql, "PostgreSQL")

    assert tuple(result.dimension.name for result in analysis.dimensions()) == DATABASE_DIMENSIONS
    assert analysis.scalability is None
    assert analysis.accessibility is None
    for result in analysis.dimensions():
        assert 0 <= result.score <= 100


@pytest.mark.asyncio
async def test_analysis_is_deterministic(database_engine, schema_sql):
    first = await database_engine.analyze_code(schema_sql, "PostgreSQL")
    second = await database_engine.analyze_code(schema_sql, "PostgreSQL")

    assert first.to_dict() == second.to_dict()


@pytest.mark.asyncio
async def test_schema_constraints_are_recognized(database_engine, schema_sql):
    analysis = await database_engine.analyze_code(schema_sql, "PostgreSQL")

    assert "Primary key constraint" in analysis.data_integrity.get("constraints")
    assert "dataIntegrity" in analysis.to_dict()
    assert "queryOptimization" in analysis.to_dict()


@pytest.mark.asyncio
async def test_disabled_rule_is_not_applied():
    engine = DatabaseEngine(RuleEngine({"rules": {"DB-QUALITY-SELECT-STAR": "OFF"}}))

    analysis = await engine.analyze_code("SELECT * FROM users", "PostgreSQL")

    assert "DB-QUALITY-SELECT-STAR" not in [f.rule_id for f in analysis.quality.findings]


@pytest.mark.asyncio
async def test_generates_postgresql_schema(database_engine):
    code = await database_engine.generate_code(
        {"featureDescription": "User profiles", "techStack": ["PostgreSQL"]}
    )

    assert code.startswith("-- User profiles\n-- Generated by DatabaseEngine\n-- Technology: PostgreSQL")
    assert "CREATE TABLE IF NOT EXISTS user_profiles (" in code
    assert "PRIMARY KEY" in code
    assert "ANALYZE" in code


@pytest.mark.asyncio
async def test_generated_schema_passes_validation(database_engine):
    code = await database_engine.generate_code({"featureDescription": "Orders", "techStack": ["PostgreSQL"]})

    result = await database_engine.validate_code(code, "PostgreSQL")

    assert result.valid
    assert result.errors == ()


@pytest.mark.asyncio
async def test_default_technology_is_postgresql(database_engine):
    code = await database_engine.generate_code({"featureDescription": "Invoices"})

    assert "-- Technology: PostgreSQL" in code


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "technology, marker",
    [("MySQL", "ENGINE=InnoDB"), ("MongoDB", "db.createCollection"), ("Redis", "HSET"), ("SQLite", "AUTOINCREMENT")],
)
async def test_generates_for_each_technology(database_engine, technology, marker):
    code = await database_engine.generate_code({"featureDescription": "Sessions", "techStack": [technology]})

    assert marker in code


@pytest.mark.asyncio
async def test_quality_tiers(database_engine):
    request = {"featureDescription": "Audit log", "techStack": ["PostgreSQL"]}

    basic = await database_engine.generate_code({**request, "quality": "basic"})
    enterprise = await database_engine.generate_code({**request, "quality": "enterprise"})
    production = await database_engine.generate_code({**request, "quality": "production"})

    assert "Quality standards" not in basic
    assert "-- Quality standards (enterprise):" in enterprise
    assert "Release gated" not in enterprise
    assert "-- Quality standards (production):" in production
    assert "Release gated" in production


@pytest.mark.asyncio
async def test_table_without_primary_key_fails_validation(database_engine):
    result = await database_engine.validate_code("CREATE TABLE notes (body TEXT);", "PostgreSQL")

    assert not result.valid
    assert "Table created without primary key" in result.errors


@pytest.mark.asyncio
async def test_primary_key_added_by_alter_table_is_accepted(database_engine):
    code = "CREATE TABLE notes (id INT, body TEXT);\nALTER TABLE notes ADD PRIMARY KEY (id);"

    result = await database_engine.validate_code(code, "PostgreSQL")

    assert "Table created without primary key" not in result.errors


@pytest.mark.asyncio
async def test_primary_key_in_comment_does_not_count(database_engine):
    code = "-- PRIMARY KEY added later\nCREATE TABLE notes (body TEXT);"

    result = await database_engine.validate_code(code, "PostgreSQL")

    assert "Table created without primary key" in result.errors


@pytest.mark.asyncio
async def test_advisory_checks_are_warnings(database_engine):
    code = "SELECT * FROM users;\nUPDATE users SET active = false;\nCREATE USER app WITH password = 'secret';"

    result = await database_engine.validate_code(code, "PostgreSQL")

    assert result.valid
    assert "SELECT * returns columns the caller may not need" in result.warnings
    assert "UPDATE or DELETE without WHERE affects every row" in result.warnings
    assert "Hardcoded database credentials" in result.warnings


@pytest.mark.asyncio
async def test_sql_concatenation_is_an_error(database_engine):
    code = "query = \"SELECT name FROM users WHERE id = '\" + user_id"

    result = await database_engine.validate_code(code, "PostgreSQL")

    assert not result.valid
    assert "Potential SQL injection: query built by string concatenation" in result.errors


@pytest.mark.asyncio
async def test_validation_suggestions_include_analysis_advice(database_engine):
    result = await database_engine.validate_code("SELECT * FROM users", "PostgreSQL")

    assert len(result.suggestions) == len(set(result.suggestions))
    assert result.suggestions


@pytest.mark.asyncio
async def test_optimize_adds_statistics_refresh_and_notes(database_engine):
    code = "CREATE TABLE notes (body TEXT);"

    optimized = await database_engine.optimize_code(code, "PostgreSQL")

    assert optimized.startswith(code)
    assert "ANALYZE;" in optimized
    assert "-- Integrity: declare a primary key on every table" in optimized
    assert "-- Access control: grant each application role only the privileges it needs" in optimized


@pytest.mark.asyncio
async def test_optimize_is_idempotent(database_engine, schema_sql, context7_data):
    once = await database_engine.optimize_code(schema_sql, "PostgreSQL", context7_data)
    twice = await database_engine.optimize_code(once, "PostgreSQL", context7_data)

    assert once == twice


@pytest.mark.asyncio
async def test_optimize_uses_technology_comment_style(database_engine):
    optimized = await database_engine.optimize_code("KEYS *", "Redis")

    assert "# Optimization: use SCAN instead of KEYS in production" in optimized


@pytest.mark.asyncio
async def test_best_practices_static_first_then_insights(database_engine, context7_data):
    practices = await database_engine.get_best_practices("PostgreSQL", context7_data)

    assert practices[: len(DatabaseEngine.best_practices)] == list(DatabaseEngine.best_practices)
    assert practices[-1] == "PostgreSQL best practice: index foreign keys"


@pytest.mark.asyncio
async def test_anti_patterns_without_context(database_engine):
    assert await database_engine.get_anti_patterns("MySQL") == list(DatabaseEngine.anti_patterns)


def test_engine_introspection(database_engine):
    assert database_engine.category == "database"
    assert database_engine.dimensions == DATABASE_DIMENSIONS
    assert database_engine.rule_count > 0
    assert repr(database_engine) == "DatabaseEngine(category='database')"


SELECT_STAR_INSIGHT = {"insights": {"patterns": ["PostgreSQL anti-pattern: avoid SELECT * in reporting queries"]}}


@pytest.mark.asyncio
async def test_insight_text_does_not_trigger_post_processors(database_engine):
    code = await database_engine.generate_code(
        {"featureDescription": "User profiles", "techStack": ["PostgreSQL"]}, SELECT_STAR_INSIGHT
    )

    assert "-- - Avoid: PostgreSQL anti-pattern: avoid SELECT * in reporting queries" in code
    assert "Optimization: replace SELECT *" not in code
    assert await database_engine.optimize_code(code, "PostgreSQL", SELECT_STAR_INSIGHT) == code


@pytest.mark.asyncio
async def test_optimize_twice_with_insights_is_stable(database_engine):
    code = "CREATE TABLE notes (id INT PRIMARY KEY, body TEXT NOT NULL);"

    once = await database_engine.optimize_code(code, "PostgreSQL", SELECT_STAR_INSIGHT)
    twice = await database_engine.optimize_code(once, "PostgreSQL", SELECT_STAR_INSIGHT)

    assert once == twice
    assert once.count("ANALYZE;") == 1
    assert "Optimization: replace SELECT *" not in once
