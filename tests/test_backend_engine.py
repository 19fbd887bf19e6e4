"""Tests for the backend category engine."""

import pytest

from codeintel.engines import BackendEngine
from codeintel.rules import RuleEngine

BACKEND_DIMENSIONS = ("quality", "maintainability", "performance", "security", "scalability", "reliability")


@pytest.mark.asyncio
async def test_analysis_covers_backend_dimensions(backend_engine, express_app):
    analysis = await backend_engine.analyze_code(express_app, "Node.js")

    assert tuple(result.dimension.name for result in analysis.dimensions()) == BACKEND_DIMENSIONS
    assert analysis.data_integrity is None
    assert analysis.seo is None
    for result in analysis.dimensions():
        assert 0 <= result.score <= 100


@pytest.mark.asyncio
async def test_security_details_carry_owasp_compliance(backend_engine, express_app):
    analysis = await backend_engine.analyze_code(express_app, "Node.js")

    compliance = analysis.to_dict()["security"]["compliance"]
    assert compliance["standard"] == "OWASP Top 10 2021"
    assert compliance["level"] in ("High", "Medium", "Low")


@pytest.mark.asyncio
async def test_password_hashing_raises_security_score(backend_engine):
    plain = "const password = req.body.password;\nsave(password);"
    hashed = "const password = await bcrypt.hash(req.body.password, 12);\nsave(password);"

    before = await backend_engine.analyze_code(plain, "Node.js")
    after = await backend_engine.analyze_code(hashed, "Node.js")

    assert after.security.score > before.security.score
    assert "A02: Weak password hashing" in before.security.issues
    assert "A02: Weak password hashing" not in after.security.issues


@pytest.mark.asyncio
async def test_empty_code_still_scores(backend_engine):
    analysis = await backend_engine.analyze_code("", "Python")

    for result in analysis.dimensions():
        assert 0 <= result.score <= 100


@pytest.mark.asyncio
async def test_rule_configuration_filters_findings(sample_config):
    engine = BackendEngine(RuleEngine(sample_config))

    analysis = await engine.analyze_code("def handler():\n    return 1\n", "Python")

    rule_ids = [finding.rule_id for result in analysis.dimensions() for finding in result.findings]
    assert "BE-QUALITY-NO-LOGGING" not in rule_ids


@pytest.mark.asyncio
async def test_generates_node_service(backend_engine):
    code = await backend_engine.generate_code({"featureDescription": "Order tracking", "techStack": ["Node.js"]})

    assert "// Technology: Node.js" in code
    assert "app.listen" in code
    assert "/health" in code
    assert "app.use(compression());" in code
    assert "// Scalability: run one worker per CPU core behind a process manager" in code


@pytest.mark.asyncio
async def test_generates_fastapi_service(backend_engine):
    code = await backend_engine.generate_code({"featureDescription": "Order tracking", "techStack": ["FastAPI"]})

    assert "from fastapi.middleware.gzip import GZipMiddleware" in code
    assert "app.add_middleware(GZipMiddleware, minimum_size=1000)" in code
    assert "# Security: restrict allowed hosts and CORS origins for the API" in code


@pytest.mark.asyncio
async def test_unknown_technology_uses_generic_service(backend_engine):
    code = await backend_engine.generate_code({"featureDescription": "Order tracking", "techStack": ["Elixir"]})

    assert "# Technology: Elixir" in code
    assert "class OrderTrackingService:" in code


@pytest.mark.asyncio
@pytest.mark.parametrize("technology", ["Node.js", "FastAPI", "Spring", "C#", "Go"])
async def test_generated_services_pass_validation(backend_engine, technology):
    code = await backend_engine.generate_code({"featureDescription": "Payments", "techStack": [technology]})

    result = await backend_engine.validate_code(code, technology)

    assert result.valid, result.errors


@pytest.mark.asyncio
async def test_quality_tiers(backend_engine):
    request = {"featureDescription": "Payments", "techStack": ["Go"]}

    standard = await backend_engine.generate_code(request)
    enterprise = await backend_engine.generate_code({**request, "quality": "Enterprise"})

    assert "Quality standards" not in standard
    assert "// Quality standards (enterprise):" in enterprise
    for item in BackendEngine.quality_checklist:
        assert f"// - {item}" in enterprise


@pytest.mark.asyncio
async def test_eval_fails_validation(backend_engine):
    result = await backend_engine.validate_code("const value = eval(req.query.expr);", "Node.js")

    assert not result.valid
    assert "Use of eval() or exec() allows code injection" in result.errors


@pytest.mark.asyncio
async def test_hardcoded_secrets_fail_validation(backend_engine):
    code = "DB_PASSWORD = 'hunter2'\npassword = 'hunter2'\nstripe = 'sk_live123456'\n"

    result = await backend_engine.validate_code(code, "Python")

    assert "Hardcoded password in source code" in result.errors
    assert "API key hardcoded in source code" in result.errors


@pytest.mark.asyncio
async def test_advisory_checks_do_not_fail_validation(backend_engine):
    code = "app.get('/users', async (req, res) => {\n  const r = await fetch('http://internal/users');\n});\n"

    result = await backend_engine.validate_code(code, "Node.js")

    assert result.valid
    assert "Insecure HTTP protocol used instead of HTTPS" in result.warnings
    assert "API endpoints may lack authentication" in result.warnings
    assert "Async operations without proper error handling" in result.warnings


@pytest.mark.asyncio
async def test_optimize_mounts_express_middleware(backend_engine, express_app):
    optimized = await backend_engine.optimize_code(express_app, "Node.js")
    lines = optimized.splitlines()

    assert "const helmet = require('helmet');" in lines
    assert "const compression = require('compression');" in lines
    assert lines.index("app.use(compression());") > lines.index("const app = express();")
    assert "app.use(helmet());" in lines


@pytest.mark.asyncio
async def test_optimize_does_not_lower_security_score(backend_engine, express_app):
    optimized = await backend_engine.optimize_code(express_app, "Node.js")

    before = await backend_engine.analyze_code(express_app, "Node.js")
    after = await backend_engine.analyze_code(optimized, "Node.js")

    assert after.security.score >= before.security.score


@pytest.mark.asyncio
async def test_optimize_is_idempotent(backend_engine, express_app, context7_data):
    once = await backend_engine.optimize_code(express_app, "Node.js", context7_data)
    twice = await backend_engine.optimize_code(once, "Node.js", context7_data)

    assert once == twice


@pytest.mark.asyncio
async def test_optimize_fastapi_is_idempotent(backend_engine):
    code = "from fastapi import FastAPI\n\napp = FastAPI()\n"

    once = await backend_engine.optimize_code(code, "FastAPI")
    twice = await backend_engine.optimize_code(once, "FastAPI")

    assert once == twice
    assert once.count("GZipMiddleware, minimum_size=1000") == 1


@pytest.mark.asyncio
async def test_anti_patterns_static_first(backend_engine, context7_data):
    anti_patterns = await backend_engine.get_anti_patterns("Node.js", context7_data)

    assert anti_patterns == list(BackendEngine.anti_patterns)


def test_engine_introspection(backend_engine):
    assert backend_engine.dimensions == BACKEND_DIMENSIONS
    assert "go" in backend_engine.technologies


SESSION_INSIGHT = {"insights": {"patterns": ["Node.js anti-pattern: avoid in-process session storage"]}}


@pytest.mark.asyncio
async def test_insight_text_does_not_trigger_post_processors(backend_engine):
    code = await backend_engine.generate_code(
        {"featureDescription": "Orders", "techStack": ["Node.js"]}, SESSION_INSIGHT
    )

    assert "// - Avoid: Node.js anti-pattern: avoid in-process session storage" in code
    assert "Scalability: keep session state in a shared store" not in code
    assert await backend_engine.optimize_code(code, "Node.js", SESSION_INSIGHT) == code


@pytest.mark.asyncio
async def test_optimize_twice_with_insights_is_stable(backend_engine, express_app):
    once = await backend_engine.optimize_code(express_app, "Node.js", SESSION_INSIGHT)
    twice = await backend_engine.optimize_code(once, "Node.js", SESSION_INSIGHT)

    assert once == twice
    assert "Scalability: keep session state in a shared store" not in once
    assert once.index("Context7 insights:") > once.index("app.listen(3000);")
