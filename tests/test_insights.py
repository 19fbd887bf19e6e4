"""Tests for the Context7 insight adapter and input models."""

import logging

import pytest

from codeintel.comments import SLASH
from codeintel.exceptions import InputError
from codeintel.insights import apply_context7_insights, get_technology_insights
from codeintel.models import CodeGenerationRequest, Context7Data, QualityTier, coerce_context, coerce_request


def test_extracts_technology_specific_insights(context7_data):
    insights = get_technology_insights("React", context7_data)

    assert insights.best_practices == (
        "React best practice: keep components small",
        "Use React Suspense for data fetching",
    )
    assert insights.anti_patterns == ("Avoid React class components in new code",)
    assert insights.security_considerations == ("Review authentication flows for security gaps",)
    assert insights.performance_considerations == ("Measure bundle size for performance regressions",)
    assert insights.frameworks == ("Next.js", "Remix")
    assert insights.libraries == ("zod",)


def test_other_technologies_only_get_shared_lists(context7_data):
    insights = get_technology_insights("Vue", context7_data)

    assert insights.best_practices == ()
    assert insights.anti_patterns == ()
    assert insights.tools == ("Vite",)


@pytest.mark.parametrize("context", [None, "not a mapping", 42, {"insights": "broken"}, {"insights": {"patterns": "x"}}])
def test_malformed_context_degrades_to_empty(context):
    insights = get_technology_insights("React", context)

    assert insights.best_practices == ()
    assert insights.anti_patterns == ()


def test_degraded_context_is_logged_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="codeintel"):
        get_technology_insights("React", ["not", "a", "dict"])

    assert any(record.levelno == logging.DEBUG for record in caplog.records)


def test_context_is_not_mutated(context7_data):
    snapshot = repr(context7_data)

    get_technology_insights("React", context7_data)

    assert repr(context7_data) == snapshot


def test_context_model_accepts_camel_case(context7_data):
    data = coerce_context(context7_data)

    assert isinstance(data, Context7Data)
    assert data.insights.quality_metrics.overall == 0.82
    assert data.project_context == {"name": "shop"}


def test_apply_insights_appends_comment_bullets_once(context7_data):
    insights = get_technology_insights("React", context7_data)
    code = "export const x = 1;"

    once = apply_context7_insights(code, insights, SLASH)
    twice = apply_context7_insights(once, insights, SLASH)

    assert once.startswith(code)
    assert "// - Best practice: React best practice: keep components small" in once
    assert "// - Avoid: Avoid React class components in new code" in once
    assert once == twice


def test_apply_empty_insights_leaves_code_unchanged():
    assert apply_context7_insights("code", get_technology_insights("React"), SLASH) == "code"


def test_generation_request_defaults_and_aliases():
    request = coerce_request({"featureDescription": "Orders API", "techStack": ["FastAPI", "Redis"], "quality": "PRODUCTION"})

    assert isinstance(request, CodeGenerationRequest)
    assert request.primary_technology == "FastAPI"
    assert request.quality is QualityTier.PRODUCTION
    assert request.role is None
    assert request.category is None


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"featureDescription": ""},
        {"featureDescription": "   "},
        {"featureDescription": "x", "quality": "legendary"},
        "Orders API",
    ],
)
def test_invalid_generation_requests_raise_input_error(payload):
    with pytest.raises(InputError):
        coerce_request(payload)
