"""Tests for category resolution and forwarding in UnifiedDispatcher."""

import logging

import pytest

from codeintel.config import Config
from codeintel.dispatcher import DispatcherState, UnifiedDispatcher
from codeintel.engines import BackendEngine, DatabaseEngine, DevOpsEngine, FrontendEngine, MobileEngine
from codeintel.exceptions import InputError, UnsupportedCategoryError


class StateRecordingEngine:
    """Stand-in engine that records the dispatcher state while it runs."""

    category = "gaming"

    def __init__(self, dispatcher):
        self.dispatcher = dispatcher
        self.states = []

    async def analyze_code(self, code, technology, context=None):
        self.states.append(self.dispatcher.state)
        return "analysis"


@pytest.mark.parametrize(
    "technology, category",
    [
        ("PostgreSQL", "database"),
        ("MongoDB", "database"),
        ("Redis", "database"),
        ("React", "frontend"),
        ("Next.js", "frontend"),
        ("TypeScript", "frontend"),
        ("JavaScript", "frontend"),
        ("Express", "backend"),
        ("Node.js", "backend"),
        ("Django", "backend"),
        ("Go", "backend"),
        ("C#", "backend"),
        (".NET", "backend"),
        ("Docker", "devops"),
        ("Kubernetes", "devops"),
        ("Terraform", "devops"),
        ("GitHub Actions", "devops"),
        ("React Native", "mobile"),
        ("Flutter", "mobile"),
        ("Swift", "mobile"),
        ("Android", "mobile"),
        ("Kotlin", "backend"),
    ],
)
def test_technology_resolves_category(dispatcher, technology, category):
    assert dispatcher.resolve_category(technology=technology) == category


def test_explicit_category_wins(dispatcher):
    assert dispatcher.resolve_category("Database", "React") == "database"


def test_keywords_match_whole_words_only(dispatcher):
    assert dispatcher.resolve_category(technology="Django") == "backend"
    assert dispatcher.resolve_category(technology="Cargo") == "backend"
    assert dispatcher.resolve_category(technology="Gui toolkit") == "backend"


@pytest.mark.parametrize(
    "description, category",
    [
        ("Landing page for a bakery", "frontend"),
        ("REST API for orders", "backend"),
        ("Migration for the invoices table", "database"),
        ("Order history stored in PostgreSQL", "database"),
        ("Mobile app for tracking runs", "mobile"),
        ("Deployment pipeline for the billing service", "devops"),
    ],
)
def test_description_resolves_category(dispatcher, description, category):
    assert dispatcher.resolve_category(description=description) == category


def test_unknown_technology_uses_default(dispatcher):
    assert dispatcher.resolve_category(technology="COBOL") == "backend"


def test_default_category_from_mapping():
    dispatcher = UnifiedDispatcher({"default_category": " Frontend "})

    assert dispatcher.default_category == "frontend"
    assert dispatcher.resolve_category(technology="COBOL") == "frontend"


def test_default_category_from_config(temp_dir):
    dispatcher = UnifiedDispatcher(Config(temp_dir, {"default_category": "database"}))

    assert dispatcher.resolve_category() == "database"


def test_invalid_default_category_falls_back(caplog):
    with caplog.at_level(logging.WARNING):
        dispatcher = UnifiedDispatcher({"default_category": 42})

    assert dispatcher.default_category == "backend"
    assert "default_category" in caplog.text


def test_engines_are_lazy_singletons(dispatcher):
    engine = dispatcher.get_engine("database")

    assert isinstance(engine, DatabaseEngine)
    assert dispatcher.get_engine(" DATABASE ") is engine
    assert isinstance(dispatcher.get_engine("backend"), BackendEngine)
    assert isinstance(dispatcher.get_engine("frontend"), FrontendEngine)
    assert isinstance(dispatcher.get_engine("devops"), DevOpsEngine)
    assert isinstance(dispatcher.get_engine("mobile"), MobileEngine)


def test_engines_share_rule_configuration():
    dispatcher = UnifiedDispatcher({"rules": {"DB-QUALITY-SELECT-STAR": "OFF"}})

    engine = dispatcher.get_engine("database")

    assert engine.rule_engine is dispatcher.rule_engine
    assert not engine.rule_engine.is_rule_enabled("DB-QUALITY-SELECT-STAR")


def test_unknown_category_raises(dispatcher):
    with pytest.raises(UnsupportedCategoryError) as excinfo:
        dispatcher.get_engine("gaming")

    assert excinfo.value.category == "gaming"
    assert excinfo.value.available == ["backend", "database", "devops", "frontend", "mobile"]
    assert isinstance(excinfo.value, InputError)


@pytest.mark.asyncio
async def test_unknown_explicit_category_raises_on_forward(dispatcher):
    with pytest.raises(UnsupportedCategoryError):
        await dispatcher.analyze_code("x", "React", category="gaming")


@pytest.mark.asyncio
async def test_register_engine_and_state(dispatcher):
    engine = StateRecordingEngine(dispatcher)
    dispatcher.register_engine("Gaming", engine)

    assert dispatcher.state is DispatcherState.IDLE
    result = await dispatcher.analyze_code("code", "Swift", category="gaming")

    assert result == "analysis"
    assert engine.states == [DispatcherState.DISPATCHING]
    assert dispatcher.state is DispatcherState.IDLE
    assert "gaming" in dispatcher.available_categories()


@pytest.mark.asyncio
async def test_state_returns_to_idle_after_error(dispatcher):
    with pytest.raises(UnsupportedCategoryError):
        await dispatcher.validate_code("x", "React", category="gaming")

    assert dispatcher.state is DispatcherState.IDLE


@pytest.mark.asyncio
async def test_analyze_forwards_to_resolved_engine(dispatcher, schema_sql):
    analysis = await dispatcher.analyze_code(schema_sql, "PostgreSQL")

    assert analysis.data_integrity is not None
    assert analysis.accessibility is None


@pytest.mark.asyncio
async def test_validate_forwards_to_resolved_engine(dispatcher):
    result = await dispatcher.validate_code("CREATE TABLE t (x INT);", "MySQL")

    assert not result.valid
    assert "Table created without primary key" in result.errors


@pytest.mark.asyncio
async def test_generate_uses_request_category(dispatcher):
    code = await dispatcher.generate_code(
        {"featureDescription": "Widgets", "techStack": ["React"], "category": "database"}
    )

    assert code.startswith("-- Widgets\n-- Generated by DatabaseEngine")


@pytest.mark.asyncio
async def test_generate_sniffs_description(dispatcher):
    code = await dispatcher.generate_code({"featureDescription": "Landing page for a bakery"})

    assert "<!DOCTYPE html>" in code


@pytest.mark.asyncio
async def test_generate_rejects_invalid_request(dispatcher):
    with pytest.raises(InputError):
        await dispatcher.generate_code({"techStack": ["React"]})


@pytest.mark.asyncio
async def test_best_practices_forward_with_context(dispatcher, context7_data):
    practices = await dispatcher.get_best_practices("React", context=context7_data)

    assert practices[0] == FrontendEngine.best_practices[0]
    assert "Use React Suspense for data fetching" in practices


@pytest.mark.asyncio
async def test_anti_patterns_forward(dispatcher):
    assert await dispatcher.get_anti_patterns("Redis") == list(DatabaseEngine.anti_patterns)


@pytest.mark.asyncio
async def test_optimize_forwards(dispatcher, express_app):
    optimized = await dispatcher.optimize_code(express_app, "Express")

    assert "helmet" in optimized


def test_repr(dispatcher):
    assert repr(dispatcher) == "UnifiedDispatcher(categories=['backend', 'database', 'devops', 'frontend', 'mobile'], state=idle)"
