"""Tests for ordered technology routing inside each engine."""

import pytest

from codeintel.comments import HASH, SLASH, SQL
from codeintel.engines import (
    BackendEngine,
    DatabaseEngine,
    DevOpsEngine,
    FrontendEngine,
    MobileEngine,
    TechnologyDispatch,
    TechnologyRoute,
)
from codeintel.exceptions import UnsupportedTechnologyError


def _generator(ctx):
    return ""


@pytest.mark.parametrize(
    "technology, route",
    [
        ("PostgreSQL", "postgresql"),
        ("postgres 16", "postgresql"),
        ("MariaDB", "mysql"),
        ("Mongo", "mongodb"),
        ("Redis", "redis"),
        ("SQLite", "sqlite"),
        ("Oracle", "sql"),
        ("", "sql"),
    ],
)
def test_database_routes(technology, route):
    assert DatabaseEngine().dispatch.resolve(technology).name == route


@pytest.mark.parametrize(
    "technology, route",
    [
        ("Node.js", "nodejs"),
        ("JavaScript", "nodejs"),
        ("NestJS", "nodejs"),
        ("Django", "python"),
        ("FastAPI", "python"),
        ("Java", "java"),
        ("Kotlin", "java"),
        ("C#", "csharp"),
        (".NET 8", "csharp"),
        ("Go", "go"),
        ("golang", "go"),
        ("Rust", "python-asyncio"),
    ],
)
def test_backend_routes(technology, route):
    assert BackendEngine().dispatch.resolve(technology).name == route


@pytest.mark.parametrize(
    "technology, route",
    [
        ("HTML5", "html"),
        ("SCSS", "css"),
        ("Next.js", "react"),
        ("React", "react"),
        ("Nuxt", "vue"),
        ("Angular", "angular"),
        ("TypeScript", "javascript"),
        ("Svelte", "javascript"),
    ],
)
def test_frontend_routes(technology, route):
    assert FrontendEngine().dispatch.resolve(technology).name == route


@pytest.mark.parametrize(
    "technology, route",
    [
        ("Docker Compose", "compose"),
        ("Helm", "kubernetes"),
        ("k8s", "kubernetes"),
        ("Terraform", "terraform"),
        ("GitLab CI", "github-actions"),
        ("Jenkins", "github-actions"),
        ("Grafana", "prometheus"),
        ("Docker", "docker"),
        ("Podman", "docker"),
    ],
)
def test_devops_routes(technology, route):
    assert DevOpsEngine().dispatch.resolve(technology).name == route


@pytest.mark.parametrize(
    "technology, route",
    [
        ("Flutter", "flutter"),
        ("Dart", "flutter"),
        ("SwiftUI", "swift"),
        ("iOS", "swift"),
        ("Objective-C", "swift"),
        ("Jetpack Compose", "kotlin"),
        ("Android", "kotlin"),
        ("Expo", "react-native"),
        ("React Native", "react-native"),
    ],
)
def test_mobile_routes(technology, route):
    assert MobileEngine().dispatch.resolve(technology).name == route


def test_devops_and_mobile_comment_styles():
    assert DevOpsEngine().comment_style_for("Terraform") == HASH
    assert MobileEngine().comment_style_for("Flutter") == SLASH


def test_word_match_keeps_go_out_of_other_names():
    route = TechnologyRoute("go", ("go",), _generator, SLASH, word_match=True)

    assert route.matches("Go")
    assert route.matches("go 1.22")
    assert not route.matches("django")
    assert not route.matches("mongodb")
    assert not route.matches("cargo")


def test_first_matching_route_wins():
    dispatch = TechnologyDispatch(
        [
            TechnologyRoute("first", ("sql",), _generator, SQL),
            TechnologyRoute("second", ("postgresql",), _generator, SQL),
        ]
    )

    assert dispatch.resolve("PostgreSQL").name == "first"


def test_missing_route_without_fallback_raises():
    dispatch = TechnologyDispatch([TechnologyRoute("python", ("python",), _generator, HASH)], table="backend")

    with pytest.raises(UnsupportedTechnologyError) as excinfo:
        dispatch.resolve("COBOL")

    assert excinfo.value.technology == "COBOL"
    assert "backend" in str(excinfo.value)


def test_route_names_end_with_fallback():
    assert DatabaseEngine().technologies == ("postgresql", "mysql", "mongodb", "redis", "sqlite", "sql")
    assert BackendEngine().technologies[-1] == "python-asyncio"
    assert FrontendEngine().technologies[-1] == "javascript"
