"""
Unified dispatcher: routes every operation to the engine for its category.

Engines are created lazily, one per category, and share the dispatcher's
RuleEngine so [tool.codeintel.rules] applies everywhere.

codeintel/src/codeintel/dispatcher.py
"""

import logging
import re
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Type, Union

from .config import Config
from .engines import BUILTIN_ENGINES, BaseCategoryEngine
from .exceptions import UnsupportedCategoryError
from .models import coerce_request
from .rules import RuleEngine
from .types import CodeAnalysis, ValidationResult

logger = logging.getLogger(__name__)

__all__ = [
    "DispatcherState",
    "UnifiedDispatcher",
    "CATEGORY_KEYWORDS",
    "DESCRIPTION_HINTS",
    "DEFAULT_CATEGORY",
]

DEFAULT_CATEGORY = "backend"

# First match wins, so more specific keywords come before broader ones.
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (
        "database",
        (
            "postgresql",
            "postgres",
            "mysql",
            "mariadb",
            "mongodb",
            "mongo",
            "redis",
            "sqlite",
            "cassandra",
            "dynamodb",
            "nosql",
            "sql",
        ),
    ),
    (
        "mobile",
        (
            "react native",
            "react-native",
            "expo",
            "flutter",
            "dart",
            "swift",
            "swiftui",
            "ios",
            "android",
            "jetpack compose",
            "xamarin",
            "ionic",
            "cordova",
            "nativescript",
            "objective-c",
        ),
    ),
    (
        "devops",
        (
            "docker",
            "dockerfile",
            "docker-compose",
            "kubernetes",
            "k8s",
            "helm",
            "terraform",
            "ansible",
            "jenkins",
            "github actions",
            "gitlab ci",
            "ci/cd",
            "argocd",
            "prometheus",
            "grafana",
            "istio",
            "pulumi",
            "cloudformation",
        ),
    ),
    (
        "frontend",
        (
            "html",
            "css",
            "scss",
            "sass",
            "react",
            "nextjs",
            "next.js",
            "vue",
            "nuxt",
            "angular",
            "svelte",
            "tailwind",
            "javascript",
            "typescript",
        ),
    ),
    (
        "backend",
        (
            "node",
            "nodejs",
            "node.js",
            "express",
            "nestjs",
            "python",
            "fastapi",
            "django",
            "flask",
            "java",
            "spring",
            "kotlin",
            "c#",
            "csharp",
            ".net",
            "dotnet",
            "go",
            "golang",
            "rust",
            "php",
            "ruby",
        ),
    ),
)

# Generic words in a feature description, consulted after technology keywords.
DESCRIPTION_HINTS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("mobile", ("mobile app", "ios app", "android app", "iphone", "smartphone", "mobile screen")),
    ("frontend", ("website", "web page", "webpage", "landing page", "frontend", "ui", "component")),
    ("devops", ("deployment", "pipeline", "infrastructure", "container", "devops", "ci/cd")),
    ("backend", ("api", "backend", "server", "service", "endpoint", "microservice")),
    ("database", ("database", "schema", "table", "query", "migration")),
)


def _keyword_pattern(keyword: str) -> "re.Pattern[str]":
    return re.compile(r"(?<![\w#])" + re.escape(keyword) + r"(?![\w#])", re.IGNORECASE)


def _compile(table: Tuple[Tuple[str, Tuple[str, ...]], ...]) -> List[Tuple[str, "re.Pattern[str]"]]:
    return [(category, _keyword_pattern(keyword)) for category, keywords in table for keyword in keywords]


_TECHNOLOGY_TABLE = _compile(CATEGORY_KEYWORDS)
_HINT_TABLE = _compile(DESCRIPTION_HINTS)


def _lookup(table: List[Tuple[str, "re.Pattern[str]"]], text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    for category, pattern in table:
        if pattern.search(text):
            return category
    return None


class DispatcherState(Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"


class UnifiedDispatcher:
    """Resolve a category for each call and forward it to that category's engine.

    Category resolution order:

    1. an explicit ``category`` argument (or ``category`` on a generation request);
    2. the technology, looked up in CATEGORY_KEYWORDS on word boundaries;
    3. for generation only, keywords sniffed from the feature description;
    4. ``default_category`` from configuration (``backend`` when unset).
    """

    def __init__(self, config: Optional[Union[Config, Mapping[str, Any]]] = None):
        settings = config.settings if isinstance(config, Config) else (config or {})
        self.settings = settings
        self.rule_engine = RuleEngine(settings)
        default = settings.get("default_category", DEFAULT_CATEGORY)
        if not isinstance(default, str) or not default.strip():
            logger.warning(
                f"Configuration key 'default_category' is not a non-empty string. Using {DEFAULT_CATEGORY!r}."
            )
            default = DEFAULT_CATEGORY
        self.default_category = default.strip().lower()
        self._factories: Dict[str, Type[BaseCategoryEngine]] = dict(BUILTIN_ENGINES)
        self._engines: Dict[str, BaseCategoryEngine] = {}
        self._in_flight = 0

    @property
    def state(self) -> DispatcherState:
        return DispatcherState.DISPATCHING if self._in_flight else DispatcherState.IDLE

    @contextmanager
    def _dispatching(self) -> Iterator[None]:
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1

    # Engine registry

    def available_categories(self) -> List[str]:
        return sorted(set(self._factories) | set(self._engines))

    def register_engine(self, category: str, engine: BaseCategoryEngine) -> None:
        """Add or replace the engine serving a category."""
        key = category.strip().lower()
        self._engines[key] = engine
        logger.info(f"Registered {key} engine {type(engine).__name__}")

    def get_engine(self, category: str) -> BaseCategoryEngine:
        key = (category or "").strip().lower()
        engine = self._engines.get(key)
        if engine is not None:
            return engine
        factory = self._factories.get(key)
        if factory is None:
            raise UnsupportedCategoryError(category, self.available_categories())
        engine = factory(self.rule_engine)
        self._engines[key] = engine
        return engine

    def engines(self) -> List[BaseCategoryEngine]:
        """Every available engine, instantiating built-ins as needed."""
        return [self.get_engine(category) for category in self.available_categories()]

    # Category resolution

    def resolve_category(
        self,
        category: Optional[str] = None,
        technology: Optional[str] = None,
        description: Optional[str] = None,
    ) -> str:
        if category and category.strip():
            resolved, source = category.strip().lower(), "explicit"
        elif _lookup(_TECHNOLOGY_TABLE, technology):
            resolved, source = _lookup(_TECHNOLOGY_TABLE, technology), "technology"
        elif _lookup(_TECHNOLOGY_TABLE, description) or _lookup(_HINT_TABLE, description):
            resolved = _lookup(_TECHNOLOGY_TABLE, description) or _lookup(_HINT_TABLE, description)
            source = "description"
        else:
            resolved, source = self.default_category, "default"
        logger.debug(f"Resolved category {resolved!r} from {source} (technology={technology!r})")
        return resolved

    def _engine_for(self, technology: Optional[str], category: Optional[str]) -> BaseCategoryEngine:
        return self.get_engine(self.resolve_category(category, technology))

    # Forwarded operations

    async def analyze_code(
        self, code: str, technology: str, category: Optional[str] = None, context: Any = None
    ) -> CodeAnalysis:
        with self._dispatching():
            engine = self._engine_for(technology, category)
            return await engine.analyze_code(code, technology, context)

    async def generate_code(self, request: Any, context: Any = None) -> str:
        req = coerce_request(request)
        with self._dispatching():
            category = self.resolve_category(
                req.category, req.primary_technology, req.feature_description
            )
            return await self.get_engine(category).generate_code(req, context)

    async def validate_code(
        self, code: str, technology: str, category: Optional[str] = None, context: Any = None
    ) -> ValidationResult:
        with self._dispatching():
            engine = self._engine_for(technology, category)
            return await engine.validate_code(code, technology, context)

    async def optimize_code(
        self, code: str, technology: str, category: Optional[str] = None, context: Any = None
    ) -> str:
        with self._dispatching():
            engine = self._engine_for(technology, category)
            return await engine.optimize_code(code, technology, context)

    async def get_best_practices(
        self, technology: str, category: Optional[str] = None, context: Any = None
    ) -> List[str]:
        with self._dispatching():
            engine = self._engine_for(technology, category)
            return await engine.get_best_practices(technology, context)

    async def get_anti_patterns(
        self, technology: str, category: Optional[str] = None, context: Any = None
    ) -> List[str]:
        with self._dispatching():
            engine = self._engine_for(technology, category)
            return await engine.get_anti_patterns(technology, context)

    def __repr__(self) -> str:
        return f"UnifiedDispatcher(categories={self.available_categories()!r}, state={self.state.value})"
