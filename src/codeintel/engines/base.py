"""
Category engine contract and the pipeline every engine shares.

An engine is configured by four declarations: the analyzers it runs, its
technology routes, its post-processors and its validation checks. Analysis,
generation, validation and optimization are implemented once here on top of
those declarations.

codeintel/src/codeintel/engines/base.py
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from ..comments import CommentStyle, append_comment_block
from ..dimensions.base import BaseRule, DetailsFactory, DimensionAnalyzer, Predicate, matches
from ..dimensions.security import SQL_CONCATENATION, SQL_INTERPOLATION
from ..exceptions import InputError
from ..insights import apply_context7_insights, get_technology_insights, split_insights
from ..models import QualityTier, coerce_request
from ..rules import RuleEngine
from ..templates import TemplateContext
from ..types import CodeAnalysis, Dimension, TechnologyInsights, ValidationResult
from .dispatch import TechnologyDispatch

logger = logging.getLogger(__name__)

__all__ = [
    "AnalyzerSpec",
    "ValidationCheck",
    "PostProcessor",
    "SHARED_CHECKS",
    "BaseCategoryEngine",
]

PostProcessor = Callable[[str, str, CommentStyle], str]

ERROR = "error"
WARNING = "warning"
SUGGESTION = "suggestion"


@dataclass(frozen=True)
class AnalyzerSpec:
    """Which rules score a dimension for one category."""

    dimension: Dimension
    rules: Sequence[BaseRule]
    details: Optional[DetailsFactory] = None


@dataclass(frozen=True)
class ValidationCheck:
    """A validation predicate and the message it reports at its level."""

    when: Predicate
    message: str
    level: str = ERROR


SHARED_CHECKS = (
    ValidationCheck(matches(SQL_CONCATENATION), "Potential SQL injection: query built by string concatenation"),
    ValidationCheck(matches(SQL_INTERPOLATION), "Potential SQL injection: values interpolated into SQL text"),
)


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _quality_tier(quality: Any) -> QualityTier:
    if isinstance(quality, QualityTier):
        return quality
    try:
        return QualityTier(str(quality or QualityTier.STANDARD.value).lower())
    except ValueError as e:
        raise InputError(f"Unknown quality tier: {quality!r}") from e


class BaseCategoryEngine:
    """Base class for category engines.

    Subclasses set the class attributes and implement analyzer_specs(),
    build_dispatch(), post_processors() and validation_checks().
    """

    category: str = ""
    engine_name: str = ""
    default_technology: str = ""
    best_practices: Tuple[str, ...] = ()
    anti_patterns: Tuple[str, ...] = ()
    quality_checklist: Tuple[str, ...] = ()

    def __init__(self, rule_engine: Optional[RuleEngine] = None):
        self.rule_engine = rule_engine or RuleEngine()
        self.dispatch = self.build_dispatch()
        self.analyzers = tuple(
            DimensionAnalyzer(spec.dimension, self.rule_engine.filter_rules(spec.rules), spec.details)
            for spec in self.analyzer_specs()
        )
        logger.info(
            "Created %s engine with %d analyzers and %d rules",
            self.category,
            len(self.analyzers),
            self.rule_count,
        )

    # Declarations

    def analyzer_specs(self) -> Sequence[AnalyzerSpec]:
        raise NotImplementedError

    def build_dispatch(self) -> TechnologyDispatch:
        raise NotImplementedError

    def post_processors(self) -> Sequence[PostProcessor]:
        return ()

    def validation_checks(self) -> Sequence[ValidationCheck]:
        return ()

    # Introspection

    @property
    def technologies(self) -> Tuple[str, ...]:
        return self.dispatch.route_names()

    @property
    def dimensions(self) -> Tuple[str, ...]:
        return tuple(analyzer.dimension.name for analyzer in self.analyzers)

    @property
    def rule_count(self) -> int:
        return sum(len(analyzer.rules) for analyzer in self.analyzers)

    def comment_style_for(self, technology: Optional[str]) -> CommentStyle:
        return self.dispatch.resolve(technology or self.default_technology).comment_style

    # Operations

    async def analyze_code(self, code: str, technology: str, context: Any = None) -> CodeAnalysis:
        """Score the code on every dimension this category defines."""
        results = await asyncio.gather(
            *(analyzer.analyze(code, technology, context) for analyzer in self.analyzers)
        )
        return CodeAnalysis.from_results(list(results))

    async def generate_code(self, request: Any, context: Any = None) -> str:
        """Generate an artifact for the request.

        Pipeline: pick technology, gather insights, run the matching
        generator, then quality standards, insight comments and the category
        post-processors in that order.
        """
        req = coerce_request(request)
        technology = req.primary_technology or self.default_technology
        insights = self.get_technology_insights(technology, context)
        route = self.dispatch.resolve(technology)
        template_context = TemplateContext(
            feature=req.feature_description,
            technology=technology,
            engine_name=self.engine_name,
            style=route.comment_style,
            role=req.role,
        )
        code = route.generator(template_context)
        code = self.apply_quality_standards(code, req.quality, route.comment_style)
        code = self.apply_context7_insights(code, insights, route.comment_style)
        return self._post_process(code, technology, route.comment_style)

    async def get_best_practices(self, technology: str, context: Any = None) -> List[str]:
        insights = self.get_technology_insights(technology, context)
        return _unique(self.best_practices + insights.best_practices)

    async def get_anti_patterns(self, technology: str, context: Any = None) -> List[str]:
        insights = self.get_technology_insights(technology, context)
        return _unique(self.anti_patterns + insights.anti_patterns)

    async def validate_code(self, code: str, technology: str, context: Any = None) -> ValidationResult:
        """Run hard-fail and advisory checks, then fold analysis advice into suggestions."""
        code = code or ""
        tech = (technology or "").lower()
        levels = {ERROR: [], WARNING: [], SUGGESTION: []}
        for check in SHARED_CHECKS + tuple(self.validation_checks()):
            if check.when(code, tech):
                levels[check.level].append(check.message)

        analysis = await self.analyze_code(code, technology, context)
        suggestions = levels[SUGGESTION] + analysis.all_suggestions()

        result = ValidationResult(
            errors=tuple(_unique(levels[ERROR])),
            warnings=tuple(_unique(levels[WARNING])),
            suggestions=tuple(_unique(suggestions)),
        )
        if not result.valid:
            logger.debug("Validation of %s code failed with %d errors", technology, len(result.errors))
        return result

    async def optimize_code(self, code: str, technology: str, context: Any = None) -> str:
        """Apply the post-processors and insight comments. Idempotent."""
        style = self.comment_style_for(technology)
        optimized = self._post_process(code or "", technology, style)
        insights = self.get_technology_insights(technology, context)
        return self.apply_context7_insights(optimized, insights, style)

    def get_technology_insights(self, technology: str, context: Any = None) -> TechnologyInsights:
        return get_technology_insights(technology, context)

    def apply_context7_insights(
        self,
        code: str,
        insights: TechnologyInsights,
        style: Optional[CommentStyle] = None,
    ) -> str:
        return apply_context7_insights(code, insights, style or self.comment_style_for(None))

    def apply_quality_standards(
        self,
        code: str,
        quality: Any,
        style: Optional[CommentStyle] = None,
    ) -> str:
        """Append the quality checklist for enterprise and production tiers.

        Basic and standard tiers return the code unchanged.
        """
        tier = _quality_tier(quality)
        if tier not in (QualityTier.ENTERPRISE, QualityTier.PRODUCTION):
            return code
        lines = [f"Quality standards ({tier.value}):"]
        lines += [f"- {item}" for item in self.quality_checklist]
        if tier is QualityTier.PRODUCTION:
            lines.append("- Release gated on passing validation and monitoring alerts in place")
        return append_comment_block(code, lines, style or self.comment_style_for(None))

    def _post_process(self, code: str, technology: str, style: CommentStyle) -> str:
        """Run the post-processors over the source, leaving the insight block as is."""
        source, insight_block = split_insights(code, style)
        tech = (technology or "").lower()
        processed = source
        for processor in self.post_processors():
            processed = processor(processed, tech, style)
        if processed == source:
            return code
        if not insight_block:
            return processed
        return processed.rstrip("\n") + "\n\n" + insight_block

    def __repr__(self) -> str:
        return f"{type(self).__name__}(category={self.category!r})"
