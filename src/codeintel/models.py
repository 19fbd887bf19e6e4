"""
Input models for codeintel.

Context7Data is the read-only contract for externally supplied knowledge;
CodeGenerationRequest describes one generation call. Both accept the
camelCase keys used on the wire as well as snake_case names.

codeintel/src/codeintel/models.py
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import InputError

logger = logging.getLogger(__name__)

__all__ = [
    "QualityTier",
    "QualityMetrics",
    "Insights",
    "Context7Data",
    "CodeGenerationRequest",
    "coerce_context",
    "coerce_request",
    "technology_lists",
]


def _string_list(value: Any) -> List[str]:
    """Keep only the string entries of a list-like value."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


class QualityTier(str, Enum):
    """Requested quality level of a generated artifact."""

    BASIC = "basic"
    STANDARD = "standard"
    ENTERPRISE = "enterprise"
    PRODUCTION = "production"


class QualityMetrics(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    overall: Optional[float] = Field(default=None, description="Overall quality score from the broker")


class Insights(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    patterns: List[str] = Field(default_factory=list, description="Observed patterns")
    recommendations: List[str] = Field(default_factory=list, description="Broker recommendations")
    quality_metrics: Optional[QualityMetrics] = Field(default=None, alias="qualityMetrics")

    @field_validator("patterns", "recommendations", mode="before")
    @classmethod
    def only_strings(cls, value: Any) -> List[str]:
        return _string_list(value)

    @field_validator("quality_metrics", mode="before")
    @classmethod
    def metrics_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, QualityMetrics)) else None


class Context7Data(BaseModel):
    """Externally supplied knowledge about a technology. Never mutated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    insights: Optional[Insights] = Field(default=None)
    project_context: Any = Field(default=None, alias="projectContext")
    technology_insights: Any = Field(default=None, alias="technologyInsights")

    @field_validator("insights", mode="before")
    @classmethod
    def insights_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, Insights)) else None


class CodeGenerationRequest(BaseModel):
    """A request to generate a code artifact for a feature."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    feature_description: str = Field(..., min_length=1, alias="featureDescription")
    tech_stack: Optional[List[str]] = Field(default=None, alias="techStack")
    role: Optional[str] = Field(default=None)
    quality: QualityTier = Field(default=QualityTier.STANDARD)
    category: Optional[str] = Field(default=None, description="Explicit engine category")

    @field_validator("feature_description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("featureDescription must not be blank")
        return value

    @field_validator("quality", mode="before")
    @classmethod
    def lower_quality(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def primary_technology(self) -> Optional[str]:
        if self.tech_stack:
            first = self.tech_stack[0].strip()
            return first or None
        return None


def coerce_context(context: Any) -> Optional[Context7Data]:
    """Turn a dict or model into Context7Data, or None when unusable.

    Malformed input degrades to None instead of raising.
    """
    if context is None or isinstance(context, Context7Data):
        return context
    if not isinstance(context, dict):
        logger.debug("Ignoring Context7 data of type %s", type(context).__name__)
        return None
    try:
        return Context7Data.model_validate(context)
    except ValidationError as e:
        logger.debug("Ignoring malformed Context7 data: %s", e)
        return None


def coerce_request(request: Any) -> CodeGenerationRequest:
    """Turn a dict or model into a CodeGenerationRequest, raising InputError on bad input."""
    if isinstance(request, CodeGenerationRequest):
        return request
    if not isinstance(request, dict):
        raise InputError(f"Generation request must be a mapping, got {type(request).__name__}")
    try:
        return CodeGenerationRequest.model_validate(request)
    except ValidationError as e:
        raise InputError(f"Invalid generation request: {e}") from e


def technology_lists(context: Optional[Context7Data]) -> Dict[str, List[str]]:
    """String lists under technologyInsights, keyed by name."""
    if context is None or not isinstance(context.technology_insights, dict):
        return {}
    return {
        key: _string_list(value)
        for key, value in context.technology_insights.items()
        if isinstance(key, str)
    }
