"""
Dimension analyzers and the declarative rule sets they run.

codeintel/src/codeintel/dimensions/__init__.py
"""

from .accessibility import FRONTEND_ACCESSIBILITY_RULES, MOBILE_ACCESSIBILITY_RULES, wcag_level
from .base import BaseRule, DimensionAnalyzer, PatternRule, ScoreAccumulator
from .data_integrity import DATABASE_DATA_INTEGRITY_RULES
from .performance import (
    BACKEND_PERFORMANCE_RULES,
    DATABASE_PERFORMANCE_RULES,
    DEVOPS_PERFORMANCE_RULES,
    FRONTEND_PERFORMANCE_RULES,
    MOBILE_PERFORMANCE_RULES,
    core_web_vitals,
)
from .quality import (
    BACKEND_MAINTAINABILITY_RULES,
    BACKEND_QUALITY_RULES,
    DATABASE_MAINTAINABILITY_RULES,
    DATABASE_QUALITY_RULES,
    DEVOPS_MAINTAINABILITY_RULES,
    DEVOPS_QUALITY_RULES,
    FRONTEND_MAINTAINABILITY_RULES,
    FRONTEND_QUALITY_RULES,
    MOBILE_MAINTAINABILITY_RULES,
    MOBILE_QUALITY_RULES,
    maintainability_details,
)
from .query_optimization import DATABASE_QUERY_OPTIMIZATION_RULES
from .reliability import BACKEND_RELIABILITY_RULES, DEVOPS_RELIABILITY_RULES, reliability_details
from .scalability import BACKEND_SCALABILITY_RULES, DEVOPS_SCALABILITY_RULES
from .security import (
    BACKEND_SECURITY_RULES,
    DATABASE_SECURITY_RULES,
    DEVOPS_SECURITY_RULES,
    FRONTEND_SECURITY_RULES,
    MOBILE_SECURITY_RULES,
    owasp_compliance,
)
from .seo import FRONTEND_SEO_RULES, seo_details

__all__ = [
    "BaseRule",
    "PatternRule",
    "ScoreAccumulator",
    "DimensionAnalyzer",
    "DATABASE_QUALITY_RULES",
    "DATABASE_MAINTAINABILITY_RULES",
    "DATABASE_PERFORMANCE_RULES",
    "DATABASE_SECURITY_RULES",
    "DATABASE_QUERY_OPTIMIZATION_RULES",
    "DATABASE_DATA_INTEGRITY_RULES",
    "BACKEND_QUALITY_RULES",
    "BACKEND_MAINTAINABILITY_RULES",
    "BACKEND_PERFORMANCE_RULES",
    "BACKEND_SECURITY_RULES",
    "BACKEND_SCALABILITY_RULES",
    "BACKEND_RELIABILITY_RULES",
    "FRONTEND_QUALITY_RULES",
    "FRONTEND_MAINTAINABILITY_RULES",
    "FRONTEND_PERFORMANCE_RULES",
    "FRONTEND_SECURITY_RULES",
    "FRONTEND_ACCESSIBILITY_RULES",
    "FRONTEND_SEO_RULES",
    "DEVOPS_QUALITY_RULES",
    "DEVOPS_MAINTAINABILITY_RULES",
    "DEVOPS_PERFORMANCE_RULES",
    "DEVOPS_SECURITY_RULES",
    "DEVOPS_SCALABILITY_RULES",
    "DEVOPS_RELIABILITY_RULES",
    "MOBILE_QUALITY_RULES",
    "MOBILE_MAINTAINABILITY_RULES",
    "MOBILE_PERFORMANCE_RULES",
    "MOBILE_SECURITY_RULES",
    "MOBILE_ACCESSIBILITY_RULES",
    "core_web_vitals",
    "maintainability_details",
    "owasp_compliance",
    "reliability_details",
    "seo_details",
    "wcag_level",
]
