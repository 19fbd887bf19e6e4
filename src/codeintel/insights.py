"""
Context7 insight adapter.

Turns optional, externally supplied Context7 data into TechnologyInsights
and applies them to generated code as comment bullets. Absent or malformed
data yields empty insights; nothing here raises on bad context.

codeintel/src/codeintel/insights.py
"""

import logging
from typing import Any, List, Tuple

from .comments import CommentStyle, append_comment_block, comment_line
from .models import coerce_context, technology_lists
from .types import TechnologyInsights

logger = logging.getLogger(__name__)

__all__ = ["get_technology_insights", "apply_context7_insights", "insight_lines", "split_insights"]

INSIGHTS_HEADING = "Context7 insights:"

_ANTI_MARKERS = ("avoid", "anti", "bad")
_SECURITY_MARKERS = ("security", "vulnerability", "auth")
_PERFORMANCE_MARKERS = ("performance", "optimization", "speed", "efficiency")


def _unique(items: List[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(item.strip() for item in items if item.strip()))


def get_technology_insights(technology: str, context: Any = None) -> TechnologyInsights:
    """Extract insights about one technology from Context7 data."""
    data = coerce_context(context)
    if data is None:
        if context is not None:
            logger.debug("Context7 data unusable for %s; continuing with static knowledge", technology)
        return TechnologyInsights()

    tech = (technology or "").lower().strip()
    patterns = data.insights.patterns if data.insights else []
    recommendations = data.insights.recommendations if data.insights else []

    def mentions(text: str) -> bool:
        return bool(tech) and tech in text.lower()

    best = [p for p in patterns if mentions(p) and "best" in p.lower()]
    best += [r for r in recommendations if mentions(r)]
    anti = [p for p in patterns if mentions(p) and any(m in p.lower() for m in _ANTI_MARKERS)]
    security = [r for r in recommendations if any(m in r.lower() for m in _SECURITY_MARKERS)]
    performance = [r for r in recommendations if any(m in r.lower() for m in _PERFORMANCE_MARKERS)]

    lists = technology_lists(data)
    insights = TechnologyInsights(
        best_practices=_unique(best),
        anti_patterns=_unique(anti),
        security_considerations=_unique(security),
        performance_considerations=_unique(performance),
        frameworks=_unique(lists.get("frameworks", [])),
        libraries=_unique(lists.get("libraries", [])),
        tools=_unique(lists.get("tools", [])),
        trends=_unique(lists.get("trends", [])),
    )
    logger.debug(
        "Context7 insights for %s: %d practices, %d anti-patterns",
        technology,
        len(insights.best_practices),
        len(insights.anti_patterns),
    )
    return insights


def insight_lines(insights: TechnologyInsights) -> List[str]:
    lines = [f"Best practice: {p}" for p in insights.best_practices]
    lines += [f"Avoid: {a}" for a in insights.anti_patterns]
    lines += [f"Security: {s}" for s in insights.security_considerations]
    lines += [f"Performance: {p}" for p in insights.performance_considerations]
    return lines


def apply_context7_insights(code: str, insights: TechnologyInsights, style: CommentStyle) -> str:
    """Append insight bullets as comments, skipping bullets already present."""
    lines = insight_lines(insights)
    if not lines:
        return code
    return append_comment_block(code, [INSIGHTS_HEADING] + [f"- {line}" for line in lines], style)


def split_insights(code: str, style: CommentStyle) -> Tuple[str, str]:
    """Split code into (source, insight block) at the insights heading.

    The block runs from the heading line to the end of the code. Code without
    a heading returns (code, "").
    """
    heading = comment_line(INSIGHTS_HEADING, style)
    start = code.find(heading)
    while start > 0 and code[start - 1] != "\n":
        start = code.find(heading, start + 1)
    if start < 0:
        return code, ""
    return code[:start], code[start:]
