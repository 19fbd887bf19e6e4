"""
Accessibility rule sets (WCAG 2.1) for frontend and mobile code.

Markup rules only fire when the fragment contains markup, so stylesheets
and plain scripts are not penalized for a missing heading.

codeintel/src/codeintel/dimensions/accessibility.py
"""

import re
from typing import Any, Dict, Iterator

from ..types import Finding
from .base import (
    BaseRule,
    PatternRule,
    all_of,
    contains,
    contains_any,
    lacks,
    matches,
    not_,
)

__all__ = ["FRONTEND_ACCESSIBILITY_RULES", "MOBILE_ACCESSIBILITY_RULES", "HeadingCountRule", "wcag_level"]

MARKUP = matches(r"<[a-zA-Z]")
SEMANTIC_ELEMENTS = matches(r"<(?:header|nav|main|section|article|aside|footer)\b")


class HeadingCountRule(BaseRule):
    """Checks that markup has exactly one H1 heading."""

    rule_id = "FE-A11Y-H1-COUNT"

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        if not MARKUP(code, technology):
            return
        count = len(re.findall(r"<h1\b", code))
        if count == 0:
            yield self.create_finding(
                -8,
                message="Missing H1 heading (WCAG 1.3.1)",
                suggestion="Include exactly one H1 heading per page",
            )
        elif count > 1:
            yield self.create_finding(
                -5,
                message="Multiple H1 headings detected (WCAG 1.3.1)",
                suggestion="Use only one H1 heading per page",
            )


FRONTEND_ACCESSIBILITY_RULES = [
    PatternRule(
        "FE-A11Y-IMG-ALT",
        matches(r"<img\b(?![^<>]*\balt=)"),
        message="Images missing alt attributes (WCAG 1.1.1)",
        suggestion="Add descriptive alt text to all images",
        delta=-15,
    ),
    PatternRule(
        "FE-A11Y-FORM-LABELS",
        all_of(contains_any("<input", "<select", "<textarea"), lacks("<label", "aria-label", "aria-labelledby")),
        message="Form controls missing labels (WCAG 3.3.2)",
        suggestion="Associate all form controls with labels",
        delta=-10,
    ),
    PatternRule(
        "FE-A11Y-KEYBOARD",
        all_of(contains_any("onclick", "onClick"), lacks("onkeydown", "onKeyDown", "onkeypress", "<button")),
        message="Interactive elements may not be keyboard accessible (WCAG 2.1.1)",
        suggestion="Ensure all interactive elements are keyboard accessible",
        delta=-8,
    ),
    PatternRule(
        "FE-A11Y-CONTRAST",
        all_of(matches(r"(?<![-\w])color\s*:"), lacks("background-color:", "background:")),
        suggestion="Ensure sufficient color contrast ratios (WCAG 1.4.3)",
        delta=-3,
    ),
    PatternRule("FE-A11Y-SEMANTIC-STRUCTURE", all_of(MARKUP, SEMANTIC_ELEMENTS), delta=10),
    PatternRule(
        "FE-A11Y-NO-SEMANTIC-STRUCTURE",
        all_of(MARKUP, not_(SEMANTIC_ELEMENTS)),
        message="Missing semantic HTML structure (WCAG 1.3.1)",
        suggestion="Use semantic HTML5 elements for proper document structure",
        delta=-10,
    ),
    HeadingCountRule(),
    PatternRule("FE-A11Y-ARIA", contains("aria-"), delta=8),
    PatternRule("FE-A11Y-FOCUS-MANAGEMENT", contains_any("focus()", ":focus"), delta=5),
    PatternRule("FE-A11Y-SKIP-LINK", contains_any("skip-to-main", 'href="#main'), delta=5),
    PatternRule(
        "FE-A11Y-NO-SKIP-LINK",
        all_of(contains("<nav"), lacks("skip-to-main", 'href="#main')),
        suggestion="Add skip links for keyboard navigation",
        delta=-3,
    ),
    PatternRule(
        "FE-A11Y-MEDIA-CAPTIONS",
        all_of(contains_any("<video", "<audio"), lacks("captions", "subtitles", "<track")),
        message="Media elements missing captions/subtitles (WCAG 1.2.1)",
        suggestion="Provide captions for video and audio content",
        delta=-12,
    ),
    PatternRule(
        "FE-A11Y-ERROR-MESSAGING",
        all_of(contains("<form"), lacks("aria-describedby", 'role="alert"')),
        suggestion="Implement accessible error messaging (WCAG 3.3.1)",
        delta=-4,
    ),
    PatternRule(
        "FE-A11Y-PAGE-LANGUAGE",
        all_of(contains("<html"), lacks("lang=")),
        message="Missing page language declaration (WCAG 3.1.1)",
        suggestion="Specify page language with lang attribute",
        delta=-6,
    ),
    PatternRule(
        "FE-A11Y-FOCUS-INDICATOR",
        all_of(contains(":focus"), matches(r"outline:\s*(?:none|0)\b"), lacks("box-shadow", ":focus-visible")),
        message="Focus indicators removed without replacement (WCAG 2.4.7)",
        suggestion="Provide visible focus indicators for all interactive elements",
        delta=-10,
    ),
    PatternRule(
        "FE-A11Y-REDUCED-MOTION",
        all_of(contains_any("@keyframes", "animation:"), lacks("prefers-reduced-motion")),
        suggestion="Respect user motion preferences (WCAG 2.3.3)",
        delta=-4,
    ),
    PatternRule("FE-A11Y-ROLES", contains("role="), delta=3),
    PatternRule("FE-A11Y-LIVE-REGIONS", contains("aria-live"), delta=3),
    PatternRule("FE-A11Y-EXPANDED-STATE", contains("aria-expanded"), delta=2),
    PatternRule("FE-A11Y-HIDDEN-DECORATION", contains("aria-hidden"), delta=2),
    PatternRule(
        "FE-A11Y-POSITIVE-TABINDEX",
        matches(r"tabindex=\"[1-9]"),
        message="Positive tabindex disrupts natural focus order (WCAG 2.4.3)",
        suggestion="Use tabindex 0 or -1 only",
        delta=-5,
    ),
]

MOBILE_ACCESSIBILITY_RULES = [
    PatternRule(
        "MOBILE-A11Y-UNLABELED-TOUCHABLE",
        matches(r"<(?:TouchableOpacity|TouchableHighlight|Pressable)\b(?![^<>]*\baccessibilityLabel)"),
        message="Touchable elements without accessibility labels",
        suggestion="Add accessibilityLabel and accessibilityRole to touchables",
        delta=-12,
    ),
    PatternRule(
        "MOBILE-A11Y-UNLABELED-IMAGE",
        matches(r"<Image\b(?![^<>]*\baccessib)"),
        message="Images without accessibility labels",
        suggestion="Label meaningful images and hide decorative ones from screen readers",
        delta=-8,
    ),
    PatternRule(
        "MOBILE-A11Y-FONT-SCALING",
        contains("allowFontScaling={false}"),
        message="Font scaling disabled",
        suggestion="Let text follow the system font size",
        delta=-10,
    ),
    PatternRule(
        "MOBILE-A11Y-SMALL-TARGETS",
        matches(r"\b(?:height|width)\s*:\s*[1-3]?\d\b"),
        message="Touch targets smaller than 44 points",
        suggestion="Make touch targets at least 44x44 points",
        delta=-5,
    ),
    PatternRule(
        "MOBILE-A11Y-LABELS",
        contains_any("accessibilityLabel", "contentDescription", "Semantics(", "semanticsLabel"),
        delta=8,
    ),
    PatternRule(
        "MOBILE-A11Y-ROLES",
        contains_any("accessibilityRole", "accessibilityAddTraits", "button: true", "Role."),
        delta=5,
    ),
    PatternRule("MOBILE-A11Y-HINTS", contains("accessibilityHint"), delta=3),
]


def wcag_level(score: int, code: str, technology: str) -> Dict[str, Any]:
    return {"wcagLevel": "AA" if score >= 80 else "A"}
