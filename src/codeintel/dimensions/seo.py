"""
SEO rule set for frontend code.

Document-level checks (title, meta description, viewport, canonical) only
apply to full HTML documents; components are judged on headings, semantics
and image text.

codeintel/src/codeintel/dimensions/seo.py
"""

from typing import Any, Dict

from .accessibility import MARKUP, SEMANTIC_ELEMENTS
from .base import (
    PatternRule,
    all_of,
    any_of,
    contains,
    contains_any,
    lacks,
    matches,
    not_,
    tech_word,
)

__all__ = ["FRONTEND_SEO_RULES", "seo_details"]

DOCUMENT = any_of(tech_word("html", "html5"), contains_any("<html", "<!DOCTYPE", "<!doctype", "<head"))
_HAS_TITLE = matches(r"<title>[^<]+</title>")
_HAS_DESCRIPTION = matches(r"<meta\s+name=\"description\"")
_HAS_STRUCTURED_DATA = contains_any("schema.org", "application/ld+json", "json-ld")

FRONTEND_SEO_RULES = [
    PatternRule("FE-SEO-TITLE", all_of(DOCUMENT, _HAS_TITLE), delta=10),
    PatternRule(
        "FE-SEO-MISSING-TITLE",
        all_of(DOCUMENT, not_(_HAS_TITLE)),
        message="Missing title tag",
        suggestion="Add descriptive page title",
        delta=-15,
    ),
    PatternRule(
        "FE-SEO-GENERIC-TITLE",
        contains("<title>Page Title</title>"),
        message="Title tag is empty or generic",
        suggestion="Add descriptive, unique page title (50-60 characters)",
        delta=-5,
    ),
    PatternRule("FE-SEO-META-DESCRIPTION", all_of(DOCUMENT, _HAS_DESCRIPTION), delta=10),
    PatternRule(
        "FE-SEO-MISSING-META-DESCRIPTION",
        all_of(DOCUMENT, not_(_HAS_DESCRIPTION)),
        message="Missing meta description",
        suggestion="Add meta description for search snippets",
        delta=-12,
    ),
    PatternRule("FE-SEO-H1", contains("<h1"), delta=5),
    PatternRule(
        "FE-SEO-MISSING-H1",
        all_of(DOCUMENT, lacks("<h1")),
        message="Missing H1 heading",
        suggestion="Add primary H1 heading",
        delta=-8,
    ),
    PatternRule("FE-SEO-STRUCTURED-DATA", _HAS_STRUCTURED_DATA, delta=10),
    PatternRule(
        "FE-SEO-NO-STRUCTURED-DATA",
        all_of(DOCUMENT, not_(_HAS_STRUCTURED_DATA)),
        suggestion="Add structured data (JSON-LD) for rich snippets",
        delta=-5,
    ),
    PatternRule("FE-SEO-CANONICAL", contains('rel="canonical"'), delta=5),
    PatternRule(
        "FE-SEO-NO-CANONICAL",
        all_of(DOCUMENT, lacks('rel="canonical"')),
        suggestion="Add canonical URL to prevent duplicate content issues",
        delta=-3,
    ),
    PatternRule("FE-SEO-VIEWPORT", contains('name="viewport"'), delta=5),
    PatternRule(
        "FE-SEO-MISSING-VIEWPORT",
        all_of(DOCUMENT, lacks('name="viewport"')),
        message="Missing viewport meta tag",
        suggestion="Add viewport meta tag for mobile optimization",
        delta=-10,
    ),
    PatternRule(
        "FE-SEO-OPEN-GRAPH",
        contains('property="og:title"', 'property="og:description"'),
        delta=8,
    ),
    PatternRule(
        "FE-SEO-NO-OPEN-GRAPH",
        all_of(DOCUMENT, lacks('property="og:')),
        suggestion="Add Open Graph meta tags for social media sharing",
    ),
    PatternRule("FE-SEO-TWITTER-CARD", contains('name="twitter:card"'), delta=5),
    PatternRule("FE-SEO-SEMANTIC-HTML", all_of(MARKUP, SEMANTIC_ELEMENTS), delta=8),
    PatternRule(
        "FE-SEO-NO-SEMANTIC-HTML",
        all_of(MARKUP, not_(SEMANTIC_ELEMENTS)),
        suggestion="Use semantic HTML elements (article, section, nav, etc.)",
        delta=-5,
    ),
    PatternRule(
        "FE-SEO-IMAGE-ALT",
        matches(r"<img\b(?![^<>]*\balt=)"),
        message="Some images missing alt attributes",
        suggestion="Add descriptive alt text to all images",
        delta=-8,
    ),
    PatternRule("FE-SEO-INTERNAL-LINKS", contains_any('<a href="/', '<a href="./'), delta=3),
    PatternRule(
        "FE-SEO-NO-LANG",
        all_of(contains("<html"), lacks("lang=")),
        suggestion="Add language declaration to html tag",
        delta=-2,
    ),
]


def seo_details(score: int, code: str, technology: str) -> Dict[str, Any]:
    meta_tags = sum(
        1
        for present in (
            _HAS_TITLE(code, technology),
            _HAS_DESCRIPTION(code, technology),
            'name="viewport"' in code,
            'rel="canonical"' in code,
            'property="og:' in code,
        )
        if present
    )
    return {
        "metaTags": meta_tags,
        "structuredData": bool(_HAS_STRUCTURED_DATA(code, technology)),
        "semanticHTML": bool(SEMANTIC_ELEMENTS(code, technology)),
    }
