"""
Frontend category engine: markup, styles and UI components.

codeintel/src/codeintel/engines/frontend.py
"""

import html
import logging
import re
from typing import Sequence

from ..comments import BLOCK, HTML, SLASH, CommentStyle, append_comment_block
from ..dimensions import (
    FRONTEND_ACCESSIBILITY_RULES,
    FRONTEND_MAINTAINABILITY_RULES,
    FRONTEND_PERFORMANCE_RULES,
    FRONTEND_QUALITY_RULES,
    FRONTEND_SECURITY_RULES,
    FRONTEND_SEO_RULES,
    core_web_vitals,
    maintainability_details,
    seo_details,
    wcag_level,
)
from ..dimensions.base import all_of, contains, contains_any, lacks, matches
from ..templates import frontend as templates
from ..types import ACCESSIBILITY, MAINTAINABILITY, PERFORMANCE, QUALITY, SECURITY, SEO
from .base import WARNING, AnalyzerSpec, BaseCategoryEngine, PostProcessor, ValidationCheck
from .dispatch import TechnologyDispatch, TechnologyRoute

logger = logging.getLogger(__name__)

__all__ = ["FrontendEngine"]

_EMPTY_BUTTON = re.compile(r"<button\b(?![^<>]*\baria-label)([^<>]*)>(\s*)</button>")
_LANDMARK_ROLES = {
    "header": "banner",
    "nav": "navigation",
    "main": "main",
    "footer": "contentinfo",
}
_HEAD_OPEN = re.compile(r"<head\b[^<>]*>")
_TITLE = re.compile(r"<title>([^<]*)</title>")
_H1_TEXT = re.compile(r"<h1\b[^<>]*>([^<]+)</h1>")
_IMG_TAG = re.compile(r"<img\b[^<>]*>")
_SCRIPT_SRC_TAG = re.compile(r"<script\b(?=[^<>]*\bsrc=)[^<>]*>")

_DOCUMENT = contains_any("<html", "<head", "<body")
_IMG_WITHOUT_ALT = r"<img\b(?![^<>]*\balt=)"


def _insert_into_head(code: str, line: str) -> str:
    match = _HEAD_OPEN.search(code)
    if match is None:
        return code
    return code[: match.end()] + "\n  " + line + code[match.end() :]


def _lazy_image(match: re.Match) -> str:
    tag = match.group(0)
    additions = ""
    if "loading=" not in tag:
        additions += ' loading="lazy"'
    if "decoding=" not in tag:
        additions += ' decoding="async"'
    return tag[:4] + additions + tag[4:] if additions else tag


def _deferred_script(match: re.Match) -> str:
    tag = match.group(0)
    if any(marker in tag for marker in ("defer", "async", 'type="module"')):
        return tag
    return tag[:7] + " defer" + tag[7:]


class FrontendEngine(BaseCategoryEngine):
    """Accessibility, SEO, performance and quality for web frontends."""

    category = "frontend"
    engine_name = "FrontendEngine"
    default_technology = "HTML"

    best_practices = (
        "Use semantic HTML elements",
        "Implement responsive design",
        "Optimize for accessibility (WCAG 2.1 AA)",
        "Add proper meta tags for SEO",
        "Use HTTPS and secure protocols",
        "Implement lazy loading for images",
        "Minimize and compress assets",
        "Use CSS Grid and Flexbox for layouts",
        "Implement proper error boundaries",
        "Add proper ARIA labels and roles",
    )
    anti_patterns = (
        "Using inline styles extensively",
        "Not using semantic HTML",
        "Ignoring accessibility requirements",
        "Missing alt text for images",
        "Using tables for layout",
        "Not optimizing images",
        "Using !important in CSS excessively",
        "Not handling error states",
        "Blocking the main thread with heavy operations",
        "Not using HTTPS",
    )
    quality_checklist = (
        "Performance budget enforced in CI with Lighthouse",
        "Automated accessibility checks run on every page",
        "Content security policy defined for production",
        "Loading and error states covered for each view",
    )

    def analyzer_specs(self) -> Sequence[AnalyzerSpec]:
        return (
            AnalyzerSpec(QUALITY, FRONTEND_QUALITY_RULES),
            AnalyzerSpec(MAINTAINABILITY, FRONTEND_MAINTAINABILITY_RULES, maintainability_details),
            AnalyzerSpec(PERFORMANCE, FRONTEND_PERFORMANCE_RULES, core_web_vitals),
            AnalyzerSpec(SECURITY, FRONTEND_SECURITY_RULES),
            AnalyzerSpec(ACCESSIBILITY, FRONTEND_ACCESSIBILITY_RULES, wcag_level),
            AnalyzerSpec(SEO, FRONTEND_SEO_RULES, seo_details),
        )

    def build_dispatch(self) -> TechnologyDispatch:
        return TechnologyDispatch(
            [
                TechnologyRoute("html", ("html",), templates.html, HTML),
                TechnologyRoute("css", ("css", "scss", "sass"), templates.css, BLOCK),
                TechnologyRoute("react", ("react", "nextjs", "next.js"), templates.react, SLASH),
                TechnologyRoute("vue", ("vue", "nuxt"), templates.vue, HTML),
                TechnologyRoute("angular", ("angular",), templates.angular, SLASH),
            ],
            fallback=TechnologyRoute("javascript", (), templates.javascript, SLASH),
            table="frontend",
        )

    def post_processors(self) -> Sequence[PostProcessor]:
        return (
            self.add_accessibility_features,
            self.add_seo_optimizations,
            self.add_performance_features,
        )

    def validation_checks(self) -> Sequence[ValidationCheck]:
        return (
            ValidationCheck(contains("eval("), "Use of eval() is a security risk"),
            ValidationCheck(matches(_IMG_WITHOUT_ALT), "Images missing alt attributes"),
            ValidationCheck(all_of(_DOCUMENT, lacks("<!DOCTYPE", "<!doctype")), "HTML document missing DOCTYPE declaration"),
            ValidationCheck(all_of(_DOCUMENT, lacks("<title>")), "HTML document missing title element"),
            ValidationCheck(
                all_of(contains("innerHTML"), lacks("sanitize", "DOMPurify")),
                "innerHTML assigned without sanitization",
                WARNING,
            ),
            ValidationCheck(
                all_of(contains('target="_blank"'), lacks("noopener")),
                'Links with target="_blank" missing rel="noopener"',
                WARNING,
            ),
            ValidationCheck(matches(r"\son[a-z]+=\""), "Inline event handler attributes", WARNING),
        )

    # Post-processors

    def add_accessibility_features(self, code: str, technology: str, style: CommentStyle) -> str:
        """Label empty buttons and give bare landmark elements their roles."""
        code = _EMPTY_BUTTON.sub(r'<button aria-label="Action button"\1>\2</button>', code)
        for element, role in _LANDMARK_ROLES.items():
            code = code.replace(f"<{element}>", f'<{element} role="{role}">')
        return code.replace("<html>", '<html lang="en">')

    def add_seo_optimizations(self, code: str, technology: str, style: CommentStyle) -> str:
        """Add title, meta description and viewport to HTML documents missing them."""
        if not _HEAD_OPEN.search(code):
            return code
        heading = _H1_TEXT.search(code)
        title = _TITLE.search(code)
        text = (title.group(1) if title else heading.group(1) if heading else "Page Title").strip()
        text = html.escape(html.unescape(text), quote=True)
        additions = []
        if title is None:
            additions.append(f"<title>{text}</title>")
        if 'name="description"' not in code:
            additions.append(f'<meta name="description" content="{text}">')
        if 'name="viewport"' not in code:
            additions.append('<meta name="viewport" content="width=device-width, initial-scale=1">')
        for line in reversed(additions):
            code = _insert_into_head(code, line)
        return code

    def add_performance_features(self, code: str, technology: str, style: CommentStyle) -> str:
        """Lazy-load images, defer external scripts and flag document.write."""
        code = _IMG_TAG.sub(_lazy_image, code)
        code = _SCRIPT_SRC_TAG.sub(_deferred_script, code)
        if "document.write" in code:
            code = append_comment_block(
                code, ["Performance: replace document.write with DOM APIs"], style
            )
        return code
