"""
Quality and maintainability rule sets for every category.

codeintel/src/codeintel/dimensions/quality.py
"""

import re
from typing import Any, Dict, Iterator

from ..types import Finding
from .base import (
    BaseRule,
    PatternRule,
    all_of,
    any_of,
    contains,
    contains_any,
    lacks,
    matches,
    not_,
    tech,
    tech_word,
)

__all__ = [
    "DATABASE_QUALITY_RULES",
    "DATABASE_MAINTAINABILITY_RULES",
    "BACKEND_QUALITY_RULES",
    "BACKEND_MAINTAINABILITY_RULES",
    "FRONTEND_QUALITY_RULES",
    "FRONTEND_MAINTAINABILITY_RULES",
    "DEVOPS_QUALITY_RULES",
    "DEVOPS_MAINTAINABILITY_RULES",
    "MOBILE_QUALITY_RULES",
    "MOBILE_MAINTAINABILITY_RULES",
    "maintainability_details",
]

_COMMENT_MARKERS = re.compile(r"//|/\*|<!--|^[ \t]*#(?!include)|^[ \t]*--", re.MULTILINE)
_BRANCHES = re.compile(r"\b(?:if|for|while|switch|case|elif|catch|except)\b")


def _code_lines(code: str) -> int:
    return sum(1 for line in code.splitlines() if line.strip())


def maintainability_details(score: int, code: str, technology: str) -> Dict[str, Any]:
    lines = _code_lines(code)
    comments = len(_COMMENT_MARKERS.findall(code))
    readability = min(100, round(comments / lines * 100)) if lines else 0
    testability = 70
    if "return" in code and "global " not in code:
        testability += 15
    if "inject" in code or "dependency" in code.lower():
        testability += 10
    return {
        "complexity": len(_BRANCHES.findall(code)),
        "readability": readability,
        "testability": max(0, min(100, testability)),
    }


class CommentDensityRule(BaseRule):
    """Flags fragments of meaningful size with fewer than one comment per ten lines."""

    rule_id = "MAINT-COMMENT-DENSITY"
    description = "Low comment density"

    def __init__(self, rule_id: str = rule_id, min_lines: int = 20, ratio: float = 0.1):
        self.rule_id = rule_id
        self.min_lines = min_lines
        self.ratio = ratio

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        lines = _code_lines(code)
        if lines < self.min_lines:
            return
        if len(_COMMENT_MARKERS.findall(code)) / lines < self.ratio:
            yield self.create_finding(
                -7, suggestion="Add more comments to explain complex business logic"
            )


class LineCountRule(BaseRule):
    """Flags very long fragments."""

    rule_id = "MAINT-LONG-FILE"

    def __init__(self, rule_id: str = rule_id, limit: int = 500, delta: int = -8):
        self.rule_id = rule_id
        self.limit = limit
        self.delta = delta

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        if _code_lines(code) > self.limit:
            yield self.create_finding(
                self.delta, suggestion="Consider organizing code into smaller modules"
            )


class ModernSyntaxRule(BaseRule):
    """Rewards scripts that use several modern JavaScript features."""

    rule_id = "FE-QUALITY-MODERN-JS"
    _features = ("const ", "let ", "=>", "async ", "await ", "...", "?.", "??", "`")

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        used = sum(1 for feature in self._features if feature in code)
        if used >= 5:
            yield self.create_finding(5)
        elif "var " in code:
            yield self.create_finding(
                -5, message="Legacy var declarations", suggestion="Use const/let instead of var"
            )


_SQL = any_of(
    tech("sql", "postgres", "maria", "cassandra"),
    contains_any("SELECT", "CREATE TABLE", "INSERT"),
)
_SCRIPTED = tech("javascript", "typescript", "react", "vue", "angular", "svelte", "jsx", "tsx", "next")
_TYPED = tech("typescript", "tsx", "angular")
_REACT = tech("react", "next", "jsx", "tsx")
_CSS = any_of(tech("css", "scss", "sass", "less", "tailwind"))
_HTML = tech_word("html", "html5")

DATABASE_QUALITY_RULES = [
    PatternRule(
        "DB-QUALITY-SELECT-STAR",
        contains("SELECT *"),
        message="Using SELECT * instead of specific columns",
        delta=-10,
    ),
    PatternRule(
        "DB-QUALITY-MISSING-PK",
        all_of(contains("CREATE TABLE"), lacks("PRIMARY KEY")),
        message="Table missing primary key",
        delta=-15,
    ),
    PatternRule(
        "DB-QUALITY-UNINDEXED-WHERE",
        all_of(contains("WHERE"), lacks("INDEX")),
        suggestion="Consider adding indexes for better query performance",
        delta=-5,
    ),
    PatternRule(
        "DB-QUALITY-IMPLICIT-JOIN",
        all_of(_SQL, matches(r"\bFROM\s+\w+(?:\s+\w+)?\s*,\s*\w+", re.IGNORECASE)),
        message="Implicit comma joins obscure join conditions",
        suggestion="Use explicit JOIN ... ON syntax",
        delta=-5,
    ),
    PatternRule(
        "DB-QUALITY-NULL-COMPARISON",
        matches(r"(?:=|!=|<>)\s*NULL\b", re.IGNORECASE),
        message="Comparison with NULL using = or != is always unknown",
        suggestion="Use IS NULL / IS NOT NULL",
        delta=-8,
    ),
]

DATABASE_MAINTAINABILITY_RULES = [
    PatternRule(
        "DB-MAINT-GENERIC-NAMES",
        matches(r"\b(?:table|column|field)\d+\b", re.IGNORECASE),
        suggestion="Use descriptive names for tables and columns",
        delta=-10,
    ),
    PatternRule(
        "DB-MAINT-UNDOCUMENTED",
        all_of(lacks("--", "/*", "//", "#"), matches(r"\S")),
        suggestion="Add comments to document database schema",
        delta=-5,
    ),
    PatternRule(
        "DB-MAINT-MIXED-CASE-KEYWORDS",
        all_of(matches(r"\bSELECT\b"), matches(r"\bselect\b")),
        suggestion="Use consistent keyword casing",
        delta=-3,
    ),
    LineCountRule("DB-MAINT-LONG-SCRIPT", limit=400, delta=-5),
]

BACKEND_QUALITY_RULES = [
    PatternRule(
        "BE-QUALITY-ASYNC-NO-TRY",
        all_of(contains("async"), lacks("try")),
        message="Async operations without error handling",
        delta=-15,
    ),
    PatternRule(
        "BE-QUALITY-UNVALIDATED-BODY",
        all_of(contains("req.body"), lacks("validate", "validationResult")),
        message="Missing input validation",
        delta=-12,
    ),
    PatternRule(
        "BE-QUALITY-HARDCODED-HOST",
        contains_any("localhost", "127.0.0.1"),
        suggestion="Use environment variables for configuration",
        delta=-8,
    ),
    PatternRule(
        "BE-QUALITY-NO-LOGGING",
        lacks("log", "console."),
        suggestion="Add proper logging for debugging and monitoring",
        delta=-5,
    ),
    PatternRule(
        "BE-QUALITY-CALLBACK-STYLE",
        all_of(contains("callback"), lacks("Promise", "async")),
        suggestion="Prefer promises or async/await over callbacks",
        delta=-10,
    ),
    PatternRule("BE-QUALITY-BCRYPT", contains("bcrypt"), delta=8),
    PatternRule("BE-QUALITY-JWT-SIGNING", all_of(contains("jwt"), contains("sign")), delta=6),
    PatternRule("BE-QUALITY-SECURITY-MIDDLEWARE", contains_any("helmet", "cors"), delta=5),
    PatternRule("BE-QUALITY-RATE-LIMIT", contains_any("rateLimit", "rate-limit", "RateLimit"), delta=7),
    PatternRule(
        "BE-QUALITY-MIXED-MODULES",
        all_of(tech("node"), contains("require("), matches(r"^import\s", re.MULTILINE)),
        message="Mixed module systems (require and import)",
        delta=-5,
    ),
    PatternRule(
        "BE-QUALITY-RAW-HTTP-SERVER",
        all_of(tech("node"), contains("http.createServer"), lacks("express")),
        suggestion="Consider using Express.js for better structure",
        delta=-3,
    ),
    PatternRule(
        "BE-QUALITY-PROCESS-EXIT",
        all_of(tech("node"), contains("process.exit")),
        message="Using process.exit() can prevent graceful shutdown",
        delta=-8,
    ),
    PatternRule(
        "BE-QUALITY-WILDCARD-IMPORT",
        all_of(tech("python", "django", "flask", "fastapi"), contains("import *")),
        message="Wildcard imports reduce code clarity",
        delta=-5,
    ),
    PatternRule(
        "BE-QUALITY-SYSTEM-OUT",
        all_of(tech_word("java", "spring"), contains("System.out.println"), lacks("logger", "Logger")),
        suggestion="Use logging framework instead of System.out",
        delta=-5,
    ),
]

BACKEND_MAINTAINABILITY_RULES = [
    PatternRule(
        "BE-MAINT-TODO-MARKERS",
        matches(r"\b(?:TODO|FIXME|XXX)\b"),
        message="Unresolved TODO/FIXME markers",
        delta=-3,
    ),
    PatternRule(
        "BE-MAINT-GLOBAL-STATE",
        matches(r"^[ \t]*global[ \t]+\w+", re.MULTILINE),
        message="Mutable global state",
        suggestion="Pass dependencies explicitly instead of using globals",
        delta=-6,
    ),
    PatternRule(
        "BE-MAINT-DEEP-NESTING",
        matches(r"^(?: {16,}|\t{4,})\S", re.MULTILINE),
        suggestion="Reduce nesting with early returns or helper functions",
        delta=-5,
    ),
    CommentDensityRule("BE-MAINT-COMMENT-DENSITY"),
    LineCountRule("BE-MAINT-LONG-FILE"),
]

FRONTEND_QUALITY_RULES = [
    PatternRule(
        "FE-QUALITY-NO-SEMANTIC-HTML",
        all_of(_HTML, lacks("<main", "<header", "<nav", "<article", "<section", "<footer")),
        message="Missing semantic HTML elements",
        suggestion="Use semantic elements (header, nav, main, article, footer)",
        delta=-10,
    ),
    PatternRule(
        "FE-QUALITY-NO-DOCTYPE",
        all_of(_HTML, lacks("<!DOCTYPE", "<!doctype")),
        message="Missing DOCTYPE declaration",
        delta=-5,
    ),
    PatternRule(
        "FE-QUALITY-NO-LANG",
        all_of(_HTML, contains("<html"), lacks("lang=")),
        message="Missing lang attribute on html element",
        delta=-5,
    ),
    PatternRule("FE-QUALITY-NOSCRIPT", all_of(_HTML, contains("<noscript")), delta=3),
    PatternRule(
        "FE-QUALITY-UNVALIDATED-FORM",
        all_of(contains("<form"), lacks("required", "pattern=", "novalidate", "validate")),
        suggestion="Add client-side validation attributes to form fields",
        delta=-5,
    ),
    PatternRule("FE-QUALITY-MODERN-LAYOUT", all_of(_CSS, contains_any("display: grid", "display: flex", "display:grid", "display:flex")), delta=5),
    PatternRule(
        "FE-QUALITY-NO-CUSTOM-PROPERTIES",
        all_of(_CSS, lacks("--"), lambda code, technology: len(code) > 500),
        suggestion="Use CSS custom properties for repeated values",
        delta=-3,
    ),
    PatternRule(
        "FE-QUALITY-DESKTOP-FIRST",
        all_of(_CSS, contains("@media"), contains("max-width"), lacks("min-width")),
        suggestion="Prefer mobile-first media queries (min-width)",
        delta=-3,
    ),
    PatternRule(
        "FE-QUALITY-IMPORTANT",
        all_of(_CSS, contains("!important")),
        message="Use of !important makes styles hard to override",
        delta=-5,
    ),
    PatternRule(
        "FE-QUALITY-MODERN-SELECTORS",
        all_of(_CSS, contains_any(":is(", ":where(", ":has(")),
        delta=3,
    ),
    ModernSyntaxRule(),
    PatternRule(
        "FE-QUALITY-REACT-HOOKS",
        all_of(_REACT, contains_any("useState", "useEffect", "useMemo", "useCallback")),
        delta=5,
    ),
    PatternRule("FE-QUALITY-REACT-MEMO", all_of(_REACT, contains_any("React.memo", "memo(")), delta=3),
    PatternRule(
        "FE-QUALITY-REACT-CLASS-COMPONENT",
        all_of(_REACT, contains("extends React.Component")),
        suggestion="Prefer function components with hooks",
        delta=-3,
    ),
    PatternRule(
        "FE-QUALITY-FETCH-NO-CATCH",
        all_of(contains("fetch("), lacks("catch", "try")),
        message="fetch() without error handling",
        suggestion="Handle network errors with try/catch or .catch()",
        delta=-8,
    ),
    PatternRule("FE-QUALITY-TS-INTERFACES", all_of(_TYPED, contains_any("interface ", "type ")), delta=5),
    PatternRule(
        "FE-QUALITY-TS-ANY",
        all_of(_TYPED, matches(r":\s*any\b|<any>|\bas any\b")),
        message="Use of the any type defeats type checking",
        suggestion="Replace any with specific types or unknown",
        delta=-5,
    ),
    PatternRule(
        "FE-QUALITY-CONSOLE-LOG",
        all_of(_SCRIPTED, contains("console.log(")),
        suggestion="Remove console.log calls from production code",
        delta=-3,
    ),
    PatternRule(
        "FE-QUALITY-LOOSE-EQUALITY",
        all_of(_SCRIPTED, matches(r"[^=!]==[^=]")),
        suggestion="Use strict equality (===)",
        delta=-3,
    ),
]

FRONTEND_MAINTAINABILITY_RULES = [
    PatternRule(
        "FE-MAINT-INLINE-STYLES",
        lambda code, technology: code.count('style="') > 3,
        suggestion="Move inline styles into stylesheets or components",
        delta=-5,
    ),
    PatternRule(
        "FE-MAINT-TODO-MARKERS",
        matches(r"\b(?:TODO|FIXME|XXX)\b"),
        message="Unresolved TODO/FIXME markers",
        delta=-3,
    ),
    PatternRule(
        "FE-MAINT-MAGIC-COLORS",
        all_of(_CSS, lambda code, technology: len(re.findall(r"#[0-9a-fA-F]{3,6}\b", code)) > 8, not_(contains("var(--"))),
        suggestion="Centralize colors in design tokens",
        delta=-4,
    ),
    CommentDensityRule("FE-MAINT-COMMENT-DENSITY"),
    LineCountRule("FE-MAINT-LONG-FILE", limit=400),
]

_PIPELINE = contains_any("jobs:", "stages:", "pipeline {")

DEVOPS_QUALITY_RULES = [
    PatternRule(
        "DEVOPS-QUALITY-LATEST-TAG",
        matches(r"(?m)(?:^[ \t]*FROM[ \t]+|image:[ \t]*['\"]?)[\w./-]+:latest\b"),
        message="Image pinned to the mutable latest tag",
        suggestion="Pin images to a version or digest",
        delta=-10,
    ),
    PatternRule(
        "DEVOPS-QUALITY-UNTAGGED-BASE",
        matches(r"(?m)^[ \t]*FROM[ \t]+(?!scratch\b)[\w./-]+[ \t]*$"),
        message="Base image without an explicit tag",
        delta=-8,
    ),
    PatternRule(
        "DEVOPS-QUALITY-APT-CACHE",
        all_of(contains("apt-get install"), lacks("rm -rf /var/lib/apt/lists")),
        message="Package manager cache left in the image layer",
        suggestion="Remove /var/lib/apt/lists in the same RUN instruction",
        delta=-5,
    ),
    PatternRule(
        "DEVOPS-QUALITY-ADD-URL",
        matches(r"(?m)^[ \t]*ADD[ \t]+https?://"),
        suggestion="Download remote files with checksum verification instead of ADD",
        delta=-4,
    ),
    PatternRule(
        "DEVOPS-QUALITY-PIPELINE-NO-TESTS",
        all_of(_PIPELINE, not_(matches(r"(?i)\btest"))),
        message="Pipeline runs no tests",
        suggestion="Run the test suite before building artifacts",
        delta=-12,
    ),
    PatternRule(
        "DEVOPS-QUALITY-UNDESCRIBED-VARIABLES",
        all_of(contains('variable "'), lacks("description")),
        suggestion="Describe every Terraform variable",
        delta=-3,
    ),
    PatternRule(
        "DEVOPS-QUALITY-PINNED-PROVIDERS",
        all_of(contains("required_providers"), contains("version")),
        delta=5,
    ),
    PatternRule("DEVOPS-QUALITY-LINT", matches(r"(?i)\b(?:hadolint|tflint|kubeval|kubeconform|lint)\b"), delta=3),
]

DEVOPS_MAINTAINABILITY_RULES = [
    PatternRule(
        "DEVOPS-MAINT-TODO-MARKERS",
        matches(r"\b(?:TODO|FIXME|XXX)\b"),
        message="Unresolved TODO/FIXME markers",
        delta=-3,
    ),
    PatternRule(
        "DEVOPS-MAINT-UNDOCUMENTED",
        all_of(not_(matches(r"(?m)^[ \t]*#")), matches(r"\S")),
        suggestion="Comment non-obvious infrastructure decisions",
        delta=-5,
    ),
    PatternRule(
        "DEVOPS-MAINT-UNLABELED-WORKLOAD",
        all_of(matches(r"kind:[ \t]*(?:Deployment|StatefulSet|DaemonSet)\b"), lacks("labels:")),
        suggestion="Label workloads so selectors and dashboards can find them",
        delta=-4,
    ),
    PatternRule("DEVOPS-MAINT-RESOURCE-TAGS", contains_any("default_tags", "tags = {"), delta=3),
    LineCountRule("DEVOPS-MAINT-LONG-FILE", limit=400, delta=-5),
]

_MOBILE_RN = any_of(tech("react native", "react-native", "expo"), contains("react-native"))
_MOBILE_FLUTTER = any_of(tech("flutter", "dart"), contains("package:flutter"))

MOBILE_QUALITY_RULES = [
    PatternRule(
        "MOBILE-QUALITY-BROWSER-ALERT",
        all_of(_MOBILE_RN, matches(r"(?<![\w.])alert\(")),
        message="Browser alert() in a React Native screen",
        suggestion="Use Alert.alert for native dialogs",
        delta=-8,
    ),
    PatternRule(
        "MOBILE-QUALITY-NO-SAFE-AREA",
        all_of(any_of(_MOBILE_RN, _MOBILE_FLUTTER), lacks("SafeAreaView", "SafeArea", "useSafeAreaInsets")),
        suggestion="Wrap screens in a safe area so content clears notches and system bars",
        delta=-5,
    ),
    PatternRule(
        "MOBILE-QUALITY-PRINT",
        all_of(_MOBILE_FLUTTER, matches(r"(?<![\w.])print\(")),
        suggestion="Use debugPrint or a logger instead of print",
        delta=-3,
    ),
    PatternRule(
        "MOBILE-QUALITY-SETSTATE-AFTER-AWAIT",
        all_of(_MOBILE_FLUTTER, contains("await "), contains("setState("), lacks("mounted")),
        message="setState after await without a mounted check",
        suggestion="Check mounted before calling setState after an await",
        delta=-10,
    ),
    PatternRule(
        "MOBILE-QUALITY-UNHANDLED-NETWORK",
        all_of(contains_any("fetch(", "http.get(", "URLSession", "await "), lacks("catch", "try")),
        message="Network calls without error handling",
        suggestion="Handle network failures and show the user a retry path",
        delta=-12,
    ),
    PatternRule("MOBILE-QUALITY-TYPED-PROPS", all_of(_MOBILE_RN, contains_any("interface ", "type ")), delta=3),
    PatternRule("MOBILE-QUALITY-HOOKS", all_of(_MOBILE_RN, contains_any("useCallback", "useMemo")), delta=4),
    PatternRule("MOBILE-QUALITY-TEST-IDS", contains_any("testID", "accessibilityIdentifier", "testTag"), delta=3),
]

MOBILE_MAINTAINABILITY_RULES = [
    PatternRule(
        "MOBILE-MAINT-TODO-MARKERS",
        matches(r"\b(?:TODO|FIXME|XXX)\b"),
        message="Unresolved TODO/FIXME markers",
        delta=-3,
    ),
    PatternRule(
        "MOBILE-MAINT-INLINE-STYLES",
        all_of(_MOBILE_RN, lambda code, technology: code.count("style={{") > 3),
        suggestion="Move inline styles into StyleSheet.create",
        delta=-5,
    ),
    PatternRule("MOBILE-MAINT-STYLESHEET", contains("StyleSheet.create"), delta=3),
    CommentDensityRule("MOBILE-MAINT-COMMENT-DENSITY"),
    LineCountRule("MOBILE-MAINT-LONG-FILE", limit=400),
]
