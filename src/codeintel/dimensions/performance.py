"""
Performance rule sets.

codeintel/src/codeintel/dimensions/performance.py
"""

import re
from typing import Any, Dict

from .base import (
    PatternRule,
    all_of,
    any_of,
    contains,
    contains_any,
    lacks,
    matches,
    not_,
    tech,
)

__all__ = [
    "DATABASE_PERFORMANCE_RULES",
    "BACKEND_PERFORMANCE_RULES",
    "FRONTEND_PERFORMANCE_RULES",
    "DEVOPS_PERFORMANCE_RULES",
    "MOBILE_PERFORMANCE_RULES",
    "core_web_vitals",
]

DATABASE_PERFORMANCE_RULES = [
    PatternRule(
        "DB-PERF-SELECT-STAR",
        contains("SELECT *"),
        message="SELECT * retrieves unnecessary columns",
        suggestion="Specify only required columns in SELECT",
        delta=-15,
    ),
    PatternRule(
        "DB-PERF-ORDER-BY-RANDOM",
        matches(r"ORDER\s+BY\s+RAND(?:OM)?\s*\(", re.IGNORECASE),
        message="ORDER BY RAND() forces a full table scan",
        suggestion="Use application-side sampling or TABLESAMPLE",
        delta=-20,
    ),
    PatternRule(
        "DB-PERF-NO-LIMIT",
        all_of(contains("SELECT"), lacks("LIMIT", "TOP ", "FETCH FIRST")),
        suggestion="Add LIMIT clause to prevent large result sets",
        delta=-10,
    ),
    PatternRule(
        "DB-PERF-UNINDEXED-WHERE",
        all_of(contains("WHERE"), lacks("INDEX")),
        message="Queries without proper indexes",
        suggestion="Create indexes on frequently queried columns",
        delta=-15,
    ),
    PatternRule(
        "DB-PERF-NOT-IN-SUBQUERY",
        matches(r"NOT\s+IN\s*\(\s*SELECT", re.IGNORECASE),
        message="NOT IN with subquery can be slow",
        suggestion="Consider NOT EXISTS instead of NOT IN",
        delta=-5,
    ),
    PatternRule(
        "DB-PERF-FUNCTION-ON-COLUMN",
        matches(r"WHERE\s+(?:UPPER|LOWER|DATE|YEAR|CAST)\s*\(", re.IGNORECASE),
        message="Function applied to filtered column prevents index use",
        suggestion="Use expression indexes or rewrite the predicate",
        delta=-8,
    ),
    PatternRule(
        "DB-PERF-MONGO-UNBOUNDED-FIND",
        all_of(tech("mongo"), matches(r"\.find\(\s*\{?\s*\}?\s*\)"), lacks(".limit(")),
        message="Unbounded find() over a collection",
        suggestion="Add a filter and .limit() to find() calls",
        delta=-10,
    ),
    PatternRule(
        "DB-PERF-REDIS-KEYS",
        all_of(tech("redis"), matches(r"\bKEYS\s+\S*\*", re.IGNORECASE)),
        message="KEYS pattern scans block Redis",
        suggestion="Use SCAN with a cursor instead of KEYS",
        delta=-15,
    ),
]

BACKEND_PERFORMANCE_RULES = [
    PatternRule(
        "BE-PERF-BLOCKING-SYNC",
        all_of(matches(r"\b\w*Sync\("), lacks("async")),
        message="Synchronous operations blocking event loop",
        suggestion="Use asynchronous I/O APIs",
        delta=-20,
    ),
    PatternRule(
        "BE-PERF-UNBOUNDED-QUERY",
        all_of(contains("SELECT"), lacks("LIMIT")),
        message="Unbounded database queries",
        suggestion="Paginate database queries with LIMIT/OFFSET or cursors",
        delta=-15,
    ),
    PatternRule(
        "BE-PERF-NO-CACHE",
        all_of(contains_any("database", "query(", "SELECT"), lacks("cache", "Cache", "redis")),
        suggestion="Implement caching for database queries",
        delta=-10,
    ),
    PatternRule(
        "BE-PERF-NO-COMPRESSION",
        all_of(tech("node", "express"), contains("express"), lacks("compression")),
        suggestion="Enable response compression",
        delta=-5,
    ),
    PatternRule(
        "BE-PERF-JSON-CLONE",
        contains("JSON.parse(JSON.stringify("),
        message="Deep cloning through JSON serialization",
        suggestion="Use structuredClone or targeted copies",
        delta=-4,
    ),
    PatternRule(
        "BE-PERF-PYTHON-BLOCKING-IN-ASYNC",
        all_of(contains("async def"), contains_any("requests.get(", "requests.post(", "time.sleep(")),
        message="Blocking call inside async handler",
        suggestion="Use an async HTTP client and asyncio.sleep",
        delta=-15,
    ),
    PatternRule(
        "BE-PERF-PARALLEL-AWAIT",
        contains_any("Promise.all(", "asyncio.gather(", "Task.WhenAll(", "errgroup"),
        delta=5,
    ),
    PatternRule(
        "BE-PERF-CONNECTION-POOL",
        all_of(contains_any("pool", "Pool"), contains_any("connection", "Connection", "database")),
        delta=5,
    ),
]

_IMG_WITHOUT_LAZY = all_of(contains("<img"), lacks('loading="lazy"', 'decoding="async"'))
_BLOCKING_SCRIPT = all_of(contains("<script"), lacks("defer", "async", 'type="module"'))
_UNSIZED_IMG = all_of(contains("<img"), lacks("width=", "height="))
_LISTENER_NOT_PASSIVE = all_of(contains("addEventListener"), lacks("passive:"))

FRONTEND_PERFORMANCE_RULES = [
    PatternRule(
        "FE-PERF-IMAGE-LOADING",
        _IMG_WITHOUT_LAZY,
        message="Images not optimized for loading performance",
        suggestion='Add loading="lazy" and decoding="async" to images',
        delta=-8,
    ),
    PatternRule(
        "FE-PERF-SRCSET-NO-SIZES",
        all_of(contains("<img"), contains("srcset="), lacks("sizes=")),
        suggestion="Add sizes attribute to responsive images for better LCP",
        delta=-5,
    ),
    PatternRule(
        "FE-PERF-PASSIVE-LISTENERS",
        _LISTENER_NOT_PASSIVE,
        message="Event listeners may block main thread",
        suggestion="Use passive event listeners for scroll/touch events",
        delta=-6,
    ),
    PatternRule(
        "FE-PERF-TIMER-ANIMATION",
        all_of(contains_any("setTimeout(", "setInterval("), lacks("requestAnimationFrame")),
        suggestion="Use requestAnimationFrame for smooth animations",
        delta=-4,
    ),
    PatternRule(
        "FE-PERF-LAYOUT-SHIFT",
        _UNSIZED_IMG,
        message="Images without dimensions cause layout shift",
        suggestion="Add explicit width and height to images",
        delta=-7,
    ),
    PatternRule(
        "FE-PERF-BLOCKING-SCRIPT",
        _BLOCKING_SCRIPT,
        message="Blocking script resources slow page load",
        suggestion="Add defer or async attributes to script tags",
        delta=-10,
    ),
    PatternRule(
        "FE-PERF-CSS-PRELOAD",
        all_of(contains("<link"), contains("stylesheet"), lacks("preload")),
        suggestion="Consider preloading critical CSS resources",
        delta=-3,
    ),
    PatternRule(
        "FE-PERF-FONT-DISPLAY",
        all_of(contains("fonts.googleapis.com"), lacks("font-display", "display=swap")),
        message="Web fonts block text rendering",
        suggestion="Use font-display: swap for web fonts",
        delta=-5,
    ),
    PatternRule(
        "FE-PERF-DOCUMENT-WRITE",
        contains("document.write"),
        message="document.write blocks parsing",
        suggestion="Insert content with DOM APIs instead of document.write",
        delta=-15,
    ),
    PatternRule(
        "FE-PERF-DOM-IN-LOOP",
        all_of(matches(r"\bfor\s*\("), contains("appendChild")),
        message="DOM manipulation inside loops",
        suggestion="Batch DOM updates with DocumentFragment",
        delta=-8,
    ),
    PatternRule(
        "FE-PERF-UNIVERSAL-SELECTOR",
        matches(r"(?:^|[\s,}])\*\s*[{,]", re.MULTILINE),
        suggestion="Avoid universal selectors in CSS",
        delta=-3,
    ),
    PatternRule(
        "FE-PERF-LAYOUT-THRASHING",
        all_of(contains_any("offsetHeight", "offsetWidth", "getBoundingClientRect"), matches(r"\bfor\s*\(")),
        message="Layout reads inside loops force synchronous reflow",
        suggestion="Read layout values once outside loops",
        delta=-8,
    ),
    PatternRule("FE-PERF-CODE-SPLITTING", contains_any("import(", "React.lazy", "defineAsyncComponent"), delta=8),
    PatternRule("FE-PERF-CSS-CONTAINMENT", contains_any("contain:", "content-visibility"), delta=3),
    PatternRule("FE-PERF-WILL-CHANGE", contains("will-change"), delta=2),
    PatternRule("FE-PERF-PRECONNECT", contains_any('rel="preconnect"', 'rel="dns-prefetch"'), delta=3),
    PatternRule(
        "FE-PERF-MEMOIZATION",
        all_of(tech("react", "next"), contains_any("useMemo", "useCallback")),
        delta=4,
    ),
    PatternRule(
        "FE-PERF-UNKEYED-LIST",
        all_of(contains(".map("), contains_any("<li", "<div"), not_(contains("key="))),
        message="Rendered lists without stable keys",
        suggestion="Provide a stable key for list items",
        delta=-5,
    ),
]

_COPY_SOURCE = re.compile(r"(?m)^[ \t]*COPY[ \t]+\.[ \t]+\S")
_DEPENDENCY_INSTALL = re.compile(r"\b(?:npm (?:ci|install)|yarn install|pnpm install|pip install|go mod download|bundle install)\b")


def _copies_source_before_install(code: str, technology: str) -> bool:
    copy = _COPY_SOURCE.search(code)
    if copy is None:
        return False
    install = _DEPENDENCY_INSTALL.search(code)
    return install is not None and copy.start() < install.start()


DEVOPS_PERFORMANCE_RULES = [
    PatternRule(
        "DEVOPS-PERF-LAYER-CACHE",
        _copies_source_before_install,
        message="Source copied before dependency install defeats layer caching",
        suggestion="Copy dependency manifests and install them before copying the source",
        delta=-10,
    ),
    PatternRule(
        "DEVOPS-PERF-MULTI-STAGE",
        lambda code, technology: len(re.findall(r"(?m)^[ \t]*FROM[ \t]+\S", code)) >= 2,
        delta=8,
    ),
    PatternRule("DEVOPS-PERF-MINIMAL-BASE", matches(r"(?m)^[ \t]*FROM[ \t]+\S*(?:alpine|slim|distroless)"), delta=6),
    PatternRule(
        "DEVOPS-PERF-FULL-BASE",
        matches(r"(?m)^[ \t]*FROM[ \t]+(?:ubuntu|debian|centos|fedora)\b(?![\w.:-]*slim)"),
        suggestion="Use slim, alpine or distroless base images",
        delta=-5,
    ),
    PatternRule(
        "DEVOPS-PERF-NO-RESOURCES",
        all_of(contains("containers:"), lacks("resources:")),
        message="Containers without resource requests and limits",
        suggestion="Set CPU and memory requests and limits",
        delta=-12,
    ),
    PatternRule("DEVOPS-PERF-AUTOSCALING", contains("HorizontalPodAutoscaler"), delta=8),
    PatternRule(
        "DEVOPS-PERF-PIPELINE-NO-CACHE",
        all_of(contains_any("jobs:", "stages:", "pipeline {"), lacks("cache")),
        suggestion="Cache dependencies between pipeline runs",
        delta=-5,
    ),
    PatternRule(
        "DEVOPS-PERF-APT-RECOMMENDS",
        all_of(contains("apt-get install"), lacks("--no-install-recommends")),
        suggestion="Install packages with --no-install-recommends",
        delta=-3,
    ),
]

_MOBILE_RN = any_of(tech("react native", "react-native", "expo"), contains("react-native"))

MOBILE_PERFORMANCE_RULES = [
    PatternRule(
        "MOBILE-PERF-SCROLLVIEW-MAP",
        all_of(contains("<ScrollView"), contains(".map(")),
        message="Long lists rendered with ScrollView and map",
        suggestion="Use FlatList or SectionList for long lists",
        delta=-12,
    ),
    PatternRule(
        "MOBILE-PERF-VIRTUALIZED-LIST",
        contains_any("FlatList", "SectionList", "FlashList", "ListView.builder", "LazyColumn", "LazyRow", "LazyVStack"),
        delta=8,
    ),
    PatternRule(
        "MOBILE-PERF-CONSOLE-LOG",
        all_of(_MOBILE_RN, contains("console.log("), lacks("__DEV__")),
        message="console.log calls slow the JavaScript thread in release builds",
        suggestion="Strip console.log from release builds or guard it with __DEV__",
        delta=-5,
    ),
    PatternRule(
        "MOBILE-PERF-INLINE-RENDER-ITEM",
        all_of(_MOBILE_RN, matches(r"renderItem=\{\s*\(")),
        suggestion="Memoize renderItem with useCallback",
        delta=-4,
    ),
    PatternRule(
        "MOBILE-PERF-INTERVAL-LEAK",
        all_of(contains("setInterval("), lacks("clearInterval(")),
        message="Interval without cleanup keeps running in the background",
        suggestion="Clear intervals when the screen unmounts",
        delta=-8,
    ),
    PatternRule(
        "MOBILE-PERF-DIMENSIONS-GET",
        all_of(_MOBILE_RN, contains("Dimensions.get(")),
        suggestion="Use useWindowDimensions so layouts follow rotation",
        delta=-3,
    ),
    PatternRule("MOBILE-PERF-IMAGE-CACHE", contains_any("FastImage", "CachedNetworkImage", "AsyncImage", "coil"), delta=5),
    PatternRule("MOBILE-PERF-MEMO", contains_any("React.memo", "useMemo", "remember {"), delta=4),
    PatternRule("MOBILE-PERF-CONST-WIDGETS", matches(r"\bconst [A-Z]\w*\("), delta=3),
]


def _rating(good: bool, poor: bool) -> str:
    if good:
        return "good"
    if poor:
        return "poor"
    return "needs-improvement"


def core_web_vitals(score: int, code: str, technology: str) -> Dict[str, Any]:
    """Estimated Core Web Vitals ratings from markup and script heuristics."""
    lcp_risk = _IMG_WITHOUT_LAZY(code, technology) or _BLOCKING_SCRIPT(code, technology)
    fid_risk = _LISTENER_NOT_PASSIVE(code, technology) or "document.write" in code
    cls_risk = _UNSIZED_IMG(code, technology)
    return {
        "coreWebVitals": {
            "lcp": _rating(not lcp_risk and score >= 80, lcp_risk and score < 60),
            "fid": _rating(not fid_risk and score >= 80, fid_risk and score < 60),
            "cls": _rating(not cls_risk, cls_risk and score < 60),
        }
    }
