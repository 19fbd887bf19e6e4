"""
Mobile category engine: React Native, Flutter, SwiftUI and Jetpack Compose
screens.

Best practices combine the general list, the practices of the platform the
technology names and any insight practices, in that order.

codeintel/src/codeintel/engines/mobile.py
"""

import logging
import re
from typing import Any, List, Sequence, Tuple

from ..comments import SLASH, CommentStyle, append_comment_block
from ..dimensions import (
    MOBILE_ACCESSIBILITY_RULES,
    MOBILE_MAINTAINABILITY_RULES,
    MOBILE_PERFORMANCE_RULES,
    MOBILE_QUALITY_RULES,
    MOBILE_SECURITY_RULES,
    maintainability_details,
    owasp_compliance,
    wcag_level,
)
from ..dimensions.base import all_of, any_of, contains, contains_any, lacks, matches, tech
from ..dimensions.security import CLEARTEXT_URL, MOBILE_API_KEY
from ..templates import mobile as templates
from ..types import ACCESSIBILITY, MAINTAINABILITY, PERFORMANCE, QUALITY, SECURITY
from .base import SUGGESTION, WARNING, AnalyzerSpec, BaseCategoryEngine, PostProcessor, ValidationCheck
from .dispatch import TechnologyDispatch, TechnologyRoute

logger = logging.getLogger(__name__)

__all__ = ["MobileEngine", "PLATFORM_PRACTICES"]

PLATFORM_PRACTICES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (
        ("react native", "react-native", "expo"),
        (
            "Use Platform.OS for platform-specific code",
            "Implement proper safe area handling",
            "Use Flipper for debugging in development",
            "Optimize bundle size with Metro bundler",
            "Use Hermes engine for better performance",
        ),
    ),
    (
        ("flutter", "dart"),
        (
            "Use const constructors for better performance",
            "Implement proper widget lifecycle management",
            "Use Flutter Inspector for UI debugging",
            "Optimize build methods to avoid unnecessary rebuilds",
            "Use Platform.is for platform-specific code",
        ),
    ),
    (
        ("swift", "ios"),
        (
            "Follow Human Interface Guidelines",
            "Use Auto Layout for responsive design",
            "Implement proper memory management with ARC",
            "Use SwiftUI for modern UI development",
            "Follow iOS app lifecycle patterns",
        ),
    ),
    (
        ("kotlin", "android"),
        (
            "Follow Material Design guidelines",
            "Use ConstraintLayout for complex layouts",
            "Implement proper activity lifecycle management",
            "Use Jetpack Compose for modern UI development",
            "Follow Android architecture components patterns",
        ),
    ),
)

_SCROLL_VIEW = re.compile(r"<ScrollView\b(?![^<>]*\bremoveClippedSubviews)")
_DEFAULT_EXPORT = re.compile(r"^export default (\w+);$", re.MULTILINE)
_LITERAL_TEXT = re.compile(r"""(?<![\w.])(?<!const )Text\(('[^'$\\\n]{0,200}'|"[^"$\\\n]{0,200}")\)""")

_REACT_NATIVE = any_of(tech("react native", "react-native", "expo"), contains("react-native"))
_FLUTTER = any_of(tech("flutter", "dart"), contains("package:flutter"))
_SAFE_AREA = ("SafeAreaView", "SafeArea", "useSafeAreaInsets", "safeAreaInset", "EdgeInsets")


def platform_practices(technology: str) -> Tuple[str, ...]:
    """Practices for the first platform whose keys occur in the technology name."""
    tech_lower = (technology or "").lower()
    for keys, practices in PLATFORM_PRACTICES:
        if any(key in tech_lower for key in keys):
            return practices
    return ()


class MobileEngine(BaseCategoryEngine):
    """Performance, accessibility and platform guidance for mobile apps."""

    category = "mobile"
    engine_name = "MobileEngine"
    default_technology = "React Native"

    best_practices = (
        "Implement responsive design for multiple screen sizes",
        "Optimize app startup time and memory usage",
        "Design for offline-first user experience",
        "Follow platform-specific design guidelines",
        "Implement proper error handling and user feedback",
        "Use lazy loading for heavy components",
        "Optimize images and assets for mobile",
        "Implement proper state management",
        "Test on real devices across different platforms",
        "Follow accessibility guidelines (WCAG)",
        "Implement proper data caching strategies",
        "Use platform-appropriate navigation patterns",
        "Optimize battery usage and network requests",
        "Implement secure authentication and data storage",
    )
    anti_patterns = (
        "Blocking the main thread with heavy operations",
        "Not optimizing images for different screen densities",
        "Ignoring platform-specific design guidelines",
        "Poor network error handling",
        "Excessive memory usage and memory leaks",
        "Not testing on real devices",
        "Hardcoding screen dimensions",
        "Not implementing proper loading states",
        "Ignoring accessibility requirements",
        "Poor offline experience",
        "Excessive API calls without caching",
        "Not handling different device orientations",
        "Storing sensitive data insecurely",
        "Not optimizing for battery life",
        "Poor touch target sizes",
    )
    quality_checklist = (
        "Screens tested on physical low-end and high-end devices",
        "Startup time and memory budgets tracked per release",
        "VoiceOver and TalkBack pass recorded for each new screen",
        "Crash reporting and offline behavior verified before store submission",
    )

    def analyzer_specs(self) -> Sequence[AnalyzerSpec]:
        return (
            AnalyzerSpec(QUALITY, MOBILE_QUALITY_RULES),
            AnalyzerSpec(MAINTAINABILITY, MOBILE_MAINTAINABILITY_RULES, maintainability_details),
            AnalyzerSpec(PERFORMANCE, MOBILE_PERFORMANCE_RULES),
            AnalyzerSpec(SECURITY, MOBILE_SECURITY_RULES, owasp_compliance),
            AnalyzerSpec(ACCESSIBILITY, MOBILE_ACCESSIBILITY_RULES, wcag_level),
        )

    def build_dispatch(self) -> TechnologyDispatch:
        return TechnologyDispatch(
            [
                TechnologyRoute("flutter", ("flutter", "dart"), templates.flutter, SLASH),
                TechnologyRoute("swift", ("swift", "ios", "objective-c"), templates.swiftui, SLASH),
                TechnologyRoute("kotlin", ("kotlin", "android", "jetpack", "compose"), templates.compose, SLASH),
            ],
            fallback=TechnologyRoute("react-native", (), templates.react_native, SLASH),
            table="mobile",
        )

    def post_processors(self) -> Sequence[PostProcessor]:
        return (
            self.optimize_react_native,
            self.optimize_flutter,
            self.add_mobile_notes,
        )

    def validation_checks(self) -> Sequence[ValidationCheck]:
        return (
            ValidationCheck(matches(MOBILE_API_KEY), "API key embedded in the app bundle"),
            ValidationCheck(matches(CLEARTEXT_URL), "Cleartext HTTP traffic", WARNING),
            ValidationCheck(
                all_of(contains_any("AsyncStorage", "SharedPreferences", "UserDefaults"), matches(r"(?i)token|password|secret")),
                "Sensitive data kept in unencrypted storage",
                WARNING,
            ),
            ValidationCheck(
                all_of(_REACT_NATIVE, matches(r"(?<![\w.])alert\(")),
                "Use Alert.alert instead of browser alert() for mobile",
                WARNING,
            ),
            ValidationCheck(
                all_of(_FLUTTER, contains("setState("), contains("async"), lacks("mounted")),
                "Avoid calling setState in async functions without checking mounted state",
                WARNING,
            ),
            ValidationCheck(
                all_of(_REACT_NATIVE, contains("console.log"), lacks("__DEV__")),
                "Remove console.log statements in production builds",
                SUGGESTION,
            ),
            ValidationCheck(
                all_of(_FLUTTER, matches(r"(?<![\w.])print\("), lacks("kDebugMode")),
                "Remove print statements in production builds",
                SUGGESTION,
            ),
            ValidationCheck(
                all_of(_REACT_NATIVE, contains("Dimensions.get"), lacks("useWindowDimensions")),
                "Use useWindowDimensions for responsive dimension handling",
                SUGGESTION,
            ),
            ValidationCheck(
                all_of(any_of(_REACT_NATIVE, _FLUTTER), lacks(*_SAFE_AREA)),
                "Consider safe area handling for modern devices",
                SUGGESTION,
            ),
        )

    async def get_best_practices(self, technology: str, context: Any = None) -> List[str]:
        insights = self.get_technology_insights(technology, context)
        practices = self.best_practices + platform_practices(technology) + insights.best_practices
        return list(dict.fromkeys(practices))

    # Post-processors

    def optimize_react_native(self, code: str, technology: str, style: CommentStyle) -> str:
        """Clip offscreen ScrollView children and memoize typed function components."""
        code = _SCROLL_VIEW.sub("<ScrollView removeClippedSubviews", code)
        if ": React.FC" in code and "React.memo" not in code:
            code = _DEFAULT_EXPORT.sub(r"export default React.memo(\1);", code, count=1)
        return code

    def optimize_flutter(self, code: str, technology: str, style: CommentStyle) -> str:
        """Make Text widgets built from string literals const."""
        if not _FLUTTER(code, technology):
            return code
        return _LITERAL_TEXT.sub(r"const Text(\1)", code)

    def add_mobile_notes(self, code: str, technology: str, style: CommentStyle) -> str:
        notes = []
        if "console.log(" in code and "__DEV__" not in code:
            notes.append("Performance: strip console.log calls from release builds")
        if (_REACT_NATIVE(code, technology) or _FLUTTER(code, technology)) and not any(
            marker in code for marker in _SAFE_AREA
        ):
            notes.append("UX: wrap screens in a safe area so content clears notches and system bars")
        return append_comment_block(code, notes, style) if notes else code
