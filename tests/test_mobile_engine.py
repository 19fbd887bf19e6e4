"""Tests for the mobile category engine."""

import pytest

from codeintel.engines import MobileEngine
from codeintel.engines.mobile import PLATFORM_PRACTICES, platform_practices

MOBILE_DIMENSIONS = ("quality", "maintainability", "performance", "security", "accessibility")

LABELED_SCREEN = """import React from 'react';
import { FlatList, Pressable, SafeAreaView, Text } from 'react-native';

const Feed = ({ items }) => (
  <SafeAreaView>
    <FlatList
      data={items}
      renderItem={renderRow}
    />
    <Pressable accessibilityRole="button" accessibilityLabel="Refresh feed" onPress={reload}>
      <Text>Refresh</Text>
    </Pressable>
  </SafeAreaView>
);

export default React.memo(Feed);
"""

FLUTTER_TITLE = """import 'package:flutter/material.dart';

Widget title() => Text('Hi');
"""

CONSOLE_INSIGHT = {"insights": {"patterns": ["React Native anti-pattern: avoid console.log( in render"]}}


@pytest.mark.asyncio
async def test_analysis_covers_mobile_dimensions(mobile_engine, rn_screen):
    analysis = await mobile_engine.analyze_code(rn_screen, "React Native")

    assert tuple(result.dimension.name for result in analysis.dimensions()) == MOBILE_DIMENSIONS
    assert analysis.seo is None
    for result in analysis.dimensions():
        assert 0 <= result.score <= 100


@pytest.mark.asyncio
async def test_labels_raise_accessibility_score(mobile_engine, rn_screen):
    unlabeled = await mobile_engine.analyze_code(rn_screen, "React Native")
    labeled = await mobile_engine.analyze_code(LABELED_SCREEN, "React Native")

    assert "Touchable elements without accessibility labels" in unlabeled.accessibility.issues
    assert labeled.accessibility.score > unlabeled.accessibility.score
    assert labeled.performance.score > unlabeled.performance.score


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "technology, marker",
    [
        ("React Native", "<SafeAreaView"),
        ("Flutter", "if (!mounted) return;"),
        ("SwiftUI", "NavigationStack {"),
        ("Kotlin", "LazyColumn("),
    ],
)
async def test_generates_for_each_platform(mobile_engine, technology, marker):
    code = await mobile_engine.generate_code({"featureDescription": "Run tracker", "techStack": [technology]})

    assert code.startswith("//")
    assert marker in code


@pytest.mark.asyncio
@pytest.mark.parametrize("technology", ["React Native", "Flutter", "SwiftUI", "Kotlin"])
async def test_generated_screens_pass_validation(mobile_engine, technology):
    code = await mobile_engine.generate_code({"featureDescription": "Run tracker", "techStack": [technology]})

    result = await mobile_engine.validate_code(code, technology)

    assert result.valid, result.errors
    assert result.warnings == ()


@pytest.mark.asyncio
async def test_flutter_state_class_is_private(mobile_engine):
    code = await mobile_engine.generate_code({"featureDescription": "Run tracker", "techStack": ["Flutter"]})

    assert "class _RunTrackerScreenState extends State<RunTrackerScreen>" in code


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "technology, literal",
    [
        ("Kotlin", 'private const val FEATURE = "Price \\$tag \\"x\\""'),
        ("Flutter", 'const String kFeature = "Price \\$tag \\"x\\"";'),
        ("SwiftUI", 'private let feature = "Price $tag \\"x\\""'),
    ],
)
async def test_feature_text_is_escaped(mobile_engine, technology, literal):
    code = await mobile_engine.generate_code({"featureDescription": 'Price $tag "x"', "techStack": [technology]})

    assert literal in code


@pytest.mark.asyncio
async def test_validation_suggestions_for_react_native(mobile_engine, rn_screen):
    result = await mobile_engine.validate_code(rn_screen, "React Native")

    assert result.valid
    assert "Remove console.log statements in production builds" in result.suggestions
    assert "Consider safe area handling for modern devices" in result.suggestions


@pytest.mark.asyncio
async def test_embedded_api_key_is_an_error(mobile_engine):
    code = "const config = { apiKey: 'AIzaSyA1234567890abcdefghij' };\n"

    result = await mobile_engine.validate_code(code, "React Native")

    assert result.errors == ("API key embedded in the app bundle",)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "code, technology, warning",
    [
        ("fetch('http://api.example.com/items');\n", "React Native", "Cleartext HTTP traffic"),
        (
            "await AsyncStorage.setItem('token', token);\n",
            "React Native",
            "Sensitive data kept in unencrypted storage",
        ),
        (
            "import { View } from 'react-native';\nalert('Saved');\n",
            "React Native",
            "Use Alert.alert instead of browser alert() for mobile",
        ),
        (
            "import 'package:flutter/material.dart';\n"
            "Future<void> load() async {\n  final data = await fetchItems();\n  setState(() => items = data);\n}\n",
            "Flutter",
            "Avoid calling setState in async functions without checking mounted state",
        ),
    ],
)
async def test_validation_warnings(mobile_engine, code, technology, warning):
    result = await mobile_engine.validate_code(code, technology)

    assert warning in result.warnings


@pytest.mark.asyncio
async def test_optimize_react_native_screen(mobile_engine, rn_screen):
    optimized = await mobile_engine.optimize_code(rn_screen, "React Native")

    assert "<ScrollView removeClippedSubviews>" in optimized
    assert "</ScrollView>" in optimized
    assert "export default React.memo(Feed);" in optimized
    assert "// Performance: strip console.log calls from release builds" in optimized
    assert "// UX: wrap screens in a safe area so content clears notches and system bars" in optimized


@pytest.mark.asyncio
async def test_optimize_makes_literal_text_const(mobile_engine):
    optimized = await mobile_engine.optimize_code(FLUTTER_TITLE, "Flutter")

    assert "Widget title() => const Text('Hi');" in optimized
    assert "const const" not in optimized


@pytest.mark.asyncio
@pytest.mark.parametrize("code, technology", [(FLUTTER_TITLE, "Flutter"), (LABELED_SCREEN, "React Native")])
async def test_optimize_is_idempotent(mobile_engine, code, technology):
    once = await mobile_engine.optimize_code(code, technology)
    twice = await mobile_engine.optimize_code(once, technology)

    assert once == twice


@pytest.mark.asyncio
async def test_optimize_react_native_fixture_is_idempotent(mobile_engine, rn_screen):
    once = await mobile_engine.optimize_code(rn_screen, "React Native", CONSOLE_INSIGHT)
    twice = await mobile_engine.optimize_code(once, "React Native", CONSOLE_INSIGHT)

    assert once == twice
    assert once.index("Context7 insights:") > once.index("export default React.memo(Feed);")


@pytest.mark.asyncio
async def test_insight_text_does_not_trigger_post_processors(mobile_engine):
    code = await mobile_engine.generate_code(
        {"featureDescription": "Run tracker", "techStack": ["React Native"]}, CONSOLE_INSIGHT
    )

    assert "// - Avoid: React Native anti-pattern: avoid console.log( in render" in code
    assert "Performance: strip console.log" not in code
    assert await mobile_engine.optimize_code(code, "React Native", CONSOLE_INSIGHT) == code


@pytest.mark.asyncio
async def test_best_practices_order(mobile_engine):
    context = {"insights": {"patterns": ["Flutter best practice: give list items stable keys"]}}

    practices = await mobile_engine.get_best_practices("Flutter", context)

    flutter = list(platform_practices("Flutter"))
    assert practices == list(MobileEngine.best_practices) + flutter + [
        "Flutter best practice: give list items stable keys"
    ]


@pytest.mark.parametrize(
    "technology, first",
    [
        ("React Native", "Use Platform.OS for platform-specific code"),
        ("Expo", "Use Platform.OS for platform-specific code"),
        ("Dart", "Use const constructors for better performance"),
        ("iOS", "Follow Human Interface Guidelines"),
        ("Android", "Follow Material Design guidelines"),
    ],
)
def test_platform_practices(technology, first):
    assert platform_practices(technology)[0] == first


def test_unknown_platform_has_no_practices():
    assert platform_practices("Xamarin") == ()
    assert platform_practices(None) == ()
    assert len(PLATFORM_PRACTICES) == 4


def test_engine_introspection(mobile_engine):
    assert mobile_engine.dimensions == MOBILE_DIMENSIONS
    assert mobile_engine.category == "mobile"
    assert mobile_engine.technologies == ("flutter", "swift", "kotlin", "react-native")
