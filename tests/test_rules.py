"""Tests for rules engine."""

import logging
from pathlib import Path
from typing import Iterator

from codeintel.config import Config
from codeintel.dimensions.base import BaseRule
from codeintel.rules import RuleEngine, create_default_rule_config
from codeintel.types import Finding


class DummyRule(BaseRule):
    """Dummy rule for testing."""

    def __init__(self, rule_id: str):
        self.rule_id = rule_id

    def detect(self, code: str, technology: str) -> Iterator[Finding]:
        """Dummy detection."""
        return iter([])


def test_rule_engine_initialization(sample_config: Config):
    """Test RuleEngine initialization."""
    engine = RuleEngine(sample_config)

    assert engine.config == sample_config
    assert engine.disabled_rules == ["BE-QUALITY-NO-LOGGING"]


def test_rule_engine_without_config():
    """Test that an engine without config enables everything."""
    engine = RuleEngine()

    assert engine.config == {}
    assert engine.disabled_rules == []


def test_rule_engine_default_enabled(sample_config: Config):
    """Test that rules are enabled by default."""
    engine = RuleEngine(sample_config)

    assert engine.is_rule_enabled("SOME-RULE")
    assert engine.is_rule_enabled("ANOTHER-RULE")


def test_rule_engine_disable_rule(temp_dir: Path):
    """Test disabling a rule via config."""
    config = Config(
        project_root=temp_dir,
        config_dict={
            "rules": {"DISABLED-RULE": "OFF", "LOWER-RULE": "off", "BOOL-RULE": False, "ON-RULE": True},
        },
    )

    engine = RuleEngine(config)

    assert not engine.is_rule_enabled("DISABLED-RULE")
    assert not engine.is_rule_enabled("LOWER-RULE")
    assert not engine.is_rule_enabled("BOOL-RULE")
    assert engine.is_rule_enabled("ON-RULE")
    assert engine.is_rule_enabled("ENABLED-RULE")


def test_rule_engine_accepts_plain_mapping():
    engine = RuleEngine({"rules": {"DISABLED-RULE": "OFF"}})

    assert not engine.is_rule_enabled("DISABLED-RULE")


def test_invalid_rule_settings_are_ignored(caplog):
    """Test that malformed settings warn instead of raising."""
    with caplog.at_level(logging.WARNING):
        engine = RuleEngine({"rules": {"NUMERIC-RULE": 3}})
        not_a_table = RuleEngine({"rules": ["OFF"]})

    assert engine.is_rule_enabled("NUMERIC-RULE")
    assert not_a_table.disabled_rules == []
    assert "NUMERIC-RULE" in caplog.text
    assert "not a table" in caplog.text


def test_filter_rules_preserves_order():
    """Test that filtering drops disabled rules and keeps the rest in order."""
    engine = RuleEngine({"rules": {"B": "OFF"}})
    rules = [DummyRule("A"), DummyRule("B"), DummyRule("C")]

    kept = engine.filter_rules(rules)

    assert [rule.rule_id for rule in kept] == ["A", "C"]


def test_rule_summary(temp_dir: Path):
    """Test rule summary counts over filtered rules."""
    config = Config(
        project_root=temp_dir,
        config_dict={"rules": {"B": "OFF", "TYPO-RULE": "OFF"}},
    )
    engine = RuleEngine(config)
    engine.filter_rules([DummyRule("A"), DummyRule("B"), DummyRule("C")])

    summary = engine.get_rule_summary()

    assert summary == {
        "total_rules": 3,
        "enabled_rules": 2,
        "disabled_rules": 1,
        "overrides": 2,
        "unknown_overrides": ["TYPO-RULE"],
    }


def test_default_rule_config():
    """Test the default configuration for new projects."""
    config = create_default_rule_config()

    assert config["default_category"] == "backend"
    assert config["default_quality"] == "standard"
    assert not RuleEngine(config).is_rule_enabled("FE-QUALITY-CONSOLE-LOG")
