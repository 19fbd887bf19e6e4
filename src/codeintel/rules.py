"""
Rule management for codeintel.

Handles rule enable/disable policy from [tool.codeintel.rules] and filters
the declarative rule sets when engines are built.

codeintel/src/codeintel/rules.py
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from .dimensions.base import BaseRule

logger = logging.getLogger(__name__)

__all__ = ["RuleEngine", "create_default_rule_config"]

_OFF = "OFF"


class RuleEngine:
    """Manages rule configuration and policy decisions."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        """
        Initialize rule engine with configuration.

        Args:
            config: Settings mapping from [tool.codeintel] in pyproject.toml
        """
        self.config = config if config is not None else {}
        self._disabled: Set[str] = set()
        self._seen: Set[str] = set()
        self._load_rule_config()

    def _load_rule_config(self):
        """Load rule configuration from config."""
        rules_config = self.config.get("rules", {})
        if not isinstance(rules_config, Mapping):
            logger.warning("Configuration key 'rules' in [tool.codeintel] is not a table. Ignoring it.")
            return
        for rule_id, setting in rules_config.items():
            if isinstance(setting, bool):
                # Boolean: True=enabled, False=OFF
                if not setting:
                    self._disabled.add(rule_id)
            elif isinstance(setting, str):
                if setting.upper() == _OFF:
                    self._disabled.add(rule_id)
            else:
                logger.warning("Ignoring invalid setting %r for rule %s", setting, rule_id)

    @property
    def disabled_rules(self) -> List[str]:
        return sorted(self._disabled)

    def is_rule_enabled(self, rule_id: str) -> bool:
        """Check if a rule is enabled (not set to OFF)."""
        return rule_id not in self._disabled

    def filter_rules(self, rules: Iterable[BaseRule]) -> List[BaseRule]:
        """Keep the enabled rules of an ordered rule list, preserving order."""
        kept = []
        for rule in rules:
            self._seen.add(rule.rule_id)
            if self.is_rule_enabled(rule.rule_id):
                kept.append(rule)
            else:
                logger.debug("Rule %s disabled by configuration", rule.rule_id)
        return kept

    def get_rule_summary(self) -> Dict[str, Any]:
        """Get summary of rule configuration over the rules filtered so far."""
        disabled = self._seen & self._disabled
        return {
            "total_rules": len(self._seen),
            "enabled_rules": len(self._seen) - len(disabled),
            "disabled_rules": len(disabled),
            "overrides": len(self._disabled),
            "unknown_overrides": sorted(self._disabled - self._seen),
        }


def create_default_rule_config() -> Dict[str, Any]:
    """Create default rule configuration for new projects."""
    return {
        "default_category": "backend",
        "default_quality": "standard",
        "rules": {
            # Console output is normal in scripts and examples
            "FE-QUALITY-CONSOLE-LOG": "OFF",
        },
    }
