"""
Rule engine for transition guards.

Rules are named zero-argument predicates. Transitions reference rules by
name and resolve them at evaluation time, so replacing a rule changes the
behaviour of every edge that uses it.
"""

from typing import Callable

from workflow_fsm.core.errors import RuleNotFoundError

# Type alias for guard predicates
Rule = Callable[[], bool]


class RuleEngine:
    """Registry of named guard predicates."""

    def __init__(self):
        self._rules: dict[str, Rule] = {}

    @property
    def rule_names(self) -> list[str]:
        """Names of all registered rules, in registration order."""
        return list(self._rules)

    def has_rule(self, name: str) -> bool:
        return name in self._rules

    def add_rule(self, name: str, rule: Rule) -> None:
        """Register a rule, replacing any existing rule with the same name."""
        self._rules[name] = rule

    def evaluate_rule(self, name: str) -> bool:
        """
        Evaluate a rule by name.

        Raises:
            RuleNotFoundError: If no rule is registered under ``name``
        """
        rule = self._rules.get(name)
        if rule is None:
            raise RuleNotFoundError(name)
        return bool(rule())
