"""
Unit tests for the rule engine.
"""

import pytest

from workflow_fsm.core.errors import RuleNotFoundError
from workflow_fsm.core.rules import RuleEngine


class TestRuleEngine:
    """Tests for named guard rules."""

    def test_add_and_evaluate_rule(self):
        rules = RuleEngine()
        rules.add_rule("testRule", lambda: True)

        assert rules.evaluate_rule("testRule") is True

    def test_unknown_rule_raises(self):
        rules = RuleEngine()

        with pytest.raises(RuleNotFoundError) as exc_info:
            rules.evaluate_rule("missing")

        assert exc_info.value.rule_name == "missing"
        assert "Rule missing not found" in str(exc_info.value)

    def test_add_rule_overwrites(self):
        rules = RuleEngine()
        rules.add_rule("flag", lambda: True)
        rules.add_rule("flag", lambda: False)

        assert rules.evaluate_rule("flag") is False

    def test_result_is_coerced_to_bool(self):
        rules = RuleEngine()
        rules.add_rule("truthy", lambda: "yes")
        rules.add_rule("falsy", lambda: 0)

        assert rules.evaluate_rule("truthy") is True
        assert rules.evaluate_rule("falsy") is False

    def test_predicate_evaluated_each_time(self):
        """Rules are not cached; each evaluation calls the predicate."""
        calls = []
        rules = RuleEngine()
        rules.add_rule("counted", lambda: calls.append(1) or True)

        rules.evaluate_rule("counted")
        rules.evaluate_rule("counted")

        assert len(calls) == 2

    def test_rule_names_and_has_rule(self):
        rules = RuleEngine()
        rules.add_rule("a", lambda: True)
        rules.add_rule("b", lambda: True)

        assert rules.rule_names == ["a", "b"]
        assert rules.has_rule("a")
        assert not rules.has_rule("c")
