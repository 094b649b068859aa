"""Tests for the rule registry."""

from __future__ import annotations

import pytest

from schedcheck.validation.errors import DuplicateRuleError, RuleConfigurationError
from schedcheck.validation.models import (
    BaseRule,
    Category,
    PatternRule,
    PredicateRule,
    Severity,
)
from schedcheck.validation.registry import WILDCARD, RuleRegistry


def _rule(
    rule_id: str,
    category: Category = Category.business,
    message: str = "failed",
) -> PredicateRule:
    return PredicateRule(
        id=rule_id,
        predicate=lambda value, context: True,
        message=message,
        severity=Severity.error,
        category=category,
    )


def _ids(rules) -> list[str]:
    return [r.id for r in rules]


class TestAddAndLookup:
    def test_entity_rules_before_wildcard(self) -> None:
        registry = RuleRegistry()
        registry.add_rule(WILDCARD, _rule("w1"))
        registry.add_rule("call", _rule("c1"))
        registry.add_rule("call", _rule("c2"))
        registry.add_rule(WILDCARD, _rule("w2"))
        assert _ids(registry.get_entity_rules("call")) == ["c1", "c2", "w1", "w2"]

    def test_unknown_entity_gets_wildcard_only(self) -> None:
        registry = RuleRegistry()
        registry.add_rule(WILDCARD, _rule("w1"))
        registry.add_rule("call", _rule("c1"))
        assert _ids(registry.get_entity_rules("invoice")) == ["w1"]

    def test_wildcard_lookup_is_not_doubled(self) -> None:
        registry = RuleRegistry()
        registry.add_rule(WILDCARD, _rule("w1"))
        assert _ids(registry.get_entity_rules(WILDCARD)) == ["w1"]

    def test_rules_by_category(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("employee", _rule("fmt", Category.format))
        registry.add_rule("employee", _rule("biz", Category.business))
        registry.add_rule(WILDCARD, _rule("sec", Category.security))
        assert _ids(registry.get_rules_by_category("employee", Category.format)) == ["fmt"]
        assert _ids(registry.get_rules_by_category("employee", Category.security)) == ["sec"]
        assert registry.get_rules_by_category("employee", Category.performance) == []

    def test_get_rule(self) -> None:
        registry = RuleRegistry()
        registry.add_rule(WILDCARD, _rule("w1"))
        assert registry.get_rule("call", "w1") is not None
        assert registry.get_rule("call", "w1", include_wildcard=False) is None
        assert registry.get_rule("call", "missing") is None

    def test_len_and_contains(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("call", _rule("c1"))
        registry.add_rule(WILDCARD, _rule("w1"))
        assert len(registry) == 2
        assert "c1" in registry
        assert "nope" not in registry
        assert registry.entities() == ["call", WILDCARD]

    def test_returned_list_is_a_copy(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("call", _rule("c1"))
        rules = registry.get_entity_rules("call")
        rules.clear()
        assert _ids(registry.get_entity_rules("call")) == ["c1"]


class TestDuplicates:
    def test_duplicate_in_same_bucket_rejected(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("call", _rule("c1"))
        with pytest.raises(DuplicateRuleError) as exc_info:
            registry.add_rule("call", _rule("c1"))
        assert exc_info.value.existing_entity == "call"
        assert len(registry) == 1

    def test_duplicate_of_wildcard_rejected(self) -> None:
        registry = RuleRegistry()
        registry.add_rule(WILDCARD, _rule("shared"))
        with pytest.raises(DuplicateRuleError):
            registry.add_rule("employee", _rule("shared"))

    def test_wildcard_duplicate_of_entity_rule_rejected(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("employee", _rule("shared"))
        with pytest.raises(DuplicateRuleError) as exc_info:
            registry.add_rule(WILDCARD, _rule("shared"))
        assert exc_info.value.existing_entity == "employee"

    def test_same_id_in_unrelated_buckets_allowed(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("employee", _rule("notes"))
        registry.add_rule("call", _rule("notes"))
        assert len(registry) == 2

    def test_replace_keeps_position(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("call", _rule("c1"))
        registry.add_rule("call", _rule("c2"))
        registry.add_rule("call", _rule("c1", message="updated"), replace=True)
        rules = registry.get_entity_rules("call")
        assert _ids(rules) == ["c1", "c2"]
        assert rules[0].message == "updated"

    def test_replace_does_not_cross_buckets(self) -> None:
        registry = RuleRegistry()
        registry.add_rule(WILDCARD, _rule("shared"))
        with pytest.raises(DuplicateRuleError):
            registry.add_rule("call", _rule("shared"), replace=True)

    def test_replace_of_missing_rule_appends(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("call", _rule("c1"), replace=True)
        assert _ids(registry.get_entity_rules("call")) == ["c1"]


class TestConfiguration:
    def test_rule_without_mechanism_rejected(self) -> None:
        registry = RuleRegistry()
        bare = BaseRule(
            id="bare", message="m", severity=Severity.error, category=Category.format,
        )
        with pytest.raises(RuleConfigurationError):
            registry.add_rule("call", bare)
        assert len(registry) == 0

    def test_arbitrary_object_rejected(self) -> None:
        with pytest.raises(RuleConfigurationError):
            RuleRegistry().add_rule("call", {"id": "dict-rule"})


class TestRemove:
    def test_remove_first_match_only_from_entity(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("call", _rule("c1"))
        registry.add_rule("call", _rule("c2"))
        registry.remove_rule("call", "c1")
        assert _ids(registry.get_entity_rules("call")) == ["c2"]

    def test_remove_does_not_touch_wildcard(self) -> None:
        registry = RuleRegistry()
        registry.add_rule(WILDCARD, _rule("w1"))
        registry.remove_rule("call", "w1")
        assert _ids(registry.get_entity_rules("call")) == ["w1"]

    def test_remove_missing_is_noop(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("call", _rule("c1"))
        assert registry.remove_rule("call", "nope") is None
        assert registry.remove_rule("ghost", "c1") is None
        assert len(registry) == 1

    def test_removed_id_can_be_added_again(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("call", _rule("c1"))
        registry.remove_rule("call", "c1")
        registry.add_rule("call", _rule("c1"))
        assert _ids(registry.get_entity_rules("call")) == ["c1"]

    def test_snapshot_unaffected_by_later_removal(self) -> None:
        registry = RuleRegistry()
        registry.add_rule("call", _rule("c1"))
        snapshot = registry.get_entity_rules("call")
        registry.remove_rule("call", "c1")
        assert _ids(snapshot) == ["c1"]
        assert registry.get_entity_rules("call") == []


def test_pattern_and_predicate_rules_share_a_bucket() -> None:
    registry = RuleRegistry()
    registry.add_rule(
        "employee",
        PatternRule(
            id="p", pattern=r"x", message="m",
            severity=Severity.warning, category=Category.format,
        ),
    )
    registry.add_rule("employee", _rule("q"))
    assert [r.kind for r in registry.get_entity_rules("employee")] == ["pattern", "predicate"]
