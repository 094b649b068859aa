"""Rule registry mapping entity tags to ordered rule lists."""

from __future__ import annotations

import logging
import threading

from schedcheck.validation.errors import DuplicateRuleError, RuleConfigurationError
from schedcheck.validation.models import Category, PatternRule, PredicateRule, Rule

logger = logging.getLogger(__name__)

WILDCARD = "all"


class RuleRegistry:
    """Owns the rules for every entity bucket.

    Buckets are immutable tuples. Mutations build a replacement tuple under
    a lock and swap it in, so readers always see a consistent snapshot
    without locking.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, tuple[Rule, ...]] = {}
        self._lock = threading.Lock()

    def add_rule(self, entity: str, rule: Rule, *, replace: bool = False) -> None:
        """Append ``rule`` to ``entity``'s bucket.

        Raises DuplicateRuleError if the id is already visible to the
        bucket. With ``replace`` set, a rule with the same id in the same
        bucket is swapped in place and keeps its position.
        """
        if not isinstance(rule, (PatternRule, PredicateRule)):
            raise RuleConfigurationError(
                f"Rule {getattr(rule, 'id', rule)!r} has neither a pattern nor a predicate"
            )

        with self._lock:
            buckets = dict(self._buckets)
            owner = self._find_owner(buckets, entity, rule.id)

            if owner is not None and (not replace or owner != entity):
                raise DuplicateRuleError(entity, rule.id, owner)

            if owner is not None:
                buckets[owner] = tuple(
                    rule if r.id == rule.id else r for r in buckets[owner]
                )
                logger.info("Replaced rule '%s' in '%s'", rule.id, owner)
            else:
                buckets[entity] = buckets.get(entity, ()) + (rule,)
                logger.info("Added rule '%s' to '%s'", rule.id, entity)

            self._buckets = buckets

    def remove_rule(self, entity: str, rule_id: str) -> None:
        """Remove the first rule with ``rule_id`` from ``entity``'s bucket only."""
        with self._lock:
            rules = self._buckets.get(entity, ())
            for index, rule in enumerate(rules):
                if rule.id == rule_id:
                    buckets = dict(self._buckets)
                    buckets[entity] = rules[:index] + rules[index + 1:]
                    self._buckets = buckets
                    logger.info("Removed rule '%s' from '%s'", rule_id, entity)
                    return
        logger.debug("Rule '%s' not registered for '%s', nothing removed", rule_id, entity)

    def get_entity_rules(self, entity: str) -> list[Rule]:
        """Entity rules followed by wildcard rules.

        An unknown entity has no rules of its own, so only the wildcard
        bucket applies.
        """
        buckets = self._buckets
        if entity == WILDCARD:
            return list(buckets.get(WILDCARD, ()))
        return [*buckets.get(entity, ()), *buckets.get(WILDCARD, ())]

    def get_rules_by_category(self, entity: str, category: Category) -> list[Rule]:
        return [r for r in self.get_entity_rules(entity) if r.category == category]

    def get_rule(
        self, entity: str, rule_id: str, *, include_wildcard: bool = True,
    ) -> Rule | None:
        rules = self.get_entity_rules(entity) if include_wildcard else self._buckets.get(entity, ())
        for rule in rules:
            if rule.id == rule_id:
                return rule
        return None

    def entities(self) -> list[str]:
        return list(self._buckets)

    def __contains__(self, rule_id: object) -> bool:
        return any(
            r.id == rule_id for rules in self._buckets.values() for r in rules
        )

    def __len__(self) -> int:
        return sum(len(rules) for rules in self._buckets.values())

    @staticmethod
    def _find_owner(
        buckets: dict[str, tuple[Rule, ...]], entity: str, rule_id: str,
    ) -> str | None:
        """Return the bucket that already holds ``rule_id`` as seen from ``entity``."""
        if entity == WILDCARD:
            candidates = [WILDCARD, *(b for b in buckets if b != WILDCARD)]
        else:
            candidates = [entity, WILDCARD]
        for name in candidates:
            if any(r.id == rule_id for r in buckets.get(name, ())):
                return name
        return None
