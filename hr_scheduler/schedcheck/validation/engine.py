"""Validation engine — evaluates fields and objects against the registry."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from schedcheck.settings import Settings
from schedcheck.validation.builtin_rules import build_default_registry
from schedcheck.validation.errors import (
    InvalidContextError,
    RuleConfigurationError,
    RuleEvaluationError,
)
from schedcheck.validation.models import (
    Category,
    PatternRule,
    PredicateRule,
    Rule,
    ValidationMessage,
    ValidationResult,
)
from schedcheck.validation.registry import RuleRegistry
from schedcheck.validation.timestamps import Clock

logger = logging.getLogger(__name__)


class ValidationEngine:
    """Applies every rule registered for an entity to fields or whole objects.

    Each engine owns its registry, seeded with the built-in catalogue unless
    one is passed in, so separate engines never see each other's changes.
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        *,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        if registry is None:
            registry = build_default_registry(settings, clock)
        self._registry = registry

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    # -- registry delegation --

    def add_rule(self, entity: str, rule: Rule, *, replace: bool = False) -> None:
        self._registry.add_rule(entity, rule, replace=replace)

    def remove_rule(self, entity: str, rule_id: str) -> None:
        self._registry.remove_rule(entity, rule_id)

    def get_entity_rules(self, entity: str) -> list[Rule]:
        return self._registry.get_entity_rules(entity)

    def get_rules_by_category(self, entity: str, category: Category) -> list[Rule]:
        return self._registry.get_rules_by_category(entity, category)

    # -- evaluation --

    def validate_field(
        self,
        entity: str,
        field: str,
        value: Any,
        context: Mapping[str, Any] | BaseModel | None = None,
    ) -> ValidationResult:
        """Evaluate one field value against the entity and wildcard rules.

        Failing rules become messages in the bucket of their severity. Only
        misconfigured rules, malformed contexts or predicates that raise
        produce exceptions.
        """
        result = ValidationResult()

        for rule in self._registry.get_entity_rules(entity):
            if not rule.applies_to(field):
                continue
            if self._passes(rule, value, context):
                continue

            result.add(
                ValidationMessage(
                    rule_id=rule.id,
                    field=field,
                    message=rule.render_message(field, value),
                    severity=rule.severity,
                    category=rule.category,
                    value=value,
                )
            )

        if result.errors or result.warnings or result.info:
            logger.debug(
                "%s.%s: %d error(s), %d warning(s), %d info",
                entity,
                field,
                len(result.errors),
                len(result.warnings),
                len(result.info),
            )
        return result

    def validate_object(
        self,
        entity: str,
        data: Mapping[str, Any],
        context: Mapping[str, Any] | BaseModel | None = None,
    ) -> ValidationResult:
        """Validate every field of ``data`` in iteration order and aggregate."""
        result = ValidationResult()
        for field, value in data.items():
            result.extend(self.validate_field(entity, field, value, context))
        return result

    def _passes(
        self,
        rule: Rule,
        value: Any,
        context: Mapping[str, Any] | BaseModel | None,
    ) -> bool:
        if isinstance(rule, PatternRule):
            return rule.check(value)

        if isinstance(rule, PredicateRule):
            rule_context = _coerce_context(rule, context)
            try:
                return bool(rule.predicate(value, rule_context))
            except Exception as exc:
                raise RuleEvaluationError(rule.id) from exc

        raise RuleConfigurationError(
            f"Rule {getattr(rule, 'id', rule)!r} has neither a pattern nor a predicate"
        )


def _coerce_context(
    rule: PredicateRule,
    context: Mapping[str, Any] | BaseModel | None,
) -> Any:
    """Shape the caller's context into the model the rule declares."""
    model = rule.context_model
    if model is None:
        return context
    if isinstance(context, model):
        return context

    try:
        if context is None:
            return model()
        if isinstance(context, BaseModel):
            return model.model_validate(context.model_dump())
        if isinstance(context, Mapping):
            return model.model_validate(dict(context))
    except ValidationError as exc:
        raise InvalidContextError(rule.id, str(exc)) from exc

    raise InvalidContextError(
        rule.id, f"expected a mapping or {model.__name__}, got {type(context).__name__}",
    )
