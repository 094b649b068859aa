"""Exceptions raised for programmer errors.

A value failing a rule is never an exception; it is reported in the
``ValidationResult``. These exceptions signal a misconfigured rule set or
a malformed call into the engine.
"""

from __future__ import annotations


class ValidationEngineError(Exception):
    """Base class for all engine errors."""


class RuleConfigurationError(ValidationEngineError):
    """A rule object carries no usable match mechanism."""


class DuplicateRuleError(ValidationEngineError):
    """A rule id is already registered for the entity or the wildcard bucket."""

    def __init__(self, entity: str, rule_id: str, existing_entity: str) -> None:
        self.entity = entity
        self.rule_id = rule_id
        self.existing_entity = existing_entity
        super().__init__(
            f"Rule '{rule_id}' cannot be added to '{entity}': "
            f"already registered under '{existing_entity}'"
        )


class InvalidContextError(ValidationEngineError):
    """The caller's context does not fit the shape a rule declares."""

    def __init__(self, rule_id: str, detail: str) -> None:
        self.rule_id = rule_id
        self.detail = detail
        super().__init__(f"Invalid context for rule '{rule_id}': {detail}")


class RuleEvaluationError(ValidationEngineError):
    """A rule predicate raised instead of returning a boolean."""

    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule '{rule_id}' raised during evaluation")
