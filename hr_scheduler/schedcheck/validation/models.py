"""Rule variants, validation messages and aggregated results."""

from __future__ import annotations

import re
from enum import Enum
from string import Template
from typing import Any, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Severity(str, Enum):
    """Severity of a rule. Only ``error`` blocks acceptance."""

    error = "error"
    warning = "warning"
    info = "info"


class Category(str, Enum):
    """Intent of a rule, used for grouping and reporting only."""

    format = "format"
    business = "business"
    security = "security"
    performance = "performance"


class Polarity(str, Enum):
    """Whether a pattern match means the value is valid or invalid."""

    match_means_valid = "match_means_valid"
    match_means_invalid = "match_means_invalid"


Predicate = Callable[[Any, Any], bool]


class BaseRule(BaseModel):
    """Fields shared by every rule variant.

    A bare ``BaseRule`` carries no match mechanism and is refused by the
    registry.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    name: str = ""
    description: str = ""
    message: str
    severity: Severity
    category: Category
    scope: frozenset[str] | None = None

    def applies_to(self, field: str) -> bool:
        return self.scope is None or field in self.scope

    def render_message(self, field: str, value: Any) -> str:
        """Substitute ``$field`` and ``$value`` in the message template."""
        return Template(self.message).safe_substitute(field=field, value=value)


class PatternRule(BaseRule):
    """Rule matched with a compiled regular expression against strings."""

    kind: Literal["pattern"] = "pattern"
    pattern: re.Pattern
    polarity: Polarity = Polarity.match_means_valid

    def check(self, value: Any) -> bool:
        if not isinstance(value, str):
            return True
        matched = self.pattern.search(value) is not None
        if self.polarity is Polarity.match_means_invalid:
            return not matched
        return matched


class PredicateRule(BaseRule):
    """Rule backed by a ``(value, context) -> bool`` callable.

    When ``context_model`` is set the engine coerces the caller's context
    into that model before invoking the predicate.
    """

    kind: Literal["predicate"] = "predicate"
    predicate: Predicate
    context_model: type[BaseModel] | None = None


Rule = Union[PatternRule, PredicateRule]


class ValidationMessage(BaseModel):
    """A single failed rule for a single field."""

    rule_id: str
    field: str
    message: str
    severity: Severity
    category: Category
    value: Any = None


class ValidationResult(BaseModel):
    """Messages produced by one validation call, grouped by severity."""

    errors: list[ValidationMessage] = Field(default_factory=list)
    warnings: list[ValidationMessage] = Field(default_factory=list)
    info: list[ValidationMessage] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def has_info(self) -> bool:
        return len(self.info) > 0

    @property
    def messages(self) -> list[ValidationMessage]:
        return [*self.errors, *self.warnings, *self.info]

    def messages_for(self, field: str) -> list[ValidationMessage]:
        return [m for m in self.messages if m.field == field]

    def add(self, message: ValidationMessage) -> None:
        """Place a message in the bucket matching its severity."""
        if message.severity is Severity.error:
            self.errors.append(message)
        elif message.severity is Severity.warning:
            self.warnings.append(message)
        else:
            self.info.append(message)

    def extend(self, other: ValidationResult) -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.info.extend(other.info)
