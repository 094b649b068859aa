"""Rule-based validation and scheduling-conflict engine."""

from schedcheck.validation.contexts import (
    CallContext,
    CallLike,
    CallStatus,
    FutureDateContext,
    OverlapContext,
)
from schedcheck.validation.engine import ValidationEngine
from schedcheck.validation.errors import (
    DuplicateRuleError,
    InvalidContextError,
    RuleConfigurationError,
    RuleEvaluationError,
    ValidationEngineError,
)
from schedcheck.validation.models import (
    Category,
    PatternRule,
    Polarity,
    PredicateRule,
    Rule,
    Severity,
    ValidationMessage,
    ValidationResult,
)
from schedcheck.validation.registry import WILDCARD, RuleRegistry

__all__ = [
    "CallContext",
    "CallLike",
    "CallStatus",
    "Category",
    "DuplicateRuleError",
    "FutureDateContext",
    "InvalidContextError",
    "OverlapContext",
    "PatternRule",
    "Polarity",
    "PredicateRule",
    "Rule",
    "RuleConfigurationError",
    "RuleEvaluationError",
    "RuleRegistry",
    "Severity",
    "ValidationEngine",
    "ValidationEngineError",
    "ValidationMessage",
    "ValidationResult",
    "WILDCARD",
]
