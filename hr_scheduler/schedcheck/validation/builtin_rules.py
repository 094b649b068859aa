"""Built-in rule catalogue for employees, calls and every entity."""

from __future__ import annotations

import logging
import re
from functools import partial
from typing import Any, Callable

from schedcheck.settings import Settings
from schedcheck.validation.conflicts import no_overlap_rule
from schedcheck.validation.contexts import FutureDateContext
from schedcheck.validation.helpers import (
    is_fiscal_code,
    is_iban,
    is_vat_number,
    is_zip_code,
)
from schedcheck.validation.models import (
    Category,
    PatternRule,
    Polarity,
    PredicateRule,
    Rule,
    Severity,
)
from schedcheck.validation.registry import WILDCARD, RuleRegistry
from schedcheck.validation.timestamps import (
    Clock,
    as_aware,
    is_blank,
    parse_timestamp,
    utc_now,
)

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\Z")

# Italian mobile prefixes or landline area codes, optional +39
PHONE_RE = re.compile(
    r"^(\+39\s?)?((38[890])|(34[4-90])|(36[680])|(33[13-90])|(32[89])|(35[01]))(\d{7})\Z"
    r"|^(\+39\s?)?(0\d{1,4})(\s?\d{4,8})\Z"
)

# Unicode letters, whitespace, apostrophes and hyphens
NAME_RE = re.compile(r"^(?:[^\W\d_]|[\s'-]){2,50}\Z")

# Statement-shaped SQL only; a lone quote or keyword in prose is not a match.
# Quote breakouts need a trailing comment or a comparison after OR/AND.
SQL_INJECTION_RE = re.compile(
    r"([\"']\s*(--|#)\s*\Z)|([\"']\s*/\*)"
    r"|([\"']\s*\b(OR|AND)\b\s+\S+?\s*(=|<>|!=|<|>|\bLIKE\b))"
    r"|(;\s*(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|TRUNCATE)\b)"
    r"|(\bUNION\s+(ALL\s+)?SELECT\b)"
    r"|(\b(DROP|TRUNCATE|ALTER)\s+(TABLE|DATABASE|SCHEMA)\b)"
    r"|(\bINSERT\s+INTO\b)|(\bDELETE\s+FROM\b)"
    r"|(\b(OR|AND)\s+(\d+|'[^']*'|\"[^\"]*\")\s*=\s*(\d+|'[^']*'|\"[^\"]*\"))"
    r"|(/\*.*?\*/)|(--\s*\Z)",
    re.IGNORECASE | re.DOTALL,
)

XSS_RE = re.compile(
    r"(<script\b[^>]*>)|(<[^>]*\bon\w+\s*=)|(<[^>]*javascript:)",
    re.IGNORECASE | re.DOTALL,
)

MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 480


# -- predicates --


def check_notes_quality(value: Any, context: Any = None, *, min_words: int = 2) -> bool:
    if is_blank(value) or not isinstance(value, str):
        return True
    return len(value.split()) >= min_words


def check_duration(value: Any, context: Any = None) -> bool:
    """Whole minutes in [1, 480]; an omitted duration is accepted."""
    if is_blank(value):
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return False
    if isinstance(value, float):
        if not value.is_integer():
            return False
        value = int(value)
    if not isinstance(value, int):
        return False
    return MIN_DURATION_MINUTES <= value <= MAX_DURATION_MINUTES


def check_future_date(value: Any, context: FutureDateContext, *, clock: Clock) -> bool:
    """Scheduled time must not be earlier than now; equal to now is accepted."""
    if is_blank(value) or context.allow_past:
        return True
    moment = parse_timestamp(value)
    if moment is None:
        return False
    return moment >= as_aware(clock())


def check_working_hours(
    value: Any, context: Any = None, *, start_hour: int = 8, end_hour: int = 20,
) -> bool:
    """Monday to Friday, ``start_hour`` inclusive to ``end_hour`` exclusive, local time."""
    if is_blank(value):
        return True
    moment = parse_timestamp(value)
    if moment is None:
        return False
    local = moment.astimezone()
    return local.weekday() < 5 and start_hour <= local.hour < end_hour


def check_text_length(value: Any, context: Any = None, *, limit: int = 5000) -> bool:
    if not isinstance(value, str):
        return True
    return len(value) <= limit


def _optional_string(check: Callable[[str], bool]) -> Callable[[Any, Any], bool]:
    """Adapt a string helper into a predicate that skips blank or non-string values."""

    def predicate(value: Any, context: Any = None) -> bool:
        if is_blank(value) or not isinstance(value, str):
            return True
        return check(value.strip())

    return predicate


# -- catalogue --


def employee_rules() -> list[Rule]:
    return [
        PatternRule(
            id="email-format",
            name="Email Format",
            description="Validates email format",
            pattern=EMAIL_RE,
            polarity=Polarity.match_means_valid,
            message="Invalid email format. Use the form user@domain.com",
            severity=Severity.error,
            category=Category.format,
            scope=frozenset({"email"}),
        ),
        PatternRule(
            id="phone-format",
            name="Italian Phone Format",
            description="Validates Italian mobile and landline numbers",
            pattern=PHONE_RE,
            polarity=Polarity.match_means_valid,
            message="Invalid Italian phone number. Use +39 xxx xxx xxxx or 0xx xxx xxxx",
            severity=Severity.warning,
            category=Category.format,
            scope=frozenset({"phone"}),
        ),
        PatternRule(
            id="name-format",
            name="Name Format",
            description="Validates names contain only letters and common separators",
            pattern=NAME_RE,
            polarity=Polarity.match_means_valid,
            message=(
                "Names may only contain letters, spaces, apostrophes and "
                "hyphens (2-50 characters)"
            ),
            severity=Severity.error,
            category=Category.format,
            scope=frozenset({"first_name", "last_name", "name"}),
        ),
    ]


def call_rules(settings: Settings, clock: Clock) -> list[Rule]:
    return [
        PredicateRule(
            id="notes-quality",
            name="Notes Quality",
            description="Checks call notes are long enough to be meaningful",
            predicate=partial(check_notes_quality, min_words=settings.min_note_words),
            message=f"Notes should contain at least {settings.min_note_words} words",
            severity=Severity.info,
            category=Category.business,
            scope=frozenset({"notes"}),
        ),
        PredicateRule(
            id="duration-reasonable",
            name="Reasonable Duration",
            description="Validates call duration is within reasonable limits",
            predicate=check_duration,
            message=(
                f"Duration must be between {MIN_DURATION_MINUTES} minute and "
                f"8 hours ({MAX_DURATION_MINUTES} minutes)"
            ),
            severity=Severity.error,
            category=Category.business,
            scope=frozenset({"duration"}),
        ),
        PredicateRule(
            id="future-date",
            name="Future Date",
            description="Validates scheduled dates are not in the past",
            predicate=partial(check_future_date, clock=clock),
            context_model=FutureDateContext,
            message="The scheduled date cannot be in the past",
            severity=Severity.error,
            category=Category.business,
            scope=frozenset({"scheduled_at"}),
        ),
        PredicateRule(
            id="working-hours",
            name="Working Hours",
            description="Checks calls fall within working hours",
            predicate=partial(
                check_working_hours,
                start_hour=settings.working_hours_start,
                end_hour=settings.working_hours_end,
            ),
            message=(
                "Calls should be scheduled during working hours (Mon-Fri, "
                f"{settings.working_hours_start:02d}:00-{settings.working_hours_end:02d}:00)"
            ),
            severity=Severity.info,
            category=Category.business,
            scope=frozenset({"scheduled_at"}),
        ),
        no_overlap_rule(),
    ]


def global_rules(settings: Settings) -> list[Rule]:
    return [
        PatternRule(
            id="sql-injection",
            name="SQL Injection Prevention",
            description="Detects potential SQL injection patterns",
            pattern=SQL_INJECTION_RE,
            polarity=Polarity.match_means_invalid,
            message="Input contains potentially dangerous SQL fragments",
            severity=Severity.error,
            category=Category.security,
        ),
        PatternRule(
            id="xss-prevention",
            name="XSS Prevention",
            description="Detects inline scripts and event handler attributes",
            pattern=XSS_RE,
            polarity=Polarity.match_means_invalid,
            message="Input contains potentially dangerous script content",
            severity=Severity.error,
            category=Category.security,
        ),
        PredicateRule(
            id="text-length-limit",
            name="Text Length Limit",
            description="Keeps free text within a size that renders and stores cheaply",
            predicate=partial(check_text_length, limit=settings.text_length_limit),
            message=f"Text is too long (maximum {settings.text_length_limit} characters)",
            severity=Severity.warning,
            category=Category.performance,
        ),
    ]


def identity_rules() -> list[Rule]:
    """Optional Italian identity-document checks on employee records."""
    specs = [
        ("fiscal-code", "Fiscal Code", "fiscal_code", is_fiscal_code,
         "Invalid fiscal code (codice fiscale)"),
        ("vat-number", "VAT Number", "vat_number", is_vat_number,
         "Invalid VAT number (partita IVA)"),
        ("iban", "IBAN", "iban", is_iban, "Invalid Italian IBAN"),
        ("zip-code", "ZIP Code", "zip_code", is_zip_code,
         "ZIP code must be 5 digits"),
    ]
    return [
        PredicateRule(
            id=rule_id,
            name=name,
            description=f"Validates the {name} format",
            predicate=_optional_string(check),
            message=message,
            severity=Severity.warning,
            category=Category.format,
            scope=frozenset({field}),
        )
        for rule_id, name, field, check, message in specs
    ]


def build_default_registry(
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> RuleRegistry:
    """Create a registry seeded with the built-in catalogue.

    Rules listed in ``settings.disabled_rules`` are removed afterwards.
    """
    settings = settings or Settings()
    clock = clock or utc_now

    registry = RuleRegistry()
    for rule in employee_rules():
        registry.add_rule("employee", rule)
    if settings.enable_identity_rules:
        for rule in identity_rules():
            registry.add_rule("employee", rule)
    for rule in call_rules(settings, clock):
        registry.add_rule("call", rule)
    for rule in global_rules(settings):
        registry.add_rule(WILDCARD, rule)

    for rule_id in settings.disabled_rules:
        if rule_id not in registry:
            logger.warning("Cannot disable unknown rule '%s'", rule_id)
            continue
        for entity in registry.entities():
            registry.remove_rule(entity, rule_id)

    logger.info(
        "Rule registry ready: %d rule(s) across %s",
        len(registry),
        ", ".join(registry.entities()),
    )
    return registry
