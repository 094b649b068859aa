"""Standalone predicates for Italian identity and credential formats."""

from __future__ import annotations

import re

FISCAL_CODE_RE = re.compile(r"^[A-Z]{6}[0-9]{2}[A-Z][0-9]{2}[A-Z][0-9]{3}[A-Z]\Z")
VAT_NUMBER_RE = re.compile(r"^[0-9]{11}\Z")
IBAN_RE = re.compile(r"^IT[0-9]{2}[A-Z][0-9]{10}[A-Z0-9]{12}\Z")
ZIP_CODE_RE = re.compile(r"^[0-9]{5}\Z")
STRONG_PASSWORD_RE = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}\Z"
)


def is_fiscal_code(value: str) -> bool:
    """Codice fiscale shape: 6 letters, 2 digits, letter, 2 digits, letter, 3 digits, letter."""
    return bool(FISCAL_CODE_RE.match(value))


def is_vat_number(value: str) -> bool:
    """Partita IVA: 11 digits with a Luhn-style check digit."""
    if not VAT_NUMBER_RE.match(value):
        return False

    digits = [int(c) for c in value]
    total = 0
    for i, digit in enumerate(digits[:10]):
        weighted = digit * (1 if i % 2 == 0 else 2)
        if weighted > 9:
            weighted -= 9
        total += weighted
    return (10 - total % 10) % 10 == digits[10]


def is_iban(value: str) -> bool:
    """Italian IBAN shape; whitespace is ignored. The check digits are not verified."""
    return bool(IBAN_RE.match(re.sub(r"\s", "", value)))


def is_zip_code(value: str) -> bool:
    return bool(ZIP_CODE_RE.match(value))


def is_strong_password(value: str) -> bool:
    """At least 8 characters with lower, upper, digit and one of ``@$!%*?&``."""
    return bool(STRONG_PASSWORD_RE.match(value))
