"""Scheduling-conflict detection for calls.

Two active calls for the same employee conflict when their scheduled
times are strictly less than ``BUFFER_WINDOW`` apart. Exactly
``BUFFER_WINDOW`` apart is not a conflict.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Iterable

from schedcheck.validation.contexts import CallLike, OverlapContext
from schedcheck.validation.models import Category, PredicateRule, Severity
from schedcheck.validation.timestamps import as_aware, is_blank, parse_timestamp

logger = logging.getLogger(__name__)

BUFFER_WINDOW = timedelta(minutes=15)


def _within_buffer(a: datetime, b: datetime) -> bool:
    return abs(a - b) < BUFFER_WINDOW


def find_conflicting_calls(
    candidate: datetime,
    employee_id: str,
    existing_calls: Iterable[CallLike],
    call_id: str | None = None,
) -> list[CallLike]:
    """Return the existing calls that block ``candidate`` for ``employee_id``.

    Calls of other employees, the call being edited (``call_id``) and
    calls in a terminal status are skipped.
    """
    candidate = as_aware(candidate)
    conflicts: list[CallLike] = []
    for call in existing_calls:
        if call.employee_id != employee_id:
            continue
        if call_id and call.id == call_id:
            continue
        if not call.is_active:
            continue
        if _within_buffer(candidate, as_aware(call.scheduled_at)):
            conflicts.append(call)
    return conflicts


def check_no_overlap(value: Any, context: OverlapContext) -> bool:
    """Predicate for the ``no-overlap`` rule.

    Passes when the value or the context is incomplete; a conflict cannot
    be asserted without data.
    """
    if is_blank(value) or context.existing_calls is None or not context.employee_id:
        return True

    candidate = parse_timestamp(value)
    if candidate is None:
        return True

    conflicts = find_conflicting_calls(
        candidate, context.employee_id, context.existing_calls, context.call_id,
    )
    if conflicts:
        logger.debug(
            "Candidate %s for employee %s conflicts with %d call(s): %s",
            candidate.isoformat(),
            context.employee_id,
            len(conflicts),
            ", ".join(c.id for c in conflicts),
        )
    return not conflicts


def detect_conflict_groups(calls: Iterable[CallLike]) -> list[list[CallLike]]:
    """Group active calls that conflict with each other, per employee.

    Calls are scanned in schedule order; each group starts at the earliest
    unprocessed call and collects every active call of the same employee
    within the buffer of it. A call belongs to at most one group.
    """
    active = sorted(
        (c for c in calls if c.is_active),
        key=lambda c: as_aware(c.scheduled_at),
    )

    groups: list[list[CallLike]] = []
    processed: set[str] = set()

    for call in active:
        if call.id in processed:
            continue
        others = [
            c for c in active
            if c.id not in processed and c.id != call.id
        ]
        conflicting = find_conflicting_calls(
            call.scheduled_at, call.employee_id, others,
        )
        if conflicting:
            group = [call, *conflicting]
            groups.append(group)
            processed.update(c.id for c in group)

    logger.debug("Detected %d conflict group(s) across %d active call(s)", len(groups), len(active))
    return groups


def no_overlap_rule() -> PredicateRule:
    return PredicateRule(
        id="no-overlap",
        name="No Overlapping Calls",
        description="Prevents scheduling overlapping calls for the same employee",
        predicate=check_no_overlap,
        context_model=OverlapContext,
        message=(
            "Another call is already scheduled for this employee within "
            "15 minutes of this time"
        ),
        severity=Severity.error,
        category=Category.business,
        scope=frozenset({"scheduled_at"}),
    )
