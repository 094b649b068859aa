"""Typed context payloads for context-dependent rules.

Each context-aware rule declares one of these models as its
``context_model``; callers may pass the model itself, a combined model
such as ``CallContext``, or a plain mapping.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class CallStatus(str, Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"
    suspended = "suspended"
    rescheduled = "rescheduled"


# Terminal states never occupy a time slot
TERMINAL_STATUSES = frozenset({CallStatus.cancelled, CallStatus.completed})


class CallLike(BaseModel):
    """Minimal view of a stored call needed for conflict checks."""

    model_config = ConfigDict(extra="ignore")

    id: str
    employee_id: str
    scheduled_at: datetime
    status: CallStatus = CallStatus.scheduled
    duration: int | None = None

    @property
    def is_active(self) -> bool:
        return self.status not in TERMINAL_STATUSES


class FutureDateContext(BaseModel):
    model_config = ConfigDict(extra="ignore")

    allow_past: bool = False


class OverlapContext(BaseModel):
    """Context for the no-overlap rule.

    Missing ``employee_id`` or ``existing_calls`` makes the rule pass.
    """

    model_config = ConfigDict(extra="ignore")

    employee_id: str | None = None
    existing_calls: list[CallLike] | None = None
    call_id: str | None = None


class CallContext(FutureDateContext, OverlapContext):
    """Everything the built-in ``call`` rules may read, in one payload."""

    model_config = ConfigDict(extra="ignore")
