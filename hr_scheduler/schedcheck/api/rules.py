"""Rules API — inspect the active rule set and switch rules off at runtime."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from schedcheck.deps import get_validation_engine
from schedcheck.validation.engine import ValidationEngine
from schedcheck.validation.models import Category, PatternRule, Polarity, Rule, Severity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rules", tags=["rules"])


class RuleSummary(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    message: str
    severity: Severity
    category: Category
    kind: Literal["pattern", "predicate"]
    polarity: Polarity | None = None
    scope: list[str] | None = None


def _summarize(rule: Rule) -> RuleSummary:
    return RuleSummary(
        id=rule.id,
        name=rule.name,
        description=rule.description,
        message=rule.message,
        severity=rule.severity,
        category=rule.category,
        kind=rule.kind,
        polarity=rule.polarity if isinstance(rule, PatternRule) else None,
        scope=sorted(rule.scope) if rule.scope is not None else None,
    )


@router.get("/{entity}", response_model=list[RuleSummary])
async def list_rules(
    entity: str,
    category: Category | None = None,
    engine: ValidationEngine = Depends(get_validation_engine),
) -> list[RuleSummary]:
    """Return the rules applied to ``entity``, wildcard rules last."""
    if category is not None:
        rules = engine.get_rules_by_category(entity, category)
    else:
        rules = engine.get_entity_rules(entity)
    return [_summarize(r) for r in rules]


@router.delete("/{entity}/{rule_id}", status_code=204)
async def remove_rule(
    entity: str,
    rule_id: str,
    engine: ValidationEngine = Depends(get_validation_engine),
) -> None:
    """Stop evaluating ``rule_id`` for ``entity`` until the next restart."""
    if engine.registry.get_rule(entity, rule_id, include_wildcard=False) is None:
        raise HTTPException(status_code=404, detail=f"Rule '{rule_id}' not found")
    engine.remove_rule(entity, rule_id)
    logger.info("Rule '%s' disabled for '%s' via API", rule_id, entity)
