"""Validation API — field and object checks for the form layer."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from schedcheck.deps import get_validation_engine
from schedcheck.validation.engine import ValidationEngine
from schedcheck.validation.errors import InvalidContextError, RuleEvaluationError
from schedcheck.validation.models import ValidationResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/validate", tags=["validate"])


class FieldValidationRequest(BaseModel):
    field: str
    value: Any = None
    context: dict[str, Any] | None = None


class ObjectValidationRequest(BaseModel):
    data: dict[str, Any] = Field(default_factory=dict)
    context: dict[str, Any] | None = None


@router.post("/{entity}/field", response_model=ValidationResult)
async def validate_field(
    entity: str,
    body: FieldValidationRequest,
    engine: ValidationEngine = Depends(get_validation_engine),
) -> ValidationResult:
    """Validate a single field value for ``entity``."""
    try:
        return engine.validate_field(entity, body.field, body.value, body.context)
    except InvalidContextError as exc:
        logger.warning("Rejected field validation for %s: %s", entity, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuleEvaluationError as exc:
        logger.exception("Field validation for %s failed", entity)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/{entity}", response_model=ValidationResult)
async def validate_object(
    entity: str,
    body: ObjectValidationRequest,
    engine: ValidationEngine = Depends(get_validation_engine),
) -> ValidationResult:
    """Validate every field of a submitted ``entity`` record."""
    try:
        return engine.validate_object(entity, body.data, body.context)
    except InvalidContextError as exc:
        logger.warning("Rejected object validation for %s: %s", entity, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuleEvaluationError as exc:
        logger.exception("Object validation for %s failed", entity)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
