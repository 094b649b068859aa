"""Runtime options for the validation service."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS_PATH = "/data/options.json"


class Settings(BaseModel):
    """Tunable limits for the built-in rules plus rule toggles."""

    disabled_rules: list[str] = Field(default_factory=list)
    text_length_limit: int = Field(default=5000, gt=0)
    min_note_words: int = Field(default=2, ge=1)
    working_hours_start: int = Field(default=8, ge=0, le=23)
    working_hours_end: int = Field(default=20, ge=1, le=24)
    enable_identity_rules: bool = False

    @field_validator("disabled_rules", mode="before")
    @classmethod
    def _split_csv(cls, value: object) -> object:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @model_validator(mode="after")
    def _check_working_hours(self) -> Settings:
        if self.working_hours_start >= self.working_hours_end:
            raise ValueError(
                f"working_hours_start ({self.working_hours_start}) must be earlier "
                f"than working_hours_end ({self.working_hours_end})"
            )
        return self


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default


def _env_bool(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Load options from ``SCHEDCHECK_OPTIONS_PATH`` or fall back to env vars."""
    opts_path = os.environ.get("SCHEDCHECK_OPTIONS_PATH", DEFAULT_OPTIONS_PATH)
    if Path(opts_path).exists():
        logger.info("Loading options from %s", opts_path)
        return Settings.model_validate(json.loads(Path(opts_path).read_text()))

    defaults = Settings()
    return Settings(
        disabled_rules=os.environ.get("SCHEDCHECK_DISABLED_RULES", ""),
        text_length_limit=_env_int("SCHEDCHECK_TEXT_LENGTH_LIMIT", defaults.text_length_limit),
        min_note_words=_env_int("SCHEDCHECK_MIN_NOTE_WORDS", defaults.min_note_words),
        working_hours_start=_env_int(
            "SCHEDCHECK_WORKING_HOURS_START", defaults.working_hours_start,
        ),
        working_hours_end=_env_int(
            "SCHEDCHECK_WORKING_HOURS_END", defaults.working_hours_end,
        ),
        enable_identity_rules=_env_bool("SCHEDCHECK_ENABLE_IDENTITY_RULES"),
    )
