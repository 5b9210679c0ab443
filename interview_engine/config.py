"""Configuration for the interview engine: question lineup, timing and runtime settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator

from .models import DRAFT_LIMIT, Difficulty, Question
from .questions import DEFAULT_QUESTIONS, DEFAULT_TIME_BUDGETS


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class InterviewConfig(BaseModel):
    """Question lineup and timing rules for one interview."""

    questions: tuple[Question, ...] = Field(default=DEFAULT_QUESTIONS, min_length=1)
    time_budgets: dict[Difficulty, int] = Field(
        default_factory=lambda: dict(DEFAULT_TIME_BUDGETS)
    )
    draft_limit: int = Field(default=DRAFT_LIMIT, ge=1, le=DRAFT_LIMIT)
    tick_interval_seconds: float = Field(default=1.0, gt=0.0)

    @model_validator(mode="after")
    def validate_budgets(self) -> "InterviewConfig":
        for difficulty, seconds in self.time_budgets.items():
            if seconds < 1:
                raise ValueError(
                    f"time_budgets[{difficulty.value}] must be at least 1 second"
                )
        missing = {q.difficulty for q in self.questions} - set(self.time_budgets)
        if missing:
            names = ", ".join(sorted(d.value for d in missing))
            raise ValueError(f"time_budgets is missing difficulties used by questions: {names}")
        return self

    model_config = {"extra": "forbid", "frozen": True}

    def budget_for(self, difficulty: Difficulty) -> int:
        """Seconds allowed for a question of the given difficulty."""
        return self.time_budgets[difficulty]


def load_interview_config(config_path: str | None = None) -> InterviewConfig:
    """
    Load interview config from an explicit path or INTERVIEW_CONFIG_PATH.

    Falls back to the default lineup when neither is set. A config file that
    is given but unreadable or invalid fails fast with RuntimeError.
    """
    raw_path = (config_path or os.environ.get("INTERVIEW_CONFIG_PATH") or "").strip()
    if not raw_path:
        return InterviewConfig()

    resolved_path = Path(raw_path).expanduser().resolve()
    if not resolved_path.exists():
        raise RuntimeError(
            f"Interview config file not found at '{resolved_path}'. "
            "Set INTERVIEW_CONFIG_PATH to a valid JSON file or unset it."
        )

    try:
        with open(resolved_path, "r", encoding="utf-8") as config_file:
            raw_config = json.load(config_file)
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read interview config '{resolved_path}': {exc}"
        ) from exc
    except json.JSONDecodeError as exc:
        raise RuntimeError(
            f"Interview config at '{resolved_path}' is not valid JSON: {exc}"
        ) from exc

    try:
        return InterviewConfig.model_validate(raw_config)
    except ValidationError as exc:
        raise RuntimeError(
            f"Interview config validation failed for '{resolved_path}': {exc}"
        ) from exc


@dataclass(frozen=True)
class RuntimeSettings:
    """Process-level settings for hosts embedding the engine."""

    data_dir: Path
    log_level: str


def load_runtime_settings(env_file: Path | None = None) -> RuntimeSettings:
    """Load runtime settings from the environment (and .env) with strict validation."""
    load_dotenv(env_file)

    data_dir_raw = (os.environ.get("INTERVIEW_DATA_DIR", "./data") or "").strip()
    if not data_dir_raw:
        raise RuntimeError("INTERVIEW_DATA_DIR resolved to empty value.")

    log_level = (os.environ.get("INTERVIEW_LOG_LEVEL", "INFO") or "").strip().upper()
    if log_level not in _VALID_LOG_LEVELS:
        raise RuntimeError(
            f"INTERVIEW_LOG_LEVEL must be one of {', '.join(_VALID_LOG_LEVELS)}. "
            f"Got: {log_level or '<empty>'}"
        )

    return RuntimeSettings(
        data_dir=Path(data_dir_raw).expanduser(),
        log_level=log_level,
    )


def configure_logging(level: str | None = None) -> None:
    """
    Apply the standard log format for processes hosting the engine.

    Args:
        level: Log level name. Defaults to INTERVIEW_LOG_LEVEL via
            load_runtime_settings().
    """
    if level is None:
        level = load_runtime_settings().log_level
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
