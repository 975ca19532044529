# -*- coding: utf-8 -*-
########################
# session_config.py
########################
# Purpose:
# - Immutable, validated configuration for one workout session.
# - Mode-specific factories for training, single-move drills, and Add to Arsenal sessions.
#
# Design notes:
# - Validated with pydantic at construction. Invalid configs never reach SessionController.
# - Frozen: a SessionConfig does not change for the life of a session.
# - Drill and Add to Arsenal sessions always run at medium intensity.
#
########################
# Interfaces:
# Public constants:
# - ACADEMY_REST_SECONDS = 60
# - DRILL_ROUND_SECONDS = 60
#
# Public functions:
# - arsenal_round_plan(academy_level: int) -> tuple[int, int]
#
# Public classes:
# - class SessionConfig(pydantic.BaseModel)
#   - training(...) -> SessionConfig
#   - drill(move_code: str, difficulty: Difficulty) -> SessionConfig
#   - add_to_arsenal(target_move_code: str, allowed_move_codes: Sequence[str], difficulty: Difficulty,
#                    academy_level: int) -> SessionConfig
#
# Inputs:
# - Caller-supplied session parameters (UI or config.TrainingConfig defaults).
#
# Outputs:
# - SessionConfig consumed by SessionController and ComboPhaseScheduler.
#
########################

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from coach_models import Difficulty, Intensity, SessionMode


ACADEMY_REST_SECONDS = 60
DRILL_ROUND_SECONDS = 60

MIN_ACADEMY_LEVEL = 1
MAX_ACADEMY_LEVEL = 12


def arsenal_round_plan(academy_level: int) -> Tuple[int, int]:
    """Return (rounds, round_duration_seconds) for an Add to Arsenal session."""
    level = int(academy_level)
    if level < MIN_ACADEMY_LEVEL or level > MAX_ACADEMY_LEVEL:
        raise ValueError(f"academy_level must be between {MIN_ACADEMY_LEVEL} and {MAX_ACADEMY_LEVEL}, got {level}")

    if level == 1:
        return (1, 120)
    if level == 2:
        return (2, 120)
    if level == 3:
        return (3, 120)
    if level <= 5:
        return (3, 180)
    if level <= 7:
        return (4, 180)
    return (5, 180)


class SessionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    rounds: int = Field(ge=1, description="Number of rounds in the session.")
    round_duration_seconds: int = Field(ge=1, description="Length of each round in seconds.")
    rest_duration_seconds: int = Field(default=0, ge=0, description="Rest between rounds in seconds.")
    difficulty: Difficulty = Field(default=Difficulty.BEGINNER)
    intensity: Intensity = Field(default=Intensity.MEDIUM)
    mode: SessionMode = Field(default=SessionMode.TRAINING)
    drill_move_code: Optional[str] = Field(default=None, description="Single move repeated in drill mode.")
    arsenal_target_move_code: Optional[str] = Field(default=None, description="Newly practiced move in arsenal mode.")
    allowed_move_codes: Optional[Tuple[str, ...]] = Field(
        default=None,
        description="Moves combos may use. None means the full catalog.",
    )

    @field_validator("drill_move_code", "arsenal_target_move_code")
    @classmethod
    def normalize_optional_code(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None

    @field_validator("allowed_move_codes")
    @classmethod
    def normalize_allowed_codes(cls, value: Optional[Tuple[str, ...]]) -> Optional[Tuple[str, ...]]:
        if value is None:
            return None
        normalized = []
        for code in value:
            text = str(code).strip()
            if text and text not in normalized:
                normalized.append(text)
        return tuple(normalized)

    @model_validator(mode="after")
    def validate_mode_fields(self) -> "SessionConfig":
        if self.mode == SessionMode.DRILL and self.drill_move_code is None:
            raise ValueError("drill mode requires drill_move_code")
        if self.mode == SessionMode.ADD_TO_ARSENAL:
            if self.arsenal_target_move_code is None:
                raise ValueError("add_to_arsenal mode requires arsenal_target_move_code")
            if not self.allowed_move_codes:
                raise ValueError("add_to_arsenal mode requires a non-empty allowed_move_codes")
        return self

    @property
    def total_seconds(self) -> int:
        return self.rounds * self.round_duration_seconds + (self.rounds - 1) * self.rest_duration_seconds

    @classmethod
    def training(
        cls,
        *,
        rounds: int,
        round_duration_seconds: int,
        rest_duration_seconds: int,
        difficulty: Difficulty,
        intensity: Intensity,
        allowed_move_codes: Optional[Sequence[str]] = None,
    ) -> "SessionConfig":
        return cls(
            rounds=rounds,
            round_duration_seconds=round_duration_seconds,
            rest_duration_seconds=rest_duration_seconds,
            difficulty=difficulty,
            intensity=intensity,
            mode=SessionMode.TRAINING,
            allowed_move_codes=tuple(allowed_move_codes) if allowed_move_codes is not None else None,
        )

    @classmethod
    def drill(cls, *, move_code: str, difficulty: Difficulty) -> "SessionConfig":
        return cls(
            rounds=1,
            round_duration_seconds=DRILL_ROUND_SECONDS,
            rest_duration_seconds=0,
            difficulty=difficulty,
            intensity=Intensity.MEDIUM,
            mode=SessionMode.DRILL,
            drill_move_code=move_code,
        )

    @classmethod
    def add_to_arsenal(
        cls,
        *,
        target_move_code: str,
        allowed_move_codes: Sequence[str],
        difficulty: Difficulty,
        academy_level: int,
    ) -> "SessionConfig":
        rounds, round_duration_seconds = arsenal_round_plan(academy_level)
        return cls(
            rounds=rounds,
            round_duration_seconds=round_duration_seconds,
            rest_duration_seconds=ACADEMY_REST_SECONDS,
            difficulty=difficulty,
            intensity=Intensity.MEDIUM,
            mode=SessionMode.ADD_TO_ARSENAL,
            arsenal_target_move_code=target_move_code,
            allowed_move_codes=tuple(allowed_move_codes),
        )
