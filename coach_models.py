# -*- coding: utf-8 -*-
########################
# coach_models.py
########################
# Purpose:
# - Core data models for the workout session pipeline.
# - Defines the session enums, the Combo value object, and the events emitted by SessionController.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No UI or audio usage. These are plain enums and dataclasses.
# - Enum values are lowercase strings so they survive JSON round trips through the config layer.
#
########################
# Interfaces:
# Public enums:
# - class Difficulty(enum.Enum): BEGINNER | INTERMEDIATE | ADVANCED
# - class Intensity(enum.Enum): LOW | MEDIUM | HIGH
# - class SessionMode(enum.Enum): TRAINING | DRILL | ADD_TO_ARSENAL
# - class SessionPhase(enum.Enum): ROUND | REST | COMPLETE
# - class ComboPhase(enum.Enum): IDLE | ANNOUNCE | EXECUTE | RECOVER
#
# Public dataclasses:
# - Combo(move_codes: tuple[str, ...], difficulty: Optional[Difficulty], name: Optional[str], sequence_id: Optional[int])
# - SessionSnapshot(phase, remaining_seconds, current_round, current_combo, combo_phase,
#                   combo_phase_remaining_seconds, is_paused)
# - SpeakCombo(move_codes: tuple[str, ...], sequence_id: int)
# - BellRing(reason: str)
# - SessionComplete(mode: SessionMode, auto_close_after_seconds: Optional[float])
# - DrillSessionResult(completed: bool)
# - ArsenalSessionResult(completed: bool)
#
# Inputs/Outputs:
# - These types are exchanged between ComboGenerator, ComboPhaseScheduler, SessionController,
#   ComboNarrator, and the console harness.
#
########################

from __future__ import annotations

from dataclasses import dataclass, replace
import enum
from typing import Optional, Tuple, Union


class Difficulty(enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Intensity(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SessionMode(enum.Enum):
    TRAINING = "training"
    DRILL = "drill"
    ADD_TO_ARSENAL = "add_to_arsenal"

    @property
    def is_academy(self) -> bool:
        return self in (SessionMode.DRILL, SessionMode.ADD_TO_ARSENAL)


class SessionPhase(enum.Enum):
    ROUND = "round"
    REST = "rest"
    COMPLETE = "complete"


class ComboPhase(enum.Enum):
    IDLE = "idle"
    ANNOUNCE = "announce"
    EXECUTE = "execute"
    RECOVER = "recover"


@dataclass(frozen=True)
class Combo:
    move_codes: Tuple[str, ...]
    difficulty: Optional[Difficulty] = None
    name: Optional[str] = None
    sequence_id: Optional[int] = None

    def __post_init__(self) -> None:
        codes = tuple(str(code) for code in self.move_codes)
        if not codes:
            raise ValueError("Combo.move_codes must not be empty")
        object.__setattr__(self, "move_codes", codes)

    @property
    def move_count(self) -> int:
        return len(self.move_codes)

    def with_sequence_id(self, sequence_id: int) -> "Combo":
        return replace(self, sequence_id=int(sequence_id))

    def same_moves_as(self, other: Optional["Combo"]) -> bool:
        if other is None:
            return False
        return self.move_codes == other.move_codes

    def __str__(self) -> str:
        codes_text = "-".join(self.move_codes)
        name_text = f' "{self.name}"' if self.name else ""
        difficulty_text = f" [{self.difficulty.label}]" if self.difficulty is not None else ""
        return f"Combo({codes_text}{name_text}{difficulty_text})"


@dataclass(frozen=True)
class SessionSnapshot:
    phase: SessionPhase
    remaining_seconds: int
    current_round: int
    current_combo: Optional[Combo]
    combo_phase: ComboPhase
    combo_phase_remaining_seconds: float
    is_paused: bool


@dataclass(frozen=True)
class SpeakCombo:
    move_codes: Tuple[str, ...]
    sequence_id: int


class BellReason:
    ROUND_START = "round_start"
    ROUND_END = "round_end"


@dataclass(frozen=True)
class BellRing:
    reason: str


@dataclass(frozen=True)
class SessionComplete:
    mode: SessionMode
    auto_close_after_seconds: Optional[float]


SessionEvent = Union[SessionSnapshot, SpeakCombo, BellRing, SessionComplete]


@dataclass(frozen=True)
class DrillSessionResult:
    completed: bool


@dataclass(frozen=True)
class ArsenalSessionResult:
    completed: bool


SessionResult = Union[DrillSessionResult, ArsenalSessionResult]
