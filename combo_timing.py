# -*- coding: utf-8 -*-
########################
# combo_timing.py
########################
# Purpose:
# - Single source of truth for combo phase durations (announce, execute, recover).
# - Two cadence families selected by session mode through CADENCE_BY_MODE.
#
# Design notes:
# - Pure and deterministic given the injected random.Random. No clocks.
# - Fast cadence (drill, add_to_arsenal) keeps announce and execute minimal and hits a randomized
#   3.0-5.0 s total cycle mostly through the recovery phase.
# - Training cadence pace per move: intermediate reuses the beginner pace and advanced reuses the
#   old intermediate pace. Keep this mapping as is.
#
########################
# Interfaces:
# Public classes:
# - class CadenceStrategy
#   - announce_seconds(combo: Combo) -> float
#   - execute_seconds(combo: Combo, *, difficulty: Difficulty, intensity: Intensity) -> float
#   - recovery_seconds(combo: Combo, *, difficulty: Difficulty, intensity: Intensity,
#                      random_generator: random.Random) -> float
# - class FastCadence(CadenceStrategy)
# - class TrainingCadence(CadenceStrategy)
#
# Public functions:
# - cadence_for_mode(mode: SessionMode) -> CadenceStrategy
# - clamp(value: float, lower: float, upper: float) -> float
#
# Inputs:
# - Active combo, SessionConfig difficulty/intensity/mode.
#
# Outputs:
# - Phase durations in seconds used by ComboPhaseScheduler.
#
########################

from __future__ import annotations

import random
from typing import Dict

from coach_models import Combo, Difficulty, Intensity, SessionMode


FAST_ANNOUNCE_BASE_SECONDS = 0.3
FAST_ANNOUNCE_PER_MOVE_SECONDS = 0.15
FAST_EXECUTE_PER_MOVE_SECONDS = 0.4
FAST_CYCLE_MIN_SECONDS = 3.0
FAST_CYCLE_MAX_SECONDS = 5.0
FAST_RECOVERY_MIN_SECONDS = 0.6
FAST_RECOVERY_MAX_SECONDS = 3.0

TRAINING_ANNOUNCE_BASE_SECONDS = 1.0
TRAINING_ANNOUNCE_PER_MOVE_SECONDS = 0.3

_TRAINING_SECONDS_PER_MOVE: Dict[Difficulty, float] = {
    Difficulty.BEGINNER: 2.0,
    Difficulty.INTERMEDIATE: 2.0,
    Difficulty.ADVANCED: 1.5,
}

_INTENSITY_PACE_MULTIPLIER: Dict[Intensity, float] = {
    Intensity.LOW: 1.1,
    Intensity.MEDIUM: 1.0,
    Intensity.HIGH: 0.9,
}

_BASE_RECOVERY_SECONDS: Dict[Intensity, float] = {
    Intensity.LOW: 4.0,
    Intensity.MEDIUM: 2.5,
    Intensity.HIGH: 1.5,
}

ADVANCED_RECOVERY_REDUCTION_SECONDS = 0.75
ADVANCED_RECOVERY_FLOOR_SECONDS = 0.5


def clamp(value: float, lower: float, upper: float) -> float:
    return float(max(lower, min(upper, value)))


class CadenceStrategy:
    name = "base"

    def announce_seconds(self, combo: Combo) -> float:
        raise NotImplementedError

    def execute_seconds(self, combo: Combo, *, difficulty: Difficulty, intensity: Intensity) -> float:
        raise NotImplementedError

    def recovery_seconds(
        self,
        combo: Combo,
        *,
        difficulty: Difficulty,
        intensity: Intensity,
        random_generator: random.Random,
    ) -> float:
        raise NotImplementedError


class FastCadence(CadenceStrategy):
    name = "fast"

    def announce_seconds(self, combo: Combo) -> float:
        return FAST_ANNOUNCE_BASE_SECONDS + FAST_ANNOUNCE_PER_MOVE_SECONDS * combo.move_count

    def execute_seconds(self, combo: Combo, *, difficulty: Difficulty, intensity: Intensity) -> float:
        return FAST_EXECUTE_PER_MOVE_SECONDS * combo.move_count

    def recovery_seconds(
        self,
        combo: Combo,
        *,
        difficulty: Difficulty,
        intensity: Intensity,
        random_generator: random.Random,
    ) -> float:
        target_cycle_seconds = random_generator.uniform(FAST_CYCLE_MIN_SECONDS, FAST_CYCLE_MAX_SECONDS)
        spent_seconds = self.announce_seconds(combo) + self.execute_seconds(
            combo, difficulty=difficulty, intensity=intensity
        )
        return clamp(target_cycle_seconds - spent_seconds, FAST_RECOVERY_MIN_SECONDS, FAST_RECOVERY_MAX_SECONDS)


class TrainingCadence(CadenceStrategy):
    name = "training"

    def announce_seconds(self, combo: Combo) -> float:
        return TRAINING_ANNOUNCE_BASE_SECONDS + TRAINING_ANNOUNCE_PER_MOVE_SECONDS * combo.move_count

    def execute_seconds(self, combo: Combo, *, difficulty: Difficulty, intensity: Intensity) -> float:
        seconds_per_move = _TRAINING_SECONDS_PER_MOVE[difficulty] * _INTENSITY_PACE_MULTIPLIER[intensity]
        return combo.move_count * seconds_per_move

    def recovery_seconds(
        self,
        combo: Combo,
        *,
        difficulty: Difficulty,
        intensity: Intensity,
        random_generator: random.Random,
    ) -> float:
        base_seconds = _BASE_RECOVERY_SECONDS[intensity]
        if difficulty == Difficulty.ADVANCED:
            return max(ADVANCED_RECOVERY_FLOOR_SECONDS, base_seconds - ADVANCED_RECOVERY_REDUCTION_SECONDS)
        return base_seconds


_FAST_CADENCE = FastCadence()
_TRAINING_CADENCE = TrainingCadence()

CADENCE_BY_MODE: Dict[SessionMode, CadenceStrategy] = {
    SessionMode.TRAINING: _TRAINING_CADENCE,
    SessionMode.DRILL: _FAST_CADENCE,
    SessionMode.ADD_TO_ARSENAL: _FAST_CADENCE,
}


def cadence_for_mode(mode: SessionMode) -> CadenceStrategy:
    return CADENCE_BY_MODE[mode]


def _run_unit_tests() -> None:
    combo = Combo(move_codes=("1", "2", "3"))

    training = cadence_for_mode(SessionMode.TRAINING)
    assert abs(training.announce_seconds(combo) - 1.9) < 1e-9
    assert abs(training.execute_seconds(combo, difficulty=Difficulty.ADVANCED, intensity=Intensity.HIGH) - 4.05) < 1e-9
    recovery = training.recovery_seconds(
        combo, difficulty=Difficulty.ADVANCED, intensity=Intensity.HIGH, random_generator=random.Random(0)
    )
    assert abs(recovery - 0.75) < 1e-9

    fast = cadence_for_mode(SessionMode.DRILL)
    random_generator = random.Random(3)
    for move_count in range(1, 6):
        sized = Combo(move_codes=tuple(["1"] * move_count))
        for _ in range(200):
            total = (
                fast.announce_seconds(sized)
                + fast.execute_seconds(sized, difficulty=Difficulty.BEGINNER, intensity=Intensity.MEDIUM)
                + fast.recovery_seconds(
                    sized, difficulty=Difficulty.BEGINNER, intensity=Intensity.MEDIUM, random_generator=random_generator
                )
            )
            assert FAST_CYCLE_MIN_SECONDS - 1e-9 <= total <= FAST_CYCLE_MAX_SECONDS + 1e-9


if __name__ == "__main__":
    _run_unit_tests()
    print("combo_timing.py: ok")
