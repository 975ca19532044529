# -*- coding: utf-8 -*-
########################
# combo_scheduler.py
########################
# Purpose:
# - Own the lifecycle of the active combo: idle -> announce -> execute -> recover -> idle.
# - Request the next combo from the mode's combo source and stamp it with a session-scoped sequence id.
#
# Design notes:
# - Pure session logic. Time only moves through advance(elapsed_seconds).
# - Phase durations come from the CadenceStrategy selected by SessionConfig.mode.
# - When one advance crosses several phase boundaries, each transition is applied in order and the
#   overflow carries into the next phase. phase_remaining_seconds is never negative afterwards.
# - A new combo starts only while at least MIN_COMBO_BUFFER_SECONDS of the round remain.
# - clear() keeps the last spoken combo as previous_combo so the anti-repeat hint survives round
#   boundaries. Only clear(forget_previous=True) drops it.
#
########################
# Interfaces:
# Public constants:
# - MIN_COMBO_BUFFER_SECONDS = 1.0
#
# Public classes:
# - class ComboPhaseScheduler
#   - __init__(config: SessionConfig, *, combo_generator: ComboGenerator, random_generator: random.Random)
#   - phase() -> ComboPhase
#   - phase_remaining_seconds() -> float
#   - current_combo() -> Optional[Combo]
#   - previous_combo() -> Optional[Combo]
#   - last_sequence_id() -> int
#   - has_time_for_new_combo(round_remaining_seconds: float) -> bool
#   - start_new_combo_if_eligible(*, round_remaining_seconds: float) -> Optional[Combo]
#   - advance(elapsed_seconds: float, *, round_remaining_seconds: float) -> list[Combo]
#   - clear(*, forget_previous: bool = False) -> None
#
# Inputs:
# - Elapsed time and remaining round time from SessionController.
#
# Outputs:
# - Combos started during a call, so SessionController can emit one SpeakCombo per sequence id.
#
########################

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional

from coach_models import Combo, ComboPhase, Difficulty, SessionMode
from combo_generator import ComboGenerator, build_drill_combo
from combo_timing import cadence_for_mode
from session_config import SessionConfig

logger = logging.getLogger(__name__)


MIN_COMBO_BUFFER_SECONDS = 1.0


class ComboPhaseScheduler:
    def __init__(
        self,
        config: SessionConfig,
        *,
        combo_generator: ComboGenerator,
        random_generator: random.Random,
    ) -> None:
        self._config = config
        self._cadence = cadence_for_mode(config.mode)
        self._combo_generator = combo_generator
        self._random = random_generator
        self._sequence_counter = 0

        self._current_combo: Optional[Combo] = None
        self._previous_combo: Optional[Combo] = None
        self._phase = ComboPhase.IDLE
        self._phase_remaining_seconds = 0.0

        self._combo_sources: Dict[SessionMode, Callable[[], Combo]] = {
            SessionMode.TRAINING: self._training_combo,
            SessionMode.DRILL: self._drill_combo,
            SessionMode.ADD_TO_ARSENAL: self._arsenal_combo,
        }

    def phase(self) -> ComboPhase:
        return self._phase

    def phase_remaining_seconds(self) -> float:
        return float(self._phase_remaining_seconds)

    def current_combo(self) -> Optional[Combo]:
        return self._current_combo

    def previous_combo(self) -> Optional[Combo]:
        return self._previous_combo

    def last_sequence_id(self) -> int:
        return int(self._sequence_counter)

    def has_time_for_new_combo(self, round_remaining_seconds: float) -> bool:
        return float(round_remaining_seconds) >= MIN_COMBO_BUFFER_SECONDS

    def start_new_combo_if_eligible(self, *, round_remaining_seconds: float) -> Optional[Combo]:
        if not self.has_time_for_new_combo(round_remaining_seconds):
            self._set_idle()
            return None

        self._sequence_counter += 1
        combo = self._combo_sources[self._config.mode]().with_sequence_id(self._sequence_counter)

        self._current_combo = combo
        self._phase = ComboPhase.ANNOUNCE
        self._phase_remaining_seconds = self._cadence.announce_seconds(combo)
        logger.debug("Combo #%d started: %s", combo.sequence_id, combo)
        return combo

    def advance(self, elapsed_seconds: float, *, round_remaining_seconds: float) -> List[Combo]:
        started: List[Combo] = []
        if self._phase == ComboPhase.IDLE or self._current_combo is None:
            return started

        self._phase_remaining_seconds -= float(elapsed_seconds)
        while self._phase_remaining_seconds <= 0.0 and self._phase != ComboPhase.IDLE:
            overflow_seconds = -self._phase_remaining_seconds
            new_combo = self._transition(round_remaining_seconds=round_remaining_seconds)
            if new_combo is not None:
                started.append(new_combo)
            if self._phase == ComboPhase.IDLE:
                break
            self._phase_remaining_seconds -= overflow_seconds

        return started

    def clear(self, *, forget_previous: bool = False) -> None:
        # An interrupted combo was already spoken.
        if self._current_combo is not None:
            self._previous_combo = self._current_combo
        self._set_idle()
        if forget_previous:
            self._previous_combo = None

    def _transition(self, *, round_remaining_seconds: float) -> Optional[Combo]:
        combo = self._current_combo
        if combo is None:
            self._set_idle()
            return None

        if self._phase == ComboPhase.ANNOUNCE:
            self._phase = ComboPhase.EXECUTE
            self._phase_remaining_seconds = self._cadence.execute_seconds(
                combo,
                difficulty=self._config.difficulty,
                intensity=self._config.intensity,
            )
            return None

        if self._phase == ComboPhase.EXECUTE:
            self._phase = ComboPhase.RECOVER
            self._phase_remaining_seconds = self._cadence.recovery_seconds(
                combo,
                difficulty=self._config.difficulty,
                intensity=self._config.intensity,
                random_generator=self._random,
            )
            return None

        # RECOVER: cycle complete.
        self._previous_combo = combo
        self._set_idle()
        return self.start_new_combo_if_eligible(round_remaining_seconds=round_remaining_seconds)

    def _set_idle(self) -> None:
        self._current_combo = None
        self._phase = ComboPhase.IDLE
        self._phase_remaining_seconds = 0.0

    def _training_combo(self) -> Combo:
        return self._combo_generator.generate_combo(
            difficulty=self._config.difficulty,
            previous_combo=self._previous_combo,
            allowed_move_codes=self._config.allowed_move_codes,
        )

    def _drill_combo(self) -> Combo:
        return build_drill_combo(
            str(self._config.drill_move_code),
            difficulty=self._config.difficulty,
            random_generator=self._random,
        )

    def _arsenal_combo(self) -> Combo:
        return self._combo_generator.generate_arsenal_combo(
            difficulty=self._config.difficulty,
            target_move_code=str(self._config.arsenal_target_move_code),
            allowed_move_codes=self._config.allowed_move_codes or (),
            previous_combo=self._previous_combo,
        )


def _run_unit_tests() -> None:
    config = SessionConfig.drill(move_code="1", difficulty=Difficulty.BEGINNER)
    random_generator = random.Random(11)
    scheduler = ComboPhaseScheduler(
        config,
        combo_generator=ComboGenerator(random_generator=random_generator),
        random_generator=random_generator,
    )

    first = scheduler.start_new_combo_if_eligible(round_remaining_seconds=60.0)
    assert first is not None and first.sequence_id == 1
    assert scheduler.phase() == ComboPhase.ANNOUNCE

    started: List[Combo] = []
    for second in range(30):
        started.extend(scheduler.advance(1.0, round_remaining_seconds=59.0 - second))
        assert scheduler.phase_remaining_seconds() >= 0.0

    sequence_ids = [combo.sequence_id for combo in started]
    assert sequence_ids == list(range(2, 2 + len(started)))
    assert len(started) >= 5

    assert scheduler.start_new_combo_if_eligible(round_remaining_seconds=0.5) is None
    assert scheduler.phase() == ComboPhase.IDLE


if __name__ == "__main__":
    _run_unit_tests()
    print("combo_scheduler.py: ok")
