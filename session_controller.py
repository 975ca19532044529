# -*- coding: utf-8 -*-
########################
# session_controller.py
########################
# Purpose:
# - Top-level workout state machine: round -> rest -> round -> ... -> complete.
# - Advances in one-second ticks and drives ComboPhaseScheduler while a round is active.
#
# Design notes:
# - Reducer style: start(), tick(), pause(), resume() return the events produced by that call.
#   The caller owns the timer and dispatches events to narration and sound collaborators.
# - Paused, completed, or ended sessions ignore tick().
# - Drill and Add to Arsenal sessions hold a GET_READY_SECONDS delay before the first combo of every
#   round, ring the bell at round start and round end, and request auto-close AUTO_CLOSE_DELAY_SECONDS
#   after completion.
# - All randomness flows through one random.Random owned by the controller, so sessions are
#   independent and reproducible from a seed.
#
########################
# Interfaces:
# Public constants:
# - GET_READY_SECONDS = 3
# - AUTO_CLOSE_DELAY_SECONDS = 1.5
#
# Public classes:
# - class SessionController
#   - __init__(config: SessionConfig, *, catalog: Optional[MoveCatalog] = None,
#              random_generator: Optional[random.Random] = None, seed: Optional[int] = None)
#   - config() -> SessionConfig
#   - snapshot() -> SessionSnapshot
#   - start() -> list[SessionEvent]
#   - tick() -> list[SessionEvent]
#   - pause() -> list[SessionEvent]
#   - resume() -> list[SessionEvent]
#   - toggle_pause() -> list[SessionEvent]
#   - end(completed: bool = False) -> Optional[SessionResult]
#
# Inputs:
# - One tick per second from an external timer.
#
# Outputs:
# - SessionSnapshot every tick, SpeakCombo once per sequence id, BellRing at academy round
#   boundaries, SessionComplete when the last round finishes.
#
########################

from __future__ import annotations

import logging
import random
from typing import List, Optional

from coach_models import (
    ArsenalSessionResult,
    BellReason,
    BellRing,
    Combo,
    ComboPhase,
    DrillSessionResult,
    SessionComplete,
    SessionEvent,
    SessionMode,
    SessionPhase,
    SessionResult,
    SessionSnapshot,
    SpeakCombo,
)
from combo_generator import ComboGenerator
from combo_scheduler import ComboPhaseScheduler
from move_catalog import MoveCatalog
from session_config import SessionConfig

logger = logging.getLogger(__name__)


GET_READY_SECONDS = 3
AUTO_CLOSE_DELAY_SECONDS = 1.5


class SessionController:
    def __init__(
        self,
        config: SessionConfig,
        *,
        catalog: Optional[MoveCatalog] = None,
        random_generator: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        if not isinstance(config, SessionConfig):
            raise TypeError(f"config must be a SessionConfig, got {type(config).__name__}")

        self._config = config
        self._random = random_generator if random_generator is not None else random.Random(seed)
        self._scheduler = ComboPhaseScheduler(
            config,
            combo_generator=ComboGenerator(catalog, random_generator=self._random),
            random_generator=self._random,
        )

        self._current_round = 1
        self._phase = SessionPhase.ROUND
        self._remaining_seconds = int(config.round_duration_seconds)
        self._is_paused = False
        self._get_ready_remaining_seconds = 0
        self._is_started = False
        self._is_ended = False

    def config(self) -> SessionConfig:
        return self._config

    @property
    def current_round(self) -> int:
        return self._current_round

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    @property
    def is_ended(self) -> bool:
        return self._is_ended

    @property
    def get_ready_remaining_seconds(self) -> int:
        return self._get_ready_remaining_seconds

    @property
    def current_combo(self) -> Optional[Combo]:
        return self._scheduler.current_combo()

    @property
    def previous_combo(self) -> Optional[Combo]:
        return self._scheduler.previous_combo()

    @property
    def combo_phase(self) -> ComboPhase:
        return self._scheduler.phase()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._phase,
            remaining_seconds=self._remaining_seconds,
            current_round=self._current_round,
            current_combo=self._scheduler.current_combo(),
            combo_phase=self._scheduler.phase(),
            combo_phase_remaining_seconds=self._scheduler.phase_remaining_seconds(),
            is_paused=self._is_paused,
        )

    def start(self) -> List[SessionEvent]:
        if self._is_started or self._is_ended:
            return []
        self._is_started = True
        logger.debug(
            "Session started: mode=%s rounds=%d round=%ds rest=%ds",
            self._config.mode.value,
            self._config.rounds,
            self._config.round_duration_seconds,
            self._config.rest_duration_seconds,
        )
        events = self._begin_round(1)
        events.append(self.snapshot())
        return events

    def tick(self) -> List[SessionEvent]:
        if self._is_ended or self._is_paused or self._phase == SessionPhase.COMPLETE:
            return []

        events: List[SessionEvent] = []
        if not self._is_started:
            events.extend(event for event in self.start() if not isinstance(event, SessionSnapshot))

        if self._remaining_seconds > 0:
            self._remaining_seconds -= 1

        if self._phase == SessionPhase.ROUND:
            events.extend(self._advance_round_second())

        if self._remaining_seconds == 0:
            events.extend(self._handle_phase_transition())

        events.append(self.snapshot())
        return events

    def pause(self) -> List[SessionEvent]:
        if self._is_ended or self._is_paused or self._phase == SessionPhase.COMPLETE:
            return []
        self._is_paused = True
        return [self.snapshot()]

    def resume(self) -> List[SessionEvent]:
        if self._is_ended or not self._is_paused:
            return []
        self._is_paused = False
        return [self.snapshot()]

    def toggle_pause(self) -> List[SessionEvent]:
        if self._is_paused:
            return self.resume()
        return self.pause()

    def end(self, completed: bool = False) -> Optional[SessionResult]:
        """Terminate the session and return the mode-specific result.

        Training sessions return None. Further ticks are ignored.
        """
        if not self._is_ended:
            self._is_ended = True
            self._get_ready_remaining_seconds = 0
            self._scheduler.clear(forget_previous=True)
            logger.debug("Session ended: completed=%s", completed)

        if self._config.mode == SessionMode.DRILL:
            return DrillSessionResult(completed=bool(completed))
        if self._config.mode == SessionMode.ADD_TO_ARSENAL:
            return ArsenalSessionResult(completed=bool(completed))
        return None

    def _advance_round_second(self) -> List[SessionEvent]:
        if self._get_ready_remaining_seconds > 0:
            self._get_ready_remaining_seconds -= 1
            if self._get_ready_remaining_seconds > 0:
                return []
            return self._start_combo()

        started = self._scheduler.advance(1.0, round_remaining_seconds=self._remaining_seconds)
        return [_speak(combo) for combo in started]

    def _handle_phase_transition(self) -> List[SessionEvent]:
        events: List[SessionEvent] = []

        if self._phase == SessionPhase.ROUND:
            self._scheduler.clear()
            self._get_ready_remaining_seconds = 0
            if self._config.mode.is_academy:
                events.append(BellRing(reason=BellReason.ROUND_END))

            if self._current_round < self._config.rounds:
                self._phase = SessionPhase.REST
                self._remaining_seconds = int(self._config.rest_duration_seconds)
                logger.debug("Round %d finished, resting %ds", self._current_round, self._remaining_seconds)
                if self._remaining_seconds == 0:
                    events.extend(self._begin_round(self._current_round + 1))
            else:
                self._phase = SessionPhase.COMPLETE
                auto_close = AUTO_CLOSE_DELAY_SECONDS if self._config.mode.is_academy else None
                events.append(SessionComplete(mode=self._config.mode, auto_close_after_seconds=auto_close))
                logger.debug("Session complete after %d rounds", self._current_round)

        elif self._phase == SessionPhase.REST:
            events.extend(self._begin_round(self._current_round + 1))

        return events

    def _begin_round(self, round_number: int) -> List[SessionEvent]:
        self._current_round = int(round_number)
        self._phase = SessionPhase.ROUND
        self._remaining_seconds = int(self._config.round_duration_seconds)
        logger.debug("Round %d of %d started", self._current_round, self._config.rounds)

        if self._config.mode.is_academy:
            self._get_ready_remaining_seconds = GET_READY_SECONDS
            return [BellRing(reason=BellReason.ROUND_START)]

        self._get_ready_remaining_seconds = 0
        return self._start_combo()

    def _start_combo(self) -> List[SessionEvent]:
        combo = self._scheduler.start_new_combo_if_eligible(round_remaining_seconds=self._remaining_seconds)
        if combo is None:
            return []
        return [_speak(combo)]


def _speak(combo: Combo) -> SpeakCombo:
    return SpeakCombo(move_codes=combo.move_codes, sequence_id=int(combo.sequence_id or 0))


def _run_unit_tests() -> None:
    from coach_models import Difficulty, Intensity

    config = SessionConfig.training(
        rounds=2,
        round_duration_seconds=10,
        rest_duration_seconds=5,
        difficulty=Difficulty.BEGINNER,
        intensity=Intensity.MEDIUM,
    )
    controller = SessionController(config, seed=5)
    controller.start()
    for _ in range(25):
        controller.tick()
    assert controller.phase == SessionPhase.COMPLETE
    assert controller.current_round == 2
    assert controller.tick() == []
    assert controller.end(completed=True) is None

    drill = SessionController(SessionConfig.drill(move_code="1", difficulty=Difficulty.BEGINNER), seed=5)
    opening = drill.start()
    assert BellRing(reason=BellReason.ROUND_START) in opening
    assert not any(isinstance(event, SpeakCombo) for event in opening)
    drill.tick()
    drill.tick()
    third = drill.tick()
    assert any(isinstance(event, SpeakCombo) for event in third)
    assert drill.end(completed=False) == DrillSessionResult(completed=False)


if __name__ == "__main__":
    _run_unit_tests()
    print("session_controller.py: ok")
