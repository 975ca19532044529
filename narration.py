# -*- coding: utf-8 -*-
########################
# narration.py
########################
# Purpose:
# - Turn SessionController events into voice and bell output.
#
# Design notes:
# - Collaborators are narrow protocols so the console harness, tests, and a real TTS backend are interchangeable.
# - A combo is spoken once per sequence id, even when its moves repeat the previous combo.
# - Pausing stops speech immediately. Resuming never re-speaks the current combo.
#
########################
# Interfaces:
# Public protocols:
# - VoiceCoach: speak(phrase: str) -> None, stop() -> None
# - SoundEffects: play_bell() -> None
#
# Public functions:
# - code_to_spoken_word(code: str) -> str
# - build_spoken_phrase(codes: Sequence[str]) -> str
# - dispatch_events(events, *, narrator: ComboNarrator, sound_effects: Optional[SoundEffects]) -> None
#
# Public classes:
# - class ComboNarrator
#   - __init__(voice_coach: VoiceCoach)
#   - handle(event: SessionEvent) -> Optional[str]
#   - stop() -> None
#
########################

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Protocol, Sequence

from coach_models import BellRing, SessionEvent, SessionPhase, SessionSnapshot, SpeakCombo

logger = logging.getLogger(__name__)


NUMBER_WORDS: Dict[str, str] = {
    "1": "one",
    "2": "two",
    "3": "three",
    "4": "four",
    "5": "five",
    "6": "six",
    "7": "seven",
    "8": "eight",
    "9": "nine",
    "10": "ten",
    "11": "eleven",
    "12": "twelve",
    "13": "thirteen",
    "14": "fourteen",
}

PHRASE_SEPARATOR = ", "


class VoiceCoach(Protocol):
    def speak(self, phrase: str) -> None:
        ...

    def stop(self) -> None:
        ...


class SoundEffects(Protocol):
    def play_bell(self) -> None:
        ...


def code_to_spoken_word(code: str) -> str:
    text = str(code).strip()
    return NUMBER_WORDS.get(text, text)


def build_spoken_phrase(codes: Sequence[str]) -> str:
    return PHRASE_SEPARATOR.join(code_to_spoken_word(code) for code in codes)


class ComboNarrator:
    def __init__(self, voice_coach: VoiceCoach) -> None:
        self._voice_coach = voice_coach
        self._last_spoken_sequence_id: Optional[int] = None
        self._is_paused = False
        self._phase: Optional[SessionPhase] = None

    def handle(self, event: SessionEvent) -> Optional[str]:
        """Consume one controller event. Returns the spoken phrase, if any."""
        if isinstance(event, SessionSnapshot):
            self._observe_snapshot(event)
            return None
        if isinstance(event, SpeakCombo):
            return self._speak(event)
        return None

    def stop(self) -> None:
        self._voice_coach.stop()
        self._last_spoken_sequence_id = None
        self._is_paused = False
        self._phase = None

    def _observe_snapshot(self, snapshot: SessionSnapshot) -> None:
        if snapshot.is_paused and not self._is_paused:
            self._voice_coach.stop()
        self._is_paused = snapshot.is_paused
        self._phase = snapshot.phase

    def _speak(self, event: SpeakCombo) -> Optional[str]:
        if self._is_paused or self._phase == SessionPhase.COMPLETE:
            return None
        if event.sequence_id == self._last_spoken_sequence_id or not event.move_codes:
            return None

        phrase = build_spoken_phrase(event.move_codes)
        self._last_spoken_sequence_id = event.sequence_id
        logger.debug("Speaking combo #%d: %s", event.sequence_id, phrase)
        self._voice_coach.speak(phrase)
        return phrase


def dispatch_events(
    events: Iterable[SessionEvent],
    *,
    narrator: ComboNarrator,
    sound_effects: Optional[SoundEffects] = None,
) -> None:
    for event in events:
        if isinstance(event, BellRing):
            if sound_effects is not None:
                sound_effects.play_bell()
            continue
        narrator.handle(event)


def _run_unit_tests() -> None:
    class RecordingVoice:
        def __init__(self) -> None:
            self.spoken = []
            self.stops = 0

        def speak(self, phrase: str) -> None:
            self.spoken.append(phrase)

        def stop(self) -> None:
            self.stops += 1

    assert build_spoken_phrase(["1", "2", "A", "14"]) == "one, two, A, fourteen"

    voice = RecordingVoice()
    narrator = ComboNarrator(voice)
    narrator.handle(SpeakCombo(move_codes=("1", "1"), sequence_id=1))
    narrator.handle(SpeakCombo(move_codes=("1", "1"), sequence_id=1))
    narrator.handle(SpeakCombo(move_codes=("1", "1"), sequence_id=2))
    assert voice.spoken == ["one, one", "one, one"]


if __name__ == "__main__":
    _run_unit_tests()
    print("narration.py: ok")
