from __future__ import annotations

import os
import random
from pathlib import Path
from typing import Iterator, List

import pytest

import config


class RecordingVoiceCoach:
    def __init__(self) -> None:
        self.spoken: List[str] = []
        self.stop_count = 0

    def speak(self, phrase: str) -> None:
        self.spoken.append(phrase)

    def stop(self) -> None:
        self.stop_count += 1


class RecordingBell:
    def __init__(self) -> None:
        self.rings = 0

    def play_bell(self) -> None:
        self.rings += 1


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def voice() -> RecordingVoiceCoach:
    return RecordingVoiceCoach()


@pytest.fixture
def bell() -> RecordingBell:
    return RecordingBell()


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point config discovery at an empty directory and strip SHADOW_COACH_* variables."""
    for name in list(os.environ):
        if name.startswith("SHADOW_COACH_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "_default_config_candidates", lambda: [tmp_path / "shadow_coach_config.json"])
    config.get_config.cache_clear()
    yield tmp_path
    config.get_config.cache_clear()
