import random

import pytest

from coach_models import Combo, Difficulty, Intensity, SessionMode
from combo_timing import FastCadence, TrainingCadence, cadence_for_mode, clamp


def _combo(length: int) -> Combo:
    return Combo(move_codes=tuple(str(index % 14 + 1) for index in range(length)))


def test_cadence_table_by_mode() -> None:
    assert isinstance(cadence_for_mode(SessionMode.TRAINING), TrainingCadence)
    assert isinstance(cadence_for_mode(SessionMode.DRILL), FastCadence)
    assert isinstance(cadence_for_mode(SessionMode.ADD_TO_ARSENAL), FastCadence)


@pytest.mark.parametrize("length", [1, 2, 3, 4, 5])
def test_fast_cycle_stays_within_three_to_five_seconds(length: int) -> None:
    cadence = FastCadence()
    generator = random.Random(length)
    combo = _combo(length)
    for _ in range(1000):
        announce = cadence.announce_seconds(combo)
        execute = cadence.execute_seconds(combo, difficulty=Difficulty.BEGINNER, intensity=Intensity.MEDIUM)
        recover = cadence.recovery_seconds(
            combo, difficulty=Difficulty.BEGINNER, intensity=Intensity.MEDIUM, random_generator=generator
        )
        assert 0.6 <= recover <= 3.0
        assert 3.0 - 1e-9 <= announce + execute + recover <= 5.0 + 1e-9


def test_fast_phases_scale_with_combo_length() -> None:
    cadence = FastCadence()
    assert cadence.announce_seconds(_combo(2)) == pytest.approx(0.6)
    assert cadence.execute_seconds(_combo(2), difficulty=Difficulty.ADVANCED, intensity=Intensity.HIGH) == pytest.approx(0.8)


@pytest.mark.parametrize(
    ("difficulty", "intensity", "expected_execute"),
    [
        (Difficulty.BEGINNER, Intensity.MEDIUM, 6.0),
        (Difficulty.INTERMEDIATE, Intensity.MEDIUM, 6.0),
        (Difficulty.ADVANCED, Intensity.MEDIUM, 4.5),
        (Difficulty.BEGINNER, Intensity.LOW, 6.6),
        (Difficulty.ADVANCED, Intensity.HIGH, 4.05),
    ],
)
def test_training_execute_pace(difficulty: Difficulty, intensity: Intensity, expected_execute: float) -> None:
    cadence = TrainingCadence()
    assert cadence.execute_seconds(_combo(3), difficulty=difficulty, intensity=intensity) == pytest.approx(expected_execute)


@pytest.mark.parametrize(
    ("difficulty", "intensity", "expected_recovery"),
    [
        (Difficulty.BEGINNER, Intensity.LOW, 4.0),
        (Difficulty.INTERMEDIATE, Intensity.MEDIUM, 2.5),
        (Difficulty.BEGINNER, Intensity.HIGH, 1.5),
        (Difficulty.ADVANCED, Intensity.LOW, 3.25),
        (Difficulty.ADVANCED, Intensity.HIGH, 0.75),
    ],
)
def test_training_recovery(difficulty: Difficulty, intensity: Intensity, expected_recovery: float) -> None:
    cadence = TrainingCadence()
    recovery = cadence.recovery_seconds(
        _combo(2), difficulty=difficulty, intensity=intensity, random_generator=random.Random(0)
    )
    assert recovery == pytest.approx(expected_recovery)


def test_training_announce_grows_with_length() -> None:
    cadence = TrainingCadence()
    assert cadence.announce_seconds(_combo(1)) == pytest.approx(1.3)
    assert cadence.announce_seconds(_combo(4)) == pytest.approx(2.2)


def test_clamp() -> None:
    assert clamp(5.0, 0.6, 3.0) == 3.0
    assert clamp(0.1, 0.6, 3.0) == 0.6
    assert clamp(1.2, 0.6, 3.0) == 1.2
