import pytest
from pydantic import ValidationError

from coach_models import Difficulty, Intensity, SessionMode
from session_config import SessionConfig, arsenal_round_plan


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        (1, (1, 120)),
        (2, (2, 120)),
        (3, (3, 120)),
        (4, (3, 180)),
        (5, (3, 180)),
        (6, (4, 180)),
        (7, (4, 180)),
        (8, (5, 180)),
        (12, (5, 180)),
    ],
)
def test_arsenal_round_plan(level: int, expected: tuple) -> None:
    assert arsenal_round_plan(level) == expected


@pytest.mark.parametrize("level", [0, 13, -1])
def test_arsenal_round_plan_rejects_unknown_levels(level: int) -> None:
    with pytest.raises(ValueError):
        arsenal_round_plan(level)


def test_drill_factory_defaults() -> None:
    config = SessionConfig.drill(move_code="3", difficulty=Difficulty.ADVANCED)
    assert config.mode == SessionMode.DRILL
    assert (config.rounds, config.round_duration_seconds, config.rest_duration_seconds) == (1, 60, 0)
    assert config.intensity == Intensity.MEDIUM
    assert config.drill_move_code == "3"


def test_add_to_arsenal_factory_uses_level_plan() -> None:
    config = SessionConfig.add_to_arsenal(
        target_move_code="B",
        allowed_move_codes=["1", "2", "B", "B"],
        difficulty=Difficulty.BEGINNER,
        academy_level=6,
    )
    assert config.mode == SessionMode.ADD_TO_ARSENAL
    assert (config.rounds, config.round_duration_seconds, config.rest_duration_seconds) == (4, 180, 60)
    assert config.allowed_move_codes == ("1", "2", "B")
    assert config.total_seconds == 4 * 180 + 3 * 60


def test_add_to_arsenal_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        SessionConfig.add_to_arsenal(
            target_move_code="B",
            allowed_move_codes=["B"],
            difficulty=Difficulty.BEGINNER,
            academy_level=13,
        )


def test_zero_rounds_is_a_validation_error() -> None:
    with pytest.raises(ValidationError):
        SessionConfig.training(
            rounds=0,
            round_duration_seconds=60,
            rest_duration_seconds=10,
            difficulty=Difficulty.BEGINNER,
            intensity=Intensity.LOW,
        )


def test_drill_mode_requires_a_move() -> None:
    with pytest.raises(ValidationError):
        SessionConfig(rounds=1, round_duration_seconds=60, mode=SessionMode.DRILL, drill_move_code="   ")


def test_arsenal_mode_requires_target_and_allowed_codes() -> None:
    with pytest.raises(ValidationError):
        SessionConfig(rounds=1, round_duration_seconds=60, mode=SessionMode.ADD_TO_ARSENAL, allowed_move_codes=("1",))
    with pytest.raises(ValidationError):
        SessionConfig(
            rounds=1,
            round_duration_seconds=60,
            mode=SessionMode.ADD_TO_ARSENAL,
            arsenal_target_move_code="B",
            allowed_move_codes=(),
        )


def test_config_is_frozen() -> None:
    config = SessionConfig(rounds=1, round_duration_seconds=30)
    with pytest.raises(ValidationError):
        config.rounds = 5
