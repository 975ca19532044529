import random
from collections import Counter

import pytest

from coach_models import Combo, Difficulty
from combo_generator import (
    DRILL_REPETITION_WEIGHTS,
    ComboGenerator,
    build_drill_combo,
    draw_drill_repetitions,
    limit_consecutive_repeats,
)
from move_catalog import Move, MoveCatalog, MoveCategory


def _max_run(codes) -> int:
    longest = 0
    run = 0
    last = None
    for code in codes:
        run = run + 1 if code == last else 1
        last = code
        longest = max(longest, run)
    return longest


def test_drill_repetition_distribution() -> None:
    generator = random.Random(2024)
    counts = Counter(draw_drill_repetitions(generator) for _ in range(10_000))
    for repetitions, probability in DRILL_REPETITION_WEIGHTS:
        assert abs(counts[repetitions] / 10_000 - probability) <= 0.03


def test_drill_combo_repeats_single_move() -> None:
    combo = build_drill_combo("A", difficulty=Difficulty.INTERMEDIATE, random_generator=random.Random(3))
    assert set(combo.move_codes) == {"A"}
    assert combo.name == "Drill Practice"
    assert combo.difficulty == Difficulty.INTERMEDIATE
    assert combo.sequence_id is None


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_generated_combos_are_never_empty_and_contain_a_punch(difficulty: Difficulty, rng: random.Random) -> None:
    generator = ComboGenerator(random_generator=rng)
    catalog = generator.catalog()
    for _ in range(300):
        combo = generator.generate_combo(difficulty=difficulty)
        assert combo.move_count >= 1
        assert any(catalog.require(code).category == MoveCategory.PUNCH for code in combo.move_codes)
        assert _max_run(combo.move_codes) <= 2


def test_allowed_codes_restrict_generation(rng: random.Random) -> None:
    generator = ComboGenerator(random_generator=rng)
    for _ in range(200):
        combo = generator.generate_combo(difficulty=Difficulty.ADVANCED, allowed_move_codes=["1", "2", "N"])
        assert set(combo.move_codes) <= {"1", "2", "N"}


def test_empty_allowed_pool_falls_back_to_default_punches(rng: random.Random) -> None:
    generator = ComboGenerator(random_generator=rng)
    combo = generator.generate_combo(difficulty=Difficulty.BEGINNER, allowed_move_codes=[])
    assert combo.move_codes == ("1", "2")


def test_pool_without_punches_uses_allowed_moves(rng: random.Random) -> None:
    generator = ComboGenerator(random_generator=rng)
    combo = generator.generate_combo(difficulty=Difficulty.BEGINNER, allowed_move_codes=["N", "O"])
    assert combo.move_codes
    assert set(combo.move_codes) <= {"N", "O"}


def test_previous_combo_is_avoided_when_pool_allows(rng: random.Random) -> None:
    generator = ComboGenerator(random_generator=rng)
    previous = None
    repeats = 0
    for _ in range(200):
        combo = generator.generate_combo(difficulty=Difficulty.INTERMEDIATE, previous_combo=previous)
        if combo.same_moves_as(previous):
            repeats += 1
        previous = combo
    assert repeats == 0


def test_single_move_pool_accepts_repeat(rng: random.Random) -> None:
    generator = ComboGenerator(random_generator=rng)
    previous = Combo(move_codes=("1",))
    combo = generator.generate_combo(
        difficulty=Difficulty.BEGINNER, previous_combo=previous, allowed_move_codes=["1"]
    )
    assert set(combo.move_codes) == {"1"}


@pytest.mark.parametrize("target", ["B", "3", "N", "F"])
def test_arsenal_combos_always_contain_target(target: str, rng: random.Random) -> None:
    generator = ComboGenerator(random_generator=rng)
    allowed = ["1", "2", "A", target]
    target_hits = 0
    for _ in range(200):
        combo = generator.generate_arsenal_combo(
            difficulty=Difficulty.INTERMEDIATE,
            target_move_code=target,
            allowed_move_codes=allowed,
        )
        assert target in combo.move_codes
        assert set(combo.move_codes) <= set(allowed)
        target_hits += combo.move_codes.count(target)
    assert target_hits >= 200


def test_custom_catalog_is_used(rng: random.Random) -> None:
    catalog = MoveCatalog([Move("1", "Jab", MoveCategory.PUNCH), Move("A", "Slip", MoveCategory.DEFENSE)])
    generator = ComboGenerator(catalog, random_generator=rng)
    for _ in range(50):
        combo = generator.generate_combo(difficulty=Difficulty.ADVANCED)
        assert set(combo.move_codes) <= {"1", "A"}


def test_limit_consecutive_repeats() -> None:
    assert limit_consecutive_repeats(["1", "1", "1", "1", "2", "2", "2"]) == ["1", "1", "2", "2"]
    assert limit_consecutive_repeats([]) == []
