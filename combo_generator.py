# -*- coding: utf-8 -*-
########################
# combo_generator.py
########################
# Purpose:
# - Generate combos (ordered move code sequences) for training, drill, and Add to Arsenal sessions.
#
# Key Logic:
# - Training and arsenal combos fill a random category pattern picked per difficulty.
# - Arsenal picks weight the target move 6-10x inside its category, and the target is guaranteed
#   to appear in the finished combo.
# - Drill combos are a weighted repetition draw of one move (1x 70%, 2x 25%, 3x 5%).
# - Sanity rules: never empty, at least one punch when an allowed punch exists,
#   at most 2 identical moves in a row.
# - previous_combo is an anti-repeat hint only. After a few retries any valid combo is accepted.
#
########################
# Interfaces:
# Public constants:
# - DRILL_REPETITION_WEIGHTS: tuple[tuple[int, float], ...]
# - FALLBACK_CODES = ("1", "2")
#
# Public classes:
# - class ComboGenerator
#   - __init__(catalog: Optional[MoveCatalog] = None, *, random_generator: Optional[random.Random] = None)
#   - generate_combo(*, difficulty, previous_combo=None, allowed_move_codes=None) -> Combo
#   - generate_arsenal_combo(*, difficulty, target_move_code, allowed_move_codes, previous_combo=None) -> Combo
#
# Public functions:
# - draw_drill_repetitions(random_generator: random.Random) -> int
# - build_drill_combo(move_code: str, *, difficulty: Difficulty, random_generator: random.Random) -> Combo
#
# Inputs:
# - MoveCatalog for category lookups, an injected random.Random for reproducible draws.
#
# Outputs:
# - Combo objects without a sequence_id. ComboPhaseScheduler stamps the id.
#
########################

from __future__ import annotations

import logging
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from coach_models import Combo, Difficulty
from move_catalog import MoveCatalog, MoveCategory, default_catalog

logger = logging.getLogger(__name__)


DRILL_REPETITION_WEIGHTS: Tuple[Tuple[int, float], ...] = (
    (1, 0.70),
    (2, 0.25),
    (3, 0.05),
)

DRILL_COMBO_NAME = "Drill Practice"

FALLBACK_CODES: Tuple[str, ...] = ("1", "2")

MAX_CONSECUTIVE_REPEATS = 2
MAX_REPEAT_RETRIES = 5

ARSENAL_TARGET_WEIGHT_MIN = 6
ARSENAL_TARGET_WEIGHT_MAX = 10


_P = MoveCategory.PUNCH
_D = MoveCategory.DEFENSE
_F = MoveCategory.FOOTWORK

ComboPattern = Tuple[MoveCategory, ...]

# Duplicated entries are intentional: they weight the pick toward pure punch patterns.
_PATTERNS_BY_DIFFICULTY: Dict[Difficulty, Tuple[ComboPattern, ...]] = {
    Difficulty.BEGINNER: (
        (_P, _P),
        (_P, _P),
        (_P, _P, _P),
        (_P, _P, _D),
        (_P, _D),
    ),
    Difficulty.INTERMEDIATE: (
        (_P, _P, _D),
        (_P, _D, _P),
        (_D, _P, _P),
        (_P, _P, _D, _P),
        (_F, _P, _P),
        (_P, _P, _F),
        (_P, _P, _P, _D),
        (_F, _P, _P, _D),
        (_P, _P, _D, _P, _P),
    ),
    Difficulty.ADVANCED: (
        (_F, _P, _P, _D, _P),
        (_P, _D, _P, _P, _F),
        (_D, _P, _P, _D, _P),
        (_F, _P, _P, _D, _P, _P),
        (_P, _P, _D, _F, _P, _P),
        (_D, _F, _P, _P, _P, _D),
        (_F, _P, _D, _P, _P, _F, _P),
    ),
}


def patterns_for_difficulty(difficulty: Difficulty) -> Tuple[ComboPattern, ...]:
    return _PATTERNS_BY_DIFFICULTY[difficulty]


def draw_drill_repetitions(random_generator: random.Random) -> int:
    roll = random_generator.random()
    cumulative = 0.0
    for repetitions, probability in DRILL_REPETITION_WEIGHTS:
        cumulative += probability
        if roll < cumulative:
            return repetitions
    return DRILL_REPETITION_WEIGHTS[-1][0]


def build_drill_combo(move_code: str, *, difficulty: Difficulty, random_generator: random.Random) -> Combo:
    repetitions = draw_drill_repetitions(random_generator)
    return Combo(
        move_codes=tuple([str(move_code)] * repetitions),
        difficulty=difficulty,
        name=DRILL_COMBO_NAME,
    )


def limit_consecutive_repeats(codes: Sequence[str], max_repeats: int = MAX_CONSECUTIVE_REPEATS) -> List[str]:
    result: List[str] = []
    run_length = 0
    last_code: Optional[str] = None
    for code in codes:
        if code == last_code:
            run_length += 1
        else:
            last_code = code
            run_length = 1
        if run_length <= max_repeats:
            result.append(code)
    return result


class ComboGenerator:
    def __init__(
        self,
        catalog: Optional[MoveCatalog] = None,
        *,
        random_generator: Optional[random.Random] = None,
    ) -> None:
        self._catalog = catalog if catalog is not None else default_catalog()
        self._random = random_generator if random_generator is not None else random.Random()

    def catalog(self) -> MoveCatalog:
        return self._catalog

    def generate_combo(
        self,
        *,
        difficulty: Difficulty,
        previous_combo: Optional[Combo] = None,
        allowed_move_codes: Optional[Iterable[str]] = None,
    ) -> Combo:
        allowed = _normalize_allowed(allowed_move_codes)

        codes = self._ensure_valid_combo(self._fill_pattern(difficulty, allowed), allowed)
        attempts = 0
        while _repeats(codes, previous_combo) and attempts < MAX_REPEAT_RETRIES:
            codes = self._ensure_valid_combo(self._fill_pattern(difficulty, allowed), allowed)
            attempts += 1

        if _repeats(codes, previous_combo):
            logger.debug("Accepting repeat of previous combo %s; pool too small to vary", codes)

        logger.debug("generate_combo difficulty=%s codes=%s", difficulty.value, codes)
        return Combo(move_codes=tuple(codes), difficulty=difficulty)

    def generate_arsenal_combo(
        self,
        *,
        difficulty: Difficulty,
        target_move_code: str,
        allowed_move_codes: Iterable[str],
        previous_combo: Optional[Combo] = None,
    ) -> Combo:
        allowed = _normalize_allowed(allowed_move_codes) or []
        target_code = str(target_move_code)

        codes = self._build_arsenal_codes(difficulty, target_code, allowed)
        attempts = 0
        while _repeats(codes, previous_combo) and attempts < MAX_REPEAT_RETRIES:
            codes = self._build_arsenal_codes(difficulty, target_code, allowed)
            attempts += 1

        logger.debug("generate_arsenal_combo target=%s codes=%s", target_code, codes)
        return Combo(move_codes=tuple(codes), difficulty=difficulty)

    def _build_arsenal_codes(self, difficulty: Difficulty, target_code: str, allowed: List[str]) -> List[str]:
        pattern = self._select_pattern(difficulty)
        codes: List[str] = []
        for category in pattern:
            code = self._weighted_code_from_category(category, target_code=target_code, allowed=allowed)
            if code is not None:
                codes.append(code)

        codes = self._ensure_valid_combo(codes, allowed)
        if target_code not in codes:
            codes = self._insert_target(codes, target_code)
        return limit_consecutive_repeats(codes)

    def _insert_target(self, codes: List[str], target_code: str) -> List[str]:
        updated = list(codes)
        target_move = self._catalog.get(target_code)
        if target_move is not None and target_move.category == MoveCategory.PUNCH:
            punch_indices = [index for index, code in enumerate(updated) if self._is_punch(code)]
            if punch_indices:
                updated[self._random.choice(punch_indices)] = target_code
                return updated
            updated.append(target_code)
            return updated

        insert_index = self._random.randint(0, len(updated))
        updated.insert(insert_index, target_code)
        return updated

    def _select_pattern(self, difficulty: Difficulty) -> ComboPattern:
        return self._random.choice(patterns_for_difficulty(difficulty))

    def _fill_pattern(self, difficulty: Difficulty, allowed: Optional[List[str]]) -> List[str]:
        codes: List[str] = []
        for category in self._select_pattern(difficulty):
            code = self._random_code_from_category(category, allowed)
            if code is not None:
                codes.append(code)
        return codes

    def _category_codes(self, category: MoveCategory, allowed: Optional[List[str]]) -> List[str]:
        codes = [move.code for move in self._catalog.by_category(category)]
        if allowed is None:
            return codes
        allowed_set = set(allowed)
        return [code for code in codes if code in allowed_set]

    def _random_code_from_category(self, category: MoveCategory, allowed: Optional[List[str]]) -> Optional[str]:
        codes = self._category_codes(category, allowed)
        if not codes:
            return None
        return self._random.choice(codes)

    def _weighted_code_from_category(
        self,
        category: MoveCategory,
        *,
        target_code: str,
        allowed: List[str],
    ) -> Optional[str]:
        codes = self._category_codes(category, allowed)
        if not codes:
            return None

        target_weight = self._random.randint(ARSENAL_TARGET_WEIGHT_MIN, ARSENAL_TARGET_WEIGHT_MAX)
        weighted_pool: List[str] = []
        for code in codes:
            if code == target_code:
                weighted_pool.extend([code] * target_weight)
            else:
                weighted_pool.append(code)
        return self._random.choice(weighted_pool)

    def _is_punch(self, code: str) -> bool:
        move = self._catalog.get(code)
        return move is not None and move.category == MoveCategory.PUNCH

    def _ensure_valid_combo(self, codes: List[str], allowed: Optional[List[str]]) -> List[str]:
        if not codes:
            fallback = self._fallback_codes(allowed)
            logger.debug("Empty combo draw, falling back to %s", fallback)
            return fallback

        validated = list(codes)
        if not any(self._is_punch(code) for code in validated):
            punch_code = self._random_code_from_category(MoveCategory.PUNCH, allowed)
            if punch_code is not None:
                validated.insert(self._random.randint(0, len(validated)), punch_code)

        return limit_consecutive_repeats(validated)

    def _fallback_codes(self, allowed: Optional[List[str]]) -> List[str]:
        punches = self._category_codes(MoveCategory.PUNCH, allowed)
        if punches:
            if len(punches) == 1:
                return [punches[0]]
            return self._random.sample(punches, 2)

        if allowed:
            shuffled = list(allowed)
            self._random.shuffle(shuffled)
            return shuffled[:2]

        return list(FALLBACK_CODES)


def _normalize_allowed(allowed_move_codes: Optional[Iterable[str]]) -> Optional[List[str]]:
    if allowed_move_codes is None:
        return None
    return [str(code) for code in allowed_move_codes]


def _repeats(codes: Sequence[str], previous_combo: Optional[Combo]) -> bool:
    return Combo(move_codes=tuple(codes)).same_moves_as(previous_combo)


def _run_unit_tests() -> None:
    generator = ComboGenerator(random_generator=random.Random(7))
    catalog = generator.catalog()

    for difficulty in Difficulty:
        for _ in range(50):
            combo = generator.generate_combo(difficulty=difficulty)
            assert combo.move_codes
            assert any(catalog.require(code).category == MoveCategory.PUNCH for code in combo.move_codes)

    restricted = generator.generate_combo(difficulty=Difficulty.ADVANCED, allowed_move_codes=["1", "A"])
    assert set(restricted.move_codes) <= {"1", "A"}

    arsenal = generator.generate_arsenal_combo(
        difficulty=Difficulty.BEGINNER,
        target_move_code="B",
        allowed_move_codes=["1", "2", "B"],
    )
    assert "B" in arsenal.move_codes

    assert limit_consecutive_repeats(["1", "1", "1", "2"]) == ["1", "1", "2"]

    drill = build_drill_combo("3", difficulty=Difficulty.BEGINNER, random_generator=random.Random(1))
    assert set(drill.move_codes) == {"3"} and 1 <= drill.move_count <= 3


if __name__ == "__main__":
    _run_unit_tests()
    print("combo_generator.py: ok")
