# -*- coding: utf-8 -*-
########################
# exam_generator.py
########################
# Purpose:
# - Build code -> move name recognition questions for Academy exams.
#
# Key Logic:
# - Correct answers are drawn from a pool holding the target move 6 times and each unlocked move once.
# - After 3 consecutive target questions the next answer is forced from the unlocked moves.
# - Exactly two distractors: left/right counterpart first, then same category, then anything.
# - Options are shuffled; the correct name appears exactly once.
#
########################
# Interfaces:
# Public constants:
# - TARGET_WEIGHT = 6
# - MAX_CONSECUTIVE_TARGET_QUESTIONS = 3
# - UNKNOWN_MOVE_NAMES = ("Unknown Move A", "Unknown Move B")
#
# Public dataclasses:
# - ExamQuestion(code: str, correct_move_name: str, options: tuple[str, ...])
#
# Public classes:
# - class ExamQuestionGenerator
#   - __init__(random_generator: Optional[random.Random] = None)
#   - generate_questions(*, target_move: Move, unlocked_moves: Sequence[Move], question_count: int) -> list[ExamQuestion]
#
# Public functions:
# - find_counterpart(move: Move, candidates: Sequence[Move]) -> Optional[Move]
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import List, Optional, Sequence, Tuple

from move_catalog import Move

logger = logging.getLogger(__name__)


TARGET_WEIGHT = 6
MAX_CONSECUTIVE_TARGET_QUESTIONS = 3
DISTRACTOR_COUNT = 2
UNKNOWN_MOVE_NAMES: Tuple[str, ...] = ("Unknown Move A", "Unknown Move B")


@dataclass(frozen=True)
class ExamQuestion:
    code: str
    correct_move_name: str
    options: Tuple[str, ...]

    @property
    def correct_answer_index(self) -> int:
        return self.options.index(self.correct_move_name)

    def is_correct(self, option_index: Optional[int]) -> bool:
        if option_index is None:
            return False
        return 0 <= int(option_index) < len(self.options) and self.options[int(option_index)] == self.correct_move_name


def _side_neutral_name(name: str) -> str:
    return " ".join(name.lower().replace("left", " ").replace("right", " ").split())


def find_counterpart(move: Move, candidates: Sequence[Move]) -> Optional[Move]:
    """Return the mirrored move ("Slip left" -> "Slip right") if one is among candidates."""
    name_lower = move.name.lower()
    if "left" in name_lower:
        opposite = "right"
    elif "right" in name_lower:
        opposite = "left"
    else:
        return None

    base_name = _side_neutral_name(move.name)
    for candidate in candidates:
        if candidate.code == move.code:
            continue
        if opposite in candidate.name.lower() and _side_neutral_name(candidate.name) == base_name:
            return candidate
    return None


class ExamQuestionGenerator:
    def __init__(self, random_generator: Optional[random.Random] = None) -> None:
        self._random = random_generator if random_generator is not None else random.Random()

    def generate_questions(
        self,
        *,
        target_move: Move,
        unlocked_moves: Sequence[Move],
        question_count: int,
    ) -> List[ExamQuestion]:
        count = int(question_count)
        if count < 0:
            raise ValueError(f"question_count must be >= 0, got {count}")

        unlocked = [move for move in unlocked_moves if move.code != target_move.code]
        all_moves = [target_move] + unlocked

        questions: List[ExamQuestion] = []
        consecutive_target = 0
        for _ in range(count):
            correct_move = self._select_correct_move(target_move, unlocked, consecutive_target)
            if correct_move.code == target_move.code:
                consecutive_target += 1
            else:
                consecutive_target = 0

            options = [correct_move.name] + self._distractors(correct_move, all_moves)
            self._random.shuffle(options)
            questions.append(
                ExamQuestion(code=correct_move.code, correct_move_name=correct_move.name, options=tuple(options))
            )

        logger.debug("Generated %d exam questions for target %s", len(questions), target_move.code)
        return questions

    def _select_correct_move(self, target_move: Move, unlocked: List[Move], consecutive_target: int) -> Move:
        if consecutive_target >= MAX_CONSECUTIVE_TARGET_QUESTIONS and unlocked:
            return self._random.choice(unlocked)

        weighted_pool = [target_move] * TARGET_WEIGHT + unlocked
        return self._random.choice(weighted_pool)

    def _distractors(self, correct_move: Move, all_moves: List[Move]) -> List[str]:
        available = [move for move in all_moves if move.code != correct_move.code]
        if not available:
            logger.debug("No distractor candidates for %s; using placeholders", correct_move.code)
            return list(UNKNOWN_MOVE_NAMES)

        distractors: List[str] = []
        counterpart = find_counterpart(correct_move, available)
        if counterpart is not None:
            distractors.append(counterpart.name)

        same_category = [
            move
            for move in available
            if move.category == correct_move.category and move.name not in distractors
        ]
        self._fill_from(distractors, same_category)

        remaining = [move for move in available if move.name not in distractors]
        self._fill_from(distractors, remaining)

        while len(distractors) < DISTRACTOR_COUNT:
            # Fewer than two distinct candidates: repeat one.
            distractors.append(self._random.choice(available).name)

        return distractors[:DISTRACTOR_COUNT]

    def _fill_from(self, distractors: List[str], candidates: List[Move]) -> None:
        pool = list(candidates)
        while len(distractors) < DISTRACTOR_COUNT and pool:
            move = pool.pop(self._random.randrange(len(pool)))
            if move.name not in distractors:
                distractors.append(move.name)


def _run_unit_tests() -> None:
    from move_catalog import default_catalog

    catalog = default_catalog()
    generator = ExamQuestionGenerator(random.Random(4))
    target = catalog.require("A")
    unlocked = [catalog.require(code) for code in ("1", "2", "3", "B")]

    questions = generator.generate_questions(target_move=target, unlocked_moves=unlocked, question_count=60)
    assert len(questions) == 60
    run = 0
    for question in questions:
        assert len(question.options) == 3
        assert question.options.count(question.correct_move_name) == 1
        assert all(option for option in question.options)
        run = run + 1 if question.code == "A" else 0
        assert run <= MAX_CONSECUTIVE_TARGET_QUESTIONS
        if question.code == "A":
            assert "Slip right" in question.options

    lonely = generator.generate_questions(target_move=target, unlocked_moves=[], question_count=2)
    assert all(set(question.options) == {"Slip left", *UNKNOWN_MOVE_NAMES} for question in lonely)


if __name__ == "__main__":
    _run_unit_tests()
    print("exam_generator.py: ok")
