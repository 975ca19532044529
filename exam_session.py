# -*- coding: utf-8 -*-
########################
# exam_session.py
########################
# Purpose:
# - Run one Academy exam: per-question countdown, exam-wide countdown, scoring, pass/fail.
#
# Design notes:
# - No UI usage. Time only moves through tick(elapsed_seconds).
# - A timeout is answered as None and counts as wrong. It resets the current streak.
# - A tick longer than the question limit times out several questions. The overflow carries into the
#   next question countdown.
# - When the exam countdown runs out, every unanswered question counts as wrong, so accuracy is
#   always computed over the full question set.
# - ExamState mirrors the running counters shown to the user during the exam.
#
########################
# Interfaces:
# Public constants:
# - EXAM_TOTAL_SECONDS = 60.0
# - PASS_ACCURACY = 0.85
# - PASS_MIN_STREAK = 8
# - DEFAULT_SUB_TICK_SECONDS = 0.1
#
# Public exceptions:
# - class ExamFinishedError(RuntimeError)
#
# Public functions:
# - exam_passed(accuracy: float, longest_streak: int, *, pass_accuracy: float = PASS_ACCURACY,
#               min_streak: int = PASS_MIN_STREAK) -> bool
# - question_time_limit_for_level(academy_level: int) -> float
#
# Public dataclasses:
# - ExamSettings(total_seconds, question_time_limit_seconds, pass_accuracy, pass_min_streak)
#   - for_academy_level(academy_level: int, ...) -> ExamSettings
#   - question_count -> int
# - ExamState(correct_count, wrong_count, current_streak, longest_streak)
#   - apply_answer(correct: bool) -> None
# - AnswerFeedback(question, selected_index, correct, timed_out)
# - ExamResult(passed, correct_answers, total_questions, accuracy, longest_streak)
#
# Public classes:
# - class ExamSession
#   - __init__(questions: Sequence[ExamQuestion], settings: ExamSettings)
#   - answer(option_index: Optional[int]) -> AnswerFeedback
#   - tick(elapsed_seconds: float = DEFAULT_SUB_TICK_SECONDS) -> list[AnswerFeedback]
#   - finish() -> ExamResult
#   - result() -> ExamResult
#
# Inputs:
# - Questions from ExamQuestionGenerator, sub-ticks from the caller's timer.
#
# Outputs:
# - ExamResult consumed by the academy flow.
#
########################

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Sequence

from exam_generator import ExamQuestion

logger = logging.getLogger(__name__)


EXAM_TOTAL_SECONDS = 60.0
PASS_ACCURACY = 0.85
PASS_MIN_STREAK = 8
DEFAULT_SUB_TICK_SECONDS = 0.1

# Levels above this answer under a tighter clock.
FAST_QUESTION_FROM_LEVEL = 8
STANDARD_QUESTION_SECONDS = 2.0
FAST_QUESTION_SECONDS = 1.0

_TIME_EPSILON = 1e-9


class ExamFinishedError(RuntimeError):
    """Raised when an answer is submitted after the exam has finished."""


def exam_passed(
    accuracy: float,
    longest_streak: int,
    *,
    pass_accuracy: float = PASS_ACCURACY,
    min_streak: int = PASS_MIN_STREAK,
) -> bool:
    return float(accuracy) >= float(pass_accuracy) and int(longest_streak) >= int(min_streak)


def question_time_limit_for_level(academy_level: int) -> float:
    level = int(academy_level)
    if level < 1 or level > 12:
        raise ValueError(f"academy_level must be between 1 and 12, got {level}")
    if level >= FAST_QUESTION_FROM_LEVEL:
        return FAST_QUESTION_SECONDS
    return STANDARD_QUESTION_SECONDS


@dataclass(frozen=True)
class ExamSettings:
    total_seconds: float = EXAM_TOTAL_SECONDS
    question_time_limit_seconds: float = STANDARD_QUESTION_SECONDS
    pass_accuracy: float = PASS_ACCURACY
    pass_min_streak: int = PASS_MIN_STREAK

    def __post_init__(self) -> None:
        if self.total_seconds <= 0:
            raise ValueError("total_seconds must be > 0")
        if self.question_time_limit_seconds <= 0:
            raise ValueError("question_time_limit_seconds must be > 0")

    @classmethod
    def for_academy_level(
        cls,
        academy_level: int,
        *,
        total_seconds: float = EXAM_TOTAL_SECONDS,
        pass_accuracy: float = PASS_ACCURACY,
        pass_min_streak: int = PASS_MIN_STREAK,
    ) -> "ExamSettings":
        return cls(
            total_seconds=float(total_seconds),
            question_time_limit_seconds=question_time_limit_for_level(academy_level),
            pass_accuracy=float(pass_accuracy),
            pass_min_streak=int(pass_min_streak),
        )

    @property
    def question_count(self) -> int:
        return int(self.total_seconds // self.question_time_limit_seconds)


@dataclass
class ExamState:
    correct_count: int = 0
    wrong_count: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    @property
    def answered_count(self) -> int:
        return self.correct_count + self.wrong_count

    def apply_answer(self, correct: bool) -> None:
        if correct:
            self.correct_count += 1
            self.current_streak += 1
        else:
            self.wrong_count += 1
            self.current_streak = 0

        if self.current_streak > self.longest_streak:
            self.longest_streak = self.current_streak


@dataclass(frozen=True)
class AnswerFeedback:
    question: ExamQuestion
    selected_index: Optional[int]
    correct: bool
    timed_out: bool


@dataclass(frozen=True)
class ExamResult:
    passed: bool
    correct_answers: int
    total_questions: int
    accuracy: float
    longest_streak: int


class ExamSession:
    def __init__(self, questions: Sequence[ExamQuestion], settings: Optional[ExamSettings] = None) -> None:
        self._questions: List[ExamQuestion] = list(questions)
        self._settings = settings if settings is not None else ExamSettings()
        self._state = ExamState()
        self._index = 0
        self._question_remaining_seconds = float(self._settings.question_time_limit_seconds)
        self._exam_remaining_seconds = float(self._settings.total_seconds)
        self._is_finished = not self._questions

    def settings(self) -> ExamSettings:
        return self._settings

    def state(self) -> ExamState:
        return self._state

    @property
    def is_finished(self) -> bool:
        return self._is_finished

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Optional[ExamQuestion]:
        if self._is_finished or self._index >= len(self._questions):
            return None
        return self._questions[self._index]

    @property
    def question_remaining_seconds(self) -> float:
        return max(0.0, self._question_remaining_seconds)

    @property
    def exam_remaining_seconds(self) -> float:
        return max(0.0, self._exam_remaining_seconds)

    def answer(self, option_index: Optional[int]) -> AnswerFeedback:
        """Answer the current question. None records a timeout."""
        question = self.current_question
        if question is None:
            raise ExamFinishedError("exam is already finished")

        if option_index is not None and not 0 <= int(option_index) < len(question.options):
            raise ValueError(f"option_index out of range: {option_index}")

        correct = question.is_correct(option_index)
        self._state.apply_answer(correct)
        feedback = AnswerFeedback(
            question=question,
            selected_index=option_index,
            correct=correct,
            timed_out=option_index is None,
        )

        self._index += 1
        self._question_remaining_seconds = float(self._settings.question_time_limit_seconds)
        if self._index >= len(self._questions):
            self.finish()
        return feedback

    def tick(self, elapsed_seconds: float = DEFAULT_SUB_TICK_SECONDS) -> List[AnswerFeedback]:
        if self._is_finished:
            return []

        feedback: List[AnswerFeedback] = []
        self._question_remaining_seconds -= float(elapsed_seconds)
        while not self._is_finished and self._question_remaining_seconds <= _TIME_EPSILON:
            overflow_seconds = -self._question_remaining_seconds
            feedback.append(self.answer(None))
            self._question_remaining_seconds -= overflow_seconds

        self._exam_remaining_seconds -= float(elapsed_seconds)
        if not self._is_finished and self._exam_remaining_seconds <= _TIME_EPSILON:
            logger.debug("Exam timer expired at question %d of %d", self._index + 1, len(self._questions))
            self.finish()

        return feedback

    def finish(self) -> ExamResult:
        if not self._is_finished:
            unanswered = len(self._questions) - self._state.answered_count
            for _ in range(max(0, unanswered)):
                self._state.apply_answer(False)
            self._is_finished = True
            self._index = len(self._questions)
        return self.result()

    def result(self) -> ExamResult:
        total = len(self._questions)
        accuracy = self._state.correct_count / total if total else 0.0
        passed = total > 0 and exam_passed(
            accuracy,
            self._state.longest_streak,
            pass_accuracy=self._settings.pass_accuracy,
            min_streak=self._settings.pass_min_streak,
        )
        return ExamResult(
            passed=passed,
            correct_answers=self._state.correct_count,
            total_questions=total,
            accuracy=accuracy,
            longest_streak=self._state.longest_streak,
        )


def _run_unit_tests() -> None:
    assert not exam_passed(0.7, 8)
    assert not exam_passed(0.9, 5)
    assert exam_passed(0.9, 9)

    settings = ExamSettings.for_academy_level(3)
    assert settings.question_count == 30
    assert ExamSettings.for_academy_level(9).question_count == 60

    questions = [ExamQuestion(code="1", correct_move_name="Left straight", options=("Left straight", "Right straight", "Duck"))] * 10
    session = ExamSession(questions, ExamSettings(total_seconds=20.0, question_time_limit_seconds=2.0))
    for _ in range(9):
        assert session.answer(0).correct
    assert not session.answer(2).correct
    result = session.result()
    assert session.is_finished
    assert result.correct_answers == 9 and result.longest_streak == 9 and result.passed

    timed = ExamSession(questions, ExamSettings(total_seconds=20.0, question_time_limit_seconds=2.0))
    for _ in range(20):
        timed.tick(0.1)
    assert timed.current_index == 1
    assert timed.state().wrong_count == 1


if __name__ == "__main__":
    _run_unit_tests()
    print("exam_session.py: ok")
