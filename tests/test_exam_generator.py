import random

import pytest

from exam_generator import UNKNOWN_MOVE_NAMES, ExamQuestionGenerator, find_counterpart
from move_catalog import Move, MoveCategory, default_catalog


@pytest.fixture
def catalog():
    return default_catalog()


def _moves(catalog, codes):
    return [catalog.require(code) for code in codes]


def test_every_question_has_three_options_with_correct_once(catalog, rng: random.Random) -> None:
    generator = ExamQuestionGenerator(rng)
    questions = generator.generate_questions(
        target_move=catalog.require("C"),
        unlocked_moves=_moves(catalog, ["1", "2", "3", "4", "A", "B", "N"]),
        question_count=200,
    )
    assert len(questions) == 200
    for question in questions:
        assert len(question.options) == 3
        assert question.options.count(question.correct_move_name) == 1
        assert all(option.strip() for option in question.options)
        assert question.options[question.correct_answer_index] == question.correct_move_name
        assert catalog.require(question.code).name == question.correct_move_name


def test_no_more_than_three_target_questions_in_a_row(catalog) -> None:
    generator = ExamQuestionGenerator(random.Random(77))
    questions = generator.generate_questions(
        target_move=catalog.require("E"),
        unlocked_moves=_moves(catalog, ["1", "2"]),
        question_count=500,
    )
    run = 0
    target_total = 0
    for question in questions:
        if question.code == "E":
            run += 1
            target_total += 1
        else:
            run = 0
        assert run <= 3
    assert target_total > 250


def test_only_target_when_nothing_unlocked(catalog, rng: random.Random) -> None:
    generator = ExamQuestionGenerator(rng)
    questions = generator.generate_questions(
        target_move=catalog.require("A"), unlocked_moves=[], question_count=10
    )
    assert all(question.code == "A" for question in questions)
    assert all(set(question.options) == {"Slip left", *UNKNOWN_MOVE_NAMES} for question in questions)


def test_slip_left_question_offers_slip_right(catalog, rng: random.Random) -> None:
    generator = ExamQuestionGenerator(rng)
    questions = generator.generate_questions(
        target_move=catalog.require("A"),
        unlocked_moves=_moves(catalog, ["B", "C", "D", "E", "1", "2"]),
        question_count=100,
    )
    slip_left = [question for question in questions if question.code == "A"]
    assert slip_left
    assert all("Slip right" in question.options for question in slip_left)


def test_distractors_prefer_same_category(catalog, rng: random.Random) -> None:
    generator = ExamQuestionGenerator(rng)
    questions = generator.generate_questions(
        target_move=catalog.require("E"),
        unlocked_moves=_moves(catalog, ["H", "M", "N", "O", "P"]),
        question_count=50,
    )
    defense_names = {move.name for move in catalog.defense()}
    for question in questions:
        if question.code == "E":
            assert set(question.options) <= defense_names


def test_duplicate_distractor_when_only_one_other_move(catalog, rng: random.Random) -> None:
    generator = ExamQuestionGenerator(rng)
    questions = generator.generate_questions(
        target_move=catalog.require("E"),
        unlocked_moves=_moves(catalog, ["1"]),
        question_count=20,
    )
    for question in questions:
        other = "Left straight" if question.code == "E" else "Duck"
        assert sorted(question.options) == sorted([question.correct_move_name, other, other])


def test_unlocked_list_containing_target_is_deduplicated(catalog, rng: random.Random) -> None:
    generator = ExamQuestionGenerator(rng)
    questions = generator.generate_questions(
        target_move=catalog.require("1"),
        unlocked_moves=_moves(catalog, ["1", "2"]),
        question_count=30,
    )
    for question in questions:
        assert question.options.count(question.correct_move_name) == 1


def test_zero_and_negative_question_counts(catalog, rng: random.Random) -> None:
    generator = ExamQuestionGenerator(rng)
    assert generator.generate_questions(target_move=catalog.require("1"), unlocked_moves=[], question_count=0) == []
    with pytest.raises(ValueError):
        generator.generate_questions(target_move=catalog.require("1"), unlocked_moves=[], question_count=-1)


@pytest.mark.parametrize(
    ("code", "expected"),
    [("A", "B"), ("B", "A"), ("R", "S"), ("1", "2"), ("G", "I"), ("J", "K"), ("E", None), ("11", None)],
)
def test_find_counterpart(catalog, code: str, expected) -> None:
    counterpart = find_counterpart(catalog.require(code), catalog.all_moves())
    assert (counterpart.code if counterpart is not None else None) == expected


def test_counterpart_requires_matching_base_name() -> None:
    slip_left = Move("A", "Slip left", MoveCategory.DEFENSE)
    pivot_right = Move("S", "Pivot right", MoveCategory.FOOTWORK)
    assert find_counterpart(slip_left, [pivot_right]) is None
