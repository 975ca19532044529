"""
shadow_coach.py

Console entrypoint for the shadow boxing coach. Runs workouts and Academy exams in the terminal.

Integration
- Loads config (training defaults, exam settings, optional seed)
- Builds a SessionConfig for the requested mode and drives SessionController one tick per second
- Routes controller events to a console voice coach and bell through ComboNarrator
- Runs exams interactively, or with simulated answers for unattended runs
- Fills in Academy target, unlocked codes and level from the learning path when they are not given

Examples
  python shadow_coach.py workout --rounds 2 --round-seconds 30 --rest-seconds 10 --seed 1
  python shadow_coach.py workout --mode drill --move 1 --realtime
  python shadow_coach.py workout --mode arsenal --target B --allowed 1,2,A --level 4
  python shadow_coach.py exam --target A --unlocked 1,2,3,B --level 2
  python shadow_coach.py exam --level 3
  python shadow_coach.py curriculum
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from typing import List, Optional, Sequence, Tuple

from coach_models import Difficulty, Intensity, SessionPhase, SessionSnapshot
from config import AppConfig, get_config
from exam_generator import ExamQuestionGenerator
from exam_session import ExamResult, ExamSession
from learning_path import LearningPath, default_learning_path
from move_catalog import MoveCatalog, default_catalog
from narration import ComboNarrator, dispatch_events
from session_config import SessionConfig
from session_controller import SessionController

logger = logging.getLogger("shadow_coach")


class ConsoleVoiceCoach:
    def speak(self, phrase: str) -> None:
        print(f"  COACH: {phrase}")

    def stop(self) -> None:
        print("  (voice stopped)")


class ConsoleBell:
    def play_bell(self) -> None:
        print("  *** DING ***")


def _split_codes(text: Optional[str]) -> Optional[List[str]]:
    if text is None:
        return None
    codes = [part.strip() for part in text.split(",")]
    return [code for code in codes if code]


def _format_clock(seconds: int) -> str:
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def _resolve_learning_target(
    target: Optional[str],
    level: Optional[int],
    path: Optional[LearningPath] = None,
) -> Tuple[str, int, List[str]]:
    """Target code, Academy level and previously unlocked codes, defaulted from the learning path."""
    path = path if path is not None else default_learning_path()
    if target:
        learning_move = path.move_for_code(target)
    else:
        learning_move = path.move_for_level(level if level is not None else 1)
        if learning_move is None:
            raise ValueError(f"no learning move is taught at level {level}; pass --target")

    target_code = target if target else learning_move.move_codes[0]
    if level is not None:
        academy_level = level
    else:
        academy_level = learning_move.level if learning_move is not None else 1
    unlocked_codes = path.unlocked_codes_before(learning_move.move_id) if learning_move is not None else []
    return target_code, academy_level, unlocked_codes


def _build_session_config(parsed_args: argparse.Namespace, app_config: AppConfig) -> SessionConfig:
    difficulty = Difficulty(parsed_args.difficulty) if parsed_args.difficulty else app_config.training.difficulty

    if parsed_args.mode == "drill":
        if not parsed_args.move:
            raise ValueError("--move is required for drill mode")
        return SessionConfig.drill(move_code=parsed_args.move, difficulty=difficulty)

    if parsed_args.mode == "arsenal":
        target_code, academy_level, unlocked_codes = _resolve_learning_target(parsed_args.target, parsed_args.level)
        allowed = _split_codes(parsed_args.allowed)
        if allowed is None:
            allowed = unlocked_codes
        if target_code not in allowed:
            allowed.append(target_code)
        return SessionConfig.add_to_arsenal(
            target_move_code=target_code,
            allowed_move_codes=allowed,
            difficulty=difficulty,
            academy_level=academy_level,
        )

    training = app_config.training
    return SessionConfig.training(
        rounds=parsed_args.rounds if parsed_args.rounds is not None else training.rounds,
        round_duration_seconds=(
            parsed_args.round_seconds if parsed_args.round_seconds is not None else training.round_duration_seconds
        ),
        rest_duration_seconds=(
            parsed_args.rest_seconds if parsed_args.rest_seconds is not None else training.rest_duration_seconds
        ),
        difficulty=difficulty,
        intensity=Intensity(parsed_args.intensity) if parsed_args.intensity else training.intensity,
        allowed_move_codes=_split_codes(parsed_args.allowed),
    )


def _print_status_line(snapshot: SessionSnapshot, *, last_phase: Optional[SessionPhase]) -> None:
    if snapshot.phase != last_phase:
        if snapshot.phase == SessionPhase.ROUND:
            print(f"Round {snapshot.current_round} - {_format_clock(snapshot.remaining_seconds)}")
        elif snapshot.phase == SessionPhase.REST:
            print(f"Rest - {_format_clock(snapshot.remaining_seconds)}")
        else:
            print("Session complete.")


def run_workout(parsed_args: argparse.Namespace, app_config: AppConfig) -> int:
    session_config = _build_session_config(parsed_args, app_config)
    seed = parsed_args.seed if parsed_args.seed is not None else app_config.random_seed

    controller = SessionController(session_config, seed=seed)
    narrator = ComboNarrator(ConsoleVoiceCoach())
    bell = ConsoleBell()

    print(
        f"Starting {session_config.mode.value} session: {session_config.rounds} x "
        f"{_format_clock(session_config.round_duration_seconds)}, rest {_format_clock(session_config.rest_duration_seconds)}"
    )

    last_phase: Optional[SessionPhase] = None
    events = controller.start()
    try:
        while True:
            dispatch_events(events, narrator=narrator, sound_effects=bell)
            snapshot = controller.snapshot()
            _print_status_line(snapshot, last_phase=last_phase)
            last_phase = snapshot.phase
            if snapshot.phase == SessionPhase.COMPLETE:
                break
            if parsed_args.realtime:
                time.sleep(1.0)
            events = controller.tick()
    except KeyboardInterrupt:
        print("Session stopped.")
        narrator.stop()
        result = controller.end(completed=False)
        logger.info("Workout ended early: %s", result)
        return 130

    narrator.stop()
    result = controller.end(completed=True)
    if result is not None:
        print(f"Result: completed={result.completed}")
    return 0


def _answer_interactively(session: ExamSession, sub_tick_seconds: float) -> None:
    question = session.current_question
    if question is None:
        return

    print(f"\nCode: {question.code}   ({session.question_remaining_seconds:.1f}s)")
    for index, option in enumerate(question.options, start=1):
        print(f"  {index}) {option}")

    started_at = time.monotonic()
    response_text = input("Answer [1-3]: ").strip()
    elapsed_seconds = time.monotonic() - started_at

    question_index = session.current_index
    remaining_ticks = int(elapsed_seconds / sub_tick_seconds)
    for _ in range(remaining_ticks):
        feedback = session.tick(sub_tick_seconds)
        if feedback:
            print("  Too slow!")
        if session.is_finished or session.current_index != question_index:
            return

    try:
        option_index: Optional[int] = int(response_text) - 1
    except ValueError:
        option_index = None
    if option_index is not None and not 0 <= option_index < len(question.options):
        option_index = None

    feedback = session.answer(option_index)
    print("  Correct!" if feedback.correct else f"  Wrong. {question.code} is {question.correct_move_name}.")


def _answer_simulated(
    session: ExamSession,
    *,
    accuracy: float,
    sub_tick_seconds: float,
    random_generator: random.Random,
) -> None:
    question = session.current_question
    if question is None:
        return

    question_index = session.current_index
    session.tick(sub_tick_seconds)
    if session.is_finished or session.current_index != question_index:
        return

    if random_generator.random() < accuracy:
        option_index = question.correct_answer_index
    else:
        option_index = (question.correct_answer_index + 1) % len(question.options)
    session.answer(option_index)


def _print_exam_result(result: ExamResult) -> None:
    print("\nExam finished.")
    print(f"  Correct: {result.correct_answers} / {result.total_questions}")
    print(f"  Accuracy: {result.accuracy:.0%}")
    print(f"  Longest streak: {result.longest_streak}")
    print("  PASSED" if result.passed else "  Not passed. Keep training.")


def run_exam(parsed_args: argparse.Namespace, app_config: AppConfig, catalog: Optional[MoveCatalog] = None) -> int:
    catalog = catalog if catalog is not None else default_catalog()
    seed = parsed_args.seed if parsed_args.seed is not None else app_config.random_seed
    random_generator = random.Random(seed)

    target_code, academy_level, default_unlocked = _resolve_learning_target(parsed_args.target, parsed_args.level)
    target_move = catalog.require(target_code)
    unlocked_codes = _split_codes(parsed_args.unlocked)
    if unlocked_codes is None:
        unlocked_codes = default_unlocked
    unlocked_moves = [catalog.require(code) for code in unlocked_codes if code != target_move.code]

    settings = app_config.exam.settings_for_level(academy_level)
    questions = ExamQuestionGenerator(random_generator).generate_questions(
        target_move=target_move,
        unlocked_moves=unlocked_moves,
        question_count=settings.question_count,
    )
    session = ExamSession(questions, settings)
    sub_tick_seconds = app_config.exam.sub_tick_seconds

    print(
        f"Exam: {len(questions)} questions, {settings.question_time_limit_seconds:.0f}s each, "
        f"{settings.total_seconds:.0f}s total. Name the move for each code."
    )

    try:
        while not session.is_finished:
            if parsed_args.simulate_accuracy is not None:
                _answer_simulated(
                    session,
                    accuracy=parsed_args.simulate_accuracy,
                    sub_tick_seconds=sub_tick_seconds,
                    random_generator=random_generator,
                )
            else:
                _answer_interactively(session, sub_tick_seconds)
    except (KeyboardInterrupt, EOFError):
        print("\nExam abandoned.")
        session.finish()

    result = session.result()
    _print_exam_result(result)
    return 0 if result.passed else 1


def run_curriculum(path: Optional[LearningPath] = None) -> int:
    path = path if path is not None else default_learning_path()
    for level in path.levels():
        moves = path.moves_in_level(level)
        print(f"Level {level} - {moves[0].level_name}")
        for move in moves:
            print(f"  {move.move_id:2d}. {move.name} [{', '.join(move.move_codes)}]")
    return 0


def _build_argument_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(description="Shadow boxing coach")
    argument_parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible sessions.")
    argument_parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for engine diagnostics.",
    )
    subparsers = argument_parser.add_subparsers(dest="command", required=True)

    workout_parser = subparsers.add_parser("workout", help="Run a timed workout session.")
    workout_parser.add_argument("--mode", choices=["training", "drill", "arsenal"], default="training")
    workout_parser.add_argument("--rounds", type=int, default=None)
    workout_parser.add_argument("--round-seconds", type=int, default=None)
    workout_parser.add_argument("--rest-seconds", type=int, default=None)
    workout_parser.add_argument("--difficulty", choices=[item.value for item in Difficulty], default=None)
    workout_parser.add_argument("--intensity", choices=[item.value for item in Intensity], default=None)
    workout_parser.add_argument("--allowed", default=None, help="Comma separated move codes combos may use.")
    workout_parser.add_argument("--move", default=None, help="Drill move code.")
    workout_parser.add_argument(
        "--target", default=None, help="Add to Arsenal target move code. Defaults to the first move taught at --level."
    )
    workout_parser.add_argument(
        "--level", type=int, default=None, help="Academy level (1-12). Defaults to the target's learning level."
    )
    workout_parser.add_argument("--realtime", action="store_true", help="Tick once per wall-clock second.")

    exam_parser = subparsers.add_parser("exam", help="Run an Academy exam.")
    exam_parser.add_argument(
        "--target", default=None, help="Move code being examined. Defaults to the first move taught at --level."
    )
    exam_parser.add_argument(
        "--unlocked",
        default=None,
        help="Comma separated previously unlocked move codes. Defaults to every move before the target.",
    )
    exam_parser.add_argument(
        "--level", type=int, default=None, help="Academy level (1-12). Defaults to the target's learning level."
    )
    exam_parser.add_argument(
        "--simulate-accuracy",
        type=float,
        default=None,
        help="Answer automatically with this probability of being correct (0.0-1.0).",
    )

    subparsers.add_parser("curriculum", help="List the Academy learning path.")

    return argument_parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parsed_args = _build_argument_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, parsed_args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        app_config, config_path = get_config()
    except (OSError, ValueError) as exception:
        print(f"Config error: {exception}", file=sys.stderr)
        return 2
    logger.info("Config: %s", config_path if config_path is not None else "(defaults)")

    try:
        if parsed_args.command == "workout":
            return run_workout(parsed_args, app_config)
        if parsed_args.command == "curriculum":
            return run_curriculum()
        return run_exam(parsed_args, app_config)
    except (KeyError, ValueError) as exception:
        print(f"Error: {exception}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
