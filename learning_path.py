# -*- coding: utf-8 -*-
########################
# learning_path.py
########################
# Purpose:
# - The Academy curriculum: an ordered table of learning moves, each teaching one or more move codes.
# - Resolve what the user should do next from their learning progress (drill, progression, exam).
#
# Design notes:
# - The curriculum is fixed and ordered. Learning move ids (1-18) are the unlock order.
# - A learning move's level is the Academy level used for its Add to Arsenal session and exam.
# - Progress is an immutable value. Updates return a new LearningProgress; nothing here persists.
# - The current move is the first one not yet unlocked. Passing its exam unlocks exactly that move.
# - Unlocked codes for a learning move are the codes of every earlier move in the table.
#
########################
# Interfaces:
# Public constants:
# - LEVEL_NAMES: dict[int, str]
# - LEARNING_MOVES: tuple[LearningMove, ...]
#
# Public exceptions:
# - class LearningMoveNotFoundError(KeyError)
#
# Public functions:
# - required_progression_sessions(level: int) -> int
# - next_action(progress: LearningProgress, path: Optional[LearningPath] = None) -> NextAction
# - default_learning_path() -> LearningPath
#
# Public dataclasses:
# - LearningMove(move_id, level, name, move_codes)
#   - level_name -> str
# - LearningMoveProgress(move_id, drill_done, progression_sessions_done, exam_passed, is_unlocked)
# - NextAction(action_type, move_id)
#
# Public classes:
# - class NextActionType(enum.Enum): DRILL | PROGRESSION | EXAM | LEARNING_COMPLETE
# - class LearningPath
#   - all_moves() -> list[LearningMove]
#   - get(move_id) / require(move_id)
#   - moves_in_level(level) -> list[LearningMove]
#   - move_for_level(level) -> Optional[LearningMove]
#   - move_for_code(code) -> Optional[LearningMove]
#   - unlocked_codes_before(move_id) -> list[str]
# - class LearningProgress
#   - fresh(path) -> LearningProgress
#   - progress_for(move_id) -> LearningMoveProgress
#   - current_move(path) -> Optional[LearningMove]
#   - complete_drill / complete_progression_session / pass_exam (path) -> LearningProgress
#
########################

from __future__ import annotations

from dataclasses import dataclass, replace
import enum
from functools import lru_cache
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class LearningMoveNotFoundError(KeyError):
    """Raised when a learning move id is not part of the curriculum."""


LEVEL_NAMES: Dict[int, str] = {
    1: "Basics",
    2: "Basic angles",
    3: "Defense",
    4: "Intermediate punches",
    5: "Advanced footwork",
    6: "Extras",
}


@dataclass(frozen=True)
class LearningMove:
    move_id: int
    level: int
    name: str
    move_codes: Tuple[str, ...]

    def __post_init__(self) -> None:
        codes = tuple(str(code) for code in self.move_codes)
        if not codes:
            raise ValueError(f"learning move {self.move_id} must teach at least one move code")
        object.__setattr__(self, "move_codes", codes)

    @property
    def level_name(self) -> str:
        return LEVEL_NAMES.get(self.level, "Unknown")


LEARNING_MOVES: Tuple[LearningMove, ...] = (
    LearningMove(1, 1, "Jab", ("1",)),
    LearningMove(2, 1, "Step forward", ("N",)),
    LearningMove(3, 1, "Step backward", ("O",)),
    LearningMove(4, 1, "Cross", ("2",)),
    LearningMove(5, 2, "Step left", ("P",)),
    LearningMove(6, 2, "Step right", ("Q",)),
    LearningMove(7, 3, "Slip left", ("A",)),
    LearningMove(8, 3, "Slip right", ("B",)),
    LearningMove(9, 3, "Roll", ("C",)),
    LearningMove(10, 3, "Block", ("G",)),
    LearningMove(11, 4, "Lead hook", ("3",)),
    LearningMove(12, 4, "Rear hook", ("4",)),
    LearningMove(13, 4, "Lead uppercut", ("5",)),
    LearningMove(14, 4, "Rear uppercut", ("6",)),
    LearningMove(15, 5, "Pivot left", ("R",)),
    LearningMove(16, 5, "Pivot right", ("S",)),
    LearningMove(17, 6, "Feints", ("F",)),
    LearningMove(18, 6, "Rhythm variations", ("T", "U")),
)


def required_progression_sessions(level: int) -> int:
    """Progression sessions needed before the exam: 1 at level 1, 2 at levels 2-3, 3 from level 4."""
    level = int(level)
    if level <= 1:
        return 1
    if level <= 3:
        return 2
    return 3


class LearningPath:
    def __init__(self, moves: Optional[Iterable[LearningMove]] = None) -> None:
        self._moves: List[LearningMove] = list(moves) if moves is not None else list(LEARNING_MOVES)
        self._by_id: Dict[int, LearningMove] = {}
        for move in self._moves:
            if move.move_id in self._by_id:
                raise ValueError(f"duplicate learning move id: {move.move_id}")
            self._by_id[move.move_id] = move

    def __len__(self) -> int:
        return len(self._moves)

    def all_moves(self) -> List[LearningMove]:
        return list(self._moves)

    def get(self, move_id: int) -> Optional[LearningMove]:
        return self._by_id.get(int(move_id))

    def require(self, move_id: int) -> LearningMove:
        move = self.get(move_id)
        if move is None:
            raise LearningMoveNotFoundError(f"unknown learning move id: {move_id}")
        return move

    def levels(self) -> List[int]:
        return sorted({move.level for move in self._moves})

    def moves_in_level(self, level: int) -> List[LearningMove]:
        return [move for move in self._moves if move.level == int(level)]

    def move_for_level(self, level: int) -> Optional[LearningMove]:
        """First learning move taught at the given level, or None when the level teaches nothing."""
        moves = self.moves_in_level(level)
        return moves[0] if moves else None

    def move_for_code(self, code: str) -> Optional[LearningMove]:
        code = str(code)
        for move in self._moves:
            if code in move.move_codes:
                return move
        return None

    def unlocked_codes_before(self, move_id: int) -> List[str]:
        target = self.require(move_id)
        codes: List[str] = []
        for move in self._moves:
            if move.move_id == target.move_id:
                break
            codes.extend(code for code in move.move_codes if code not in codes)
        return codes


@dataclass(frozen=True)
class LearningMoveProgress:
    move_id: int
    drill_done: bool = False
    progression_sessions_done: int = 0
    exam_passed: bool = False
    is_unlocked: bool = False


class NextActionType(enum.Enum):
    DRILL = "drill"
    PROGRESSION = "progression"
    EXAM = "exam"
    LEARNING_COMPLETE = "learning_complete"


@dataclass(frozen=True)
class NextAction:
    action_type: NextActionType
    move_id: Optional[int] = None

    def __str__(self) -> str:
        if self.action_type == NextActionType.LEARNING_COMPLETE:
            return "NextAction(learning_complete)"
        return f"NextAction({self.action_type.value}, move_id={self.move_id})"


class LearningProgress:
    def __init__(self, move_progress: Iterable[LearningMoveProgress] = ()) -> None:
        self._by_id: Dict[int, LearningMoveProgress] = {item.move_id: item for item in move_progress}

    @classmethod
    def fresh(cls, path: Optional[LearningPath] = None) -> "LearningProgress":
        path = path if path is not None else default_learning_path()
        return cls(LearningMoveProgress(move_id=move.move_id) for move in path.all_moves())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LearningProgress):
            return NotImplemented
        return self._by_id == other._by_id

    def progress_for(self, move_id: int) -> LearningMoveProgress:
        """Progress for one learning move. Moves with no entry yet start from nothing done."""
        return self._by_id.get(int(move_id), LearningMoveProgress(move_id=int(move_id)))

    def current_move(self, path: Optional[LearningPath] = None) -> Optional[LearningMove]:
        path = path if path is not None else default_learning_path()
        for move in path.all_moves():
            if not self.progress_for(move.move_id).is_unlocked:
                return move
        return None

    def unlocked_move_ids(self) -> List[int]:
        return sorted(move_id for move_id, item in self._by_id.items() if item.is_unlocked)

    def complete_drill(self, path: Optional[LearningPath] = None) -> "LearningProgress":
        return self._update_current(path, lambda item: replace(item, drill_done=True))

    def complete_progression_session(self, path: Optional[LearningPath] = None) -> "LearningProgress":
        return self._update_current(
            path, lambda item: replace(item, progression_sessions_done=item.progression_sessions_done + 1)
        )

    def pass_exam(self, path: Optional[LearningPath] = None) -> "LearningProgress":
        return self._update_current(path, lambda item: replace(item, exam_passed=True, is_unlocked=True))

    def _update_current(
        self, path: Optional[LearningPath], update: Callable[[LearningMoveProgress], LearningMoveProgress]
    ) -> "LearningProgress":
        move = self.current_move(path)
        if move is None:
            return self
        updated = dict(self._by_id)
        updated[move.move_id] = update(self.progress_for(move.move_id))
        if updated[move.move_id].is_unlocked:
            logger.debug("Learning move %d (%s) unlocked", move.move_id, move.name)
        return LearningProgress(updated.values())


def next_action(progress: LearningProgress, path: Optional[LearningPath] = None) -> NextAction:
    path = path if path is not None else default_learning_path()
    move = progress.current_move(path)
    if move is None:
        return NextAction(NextActionType.LEARNING_COMPLETE)

    move_progress = progress.progress_for(move.move_id)
    if not move_progress.drill_done:
        return NextAction(NextActionType.DRILL, move.move_id)
    if move_progress.progression_sessions_done < required_progression_sessions(move.level):
        return NextAction(NextActionType.PROGRESSION, move.move_id)
    return NextAction(NextActionType.EXAM, move.move_id)


@lru_cache(maxsize=1)
def default_learning_path() -> LearningPath:
    return LearningPath()


def _run_unit_tests() -> None:
    path = default_learning_path()
    assert len(path) == 18
    assert path.levels() == [1, 2, 3, 4, 5, 6]
    assert path.move_for_level(3).name == "Slip left"
    assert path.unlocked_codes_before(5) == ["1", "N", "O", "2"]
    assert path.move_for_code("U").move_id == 18

    progress = LearningProgress.fresh(path)
    assert next_action(progress) == NextAction(NextActionType.DRILL, 1)
    progress = progress.complete_drill()
    assert next_action(progress) == NextAction(NextActionType.PROGRESSION, 1)
    progress = progress.complete_progression_session()
    assert next_action(progress) == NextAction(NextActionType.EXAM, 1)
    progress = progress.pass_exam()
    assert next_action(progress) == NextAction(NextActionType.DRILL, 2)


if __name__ == "__main__":
    _run_unit_tests()
    print("learning_path.py: ok")
