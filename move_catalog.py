# -*- coding: utf-8 -*-
########################
# move_catalog.py
########################
# Purpose:
# - Read-only catalog of the boxing moves that combos and exams are built from.
# - Lookup by code and by category, plus allowed-set filtering.
#
# Design notes:
# - Move identity is the code. Codes are numeric strings for punches, letters otherwise.
# - Catalog order is the canonical display order and is kept stable for deterministic tests.
# - MoveCatalog is immutable after construction; callers may pass a custom move list for tests.
#
########################
# Interfaces:
# Public exceptions:
# - class MoveNotFoundError(KeyError)
#
# Public enums:
# - class MoveCategory(enum.Enum): PUNCH | DEFENSE | FOOTWORK | DECEPTION
#
# Public dataclasses:
# - Move(code: str, name: str, category: MoveCategory)
#
# Public classes:
# - class MoveCatalog
#   - __init__(moves: Optional[Iterable[Move]] = None)
#   - all_moves() -> list[Move]
#   - get(code: str) -> Optional[Move]
#   - require(code: str) -> Move
#   - by_category(category: MoveCategory) -> list[Move]
#   - punches() / defense() / footwork() -> list[Move]
#   - filter_codes(allowed_codes: Optional[Iterable[str]]) -> list[Move]
#
# Public functions:
# - default_catalog() -> MoveCatalog
#
########################

from __future__ import annotations

from dataclasses import dataclass
import enum
from functools import lru_cache
from typing import Dict, Iterable, List, Optional


class MoveNotFoundError(KeyError):
    """Raised when a move code is not present in the catalog."""


class MoveCategory(enum.Enum):
    PUNCH = "punch"
    DEFENSE = "defense"
    FOOTWORK = "footwork"
    DECEPTION = "deception"


@dataclass(frozen=True)
class Move:
    code: str
    name: str
    category: MoveCategory


BOXING_MOVES = (
    Move("1", "Left straight", MoveCategory.PUNCH),
    Move("2", "Right straight", MoveCategory.PUNCH),
    Move("3", "Left hook", MoveCategory.PUNCH),
    Move("4", "Right hook", MoveCategory.PUNCH),
    Move("5", "Left uppercut", MoveCategory.PUNCH),
    Move("6", "Right uppercut", MoveCategory.PUNCH),
    Move("7", "Left body hook", MoveCategory.PUNCH),
    Move("8", "Right body hook", MoveCategory.PUNCH),
    Move("9", "Left straight to body", MoveCategory.PUNCH),
    Move("10", "Right straight to body", MoveCategory.PUNCH),
    Move("11", "Right overhand", MoveCategory.PUNCH),
    Move("12", "Check hook", MoveCategory.PUNCH),
    Move("13", "Left shovel hook", MoveCategory.PUNCH),
    Move("14", "Right shovel hook", MoveCategory.PUNCH),
    Move("A", "Slip left", MoveCategory.DEFENSE),
    Move("B", "Slip right", MoveCategory.DEFENSE),
    Move("C", "Roll left", MoveCategory.DEFENSE),
    Move("D", "Roll right", MoveCategory.DEFENSE),
    Move("E", "Duck", MoveCategory.DEFENSE),
    Move("G", "Block straight left", MoveCategory.DEFENSE),
    Move("H", "Pull back", MoveCategory.DEFENSE),
    Move("I", "Block straight right", MoveCategory.DEFENSE),
    Move("J", "Block left hook", MoveCategory.DEFENSE),
    Move("K", "Block right hook", MoveCategory.DEFENSE),
    Move("L", "Catch jab", MoveCategory.DEFENSE),
    Move("M", "Parry", MoveCategory.DEFENSE),
    Move("F", "Feint", MoveCategory.DECEPTION),
    Move("N", "Step in", MoveCategory.FOOTWORK),
    Move("O", "Step back", MoveCategory.FOOTWORK),
    Move("P", "Step left", MoveCategory.FOOTWORK),
    Move("Q", "Step right", MoveCategory.FOOTWORK),
    Move("R", "Pivot left", MoveCategory.FOOTWORK),
    Move("S", "Pivot right", MoveCategory.FOOTWORK),
    Move("T", "Shuffle forward", MoveCategory.FOOTWORK),
    Move("U", "Shuffle backward", MoveCategory.FOOTWORK),
    Move("V", "Circle left", MoveCategory.FOOTWORK),
    Move("W", "Circle right", MoveCategory.FOOTWORK),
    Move("X", "Switch stance", MoveCategory.FOOTWORK),
)


class MoveCatalog:
    def __init__(self, moves: Optional[Iterable[Move]] = None) -> None:
        source = list(moves) if moves is not None else list(BOXING_MOVES)
        self._moves: List[Move] = []
        self._by_code: Dict[str, Move] = {}
        for move in source:
            if move.code in self._by_code:
                raise ValueError(f"Duplicate move code: {move.code}")
            self._by_code[move.code] = move
            self._moves.append(move)

    def __len__(self) -> int:
        return len(self._moves)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def all_moves(self) -> List[Move]:
        return list(self._moves)

    def get(self, code: str) -> Optional[Move]:
        return self._by_code.get(str(code))

    def require(self, code: str) -> Move:
        move = self.get(code)
        if move is None:
            raise MoveNotFoundError(f"Unknown move code: {code!r}")
        return move

    def by_category(self, category: MoveCategory) -> List[Move]:
        return [move for move in self._moves if move.category == category]

    def punches(self) -> List[Move]:
        return self.by_category(MoveCategory.PUNCH)

    def defense(self) -> List[Move]:
        return self.by_category(MoveCategory.DEFENSE)

    def footwork(self) -> List[Move]:
        return self.by_category(MoveCategory.FOOTWORK)

    def filter_codes(self, allowed_codes: Optional[Iterable[str]]) -> List[Move]:
        """Return catalog moves whose code is allowed, in catalog order.

        None means unrestricted. Unknown codes in the allowed set are ignored.
        """
        if allowed_codes is None:
            return self.all_moves()
        allowed = {str(code) for code in allowed_codes}
        return [move for move in self._moves if move.code in allowed]


@lru_cache(maxsize=1)
def default_catalog() -> MoveCatalog:
    return MoveCatalog()


def _run_unit_tests() -> None:
    catalog = MoveCatalog()
    assert catalog.require("1").name == "Left straight"
    assert catalog.get("Z") is None
    assert len(catalog.punches()) == 14
    assert [move.code for move in catalog.by_category(MoveCategory.DECEPTION)] == ["F"]
    assert [move.code for move in catalog.filter_codes(["B", "1", "nope"])] == ["1", "B"]

    try:
        catalog.require("Z")
    except MoveNotFoundError:
        pass
    else:
        raise AssertionError("Expected MoveNotFoundError for unknown code")


if __name__ == "__main__":
    _run_unit_tests()
    print("move_catalog.py: ok")
