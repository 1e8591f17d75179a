"""Exact game solving with a minimax heuristic that only looks at outcomes."""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from boardplay.ai.minimax import Heuristic, MinimaxResult, minimax, minimax_all_moves, minimax_value
from boardplay.board import Board, Bot, Outcome, OutcomeWDL

_I32_MAX = 2**31 - 1


class _Kind(enum.Enum):
    WIN_IN = "WinIn"
    LOSS_IN = "LossIn"
    DRAW = "Draw"
    UNKNOWN = "Unknown"


def _cmp(a: int, b: int) -> int:
    return (a > b) - (a < b)


@dataclass(frozen=True)
class SolverValue:
    """A solved value: a win or loss after ``n`` moves, a draw, or unknown."""

    kind: _Kind
    n: int = 0

    @staticmethod
    def win_in(n: int) -> "SolverValue":
        return SolverValue(_Kind.WIN_IN, n)

    @staticmethod
    def loss_in(n: int) -> "SolverValue":
        return SolverValue(_Kind.LOSS_IN, n)

    def to_i32(self) -> int:
        if self.kind is _Kind.WIN_IN:
            return _I32_MAX - self.n
        if self.kind is _Kind.LOSS_IN:
            return -_I32_MAX + self.n
        return 0

    def to_outcome_wdl(self) -> Optional[OutcomeWDL]:
        return {
            _Kind.WIN_IN: OutcomeWDL.WIN,
            _Kind.LOSS_IN: OutcomeWDL.LOSS,
            _Kind.DRAW: OutcomeWDL.DRAW,
            _Kind.UNKNOWN: None,
        }[self.kind]

    @staticmethod
    def merge(old: "SolverValue", new: "SolverValue") -> Tuple["SolverValue", int]:
        """Return the best value and the sign of comparing ``new`` with ``old``.

        Shorter wins and longer losses are better; draw merged with unknown is unknown.
        """
        if old.kind is _Kind.WIN_IN and new.kind is _Kind.WIN_IN:
            return (new if new.n <= old.n else old), -_cmp(new.n, old.n)
        if old.kind is _Kind.LOSS_IN and new.kind is _Kind.LOSS_IN:
            return (new if new.n >= old.n else old), _cmp(new.n, old.n)
        if old.kind is _Kind.WIN_IN:
            return old, -1
        if old.kind is _Kind.LOSS_IN:
            return new, 1
        if new.kind is _Kind.WIN_IN:
            return new, 1
        if new.kind is _Kind.LOSS_IN:
            return old, -1
        if old.kind is _Kind.DRAW and new.kind is _Kind.DRAW:
            return SolverValue.DRAW, 0
        return SolverValue.UNKNOWN, 0

    @staticmethod
    def could_be_optimal_child(parent: "SolverValue", child: "SolverValue") -> bool:
        """Whether ``child`` could be a child of the optimally combined ``parent``."""
        if parent.kind is _Kind.WIN_IN:
            best_child = SolverValue.loss_in(parent.n - 1)
        elif parent.kind is _Kind.LOSS_IN:
            best_child = SolverValue.win_in(parent.n - 1)
        elif parent.kind is _Kind.DRAW:
            best_child = SolverValue.DRAW
        else:
            raise ValueError("could_be_optimal_child does not work for unknown values")
        return SolverValue.merge(best_child, child)[1] >= 0

    def __neg__(self) -> "SolverValue":
        if self.kind is _Kind.WIN_IN:
            return SolverValue.loss_in(self.n)
        if self.kind is _Kind.LOSS_IN:
            return SolverValue.win_in(self.n)
        return self

    def __repr__(self) -> str:
        if self.kind in (_Kind.WIN_IN, _Kind.LOSS_IN):
            return f"{self.kind.value}({self.n})"
        return self.kind.value


SolverValue.DRAW = SolverValue(_Kind.DRAW)
SolverValue.UNKNOWN = SolverValue(_Kind.UNKNOWN)


class SolverHeuristic(Heuristic):
    """Values boards by outcome only, preferring the shortest win and the longest loss."""

    def value(self, board: Board, depth: int) -> SolverValue:
        outcome = board.outcome()
        if outcome is None:
            return SolverValue.UNKNOWN
        pov = outcome.pov(board.next_player())
        if pov is OutcomeWDL.WIN:
            return SolverValue.win_in(depth)
        if pov is OutcomeWDL.LOSS:
            return SolverValue.loss_in(depth)
        return SolverValue.DRAW

    @staticmethod
    def merge(old: SolverValue, new: SolverValue) -> Tuple[SolverValue, int]:
        return SolverValue.merge(old, new)

    def __repr__(self) -> str:
        return "SolverHeuristic"


def solve(board: Board, depth: int, rng: random.Random) -> MinimaxResult:
    return minimax(board, SolverHeuristic(), depth, rng)


def solve_all_moves(board: Board, depth: int) -> MinimaxResult:
    return minimax_all_moves(board, SolverHeuristic(), depth)


def solve_value(board: Board, depth: int) -> SolverValue:
    return minimax_value(board, SolverHeuristic(), depth)


def is_double_forced_draw(board: Board, depth: int) -> Optional[bool]:
    """Whether every line of play from ``board`` ends in a draw; None if unknown within ``depth``."""
    outcome = board.outcome()
    if outcome is not None:
        return outcome == Outcome.draw()
    if depth == 0:
        return None

    unknown = False
    for mv in board.available_moves():
        result = is_double_forced_draw(board.clone_and_play(mv), depth - 1)
        if result is None:
            unknown = True
        elif not result:
            return False
    return None if unknown else True


class SolverBot(Bot):
    """Plays the best move found by solving up to a fixed depth."""

    def __init__(self, depth: int, rng: random.Random):
        if depth <= 0:
            raise ValueError("depth must be positive")
        self.depth = depth
        self._rng = rng

    def select_move(self, board: Board):
        if board.is_done():
            raise ValueError(f"cannot select a move on done board {board!r}")
        return minimax(board, SolverHeuristic(), self.depth, self._rng).best_move

    def __repr__(self) -> str:
        return f"SolverBot {{ depth: {self.depth} }}"