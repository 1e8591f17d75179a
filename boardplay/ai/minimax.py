"""Alpha-beta negamax search driven by a pluggable heuristic."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, Tuple, TypeVar

from boardplay.board import Board, Bot

V = TypeVar("V")
R = TypeVar("R")


class Heuristic(ABC):
    """Assigns values to boards from the point of view of the next player.

    Values must support unary negation.
    """

    @abstractmethod
    def value(self, board: Board, depth: int):
        """Value of ``board`` for its next player; ``depth`` moves were played since the search root."""

    def value_update(self, board: Board, board_value, board_length: int, mv, child: Board):
        """Value of ``child``, reached by playing ``mv`` on ``board``.

        Override for speed; the result must equal ``value(child, board_length + 1)``.
        """
        return self.value(child, board_length + 1)

    @staticmethod
    @abstractmethod
    def merge(old, new) -> Tuple[Any, int]:
        """Return the better of ``old`` and ``new`` and the sign of comparing ``new`` with ``old``."""


@dataclass
class MinimaxResult(Generic[V, R]):
    """The value of a board and the chosen move, which is None if the board is done or depth was zero."""

    value: V
    best_move: Optional[R] = None


class _NoMoveSelector:
    def reset(self) -> None:
        pass

    def accept(self, mv) -> None:
        pass

    def finish(self):
        return None


class _RandomMoveSelector:
    """Uniform choice among accepted moves by reservoir sampling."""

    def __init__(self, rng: random.Random):
        self._rng = rng
        self._picked = None
        self._count = 0

    def reset(self) -> None:
        self._picked = None
        self._count = 0

    def accept(self, mv) -> None:
        self._count += 1
        if self._rng.randrange(self._count) == 0:
            self._picked = mv

    def finish(self):
        if self._count == 0:
            raise RuntimeError("no move was selected")
        return self._picked


class _AllMoveSelector:
    def __init__(self):
        self._moves: List = []

    def reset(self) -> None:
        self._moves.clear()

    def accept(self, mv) -> None:
        self._moves.append(mv)

    def finish(self) -> List:
        return list(self._moves)


def _negamax(heuristic: Heuristic, board: Board, board_value, length: int, depth_left: int, alpha, beta, selector):
    if depth_left == 0 or board.is_done():
        return MinimaxResult(board_value, None)

    best_value = None
    player = board.next_player()

    for mv in board.available_moves():
        child = board.clone_and_play(mv)
        child_value_estimate = heuristic.value_update(board, board_value, length, mv, child)
        flip = child.next_player() != player

        def maybe_neg(v, _flip=flip):
            return -v if _flip else v

        child_result = _negamax(
            heuristic,
            child,
            child_value_estimate,
            length + 1,
            depth_left - 1,
            None if beta is None else maybe_neg(beta),
            None if alpha is None else maybe_neg(alpha),
            _NoMoveSelector(),
        )
        child_value = maybe_neg(child_result.value)

        if best_value is None:
            new_best, ordering = child_value, 1
        else:
            new_best, ordering = heuristic.merge(best_value, child_value)
        new_alpha = new_best if alpha is None else heuristic.merge(alpha, new_best)[0]

        best_value = new_best
        if ordering > 0:
            selector.reset()
        if ordering >= 0:
            selector.accept(mv)
        alpha = new_alpha

        if beta is not None and heuristic.merge(beta, new_alpha)[1] >= 0:
            return MinimaxResult(new_best, None)

    return MinimaxResult(best_value, selector.finish())


def _check_result(result: MinimaxResult, board: Board, depth: int) -> MinimaxResult:
    if result.best_move is None and not (board.is_done() or depth == 0):
        raise RuntimeError("negamax failed to select a move")
    return result


def minimax(board: Board, heuristic: Heuristic, depth: int, rng: random.Random) -> MinimaxResult:
    """Value of ``board`` for its next player and a best move, ties broken at random."""
    result = _negamax(heuristic, board, heuristic.value(board, 0), 0, depth, None, None, _RandomMoveSelector(rng))
    return _check_result(result, board, depth)


def minimax_all_moves(board: Board, heuristic: Heuristic, depth: int) -> MinimaxResult:
    """Like :func:`minimax`, but ``best_move`` is the list of all moves tying for the best value."""
    result = _negamax(heuristic, board, heuristic.value(board, 0), 0, depth, None, None, _AllMoveSelector())
    return _check_result(result, board, depth)


def minimax_value(board: Board, heuristic: Heuristic, depth: int):
    """Only the minimax value of ``board`` for its next player."""
    return _negamax(heuristic, board, heuristic.value(board, 0), 0, depth, None, None, _NoMoveSelector()).value


class MiniMaxBot(Bot):
    """Plays the best move found by a fixed-depth minimax search."""

    def __init__(self, depth: int, heuristic: Heuristic, rng: random.Random):
        if depth <= 0:
            raise ValueError("requires depth > 0 to find the best move")
        self.depth = depth
        self.heuristic = heuristic
        self._rng = rng

    def select_move(self, board: Board):
        if board.is_done():
            raise ValueError(f"cannot select a move on done board {board!r}")
        return minimax(board, self.heuristic, self.depth, self._rng).best_move

    def __repr__(self) -> str:
        return f"MiniMaxBot {{ depth: {self.depth}, heuristic: {self.heuristic!r} }}"