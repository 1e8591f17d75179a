"""A board wrapper that ends in a draw after a fixed number of moves."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from boardplay.board import Board, Outcome, Player


class MaxMovesBoard(Board):
    """Behaves like ``inner`` but is drawn once ``max_moves`` moves have been played."""

    def __init__(self, inner: Board, max_moves: int):
        self.inner = inner
        self.moves = 0
        self.max_moves = max_moves

    def _check_not_done(self) -> None:
        if self.is_done():
            raise ValueError(f"board is done: {self!r}")

    def next_player(self) -> Player:
        return self.inner.next_player()

    def is_available_move(self, mv) -> bool:
        self._check_not_done()
        return self.inner.is_available_move(mv)

    def random_available_move(self, rng):
        self._check_not_done()
        return self.inner.random_available_move(rng)

    def play(self, mv) -> None:
        self._check_not_done()
        self.inner.play(mv)
        self.moves += 1

    def outcome(self) -> Optional[Outcome]:
        if self.moves == self.max_moves:
            return Outcome.draw()
        return self.inner.outcome()

    def can_lose_after_move(self) -> bool:
        return self.inner.can_lose_after_move()

    def all_possible_moves(self) -> Iterable:
        return self.inner.all_possible_moves()

    def available_moves(self) -> Iterator:
        self._check_not_done()
        return iter(self.inner.available_moves())

    def symmetries(self):
        return self.inner.symmetries()

    def map(self, sym) -> "MaxMovesBoard":
        mapped = MaxMovesBoard(self.inner.map(sym), self.max_moves)
        mapped.moves = self.moves
        return mapped

    def map_move(self, sym, mv):
        return self.inner.map_move(sym, mv)

    def canonical_key(self):
        return self.inner.canonical_key()

    def __eq__(self, other) -> bool:
        if not isinstance(other, MaxMovesBoard):
            return NotImplemented
        return (self.inner, self.moves, self.max_moves) == (other.inner, other.moves, other.max_moves)

    def __hash__(self) -> int:
        return hash((self.inner, self.moves, self.max_moves))

    def __repr__(self) -> str:
        return f"MaxMovesBoard(inner={self.inner!r}, moves={self.moves}, max_moves={self.max_moves})"

    def __str__(self) -> str:
        return f"{self.inner}\nmoves: {self.moves}/{self.max_moves}"