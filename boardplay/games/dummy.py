"""A tiny tree-shaped game for debugging.

A game is written as an outcome (``A``, ``B`` or ``=``) or as a parenthesised list of
sub-games, for example ``(AA(BB)=B)``: five moves, the third leading to a position with
two moves that are both wins for B.
"""

from __future__ import annotations

import itertools
from typing import Iterable, Optional, Tuple, Union

from boardplay.board import Board, Outcome, Player

_OUTCOMES = {
    "A": Outcome.won_by(Player.A),
    "B": Outcome.won_by(Player.B),
    "=": Outcome.draw(),
}

_Tree = Union[Outcome, Tuple["_Tree", ...]]


class DummyParseError(ValueError):
    """Raised when a dummy game description cannot be parsed."""

    def __init__(self, text: str, position: int):
        self.text = text
        self.position = position
        self.remaining = text[position:]
        super().__init__(f"cannot parse dummy game at position {position}: {self.remaining!r}")


def _parse_tree(text: str) -> _Tree:
    pos = 0

    def node() -> _Tree:
        nonlocal pos
        if pos >= len(text):
            raise DummyParseError(text, pos)
        char = text[pos]
        if char in _OUTCOMES:
            pos += 1
            return _OUTCOMES[char]
        if char != "(":
            raise DummyParseError(text, pos)
        pos += 1
        children = []
        while pos < len(text) and text[pos] != ")":
            children.append(node())
        if not children or pos >= len(text):
            raise DummyParseError(text, pos)
        pos += 1
        return tuple(children)

    tree = node()
    if pos != len(text):
        raise DummyParseError(text, pos)
    return tree


class DummyGame(Board):
    """A game whose positions form an explicit tree of outcomes."""

    def __init__(self, state: _Tree, player: Player = Player.A):
        self._state = state
        self._player = player

    @classmethod
    def parse(cls, text: str) -> "DummyGame":
        return cls(_parse_tree(text))

    def next_player(self) -> Player:
        return self._player

    def is_available_move(self, mv: int) -> bool:
        if isinstance(self._state, tuple):
            return 0 <= mv < len(self._state)
        return False

    def play(self, mv: int) -> None:
        if not self.is_available_move(mv):
            raise ValueError(f"{mv!r} is not available on {self!r}")
        self._state = self._state[mv]
        self._player = self._player.other()

    def outcome(self) -> Optional[Outcome]:
        return None if isinstance(self._state, tuple) else self._state

    @classmethod
    def can_lose_after_move(cls) -> bool:
        return True

    @classmethod
    def all_possible_moves(cls) -> Iterable[int]:
        return itertools.count()

    def available_moves(self) -> range:
        if self.is_done():
            raise ValueError(f"cannot get available moves for done board {self!r}")
        return range(len(self._state))

    def __eq__(self, other) -> bool:
        if not isinstance(other, DummyGame):
            return NotImplemented
        return (self._state, self._player) == (other._state, other._player)

    def __hash__(self) -> int:
        return hash((self._state, self._player))

    def __repr__(self) -> str:
        return f"DummyGame(state={self._state!r}, player={self._player.value})"

    __str__ = __repr__