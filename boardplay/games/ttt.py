"""Tic-tac-toe on a 3x3 grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from boardplay.board import Board, Outcome, Player


@dataclass(frozen=True, order=True)
class Coord3:
    """A coordinate on a 3x3 grid."""

    y: int
    x: int

    @staticmethod
    def from_xy(x: int, y: int) -> "Coord3":
        if not (0 <= x < 3 and 0 <= y < 3):
            raise ValueError(f"coordinate ({x}, {y}) out of range")
        return Coord3(y, x)

    @staticmethod
    def all() -> Iterator["Coord3"]:
        return (Coord3.from_xy(x, y) for y in range(3) for x in range(3))

    def index(self) -> int:
        return self.x + 3 * self.y

    def __repr__(self) -> str:
        return f"Coord3({self.x}, {self.y})"

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


_LINES = (
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)


def _tile_to_char(tile: Optional[Player]) -> str:
    return {Player.A: "a", Player.B: "b", None: " "}[tile]


class TTTBoard(Board):
    """A tic-tac-toe position."""

    def __init__(self):
        self._tiles: List[Optional[Player]] = [None] * 9
        self._next_player = Player.A
        self._outcome: Optional[Outcome] = None

    def tile(self, coord: Coord3) -> Optional[Player]:
        return self._tiles[coord.index()]

    def next_player(self) -> Player:
        return self._next_player

    def is_available_move(self, mv: Coord3) -> bool:
        if self.is_done():
            raise ValueError(f"board is done: {self!r}")
        return self._tiles[mv.index()] is None

    def play(self, mv: Coord3) -> None:
        if not self.is_available_move(mv):
            raise ValueError(f"{mv!r} is not available on {self!r}")
        player = self._next_player
        self._tiles[mv.index()] = player

        won = any(
            all(self._tiles[Coord3.from_xy(x, y).index()] is player for x, y in line) for line in _LINES
        )
        if won:
            self._outcome = Outcome.won_by(player)
        elif all(tile is not None for tile in self._tiles):
            self._outcome = Outcome.draw()
        else:
            self._outcome = None

        self._next_player = player.other()

    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    @classmethod
    def can_lose_after_move(cls) -> bool:
        return False

    @classmethod
    def all_possible_moves(cls) -> Iterator[Coord3]:
        return Coord3.all()

    def __eq__(self, other) -> bool:
        if not isinstance(other, TTTBoard):
            return NotImplemented
        return (self._tiles, self._next_player, self._outcome) == (
            other._tiles,
            other._next_player,
            other._outcome,
        )

    def __hash__(self) -> int:
        return hash((tuple(self._tiles), self._next_player, self._outcome))

    def __repr__(self) -> str:
        tiles = "".join(_tile_to_char(t) for t in self._tiles)
        return f"TTTBoard(tiles={tiles!r}, next_player={self._next_player.value}, outcome={self._outcome!r})"

    def __str__(self) -> str:
        lines = ["+---+"]
        for y in range(3):
            row = "|" + "".join(_tile_to_char(self._tiles[Coord3.from_xy(x, y).index()]) for x in range(3)) + "|"
            if y == 1:
                row += "   " + _tile_to_char(self._next_player)
            lines.append(row)
        lines.append("+---+")
        return "\n".join(lines) + "\n"