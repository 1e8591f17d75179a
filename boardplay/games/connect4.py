"""Connect Four on a 7x6 board, stored as two bitboards with one byte per column."""

from __future__ import annotations

from typing import Optional, Tuple

from boardplay.board import Board, D1Symmetry, Outcome, Player


def _mask(col: int, row: int) -> int:
    return 1 << (row + col * 8)


def _get(tiles: int, col: int, row: int) -> bool:
    return tiles & _mask(col, row) != 0


def _swap_bytes(value: int) -> int:
    return int.from_bytes(value.to_bytes(8, "little"), "big")


class Connect4(Board):
    """A Connect Four position."""

    WIDTH = 7
    HEIGHT = 6
    TILES = WIDTH * HEIGHT

    def __init__(self):
        self._tiles_next = 0
        self._tiles_occupied = 0
        self._outcome: Optional[Outcome] = None

    @classmethod
    def _from_parts(cls, tiles_next: int, tiles_occupied: int, outcome: Optional[Outcome]) -> "Connect4":
        board = cls()
        board._tiles_next = tiles_next
        board._tiles_occupied = tiles_occupied
        board._outcome = outcome
        return board

    def clone(self) -> "Connect4":
        return Connect4._from_parts(self._tiles_next, self._tiles_occupied, self._outcome)

    def perfect_hash(self) -> int:
        """A unique, nonzero hash whose top 8 bits are zero."""
        return self._tiles_next + self._tiles_occupied + 0x1010101010101

    def game_length(self) -> int:
        """The number of moves played so far."""
        return self._tiles_occupied.bit_count()

    def next_player(self) -> Player:
        return Player.A if self._tiles_occupied.bit_count() % 2 == 0 else Player.B

    def is_available_move(self, mv: int) -> bool:
        if self.is_done():
            raise ValueError(f"board is done: {self!r}")
        if not 0 <= mv < self.WIDTH:
            raise ValueError(f"column {mv!r} out of range")
        return self._tiles_occupied & _mask(mv, self.HEIGHT - 1) == 0

    def play(self, mv: int) -> None:
        if not self.is_available_move(mv):
            raise ValueError(f"{mv!r} is not available on {self!r}")
        player = self.next_player()

        self._tiles_next ^= self._tiles_occupied
        self._tiles_occupied |= self._tiles_occupied + _mask(mv, 0)

        tiles_curr = self._tiles_next ^ self._tiles_occupied
        for half in (1, 9, 8, 7):
            pairs = tiles_curr & (tiles_curr << half)
            if pairs & (pairs << (half * 2)):
                self._outcome = Outcome.won_by(player)
                break
        if self._outcome is None and self._tiles_occupied.bit_count() == self.TILES:
            self._outcome = Outcome.draw()

    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    @classmethod
    def can_lose_after_move(cls) -> bool:
        return False

    @classmethod
    def all_possible_moves(cls) -> range:
        return range(cls.WIDTH)

    @classmethod
    def symmetries(cls) -> Tuple[D1Symmetry, ...]:
        return D1Symmetry.all()

    def map(self, sym: D1Symmetry) -> "Connect4":
        if sym.mirror:
            return Connect4._from_parts(
                _swap_bytes(self._tiles_next), _swap_bytes(self._tiles_occupied), self._outcome
            )
        return self.clone()

    def map_move(self, sym: D1Symmetry, mv: int) -> int:
        if not 0 <= mv < self.WIDTH:
            raise ValueError(f"column {mv!r} out of range")
        return self.WIDTH - mv - 1 if sym.mirror else mv

    def canonical_key(self) -> Tuple[int, int]:
        return (self._tiles_next, self._tiles_occupied)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Connect4):
            return NotImplemented
        return (self._tiles_next, self._tiles_occupied, self._outcome) == (
            other._tiles_next,
            other._tiles_occupied,
            other._outcome,
        )

    def __hash__(self) -> int:
        return hash(self.perfect_hash())

    def __repr__(self) -> str:
        outcome = "None" if self._outcome is None else f"Some({self._outcome!r})"
        return (
            f"Connect4 {{ tiles_next: {self._tiles_next:x}, tiles_occupied: {self._tiles_occupied:x}, "
            f"next_player: {self.next_player().value}, outcome: {outcome}}}"
        )

    def __str__(self) -> str:
        theirs = self._tiles_next ^ self._tiles_occupied
        if self.next_player() is Player.A:
            tiles_a, tiles_b = self._tiles_next, theirs
        else:
            tiles_a, tiles_b = theirs, self._tiles_next

        lines = []
        for row in reversed(range(self.HEIGHT)):
            line = ""
            for col in range(self.WIDTH):
                if _get(tiles_a, col, row):
                    line += "a"
                elif _get(tiles_b, col, row):
                    line += "b"
                else:
                    line += "."
            if row == self.HEIGHT // 2:
                line += "    " + self.next_player().to_char()
            lines.append(line)
        return "\n".join(lines) + "\n"