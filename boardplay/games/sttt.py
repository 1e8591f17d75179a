"""Super tic-tac-toe: nine tic-tac-toe grids arranged in a larger one.

The sub-grid in which a player may move is the one matching the position of the
previous move inside its own sub-grid, or any open sub-grid if that one is closed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from boardplay.board import Board, D4Symmetry, Outcome, Player

_FULL_MASK = 0b111_111_111

_WIN_GRIDS = (
    2155905152, 4286611584, 4210076288, 4293962368, 3435954304, 4291592320, 4277971584, 4294748800,
    2863300736, 4294635760, 4210731648, 4294638320, 4008607872, 4294897904, 4294967295, 4294967295,
)


def _has_bit(x: int, i: int) -> bool:
    return ((x >> i) & 1) != 0


def _bits(x: int) -> Iterator[int]:
    while x:
        low = x & -x
        yield low.bit_length() - 1
        x ^= low


def _compact_grid(grid: int) -> int:
    return (grid | grid >> 9) & _FULL_MASK


def _is_win_grid(grid: int) -> bool:
    return _has_bit(_WIN_GRIDS[grid // 32], grid % 32)


def _get_player(grid: int, index: int) -> Optional[Player]:
    if _has_bit(grid, index):
        return Player.A
    if _has_bit(grid, index + 9):
        return Player.B
    return None


@dataclass(frozen=True, order=True)
class Coord:
    """A tile, indexed by macro grid ``om`` and position ``os`` inside it as ``9 * om + os``."""

    o: int

    @staticmethod
    def all() -> Iterator["Coord"]:
        return (Coord(o) for o in range(81))

    @staticmethod
    def all_yx() -> Iterator["Coord"]:
        return (Coord.from_xy(i % 9, i // 9) for i in range(81))

    @staticmethod
    def from_oo(om: int, os: int) -> "Coord":
        if not (0 <= om < 9 and 0 <= os < 9):
            raise ValueError(f"coordinate ({om}, {os}) out of range")
        return Coord(9 * om + os)

    @staticmethod
    def from_o(o: int) -> "Coord":
        if not 0 <= o < 81:
            raise ValueError(f"coordinate {o} out of range")
        return Coord(o)

    @staticmethod
    def from_xy(x: int, y: int) -> "Coord":
        if not (0 <= x < 9 and 0 <= y < 9):
            raise ValueError(f"coordinate ({x}, {y}) out of range")
        return Coord(((x // 3) + (y // 3) * 3) * 9 + ((x % 3) + (y % 3) * 3))

    def om(self) -> int:
        return self.o // 9

    def os(self) -> int:
        return self.o % 9

    def yx(self) -> int:
        return 9 * self.y() + self.x()

    def x(self) -> int:
        return (self.om() % 3) * 3 + (self.os() % 3)

    def y(self) -> int:
        return (self.om() // 3) * 3 + (self.os() // 3)

    def __repr__(self) -> str:
        return f"Coord({self.om()}, {self.os()})"

    def __str__(self) -> str:
        return f"({self.om()}, {self.os()})"


def _map_oo(sym: D4Symmetry, oo: int) -> int:
    x, y = sym.map_xy(oo % 3, oo // 3, 3)
    return x + y * 3


def _map_grid(sym: D4Symmetry, grid: int) -> int:
    result = 0
    for oo in range(9):
        result |= ((grid >> oo) & 0b1_000_000_001) << _map_oo(sym, oo)
    return result


class STTTBoard(Board):
    """A super tic-tac-toe position."""

    def __init__(self):
        self._grids: List[int] = [0] * 9
        self._main_grid = 0
        self._last_move: Optional[Coord] = None
        self._next_player = Player.A
        self._outcome: Optional[Outcome] = None
        self._macro_mask = _FULL_MASK
        self._macro_open = _FULL_MASK

    def clone(self) -> "STTTBoard":
        board = STTTBoard()
        board._grids = list(self._grids)
        board._main_grid = self._main_grid
        board._last_move = self._last_move
        board._next_player = self._next_player
        board._outcome = self._outcome
        board._macro_mask = self._macro_mask
        board._macro_open = self._macro_open
        return board

    @property
    def last_move(self) -> Optional[Coord]:
        return self._last_move

    def tile(self, coord: Coord) -> Optional[Player]:
        return _get_player(self._grids[coord.om()], coord.os())

    def macr(self, om: int) -> Optional[Player]:
        """The owner of macro grid ``om``, if any."""
        return _get_player(self._main_grid, om)

    def is_macro_open(self, om: int) -> bool:
        return _has_bit(self._macro_open, om)

    def count_tiles(self) -> int:
        """The number of non-empty tiles."""
        return sum(grid.bit_count() for grid in self._grids)

    def _set_tile_and_update(self, player: Player, coord: Coord) -> None:
        om, os = coord.om(), coord.os()
        p = 9 * player.index()

        new_grid = self._grids[om] | (1 << (os + p))
        self._grids[om] = new_grid

        grid_win = _is_win_grid((new_grid >> p) & _FULL_MASK)
        if grid_win:
            self._main_grid |= 1 << (om + p)
            if _is_win_grid((self._main_grid >> p) & _FULL_MASK):
                self._outcome = Outcome.won_by(player)

        if grid_win or new_grid.bit_count() == 9:
            self._macro_open &= ~(1 << om)
            if self._macro_open == 0 and self._outcome is None:
                self._outcome = Outcome.draw()
        self._macro_mask = (1 << os) if _has_bit(self._macro_open, os) else self._macro_open

    def _check_not_done(self) -> None:
        if self.is_done():
            raise ValueError(f"board must not be done: {self!r}")

    def next_player(self) -> Player:
        return self._next_player

    def is_available_move(self, mv: Coord) -> bool:
        self._check_not_done()
        return _has_bit(self._macro_mask, mv.om()) and not _has_bit(
            _compact_grid(self._grids[mv.om()]), mv.os()
        )

    def random_available_move(self, rng: random.Random) -> Coord:
        self._check_not_done()
        count = sum(9 - self._grids[om].bit_count() for om in _bits(self._macro_mask))
        index = rng.randrange(count)
        for om in _bits(self._macro_mask):
            grid = self._grids[om]
            grid_count = 9 - grid.bit_count()
            if index < grid_count:
                free = ~_compact_grid(grid) & _FULL_MASK
                os = next(b for i, b in enumerate(_bits(free)) if i == index)
                return Coord.from_oo(om, os)
            index -= grid_count
        raise RuntimeError("no available move found")

    def play(self, mv: Coord) -> None:
        if not self.is_available_move(mv):
            raise ValueError(f"{mv!r} is not available on {self!r}")
        self._set_tile_and_update(self._next_player, mv)
        self._last_move = mv
        self._next_player = self._next_player.other()

    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    @classmethod
    def can_lose_after_move(cls) -> bool:
        return False

    @classmethod
    def all_possible_moves(cls) -> Iterator[Coord]:
        return Coord.all()

    def available_moves(self) -> Iterator[Coord]:
        if self.is_done():
            raise ValueError(f"cannot get available moves for done board {self!r}")
        return self._iter_available()

    def _iter_available(self) -> Iterator[Coord]:
        for om in _bits(self._macro_mask):
            free = ~_compact_grid(self._grids[om]) & _FULL_MASK
            for os in _bits(free):
                yield Coord.from_oo(om, os)

    @classmethod
    def symmetries(cls) -> Tuple[D4Symmetry, ...]:
        return D4Symmetry.all()

    def map(self, sym: D4Symmetry) -> "STTTBoard":
        board = self.clone()
        grids = [0] * 9
        for oo in range(9):
            grids[_map_oo(sym, oo)] = _map_grid(sym, self._grids[oo])
        board._grids = grids
        board._main_grid = _map_grid(sym, self._main_grid)
        board._last_move = None if self._last_move is None else self.map_move(sym, self._last_move)
        board._macro_mask = _map_grid(sym, self._macro_mask)
        board._macro_open = _map_grid(sym, self._macro_open)
        return board

    def map_move(self, sym: D4Symmetry, mv: Coord) -> Coord:
        return Coord.from_oo(_map_oo(sym, mv.om()), _map_oo(sym, mv.os()))

    def canonical_key(self) -> Tuple[int, int, int, int]:
        last = -1 if self._last_move is None else self._last_move.o
        return (self._main_grid, last, self._macro_mask, self._macro_open)

    def _key(self):
        return (
            tuple(self._grids),
            self._main_grid,
            self._last_move,
            self._next_player,
            self._outcome,
            self._macro_mask,
            self._macro_open,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, STTTBoard):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f'STTTBoard("{board_to_compact_string(self)}")'

    def __str__(self) -> str:
        lines = []
        for y in range(9):
            if y in (3, 6):
                lines.append("---+---+---     +---+")
            line = ""
            for x in range(9):
                if x in (3, 6):
                    line += "|"
                line += _symbol_from_tile(self, Coord.from_xy(x, y))
            if 3 <= y < 6:
                ym = y - 3
                line += "     |"
                for xm in range(3):
                    om = xm + 3 * ym
                    line += _symbol_from_tuple(self.is_macro_open(om), False, self.macr(om))
                line += "|"
            lines.append(line)
        return "\n".join(lines) + "\n"


_SYMBOLS = {
    (False, False, Player.A): "x",
    (False, True, Player.A): "X",
    (False, False, Player.B): "o",
    (False, True, Player.B): "O",
    (True, False, None): ".",
    (False, False, None): " ",
}

_SYMBOL_TUPLES = {symbol: state for state, symbol in _SYMBOLS.items()}


def _symbol_from_tuple(is_available: bool, is_last: bool, player: Optional[Player]) -> str:
    state = (is_available, is_last, player)
    try:
        return _SYMBOLS[state]
    except KeyError:
        raise ValueError(f"invalid tile state {state!r}") from None


def _symbol_from_tile(board: STTTBoard, coord: Coord) -> str:
    is_last = coord == board.last_move
    is_available = not board.is_done() and board.is_available_move(coord)
    return _symbol_from_tuple(is_available, is_last, board.tile(coord))


def board_to_compact_string(board: STTTBoard) -> str:
    """The board as 81 symbols, one per tile in ``Coord.all()`` order."""
    return "".join(_symbol_from_tile(board, coord) for coord in Coord.all())


def board_from_compact_string(s: str) -> STTTBoard:
    """Rebuild a board from the output of :func:`board_to_compact_string`."""
    if len(s) != 81:
        raise ValueError("compact string should have length 81")

    board = STTTBoard()
    last_move: Optional[Tuple[Player, Coord]] = None

    for o, char in enumerate(s):
        coord = Coord.from_o(o)
        try:
            _, last, player = _SYMBOL_TUPLES[char]
        except KeyError:
            raise ValueError(f"unexpected character {char!r}") from None

        if last:
            if last_move is not None:
                raise ValueError("compact string cannot contain multiple last moves")
            last_move = (player, coord)

        if player is not None:
            board._set_tile_and_update(player, coord)

    if last_move is not None:
        player, coord = last_move
        board._set_tile_and_update(player, coord)
        board._last_move = coord
        board._next_player = player.other()

    return board