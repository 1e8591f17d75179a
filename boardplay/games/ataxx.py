"""Ataxx on square boards of up to 8x8 tiles, with FEN and UAI move notation.

Tiles are kept as 64-bit bitboards with one bit per square, indexed ``x + 8 * y``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from boardplay.board import Board, D4Symmetry, Outcome, Player

MAX_MOVES_SINCE_LAST_COPY = 100

_WIDTH = 8


def _bits(x: int) -> Iterator[int]:
    while x:
        low = x & -x
        yield low.bit_length() - 1
        x ^= low


def _nth_bit(x: int, n: int) -> int:
    for i, bit in enumerate(_bits(x)):
        if i == n:
            return bit
    raise IndexError(f"bitboard has no set bit number {n}")


def _distance_masks(distance: int) -> List[int]:
    masks = []
    for square in range(_WIDTH * _WIDTH):
        sx, sy = square % _WIDTH, square // _WIDTH
        mask = 0
        for other in range(_WIDTH * _WIDTH):
            ox, oy = other % _WIDTH, other // _WIDTH
            if max(abs(ox - sx), abs(oy - sy)) == distance:
                mask |= 1 << other
        masks.append(mask)
    return masks


_ADJACENT = _distance_masks(1)
_RING = _distance_masks(2)

_FULL_FOR_SIZE = [
    sum(1 << (x + _WIDTH * y) for x in range(size) for y in range(size)) for size in range(_WIDTH + 1)
]


def _adjacent(tiles: int) -> int:
    result = 0
    for bit in _bits(tiles):
        result |= _ADJACENT[bit]
    return result


def _ring(tiles: int) -> int:
    result = 0
    for bit in _bits(tiles):
        result |= _RING[bit]
    return result


@dataclass(frozen=True, order=True)
class Coord8:
    """A square on a board of at most 8x8 tiles."""

    index: int

    @staticmethod
    def from_xy(x: int, y: int) -> "Coord8":
        if not (0 <= x < _WIDTH and 0 <= y < _WIDTH):
            raise ValueError(f"coordinate ({x}, {y}) out of range")
        return Coord8(x + _WIDTH * y)

    @property
    def x(self) -> int:
        return self.index % _WIDTH

    @property
    def y(self) -> int:
        return self.index // _WIDTH

    @property
    def bit(self) -> int:
        return 1 << self.index

    def valid_for_size(self, size: int) -> bool:
        return self.x < size and self.y < size

    def diagonal_distance(self, other: "Coord8") -> int:
        """The number of king steps between the two squares."""
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def __repr__(self) -> str:
        return f"Coord8({self.x}, {self.y})"


class InvalidUaiMove(ValueError):
    """Raised for a string that is not a move in UAI notation."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"invalid UAI move {text!r}")


class InvalidAtaxxFen(ValueError):
    """Raised for a string that is not a valid Ataxx FEN."""

    def __init__(self, fen: str, reason: str):
        self.fen = fen
        self.reason = reason
        super().__init__(f"invalid ataxx FEN {fen!r}: {reason}")


def coord_to_uai(coord: Coord8) -> str:
    return f"{chr(ord('a') + coord.x)}{coord.y + 1}"


def coord_from_uai(s: str) -> Coord8:
    if len(s) != 2:
        raise ValueError(f"UAI coordinate must have length 2, got {s!r}")
    return Coord8.from_xy(ord(s[0]) - ord("a"), ord(s[1]) - ord("0") - 1)


_PASS, _COPY, _JUMP = 0, 1, 2


@dataclass(frozen=True, order=True)
class Move:
    """A pass, a copy onto ``to``, or a jump from ``from_`` to ``to``."""

    kind: int
    from_: Optional[Coord8] = None
    to: Optional[Coord8] = None

    @staticmethod
    def pass_() -> "Move":
        return Move(_PASS)

    @staticmethod
    def copy(to: Coord8) -> "Move":
        return Move(_COPY, None, to)

    @staticmethod
    def jump(from_: Coord8, to: Coord8) -> "Move":
        return Move(_JUMP, from_, to)

    @property
    def is_pass(self) -> bool:
        return self.kind == _PASS

    @property
    def is_copy(self) -> bool:
        return self.kind == _COPY

    @property
    def is_jump(self) -> bool:
        return self.kind == _JUMP

    def valid_for_size(self, size: int) -> bool:
        if self.kind == _PASS:
            return True
        if self.kind == _COPY:
            return self.to.valid_for_size(size)
        return (
            self.from_.valid_for_size(size)
            and self.to.valid_for_size(size)
            and self.from_.diagonal_distance(self.to) == 2
        )

    def to_uai(self) -> str:
        if self.kind == _PASS:
            return "0000"
        if self.kind == _COPY:
            return coord_to_uai(self.to)
        return coord_to_uai(self.from_) + coord_to_uai(self.to)

    @staticmethod
    def from_uai(s: str) -> "Move":
        if s == "0000":
            return Move.pass_()
        if len(s) == 2:
            return Move.copy(coord_from_uai(s))
        if len(s) == 4:
            return Move.jump(coord_from_uai(s[:2]), coord_from_uai(s[2:]))
        raise InvalidUaiMove(s)

    def __repr__(self) -> str:
        return self.to_uai()

    __str__ = __repr__


def _player_symbol(player: Player) -> str:
    return "x" if player is Player.A else "o"


class AtaxxBoard(Board):
    """An Ataxx position; the default is the 7x7 board with pieces in the corners."""

    MAX_SIZE = 8

    def __init__(self):
        self._init_diagonal(7)

    def _init_diagonal(self, size: int) -> None:
        if size > self.MAX_SIZE:
            raise ValueError(f"size {size} is too large")
        if size < 2:
            raise ValueError(f"diagonal board is only possible with size >= 2, got {size}")
        corner = size - 1
        self._size = size
        self._tiles_a = Coord8.from_xy(0, corner).bit | Coord8.from_xy(corner, 0).bit
        self._tiles_b = Coord8.from_xy(0, 0).bit | Coord8.from_xy(corner, corner).bit
        self._gaps = 0
        self._moves_since_last_copy = 0
        self._next_player = Player.A
        self._outcome: Optional[Outcome] = Outcome.draw() if size == 2 else None

    @classmethod
    def _raw(cls, size, tiles_a, tiles_b, gaps, moves_since_last_copy, next_player, outcome) -> "AtaxxBoard":
        board = cls.__new__(cls)
        board._size = size
        board._tiles_a = tiles_a
        board._tiles_b = tiles_b
        board._gaps = gaps
        board._moves_since_last_copy = moves_since_last_copy
        board._next_player = next_player
        board._outcome = outcome
        return board

    @classmethod
    def diagonal(cls, size: int) -> "AtaxxBoard":
        board = cls.__new__(cls)
        board._init_diagonal(size)
        return board

    @classmethod
    def empty(cls, size: int) -> "AtaxxBoard":
        if size > cls.MAX_SIZE:
            raise ValueError(f"size {size} is too large")
        return cls._raw(size, 0, 0, 0, 0, Player.A, Outcome.draw())

    @classmethod
    def from_parts(
        cls,
        size: int,
        tiles_a: int,
        tiles_b: int,
        gaps: int,
        moves_since_last_copy: int,
        next_player: Player,
    ) -> "AtaxxBoard":
        if not 0 <= size <= cls.MAX_SIZE:
            raise ValueError(f"size {size} is out of range")
        board = cls._raw(size, tiles_a, tiles_b, gaps, moves_since_last_copy, next_player, None)
        board._update_outcome()
        board.assert_valid()
        return board

    def clone(self) -> "AtaxxBoard":
        return AtaxxBoard._raw(
            self._size,
            self._tiles_a,
            self._tiles_b,
            self._gaps,
            self._moves_since_last_copy,
            self._next_player,
            self._outcome,
        )

    @property
    def size(self) -> int:
        return self._size

    @property
    def tiles_a(self) -> int:
        return self._tiles_a

    @property
    def tiles_b(self) -> int:
        return self._tiles_b

    @property
    def gaps(self) -> int:
        return self._gaps

    @property
    def moves_since_last_copy(self) -> int:
        return self._moves_since_last_copy

    def _full_mask(self) -> int:
        return _FULL_FOR_SIZE[self._size]

    def valid_coord(self, coord: Coord8) -> bool:
        return coord.valid_for_size(self._size)

    def tile(self, coord: Coord8) -> Optional[Player]:
        if not self.valid_coord(coord):
            raise ValueError(f"{coord!r} is not on a board of size {self._size}")
        if self._tiles_a & coord.bit:
            return Player.A
        if self._tiles_b & coord.bit:
            return Player.B
        return None

    def free_tiles(self) -> int:
        return ~(self._tiles_a | self._tiles_b | self._gaps) & self._full_mask()

    def must_pass(self) -> bool:
        """Whether the next player must pass; False once the game is done."""
        return not self.is_done() and self._must_pass_with_tiles(self.tiles_pov()[0])

    def _must_pass_with_tiles(self, tiles: int) -> bool:
        targets = (_adjacent(tiles) | _ring(tiles)) & self._full_mask()
        return targets & self.free_tiles() == 0

    def tiles_pov(self) -> Tuple[int, int]:
        """The tiles of the next player and of the other player."""
        if self._next_player is Player.A:
            return self._tiles_a, self._tiles_b
        return self._tiles_b, self._tiles_a

    def _set_tiles_pov(self, mine: int, theirs: int) -> None:
        if self._next_player is Player.A:
            self._tiles_a, self._tiles_b = mine, theirs
        else:
            self._tiles_b, self._tiles_a = mine, theirs

    def _compute_outcome(self) -> Optional[Outcome]:
        a_empty = self._tiles_a == 0
        b_empty = self._tiles_b == 0
        if self._moves_since_last_copy >= MAX_MOVES_SINCE_LAST_COPY or (a_empty and b_empty):
            return Outcome.draw()
        if a_empty:
            return Outcome.won_by(Player.B)
        if b_empty:
            return Outcome.won_by(Player.A)
        if self._must_pass_with_tiles(self._tiles_a) and self._must_pass_with_tiles(self._tiles_b):
            count_a = self._tiles_a.bit_count()
            count_b = self._tiles_b.bit_count()
            if count_a < count_b:
                return Outcome.won_by(Player.B)
            if count_a > count_b:
                return Outcome.won_by(Player.A)
            return Outcome.draw()
        return None

    def _update_outcome(self) -> None:
        self._outcome = self._compute_outcome()

    def assert_valid(self) -> None:
        """Raise ValueError if the tiles overlap, leave the board or the outcome is stale."""
        invalid = ~self._full_mask()
        checks = [
            (self._tiles_a & invalid == 0, "tiles of A outside the board"),
            (self._tiles_b & invalid == 0, "tiles of B outside the board"),
            (self._gaps & invalid == 0, "gaps outside the board"),
            (self._tiles_a & self._tiles_b == 0, "tiles of A and B overlap"),
            (self._tiles_a & self._gaps == 0, "tiles of A overlap gaps"),
            (self._tiles_b & self._gaps == 0, "tiles of B overlap gaps"),
            (self._outcome == self._compute_outcome(), "outcome does not match the tiles"),
        ]
        for ok, message in checks:
            if not ok:
                raise ValueError(f"invalid board: {message}")

    def _map_coord(self, coord: Coord8, sym: D4Symmetry) -> Coord8:
        if not self.valid_coord(coord):
            raise ValueError(f"{coord!r} is not on a board of size {self._size}")
        return Coord8.from_xy(*sym.map_xy(coord.x, coord.y, self._size))

    def _map_tiles(self, tiles: int, sym: D4Symmetry) -> int:
        result = 0
        for bit in _bits(tiles):
            result |= self._map_coord(Coord8(bit), sym).bit
        return result

    def next_player(self) -> Player:
        return self._next_player

    def _check_not_done(self) -> None:
        if self.is_done():
            raise ValueError(f"board is done: {self!r}")

    def is_available_move(self, mv: Move) -> bool:
        self._check_not_done()
        if not mv.valid_for_size(self._size):
            return False
        mine = self.tiles_pov()[0]
        if mv.is_pass:
            return self._must_pass_with_tiles(mine)
        if mv.is_copy:
            return bool(self.free_tiles() & _adjacent(mine) & mv.to.bit)
        return bool(self.free_tiles() & mv.to.bit) and bool(mine & mv.from_.bit)

    def random_available_move(self, rng: random.Random) -> Move:
        self._check_not_done()
        mine = self.tiles_pov()[0]
        free = self.free_tiles()
        if self._must_pass_with_tiles(mine):
            return Move.pass_()

        copy_targets = free & _adjacent(mine)
        jump_targets = free & _ring(mine)
        copy_count = copy_targets.bit_count()
        jump_count = sum((mine & _RING[to]).bit_count() for to in _bits(jump_targets))

        index = rng.randrange(copy_count + jump_count)
        if index < copy_count:
            return Move.copy(Coord8(_nth_bit(copy_targets, index)))

        left = index - copy_count
        for to in _bits(jump_targets):
            sources = mine & _RING[to]
            count = sources.bit_count()
            if left < count:
                return Move.jump(Coord8(_nth_bit(sources, left)), Coord8(to))
            left -= count
        raise RuntimeError("no available move found")

    def play(self, mv: Move) -> None:
        if not self.is_available_move(mv):
            raise ValueError(f"{mv!r} is not available on {self!r}")

        if mv.is_pass:
            # the other player is guaranteed a real move, otherwise the game would be over
            self._next_player = self._next_player.other()
            self._moves_since_last_copy += 1
            return

        mine, theirs = self.tiles_pov()
        if mv.is_jump:
            mine &= ~mv.from_.bit

        to = mv.to.bit
        converted = theirs & _ADJACENT[mv.to.index]
        mine |= to | converted
        theirs &= ~converted
        self._set_tiles_pov(mine, theirs)

        self._moves_since_last_copy = 0 if mv.is_copy else self._moves_since_last_copy + 1
        self._update_outcome()
        self._next_player = self._next_player.other()

    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    @classmethod
    def can_lose_after_move(cls) -> bool:
        return True

    @classmethod
    def all_possible_moves(cls) -> Iterator[Move]:
        full = _FULL_FOR_SIZE[cls.MAX_SIZE]
        yield Move.pass_()
        for to in _bits(full):
            yield Move.copy(Coord8(to))
        for to in _bits(full):
            for from_ in _bits(_RING[to] & full):
                yield Move.jump(Coord8(from_), Coord8(to))

    def available_moves(self) -> Iterator[Move]:
        if self.is_done():
            raise ValueError(f"cannot get available moves for done board {self!r}")
        return self._iter_available()

    def _iter_available(self) -> Iterator[Move]:
        mine = self.tiles_pov()[0]
        free = self.free_tiles()
        if self._must_pass_with_tiles(mine):
            yield Move.pass_()
            return
        for to in _bits(free & _adjacent(mine)):
            yield Move.copy(Coord8(to))
        for to in _bits(free & _ring(mine)):
            for from_ in _bits(mine & _RING[to]):
                yield Move.jump(Coord8(from_), Coord8(to))

    @classmethod
    def symmetries(cls) -> Tuple[D4Symmetry, ...]:
        return D4Symmetry.all()

    def map(self, sym: D4Symmetry) -> "AtaxxBoard":
        return AtaxxBoard._raw(
            self._size,
            self._map_tiles(self._tiles_a, sym),
            self._map_tiles(self._tiles_b, sym),
            self._map_tiles(self._gaps, sym),
            self._moves_since_last_copy,
            self._next_player,
            self._outcome,
        )

    def map_move(self, sym: D4Symmetry, mv: Move) -> Move:
        if mv.is_pass:
            return mv
        if mv.is_copy:
            return Move.copy(self._map_coord(mv.to, sym))
        return Move.jump(self._map_coord(mv.from_, sym), self._map_coord(mv.to, sym))

    def canonical_key(self) -> Tuple[int, int, int]:
        return (self._tiles_a, self._tiles_b, self._gaps)

    @classmethod
    def from_fen(cls, fen: str) -> "AtaxxBoard":
        """Parse a board from FEN; raises InvalidAtaxxFen."""
        blocks = fen.split(" ")
        if len(blocks) != 4:
            raise InvalidAtaxxFen(fen, "Not all 4 components present")
        board_str, next_str, half_str, full_str = blocks

        if board_str == "/":
            board = cls.empty(0)
        else:
            rows = board_str.split("/")
            size = len(rows)
            if size > cls.MAX_SIZE:
                raise InvalidAtaxxFen(fen, "More rows than maximum board size")
            board = cls.empty(size)
            for i, line in enumerate(rows):
                y = size - 1 - i
                x = 0
                for char in line:
                    if x >= size:
                        raise InvalidAtaxxFen(fen, "Too many columns for size")
                    if char in "0123456789":
                        x += int(char)
                        continue
                    tile = Coord8.from_xy(x, y).bit
                    if char == "x":
                        board._tiles_a |= tile
                    elif char == "o":
                        board._tiles_b |= tile
                    elif char == "-":
                        board._gaps |= tile
                    else:
                        raise InvalidAtaxxFen(fen, "Invalid character in board")
                    x += 1

        if next_str == "x":
            board._next_player = Player.A
        elif next_str == "o":
            board._next_player = Player.B
        else:
            raise InvalidAtaxxFen(fen, "Invalid next player")

        if not (half_str.isascii() and half_str.isdigit()) or int(half_str) > 255:
            raise InvalidAtaxxFen(fen, "Invalid half counter")
        board._moves_since_last_copy = int(half_str)
        if not (full_str.isascii() and full_str.isdigit()) or int(full_str) > 2**32 - 1:
            raise InvalidAtaxxFen(fen, "Invalid full counter")

        board._update_outcome()
        board.assert_valid()
        return board

    def to_fen(self) -> str:
        parts = []
        free = self.free_tiles()
        for y in reversed(range(self._size)):
            if y != self._size - 1:
                parts.append("/")
            empty_count = 0
            for x in range(self._size):
                coord = Coord8.from_xy(x, y)
                if free & coord.bit:
                    empty_count += 1
                    continue
                if empty_count:
                    parts.append(str(empty_count))
                    empty_count = 0
                player = self.tile(coord)
                parts.append("-" if player is None else _player_symbol(player))
            if empty_count:
                parts.append(str(empty_count))
        parts.append(f" {_player_symbol(self._next_player)} {self._moves_since_last_copy} 1")
        return "".join(parts)

    def _key(self):
        return (
            self._size,
            self._tiles_a,
            self._tiles_b,
            self._gaps,
            self._moves_since_last_copy,
            self._next_player,
            self._outcome,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, AtaxxBoard):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f'AtaxxBoard("{self.to_fen()}")'

    def __str__(self) -> str:
        lines = [f"FEN: {self.to_fen()}"]
        for y in reversed(range(self._size)):
            line = f"{y + 1} "
            for x in range(self._size):
                coord = Coord8.from_xy(x, y)
                player = self.tile(coord)
                if player is not None:
                    line += _player_symbol(player)
                elif self._gaps & coord.bit:
                    line += "-"
                else:
                    line += "."
            if y == 3:
                line += f"    {_player_symbol(self._next_player)}  {self._moves_since_last_copy}"
            lines.append(line)
        lines.append("  " + "".join(chr(ord("a") + x) for x in range(self._size)))
        return "\n".join(lines) + "\n"