"""Core game abstractions: players, outcomes, symmetries, boards and bots."""

from __future__ import annotations

import copy
import enum
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Iterator, Optional, Tuple


class Player(enum.Enum):
    """One of the two players."""

    A = "A"
    B = "B"

    def other(self) -> "Player":
        return Player.B if self is Player.A else Player.A

    def index(self) -> int:
        return 0 if self is Player.A else 1

    def to_char(self) -> str:
        return self.value

    def sign(self, pov: "Player") -> int:
        """Return 1 if this player is ``pov``, -1 otherwise."""
        return 1 if self is pov else -1


@dataclass(frozen=True)
class WDL:
    """Win/draw/loss counts or probabilities."""

    win: Any = 0
    draw: Any = 0
    loss: Any = 0

    def total(self):
        return self.win + self.draw + self.loss

    def value(self):
        return self.win - self.loss

    def flip(self) -> "WDL":
        return WDL(self.loss, self.draw, self.win)

    def __add__(self, other: "WDL") -> "WDL":
        if not isinstance(other, WDL):
            return NotImplemented
        return WDL(self.win + other.win, self.draw + other.draw, self.loss + other.loss)

    def __truediv__(self, divisor) -> "WDL":
        return WDL(self.win / divisor, self.draw / divisor, self.loss / divisor)


class OutcomeWDL(enum.Enum):
    """An outcome seen from the point of view of one player."""

    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"

    def flip(self) -> "OutcomeWDL":
        if self is OutcomeWDL.WIN:
            return OutcomeWDL.LOSS
        if self is OutcomeWDL.LOSS:
            return OutcomeWDL.WIN
        return OutcomeWDL.DRAW

    def sign(self) -> int:
        return {OutcomeWDL.WIN: 1, OutcomeWDL.DRAW: 0, OutcomeWDL.LOSS: -1}[self]

    def to_wdl(self) -> WDL:
        return {
            OutcomeWDL.WIN: WDL(1, 0, 0),
            OutcomeWDL.DRAW: WDL(0, 1, 0),
            OutcomeWDL.LOSS: WDL(0, 0, 1),
        }[self]

    @staticmethod
    def best_maybe(outcomes: Iterable[Optional["OutcomeWDL"]]) -> Optional["OutcomeWDL"]:
        """The best of possibly unknown outcomes.

        A known win is always best; otherwise any unknown outcome makes the result unknown.
        """
        best = OutcomeWDL.LOSS
        unknown = False
        for outcome in outcomes:
            if outcome is None:
                unknown = True
            elif outcome is OutcomeWDL.WIN:
                return OutcomeWDL.WIN
            elif outcome.sign() > best.sign():
                best = outcome
        return None if unknown else best


@dataclass(frozen=True)
class Outcome:
    """The absolute outcome of a game: a win for ``winner``, or a draw when it is None."""

    winner: Optional[Player] = None

    @staticmethod
    def won_by(player: Player) -> "Outcome":
        return Outcome(player)

    @staticmethod
    def draw() -> "Outcome":
        return Outcome(None)

    def pov(self, player: Player) -> OutcomeWDL:
        if self.winner is None:
            return OutcomeWDL.DRAW
        return OutcomeWDL.WIN if self.winner is player else OutcomeWDL.LOSS

    def __repr__(self) -> str:
        return "Draw" if self.winner is None else f"WonBy({self.winner.value})"


@dataclass(frozen=True)
class UnitSymmetry:
    """The trivial symmetry group."""

    @staticmethod
    def all() -> Tuple["UnitSymmetry", ...]:
        return (UnitSymmetry(),)


@dataclass(frozen=True)
class D1Symmetry:
    """Symmetry group of a single mirror axis."""

    mirror: bool = False

    @staticmethod
    def all() -> Tuple["D1Symmetry", ...]:
        return (D1Symmetry(False), D1Symmetry(True))


@dataclass(frozen=True)
class D4Symmetry:
    """Symmetry group of a square."""

    transpose: bool = False
    flip_x: bool = False
    flip_y: bool = False

    @staticmethod
    def all() -> Tuple["D4Symmetry", ...]:
        return tuple(
            D4Symmetry(transpose, flip_x, flip_y)
            for transpose in (False, True)
            for flip_x in (False, True)
            for flip_y in (False, True)
        )

    def map_xy(self, x: int, y: int, size: int) -> Tuple[int, int]:
        """Map a coordinate on a ``size`` x ``size`` grid."""
        if self.transpose:
            x, y = y, x
        if self.flip_x:
            x = size - 1 - x
        if self.flip_y:
            y = size - 1 - y
        return x, y


class Board(ABC):
    """The state of a game."""

    @abstractmethod
    def next_player(self) -> Player:
        """The player to move next."""

    @abstractmethod
    def is_available_move(self, mv) -> bool:
        """Whether ``mv`` can be played. Raises ValueError if the board is done."""

    def random_available_move(self, rng: random.Random):
        """Pick an available move uniformly at random."""
        moves = list(self.available_moves())
        return moves[rng.randrange(len(moves))]

    @abstractmethod
    def play(self, mv) -> None:
        """Play ``mv`` on this board. Raises ValueError if it is not available."""

    def clone(self) -> "Board":
        return copy.deepcopy(self)

    def clone_and_play(self, mv) -> "Board":
        child = self.clone()
        child.play(mv)
        return child

    @abstractmethod
    def outcome(self) -> Optional[Outcome]:
        """The outcome, or None while the game is not done."""

    def is_done(self) -> bool:
        return self.outcome() is not None

    @classmethod
    @abstractmethod
    def can_lose_after_move(cls) -> bool:
        """Whether the player making a move can lose by it; True is always safe."""

    @classmethod
    @abstractmethod
    def all_possible_moves(cls) -> Iterable:
        """Every move that could be available on any board of this kind."""

    def available_moves(self) -> Iterator:
        """The moves available on this board. Raises ValueError if the board is done."""
        if self.is_done():
            raise ValueError(f"cannot get available moves for done board {self!r}")
        return (mv for mv in self.all_possible_moves() if self.is_available_move(mv))

    @classmethod
    def symmetries(cls) -> Tuple:
        return UnitSymmetry.all()

    def map(self, sym) -> "Board":
        return self.clone()

    def map_move(self, sym, mv):
        return mv

    def canonical_key(self) -> Hashable:
        return ()

    def canonicalize(self) -> "Board":
        """The symmetric version of this board with the smallest canonical key."""
        return min((self.map(sym) for sym in self.symmetries()), key=lambda b: b.canonical_key())


class Bot(ABC):
    """Something that picks moves."""

    @abstractmethod
    def select_move(self, board: Board):
        """Pick a move to play on ``board``. Raises ValueError if the board is done."""