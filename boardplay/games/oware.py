"""Oware, a mancala game with one sowing per turn.

Each player owns a row of pits. A move empties one of the mover's non-empty pits and
sows its seeds counter-clockwise, one per pit, skipping the emptied pit. If the last
seed lands in an opponent pit that then holds 2 or 3 seeds, those seeds are captured,
together with the preceding opponent pits that also hold 2 or 3 seeds, unless that
would capture every seed the opponent has. The game ends early once a player has
captured more than half the seeds.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from boardplay.board import Board, Outcome, Player


class OwareBoard(Board):
    """An Oware position with ``pits`` pits per player, each starting with ``init_seeds`` seeds."""

    def __init__(self, pits: int = 6, init_seeds: int = 4):
        if pits <= 0:
            raise ValueError("pits must be positive")
        self._n = pits
        self._init_seeds = init_seeds
        self._pits: List[List[int]] = [[init_seeds] * pits for _ in range(2)]
        self._scores = [0, 0]
        self._next_player = Player.A
        self._outcome: Optional[Outcome] = None

    @property
    def pits_per_player(self) -> int:
        return self._n

    @property
    def init_seeds(self) -> int:
        return self._init_seeds

    @property
    def pits(self) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        """The seeds in every pit: first player A's row, then player B's."""
        return tuple(self._pits[0]), tuple(self._pits[1])

    def clone(self) -> "OwareBoard":
        board = OwareBoard.__new__(OwareBoard)
        board._n = self._n
        board._init_seeds = self._init_seeds
        board._pits = [list(row) for row in self._pits]
        board._scores = list(self._scores)
        board._next_player = self._next_player
        board._outcome = self._outcome
        return board

    def score(self, player: Player) -> int:
        return self._scores[player.index()]

    def get_seeds(self, player: Player, idx: int) -> int:
        return self._pits[player.index()][idx]

    # Indices below refer to all 2 * n pits as seen by the next player:
    # 0..n are their own pits, n..2n are the opponent's.

    def _row(self, idx: int) -> int:
        return int(idx >= self._n) ^ self._next_player.index()

    def _at(self, idx: int) -> int:
        return self._pits[self._row(idx)][idx % self._n]

    def _capture(self, idx: int) -> int:
        row = self._row(idx)
        seeds = self._pits[row][idx % self._n]
        self._pits[row][idx % self._n] = 0
        return seeds

    def _own_pits(self) -> range:
        return range(self._n)

    def _opp_pits(self) -> range:
        return range(self._n, 2 * self._n)

    def _can_overflow(self, mv: int) -> bool:
        return mv % self._n + self._at(mv) >= self._n

    def _grand_slam(self, mv: int) -> bool:
        def capturable(x: int) -> bool:
            seeds = self._at(x)
            if seeds in (2, 3):
                return x <= mv
            if seeds == 0:
                return x > mv
            return False

        return (
            mv >= self._n
            and all(capturable(x) for x in self._opp_pits())
            and any(self._at(x) > 0 for x in self._own_pits())
        )

    def _is_stalemate(self) -> bool:
        total = 2 * self._n
        if sum(self._at(i) for i in range(total)) != 2:
            return False
        if max(max(row) for row in self._pits) != 1:
            return False
        ones = [i for i in range(total) if self._at(i) == 1]
        return self._n - 1 <= ones[-1] - ones[0] < self._n + 1

    def next_player(self) -> Player:
        return self._next_player

    def is_available_move(self, mv: int) -> bool:
        if self.is_done():
            raise ValueError(f"board is done: {self!r}")
        if not 0 <= mv < self._n:
            raise ValueError(f"pit {mv!r} out of range")
        if any(self._at(x) > 0 for x in self._opp_pits()):
            return self._at(mv) > 0
        return self._can_overflow(mv)

    def play(self, mv: int) -> None:
        if not self.is_available_move(mv):
            raise ValueError(f"{mv!r} is not available on {self!r}")

        n = self._n
        total = 2 * n
        player = self._next_player.index()

        seeds = self._capture(mv)
        idx = mv
        while seeds > 0:
            skip = 1 if (idx + 1) % total == mv else 0
            idx = (idx + skip + 1) % total
            seeds -= 1
            self._pits[int(idx >= n) ^ player][idx % n] += 1

        if not self._grand_slam(idx):
            while idx >= n and self._at(idx) in (2, 3):
                self._scores[player] += self._capture(idx)
                idx = (idx + total - 1) % total

        if all(self._at(x) == 0 for x in self._own_pits()) and not any(
            self._can_overflow(x) for x in self._opp_pits()
        ):
            for x in self._opp_pits():
                self._scores[1 - player] += self._capture(x)

        if self._is_stalemate():
            for x in range(total):
                self._capture(x)
            self._scores = [s + 1 for s in self._scores]

        expected = 2 * n * self._init_seeds
        if sum(map(sum, self._pits)) + sum(self._scores) != expected:
            raise RuntimeError(f"{expected} seeds should exist")

        half = n * self._init_seeds
        winner = next((i for i, s in enumerate(self._scores) if s > half), None)
        if winner is not None:
            self._outcome = Outcome.won_by((Player.A, Player.B)[winner])
        elif all(s == half for s in self._scores):
            self._outcome = Outcome.draw()
        else:
            self._outcome = None

        self._next_player = self._next_player.other()

    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    @classmethod
    def can_lose_after_move(cls) -> bool:
        return False

    def all_possible_moves(self) -> range:
        return range(self._n)

    def available_moves(self) -> Iterator[int]:
        if self.is_done():
            raise ValueError(f"cannot get available moves for done board {self!r}")
        return (mv for mv in range(self._n) if self.is_available_move(mv))

    def _key(self):
        return (
            tuple(map(tuple, self._pits)),
            tuple(self._scores),
            self._next_player,
            self._outcome,
            self._init_seeds,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, OwareBoard):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"OwareBoard(pits={self._pits!r}, scores={self._scores!r}, "
            f"next_player={self._next_player.value}, outcome={self._outcome!r}, init_seeds={self._init_seeds})"
        )

    def __str__(self) -> str:
        n = self._n
        header = "       " + "    ".join(str(i) for i in range(n)) + "    S   "
        row_b = " │ ".join(f"{self._pits[1][x]:2}" for x in reversed(range(n)))
        row_a = " │ ".join(f"{self._pits[0][x]:2}" for x in range(n))
        lines = [
            header[::-1],
            "┌──" + "──┬──" * (n + 1) + "──┐",
            f"│ {self._scores[0]:2} │ {row_b} │ ←B │",
            "│    ├──" + "──┼──" * (n - 1) + "──┤    │",
            f"│ A→ │ {row_a} │ {self._scores[1]:2} │",
            "└──" + "──┴──" * (n + 1) + "──┘",
            header,
        ]
        return "\n".join(lines) + "\n"