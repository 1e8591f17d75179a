"""Two simple bots: a uniformly random one and one based on random rollouts."""

from __future__ import annotations

import random

from boardplay.board import Board, Bot


class RandomBot(Bot):
    """Picks an available move uniformly at random."""

    def __init__(self, rng: random.Random):
        self._rng = rng

    def select_move(self, board: Board):
        return board.random_available_move(self._rng)

    def __repr__(self) -> str:
        return "RandomBot"


class RolloutBot(Bot):
    """Plays random games after each move and picks the move with the best total score.

    Each move gets ``rollouts // number_of_moves`` simulations; on ties the last move wins.
    """

    def __init__(self, rollouts: int, rng: random.Random):
        self.rollouts = rollouts
        self._rng = rng

    def _score(self, board: Board, mv, rollouts_per_move: int) -> int:
        child = board.clone_and_play(mv)
        player = board.next_player()
        score = 0
        for _ in range(rollouts_per_move):
            game = child.clone()
            while not game.is_done():
                game.play(game.random_available_move(self._rng))
            score += game.outcome().pov(player).sign()
        return score

    def select_move(self, board: Board):
        moves = list(board.available_moves())
        rollouts_per_move = self.rollouts // len(moves)

        best_move, best_score = None, None
        for mv in moves:
            score = self._score(board, mv, rollouts_per_move)
            if best_score is None or score >= best_score:
                best_move, best_score = mv, score
        return best_move

    def __repr__(self) -> str:
        return f"RolloutBot {{ rollouts: {self.rollouts} }}"