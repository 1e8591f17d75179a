# boardplay

Two-player board games that share one `Board` interface, and bots that can
play any of them. Everything is plain Python with no dependencies.

## Games

- `boardplay.games.ttt.TTTBoard`: tic-tac-toe; moves are `Coord3` values.
- `boardplay.games.connect4.Connect4`: Connect Four on a 7x6 board; moves are
  column numbers 0 to 6. Mirror symmetry is supported.
- `boardplay.games.sttt.STTTBoard`: super (ultimate) tic-tac-toe; moves are
  `Coord` values. `board_to_compact_string` and `board_from_compact_string`
  convert a board to and from an 81-character string.
- `boardplay.games.oware.OwareBoard`: Oware, a mancala game;
  `OwareBoard(pits=6, init_seeds=4)` by default, moves are pit numbers.
- `boardplay.games.ataxx.AtaxxBoard`: Ataxx on boards up to 8x8 (7x7 by
  default). Positions are read and written with `AtaxxBoard.from_fen` and
  `to_fen`, moves with `Move.from_uai` and `Move.to_uai`. Bad input raises
  `InvalidAtaxxFen` or `InvalidUaiMove`.
- `boardplay.games.dummy.DummyGame`: a game tree written as a string, handy
  for testing bots. `DummyGame.parse` raises `DummyParseError` on bad input.
- `boardplay.games.max_length.MaxMovesBoard(inner, max_moves)`: behaves like
  `inner` but is a draw once `max_moves` moves have been played.

Every board (see `boardplay.board.Board`) offers `next_player()`,
`available_moves()`, `random_available_move(rng)`, `is_available_move(mv)`,
`play(mv)`, `clone()`, `clone_and_play(mv)`, `outcome()` and `is_done()`,
and symmetry support through `symmetries()`, `map`, `map_move`,
`canonical_key` and `canonicalize`. Asking for moves on a finished board, or
playing a move that is not available, raises `ValueError`.

`outcome()` returns `None` while the game runs, otherwise an `Outcome`
(`Outcome.won_by(player)` or `Outcome.draw()`); `Outcome.pov(player)` gives
an `OutcomeWDL` (`WIN`, `DRAW` or `LOSS`) for that player.

## Bots

Each bot has `select_move(board)`; random choices come from a
`random.Random` passed in.

- `boardplay.ai.simple.RandomBot(rng)` and `RolloutBot(rollouts, rng)`
- `boardplay.ai.minimax.MiniMaxBot(depth, heuristic, rng)` with your own
  `Heuristic`; also `minimax`, `minimax_all_moves` and `minimax_value`
- `boardplay.ai.solver.SolverBot(depth, rng)`, plus `solve`, `solve_value`,
  `solve_all_moves` and `is_double_forced_draw`; results are `SolverValue`s
  such as `WinIn(3)`, `LossIn(4)`, `Draw` or `Unknown`
- `boardplay.ai.mcts.MCTSBot(iterations, exploration_weight, rng)`, plus
  `mcts_build_tree`; the resulting `Tree` has `best_move()`, `wdl()` and
  `render(depth)`, which returns a text view of the search

## Example

```python
import random

from boardplay.ai.mcts import MCTSBot
from boardplay.ai.solver import solve_value
from boardplay.games.ttt import TTTBoard

board = TTTBoard()
bot = MCTSBot(1000, 2.0, random.Random(0))
while not board.is_done():
    board.play(bot.select_move(board))
print(board)
print(board.outcome())

print(solve_value(TTTBoard(), 9))  # Draw: perfect play ends level
```

The dummy game describes a tree of outcomes directly: `A` and `B` are wins,
`=` is a draw, and parentheses hold the positions reachable by each move.

```python
from boardplay.games.dummy import DummyGame

game = DummyGame.parse("(AA(BB)=B)")
print(list(game.available_moves()))  # [0, 1, 2, 3, 4]
```

## What it does not do

There is no command-line program, no user interface and no way to save or
load games beyond the Ataxx FEN and super tic-tac-toe compact strings; games
are set up and played from Python code.

## Tests

The tests use pytest and are installed with the `test` extra.