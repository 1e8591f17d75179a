import random

import pytest

from boardplay.board import (
    WDL,
    Board,
    Bot,
    D1Symmetry,
    D4Symmetry,
    Outcome,
    OutcomeWDL,
    Player,
    UnitSymmetry,
)


class LineBoard(Board):
    """Three cells in a row, filled in turn; ends in a draw when full."""

    def __init__(self):
        self.cells = [None, None, None]
        self.player = Player.A

    def next_player(self):
        return self.player

    def is_available_move(self, mv):
        if self.is_done():
            raise ValueError("done")
        return self.cells[mv] is None

    def play(self, mv):
        if not self.is_available_move(mv):
            raise ValueError("unavailable")
        self.cells[mv] = self.player
        self.player = self.player.other()

    def outcome(self):
        return Outcome.draw() if all(c is not None for c in self.cells) else None

    @classmethod
    def can_lose_after_move(cls):
        return False

    @classmethod
    def all_possible_moves(cls):
        return range(3)

    @classmethod
    def symmetries(cls):
        return D1Symmetry.all()

    def map(self, sym):
        board = self.clone()
        if sym.mirror:
            board.cells = board.cells[::-1]
        return board

    def map_move(self, sym, mv):
        return 2 - mv if sym.mirror else mv

    def canonical_key(self):
        return tuple(-1 if c is None else c.index() for c in self.cells)


class FirstMoveBot(Bot):
    def select_move(self, board):
        return next(iter(board.available_moves()))


def test_player_basics():
    assert Player.A.other() is Player.B
    assert Player.B.other() is Player.A
    assert Player.A.index() == 0
    assert Player.B.index() == 1
    assert Player.A.to_char() == "A"
    assert Player.B.to_char() == "B"
    assert Player.A.sign(Player.A) == 1
    assert Player.A.sign(Player.B) == -1


def test_outcome_pov():
    assert Outcome.won_by(Player.A).pov(Player.A) is OutcomeWDL.WIN
    assert Outcome.won_by(Player.A).pov(Player.B) is OutcomeWDL.LOSS
    assert Outcome.draw().pov(Player.B) is OutcomeWDL.DRAW


def test_outcome_wdl_flip_and_sign():
    for o in OutcomeWDL:
        assert o.flip().flip() is o
        assert o.flip().sign() == -o.sign()
        assert o.to_wdl().total() == 1
        assert o.to_wdl().value() == o.sign()
    assert OutcomeWDL.WIN.flip() is OutcomeWDL.LOSS


@pytest.mark.parametrize(
    "outcomes, expected",
    [
        ([None, OutcomeWDL.WIN], OutcomeWDL.WIN),
        ([OutcomeWDL.DRAW, None], None),
        ([OutcomeWDL.LOSS, OutcomeWDL.DRAW], OutcomeWDL.DRAW),
        ([OutcomeWDL.LOSS, OutcomeWDL.LOSS], OutcomeWDL.LOSS),
    ],
)
def test_best_maybe(outcomes, expected):
    assert OutcomeWDL.best_maybe(outcomes) is expected


def test_wdl_arithmetic():
    wdl = OutcomeWDL.WIN.to_wdl() + OutcomeWDL.WIN.to_wdl() + OutcomeWDL.LOSS.to_wdl()
    assert wdl == WDL(2, 0, 1)
    assert wdl.flip() == WDL(1, 0, 2)
    assert wdl.total() == 3
    assert (wdl / 2).win == 1


def test_symmetry_groups():
    assert len(UnitSymmetry.all()) == 1
    assert len(set(D1Symmetry.all())) == 2
    assert len(set(D4Symmetry.all())) == 8


def test_d4_map_is_bijection():
    points = {(x, y) for x in range(3) for y in range(3)}
    for sym in D4Symmetry.all():
        mapped = {D4Symmetry.map_xy(sym, x, y, 3) for x, y in points}
        assert mapped == points


def test_d4_identity():
    assert D4Symmetry().map_xy(0, 2, 3) == (0, 2)


def test_canonicalize_is_symmetric():
    left = Board.clone_and_play(LineBoard(), 0)
    right = Board.clone_and_play(LineBoard(), 2)
    assert Board.canonicalize(left).cells == Board.canonicalize(right).cells


def test_map_move_consistent_with_map():
    board = LineBoard()
    for sym in D1Symmetry.all():
        mapped = Board.clone_and_play(board, 0).map(sym)
        expected = Board.clone_and_play(board.map(sym), board.map_move(sym, 0))
        assert mapped.cells == expected.cells


def test_clone_and_play_keeps_original():
    board = LineBoard()
    child = Board.clone_and_play(board, 1)
    assert board.cells == [None, None, None]
    assert child.next_player() is Player.B


def test_available_and_random_moves():
    board = Board.clone_and_play(LineBoard(), 1)
    assert list(Board.available_moves(board)) == [0, 2]
    rng = random.Random(5)
    for _ in range(20):
        assert Board.random_available_move(board, rng) in (0, 2)


def test_done_board_raises():
    board = LineBoard()
    for mv in range(3):
        board.play(mv)
    assert Board.is_done(board)
    with pytest.raises(ValueError):
        Board.available_moves(board)


def test_bot_select_move():
    board = Board.clone_and_play(LineBoard(), 0)
    expected = next(iter(Board.available_moves(board)))
    assert expected == 1
    assert FirstMoveBot().select_move(board) == expected