import random

import pytest

from boardplay.ai.solver import (
    SolverBot,
    SolverHeuristic,
    SolverValue,
    is_double_forced_draw,
    solve,
    solve_all_moves,
    solve_value,
)
from boardplay.board import OutcomeWDL
from boardplay.games.dummy import DummyGame


def test_merge_prefers_shortest_win():
    short, long = SolverValue.win_in(2), SolverValue.win_in(3)
    assert SolverValue.merge(long, short) == (short, 1)
    assert SolverValue.merge(short, long) == (short, -1)


def test_merge_prefers_longest_loss():
    short, long = SolverValue.loss_in(2), SolverValue.loss_in(5)
    assert SolverValue.merge(short, long) == (long, 1)
    assert SolverValue.merge(long, short) == (long, -1)


def test_merge_win_and_loss_against_others():
    win, loss = SolverValue.win_in(4), SolverValue.loss_in(4)
    assert SolverValue.merge(win, SolverValue.DRAW) == (win, -1)
    assert SolverValue.merge(loss, SolverValue.UNKNOWN) == (SolverValue.UNKNOWN, 1)
    assert SolverValue.merge(SolverValue.DRAW, win) == (win, 1)
    assert SolverValue.merge(SolverValue.DRAW, loss) == (SolverValue.DRAW, -1)


def test_merge_draw_and_unknown():
    assert SolverValue.merge(SolverValue.DRAW, SolverValue.DRAW) == (SolverValue.DRAW, 0)
    assert SolverValue.merge(SolverValue.DRAW, SolverValue.UNKNOWN) == (SolverValue.UNKNOWN, 0)
    assert SolverValue.merge(SolverValue.UNKNOWN, SolverValue.DRAW) == (SolverValue.UNKNOWN, 0)


def test_negation_round_trip():
    for value in [SolverValue.win_in(3), SolverValue.loss_in(1), SolverValue.DRAW, SolverValue.UNKNOWN]:
        assert -(-value) == value
    assert -SolverValue.win_in(3) == SolverValue.loss_in(3)


def test_to_i32():
    assert SolverValue.win_in(0).to_i32() == 2**31 - 1
    assert SolverValue.loss_in(0).to_i32() == -(2**31 - 1)
    assert SolverValue.win_in(3).to_i32() > SolverValue.win_in(5).to_i32()
    assert SolverValue.DRAW.to_i32() == SolverValue.UNKNOWN.to_i32() == 0


def test_to_outcome_wdl():
    assert SolverValue.win_in(1).to_outcome_wdl() is OutcomeWDL.WIN
    assert SolverValue.loss_in(1).to_outcome_wdl() is OutcomeWDL.LOSS
    assert SolverValue.DRAW.to_outcome_wdl() is OutcomeWDL.DRAW
    assert SolverValue.UNKNOWN.to_outcome_wdl() is None


def test_could_be_optimal_child():
    parent = SolverValue.win_in(3)
    assert SolverValue.could_be_optimal_child(parent, SolverValue.loss_in(2))
    assert not SolverValue.could_be_optimal_child(parent, SolverValue.loss_in(1))
    assert SolverValue.could_be_optimal_child(SolverValue.DRAW, SolverValue.DRAW)
    with pytest.raises(ValueError):
        SolverValue.could_be_optimal_child(SolverValue.UNKNOWN, SolverValue.DRAW)


def test_solve_finds_immediate_win():
    result = solve(DummyGame.parse("(A(BB)=)"), 3, random.Random(0))
    assert result.best_move == 0
    assert result.value == SolverValue.win_in(1)


def test_solve_prefers_longest_loss():
    result = solve(DummyGame.parse("(B(AB))"), 3, random.Random(0))
    assert result.best_move == 1
    assert result.value.to_outcome_wdl() is OutcomeWDL.LOSS


def test_solve_prefers_draw_over_loss():
    result = solve(DummyGame.parse("(B=)"), 2, random.Random(0))
    assert result.best_move == 1
    assert result.value == SolverValue.DRAW


def test_solve_all_moves():
    result = solve_all_moves(DummyGame.parse("(AA(BB))"), 3)
    assert result.best_move == [0, 1]


def test_solve_value_unknown_when_too_shallow():
    assert solve_value(DummyGame.parse("(((AA)))"), 1) == SolverValue.UNKNOWN


def test_is_double_forced_draw():
    assert is_double_forced_draw(DummyGame.parse("(==)"), 2) is True
    assert is_double_forced_draw(DummyGame.parse("(=A)"), 2) is False
    assert is_double_forced_draw(DummyGame.parse("((==))"), 1) is None
    assert is_double_forced_draw(DummyGame.parse("="), 0) is True
    assert is_double_forced_draw(DummyGame.parse("A"), 0) is False


def test_solver_bot():
    with pytest.raises(ValueError):
        SolverBot(0, random.Random(0))
    bot = SolverBot(2, random.Random(0))
    assert bot.select_move(DummyGame.parse("(B=A)")) == 2
    with pytest.raises(ValueError):
        bot.select_move(DummyGame.parse("B"))
    assert repr(bot) == "SolverBot { depth: 2 }"