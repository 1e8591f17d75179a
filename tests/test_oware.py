import random

import pytest

from boardplay.board import Outcome, Player
from boardplay.games.oware import OwareBoard


def total_seeds(board):
    return sum(map(sum, board.pits)) + board.score(Player.A) + board.score(Player.B)


def test_initial_board():
    board = OwareBoard()
    assert board.next_player() is Player.A
    assert board.outcome() is None
    assert list(board.available_moves()) == list(range(6))
    assert all(board.get_seeds(p, i) == 4 for p in (Player.A, Player.B) for i in range(6))
    assert board.score(Player.A) == board.score(Player.B) == 0


def test_sowing_empties_pit_and_switches_player():
    board = OwareBoard()
    board.play(0)
    assert board.get_seeds(Player.A, 0) == 0
    assert [board.get_seeds(Player.A, i) for i in range(1, 5)] == [5, 5, 5, 5]
    assert board.next_player() is Player.B
    assert total_seeds(board) == 2 * 6 * 4


def test_sowing_skips_origin_pit():
    board = OwareBoard(2, 5)
    board.play(0)
    assert board.get_seeds(Player.A, 0) == 0
    assert total_seeds(board) == 2 * 2 * 5


def test_capture_and_draw_on_small_board():
    board = OwareBoard(2, 1)
    board.play(1)
    assert board.score(Player.A) == 2
    assert board.get_seeds(Player.B, 0) == 0
    assert list(board.available_moves()) == [1]
    board.play(1)
    assert board.outcome() == Outcome.draw()
    assert board.is_done()
    with pytest.raises(ValueError):
        board.is_available_move(0)
    with pytest.raises(ValueError):
        list(board.available_moves())


def test_out_of_range_move_raises():
    board = OwareBoard()
    with pytest.raises(ValueError):
        board.is_available_move(6)


def test_empty_pit_is_not_available():
    board = OwareBoard()
    board.play(0)
    board.play(0)
    assert not board.is_available_move(0)
    with pytest.raises(ValueError):
        board.play(0)


@pytest.mark.parametrize("seed", range(5))
def test_random_games_conserve_seeds(seed):
    rng = random.Random(seed)
    board = OwareBoard()
    for _ in range(400):
        if board.is_done():
            break
        moves = list(board.available_moves())
        assert moves
        mv = board.random_available_move(rng)
        assert mv in moves
        before = board.next_player()
        board.play(mv)
        assert board.next_player() is before.other()
        assert total_seeds(board) == 48


def test_clone_is_independent():
    board = OwareBoard()
    copy = board.clone()
    copy.play(2)
    assert board == OwareBoard()
    assert copy != board
    assert hash(board) == hash(OwareBoard())


def test_display_has_frame():
    text = str(OwareBoard())
    lines = text.splitlines()
    assert len(lines) == 7
    assert lines[1].startswith("┌") and lines[5].startswith("└")
    assert "←B" in lines[2] and "A→" in lines[4]