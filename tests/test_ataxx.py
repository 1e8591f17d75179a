import random

import pytest

from boardplay.board import D4Symmetry, Outcome, Player
from boardplay.games.ataxx import (
    AtaxxBoard,
    Coord8,
    InvalidAtaxxFen,
    InvalidUaiMove,
    Move,
    coord_from_uai,
    coord_to_uai,
)

START_FEN = "x5o/7/7/7/7/7/o5x x 0 1"


def _random_boards(seed, count=40):
    rng = random.Random(seed)
    board = AtaxxBoard()
    boards = [board.clone()]
    for _ in range(count):
        if board.is_done():
            break
        board.play(board.random_available_move(rng))
        boards.append(board.clone())
    return boards


def test_default_board_fen():
    assert AtaxxBoard().to_fen() == START_FEN
    assert AtaxxBoard.diagonal(7) == AtaxxBoard()


def test_default_board_tiles():
    board = AtaxxBoard()
    assert board.tile(Coord8.from_xy(0, 6)) is Player.A
    assert board.tile(Coord8.from_xy(0, 0)) is Player.B
    assert board.tile(Coord8.from_xy(3, 3)) is None
    assert board.next_player() is Player.A
    assert board.outcome() is None


def test_fen_round_trip_start():
    assert AtaxxBoard.from_fen(START_FEN) == AtaxxBoard()


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_fen_round_trip_random_games(seed):
    for board in _random_boards(seed):
        board.assert_valid()
        assert AtaxxBoard.from_fen(board.to_fen()) == board


def test_uai_coords():
    assert coord_to_uai(Coord8.from_xy(0, 0)) == "a1"
    assert coord_from_uai("a1") == Coord8.from_xy(0, 0)
    coord = Coord8.from_xy(6, 5)
    assert coord_from_uai(coord_to_uai(coord)) == coord


def test_uai_moves():
    assert Move.from_uai("0000") == Move.pass_()
    assert Move.pass_().to_uai() == "0000"
    assert Move.from_uai("a1") == Move.copy(Coord8.from_xy(0, 0))
    jump = Move.jump(Coord8.from_xy(0, 0), Coord8.from_xy(2, 2))
    assert Move.from_uai(jump.to_uai()) == jump
    assert repr(jump) == jump.to_uai()


def test_invalid_uai_move():
    with pytest.raises(InvalidUaiMove):
        Move.from_uai("abc")


def test_move_ordering():
    a = Coord8.from_xy(0, 0)
    b = Coord8.from_xy(2, 0)
    assert Move.pass_() < Move.copy(a) < Move.jump(a, b)
    assert Move.copy(a) < Move.copy(b)


def test_move_valid_for_size():
    a = Coord8.from_xy(0, 0)
    assert Move.jump(a, Coord8.from_xy(2, 1)).valid_for_size(7)
    assert not Move.jump(a, Coord8.from_xy(1, 1)).valid_for_size(7)
    assert not Move.copy(Coord8.from_xy(7, 7)).valid_for_size(7)
    assert Move.pass_().valid_for_size(0)


def test_available_moves_match_bruteforce():
    for board in _random_boards(7, 20):
        if board.is_done():
            continue
        available = list(board.available_moves())
        brute = [mv for mv in AtaxxBoard.all_possible_moves() if board.is_available_move(mv)]
        assert set(available) == set(brute)
        assert len(available) == len(set(available))


def test_random_available_move_is_available():
    rng = random.Random(5)
    for board in _random_boards(11, 20):
        if board.is_done():
            continue
        moves = set(board.available_moves())
        for _ in range(5):
            assert board.random_available_move(rng) in moves


def test_copy_and_jump_counts():
    board = AtaxxBoard()
    before = board.tiles_a.bit_count()
    board.play(Move.copy(Coord8.from_xy(1, 5)))
    assert board.tiles_a.bit_count() == before + 1
    assert board.moves_since_last_copy == 0
    assert board.next_player() is Player.B

    before_b = board.tiles_b.bit_count()
    board.play(Move.jump(Coord8.from_xy(0, 0), Coord8.from_xy(2, 2)))
    assert board.tiles_b.bit_count() == before_b
    assert board.moves_since_last_copy == 1


def test_capture_wins_game():
    board = AtaxxBoard.from_fen("xo/2 x 0 1")
    board.play(Move.from_uai("a1"))
    assert board.tiles_b == 0
    assert board.outcome() == Outcome.won_by(Player.A)


def test_must_pass():
    board = AtaxxBoard.from_fen("4o/5/---2/---2/x--2 x 0 1")
    assert board.outcome() is None
    assert board.must_pass()
    assert list(board.available_moves()) == [Move.pass_()]
    assert not board.is_available_move(Move.copy(Coord8.from_xy(3, 3)))
    board.play(Move.pass_())
    assert board.next_player() is Player.B
    assert board.moves_since_last_copy == 1
    assert not board.must_pass()


def test_both_pass_counts_tiles():
    assert AtaxxBoard.from_fen("xxo/---/--- x 0 1").outcome() == Outcome.won_by(Player.A)
    assert AtaxxBoard.from_fen("x-o/---/--- x 0 1").outcome() == Outcome.draw()


def test_move_limit_is_draw():
    board = AtaxxBoard.from_fen("x5o/7/7/7/7/7/o5x x 100 1")
    assert board.outcome() == Outcome.draw()


def test_small_and_empty_boards():
    assert AtaxxBoard.diagonal(2).outcome() == Outcome.draw()
    assert AtaxxBoard.empty(3).outcome() == Outcome.draw()
    with pytest.raises(ValueError):
        AtaxxBoard.diagonal(9)
    with pytest.raises(ValueError):
        AtaxxBoard.diagonal(1)


def test_done_board_rejects_moves():
    board = AtaxxBoard.empty(3)
    with pytest.raises(ValueError):
        board.available_moves()
    with pytest.raises(ValueError):
        board.is_available_move(Move.pass_())


@pytest.mark.parametrize(
    "fen, reason",
    [
        ("x5o/7 x 0", "Not all 4 components present"),
        ("x5o/7/7/7/7/7/o5z x 0 1", "Invalid character in board"),
        ("x5oo/7/7/7/7/7/o5x x 0 1", "Too many columns for size"),
        ("x5o/7/7/7/7/7/o5x z 0 1", "Invalid next player"),
        ("x5o/7/7/7/7/7/o5x x a 1", "Invalid half counter"),
        ("x5o/7/7/7/7/7/o5x x 0 b", "Invalid full counter"),
        ("1/1/1/1/1/1/1/1/1 x 0 1", "More rows than maximum board size"),
    ],
)
def test_invalid_fen(fen, reason):
    with pytest.raises(InvalidAtaxxFen) as info:
        AtaxxBoard.from_fen(fen)
    assert info.value.reason == reason
    assert info.value.fen == fen


def test_from_parts_rejects_overlap():
    tile = Coord8.from_xy(0, 0).bit
    with pytest.raises(ValueError):
        AtaxxBoard.from_parts(3, tile, tile, 0, 0, Player.A)


def test_from_parts_matches_fen():
    start = AtaxxBoard()
    board = AtaxxBoard.from_parts(7, start.tiles_a, start.tiles_b, start.gaps, 0, Player.A)
    assert board == start


def test_tile_outside_board_raises():
    with pytest.raises(ValueError):
        AtaxxBoard().tile(Coord8.from_xy(7, 7))


def test_symmetry_maps_available_moves():
    for board in _random_boards(3, 10):
        if board.is_done():
            continue
        for sym in D4Symmetry.all():
            mapped = board.map(sym)
            assert set(mapped.available_moves()) == {board.map_move(sym, mv) for mv in board.available_moves()}


def test_canonicalize_is_symmetry_invariant():
    board = _random_boards(9, 8)[-1]
    canonical = board.canonicalize()
    for sym in D4Symmetry.all():
        assert board.map(sym).canonicalize() == canonical


def test_random_game_terminates_with_valid_states():
    rng = random.Random(42)
    board = AtaxxBoard.diagonal(4)
    for _ in range(1000):
        if board.is_done():
            break
        board.play(board.random_available_move(rng))
        board.assert_valid()
    assert board.is_done()


def test_display_contains_fen():
    text = str(AtaxxBoard())
    assert text.splitlines()[0] == f"FEN: {START_FEN}"
    assert text.splitlines()[-1] == "  abcdefg"