import random

import pytest

from boardplay.ai.simple import RandomBot, RolloutBot
from boardplay.games.dummy import DummyGame
from boardplay.games.ttt import TTTBoard


def test_random_bot_picks_available_moves():
    board = TTTBoard()
    bot = RandomBot(random.Random(3))
    for _ in range(20):
        assert board.is_available_move(bot.select_move(board))


def test_random_bot_covers_all_moves():
    game = DummyGame.parse("(AAA)")
    bot = RandomBot(random.Random(7))
    picked = {bot.select_move(game) for _ in range(200)}
    assert picked == set(game.available_moves())


def test_random_bot_rejects_done_board():
    with pytest.raises(ValueError):
        RandomBot(random.Random(0)).select_move(DummyGame.parse("A"))


def test_random_bot_repr():
    assert repr(RandomBot(random.Random(0))) == "RandomBot"


def test_rollout_bot_picks_winning_move():
    bot = RolloutBot(30, random.Random(0))
    assert bot.select_move(DummyGame.parse("(BAB)")) == 1


def test_rollout_bot_prefers_draw_over_loss():
    bot = RolloutBot(20, random.Random(0))
    assert bot.select_move(DummyGame.parse("(=B)")) == 0


def test_rollout_bot_ties_pick_last_move():
    game = DummyGame.parse("(AAA)")
    bot = RolloutBot(9, random.Random(0))
    assert bot.select_move(game) == max(game.available_moves())


def test_rollout_bot_with_too_few_rollouts_scores_all_equal():
    game = DummyGame.parse("(AB)")
    bot = RolloutBot(1, random.Random(0))
    assert bot.select_move(game) == max(game.available_moves())


def test_rollout_bot_plays_valid_ttt_moves():
    board = TTTBoard()
    bot = RolloutBot(18, random.Random(5))
    mv = bot.select_move(board)
    assert board.is_available_move(mv)


def test_rollout_bot_rejects_done_board():
    with pytest.raises(ValueError):
        RolloutBot(10, random.Random(0)).select_move(DummyGame.parse("="))


def test_rollout_bot_repr():
    assert repr(RolloutBot(5, random.Random(0))) == "RolloutBot { rollouts: 5 }"