"""Bots and search algorithms: random, rollout, minimax, solver and MCTS."""