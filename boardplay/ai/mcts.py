"""Monte Carlo tree search with solver extensions for alternating games."""

from __future__ import annotations

import math
import random
from typing import List, Optional, Tuple

from boardplay.board import WDL, Board, Bot, Outcome, OutcomeWDL


class Node:
    """A node in the search tree.

    Its outcome and value are from the point of view of the player that just played ``last_move``.
    """

    __slots__ = ("last_move", "children", "visits", "_estimate", "_solved")

    def __init__(self, last_move=None, outcome: Optional[OutcomeWDL] = None):
        self.last_move = last_move
        self.children: Optional[range] = None
        self.visits = 0
        self._estimate = WDL(0, 0, 0)
        self._solved: Optional[OutcomeWDL] = outcome

    def is_unvisited(self) -> bool:
        return self._solved is None and self._estimate.total() == 0

    def solution(self) -> Optional[OutcomeWDL]:
        """The proven outcome of this node, if any."""
        return self._solved

    def mark_solved(self, outcome: OutcomeWDL) -> None:
        if self._solved is not None:
            raise RuntimeError("cannot mark already solved node as solved again")
        self.visits += 1
        self._solved = outcome

    def increment(self, outcome: OutcomeWDL) -> None:
        if self._solved is not None:
            raise RuntimeError("cannot increment solved node")
        self.visits += 1
        self._estimate = self._estimate + outcome.to_wdl()

    def wdl(self) -> WDL:
        """The value of this node; NaN everywhere for an unvisited estimate."""
        if self._solved is not None:
            return self._solved.to_wdl()
        total = self._estimate.total()
        if total == 0:
            nan = float("nan")
            return WDL(nan, nan, nan)
        return self._estimate / total

    def uct(self, parent_visits: int, exploration_weight: float) -> float:
        """The UCT value; solved nodes get their unit value without exploration bonus."""
        if self._solved is not None:
            return (self._solved.sign() + 1.0) / 2.0
        visits = float(self._estimate.total())
        value = self._estimate.value() / visits
        value_unit = (value + 1.0) / 2.0
        explore = math.sqrt(math.log(parent_visits) / visits)
        return value_unit + exploration_weight * explore

    def __repr__(self) -> str:
        kind = f"Solved({self._solved!r})" if self._solved is not None else f"Estimate({self._estimate!r})"
        return f"Node(last_move={self.last_move!r}, children={self.children!r}, visits={self.visits}, kind={kind})"


def _format_move(mv) -> str:
    return "None" if mv is None else f"Some({mv!r})"


class Tree:
    """The search tree; node 0 is the root."""

    def __init__(self, root_board: Board):
        self.root_board = root_board
        self.nodes: List[Node] = []

    def __getitem__(self, index: int) -> Node:
        return self.nodes[index]

    def __len__(self) -> int:
        return len(self.nodes)

    def best_child(self) -> int:
        """Index of a winning root child if there is one, otherwise of the most visited one."""
        children = self.nodes[0].children
        if children is None:
            raise ValueError("root node must have children")

        for child in children:
            if self.nodes[child].solution() is OutcomeWDL.WIN:
                return child

        best = children[0]
        for child in children:
            if self.nodes[child].visits >= self.nodes[best].visits:
                best = child
        return best

    def best_move(self):
        return self.nodes[self.best_child()].last_move

    def wdl(self) -> WDL:
        """The value of the root board from the point of view of its next player."""
        return self.nodes[0].wdl().flip()

    def render(self, depth: int) -> str:
        """A text view of the tree, expanding the best line fully and others to ``depth``."""
        lines = ["move: visits, value <- W,D,L"]
        self._render(0, 0, depth, lines)
        return "\n".join(lines) + "\n\n"

    def _render(self, index: int, depth: int, max_depth: int, lines: List[str]) -> None:
        node = self.nodes[index]
        text = f"{'  ' * depth}{_format_move(node.last_move)}: {node.visits}, {node.wdl().value():.3f} <- "
        solution = node.solution()
        if solution is None:
            wdl = node.wdl()
            text += f"{wdl.win:.3f},{wdl.draw:.3f},{wdl.loss:.3f}"
        else:
            text += solution.name.capitalize()
        lines.append(text)

        if depth == max_depth or node.children is None:
            return

        best_child = self.best_child()
        for child in node.children:
            next_max_depth = max_depth if child == best_child else depth + 1
            self._render(child, depth + 1, next_max_depth, lines)

    def __repr__(self) -> str:
        return f"Tree(root_board={self.root_board!r}, nodes={len(self.nodes)})"


def _random_playout(board: Board, rng: random.Random) -> Outcome:
    if board.is_done():
        raise ValueError("should never start random playout on a done board")
    while True:
        board.play(board.random_available_move(rng))
        outcome = board.outcome()
        if outcome is not None:
            return outcome


def _solved_children_outcome(tree: Tree, children: range) -> Optional[OutcomeWDL]:
    best = OutcomeWDL.best_maybe(tree.nodes[c].solution() for c in children)
    return None if best is None else best.flip()


def _solver_step(
    tree: Tree, curr: int, board: Board, exploration_weight: float, rng: random.Random
) -> Tuple[OutcomeWDL, bool]:
    """One search step; returns the result for the player that just played on ``board`` and whether it is proven."""
    node = tree.nodes[curr]
    solution = node.solution()
    if solution is not None:
        return solution, True

    children = node.children
    if children is None:
        start = len(tree.nodes)
        player = board.next_player()
        for mv in board.available_moves():
            outcome = board.clone_and_play(mv).outcome()
            tree.nodes.append(Node(mv, None if outcome is None else outcome.pov(player)))
        children = range(start, len(tree.nodes))
        node.children = children

        proven = _solved_children_outcome(tree, children)
        if proven is not None:
            node.mark_solved(proven)
            return proven, True

    unvisited = [c for c in children if tree.nodes[c].is_unvisited()]

    if unvisited:
        picked = rng.choice(unvisited)
        next_board = board.clone_and_play(tree.nodes[picked].last_move)
        outcome = _random_playout(next_board, rng).pov(board.next_player().other())
        tree.nodes[picked].increment(outcome)
        result, proven = outcome.flip(), False
    else:
        parent_visits = node.visits
        picked = children[0]
        best_uct = None
        for child in children:
            uct = tree.nodes[child].uct(parent_visits, exploration_weight)
            if best_uct is None or uct >= best_uct:
                picked, best_uct = child, uct
        next_board = board.clone_and_play(tree.nodes[picked].last_move)
        result, proven = _solver_step(tree, picked, next_board, exploration_weight, rng)

    result = result.flip()

    if proven:
        outcome = _solved_children_outcome(tree, children)
        if outcome is not None:
            node.mark_solved(outcome)
            return outcome, True

    node.increment(result)
    return result, False


def mcts_build_tree(root_board: Board, iterations: int, exploration_weight: float, rng: random.Random) -> Tree:
    """Run up to ``iterations`` search steps from ``root_board``, stopping early once the root is solved."""
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    tree = Tree(root_board.clone())
    root_outcome = root_board.outcome()
    root_pov = None if root_outcome is None else root_outcome.pov(root_board.next_player().other())
    tree.nodes.append(Node(None, root_pov))

    for _ in range(iterations):
        if tree.nodes[0].solution() is not None:
            break
        _solver_step(tree, 0, root_board, exploration_weight, rng)

    return tree


class MCTSBot(Bot):
    """Plays the best move found by a fixed number of MCTS iterations."""

    def __init__(self, iterations: int, exploration_weight: float, rng: random.Random):
        if iterations <= 0:
            raise ValueError("iterations must be positive")
        self.iterations = iterations
        self.exploration_weight = exploration_weight
        self._rng = rng

    def build_tree(self, board: Board) -> Tree:
        return mcts_build_tree(board, self.iterations, self.exploration_weight, self._rng)

    def select_move(self, board: Board):
        if board.is_done():
            raise ValueError(f"cannot select a move on done board {board!r}")
        return self.build_tree(board).best_move()

    def __repr__(self) -> str:
        return f"MCTSBot {{ iterations: {self.iterations}, exploration_weight: {self.exploration_weight} }}"