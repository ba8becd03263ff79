"""Monte Carlo Tree Search over sequences of future events.

Nodes live in an arena owned by ``SearchTree``; a node refers to its parent
and children by index, so dropping the tree releases everything at once. The
search itself is strictly sequential: every iteration reads the visit counts
written by the previous one.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterator, List, Optional

from models.scenario import DecisionState, ScenarioResult
from services.actions import possible_actions
from utils.humanize import clamp01

logger = logging.getLogger(__name__)

Evaluator = Callable[[DecisionState], Awaitable[float]]

DEFAULT_MAX_DEPTH = 5
DEFAULT_SIMULATION_COUNT = 100
EXPLORATION_CONSTANT = math.sqrt(2)
MAX_SCENARIOS = 10
MIN_SCENARIO_VISITS = 5


@dataclass
class MCTSNode:
    state: DecisionState
    index: int
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    visits: int = 0
    value: float = 0.0
    untried_actions: List[str] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return self.state.depth

    @property
    def mean_value(self) -> float:
        return self.value / self.visits if self.visits else 0.0


class SearchTree:
    """Arena of MCTS nodes rooted at index 0."""

    def __init__(self, root_state: DecisionState):
        self.nodes: List[MCTSNode] = []
        self.root = self.add_node(root_state, parent=None)

    def add_node(self, state: DecisionState, parent: Optional[MCTSNode]) -> MCTSNode:
        node = MCTSNode(
            state=state,
            index=len(self.nodes),
            parent=parent.index if parent is not None else None,
            untried_actions=possible_actions(state.decision.type),
        )
        self.nodes.append(node)
        if parent is not None:
            parent.children.append(node.index)
        return node

    def parent_of(self, node: MCTSNode) -> Optional[MCTSNode]:
        return self.nodes[node.parent] if node.parent is not None else None

    def children_of(self, node: MCTSNode) -> List[MCTSNode]:
        return [self.nodes[i] for i in node.children]

    def path_to_root(self, node: MCTSNode) -> Iterator[MCTSNode]:
        current: Optional[MCTSNode] = node
        while current is not None:
            yield current
            current = self.parent_of(current)

    def deepest(self) -> int:
        return max(n.depth for n in self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


def ucb1(node: MCTSNode, parent_visits: int, exploration_constant: float = EXPLORATION_CONSTANT) -> float:
    """Upper confidence bound; unvisited nodes score infinity."""
    if node.visits == 0:
        return math.inf
    exploitation = node.value / node.visits
    exploration = exploration_constant * math.sqrt(math.log(parent_visits) / node.visits)
    return exploitation + exploration


class ScenarioTreeSearch:
    """Selection, expansion, evaluation and backpropagation over event paths."""

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        simulation_count: int = DEFAULT_SIMULATION_COUNT,
        exploration_constant: float = EXPLORATION_CONSTANT,
    ):
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if simulation_count < 1:
            raise ValueError("simulation_count must be at least 1")
        self.max_depth = max_depth
        self.simulation_count = simulation_count
        self.exploration_constant = exploration_constant

    async def run(self, root_state: DecisionState, evaluate: Evaluator) -> SearchTree:
        """Run exactly ``simulation_count`` iterations and return the tree."""
        tree = SearchTree(root_state)
        for i in range(self.simulation_count):
            leaf = self.tree_policy(tree)
            reward = await evaluate(leaf.state)
            self.backpropagate(tree, leaf, reward)
            logger.debug("iteration %d: depth=%d reward=%.3f", i, leaf.depth, reward)
        return tree

    def tree_policy(self, tree: SearchTree) -> MCTSNode:
        current = tree.root
        while current.depth < self.max_depth:
            if current.untried_actions:
                return self.expand(tree, current)
            if current.children:
                current = self.select_best_child(tree, current)
            else:
                logger.debug("dead end at depth %d, evaluating shallow node", current.depth)
                break
        return current

    def expand(self, tree: SearchTree, node: MCTSNode) -> MCTSNode:
        action = node.untried_actions.pop()
        return tree.add_node(node.state.apply_action(action), parent=node)

    def select_best_child(self, tree: SearchTree, node: MCTSNode) -> MCTSNode:
        best: Optional[MCTSNode] = None
        best_score = -math.inf
        for child in tree.children_of(node):
            score = ucb1(child, node.visits, self.exploration_constant)
            if best is None or score > best_score:
                best, best_score = child, score
        return best

    def backpropagate(self, tree: SearchTree, node: MCTSNode, reward: float) -> None:
        for current in tree.path_to_root(node):
            current.visits += 1
            current.value += reward

    def extract_scenarios(
        self,
        tree: SearchTree,
        limit: int = MAX_SCENARIOS,
        min_visits: int = MIN_SCENARIO_VISITS,
    ) -> List[ScenarioResult]:
        """
        Collect well-visited paths breadth first.

        At each level children are queued most-visited first. The root is
        skipped. The result is ordered by mean score, best first.

        Args:
            tree: Finished search tree
            limit: Maximum number of scenarios
            min_visits: A node needs strictly more visits than this

        Returns:
            List of ScenarioResult
        """
        scenarios: List[ScenarioResult] = []
        queue = deque([tree.root])

        while queue and len(scenarios) < limit:
            node = queue.popleft()
            if node.visits > min_visits and node.depth > 0:
                scenarios.append(
                    ScenarioResult(
                        events=dict(node.state.scenario),
                        score=clamp01(node.mean_value),
                        confidence=clamp01(node.visits / self.simulation_count),
                        visits=node.visits,
                        depth=node.depth,
                    )
                )
            queue.extend(sorted(tree.children_of(node), key=lambda c: c.visits, reverse=True))

        scenarios.sort(key=lambda s: s.score, reverse=True)
        return scenarios
