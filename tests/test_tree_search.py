import asyncio
import math

import pytest

from models.decision import UserProfile
from models.scenario import DecisionState
from services.actions import possible_actions
from services.random_generator import RandomGenerator
from services.scenario_scorer import ScenarioScorer
from services.llm.scripted import FailingOracle
from services.tree_search import ScenarioTreeSearch, SearchTree, ucb1


class ListEvaluator:
    """Hands out rewards from a fixed cycle and remembers them."""

    def __init__(self, rewards):
        self.rewards = list(rewards)
        self.given = []

    async def __call__(self, state):
        reward = self.rewards[len(self.given) % len(self.rewards)]
        self.given.append(reward)
        return reward


@pytest.fixture
def root_state(career_decision, offer_option):
    return DecisionState(decision=career_decision, option=offer_option, profile=UserProfile())


def test_ucb1_values():
    class Node:
        visits = 4
        value = 2.0

    expected = 0.5 + math.sqrt(2) * math.sqrt(math.log(16) / 4)
    assert ucb1(Node(), 16) == pytest.approx(expected)

    Node.visits = 0
    assert ucb1(Node(), 16) == math.inf


def test_unvisited_child_is_always_selected(root_state):
    search = ScenarioTreeSearch()
    tree = SearchTree(root_state)
    strong = tree.add_node(root_state.apply_action("promotion"), tree.root)
    fresh = tree.add_node(root_state.apply_action("layoff"), tree.root)
    strong.visits, strong.value = 50, 50.0
    tree.root.visits = 50
    assert search.select_best_child(tree, tree.root) is fresh


def test_ties_go_to_first_child(root_state):
    search = ScenarioTreeSearch()
    tree = SearchTree(root_state)
    first = tree.add_node(root_state.apply_action("a"), tree.root)
    second = tree.add_node(root_state.apply_action("b"), tree.root)
    for node in (first, second):
        node.visits, node.value = 3, 1.5
    tree.root.visits = 6
    assert search.select_best_child(tree, tree.root) is first


def test_root_children_explored_in_pop_order(root_state):
    search = ScenarioTreeSearch(simulation_count=10)
    tree = asyncio.run(search.run(root_state, ListEvaluator([0.5])))
    labels = [child.state.scenario["event_0"] for child in tree.children_of(tree.root)]
    assert labels == list(reversed(possible_actions("career")))
    assert all(child.visits == 1 for child in tree.children_of(tree.root))


def test_backpropagation_totals(root_state):
    search = ScenarioTreeSearch(simulation_count=37, max_depth=3)
    evaluator = ListEvaluator([0.1, 0.9, 0.4, 0.7])
    tree = asyncio.run(search.run(root_state, evaluator))
    assert tree.root.visits == 37
    assert tree.root.value == pytest.approx(sum(evaluator.given))
    assert sum(c.visits for c in tree.children_of(tree.root)) == 37
    for node in tree.nodes:
        assert 0.0 <= node.mean_value <= 1.0
        assert node.visits >= sum(c.visits for c in tree.children_of(node))


def test_backpropagate_walks_leaf_to_root(root_state):
    search = ScenarioTreeSearch()
    tree = SearchTree(root_state)
    child = tree.add_node(root_state.apply_action("layoff"), tree.root)
    grandchild = tree.add_node(child.state.apply_action("job_opportunity"), child)
    search.backpropagate(tree, grandchild, 0.25)
    for node in (grandchild, child, tree.root):
        assert node.visits == 1
        assert node.value == 0.25


def test_depth_two_career_search(root_state):
    search = ScenarioTreeSearch(max_depth=2, simulation_count=20)
    scorer = ScenarioScorer(FailingOracle(), RandomGenerator(1234))
    tree = asyncio.run(search.run(root_state, scorer))
    assert tree.deepest() == 2
    assert all(node.depth <= 2 for node in tree.nodes)
    used = {label for node in tree.nodes for label in node.state.scenario.values()}
    assert {"promotion", "layoff"} <= used
    assert tree.root.visits == 20


def test_max_depth_nodes_are_re_evaluated(root_state):
    search = ScenarioTreeSearch(max_depth=1, simulation_count=25)
    tree = asyncio.run(search.run(root_state, ListEvaluator([0.5])))
    assert len(tree) == 11
    assert tree.root.visits == 25


def test_extraction_rules(root_state):
    search = ScenarioTreeSearch(simulation_count=100)
    tree = asyncio.run(search.run(root_state, ListEvaluator([0.2, 0.8, 0.5, 0.9, 0.1])))
    scenarios = search.extract_scenarios(tree)
    assert 0 < len(scenarios) <= 10
    assert all(s.visits > 5 for s in scenarios)
    assert all(s.depth >= 1 for s in scenarios)
    assert [s.score for s in scenarios] == sorted((s.score for s in scenarios), reverse=True)
    for s in scenarios:
        assert s.confidence == pytest.approx(s.visits / 100)


def test_extraction_respects_limit(root_state):
    search = ScenarioTreeSearch(simulation_count=400, max_depth=2)
    tree = asyncio.run(search.run(root_state, ListEvaluator([0.3, 0.6])))
    assert len(search.extract_scenarios(tree)) == 10
    assert len(search.extract_scenarios(tree, limit=3)) == 3


def test_invalid_configuration():
    with pytest.raises(ValueError):
        ScenarioTreeSearch(max_depth=0)
    with pytest.raises(ValueError):
        ScenarioTreeSearch(simulation_count=0)
