"""Scenario analysis for life decisions.

``DecisionAnalysisService`` explores possible futures of one decision option
with Monte Carlo Tree Search, scoring each explored path with a text oracle,
then asks the oracle to turn the best-supported paths into recommendations,
risks and opportunities.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import math
import time
from typing import Any, Dict, Mapping, Optional, Union

from models.decision import Decision, DecisionOption, UserProfile
from models.scenario import AnalysisResult, DecisionState
from services.config import AnalysisSettings
from services.decision_parser import analyze_user_input
from services.llm.oracle import TextOracle
from services.random_generator import RandomGenerator
from services.recommendation_service import generate_analysis
from services.scenario_scorer import ScenarioScorer
from services.tree_search import ScenarioTreeSearch

logger = logging.getLogger(__name__)

ProfileInput = Union[UserProfile, Mapping[str, Any], None]


class DecisionAnalysisService:
    """Entry point for decision analysis; one oracle, one generator."""

    def __init__(
        self,
        oracle: TextOracle,
        *,
        max_depth: int = 5,
        simulation_count: int = 100,
        exploration_constant: float = math.sqrt(2),
        seed: Optional[int] = None,
        rng: Optional[RandomGenerator] = None,
    ):
        """
        Initialize the service.

        Args:
            oracle: Text oracle used for scoring, synthesis and parsing
            max_depth: Maximum number of events per scenario
            simulation_count: Tree-search iterations per analysis
            exploration_constant: UCB1 exploration weight
            seed: Seed for the fallback-score generator
            rng: Pre-built generator; takes precedence over ``seed``
        """
        self.oracle = oracle
        self.rng = rng or RandomGenerator(seed)
        self._streams = itertools.count(1)
        self.search = ScenarioTreeSearch(
            max_depth=max_depth,
            simulation_count=simulation_count,
            exploration_constant=exploration_constant,
        )

    @classmethod
    def from_settings(cls, oracle: TextOracle, settings: Optional[AnalysisSettings] = None) -> "DecisionAnalysisService":
        settings = settings or AnalysisSettings.from_env()
        return cls(
            oracle,
            max_depth=settings.max_depth,
            simulation_count=settings.simulation_count,
            exploration_constant=settings.exploration_constant,
            seed=settings.random_seed,
        )

    def _next_rng(self) -> RandomGenerator:
        """Child generator for one analysis; the n-th request gets ``spawn(n)``."""
        return self.rng.spawn(next(self._streams))

    @property
    def simulation_count(self) -> int:
        return self.search.simulation_count

    async def analyze_user_input(self, prompt: str) -> Dict[str, Any]:
        """Structure a free-text decision description. Raises on oracle failure."""
        return await analyze_user_input(self.oracle, prompt)

    async def analyze_decision(
        self,
        decision: Decision,
        option: DecisionOption,
        profile: ProfileInput = None,
        rng: Optional[RandomGenerator] = None,
    ) -> AnalysisResult:
        """
        Explore the futures of one option and summarise them.

        Oracle failures never fail the analysis: leaves fall back to a random
        score and the narrative falls back to generic advice.

        Args:
            decision: Decision under evaluation
            option: Option to explore
            profile: Partial user profile (model, mapping or None)
            rng: Generator for this run; defaults to the next child of the
                service generator, so concurrent calls never share a stream

        Returns:
            AnalysisResult
        """
        rng = rng or self._next_rng()
        started = time.perf_counter()
        user_profile = profile if isinstance(profile, UserProfile) else UserProfile.model_validate(profile or {})
        root_state = DecisionState(decision=decision, option=option, profile=user_profile)

        scorer = ScenarioScorer(self.oracle, rng)
        tree = await self.search.run(root_state, scorer)
        scenarios = self.search.extract_scenarios(tree)
        analysis, used_fallback = await generate_analysis(self.oracle, decision, scenarios)

        logger.info(
            "Analyzed %r / %r: %d nodes, %d scenarios, %d fallback scores in %.0f ms",
            decision.title,
            option.title,
            len(tree),
            len(scenarios),
            scorer.fallback_count,
            (time.perf_counter() - started) * 1000.0,
        )

        return AnalysisResult(
            scenarios=scenarios,
            recommendations=analysis.recommendations,
            risks=analysis.risks,
            opportunities=analysis.opportunities,
            simulation_count=self.search.simulation_count,
            fallback_evaluations=scorer.fallback_count,
            used_fallback_analysis=used_fallback,
        )

    async def analyze_options(self, decision: Decision, profile: ProfileInput = None) -> Dict[str, AnalysisResult]:
        """
        Analyze every option of ``decision`` concurrently.

        Each option gets a private tree and its own child generator, handed
        out in option order; options never share mutable state.

        Returns:
            Results keyed by option id (title when the id is missing), in option order
        """
        if not decision.options:
            raise ValueError("decision has no options to analyze")

        streams = [self._next_rng() for _ in decision.options]
        results = await asyncio.gather(
            *(
                self.analyze_decision(decision, option, profile, rng=rng)
                for option, rng in zip(decision.options, streams)
            )
        )
        return {(option.id or option.title): result for option, result in zip(decision.options, results)}
