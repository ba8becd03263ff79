"""Leaf evaluation for the scenario tree search."""
import logging

from models.decision import UserProfile
from models.scenario import DecisionState
from services.llm.guardrails import parse_score
from services.llm.oracle import TextOracle
from services.random_generator import RandomGenerator
from utils.humanize import humanize_event, or_unknown

logger = logging.getLogger(__name__)

SCORING_SYSTEM_PROMPT = (
    "You are a financial and life decision analyst. Evaluate scenarios and provide numerical scores."
)
SCORING_TEMPERATURE = 0.7
SCORING_MAX_TOKENS = 200


def _profile_lines(profile: UserProfile) -> str:
    demographics = profile.demographics
    career = profile.career
    location = demographics.location if demographics else None
    return "\n".join(
        [
            f"- Age: {or_unknown(demographics.age if demographics else None)}",
            f"- Income: {or_unknown(career.salary if career else None, '${:,.0f}')}",
            f"- Location: {or_unknown(location.city if location else None)}",
        ]
    )


def build_evaluation_prompt(state: DecisionState) -> str:
    """Render a leaf state as a scoring request. Same state, same text."""
    events = state.events()
    event_lines = "\n".join(f"- {humanize_event(e)}" for e in events) if events else "- (no events yet)"
    return f"""Evaluate this life decision scenario:

Decision: {state.decision.title}
Option: {state.option.title}

User Profile:
{_profile_lines(state.profile)}

Scenario Events:
{event_lines}

Score this scenario from 0-1 based on:
1. Financial impact
2. Career growth
3. Life satisfaction
4. Risk level
5. Long-term prospects

Return only a decimal number between 0 and 1."""


class ScenarioScorer:
    """Scores leaf states with the oracle, falling back to a random score."""

    def __init__(self, oracle: TextOracle, rng: RandomGenerator):
        self.oracle = oracle
        self.rng = rng
        self.fallback_count = 0

    async def __call__(self, state: DecisionState) -> float:
        prompt = build_evaluation_prompt(state)
        try:
            content = await self.oracle.analyze_text(
                SCORING_SYSTEM_PROMPT,
                prompt,
                temperature=SCORING_TEMPERATURE,
                max_tokens=SCORING_MAX_TOKENS,
            )
            return parse_score(content)
        except Exception as e:
            self.fallback_count += 1
            logger.warning("%s scoring failed (%s: %s); using random score", self.oracle.name, type(e).__name__, e)
            return self.rng.uniform()
