"""Generate recommendations, risks and opportunities from explored scenarios."""
import logging
from typing import List, Sequence, Tuple

from models.decision import Decision
from models.scenario import NarrativeAnalysis, ScenarioResult
from services.errors import MalformedOracleOutputError
from services.llm.guardrails import parse_json_object
from services.llm.oracle import TextOracle
from utils.humanize import band_label, humanize_event

logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM_PROMPT = (
    "You are a decision analysis expert. Provide actionable insights based on scenario analysis."
)
ANALYSIS_TEMPERATURE = 0.3
ANALYSIS_MAX_TOKENS = 500
REQUIRED_KEYS = ("recommendations", "risks", "opportunities")

FALLBACK_ANALYSIS = NarrativeAnalysis(
    recommendations=[
        "Gather more information",
        "Consider alternatives",
        "Plan for contingencies",
    ],
    risks=["Market volatility", "Unexpected expenses", "Career changes"],
    opportunities=["Skill development", "Network growth", "Financial gains"],
)


def render_scenario_summary(scenarios: Sequence[ScenarioResult]) -> str:
    """Rank, score and chronological events for each scenario."""
    if not scenarios:
        return "No scenario was explored often enough to be representative."
    blocks: List[str] = []
    for rank, scenario in enumerate(scenarios, start=1):
        events = " → ".join(humanize_event(e) for e in scenario.ordered_events())
        blocks.append(
            f"Scenario {rank} (Score: {scenario.score:.2f}, {band_label(scenario.score)}):\n"
            f"Events: {events}"
        )
    return "\n\n".join(blocks)


def build_analysis_prompt(decision: Decision, scenarios: Sequence[ScenarioResult]) -> str:
    return f"""Based on these Monte Carlo Tree Search scenarios for the decision "{decision.title}":

{render_scenario_summary(scenarios)}

Provide:
1. Three specific recommendations
2. Three key risks to monitor
3. Three potential opportunities

Return ONLY JSON with arrays of strings: recommendations, risks, opportunities""".strip()


async def generate_analysis(
    oracle: TextOracle, decision: Decision, scenarios: Sequence[ScenarioResult]
) -> Tuple[NarrativeAnalysis, bool]:
    """
    Ask the oracle for a narrative of the scenarios.

    Args:
        oracle: Text oracle
        decision: Decision being analyzed
        scenarios: Extracted scenarios, best first

    Returns:
        (analysis, used_fallback). The generic fallback is used when the call
        fails or the answer is not the expected JSON shape.
    """
    try:
        content = await oracle.analyze_text(
            ANALYSIS_SYSTEM_PROMPT,
            build_analysis_prompt(decision, scenarios),
            temperature=ANALYSIS_TEMPERATURE,
            max_tokens=ANALYSIS_MAX_TOKENS,
            json_mode=True,
        )
        data = parse_json_object(content)
        missing = [k for k in REQUIRED_KEYS if k not in data]
        if missing:
            raise MalformedOracleOutputError(f"analysis is missing {', '.join(missing)}", raw=content)
        analysis = NarrativeAnalysis.model_validate({k: data[k] for k in REQUIRED_KEYS})
        return analysis, False

    except Exception as e:
        logger.warning("Analysis generation failed (%s: %s); using generic analysis", type(e).__name__, e)
        return FALLBACK_ANALYSIS.model_copy(deep=True), True
