"""Scenario result models."""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from models.decision import Decision, DecisionOption, UserProfile


class DecisionState(BaseModel):
    """Working state of one tree-search node."""
    model_config = ConfigDict(frozen=True)

    decision: Decision
    option: DecisionOption
    profile: UserProfile
    scenario: Dict[str, str] = Field(default_factory=dict, description="event_<depth> -> action label")
    depth: int = Field(0, ge=0)

    def apply_action(self, action: str) -> "DecisionState":
        """Return the child state reached by taking ``action`` at this depth."""
        scenario = dict(self.scenario)
        scenario[f"event_{self.depth}"] = action
        return self.model_copy(update={"scenario": scenario, "depth": self.depth + 1})

    def events(self) -> List[str]:
        """Event labels in chronological order."""
        return [self.scenario[k] for k in sorted(self.scenario, key=lambda k: int(k.split("_")[1]))]


class ScenarioResult(BaseModel):
    """A representative future path extracted from the search tree."""
    events: Dict[str, str] = Field(..., description="event_<depth> -> action label")
    score: float = Field(..., ge=0.0, le=1.0, description="Mean desirability of the path")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Share of simulations that went through this path")
    visits: int = Field(..., ge=0)
    depth: int = Field(..., ge=1)

    def ordered_events(self) -> List[str]:
        return [self.events[k] for k in sorted(self.events, key=lambda k: int(k.split("_")[1]))]


class NarrativeAnalysis(BaseModel):
    """Recommendations, risks and opportunities synthesised from scenarios."""
    recommendations: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """Complete analysis of one decision option."""
    scenarios: List[ScenarioResult] = Field(default_factory=list, max_length=10)
    recommendations: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)
    simulation_count: int = Field(..., description="Number of tree-search iterations run")
    fallback_evaluations: int = Field(0, ge=0, description="Leaf scores that used the random fallback")
    used_fallback_analysis: bool = Field(False, description="Narrative came from the generic fallback")
