"""Future-event vocabulary explored by the scenario tree search."""
from typing import Dict, List, Tuple

from models.decision import DecisionType

BASE_ACTIONS: Tuple[str, ...] = (
    "market_upturn",
    "market_downturn",
    "job_opportunity",
    "unexpected_expense",
    "health_event",
    "family_change",
)

TYPE_ACTIONS: Dict[DecisionType, Tuple[str, ...]] = {
    DecisionType.CAREER: ("promotion", "layoff", "skill_obsolescence", "industry_growth"),
    DecisionType.HOUSING: ("interest_rate_change", "property_value_change", "maintenance_issue"),
    DecisionType.EDUCATION: ("program_success", "program_failure", "networking_benefit"),
}


def possible_actions(decision_type: str) -> List[str]:
    """Base events followed by the ones specific to ``decision_type``.

    Unrecognised types get the base vocabulary only.
    """
    try:
        extra = TYPE_ACTIONS.get(DecisionType(decision_type), ())
    except ValueError:
        extra = ()
    return [*BASE_ACTIONS, *extra]
