import pytest
from pydantic import ValidationError

from models.decision import Decision, DecisionOption, TriangularDistribution, UserProfile
from models.scenario import DecisionState
from services.actions import BASE_ACTIONS, possible_actions


def test_action_vocabulary_by_type():
    assert possible_actions("career")[-4:] == ["promotion", "layoff", "skill_obsolescence", "industry_growth"]
    assert possible_actions("housing")[-3:] == ["interest_rate_change", "property_value_change", "maintenance_issue"]
    assert possible_actions("education")[-3:] == ["program_success", "program_failure", "networking_benefit"]
    assert possible_actions("career")[:6] == list(BASE_ACTIONS)


@pytest.mark.parametrize("decision_type", ["relocation", "something_else", ""])
def test_unknown_types_get_base_vocabulary(decision_type):
    assert possible_actions(decision_type) == list(BASE_ACTIONS)


def test_possible_actions_returns_fresh_list():
    actions = possible_actions("career")
    actions.pop()
    assert len(possible_actions("career")) == 10


def test_apply_action_records_event_and_depth(career_decision, offer_option):
    root = DecisionState(decision=career_decision, option=offer_option, profile=UserProfile())
    child = root.apply_action("layoff").apply_action("job_opportunity")
    assert child.depth == 2
    assert child.scenario == {"event_0": "layoff", "event_1": "job_opportunity"}
    assert root.scenario == {} and root.depth == 0


def test_events_are_chronological_past_ten(career_decision, offer_option):
    state = DecisionState(decision=career_decision, option=offer_option, profile=UserProfile())
    for i in range(12):
        state = state.apply_action(f"a{i}")
    assert state.events() == [f"a{i}" for i in range(12)]


def test_inputs_are_immutable(career_decision):
    with pytest.raises(ValidationError):
        career_decision.title = "changed"


def test_profile_tolerates_missing_and_extra_fields():
    profile = UserProfile.model_validate({"demographics": {"age": 40}, "hobbies": ["chess"]})
    assert profile.career is None
    assert profile.demographics.location is None


def test_triangular_order_is_validated():
    with pytest.raises(ValidationError):
        TriangularDistribution(min=3, likely=1, max=2)


def test_decision_accepts_unknown_type():
    decision = Decision(type="sabbatical", title="Take a year off", options=[DecisionOption(title="Go")])
    assert decision.type == "sabbatical"
