import pytest

from models.decision import Decision, DecisionOption, UserProfile


@pytest.fixture
def offer_option() -> DecisionOption:
    return DecisionOption(
        id="opt-offer",
        title="Accept the offer",
        description="Senior role at a growth-stage company",
        pros=["Higher salary", "Bigger scope"],
        cons=["Less stability"],
        parameters={"new_salary": 130000},
    )


@pytest.fixture
def stay_option() -> DecisionOption:
    return DecisionOption(id="opt-stay", title="Stay in current role")


@pytest.fixture
def career_decision(offer_option, stay_option) -> Decision:
    return Decision(
        id="dec-1",
        type="career",
        title="Take the new job offer?",
        description="Offer from a startup versus staying at a large company",
        options=[offer_option, stay_option],
    )


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile.model_validate(
        {
            "demographics": {"age": 34, "location": {"city": "Austin", "state": "TX"}, "dependents": 1},
            "career": {"salary": 105000, "industry": "software"},
            "financial": {"savings": 40000},
        }
    )
