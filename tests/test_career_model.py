import pytest
from pydantic import ValidationError

from models.simulation import ConfidenceLevel
from services.career_model import CareerChangeModel, CareerChangeParams
from services.random_generator import RandomGenerator
from services.simulator import MonteCarloEngine


def _params(**new_role):
    role = {"estimated_salary": {"min": 100000, "likely": 120000, "max": 150000}}
    role.update(new_role)
    return {
        "time_horizon": 5,
        "current_role": {"salary": 100000, "industry": "finance"},
        "new_role": role,
        "financial": {"current_savings": 30000, "monthly_expenses": 4500, "savings_rate": 0.2},
    }


def test_failed_transition_matches_staying():
    res = MonteCarloEngine(seed=10).run_simulation(CareerChangeModel(), _params(success_probability=0.0), iterations=200)
    delta = res.statistics.outcomes["cumulative_income_delta"]
    assert delta.mean == 0.0
    assert delta.std_dev == 0.0
    assert res.statistics.outcomes["transition_success"].mean == 0.0
    assert res.statistics.probabilities["cumulative_income_delta"]["better_off"] == 1.0


def test_certain_transition_to_higher_salary_pays_off():
    res = MonteCarloEngine(seed=11).run_simulation(CareerChangeModel(), _params(success_probability=1.0), iterations=300)
    assert res.statistics.outcomes["transition_success"].mean == 1.0
    assert res.statistics.outcomes["cumulative_income_delta"].min >= 0.0
    assert res.statistics.outcomes["final_salary"].min >= 100000


def test_training_gap_costs_income():
    params = _params(
        success_probability=1.0,
        estimated_salary={"min": 100000, "likely": 100000, "max": 100000},
        training_duration=6,
    )
    outcome = CareerChangeModel().simulate(params, RandomGenerator(1))
    assert outcome["cumulative_income_delta"] == pytest.approx(-50000.0)


def test_outcome_shape():
    outcome = CareerChangeModel().simulate(_params(), RandomGenerator(2))
    assert len(outcome["yearly_net_worth"]) == 5
    assert outcome["final_net_worth"] == outcome["yearly_net_worth"][-1]


def test_defaults_fill_missing_drivers():
    params = CareerChangeParams.model_validate(_params())
    assert params.financial.salary_growth_rate is None
    res = MonteCarloEngine(seed=12).run_simulation(CareerChangeModel(), params, iterations=100)
    ladder = res.statistics.percentiles["final_net_worth"]
    assert ladder.p5 <= ladder.p50 <= ladder.p95


def test_data_quality_reflects_missing_inputs():
    params = _params()
    params["financial"]["monthly_expenses"] = None
    res = MonteCarloEngine(seed=13).run_simulation(CareerChangeModel(), params, iterations=10)
    dq = res.metadata.data_quality
    assert dq.missing_critical_data is True
    assert dq.completeness < 1.0
    assert dq.confidence in (ConfidenceLevel.HIGH, ConfidenceLevel.MEDIUM, ConfidenceLevel.LOW)


def test_invalid_params_are_rejected():
    with pytest.raises(ValidationError):
        CareerChangeParams.model_validate(_params(estimated_salary={"min": 5, "likely": 1, "max": 9}))
