"""Career-change forward model for the Monte Carlo engine.

Each run decides whether the transition succeeds, samples the new salary and
the yearly economic drivers, then projects income and savings over the time
horizon next to a "stay put" baseline.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from models.decision import TriangularDistribution
from models.simulation import MetricDefinition, Threshold
from services.random_generator import RandomGenerator

# Used when the caller has no estimate for a driver.
DEFAULT_DISTRIBUTIONS: Dict[str, TriangularDistribution] = {
    "salary_growth_rate": TriangularDistribution(min=0.02, likely=0.04, max=0.08),
    "inflation_rate": TriangularDistribution(min=0.015, likely=0.025, max=0.04),
    "investment_return_rate": TriangularDistribution(min=0.04, likely=0.08, max=0.12),
}
DEFAULT_TRANSITION_SUCCESS = 0.75
DEFAULT_SAVINGS_RATE = 0.15


class CurrentRole(BaseModel):
    salary: float = Field(..., ge=0.0)
    industry: Optional[str] = None
    location: Optional[str] = None


class NewRole(BaseModel):
    estimated_salary: TriangularDistribution
    transition_cost: float = Field(0.0, ge=0.0)
    training_duration: float = Field(0.0, ge=0.0, description="Months without income")
    success_probability: float = Field(DEFAULT_TRANSITION_SUCCESS, ge=0.0, le=1.0)
    industry: Optional[str] = None


class FinancialParams(BaseModel):
    current_savings: Optional[float] = None
    monthly_expenses: Optional[float] = None
    savings_rate: Optional[float] = Field(None, ge=0.0, le=1.0)
    salary_growth_rate: Optional[TriangularDistribution] = None
    inflation_rate: Optional[TriangularDistribution] = None
    investment_return_rate: Optional[TriangularDistribution] = None


class CareerChangeParams(BaseModel):
    time_horizon: int = Field(5, ge=1, le=40, description="Years to project")
    current_role: CurrentRole
    new_role: NewRole
    financial: FinancialParams = Field(default_factory=FinancialParams)


class CareerChangeModel:
    """Projects net worth and income for switching roles versus staying."""

    version = "career-change-1"

    def __init__(self):
        self.metrics = [
            MetricDefinition(
                name="final_net_worth",
                extract=lambda r: r["final_net_worth"],
                thresholds=(Threshold("solvent", 0.0),),
            ),
            MetricDefinition(name="final_salary", extract=lambda r: r["final_salary"]),
            MetricDefinition(
                name="cumulative_income_delta",
                extract=lambda r: r["cumulative_income_delta"],
                thresholds=(Threshold("better_off", 0.0),),
            ),
            MetricDefinition(name="transition_success", extract=lambda r: 1.0 if r["transition_succeeded"] else 0.0),
        ]

    @staticmethod
    def _driver(financial: FinancialParams, name: str) -> TriangularDistribution:
        return getattr(financial, name) or DEFAULT_DISTRIBUTIONS[name]

    def simulate(self, params: Any, rng: RandomGenerator) -> Dict[str, Any]:
        if not isinstance(params, CareerChangeParams):
            params = CareerChangeParams.model_validate(params)

        financial = params.financial
        succeeded = rng.uniform() < params.new_role.success_probability
        current_salary = params.current_role.salary
        salary = rng.sample(params.new_role.estimated_salary) if succeeded else current_salary
        stay_salary = current_salary

        savings_rate = financial.savings_rate if financial.savings_rate is not None else DEFAULT_SAVINGS_RATE
        net_worth = (financial.current_savings or 0.0) - params.new_role.transition_cost
        idle_months = min(12.0, params.new_role.training_duration)

        income_total = 0.0
        stay_total = 0.0
        yearly_net_worth: List[float] = []
        price_level = 1.0

        for year in range(params.time_horizon):
            growth = rng.sample(self._driver(financial, "salary_growth_rate"))
            inflation = rng.sample(self._driver(financial, "inflation_rate"))
            investment_return = rng.sample(self._driver(financial, "investment_return_rate"))

            income = salary * (12.0 - idle_months) / 12.0 if year == 0 else salary
            income_total += income
            stay_total += stay_salary

            if financial.monthly_expenses is not None:
                expenses = financial.monthly_expenses * 12.0 * price_level
            else:
                expenses = income * (1.0 - savings_rate)

            net_worth = net_worth * (1.0 + investment_return) + (income - expenses)
            yearly_net_worth.append(net_worth)

            salary *= 1.0 + growth
            stay_salary *= 1.0 + growth
            price_level *= 1.0 + inflation

        return {
            "transition_succeeded": succeeded,
            "final_salary": salary,
            "final_net_worth": net_worth,
            "cumulative_income_delta": income_total - stay_total,
            "yearly_net_worth": yearly_net_worth,
        }
