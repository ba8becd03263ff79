"""Decision data models."""
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DecisionType(str, Enum):
    """Decision categories known to the analysis core."""
    CAREER = "career"
    HOUSING = "housing"
    EDUCATION = "education"
    CAREER_CHANGE = "career_change"
    JOB_OFFER = "job_offer"
    RELOCATION = "relocation"
    HOME_PURCHASE = "home_purchase"
    INVESTMENT = "investment"
    FAMILY_PLANNING = "family_planning"
    RETIREMENT = "retirement"
    BUSINESS_STARTUP = "business_startup"


class TriangularDistribution(BaseModel):
    """Three-point estimate for an uncertain quantity."""
    model_config = ConfigDict(frozen=True)

    min: float = Field(..., description="Lowest plausible value")
    likely: float = Field(..., description="Most likely value")
    max: float = Field(..., description="Highest plausible value")

    @model_validator(mode="after")
    def _check_order(self) -> "TriangularDistribution":
        if not (self.min <= self.likely <= self.max):
            raise ValueError("triangular distribution requires min <= likely <= max")
        return self


class GammaDistribution(BaseModel):
    """Shape/scale parameters for a gamma-distributed quantity."""
    model_config = ConfigDict(frozen=True)

    shape: float = Field(..., gt=0.0)
    scale: float = Field(1.0, gt=0.0)


Distribution = Union[TriangularDistribution, GammaDistribution]


class DecisionOption(BaseModel):
    """One path under evaluation for a decision."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    title: str
    description: str = ""
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    parameters: Dict[str, Any] = Field(default_factory=dict)


class Decision(BaseModel):
    """A life decision with its candidate options.

    ``type`` is kept as a plain string so unrecognised categories still flow
    through the core; they only get the base event vocabulary.
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    type: str = Field(..., description="Decision category (career, housing, education, ...)")
    title: str
    description: str = ""
    options: List[DecisionOption] = Field(default_factory=list)
    parameters: Dict[str, Any] = Field(default_factory=dict)


class ProfileLocation(BaseModel):
    model_config = ConfigDict(extra="allow")

    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class Demographics(BaseModel):
    model_config = ConfigDict(extra="allow")

    age: Optional[int] = None
    location: Optional[ProfileLocation] = None
    dependents: Optional[int] = None
    marital_status: Optional[str] = None
    education: Optional[str] = None


class CareerProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    current_role: Optional[str] = None
    industry: Optional[str] = None
    salary: Optional[float] = None
    years_experience: Optional[float] = None


class FinancialProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    savings: Optional[float] = None
    monthly_expenses: Optional[float] = None
    savings_rate: Optional[float] = None
    risk_tolerance: Optional[str] = None


class Preferences(BaseModel):
    model_config = ConfigDict(extra="allow")

    work_life_balance: Optional[float] = None
    stability_vs_growth: Optional[float] = None


class UserProfile(BaseModel):
    """Partial user profile. Every section and field may be missing."""
    model_config = ConfigDict(extra="allow")

    demographics: Optional[Demographics] = None
    career: Optional[CareerProfile] = None
    financial: Optional[FinancialProfile] = None
    preferences: Optional[Preferences] = None
