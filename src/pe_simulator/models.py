"""
Data model for the PE Investment Simulator.

Input parameters are a frozen pydantic model so that invalid inputs are
rejected before any engine runs. Engine outputs are plain dataclasses.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import (
    DEFAULT_FUND_LIFETIME_YEARS,
    DEFAULT_CALL_YEARS,
    DEFAULT_TARGET_MULTIPLE,
    DEFAULT_TARGET_YIELD,
    DEFAULT_REINVEST_RATE,
    MAX_HORIZON_YEARS,
)


# ==============================================================================
# ENUMS
# ==============================================================================

class Strategy(Enum):
    """Fund strategies, each with its own schedule-generation policy."""
    BUYOUT = "buyout"
    VENTURE_CAPITAL = "venture_capital"
    GROWTH_CAPITAL = "growth_capital"
    SECONDARY = "secondary"
    DEBT = "debt"


class InvestorProfile(Enum):
    """Tax treatment of the investor."""
    INDIVIDUAL = "individual"
    ENTITY = "entity"


class ReturnMethod(Enum):
    """How the annualized return is computed."""
    NEWTON_IRR = "newton_irr"
    ANNUALIZED_MULTIPLE = "annualized_multiple"


class DebtProfile(Enum):
    """Call split and repayment window of a debt fund."""
    STANDARD = "standard"
    EXTENDED = "extended"


class DebtCouponBasis(Enum):
    """Principal base on which debt coupons accrue."""
    OUTSTANDING = "outstanding"
    CALLED = "called"


# ==============================================================================
# INPUT PARAMETERS
# ==============================================================================

class SimulationParameters(BaseModel):
    """Parameter set for one simulation run."""

    model_config = ConfigDict(frozen=True)

    subscription: float = Field(..., gt=0, description="Total capital committed by the investor")
    fund_lifetime_years: int = Field(DEFAULT_FUND_LIFETIME_YEARS, ge=1, le=MAX_HORIZON_YEARS)
    strategy: Strategy = Strategy.BUYOUT
    target_multiple: float = Field(DEFAULT_TARGET_MULTIPLE, ge=1.0, description="Target MOIC, ignored for debt")
    target_yield: float = Field(DEFAULT_TARGET_YIELD, ge=0, description="Debt coupon rate in percent")
    reinvest_rate: float = Field(DEFAULT_REINVEST_RATE, ge=0)
    investor_profile: InvestorProfile = InvestorProfile.INDIVIDUAL
    call_years: int = Field(DEFAULT_CALL_YEARS, ge=1, description="Buyout capital call period in years")

    debt_profile: DebtProfile = DebtProfile.STANDARD
    debt_coupon_basis: DebtCouponBasis = DebtCouponBasis.OUTSTANDING

    manual_calendar: bool = False
    manual_capital_calls: Optional[List[float]] = None
    manual_distributions: Optional[List[float]] = None

    reinvest_distributions: bool = False
    reinvestment_strategy: Optional[Strategy] = None

    return_method: ReturnMethod = ReturnMethod.NEWTON_IRR

    @model_validator(mode="after")
    def _check_consistency(self) -> "SimulationParameters":
        uses_call_years = self.strategy == Strategy.BUYOUT and not self.manual_calendar
        if uses_call_years and self.call_years > self.fund_lifetime_years:
            raise ValueError(
                f"call_years ({self.call_years}) cannot exceed fund_lifetime_years ({self.fund_lifetime_years})"
            )

        if self.manual_calendar:
            for name in ("manual_capital_calls", "manual_distributions"):
                values = getattr(self, name)
                if values is None:
                    raise ValueError(f"{name} is required when manual_calendar is enabled")
                if len(values) != self.fund_lifetime_years:
                    raise ValueError(
                        f"{name} must have {self.fund_lifetime_years} entries, got {len(values)}"
                    )
                if any(v < 0 for v in values):
                    raise ValueError(f"{name} entries must be non-negative percentages")

        return self


# ==============================================================================
# ENGINE OUTPUTS
# ==============================================================================

@dataclass
class RawSchedule:
    """Un-recycled calls and distributions, index i is year i + 1."""
    capital_calls: List[float]
    distributions: List[float]
    terminal_year: int
    uncalled_interest: List[float] = field(default_factory=list)

    def __post_init__(self):
        if not self.uncalled_interest:
            self.uncalled_interest = [0.0] * len(self.capital_calls)


@dataclass
class YearRecord:
    """Cash position of the investor for a single projection year."""
    year: int
    capital_call: float
    gross_distribution: float
    recycled_distribution: float
    actual_cash_out: float
    net_cash_flow: float
    net_distribution: float
    future_value: float
    outstanding_commitment_before_year: float
    annual_fee: float = 0.0
    uncalled_interest: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FinalResults:
    """Aggregate performance of a simulated subscription."""
    scenario: str
    total_capital_called: float
    total_actual_cash_out: float
    total_gross_distributions: float
    total_recycled_distributions: float
    total_net_distributions: float
    total_fees: float
    uncalled_interest_credit: float
    final_value_before_fees: float
    final_value: float
    moic: float
    dpi: float
    irr: float
    irr_method: ReturnMethod
    taxes_owed: Optional[float]
    net_proceeds: float
    reinvestment_rate: float

    @property
    def tvpi(self) -> float:
        return self.moic

    @property
    def taxes_applicable(self) -> bool:
        return self.taxes_owed is not None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["irr_method"] = self.irr_method.value
        return data


@dataclass
class SimulationResult:
    """Full output of one simulation run."""
    parameters: SimulationParameters
    records: List[YearRecord]
    results: FinalResults
    reinvested_results: Optional[FinalResults] = None

    def __repr__(self) -> str:
        return (
            f"SimulationResult(strategy={self.parameters.strategy.value}, "
            f"years={len(self.records)}, moic={self.results.moic:.2f}, irr={self.results.irr:.4f})"
        )
