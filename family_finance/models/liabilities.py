"""
Liability simulation result models: payoff schedules, scenario comparisons,
early-payment impact and interest analysis.
"""
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from pydantic import Field

from .base import ValueObject
from .financial import PaymentPolicy


class RateCategory(str, Enum):
    """Interest rate bands."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PaymentConsistency(str, Enum):
    """Regularity of historical payment amounts."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    INCONSISTENT = "Inconsistent"
    NOT_APPLICABLE = "N/A"


class ScheduleEntry(ValueObject):
    """One month of an amortization schedule."""

    month: int = Field(..., ge=0, description="Month index; 0 is the one-time payment")
    payment: Decimal
    principal_payment: Decimal
    interest_payment: Decimal
    remaining_balance: Decimal
    cumulative_interest: Decimal
    cumulative_paid: Decimal


class YearlySummary(ValueObject):
    """Principal and interest paid during one loan year."""

    year: int = Field(..., ge=1)
    principal_paid: Decimal
    interest_paid: Decimal
    remaining_balance: Decimal


class PayoffTotals(ValueObject):
    """Totals of a simulated payoff."""

    total_months: int
    total_paid: Decimal
    total_interest: Decimal
    total_principal: Decimal
    average_monthly_payment: Decimal
    final_balance: Decimal
    paid_off: bool = Field(..., description="False when the month cap was reached first")


class PayoffSimulation(ValueObject):
    """Schedule and totals for one liability under a payment policy."""

    liability_id: str
    starting_balance: Decimal
    annual_interest_rate_percent: Decimal
    base_monthly_payment: Decimal
    policy: PaymentPolicy
    schedule: List[ScheduleEntry]
    yearly_summary: List[YearlySummary]
    totals: PayoffTotals


class ScenarioSavings(ValueObject):
    """Savings of a scenario relative to the baseline."""

    months_saved: int
    interest_saved: Decimal
    total_saved: Decimal
    percentage_reduction: float
    years_saved: float


class PayoffScenario(ValueObject):
    """A named payoff scenario."""

    key: str
    name: str
    description: str
    monthly_payment: Decimal
    totals: PayoffTotals
    savings: Optional[ScenarioSavings] = None
    yearly_summary: List[YearlySummary] = Field(default_factory=list)


class TargetPayoffScenario(PayoffScenario):
    """Scenario paying the loan off in a requested number of months."""

    target_months: int
    required_monthly_payment: Decimal
    increase_needed: Decimal
    increase_percentage: float


class BreakEven(ValueObject):
    """Months until interest saved by an extra payment equals the extra paid."""

    extra_payment: Decimal
    months: Optional[int] = Field(None, description="None when the extra payment saves no interest")
    description: str


class ScenarioComparison(ValueObject):
    """Baseline and what-if scenarios for one liability."""

    liability_id: str
    liability_name: str
    starting_balance: Decimal
    annual_interest_rate_percent: Decimal
    base_monthly_payment: Decimal
    extra_payment: Decimal
    baseline: PayoffScenario
    scenarios: List[Union[TargetPayoffScenario, PayoffScenario]]
    break_even: Optional[BreakEven] = None
    recommendations: List[str] = Field(default_factory=list)

    def scenario(self, key: str) -> Optional[PayoffScenario]:
        """Look up a scenario by key."""
        for item in [self.baseline] + list(self.scenarios):
            if item.key == key:
                return item
        return None


class StrategyImpact(ValueObject):
    """Effect of a single early-payment strategy."""

    strategy: str
    description: str
    extra_payment: Decimal
    total_extra_paid: Decimal
    totals: PayoffTotals
    savings: ScenarioSavings
    effectiveness_score: float = Field(..., description="Interest saved per unit of extra paid")


class ExtraPaymentOption(ValueObject):
    """A monthly extra amount from the comparison ladder."""

    amount: Decimal
    label: str
    total_months: int
    total_interest: Decimal
    savings: ScenarioSavings
    roi: float


class EarlyPaymentImpact(ValueObject):
    """Impact of one-time, recurring and yearly extra payments."""

    liability_id: str
    liability_name: str
    baseline: PayoffTotals
    strategies: List[StrategyImpact]
    combined: StrategyImpact
    options: List[ExtraPaymentOption]
    best_strategy: Optional[str] = None
    optimal_option: Optional[ExtraPaymentOption] = None
    break_even: List[BreakEven] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class PaymentHistorySummary(ValueObject):
    """Aggregates over the recorded payments of a liability."""

    payment_count: int
    total_paid: Decimal
    total_principal_paid: Decimal
    total_interest_paid: Decimal
    average_payment: Decimal
    principal_progress_percent: float
    consistency: PaymentConsistency


class InterestAnalysis(ValueObject):
    """Interest cost analysis for one liability."""

    liability_id: str
    liability_name: str
    remaining_balance: Decimal
    annual_interest_rate_percent: Decimal
    monthly_rate: float
    effective_annual_rate_percent: float
    monthly_interest_charge: Decimal
    annual_interest_cost: Decimal
    historical_interest_paid: Decimal
    days_elapsed: int = Field(..., ge=0, description="Days since origination")
    remaining_months: Optional[float] = Field(None, description="None when the payment never amortizes the balance")
    projected_remaining_interest: Optional[Decimal] = None
    projected_total_interest: Optional[Decimal] = None
    amortizes: bool
    rate_category: RateCategory
    rate_label: str
    payment_history: PaymentHistorySummary
