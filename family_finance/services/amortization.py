"""
Amortization engine: month-by-month payoff schedules and payment solvers.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

import structlog

from ..models.financial import LiabilityRecord, PaymentPolicy
from ..models.liabilities import PayoffSimulation, PayoffTotals, ScheduleEntry, YearlySummary
from ..utils.constants import BALANCE_EPSILON, MAX_AMORTIZATION_MONTHS, MONTHS_PER_YEAR
from ..utils.exceptions import InvalidPaymentError, ValidationError
from ..utils.money import to_money

logger = structlog.get_logger()

NO_EXTRA = PaymentPolicy()


def monthly_rate(annual_rate_percent: float) -> float:
    """Nominal annual rate in percent to a monthly rate."""
    return float(annual_rate_percent) / 100 / MONTHS_PER_YEAR


def effective_annual_rate(annual_rate_percent: float) -> float:
    """Effective annual rate of monthly compounding, as a fraction."""
    return (1 + monthly_rate(annual_rate_percent)) ** MONTHS_PER_YEAR - 1


@dataclass(frozen=True)
class AmortizationStep:
    """One month of a schedule. Month 0 is the one-time payment."""

    month_index: int
    payment_amount: float
    principal_component: float
    interest_component: float
    ending_balance: float
    cumulative_interest: float
    cumulative_paid: float


@dataclass(frozen=True)
class AmortizationResult:
    """A fully consumed schedule."""

    starting_balance: float
    steps: List[AmortizationStep] = field(default_factory=list)

    @property
    def total_months(self) -> int:
        """Regular months; the one-time step does not count."""
        return sum(1 for step in self.steps if step.month_index > 0)

    @property
    def final_balance(self) -> float:
        return self.steps[-1].ending_balance if self.steps else self.starting_balance

    @property
    def total_interest(self) -> float:
        return self.steps[-1].cumulative_interest if self.steps else 0.0

    @property
    def total_paid(self) -> float:
        return self.steps[-1].cumulative_paid if self.steps else 0.0

    @property
    def principal_paid(self) -> float:
        return self.starting_balance - self.final_balance

    @property
    def paid_off(self) -> bool:
        return self.final_balance <= BALANCE_EPSILON

    def totals(self) -> PayoffTotals:
        months = self.total_months
        return PayoffTotals(
            total_months=months,
            total_paid=to_money(self.total_paid),
            total_interest=to_money(self.total_interest),
            total_principal=to_money(self.principal_paid),
            average_monthly_payment=to_money(self.total_paid / months if months else 0.0),
            final_balance=to_money(self.final_balance),
            paid_off=self.paid_off,
        )


class AmortizationEngine:
    """Generates amortization schedules and solves payment equations."""

    def __init__(self, max_months: int = MAX_AMORTIZATION_MONTHS):
        self.max_months = max_months

    def iter_schedule(
        self,
        principal: float,
        base_payment: Optional[float],
        annual_rate_percent: float,
        policy: PaymentPolicy = NO_EXTRA
    ) -> Iterator[AmortizationStep]:
        """
        Yield schedule steps lazily.

        The one-time amount is applied at month 0, before any interest
        accrues. Every month then charges ``balance * r`` and pays the base
        payment plus the recurring extra, plus the yearly bonus on every
        twelfth month. Iteration stops once the balance is within
        BALANCE_EPSILON of zero or after ``max_months`` months, so a payment
        that never covers the interest still terminates.

        Raises:
            InvalidPaymentError: base payment missing or not positive
        """
        if base_payment is None or base_payment <= 0:
            raise InvalidPaymentError(
                message="Monthly payment must be greater than zero",
                payment=base_payment
            )

        rate = monthly_rate(annual_rate_percent)
        base = float(base_payment)
        extra = float(policy.recurring_extra_per_month)
        bonus = float(policy.yearly_bonus_amount)

        balance = float(principal)
        cumulative_interest = 0.0
        cumulative_paid = 0.0

        one_time = min(float(policy.one_time_amount), balance)
        if one_time > 0:
            balance -= one_time
            cumulative_paid += one_time
            yield AmortizationStep(
                month_index=0,
                payment_amount=one_time,
                principal_component=one_time,
                interest_component=0.0,
                ending_balance=balance,
                cumulative_interest=0.0,
                cumulative_paid=cumulative_paid,
            )

        month = 0
        while balance > BALANCE_EPSILON and month < self.max_months:
            month += 1
            interest = balance * rate
            payment = base + extra
            if bonus > 0 and month % MONTHS_PER_YEAR == 0:
                payment += bonus

            principal_part = min(payment - interest, balance)
            balance = max(0.0, balance - principal_part)
            cumulative_interest += interest
            cumulative_paid += interest + principal_part

            yield AmortizationStep(
                month_index=month,
                payment_amount=interest + principal_part,
                principal_component=principal_part,
                interest_component=interest,
                ending_balance=balance,
                cumulative_interest=cumulative_interest,
                cumulative_paid=cumulative_paid,
            )

    def amortize(
        self,
        principal: float,
        base_payment: Optional[float],
        annual_rate_percent: float,
        policy: PaymentPolicy = NO_EXTRA
    ) -> AmortizationResult:
        """Run a schedule to completion."""
        steps = list(self.iter_schedule(principal, base_payment, annual_rate_percent, policy))
        result = AmortizationResult(starting_balance=float(principal), steps=steps)
        if not result.paid_off:
            logger.warning(
                "Schedule reached month cap before payoff",
                principal=float(principal),
                base_payment=float(base_payment),
                max_months=self.max_months,
                final_balance=round(result.final_balance, 2)
            )
        return result

    def simulate(self, liability: LiabilityRecord, policy: PaymentPolicy = NO_EXTRA) -> PayoffSimulation:
        """Schedule and totals for a liability's remaining balance."""
        base = liability.monthly_payment_amount
        result = self.amortize(
            float(liability.remaining_balance),
            float(base) if base is not None else None,
            float(liability.annual_interest_rate_percent),
            policy
        )
        return PayoffSimulation(
            liability_id=liability.id,
            starting_balance=to_money(liability.remaining_balance),
            annual_interest_rate_percent=liability.annual_interest_rate_percent,
            base_monthly_payment=to_money(base),
            policy=policy,
            schedule=[schedule_entry(step) for step in result.steps],
            yearly_summary=yearly_summary(result.steps),
            totals=result.totals(),
        )

    @staticmethod
    def solve_required_payment(principal: float, annual_rate_percent: float, months: int) -> float:
        """
        Monthly payment that amortizes ``principal`` in exactly ``months`` months.

        Uses ``P*r*(1+r)^n / ((1+r)^n - 1)``, or ``P/n`` without interest.
        """
        if months <= 0:
            raise ValidationError(
                message="Target months must be positive",
                details=[f"months: {months}"]
            )

        rate = monthly_rate(annual_rate_percent)
        principal = float(principal)
        if rate == 0:
            return principal / months

        growth = (1 + rate) ** months
        return principal * rate * growth / (growth - 1)

    @staticmethod
    def solve_remaining_months(principal: float, annual_rate_percent: float, payment: float) -> float:
        """
        Months needed to amortize ``principal`` at a fixed payment.

        Raises:
            InvalidPaymentError: the payment does not exceed the monthly
                interest charge, so the balance never goes down
        """
        payment = float(payment)
        principal = float(principal)
        if payment <= 0:
            raise InvalidPaymentError(message="Monthly payment must be greater than zero", payment=payment)

        rate = monthly_rate(annual_rate_percent)
        if rate == 0:
            return principal / payment

        interest = principal * rate
        if payment <= interest:
            raise InvalidPaymentError(
                message="Payment does not cover the monthly interest charge",
                payment=payment,
                details=[f"Monthly interest: {interest:.2f}"]
            )

        return math.log(payment / (payment - interest)) / math.log(1 + rate)


def schedule_entry(step: AmortizationStep) -> ScheduleEntry:
    return ScheduleEntry(
        month=step.month_index,
        payment=to_money(step.payment_amount),
        principal_payment=to_money(step.principal_component),
        interest_payment=to_money(step.interest_component),
        remaining_balance=to_money(step.ending_balance),
        cumulative_interest=to_money(step.cumulative_interest),
        cumulative_paid=to_money(step.cumulative_paid),
    )


def yearly_summary(steps: List[AmortizationStep]) -> List[YearlySummary]:
    """Principal and interest per loan year; the one-time step counts toward year 1."""
    years: Dict[int, List[AmortizationStep]] = {}
    for step in steps:
        year = max(1, math.ceil(step.month_index / MONTHS_PER_YEAR))
        years.setdefault(year, []).append(step)

    return [
        YearlySummary(
            year=year,
            principal_paid=to_money(sum(s.principal_component for s in year_steps)),
            interest_paid=to_money(sum(s.interest_component for s in year_steps)),
            remaining_balance=to_money(year_steps[-1].ending_balance),
        )
        for year, year_steps in sorted(years.items())
    ]
