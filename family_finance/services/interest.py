"""
Interest cost analysis and payment history for liabilities.
"""
from datetime import datetime
from typing import Optional, Sequence

import structlog

from ..models.financial import LiabilityPayment, LiabilityRecord
from ..models.liabilities import (
    InterestAnalysis,
    PaymentConsistency,
    PaymentHistorySummary,
    RateCategory,
)
from ..utils.constants import (
    PAYMENT_CONSISTENCY_EXCELLENT_CV,
    PAYMENT_CONSISTENCY_FAIR_CV,
    PAYMENT_CONSISTENCY_GOOD_CV,
    RATE_EXCELLENT_PERCENT,
    RATE_HIGH_PERCENT,
    RATE_LOW_PERCENT,
    RATE_MEDIUM_PERCENT,
)
from ..utils.dates import naive
from ..utils.exceptions import InvalidPaymentError
from ..utils.money import to_money
from . import statistics
from .amortization import AmortizationEngine, effective_annual_rate, monthly_rate

logger = structlog.get_logger()


def rate_category(rate_percent: float) -> RateCategory:
    if rate_percent <= RATE_LOW_PERCENT:
        return RateCategory.LOW
    if rate_percent <= RATE_MEDIUM_PERCENT:
        return RateCategory.MEDIUM
    return RateCategory.HIGH


def rate_label(rate_percent: float) -> str:
    """Human-readable assessment of an annual rate."""
    if rate_percent <= RATE_EXCELLENT_PERCENT:
        return "Excellent - Very Low Rate"
    if rate_percent <= RATE_LOW_PERCENT:
        return "Good - Competitive Rate"
    if rate_percent <= RATE_MEDIUM_PERCENT:
        return "Fair - Moderate Rate"
    if rate_percent <= RATE_HIGH_PERCENT:
        return "High - Consider Refinancing"
    return "Very High - Urgent Refinancing Needed"


def payment_consistency(amounts: Sequence[float]) -> PaymentConsistency:
    """Classify the regularity of payment amounts by their coefficient of variation."""
    if len(amounts) < 2:
        return PaymentConsistency.NOT_APPLICABLE

    cv = statistics.coefficient_of_variation(amounts)
    if cv < PAYMENT_CONSISTENCY_EXCELLENT_CV:
        return PaymentConsistency.EXCELLENT
    if cv < PAYMENT_CONSISTENCY_GOOD_CV:
        return PaymentConsistency.GOOD
    if cv < PAYMENT_CONSISTENCY_FAIR_CV:
        return PaymentConsistency.FAIR
    return PaymentConsistency.INCONSISTENT


def summarize_payments(liability: LiabilityRecord, payments: Sequence[LiabilityPayment]) -> PaymentHistorySummary:
    amounts = [float(payment.amount) for payment in payments]
    total_paid = sum(amounts)
    principal_paid = sum(float(payment.principal_component) for payment in payments)
    interest_paid = sum(float(payment.interest_component) for payment in payments)

    return PaymentHistorySummary(
        payment_count=len(amounts),
        total_paid=to_money(total_paid),
        total_principal_paid=to_money(principal_paid),
        total_interest_paid=to_money(interest_paid),
        average_payment=to_money(statistics.mean(amounts) if amounts else 0.0),
        principal_progress_percent=round(principal_paid / float(liability.principal) * 100, 2),
        consistency=payment_consistency(amounts),
    )


class InterestAnalyzer:
    """Computes current and projected interest cost of a liability."""

    def __init__(self, engine: Optional[AmortizationEngine] = None):
        self.engine = engine or AmortizationEngine()

    def analyze(
        self,
        liability: LiabilityRecord,
        payments: Sequence[LiabilityPayment],
        now: datetime
    ) -> InterestAnalysis:
        """
        Analyse a liability's interest.

        The projection solves for the months the current payment needs to
        clear the remaining balance. When the payment does not cover the
        monthly interest the liability is reported as never amortizing and
        the projection fields are left empty.
        """
        payments = sorted(payments, key=lambda p: p.paid_at)
        balance = float(liability.remaining_balance)
        rate_percent = float(liability.annual_interest_rate_percent)
        rate = monthly_rate(rate_percent)
        history = summarize_payments(liability, payments)
        historical = float(history.total_interest_paid)

        remaining_months = None
        remaining_interest = None
        amortizes = True
        payment = float(liability.monthly_payment_amount or 0)

        if balance <= 0:
            remaining_months, remaining_interest = 0.0, 0.0
        else:
            try:
                remaining_months = self.engine.solve_remaining_months(balance, rate_percent, payment)
                remaining_interest = payment * remaining_months - balance
            except InvalidPaymentError as e:
                amortizes = False
                logger.warning(
                    "Liability payment never amortizes the balance",
                    liability_id=liability.id,
                    payment=payment,
                    error=e.message
                )

        days_elapsed = max(0, (naive(now) - liability.origination_date).days)

        return InterestAnalysis(
            liability_id=liability.id,
            liability_name=liability.name,
            remaining_balance=to_money(balance),
            annual_interest_rate_percent=liability.annual_interest_rate_percent,
            monthly_rate=rate,
            effective_annual_rate_percent=round(effective_annual_rate(rate_percent) * 100, 4),
            monthly_interest_charge=to_money(balance * rate),
            annual_interest_cost=to_money(balance * rate_percent / 100),
            historical_interest_paid=to_money(historical),
            days_elapsed=days_elapsed,
            remaining_months=round(remaining_months, 2) if remaining_months is not None else None,
            projected_remaining_interest=(
                to_money(remaining_interest) if remaining_interest is not None else None
            ),
            projected_total_interest=(
                to_money(historical + remaining_interest) if remaining_interest is not None else None
            ),
            amortizes=amortizes,
            rate_category=rate_category(rate_percent),
            rate_label=rate_label(rate_percent),
            payment_history=history,
        )
