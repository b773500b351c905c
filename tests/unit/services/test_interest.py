"""
Unit tests for interest analysis.
"""
from datetime import datetime
from decimal import Decimal

import pytest

from factories.financial_factory import LiabilityPaymentFactory, LiabilityRecordFactory
from family_finance.models.liabilities import PaymentConsistency, RateCategory
from family_finance.services.interest import (
    InterestAnalyzer,
    payment_consistency,
    rate_category,
    rate_label,
)


@pytest.fixture
def analyzer():
    return InterestAnalyzer()


@pytest.fixture
def payments():
    return [
        LiabilityPaymentFactory(paid_at=datetime(2024, month, 5))
        for month in (3, 1, 2)
    ]


@pytest.mark.unit
class TestInterestAnalyzer:
    """Test current and projected interest cost."""

    def test_current_cost(self, analyzer, now):
        analysis = analyzer.analyze(LiabilityRecordFactory(), [], now)

        assert analysis.monthly_rate == pytest.approx(0.01)
        assert analysis.effective_annual_rate_percent == pytest.approx(12.6825, abs=1e-4)
        assert analysis.monthly_interest_charge == Decimal("120000.00")
        assert analysis.annual_interest_cost == Decimal("1440000.00")
        assert analysis.rate_category == RateCategory.MEDIUM
        assert analysis.rate_label == "Fair - Moderate Rate"
        assert analysis.days_elapsed == 531

    def test_projection(self, analyzer, payments, now):
        """Remaining interest is payment times remaining months minus the balance."""
        analysis = analyzer.analyze(LiabilityRecordFactory(), payments, now)

        assert analysis.amortizes
        assert analysis.remaining_months == pytest.approx(10.59, abs=0.01)
        remaining = analysis.projected_remaining_interest
        assert Decimal("700000") < remaining < Decimal("720000")
        assert analysis.historical_interest_paid == Decimal("360000.00")
        assert abs(analysis.projected_total_interest - remaining - Decimal("360000")) <= Decimal("0.01")

    def test_payment_history(self, analyzer, payments, now):
        history = analyzer.analyze(LiabilityRecordFactory(), payments, now).payment_history

        assert history.payment_count == 3
        assert history.total_paid == Decimal("3600000.00")
        assert history.total_principal_paid == Decimal("3240000.00")
        assert history.average_payment == Decimal("1200000.00")
        assert history.principal_progress_percent == pytest.approx(27.0)
        assert history.consistency == PaymentConsistency.EXCELLENT

    def test_payment_below_interest_never_amortizes(self, analyzer, now):
        """The analysis reports the condition instead of a negative projection."""
        liability = LiabilityRecordFactory(monthly_payment_amount=Decimal("100000"))

        analysis = analyzer.analyze(liability, [], now)

        assert not analysis.amortizes
        assert analysis.remaining_months is None
        assert analysis.projected_remaining_interest is None
        assert analysis.projected_total_interest is None

    def test_payment_equal_to_interest_never_amortizes(self, analyzer, now):
        liability = LiabilityRecordFactory(monthly_payment_amount=Decimal("120000"))

        assert not analyzer.analyze(liability, [], now).amortizes

    def test_missing_payment_never_amortizes(self, analyzer, now):
        liability = LiabilityRecordFactory(monthly_payment_amount=None)

        assert not analyzer.analyze(liability, [], now).amortizes

    def test_paid_off_liability(self, analyzer, now):
        liability = LiabilityRecordFactory(remaining_balance=Decimal("0"))

        analysis = analyzer.analyze(liability, [], now)

        assert analysis.amortizes
        assert analysis.remaining_months == 0.0
        assert analysis.projected_remaining_interest == Decimal("0.00")
        assert analysis.monthly_interest_charge == Decimal("0.00")

    def test_zero_rate(self, analyzer, now):
        liability = LiabilityRecordFactory(
            annual_interest_rate_percent=Decimal("0"),
            monthly_payment_amount=Decimal("1000000"),
        )

        analysis = analyzer.analyze(liability, [], now)

        assert analysis.remaining_months == pytest.approx(12.0)
        assert analysis.projected_remaining_interest == Decimal("0.00")
        assert analysis.rate_label == "Excellent - Very Low Rate"

    def test_days_elapsed_not_negative(self, analyzer):
        analysis = analyzer.analyze(LiabilityRecordFactory(), [], datetime(2022, 1, 1))

        assert analysis.days_elapsed == 0


@pytest.mark.unit
class TestRateBands:
    """Test rate categories and labels."""

    @pytest.mark.parametrize("rate,category", [
        (0, RateCategory.LOW),
        (10, RateCategory.LOW),
        (10.5, RateCategory.MEDIUM),
        (15, RateCategory.MEDIUM),
        (15.1, RateCategory.HIGH),
    ])
    def test_rate_category(self, rate, category):
        assert rate_category(rate) == category

    @pytest.mark.parametrize("rate,label", [
        (5, "Excellent - Very Low Rate"),
        (10, "Good - Competitive Rate"),
        (15, "Fair - Moderate Rate"),
        (20, "High - Consider Refinancing"),
        (25, "Very High - Urgent Refinancing Needed"),
    ])
    def test_rate_label(self, rate, label):
        assert rate_label(rate) == label


@pytest.mark.unit
class TestPaymentConsistency:
    """Test payment regularity bands."""

    @pytest.mark.parametrize("amounts,consistency", [
        ([100, 100], PaymentConsistency.EXCELLENT),
        ([100, 125], PaymentConsistency.GOOD),
        ([100, 150], PaymentConsistency.FAIR),
        ([100, 200], PaymentConsistency.INCONSISTENT),
        ([100], PaymentConsistency.NOT_APPLICABLE),
        ([], PaymentConsistency.NOT_APPLICABLE),
    ])
    def test_consistency(self, amounts, consistency):
        assert payment_consistency(amounts) == consistency
