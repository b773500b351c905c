"""
Financial analytics service.
Binds a query collaborator to the analytics components for one computation.
"""
from datetime import datetime
from typing import List, Optional

import structlog

from ..config import Settings, get_settings
from ..infrastructure.repository import LedgerQueries
from ..models.analytics import (
    Anomaly,
    BudgetRecommendationReport,
    HealthScoreBreakdown,
    InsightsReport,
    NextMonthForecast,
    SmartBudgetReport,
    SpendingPattern,
)
from ..models.financial import AnalysisWindow, BudgetPeriod, EntryKind, LiabilityRecord, PaymentPolicy
from ..models.liabilities import EarlyPaymentImpact, InterestAnalysis, PayoffSimulation, ScenarioComparison
from ..utils.dates import last_completed_month, month_bounds, naive, previous_month
from ..utils.exceptions import AppException, NotFoundError, ValidationError
from .amortization import AmortizationEngine
from .anomalies import AnomalyDetector
from .budget_recommender import BudgetRecommender
from .forecast import ForecastEngine
from .health_score import HealthScoreCalculator
from .insights import InsightsComposer
from .interest import InterestAnalyzer
from .ledger import total_amount
from .payoff_scenarios import PayoffScenarioComparator
from .smart_budget import SmartBudgetPredictor, trailing_periods
from .spending_patterns import SpendingPatternAnalyzer

logger = structlog.get_logger()


class FinancialAnalyticsService:
    """
    Entry point for analytics and liability simulation.

    Holds no state between calls: every method queries what it needs and
    computes its result from scratch.
    """

    def __init__(self, queries: LedgerQueries, settings: Optional[Settings] = None):
        self.queries = queries
        self.settings = settings or get_settings()
        self.engine = AmortizationEngine()
        self.patterns = SpendingPatternAnalyzer()
        self.anomalies = AnomalyDetector()
        self.recommender = BudgetRecommender(self.patterns)
        self.smart_budgets = SmartBudgetPredictor()
        self.health = HealthScoreCalculator()
        self.forecaster = ForecastEngine()
        self.comparator = PayoffScenarioComparator(self.engine, self.settings.get_extra_payment_ladder())
        self.interest = InterestAnalyzer(self.engine)
        self.insights = InsightsComposer()

    def trailing_window(self, family_id: str, now: datetime, months: Optional[int] = None) -> AnalysisWindow:
        """Window of ``months`` (default: the configured pattern window) ending at ``now``."""
        return AnalysisWindow.trailing(family_id, months or self.settings.pattern_months, now)

    def forecast_window(self, family_id: str, now: datetime) -> AnalysisWindow:
        """Window of the configured forecast months ending at ``now``."""
        return AnalysisWindow.trailing(family_id, self.settings.forecast_months, now)

    def analyze_spending_patterns(self, window: AnalysisWindow) -> List[SpendingPattern]:
        """Per-category spending patterns, highest average first."""
        expenses = self.queries.list_entries(window.family_id, window.start, window.end, EntryKind.EXPENSE)
        return self.patterns.analyze(expenses, window)

    def detect_anomalies(self, window: AnalysisWindow, now: datetime) -> List[Anomaly]:
        """Outliers in the window, budget breaches this year and last month's income drop."""
        now = naive(now)
        family_id = window.family_id
        expenses = self.queries.list_entries(family_id, window.start, window.end, EntryKind.EXPENSE)
        budgets = self.queries.list_budgets(family_id, year=now.year)
        year_expenses = self.queries.list_entries(family_id, datetime(now.year, 1, 1), now, EntryKind.EXPENSE)

        prior_start, _ = month_bounds(*previous_month(*last_completed_month(now)))
        income = self.queries.list_entries(family_id, prior_start, now, EntryKind.INCOME)

        anomalies = self.anomalies.detect(expenses, budgets, year_expenses, income, now)
        logger.info("Anomalies detected", family_id=family_id, count=len(anomalies))
        return anomalies

    def recommend_budgets(
        self,
        family_id: str,
        target_period: Optional[BudgetPeriod] = None,
        months_to_analyze: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> BudgetRecommendationReport:
        """
        Recommend budgets for ``target_period`` (default: the month after ``now``).

        Raises:
            ValidationError: ``now`` missing or a non-positive number of months
        """
        if now is None:
            raise ValidationError(message="A reference time is required", details=["now: None"])

        months = months_to_analyze if months_to_analyze is not None else self.settings.recommendation_months
        if months < 1:
            raise ValidationError(
                message="At least one month must be analyzed",
                details=[f"months_to_analyze: {months}"]
            )

        window = AnalysisWindow.trailing(family_id, months, now)
        target = target_period or BudgetPeriod.following(now)
        entries = self.queries.list_entries(family_id, window.start, window.end)
        current = self.queries.list_budgets(family_id, year=target.year, month=target.month)
        return self.recommender.recommend(entries, window, target, current)

    def suggest_budgets(
        self,
        family_id: str,
        target_period: Optional[BudgetPeriod] = None,
        months: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> SmartBudgetReport:
        """
        Ensemble budget suggestions over the calendar months ending with ``now``'s month.

        Raises:
            ValidationError: ``now`` missing or fewer than two months
        """
        if now is None:
            raise ValidationError(message="A reference time is required", details=["now: None"])

        now = naive(now)
        months = months if months is not None else self.settings.smart_budget_months
        if months < 2:
            raise ValidationError(
                message="At least two months are needed for smart suggestions",
                details=[f"months: {months}"]
            )

        periods = trailing_periods(now.year, now.month, months)
        start, _ = month_bounds(periods[0].year, periods[0].month)
        entries = self.queries.list_entries(family_id, start, now)
        target = target_period or BudgetPeriod.following(now)
        return self.smart_budgets.suggest(family_id, entries, periods, target)

    def compute_health_score(self, window: AnalysisWindow) -> HealthScoreBreakdown:
        """Composite health score for the window."""
        family_id = window.family_id
        entries = self.queries.list_entries(family_id, window.start, window.end)
        return self.health.calculate(
            income_total=total_amount(e for e in entries if e.kind == EntryKind.INCOME),
            expense_total=total_amount(e for e in entries if e.kind == EntryKind.EXPENSE),
            months=window.months,
            budgets=self.queries.list_budgets(family_id),
            wallets=self.queries.list_wallet_balances(family_id),
            goals=self.queries.list_active_goals(family_id),
        )

    def forecast_next_month(self, window: AnalysisWindow, split_months: Optional[int] = None) -> NextMonthForecast:
        """Next-month projection over the calendar months of the window."""
        first_year, first_month = window.end.year, window.end.month
        for _ in range(window.months - 1):
            first_year, first_month = previous_month(first_year, first_month)
        start, _ = month_bounds(first_year, first_month)

        entries = self.queries.list_entries(window.family_id, start, window.end)
        split = split_months if split_months is not None else self.settings.forecast_split_months
        return self.forecaster.forecast(entries, window, split)

    def simulate_payoff(
        self,
        family_id: str,
        liability_id: str,
        payment_policy: Optional[PaymentPolicy] = None
    ) -> PayoffSimulation:
        """Amortization schedule for a liability's remaining balance."""
        liability = self._get_liability(family_id, liability_id)
        try:
            return self.engine.simulate(liability, payment_policy or PaymentPolicy())
        except AppException as e:
            logger.error("Payoff simulation failed", liability_id=liability_id, code=e.code, error=e.message)
            raise

    def compare_scenarios(
        self,
        family_id: str,
        liability_id: str,
        extra_payment: Optional[float] = None,
        target_months: Optional[int] = None
    ) -> ScenarioComparison:
        """Baseline versus higher-payment scenarios for a liability."""
        liability = self._get_liability(family_id, liability_id)
        extra = extra_payment if extra_payment is not None else self.settings.default_extra_payment
        try:
            return self.comparator.compare(liability, extra, target_months)
        except AppException as e:
            logger.error("Scenario comparison failed", liability_id=liability_id, code=e.code, error=e.message)
            raise

    def analyze_interest(self, family_id: str, liability_id: str, now: datetime) -> InterestAnalysis:
        """Interest cost and payment history of a liability."""
        liability = self._get_liability(family_id, liability_id)
        payments = self.queries.list_liability_payments(liability_id)
        return self.interest.analyze(liability, payments, now)

    def early_payment_impact(
        self,
        family_id: str,
        liability_id: str,
        policy: PaymentPolicy
    ) -> EarlyPaymentImpact:
        """Effect of one-time, recurring and yearly extra payments on a liability."""
        liability = self._get_liability(family_id, liability_id)
        try:
            return self.comparator.early_payment_impact(liability, policy)
        except AppException as e:
            logger.error("Early payment analysis failed", liability_id=liability_id, code=e.code, error=e.message)
            raise

    def generate_insights(self, window: AnalysisWindow, now: datetime) -> InsightsReport:
        """Recommendations and savings opportunities for the window."""
        family_id = window.family_id
        entries = self.queries.list_entries(family_id, window.start, window.end)
        patterns = self.patterns.analyze(entries, window)
        return self.insights.compose(
            window=window,
            entries=entries,
            patterns=patterns,
            budgets=self.queries.list_budgets(family_id),
            wallets=self.queries.list_wallet_balances(family_id),
            goals=self.queries.list_active_goals(family_id),
            now=now,
        )

    def _get_liability(self, family_id: str, liability_id: str) -> LiabilityRecord:
        liability = self.queries.get_liability(family_id, liability_id)
        if liability is None:
            logger.warning("Liability not found", family_id=family_id, liability_id=liability_id)
            raise NotFoundError(resource_type="liability", resource_id=liability_id)
        return liability


def get_analytics_service(queries: LedgerQueries, settings: Optional[Settings] = None) -> FinancialAnalyticsService:
    """Build a service for one request. Useful for dependency injection."""
    return FinancialAnalyticsService(queries, settings)
