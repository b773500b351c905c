"""
Analytics components and the service facade.
"""
from .amortization import AmortizationEngine, AmortizationResult, AmortizationStep
from .analytics import FinancialAnalyticsService, get_analytics_service
from .anomalies import AnomalyDetector
from .budget_recommender import BudgetRecommender
from .forecast import ForecastEngine
from .health_score import HealthScoreCalculator
from .insights import InsightsComposer
from .interest import InterestAnalyzer
from .payoff_scenarios import PayoffScenarioComparator
from .spending_patterns import SpendingPatternAnalyzer

__all__ = [
    "AmortizationEngine",
    "AmortizationResult",
    "AmortizationStep",
    "AnomalyDetector",
    "BudgetRecommender",
    "FinancialAnalyticsService",
    "ForecastEngine",
    "HealthScoreCalculator",
    "InsightsComposer",
    "InterestAnalyzer",
    "PayoffScenarioComparator",
    "SpendingPatternAnalyzer",
    "get_analytics_service",
]
