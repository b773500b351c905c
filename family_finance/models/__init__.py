"""
Pydantic models for the family finance analytics core.
"""
from .analytics import (
    AdvisoryKind,
    AdvisoryNote,
    Anomaly,
    AnomalyType,
    BudgetRecommendationReport,
    BudgetRecommendationSummary,
    BudgetStrategies,
    BudgetStrategy,
    CategoryInsight,
    CategoryBudgetRecommendation,
    CategorySpendingAnalysis,
    ConfidenceLevel,
    CurrentBudgetComparison,
    HealthComponent,
    HealthRating,
    HealthScoreBreakdown,
    InsightRecommendation,
    InsightsReport,
    InsightType,
    MonthlySeriesAnalysis,
    NextMonthForecast,
    PatternFlag,
    PortfolioAnalysis,
    PredictionConfidence,
    PredictionMethods,
    Priority,
    SavingsOpportunity,
    Severity,
    SmartBudgetReport,
    SmartBudgetSuggestion,
    SpendingPattern,
    SpendingPatternNote,
    SpendPrediction,
    StrategyTotal,
    TrendDirection,
)
from .base import FamilyOwnedModel, ValueObject, WallClock
from .financial import (
    AnalysisWindow,
    BudgetPeriod,
    BudgetRecord,
    EntryKind,
    GoalProgress,
    LedgerEntry,
    LiabilityPayment,
    LiabilityRecord,
    PaymentPolicy,
    WalletBalance,
)
from .liabilities import (
    BreakEven,
    EarlyPaymentImpact,
    ExtraPaymentOption,
    InterestAnalysis,
    PaymentConsistency,
    PaymentHistorySummary,
    PayoffScenario,
    PayoffSimulation,
    PayoffTotals,
    RateCategory,
    ScenarioComparison,
    ScenarioSavings,
    ScheduleEntry,
    StrategyImpact,
    TargetPayoffScenario,
    YearlySummary,
)

__all__ = [
    # Base models
    "ValueObject",
    "FamilyOwnedModel",
    "WallClock",
    # Input records
    "AnalysisWindow",
    "BudgetPeriod",
    "BudgetRecord",
    "EntryKind",
    "GoalProgress",
    "LedgerEntry",
    "LiabilityPayment",
    "LiabilityRecord",
    "PaymentPolicy",
    "WalletBalance",
    # Analytics results
    "AdvisoryKind",
    "AdvisoryNote",
    "Anomaly",
    "AnomalyType",
    "BudgetRecommendationReport",
    "BudgetRecommendationSummary",
    "BudgetStrategies",
    "BudgetStrategy",
    "CategoryInsight",
    "CategoryBudgetRecommendation",
    "CategorySpendingAnalysis",
    "ConfidenceLevel",
    "CurrentBudgetComparison",
    "HealthComponent",
    "HealthRating",
    "HealthScoreBreakdown",
    "InsightRecommendation",
    "InsightsReport",
    "InsightType",
    "MonthlySeriesAnalysis",
    "NextMonthForecast",
    "PatternFlag",
    "PortfolioAnalysis",
    "PredictionConfidence",
    "PredictionMethods",
    "Priority",
    "SavingsOpportunity",
    "Severity",
    "SmartBudgetReport",
    "SmartBudgetSuggestion",
    "SpendingPattern",
    "SpendingPatternNote",
    "SpendPrediction",
    "StrategyTotal",
    "TrendDirection",
    # Liability results
    "BreakEven",
    "EarlyPaymentImpact",
    "ExtraPaymentOption",
    "InterestAnalysis",
    "PaymentConsistency",
    "PaymentHistorySummary",
    "PayoffScenario",
    "PayoffSimulation",
    "PayoffTotals",
    "RateCategory",
    "ScenarioComparison",
    "ScenarioSavings",
    "ScheduleEntry",
    "StrategyImpact",
    "TargetPayoffScenario",
    "YearlySummary",
]
