"""
Analytics result models: spending patterns, anomalies, budget recommendations,
health score, forecast and insights.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field

from .base import ValueObject


class TrendDirection(str, Enum):
    """Trend classification shared by every analytics component."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class Severity(str, Enum):
    """Anomaly severity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConfidenceLevel(str, Enum):
    """Confidence of a recommendation or forecast."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AnomalyType(str, Enum):
    """Anomaly classes."""
    HIGH_SPENDING = "high_spending"
    BUDGET_BREACH = "budget_breach"
    INCOME_DROP = "income_drop"


class Priority(str, Enum):
    """Recommendation priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class AdvisoryKind(str, Enum):
    """Kinds of advisory notes attached to budget recommendations."""
    WARNING = "warning"
    OPPORTUNITY = "opportunity"
    INFO = "info"


class PredictionConfidence(str, Enum):
    """Four-level confidence of an ensemble spend prediction."""
    VERY_HIGH = "very_high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BudgetStrategy(str, Enum):
    """Budget strategies derived from a spend prediction."""
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"
    AI_OPTIMIZED = "ai_optimized"


class PatternFlag(str, Enum):
    """Monthly spending patterns worth flagging."""
    GROWTH = "growth"
    VOLATILE = "volatile"
    SEASONAL = "seasonal"


class HealthRating(str, Enum):
    """Health score rating bands."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_IMPROVEMENT = "Needs Improvement"


class InsightType(str, Enum):
    """Insight recommendation types."""
    SAVINGS = "savings"
    SPENDING = "spending"
    BUDGET = "budget"
    EMERGENCY_FUND = "emergency_fund"
    GOALS = "goals"


# Spending patterns

class SpendingPattern(ValueObject):
    """Aggregated spending statistics for one category."""

    category_id: str
    category_name: str
    average_amount: Decimal = Field(..., description="Average amount per entry")
    monthly_average: Decimal = Field(..., description="Total spend divided by months in the window")
    frequency: int = Field(..., ge=1, description="Number of entries in the window")
    total_amount: Decimal
    median_amount: Decimal
    standard_deviation: Decimal
    trend: TrendDirection
    trend_percentage: float


# Anomalies

class Anomaly(ValueObject):
    """A detected anomaly."""

    type: AnomalyType
    severity: Severity
    description: str
    amount: Optional[Decimal] = None
    category_id: Optional[str] = None
    date: Optional[datetime] = None


# Budget recommendations

class CategorySpendingAnalysis(ValueObject):
    """Historical spend statistics behind a recommendation."""

    average_monthly: Decimal
    standard_deviation: Decimal
    coefficient_of_variation: float
    trend: TrendDirection
    transaction_count: int
    total_spent: Decimal


class CurrentBudgetComparison(ValueObject):
    """Existing budget for the target period compared to the recommendation."""

    amount: Decimal
    difference: Decimal
    difference_percentage: float


class CategoryBudgetRecommendation(ValueObject):
    """Suggested budget for one category."""

    category_id: str
    category_name: str
    suggested_amount: Decimal
    min_budget: Decimal
    max_budget: Decimal
    confidence: ConfidenceLevel
    reasoning: str
    analysis: CategorySpendingAnalysis
    current_budget: Optional[CurrentBudgetComparison] = None


class AdvisoryNote(ValueObject):
    """Family-level advisory produced alongside recommendations."""

    kind: AdvisoryKind
    title: str
    message: str


class BudgetRecommendationSummary(ValueObject):
    """Family-level overlay across all category recommendations."""

    total_recommended_budget: Decimal
    average_monthly_income: Decimal
    budget_to_income_ratio: float
    recommended_savings_rate: float
    categories_analyzed: int


class BudgetRecommendationReport(ValueObject):
    """Recommendations for a target period."""

    family_id: str
    target_year: int
    target_month: int
    months_analyzed: int
    recommendations: List[CategoryBudgetRecommendation] = Field(default_factory=list)
    summary: BudgetRecommendationSummary
    notes: List[AdvisoryNote] = Field(default_factory=list)


# Smart budget suggestions

class PredictionMethods(ValueObject):
    """Individual predictions combined into the ensemble."""

    linear_regression: Decimal
    exponential_moving_average: Decimal
    weighted_average: Decimal
    ensemble: Decimal


class SpendPrediction(ValueObject):
    """Next-month spend prediction for one category."""

    amount: Decimal = Field(..., description="Ensemble adjusted for seasonality, floored at 0")
    confidence: PredictionConfidence
    methods: PredictionMethods
    seasonality_factor: float


class BudgetStrategies(ValueObject):
    """Budget amounts per strategy, rounded up to whole thousands."""

    conservative: Decimal
    moderate: Decimal
    aggressive: Decimal
    ai_optimized: Decimal

    def amount(self, strategy: BudgetStrategy) -> Decimal:
        return getattr(self, strategy.value)


class MonthlySeriesAnalysis(ValueObject):
    """Statistics of a category's monthly spend series."""

    months_analyzed: int
    average_monthly: Decimal
    standard_deviation: Decimal
    volatility: float = Field(..., description="Coefficient of variation in percent")
    trend: TrendDirection
    trend_rate: float = Field(..., description="Fitted monthly change as a percentage of the average")


class SpendingPatternNote(ValueObject):
    """A flagged spending pattern."""

    type: PatternFlag
    description: str
    impact: Severity


class CategoryInsight(ValueObject):
    """Advice for one category with a suggested action."""

    kind: AdvisoryKind
    message: str
    action: str


class SmartBudgetSuggestion(ValueObject):
    """Prediction and budget strategies for one category."""

    category_id: str
    category_name: str
    prediction: SpendPrediction
    strategies: BudgetStrategies
    recommended_strategy: BudgetStrategy
    analysis: MonthlySeriesAnalysis
    patterns: List[SpendingPatternNote] = Field(default_factory=list)
    insights: List[CategoryInsight] = Field(default_factory=list)


class StrategyTotal(ValueObject):
    """One strategy summed over every category."""

    strategy: BudgetStrategy
    total: Decimal
    savings_rate: float = Field(..., description="Income left after the budget, in percent; 0 without income")


class PortfolioAnalysis(ValueObject):
    """Family-level view across all category suggestions."""

    total_predicted_spending: Decimal
    average_monthly_income: Decimal
    ai_optimized_ratio: float = Field(..., description="AI-optimized total as a percentage of income")
    strategy_comparison: List[StrategyTotal] = Field(default_factory=list)
    recommended_strategy: BudgetStrategy

    def strategy(self, strategy: BudgetStrategy) -> StrategyTotal:
        return next(item for item in self.strategy_comparison if item.strategy == strategy)


class SmartBudgetReport(ValueObject):
    """Ensemble budget suggestions for a target period."""

    family_id: str
    target_year: int
    target_month: int
    months_analyzed: int
    suggestions: List[SmartBudgetSuggestion] = Field(default_factory=list)
    portfolio: PortfolioAnalysis
    notes: List[AdvisoryNote] = Field(default_factory=list)
    confidence_counts: Dict[PredictionConfidence, int] = Field(default_factory=dict)


# Health score

class HealthComponent(ValueObject):
    """One capped health score component."""

    name: str
    raw_score: float = Field(..., ge=0, description="Capped, unrounded component score")
    score: int = Field(..., ge=0, description="Reported score; components sum to the total")
    max_score: int
    description: str


class HealthScoreBreakdown(ValueObject):
    """Composite financial health score."""

    total: int = Field(..., ge=0, le=100)
    max_score: int = 100
    rating: HealthRating
    components: List[HealthComponent]


# Forecast

class NextMonthForecast(ValueObject):
    """Next-month income and expense projection."""

    predicted_income: Decimal
    predicted_expense: Decimal
    predicted_savings: Decimal
    confidence: ConfidenceLevel
    months_analyzed: int
    split_months: int
    average_income: Decimal
    average_expense: Decimal
    income_trend_percentage: float
    expense_trend_percentage: float
    income_trend: TrendDirection
    expense_trend: TrendDirection


# Insights

class InsightRecommendation(ValueObject):
    """Personalised recommendation."""

    type: InsightType
    priority: Priority
    title: str
    description: str
    action: str
    impact: str


class SavingsOpportunity(ValueObject):
    """Potential monthly saving in one category."""

    category_id: str
    category_name: str
    current_monthly_average: Decimal
    suggested_reduction_percent: float
    potential_monthly_savings: Decimal
    potential_annual_savings: Decimal
    trend: TrendDirection


class InsightsReport(ValueObject):
    """Recommendations and savings opportunities for a family."""

    family_id: str
    generated_at: datetime
    savings_rate: float
    emergency_fund_months: float
    recommendations: List[InsightRecommendation] = Field(default_factory=list)
    savings_opportunities: List[SavingsOpportunity] = Field(default_factory=list)
    total_potential_monthly_savings: Decimal
