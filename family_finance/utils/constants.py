"""
Application constants.
Every analytics threshold is defined here once and imported by the components
that use it.
"""

# Trend classification
TREND_DEADBAND_PERCENT = 10.0  # exclusive on both sides

# Outlier detection (standard deviations above the mean)
OUTLIER_MEDIUM_SIGMA = 2
OUTLIER_HIGH_SIGMA = 3
OUTLIER_MIN_ENTRIES = 2

# Budget breach severity (overage percentage)
BREACH_HIGH_PERCENT = 50.0
BREACH_MEDIUM_PERCENT = 20.0

# Income drop detection
INCOME_DROP_RATIO = 0.8  # current month below 80% of prior month
INCOME_DROP_HIGH_PERCENT = 50.0
INCOME_DROP_MEDIUM_PERCENT = 30.0

# Budget recommendations
BUDGET_ROUNDING_UNIT = 1000
BUFFER_INCREASING = 0.5
BUFFER_DECREASING = -0.3
BUFFER_STABLE = 0.2
MAX_BUDGET_SIGMA = 1.5
CONFIDENCE_HIGH_CV = 20.0
CONFIDENCE_MEDIUM_CV = 40.0
BUDGET_TOO_HIGH_RATIO = 80.0
SAVINGS_OPPORTUNITY_RATIO = 50.0
VOLATILE_CATEGORY_CV = 40.0
ADVISORY_CATEGORY_LIMIT = 3

# Smart budget suggestions
SMART_BUDGET_MONTHS = 12
LINEAR_FIT_WEIGHT = 0.3
EMA_WEIGHT = 0.3
RECENCY_AVERAGE_WEIGHT = 0.4
EMA_ALPHA = 0.3
RECENCY_WEIGHT_STEP = 0.2  # month i of the series weighs 1 + 0.2 * i
PREDICTION_VERY_HIGH_CV = 15.0
PREDICTION_HIGH_CV = 30.0
PREDICTION_MEDIUM_CV = 50.0
CONSERVATIVE_SIGMA = 1.5
MODERATE_SIGMA = 0.5
AGGRESSIVE_SIGMA = -0.3
GROWTH_PATTERN_RATE = 0.05  # fitted monthly slope over the monthly average
SEASONAL_SPREAD_RATIO = 1.5
HIGH_SAVINGS_POTENTIAL_RATIO = 60.0
AI_OPTIMIZED_MAX_RATIO = 70.0

# Health score caps
SAVINGS_RATE_CAP = 30
BUDGET_ADHERENCE_CAP = 25
EMERGENCY_FUND_CAP = 25
GOAL_PROGRESS_CAP = 20
SAVINGS_RATE_TARGET_PERCENT = 30.0
EMERGENCY_FUND_TARGET_MONTHS = 6.0

HEALTH_EXCELLENT = 80
HEALTH_GOOD = 60
HEALTH_FAIR = 40

# Forecast
FORECAST_MEDIUM_CONFIDENCE_MONTHS = 3

# Amortization
MAX_AMORTIZATION_MONTHS = 600  # 50 years
BALANCE_EPSILON = 0.01
MONTHS_PER_YEAR = 12

# Payoff scenarios
DOUBLE_PAYMENT_FACTOR = 2.0
AGGRESSIVE_PAYMENT_FACTOR = 1.5
HIGH_INTEREST_SHARE = 0.5
EXTRA_PAYMENT_LADDER = (100_000, 250_000, 500_000, 1_000_000, 2_000_000)
COMBINED_SAVINGS_SHARE = 0.1

# Interest analysis
RATE_EXCELLENT_PERCENT = 5.0
RATE_LOW_PERCENT = 10.0
RATE_MEDIUM_PERCENT = 15.0
RATE_HIGH_PERCENT = 20.0
PAYMENT_CONSISTENCY_EXCELLENT_CV = 10.0
PAYMENT_CONSISTENCY_GOOD_CV = 20.0
PAYMENT_CONSISTENCY_FAIR_CV = 30.0

# Insights
TARGET_SAVINGS_RATE_PERCENT = 20.0
STRONG_TREND_PERCENT = 20.0
SEVERE_TREND_PERCENT = 50.0
MIN_EMERGENCY_FUND_MONTHS = 3.0
GOAL_URGENCY_DAYS = 180
GOAL_LAGGING_PROGRESS_PERCENT = 50.0
SAVINGS_OPPORTUNITY_MIN_AVERAGE = 500_000
SAVINGS_OPPORTUNITY_LIMIT = 5
REDUCTION_INCREASING_PERCENT = 20.0
REDUCTION_DEFAULT_PERCENT = 10.0
UNBUDGETED_MIN_AVERAGE = 100_000

# Currency formatting
CURRENCY_DECIMALS = 2
