"""
Payoff scenario comparison and early-payment impact analysis.

Every scenario of one comparison is amortized from the same starting balance
and rate, so savings are directly comparable with the baseline.
"""
import math
from typing import List, Optional, Sequence

import structlog

from ..models.financial import LiabilityRecord, PaymentPolicy
from ..models.liabilities import (
    BreakEven,
    EarlyPaymentImpact,
    ExtraPaymentOption,
    PayoffScenario,
    ScenarioComparison,
    ScenarioSavings,
    StrategyImpact,
    TargetPayoffScenario,
)
from ..utils.constants import (
    AGGRESSIVE_PAYMENT_FACTOR,
    BALANCE_EPSILON,
    COMBINED_SAVINGS_SHARE,
    DOUBLE_PAYMENT_FACTOR,
    EXTRA_PAYMENT_LADDER,
    HIGH_INTEREST_SHARE,
    MONTHS_PER_YEAR,
)
from ..utils.exceptions import InvalidPaymentError
from ..utils.money import to_money
from .amortization import AmortizationEngine, AmortizationResult, yearly_summary

logger = structlog.get_logger()


def scenario_savings(scenario: AmortizationResult, baseline: AmortizationResult) -> ScenarioSavings:
    """Savings of ``scenario`` relative to ``baseline``."""
    months_saved = baseline.total_months - scenario.total_months
    interest_saved = baseline.total_interest - scenario.total_interest
    percentage = interest_saved / baseline.total_interest * 100 if baseline.total_interest > 0 else 0.0
    return ScenarioSavings(
        months_saved=months_saved,
        interest_saved=to_money(interest_saved),
        total_saved=to_money(baseline.total_paid - scenario.total_paid),
        percentage_reduction=round(percentage, 2),
        years_saved=round(months_saved / MONTHS_PER_YEAR, 2),
    )


def break_even_months(extra: float, interest_saved: float, months: int) -> Optional[int]:
    """
    Months until interest saved, spread evenly over ``months``, repays ``extra``.

    None when nothing is saved.
    """
    if extra <= 0 or interest_saved <= 0 or months <= 0:
        return None
    return math.ceil(extra / (interest_saved / months))


def _base_payment(liability: LiabilityRecord) -> float:
    base = liability.monthly_payment_amount
    if base is None or base <= 0:
        raise InvalidPaymentError(
            message="Monthly payment must be set for simulation",
            payment=float(base) if base is not None else None
        )
    return float(base)


class PayoffScenarioComparator:
    """Builds what-if payoff scenarios for a liability."""

    def __init__(
        self,
        engine: Optional[AmortizationEngine] = None,
        ladder: Sequence[float] = EXTRA_PAYMENT_LADDER
    ):
        self.engine = engine or AmortizationEngine()
        self.ladder = list(ladder)

    def compare(
        self,
        liability: LiabilityRecord,
        extra_payment: float = 0.0,
        target_months: Optional[int] = None
    ) -> ScenarioComparison:
        """
        Compare the current payment with higher-payment scenarios.

        Args:
            liability: liability to simulate from its remaining balance
            extra_payment: extra amount added to every monthly payment
            target_months: optional payoff horizon to solve the payment for

        Returns:
            Baseline, scenarios with savings, break-even and recommendations
        """
        base = _base_payment(liability)
        balance = float(liability.remaining_balance)
        rate = float(liability.annual_interest_rate_percent)
        extra_payment = float(extra_payment)
        if extra_payment < 0:
            raise InvalidPaymentError(message="Extra payment cannot be negative", payment=extra_payment)

        baseline_result = self.engine.amortize(balance, base, rate)
        baseline = self._scenario(
            "standard", "Current Payment", "Continue with current payment plan", base, baseline_result
        )

        extra_result = self.engine.amortize(balance, base + extra_payment, rate)
        double_result = self.engine.amortize(balance, base * DOUBLE_PAYMENT_FACTOR, rate)
        aggressive_result = self.engine.amortize(balance, base * AGGRESSIVE_PAYMENT_FACTOR, rate)

        scenarios: List[PayoffScenario] = [
            self._scenario(
                "with_extra", "With Extra Payment", f"Add {to_money(extra_payment)} per month",
                base + extra_payment, extra_result, baseline_result
            ),
            self._scenario(
                "double", "Double Payment", "Double your monthly payment",
                base * DOUBLE_PAYMENT_FACTOR, double_result, baseline_result
            ),
            self._scenario(
                "aggressive", "Aggressive (50% More)", "Pay 50% more each month",
                base * AGGRESSIVE_PAYMENT_FACTOR, aggressive_result, baseline_result
            ),
        ]

        if target_months is not None:
            scenarios.append(self._target_scenario(balance, rate, base, target_months, baseline_result))

        break_even = None
        if extra_payment > 0:
            months = break_even_months(
                extra_payment,
                baseline_result.total_interest - extra_result.total_interest,
                extra_result.total_months
            )
            break_even = BreakEven(
                extra_payment=to_money(extra_payment),
                months=months,
                description="Months until the extra monthly payment breaks even",
            )

        logger.info(
            "Payoff scenarios compared",
            liability_id=liability.id,
            baseline_months=baseline_result.total_months,
            extra_payment=extra_payment,
            scenarios=len(scenarios)
        )

        return ScenarioComparison(
            liability_id=liability.id,
            liability_name=liability.name,
            starting_balance=to_money(balance),
            annual_interest_rate_percent=liability.annual_interest_rate_percent,
            base_monthly_payment=to_money(base),
            extra_payment=to_money(extra_payment),
            baseline=baseline,
            scenarios=scenarios,
            break_even=break_even,
            recommendations=self._recommendations(
                balance, extra_payment, baseline_result, extra_result, double_result
            ),
        )

    def early_payment_impact(self, liability: LiabilityRecord, policy: PaymentPolicy) -> EarlyPaymentImpact:
        """
        Measure one-time, recurring, yearly-bonus and combined extra payments.

        Each strategy is scored by interest saved per unit of extra money paid.
        """
        base = _base_payment(liability)
        balance = float(liability.remaining_balance)
        rate = float(liability.annual_interest_rate_percent)
        one_time = float(policy.one_time_amount)
        recurring = float(policy.recurring_extra_per_month)
        bonus = float(policy.yearly_bonus_amount)

        baseline = self.engine.amortize(balance, base, rate)
        one_time_result = self.engine.amortize(
            balance, base, rate, PaymentPolicy(one_time_amount=policy.one_time_amount)
        )
        recurring_result = self.engine.amortize(
            balance, base, rate, PaymentPolicy(recurring_extra_per_month=policy.recurring_extra_per_month)
        )
        yearly_result = self.engine.amortize(
            balance, base, rate, PaymentPolicy(yearly_bonus_amount=policy.yearly_bonus_amount)
        )
        combined_result = self.engine.amortize(balance, base, rate, policy)

        strategies = [
            self._impact("one-time", "One-time extra payment", one_time, one_time, one_time_result, baseline),
            self._impact(
                "recurring", f"Extra {to_money(recurring)} per month", recurring,
                recurring * recurring_result.total_months, recurring_result, baseline
            ),
            self._impact(
                "yearly", f"Yearly bonus payment of {to_money(bonus)}", bonus,
                bonus * self._bonus_count(yearly_result), yearly_result, baseline
            ),
        ]
        combined = self._impact(
            "combined", "All extra payments combined", one_time + recurring + bonus,
            one_time + recurring * combined_result.total_months + bonus * self._bonus_count(combined_result),
            combined_result, baseline
        )

        ranked = sorted(strategies, key=lambda s: -s.effectiveness_score)
        best = ranked[0] if ranked[0].effectiveness_score > 0 else None

        options = [self._ladder_option(balance, base, rate, amount, baseline) for amount in self.ladder]
        optimal = None
        for option in options:
            if optimal is None or option.roi > optimal.roi:
                optimal = option

        break_even = []
        if one_time > 0:
            break_even.append(BreakEven(
                extra_payment=to_money(one_time),
                months=break_even_months(
                    one_time, baseline.total_interest - one_time_result.total_interest, baseline.total_months
                ),
                description="Months until the one-time payment breaks even",
            ))
        if recurring > 0:
            break_even.append(BreakEven(
                extra_payment=to_money(recurring),
                months=break_even_months(
                    recurring, baseline.total_interest - recurring_result.total_interest,
                    recurring_result.total_months
                ),
                description="Months until the recurring extra payment breaks even",
            ))

        recommendations = []
        if best is not None:
            recommendations.append(
                f"Most effective: {best.strategy} payment strategy "
                f"({best.effectiveness_score * 100:.1f}% return on extra payment)"
            )
        if float(combined.savings.interest_saved) > balance * COMBINED_SAVINGS_SHARE:
            recommendations.append(
                f"Combined strategy saves {combined.savings.interest_saved} in interest "
                f"({combined.savings.percentage_reduction:.1f}% reduction)"
            )
        if combined.savings.years_saved >= 1:
            recommendations.append(
                f"Extra payments can cut {combined.savings.years_saved:.1f} years off your loan term"
            )

        logger.info(
            "Early payment impact computed",
            liability_id=liability.id,
            best_strategy=best.strategy if best else None,
            options=len(options)
        )

        return EarlyPaymentImpact(
            liability_id=liability.id,
            liability_name=liability.name,
            baseline=baseline.totals(),
            strategies=strategies,
            combined=combined,
            options=options,
            best_strategy=best.strategy if best else None,
            optimal_option=optimal,
            break_even=break_even,
            recommendations=recommendations,
        )

    def _scenario(
        self,
        key: str,
        name: str,
        description: str,
        payment: float,
        result: AmortizationResult,
        baseline: Optional[AmortizationResult] = None
    ) -> PayoffScenario:
        return PayoffScenario(
            key=key,
            name=name,
            description=description,
            monthly_payment=to_money(payment),
            totals=result.totals(),
            savings=scenario_savings(result, baseline) if baseline is not None else None,
            yearly_summary=yearly_summary(result.steps),
        )

    def _target_scenario(
        self,
        balance: float,
        rate: float,
        base: float,
        target_months: int,
        baseline: AmortizationResult
    ) -> TargetPayoffScenario:
        required = self.engine.solve_required_payment(balance, rate, target_months)
        if balance <= BALANCE_EPSILON:
            result = AmortizationResult(starting_balance=balance)
        else:
            result = self.engine.amortize(balance, required, rate)
        return TargetPayoffScenario(
            key="target",
            name=f"Pay Off in {target_months} Months",
            description=f"Pay {to_money(required)} per month to finish in {target_months} months",
            monthly_payment=to_money(required),
            totals=result.totals(),
            savings=scenario_savings(result, baseline),
            yearly_summary=yearly_summary(result.steps),
            target_months=target_months,
            required_monthly_payment=to_money(required),
            increase_needed=to_money(required - base),
            increase_percentage=round((required - base) / base * 100, 2),
        )

    def _recommendations(
        self,
        balance: float,
        extra_payment: float,
        baseline: AmortizationResult,
        extra: AmortizationResult,
        double: AmortizationResult
    ) -> List[str]:
        recommendations = []
        if extra.total_months < baseline.total_months:
            recommendations.append(
                f"Adding {to_money(extra_payment)} per month saves "
                f"{baseline.total_months - extra.total_months} months and "
                f"{to_money(baseline.total_interest - extra.total_interest)} in interest."
            )
        if double.total_months < baseline.total_months / 2:
            recommendations.append("Doubling your payment can cut your payoff time by more than half.")
        if baseline.total_interest > balance * HIGH_INTEREST_SHARE:
            recommendations.append(
                "You will pay over 50% of the balance in interest. Consider increasing payments."
            )
        return recommendations

    def _impact(
        self,
        strategy: str,
        description: str,
        extra_payment: float,
        total_extra_paid: float,
        result: AmortizationResult,
        baseline: AmortizationResult
    ) -> StrategyImpact:
        savings = scenario_savings(result, baseline)
        interest_saved = baseline.total_interest - result.total_interest
        score = interest_saved / total_extra_paid if total_extra_paid > 0 else 0.0
        return StrategyImpact(
            strategy=strategy,
            description=description,
            extra_payment=to_money(extra_payment),
            total_extra_paid=to_money(total_extra_paid),
            totals=result.totals(),
            savings=savings,
            effectiveness_score=round(score, 6),
        )

    def _ladder_option(
        self,
        balance: float,
        base: float,
        rate: float,
        amount: float,
        baseline: AmortizationResult
    ) -> ExtraPaymentOption:
        policy = PaymentPolicy(recurring_extra_per_month=to_money(amount))
        result = self.engine.amortize(balance, base, rate, policy)
        contributed = amount * result.total_months
        interest_saved = baseline.total_interest - result.total_interest
        return ExtraPaymentOption(
            amount=to_money(amount),
            label=f"{amount:,.0f}/month",
            total_months=result.total_months,
            total_interest=to_money(result.total_interest),
            savings=scenario_savings(result, baseline),
            roi=round(interest_saved / contributed * 100, 4) if contributed > 0 else 0.0,
        )

    @staticmethod
    def _bonus_count(result: AmortizationResult) -> int:
        return math.ceil(result.total_months / MONTHS_PER_YEAR)
