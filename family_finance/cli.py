"""
Command-line interface for the liability simulation engine.

Runs payoff simulations on parameters given on the command line and prints
the result as JSON.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

import click

from . import __version__
from .config import get_settings
from .models.financial import LiabilityRecord, PaymentPolicy
from .services.amortization import AmortizationEngine
from .services.payoff_scenarios import PayoffScenarioComparator
from .utils.exceptions import AppException
from .utils.logging import configure_logging
from .utils.money import to_money

amount = click.FloatRange(min=0)
rate_percent = click.FloatRange(min=0, max=100)


def _liability(principal: float, rate: float, payment: float) -> LiabilityRecord:
    balance = Decimal(str(principal))
    return LiabilityRecord(
        family_id="cli",
        id="cli",
        name="Command line liability",
        principal=balance,
        remaining_balance=balance,
        annual_interest_rate_percent=Decimal(str(rate)),
        monthly_payment_amount=Decimal(str(payment)),
        origination_date=datetime.now(),
    )


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    help="Override the configured log renderer",
)
@click.version_option(__version__, prog_name="family-finance")
@click.pass_context
def main(ctx: click.Context, debug: bool, log_format: Optional[str]) -> None:
    """Family finance analytics and loan payoff simulation."""
    ctx.ensure_object(dict)

    settings = get_settings()
    overrides = {}
    if debug:
        overrides["log_level"] = "DEBUG"
    if log_format:
        overrides["log_format"] = log_format
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings)
    ctx.obj["settings"] = settings


@main.command()
@click.option("--principal", required=True, type=amount, help="Outstanding balance")
@click.option("--rate", required=True, type=rate_percent, help="Annual interest rate in percent")
@click.option("--payment", required=True, type=amount, help="Base monthly payment")
@click.option("--one-time", default=0.0, type=amount, help="One-time payment applied before month 1")
@click.option("--extra", default=0.0, type=amount, help="Extra amount paid every month")
@click.option("--bonus", default=0.0, type=amount, help="Extra amount paid every twelfth month")
@click.option("--summary-only", is_flag=True, help="Print totals and yearly summary without the schedule")
def amortize(
    principal: float,
    rate: float,
    payment: float,
    one_time: float,
    extra: float,
    bonus: float,
    summary_only: bool
) -> None:
    """
    Simulate the payoff of a loan.

    Example:
      family-finance amortize --principal 12000000 --rate 12 --payment 1200000
    """
    try:
        policy = PaymentPolicy(
            one_time_amount=to_money(one_time),
            recurring_extra_per_month=to_money(extra),
            yearly_bonus_amount=to_money(bonus),
        )
        simulation = AmortizationEngine().simulate(_liability(principal, rate, payment), policy)
    except AppException as e:
        raise click.ClickException(f"{e.code}: {e.message}") from e

    exclude = {"schedule"} if summary_only else None
    click.echo(simulation.model_dump_json(indent=2, exclude=exclude))


@main.command("compare-scenarios")
@click.option("--principal", required=True, type=amount, help="Outstanding balance")
@click.option("--rate", required=True, type=rate_percent, help="Annual interest rate in percent")
@click.option("--payment", required=True, type=amount, help="Current monthly payment")
@click.option("--extra", default=None, type=amount, help="Extra monthly payment to compare")
@click.option("--target-months", default=None, type=click.IntRange(min=1), help="Desired payoff horizon")
@click.pass_context
def compare_scenarios(
    ctx: click.Context,
    principal: float,
    rate: float,
    payment: float,
    extra: Optional[float],
    target_months: Optional[int]
) -> None:
    """
    Compare the current payment with extra, double, +50% and target scenarios.

    Example:
      family-finance compare-scenarios --principal 12000000 --rate 12 --payment 1200000 --extra 200000
    """
    settings = ctx.obj["settings"]
    comparator = PayoffScenarioComparator(ladder=settings.get_extra_payment_ladder())
    extra_payment = extra if extra is not None else settings.default_extra_payment

    try:
        comparison = comparator.compare(_liability(principal, rate, payment), extra_payment, target_months)
    except AppException as e:
        raise click.ClickException(f"{e.code}: {e.message}") from e

    click.echo(comparison.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
