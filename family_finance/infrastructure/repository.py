"""
Read-side query interface over ledger, budget, liability, wallet and goal data,
plus an in-memory implementation.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Protocol

import structlog

from ..models.financial import (
    BudgetRecord,
    EntryKind,
    GoalProgress,
    LedgerEntry,
    LiabilityPayment,
    LiabilityRecord,
    WalletBalance,
)
from ..utils.dates import naive

logger = structlog.get_logger()


class LedgerQueries(Protocol):
    """Queries the analytics service needs from the data layer."""

    def list_entries(
        self,
        family_id: str,
        start: datetime,
        end: datetime,
        kind: Optional[EntryKind] = None,
        category_id: Optional[str] = None
    ) -> List[LedgerEntry]:
        """Entries with ``start <= occurred_at <= end``."""
        ...

    def list_budgets(
        self,
        family_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        category_id: Optional[str] = None
    ) -> List[BudgetRecord]:
        ...

    def get_liability(self, family_id: str, liability_id: str) -> Optional[LiabilityRecord]:
        ...

    def list_liability_payments(self, liability_id: str) -> List[LiabilityPayment]:
        """Payments in chronological order."""
        ...

    def list_wallet_balances(self, family_id: str) -> List[WalletBalance]:
        ...

    def list_active_goals(self, family_id: str) -> List[GoalProgress]:
        ...


class InMemoryLedgerRepository:
    """
    LedgerQueries over plain lists.

    Used by tests, the CLI and applications that already hold their records
    in memory.
    """

    def __init__(
        self,
        entries: Iterable[LedgerEntry] = (),
        budgets: Iterable[BudgetRecord] = (),
        liabilities: Iterable[LiabilityRecord] = (),
        payments: Iterable[LiabilityPayment] = (),
        wallets: Iterable[WalletBalance] = (),
        goals: Iterable[GoalProgress] = ()
    ):
        self._entries: List[LedgerEntry] = list(entries)
        self._budgets: List[BudgetRecord] = list(budgets)
        self._liabilities: Dict[str, LiabilityRecord] = {item.id: item for item in liabilities}
        self._payments: List[LiabilityPayment] = list(payments)
        self._wallets: List[WalletBalance] = list(wallets)
        self._goals: List[GoalProgress] = list(goals)

    def add_entries(self, *entries: LedgerEntry) -> None:
        self._entries.extend(entries)

    def add_budgets(self, *budgets: BudgetRecord) -> None:
        self._budgets.extend(budgets)

    def add_liability(self, liability: LiabilityRecord, payments: Iterable[LiabilityPayment] = ()) -> None:
        self._liabilities[liability.id] = liability
        self._payments.extend(payments)

    def add_wallets(self, *wallets: WalletBalance) -> None:
        self._wallets.extend(wallets)

    def add_goals(self, *goals: GoalProgress) -> None:
        self._goals.extend(goals)

    def list_entries(
        self,
        family_id: str,
        start: datetime,
        end: datetime,
        kind: Optional[EntryKind] = None,
        category_id: Optional[str] = None
    ) -> List[LedgerEntry]:
        start, end = naive(start), naive(end)
        entries = [
            entry for entry in self._entries
            if entry.family_id == family_id
            and start <= entry.occurred_at <= end
            and (kind is None or entry.kind == kind)
            and (category_id is None or entry.category_id == category_id)
        ]
        logger.debug("Entries queried", family_id=family_id, count=len(entries))
        return sorted(entries, key=lambda e: (e.occurred_at, e.id))

    def list_budgets(
        self,
        family_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        category_id: Optional[str] = None
    ) -> List[BudgetRecord]:
        return [
            budget for budget in self._budgets
            if budget.family_id == family_id
            and (year is None or budget.period_year == year)
            and (month is None or budget.period_month == month)
            and (category_id is None or budget.category_id == category_id)
        ]

    def get_liability(self, family_id: str, liability_id: str) -> Optional[LiabilityRecord]:
        liability = self._liabilities.get(liability_id)
        if liability is None or liability.family_id != family_id:
            return None
        return liability

    def list_liability_payments(self, liability_id: str) -> List[LiabilityPayment]:
        return sorted(
            (payment for payment in self._payments if payment.liability_id == liability_id),
            key=lambda p: p.paid_at
        )

    def list_wallet_balances(self, family_id: str) -> List[WalletBalance]:
        return [wallet for wallet in self._wallets if wallet.family_id == family_id]

    def list_active_goals(self, family_id: str) -> List[GoalProgress]:
        return [goal for goal in self._goals if goal.family_id == family_id and goal.is_active]
