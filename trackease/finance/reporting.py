"""Mini README: Aggregation helpers behind every TrackEase report.

Structure:
    * Totals / MonthlySummary / CategoryTotal - immutable result records.
    * compute_totals - income, expense and balance over all transactions.
    * today_expense_cents - expenses dated on the current calendar day.
    * monthly_rollup - per ``YYYY-MM`` sums, most recent month first.
    * category_breakdown - current-month expenses grouped by category.
    * sort_history - newest-first stable ordering for tables and exports.
    * build_report - bundles the above into a ``FinanceReport``.

All helpers are pure: they read a snapshot of transactions, never mutate
it, and take the reference time as an argument so results are
deterministic under test. Transactions whose stored date cannot be parsed
still count towards the global totals but never match a day or month
bucket.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .ledger import Transaction, TransactionType
from .money import format_currency, from_minor_units


@dataclass(slots=True, frozen=True)
class Totals:
    """Running totals across every transaction."""

    income_cents: int = 0
    expense_cents: int = 0

    @property
    def balance_cents(self) -> int:
        return self.income_cents - self.expense_cents


@dataclass(slots=True, frozen=True)
class MonthlySummary:
    """Income and expense sums for one calendar month."""

    month: str
    income_cents: int
    expense_cents: int

    @property
    def balance_cents(self) -> int:
        return self.income_cents - self.expense_cents


@dataclass(slots=True, frozen=True)
class CategoryTotal:
    """Expense sum for one category inside the current month."""

    category: str
    amount_cents: int


@dataclass(slots=True)
class FinanceReport:
    """Everything the dashboard renders, computed from one snapshot."""

    generated_at: datetime
    totals: Totals
    today_expense_cents: int
    monthly: List[MonthlySummary] = field(default_factory=list)
    categories: List[CategoryTotal] = field(default_factory=list)
    history: List[Transaction] = field(default_factory=list)

    def as_dict(self, currency_symbol: str = "₱") -> Dict[str, Any]:
        """Export the report for JSON responses, keeping display strings alongside numbers."""

        def money(cents: int) -> Dict[str, Any]:
            return {"amount": from_minor_units(cents), "formatted": format_currency(cents, currency_symbol)}

        return {
            "generated_at": self.generated_at.replace(microsecond=0).isoformat(),
            "totals": {
                "income": money(self.totals.income_cents),
                "expense": money(self.totals.expense_cents),
                "balance": money(self.totals.balance_cents),
                "today_expense": money(self.today_expense_cents),
            },
            "monthly": [
                {
                    "month": summary.month,
                    "income": money(summary.income_cents),
                    "expense": money(summary.expense_cents),
                    "balance": money(summary.balance_cents),
                }
                for summary in self.monthly
            ],
            "categories": [
                {"category": entry.category, **money(entry.amount_cents)} for entry in self.categories
            ],
            "history": [transaction.as_dict() for transaction in self.history],
        }


def month_key(moment: datetime) -> str:
    """Return the ``YYYY-MM`` bucket for a timestamp."""

    return f"{moment.year:04d}-{moment.month:02d}"


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Sum income and expense amounts over every transaction."""

    income = 0
    expense = 0
    for transaction in transactions:
        if transaction.transaction_type is TransactionType.INCOME:
            income += transaction.amount_cents
        else:
            expense += transaction.amount_cents
    return Totals(income_cents=income, expense_cents=expense)


def today_expense_cents(transactions: Iterable[Transaction], now: Optional[datetime] = None) -> int:
    """Sum expenses dated on the same local calendar day as ``now``."""

    today = (now or datetime.now()).date()
    total = 0
    for transaction in transactions:
        if transaction.transaction_type is not TransactionType.EXPENSE:
            continue
        occurred_at = transaction.occurred_at
        if occurred_at is not None and occurred_at.date() == today:
            total += transaction.amount_cents
    return total


def monthly_rollup(transactions: Iterable[Transaction]) -> List[MonthlySummary]:
    """Group transactions by their own ``(year, month)``, most recent first."""

    buckets: Dict[str, List[int]] = {}
    for transaction in transactions:
        occurred_at = transaction.occurred_at
        if occurred_at is None:
            continue
        sums = buckets.setdefault(month_key(occurred_at), [0, 0])
        if transaction.transaction_type is TransactionType.INCOME:
            sums[0] += transaction.amount_cents
        else:
            sums[1] += transaction.amount_cents
    return [
        MonthlySummary(month=key, income_cents=sums[0], expense_cents=sums[1])
        for key, sums in sorted(buckets.items(), reverse=True)
    ]


def category_breakdown(
    transactions: Iterable[Transaction], now: Optional[datetime] = None
) -> List[CategoryTotal]:
    """Sum current-month expenses per category, in first-seen order."""

    current_month = month_key(now or datetime.now())
    totals: Dict[str, int] = {}
    for transaction in transactions:
        if transaction.transaction_type is not TransactionType.EXPENSE:
            continue
        occurred_at = transaction.occurred_at
        if occurred_at is None or month_key(occurred_at) != current_month:
            continue
        totals[transaction.category] = totals.get(transaction.category, 0) + transaction.amount_cents
    return [CategoryTotal(category=category, amount_cents=amount) for category, amount in totals.items()]


def sort_history(transactions: Sequence[Transaction]) -> List[Transaction]:
    """Order newest first; equal dates keep insertion order, undated records go last."""

    # sorted() stays stable with reverse=True, so ties keep their input order.
    return sorted(
        transactions,
        key=lambda transaction: (
            transaction.occurred_at is not None,
            transaction.occurred_at or datetime.min,
        ),
        reverse=True,
    )


def build_report(transactions: Sequence[Transaction], now: Optional[datetime] = None) -> FinanceReport:
    """Compute the full dashboard report from one transaction snapshot."""

    now = now or datetime.now()
    snapshot = list(transactions)
    return FinanceReport(
        generated_at=now,
        totals=compute_totals(snapshot),
        today_expense_cents=today_expense_cents(snapshot, now),
        monthly=monthly_rollup(snapshot),
        categories=category_breakdown(snapshot, now),
        history=sort_history(snapshot),
    )
