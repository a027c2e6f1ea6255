"""Mini README: Tests for the aggregation helpers behind every report.

These tests pin the reference scenario (three transactions over two
months), the empty-store behaviour, tolerance of unparseable dates and the
stable newest-first history ordering.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from trackease.finance import Transaction, TransactionType, build_report, monthly_rollup, sort_history
from trackease.finance.reporting import category_breakdown, compute_totals, today_expense_cents

NOW = datetime(2024, 2, 15, 18, 30)


def make(
    transaction_id: str,
    kind: str,
    cents: int,
    when: str,
    category: str = "Other",
    owner: Optional[str] = None,
) -> Transaction:
    return Transaction(
        transaction_id=transaction_id,
        transaction_type=TransactionType(kind),
        category=category,
        amount_cents=cents,
        date=when,
        owner=owner,
    )


def scenario() -> list:
    return [
        make("a", "income", 100_000, "2024-01-05T00:00:00"),
        make("b", "expense", 30_000, "2024-01-10T00:00:00"),
        make("c", "expense", 5_000, "2024-02-01T00:00:00"),
    ]


def test_reference_scenario_totals_and_rollup() -> None:
    report = build_report(scenario(), now=NOW)

    assert report.totals.income_cents == 100_000
    assert report.totals.expense_cents == 35_000
    assert report.totals.balance_cents == 65_000
    assert [summary.month for summary in report.monthly] == ["2024-02", "2024-01"]
    balances = {summary.month: summary.balance_cents for summary in report.monthly}
    assert balances == {"2024-01": 70_000, "2024-02": -5_000}


def test_empty_list_yields_zero_totals() -> None:
    report = build_report([], now=NOW)

    assert report.totals.income_cents == 0
    assert report.totals.expense_cents == 0
    assert report.totals.balance_cents == 0
    assert report.today_expense_cents == 0
    assert report.monthly == []
    assert report.categories == []
    assert report.history == []


def test_unparseable_dates_count_in_totals_but_not_in_buckets() -> None:
    transactions = scenario() + [
        make("bad", "income", 700, "garbage"),
        make("blank", "expense", 300, ""),
    ]

    totals = compute_totals(transactions)
    rollup = monthly_rollup(transactions)

    assert totals.income_cents == 100_700
    assert totals.expense_cents == 35_300
    assert sum(summary.income_cents for summary in rollup) == 100_000
    assert sum(summary.expense_cents for summary in rollup) == 35_000
    assert today_expense_cents(transactions, NOW) == 0


def test_today_expense_matches_calendar_day_only() -> None:
    transactions = [
        make("early", "expense", 250, "2024-02-15T00:00:00"),
        make("late", "expense", 100, "2024-02-15T23:59:59"),
        make("income", "income", 9_999, "2024-02-15T12:00:00"),
        make("yesterday", "expense", 4_000, "2024-02-14T23:59:59"),
        make("tomorrow", "expense", 4_000, "2024-02-16T00:00:00"),
    ]

    assert today_expense_cents(transactions, NOW) == 350


def test_category_breakdown_limits_to_current_month_expenses() -> None:
    transactions = [
        make("1", "expense", 1_000, "2024-02-01T08:00:00", "Food"),
        make("2", "expense", 500, "2024-02-03T08:00:00", "Transportation"),
        make("3", "expense", 250, "2024-02-20T08:00:00", "Food"),
        make("4", "income", 9_000, "2024-02-02T08:00:00", "Allowance"),
        make("5", "expense", 7_000, "2024-01-31T23:00:00", "Food"),
        make("6", "expense", 7_000, "2023-02-10T10:00:00", "Food"),
    ]

    breakdown = category_breakdown(transactions, NOW)

    assert [(entry.category, entry.amount_cents) for entry in breakdown] == [
        ("Food", 1_250),
        ("Transportation", 500),
    ]


def test_history_is_newest_first_and_stable_for_ties() -> None:
    transactions = [
        make("first", "expense", 1, "2024-01-01T10:00:00"),
        make("undated", "expense", 1, "n/a"),
        make("tie-1", "expense", 1, "2024-03-01T10:00:00"),
        make("tie-2", "income", 1, "2024-03-01T10:00:00"),
        make("middle", "expense", 1, "2024-02-01T10:00:00"),
    ]

    ordered = [transaction.transaction_id for transaction in sort_history(transactions)]

    assert ordered == ["tie-1", "tie-2", "middle", "first", "undated"]


def test_balance_always_equals_income_minus_expense() -> None:
    transactions = [make(str(index), "income" if index % 3 else "expense", index * 37, "2024-01-01") for index in range(50)]

    totals = compute_totals(transactions)

    assert totals.balance_cents == totals.income_cents - totals.expense_cents


def test_report_dict_exposes_numbers_and_formatted_strings() -> None:
    payload = build_report(scenario(), now=NOW).as_dict("₱")

    assert payload["totals"]["balance"] == {"amount": 650.0, "formatted": "₱650.00"}
    assert payload["monthly"][1]["month"] == "2024-01"
    assert payload["monthly"][0]["balance"]["formatted"] == "-₱50.00"
    assert payload["categories"] == [{"category": "Other", "amount": 50.0, "formatted": "₱50.00"}]
    assert [entry["id"] for entry in payload["history"]] == ["c", "b", "a"]


def test_report_tolerates_stored_offset_date_before_year_one() -> None:
    transactions = scenario() + [make("ancient", "expense", 400, "0001-01-01T00:00:00+01:00")]

    report = build_report(transactions, now=NOW)

    assert transactions[-1].occurred_at is None
    assert report.totals.expense_cents == 35_400
    assert sum(summary.expense_cents for summary in report.monthly) == 35_000
    assert report.history[-1].transaction_id == "ancient"
