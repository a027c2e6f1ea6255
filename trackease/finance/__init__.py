"""Mini README: Finance domain helpers for TrackEase.

This package holds the transaction model, fixed-point money helpers and the
pure aggregation functions that every rendering surface (JSON summary,
dashboard, CLI) shares. Nothing here performs I/O; stores live in
``trackease.storage``.
"""

from .ledger import (
    Transaction,
    TransactionType,
    advisory_categories,
    build_transaction,
    transaction_from_record,
)
from .money import format_amount, format_currency, to_minor_units
from .reporting import FinanceReport, build_report, monthly_rollup, sort_history

__all__ = [
    "FinanceReport",
    "Transaction",
    "TransactionType",
    "advisory_categories",
    "build_report",
    "build_transaction",
    "format_amount",
    "format_currency",
    "monthly_rollup",
    "sort_history",
    "to_minor_units",
    "transaction_from_record",
]
