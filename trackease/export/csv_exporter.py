"""Mini README: CSV serialisation of transaction history.

Structure:
    * CSV_HEADER - fixed column order.
    * export_transactions_csv - renders the newest-first history as text.
    * CsvExporter - writes the same rendering to disk for the CLI.

Quoting follows the usual minimal rule: only fields containing a comma,
quote or line break are wrapped in double quotes, with embedded quotes
doubled. Rows are separated by ``\\n`` without a trailing terminator, so an
empty history exports exactly the header line.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import List, Sequence

from ..finance import Transaction, format_amount, sort_history
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

CSV_HEADER = ("Date", "Type", "Category", "Amount", "Note")
_LINE_TERMINATOR = "\n"


def transaction_row(transaction: Transaction) -> List[str]:
    """Return the CSV cells for one transaction."""

    return [
        transaction.date,
        transaction.transaction_type.value,
        transaction.category,
        format_amount(transaction.amount_cents),
        transaction.note,
    ]


def export_transactions_csv(transactions: Sequence[Transaction]) -> str:
    """Render ``transactions`` newest first under the fixed header."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator=_LINE_TERMINATOR)
    writer.writerow(CSV_HEADER)
    for transaction in sort_history(transactions):
        writer.writerow(transaction_row(transaction))
    return buffer.getvalue()[: -len(_LINE_TERMINATOR)]


class CsvExporter:
    """Persist transaction exports to disk."""

    def export(self, transactions: Sequence[Transaction], destination: Path) -> Path:
        """Write the CSV rendering to ``destination`` and return the path."""

        LOGGER.info("Exporting %s transactions to %s", len(transactions), destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("w", encoding="utf-8", newline="") as csv_file:
            csv_file.write(export_transactions_csv(transactions))
        return destination
