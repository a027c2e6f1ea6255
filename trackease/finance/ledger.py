"""Mini README: Transaction model and input normalisation for TrackEase.

Structure:
    * TransactionType - enum representing income versus expense entries.
    * Transaction - dataclass storing one dated record in minor units.
    * build_transaction - validates an incoming payload into a new record.
    * transaction_from_record - tolerant loader for persisted dictionaries.
    * parse_timestamp / normalise_timestamp - canonical date handling.

Incoming records are validated here before any store is touched, so every
persisted transaction carries a supported type and a parseable timestamp.
Records read back from storage are loaded leniently instead: an unparseable
date is kept verbatim and simply reported as ``occurred_at is None`` so the
reporting helpers can skip it without aborting.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .money import from_minor_units, to_minor_units

DEFAULT_CATEGORY = "Other"

EXPENSE_CATEGORIES = (
    "Food",
    "Transportation",
    "School Supplies",
    "Tuition/Fees",
    "Rent/Boarding",
    "Utilities",
    "Clothes",
    "Health",
    "Leisure",
    "Other",
)
INCOME_CATEGORIES = ("Allowance", "Part-time Job", "Scholarship/Grant", "Gift", "Other")


class TransactionType(str, Enum):
    """Enumerate the supported transaction kinds."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_str(cls, value: object) -> "TransactionType":
        """Coerce arbitrary casing into a valid transaction type."""

        if isinstance(value, cls):
            return value
        try:
            normalised = str(value).strip().lower() if value is not None else ""
            return cls(normalised)
        except ValueError as error:
            raise ValueError(f"Invalid type: {value!r}. Use 'income' or 'expense'.") from error


@dataclass(slots=True, frozen=True)
class Transaction:
    """Represent a single dated income or expense record."""

    transaction_id: str
    transaction_type: TransactionType
    category: str
    amount_cents: int
    date: str
    note: str = ""
    owner: Optional[str] = None

    @property
    def occurred_at(self) -> Optional[datetime]:
        """Parsed timestamp, or ``None`` when the stored value is unusable."""

        try:
            return parse_timestamp(self.date)
        except ValueError:
            return None

    @property
    def amount(self) -> float:
        """Amount as a plain number for JSON payloads."""

        return from_minor_units(self.amount_cents)

    def as_dict(self) -> Dict[str, Any]:
        """Export the transaction in the public API shape."""

        return {
            "id": self.transaction_id,
            "type": self.transaction_type.value,
            "category": self.category,
            "amount": self.amount,
            "note": self.note,
            "date": self.date,
        }

    def as_record(self) -> Dict[str, Any]:
        """Export the transaction for persistence, keeping exact minor units."""

        return {
            "id": self.transaction_id,
            "type": self.transaction_type.value,
            "category": self.category,
            "amount_cents": self.amount_cents,
            "note": self.note,
            "date": self.date,
            "owner": self.owner,
        }


def parse_timestamp(value: object) -> datetime:
    """Parse ISO strings or date/datetime objects into naive local datetimes.

    Offset-aware values (including a trailing ``Z``) are converted to local
    time so calendar bucketing matches what the user saw when entering them.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Date is required.")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as error:
            raise ValueError(f"Invalid date: {value!r}") from error
    else:
        raise ValueError("Dates must be provided as ISO strings or date/datetime instances.")

    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone().replace(tzinfo=None)
        except (OverflowError, OSError) as error:
            raise ValueError(f"Invalid date: {value!r}") from error
    return parsed


def normalise_timestamp(value: object) -> str:
    """Return the canonical ``YYYY-MM-DDTHH:MM:SS`` form of a timestamp."""

    return parse_timestamp(value).replace(microsecond=0).isoformat()


def _clean_text(value: object, default: str = "") -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _note_text(value: object) -> str:
    return "" if value is None else str(value)


def build_transaction(payload: Mapping[str, Any], *, owner: Optional[str] = None) -> Transaction:
    """Validate a create payload and return an unsaved transaction.

    The identifier is left empty; stores assign one on insert. Raises
    ``ValueError`` for an unsupported type, a missing or unparseable date,
    or an amount that is missing, non-numeric or negative.
    """

    transaction_type = TransactionType.from_str(payload.get("type"))
    raw_date = payload.get("date")
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        raise ValueError("Date is required.")
    return Transaction(
        transaction_id="",
        transaction_type=transaction_type,
        category=_clean_text(payload.get("category"), DEFAULT_CATEGORY),
        amount_cents=to_minor_units(payload.get("amount")),
        date=normalise_timestamp(raw_date),
        note=_note_text(payload.get("note")),
        owner=owner,
    )


def transaction_from_record(record: Mapping[str, Any]) -> Transaction:
    """Rebuild a transaction from a persisted dictionary or database row.

    Accepts either ``amount_cents`` or a legacy decimal ``amount`` field and
    keeps the stored date string untouched.
    """

    if record.get("amount_cents") is not None:
        amount_cents = int(record["amount_cents"])
    else:
        amount_cents = to_minor_units(record.get("amount"))
    owner = record.get("owner", record.get("user_id"))
    return Transaction(
        transaction_id=str(record["id"]),
        transaction_type=TransactionType.from_str(record.get("type")),
        category=_clean_text(record.get("category"), DEFAULT_CATEGORY),
        amount_cents=amount_cents,
        date="" if record.get("date") is None else str(record.get("date")),
        note=_note_text(record.get("note")),
        owner=None if owner is None else str(owner),
    )


def advisory_categories() -> Dict[str, list]:
    """Category suggestions shown by the dashboard; never enforced."""

    return {
        TransactionType.EXPENSE.value: list(EXPENSE_CATEGORIES),
        TransactionType.INCOME.value: list(INCOME_CATEGORIES),
    }
