"""Domain model entities for smsledger.

These are pure data classes representing business concepts, independent of
how they are persisted. Every entity is immutable; services produce updated
copies with ``dataclasses.replace`` and write the whole snapshot back.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

MANUAL_ENTRY = "Manual Entry"


class AccountType(str, Enum):
    """Kind of account a balance belongs to."""

    BANK_ACCOUNT = "Bank Account"
    CREDIT_CARD = "Credit Card"
    OTHER = "Other"


class Direction(str, Enum):
    """Whether money entered or left the account."""

    CREDIT = "credit"
    DEBIT = "debit"

    def toggled(self) -> "Direction":
        return Direction.DEBIT if self is Direction.CREDIT else Direction.CREDIT


@dataclass(frozen=True)
class Account:
    """Account domain entity, keyed by its last four digits."""

    type: AccountType
    name: str
    last_four_digits: str
    initial_balance: str
    bank_address: str
    linked_to: Optional[str] = None
    manual_transaction: bool = False

    @property
    def is_linked(self) -> bool:
        return bool(self.linked_to)


@dataclass(frozen=True)
class RawMessage:
    """A notification as delivered by a message source."""

    id: str
    address: str
    body: str
    timestamp: str


@dataclass(frozen=True)
class Candidate:
    """A transaction inferred from a message or entered manually.

    ``editable_amount`` is the user-facing copy of the amount and is what gets
    validated and posted; ``extracted_amount`` keeps the parsed original.
    """

    id: str
    raw_message: str
    last_four_digits: str
    direction: Direction
    extracted_amount: Decimal
    editable_amount: str
    recipient: str
    timestamp: str
    category: Optional[str] = None
    category_icon: str = ""
    is_applied: bool = False
    is_read: bool = False

    @property
    def is_manual(self) -> bool:
        return self.id.startswith("manual-")


@dataclass(frozen=True)
class RecentTransaction:
    """Immutable history record written when a candidate is applied."""

    id: str
    recipient: str
    amount: str
    account_name: str
    last_four_digits: str
    direction: Direction
    timestamp: str
    category: Optional[str] = None
    category_icon: str = ""


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one pull from a message source."""

    fetched: int
    added: list[Candidate] = field(default_factory=list)
    duplicates: int = 0
    discarded: int = 0

    @property
    def new(self) -> int:
        return len(self.added)


@dataclass(frozen=True)
class HistoryTotals:
    """Credit and debit sums over a set of history records."""

    credit: Decimal
    debit: Decimal
    credit_count: int
    debit_count: int

    @property
    def net(self) -> Decimal:
        return self.credit - self.debit


@dataclass(frozen=True)
class CategoryForecast:
    """Month-end spending projection for one category."""

    category: str
    projection: Decimal
    frequency: Decimal
    total: Decimal
    daily_average: Decimal
    days_spanned: int
    daily_frequency: Decimal
    remaining_days: int


@dataclass(frozen=True)
class SpendingForecast:
    """Per-category projections for the current month, highest first."""

    categories: list[CategoryForecast]
    days_used: int
    remaining_days: int
