"""Recent transaction history queries."""

import calendar
from datetime import datetime
from decimal import Decimal
from typing import Optional

from smsledger.database.base import Database
from smsledger.domain.entities import (
    Account,
    CategoryForecast,
    Direction,
    HistoryTotals,
    RecentTransaction,
    SpendingForecast,
)
from smsledger.domain.ledger import LedgerService
from smsledger.utils.amount_parser import round_amount
from smsledger.utils.date_parser import parse_timestamp, period_start
from smsledger.utils.logging_config import get_logger

logger = get_logger(__name__)


class HistoryService:
    """Service for listing, summing and deleting history records."""

    def __init__(self, db: Database):
        """Initialize history service.

        Args:
            db: Database instance
        """
        self.db = db
        self.ledger = LedgerService(db)

    def list_records(
        self,
        period: str = "all",
        recipient: Optional[str] = None,
        category: Optional[str] = None,
        since: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> list[RecentTransaction]:
        """List history records with filters.

        Args:
            period: One of all, daily, monthly, yearly (relative to now)
            recipient: Case-insensitive substring of the recipient
            category: Case-insensitive category name
            since: Only records at or after this time
            now: Reference time for the period, defaults to the current time

        Returns:
            Matching records in the order they were applied

        Raises:
            ValueError: If the period is unknown
        """
        start = period_start(period, now)
        if since is not None and (start is None or since > start):
            start = since

        records = []
        for record in self.db.load_history():
            if start is not None:
                try:
                    when = parse_timestamp(record.timestamp)
                except ValueError:
                    logger.debug("Record %s has unparseable date '%s'", record.id, record.timestamp)
                    continue
                if when < start:
                    continue
            if recipient and recipient.lower() not in record.recipient.lower():
                continue
            if category and (record.category or "").lower() != category.lower():
                continue
            records.append(record)
        return records

    def totals(self, records: list[RecentTransaction]) -> HistoryTotals:
        """Sum credits and debits over records."""
        credit = Decimal("0")
        debit = Decimal("0")
        credit_count = 0
        debit_count = 0
        for record in records:
            amount = Decimal(record.amount)
            if record.direction is Direction.CREDIT:
                credit += amount
                credit_count += 1
            else:
                debit += amount
                debit_count += 1
        return HistoryTotals(
            credit=credit, debit=debit, credit_count=credit_count, debit_count=debit_count
        )

    def group_by_account(
        self, accounts: list[Account], records: list[RecentTransaction]
    ) -> list[tuple[Account, list[RecentTransaction]]]:
        """Pair each account with the records posted to it."""
        return [
            (acc, [r for r in records if r.last_four_digits == acc.last_four_digits])
            for acc in accounts
        ]

    def categories(self) -> list[str]:
        """Distinct categories used in history, first-seen order."""
        seen: list[str] = []
        for record in self.db.load_history():
            if record.category and record.category not in seen:
                seen.append(record.category)
        return seen

    def forecast(self, now: Optional[datetime] = None) -> SpendingForecast:
        """Project each category's debits to the end of the current month.

        Only debits from the first of the month up to ``now`` count. A
        category seen more than once is projected as its total plus its
        daily average (over the days between its first and last debit)
        times the days left in the month; a single debit is its own
        projection. Records without a category are grouped as
        "Uncategorized".

        Args:
            now: Reference time, defaults to the current local time

        Returns:
            Forecast with categories sorted by projection, highest first
        """
        now = now or datetime.now().astimezone()
        start = period_start("monthly", now)
        remaining_days = calendar.monthrange(now.year, now.month)[1] - now.day

        groups: dict[str, list[tuple[datetime, Decimal]]] = {}
        days_used = set()
        for record in self.db.load_history():
            if record.direction is not Direction.DEBIT:
                continue
            try:
                when = parse_timestamp(record.timestamp)
            except ValueError:
                logger.debug("Record %s has unparseable date '%s'", record.id, record.timestamp)
                continue
            if when < start or when > now:
                continue
            groups.setdefault(record.category or "Uncategorized", []).append(
                (when, Decimal(record.amount))
            )
            days_used.add(when.astimezone(now.tzinfo).date())

        forecasts = []
        for category, entries in groups.items():
            dates = [when for when, _ in entries]
            total = sum((amount for _, amount in entries), Decimal("0"))
            count = len(entries)
            days_spanned = max(1, (max(dates) - min(dates)).days + 1)
            daily_average = total / days_spanned
            daily_frequency = Decimal(count) / days_spanned
            if count > 1:
                projection = total + daily_average * remaining_days
                frequency = daily_frequency * remaining_days
            else:
                projection = total
                frequency = Decimal("0")
            forecasts.append(
                CategoryForecast(
                    category=category,
                    projection=round_amount(projection),
                    frequency=round_amount(frequency),
                    total=round_amount(total),
                    daily_average=round_amount(daily_average),
                    days_spanned=days_spanned,
                    daily_frequency=round_amount(daily_frequency),
                    remaining_days=remaining_days,
                )
            )
        forecasts.sort(key=lambda f: f.projection, reverse=True)
        return SpendingForecast(
            categories=forecasts, days_used=len(days_used), remaining_days=remaining_days
        )

    def delete_record(self, record_id: str) -> RecentTransaction:
        """Delete a record, restoring balances and requeueing its transaction."""
        return self.ledger.reverse(record_id)
