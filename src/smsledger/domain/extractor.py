"""Pattern-based extraction of transactions from bank notification messages.

Extraction is heuristic. Fields that fail to parse fall back to empty or zero
values instead of raising, so the user can complete them during review. Only
messages that cannot be tied to a known account are dropped.
"""

import re
import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from smsledger.domain.entities import Account, Candidate, Direction, MANUAL_ENTRY, RawMessage
from smsledger.utils.amount_parser import format_amount
from smsledger.utils.date_parser import now_timestamp

CREDIT_PATTERN = re.compile(r"credit|receive", re.IGNORECASE)
DEBIT_PATTERN = re.compile(r"spent|deduct|debit|sent|txn|transaction", re.IGNORECASE)
AMOUNT_PATTERN = re.compile(r"(?:Rs|INR)\.?\s?(\d+(?:,\d+)*(?:\.\d{2})?)")
RECIPIENT_PATTERN = re.compile(r"\b(?:At|To)\b:?\s*([A-Za-z0-9\s]+)", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedMessage:
    """Fields pulled out of one message body.

    ``last_four_digits`` is empty when no known account appears in the body;
    ``amount`` is zero and ``recipient`` empty when they could not be found.
    """

    last_four_digits: str
    direction: Direction
    amount: Decimal
    recipient: str

    @property
    def is_resolved(self) -> bool:
        return bool(self.last_four_digits)


def _alternation(values: Iterable[str]) -> Optional[re.Pattern[str]]:
    parts = [re.escape(value) for value in values if value]
    if not parts:
        return None
    return re.compile("|".join(parts), re.IGNORECASE)


def parse_direction(body: str) -> Direction:
    """Credit wording wins over debit wording; debit is the default."""
    if CREDIT_PATTERN.search(body):
        return Direction.CREDIT
    if DEBIT_PATTERN.search(body):
        return Direction.DEBIT
    # No wording either way
    return Direction.DEBIT


def parse_amount_text(body: str) -> Decimal:
    """Return the first currency amount in body, or zero."""
    match = AMOUNT_PATTERN.search(body)
    if match is None:
        return Decimal("0")
    try:
        return Decimal(match.group(1).replace(",", ""))
    except InvalidOperation:
        return Decimal("0")


def parse_recipient(body: str) -> str:
    """Return the word run after the first "At"/"To" marker, or an empty string."""
    match = RECIPIENT_PATTERN.search(body)
    if match is None:
        return ""
    return match.group(1).strip()


class TransactionExtractor:
    """Extracts candidates against one snapshot of the account list.

    Address and digit patterns are compiled from the accounts passed in, so
    create a new extractor for every run to pick up account changes.
    """

    def __init__(self, accounts: list[Account]):
        self.accounts = list(accounts)
        self.known_digits = {acc.last_four_digits for acc in self.accounts}
        self.address_pattern = _alternation(acc.bank_address for acc in self.accounts)
        self.digits_pattern = _alternation(acc.last_four_digits for acc in self.accounts)

    def matches_address(self, address: str) -> bool:
        """True if the sender matches any account's bank address."""
        if self.address_pattern is None:
            return False
        return self.address_pattern.search(address or "") is not None

    def parse_account(self, body: str) -> str:
        """Return the first known account's digits found in body, or empty."""
        if self.digits_pattern is None:
            return ""
        match = self.digits_pattern.search(body)
        return match.group(0) if match else ""

    def parse(self, body: str) -> ParsedMessage:
        """Pull every field out of a message body without filtering."""
        return ParsedMessage(
            last_four_digits=self.parse_account(body),
            direction=parse_direction(body),
            amount=parse_amount_text(body),
            recipient=parse_recipient(body),
        )

    def extract(self, message: RawMessage) -> Optional[Candidate]:
        """Turn one message into a candidate, or None if it is not for a known account."""
        if not self.matches_address(message.address):
            return None

        parsed = self.parse(message.body)
        if parsed.last_four_digits not in self.known_digits:
            return None

        return Candidate(
            id=message.id,
            raw_message=message.body,
            last_four_digits=parsed.last_four_digits,
            direction=parsed.direction,
            extracted_amount=parsed.amount,
            editable_amount=format_amount(parsed.amount),
            recipient=parsed.recipient,
            timestamp=message.timestamp,
        )

    def extract_all(
        self, messages: Iterable[RawMessage], known_ids: Iterable[str] = ()
    ) -> tuple[list[Candidate], int, int]:
        """Extract candidates for messages whose id has not been seen.

        Returns:
            Tuple of (new candidates, duplicate count, discarded count)
        """
        seen = set(known_ids)
        candidates = []
        duplicates = 0
        discarded = 0
        for message in messages:
            if message.id in seen:
                duplicates += 1
                continue
            candidate = self.extract(message)
            if candidate is None:
                discarded += 1
                continue
            seen.add(message.id)
            candidates.append(candidate)
        return candidates, duplicates, discarded


def new_manual_candidate(accounts: list[Account], timestamp: Optional[str] = None) -> Candidate:
    """Create an empty candidate aimed at the manual-entry account, if one is flagged."""
    target = next((acc.last_four_digits for acc in accounts if acc.manual_transaction), "")
    return Candidate(
        id=f"manual-{time.time_ns() // 1000}",
        raw_message=MANUAL_ENTRY,
        last_four_digits=target,
        direction=Direction.DEBIT,
        extracted_amount=Decimal("0"),
        editable_amount="",
        recipient="",
        timestamp=timestamp or now_timestamp(),
        is_read=True,
    )
