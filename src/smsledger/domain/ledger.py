"""Ledger service: posting reviewed candidates to account balances and back."""

from decimal import Decimal
from typing import Optional

from smsledger.database.base import Database
from smsledger.domain.candidates import CandidateService
from smsledger.domain.entities import Account, Candidate, Direction, RecentTransaction
from smsledger.domain.errors import (
    InvalidAmountError,
    MissingCategoryError,
    MissingRecipientError,
    NotFoundError,
    ValidationError,
    candidate_already_applied,
    history_record_not_found,
)
from smsledger.domain.link_graph import AccountLinkGraph
from smsledger.domain.suggestions import SuggestionService
from smsledger.utils.amount_parser import format_amount, parse_amount, round_amount
from smsledger.utils.logging_config import get_logger

logger = get_logger(__name__)


def normalize_recipient(recipient: str) -> str:
    """Strip digits and title-case each word ("coffee SHOP 42" -> "Coffee Shop")."""
    words = "".join(ch for ch in recipient if not ch.isdigit()).split(" ")
    return " ".join(word[:1].upper() + word[1:].lower() for word in words).strip()


def validate_candidate(candidate: Candidate) -> Decimal:
    """Check a candidate is ready to post and return its rounded amount.

    Checks run in order and the first failure is raised.

    Returns:
        The amount rounded to cents

    Raises:
        MissingRecipientError: If the recipient is blank
        MissingCategoryError: If the category is blank
        InvalidAmountError: If the amount is not a finite number that is still
            above zero once rounded to cents
    """
    if not candidate.recipient.strip():
        raise MissingRecipientError("Recipient is required.")
    if not (candidate.category or "").strip():
        raise MissingCategoryError("Category is required.")
    try:
        amount = round_amount(parse_amount(candidate.editable_amount))
    except ValueError:
        raise InvalidAmountError("A valid amount is required.")
    if amount <= 0:
        raise InvalidAmountError("A valid amount is required.")
    return amount


def signed_delta(direction: Direction, amount: Decimal) -> Decimal:
    return amount if direction is Direction.CREDIT else -amount


class LedgerService:
    """Service that applies candidates to balances and reverses history records."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db
        self.candidates = CandidateService(db)
        self.suggestions = SuggestionService(db)

    def _post(self, primary: Account, graph: AccountLinkGraph, delta: Decimal) -> str:
        balance = format_amount(Decimal(primary.initial_balance) + delta)
        self.db.save_accounts(graph.with_balance(primary, balance))
        return balance

    def apply(self, candidate_id: str) -> Optional[RecentTransaction]:
        """Validate a candidate and post it to its account.

        The primary account's balance moves by the signed amount, rounded to
        cents; accounts linked to it are set to the same balance. The
        candidate is marked applied and a history record is appended.

        Returns:
            The history record, or None if the candidate's account no longer
            exists (nothing is changed in that case)

        Raises:
            NotFoundError: If the candidate does not exist
            ValidationError: If the candidate is already applied or fails validation
        """
        candidate = self.candidates.require_candidate(candidate_id)
        if candidate.is_applied:
            raise ValidationError(candidate_already_applied(candidate_id))
        amount = validate_candidate(candidate)

        graph = AccountLinkGraph(self.db.load_accounts())
        account = graph.get(candidate.last_four_digits)
        primary = graph.primary_for(account) if account is not None else None
        if primary is None:
            logger.warning(
                "Transaction %s targets unknown account '%s'; not applied",
                candidate_id,
                candidate.last_four_digits,
            )
            return None

        balance = self._post(primary, graph, signed_delta(candidate.direction, amount))
        logger.info(
            "Applied %s %s to account %s, balance now %s",
            candidate.direction.value,
            format_amount(amount),
            primary.last_four_digits,
            balance,
        )

        changes = {}
        if candidate.is_manual:
            changes = {
                "raw_message": (
                    f"Manual {candidate.direction.value}: Rs.{format_amount(amount)} "
                    f"to {candidate.recipient} for {candidate.category}"
                ),
                "extracted_amount": amount,
            }
        self.candidates.mark_applied(candidate_id, **changes)

        record = RecentTransaction(
            id=candidate.id,
            recipient=normalize_recipient(candidate.recipient),
            amount=format_amount(amount),
            account_name=primary.name,
            last_four_digits=primary.last_four_digits,
            direction=candidate.direction,
            timestamp=candidate.timestamp,
            category=candidate.category,
            category_icon=candidate.category_icon,
        )
        history = self.db.load_history()
        history.append(record)
        self.db.save_history(history)

        self.suggestions.record(candidate.recipient, candidate.category)
        return record

    def reverse(self, record_id: str) -> RecentTransaction:
        """Delete a history record and undo its effect on balances.

        The originating candidate, if it still exists, goes back to the
        review queue.

        Returns:
            The removed record

        Raises:
            NotFoundError: If no history record has this id
        """
        history = self.db.load_history()
        record = next((r for r in history if r.id == record_id), None)
        if record is None:
            raise NotFoundError(history_record_not_found(record_id))

        self.db.save_history([r for r in history if r.id != record_id])

        graph = AccountLinkGraph(self.db.load_accounts())
        account = graph.get(record.last_four_digits)
        primary = graph.primary_for(account) if account is not None else None
        if primary is None:
            logger.warning(
                "Account %s of record %s no longer exists; balance not restored",
                record.last_four_digits,
                record_id,
            )
        else:
            balance = self._post(
                primary, graph, -signed_delta(record.direction, Decimal(record.amount))
            )
            logger.info(
                "Reversed record %s on account %s, balance now %s",
                record_id,
                primary.last_four_digits,
                balance,
            )

        if self.candidates.reset_applied(record_id) is None:
            logger.info("No stored transaction for record %s; not requeued", record_id)
        return record
