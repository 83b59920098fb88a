"""Review workflow over the unapplied candidates.

A session is either closed or open at a position within the reviewable set
(every candidate not yet applied, in insertion order). The set is reloaded
from the store on every transition; candidates are addressed by id, and the
position only selects which one is current.
"""

from enum import Enum
from typing import Optional

from smsledger.database.base import Database
from smsledger.domain.candidates import CandidateService
from smsledger.domain.entities import Candidate, Direction, RecentTransaction
from smsledger.domain.errors import ValidationError
from smsledger.domain.ledger import LedgerService
from smsledger.domain.suggestions import SuggestionService
from smsledger.utils.logging_config import get_logger

logger = get_logger(__name__)


class ReviewState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class ReviewField(str, Enum):
    """Candidate fields a reviewer can edit."""

    RECIPIENT = "recipient"
    CATEGORY = "category"
    CATEGORY_ICON = "category_icon"
    AMOUNT = "editable_amount"
    DIRECTION = "direction"


TEXT_FIELDS = (ReviewField.RECIPIENT, ReviewField.CATEGORY, ReviewField.AMOUNT)


def delete_last_word(value: str) -> str:
    """Drop the last space-separated word ("Coffee Shop Main" -> "Coffee Shop")."""
    trimmed = (value or "").rstrip()
    index = trimmed.rfind(" ")
    return "" if index == -1 else trimmed[:index]


class ReviewSession:
    """Stateful walk through the reviewable set."""

    def __init__(self, db: Database):
        """Initialize a closed review session.

        Args:
            db: Database instance
        """
        self.db = db
        self.candidates = CandidateService(db)
        self.ledger = LedgerService(db)
        self.suggestions = SuggestionService(db)
        self.state = ReviewState.CLOSED
        self.position = 0
        self.active_field: Optional[ReviewField] = None

    @property
    def is_open(self) -> bool:
        return self.state is ReviewState.OPEN

    def reviewable(self) -> list[Candidate]:
        return self.candidates.list_reviewable()

    def _require_open(self) -> list[Candidate]:
        if not self.is_open:
            raise ValidationError("Review session is not open")
        reviewable = self.reviewable()
        if not reviewable:
            self.close()
            raise ValidationError("No transactions to review")
        if self.position >= len(reviewable):
            self.position = 0
        return reviewable

    def current(self) -> Optional[Candidate]:
        """The candidate at the current position, or None when closed."""
        if not self.is_open:
            return None
        reviewable = self.reviewable()
        if not reviewable:
            return None
        return reviewable[min(self.position, len(reviewable) - 1)]

    def open(self) -> bool:
        """Open at the first candidate.

        Returns:
            False, leaving the session closed, if nothing is reviewable
        """
        count = len(self.reviewable())
        if not count:
            return False
        logger.debug("Opening review with %d candidate(s)", count)
        self.state = ReviewState.OPEN
        self.position = 0
        self.active_field = None
        return True

    def open_manual_entry(self) -> Candidate:
        """Append a blank manual candidate and open the session on it."""
        candidate = self.candidates.add_manual()
        self.state = ReviewState.OPEN
        self.position = len(self.reviewable()) - 1
        self.active_field = None
        return candidate

    def close(self) -> None:
        """Close the session; reopening always starts at the first candidate."""
        self.state = ReviewState.CLOSED
        self.position = 0
        self.active_field = None

    def next(self) -> None:
        """Move forward; no-op on the last candidate."""
        reviewable = self._require_open()
        if self.position < len(reviewable) - 1:
            self.position += 1
            self.active_field = None

    def prev(self) -> None:
        """Move back; no-op on the first candidate."""
        self._require_open()
        if self.position > 0:
            self.position -= 1
            self.active_field = None

    def focus(self, field: Optional[ReviewField]) -> None:
        self._require_open()
        self.active_field = field

    def edit(self, field: ReviewField, value) -> Candidate:
        """Change one field of the current candidate in place.

        Setting a category on a candidate without an icon takes the icon of
        the first history record with that category, if one has an icon.
        """
        reviewable = self._require_open()
        candidate = reviewable[self.position]
        self.active_field = field
        changes = {field.value: value}
        if field is ReviewField.CATEGORY and not candidate.category_icon:
            icon = self.suggestions.suggest_icon((value or "").strip())
            if icon:
                changes[ReviewField.CATEGORY_ICON.value] = icon
        return self.candidates.update_fields(candidate.id, **changes)

    def toggle_direction(self) -> Candidate:
        candidate = self._require_open()[self.position]
        return self.edit(ReviewField.DIRECTION, Direction(candidate.direction).toggled())

    def delete_last_word(self, field: ReviewField) -> Candidate:
        """Trim the last word from a text field; clears focus once it is empty."""
        if field not in TEXT_FIELDS:
            raise ValidationError(f"Field '{field.value}' is not a text field")
        candidate = self._require_open()[self.position]
        updated = self.edit(field, delete_last_word(getattr(candidate, field.value) or ""))
        if not getattr(updated, field.value):
            self.active_field = None
        return updated

    def suggestions_for_active_field(self) -> list[str]:
        """Autocomplete options for the focused recipient or category field."""
        candidate = self.current()
        if candidate is None:
            return []
        if self.active_field is ReviewField.RECIPIENT:
            return self.suggestions.suggest_recipients(candidate.recipient)
        if self.active_field is ReviewField.CATEGORY:
            return self.suggestions.suggest_categories(candidate.category)
        return []

    def _after_resolution(self) -> None:
        reviewable = self.reviewable()
        if not reviewable:
            self.close()
            return
        if self.position >= len(reviewable):
            self.position = 0
        self.active_field = None

    def skip(self) -> Candidate:
        """Resolve the current candidate without posting it."""
        candidate = self._require_open()[self.position]
        skipped = self.candidates.mark_skipped(candidate.id)
        self._after_resolution()
        return skipped

    def apply(self) -> Optional[RecentTransaction]:
        """Post the current candidate to the ledger.

        On a validation error the session and candidate are left as they were
        and the error propagates. If the candidate's account is gone nothing
        changes and None is returned.
        """
        candidate = self._require_open()[self.position]
        record = self.ledger.apply(candidate.id)
        if record is not None:
            self._after_resolution()
        return record
