"""Candidate store: every transaction ever extracted or entered, applied or not."""

from dataclasses import replace
from typing import Callable, Iterable, Optional

from smsledger.database.base import Database
from smsledger.domain.entities import Candidate, Direction
from smsledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    candidate_already_applied,
    candidate_not_found,
)
from smsledger.domain.extractor import new_manual_candidate
from smsledger.utils.logging_config import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = ("recipient", "category", "category_icon", "editable_amount", "direction")


class CandidateService:
    """Service owning the candidate lifecycle.

    Candidates are kept in insertion order and keyed by id. Each mutation
    loads the full snapshot, transforms it, and writes it back before
    returning.
    """

    def __init__(self, db: Database):
        """Initialize candidate service.

        Args:
            db: Database instance
        """
        self.db = db

    def _update(self, candidate_id: str, change: Callable[[Candidate], Candidate]) -> Candidate:
        candidates = self.db.load_candidates()
        for index, candidate in enumerate(candidates):
            if candidate.id == candidate_id:
                updated = change(candidate)
                candidates[index] = updated
                self.db.save_candidates(candidates)
                return updated
        raise NotFoundError(candidate_not_found(candidate_id))

    def list_candidates(self) -> list[Candidate]:
        """All candidates in insertion order."""
        return self.db.load_candidates()

    def list_reviewable(self) -> list[Candidate]:
        """Unapplied candidates in insertion order."""
        return [c for c in self.db.load_candidates() if not c.is_applied]

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        """Get candidate by id, or None if not found."""
        for candidate in self.db.load_candidates():
            if candidate.id == candidate_id:
                return candidate
        return None

    def require_candidate(self, candidate_id: str) -> Candidate:
        """Get candidate by id.

        Raises:
            NotFoundError: If the candidate does not exist
        """
        candidate = self.get_candidate(candidate_id)
        if candidate is None:
            raise NotFoundError(candidate_not_found(candidate_id))
        return candidate

    def known_ids(self) -> set[str]:
        return {c.id for c in self.db.load_candidates()}

    def merge(self, new_candidates: Iterable[Candidate]) -> list[Candidate]:
        """Append candidates whose id is not stored yet.

        Existing candidates are never replaced, whether applied or not.

        Returns:
            The candidates that were actually added
        """
        candidates = self.db.load_candidates()
        seen = {c.id for c in candidates}
        added = []
        for candidate in new_candidates:
            if candidate.id in seen:
                continue
            seen.add(candidate.id)
            added.append(candidate)

        if added:
            self.db.save_candidates(candidates + added)
            logger.info("Stored %d new candidate(s)", len(added))
        return added

    def add_manual(self) -> Candidate:
        """Append an empty manual candidate aimed at the manual-entry account.

        Raises:
            ValidationError: If there are no accounts to post to
            ConflictError: If the generated id is already taken
        """
        accounts = self.db.load_accounts()
        if not accounts:
            raise ValidationError("Please add accounts first")

        candidate = new_manual_candidate(accounts)
        if not self.merge([candidate]):
            raise ConflictError(f"Transaction '{candidate.id}' already exists")
        return candidate

    def update_fields(self, candidate_id: str, **changes) -> Candidate:
        """Edit review fields of an unapplied candidate.

        Accepts ``recipient``, ``category``, ``category_icon``,
        ``editable_amount`` and ``direction``. Categories are stored trimmed.

        Raises:
            NotFoundError: If the candidate does not exist
            ValidationError: If a field is unknown or the candidate is applied
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")
        if "category" in changes and changes["category"] is not None:
            changes["category"] = changes["category"].strip() or None
        if "direction" in changes:
            changes["direction"] = Direction(changes["direction"])

        def change(candidate: Candidate) -> Candidate:
            if candidate.is_applied:
                raise ValidationError(candidate_already_applied(candidate_id))
            return replace(candidate, **changes)

        return self._update(candidate_id, change)

    def mark_applied(self, candidate_id: str, **changes) -> Candidate:
        """Mark a candidate applied, optionally rewriting other fields with it."""
        return self._update(
            candidate_id, lambda c: replace(c, is_applied=True, is_read=True, **changes)
        )

    def mark_skipped(self, candidate_id: str) -> Candidate:
        """Mark a candidate resolved without posting it to the ledger.

        Raises:
            ValidationError: If the candidate was already applied
        """

        def change(candidate: Candidate) -> Candidate:
            if candidate.is_applied:
                raise ValidationError(candidate_already_applied(candidate_id))
            return replace(candidate, is_applied=True)

        skipped = self._update(candidate_id, change)
        logger.info("Skipped candidate %s", candidate_id)
        return skipped

    def reset_applied(self, candidate_id: str) -> Optional[Candidate]:
        """Put a candidate back in the review queue.

        Returns:
            The reset candidate, or None if no candidate has this id
        """
        try:
            return self._update(
                candidate_id, lambda c: replace(c, is_applied=False, is_read=False)
            )
        except NotFoundError:
            return None
