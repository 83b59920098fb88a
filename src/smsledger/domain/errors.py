"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only care that an operation was refused.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class MissingRecipientError(ValidationError):
    """Candidate has no recipient."""


class MissingCategoryError(ValidationError):
    """Candidate has no category."""


class InvalidAmountError(ValidationError):
    """Candidate amount is not a positive finite number."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PermissionDeniedError(DomainError):
    """The message source refused access to its messages."""


class StorageError(DomainError):
    """Reading or writing the persistent store failed."""


def account_not_found(last_four_digits: str) -> str:
    """Return message for missing account."""
    return f"Account {last_four_digits} not found"


def candidate_not_found(candidate_id: str) -> str:
    """Return message for missing candidate."""
    return f"Transaction '{candidate_id}' not found"


def history_record_not_found(record_id: str) -> str:
    """Return message for missing history record."""
    return f"Recent transaction '{record_id}' not found"


def candidate_already_applied(candidate_id: str) -> str:
    return f"Transaction '{candidate_id}' has already been applied"


def duplicate_account_digits(last_four_digits: str) -> str:
    return f"Account with last four digits '{last_four_digits}' already exists"


def account_delete_blocked(last_four_digits: str, linked: list[str]) -> str:
    """Return message when other accounts are linked to the one being deleted."""
    return (
        f"Cannot delete account {last_four_digits}: "
        f"account{'s' if len(linked) != 1 else ''} {', '.join(linked)} "
        f"{'are' if len(linked) != 1 else 'is'} linked to it. Unlink them first."
    )
