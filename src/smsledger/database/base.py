"""Abstract key-value store interface.

Every collection lives under one key as a JSON array. Callers always load the
full snapshot, transform it, and write the full snapshot back; there are no
partial or field-level updates.
"""

from abc import ABC, abstractmethod
from decimal import InvalidOperation
from typing import Any, Callable, TypeVar

# Import entities directly to avoid circular import through domain/__init__.py
from smsledger.domain.entities import Account, Candidate, RecentTransaction
from smsledger.domain.errors import StorageError
from smsledger.database.mappers import (
    account_to_domain,
    account_to_record,
    candidate_to_domain,
    candidate_to_record,
    recent_transaction_to_domain,
    recent_transaction_to_record,
)

ACCOUNTS_KEY = "accounts"
TRANSACTIONS_KEY = "transactions"
RECENT_TRANSACTIONS_KEY = "recentTransactions"
SAVED_RECIPIENTS_KEY = "savedRecipients"
SAVED_CATEGORIES_KEY = "savedCategories"

T = TypeVar("T")


def _decode(key: str, records: list[dict[str, Any]], mapper: Callable[[dict[str, Any]], T]) -> list[T]:
    try:
        return [mapper(record) for record in records]
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise StorageError(f"Stored '{key}' data is malformed: {e}") from e


class Database(ABC):
    """Abstract persistence interface for smsledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create whatever backing structures the store needs."""
        pass

    @abstractmethod
    def read_snapshot(self, key: str) -> list[Any]:
        """Return the array stored under key, or an empty list if absent.

        Raises:
            StorageError: If the store cannot be read or the value is not an array
        """
        pass

    @abstractmethod
    def write_snapshot(self, key: str, items: list[Any]) -> None:
        """Replace the array stored under key.

        Raises:
            StorageError: If the write fails
        """
        pass

    # Typed collection helpers
    def load_accounts(self) -> list[Account]:
        return _decode(ACCOUNTS_KEY, self.read_snapshot(ACCOUNTS_KEY), account_to_domain)

    def save_accounts(self, accounts: list[Account]) -> None:
        self.write_snapshot(ACCOUNTS_KEY, [account_to_record(a) for a in accounts])

    def load_candidates(self) -> list[Candidate]:
        return _decode(TRANSACTIONS_KEY, self.read_snapshot(TRANSACTIONS_KEY), candidate_to_domain)

    def save_candidates(self, candidates: list[Candidate]) -> None:
        self.write_snapshot(TRANSACTIONS_KEY, [candidate_to_record(c) for c in candidates])

    def load_history(self) -> list[RecentTransaction]:
        return _decode(
            RECENT_TRANSACTIONS_KEY,
            self.read_snapshot(RECENT_TRANSACTIONS_KEY),
            recent_transaction_to_domain,
        )

    def save_history(self, history: list[RecentTransaction]) -> None:
        self.write_snapshot(
            RECENT_TRANSACTIONS_KEY, [recent_transaction_to_record(r) for r in history]
        )

    def load_suggestions(self, key: str) -> list[str]:
        return [str(value) for value in self.read_snapshot(key) if value]

    def save_suggestions(self, key: str, values: list[str]) -> None:
        self.write_snapshot(key, list(values))
