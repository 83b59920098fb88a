"""Autocomplete suggestions for recipients, categories and category icons."""

from typing import Iterable, Optional

from smsledger.database.base import Database, SAVED_CATEGORIES_KEY, SAVED_RECIPIENTS_KEY

DEFAULT_EXPENSE_TYPES = [
    "Food",
    "Entertainment",
    "Clothing",
    "Transport",
    "Utilities",
    "Healthcare",
    "Education",
    "Groceries",
    "Travel",
    "Other",
]


def _unique(values: Iterable[Optional[str]]) -> list[str]:
    """Drop empty values and later duplicates, keeping first-seen order."""
    result: list[str] = []
    for value in values:
        if value and value not in result:
            result.append(value)
    return result


class SuggestionService:
    """Service for the distinct recipient and category lists."""

    def __init__(self, db: Database):
        self.db = db

    def _saved(self, key: str, history_field: str) -> list[str]:
        saved = self.db.load_suggestions(key)
        if saved:
            return saved
        # Seed from history the first time the list is read
        return _unique(getattr(record, history_field) for record in self.db.load_history())

    def saved_recipients(self) -> list[str]:
        return self._saved(SAVED_RECIPIENTS_KEY, "recipient")

    def saved_categories(self) -> list[str]:
        return self._saved(SAVED_CATEGORIES_KEY, "category")

    def record(self, recipient: Optional[str], category: Optional[str]) -> None:
        """Add values to the saved lists; case-sensitive, first occurrence kept."""
        recipients = self.saved_recipients()
        updated = _unique([*recipients, recipient])
        if updated != self.db.load_suggestions(SAVED_RECIPIENTS_KEY):
            self.db.save_suggestions(SAVED_RECIPIENTS_KEY, updated)

        categories = self.saved_categories()
        updated = _unique([*categories, category])
        if updated != self.db.load_suggestions(SAVED_CATEGORIES_KEY):
            self.db.save_suggestions(SAVED_CATEGORIES_KEY, updated)

    def suggest_recipients(self, current: str = "") -> list[str]:
        """Saved recipients containing current, case-insensitively."""
        needle = current.lower()
        return [r for r in self.saved_recipients() if needle in r.lower()]

    def suggest_categories(self, current: Optional[str] = None) -> list[str]:
        """Built-in expense types plus saved categories, filtered by current."""
        options = _unique([*DEFAULT_EXPENSE_TYPES, *self.saved_categories()])
        if not current:
            return options
        needle = current.lower()
        return [c for c in options if needle in c.lower()]

    def suggest_icon(self, category: Optional[str]) -> Optional[str]:
        """Icon of the first history record with this category that has one."""
        if not category:
            return None
        for record in self.db.load_history():
            if record.category == category and record.category_icon:
                return record.category_icon
        return None
