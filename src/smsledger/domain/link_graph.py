"""Read-only view of primary and linked (joint) accounts."""

from dataclasses import replace
from typing import Optional

from smsledger.domain.entities import Account


class AccountLinkGraph:
    """Index over one snapshot of the account list.

    An account is either primary or linked to exactly one primary account.
    Build a fresh graph from the latest snapshot on every use; it holds no
    state of its own.
    """

    def __init__(self, accounts: list[Account]):
        self.accounts = list(accounts)
        self._by_digits = {acc.last_four_digits: acc for acc in self.accounts}

    def get(self, last_four_digits: str) -> Optional[Account]:
        return self._by_digits.get(last_four_digits)

    def primary_for(self, account: Account) -> Optional[Account]:
        """Return the account holding the authoritative balance for account.

        None when account is linked to an account that no longer exists.
        """
        if not account.is_linked:
            return account
        return self._by_digits.get(account.linked_to)

    def linked_to(self, primary: Account) -> list[Account]:
        """Accounts that mirror primary's balance, in list order."""
        return [acc for acc in self.accounts if acc.linked_to == primary.last_four_digits]

    def with_balance(self, primary: Account, balance: str) -> list[Account]:
        """Return a new account list with primary and its linked accounts at balance.

        Linked accounts are overwritten, never adjusted, so they always mirror
        the primary.
        """
        updated = []
        for acc in self.accounts:
            if acc.last_four_digits == primary.last_four_digits or acc.linked_to == primary.last_four_digits:
                acc = replace(acc, initial_balance=balance)
            updated.append(acc)
        return updated
