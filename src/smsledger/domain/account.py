"""Account domain service."""

from dataclasses import replace
from typing import Optional

from smsledger.database.base import Database
from smsledger.domain.entities import Account, AccountType
from smsledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    duplicate_account_digits,
)
from smsledger.domain.link_graph import AccountLinkGraph
from smsledger.utils.amount_parser import format_amount, parse_amount
from smsledger.utils.logging_config import get_logger

logger = get_logger(__name__)


class AccountService:
    """Service for managing accounts and their link invariants."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        account_type: AccountType,
        name: str,
        last_four_digits: str,
        initial_balance: str,
        bank_address: str,
        linked_to: Optional[str] = None,
        manual_transaction: bool = False,
    ) -> Account:
        """Create a new account.

        A linked account takes its primary's balance; ``initial_balance`` is
        ignored for it.

        Args:
            account_type: Kind of account
            name: Display name
            last_four_digits: Identifier matched in message bodies, unique
            initial_balance: Opening balance
            bank_address: Sender pattern of the issuing bank
            linked_to: Digits of the primary account this one mirrors
            manual_transaction: Make this the default target for manual entries

        Returns:
            The created account

        Raises:
            ValidationError: If a field is invalid or the link target is itself linked
            ConflictError: If the digits are already used
            NotFoundError: If the link target does not exist
        """
        name = name.strip()
        last_four_digits = last_four_digits.strip()
        if not name:
            raise ValidationError("Account name is required")
        if not last_four_digits:
            raise ValidationError("Account last four digits are required")

        accounts = self.db.load_accounts()
        graph = AccountLinkGraph(accounts)
        if graph.get(last_four_digits) is not None:
            raise ConflictError(duplicate_account_digits(last_four_digits))

        if linked_to:
            primary = graph.get(linked_to)
            if primary is None:
                raise NotFoundError(account_not_found(linked_to))
            if primary.is_linked:
                raise ValidationError(
                    f"Account {linked_to} is itself linked to {primary.linked_to}; "
                    "link to the primary account instead"
                )
            balance = primary.initial_balance
        else:
            try:
                balance = format_amount(parse_amount(initial_balance))
            except ValueError as e:
                raise ValidationError(f"Invalid initial balance: {e}")

        account = Account(
            type=account_type,
            name=name,
            last_four_digits=last_four_digits,
            initial_balance=balance,
            bank_address=bank_address.strip(),
            linked_to=linked_to or None,
            manual_transaction=manual_transaction,
        )
        if manual_transaction:
            accounts = [replace(acc, manual_transaction=False) for acc in accounts]
        accounts.append(account)
        self.db.save_accounts(accounts)
        logger.info("Created account %s (%s)", last_four_digits, account_type.value)
        return account

    def get_account(self, last_four_digits: str) -> Optional[Account]:
        """Get account by its last four digits.

        Returns:
            Account entity or None if not found
        """
        return AccountLinkGraph(self.db.load_accounts()).get(last_four_digits)

    def list_accounts(self) -> list[Account]:
        """List all accounts in stored order."""
        return self.db.load_accounts()

    def get_manual_account(self) -> Optional[Account]:
        """Return the account flagged as the default for manual entries, if any."""
        for acc in self.db.load_accounts():
            if acc.manual_transaction:
                return acc
        return None

    def set_manual_account(self, last_four_digits: str) -> None:
        """Flag one account as the manual-entry default, clearing all others.

        Raises:
            NotFoundError: If the account does not exist
        """
        accounts = self.db.load_accounts()
        if AccountLinkGraph(accounts).get(last_four_digits) is None:
            raise NotFoundError(account_not_found(last_four_digits))
        self.db.save_accounts(
            [
                replace(acc, manual_transaction=acc.last_four_digits == last_four_digits)
                for acc in accounts
            ]
        )

    def delete_account(self, last_four_digits: str) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If other accounts are linked to it
        """
        accounts = self.db.load_accounts()
        graph = AccountLinkGraph(accounts)
        account = graph.get(last_four_digits)
        if account is None:
            raise NotFoundError(account_not_found(last_four_digits))

        linked = [acc.last_four_digits for acc in graph.linked_to(account)]
        if linked:
            raise ValidationError(account_delete_blocked(last_four_digits, linked))

        self.db.save_accounts([acc for acc in accounts if acc.last_four_digits != last_four_digits])
        logger.info("Deleted account %s", last_four_digits)
