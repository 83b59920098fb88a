"""Mapper functions between domain entities and persisted JSON records.

Record field names match the layout the mobile app wrote to its key-value
store, so existing exports load unchanged.
"""

from decimal import Decimal
from typing import Any

from smsledger.domain import entities as domain


def account_to_domain(record: dict[str, Any]) -> domain.Account:
    """Convert a stored account record to a domain Account entity."""
    return domain.Account(
        type=domain.AccountType(record.get("type", domain.AccountType.OTHER.value)),
        name=record["name"],
        last_four_digits=str(record["lastFourDigits"]),
        initial_balance=str(record.get("initialBalance", "0.00")),
        bank_address=record.get("bankAddress", ""),
        linked_to=record.get("linkedTo") or None,
        manual_transaction=bool(record.get("manualTransaction", False)),
    )


def account_to_record(account: domain.Account) -> dict[str, Any]:
    """Convert a domain Account entity to its stored record."""
    record: dict[str, Any] = {
        "type": account.type.value,
        "name": account.name,
        "lastFourDigits": account.last_four_digits,
        "initialBalance": account.initial_balance,
        "bankAddress": account.bank_address,
        "manualTransaction": account.manual_transaction,
    }
    if account.linked_to:
        record["linkedTo"] = account.linked_to
    return record


def candidate_to_domain(record: dict[str, Any]) -> domain.Candidate:
    """Convert a stored transaction record to a domain Candidate entity."""
    return domain.Candidate(
        id=str(record["id"]),
        raw_message=record.get("message", ""),
        last_four_digits=str(record.get("lastFourDigits", "")),
        direction=domain.Direction(record.get("type", domain.Direction.DEBIT.value)),
        extracted_amount=Decimal(str(record.get("amount", 0))),
        editable_amount=str(record.get("editableAmount", "")),
        recipient=record.get("recipient", ""),
        timestamp=str(record.get("date", "")),
        category=record.get("category") or None,
        category_icon=record.get("categoryIcon") or "",
        is_applied=bool(record.get("isApplied", False)),
        is_read=bool(record.get("isRead", False)),
    )


def candidate_to_record(candidate: domain.Candidate) -> dict[str, Any]:
    """Convert a domain Candidate entity to its stored record."""
    return {
        "id": candidate.id,
        "message": candidate.raw_message,
        "lastFourDigits": candidate.last_four_digits,
        "type": candidate.direction.value,
        "amount": str(candidate.extracted_amount),
        "editableAmount": candidate.editable_amount,
        "recipient": candidate.recipient,
        "date": candidate.timestamp,
        "category": candidate.category,
        "categoryIcon": candidate.category_icon,
        "isApplied": candidate.is_applied,
        "isRead": candidate.is_read,
    }


def recent_transaction_to_domain(record: dict[str, Any]) -> domain.RecentTransaction:
    """Convert a stored history record to a domain RecentTransaction entity."""
    return domain.RecentTransaction(
        id=str(record["id"]),
        recipient=record.get("recipient", ""),
        amount=str(record["amount"]),
        account_name=record.get("accountName", ""),
        last_four_digits=str(record["lastFourDigits"]),
        direction=domain.Direction(record["type"]),
        timestamp=str(record.get("date", "")),
        category=record.get("category") or None,
        category_icon=record.get("categoryIcon") or "",
    )


def recent_transaction_to_record(entry: domain.RecentTransaction) -> dict[str, Any]:
    """Convert a domain RecentTransaction entity to its stored record."""
    return {
        "id": entry.id,
        "recipient": entry.recipient,
        "category": entry.category,
        "categoryIcon": entry.category_icon,
        "amount": entry.amount,
        "accountName": entry.account_name,
        "lastFourDigits": entry.last_four_digits,
        "type": entry.direction.value,
        "date": entry.timestamp,
    }
