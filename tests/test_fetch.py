"""Tests for message sources and the fetch pipeline."""

from pathlib import Path

import pytest

from smsledger.domain.entities import AccountType
from smsledger.domain.errors import NotFoundError, PermissionDeniedError, ValidationError
from smsledger.domain.fetch import FetchService
from smsledger.domain.message_source import JsonFileMessageSource, message_from_record

INBOX = [
    {
        "_id": "101",
        "address": "VM-HDFCBK",
        "body": "Rs.1,200.50 spent on HDFC Bank Card XX2792 At: CoffeeShop",
        "date": 1705312800000,
    },
    {
        "_id": "102",
        "address": "AD-HDFCBK",
        "body": "INR 3,000.00 credited to A/c XX2792 from Payroll",
        "date": 1705399200000,
    },
    {"_id": "103", "address": "JD-OFFERS", "body": "Rs.99 cashback at XX2792", "date": 1705399200001},
    {"_id": "104", "address": "VM-HDFCBK", "body": "Your OTP is 5521", "date": 1705399200002},
]


def test_message_from_record_accepts_both_layouts():
    android = message_from_record({"_id": 7, "address": "X", "body": "b", "date": 1})
    generic = message_from_record({"id": "7", "address": "X", "body": "b", "timestamp": "1"})
    assert android == generic


def test_json_source_reads_messages(inbox_file):
    messages = JsonFileMessageSource(inbox_file(INBOX)).list()

    assert [m.id for m in messages] == ["101", "102", "103", "104"]
    assert messages[0].timestamp == "1705312800000"


def test_json_source_missing_file(tmp_path):
    with pytest.raises(NotFoundError):
        JsonFileMessageSource(tmp_path / "nope.json").list()


def test_json_source_permission_denied(inbox_file, monkeypatch):
    path = inbox_file(INBOX)

    def deny(self, *args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(Path, "read_text", deny)
    with pytest.raises(PermissionDeniedError):
        JsonFileMessageSource(path).list()


def test_json_source_rejects_non_array(tmp_path):
    path = tmp_path / "inbox.json"
    path.write_text('{"_id": "1"}', encoding="utf-8")
    with pytest.raises(ValidationError):
        JsonFileMessageSource(path).list()


def test_json_source_rejects_message_without_id(inbox_file):
    with pytest.raises(ValidationError, match="Message 0"):
        JsonFileMessageSource(inbox_file([{"address": "X", "body": "b"}])).list()


def test_fetch_stores_matching_messages(temp_db, hdfc_account, candidate_service, inbox_file):
    result = FetchService(temp_db).fetch(JsonFileMessageSource(inbox_file(INBOX)))

    assert result.fetched == 4
    assert result.new == 2
    assert result.discarded == 2
    assert result.duplicates == 0

    stored = candidate_service.list_reviewable()
    assert [c.id for c in stored] == ["101", "102"]
    assert stored[1].direction.value == "credit"
    assert stored[1].editable_amount == "3000.00"


def test_fetch_is_idempotent(temp_db, hdfc_account, candidate_service, inbox_file):
    source = JsonFileMessageSource(inbox_file(INBOX))
    service = FetchService(temp_db)
    service.fetch(source)
    candidate_service.mark_skipped("101")

    again = service.fetch(source)

    assert again.new == 0
    assert again.duplicates == 2
    assert [c.id for c in candidate_service.list_candidates()] == ["101", "102"]


def test_fetch_uses_current_accounts(temp_db, candidate_service, account_service, inbox_file):
    """Accounts added after a fetch are matched on the next one."""
    source = JsonFileMessageSource(inbox_file(INBOX))
    assert FetchService(temp_db).fetch(source).new == 0

    account_service.create_account(
        account_type=AccountType.BANK_ACCOUNT,
        name="HDFC",
        last_four_digits="2792",
        initial_balance="0",
        bank_address="HDFCBK",
    )
    assert FetchService(temp_db).fetch(source).new == 2
