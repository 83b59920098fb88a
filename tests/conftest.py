"""Shared pytest fixtures for smsledger tests."""

import json
import logging
import tempfile
import os
import pytest

from smsledger.database.factories import create_sqlite_database
from smsledger.domain.account import AccountService
from smsledger.domain.candidates import CandidateService
from smsledger.domain.entities import AccountType, Candidate, Direction
from smsledger.domain.ledger import LedgerService
from smsledger.domain.history import HistoryService
from smsledger.utils.amount_parser import parse_amount


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI attached to the package logger."""
    yield
    logger = logging.getLogger("smsledger")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def candidate_service(temp_db):
    """Create a CandidateService with a temporary database."""
    return CandidateService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def history_service(temp_db):
    """Create a HistoryService with a temporary database."""
    return HistoryService(temp_db)


@pytest.fixture
def hdfc_account(account_service):
    """A primary bank account with a known sender address."""
    return account_service.create_account(
        account_type=AccountType.BANK_ACCOUNT,
        name="HDFC",
        last_four_digits="2792",
        initial_balance="5000.00",
        bank_address="HDFCBK",
    )


@pytest.fixture
def joint_accounts(account_service):
    """Primary account 1111 with account 2222 linked to it."""
    primary = account_service.create_account(
        account_type=AccountType.BANK_ACCOUNT,
        name="A",
        last_four_digits="1111",
        initial_balance="1000.00",
        bank_address="ABANK",
    )
    linked = account_service.create_account(
        account_type=AccountType.CREDIT_CARD,
        name="B",
        last_four_digits="2222",
        initial_balance="0",
        bank_address="ABANK",
        linked_to="1111",
    )
    return primary, linked


def make_candidate(
    candidate_id: str,
    last_four_digits: str = "2792",
    amount: str = "100.00",
    direction: Direction = Direction.DEBIT,
    recipient: str = "Store",
    category: str | None = "Food",
    timestamp: str = "1705312800000",
) -> Candidate:
    """Build a ready-to-apply candidate."""
    return Candidate(
        id=candidate_id,
        raw_message=f"Rs.{amount} {direction.value} A/c XX{last_four_digits}",
        last_four_digits=last_four_digits,
        direction=direction,
        extracted_amount=parse_amount(amount),
        editable_amount=amount,
        recipient=recipient,
        timestamp=timestamp,
        category=category,
    )


@pytest.fixture
def candidate_factory():
    """Expose make_candidate to tests as a fixture."""
    return make_candidate


@pytest.fixture
def inbox_file(tmp_path):
    """Write an inbox export and return its path."""

    def write(messages):
        path = tmp_path / "inbox.json"
        path.write_text(json.dumps(messages), encoding="utf-8")
        return path

    return write


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
