"""Tests for account management."""

import pytest

from smsledger.cli.main import cli
from smsledger.domain.entities import AccountType
from smsledger.domain.errors import ConflictError, NotFoundError, ValidationError


class TestAccountService:
    """Tests for AccountService."""

    def test_create_formats_balance(self, account_service):
        account = account_service.create_account(
            account_type=AccountType.BANK_ACCOUNT,
            name="  Savings ",
            last_four_digits="1234",
            initial_balance="Rs.1,000.5",
            bank_address="SBIINB",
        )

        assert account.name == "Savings"
        assert account.initial_balance == "1000.50"
        assert account_service.get_account("1234") == account

    def test_duplicate_digits_rejected(self, account_service, hdfc_account):
        with pytest.raises(ConflictError, match="already exists"):
            account_service.create_account(
                account_type=AccountType.OTHER,
                name="Other",
                last_four_digits="2792",
                initial_balance="0",
                bank_address="",
            )

    def test_invalid_balance(self, account_service):
        with pytest.raises(ValidationError):
            account_service.create_account(
                account_type=AccountType.OTHER,
                name="Cash",
                last_four_digits="0000",
                initial_balance="lots",
                bank_address="",
            )

    def test_linked_account_copies_primary_balance(self, joint_accounts):
        primary, linked = joint_accounts
        assert linked.is_linked
        assert linked.initial_balance == primary.initial_balance == "1000.00"

    def test_link_to_missing_account(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.create_account(
                account_type=AccountType.CREDIT_CARD,
                name="Card",
                last_four_digits="3333",
                initial_balance="0",
                bank_address="",
                linked_to="9999",
            )

    def test_link_depth_is_one(self, account_service, joint_accounts):
        with pytest.raises(ValidationError, match="itself linked"):
            account_service.create_account(
                account_type=AccountType.CREDIT_CARD,
                name="C",
                last_four_digits="3333",
                initial_balance="0",
                bank_address="",
                linked_to="2222",
            )

    def test_single_manual_account(self, account_service, hdfc_account):
        account_service.create_account(
            account_type=AccountType.OTHER,
            name="Cash",
            last_four_digits="0000",
            initial_balance="0",
            bank_address="",
            manual_transaction=True,
        )
        assert account_service.get_manual_account().last_four_digits == "0000"

        account_service.set_manual_account("2792")

        manual = [a.last_four_digits for a in account_service.list_accounts() if a.manual_transaction]
        assert manual == ["2792"]

    def test_set_manual_missing(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.set_manual_account("9999")

    def test_delete_blocked_by_links(self, account_service, joint_accounts):
        with pytest.raises(ValidationError, match="2222 is linked"):
            account_service.delete_account("1111")

    def test_delete_linked_then_primary(self, account_service, joint_accounts):
        account_service.delete_account("2222")
        account_service.delete_account("1111")
        assert account_service.list_accounts() == []


def test_account_create_cli(cli_runner, temp_db):
    """Test creating an account from the command line."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "account",
            "create",
            "HDFC Savings",
            "2792",
            "--balance",
            "5000",
            "--bank-address",
            "HDFCBK",
        ],
    )

    assert result.exit_code == 0
    assert "Created account 'HDFC Savings' (2792)" in result.output


def test_account_create_linked_cli(cli_runner, temp_db, hdfc_account):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "create", "Card", "4410", "--type", "card", "--linked-to", "2792"],
    )

    assert result.exit_code == 0
    assert "Linked to 2792, balance 5000.00" in result.output


def test_account_create_duplicate_cli(cli_runner, temp_db, hdfc_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Again", "2792"]
    )

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_account_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_with_data(cli_runner, temp_db, joint_accounts):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "1111" in result.output
    assert "-> 1111" in result.output


def test_account_delete_cli(cli_runner, temp_db, hdfc_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "2792", "--yes"]
    )

    assert result.exit_code == 0
    assert "Deleted account 'HDFC'" in result.output


def test_account_delete_cancelled(cli_runner, temp_db, hdfc_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "2792"], input="n\n"
    )

    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output


def test_account_delete_missing_cli(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "9999", "--yes"]
    )

    assert result.exit_code == 1
    assert "not found" in result.output


def test_account_set_manual_cli(cli_runner, temp_db, hdfc_account, account_service):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "set-manual", "2792"]
    )

    assert result.exit_code == 0
    assert account_service.get_manual_account().last_four_digits == "2792"
