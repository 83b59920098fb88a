"""Integration tests for end-to-end workflows."""

import json

from smsledger.cli.main import cli

INBOX = [
    {
        "_id": "1",
        "address": "VM-HDFCBK",
        "body": "Rs.1,200.50 spent on HDFC Bank Card XX2792 At: CoffeeShop",
        "date": 1705312800000,
    },
    {
        "_id": "2",
        "address": "JM-HDFCBK",
        "body": "INR 250.00 debited from A/c XX4410 to Metro Card",
        "date": 1705316400000,
    },
    {
        "_id": "3",
        "address": "AX-SWIGGY",
        "body": "Your order is on the way",
        "date": 1705320000000,
    },
]


def test_full_workflow(cli_runner, temp_db, tmp_path):
    """Test complete workflow: accounts -> fetch -> review -> history -> delete."""
    inbox = tmp_path / "inbox.json"
    inbox.write_text(json.dumps(INBOX), encoding="utf-8")

    def run(*args, input=None):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], input=input)
        assert result.exit_code == 0, result.output
        return result

    # Step 1: Create a primary account and a card linked to it
    run("account", "create", "HDFC Savings", "2792", "--balance", "5000", "--bank-address", "HDFCBK")
    run("account", "create", "HDFC Card", "4410", "--type", "card", "--linked-to", "2792")

    # Step 2: Fetch
    result = run("fetch", str(inbox))
    assert "2 new transactions fetched." in result.output
    assert "Skipped 0 already fetched and 1 unmatched message(s)." in result.output

    # Step 3: Review: categorize and apply both
    result = run("review", input="c\nFood\ny\nc\nTransport\ny\n")
    assert "Review closed: 2 applied, 0 skipped." in result.output

    # Both accounts share the primary's balance
    result = run("account", "list")
    assert result.output.count("3549.50") == 2

    # Step 4: History shows both records with totals
    result = run("history", "list", "--by-account")
    assert "Metro Card" in result.output
    assert "Debit:  1450.50 (2)" in result.output

    result = run("history", "list", "--category", "transport")
    assert "Found 1 transaction(s)" in result.output

    # Step 5: Deleting a record restores the balance and requeues it
    run("history", "delete", "2")
    result = run("account", "list")
    assert result.output.count("3799.50") == 2
    assert "1 New Transactions Found." in run("pending").output

    # Step 6: Fetching again adds nothing
    result = run("fetch", str(inbox))
    assert "No new transactions found." in result.output
