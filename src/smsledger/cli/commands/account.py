"""Account management commands."""

import click
from smsledger.cli.error_handling import handle_domain_error
from smsledger.domain.account import AccountService
from smsledger.domain.entities import AccountType
from smsledger.domain.errors import DomainError

ACCOUNT_TYPES = {
    "bank": AccountType.BANK_ACCOUNT,
    "card": AccountType.CREDIT_CARD,
    "other": AccountType.OTHER,
}


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.argument("last_four_digits", metavar="LAST_FOUR")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(sorted(ACCOUNT_TYPES)),
    default="bank",
    show_default=True,
    help="Kind of account",
)
@click.option("--balance", default="0.00", show_default=True, help="Current balance")
@click.option("--bank-address", default="", help="Sender of the bank's messages (e.g. HDFCBK)")
@click.option("--linked-to", help="Last four digits of the primary account this one mirrors")
@click.option("--manual", is_flag=True, help="Use as the default account for manual entries")
@click.pass_context
def create_account(
    ctx,
    name: str,
    last_four_digits: str,
    account_type: str,
    balance: str,
    bank_address: str,
    linked_to: str | None,
    manual: bool,
):
    """Create a new account.

    Examples:
        smsledger account create "HDFC Savings" 2792 --balance 5000 --bank-address HDFCBK
        smsledger account create "HDFC Card" 4410 --type card --linked-to 2792
    """
    service = AccountService(ctx.obj["db"])
    try:
        acc = service.create_account(
            account_type=ACCOUNT_TYPES[account_type],
            name=name,
            last_four_digits=last_four_digits,
            initial_balance=balance,
            bank_address=bank_address,
            linked_to=linked_to,
            manual_transaction=manual,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created account '{acc.name}' ({acc.last_four_digits})")
    if acc.linked_to:
        click.echo(f"Linked to {acc.linked_to}, balance {acc.initial_balance}")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 78)
    for acc in accounts:
        link = f"-> {acc.linked_to}" if acc.linked_to else ""
        manual = "*" if acc.manual_transaction else " "
        click.echo(
            f"{manual} {acc.last_four_digits:>6} | {acc.name:20s} | {acc.type.value:12s} | "
            f"{acc.initial_balance:>12} {link}"
        )


@account_group.command("set-manual")
@click.argument("last_four_digits", metavar="LAST_FOUR")
@click.pass_context
def set_manual(ctx, last_four_digits: str) -> None:
    """Make an account the default target for manual entries."""
    service = AccountService(ctx.obj["db"])
    try:
        service.set_manual_account(last_four_digits)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Manual entries now go to {last_four_digits}")


@account_group.command("delete")
@click.argument("last_four_digits", metavar="LAST_FOUR")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, last_four_digits: str, yes: bool) -> None:
    """Delete an account.

    Accounts that others are linked to cannot be deleted.
    """
    service = AccountService(ctx.obj["db"])
    acc = service.get_account(last_four_digits)
    if acc is None:
        click.echo(f"Error: Account {last_four_digits} not found", err=True)
        ctx.exit(1)
        return

    if not yes and not click.confirm(f"Are you sure you want to delete account '{acc.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(last_four_digits)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted account '{acc.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
