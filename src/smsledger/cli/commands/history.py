"""Recent transaction history commands."""

from datetime import datetime, time

import click
from smsledger.cli.error_handling import handle_domain_error
from smsledger.domain.account import AccountService
from smsledger.domain.errors import DomainError
from smsledger.domain.history import HistoryService
from smsledger.utils.date_parser import PERIODS, parse_date


@click.group()
def history_group():
    """View and delete applied transactions."""
    pass


@history_group.command("list")
@click.option(
    "--period",
    type=click.Choice(PERIODS),
    default="all",
    show_default=True,
    help="Only today, this month or this year",
)
@click.option("--since", help="Only records on or after this date (YYYY-MM-DD, 'last month', ...)")
@click.option("--recipient", help="Recipient contains this text")
@click.option("--category", help="Category name")
@click.option("--by-account", is_flag=True, help="Group records under their account")
@click.pass_context
def list_history(
    ctx,
    period: str,
    since: str | None,
    recipient: str | None,
    category: str | None,
    by_account: bool,
):
    """List applied transactions with totals."""
    db = ctx.obj["db"]
    service = HistoryService(db)

    since_dt = None
    if since:
        try:
            since_dt = datetime.combine(parse_date(since), time.min).astimezone()
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    records = service.list_records(
        period=period, recipient=recipient, category=category, since=since_dt
    )
    if not records:
        click.echo("No transactions found.")
        return

    def show(rows):
        for r in rows:
            sign = "+" if r.direction.value == "credit" else "-"
            click.echo(
                f"{r.id[:24]:<24} {sign}{r.amount:>11}  {r.recipient[:20]:<20} "
                f"{(r.category or '')[:15]:<15} {r.account_name} ({r.last_four_digits})"
            )

    if by_account:
        accounts = AccountService(db).list_accounts()
        for acc, rows in service.group_by_account(accounts, records):
            if not rows:
                continue
            click.echo(f"\n{acc.name} {acc.type.value} - {acc.last_four_digits}")
            click.echo("-" * 90)
            show(rows)
    else:
        click.echo(f"\nFound {len(records)} transaction(s):")
        click.echo("-" * 90)
        show(records)

    totals = service.totals(records)
    click.echo("-" * 90)
    click.echo(f"Credit: {totals.credit:.2f} ({totals.credit_count})")
    click.echo(f"Debit:  {totals.debit:.2f} ({totals.debit_count})")
    click.echo(f"Net:    {totals.net:.2f}")


@history_group.command("delete")
@click.argument("record_id")
@click.pass_context
def delete_history(ctx, record_id: str):
    """Delete a record, undo its balance change and requeue it for review."""
    service = HistoryService(ctx.obj["db"])
    try:
        record = service.delete_record(record_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Transaction deleted and balance updated ({record.last_four_digits})")


@history_group.command("categories")
@click.pass_context
def list_categories(ctx):
    """List the categories used so far, for use with --category."""
    categories = HistoryService(ctx.obj["db"]).categories()
    if not categories:
        click.echo("No categories found.")
        return
    for name in categories:
        click.echo(name)


@history_group.command("forecast")
@click.pass_context
def forecast(ctx):
    """Project this month's spending per category to the end of the month.

    A category with more than one debit is projected from its daily average
    over the days it was seen; a single debit is taken as is.
    """
    report = HistoryService(ctx.obj["db"]).forecast()
    click.echo(
        f"Monthly Spending Forecast (based on {report.days_used} "
        f"day{'s' if report.days_used != 1 else ''} of data, "
        f"{report.remaining_days} days remaining)"
    )
    if not report.categories:
        click.echo("No spending data available for this month.")
        return

    click.echo("-" * 70)
    for item in report.categories:
        click.echo(f"{item.category}: {item.projection:.2f}")
        click.echo(
            f"  {item.total:.2f} spent + ({item.daily_average:.2f}/day x "
            f"{item.remaining_days} days), {item.days_spanned} day(s) of activity, "
            f"about {item.frequency:.2f} more transaction(s)"
        )


def register_commands(cli):
    """Register history commands with main CLI."""
    cli.add_command(history_group, name="history")
