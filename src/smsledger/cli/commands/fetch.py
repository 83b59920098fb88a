"""Message fetch command."""

import click
from smsledger.cli.error_handling import handle_domain_error
from smsledger.domain.errors import DomainError
from smsledger.domain.fetch import FetchService
from smsledger.domain.message_source import JsonFileMessageSource


@click.command("fetch")
@click.argument("inbox_file", type=click.Path(dir_okay=False))
@click.pass_context
def fetch_messages(ctx, inbox_file: str):
    """Extract transactions from an exported inbox.

    INBOX_FILE is a JSON array of messages with _id, address, body and date.
    Messages already fetched are ignored.

    Examples:
        smsledger fetch inbox.json
    """
    service = FetchService(ctx.obj["db"])
    try:
        result = service.fetch(JsonFileMessageSource(inbox_file))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if result.new:
        click.echo(f"{result.new} new transactions fetched.")
    else:
        click.echo("No new transactions found.")
    if result.duplicates or result.discarded:
        click.echo(
            f"Skipped {result.duplicates} already fetched and "
            f"{result.discarded} unmatched message(s)."
        )


def register_commands(cli):
    """Register fetch command with main CLI."""
    cli.add_command(fetch_messages)
