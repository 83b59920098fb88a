"""Main CLI entry point."""

import click
from smsledger.database.factories import create_sqlite_database
from smsledger.utils.logging_config import setup_logging

# Import and register all commands at module level
from smsledger.cli.commands import account, fetch, review, history


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SMSLEDGER_DB_PATH environment variable)",
    envvar="SMSLEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="SMSLEDGER_LOG_LEVEL",
    show_default=True,
    help="Logging verbosity (written to stderr)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    envvar="SMSLEDGER_LOG_FILE",
    help="Also write log messages to this file",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str, log_file: str | None):
    """smsledger - Track account balances from bank notification messages.

    Fetch messages, review the transactions found in them, and apply each
    one to its account balance.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level, log_file)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
fetch.register_commands(cli)
review.register_commands(cli)
history.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
