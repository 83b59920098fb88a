"""Review, pending and manual entry commands."""

import click
from smsledger.cli.error_handling import handle_domain_error
from smsledger.domain.candidates import CandidateService
from smsledger.domain.entities import Candidate, Direction
from smsledger.domain.errors import DomainError, ValidationError
from smsledger.domain.ledger import LedgerService
from smsledger.domain.review import ReviewField, ReviewSession

ACTIONS = {
    "n": "next",
    "p": "previous",
    "r": "recipient",
    "c": "category",
    "i": "icon",
    "a": "amount",
    "t": "toggle credit/debit",
    "w": "delete last word of recipient",
    "s": "skip",
    "y": "apply",
    "q": "quit",
}


def _show_candidate(candidate: Candidate, position: int, total: int) -> None:
    click.echo("")
    click.echo(f"Transaction {position + 1} of {total}  [{candidate.id}]")
    click.echo("-" * 60)
    click.echo(f"  Message:   {candidate.raw_message}")
    click.echo(f"  Account:   {candidate.last_four_digits or '(none)'}")
    click.echo(f"  Type:      {candidate.direction.value}")
    click.echo(f"  Amount:    {candidate.editable_amount}")
    click.echo(f"  Recipient: {candidate.recipient}")
    click.echo(f"  Category:  {candidate.category or ''}")
    if candidate.category_icon:
        click.echo(f"  Icon:      {candidate.category_icon}")


def _prompt_field(session: ReviewSession, field: ReviewField, label: str, current: str) -> None:
    session.focus(field)
    suggestions = session.suggestions_for_active_field()
    if suggestions:
        click.echo(f"Suggestions: {', '.join(suggestions)}")
    value = click.prompt(label, default=current, show_default=bool(current))
    session.edit(field, value)


def run_review(session: ReviewSession) -> None:
    """Drive an open session from the terminal until it closes."""
    applied = 0
    skipped = 0
    while session.is_open:
        candidate = session.current()
        if candidate is None:
            session.close()
            break
        _show_candidate(candidate, session.position, len(session.reviewable()))

        action = click.prompt(
            "Action (" + ", ".join(f"{k}={v}" for k, v in ACTIONS.items()) + ")",
            type=click.Choice(list(ACTIONS)),
            show_choices=False,
        )
        if action == "q":
            session.close()
        elif action == "n":
            session.next()
        elif action == "p":
            session.prev()
        elif action == "r":
            _prompt_field(session, ReviewField.RECIPIENT, "Recipient", candidate.recipient)
        elif action == "c":
            _prompt_field(session, ReviewField.CATEGORY, "Category", candidate.category or "")
        elif action == "i":
            _prompt_field(session, ReviewField.CATEGORY_ICON, "Icon", candidate.category_icon)
        elif action == "a":
            _prompt_field(session, ReviewField.AMOUNT, "Amount", candidate.editable_amount)
        elif action == "t":
            updated = session.toggle_direction()
            click.echo(f"Type set to {updated.direction.value}")
        elif action == "w":
            session.delete_last_word(ReviewField.RECIPIENT)
        elif action == "s":
            session.skip()
            skipped += 1
            click.echo("Transaction skipped.")
        elif action == "y":
            try:
                record = session.apply()
            except ValidationError as e:
                click.echo(f"Error: {e}")
                continue
            if record is None:
                click.echo(
                    f"Account {candidate.last_four_digits or '(none)'} not found; "
                    "transaction left for review."
                )
            else:
                applied += 1
                click.echo(
                    f"Transaction applied: {record.direction.value} {record.amount} "
                    f"on {record.account_name} ({record.last_four_digits})"
                )

    click.echo(f"\nReview closed: {applied} applied, {skipped} skipped.")


@click.command("review")
@click.pass_context
def review_transactions(ctx):
    """Review pending transactions one at a time.

    Edit the recipient, category, icon, amount or type of each transaction,
    then apply it to its account or skip it.
    """
    session = ReviewSession(ctx.obj["db"])
    if not session.open():
        click.echo("No Transactions")
        return
    try:
        run_review(session)
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.command("pending")
@click.pass_context
def list_pending(ctx):
    """List transactions waiting for review."""
    service = CandidateService(ctx.obj["db"])
    pending = service.list_reviewable()
    click.echo(f"{len(pending)} New Transactions Found.")
    if not pending:
        return

    click.echo("-" * 90)
    click.echo(f"{'ID':<24} {'Account':<8} {'Type':<7} {'Amount':>12}  {'Recipient':<20} {'Category':<15}")
    click.echo("-" * 90)
    for candidate in pending:
        click.echo(
            f"{candidate.id[:24]:<24} {candidate.last_four_digits:<8} {candidate.direction.value:<7} "
            f"{candidate.editable_amount:>12}  {candidate.recipient[:20]:<20} {(candidate.category or '')[:15]:<15}"
        )


@click.command("manual")
@click.option("--recipient", help="Who the money went to or came from")
@click.option("--category", help="Category (e.g., Food)")
@click.option("--amount", help="Amount (e.g., 250.00)")
@click.option("--icon", help="Category icon name")
@click.option("--credit", is_flag=True, help="Money received rather than spent")
@click.option("--apply", "apply_now", is_flag=True, help="Apply immediately instead of reviewing")
@click.pass_context
def manual_entry(
    ctx,
    recipient: str | None,
    category: str | None,
    amount: str | None,
    icon: str | None,
    credit: bool,
    apply_now: bool,
):
    """Enter a transaction by hand.

    The transaction targets the account marked with 'account set-manual'.
    Without --apply the review prompt opens on the new entry.

    Examples:
        smsledger manual --recipient "Corner Store" --category Groceries --amount 120 --apply
    """
    db = ctx.obj["db"]
    session = ReviewSession(db)
    try:
        candidate = session.open_manual_entry()
        changes = {
            ReviewField.RECIPIENT: recipient,
            ReviewField.CATEGORY: category,
            ReviewField.AMOUNT: amount,
            ReviewField.CATEGORY_ICON: icon,
        }
        for field, value in changes.items():
            if value is not None:
                session.edit(field, value)
        if credit:
            session.edit(ReviewField.DIRECTION, Direction.CREDIT)

        if not apply_now:
            click.echo(f"Created manual transaction {candidate.id}")
            run_review(session)
            return

        record = LedgerService(db).apply(candidate.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if record is None:
        click.echo(
            f"Created manual transaction {candidate.id}, but no manual-entry account is set; "
            "it was left for review."
        )
        return
    click.echo(
        f"Applied manual {record.direction.value} of {record.amount} "
        f"to {record.account_name} ({record.last_four_digits})"
    )


def register_commands(cli):
    """Register review commands with main CLI."""
    cli.add_command(review_transactions)
    cli.add_command(list_pending)
    cli.add_command(manual_entry)
