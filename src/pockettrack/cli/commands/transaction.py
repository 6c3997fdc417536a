"""Transaction management commands."""

import click
from pockettrack.domain.entities import SeriesScope, TransactionType
from pockettrack.domain.errors import DomainError, NotFoundError, transaction_not_found
from pockettrack.domain.summary import SummaryService, filter_transactions
from pockettrack.domain.transaction import TransactionChanges, TransactionService
from pockettrack.cli.error_handling import handle_domain_error
from pockettrack.cli.scope_prompt import prompt_for_scope
from pockettrack.cli.user_resolution import resolve_category_or_exit, resolve_user_or_exit
from pockettrack.utils.date_parser import month_bounds, parse_date, parse_month
from pockettrack.utils.amount_parser import parse_amount

SCOPE_CHOICE = click.Choice([s.value for s in SeriesScope], case_sensitive=False)


def _require_owned(ctx, service: TransactionService, user_id: str, transaction_id: str):
    """Fetch a transaction of the acting user, or exit with a CLI error."""
    txn = service.get_transaction(transaction_id)
    if txn is None or txn.user_id != user_id:
        handle_domain_error(ctx, NotFoundError(transaction_not_found(transaction_id)))
    return txn


def _resolve_scope(ctx, service: TransactionService, txn, scope: str | None, action: str):
    """Turn --scope into a SeriesScope, prompting for recurring transactions.

    Exits successfully without changes when the user cancels.
    """
    if not service.requires_scope(txn):
        return SeriesScope.SINGLE
    if scope is not None:
        return SeriesScope(scope.lower())

    chosen = prompt_for_scope(
        SeriesScope,
        f"Transaction {txn.id} is recurring. {action} which transactions?",
    )
    if chosen is None:
        click.echo("Cancelled, nothing changed.")
        ctx.exit(0)
    return chosen


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--month", default="this month", help="Month to list (YYYY-MM or 'last month'; default: this month)")
@click.option("--search", help="Only transactions whose description or category contains this text")
@click.pass_context
def list_transactions(ctx, month: str, search: str | None):
    """List one month of transactions, newest first."""
    user = resolve_user_or_exit(ctx)
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        year, month_number = parse_month(month)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    first, last = month_bounds(year, month_number)
    categories = SummaryService(db).category_index(user.id)
    transactions = service.list_transactions(user.id, start_date=first, end_date=last)
    if search:
        transactions = filter_transactions(transactions, search, categories)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(f"{'ID':<40} {'Date':<10} {'Type':<7} {'Amount':>12}  {'Description':<25} Category")
    click.echo("-" * 110)
    for txn in transactions:
        category = categories.get(txn.category_id)
        category_name = category.name if category else "Uncategorized"
        marker = " (recurring)" if txn.is_recurring else ""
        click.echo(
            f"{txn.id:<40} {txn.date!s:<10} {txn.type.value:<7} {txn.amount:>12,.2f}  "
            f"{txn.description[:25]:<25} {category_name}{marker}"
        )


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    help="Income or expense",
)
@click.option("--amount", help="Transaction amount (e.g., 123.45)")
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category name or ID")
@click.option("--date", help="Transaction date; only allowed for a single transaction")
@click.option("--scope", type=SCOPE_CHOICE, help="For recurring transactions: single, future or all")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    txn_type: str | None,
    amount: str | None,
    description: str | None,
    category: str | None,
    date: str | None,
    scope: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. For a recurring transaction
    the change applies to this transaction only, to this and later ones, or
    to the whole series; without --scope you are asked.

    Examples:
        pockettrack transaction update trans-1a2b --amount 75.00
        pockettrack transaction update trans-1a2b --amount 150 --scope future
    """
    user = resolve_user_or_exit(ctx)
    service = TransactionService(ctx.obj["db"], overflow=ctx.obj["overflow"])
    txn = _require_owned(ctx, service, user.id, transaction_id)

    # Parse date if provided
    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    # Parse amount if provided
    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    new_type = TransactionType(txn_type.lower()) if txn_type else None
    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, user.id, category, new_type or txn.type).id

    changes = TransactionChanges(
        type=new_type,
        amount=txn_amount,
        description=description,
        category_id=category_id,
        date=txn_date,
    )
    if not changes.as_fields():
        click.echo("Error: Nothing to update. Pass at least one field option.", err=True)
        ctx.exit(1)

    resolved = _resolve_scope(ctx, service, txn, scope, "Update")
    try:
        updated = service.update_transaction(transaction_id, changes, scope=resolved)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated {len(updated)} transaction(s)")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--scope", type=SCOPE_CHOICE, help="For recurring transactions: single, future or all")
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, scope: str | None, yes: bool) -> None:
    """Delete a transaction, or part of its recurring series."""
    user = resolve_user_or_exit(ctx)
    service = TransactionService(ctx.obj["db"])
    txn = _require_owned(ctx, service, user.id, transaction_id)

    resolved = _resolve_scope(ctx, service, txn, scope, "Delete")

    # Confirm deletion
    target = "transaction" if resolved == SeriesScope.SINGLE else f"{resolved.value} transactions of the series"
    if not yes and not click.confirm(f"Are you sure you want to delete {target} '{txn.description}'?"):
        click.echo("Deletion cancelled.")
        return

    deleted = service.delete_transaction(transaction_id, scope=resolved)
    click.echo(f"Deleted {len(deleted)} transaction(s)")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
