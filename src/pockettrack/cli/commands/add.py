"""Add transaction command."""

import click
from pockettrack.domain.entities import TransactionType
from pockettrack.domain.errors import DomainError
from pockettrack.domain.transaction import TransactionService
from pockettrack.cli.error_handling import handle_domain_error
from pockettrack.cli.user_resolution import resolve_category_or_exit, resolve_user_or_exit
from pockettrack.utils.date_parser import parse_date
from pockettrack.utils.amount_parser import parse_amount


@click.command("add")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    required=True,
    help="Income or expense",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", required=True, help="Category name or ID")
@click.option(
    "--date",
    default="today",
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option(
    "--recurring-months",
    type=int,
    help="Repeat monthly, creating this many transactions in total",
)
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str,
    amount: str,
    description: str,
    category: str,
    date: str,
    recurring_months: int | None,
):
    """Add a transaction, or a monthly recurring series.

    Examples:
        pockettrack add --type expense --amount 50 --description "Groceries" --category Food
        pockettrack add --type expense --amount 1200 --description Rent --category Housing \\
            --date 2024-01-05 --recurring-months 12
    """
    user = resolve_user_or_exit(ctx)
    service = TransactionService(ctx.obj["db"], overflow=ctx.obj["overflow"])

    # Parse date
    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    # Parse amount
    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    transaction_type = TransactionType(txn_type.lower())
    category_obj = resolve_category_or_exit(ctx, user.id, category, transaction_type)

    try:
        created = service.create_transaction(
            user_id=user.id,
            type=transaction_type,
            amount=txn_amount,
            description=description,
            category_id=category_obj.id,
            date=txn_date,
            recurring_months=recurring_months,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    first = created[0]
    if len(created) == 1:
        click.echo(f"Created transaction {first.id}")
    else:
        click.echo(f"Created {len(created)} recurring transactions (series {first.recurring_series_id})")
    click.echo(f"  Type: {first.type.value}")
    click.echo(f"  Amount: {first.amount:,.2f}")
    click.echo(f"  Description: {first.description}")
    click.echo(f"  Category: {category_obj.name}")
    if len(created) == 1:
        click.echo(f"  Date: {first.date}")
    else:
        click.echo(f"  Dates: {first.date} to {created[-1].date}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
