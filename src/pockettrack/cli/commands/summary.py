"""Monthly summary command."""

from datetime import date

import click
from pockettrack.domain.entities import BillStatus, TransactionType
from pockettrack.domain.summary import SummaryService
from pockettrack.cli.user_resolution import resolve_user_or_exit
from pockettrack.utils.date_parser import parse_month


@click.command("summary")
@click.option("--month", default="this month", help="Month to summarize (YYYY-MM or 'last month'; default: this month)")
@click.option("--search", help="Only list transactions whose description or category contains this text")
@click.pass_context
def summary(ctx, month: str, search: str | None):
    """Show income, expenses and balance for a month.

    Totals and the category breakdown always cover the whole month; --search
    only narrows the transaction list.
    """
    user = resolve_user_or_exit(ctx)
    service = SummaryService(ctx.obj["db"])

    try:
        year, month_number = parse_month(month)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    result = service.monthly_summary(user.id, year, month_number, search=search)

    click.echo(f"\nSummary for {year}-{month_number:02d}")
    click.echo("=" * 50)
    click.echo(f"{'Income':<30} {result.income:>19,.2f}")
    click.echo(f"{'Expenses':<30} {result.expenses:>19,.2f}")
    click.echo(f"{'Balance':<30} {result.balance:>19,.2f}")

    if result.expenses_by_category:
        click.echo("\nExpenses by category:")
        click.echo("-" * 50)
        for total in result.expenses_by_category:
            click.echo(f"{total.category_name:<30} {total.total:>19,.2f}")

    if result.transactions:
        click.echo(f"\nTransactions ({len(result.transactions)}):")
        click.echo("-" * 50)
        for txn in result.transactions:
            sign = "+" if txn.type == TransactionType.INCOME else "-"
            click.echo(f"{txn.date}  {sign}{txn.amount:,.2f}  {txn.description}")
    elif search:
        click.echo(f"\nNo transactions match '{search}'.")

    if result.scheduled:
        click.echo("\nScheduled bills:")
        click.echo("-" * 50)
        for instance in result.scheduled:
            status = "paid" if instance.status == BillStatus.PAID else "pending"
            click.echo(f"{instance.due_date}  {instance.amount:,.2f}  {instance.description} [{status}]")

    upcoming = service.upcoming_bills(user.id, date.today())
    if upcoming:
        click.echo("\nDue in the next 5 days:")
        for instance in upcoming:
            click.echo(f"  {instance.due_date}  {instance.amount:,.2f}  {instance.description}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
