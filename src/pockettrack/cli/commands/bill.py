"""Scheduled bill commands."""

import click
from pockettrack.domain.entities import BillInstanceScope, BillStatus, TransactionType
from pockettrack.domain.errors import DomainError, NotFoundError, bill_instance_not_found
from pockettrack.domain.scheduled_bill import ScheduledBillService
from pockettrack.domain.summary import SummaryService
from pockettrack.cli.error_handling import handle_domain_error
from pockettrack.cli.scope_prompt import prompt_for_scope
from pockettrack.cli.user_resolution import resolve_category_or_exit, resolve_user_or_exit
from pockettrack.utils.date_parser import parse_date, parse_month
from pockettrack.utils.amount_parser import parse_amount


def _require_owned(ctx, service: ScheduledBillService, user_id: str, instance_id: str):
    """Fetch a bill instance of the acting user, or exit with a CLI error."""
    instance = service.get_instance(instance_id)
    if instance is None or instance.user_id != user_id:
        handle_domain_error(ctx, NotFoundError(bill_instance_not_found(instance_id)))
    return instance


@click.group()
def bill_group():
    """Manage scheduled bills."""
    pass


@bill_group.command("create")
@click.option("--description", required=True, help="Bill description")
@click.option("--amount", required=True, help="Bill amount (e.g., 89.90)")
@click.option("--category", required=True, help="Category name or ID")
@click.option("--due-day", type=int, required=True, help="Day of month the bill is due (1-31)")
@click.option("--months", type=int, default=1, show_default=True, help="Number of monthly instances")
@click.option("--start", default="today", help="Any date in the first month (default: today)")
@click.pass_context
def create_bill(
    ctx, description: str, amount: str, category: str, due_day: int, months: int, start: str
):
    """Schedule a bill due every month.

    Examples:
        pockettrack bill create --description Internet --amount 99.90 --category Bills \\
            --due-day 10 --months 12 --start 2024-01-01
    """
    user = resolve_user_or_exit(ctx)
    service = ScheduledBillService(ctx.obj["db"], overflow=ctx.obj["overflow"])

    try:
        start_date = parse_date(start)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        bill_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    category_obj = resolve_category_or_exit(ctx, user.id, category, TransactionType.EXPENSE)

    try:
        bill = service.create_bill(
            user_id=user.id,
            description=description,
            amount=bill_amount,
            category_id=category_obj.id,
            due_day=due_day,
            recurring_months=months,
            start_date=start_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    instances = service.list_series_instances(bill.series_id)
    click.echo(f"Created bill '{bill.description}' (ID: {bill.id})")
    click.echo(f"  Amount: {bill.amount:,.2f}")
    click.echo(f"  Category: {category_obj.name}")
    click.echo(f"  Instances: {len(instances)}, {instances[0].due_date} to {instances[-1].due_date}")


@bill_group.command("list")
@click.option("--month", help="Only instances due in this month (YYYY-MM or 'this month')")
@click.pass_context
def list_bills(ctx, month: str | None):
    """List scheduled bill instances by due date."""
    user = resolve_user_or_exit(ctx)
    db = ctx.obj["db"]
    service = ScheduledBillService(db)

    year = month_number = None
    if month:
        try:
            year, month_number = parse_month(month)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    instances = service.list_instances(user.id, year, month_number)
    if not instances:
        click.echo("No scheduled bills found.")
        return

    categories = SummaryService(db).category_index(user.id)
    click.echo(f"\nFound {len(instances)} scheduled bill(s):")
    click.echo("-" * 100)
    for instance in instances:
        category = categories.get(instance.category_id)
        category_name = category.name if category else "Uncategorized"
        status = "PAID" if instance.status == BillStatus.PAID else "pending"
        click.echo(
            f"{instance.id:<45} {instance.due_date!s:<10} {instance.amount:>10,.2f}  "
            f"{status:<7}  {instance.description} ({category_name})"
        )


@bill_group.command("pay")
@click.argument("instance_id")
@click.pass_context
def pay_bill(ctx, instance_id: str):
    """Mark a bill instance as paid."""
    user = resolve_user_or_exit(ctx)
    service = ScheduledBillService(ctx.obj["db"])
    _require_owned(ctx, service, user.id, instance_id)

    instance = service.mark_paid(instance_id)
    click.echo(f"Marked '{instance.description}' due {instance.due_date} as paid")


@bill_group.command("rename")
@click.argument("instance_id")
@click.argument("description")
@click.pass_context
def rename_bill(ctx, instance_id: str, description: str):
    """Change the description of one bill instance."""
    user = resolve_user_or_exit(ctx)
    service = ScheduledBillService(ctx.obj["db"])
    _require_owned(ctx, service, user.id, instance_id)

    instance = service.rename_instance(instance_id, description)
    click.echo(f"Bill instance {instance.id} is now '{instance.description}'")


@bill_group.command("delete")
@click.argument("instance_id")
@click.option(
    "--scope",
    type=click.Choice([s.value for s in BillInstanceScope], case_sensitive=False),
    help="single for this instance only, series for the whole bill",
)
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_bill(ctx, instance_id: str, scope: str | None, yes: bool):
    """Delete a bill instance or its whole series."""
    user = resolve_user_or_exit(ctx)
    service = ScheduledBillService(ctx.obj["db"])
    instance = _require_owned(ctx, service, user.id, instance_id)

    if scope is not None:
        resolved = BillInstanceScope(scope.lower())
    else:
        resolved = prompt_for_scope(
            BillInstanceScope,
            f"Delete '{instance.description}' due {instance.due_date} only, or the whole series?",
        )
        if resolved is None:
            click.echo("Cancelled, nothing changed.")
            return

    # Confirm deletion
    target = "the whole series of" if resolved == BillInstanceScope.SERIES else "the instance of"
    if not yes and not click.confirm(f"Are you sure you want to delete {target} '{instance.description}'?"):
        click.echo("Deletion cancelled.")
        return

    deleted = service.delete_instance(instance_id, scope=resolved)
    click.echo(f"Deleted {len(deleted)} bill instance(s)")


def register_commands(cli):
    """Register bill commands with main CLI."""
    cli.add_command(bill_group, name="bill")
