"""Savings tips command."""

import click
from pockettrack.domain.summary import SummaryService
from pockettrack.domain.tips import GeminiTipGenerator, TipService
from pockettrack.cli.user_resolution import resolve_user_or_exit
from pockettrack.utils.date_parser import month_bounds, parse_month


@click.command("tips")
@click.option("--month", default="this month", help="Month to analyze (YYYY-MM or 'last month'; default: this month)")
@click.pass_context
def tips(ctx, month: str):
    """Show three savings tips for a month.

    Uses Google Gemini when GEMINI_API_KEY is set and falls back to tips
    computed from your own spending otherwise.
    """
    user = resolve_user_or_exit(ctx)
    summary_service = SummaryService(ctx.obj["db"])

    try:
        year, month_number = parse_month(month)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    first, last = month_bounds(year, month_number)
    transactions = summary_service.transactions.list_transactions(
        user.id, start_date=first, end_date=last
    )
    service = TipService(ctx.obj.get("tip_generator") or GeminiTipGenerator.from_env())

    click.echo(f"\nTips for {year}-{month_number:02d}:")
    for number, tip in enumerate(
        service.generate_tips(transactions, summary_service.category_index(user.id)), start=1
    ):
        click.echo(f"  {number}. {tip}")


def register_commands(cli):
    """Register tips command with main CLI."""
    cli.add_command(tips)
