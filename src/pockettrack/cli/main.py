"""Main CLI entry point."""

import click
from pockettrack.database.factories import create_record_store
from pockettrack.domain.entities import DayOverflow
from pockettrack.utils.log import configure_logging

# Import and register all commands at module level
from pockettrack.cli.commands import (
    user,
    category,
    add,
    transaction,
    bill,
    summary,
    tips,
    transfer,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to the store file, '.json' for a JSON document (overrides POCKETTRACK_DB_PATH)",
    envvar="POCKETTRACK_DB_PATH",
)
@click.option(
    "--user",
    help="Acting user ID or email (overrides POCKETTRACK_USER)",
    envvar="POCKETTRACK_USER",
)
@click.option(
    "--day-overflow",
    type=click.Choice([policy.value for policy in DayOverflow], case_sensitive=False),
    default=DayOverflow.CLAMP.value,
    show_default=True,
    help="How recurring dates handle days missing from a month",
    envvar="POCKETTRACK_DAY_OVERFLOW",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None, day_overflow: str, verbose: bool):
    """Pockettrack - Personal finance tracker.

    Record income and expenses, spread recurring entries over months and
    keep track of scheduled bills.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)
    ctx.obj["user"] = user
    ctx.obj["overflow"] = DayOverflow(day_overflow.lower())

    # Initialize the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_record_store(db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
category.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
bill.register_commands(cli)
summary.register_commands(cli)
tips.register_commands(cli)
transfer.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
