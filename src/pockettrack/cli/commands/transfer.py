"""Export and import commands."""

from pathlib import Path

import click
from pockettrack.domain.errors import DomainError
from pockettrack.domain.transfer import DataTransferService
from pockettrack.cli.error_handling import handle_domain_error
from pockettrack.cli.user_resolution import resolve_user_or_exit


@click.command("export")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to this file instead of stdout")
@click.pass_context
def export_data(ctx, output: str | None):
    """Export the acting user's data as JSON."""
    user = resolve_user_or_exit(ctx)
    document = DataTransferService(ctx.obj["db"]).export_user(user.id)

    if output is None:
        click.echo(document)
        return
    Path(output).write_text(document, encoding="utf-8")
    click.echo(f"Exported data to {output}")


@click.command("import")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_data(ctx, file_path: str):
    """Import an exported JSON file into the acting user's data.

    Every record gets a new ID; recurring series stay linked.
    """
    user = resolve_user_or_exit(ctx)
    service = DataTransferService(ctx.obj["db"])

    try:
        counts = service.import_user(user.id, Path(file_path).read_text(encoding="utf-8"))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Imported data from {file_path}")
    for key, count in counts.items():
        click.echo(f"  {key}: {count}")


def register_commands(cli):
    """Register export and import commands with main CLI."""
    cli.add_command(export_data)
    cli.add_command(import_data)
