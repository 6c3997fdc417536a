"""User management commands."""

import click
from pockettrack.domain.errors import DomainError
from pockettrack.domain.user import UserService
from pockettrack.cli.error_handling import handle_domain_error


@click.group()
def user_group():
    """Manage local users."""
    pass


@user_group.command("create")
@click.argument("name")
@click.option("--email", required=True, help="Email address (unique)")
@click.pass_context
def create_user(ctx, name: str, email: str):
    """Create a user with the default categories.

    Examples:
        pockettrack user create "Ana" --email ana@example.com
    """
    service = UserService(ctx.obj["db"])
    try:
        user = service.create_user(name=name, email=email)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{user.name}' (ID: {user.id})")


@user_group.command("guest")
@click.pass_context
def create_guest(ctx):
    """Create a guest user with the default categories."""
    service = UserService(ctx.obj["db"])
    user = service.create_guest_user()
    click.echo(f"Created guest user (ID: {user.id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    service = UserService(ctx.obj["db"])

    users = service.list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 80)
    for user in users:
        email = user.email or "(guest)"
        click.echo(f"ID: {user.id} | {user.name:20s} | {email}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
