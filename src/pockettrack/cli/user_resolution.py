"""CLI helpers for acting-user and category resolution."""

from __future__ import annotations

import click
from pockettrack.domain.category import CategoryService
from pockettrack.domain.entities import Category, TransactionType, User
from pockettrack.domain.errors import NotFoundError, category_not_found
from pockettrack.domain.user import UserService
from pockettrack.cli.error_handling import handle_domain_error


def resolve_user_or_exit(ctx: click.Context) -> User:
    """Resolve the acting user from --user / POCKETTRACK_USER, or exit with a CLI error.

    Without an explicit user the only user in the store is used.
    """
    service = UserService(ctx.obj["db"])
    user = ctx.obj.get("user")
    if user:
        try:
            return service.resolve_user(user)
        except NotFoundError as exc:
            handle_domain_error(ctx, exc)

    users = service.list_users()
    if len(users) == 1:
        return users[0]
    if not users:
        click.echo("Error: No users found. Run 'user create' or 'user guest' first.", err=True)
    else:
        click.echo("Error: Several users exist. Pass --user or set POCKETTRACK_USER.", err=True)
    ctx.exit(1)


def resolve_category_or_exit(
    ctx: click.Context, user_id: str, category: str, type: TransactionType | None = None
) -> Category:
    """Resolve one of the user's categories by name or ID, or exit with a CLI error.

    With ``type`` set, names only match categories of that type.
    """
    found = CategoryService(ctx.obj["db"]).find_category(user_id, category, type=type)
    if found is None:
        handle_domain_error(ctx, NotFoundError(category_not_found(category)))
    return found
