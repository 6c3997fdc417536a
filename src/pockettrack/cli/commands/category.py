"""Category management commands."""

import click
from pockettrack.domain.category import CategoryService
from pockettrack.domain.entities import TransactionType
from pockettrack.domain.errors import DomainError
from pockettrack.cli.error_handling import handle_domain_error
from pockettrack.cli.user_resolution import resolve_category_or_exit, resolve_user_or_exit

TYPE_CHOICE = click.Choice([t.value for t in TransactionType], case_sensitive=False)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--type", "category_type", type=TYPE_CHOICE, help="Only income or expense categories")
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List the acting user's categories."""
    user = resolve_user_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories(
        user.id, type=TransactionType(category_type.lower()) if category_type else None
    )
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        click.echo(f"  [{cat.type.value:7s}] {cat.name} (ID: {cat.id})")


@category_group.command("create")
@click.argument("name")
@click.option("--type", "category_type", type=TYPE_CHOICE, default="expense", help="Category type (default: expense)")
@click.pass_context
def create_category(ctx, name: str, category_type: str):
    """Create a new category."""
    user = resolve_user_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])

    try:
        category = service.create_category(user.id, name=name, type=TransactionType(category_type.lower()))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{category.name}' (ID: {category.id})")


@category_group.command("rename")
@click.argument("category", metavar="CATEGORY")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_category(ctx, category: str, new_name: str):
    """Rename a category.

    CATEGORY can be a category name or ID.
    """
    user = resolve_user_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])
    category_obj = resolve_category_or_exit(ctx, user.id, category)

    try:
        renamed = service.rename_category(user.id, category_obj.id, new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed category '{category_obj.name}' to '{renamed.name}'")


@category_group.command("delete")
@click.argument("category", metavar="CATEGORY")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category.

    Transactions in the category are kept and show as uncategorized.
    """
    user = resolve_user_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])
    category_obj = resolve_category_or_exit(ctx, user.id, category)

    service.delete_category(user.id, category_obj.id)
    click.echo(f"Deleted category '{category_obj.name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
