"""Category management commands."""

import click
from finkeep.cli.context import require_workspace
from finkeep.cli.error_handling import handle_domain_error
from finkeep.domain.category import CategoryService

TYPE_CHOICE = click.Choice(["INCOME", "EXPENSE"], case_sensitive=False)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name", metavar="CATEGORY_NAME")
@click.option("--type", "category_type", type=TYPE_CHOICE, default="EXPENSE", show_default=True)
@click.option("--color", help="Display color")
@click.pass_context
def create_category(ctx, name: str, category_type: str, color: str | None):
    """Create a category.

    Examples:
        finkeep category create "Groceries"
        finkeep category create "Salary" --type INCOME
    """
    workspace_id = require_workspace(ctx)
    service = CategoryService(ctx.obj["db"])
    try:
        category_id = service.create_category(workspace_id, name, category_type, color=color)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name}' (ID: {category_id})")


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories grouped by type."""
    workspace_id = require_workspace(ctx)
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories(workspace_id)
    if not categories:
        click.echo("No categories found.")
        return

    current_type = None
    for cat in categories:
        if cat.type != current_type:
            current_type = cat.type
            click.echo(f"\n{current_type.value}:")
        click.echo(f"  ID: {cat.id:3d} | {cat.name}")


@category_group.command("update")
@click.argument("category_id", type=int)
@click.option("--name", help="New name")
@click.option("--type", "category_type", type=TYPE_CHOICE, help="New type")
@click.pass_context
def update_category(ctx, category_id: int, name: str | None, category_type: str | None):
    """Rename a category or change its type."""
    workspace_id = require_workspace(ctx)
    service = CategoryService(ctx.obj["db"])

    current = service.get_category(workspace_id, category_id)
    if current is None:
        click.echo(f"Error: Category {category_id} not found", err=True)
        ctx.exit(1)

    try:
        service.update_category(
            workspace_id,
            category_id,
            name=name if name is not None else current.name,
            type=category_type if category_type is not None else current.type,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated category {category_id}")


@category_group.command("delete")
@click.argument("category_id", type=int)
@click.pass_context
def delete_category(ctx, category_id: int):
    """Delete a category. Its transactions are kept without a category."""
    workspace_id = require_workspace(ctx)
    service = CategoryService(ctx.obj["db"])
    try:
        service.delete_category(workspace_id, category_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category {category_id}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
