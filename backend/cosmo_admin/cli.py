# Overview: Flask CLI command groups for bootstrap, user management and catalog inspection.

# backend/cosmo_admin/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (all eighteen product tables included).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Admins:
# - python -m flask admins add owner@example.com
# - python -m flask admins list
# - python -m flask admins remove owner@example.com
#
# Managers:
# - python -m flask managers add --name "Olena" --email olena@example.com
# - python -m flask managers list
#
# Catalog:
# - python -m flask products groups
#   Print the group -> table mapping in scan order.
# - python -m flask products low-stock --threshold 5
#   Products (any group) with quantity at or below the threshold.

import click
from flask.cli import with_appcontext

from .extensions import db
from .errors import APIError
from .models import PRODUCT_GROUP_TABLES, PRODUCT_MODELS
from .services import admins_service, managed_users_service, products_service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo(f"PASS Schema ready ({len(db.metadata.sorted_tables)} tables)")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()
    click.echo("BUILD Recreating schema...")
    db.create_all()
    click.echo("PASS Database reset complete")


@click.group('admins')
def admins_group():
    """Admin account management."""


@admins_group.command('add')
@click.argument('email')
@with_appcontext
def add_admin(email):
    try:
        admin = admins_service.add_admin(email, added_by="cli")
    except APIError as e:
        raise click.ClickException(e.message)
    click.echo(f"PASS Added admin {admin['email']}")


@admins_group.command('list')
@with_appcontext
def list_admins():
    admins = admins_service.list_admins()
    if not admins:
        click.echo("No admins found.")
        return
    for admin in admins:
        source = "config" if admin["id"] is None else f"added by {admin['added_by'] or '-'}"
        click.echo(f"{admin['email']:<40} {source}")


@admins_group.command('remove')
@click.argument('email')
@with_appcontext
def remove_admin(email):
    try:
        admins_service.remove_admin(email, caller_email=None)
    except APIError as e:
        raise click.ClickException(e.message)
    click.echo(f"PASS Removed admin {email.lower()}")


@click.group('managers')
def managers_group():
    """Manager account management."""


@managers_group.command('add')
@click.option('--name', required=True, help='Display name')
@click.option('--email', required=True, help='Sign-in email')
@click.option('--notes', default=None)
@with_appcontext
def add_manager(name, email, notes):
    try:
        user = managed_users_service.create_managed_user(
            {"name": name, "email": email, "notes": notes},
            caller_email="cli",
        )
    except APIError as e:
        raise click.ClickException(e.message)
    click.echo(f"PASS Added manager {user['name']} <{user['email']}>")


@managers_group.command('list')
@with_appcontext
def list_managers():
    users = managed_users_service.list_managed_users()
    if not users:
        click.echo("No managers found.")
        return
    for user in users:
        click.echo(f"{user['email']:<40} {user['name']}")


@click.group('products')
def products_group():
    """Catalog inspection."""


@products_group.command('groups')
@with_appcontext
def list_groups():
    for group, table in PRODUCT_GROUP_TABLES.items():
        count = db.session.query(PRODUCT_MODELS[group]).count()
        click.echo(f"{group:<16} {table:<20} {count}")


@products_group.command('low-stock')
@click.option('--threshold', default=0, show_default=True, type=click.IntRange(min=0))
@with_appcontext
def low_stock(threshold):
    rows = products_service.list_low_stock(threshold)
    if not rows:
        click.echo("No products at or below the threshold.")
        return
    for row in rows:
        click.echo(f"{row['quantity']:>5}  {row['group']:<16} {row['name']}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(admins_group)
    app.cli.add_command(managers_group)
    app.cli.add_command(products_group)
