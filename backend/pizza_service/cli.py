# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/pizza_service/cli.py
# Commands Legend (run from the repository root):
# Prereqs:
# - Activate your virtualenv and `pip install -e .`.
# - Set FLASK_APP=pizza_service (PowerShell: $env:FLASK_APP="pizza_service").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and the default admin user.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with their roles.
# - python -m flask users create --name "pizza franchisee" --email f@jwt.com --password franchisee [--admin]
#   Create a user (prompts if options are omitted).
#
# Maintenance:
# - python -m flask maintenance purge-tokens
#   Delete expired rows from the token ledger.
# - python -m flask maintenance cleanup-security-events --retention-days 90
#   Delete security events older than the retention window.

import click
from flask import current_app
from flask.cli import with_appcontext

from .errors import ServiceError
from .extensions import db
from .models import User
from .roles import Admin, Diner
from .services import audit_service, auth_service, token_ledger


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create tables and the default admin user (idempotent)."""
    click.echo("START Initializing pizza service...")
    db.create_all()
    click.echo("PASS Tables created")

    name = current_app.config["DEFAULT_ADMIN_NAME"]
    email = current_app.config["DEFAULT_ADMIN_EMAIL"]
    password = current_app.config["DEFAULT_ADMIN_PASSWORD"]

    existing = db.session.query(User).filter_by(email=email).first()
    if existing:
        click.echo(f"WARN  User '{email}' already exists, skipping...")
    else:
        user = auth_service.create_user(name, email, password, roles=[Admin()])
        click.echo(f"PASS Created admin: {user.name} ({user.email})")

    click.echo("\nDefault Credentials (CHANGE IN PRODUCTION!):")
    click.echo(f"   admin -> {email} / {password}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        return
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    users = db.session.query(User).order_by(User.id).all()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Name':<25} {'Email':<30} {'Roles'}")
    click.echo("="*80)
    for user in users:
        roles = ", ".join(
            f"{role.name}:{role.franchise_id}" if hasattr(role, "franchise_id") else role.name
            for role in user.roles
        )
        click.echo(f"{user.id:<5} {user.name:<25} {user.email:<30} {roles or '-'}")
    click.echo("="*80 + "\n")


@users_group.command('create')
@click.option('--name', prompt=True, help='Display name')
@click.option('--email', prompt=True, help='Login email (unique)')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--admin', 'is_admin', is_flag=True, help='Grant the global admin role')
@with_appcontext
def create_user_cli(name, email, password, is_admin):
    roles = [Admin()] if is_admin else [Diner()]
    try:
        user = auth_service.create_user(name, email, password, roles=roles)
    except ServiceError as e:
        click.echo(f"FAIL Failed to create user '{email}': {e.message}")
        return
    click.echo(f"PASS Created user: {user.name} ({user.email}) with role '{roles[0].name}'")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('purge-tokens')
@with_appcontext
def purge_tokens():
    deleted = token_ledger.purge_expired()
    click.echo(f"PASS Purged {deleted} expired tokens")


@maintenance_group.command('cleanup-security-events')
@click.option('--retention-days', default=90, show_default=True, type=int)
@with_appcontext
def cleanup_security_events(retention_days):
    deleted = audit_service.cleanup_security_events(retention_days)
    click.echo(f"PASS Deleted {deleted} security events older than {retention_days} days")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
