# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/stockledger/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: creates tables and the default admin and manager accounts.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with their role.
# - python -m flask users create --name "Jane" --email jane@example.com --phone 555-0100 --password "Password123!" --role ADMIN
#   Create a user (prompts if options are omitted).
#
# Tokens:
# - python -m flask tokens issue admin@stockledger.local
#   Print a bearer token for an existing user (scripting / smoke tests).

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .services.token_service import get_signer
from .services.user_service import find_user_by_email, list_users, register_user
from .validation import ValidationError, ConflictError


DEFAULT_PASSWORD = "Password123!"
DEFAULT_USERS = (
    ("Administrator", "admin@stockledger.local", "000-000-0000", "ADMIN"),
    ("Manager", "manager@stockledger.local", "000-000-0001", "MANAGER"),
)


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--password', default=DEFAULT_PASSWORD, show_default=True, help='Password for the default users')
@with_appcontext
def init_system(password):
    """
    Create tables and the default users.

    Creates (if missing):
    - admin@stockledger.local (ADMIN)
    - manager@stockledger.local (MANAGER)

    SECURITY: Change passwords immediately in production!
    """
    click.echo("START Initializing stock ledger...")
    db.create_all()

    for name, email, phone, role in DEFAULT_USERS:
        if find_user_by_email(email) is not None:
            click.echo(f"PASS User already exists: {email}")
            continue
        user = register_user(name=name, email=email, password=password, phone_number=phone, role=role)
        click.echo(f"PASS Created user: {user.email} ({user.role}, ID: {user.id})")

    click.echo("DONE System initialized.")


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

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User inspection and creation."""


@users_group.command('create')
@click.option('--name', prompt=True, help='Display name')
@click.option('--email', prompt=True, help='Email address (login identity)')
@click.option('--phone', prompt=True, help='Phone number')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(['ADMIN', 'MANAGER']), default='MANAGER', show_default=True, help='Role')
@with_appcontext
def create_user_cli(name, email, phone, password, role):
    """Create a user."""
    try:
        user = register_user(name=name, email=email, password=password, phone_number=phone, role=role)
    except (ValidationError, ConflictError) as e:
        raise click.ClickException(e.message)

    click.echo(f"PASS Created user: {user.email} ({user.role}, ID: {user.id})")


@users_group.command('list')
@with_appcontext
def list_users_cli():
    """List all users with their roles."""
    users = list_users()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Name':<20} {'Email':<35} {'Role'}")
    click.echo("="*80)

    for user in users:
        click.echo(f"{user.id:<5} {user.name:<20} {user.email:<35} {user.role}")

    click.echo("="*80 + "\n")


@click.group('tokens')
def tokens_group():
    """Bearer token utilities."""


@tokens_group.command('issue')
@click.argument('email')
@with_appcontext
def issue_token_cli(email):
    """Print a bearer token for EMAIL."""
    user = find_user_by_email(email)
    if user is None:
        raise click.ClickException(f"No user with email {email}")

    signer = get_signer()
    token = signer.issue(user.email)
    current_app.logger.info("Issued CLI token for user id=%s", user.id)
    click.echo(token)


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(tokens_group)
