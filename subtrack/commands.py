"""
Flask CLI commands for account administration.

    flask --app subtrack create-account "Jane Doe" jane@example.com --role owner
    flask --app subtrack unlock-account jane@example.com
"""
import click
from flask import Flask

from subtrack.auth.models import ROLES, Account
from subtrack.auth.service import register_account
from subtrack.security.account_lockout import get_account_lockout


def register_commands(app: Flask):
    """Attach the account commands to ``app.cli``."""

    @app.cli.command("create-account")
    @click.argument("name")
    @click.argument("email")
    @click.option("--role", type=click.Choice(ROLES), default="member", show_default=True)
    @click.password_option()
    def create_account(name, email, role, password):
        """Create an account with the given role."""
        result = register_account(
            {"name": name, "email": email, "password": password}, role=role
        )
        if not result.success:
            raise click.ClickException("; ".join(result.errors))
        click.echo(f"Created {result.data.role} account {result.data.email} ({result.data.id})")

    @app.cli.command("unlock-account")
    @click.argument("email")
    def unlock_account(email):
        """Clear failed login attempts and any lock for an account."""
        account = Account.find_by_email(email)
        if account is None:
            raise click.ClickException(f"No account found for {email}")
        get_account_lockout().reset(account)
        click.echo(f"Unlocked {account.email}")
