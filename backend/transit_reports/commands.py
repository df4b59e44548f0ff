"""Flask CLI commands."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from transit_reports.models.user import USER_ROLES
from transit_reports.services import auth_service
from transit_reports.utils.errors import ApiError


@click.command("create-user")
@click.option("--name", prompt=True)
@click.option("--email", prompt=True)
@click.option("--role", type=click.Choice(USER_ROLES), default="user", show_default=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_user_command(name: str, email: str, role: str, password: str) -> None:
    """Create a user with the given role (officials and admins are made here)."""
    try:
        user = auth_service.create_user(name, email, password, role=role)
    except ApiError as err:
        raise click.ClickException(err.message)
    click.echo(f"User {user.email} created with role {user.role}.")


def register_commands(app) -> None:
    app.cli.add_command(create_user_command)
