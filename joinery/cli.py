import logging

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from joinery.config import is_placeholder
from joinery.errors import StoreUnavailableError
from joinery.queries.settings import seed_default_settings
from joinery.store import get_store, require_store

logger = logging.getLogger(__name__)


@click.group("store")
def store_cli() -> None:
    """Hosted store maintenance commands."""


@store_cli.command("init")
@with_appcontext
def init_command() -> None:
    """Create any missing tables."""
    try:
        require_store().create_all()
    except StoreUnavailableError as exc:
        raise click.ClickException(exc.message)
    click.echo("Tables created.")


@store_cli.command("seed-settings")
@with_appcontext
def seed_settings_command() -> None:
    """Insert default settings that are not present yet."""
    try:
        added = seed_default_settings()
    except StoreUnavailableError as exc:
        raise click.ClickException(exc.message)
    if added:
        for key in added:
            click.echo(f"Added {key}")
    else:
        click.echo("Settings already seeded.")


@store_cli.command("status")
@with_appcontext
def status_command() -> None:
    """Report whether a store is configured."""
    url = current_app.config.get("STORE_URL")
    if get_store() is None or is_placeholder(url):
        click.echo("Store: not configured (empty-result mode)")
        return
    click.echo(f"Store: configured ({_redacted(url)})")


def _redacted(url: str) -> str:
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        logger.debug("Could not parse store URL for display", exc_info=True)
        return "<unparseable url>"
