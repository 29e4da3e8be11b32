"""CLI commands for reconciling a user's habits between local and cloud stores.

Usage:
    flask sync status --user 1
    flask sync upload --user 1
    flask sync download --user 1
    flask sync auto --user 1
"""

from __future__ import annotations

import click
from flask.cli import AppGroup

from habittracker.core.errors import AppError

sync_cli = AppGroup("sync", help="Reconcile habits between the local and cloud stores.")


def _engine():
    from habittracker.domains.sync.services import get_sync_engine

    engine = get_sync_engine()
    if not engine.enabled:
        raise click.ClickException("Sync is disabled: the app runs against the cloud store only.")
    return engine


@sync_cli.command("status")
@click.option("--user", "-u", "user_id", type=int, required=True, help="User ID to inspect")
def status_command(user_id: int):
    """Show local and cloud habit counts for a user."""
    status = _engine().status(user_id)
    cloud = status.cloud_count if status.cloud_available else "unavailable"
    click.echo(f"User {user_id}: local={status.local_count} cloud={cloud} -> {status.status}")


@sync_cli.command("upload")
@click.option("--user", "-u", "user_id", type=int, required=True, help="User ID to upload")
def upload_command(user_id: int):
    """Push the user's local habits to the cloud store."""
    try:
        outcome = _engine().upload(user_id)
    except AppError as exc:
        raise click.ClickException(exc.message) from exc
    click.echo(f"  ✓ Uploaded {outcome.uploaded} habits")


@sync_cli.command("download")
@click.option("--user", "-u", "user_id", type=int, required=True, help="User ID to download")
def download_command(user_id: int):
    """Pull the user's cloud habits into the local store."""
    try:
        outcome = _engine().download(user_id)
    except AppError as exc:
        raise click.ClickException(exc.message) from exc
    click.echo(f"  ✓ Downloaded {outcome.downloaded} habits")


@sync_cli.command("auto")
@click.option("--user", "-u", "user_id", type=int, required=True, help="User ID to reconcile")
def auto_command(user_id: int):
    """Reconcile in whichever direction the habit counts call for."""
    try:
        outcome = _engine().auto(user_id)
    except AppError as exc:
        raise click.ClickException(exc.message) from exc
    if outcome.direction is None:
        click.echo(f"User {user_id}: already synced")
        return
    moved = outcome.uploaded if outcome.direction == "upload" else outcome.downloaded
    click.echo(f"  ✓ {outcome.direction}: {moved} habits")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(sync_cli)
