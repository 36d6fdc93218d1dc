"""
Sync CLI commands (check, push, pull, sync).

Without a path argument the sync directory comes from $OPENCODE_SYNC_DIR
and OpenCode storage from $OPENCODE_STORAGE_DIR or auto-detection.
"""
from typing import Optional

import click

from opencode_sync.cli.common import echo_ids, fail
from opencode_sync.services.sync_service import SyncService


@click.command()
@click.argument('path', required=False)
@click.pass_context
def check(ctx, path: Optional[str]) -> None:
    """Show which conversations need to be pushed or pulled."""
    try:
        result = SyncService().check_status(path)
    except Exception as e:
        fail(ctx, "checking sync status", e)

    click.secho("OpenCode Sync Check", fg='blue')
    click.secho("=" * 50, fg='bright_black')

    if not result.needsPush and not result.needsPull:
        click.secho("All conversations are in sync!", fg='green')
        click.secho(f"  Up to date: {len(result.upToDate)}", fg='bright_black')
        return

    if result.needsPush:
        click.secho(f"Push needed: {len(result.needsPush)} conversation(s)", fg='yellow')
        echo_ids(result.needsPush)
    if result.needsPull:
        click.secho(f"Pull needed: {len(result.needsPull)} conversation(s)", fg='cyan')
        echo_ids(result.needsPull)


@click.command()
@click.argument('path', required=False)
@click.pass_context
def push(ctx, path: Optional[str]) -> None:
    """Push local conversations to the sync directory."""
    try:
        pushed = SyncService().push_conversations(path)
    except Exception as e:
        fail(ctx, "pushing conversations", e)

    if not pushed:
        click.echo("No conversations need to be pushed.")
        return
    click.secho(f"Pushed {len(pushed)} conversation(s)", fg='green')
    echo_ids(pushed)


@click.command()
@click.argument('path', required=False)
@click.pass_context
def pull(ctx, path: Optional[str]) -> None:
    """Pull conversations from the sync directory."""
    try:
        pulled = SyncService().pull_conversations(path)
    except Exception as e:
        fail(ctx, "pulling conversations", e)

    if not pulled:
        click.echo("No conversations need to be pulled.")
        return
    click.secho(f"Pulled {len(pulled)} conversation(s)", fg='green')
    echo_ids(pulled)


@click.command()
@click.argument('path1', required=False)
@click.argument('path2', required=False)
@click.pass_context
def sync(ctx, path1: Optional[str], path2: Optional[str]) -> None:
    """
    Bidirectional sync.

    \b
    sync                 local storage <-> $OPENCODE_SYNC_DIR
    sync PATH1           local storage <-> PATH1
    sync PATH1 PATH2     sync directory PATH1 <-> sync directory PATH2
    """
    try:
        report = SyncService().sync_conversations(path1, path2)
    except Exception as e:
        fail(ctx, "syncing conversations", e)

    if not report.pushed and not report.pulled:
        click.echo("No conversations need to be synced.")
    else:
        if report.pushed:
            click.secho(f"Pushed {len(report.pushed)} conversation(s)", fg='yellow')
            echo_ids(report.pushed)
        if report.pulled:
            click.secho(f"Pulled {len(report.pulled)} conversation(s)", fg='cyan')
            echo_ids(report.pulled)
    click.secho("Sync completed!", fg='green')
