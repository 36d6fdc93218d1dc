"""
Shared CLI options and output helpers.
"""
import traceback
from pathlib import Path
from typing import List

import click

from opencode_sync.core.config import SYNC_DIR_ENV

MAX_LISTED = 5


archive_dir_option = click.option(
    '--archive-dir',
    type=click.Path(path_type=Path),
    envvar=SYNC_DIR_ENV,
    help=f'Archive/sync directory receiving imports (default: ${SYNC_DIR_ENV})',
)


def fail(ctx, action: str, error: Exception) -> None:
    """Report an error in red and abort with exit code 1."""
    click.secho(f"Error {action}: {error}", fg='red', err=True)
    if ctx.obj is not None and ctx.obj.verbose:
        click.echo(traceback.format_exc(), err=True)
    raise click.Abort()


def echo_ids(ids: List[str], limit: int = MAX_LISTED) -> None:
    """Print up to ``limit`` ids, then how many were left out."""
    for conv_id in ids[:limit]:
        click.secho(f"  - {conv_id}", fg='bright_black')
    if len(ids) > limit:
        click.secho(f"  ... and {len(ids) - limit} more", fg='bright_black')
