"""
Import CLI commands (import, scan, formats).
"""
from pathlib import Path
from typing import Optional

import click

from opencode_sync.cli.common import archive_dir_option, fail
from opencode_sync.core.models import ImportOptions, ImportResult
from opencode_sync.services.import_service import AUTO_FORMAT, ImportService

MAX_WARNINGS = 3


def display_import_result(result: ImportResult, preview: bool) -> None:
    meta = result.metadata
    if preview:
        click.secho("Preview complete (nothing written)", fg='blue')
    else:
        click.secho("Import completed!", fg='green')
    click.secho(f"  Format: {meta.format}", fg='bright_black')
    click.secho(f"  Source: {meta.sourcePath}", fg='bright_black')
    click.secho(f"  Total conversations: {meta.totalConversations}", fg='bright_black')
    click.secho(f"  Successfully imported: {meta.successfullyImported}", fg='green')

    if meta.archivedCount > 0:
        click.secho(f"  Archived: {meta.archivedCount}", fg='yellow')

    if result.warnings:
        click.secho(f"  Warnings: {len(result.warnings)}", fg='yellow')
        for warning in result.warnings[:MAX_WARNINGS]:
            click.secho(f"    - {warning.message}", fg='bright_black')
        if len(result.warnings) > MAX_WARNINGS:
            click.secho(f"    ... and {len(result.warnings) - MAX_WARNINGS} more", fg='bright_black')


@click.command('import')
@click.argument('source', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    '--format', 'format_name',
    default=AUTO_FORMAT,
    show_default=True,
    help='Source format (see `formats`), or auto to detect it',
)
@archive_dir_option
@click.option('--preview', is_flag=True, help='Show what would be imported without writing anything')
@click.option('--force', is_flag=True, help='Re-import files already recorded in the manifest')
@click.pass_context
def import_cmd(ctx, source: Path, format_name: str, archive_dir: Optional[Path], preview: bool, force: bool) -> None:
    """
    Import conversations from SOURCE into the archive directory.

    Imported conversations land in ARCHIVE_DIR/conversations, ready to sync.
    """
    if archive_dir is None:
        click.secho("Error: no archive directory (use --archive-dir or set OPENCODE_SYNC_DIR)", fg='red', err=True)
        raise click.Abort()

    try:
        service = ImportService(archive_dir)
        click.secho(f"Importing from {source} ({format_name})...", fg='blue')
        result = service.import_from(source, format_name, ImportOptions(force=force, preview=preview))
    except Exception as e:
        fail(ctx, "importing", e)

    display_import_result(result, preview)


@click.command()
@click.argument('source', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def scan(ctx, source: Path) -> None:
    """Report which import formats recognize SOURCE."""
    try:
        # Detection never writes, so the archive root is irrelevant here
        report = ImportService(source).scan(source)
    except Exception as e:
        fail(ctx, "scanning", e)

    click.secho(f"Scanning {report.source_path}", fg='blue')
    for check in report.checks:
        if check.can_import:
            click.secho(f"  {check.format}: yes", fg='green')
        else:
            click.secho(f"  {check.format}: no", fg='bright_black')

    if report.detected_format:
        click.secho(f"Detected format: {report.detected_format}", fg='green')
    else:
        click.secho("No recognizable format found", fg='yellow')


@click.command()
def formats() -> None:
    """List available import formats in detection order."""
    registry = ImportService.default_registry()
    for format_name in registry.get_available_formats():
        click.echo(format_name)
