"""
Click-based command line interface.

Usage:
    opencode-sync [--verbose] COMMAND [ARGS]...
    python -m opencode_sync COMMAND [ARGS]...
"""
import logging

import click

from opencode_sync import __version__
from opencode_sync.cli.commands.importing import formats, import_cmd, scan
from opencode_sync.cli.commands.sync import check, pull, push, sync


class CliContext:
    """Shared state passed to every command through ``ctx.obj``."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose


@click.group()
@click.version_option(__version__, prog_name='opencode-sync')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging and tracebacks')
@click.pass_context
def main(ctx, verbose):
    """Sync OpenCode conversations and import other chat archives."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    ctx.obj = CliContext(verbose=verbose)


main.add_command(check)
main.add_command(push)
main.add_command(pull)
main.add_command(sync)
main.add_command(import_cmd)
main.add_command(scan)
main.add_command(formats)
