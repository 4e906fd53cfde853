#!/usr/bin/env python3
"""
Somewhere Command Line Interface
--------------------------------

The ``somewhere`` executable.

This module provides the main CLI group and the shared context setup;
the commands live in ``shell.py``.

Command Structure:
    - run: Execute one Somewhere command and exit
    - shell: Interactive prompt (default when no command is given)

Usage:
    # Create a home in the current directory
    somewhere run new

    # Tag a file
    somewhere run tag report.txt "work, urgent"

    # Interactive mode
    somewhere
    somewhere --home ~/notes shell
"""
from pathlib import Path

import click

from somewhere.commands import Commands
from somewhere.core.cli_utils import setup_logger
from somewhere.core.paths import LOG_DIR


@click.group(invoke_without_command=True)
@click.option(
    "--home",
    type=click.Path(file_okay=False),
    default=".",
    envvar="SOMEWHERE_HOME",
    help="Home directory (defaults to the current directory)",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, home, log_dir, verbose):
    """Somewhere: tag files, folders and notes in a home directory."""
    ctx.ensure_object(dict)
    ctx.obj["home"] = Path(home).expanduser().resolve()
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(Path(log_dir), "cli")

    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


def confirm_purge(lines) -> bool:
    """Show the files about to be purged and ask for an exact ``Y``."""
    for line in lines:
        click.echo(line)
    answer = click.prompt(
        "Are you very very sure? (Y/N) - answer is case sensitive",
        default="",
        show_default=False,
    )
    return answer == "Y"


def get_commands(ctx) -> Commands:
    """Get or create the Commands facade; it is closed with the context."""
    root = ctx.find_root()
    if "commands" not in root.obj:
        commands = Commands(
            root.obj["home"], logger=root.obj["logger"], confirm=confirm_purge
        )
        root.obj["commands"] = commands
        root.call_on_close(commands.close)
        root.call_on_close(root.obj["logger"].close)
    return root.obj["commands"]


# Import and register command modules
# These imports must come after CLI group definition
from .shell import run, shell  # noqa: E402

cli.add_command(run)
cli.add_command(shell)


if __name__ == "__main__":
    cli(obj={})
