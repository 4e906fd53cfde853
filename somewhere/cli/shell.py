"""
Run and Shell Commands
----------------------

The two ways of executing Somewhere commands.

Commands:
    - run: Execute one command, print its output and exit; errors exit
      with status 1
    - shell: Read commands in a loop until `exit` or `quit`; errors are
      printed and the loop continues
"""
import click

from somewhere.commands import process_command
from somewhere.commands.handler import execute_command
from somewhere.core.logging_manager import handle_cli_error
from . import get_commands

EXIT_WORDS = ("exit", "quit")


@click.command("run", context_settings={"ignore_unknown_options": True})
@click.argument("name")
@click.argument("args", nargs=-1)
@click.pass_context
def run(ctx, name, args):
    """Execute one Somewhere command, e.g. `somewhere run tag a.txt work`."""
    try:
        commands = get_commands(ctx)
        for line in execute_command(commands, name, list(args)):
            click.echo(line)
    except Exception as e:
        handle_cli_error(ctx, e, name, {"arguments": list(args)})


@click.command("shell")
@click.pass_context
def shell(ctx):
    """Interactive Somewhere prompt."""
    commands = get_commands(ctx)
    logger = ctx.find_root().obj["logger"]
    verbose = ctx.find_root().obj["verbose"]
    click.echo(f"Somewhere home: {commands.home_dir} (type `help`, `exit` to leave)")

    while True:
        try:
            line = click.prompt("Omni", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            click.echo()
            break
        if line.strip().lower() in EXIT_WORDS:
            break
        try:
            for output in process_command(commands, line):
                click.echo(output)
        except Exception as e:
            click.echo(logger.log_cli_error(e, {"line": line}, show_traceback=verbose), err=True)
