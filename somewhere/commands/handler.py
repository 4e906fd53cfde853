#!/usr/bin/env python3
"""
handler.py
--------------------
Single dispatch point from a command name to a Commands method.

``HANDLERS`` maps every registered command name to its Commands method.

Arguments are checked against the command's registry entry before the
method runs. Logged commands are appended to the home's Log table as a
``{Command, Arguments, Result}`` event once they succeed, unless the
home's ``RegisterCommits`` setting is false.

Usage:
    from somewhere.commands.handler import execute_command, process_command

    lines = execute_command(commands, "tag", ["report.txt", "work"])
    lines = process_command(commands, 'create "my note" "" "idea"')
"""
from typing import Callable, Dict, List, Sequence

from somewhere.core.exceptions import InvalidOperationError
from somewhere.core.logging_manager import safe_logger
from somewhere.dataclasses import LogEvent
from somewhere.utils.parsers import break_arguments
from .commands import Commands
from .registry import get_spec, validate_args

HANDLERS: Dict[str, Callable[..., List[str]]] = {
    "add": Commands.add,
    "cf": Commands.cf,
    "create": Commands.create,
    "doc": Commands.doc,
    "files": Commands.files,
    "find": Commands.find,
    "help": Commands.help,
    "im": Commands.im,
    "mt": Commands.mt,
    "mv": Commands.mv,
    "mvt": Commands.mvt,
    "new": Commands.new,
    "purge": Commands.purge,
    "read": Commands.read,
    "rm": Commands.rm,
    "rmt": Commands.rmt,
    "status": Commands.status,
    "tag": Commands.tag,
    "tags": Commands.tags,
    "untag": Commands.untag,
    "update": Commands.update,
}


def execute_command(commands: Commands, name: str, args: Sequence[str]) -> List[str]:
    """
    Run one command and return its output lines.

    Raises:
        InvalidOperationError: If the command name is unknown
        InvalidArgumentError: If the number of arguments is wrong
    """
    spec = get_spec(name)
    if spec is None:
        raise InvalidOperationError(f"Specified command `{name}` is not a valid command.")
    validate_args(spec, args)

    result = list(HANDLERS[spec.name](commands, *args) or [])

    safe_logger(commands.logger).log_command(spec.name, args, result)
    if spec.logged and commands.db.is_home:
        with commands.db.session_scope():
            if commands.db.config.get_bool("RegisterCommits", default=True):
                commands.db.config.append_log(LogEvent(spec.name, list(args), result))
    return result


def process_command(commands: Commands, line: str) -> List[str]:
    """Split a typed line into command name and arguments, then run it."""
    args = break_arguments(line)
    if not args:
        return []
    return execute_command(commands, args[0], args[1:])
