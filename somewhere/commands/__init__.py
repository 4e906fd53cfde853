"""
commands package
----------------
The command layer on top of the stores.

- registry: Static CommandSpec table and argument validation
- commands: Commands facade, one method per command
- handler: Dispatch by name with Log table recording
"""
from .commands import Commands
from .handler import execute_command, process_command
from .registry import COMMANDS, REGISTRY, CommandSpec, validate_args

__all__ = [
    "Commands",
    "execute_command",
    "process_command",
    "COMMANDS",
    "REGISTRY",
    "CommandSpec",
    "validate_args",
]
