#!/usr/bin/env python3
"""
registry.py
--------------------
Static table of every Somewhere command.

Each CommandSpec holds a command's name, its help
text, its category in the ``help`` listing, whether executions are
recorded in the home's Log table, and its positional arguments. The table
is declared by hand; nothing is discovered by introspection.

Usage:
    from somewhere.commands.registry import REGISTRY, validate_args

    spec = REGISTRY["tag"]
    validate_args(spec, ["report.txt", "work, urgent"])
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

# --- Local imports ---
from somewhere.core.exceptions import InvalidArgumentError

TAG_LIST_EXPLANATION = (
    "comma delimited list of tags in double quotes; "
    "any character except commas and double quotes are allowed"
)


@dataclass(frozen=True)
class ArgumentSpec:
    """One positional argument of a command."""

    name: str
    explanation: str
    optional: bool = False


@dataclass(frozen=True)
class CommandSpec:
    """
    Declaration of one command.

    Attributes:
        name: Command name as typed by the user (lower case)
        description: One line summary shown by ``help``
        category: Group label in the ``help`` listing
        arguments: Positional arguments, required ones first
        logged: Whether executions are appended to the Log table
        documentation: Longer explanation shown by ``help <name>``
    """

    name: str
    description: str
    category: str
    arguments: Tuple[ArgumentSpec, ...] = field(default_factory=tuple)
    logged: bool = True
    documentation: str | None = None

    @property
    def min_args(self) -> int:
        return sum(1 for argument in self.arguments if not argument.optional)

    @property
    def max_args(self) -> int:
        return len(self.arguments)

    def help_lines(self) -> List[str]:
        """Detailed help: summary, documentation and argument list."""
        lines = [f"{self.name} - {self.description}"]
        if self.documentation:
            lines.append(f"\t{self.documentation}")
        if self.arguments:
            lines.append("\tOptions:")
        for argument in self.arguments:
            optional = "(Optional)" if argument.optional else ""
            lines.append(f"\t\t{argument.name}{optional} - {argument.explanation}")
        return lines


COMMANDS: Tuple[CommandSpec, ...] = (
    CommandSpec(
        "add",
        "Add an item to home.",
        "File",
        (
            ArgumentSpec(
                "itemname",
                "name of item; use * to add all items in current directory "
                "(will not add subdirectories or items in subdirectory); "
                "if given path is outside Home directory - for files they will be "
                "copied, for folders they will be cut and paste inside Home",
            ),
            ArgumentSpec("tags", "tags for the item", optional=True),
        ),
        documentation=(
            "Notice for folders inside Home this command will add the folder itself "
            "- to import and flatten the folder, use `im` command."
        ),
    ),
    CommandSpec(
        "cf",
        "Get or set configurations.",
        "Misc.",
        (
            ArgumentSpec(
                "key",
                "name of the configuration; if not given then return all keys "
                "currently exist",
                optional=True,
            ),
            ArgumentSpec(
                "value",
                "value of the configuration; if given then update key; if not given "
                "then return the value for the specified key",
                optional=True,
            ),
        ),
    ),
    CommandSpec(
        "create",
        "Create a virtual file (virtual text note).",
        "File",
        (
            ArgumentSpec(
                "notename",
                "name for the virtual file, must be unique among all managed files",
            ),
            ArgumentSpec("content", "initial content for the virtual file"),
            ArgumentSpec("tags", f"{TAG_LIST_EXPLANATION}; tags are required"),
        ),
        documentation=(
            "Virtual text notes may or may not have a name. If it doesn't have a "
            "name (i.e. empty), it's also called a \"knowledge\" item."
        ),
    ),
    CommandSpec(
        "doc",
        "Generate documentation of Somewhere program.",
        "Misc.",
        (
            ArgumentSpec(
                "path",
                "path for the generated file; relative to home folder",
                optional=True,
            ),
        ),
        logged=False,
    ),
    CommandSpec(
        "files",
        "Show a list of all files.",
        "Display",
        (
            ArgumentSpec(
                "itemtype",
                "only show items of this type: `file`, `folder`, `note` or `knowledge`",
                optional=True,
            ),
        ),
    ),
    CommandSpec(
        "find",
        "Find with (or without) action.",
        "Display",
        (
            ArgumentSpec(
                "searchtype (either `name` or `tag`)",
                "indicates search type",
            ),
            ArgumentSpec(
                "searchstring",
                "for `name`, use part of file name to search; for `tag`, use comma "
                "delimited list of tags to search",
            ),
            ArgumentSpec(
                "action (`show`)",
                "optional action to perform on search results; default `show`",
                optional=True,
            ),
        ),
        documentation=(
            "Find with filename or tags, and optionally perform an action with "
            "find results. Tag search returns items carrying all given tags."
        ),
    ),
    CommandSpec(
        "help",
        "Show available commands and general usage help. "
        "Use `help commandname` to see more.",
        "Misc.",
        (ArgumentSpec("commandname", "name of command", optional=True),),
        logged=False,
    ),
    CommandSpec(
        "im",
        "Import items, files, folders and notes.",
        "Mgmt.",
        (
            ArgumentSpec(
                "sourcepath",
                "path for the import source; either a folder or a TiddlyWiki Json "
                "export (.json); can be internal or external, can be already managed "
                "if it's internal",
            ),
        ),
        documentation=(
            "Json: An array of {title,text,created,tags}, where tags is space "
            "seperated and tags containing spaces are enclosed in [[]]. Folders "
            "are flattened into Home with their directory names as tags."
        ),
    ),
    CommandSpec(
        "mt",
        "Read or set meta attribtues.",
        "Advanced",
        (
            ArgumentSpec("itemname", "name of the item to read or set meta attribute"),
            ArgumentSpec(
                "metaname",
                "name of the meta parameter; if not given then return all meta "
                "currently exist",
                optional=True,
            ),
            ArgumentSpec(
                "value",
                "value of the meta parameter; if given then update meta; if not given "
                "then return the value for the specified meta attribute",
                optional=True,
            ),
        ),
    ),
    CommandSpec(
        "mv",
        "Rename file.",
        "File",
        (
            ArgumentSpec("filename", "name of file"),
            ArgumentSpec("newfilename", "new name of file"),
        ),
        documentation=(
            "If the file doesn't exist on disk or in database then will issue a "
            "warning instead of doing anything."
        ),
    ),
    CommandSpec(
        "mvt",
        "Move Tags, renames specified tag.",
        "Tagging",
        (
            ArgumentSpec("sourcetag", "old name for the tag"),
            ArgumentSpec(
                "targettags",
                "new name(s) for the tag; if more than one is specified, the tag will "
                "be replaced with all of them",
            ),
        ),
        documentation=(
            "If source tag doesn't exist in database then will issue a warning "
            "instead of doing anything. If the target tag name already exist, then "
            "this action will merge the two tags. If more than one replacement tags "
            "are provided, the source tag will be split into multiple new ones, this "
            "operation is also called \"explosion\"."
        ),
    ),
    CommandSpec(
        "new",
        "Create a new Somewhere home at current home directory.",
        "Misc.",
    ),
    CommandSpec(
        "purge",
        "Permanantly delete all the files that are marked as \"_deleted\"",
        "Mgmt.",
        (
            ArgumentSpec(
                "-f", "force purging and purge without warning", optional=True
            ),
        ),
    ),
    CommandSpec(
        "read",
        "Read content of an item.",
        "Display",
        (
            ArgumentSpec("itemname", "name of item; can be either managed or not managed"),
            ArgumentSpec(
                "linecount",
                "the number of lines to display; if not specified, read all lines",
                optional=True,
            ),
        ),
    ),
    CommandSpec(
        "rm",
        "Remove a file from Home directory, deletes the file both physically "
        "and from database.",
        "File",
        (
            ArgumentSpec("filename", "name of file"),
            ArgumentSpec(
                "-f",
                "force physical deletion instead of mark as \"_deleted\"",
                optional=True,
            ),
        ),
        documentation=(
            "If the file doesn't exist on disk or in database then will issue a "
            "warning instead of doing anything."
        ),
    ),
    CommandSpec(
        "rmt",
        "Removes a tag.",
        "Tagging",
        (ArgumentSpec("tags", TAG_LIST_EXPLANATION),),
        documentation="This command deletes the tag from the database, there is no going back.",
    ),
    CommandSpec(
        "status",
        "Displays the state of the Home directory and the staging area.",
        "Misc.",
        documentation=(
            "Shows which files aren't being tracked by Somewhere. Notice only the "
            "files in current directory are checked, we don't go through children "
            "folders. We also don't check folders."
        ),
    ),
    CommandSpec(
        "tag",
        "Tag a specified file.",
        "Tagging",
        (
            ArgumentSpec("filename", "name of file"),
            ArgumentSpec(
                "tags",
                f"{TAG_LIST_EXPLANATION}; double quotes will be replaced by "
                "underscore if entered.",
            ),
        ),
        documentation=(
            "Tags are case-insensitive and will be stored in lower case; Though "
            "allowed, it's recommended tags don't contain spaces. Use underscore "
            "\"_\" to connect words. Spaces immediately before and after comma "
            "delimiters are trimmed. Commas are not allowed in tags, otherwise any "
            "character is allowed."
        ),
    ),
    CommandSpec(
        "tags",
        "Show all tags currently exist.",
        "Display",
        documentation=(
            "The displayed result will be a plain alphanumerically ordered list of "
            "tag names, along with ID and tag usage count."
        ),
    ),
    CommandSpec(
        "untag",
        "Untag a file.",
        "Tagging",
        (
            ArgumentSpec("filename", "name of file"),
            ArgumentSpec(
                "tags",
                f"{TAG_LIST_EXPLANATION}; if the file doesn't have a specified tag "
                "then the tag is not effected",
            ),
        ),
    ),
    CommandSpec(
        "update",
        "Update or replace tags for a file completely.",
        "Tagging",
        (
            ArgumentSpec("filename", "name of file"),
            ArgumentSpec("tags", TAG_LIST_EXPLANATION),
        ),
    ),
)

REGISTRY: Dict[str, CommandSpec] = {spec.name: spec for spec in COMMANDS}


def get_spec(name: str) -> CommandSpec | None:
    """CommandSpec for a command name (case-insensitive), or None."""
    return REGISTRY.get(name.lower())


def validate_args(spec: CommandSpec, args: Sequence[str]) -> None:
    """
    Check the number of arguments given to a command.

    Raises:
        InvalidArgumentError: If too few or too many arguments are given
    """
    if spec.min_args <= len(args) <= spec.max_args:
        return
    expected = (
        f"{spec.min_args}"
        if spec.min_args == spec.max_args
        else f"{spec.min_args}-{spec.max_args}"
    )
    raise InvalidArgumentError(
        f"Command `{spec.name}` requires {expected} arguments, "
        f"{len(args)} is given. Use `help {spec.name}`."
    )
