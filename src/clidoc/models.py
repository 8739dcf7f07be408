"""Data models for documented command trees.

This module defines the command and flag structures the renderers consume.
The tree is built by a collaborator (the Click adapter, the YAML loader or
user code) and is never mutated while rendering.

Philosophy:
- Ruthlessly simple dataclasses
- Standard library only
- Self-contained and regeneratable
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FlagType(str, Enum):
    """Value type of a flag."""

    BOOL = "bool"
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    STRING_LIST = "string_list"
    INT_LIST = "int_list"
    FLOAT_LIST = "float_list"
    DURATION = "duration"
    TIMESTAMP = "timestamp"
    PATH = "path"

    @property
    def is_list(self) -> bool:
        return self in (FlagType.STRING_LIST, FlagType.INT_LIST, FlagType.FLOAT_LIST)


@dataclass
class Flag:
    """Represents a command option or flag.

    Attributes:
        names: Flag names without dashes; the first is the primary name,
            the rest are aliases (e.g., ["config", "c"])
        type: Value type of the flag
        default: Default value if not provided
        default_text: Display text overriding the default value
        usage: Help description for the flag
        env_vars: Environment variables the flag is read from
        category: Category label used to group flags
        required: Whether the flag is required
        hidden: Whether the flag is left out of documentation
        deprecated: Whether the flag is deprecated
    """

    names: list[str]
    type: FlagType = FlagType.STRING
    default: Any = None
    default_text: str = ""
    usage: str = ""
    env_vars: list[str] = field(default_factory=list)
    category: str = ""
    required: bool = False
    hidden: bool = False
    deprecated: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.names, str):
            self.names = [self.names]
        self.type = FlagType(self.type)
        if not any(name.strip() for name in self.names):
            raise ValueError("Flag requires at least one non-empty name")

    @property
    def name(self) -> str:
        """Return the primary flag name."""
        return self.names[0].strip()

    @property
    def takes_value(self) -> bool:
        """Whether the flag is given a value on the command line."""
        return self.type is not FlagType.BOOL

    def default_display(self) -> str:
        """Return the string representation of the default value."""
        if self.default_text:
            return self.default_text
        value = self.default
        if self.type is FlagType.BOOL:
            return "true" if value else "false"
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ", ".join(str(item) for item in value)
        return str(value)


@dataclass
class Author:
    """Author or contributor of an application."""

    name: str
    email: str = ""

    def __str__(self) -> str:
        if self.email:
            return f"{self.name} <{self.email}>"
        return self.name


@dataclass
class Command:
    """A node in the tree of documented commands.

    The root node describes the application itself; `authors` and
    `copyright` are only read from the root.

    Attributes:
        name: Command name
        aliases: Alternative names for the command
        usage: One-line summary
        usage_text: Free-form usage text, may span lines and contain
            fenced code blocks
        args_usage: Description of positional arguments (e.g., "[FILE...]")
        description: Longer description
        flags: Flags attached to this command
        commands: Child commands
        hidden: Whether the command (and its subtree) is left out
        category: Category label
        authors: Application authors (root only)
        copyright: Copyright notice (root only)
    """

    name: str
    aliases: list[str] = field(default_factory=list)
    usage: str = ""
    usage_text: str = ""
    args_usage: str = ""
    description: str = ""
    flags: list[Flag] = field(default_factory=list)
    commands: list["Command"] = field(default_factory=list)
    hidden: bool = False
    category: str = ""
    authors: list[Author] = field(default_factory=list)
    copyright: str = ""

    def names(self) -> list[str]:
        """Return the command name followed by its aliases."""
        return [self.name, *self.aliases]

    def visible_flags(self) -> list[Flag]:
        """Return flags that are not hidden, in declaration order."""
        return [flag for flag in self.flags if not flag.hidden]

    def visible_commands(self) -> list["Command"]:
        """Return child commands that are not hidden, in declaration order."""
        return [command for command in self.commands if not command.hidden]


__all__ = [
    "Author",
    "Command",
    "Flag",
    "FlagType",
]
