"""Render-ready projection of a command tree.

build_view() walks the command tree once and produces the structure every
template consumes. Free text is normalized and flags are formatted up front
so the templates only lay things out.

Rules:
- Hidden commands (with their subtrees) and hidden flags are dropped
- Declaration order is kept everywhere, nothing is sorted
- Flags are grouped by category in order of first appearance, the
  uncategorized group first
"""

import logging
from dataclasses import dataclass, field

from .models import Command, Flag
from .text import (
    collapse_lines,
    format_flag_name,
    normalize_usage_text,
    prepare_multiline_string,
    prepare_usage,
    prepare_usage_text,
    split_lines,
)

logger = logging.getLogger(__name__)


@dataclass
class FlagView:
    """Display data for one visible flag."""

    name: str
    aliases: list[str]
    names: list[str]
    usage: str
    takes_value: bool
    default: str
    env_vars: list[str]
    category: str
    required: bool
    deprecated: bool
    display: str
    synopsis: str


@dataclass
class FlagGroup:
    """Flags sharing a category label."""

    category: str
    flags: list[FlagView] = field(default_factory=list)


@dataclass
class CommandView:
    """Display data for one visible command."""

    name: str
    full_name: str
    aliases: list[str]
    names: list[str]
    usage: str
    usage_block: str
    usage_text: str
    usage_text_lines: list[str]
    args_usage: str
    description: str
    category: str
    level: int
    flags: list[FlagView]
    flag_groups: list[FlagGroup]
    commands: list["CommandView"] = field(default_factory=list)


@dataclass
class DocView:
    """Display data for the whole application."""

    name: str
    app_path: str
    section: int
    usage: str
    usage_text: str
    usage_text_lines: list[str]
    args_usage: str
    description: str
    flags: list[FlagView]
    flag_groups: list[FlagGroup]
    synopsis_args: list[str]
    commands: list[CommandView]
    all_commands: list[CommandView]
    authors: list[str]
    copyright: str


def flag_display(flag: Flag) -> str:
    """Format a flag as a narrative Markdown line.

    Example:
        '**--name, -n**="": who to greet (default: world)'
    """
    names = ", ".join(format_flag_name(name) for name in flag.names if name.strip())
    line = f"**{names}**"
    if flag.takes_value:
        line += '=""'

    description = flag.usage
    if flag.takes_value:
        default = flag.default_display()
        if default:
            description += f" (default: {default})"
    if flag.env_vars:
        description += " [" + ", ".join(f"${env}" for env in flag.env_vars) + "]"
    if flag.required:
        description += " (required)"
    if flag.deprecated:
        description += " (deprecated)"

    return f"{line}: {description}"


def flag_synopsis(flag: Flag) -> str:
    """Format a flag for the synopsis block (e.g., "[--name|-n]=[value]")."""
    names = "|".join(format_flag_name(name) for name in flag.names if name.strip())
    synopsis = f"[{names}]"
    if flag.takes_value:
        synopsis += "=[value]"
    return synopsis


def build_flag_view(flag: Flag) -> FlagView:
    """Project a single flag."""
    names = [format_flag_name(name) for name in flag.names if name.strip()]
    return FlagView(
        name=names[0],
        aliases=names[1:],
        names=names,
        usage=prepare_multiline_string(flag.usage),
        takes_value=flag.takes_value,
        default=flag.default_display(),
        env_vars=list(flag.env_vars),
        category=flag.category,
        required=flag.required,
        deprecated=flag.deprecated,
        display=flag_display(flag),
        synopsis=flag_synopsis(flag),
    )


def group_flags(flags: list[Flag]) -> list[FlagGroup]:
    """Group visible flags by category, keeping relative order."""
    groups: dict[str, FlagGroup] = {"": FlagGroup(category="")}
    for flag in flags:
        if flag.hidden:
            continue
        group = groups.setdefault(flag.category, FlagGroup(category=flag.category))
        group.flags.append(build_flag_view(flag))

    return [group for group in groups.values() if group.flags]


def _ordered_flags(groups: list[FlagGroup]) -> list[FlagView]:
    return [flag for group in groups for flag in group.flags]


def build_command_view(command: Command, level: int, parent_path: str) -> CommandView:
    """Project a single command without its children."""
    usage_text = prepare_usage_text(command)
    groups = group_flags(command.flags)
    return CommandView(
        name=command.name,
        full_name=f"{parent_path} {command.name}".strip(),
        aliases=list(command.aliases),
        names=command.names(),
        usage=prepare_multiline_string(command.usage),
        usage_block=prepare_usage(command, usage_text),
        usage_text=usage_text,
        usage_text_lines=split_lines(command.usage_text),
        args_usage=prepare_multiline_string(command.args_usage),
        description=prepare_multiline_string(command.description),
        category=command.category,
        level=level,
        flags=_ordered_flags(groups),
        flag_groups=groups,
    )


def build_view(root: Command, app_path: str | None = None, section: int = 0) -> DocView:
    """Build the render view for an application.

    The command tree is walked depth-first with an explicit stack, so
    deeply nested trees do not hit the interpreter's recursion limit.

    Args:
        root: Root command describing the application
        app_path: Name used in usage lines and headings (default: root name)
        section: Man page section number, 0 for plain Markdown

    Returns:
        DocView with nested `commands` and depth-first `all_commands`
    """
    top_level: list[CommandView] = []
    all_commands: list[CommandView] = []

    stack: list[tuple[Command, int, str, list[CommandView]]] = [
        (command, 0, "", top_level) for command in reversed(root.visible_commands())
    ]
    while stack:
        command, level, parent_path, siblings = stack.pop()
        view = build_command_view(command, level, parent_path)
        siblings.append(view)
        all_commands.append(view)
        for child in reversed(command.visible_commands()):
            stack.append((child, level + 1, view.full_name, view.commands))

    groups = group_flags(root.flags)
    flags = _ordered_flags(groups)
    logger.debug(
        f"Built view for {root.name!r}: {len(all_commands)} commands, {len(flags)} global flags"
    )

    return DocView(
        name=root.name,
        app_path=app_path or root.name or "app",
        section=section,
        usage=collapse_lines(root.usage),
        usage_text=normalize_usage_text(root.usage_text),
        usage_text_lines=split_lines(root.usage_text),
        args_usage=prepare_multiline_string(root.args_usage),
        description=root.description,
        flags=flags,
        flag_groups=groups,
        synopsis_args=[flag.synopsis for flag in flags],
        commands=top_level,
        all_commands=all_commands,
        authors=[str(author) for author in root.authors],
        copyright=root.copyright,
    )


__all__ = [
    "CommandView",
    "DocView",
    "FlagGroup",
    "FlagView",
    "build_command_view",
    "build_flag_view",
    "build_view",
    "flag_display",
    "flag_synopsis",
    "group_flags",
]
