"""Command tree extraction from Click applications.

This module inspects Click command objects at runtime and builds the
clidoc command tree from them:

- click.Option -> Flag (bool flags, counts, multiple values, env vars,
  defaults only where Click shows them in --help)
- click.Argument -> the command's args usage ("SRC [DEST]...")
- help / short_help -> usage and description
- epilog -> usage text
- click.Group children -> child commands, in registration order

Philosophy:
- Runtime inspection of Click commands
- Standard library + Click only
"""

import importlib
import inspect
import logging

import click

from .exceptions import DefinitionError
from .models import Command, Flag, FlagType

logger = logging.getLogger(__name__)

_LIST_TYPES = {
    FlagType.STRING: FlagType.STRING_LIST,
    FlagType.INT: FlagType.INT_LIST,
    FlagType.FLOAT: FlagType.FLOAT_LIST,
}


def load_click_object(spec: str) -> click.Command:
    """Import a Click command from a "module:attribute" string.

    Args:
        spec: Import path such as "mypkg.cli:main"

    Returns:
        The Click command object

    Raises:
        DefinitionError: If the module or attribute cannot be loaded, or is
            not a Click command
    """
    module_path, _, attribute = spec.partition(":")
    if not module_path or not attribute:
        raise DefinitionError(f"Expected 'module:attribute', got {spec!r}")

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise DefinitionError(f"Cannot import module {module_path!r}: {e}") from e

    obj = module
    for part in attribute.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            raise DefinitionError(f"Module {module_path!r} has no attribute {attribute!r}")

    if not isinstance(obj, click.Command):
        raise DefinitionError(f"{spec} is not a Click command")

    return obj


def from_click(command: click.Command, name: str | None = None) -> Command:
    """Build a command tree from a Click command or group.

    Args:
        command: Click command or group
        name: Name for the root command (default: command.name, then "cli")

    Returns:
        Root Command
    """
    show_default = _context_show_default(command, None)
    root = _convert_command(command, name or command.name or "cli", show_default)

    stack = [(command, root, show_default)]
    while stack:
        click_command, node, parent_show_default = stack.pop()
        for sub_name, sub_command in _subcommands(click_command):
            sub_show_default = _context_show_default(sub_command, parent_show_default)
            child = _convert_command(sub_command, sub_name, sub_show_default)
            node.commands.append(child)
            stack.append((sub_command, child, sub_show_default))

    logger.debug(f"Extracted command tree for {root.name!r} from Click")
    return root


def _subcommands(command: click.Command) -> list[tuple[str, click.Command]]:
    if not isinstance(command, click.Group):
        return []
    # command.commands keeps registration order; list_commands() sorts
    return list(command.commands.items())


def _context_show_default(command: click.Command, inherited: bool | None) -> bool | None:
    # Click contexts inherit show_default from the parent unless overridden
    return command.context_settings.get("show_default", inherited)


def _convert_command(command: click.Command, name: str, show_default: bool | None) -> Command:
    usage, description = _split_help(command.help or "")
    if command.short_help:
        usage = command.short_help

    return Command(
        name=name,
        usage=usage,
        usage_text=inspect.cleandoc(command.epilog) if command.epilog else "",
        args_usage=_args_usage(command),
        description=description,
        flags=[
            _convert_option(param, show_default)
            for param in command.params
            if isinstance(param, click.Option)
        ],
        hidden=command.hidden,
    )


def _split_help(help_text: str) -> tuple[str, str]:
    """Split help into a first-line summary and the remaining paragraphs."""
    cleaned = inspect.cleandoc(help_text)
    # Click's "\b" marks a paragraph that must not be rewrapped
    lines = [line for line in cleaned.split("\n") if line.strip() != "\b"]
    if not lines:
        return "", ""

    summary = lines[0].strip()
    rest = "\n".join(lines[1:]).strip("\n")
    return summary, rest


def _args_usage(command: click.Command) -> str:
    pieces = []
    for param in command.params:
        if not isinstance(param, click.Argument):
            continue
        metavar = (param.metavar or param.name or "").upper()
        if param.nargs == -1:
            metavar += "..."
        if not param.required:
            metavar = f"[{metavar}]"
        pieces.append(metavar)
    return " ".join(pieces)


def _convert_option(option: click.Option, context_show_default: bool | None = None) -> Flag:
    names = [opt.lstrip("-") for opt in option.opts]
    # Long names first so the primary name is descriptive
    names = [n for n in names if len(n) > 1] + [n for n in names if len(n) == 1]

    flag_type = _flag_type(option)
    default, default_text = _published_default(option, context_show_default)
    env_vars = option.envvar or []
    if isinstance(env_vars, str):
        env_vars = [env_vars]

    return Flag(
        names=names,
        type=flag_type,
        default=default,
        default_text=default_text,
        usage=option.help or "",
        env_vars=list(env_vars),
        required=option.required,
        hidden=option.hidden,
        deprecated=bool(getattr(option, "deprecated", False)),
    )


def _flag_type(option: click.Option) -> FlagType:
    if option.is_flag and not option.count:
        return FlagType.BOOL
    if option.count:
        return FlagType.INT

    param_type = option.type
    if isinstance(param_type, click.types.IntParamType):
        base = FlagType.INT
    elif isinstance(param_type, click.types.FloatParamType):
        base = FlagType.FLOAT
    elif isinstance(param_type, (click.Path, click.File)):
        base = FlagType.PATH
    elif isinstance(param_type, click.DateTime):
        base = FlagType.TIMESTAMP
    elif isinstance(param_type, click.types.BoolParamType):
        base = FlagType.BOOL
    else:
        base = FlagType.STRING

    if option.multiple or option.nargs == -1:
        return _LIST_TYPES.get(base, FlagType.STRING_LIST)
    return base


def _published_default(option: click.Option, context_show_default: bool | None) -> tuple:
    """Return the (default, default_text) pair Click would show in --help.

    Defaults are only documented where Click shows them: show_default on
    the option, or else on the command's context settings. A string
    show_default replaces the value.
    """
    show_default = option.show_default
    if show_default is None:
        show_default = context_show_default

    if isinstance(show_default, str):
        return None, show_default
    if show_default:
        return _default_value(option), ""
    return None, ""


def _default_value(option: click.Option):
    default = option.default
    # Callables are resolved at runtime; Click sentinels mark "no default"
    if callable(default) or type(default).__module__.startswith("click"):
        return None
    return default


__all__ = ["from_click", "load_click_object"]
