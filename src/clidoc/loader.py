"""Command tree loading from YAML definition files.

A definition describes the application as nested mappings:

    name: greet
    usage: Say hello
    authors:
      - name: Ada
        email: ada@example.com
    flags:
      - names: [name, n]
        type: string
        default: world
        usage: Who to greet
        env_vars: [GREET_NAME]
    commands:
      - name: wave
        aliases: [w]
        usage: Wave a hand

Philosophy:
- Simple YAML loading
- Standard library + PyYAML
- Errors point at the offending entry (e.g., "commands[0].flags[1]")
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from .exceptions import DefinitionError
from .models import Author, Command, Flag, FlagType

logger = logging.getLogger(__name__)

_COMMAND_KEYS = {
    "name",
    "aliases",
    "usage",
    "usage_text",
    "args_usage",
    "description",
    "flags",
    "commands",
    "hidden",
    "category",
    "authors",
    "copyright",
}
_FLAG_KEYS = {
    "name",
    "names",
    "aliases",
    "type",
    "default",
    "default_text",
    "usage",
    "env_vars",
    "category",
    "required",
    "hidden",
    "deprecated",
}


def load_definition(file_path: str | Path) -> Command:
    """Load a command tree from a YAML file.

    Args:
        file_path: Path to the definition file

    Returns:
        Root Command

    Raises:
        DefinitionError: If the file is missing, is not valid YAML, or does
            not describe a command tree
    """
    path = Path(file_path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise DefinitionError(f"Definition file not found: {path}") from e
    except yaml.YAMLError as e:
        raise DefinitionError(f"Invalid YAML in {path}: {e}") from e

    root = parse_definition(data)
    logger.debug(f"Loaded definition for {root.name!r} from {path}")
    return root


def parse_definition(data: Any) -> Command:
    """Build a command tree from already-parsed definition data."""
    return _parse_command(data, "root")


def _require_mapping(data: Any, where: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DefinitionError(f"{where}: expected a mapping, got {type(data).__name__}")
    return data


def _string(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DefinitionError(f"{where}.{key}: expected a string")
    return value


def _string_list(data: dict[str, Any], key: str, where: str) -> list[str]:
    value = data.get(key) or []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise DefinitionError(f"{where}.{key}: expected a list of strings")
    return list(value)


def _bool(data: dict[str, Any], key: str, where: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise DefinitionError(f"{where}.{key}: expected true or false")
    return value


def _check_keys(data: dict[str, Any], allowed: set[str], where: str) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise DefinitionError(f"{where}: unknown key(s): {', '.join(unknown)}")


def _parse_command(data: Any, where: str) -> Command:
    data = _require_mapping(data, where)
    _check_keys(data, _COMMAND_KEYS, where)

    name = _string(data, "name", where)
    if not name.strip():
        raise DefinitionError(f"{where}.name: command name is required")

    flags = data.get("flags") or []
    commands = data.get("commands") or []
    authors = data.get("authors") or []
    if isinstance(authors, (str, dict)):
        authors = [authors]
    if not isinstance(flags, list):
        raise DefinitionError(f"{where}.flags: expected a list")
    if not isinstance(commands, list):
        raise DefinitionError(f"{where}.commands: expected a list")
    if not isinstance(authors, list):
        raise DefinitionError(f"{where}.authors: expected a list")

    return Command(
        name=name,
        aliases=_string_list(data, "aliases", where),
        usage=_string(data, "usage", where),
        usage_text=_string(data, "usage_text", where),
        args_usage=_string(data, "args_usage", where),
        description=_string(data, "description", where),
        flags=[_parse_flag(item, f"{where}.flags[{i}]") for i, item in enumerate(flags)],
        commands=[
            _parse_command(item, f"{where}.commands[{i}]") for i, item in enumerate(commands)
        ],
        hidden=_bool(data, "hidden", where),
        category=_string(data, "category", where),
        authors=[
            _parse_author(item, f"{where}.authors[{i}]")
            for i, item in enumerate(authors)
        ],
        copyright=_string(data, "copyright", where),
    )


def _parse_flag(data: Any, where: str) -> Flag:
    data = _require_mapping(data, where)
    _check_keys(data, _FLAG_KEYS, where)

    if "names" in data:
        names = _string_list(data, "names", where)
    else:
        names = [_string(data, "name", where), *_string_list(data, "aliases", where)]

    flag_type = data.get("type", FlagType.STRING.value)
    try:
        flag_type = FlagType(flag_type)
    except ValueError as e:
        choices = ", ".join(t.value for t in FlagType)
        raise DefinitionError(
            f"{where}.type: unknown flag type {flag_type!r} (expected one of {choices})"
        ) from e

    try:
        return Flag(
            names=names,
            type=flag_type,
            default=data.get("default"),
            default_text=_string(data, "default_text", where),
            usage=_string(data, "usage", where),
            env_vars=_string_list(data, "env_vars", where),
            category=_string(data, "category", where),
            required=_bool(data, "required", where),
            hidden=_bool(data, "hidden", where),
            deprecated=_bool(data, "deprecated", where),
        )
    except ValueError as e:
        raise DefinitionError(f"{where}: {e}") from e


def _parse_author(data: Any, where: str) -> Author:
    if isinstance(data, str):
        return Author(name=data)
    data = _require_mapping(data, where)
    _check_keys(data, {"name", "email"}, where)
    return Author(name=_string(data, "name", where), email=_string(data, "email", where))


__all__ = ["load_definition", "parse_definition"]
