"""Configuration management module.

Defaults for the clidoc CLI are read from TOML, looked up in this order:

1. An explicit path (--config)
2. .clidoc.toml in the working directory
3. The [tool.clidoc] table of pyproject.toml in the working directory

Example .clidoc.toml:

    app_path = "greet"
    section = 1
    start_tag = "<!--GENERATED:CLI_DOCS-->"
    end_tag = "<!--/GENERATED:CLI_DOCS-->"
    annotate = true
"""

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Python 3.11+ ships the same parser
    try:
        import tomllib as tomli  # type: ignore[import,no-redef]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

from .patcher import DEFAULT_END_TAG, DEFAULT_START_TAG
from .renderer import DEFAULT_MAN_SECTION

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration operations fail."""

    pass


@dataclass
class DocsConfig:
    """clidoc configuration data."""

    app_path: str = ""
    section: int = DEFAULT_MAN_SECTION
    start_tag: str = DEFAULT_START_TAG
    end_tag: str = DEFAULT_END_TAG
    annotate: bool = True

    @property
    def tags(self) -> tuple[str, str]:
        """Convenience property for the delimiter pair."""
        return self.start_tag, self.end_tag

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocsConfig":
        """Create from dictionary.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type
        """
        unknown = sorted(set(data) - set(cls.__dataclass_fields__))
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

        config = cls(
            app_path=data.get("app_path", ""),
            section=data.get("section", DEFAULT_MAN_SECTION),
            start_tag=data.get("start_tag", DEFAULT_START_TAG),
            end_tag=data.get("end_tag", DEFAULT_END_TAG),
            annotate=data.get("annotate", True),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate field values.

        Raises:
            ConfigError: If validation fails
        """
        if not isinstance(self.app_path, str):
            raise ConfigError("app_path must be a string")

        if isinstance(self.section, bool) or not isinstance(self.section, int) or self.section < 1:
            raise ConfigError(f"section must be an integer >= 1, got {self.section!r}")

        for key in ("start_tag", "end_tag"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"{key} must be a non-empty string")

        if self.start_tag == self.end_tag:
            raise ConfigError("start_tag and end_tag must differ")

        if not isinstance(self.annotate, bool):
            raise ConfigError("annotate must be true or false")


class ConfigManager:
    """Locate and load clidoc configuration."""

    CONFIG_FILE_NAME = ".clidoc.toml"
    PYPROJECT_FILE_NAME = "pyproject.toml"

    @classmethod
    def find_config(cls, directory: Path | None = None) -> Path | None:
        """Return the first configuration file found in a directory."""
        directory = directory or Path.cwd()

        candidate = directory / cls.CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate

        pyproject = directory / cls.PYPROJECT_FILE_NAME
        if pyproject.is_file():
            return pyproject

        return None

    @classmethod
    def load_config(cls, custom_path: str | None = None, directory: Path | None = None) -> DocsConfig:
        """Load configuration from file.

        Args:
            custom_path: Explicit config file path (optional)
            directory: Directory searched when no path is given (default: cwd)

        Returns:
            DocsConfig object, defaults if no file exists

        Raises:
            ConfigError: If an explicit path is missing or loading fails
        """
        if custom_path:
            config_path = Path(custom_path).expanduser()
            if not config_path.is_file():
                raise ConfigError(f"Config file not found: {config_path}")
        else:
            config_path = cls.find_config(directory)
            if config_path is None:
                logger.debug("Config file not found, using defaults")
                return DocsConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}") from e

        if config_path.name == cls.PYPROJECT_FILE_NAME:
            data = data.get("tool", {}).get("clidoc", {})

        logger.debug(f"Loaded config from: {config_path}")
        return DocsConfig.from_dict(data)


__all__ = ["ConfigError", "ConfigManager", "DocsConfig"]
