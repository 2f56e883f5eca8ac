"""Configuration model: the root directories to scan and the patterns to exclude.

The configuration is stored as JSON in the user's home directory. It is written once by
``timemachine-exclude init`` and read by every other command.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from tmexclude.exceptions import ConfigInvalidError, ConfigMissingError
from tmexclude.types import PathType

DEFAULT_CONFIG_FILE = Path("~/.tm_exclude_config")
DEFAULT_ROOT_NAMES = ("Projects", "Workspace", "Development")
DEFAULT_PATTERNS = ("node_modules", "dist", "build")


def normalize_root(root: str, home: Optional[PathType] = None) -> str:
    """Expand a leading ``~`` and make ``root`` absolute.

    Args:
        root: Directory path as entered by the user.
        home: Directory substituted for ``~``. Defaults to the current user's home.

    Example:
        >>> normalize_root("~/Projects", home="/home/u")
        '/home/u/Projects'
        >>> normalize_root("/srv/code/")
        '/srv/code'
    """
    if home is not None and (root == "~" or root.startswith("~/")):
        root = os.path.join(os.fspath(home), root[2:])
    return os.path.abspath(os.path.expanduser(root))


@dataclass(frozen=True)
class Configuration:
    """Roots to scan and patterns to exclude, both kept in the order given.

    Attributes:
        roots (Tuple[str, ...]): Absolute directory paths to scan.
        patterns (Tuple[str, ...]): Literal names or ``*`` wildcard patterns.
    """

    roots: Tuple[str, ...]
    patterns: Tuple[str, ...]

    def __post_init__(self) -> None:
        for root in self.roots:
            if not isinstance(root, str) or not root:
                raise ConfigInvalidError(f"Root directories must be non-empty strings, got {root!r}")
            if not os.path.isabs(root):
                raise ConfigInvalidError(f"Root directories must be absolute paths, got {root!r}")
        for pattern in self.patterns:
            if not isinstance(pattern, str) or not pattern:
                raise ConfigInvalidError(f"Exclusion patterns must be non-empty strings, got {pattern!r}")

    @classmethod
    def create(cls, roots: Iterable[str], patterns: Iterable[str], home: Optional[PathType] = None) -> "Configuration":
        """Build a configuration, normalizing each root to an absolute path."""
        return cls(tuple(normalize_root(root, home) for root in roots), tuple(patterns))

    def to_dict(self) -> Dict[str, List[str]]:
        return {"roots": list(self.roots), "patterns": list(self.patterns)}

    @classmethod
    def from_dict(cls, data: Any) -> "Configuration":
        """Build a configuration from its JSON representation.

        Raises:
            ConfigInvalidError: If ``data`` does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ConfigInvalidError("Configuration must be a JSON object")

        fields = {}
        for key in ("roots", "patterns"):
            value = data.get(key)
            if not isinstance(value, list):
                raise ConfigInvalidError(f"Configuration key '{key}' must be a list")
            fields[key] = tuple(value)
        return cls(**fields)


def defaults(home: Optional[PathType] = None) -> Configuration:
    """Return the fallback configuration used when setup receives no input.

    Example:
        >>> defaults(home="/home/u").roots
        ('/home/u/Projects', '/home/u/Workspace', '/home/u/Development')
        >>> defaults(home="/home/u").patterns
        ('node_modules', 'dist', 'build')
    """
    base = os.fspath(home) if home is not None else os.path.expanduser("~")
    return Configuration(
        roots=tuple(os.path.join(base, name) for name in DEFAULT_ROOT_NAMES),
        patterns=DEFAULT_PATTERNS,
    )


class ConfigStore:
    """Loads and saves the configuration file.

    Attributes:
        path (Path): Location of the configuration file, with ``~`` expanded.
    """

    def __init__(self, path: PathType = DEFAULT_CONFIG_FILE) -> None:
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Configuration:
        """Read the configuration.

        Raises:
            ConfigMissingError: If no configuration has been created.
            ConfigInvalidError: If the file is not valid JSON or has the wrong shape.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigMissingError(self.path) from None
        except json.JSONDecodeError as e:
            raise ConfigInvalidError(f"Configuration file {self.path} is not valid JSON: {e}") from e

        return Configuration.from_dict(data)

    def save(self, config: Configuration) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write("\n")
