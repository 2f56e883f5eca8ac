"""Directory-name pattern matching.

Patterns are either literal directory names (``node_modules``) or names containing the
wildcard ``*``, which stands for any run of zero or more characters (``*.cache``). Every
other character is literal, so ``.`` in ``*.cache`` only matches a dot. Matches are
case-sensitive and always cover the whole name.
"""

import re
from os import PathLike
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from pathspec.pattern import RegexPattern

from tmexclude.types import PathType

WILDCARD = "*"


def pattern_to_regex(pattern: str) -> str:
    """Translate a directory-name pattern into an anchored regular expression.

    Args:
        pattern: A literal name or a name containing ``*`` wildcards.

    Returns:
        A regular expression string that matches exactly the names the pattern describes.

    Raises:
        ValueError: If the pattern is empty.

    Example:
        >>> bool(re.match(pattern_to_regex("*.cache"), "pip.cache"))
        True
        >>> bool(re.match(pattern_to_regex("*.cache"), "pip_cache"))
        False
    """
    if not pattern:
        raise ValueError("Exclusion patterns must be non-empty strings")
    body = ".*".join(re.escape(part) for part in pattern.split(WILDCARD))
    return f"(?s)^{body}\\Z"


def compile_pattern(pattern: str) -> RegexPattern:
    """Compile a directory-name pattern into a pathspec pattern object."""
    return RegexPattern(pattern_to_regex(pattern))


def matches(name: str, pattern: str) -> bool:
    """Check whether a single directory name matches a single pattern.

    Example:
        >>> matches("dist", "dist")
        True
        >>> matches("distribution", "dist")
        False
        >>> matches("foo.cache", "*.cache")
        True
        >>> matches("foo.cache.bak", "*.cache")
        False
    """
    return compile_pattern(pattern).match_file(name) is not None


class NamePatternRules:
    """A set of directory-name patterns combined with logical OR.

    A name is excluded when it matches at least one pattern; checking stops at the first
    pattern that matches. Only base names are meant to be passed to ``exclude``; a full path
    will never match a literal pattern and is not split into components.

    Attributes:
        patterns (List[str]): The patterns in the order they were added.

    Example:
        >>> rules = NamePatternRules(["node_modules", "*.cache"])
        >>> rules.exclude("node_modules")
        True
        >>> rules.exclude("pip.cache")
        True
        >>> rules.exclude("src")
        False
    """

    def __init__(self, patterns: Optional[Iterable[str]] = None) -> None:
        self.patterns: List[str] = []
        self._compiled: List[RegexPattern] = []
        if patterns is not None:
            for pattern in patterns:
                self.add_rule(pattern)

    def __len__(self) -> int:
        return len(self.patterns)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.patterns!r})"

    def exclude(self, name: str) -> bool:
        """Return True if ``name`` matches any pattern in the set."""
        return any(compiled.match_file(name) is not None for compiled in self._compiled)

    def add_rule(self, rule: str) -> None:
        """Add a single pattern.

        Args:
            rule: A literal directory name or a ``*`` wildcard pattern.

        Raises:
            ValueError: If the pattern is empty or not a string.
        """
        if not isinstance(rule, str):
            raise ValueError(f"Exclusion patterns must be strings, got {type(rule).__name__}")
        compiled = compile_pattern(rule)
        self.patterns.append(rule)
        self._compiled.append(compiled)

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load patterns from one or more files, one pattern per line.

        Blank lines and lines starting with ``#`` are skipped. Surrounding whitespace is
        stripped from each pattern.

        Args:
            rules_files: Path to a file or sequence of paths containing patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Patterns file not found: {path}")

            with open(path, "r", encoding="utf-8") as f:
                for line in f.read().splitlines():
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue
                    self.add_rule(line)
