"""Depth-first directory scanner that prunes at matching directories.

This module provides the TreeScanner class, which walks a root directory and collects the
absolute paths of directories whose base names match a set of exclusion patterns. Matching
directories are reported but never entered, so nothing below an excluded directory is
listed or traversed.
"""

import os
import sys
from typing import Iterable, Iterator, List, Optional, Set, Union

from tmexclude.exceptions import DirectoryUnreadableError
from tmexclude.pattern_rules import NamePatternRules
from tmexclude.scanner.error_action import ErrorAction
from tmexclude.scanner.file_identifier import FileIdentifier
from tmexclude.text import printable
from tmexclude.types import PathType


class TreeScanner:
    """Scanner for directories matching exclusion patterns below a single root.

    Traversal is depth-first and pre-order. Entries are visited in the order the operating
    system enumerates them, and a match is reported before the siblings that follow it are
    examined. Files are ignored; only directories are matched against the patterns, and only
    by their base name.

    Symbolic Link Behavior:
        By default a symlink is never treated as a directory, even if its target is one, so it
        is neither matched nor followed. When follow_symlinks is True, symlinks to directories
        are matched and traversed like real directories, and a directory that is already being
        scanned higher up the current branch is not entered again.

    Error Handling:
        A directory that cannot be enumerated is skipped together with its subtree. What else
        happens depends on error_action:
        - WARN (default): print a warning to stderr and record the error
        - IGNORE: record the error silently
        - RAISE: raise DirectoryUnreadableError, aborting the scan

    Attributes:
        root_path (str): Absolute path of the directory to scan.
        rules (NamePatternRules): Patterns identifying directories to exclude.
        error_action (ErrorAction): How to handle unreadable directories.
        follow_symlinks (bool): Whether to traverse symbolic links to directories.
        directory_count (int): Directories enumerated by the last scan, including the root.
        match_count (int): Directories matched by the last scan.
        errors (List[DirectoryUnreadableError]): Unreadable directories from the last scan.

    Example:
        >>> scanner = TreeScanner("~/Projects", NamePatternRules(["node_modules"]))  # doctest: +SKIP
        >>> scanner.scan()  # doctest: +SKIP
        ['/home/u/Projects/app/node_modules']
    """

    def __init__(
        self,
        root_path: PathType,
        rules: NamePatternRules,
        error_action: ErrorAction = ErrorAction.WARN,
        follow_symlinks: bool = False,
    ) -> None:
        self.root_path = os.path.abspath(os.path.expanduser(os.fspath(root_path)))
        self.rules = rules
        self.error_action = error_action
        self.follow_symlinks = follow_symlinks
        self.directory_count = 0
        self.match_count = 0
        self.errors: List[DirectoryUnreadableError] = []

    def scan(self) -> List[str]:
        """Scan the root and return every matching directory in discovery order.

        Raises:
            FileNotFoundError: If the root path doesn't exist.
            NotADirectoryError: If the root path isn't a directory.
            DirectoryUnreadableError: If a directory cannot be read and error_action is RAISE.
        """
        return list(self.iter_matches())

    def iter_matches(self) -> Iterator[str]:
        """Lazily yield matching directories as they are discovered.

        Counters and the error list are reset when iteration starts.

        Raises:
            FileNotFoundError: If the root path doesn't exist.
            NotADirectoryError: If the root path isn't a directory.
            DirectoryUnreadableError: If a directory cannot be read and error_action is RAISE.
        """
        if not os.path.exists(self.root_path):
            raise FileNotFoundError(f"Root path does not exist: {self.root_path}")
        if not os.path.isdir(self.root_path):
            raise NotADirectoryError(f"Root path is not a directory: {self.root_path}")

        self.directory_count = 0
        self.match_count = 0
        self.errors = []

        yield from self._scan_directory(self.root_path, set())

    def _scan_directory(self, path: str, ancestors: Set[FileIdentifier]) -> Iterator[str]:
        """Recursively yield matches below ``path``."""
        file_id = FileIdentifier.of(path) if self.follow_symlinks else None
        if file_id is not None:
            if file_id in ancestors:
                # Symlink loop back into the current branch
                return
            ancestors.add(file_id)

        try:
            entries = self._list_directory(path)
            if entries is None:
                return

            for entry in entries:
                if not self._is_directory(entry):
                    continue
                if self.rules.exclude(entry.name):
                    self.match_count += 1
                    yield entry.path
                else:
                    yield from self._scan_directory(entry.path, ancestors)
        finally:
            # Only ancestors count as loops; the same directory may be reached again via another branch
            if file_id is not None:
                ancestors.discard(file_id)

    def _list_directory(self, path: str) -> Optional[List["os.DirEntry[str]"]]:
        """Enumerate ``path``, returning None if it cannot be read."""
        try:
            with os.scandir(path) as iterator:
                entries = list(iterator)
        except OSError as e:
            self._handle_unreadable(path, e)
            return None

        self.directory_count += 1
        return entries

    def _is_directory(self, entry: "os.DirEntry[str]") -> bool:
        try:
            return entry.is_dir(follow_symlinks=self.follow_symlinks)
        except OSError:
            return False

    def _handle_unreadable(self, path: str, cause: OSError) -> None:
        error = DirectoryUnreadableError(path, cause)
        if self.error_action == ErrorAction.RAISE:
            raise error from cause

        self.errors.append(error)
        if self.error_action == ErrorAction.WARN:
            print(f"Warning: {printable(str(error))}", file=sys.stderr)


def scan(
    root: PathType,
    patterns: Union[NamePatternRules, Iterable[str]],
    error_action: ErrorAction = ErrorAction.WARN,
    follow_symlinks: bool = False,
) -> List[str]:
    """Scan ``root`` for directories matching ``patterns``.

    Convenience wrapper around TreeScanner for callers that do not need the scan statistics.

    Args:
        root: Directory to scan.
        patterns: A NamePatternRules instance or an iterable of pattern strings.
        error_action: How to handle unreadable directories. Defaults to WARN.
        follow_symlinks: Whether to traverse symbolic links to directories. Defaults to False.

    Returns:
        Absolute paths of matching directories in pre-order discovery order.
    """
    rules = patterns if isinstance(patterns, NamePatternRules) else NamePatternRules(patterns)
    return TreeScanner(root, rules, error_action=error_action, follow_symlinks=follow_symlinks).scan()
