"""Error action enum for handling unreadable directories during a scan."""

from enum import Enum


class ErrorAction(str, Enum):
    """Action to take when a directory cannot be enumerated during a scan.

    Values:
        IGNORE: Skip the subtree silently; the error is still recorded on the scanner
        WARN: Skip the subtree and print a warning to stderr (default behavior)
        RAISE: Raise DirectoryUnreadableError immediately, aborting the scan
    """

    IGNORE = "ignore"
    WARN = "warn"
    RAISE = "raise"
