"""Directory-tree scanning with pattern-based pruning.

The scanner walks a root directory depth-first and reports every directory whose name
matches an exclusion pattern, without descending into the directories it reports.
"""

from .error_action import ErrorAction
from .tree_scanner import TreeScanner, scan

__all__ = [
    "ErrorAction",
    "TreeScanner",
    "scan",
]
