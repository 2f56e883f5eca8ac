"""Time Machine exclusion management for development directories.

This package finds build artifacts and dependency caches (``node_modules``,
``dist``, ``build``, ...) below a set of root directories, records them in an
exclusion list, and hands each recorded path to ``tmutil addexclusion`` so
that backups skip them.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("timemachine-exclude")
except PackageNotFoundError:
    __version__ = "unknown"
