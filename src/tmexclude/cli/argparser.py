"""Command-line argument parsing for timemachine-exclude.

This module defines the command-line interface for timemachine-exclude,
handling argument parsing and validation.
"""

import argparse
import shlex
from pathlib import Path

from tmexclude import __version__
from tmexclude.applicator import DEFAULT_COMMAND
from tmexclude.config import DEFAULT_CONFIG_FILE
from tmexclude.store import DEFAULT_EXCLUSION_FILE


def _scan_options() -> argparse.ArgumentParser:
    """Options shared by the commands that scan the configured roots."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-P",
        "--unreadable-action",
        choices=["ignore", "warn", "fail"],
        default="warn",
        help=(
            "How to handle directories that cannot be read during the scan (default: warn). "
            "'ignore' and 'warn' skip the directory and keep scanning; 'fail' stops immediately."
        ),
    )
    parent.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        help="Follow symbolic links to directories while scanning. By default symlinks are not followed.",
    )
    parent.add_argument(
        "--patterns-file",
        dest="patterns_files",
        type=Path,
        action="append",
        metavar="FILE",
        help=(
            "Read additional patterns from FILE, one per line; blank lines and lines starting with '#' "
            "are ignored. May be given more than once."
        ),
    )
    return parent


def _apply_options() -> argparse.ArgumentParser:
    """Options shared by the commands that apply the exclusion list."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--command",
        dest="exclusion_command",
        metavar="CMD",
        default=shlex.join(DEFAULT_COMMAND),
        help=(
            "Command used to exclude a path from backups; the path is appended as the final argument "
            "(default: %(default)s)."
        ),
    )
    return parent


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        An ArgumentParser instance configured with timemachine-exclude's commands and options.
    """
    description = """
    timemachine-exclude: keep build artifacts and dependency caches out of Time Machine backups.

    The tool searches a set of parent directories for directories whose names match
    configurable patterns (node_modules, dist, build, *.cache, ...), records them in an
    exclusion list, and passes each recorded path to 'tmutil addexclusion'.

    Matching directories are not searched any further: excluding a directory already
    covers everything below it.
    """

    epilog = """
    Examples:
      # Choose parent directories and patterns (interactive)
      timemachine-exclude init

      # Find matching directories and record them in the exclusion list
      timemachine-exclude populate

      # Exclude every recorded directory from Time Machine
      timemachine-exclude apply

      # Both of the above
      timemachine-exclude update

      # Show the recorded directories, as a flat list or as a tree
      timemachine-exclude list
      timemachine-exclude list --tree

      # Add patterns kept in a file to the configured ones
      timemachine-exclude populate --patterns-file ./tm-patterns.txt

      # Stop on the first unreadable directory instead of skipping it
      timemachine-exclude populate -P fail

      # Use a different configuration and exclusion list
      timemachine-exclude --config ./tm.json --exclusions ./tm.txt update

      # Display version information and exit
      timemachine-exclude -V
    """

    parser = argparse.ArgumentParser(
        prog="timemachine-exclude",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"timemachine-exclude {__version__}",
        help="Show the version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        default=DEFAULT_CONFIG_FILE,
        help="Configuration file (default: %(default)s).",
    )
    parser.add_argument(
        "--exclusions",
        type=Path,
        metavar="FILE",
        default=DEFAULT_EXCLUSION_FILE,
        help="Exclusion list file (default: %(default)s).",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    subparsers.add_parser(
        "init",
        help="Initialize timemachine-exclude with parent directories and patterns.",
        description="Interactively choose the parent directories to search and the patterns to exclude.",
    )
    subparsers.add_parser(
        "populate",
        parents=[_scan_options()],
        help="Find matching directories and record them in the exclusion list.",
        description="Search every configured parent directory and rewrite the exclusion list.",
    )
    subparsers.add_parser(
        "apply",
        parents=[_apply_options()],
        help="Apply the exclusion list to Time Machine.",
        description="Exclude every recorded directory that still exists from Time Machine backups.",
    )
    subparsers.add_parser(
        "update",
        parents=[_scan_options(), _apply_options()],
        help="Populate and apply exclusions.",
        description="Equivalent to 'populate' followed by 'apply'.",
    )
    list_parser = subparsers.add_parser(
        "list",
        help="List the recorded exclusions.",
        description="Print every directory recorded in the exclusion list.",
    )
    list_parser.add_argument(
        "-t",
        "--tree",
        action="store_true",
        help="Show the recorded directories as a tree below their common parent directory.",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle, and splits the
    --command string into an argument list stored as ``exclusion_argv``.

    Args:
        args: Parsed command-line arguments.

    Raises:
        ValueError: If any arguments fail validation.
    """
    if getattr(args, "exclusion_command", None) is not None:
        exclusion_argv = shlex.split(args.exclusion_command)
        if not exclusion_argv:
            raise ValueError("--command must not be empty")
        args.exclusion_argv = exclusion_argv
