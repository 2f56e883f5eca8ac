"""Implementations of the timemachine-exclude commands.

Each command composes the configuration, scanner, store and applicator components and
reports progress on stdout. Warnings go to stderr. Every command returns the process exit
status; fatal problems are raised and turned into exit codes by ``tmexclude.cli.main``.
"""

import argparse
import os
import sys
import time
from typing import List, Optional, Sequence

from humanfriendly import format_timespan
from humanfriendly.text import pluralize

from tmexclude.applicator import ApplyOutcome, ApplyReport, ApplyStatus, ExclusionApplicator
from tmexclude.config import ConfigStore, Configuration
from tmexclude.pattern_rules import NamePatternRules
from tmexclude.prompts import Prompter
from tmexclude.scanner import ErrorAction, TreeScanner
from tmexclude.setup_wizard import run_setup
from tmexclude.store import ExclusionStore, is_recordable
from tmexclude.text import printable
from tmexclude.tree_view import stream_tree
from tmexclude.types import PathType

# Map CLI unreadable-directory actions to the scanner's enum
UNREADABLE_ACTIONS = {
    "ignore": ErrorAction.IGNORE,
    "warn": ErrorAction.WARN,
    "fail": ErrorAction.RAISE,
}


def populate(
    config: Configuration,
    store: ExclusionStore,
    error_action: ErrorAction = ErrorAction.WARN,
    follow_symlinks: bool = False,
    patterns_files: Optional[Sequence[PathType]] = None,
) -> List[str]:
    """Scan every configured root in order and rewrite the exclusion list.

    Roots that do not exist are skipped with a warning, as are matches whose path contains a
    line break and so cannot be stored. The list is only written once every root has been
    scanned, so an aborted scan leaves the previous list untouched.

    Args:
        config: Roots to scan and patterns to match.
        store: Destination of the exclusion list.
        error_action: How to handle unreadable directories.
        follow_symlinks: Whether to traverse symbolic links to directories.
        patterns_files: Extra pattern files, one pattern per line, added to the configured patterns.

    Returns:
        The recorded paths, in the order they were written.
    """
    print("Populating exclusions...")
    rules = NamePatternRules(config.patterns)
    if patterns_files:
        rules.load_rules(patterns_files)
    started = time.monotonic()

    entries: List[str] = []
    directory_count = 0
    unreadable_count = 0
    for root in config.roots:
        if not os.path.isdir(root):
            print(f"Warning: Directory not found: {printable(root)}. Skipping.", file=sys.stderr)
            continue

        print(f"Searching in: {printable(root)}")
        scanner = TreeScanner(root, rules, error_action=error_action, follow_symlinks=follow_symlinks)
        for excluded_dir in scanner.iter_matches():
            if not is_recordable(excluded_dir):
                print(f"Warning: Path contains a line break: {excluded_dir!r}. Skipping.", file=sys.stderr)
                continue
            print(f"Excluded: {printable(excluded_dir)}")
            entries.append(excluded_dir)
        directory_count += scanner.directory_count
        unreadable_count += len(scanner.errors)

    store.write(entries)

    elapsed = time.monotonic() - started
    print(
        f"\nFound {pluralize(len(entries), 'excluded directory', 'excluded directories')} "
        f"after scanning {pluralize(directory_count, 'directory', 'directories')} in {format_timespan(elapsed)}."
    )
    if unreadable_count:
        unreadable = pluralize(unreadable_count, "directory", "directories")
        print(f"Warning: {unreadable} could not be read.", file=sys.stderr)
    print(f"All excluded directories have been listed in {printable(str(store.path))}")
    return entries


def _print_outcome(outcome: ApplyOutcome) -> None:
    if outcome.status == ApplyStatus.APPLIED:
        print(f"Added exclusion: {printable(outcome.path)}")
    elif outcome.status == ApplyStatus.MISSING:
        print(f"Path does not exist: {printable(outcome.path)}. Skipping.")
    else:
        print(f"Warning: Failed to exclude {printable(outcome.path)}: {printable(outcome.detail)}", file=sys.stderr)


def apply_exclusions(store: ExclusionStore, command: Sequence[str]) -> ApplyReport:
    """Apply every recorded exclusion and print a per-entry line and a summary.

    Raises:
        ExclusionListMissingError: If the exclusion list has not been generated yet.
    """
    entries = store.read()
    print("Applying exclusions to Time Machine...")
    report = ExclusionApplicator(command).apply(entries, on_outcome=_print_outcome)
    print(
        f"\nApplied {pluralize(report.applied, 'exclusion')}, "
        f"skipped {pluralize(report.skipped, 'missing path')}, "
        f"{report.failed} failed."
    )
    return report


def _report_status(report: ApplyReport) -> int:
    if report.ok:
        print("All exclusions have been applied to Time Machine.")
        return 0
    print(f"Error: {pluralize(report.failed, 'exclusion')} could not be applied.", file=sys.stderr)
    return 1


def run_init(args: argparse.Namespace, prompter: Prompter) -> int:
    run_setup(prompter, ConfigStore(args.config))
    return 0


def run_populate(args: argparse.Namespace) -> int:
    config = ConfigStore(args.config).load()
    populate(
        config,
        ExclusionStore(args.exclusions),
        error_action=UNREADABLE_ACTIONS[args.unreadable_action],
        follow_symlinks=args.follow_symlinks,
        patterns_files=args.patterns_files,
    )
    return 0


def run_apply(args: argparse.Namespace) -> int:
    report = apply_exclusions(ExclusionStore(args.exclusions), args.exclusion_argv)
    return _report_status(report)


def run_update(args: argparse.Namespace) -> int:
    run_populate(args)
    print()
    return run_apply(args)


def run_list(args: argparse.Namespace) -> int:
    entries = ExclusionStore(args.exclusions).read()
    lines = stream_tree(entries) if args.tree else iter(entries)
    for line in lines:
        print(printable(line))
    return 0
