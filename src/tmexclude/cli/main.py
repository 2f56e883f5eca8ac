"""Command-line interface for timemachine-exclude.

This module provides the entry point for the ``timemachine-exclude`` command. It parses the
command line, dispatches to the selected command, and turns errors into a one-line
diagnostic on stderr plus an exit status.

Exit Codes:
    0: Successful completion
    1: Runtime error, missing prerequisite (configuration or exclusion list), or at least
       one exclusion that could not be applied
    2: Command-line syntax error, or no command given
    126: Unreadable directory while scanning with -P fail
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (e.g. output piped to `head`)

Example:
    # One-time setup
    $ timemachine-exclude init

    # Rescan and apply
    $ timemachine-exclude update
"""

import os
import sys
from typing import Optional, Sequence

from tmexclude.cli.argparser import create_parser, validate_args
from tmexclude.cli.commands import run_apply, run_init, run_list, run_populate, run_update
from tmexclude.exceptions import DirectoryUnreadableError
from tmexclude.prompts import Prompter, TerminalPrompter
from tmexclude.text import printable

COMMANDS = {
    "populate": run_populate,
    "apply": run_apply,
    "update": run_update,
    "list": run_list,
}


def _silence_stdout() -> None:
    """Point stdout at the null device so the interpreter's final flush cannot fail again."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def run(argv: Optional[Sequence[str]] = None, prompter: Optional[Prompter] = None) -> int:
    """Run timemachine-exclude with the given arguments and return the exit status.

    Args:
        argv: Command-line arguments, excluding the program name. Defaults to sys.argv[1:].
        prompter: Input provider for ``init``. Defaults to the terminal.

    Returns:
        The process exit status.
    """
    parser = create_parser()
    # argparse calls sys.exit(2) for argument errors or sys.exit(0) for --version
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stderr)
        return 2

    try:
        validate_args(args)
        if args.command == "init":
            return run_init(args, prompter if prompter is not None else TerminalPrompter())
        return COMMANDS[args.command](args)
    except DirectoryUnreadableError as e:
        print(f"Error: {printable(str(e))}", file=sys.stderr)
        return 126
    except KeyboardInterrupt:
        print("\nError: Interrupted.", file=sys.stderr)
        return 130
    except BrokenPipeError:
        _silence_stdout()
        return 141
    except Exception as e:
        print(f"Error: {printable(str(e))}", file=sys.stderr)
        return 1


def main() -> None:
    """Main entry point for the timemachine-exclude command-line interface."""
    sys.exit(run())


if __name__ == "__main__":
    main()
