"""Application of a stored exclusion list to the backup-exclusion command.

Each recorded path that still exists is handed to an external command (``tmutil addexclusion``
by default), one invocation per path. Failures are recorded per entry and never stop the
remaining entries from being processed.
"""

import os
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

from tmexclude.exceptions import ExternalCommandFailedError

DEFAULT_COMMAND = ("tmutil", "addexclusion")


class ApplyStatus(str, Enum):
    """Outcome of applying a single exclusion entry.

    Values:
        APPLIED: The exclusion command succeeded for the path
        MISSING: The path no longer exists, so the command was not run
        FAILED: The command could not be started or exited with a non-zero status
    """

    APPLIED = "applied"
    MISSING = "missing"
    FAILED = "failed"


@dataclass(frozen=True)
class ApplyOutcome:
    path: str
    status: ApplyStatus
    detail: str = ""


@dataclass
class ApplyReport:
    """Per-entry outcomes of an apply run, in processing order."""

    outcomes: List[ApplyOutcome] = field(default_factory=list)

    def _count(self, status: ApplyStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def applied(self) -> int:
        return self._count(ApplyStatus.APPLIED)

    @property
    def skipped(self) -> int:
        return self._count(ApplyStatus.MISSING)

    @property
    def failed(self) -> int:
        return self._count(ApplyStatus.FAILED)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def ok(self) -> bool:
        """True when no entry failed. Missing paths do not count as failures."""
        return self.failed == 0


def run_exclusion_command(command: Sequence[str], path: str) -> None:
    """Run the exclusion command for one path.

    The path is passed as a separate argument, never through a shell, so no quoting is needed.

    Args:
        command: Command and leading arguments, e.g. ``("tmutil", "addexclusion")``.
        path: The path to exclude.

    Raises:
        ExternalCommandFailedError: If the command cannot be started or exits non-zero.
    """
    try:
        result = subprocess.run([*command, path], stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except OSError as e:
        raise ExternalCommandFailedError(path, None, f"could not run {command[0]}: {e}") from e

    if result.returncode != 0:
        detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
        raise ExternalCommandFailedError(path, result.returncode, detail)


class ExclusionApplicator:
    """Hands exclusion entries to the external exclusion command.

    Processing is best-effort: a missing path or a failing command is recorded in the report and
    processing moves on to the next entry.

    Attributes:
        command (tuple): Command prefix; the entry path is appended as the final argument.

    Example:
        >>> applicator = ExclusionApplicator()  # doctest: +SKIP
        >>> report = applicator.apply(["/Users/u/Projects/app/node_modules"])  # doctest: +SKIP
        >>> report.applied, report.skipped, report.failed  # doctest: +SKIP
        (1, 0, 0)
    """

    def __init__(self, command: Sequence[str] = DEFAULT_COMMAND) -> None:
        if not command:
            raise ValueError("Exclusion command must not be empty")
        self.command = tuple(command)

    def apply(
        self,
        entries: Iterable[str],
        on_outcome: Optional[Callable[[ApplyOutcome], None]] = None,
    ) -> ApplyReport:
        """Apply each entry in order and return the collected outcomes.

        Args:
            entries: Paths to exclude.
            on_outcome: Called with each outcome as soon as it is known.

        Returns:
            An ApplyReport with one outcome per entry.
        """
        report = ApplyReport()
        for entry in entries:
            outcome = self._apply_one(entry)
            report.outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)
        return report

    def _apply_one(self, path: str) -> ApplyOutcome:
        if not os.path.exists(path):
            return ApplyOutcome(path, ApplyStatus.MISSING)

        try:
            run_exclusion_command(self.command, path)
        except ExternalCommandFailedError as e:
            return ApplyOutcome(path, ApplyStatus.FAILED, e.detail)

        return ApplyOutcome(path, ApplyStatus.APPLIED)
