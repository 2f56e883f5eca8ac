"""Persistence for the generated exclusion list.

The exclusion list is a plain text file: a single ``#`` header line naming the tool and the
time the list was generated, a blank line, then one absolute path per line. Paths are written
and read verbatim, without quoting or escaping. Bytes that are not valid UTF-8 are carried
through with ``surrogateescape``, so any path the filesystem hands out survives a round trip
except one containing a line break, which cannot be represented and is rejected.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from tmexclude.exceptions import ExclusionListMissingError
from tmexclude.types import PathType

TOOL_NAME = "timemachine-exclude"
DEFAULT_EXCLUSION_FILE = Path("~/.tm_exclusions_tm_exclude")
COMMENT_MARKER = "#"
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def is_recordable(path: str) -> bool:
    """Return True if ``path`` can be stored as a single line of the exclusion list."""
    return "\n" not in path


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp as ISO-8601 UTC with millisecond precision and a ``Z`` suffix.

    Example:
        >>> format_timestamp(datetime(2024, 5, 1, 12, 30, 0, 250000, tzinfo=timezone.utc))
        '2024-05-01T12:30:00.250Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def format_header(moment: datetime) -> str:
    """Build the header line (without trailing newline) for a list generated at ``moment``."""
    return f"{COMMENT_MARKER} Time Machine Exclusions - Generated by {TOOL_NAME} on {format_timestamp(moment)}"


class ExclusionStore:
    """Reads and writes the exclusion list file.

    Each write replaces the whole file; entries from earlier runs are never merged in.
    Concurrent writers are not coordinated, so two invocations writing at once may
    interleave.

    Attributes:
        path (Path): Location of the exclusion list, with ``~`` expanded.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     store = ExclusionStore(Path(tmpdir) / "exclusions")
        ...     store.write(["/a/node_modules", "/b/dist"])
        ...     store.read()
        ['/a/node_modules', '/b/dist']
    """

    def __init__(self, path: PathType = DEFAULT_EXCLUSION_FILE) -> None:
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.is_file()

    def write(self, entries: Iterable[str], generated_at: Optional[datetime] = None) -> None:
        """Overwrite the exclusion list with ``entries`` in the given order.

        Args:
            entries: Absolute paths to record.
            generated_at: Timestamp for the header. Defaults to the current time.

        Raises:
            ValueError: If an entry contains a line break. Nothing is written in that case.
        """
        if generated_at is None:
            generated_at = datetime.now(timezone.utc)

        lines = [format_header(generated_at), ""]
        for entry in entries:
            entry = str(entry)
            if not is_recordable(entry):
                raise ValueError(f"Cannot record a path containing a line break: {entry!r}")
            lines.append(entry)

        with open(self.path, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n") as f:
            f.write("\n".join(lines) + "\n")

    def read(self) -> List[str]:
        """Return the recorded paths, skipping blank lines and comment lines.

        Raises:
            ExclusionListMissingError: If the exclusion list has not been generated yet.
        """
        try:
            with open(self.path, "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
                content = f.read()
        except FileNotFoundError:
            raise ExclusionListMissingError(self.path) from None

        return [line for line in content.split("\n") if line and not line.startswith(COMMENT_MARKER)]
