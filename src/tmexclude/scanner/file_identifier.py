"""Device/inode identity used to detect symlink loops."""

import os
from typing import NamedTuple, Optional

from tmexclude.types import PathType


class FileIdentifier(NamedTuple):
    """Identity of a directory on disk, independent of the path used to reach it.

    Attributes:
        device_id (int): The device ID from stat information.
        inode_number (int): The inode number from stat information.
    """

    device_id: int
    inode_number: int

    @classmethod
    def of(cls, path: PathType) -> Optional["FileIdentifier"]:
        """Stat ``path`` (following symlinks) and return its identifier, or None if it cannot be stat'ed."""
        try:
            stat_info = os.stat(path)
        except OSError:
            return None
        return cls(stat_info.st_dev, stat_info.st_ino)
