from typing import Optional

from tmexclude.types import PathType


class NotFoundError(FileNotFoundError):
    """
    Base exception for structural prerequisites that have not been created yet.

    Commands that depend on state produced by an earlier command (the configuration written by
    ``init``, the exclusion list written by ``populate``) raise a subclass of this error when that
    state is absent. It derives from FileNotFoundError so callers that only care about "the file is
    not there" can catch the built-in type.
    """

    pass


class ConfigMissingError(NotFoundError):
    """
    Exception raised when no configuration file exists.

    Attributes:
        path (str): Location where the configuration was expected.

    Example:
        >>> error = ConfigMissingError("/home/u/.tm_exclude_config")
        >>> str(error)
        "Configuration file not found: /home/u/.tm_exclude_config. Please run 'timemachine-exclude init' first."
    """

    def __init__(self, path: PathType) -> None:
        self.path = str(path)
        super().__init__(
            f"Configuration file not found: {self.path}. Please run 'timemachine-exclude init' first."
        )


class ExclusionListMissingError(NotFoundError):
    """
    Exception raised when the exclusion list is read before it has been generated.

    Attributes:
        path (str): Location where the exclusion list was expected.

    Example:
        >>> error = ExclusionListMissingError("/home/u/.tm_exclusions_tm_exclude")
        >>> str(error)
        "Exclusion file /home/u/.tm_exclusions_tm_exclude not found. Please run 'timemachine-exclude populate' first."
    """

    def __init__(self, path: PathType) -> None:
        self.path = str(path)
        super().__init__(
            f"Exclusion file {self.path} not found. Please run 'timemachine-exclude populate' first."
        )


class ConfigInvalidError(ValueError):
    """
    Exception raised when a configuration file exists but cannot be turned into a Configuration.

    This covers malformed JSON as well as structurally valid JSON with the wrong shape, such as a
    missing ``patterns`` key or an empty pattern string.
    """

    pass


class DirectoryUnreadableError(OSError):
    """
    Exception describing a directory whose entries could not be enumerated during a scan.

    The scanner normally records these and moves on to the next sibling; it only raises them when
    configured with ``ErrorAction.RAISE``.

    Attributes:
        path (str): The directory that could not be read.
        cause (Optional[OSError]): The underlying error reported by the operating system.

    Example:
        >>> error = DirectoryUnreadableError("/root/secret", PermissionError(13, "Permission denied"))
        >>> str(error)
        'Error accessing /root/secret: [Errno 13] Permission denied'
    """

    def __init__(self, path: PathType, cause: Optional[OSError] = None) -> None:
        self.path = str(path)
        self.cause = cause
        message = f"Error accessing {self.path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ExternalCommandFailedError(Exception):
    """
    Exception raised when the backup-exclusion command does not succeed for a path.

    Attributes:
        path (str): The path that was passed to the command.
        returncode (Optional[int]): Exit status of the command, or None if it could not be started.
        detail (str): Human-readable reason, usually the command's stderr.

    Example:
        >>> error = ExternalCommandFailedError("/a/node_modules", 1, "exit status 1")
        >>> str(error)
        'Failed to exclude /a/node_modules: exit status 1'
    """

    def __init__(self, path: PathType, returncode: Optional[int], detail: str) -> None:
        self.path = str(path)
        self.returncode = returncode
        self.detail = detail
        super().__init__(f"Failed to exclude {self.path}: {detail}")
