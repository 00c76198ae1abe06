"""Errors raised at the boundaries of the extraction pipeline.

Parsers never raise for a single bad line; these exceptions cover the cases
where a whole input (a log file, the logs directory, a baseline document) is
missing or unusable.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class PerfMetError(Exception):
    """Base class for all perfmet errors."""


class LogFileError(PerfMetError):
    """A log file is missing or cannot be read."""

    def __init__(self, description: str, path: PathLike, cause: Optional[BaseException] = None):
        self.description = description
        self.path = Path(path)
        self.cause = cause
        if cause is None:
            message = f"{description} does not exist: {path}"
        else:
            message = f"Failed to read {description} {path}: {cause}"
        super().__init__(message)


class LogDirectoryError(PerfMetError):
    """The logs directory is missing or cannot be listed."""

    def __init__(self, path: PathLike, cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        if cause is None:
            message = f"Logs directory does not exist: {path}"
        else:
            message = f"Failed to read logs directory {path}: {cause}"
        super().__init__(message)


class MissingLogFilesError(PerfMetError):
    """A required log file for the requested prefix was not found."""

    def __init__(self, log_prefix: str, found: dict):
        self.log_prefix = log_prefix
        self.found = found
        super().__init__(
            f'Could not find required log files with prefix "{log_prefix}". Found: {found}'
        )


class BaselineLoadError(PerfMetError):
    """A persisted baseline is missing, unreadable or malformed."""

    def __init__(self, reference: PathLike, cause: Optional[BaseException] = None):
        self.reference = str(reference)
        self.cause = cause
        if cause is None:
            message = f"Baseline does not exist: {reference}"
        else:
            message = f"Failed to load baseline {reference}: {cause}"
        super().__init__(message)


class BaselineSaveError(PerfMetError):
    """A baseline could not be persisted."""

    def __init__(self, reference: PathLike, cause: Optional[BaseException] = None):
        self.reference = str(reference)
        self.cause = cause
        super().__init__(f"Failed to save baseline {reference}: {cause}")
