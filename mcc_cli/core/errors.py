"""Error types raised by MCC operations.

Everything the CLI or browser needs to report to the user derives from
``MCCError``. Expected absences (no sessions yet, no matching session, no
registry entry) are not errors and are returned as empty results instead.
"""

from pathlib import Path
from typing import Optional, Union


class MCCError(Exception):
    """Base class for all MCC failures."""


class SessionLoadError(MCCError):
    """A single transcript file could not be loaded."""

    def __init__(self, path: Union[str, Path], cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        message = f"Failed to load session file {self.path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ScanError(MCCError):
    """The sessions root or a project directory could not be listed."""


class ContainerError(MCCError):
    """An export container could not be read."""


class ContainerNotFoundError(ContainerError):
    """The container file does not exist."""


class ContainerFormatError(ContainerError):
    """The container is not valid compressed JSON of the expected shape."""


class ContainerVersionError(ContainerError):
    """The container declares a format version this build cannot read."""


class ExportError(MCCError):
    """Writing an export container failed."""


class RegistryError(MCCError):
    """The project registry exists but could not be read or updated."""


class TransferError(MCCError):
    """Uploading or downloading a container failed."""
