"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the resolver, and
consuming applications. The hierarchy lives in the domain layer so outer layers
can depend on it without the domain importing anything from them.

Contents
--------
* :class:`ConfigError` – umbrella base class for every library failure.
* :class:`ValidationError` – a configuration descriptor was malformed.
* :class:`ResolutionError` – the search roots could not be computed.
* :class:`FileSystemError` – open/read/write/mkdir failures, one subclass per
  operation.
* :class:`FormatError` – decode or encode failures of a serialization format.
* :class:`NoConfigurationFile` – a terminal operation ran on an unresolved
  location.

System Role
-----------
Every error is raised to the immediate caller; nothing is retried or logged
internally. Callers catch :class:`ConfigError` to handle all library failures
uniformly or one of the subclasses to tell "file missing/unreadable" apart
from "file present but malformed".
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .formats import FileFormat


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_config_locator``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class ValidationError(ConfigError):
    """Raised when a :class:`~lib_config_locator.domain.descriptor.ConfigDescriptor` is malformed.

    Typical Sources
    ---------------
    An empty ``candidate_names`` sequence or a blank candidate name.
    """


class ResolutionError(ConfigError):
    """Raised when the search roots themselves cannot be determined."""


class NoProjectDirectory(ResolutionError):
    """The platform offers no system root for the application identity.

    Why
    ----
    Unsupported platforms or a missing home directory must not be silently
    skipped; callers may still fall back to a local path explicitly.
    """

    def __init__(self, message: str = "No project directory found.") -> None:
        super().__init__(message)


class FileSystemError(ConfigError):
    """Base class for operating-system level failures.

    Attributes
    ----------
    path:
        Filesystem path involved in the failing operation (``None`` when the
        failure is not tied to a specific file).
    """

    operation = "access"

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class OpenConfigError(FileSystemError):
    """Opening the configuration file (for reading or writing) failed."""

    operation = "open"


class ReadConfigError(FileSystemError):
    """The configuration file was opened but reading its content failed."""

    operation = "read"


class WriteConfigError(FileSystemError):
    """Writing the encoded payload to the configuration file failed."""

    operation = "write"


class CreateDirectoryError(FileSystemError):
    """Creating the parent directory tree of the configuration file failed."""

    operation = "mkdir"


class CurrentDirectoryUnavailable(ResolutionError, OpenConfigError):
    """The process working directory could not be determined.

    Belongs to both the resolution family and the open-class filesystem
    family so either ``except`` clause catches it.
    """

    def __init__(self, message: str = "Current working directory is unavailable.") -> None:
        OpenConfigError.__init__(self, message, path=None)


class FormatError(ConfigError):
    """Base class for serialization failures.

    Attributes
    ----------
    file_format:
        The :class:`~lib_config_locator.domain.formats.FileFormat` involved, if
        known.
    """

    def __init__(self, message: str, *, file_format: FileFormat | None = None) -> None:
        super().__init__(message)
        self.file_format = file_format


class InvalidFormat(FormatError):
    """Raised when text cannot be decoded into the requested value.

    Covers both syntax errors reported by the parser and type mismatches found
    while validating the parsed data against a target type.
    """


class UnrepresentableValue(FormatError):
    """Raised when a value cannot be encoded in the requested format."""


class UnsupportedFormat(FormatError):
    """Raised for unknown extensions or formats whose library is not installed."""


class NoConfigurationFile(ConfigError):
    """A read/write was attempted on a location without a path.

    Why
    ----
    Signals a caller error: resolution found nothing and no fallback was
    applied before the terminal operation.
    """

    def __init__(self, message: str = "No configuration file found.") -> None:
        super().__init__(message)
