"""Closed enumeration of the supported serialization formats.

Purpose
-------
Name every format the library knows about together with its file extensions.
The enumeration is pure data; which formats are actually usable depends on the
installed serialization libraries and is decided by
:mod:`lib_config_locator.application.registry`.

Contents
--------
* :class:`FileFormat` – ``TOML``, ``JSON``, ``YAML``, ``RON`` in priority order.
"""

from __future__ import annotations

from enum import Enum

from .errors import UnsupportedFormat


class FileFormat(str, Enum):
    """Serialization format of a configuration file.

    Declaration order is the probing and default-selection priority.

    Examples
    --------
    >>> FileFormat.YAML.extension
    'yaml'
    >>> FileFormat.YAML.detection_extensions
    ('yaml', 'yml')
    >>> FileFormat.from_extension(".YML")
    <FileFormat.YAML: 'yaml'>
    """

    TOML = "toml"
    JSON = "json"
    YAML = "yaml"
    RON = "ron"

    @property
    def extension(self) -> str:
        """Return the canonical lowercase extension (without dot)."""

        return self.value

    @property
    def detection_extensions(self) -> tuple[str, ...]:
        """Return every extension probed for this format, canonical first."""

        return _DETECTION_EXTENSIONS[self]

    @classmethod
    def from_extension(cls, extension: str) -> FileFormat:
        """Map ``extension`` (with or without leading dot, any case) to a member.

        Raises
        ------
        UnsupportedFormat
            When no format uses ``extension``.
        """

        wanted = extension.strip().lstrip(".").lower()
        for member in cls:
            if wanted in member.detection_extensions:
                return member
        raise UnsupportedFormat(f"Unknown configuration file extension: {extension!r}")


_DETECTION_EXTENSIONS: dict[FileFormat, tuple[str, ...]] = {
    FileFormat.TOML: ("toml",),
    FileFormat.JSON: ("json",),
    FileFormat.YAML: ("yaml", "yml"),
    FileFormat.RON: ("ron",),
}
