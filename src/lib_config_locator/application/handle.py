"""Resolved configuration locations and the file I/O performed on them.

Purpose
-------
Turn the outcome of resolution into concrete reads and writes. A
:class:`ResolvedLocation` may still lack a path; one of its fallback methods
supplies one. A :class:`ConcreteHandle` always has a path and is the only
object in the library that touches configuration files.

Contents
--------
* :class:`ResolvedLocation` – format plus optional path, with fallbacks.
* :class:`ConcreteHandle` – format plus path, with ``read``/``write``/
  ``read_or_initialize``/``read_or_default``.

System Role
-----------
Created by :meth:`lib_config_locator.application.resolver.PathResolver.resolve`.
Serialization is delegated to :mod:`lib_config_locator.application.registry`;
OS failures are mapped onto :mod:`lib_config_locator.domain.errors`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from ..domain.errors import (
    CreateDirectoryError,
    InvalidFormat,
    NoConfigurationFile,
    OpenConfigError,
    ReadConfigError,
    WriteConfigError,
)
from ..domain.formats import FileFormat
from ..observability import log_debug, log_info, make_event
from . import registry

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .resolver import PathResolver

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ConcreteHandle:
    """A configuration file with a known path and format.

    Why
    ----
    Keeps the "path is present" guarantee in the type: every method can assume
    ``path`` is set and no unchecked variants are needed.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> handle = ConcreteHandle(FileFormat.JSON, Path(tmp.name) / "nested" / "app.json")
    >>> handle.read_or_initialize({"retries": 3})
    {'retries': 3}
    >>> handle.read()
    {'retries': 3}
    >>> tmp.cleanup()
    """

    file_format: FileFormat
    path: Path

    def exists(self) -> bool:
        """Return ``True`` when the configuration file is present."""

        return self.path.is_file()

    def read(self, target: Any = None) -> Any:
        """Read and decode the file, optionally validating into ``target``.

        Raises
        ------
        OpenConfigError
            The file is missing or cannot be opened.
        ReadConfigError
            The file was opened but reading failed.
        InvalidFormat
            The content is not valid UTF-8, not valid for the format, or does
            not fit ``target``.
        """

        try:
            stream = self.path.open("r", encoding="utf-8")
        except OSError as exc:
            raise OpenConfigError(f"Cannot open configuration file {self.path}: {exc}", path=self.path) from exc
        with stream:
            try:
                text = stream.read()
            except UnicodeDecodeError as exc:
                raise InvalidFormat(
                    f"Configuration file {self.path} is not valid UTF-8: {exc}",
                    file_format=self.file_format,
                ) from exc
            except OSError as exc:
                raise ReadConfigError(f"Cannot read configuration file {self.path}: {exc}", path=self.path) from exc
        log_debug("config_file_read", **make_event("file", str(self.path), {"format": self.file_format.value, "size": len(text)}))
        return registry.decode(self.file_format, text, target)

    def write(self, value: Any) -> None:
        """Encode ``value`` and replace the file content, creating parent folders.

        The value is serialized before the file is opened, so an encoding
        failure leaves an existing file untouched.

        Raises
        ------
        UnrepresentableValue
            ``value`` cannot be expressed in the format.
        CreateDirectoryError
            The parent directory tree could not be created.
        OpenConfigError
            The file could not be opened for writing.
        WriteConfigError
            Writing the encoded text failed (e.g. disk full).
        """

        text = registry.dumps(self.file_format, value)
        self._ensure_parent()
        try:
            stream = self.path.open("w", encoding="utf-8")
        except OSError as exc:
            raise OpenConfigError(f"Cannot open configuration file {self.path}: {exc}", path=self.path) from exc
        try:
            with stream:
                stream.write(text)
        except OSError as exc:
            raise WriteConfigError(f"Cannot write configuration file {self.path}: {exc}", path=self.path) from exc
        log_info("config_file_written", **make_event("file", str(self.path), {"format": self.file_format.value}))

    def read_or_initialize(self, default: T, target: Any = None) -> T:
        """Read the file, or create it from ``default`` when it does not exist.

        When the file is missing the parent directories are created, ``default``
        is written once, and the very same ``default`` object is returned; the
        new file is not read back. ``target`` defaults to ``type(default)``.
        """

        if self.path.exists():
            return self.read(target if target is not None else type(default))
        self._ensure_parent()
        self.write(default)
        return default

    def read_or_default(self, target: Callable[[], T]) -> T:
        """:meth:`read_or_initialize` with ``target()`` as the default value.

        ``target`` is usually a pydantic model, a dataclass with defaults, or
        ``dict``.
        """

        return self.read_or_initialize(target(), target)

    def _ensure_parent(self) -> None:
        parent = self.path.parent
        if parent.is_dir():
            return
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CreateDirectoryError(f"Cannot create configuration directory {parent}: {exc}", path=parent) from exc
        log_info("config_directory_created", **make_event("file", str(parent)))


@dataclass(frozen=True, slots=True)
class ResolvedLocation:
    """Outcome of resolution: a format and, if a file was found, its path.

    State machine
    -------------
    ``path is None`` (unresolved) → one ``fallback_*`` call → ``path`` set
    (resolved). Fallbacks never replace a path that is already present, so a
    resolved location never changes again.

    Examples
    --------
    >>> location = ResolvedLocation(FileFormat.TOML, None)
    >>> location.is_resolved
    False
    >>> location.fallback_to(Path("/tmp/app.toml")).fallback_to(Path("/elsewhere.toml")).path.as_posix()
    '/tmp/app.toml'
    """

    file_format: FileFormat
    path: Path | None
    resolver: PathResolver | None = field(default=None, repr=False, compare=False)

    @property
    def is_resolved(self) -> bool:
        return self.path is not None

    def fallback_to(self, path: str | Path) -> ResolvedLocation:
        """Use ``path`` when resolution found no existing file."""

        if self.path is not None:
            return self
        return self._with_fallback(Path(path), "literal")

    def fallback_to_system_default(self) -> ResolvedLocation:
        """Use ``<system root>/<first name>.<default ext>`` when nothing was found.

        Raises
        ------
        NoProjectDirectory
            The platform offers no system root.
        """

        if self.path is not None:
            return self
        return self._with_fallback(self._require_resolver().default_system_config_file(), "system")

    def fallback_to_local_default(self) -> ResolvedLocation:
        """Use ``<working dir>/<first name>.<default ext>`` when nothing was found."""

        if self.path is not None:
            return self
        return self._with_fallback(self._require_resolver().default_local_config_file(), "local")

    def fallback_to_default(self) -> ResolvedLocation:
        """Pick the system or local default according to ``prefer_system_over_local``."""

        if self.path is not None:
            return self
        return self._with_fallback(self._require_resolver().default_config_file(), "default")

    def require(self) -> ConcreteHandle:
        """Return a :class:`ConcreteHandle` or raise :class:`NoConfigurationFile`."""

        if self.path is None:
            raise NoConfigurationFile()
        return ConcreteHandle(self.file_format, self.path)

    def read(self, target: Any = None) -> Any:
        return self.require().read(target)

    def write(self, value: Any) -> None:
        self.require().write(value)

    def read_or_initialize(self, default: T, target: Any = None) -> T:
        return self.require().read_or_initialize(default, target)

    def read_or_default(self, target: Callable[[], T]) -> T:
        return self.require().read_or_default(target)

    def _with_fallback(self, path: Path, strategy: str) -> ResolvedLocation:
        log_debug("config_fallback", **make_event("resolve", str(path), {"strategy": strategy}))
        return replace(self, path=path)

    def _require_resolver(self) -> PathResolver:
        if self.resolver is None:
            raise NoConfigurationFile("No resolver attached; use fallback_to() with an explicit path.")
        return self.resolver
