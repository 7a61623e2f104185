"""Deterministic search for an application's configuration file.

Purpose
-------
Enumerate every candidate location implied by a
:class:`~lib_config_locator.domain.descriptor.ConfigDescriptor` in strict
priority order and stop at the first one that exists on disk.

Search order
------------
1. ``extra_search_files`` – each probed as given (``<file>.<ext>``, then the
   literal file).
2. ``extra_search_folders`` – each expanded with the candidate names.
3. The system root and the working directory, system first only when
   ``prefer_system_over_local`` is set.

Within one directory every candidate name is tried in order, and for each name
the plain form ``name`` before the dotted form ``.name`` (the latter only when
``allow_dot_prefix`` is set). For every candidate stem the formats are probed
in priority order (TOML, JSON, YAML, RON).

Contents
--------
* :class:`PathResolver` – roots, candidates, resolution, default file paths,
  and read/write shortcuts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, TypeVar

from ..adapters.platform_dirs.default import DefaultPlatformDirs
from ..domain.descriptor import ConfigDescriptor, SystemLocationKind
from ..domain.errors import CurrentDirectoryUnavailable, NoProjectDirectory
from ..domain.formats import FileFormat
from ..observability import log_debug, make_event
from . import registry
from .handle import ResolvedLocation
from .ports import PlatformDirs

T = TypeVar("T")


class PathResolver:
    """Resolve a :class:`ConfigDescriptor` to a :class:`ResolvedLocation`.

    Why
    ----
    Resolution is the only part of the library with ordering rules; keeping it
    in one class makes the precedence contract easy to read and to test.

    Parameters
    ----------
    descriptor:
        Immutable description of the application's configuration.
    platform_dirs:
        Adapter answering where the system roots live. Defaults to
        :class:`~lib_config_locator.adapters.platform_dirs.default.DefaultPlatformDirs`.
    cwd:
        Fixed local root. When omitted the process working directory is read
        at call time.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> from lib_config_locator.domain.descriptor import ApplicationIdentity
    >>> tmp = TemporaryDirectory()
    >>> local = Path(tmp.name) / "work"
    >>> local.mkdir()
    >>> _ = (local / "app.json").write_text('{"debug": true}', encoding="utf-8")
    >>> resolver = PathResolver(
    ...     ConfigDescriptor(ApplicationIdentity("org", "Acme", "App"), ["app"], FileFormat.TOML),
    ...     platform_dirs=DefaultPlatformDirs(env={"XDG_CONFIG_HOME": str(Path(tmp.name) / "xdg")}, platform="linux"),
    ...     cwd=local,
    ... )
    >>> location = resolver.resolve()
    >>> location.path.name, location.file_format
    ('app.json', <FileFormat.JSON: 'json'>)
    >>> location.read()
    {'debug': True}
    >>> tmp.cleanup()
    """

    def __init__(
        self,
        descriptor: ConfigDescriptor,
        *,
        platform_dirs: PlatformDirs | None = None,
        cwd: str | Path | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.platform_dirs = platform_dirs if platform_dirs is not None else DefaultPlatformDirs()
        self._cwd = Path(cwd) if cwd is not None else None

    @property
    def default_format(self) -> FileFormat:
        """Return the descriptor's default format, or the process default."""

        return self.descriptor.default_format or registry.default_format()

    def config_root(self) -> Path | None:
        """Return the platform config root, ignoring ``system_location_kind``."""

        return self.platform_dirs.config_root(self.descriptor.identity, SystemLocationKind.CONFIG)

    def preference_root(self) -> Path | None:
        """Return the platform preference root, ignoring ``system_location_kind``."""

        return self.platform_dirs.config_root(self.descriptor.identity, SystemLocationKind.PREFERENCE)

    def system_root(self) -> Path | None:
        """Return the root selected by ``options.system_location_kind``."""

        if self.descriptor.options.system_location_kind is SystemLocationKind.PREFERENCE:
            return self.preference_root()
        return self.config_root()

    def local_root(self) -> Path:
        """Return the working directory used as local root.

        Raises
        ------
        CurrentDirectoryUnavailable
            The process working directory no longer exists or is unreadable.
        """

        if self._cwd is not None:
            return self._cwd
        try:
            return Path.cwd()
        except OSError as exc:
            raise CurrentDirectoryUnavailable(f"Cannot determine the current directory: {exc}") from exc

    def expand_names(self, root: Path) -> list[Path]:
        """Return the candidate stems for ``root`` in search order.

        Examples
        --------
        >>> from lib_config_locator.domain.descriptor import ApplicationIdentity
        >>> resolver = PathResolver(ConfigDescriptor(ApplicationIdentity("q", "o", "a"), ["app", "settings"]))
        >>> [path.as_posix() for path in resolver.expand_names(Path("/etc"))]
        ['/etc/app', '/etc/.app', '/etc/settings', '/etc/.settings']
        """

        with_dot = self.descriptor.options.allow_dot_prefix
        stems: list[Path] = []
        for name in self.descriptor.candidate_names:
            stems.append(root / name)
            if with_dot:
                stems.append(root / f".{name}")
        return stems

    def candidates(self) -> list[Path]:
        """Return every candidate stem in priority order.

        Raises
        ------
        NoProjectDirectory
            The platform offers no system root.
        CurrentDirectoryUnavailable
            The working directory cannot be determined.
        """

        system = self._require_system_root()
        local = self.local_root()
        roots = (system, local) if self.descriptor.options.prefer_system_over_local else (local, system)

        ordered: list[Path] = list(self.descriptor.extra_search_files)
        for folder in self.descriptor.extra_search_folders:
            ordered.extend(self.expand_names(folder))
        for root in roots:
            ordered.extend(self.expand_names(root))
        log_debug("path_candidates", **make_event("resolve", None, {"count": len(ordered)}))
        return ordered

    def resolve(self) -> ResolvedLocation:
        """Return the first existing candidate, or an unresolved location.

        The search is first-match: probing stops at the first file found. When
        nothing exists the location carries the default format and no path.
        """

        fallback_format = self.default_format
        for stem in self.candidates():
            found = registry.detect_by_probing(stem, fallback_format)
            if found is not None:
                path, file_format = found
                log_debug("config_resolved", **make_event("resolve", str(path), {"format": file_format.value}))
                return ResolvedLocation(file_format, path, self)
        log_debug("config_unresolved", **make_event("resolve", None, {"format": fallback_format.value}))
        return ResolvedLocation(fallback_format, None, self)

    def default_system_config_file(self) -> Path:
        """Return ``<system root>/<first name>.<default ext>``."""

        return self._default_file(self._require_system_root())

    def default_local_config_file(self) -> Path:
        """Return ``<working dir>/<first name>.<default ext>``."""

        return self._default_file(self.local_root())

    def default_config_file(self) -> Path:
        """Return the system or local default file per ``prefer_system_over_local``."""

        if self.descriptor.options.prefer_system_over_local:
            return self.default_system_config_file()
        return self.default_local_config_file()

    def read(self, target: Any = None) -> Any:
        """Resolve, fall back to the default file, and read it."""

        return self.resolve().fallback_to_default().read(target)

    def write(self, value: Any) -> None:
        """Resolve, fall back to the default file, and write ``value``."""

        self.resolve().fallback_to_default().write(value)

    def read_or_initialize(self, default: T, target: Any = None) -> T:
        """Resolve, fall back to the default file, and read or create it."""

        return self.resolve().fallback_to_default().read_or_initialize(default, target)

    def read_or_default(self, target: Callable[[], T]) -> T:
        """Like :meth:`read_or_initialize` with ``target()`` as default."""

        return self.resolve().fallback_to_default().read_or_default(target)

    def _require_system_root(self) -> Path:
        root = self.system_root()
        if root is None:
            raise NoProjectDirectory()
        return root

    def _default_file(self, root: Path) -> Path:
        return root / f"{self.descriptor.primary_name}.{self.default_format.extension}"
