"""Immutable description of where an application keeps its configuration.

Purpose
-------
Capture everything the resolver needs to know about an application: its
platform identity, the candidate file names, the format used when a new file
has to be created, extra search locations, and ordering options. The values in
this module contain no I/O and can be shared freely between callers.

Contents
--------
* :class:`ApplicationIdentity` – qualifier / organization / application triple.
* :class:`SystemLocationKind` – which system root (config or preference) to use.
* :class:`SearchOptions` – dot-prefix and precedence switches.
* :class:`ConfigDescriptor` – the complete, validated description.

System Role
-----------
Consumers usually build one module-level :class:`ConfigDescriptor` and hand it
to :func:`lib_config_locator.core.locate_config` or
:class:`lib_config_locator.application.resolver.PathResolver` whenever
configuration has to be read or written.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import ClassVar, Iterable, Sequence

from .errors import ValidationError
from .formats import FileFormat


@dataclass(frozen=True, slots=True)
class ApplicationIdentity:
    """Keys into the platform convention for locating a config root.

    Examples
    --------
    >>> ApplicationIdentity("org", "Acme Corp", "Demo App").application
    'Demo App'
    """

    qualifier: str
    organization: str
    application: str

    def with_qualifier(self, qualifier: str) -> ApplicationIdentity:
        return replace(self, qualifier=qualifier)

    def with_organization(self, organization: str) -> ApplicationIdentity:
        return replace(self, organization=organization)

    def with_application(self, application: str) -> ApplicationIdentity:
        return replace(self, application=application)


class SystemLocationKind(str, Enum):
    """Select the platform's preference root or its config root."""

    PREFERENCE = "preference"
    CONFIG = "config"


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Switches controlling candidate expansion and root precedence.

    Attributes
    ----------
    allow_dot_prefix:
        Also try ``.name`` after ``name`` for each candidate name.
    prefer_system_over_local:
        Search the system root before the working directory (and create
        default files there) instead of the other way round.
    system_location_kind:
        Which system root to search.
    """

    DEFAULT: ClassVar[SearchOptions]

    allow_dot_prefix: bool = True
    prefer_system_over_local: bool = False
    system_location_kind: SystemLocationKind = SystemLocationKind.CONFIG

    def with_allow_dot_prefix(self, allow_dot_prefix: bool) -> SearchOptions:
        return replace(self, allow_dot_prefix=allow_dot_prefix)

    def with_prefer_system_over_local(self, prefer_system_over_local: bool) -> SearchOptions:
        return replace(self, prefer_system_over_local=prefer_system_over_local)

    def with_system_location_kind(self, kind: SystemLocationKind) -> SearchOptions:
        return replace(self, system_location_kind=kind)


SearchOptions.DEFAULT = SearchOptions()


@dataclass(frozen=True, slots=True)
class ConfigDescriptor:
    """Validated, immutable description of an application's configuration file.

    Why
    ----
    The resolver must never depend on mutable caller state; freezing the
    descriptor lets one instance serve every caller for the process lifetime.

    What
    ----
    Normalises every sequence to a tuple (paths become :class:`pathlib.Path`)
    and rejects an empty or blank ``candidate_names``.

    Parameters
    ----------
    identity:
        Platform identity of the application.
    candidate_names:
        File stems tried in order; the first one also names default files.
    default_format:
        Format used when no file exists yet. ``None`` stands for the process
        default chosen by :func:`lib_config_locator.application.registry.default_format`.
    extra_search_files:
        Explicit file stems probed before anything else.
    extra_search_folders:
        Directories searched (name-expanded) before the system/local roots.
    options:
        Expansion and precedence switches.

    Examples
    --------
    >>> descriptor = ConfigDescriptor(
    ...     ApplicationIdentity("org", "Acme", "Demo"),
    ...     ["demo", "settings"],
    ...     default_format=FileFormat.JSON,
    ... )
    >>> descriptor.candidate_names
    ('demo', 'settings')
    >>> ConfigDescriptor(ApplicationIdentity("org", "Acme", "Demo"), [])
    Traceback (most recent call last):
    ...
    lib_config_locator.domain.errors.ValidationError: Configuration name should not be empty
    """

    identity: ApplicationIdentity
    candidate_names: Sequence[str]
    default_format: FileFormat | None = None
    extra_search_files: Sequence[str | Path] = field(default=())
    extra_search_folders: Sequence[str | Path] = field(default=())
    options: SearchOptions = field(default=SearchOptions.DEFAULT)

    def __post_init__(self) -> None:
        names = _as_names(self.candidate_names)
        if not names:
            raise ValidationError("Configuration name should not be empty")
        for name in names:
            if not name.strip():
                raise ValidationError("Configuration names must not be blank")
        object.__setattr__(self, "candidate_names", names)
        object.__setattr__(self, "extra_search_files", _as_paths(self.extra_search_files))
        object.__setattr__(self, "extra_search_folders", _as_paths(self.extra_search_folders))

    @property
    def primary_name(self) -> str:
        """Return the first candidate name, used to synthesise default files."""

        return self.candidate_names[0]

    def with_identity(self, identity: ApplicationIdentity) -> ConfigDescriptor:
        return replace(self, identity=identity)

    def with_candidate_names(self, candidate_names: Sequence[str]) -> ConfigDescriptor:
        return replace(self, candidate_names=candidate_names)

    def with_default_format(self, default_format: FileFormat) -> ConfigDescriptor:
        return replace(self, default_format=default_format)

    def without_default_format(self) -> ConfigDescriptor:
        """Return a copy that falls back to the process default format."""

        return replace(self, default_format=None)

    def with_extra_search_files(self, files: Iterable[str | Path]) -> ConfigDescriptor:
        return replace(self, extra_search_files=tuple(files))

    def with_extra_search_folders(self, folders: Iterable[str | Path]) -> ConfigDescriptor:
        return replace(self, extra_search_folders=tuple(folders))

    def with_options(self, options: SearchOptions) -> ConfigDescriptor:
        return replace(self, options=options)


def _as_names(values: Sequence[str]) -> tuple[str, ...]:
    """Return ``values`` as a tuple, treating a lone string as one name."""

    if isinstance(values, str):
        return (values,)
    return tuple(values)


def _as_paths(values: Iterable[str | Path]) -> tuple[Path, ...]:
    if isinstance(values, (str, Path)):
        return (Path(values),)
    return tuple(Path(value) for value in values)
