"""Composition root for ``lib_config_locator``.

Purpose
-------
Provide the function-style entry points that wire a
:class:`~lib_config_locator.domain.descriptor.ConfigDescriptor` to the default
platform adapter and run the usual "resolve, fall back to the default file,
then read or write" sequence.

Contents
--------
* :func:`make_resolver` – build a :class:`PathResolver` with default adapters.
* :func:`locate_config` – resolve without falling back.
* :func:`read_config` / :func:`write_config` – read or write the winning file
  (or the default file when none exists).
* :func:`read_config_or_initialize` / :func:`read_config_or_default` – the
  "first run creates the file" helpers.

System Role
-----------
This module is the canonical place for consumers that do not need to pick a
fallback strategy themselves. Everything here delegates to
:mod:`lib_config_locator.application`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, TypeVar

from .application.handle import ResolvedLocation
from .application.ports import PlatformDirs
from .application.resolver import PathResolver
from .domain.descriptor import ConfigDescriptor

T = TypeVar("T")


def make_resolver(
    descriptor: ConfigDescriptor,
    *,
    platform_dirs: PlatformDirs | None = None,
    cwd: str | Path | None = None,
) -> PathResolver:
    """Return a :class:`PathResolver` for ``descriptor``.

    Parameters
    ----------
    descriptor:
        Immutable description of the application's configuration.
    platform_dirs:
        Optional platform adapter (tests pass one pinned to a temporary
        directory).
    cwd:
        Optional fixed local root; defaults to the working directory at call
        time.
    """

    return PathResolver(descriptor, platform_dirs=platform_dirs, cwd=cwd)


def locate_config(
    descriptor: ConfigDescriptor,
    *,
    platform_dirs: PlatformDirs | None = None,
    cwd: str | Path | None = None,
) -> ResolvedLocation:
    """Return the first existing configuration file, or an unresolved location.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> from lib_config_locator.domain.descriptor import ApplicationIdentity
    >>> from lib_config_locator.adapters.platform_dirs.default import DefaultPlatformDirs
    >>> tmp = TemporaryDirectory()
    >>> dirs = DefaultPlatformDirs(env={"XDG_CONFIG_HOME": tmp.name}, platform="linux")
    >>> descriptor = ConfigDescriptor(ApplicationIdentity("org", "Acme", "Demo"), ["demo"])
    >>> locate_config(descriptor, platform_dirs=dirs, cwd=tmp.name).is_resolved
    False
    >>> tmp.cleanup()
    """

    return make_resolver(descriptor, platform_dirs=platform_dirs, cwd=cwd).resolve()


def read_config(
    descriptor: ConfigDescriptor,
    target: Any = None,
    *,
    platform_dirs: PlatformDirs | None = None,
    cwd: str | Path | None = None,
) -> Any:
    """Read the winning file (or the default file) and decode it into ``target``.

    Raises
    ------
    OpenConfigError
        Neither an existing file nor the default file can be opened.
    InvalidFormat
        The file is malformed or does not fit ``target``.
    """

    return make_resolver(descriptor, platform_dirs=platform_dirs, cwd=cwd).read(target)


def write_config(
    descriptor: ConfigDescriptor,
    value: Any,
    *,
    platform_dirs: PlatformDirs | None = None,
    cwd: str | Path | None = None,
) -> Path:
    """Write ``value`` to the winning file (or the default file) and return its path."""

    location = locate_config(descriptor, platform_dirs=platform_dirs, cwd=cwd).fallback_to_default()
    handle = location.require()
    handle.write(value)
    return handle.path


def read_config_or_initialize(
    descriptor: ConfigDescriptor,
    default: T,
    target: Any = None,
    *,
    platform_dirs: PlatformDirs | None = None,
    cwd: str | Path | None = None,
) -> T:
    """Read the configuration, creating the default file from ``default`` on first run."""

    return make_resolver(descriptor, platform_dirs=platform_dirs, cwd=cwd).read_or_initialize(default, target)


def read_config_or_default(
    descriptor: ConfigDescriptor,
    target: Callable[[], T],
    *,
    platform_dirs: PlatformDirs | None = None,
    cwd: str | Path | None = None,
) -> T:
    """Read the configuration, creating the default file from ``target()`` on first run."""

    return make_resolver(descriptor, platform_dirs=platform_dirs, cwd=cwd).read_or_default(target)


__all__ = [
    "locate_config",
    "make_resolver",
    "read_config",
    "read_config_or_default",
    "read_config_or_initialize",
    "write_config",
]
