"""Platform configuration roots.

Purpose
-------
Implement the :class:`lib_config_locator.application.ports.PlatformDirs`
protocol by encapsulating OS-specific directory conventions. The adapter is the
only component that knows where Linux, macOS and Windows keep per-application
configuration and preference files.

Contents
--------
* :class:`DefaultPlatformDirs` – resolves the config/preference root for an
  :class:`~lib_config_locator.domain.descriptor.ApplicationIdentity`.
* :func:`project_dir_name` / :func:`bundle_identifier` – helpers deriving the
  per-application directory names.

System Role
-----------
Feeds the system root into
:class:`lib_config_locator.application.resolver.PathResolver`. Environment
values, the platform string and the home directory are injectable so tests can
pin every root inside a temporary directory.
"""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path, PureWindowsPath
from typing import Mapping

from ...domain.descriptor import ApplicationIdentity, SystemLocationKind
from ...observability import log_debug

_BUNDLE_UNSAFE = re.compile(r"[^A-Za-z0-9.\-]+")


class DefaultPlatformDirs:
    """Resolve configuration roots following each platform's conventions.

    Why
    ----
    Centralise directory discovery so the resolver stays platform-agnostic and
    easy to test.

    Layout
    ------
    ============  ==============================================  =================================
    Platform      Config root                                     Preference root
    ============  ==============================================  =================================
    Linux / BSD   ``$XDG_CONFIG_HOME/<app>`` or ``~/.config/<app>``  same as config
    macOS         ``~/Library/Application Support/<bundle id>``   ``~/Library/Preferences/<bundle id>``
    Windows       ``%APPDATA%\\<org>\\<app>\\config``              same as config
    ============  ==============================================  =================================
    """

    def __init__(
        self,
        *,
        env: Mapping[str, str] | None = None,
        platform: str | None = None,
        home: Path | None = None,
    ) -> None:
        """Store the context required to resolve directories.

        Parameters
        ----------
        env:
            Optional mapping overriding ``os.environ`` values (useful for
            deterministic tests).
        platform:
            Platform identifier (``sys.platform`` clone). Defaults to the
            current interpreter platform.
        home:
            Home directory override. Defaults to ``$HOME`` (or
            ``%USERPROFILE%``) and finally :meth:`pathlib.Path.home`.
        """

        self.env = {**os.environ, **(env or {})}
        self.platform = platform or sys.platform
        self._home = home

    def config_root(self, identity: ApplicationIdentity, kind: SystemLocationKind) -> Path | None:
        """Return the root directory for ``kind`` or ``None`` when unavailable.

        Examples
        --------
        >>> dirs = DefaultPlatformDirs(env={"XDG_CONFIG_HOME": "/xdg"}, platform="linux")
        >>> identity = ApplicationIdentity("org", "Acme", "Demo App")
        >>> dirs.config_root(identity, SystemLocationKind.CONFIG).as_posix()
        '/xdg/demoapp'
        >>> DefaultPlatformDirs(platform="plan9").config_root(identity, SystemLocationKind.CONFIG) is None
        True
        """

        if self._is_macos:
            root = self._macos(identity, kind)
        elif self._is_windows:
            root = self._windows(identity)
        elif self._is_unix:
            root = self._unix(identity)
        else:
            root = None
        log_debug("platform_root", stage="platform", path=str(root) if root else None, kind=kind.value)
        return root

    @property
    def _is_macos(self) -> bool:
        return self.platform == "darwin"

    @property
    def _is_windows(self) -> bool:
        return self.platform.startswith("win") or self.platform == "cygwin"

    @property
    def _is_unix(self) -> bool:
        return self.platform.startswith(("linux", "freebsd", "openbsd", "netbsd", "dragonfly", "sunos"))

    def home(self) -> Path | None:
        """Return the user's home directory, or ``None`` when it is unknown."""

        if self._home is not None:
            return self._home
        for key in ("HOME", "USERPROFILE"):
            value = self.env.get(key)
            if value and _is_absolute(value):
                return Path(value)
        try:
            return Path.home()
        except RuntimeError:
            return None

    def _unix(self, identity: ApplicationIdentity) -> Path | None:
        """Follow the XDG base directory specification."""

        name = project_dir_name(identity.application)
        if not name:
            return None
        xdg = self.env.get("XDG_CONFIG_HOME")
        if xdg and _is_absolute(xdg):
            return Path(xdg) / name
        home = self.home()
        if home is None:
            return None
        return home / ".config" / name

    def _macos(self, identity: ApplicationIdentity, kind: SystemLocationKind) -> Path | None:
        """Follow the Application Support / Preferences split used on macOS."""

        bundle = bundle_identifier(identity)
        home = self.home()
        if not bundle or home is None:
            return None
        if kind is SystemLocationKind.PREFERENCE:
            return home / "Library" / "Preferences" / bundle
        return home / "Library" / "Application Support" / bundle

    def _windows(self, identity: ApplicationIdentity) -> Path | None:
        """Follow the roaming AppData layout used on Windows."""

        parts = [part.strip() for part in (identity.organization, identity.application) if part.strip()]
        if not parts:
            return None
        appdata = self.env.get("APPDATA")
        if appdata:
            base = Path(appdata)
        else:
            home = self.home()
            if home is None:
                return None
            base = home / "AppData" / "Roaming"
        return base.joinpath(*parts, "config")


def project_dir_name(application: str) -> str:
    """Return ``application`` lowercased with all whitespace removed.

    Examples
    --------
    >>> project_dir_name("  My Cool App ")
    'mycoolapp'
    """

    return "".join(application.split()).lower()


def bundle_identifier(identity: ApplicationIdentity) -> str:
    """Return a reverse-DNS bundle identifier for macOS directories.

    Characters outside ``[A-Za-z0-9.-]`` are replaced by ``-``; empty parts are
    skipped.

    Examples
    --------
    >>> bundle_identifier(ApplicationIdentity("org", "Acme Corp", "Demo App"))
    'org.Acme-Corp.Demo-App'
    """

    parts = [_BUNDLE_UNSAFE.sub("-", part.strip()) for part in (identity.qualifier, identity.organization, identity.application)]
    return ".".join(part for part in parts if part)


def _is_absolute(value: str) -> bool:
    return Path(value).is_absolute() or PureWindowsPath(value).is_absolute()
