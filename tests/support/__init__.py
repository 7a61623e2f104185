"""Shared sandbox helpers for the test-suite.

A :class:`LocatorSandbox` pins the platform adapter to Linux with
``XDG_CONFIG_HOME`` inside ``tmp_path`` and provides a separate working
directory, so every resolver built from it searches two predictable roots:

* ``sandbox.system`` – ``<tmp>/xdg/<application dir>``
* ``sandbox.local`` – ``<tmp>/work``
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from lib_config_locator import (
    ApplicationIdentity,
    ConfigDescriptor,
    DefaultPlatformDirs,
    FileFormat,
    PathResolver,
    SearchOptions,
)
from lib_config_locator.adapters.platform_dirs.default import project_dir_name


@dataclass(frozen=True)
class LocatorSandbox:
    """Temporary system and local roots plus the adapter pointing at them."""

    identity: ApplicationIdentity
    xdg_home: Path
    system: Path
    local: Path
    platform_dirs: DefaultPlatformDirs

    @property
    def env(self) -> dict[str, str]:
        """Environment a subprocess or CLI runner needs to see the same roots."""

        return {"XDG_CONFIG_HOME": str(self.xdg_home)}

    def write(self, root: str, relative: str, content: str = "") -> Path:
        """Create ``relative`` below the ``"system"`` or ``"local"`` root."""

        base = {"system": self.system, "local": self.local}[root]
        path = base / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def descriptor(
        self,
        names: Sequence[str] = ("app",),
        *,
        default_format: FileFormat | None = FileFormat.TOML,
        options: SearchOptions = SearchOptions.DEFAULT,
        extra_files: Sequence[str | Path] = (),
        extra_folders: Sequence[str | Path] = (),
    ) -> ConfigDescriptor:
        return ConfigDescriptor(
            self.identity,
            names,
            default_format=default_format,
            extra_search_files=extra_files,
            extra_search_folders=extra_folders,
            options=options,
        )

    def resolver(self, descriptor: ConfigDescriptor | None = None, **kwargs) -> PathResolver:
        """Return a resolver bound to the sandbox roots."""

        chosen = descriptor if descriptor is not None else self.descriptor(**kwargs)
        return PathResolver(chosen, platform_dirs=self.platform_dirs, cwd=self.local)


def create_locator_sandbox(
    tmp_path: Path,
    *,
    qualifier: str = "org",
    organization: str = "Acme",
    application: str = "Demo",
) -> LocatorSandbox:
    """Build a sandbox under ``tmp_path`` with both roots already created."""

    identity = ApplicationIdentity(qualifier, organization, application)
    xdg_home = tmp_path / "xdg"
    system = xdg_home / project_dir_name(application)
    local = tmp_path / "work"
    system.mkdir(parents=True)
    local.mkdir(parents=True)
    platform_dirs = DefaultPlatformDirs(env={"XDG_CONFIG_HOME": str(xdg_home)}, platform="linux")
    return LocatorSandbox(identity, xdg_home, system, local, platform_dirs)


__all__ = ["LocatorSandbox", "create_locator_sandbox"]
