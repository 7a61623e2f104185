"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so the registry and
resolver can orchestrate behaviour without depending on concrete
implementations.

Contents
--------
* :class:`Codec` – turns text into plain data and back for one format.
* :class:`PlatformDirs` – answers where the platform keeps per-application
  configuration or preference files.

System Role
-----------
These protocols enforce Dependency Inversion. Each adapter implements one
protocol so the application layer can request behaviour via abstraction, and
tests can substitute fakes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ..domain.descriptor import ApplicationIdentity, SystemLocationKind


@runtime_checkable
class Codec(Protocol):
    """Serialize plain data (dicts, lists, scalars) for one textual format.

    Why
    ----
    Segregate parser/emitter libraries (tomllib, json, PyYAML, RON) from the
    registry's dispatch and error mapping.
    """

    def loads(self, text: str) -> Any:
        """Parse ``text`` and return plain Python data."""

    def dumps(self, data: Any) -> str:
        """Render plain Python ``data`` as text in one piece."""


@runtime_checkable
class PlatformDirs(Protocol):
    """Locate the platform's configuration roots for an application.

    Methods
    -------
    :meth:`config_root`
        Return the directory for ``kind`` or ``None`` when the platform offers
        no meaningful location (unsupported OS, unknown home directory).
    """

    def config_root(self, identity: ApplicationIdentity, kind: SystemLocationKind) -> Path | None:
        """Return the configuration or preference root for ``identity``."""
