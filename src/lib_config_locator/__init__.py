"""Public package surface for ``lib_config_locator``.

Find an application's single configuration file across TOML, JSON, YAML and
RON, then read, write, or create it. Start with a
:class:`ConfigDescriptor` and either call :func:`read_config` and friends or
work with :class:`PathResolver` / :class:`ResolvedLocation` directly.
"""

from __future__ import annotations

from .adapters.platform_dirs.default import DefaultPlatformDirs
from .application.handle import ConcreteHandle, ResolvedLocation
from .application.registry import available_formats, default_format, detect_by_probing
from .application.resolver import PathResolver
from .core import (
    locate_config,
    make_resolver,
    read_config,
    read_config_or_default,
    read_config_or_initialize,
    write_config,
)
from .domain.descriptor import ApplicationIdentity, ConfigDescriptor, SearchOptions, SystemLocationKind
from .domain.errors import (
    ConfigError,
    CreateDirectoryError,
    CurrentDirectoryUnavailable,
    FileSystemError,
    FormatError,
    InvalidFormat,
    NoConfigurationFile,
    NoProjectDirectory,
    OpenConfigError,
    ReadConfigError,
    ResolutionError,
    UnrepresentableValue,
    UnsupportedFormat,
    ValidationError,
    WriteConfigError,
)
from .domain.formats import FileFormat
from .observability import bind_trace_id, get_logger

__all__ = [
    "ApplicationIdentity",
    "ConcreteHandle",
    "ConfigDescriptor",
    "ConfigError",
    "CreateDirectoryError",
    "CurrentDirectoryUnavailable",
    "DefaultPlatformDirs",
    "FileFormat",
    "FileSystemError",
    "FormatError",
    "InvalidFormat",
    "NoConfigurationFile",
    "NoProjectDirectory",
    "OpenConfigError",
    "PathResolver",
    "ReadConfigError",
    "ResolutionError",
    "ResolvedLocation",
    "SearchOptions",
    "SystemLocationKind",
    "UnrepresentableValue",
    "UnsupportedFormat",
    "ValidationError",
    "WriteConfigError",
    "available_formats",
    "bind_trace_id",
    "default_format",
    "detect_by_probing",
    "get_logger",
    "locate_config",
    "make_resolver",
    "read_config",
    "read_config_or_default",
    "read_config_or_initialize",
    "write_config",
]
