"""CLI adapter for ``lib_config_locator`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators see where an application looks for its configuration file,
which file wins, and what it contains, without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata and the installed formats.
* :func:`cli_roots` – prints the config, preference, system and local roots.
* :func:`cli_locate` – prints the candidate list and the winning file.
* :func:`cli_read` – decodes the winning file and re-emits it in any format.
* :func:`cli_init` – creates the default file on first run.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It builds a descriptor from options,
calls the resolver, and never reaches into adapter internals. Library errors
propagate to ``lib_cli_exit_tools`` which turns them into exit codes.
"""

from __future__ import annotations

import io
import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.platform_dirs.default import DefaultPlatformDirs
from .application import registry
from .application.resolver import PathResolver
from .domain.descriptor import ApplicationIdentity, ConfigDescriptor, SearchOptions, SystemLocationKind
from .domain.formats import FileFormat

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

FORMAT_CHOICES: Final[tuple[str, ...]] = tuple(fmt.value for fmt in FileFormat)
KIND_CHOICES: Final[tuple[str, ...]] = tuple(kind.value for kind in SystemLocationKind)
FALLBACK_CHOICES: Final[tuple[str, ...]] = ("none", "default", "system", "local")


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_config_locator")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Locate, read and create an application's configuration file",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_config_locator",
    message="lib_config_locator version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


def _descriptor_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by every command that needs a descriptor."""

    options = [
        click.option("--qualifier", default="", show_default=True, help="Reverse-DNS qualifier (e.g. org)"),
        click.option("--organization", required=True, help="Organization or vendor name"),
        click.option("--application", required=True, help="Application name"),
        click.option(
            "--name",
            "names",
            multiple=True,
            help="Candidate file name without extension (repeatable, defaults to the application name)",
        ),
        click.option(
            "--default-format",
            type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
            default=None,
            help="Format for newly created files (defaults to the first installed format)",
        ),
        click.option(
            "--extra-file",
            "extra_files",
            multiple=True,
            type=click.Path(path_type=Path),
            help="Extra file stem searched first (repeatable)",
        ),
        click.option(
            "--extra-folder",
            "extra_folders",
            multiple=True,
            type=click.Path(path_type=Path, file_okay=False),
            help="Extra folder searched before the system/local roots (repeatable)",
        ),
        click.option("--dot/--no-dot", "allow_dot", default=True, show_default=True, help="Also try .name"),
        click.option(
            "--prefer-system/--prefer-local",
            "prefer_system",
            default=False,
            show_default=True,
            help="Search the system root before the working directory",
        ),
        click.option(
            "--kind",
            type=click.Choice(KIND_CHOICES, case_sensitive=False),
            default=SystemLocationKind.CONFIG.value,
            show_default=True,
            help="System root to search",
        ),
        click.option(
            "--platform",
            default=None,
            help="Override auto-detected platform (e.g. linux, darwin, windows)",
        ),
        click.option(
            "--cwd",
            type=click.Path(path_type=Path, file_okay=False, exists=True),
            default=None,
            help="Local root to use instead of the working directory",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_resolver(
    *,
    qualifier: str,
    organization: str,
    application: str,
    names: Sequence[str],
    default_format: Optional[str],
    extra_files: Sequence[Path],
    extra_folders: Sequence[Path],
    allow_dot: bool,
    prefer_system: bool,
    kind: str,
    platform: Optional[str],
    cwd: Optional[Path],
) -> PathResolver:
    """Translate CLI options into a :class:`PathResolver`."""

    options = SearchOptions(
        allow_dot_prefix=allow_dot,
        prefer_system_over_local=prefer_system,
        system_location_kind=SystemLocationKind(kind.lower()),
    )
    descriptor = ConfigDescriptor(
        ApplicationIdentity(qualifier, organization, application),
        tuple(names) or (application,),
        default_format=FileFormat(default_format.lower()) if default_format else None,
        extra_search_files=extra_files,
        extra_search_folders=extra_folders,
        options=options,
    )
    platform_dirs = DefaultPlatformDirs(platform=_normalize_platform(platform))
    return PathResolver(descriptor, platform_dirs=platform_dirs, cwd=cwd)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print distribution metadata and the formats available in this installation."""

    try:
        meta = metadata.metadata("lib_config_locator")
    except metadata.PackageNotFoundError:
        click.echo("lib_config_locator (metadata unavailable)")
    else:
        click.echo(f"Info for {meta.get('Name', 'lib_config_locator')}:")
        click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
        click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
        summary = meta.get("Summary")
        if summary:
            click.echo(f"  Summary         : {summary}")
    formats = ", ".join(fmt.value for fmt in registry.available_formats())
    click.echo(f"  Formats         : {formats}")
    click.echo(f"  Default format  : {registry.default_format().value}")


@cli.command("roots", context_settings=CLICK_CONTEXT_SETTINGS)
@_descriptor_options
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indentation")
def cli_roots(indent: int, **options: Any) -> None:
    """Print the config, preference, selected system, and local roots as JSON.

    Roots the platform does not offer are printed as ``null``.
    """

    resolver = _build_resolver(**options)
    payload = {
        "config": _optional_str(resolver.config_root()),
        "preference": _optional_str(resolver.preference_root()),
        "system": _optional_str(resolver.system_root()),
        "local": str(resolver.local_root()),
    }
    click.echo(json.dumps(payload, indent=indent))


@cli.command("locate", context_settings=CLICK_CONTEXT_SETTINGS)
@_descriptor_options
@click.option(
    "--fallback",
    type=click.Choice(FALLBACK_CHOICES, case_sensitive=False),
    default="none",
    show_default=True,
    help="Fallback applied when no file exists",
)
@click.option("--candidates/--no-candidates", "show_candidates", default=False, help="Include every probed stem")
@click.option("--indent", type=int, default=2, show_default=True, help="JSON indentation")
def cli_locate(fallback: str, show_candidates: bool, indent: int, **options: Any) -> None:
    """Resolve the configuration file and print the outcome as JSON.

    The payload contains ``path`` (``null`` when nothing was found and no
    fallback was requested), ``format`` and ``found``.
    """

    resolver = _build_resolver(**options)
    location = resolver.resolve()
    found = location.is_resolved
    location = _apply_fallback(location, fallback.lower())
    payload: dict[str, Any] = {
        "path": _optional_str(location.path),
        "format": location.file_format.value,
        "found": found,
    }
    if show_candidates:
        payload["candidates"] = [str(path) for path in resolver.candidates()]
    click.echo(json.dumps(payload, indent=indent))


@cli.command("read", context_settings=CLICK_CONTEXT_SETTINGS)
@_descriptor_options
@click.option(
    "--as",
    "output_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default=FileFormat.JSON.value,
    show_default=True,
    help="Format used to print the decoded configuration",
)
def cli_read(output_format: str, **options: Any) -> None:
    """Decode the winning configuration file and print it.

    Fails with "No configuration file found." when nothing exists.
    """

    resolver = _build_resolver(**options)
    data = resolver.resolve().read()
    buffer = io.StringIO()
    registry.encode(FileFormat(output_format.lower()), data, buffer)
    click.echo(buffer.getvalue(), nl=False)


@cli.command("init", context_settings=CLICK_CONTEXT_SETTINGS)
@_descriptor_options
@click.option(
    "--value",
    "raw_value",
    default="{}",
    show_default=True,
    help="JSON document written when the file does not exist yet",
)
def cli_init(raw_value: str, **options: Any) -> None:
    """Create the default configuration file unless one already exists.

    Prints the path of the existing or newly created file.
    """

    default = registry.decode(FileFormat.JSON, raw_value)
    location = _build_resolver(**options).resolve().fallback_to_default()
    location.read_or_initialize(default)
    click.echo(str(location.path))


def _apply_fallback(location: Any, strategy: str) -> Any:
    if strategy == "default":
        return location.fallback_to_default()
    if strategy == "system":
        return location.fallback_to_system_default()
    if strategy == "local":
        return location.fallback_to_local_default()
    return location


def _optional_str(path: Optional[Path]) -> Optional[str]:
    return str(path) if path is not None else None


def _normalize_platform(platform: Optional[str]) -> Optional[str]:
    """Return a ``sys.platform``-style identifier or ``None``."""

    if platform is None:
        return None
    alias = platform.strip().lower()
    if not alias:
        return None
    mapping = {
        "linux": "linux",
        "posix": "linux",
        "darwin": "darwin",
        "mac": "darwin",
        "macos": "darwin",
        "win": "win32",
        "win32": "win32",
        "windows": "win32",
    }
    try:
        return mapping[alias]
    except KeyError as exc:
        raise click.BadParameter(
            "Platform must be one of: linux, posix, darwin, mac, macos, win, win32, windows.",
            param_hint="--platform",
        ) from exc


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_config_locator",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
