"""Format registry: extension lookup, codec dispatch, and file probing.

Purpose
-------
Map a :class:`~lib_config_locator.domain.formats.FileFormat` to its codec and
translate codec failures into the domain error taxonomy. Typed values are
converted with pydantic's ``TypeAdapter`` so any model, dataclass, TypedDict
or builtin container can be read and written.

Contents
--------
* :func:`available_formats` / :func:`default_format` – formats usable in this
  installation, and the process-wide default among them.
* :func:`extension` – canonical extension for a format.
* :func:`decode` / :func:`dumps` / :func:`encode` – typed (de)serialization.
* :func:`detect_by_probing` – find ``<base>.<ext>`` on disk.

System Role
-----------
Used by :mod:`lib_config_locator.application.resolver` for probing and by
:mod:`lib_config_locator.application.handle` for reading and writing files.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, Protocol

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..adapters.codecs.structured import BaseCodec, default_codecs
from ..domain.errors import InvalidFormat, UnrepresentableValue, UnsupportedFormat
from ..domain.formats import FileFormat


class TextSink(Protocol):
    """Anything with a ``write(str)`` method (open files, ``io.StringIO``)."""

    def write(self, text: str, /) -> Any: ...


_CODECS: Final[dict[FileFormat, BaseCodec]] = default_codecs()
_SCALARS: Final[frozenset[type]] = frozenset({str, int, float, bool, type(None)})
_JSON_FALLBACK: Final[TypeAdapter[Any]] = TypeAdapter(Any)


def available_formats() -> tuple[FileFormat, ...]:
    """Return the formats whose libraries are installed, in priority order."""

    return tuple(fmt for fmt in FileFormat if _CODECS[fmt].available)


_DEFAULT_FORMAT: Final[FileFormat] = available_formats()[0]


def default_format() -> FileFormat:
    """Return the process-wide default format.

    The first of TOML, JSON, YAML, RON that is available; fixed at import
    time.
    """

    return _DEFAULT_FORMAT


def extension(file_format: FileFormat) -> str:
    """Return the canonical extension of ``file_format`` (``yaml`` for YAML).

    Examples
    --------
    >>> extension(FileFormat.YAML)
    'yaml'
    """

    return file_format.extension


def decode(file_format: FileFormat, text: str, target: Any = None) -> Any:
    """Parse ``text`` and optionally validate it into ``target``.

    Parameters
    ----------
    file_format:
        Format of ``text``.
    text:
        Complete document.
    target:
        Type to validate the parsed data into (pydantic model, dataclass,
        ``dict[str, int]``...). ``None`` returns the plain parsed data.

    Raises
    ------
    InvalidFormat
        Syntax errors or data that does not fit ``target``.
    UnsupportedFormat
        ``file_format`` is not available in this installation.

    Examples
    --------
    >>> decode(FileFormat.JSON, '{"port": "8080"}', dict[str, int])
    {'port': 8080}
    """

    codec = _codec_for(file_format)
    try:
        data = codec.loads(text)
    except codec.errors as exc:
        raise InvalidFormat(f"Invalid {file_format.name}: {exc}", file_format=file_format) from exc
    if target is None:
        return data
    try:
        return TypeAdapter(target).validate_python(data)
    except PydanticValidationError as exc:
        raise InvalidFormat(
            f"{file_format.name} data does not match {_type_name(target)}: {exc}",
            file_format=file_format,
        ) from exc


def dumps(file_format: FileFormat, value: Any) -> str:
    """Serialize ``value`` to a complete ``file_format`` document.

    Models and dataclasses are dumped in pydantic's python mode, so floats
    (``inf``, ``nan``) and non-string mapping keys reach the codec unchanged
    and each format decides whether it can store them. Leftover objects
    without a native counterpart (paths, enums, dates...) are reduced to
    their JSON-compatible form.

    Raises
    ------
    UnrepresentableValue
        When ``value`` (or part of it) cannot be expressed in the format.

    Examples
    --------
    >>> dumps(FileFormat.JSON, {"name": "demo"})
    '{\\n  "name": "demo"\\n}\\n'
    """

    codec = _codec_for(file_format)
    try:
        data = _native(TypeAdapter(type(value)).dump_python(value))
        return codec.dumps(data)
    except (TypeError, ValueError, *codec.errors) as exc:
        raise UnrepresentableValue(
            f"Cannot encode {type(value).__name__} as {file_format.name}: {exc}",
            file_format=file_format,
        ) from exc


def encode(file_format: FileFormat, value: Any, sink: TextSink) -> None:
    """Serialize ``value`` and hand the text to ``sink`` in one ``write`` call.

    Serialization completes before ``sink`` is touched, so a failure never
    leaves partial output behind.
    """

    sink.write(dumps(file_format, value))


def detect_by_probing(base_path: Path, fallback_format: FileFormat) -> tuple[Path, FileFormat] | None:
    """Return the first existing ``<base_path>.<ext>`` together with its format.

    Formats are tried in priority order and each of their detection extensions
    in turn (``yaml`` before ``yml``). When none exists but ``base_path`` itself
    is a file, its own suffix decides the format (``conf.json`` is JSON); a
    suffix naming no available format falls back to ``fallback_format``.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> base = Path(tmp.name) / "app"
    >>> _ = base.with_name("app.json").write_text("{}", encoding="utf-8")
    >>> found = detect_by_probing(base, FileFormat.TOML)
    >>> found[0].name, found[1]
    ('app.json', <FileFormat.JSON: 'json'>)
    >>> tmp.cleanup()
    """

    for file_format in available_formats():
        for suffix in file_format.detection_extensions:
            candidate = base_path.with_name(f"{base_path.name}.{suffix}")
            if candidate.is_file():
                return candidate, file_format
    if base_path.is_file():
        return base_path, _format_of_suffix(base_path, fallback_format)
    return None


def _format_of_suffix(path: Path, fallback_format: FileFormat) -> FileFormat:
    if not path.suffix:
        return fallback_format
    try:
        file_format = FileFormat.from_extension(path.suffix)
    except UnsupportedFormat:
        return fallback_format
    return file_format if file_format in available_formats() else fallback_format


def _native(data: Any) -> Any:
    """Reduce ``data`` to dicts, lists and builtin scalars, keeping float and key values."""

    if type(data) in _SCALARS:
        return data
    if isinstance(data, Mapping):
        return {_native(key): _native(item) for key, item in data.items()}
    if isinstance(data, (list, tuple, set, frozenset)):
        return [_native(item) for item in data]
    return _JSON_FALLBACK.dump_python(data, mode="json")


def _codec_for(file_format: FileFormat) -> BaseCodec:
    codec = _CODECS[file_format]
    if not codec.available:
        raise UnsupportedFormat(
            f"{file_format.name} support is not installed",
            file_format=file_format,
        )
    return codec


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", repr(target))
