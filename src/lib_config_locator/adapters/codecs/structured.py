"""Structured text codecs.

Purpose
-------
Convert configuration text into plain Python data and back. Codecs are small
wrappers around ``tomllib``/``tomli_w``, ``json``, ``yaml.safe_load`` and the
in-package RON module so error mapping, typing and logging live in one place
(:mod:`lib_config_locator.application.registry`).

Contents
--------
* :class:`BaseCodec` – availability flag and the exception types a codec
  raises for malformed input or unrepresentable values.
* :class:`TOMLCodec` – the canonical TOML format.
* :class:`JSONCodec` – JSON via the standard library.
* :class:`YAMLCodec` – YAML (only available when PyYAML is installed).
* :class:`RONCodec` – Rusty Object Notation.

System Role
-----------
Each codec satisfies :class:`lib_config_locator.application.ports.Codec`. A
codec whose library is missing reports ``available = False``; the registry
then treats its format as not built in.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, ClassVar

try:  # Python >= 3.11
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

try:
    import tomli_w
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    tomli_w = None  # type: ignore[assignment]

try:
    import yaml  # type: ignore[import-untyped]
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    yaml = None  # type: ignore[assignment]

from ...domain.formats import FileFormat
from . import ron


class BaseCodec:
    """Common attributes shared by the structured codecs."""

    file_format: ClassVar[FileFormat]

    @property
    def available(self) -> bool:
        """Return ``True`` when the backing library can be used."""

        return True

    @property
    def errors(self) -> tuple[type[BaseException], ...]:
        """Exception types signalling malformed text or unrepresentable data."""

        return (ValueError, TypeError)


class TOMLCodec(BaseCodec):
    """TOML documents: ``tomllib`` for reading, ``tomli_w`` for writing."""

    file_format = FileFormat.TOML

    @property
    def available(self) -> bool:
        return tomli_w is not None

    def loads(self, text: str) -> Any:
        """Parse a TOML document.

        Examples
        --------
        >>> TOMLCodec().loads('[server]\\nport = 8080\\n')
        {'server': {'port': 8080}}
        """

        return tomllib.loads(text)

    def dumps(self, data: Any) -> str:
        """Render ``data`` as TOML; the top level must be a table.

        TOML has no null, so table entries whose value is ``None`` are left
        out. ``None`` inside an array is still rejected by ``tomli_w``.

        Examples
        --------
        >>> TOMLCodec().dumps({"name": "demo", "token": None})
        'name = "demo"\\n'
        """

        if not isinstance(data, Mapping):
            raise TypeError(f"TOML documents must be tables, got {type(data).__name__}")
        _require_string_keys(data, "TOML")
        return tomli_w.dumps(_without_none(data))


class JSONCodec(BaseCodec):
    """JSON documents via the standard library."""

    file_format = FileFormat.JSON

    def loads(self, text: str) -> Any:
        """Parse a JSON document.

        Examples
        --------
        >>> JSONCodec().loads('{"enabled": true}')
        {'enabled': True}
        """

        return json.loads(text)

    def dumps(self, data: Any) -> str:
        """Render ``data`` as indented JSON.

        JSON has no ``inf``/``nan`` and only string keys; such values raise
        ``ValueError``/``TypeError`` instead of being rewritten.

        Examples
        --------
        >>> JSONCodec().dumps({1: "a"})
        Traceback (most recent call last):
        ...
        TypeError: JSON object keys must be strings, got int
        """

        _require_string_keys(data, "JSON")
        return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False) + "\n"


class YAMLCodec(BaseCodec):
    """YAML documents when PyYAML is available."""

    file_format = FileFormat.YAML

    @property
    def available(self) -> bool:
        return yaml is not None

    @property
    def errors(self) -> tuple[type[BaseException], ...]:
        return (yaml.YAMLError, ValueError, TypeError)

    def loads(self, text: str) -> Any:
        """Parse a YAML document; an empty document yields ``None``."""

        return yaml.safe_load(text)

    def dumps(self, data: Any) -> str:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


class RONCodec(BaseCodec):
    """Rusty Object Notation documents."""

    file_format = FileFormat.RON

    def loads(self, text: str) -> Any:
        return ron.loads(text)

    def dumps(self, data: Any) -> str:
        return ron.dumps(data)


def _require_string_keys(data: Any, format_name: str) -> None:
    if isinstance(data, Mapping):
        for key, value in data.items():
            if not isinstance(key, str):
                raise TypeError(f"{format_name} object keys must be strings, got {type(key).__name__}")
            _require_string_keys(value, format_name)
    elif isinstance(data, list):
        for item in data:
            _require_string_keys(item, format_name)


def _without_none(table: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in table.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            value = _without_none(value)
        elif isinstance(value, list):
            value = [_without_none(item) if isinstance(item, Mapping) else item for item in value]
        result[key] = value
    return result


def default_codecs() -> dict[FileFormat, BaseCodec]:
    """Return one codec instance per format, in priority order.

    Examples
    --------
    >>> list(default_codecs())
    [<FileFormat.TOML: 'toml'>, <FileFormat.JSON: 'json'>, <FileFormat.YAML: 'yaml'>, <FileFormat.RON: 'ron'>]
    """

    codecs: list[BaseCodec] = [TOMLCodec(), JSONCodec(), YAMLCodec(), RONCodec()]
    return {codec.file_format: codec for codec in codecs}
