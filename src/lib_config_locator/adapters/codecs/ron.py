"""Reader and writer for RON (Rusty Object Notation) documents.

Purpose
-------
Give the RON format the same ``loads``/``dumps`` shape as :mod:`json` so the
structured codecs can treat it like any other format. Only plain data is
produced and accepted: structs and maps become ``dict``, lists and tuples
become ``list``, ``Some(x)`` unwraps to ``x``, ``None`` and ``()`` become
``None``.

Contents
--------
* :class:`RonError` – syntax error carrying line/column information.
* :func:`loads` – parse a RON document.
* :func:`dumps` – render plain data as an indented RON document.

Mapping rules
-------------
* ``Name(field: value, ...)`` and ``(field: value, ...)`` → ``{"field": value}``
  (struct names are dropped).
* ``Name(a, b)`` → ``{"Name": [a, b]}``, ``Name(a)`` → ``{"Name": a}``;
  a bare ``Name`` → ``"Name"`` (enum variants).
* When writing, a ``dict`` whose keys are all identifiers is rendered as an
  anonymous struct, any other non-empty ``dict`` as a RON map.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from typing import Any, Callable

_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_PREFIXED_INT = re.compile(r"0(?:x[0-9A-Fa-f_]+|o[0-7_]+|b[01_]+)")
_DECIMAL = re.compile(r"[0-9][0-9_]*(?:\.[0-9_]*)?(?:[eE][+-]?[0-9_]+)?|\.[0-9][0-9_]*(?:[eE][+-]?[0-9_]+)?")
_RAW_STRING_START = re.compile(r'r(#*)"')

_KEYWORDS: dict[str, Any] = {
    "true": True,
    "false": False,
    "None": None,
    "inf": math.inf,
    "NaN": math.nan,
}

_SIMPLE_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "b": "\b",
    "f": "\f",
}


class RonError(ValueError):
    """Raised for malformed RON input.

    Attributes
    ----------
    line / column:
        1-based position of the offending character.
    """

    def __init__(self, message: str, *, line: int, column: int) -> None:
        super().__init__(f"{message} at line {line} column {column}")
        self.line = line
        self.column = column


def loads(text: str) -> Any:
    """Parse ``text`` into plain Python data.

    Examples
    --------
    >>> loads('Config(name: "demo", ids: [1, 2], extra: Some(0.5))')
    {'name': 'demo', 'ids': [1, 2], 'extra': 0.5}
    >>> loads('{"a": (1, 2)}')
    {'a': [1, 2]}
    """

    return _Reader(text).document()


def dumps(data: Any, *, indent: int = 4) -> str:
    """Render ``data`` as a RON document terminated by a newline.

    Raises
    ------
    TypeError
        When ``data`` contains values RON cannot represent.

    Examples
    --------
    >>> print(dumps({"name": "demo", "ids": [1, 2]}), end="")
    (
        name: "demo",
        ids: [
            1,
            2,
        ],
    )
    """

    return _render(data, 0, indent) + "\n"


class _Reader:
    """Recursive-descent parser over a single document."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def document(self) -> Any:
        self._skip_attributes()
        value = self._value()
        self._skip_trivia()
        if self.pos != len(self.text):
            raise self._error("Unexpected trailing characters")
        return value

    def _skip_attributes(self) -> None:
        """Skip ``#![enable(...)]`` extension attributes at the top of the file."""

        self._skip_trivia()
        while self.text.startswith("#![", self.pos):
            end = self.text.find("]", self.pos)
            if end < 0:
                raise self._error("Unterminated attribute")
            self.pos = end + 1
            self._skip_trivia()

    def _skip_trivia(self) -> None:
        text = self.text
        while self.pos < len(text):
            if text[self.pos].isspace():
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end < 0 else end + 1
            elif text.startswith("/*", self.pos):
                self._skip_block_comment()
            else:
                break

    def _skip_block_comment(self) -> None:
        # block comments nest
        start = self.pos
        depth = 0
        while self.pos < len(self.text):
            if self.text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif self.text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    return
            else:
                self.pos += 1
        self.pos = start
        raise self._error("Unterminated block comment")

    def _value(self) -> Any:
        self._skip_trivia()
        if self.pos >= len(self.text):
            raise self._error("Unexpected end of input")
        char = self.text[self.pos]
        if char == "[":
            self.pos += 1
            return self._sequence("]")
        if char == "{":
            return self._map()
        if char == "(":
            return self._parenthesised(None)
        if char == '"':
            return self._string()
        if char == "'":
            return self._char()
        if char == "r" and _RAW_STRING_START.match(self.text, self.pos):
            return self._raw_string()
        if char in "+-." or char.isdigit():
            return self._number()
        ident = self._match(_IDENT)
        if ident is None:
            raise self._error(f"Unexpected character {char!r}")
        return self._after_identifier(ident)

    def _after_identifier(self, ident: str) -> Any:
        if ident in _KEYWORDS:
            return _KEYWORDS[ident]
        self._skip_trivia()
        if ident == "Some":
            self._expect("(")
            value = self._value()
            self._skip_trivia()
            self._accept(",")
            self._skip_trivia()
            self._expect(")")
            return value
        if self._peek() == "(":
            return self._parenthesised(ident)
        return ident

    def _parenthesised(self, name: str | None) -> Any:
        self._expect("(")
        self._skip_trivia()
        if self._peek() == ")":
            self.pos += 1
            return None if name is None else {}
        if self._field_ahead():
            return self._fields()
        items = self._sequence(")")
        if name is None:
            return items
        return {name: items[0] if len(items) == 1 else items}

    def _field_ahead(self) -> bool:
        start = self.pos
        try:
            if self._match(_IDENT) is None:
                return False
            self._skip_trivia()
            return self._peek() == ":" and not self.text.startswith("::", self.pos)
        finally:
            self.pos = start

    def _fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        while True:
            self._skip_trivia()
            if self._peek() == ")":
                break
            key = self._match(_IDENT)
            if key is None:
                raise self._error("Expected field name")
            self._skip_trivia()
            self._expect(":")
            fields[key] = self._value()
            self._skip_trivia()
            if not self._accept(","):
                break
        self._skip_trivia()
        self._expect(")")
        return fields

    def _sequence(self, closing: str) -> list[Any]:
        items: list[Any] = []
        while True:
            self._skip_trivia()
            if self._peek() == closing:
                break
            items.append(self._value())
            self._skip_trivia()
            if not self._accept(","):
                break
        self._skip_trivia()
        self._expect(closing)
        return items

    def _map(self) -> dict[Any, Any]:
        self._expect("{")
        result: dict[Any, Any] = {}
        while True:
            self._skip_trivia()
            if self._peek() == "}":
                break
            key_pos = self.pos
            key = self._value()
            if isinstance(key, (list, dict)):
                self.pos = key_pos
                raise self._error("Map keys must be scalar values")
            self._skip_trivia()
            self._expect(":")
            result[key] = self._value()
            self._skip_trivia()
            if not self._accept(","):
                break
        self._skip_trivia()
        self._expect("}")
        return result

    def _string(self) -> str:
        self.pos += 1
        parts: list[str] = []
        text = self.text
        while True:
            if self.pos >= len(text):
                raise self._error("Unterminated string")
            char = text[self.pos]
            if char == '"':
                self.pos += 1
                return "".join(parts)
            if char == "\\":
                parts.append(self._escape())
            else:
                parts.append(char)
                self.pos += 1

    def _raw_string(self) -> str:
        match = _RAW_STRING_START.match(self.text, self.pos)
        assert match is not None
        terminator = '"' + match.group(1)
        start = match.end()
        end = self.text.find(terminator, start)
        if end < 0:
            raise self._error("Unterminated raw string")
        self.pos = end + len(terminator)
        return self.text[start:end]

    def _char(self) -> str:
        self.pos += 1
        if self._peek() == "\\":
            value = self._escape()
        elif self.pos < len(self.text):
            value = self.text[self.pos]
            self.pos += 1
        else:
            raise self._error("Unterminated character literal")
        self._expect("'")
        return value

    def _escape(self) -> str:
        code = self.text[self.pos + 1 : self.pos + 2]
        if code in _SIMPLE_ESCAPES:
            self.pos += 2
            return _SIMPLE_ESCAPES[code]
        if code == "x":
            return self._hex_escape(2, 2)
        if code == "u":
            if self.text.startswith("{", self.pos + 2):
                end = self.text.find("}", self.pos + 3)
                if end < 0:
                    raise self._error("Unterminated unicode escape")
                digits = self.text[self.pos + 3 : end]
                self.pos = end + 1
                return self._codepoint(digits)
            first = self._hex_escape(2, 4)
            if "\ud800" <= first <= "\udbff" and self.text.startswith("\\u", self.pos):
                start = self.pos
                second = self._hex_escape(2, 4)
                if "\udc00" <= second <= "\udfff":
                    return chr(0x10000 + ((ord(first) - 0xD800) << 10) + (ord(second) - 0xDC00))
                self.pos = start
            return first
        raise self._error(f"Unknown escape sequence \\{code}")

    def _hex_escape(self, prefix: int, width: int) -> str:
        digits = self.text[self.pos + prefix : self.pos + prefix + width]
        if len(digits) != width:
            raise self._error("Truncated escape sequence")
        self.pos += prefix + width
        return self._codepoint(digits)

    def _codepoint(self, digits: str) -> str:
        try:
            return chr(int(digits, 16))
        except ValueError as exc:
            raise self._error(f"Invalid escape digits {digits!r}") from exc

    def _number(self) -> int | float:
        sign = ""
        if self.text[self.pos] in "+-":
            sign = self.text[self.pos]
            self.pos += 1
        ident = self._match(_IDENT)
        if ident is not None:
            if ident == "inf":
                return -math.inf if sign == "-" else math.inf
            if ident == "NaN":
                return math.nan
            raise self._error(f"Invalid number {sign}{ident}")
        negate: Callable[[Any], Any] = (lambda value: -value) if sign == "-" else (lambda value: value)
        prefixed = self._match(_PREFIXED_INT)
        if prefixed is not None:
            return negate(int(prefixed.replace("_", ""), 0))
        literal = self._match(_DECIMAL)
        if literal is None:
            raise self._error("Invalid number")
        cleaned = literal.replace("_", "")
        if any(marker in cleaned for marker in ".eE"):
            return negate(float(cleaned))
        return negate(int(cleaned))

    def _match(self, pattern: re.Pattern[str]) -> str | None:
        found = pattern.match(self.text, self.pos)
        if found is None:
            return None
        self.pos = found.end()
        return found.group(0)

    def _peek(self) -> str:
        return self.text[self.pos : self.pos + 1]

    def _accept(self, token: str) -> bool:
        if self.text.startswith(token, self.pos):
            self.pos += len(token)
            return True
        return False

    def _expect(self, token: str) -> None:
        if not self._accept(token):
            found = self._peek() or "end of input"
            raise self._error(f"Expected {token!r}, found {found!r}")

    def _error(self, message: str) -> RonError:
        consumed = self.text[: self.pos]
        line = consumed.count("\n") + 1
        column = self.pos - (consumed.rfind("\n") + 1) + 1
        return RonError(message, line=line, column=column)


def _render(value: Any, level: int, indent: int) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _render_float(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, Mapping):
        return _render_mapping(value, level, indent)
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [_render(item, level + 1, indent) for item in value]
        return _block("[", "]", items, level, indent)
    raise TypeError(f"Object of type {type(value).__name__} is not RON serializable")


def _render_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return repr(value)


def _render_mapping(value: Mapping[Any, Any], level: int, indent: int) -> str:
    if not value:
        return "{}"
    if all(isinstance(key, str) and _IDENT.fullmatch(key) for key in value):
        items = [f"{key}: {_render(item, level + 1, indent)}" for key, item in value.items()]
        return _block("(", ")", items, level, indent)
    items = []
    for key, item in value.items():
        if key is not None and not isinstance(key, (str, int, float)):
            raise TypeError(f"RON map keys must be scalars, got {type(key).__name__}")
        items.append(f"{_render(key, level + 1, indent)}: {_render(item, level + 1, indent)}")
    return _block("{", "}", items, level, indent)


def _block(opening: str, closing: str, items: list[str], level: int, indent: int) -> str:
    inner = " " * (indent * (level + 1))
    outer = " " * (indent * level)
    body = "".join(f"{inner}{item},\n" for item in items)
    return f"{opening}\n{body}{outer}{closing}"
