"""Canonical formatting and validation of TOML snippets."""

from __future__ import annotations

import datetime as _dt
import math
import re
import tomllib
from typing import Any

_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


class InvalidTomlError(ValueError):
    """Raised when a string cannot be parsed as TOML.

    ``source`` holds the original, unmodified input.
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(reason)
        self.source = source
        self.reason = reason


def _quote(text: str) -> str:
    escapes = {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\t": "\\t",
        "\r": "\\r",
        "\b": "\\b",
        "\f": "\\f",
    }
    parts = []
    for ch in text:
        if ch in escapes:
            parts.append(escapes[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            parts.append(f"\\u{ord(ch):04X}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


def _key(key: str) -> str:
    return key if _BARE_KEY.match(key) else _quote(key)


def _dotted(path: list[str]) -> str:
    return ".".join(_key(part) for part in path)


def _value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
        return value.isoformat()
    if isinstance(value, list):
        return "[" + ", ".join(_value(item) for item in value) + "]"
    if isinstance(value, dict):
        inner = ", ".join(f"{_key(k)} = {_value(v)}" for k, v in sorted(value.items()))
        return "{" + inner + "}"
    raise TypeError(f"unsupported TOML value: {value!r}")


def _is_table_array(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(i, dict) for i in value)


def _emit(table: dict, path: list[str], depth: int, out: list[str]) -> None:
    indent = "  " * depth
    leaves = {k: v for k, v in table.items() if not isinstance(v, dict) and not _is_table_array(v)}
    for key in sorted(leaves):
        out.append(f"{indent}{_key(key)} = {_value(leaves[key])}\n")
    for key in sorted(k for k in table if k not in leaves):
        sub_path = [*path, key]
        value = table[key]
        if isinstance(value, dict):
            out.append(f"\n{indent}[{_dotted(sub_path)}]\n")
            _emit(value, sub_path, depth + 1, out)
        else:
            for item in value:
                out.append(f"\n{indent}[[{_dotted(sub_path)}]]\n")
                _emit(item, sub_path, depth + 1, out)


def normalize_toml(toml_string: str | None) -> str:
    """Return ``toml_string`` in canonical layout; ``""`` for empty input.

    Raises InvalidTomlError when the input is not valid TOML.
    """
    if toml_string is None or toml_string == "":
        return ""
    try:
        tree = tomllib.loads(toml_string)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidTomlError(toml_string, str(exc)) from exc
    out: list[str] = []
    _emit(tree, [], 0, out)
    return "".join(out)


def _normalized_or_input(text: str | None) -> str:
    try:
        return normalize_toml(text)
    except InvalidTomlError as exc:
        return exc.source


def toml_equivalent(old: str | None, new: str | None) -> bool:
    """Tell whether two TOML snippets differ only in formatting."""
    return _normalized_or_input(old) == _normalized_or_input(new)


def string_is_valid_toml(value: Any, key: str) -> tuple[list[str], list[str]]:
    """Validate a schema value as TOML, returning ``(warnings, errors)``."""
    warnings: list[str] = []
    errors: list[str] = []
    if not isinstance(value, str):
        errors.append(f"expected type of {key} to be string")
        return warnings, errors
    try:
        normalize_toml(value)
    except InvalidTomlError as exc:
        errors.append(f"{key} is not valid toml: {exc.reason}")
    return warnings, errors