"""Scalar values and the flat key/value document being edited."""

from __future__ import annotations

import json
import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidState, ParseError, UnsupportedValue

_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(\.\d+)?([eE][+-]?\d+)?")


class ScalarKind(Enum):
    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    NULL = "Null"

    def next(self) -> ScalarKind:
        """Return the kind after this one, wrapping around."""
        kinds = list(ScalarKind)
        return kinds[(kinds.index(self) + 1) % len(kinds)]


@dataclass(frozen=True)
class JsonScalar:
    """A JSON value that is not an object or an array."""

    kind: ScalarKind
    value: str | int | float | bool | None

    @classmethod
    def from_python(cls, value: object, key: str = "") -> JsonScalar:
        """Wrap a value produced by ``json.loads``."""
        if value is None:
            return cls(ScalarKind.NULL, None)
        if isinstance(value, bool):
            return cls(ScalarKind.BOOLEAN, value)
        if isinstance(value, float) and not math.isfinite(value):
            raise ParseError(f"number out of range for key '{key}'")
        if isinstance(value, (int, float)):
            return cls(ScalarKind.NUMBER, value)
        if isinstance(value, str):
            return cls(ScalarKind.STRING, value)
        raise UnsupportedValue([key])

    def to_json(self) -> str:
        return json.dumps(self.value, ensure_ascii=False)

    def to_text(self) -> str:
        """Text used to seed an edit buffer."""
        if self.kind == ScalarKind.STRING:
            return str(self.value)
        if self.kind == ScalarKind.NULL:
            return ""
        return self.to_json()


NULL = JsonScalar(ScalarKind.NULL, None)


def parse_number(text: str) -> int | float:
    """Parse *text* as a JSON number, keeping integers as ``int``."""
    stripped = text.strip()
    m = _NUMBER_RE.fullmatch(stripped)
    if m is None:
        raise ParseError(f"not a number: {text!r}")
    try:
        if m.group(1) is None and m.group(2) is None:
            return int(stripped)
        value = float(stripped)
    except ValueError as e:
        # int() refuses very long digit strings
        raise ParseError(f"number out of range: {text[:40]!r}") from e
    if not math.isfinite(value):
        raise ParseError(f"number out of range: {text[:40]!r}")
    return value


def parse_scalar(kind: ScalarKind, text: str) -> JsonScalar:
    """Build a scalar of *kind* from user-typed *text*."""
    if kind == ScalarKind.STRING:
        return JsonScalar(kind, text)
    if kind == ScalarKind.NUMBER:
        return JsonScalar(kind, parse_number(text))
    if kind == ScalarKind.BOOLEAN:
        if text == "true":
            return JsonScalar(kind, True)
        if text == "false":
            return JsonScalar(kind, False)
        raise ParseError(f"expected true or false, got {text!r}")
    return NULL


@dataclass(frozen=True)
class Entry:
    key: str
    value: JsonScalar


class Document:
    """Ordered top-level entries of a JSON object, keys unique."""

    def __init__(self, entries: list[Entry] | None = None) -> None:
        self._entries: list[Entry] = []
        for entry in entries or []:
            self.append(entry.key, entry.value)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> Document:
        """Build a document from decoded JSON, rejecting nested values."""
        unsupported = [
            k for k, v in mapping.items() if isinstance(v, (dict, list))
        ]
        if unsupported:
            raise UnsupportedValue(unsupported)
        return cls([Entry(k, JsonScalar.from_python(v, k)) for k, v in mapping.items()])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Entry:
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Document({self._entries!r})"

    def keys(self) -> list[str]:
        return [e.key for e in self._entries]

    def index_of(self, key: str) -> int | None:
        for i, entry in enumerate(self._entries):
            if entry.key == key:
                return i
        return None

    def append(self, key: str, value: JsonScalar) -> int:
        if self.index_of(key) is not None:
            raise InvalidState(f"duplicate key: {key!r}")
        self._entries.append(Entry(key, value))
        return len(self._entries) - 1

    def replace(self, index: int, key: str, value: JsonScalar) -> None:
        existing = self.index_of(key)
        if existing is not None and existing != index:
            raise InvalidState(f"duplicate key: {key!r}")
        self._entries[index] = Entry(key, value)

    def remove(self, index: int) -> Entry:
        return self._entries.pop(index)

    def to_dict(self) -> dict[str, object]:
        return {e.key: e.value.value for e in self._entries}

    def to_json(self, indent: int | None = 4) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
