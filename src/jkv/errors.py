"""Error types raised by the editor core."""

from __future__ import annotations


class JkvError(Exception):
    """Base class for all editor errors."""


class ParseError(JkvError):
    """Malformed JSON on load, or scalar text that does not fit its kind."""


class IoError(JkvError):
    """Reading or writing a file failed."""


class InvalidState(JkvError):
    """An edit session operation was called in a state that forbids it."""


class UnsupportedValue(JkvError):
    """Top-level members hold objects or arrays, which cannot be edited."""

    def __init__(self, keys: list[str]) -> None:
        self.keys = list(keys)
        names = ", ".join(f'"{k}"' for k in self.keys)
        super().__init__(f"unsupported nested value for key(s): {names}")


class NoDestination(JkvError):
    """Save was requested but there is no file to write to."""
