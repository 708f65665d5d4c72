"""Reading and writing the document file."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path

from .errors import IoError, NoDestination, ParseError
from .model import Document, parse_number

log = logging.getLogger(__name__)


def resolve_output_path(
    input_path: str | None, explicit_output_path: str | None = None
) -> str:
    """Pick the file a save should write to.

    An explicit output path wins; otherwise the input file is overwritten.
    Raises NoDestination when neither is known.
    """
    if explicit_output_path:
        return explicit_output_path
    if input_path:
        return input_path
    raise NoDestination("no file name given")


def _reject_constant(name: str) -> None:
    raise ParseError(f"invalid JSON number: {name}")


def loads(content: str) -> Document:
    """Parse JSON text whose root is an object into a Document."""
    try:
        parsed = json.loads(
            content,
            parse_constant=_reject_constant,
            parse_float=parse_number,
            parse_int=parse_number,
        )
    except json.JSONDecodeError as e:
        raise ParseError(f"{e.msg} (line {e.lineno}, column {e.colno})") from e
    except RecursionError as e:
        raise ParseError("document is nested too deeply") from e
    except ValueError as e:
        raise ParseError(str(e)) from e
    if not isinstance(parsed, dict):
        raise ParseError(
            f"top-level value must be an object, not {type(parsed).__name__}"
        )
    return Document.from_mapping(parsed)


def load(path: str) -> Document:
    try:
        raw = Path(path).read_bytes()
    except FileNotFoundError as e:
        raise IoError(f"file not found: {path}") from e
    except OSError as e:
        raise IoError(f"cannot read {path}: {e.strerror or e}") from e
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8") from e
    document = loads(content)
    log.info("loaded %d entries from %s", len(document), path)
    return document


def dumps(document: Document) -> str:
    return document.to_json() + "\n"


def save(
    document: Document,
    path: str,
    on_success: Callable[[], None] | None = None,
) -> None:
    """Write *document* to *path* atomically.

    The text goes to a temporary file next to *path*, which then replaces
    it, so an interrupted save leaves the previous file intact.
    """
    content = dumps(document).encode("utf-8")
    target = Path(path)
    directory = target.parent
    tmp_name: str | None = None
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=directory
        )
        with os.fdopen(fd, "wb") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        if target.exists():
            os.chmod(tmp_name, target.stat().st_mode & 0o7777)
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as e:
        log.error("save to %s failed: %s", path, e)
        raise IoError(f"cannot write {path}: {e.strerror or e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                log.warning("could not remove temporary file %s", tmp_name)
    log.info("saved %d entries to %s", len(document), path)
    if on_success is not None:
        on_success()
