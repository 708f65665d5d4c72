"""Edit session: the single owner of the document being edited."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto

from .errors import InvalidState, ParseError
from .model import Document, ScalarKind, parse_scalar

log = logging.getLogger(__name__)


class Direction(Enum):
    PREVIOUS = -1
    NEXT = 1


class SessionStatus(Enum):
    CLEAN = auto()
    DIRTY = auto()


class EditField(Enum):
    KEY = auto()
    VALUE = auto()


@dataclass
class EditBuffer:
    """Pending text for an entry being edited.

    *target* is the index of the entry being replaced, or ``None`` when
    the buffer describes a new entry.
    """

    target: int | None
    key: str
    text: str
    kind: ScalarKind
    field: EditField = EditField.VALUE


class EditSession:
    def __init__(self, document: Document | None = None) -> None:
        self.document: Document = document if document is not None else Document()
        self.selection: int | None = 0 if len(self.document) else None
        self.buffer: EditBuffer | None = None
        self.status: SessionStatus = SessionStatus.CLEAN

    @property
    def dirty(self) -> bool:
        return self.status == SessionStatus.DIRTY

    @property
    def editing(self) -> bool:
        return self.buffer is not None

    # -- Selection ---------------------------------------------------------

    def select(self, direction: Direction) -> None:
        if self.selection is None:
            return
        last = len(self.document) - 1
        self.selection = max(0, min(self.selection + direction.value, last))

    # -- Editing -----------------------------------------------------------

    def begin_edit(self) -> EditBuffer:
        if self.buffer is not None:
            raise InvalidState("an edit is already in progress")
        if self.selection is None:
            raise InvalidState("no entry selected")
        entry = self.document[self.selection]
        self.buffer = EditBuffer(
            target=self.selection,
            key=entry.key,
            text=entry.value.to_text(),
            kind=entry.value.kind,
        )
        return self.buffer

    def begin_new(self) -> EditBuffer:
        if self.buffer is not None:
            raise InvalidState("an edit is already in progress")
        self.buffer = EditBuffer(
            target=None,
            key="",
            text="",
            kind=ScalarKind.STRING,
            field=EditField.KEY,
        )
        return self.buffer

    def _require_buffer(self) -> EditBuffer:
        if self.buffer is None:
            raise InvalidState("no edit in progress")
        return self.buffer

    def update_buffer(self, text: str) -> None:
        self._require_buffer().text = text

    def update_key(self, text: str) -> None:
        self._require_buffer().key = text

    def set_kind(self, kind: ScalarKind) -> None:
        buf = self._require_buffer()
        buf.kind = kind
        if kind == ScalarKind.BOOLEAN and buf.text not in ("true", "false"):
            buf.text = "false"
        elif kind == ScalarKind.NULL:
            buf.text = ""

    def toggle_field(self) -> None:
        buf = self._require_buffer()
        buf.field = EditField.VALUE if buf.field == EditField.KEY else EditField.KEY

    def commit_edit(self) -> int:
        """Apply the buffer to the document and return the entry index.

        Raises ParseError, leaving the buffer and the document untouched,
        when the key is empty or taken or the text does not fit the kind.
        """
        buf = self._require_buffer()
        if not buf.key:
            raise ParseError("key must not be empty")
        existing = self.document.index_of(buf.key)
        if existing is not None and existing != buf.target:
            raise ParseError(f'key "{buf.key}" already exists')
        value = parse_scalar(buf.kind, buf.text)

        if buf.target is None:
            index = self.document.append(buf.key, value)
        else:
            index = buf.target
            self.document.replace(index, buf.key, value)
        log.debug("committed %s = %s", buf.key, value.to_json())
        self.buffer = None
        self.selection = index
        self.status = SessionStatus.DIRTY
        return index

    def cancel_edit(self) -> None:
        self._require_buffer()
        self.buffer = None

    # -- Deletion ----------------------------------------------------------

    def delete_selected(self) -> None:
        if self.selection is None:
            raise InvalidState("nothing to delete")
        entry = self.document.remove(self.selection)
        log.debug("deleted %s", entry.key)
        remaining = len(self.document)
        if not remaining:
            self.selection = None
        elif self.selection >= remaining:
            self.selection = remaining - 1
        self.status = SessionStatus.DIRTY

    # -- Output ------------------------------------------------------------

    def preview(self) -> str:
        return self.document.to_json()

    def mark_clean(self) -> None:
        self.status = SessionStatus.CLEAN
