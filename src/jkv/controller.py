"""Key handling state machine for the key/value editor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto

from . import persistence
from .errors import IoError, NoDestination, ParseError
from .model import ScalarKind
from .session import Direction, EditField, EditSession

log = logging.getLogger(__name__)


class Mode(Enum):
    BROWSE = auto()
    EDITING = auto()
    CONFIRM_DELETE = auto()
    EXITING = auto()
    SAVE_AS = auto()


@dataclass(frozen=True)
class Binding:
    """A key (or keys) accepted in a mode.

    Bindings with an empty *description* are accepted but not hinted.
    """

    keys: tuple[str, ...]
    action: str
    description: str = ""

    @property
    def label(self) -> str:
        return "/".join(_KEY_LABELS.get(k, k) for k in self.keys)


_KEY_LABELS = {
    "up": "↑",
    "down": "↓",
    "enter": "Enter",
    "escape": "Esc",
    "tab": "Tab",
    "space": "Space",
    "delete": "Del",
    "ctrl+s": "^S",
    "ctrl+t": "^T",
}


class Controller:
    """Maps key events to edit session operations.

    BROWSE:         ↑↓ j k  Enter e  n  d Del  ^S w  p  q
    EDITING:        typing / Backspace / Tab / ^T / Space / Enter / Esc
    CONFIRM_DELETE: y n Esc
    EXITING:        y n Esc
    SAVE_AS:        typing / Backspace / Enter / Esc
    """

    def __init__(
        self,
        session: EditSession,
        input_path: str | None = None,
        output_path: str | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self.session = session
        self.input_path = input_path
        self.output_path = output_path
        self.dry_run = dry_run
        self.mode: Mode = Mode.BROWSE
        self.show_preview: bool = True
        self.finished: bool = False
        self.status_msg: str = ""
        self.status_error: bool = False
        self.path_input: str = ""
        self.saved_path: str | None = None
        self.save_error: str | None = None
        self._save_as_return: Mode = Mode.BROWSE
        self._finish_after_save: bool = False

    # -- Bindings ----------------------------------------------------------

    def available_bindings(self) -> list[Binding]:
        """Bindings valid in the current mode and selection state."""
        mode = self.mode
        session = self.session
        if mode == Mode.BROWSE:
            result = []
            if len(session.document):
                result.append(Binding(("up", "k"), "cursor_up", "up"))
                result.append(Binding(("down", "j"), "cursor_down", "down"))
            if session.selection is not None:
                result.append(Binding(("enter", "e"), "edit", "edit"))
                result.append(Binding(("d", "delete"), "request_delete", "delete"))
            result += [
                Binding(("n",), "new", "new"),
                Binding(("ctrl+s", "w"), "save", "save"),
                Binding(("p",), "toggle_preview", "preview"),
                Binding(("q",), "quit", "quit"),
            ]
            return result
        if mode == Mode.EDITING:
            buf = session.buffer
            result = [
                Binding(("enter",), "submit", "submit"),
                Binding(("escape",), "cancel_edit", "cancel"),
                Binding(("tab",), "toggle_field", "switch"),
                Binding(("ctrl+t",), "cycle_kind", "type"),
                Binding(("backspace",), "backspace"),
            ]
            if (
                buf is not None
                and buf.kind == ScalarKind.BOOLEAN
                and buf.field == EditField.VALUE
            ):
                result.append(Binding(("space",), "toggle_bool", "toggle"))
            return result
        if mode == Mode.CONFIRM_DELETE:
            return [
                Binding(("y",), "delete_yes", "yes"),
                Binding(("n", "escape"), "delete_no", "no"),
            ]
        if mode == Mode.EXITING:
            return [
                Binding(("y",), "exit_save", "save & quit"),
                Binding(("n",), "exit_discard", "discard"),
                Binding(("escape",), "exit_cancel", "cancel"),
            ]
        return [
            Binding(("enter",), "save_as_submit", "save"),
            Binding(("escape",), "save_as_cancel", "cancel"),
            Binding(("backspace",), "backspace"),
        ]

    def hints(self) -> list[tuple[str, str]]:
        return [(b.label, b.description) for b in self.available_bindings() if b.description]

    # -- Dispatch ----------------------------------------------------------

    def handle_key(self, key: str, character: str | None = None) -> None:
        """Process one key event to completion."""
        if self.finished:
            return
        self.saved_path = None
        self.save_error = None

        for binding in self.available_bindings():
            if key in binding.keys:
                self._set_status("")
                getattr(self, f"_action_{binding.action}")()
                return

        if character and character.isprintable():
            if self.mode == Mode.EDITING:
                self._type_into_buffer(character)
            elif self.mode == Mode.SAVE_AS:
                self.path_input += character

    def request_quit(self) -> None:
        """Quit from any mode, abandoning an edit or prompt in progress."""
        if self.finished or self.mode == Mode.EXITING:
            return
        if self.session.editing:
            self.session.cancel_edit()
        self.mode = Mode.BROWSE
        self._finish_after_save = False
        self._action_quit()

    def _set_status(self, msg: str, error: bool = False) -> None:
        self.status_msg = msg
        self.status_error = error

    # -- BROWSE ------------------------------------------------------------

    def _action_cursor_up(self) -> None:
        self.session.select(Direction.PREVIOUS)

    def _action_cursor_down(self) -> None:
        self.session.select(Direction.NEXT)

    def _action_edit(self) -> None:
        self.session.begin_edit()
        self.mode = Mode.EDITING

    def _action_new(self) -> None:
        self.session.begin_new()
        self.mode = Mode.EDITING

    def _action_request_delete(self) -> None:
        self.mode = Mode.CONFIRM_DELETE

    def _action_save(self) -> None:
        self._save(finish=False)

    def _action_toggle_preview(self) -> None:
        self.show_preview = not self.show_preview

    def _action_quit(self) -> None:
        if self.session.dirty:
            self.mode = Mode.EXITING
        else:
            self.finished = True

    # -- EDITING -----------------------------------------------------------

    def _type_into_buffer(self, character: str) -> None:
        buf = self.session.buffer
        if buf is None:
            return
        if buf.field == EditField.KEY:
            self.session.update_key(buf.key + character)
        elif buf.kind != ScalarKind.NULL:
            self.session.update_buffer(buf.text + character)

    def _action_backspace(self) -> None:
        if self.mode == Mode.SAVE_AS:
            self.path_input = self.path_input[:-1]
            return
        buf = self.session.buffer
        if buf is None:
            return
        if buf.field == EditField.KEY:
            self.session.update_key(buf.key[:-1])
        else:
            self.session.update_buffer(buf.text[:-1])

    def _action_toggle_field(self) -> None:
        self.session.toggle_field()

    def _action_cycle_kind(self) -> None:
        buf = self.session.buffer
        if buf is not None:
            self.session.set_kind(buf.kind.next())

    def _action_toggle_bool(self) -> None:
        buf = self.session.buffer
        if buf is not None:
            self.session.update_buffer("false" if buf.text == "true" else "true")

    def _action_submit(self) -> None:
        try:
            self.session.commit_edit()
        except ParseError as e:
            self._set_status(str(e), error=True)
            return
        self.mode = Mode.BROWSE

    def _action_cancel_edit(self) -> None:
        self.session.cancel_edit()
        self.mode = Mode.BROWSE

    # -- CONFIRM_DELETE ----------------------------------------------------

    def _action_delete_yes(self) -> None:
        self.session.delete_selected()
        self.mode = Mode.BROWSE

    def _action_delete_no(self) -> None:
        self.mode = Mode.BROWSE

    # -- EXITING -----------------------------------------------------------

    def _action_exit_save(self) -> None:
        self._save(finish=True)

    def _action_exit_discard(self) -> None:
        log.info("quitting without saving")
        self.finished = True

    def _action_exit_cancel(self) -> None:
        self.mode = Mode.BROWSE

    # -- SAVE_AS -----------------------------------------------------------

    def _action_save_as_submit(self) -> None:
        path = self.path_input.strip()
        if not path:
            self._set_status("enter a file name", error=True)
            return
        self.output_path = path
        self.mode = self._save_as_return
        self._save(finish=self._finish_after_save)

    def _action_save_as_cancel(self) -> None:
        self.mode = self._save_as_return
        self._finish_after_save = False

    # -- Saving ------------------------------------------------------------

    def _save(self, finish: bool) -> None:
        try:
            path = persistence.resolve_output_path(self.input_path, self.output_path)
        except NoDestination:
            self._save_as_return = self.mode
            self._finish_after_save = finish
            self.path_input = ""
            self.mode = Mode.SAVE_AS
            self._set_status("no file name - enter a path to save to")
            return

        if self.dry_run:
            log.info("dry run: skipped writing %s", path)
            self._set_status(f"dry run: not written to {path}")
        else:
            try:
                persistence.save(self.session.document, path, self.session.mark_clean)
            except IoError as e:
                self.save_error = str(e)
                self._set_status(str(e), error=True)
                return
            self._set_status(f"saved: {path}")
        self.saved_path = path
        self._finish_after_save = False
        if finish:
            self.finished = True
