"""Key/value editor widget."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from . import render
from .controller import Controller


class KeyValueEditor(Widget, can_focus=True):
    """A Textual widget listing the entries of a flat JSON object.

    Key events are handed to a :class:`Controller`; the widget draws the
    entry list (or the edit panel) and a status line, and tells the app
    about saves, failures and quitting through messages.
    """

    DEFAULT_CSS = """
    KeyValueEditor {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    # -- Messages ----------------------------------------------------------

    @dataclass
    class Changed(Message):
        pass

    @dataclass
    class Saved(Message):
        path: str
        dry_run: bool = False

    @dataclass
    class SaveFailed(Message):
        error: str

    @dataclass
    class Quit(Message):
        pass

    # -- Init --------------------------------------------------------------

    def __init__(
        self,
        controller: Controller,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.controller = controller
        self._scroll_top: int = 0

    # -- Helpers -----------------------------------------------------------

    def _ensure_selection_visible(self, list_height: int) -> None:
        selection = self.controller.session.selection
        if selection is None:
            self._scroll_top = 0
            return
        if selection < self._scroll_top:
            self._scroll_top = selection
        elif selection >= self._scroll_top + list_height:
            self._scroll_top = selection - list_height + 1
        last_top = max(0, len(self.controller.session.document) - list_height)
        self._scroll_top = max(0, min(self._scroll_top, last_top))

    # =====================================================================
    # Rendering
    # =====================================================================

    def render(self) -> Text:
        width = self.content_region.width
        height = self.content_region.height
        if height < 3 or width < 10:
            return Text("(too small)")

        status_rows = 2 if render.prompt_line(self.controller).plain else 1
        list_height = max(1, height - status_rows)
        self._ensure_selection_visible(list_height)

        parts = render.layout(
            self.controller, width, start=self._scroll_top, height=list_height
        )
        body = parts.entries
        used = body.plain.count("\n") + 1

        result = Text()
        result.append_text(body)
        result.append("\n" * max(1, list_height - used + 1))
        result.append_text(parts.status)
        return result

    # =====================================================================
    # Key handling
    # =====================================================================

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        self.handle_key(event.key, event.character)

    def handle_key(self, key: str, character: str | None = None) -> None:
        self.controller.handle_key(key, character)
        self._after_change()

    def request_quit(self) -> None:
        self.controller.request_quit()
        self._after_change()

    def _after_change(self) -> None:
        controller = self.controller
        if controller.saved_path is not None:
            self.post_message(self.Saved(controller.saved_path, controller.dry_run))
        if controller.save_error is not None:
            self.post_message(self.SaveFailed(controller.save_error))
        self.post_message(self.Changed())
        if controller.finished:
            self.post_message(self.Quit())
        self.refresh()
