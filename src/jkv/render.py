"""Projection of editor state into styled text.

Every function here is pure: it reads the controller and its session and
returns ``rich.text.Text`` without changing either.
"""

from __future__ import annotations

import json
from typing import NamedTuple

from rich.text import Text

from .controller import Controller, Mode
from .model import Entry, ScalarKind
from .session import EditBuffer, EditField

KEY_WIDTH = 25

_MODE_STYLE = {
    Mode.BROWSE: "bold white on dark_green",
    Mode.EDITING: "bold white on dark_blue",
    Mode.CONFIRM_DELETE: "bold white on dark_red",
    Mode.EXITING: "bold white on dark_red",
    Mode.SAVE_AS: "bold white on dark_magenta",
}
_KIND_STYLE = {
    ScalarKind.STRING: "green",
    ScalarKind.NUMBER: "yellow",
    ScalarKind.BOOLEAN: "magenta",
    ScalarKind.NULL: "magenta",
}
_SELECTED_STYLE = "black on bright_yellow"


class Layout(NamedTuple):
    entries: Text
    status: Text
    hints: Text
    preview: Text | None


# -- Entry list ------------------------------------------------------------


def entry_line(entry: Entry, selected: bool = False) -> Text:
    key_part = json.dumps(entry.key, ensure_ascii=False)
    value = entry.value.to_json()
    line = Text()
    if selected:
        line.append(f"{key_part:<{KEY_WIDTH}}: {value}", style=_SELECTED_STYLE)
        return line
    line.append(f"{key_part:<{KEY_WIDTH}}", style="cyan")
    line.append(": ", style="white")
    line.append(value, style=_KIND_STYLE[entry.value.kind])
    return line


def entry_list(controller: Controller, start: int = 0, height: int | None = None) -> Text:
    """Entry lines from *start*, at most *height* of them."""
    session = controller.session
    document = session.document
    if not len(document):
        return Text("(empty document - press n to add an entry)", style="dim")
    stop = len(document) if height is None else min(len(document), start + height)
    result = Text()
    for i in range(start, stop):
        if i > start:
            result.append("\n")
        result.append_text(entry_line(document[i], i == session.selection))
    return result


# -- Edit panel ------------------------------------------------------------


def _field(label: str, text: str, focused: bool) -> Text:
    line = Text()
    line.append(f"{label:<7}", style="bold")
    line.append(text, style="bold white" if focused else "white")
    if focused:
        line.append(" ", style="reverse")
    return line


def edit_panel(buffer: EditBuffer) -> Text:
    title = "New entry" if buffer.target is None else "Edit entry"
    result = Text(title, style="bold underline")
    result.append("\n")
    result.append_text(_field("Key:", buffer.key, buffer.field == EditField.KEY))
    result.append("\n")
    value = "null" if buffer.kind == ScalarKind.NULL else buffer.text
    result.append_text(_field("Value:", value, buffer.field == EditField.VALUE))
    result.append("\n")
    result.append("Type:  ", style="bold")
    result.append(buffer.kind.value, style=_KIND_STYLE[buffer.kind])
    return result


# -- Status / prompt -------------------------------------------------------


def prompt_line(controller: Controller) -> Text:
    mode = controller.mode
    session = controller.session
    if mode == Mode.CONFIRM_DELETE and session.selection is not None:
        key = session.document[session.selection].key
        return Text(f'Delete key "{key}"? (y/n)', style="bold red")
    if mode == Mode.EXITING:
        return Text("Save changes before exiting? (y/n)", style="bold red")
    if mode == Mode.SAVE_AS:
        text = Text("Save as: ", style="bold")
        text.append(controller.path_input)
        text.append(" ", style="reverse")
        return text
    return Text()


def status_bar(controller: Controller, width: int = 80) -> Text:
    """Mode label, dirty flag, message and position, like a vim status line."""
    session = controller.session
    mode_label = f" {controller.mode.name.replace('_', ' ')} "
    result = Text()
    result.append(mode_label, style=_MODE_STYLE[controller.mode])
    if session.dirty:
        result.append(" [+] ", style="bold yellow")
    if controller.dry_run:
        result.append(" DRY ", style="bold white on grey37")
    msg = controller.status_msg
    result.append(f"  {msg}", style="bold red" if controller.status_error else "")
    total = len(session.document)
    current = session.selection + 1 if session.selection is not None else 0
    pos = f" {current}/{total} "
    spacer = max(1, width - result.cell_len - len(pos))
    result.append(" " * spacer)
    result.append(pos, style="bold")
    return result


def hint_bar(controller: Controller) -> Text:
    return Text(
        " " + " | ".join(f"({label}) {desc}" for label, desc in controller.hints()),
        style="blue",
    )


# -- Preview ---------------------------------------------------------------

_BRACKET = frozenset("{}[]")
_DIGIT = frozenset("0123456789.-+eE")
_KEYWORDS = ("true", "false", "null")


def json_line_styles(line: str) -> list[str]:
    """Syntax highlight style for every character of one JSON line."""
    n = len(line)
    if n == 0:
        return []

    styles = ["white"] * n
    is_in_str = [False] * n

    # string regions and the first colon outside them
    in_str = False
    first_colon = -1
    prev_ch = ""
    for i, ch in enumerate(line):
        if ch == '"' and prev_ch != "\\":
            in_str = not in_str
            is_in_str[i] = True
        elif in_str:
            is_in_str[i] = True
        elif ch == ":" and first_colon == -1:
            first_colon = i
        prev_ch = ch

    for i, ch in enumerate(line):
        if ch in _BRACKET:
            styles[i] = "bold white"
        elif is_in_str[i]:
            styles[i] = "cyan" if first_colon == -1 or i < first_colon else "green"
        elif ch in _DIGIT:
            styles[i] = "yellow"

    for kw in _KEYWORDS:
        start = 0
        while True:
            p = line.find(kw, start)
            if p == -1:
                break
            for j in range(p, min(p + len(kw), n)):
                if not is_in_str[j]:
                    styles[j] = "magenta"
            start = p + 1

    return styles


def preview(json_text: str) -> Text:
    result = Text()
    for row, line in enumerate(json_text.split("\n")):
        if row:
            result.append("\n")
        styles = json_line_styles(line)
        col = 0
        while col < len(line):
            end = col + 1
            while end < len(line) and styles[end] == styles[col]:
                end += 1
            result.append(line[col:end], style=styles[col])
            col = end
    return result


def layout(
    controller: Controller,
    width: int = 80,
    start: int = 0,
    height: int | None = None,
) -> Layout:
    """All display parts for the current state.

    *start* and *height* window the entry list; the edit panel replaces
    the list while an edit is in progress.
    """
    session = controller.session
    if session.buffer is not None:
        body = edit_panel(session.buffer)
    else:
        body = entry_list(controller, start, height)
    status = prompt_line(controller)
    if status.plain:
        status.append("\n")
    status.append_text(status_bar(controller, width))
    return Layout(
        entries=body,
        status=status,
        hints=hint_bar(controller),
        preview=preview(session.preview()) if controller.show_preview else None,
    )
