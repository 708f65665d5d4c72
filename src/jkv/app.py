"""Terminal application for editing flat JSON objects."""

from __future__ import annotations

import argparse
import logging
import sys

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, Static

from . import persistence, render
from .controller import Controller
from .errors import JkvError
from .model import Document
from .resources import APP_CSS, DESCRIPTION, EPILOG
from .session import EditSession
from .widget import KeyValueEditor

log = logging.getLogger(__name__)


class KeyValueEditorApp(App):
    """TUI app that wraps the KeyValueEditor widget."""

    CSS = APP_CSS
    TITLE = "JSON Editor"
    BINDINGS = [
        Binding("ctrl+q", "request_quit", "Quit", priority=True),
        Binding("ctrl+c", "request_quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        document: Document | None = None,
        input_path: str | None = None,
        output_path: str | None = None,
        dry_run: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.controller = Controller(
            EditSession(document),
            input_path=input_path,
            output_path=output_path,
            dry_run=dry_run,
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="main"):
            yield KeyValueEditor(self.controller, id="editor")
            with VerticalScroll(id="preview-panel"):
                yield Static(id="preview")
        yield Static(id="hint-bar")
        yield Footer()

    def on_mount(self) -> None:
        self._update_title()
        self._update_panels()
        self.query_one("#editor").focus()

    def _update_title(self) -> None:
        controller = self.controller
        target = controller.output_path or controller.input_path
        dirty = " [+]" if controller.session.dirty else ""
        dry = " [DRY]" if controller.dry_run else ""
        self.sub_title = (target or "[new]") + dirty + dry

    def _update_panels(self) -> None:
        parts = render.layout(self.controller)
        self.query_one("#hint-bar", Static).update(parts.hints)
        panel = self.query_one("#preview-panel")
        if parts.preview is None:
            panel.add_class("collapsed")
        else:
            panel.remove_class("collapsed")
            panel.border_title = "Preview"
            self.query_one("#preview", Static).update(parts.preview)

    # -- Actions -----------------------------------------------------------

    def action_request_quit(self) -> None:
        self.query_one("#editor", KeyValueEditor).request_quit()

    # -- Event handlers ----------------------------------------------------

    def on_key_value_editor_changed(self) -> None:
        self._update_title()
        self._update_panels()

    def on_key_value_editor_saved(self, event: KeyValueEditor.Saved) -> None:
        if event.dry_run:
            self.notify(f"Dry run, not written: {event.path}", severity="warning")
        else:
            self.notify(f"Saved: {event.path}", severity="information")

    def on_key_value_editor_save_failed(
        self, event: KeyValueEditor.SaveFailed
    ) -> None:
        self.notify(f"Save failed: {event.error}", severity="error", timeout=6)

    def on_key_value_editor_quit(self) -> None:
        self.exit()


def _configure_logging(log_file: str | None) -> None:
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        logging.getLogger("jkv").addHandler(logging.NullHandler())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jkv",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "file",
        nargs="?",
        default=None,
        help="JSON file to open",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        metavar="PATH",
        help="write changes to PATH instead of the input file",
    )
    parser.add_argument(
        "--dry",
        action="store_true",
        default=False,
        help="do not write any changes to disk",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        metavar="PATH",
        help="write debug logging to PATH",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_file)

    document = None
    if args.file:
        try:
            document = persistence.load(args.file)
        except JkvError as exc:
            log.error("cannot load %s: %s", args.file, exc)
            print(f"jkv: {exc}", file=sys.stderr)
            return 1

    app = KeyValueEditorApp(
        document=document,
        input_path=args.file,
        output_path=args.output,
        dry_run=args.dry,
    )
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
