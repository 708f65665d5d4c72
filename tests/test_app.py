from __future__ import annotations

import json

import pytest

from jkv import persistence
from jkv.app import KeyValueEditorApp, build_parser, main
from jkv.controller import Mode


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "in.json"
    path.write_text('{"a": 1, "b": true, "c": null}', encoding="utf-8")
    return path


def make_app(path, **kwargs) -> KeyValueEditorApp:
    return KeyValueEditorApp(
        document=persistence.load(str(path)), input_path=str(path), **kwargs
    )


@pytest.mark.anyio
async def test_edit_and_save(input_file):
    app = make_app(input_file)
    async with app.run_test() as pilot:
        await pilot.press("enter", "backspace", "2", "enter")
        await pilot.pause()
        assert "[+]" in app.sub_title
        await pilot.press("ctrl+s")
        await pilot.pause()
        assert "[+]" not in app.sub_title
    assert json.loads(input_file.read_text(encoding="utf-8")) == {
        "a": 2,
        "b": True,
        "c": None,
    }


@pytest.mark.anyio
async def test_quit_with_unsaved_changes_prompts(input_file):
    app = make_app(input_file)
    async with app.run_test() as pilot:
        await pilot.press("d", "y", "ctrl+q")
        await pilot.pause()
        assert app.controller.mode == Mode.EXITING
        await pilot.press("n")
        await pilot.pause()
        assert app.controller.finished
    assert json.loads(input_file.read_text(encoding="utf-8")) == {
        "a": 1,
        "b": True,
        "c": None,
    }


@pytest.mark.anyio
async def test_save_on_exit_to_output_file(input_file, tmp_path):
    out = tmp_path / "out.json"
    app = make_app(input_file, output_path=str(out))
    async with app.run_test() as pilot:
        await pilot.press("down", "d", "y", "q", "y")
        await pilot.pause()
        assert app.controller.finished
    assert json.loads(out.read_text(encoding="utf-8")) == {"a": 1, "c": None}


@pytest.mark.anyio
async def test_preview_panel_toggles(input_file):
    app = make_app(input_file)
    async with app.run_test() as pilot:
        panel = app.query_one("#preview-panel")
        assert not panel.has_class("collapsed")
        await pilot.press("p")
        await pilot.pause()
        assert panel.has_class("collapsed")


def test_main_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.json")]) == 1
    assert "jkv: file not found" in capsys.readouterr().err


def test_main_reports_unsupported_values(tmp_path, capsys):
    path = tmp_path / "nested.json"
    path.write_text('{"a": [1]}', encoding="utf-8")
    assert main([str(path)]) == 1
    assert '"a"' in capsys.readouterr().err


def test_parser_options():
    args = build_parser().parse_args(["in.json", "-o", "out.json", "--dry"])
    assert args.file == "in.json"
    assert args.output == "out.json"
    assert args.dry
    assert build_parser().parse_args([]).file is None


def test_main_reports_deeply_nested_file(tmp_path, capsys):
    path = tmp_path / "deep.json"
    path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
    assert main([str(path)]) == 1
    assert "jkv: " in capsys.readouterr().err


def test_main_reports_overflowing_number(tmp_path, capsys):
    path = tmp_path / "big.json"
    path.write_text('{"a": 1e400}', encoding="utf-8")
    assert main([str(path)]) == 1
    assert "out of range" in capsys.readouterr().err
