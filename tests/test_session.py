from __future__ import annotations

import json

import pytest

from jkv.errors import InvalidState, ParseError
from jkv.model import Document, JsonScalar, ScalarKind
from jkv.session import Direction, EditField, EditSession, SessionStatus


def test_new_session_selects_first_entry(session):
    assert session.selection == 0
    assert session.status == SessionStatus.CLEAN
    assert EditSession().selection is None


def test_select_saturates(session):
    session.select(Direction.PREVIOUS)
    assert session.selection == 0
    session.select(Direction.NEXT)
    session.select(Direction.NEXT)
    session.select(Direction.NEXT)
    assert session.selection == 2


def test_select_next_then_previous_returns(session):
    session.select(Direction.NEXT)
    session.select(Direction.PREVIOUS)
    assert session.selection == 0


def test_select_on_empty_document_is_noop():
    session = EditSession()
    session.select(Direction.NEXT)
    assert session.selection is None


def test_begin_edit_seeds_buffer(session):
    buf = session.begin_edit()
    assert (buf.target, buf.key, buf.text, buf.kind) == (0, "a", "1", ScalarKind.NUMBER)
    assert buf.field == EditField.VALUE


def test_begin_edit_requires_selection_and_no_edit(session):
    session.begin_edit()
    with pytest.raises(InvalidState):
        session.begin_edit()
    with pytest.raises(InvalidState):
        EditSession().begin_edit()


def test_update_buffer_does_not_touch_document(session, abc_document):
    before = Document(list(abc_document))
    session.begin_edit()
    session.update_buffer("99")
    assert session.document == before
    assert session.status == SessionStatus.CLEAN


def test_commit_edit_replaces_value(session):
    session.begin_edit()
    session.update_buffer("2")
    session.commit_edit()
    assert session.document[0].value == JsonScalar(ScalarKind.NUMBER, 2)
    assert session.buffer is None
    assert session.status == SessionStatus.DIRTY
    assert json.loads(session.preview()) == {"a": 2, "b": True, "c": None}


def test_commit_edit_parse_failure_keeps_buffer(session, abc_document):
    before = Document(list(abc_document))
    session.select(Direction.NEXT)
    session.begin_edit()
    session.update_buffer("yes")
    with pytest.raises(ParseError):
        session.commit_edit()
    assert session.document == before
    assert session.buffer is not None
    assert session.buffer.text == "yes"
    assert session.status == SessionStatus.CLEAN


def test_commit_edit_can_rename_key(session):
    session.begin_edit()
    session.update_key("alpha")
    session.commit_edit()
    assert session.document.keys() == ["alpha", "b", "c"]


def test_commit_edit_rejects_empty_or_taken_key(session):
    session.begin_edit()
    session.update_key("b")
    with pytest.raises(ParseError):
        session.commit_edit()
    session.update_key("")
    with pytest.raises(ParseError):
        session.commit_edit()
    assert session.document.keys() == ["a", "b", "c"]


def test_new_entry_is_appended_and_selected(session):
    buf = session.begin_new()
    assert buf.target is None
    assert buf.field == EditField.KEY
    session.update_key("d")
    session.set_kind(ScalarKind.NUMBER)
    session.update_buffer("3.5")
    index = session.commit_edit()
    assert index == 3
    assert session.selection == 3
    assert session.document[3].value == JsonScalar(ScalarKind.NUMBER, 3.5)


def test_new_entry_on_empty_document():
    session = EditSession()
    session.begin_new()
    session.update_key("only")
    session.update_buffer("value")
    session.commit_edit()
    assert session.selection == 0
    assert session.preview() == '{\n    "only": "value"\n}'


def test_set_kind_seeds_text(session):
    session.begin_edit()
    session.set_kind(ScalarKind.BOOLEAN)
    assert session.buffer.text == "false"
    session.set_kind(ScalarKind.NULL)
    assert session.buffer.text == ""
    session.commit_edit()
    assert session.document[0].value.kind == ScalarKind.NULL


def test_toggle_field(session):
    session.begin_edit()
    session.toggle_field()
    assert session.buffer.field == EditField.KEY
    session.toggle_field()
    assert session.buffer.field == EditField.VALUE


def test_cancel_edit(session, abc_document):
    before = Document(list(abc_document))
    session.begin_edit()
    session.update_buffer("5")
    session.cancel_edit()
    assert session.buffer is None
    assert session.document == before
    with pytest.raises(InvalidState):
        session.cancel_edit()


def test_buffer_operations_require_edit(session):
    for op in (
        lambda: session.update_buffer("x"),
        lambda: session.update_key("x"),
        lambda: session.set_kind(ScalarKind.STRING),
        session.toggle_field,
        session.commit_edit,
    ):
        with pytest.raises(InvalidState):
            op()


def test_delete_keeps_same_index(session):
    session.select(Direction.NEXT)
    session.delete_selected()
    assert session.document.keys() == ["a", "c"]
    assert session.selection == 1
    assert session.status == SessionStatus.DIRTY


def test_delete_last_moves_to_previous(session):
    session.select(Direction.NEXT)
    session.select(Direction.NEXT)
    session.delete_selected()
    assert session.selection == 1


def test_delete_only_entry_empties_document():
    session = EditSession(Document.from_mapping({"x": 1}))
    session.delete_selected()
    assert len(session.document) == 0
    assert session.selection is None
    assert session.preview() == "{}"
    with pytest.raises(InvalidState):
        session.delete_selected()


def test_mark_clean(session):
    session.delete_selected()
    session.mark_clean()
    assert not session.dirty
