from __future__ import annotations

import pytest

from jkv.controller import Controller
from jkv.model import Document, Entry, JsonScalar, ScalarKind
from jkv.session import EditSession


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def abc_document() -> Document:
    return Document(
        [
            Entry("a", JsonScalar(ScalarKind.NUMBER, 1)),
            Entry("b", JsonScalar(ScalarKind.BOOLEAN, True)),
            Entry("c", JsonScalar(ScalarKind.NULL, None)),
        ]
    )


@pytest.fixture
def session(abc_document: Document) -> EditSession:
    return EditSession(abc_document)


@pytest.fixture
def controller(session: EditSession, tmp_path) -> Controller:
    return Controller(session, input_path=str(tmp_path / "in.json"))
