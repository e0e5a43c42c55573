"""Shared test fixtures."""

import random
from collections.abc import Iterator
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from manesei.core.notes.resolver import load_documents
from manesei.models.document import DocFile, DocumentMap
from manesei.store import FileStore
from manesei.web.app import create_app
from tests.unit.fakes import FakeStore

SAMPLE_NOTES = {
    "a": ":root Root\n\nHi",
    "b": "root:child Child\n\nHello {/n/root back}",
    "c": "ghost:leaf Leaf\nTags: x, y\n\n# Leaf\nbody",
    "d": "child:grandchild Grandchild\n\n- one\n- two\n",
}


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def sample_files() -> list[DocFile]:
    return [DocFile(id=k, body=v) for k, v in SAMPLE_NOTES.items()]


@pytest.fixture
def documents(sample_files: list[DocFile], rng: random.Random) -> DocumentMap:
    """Return the linked document map of SAMPLE_NOTES."""
    return load_documents(sample_files, rng=rng)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore(SAMPLE_NOTES)


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """Return a notes directory holding SAMPLE_NOTES as plain files."""
    directory = tmp_path / "notes"
    directory.mkdir(exist_ok=True)
    for doc_id, body in SAMPLE_NOTES.items():
        (directory / doc_id).write_text(body, encoding="utf-8")
    return directory


@pytest.fixture
def file_store(tmp_path: Path) -> FileStore:
    return FileStore(tmp_path / "notes")


@pytest.fixture
def app(fake_store: FakeStore) -> Iterator[Flask]:
    flask_app = create_app(fake_store)
    flask_app.config.update(TESTING=True)
    yield flask_app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()
