"""Tests for notes directory resolution."""

from pathlib import Path

import pytest

from manesei import config
from manesei.config import NOTES_DIR_ENV, resolve_notes_directory


@pytest.fixture(autouse=True)
def _isolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(NOTES_DIR_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "NOTES_DIRECTORIES", [Path("notes"), tmp_path / "fallback"])


def test_override_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(NOTES_DIR_ENV, str(tmp_path / "env"))

    assert resolve_notes_directory(tmp_path / "explicit") == tmp_path / "explicit"


def test_environment_beats_directory_list(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(NOTES_DIR_ENV, str(tmp_path / "env"))

    assert resolve_notes_directory() == tmp_path / "env"


def test_first_existing_directory_is_used(tmp_path: Path) -> None:
    (tmp_path / "fallback").mkdir()

    assert resolve_notes_directory() == tmp_path / "fallback"


def test_default_directory_is_created(tmp_path: Path) -> None:
    directory = resolve_notes_directory()

    assert directory == Path("notes")
    assert (tmp_path / "notes").is_dir()
