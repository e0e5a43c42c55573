"""Tests for the resolver pass: files in, linked document map out."""

import random

import pytest

from manesei.core.notes.resolver import (
    find_by_id,
    load_documents,
    load_files,
    read_file,
    resolve_documents,
)
from manesei.core.tree.navigation import document_location
from manesei.errors import StoreError
from manesei.models.document import DocFile, DocumentMap
from manesei.protocols import StoreProtocol
from tests.unit.fakes import BrokenStore, FakeStore


def assert_tree_invariants(documents: DocumentMap) -> None:
    """Check the properties every linked document map must have."""
    assert "" in documents
    for slug, doc in documents.items():
        assert doc.slug == slug
        assert list(doc.children) == sorted(set(doc.children))
        if slug == "":
            continue
        assert doc.host != slug
        assert doc.host in documents
        assert documents[doc.host].children.count(slug) == 1

    reachable = {""}
    stack = [""]
    while stack:
        for child in documents[stack.pop()].children:
            assert child not in reachable
            reachable.add(child)
            stack.append(child)
    assert reachable == set(documents)


def _files(**bodies: str) -> list[DocFile]:
    return [DocFile(id=k, body=v) for k, v in bodies.items()]


def test_resolve_parent_and_child() -> None:
    documents = load_documents(_files(a=":root Root\n\nHi", b="root:child Child\n\nHello"))

    assert set(documents) == {"", "root", "child"}
    assert documents[""].children == ("root",)
    assert documents["root"].children == ("child",)
    assert document_location(documents, "child") == ["root", "child"]
    assert_tree_invariants(documents)


def test_resolve_collision_marks_duplicate(rng: random.Random) -> None:
    documents = load_documents(_files(a=":foo Foo\n\n", b=":foo Foo\n\n"), rng=rng)

    assert {"foo", "foo-duplicate"} <= set(documents)
    duplicate = documents["foo-duplicate"]
    assert duplicate.is_duplicate is True
    assert duplicate.duplicate_of == "foo"
    assert {documents["foo"].id, duplicate.id} == {"a", "b"}
    assert documents[""].children == ("foo", "foo-duplicate")
    assert_tree_invariants(documents)


def test_resolve_missing_parent_gets_placeholder() -> None:
    documents = load_documents(_files(a="ghost:leaf Leaf\n\n..."))

    assert documents["ghost"].title == "Ghost"
    assert documents["ghost"].content == "# Ghost"
    assert documents["ghost"].children == ("leaf",)
    assert "ghost" in documents[""].children
    assert_tree_invariants(documents)


def test_resolve_self_cycle_attaches_to_root() -> None:
    documents = load_documents(_files(a="x:x T\n\n"))

    assert documents["x"].host == ""
    assert documents[""].children == ("x",)
    assert_tree_invariants(documents)


def test_resolve_root_always_present() -> None:
    documents = load_documents([])

    assert documents[""].title == "🌱"
    assert documents[""].content == "# Manesei"
    assert documents[""].children == ()


def test_resolve_invariants_hold_for_any_file_order(sample_files: list[DocFile]) -> None:
    files = sample_files + _files(
        e=":root Another root\n\n",
        f="loop1:loop2 L2\n\n",
        g="loop2:loop1 L1\n\n",
        h="leaf:deep Deep\n\n",
    )
    shuffler = random.Random(42)
    for _ in range(20):
        shuffler.shuffle(files)
        documents = load_documents(files, rng=random.Random(0))
        assert_tree_invariants(documents)
        for slug in documents:
            document_location(documents, slug)


def test_load_files_reads_every_file(fake_store: FakeStore) -> None:
    files = load_files(fake_store)

    assert [f.id for f in files] == ["a", "b", "c", "d"]
    assert files[0].body == ":root Root\n\nHi"


def test_load_files_wraps_listing_failure() -> None:
    with pytest.raises(StoreError, match="Failed to retrieve document list") as excinfo:
        load_files(BrokenStore())

    assert isinstance(excinfo.value.cause, OSError)


def test_read_file_missing_is_404(fake_store: FakeStore) -> None:
    with pytest.raises(StoreError) as excinfo:
        read_file(fake_store, "nope")

    assert excinfo.value.status == 404
    assert excinfo.value.description == "Failed to open file nope"


def test_read_file_historic_generation(fake_store: FakeStore) -> None:
    with fake_store.write("a") as f:
        f.write(":root New Root\n\n")

    assert read_file(fake_store, "a", 1).body == ":root Root\n\nHi"
    assert read_file(fake_store, "a").body == ":root New Root\n\n"


def test_resolve_documents_from_store(fake_store: FakeStore) -> None:
    documents = resolve_documents(fake_store)

    assert documents["leaf"].headers == {"Tags": "x, y"}
    assert documents[""].children == ("ghost", "root")
    assert_tree_invariants(documents)


def test_find_by_id(documents: DocumentMap) -> None:
    doc = find_by_id(documents, "b")

    assert doc is not None
    assert doc.slug == "child"
    assert find_by_id(documents, "missing") is None
    # Placeholders and the root have no id.
    assert find_by_id(documents, "") is None


def test_fake_store_satisfies_protocol(fake_store: FakeStore) -> None:
    assert isinstance(fake_store, StoreProtocol)


def test_resolve_root_note_with_host_stays_root() -> None:
    documents = load_documents(_files(a="x: Home\n\nbody"))

    assert documents[""].host == ""
    assert documents[""].title == "Home"
    assert "x" not in documents
    assert document_location(documents, "") == []
    assert_tree_invariants(documents)
