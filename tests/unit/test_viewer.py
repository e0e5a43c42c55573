"""Tests for page composition."""

import pytest
from jinja2 import DictLoader, Environment

from manesei.core.notes.resolver import load_documents
from manesei.core.tree.navigation import get_breadcrumbs
from manesei.errors import RenderError
from manesei.models.document import DocFile, Document, DocumentMap
from manesei.render.viewer import MISSING_DOCUMENT, Renderer, breadcrumbs_html, children_html
from manesei.web.forms import DocumentForm


@pytest.fixture
def renderer() -> Renderer:
    return Renderer()


def test_breadcrumbs_link_every_ancestor(documents: DocumentMap) -> None:
    html = breadcrumbs_html(get_breadcrumbs(documents, "child"))

    assert html == (
        '<div class="path"><a class="root" href="/n/">🌱</a>'
        ' / <a href="root">Root</a> / <a href="child">Child</a></div>'
    )


def test_breadcrumbs_escape_titles() -> None:
    documents = {"": Document(), "x": Document(id="1", slug="x", title="<b>x</b>")}

    html = breadcrumbs_html(get_breadcrumbs(documents, "x"), base="/n/")

    assert '<a href="/n/x">&lt;b&gt;x&lt;/b&gt;</a>' in html


def test_children_leaves_then_branches(documents: DocumentMap) -> None:
    html = children_html(documents, "")

    assert html == (
        '<ul class="links"></ul>'
        '<a class="file" href="ghost">Ghost</a><ul class="links">'
        '<li><a class="file" href="leaf">Leaf</a></li></ul>'
        '<a class="file" href="root">Root</a><ul class="links">'
        '<li><a class="file" href="child">Child</a></li></ul>'
    )


def test_viewer_composes_page(renderer: Renderer, documents: DocumentMap) -> None:
    page = renderer.viewer(documents, "child")

    assert "<title>Manesei: Child</title>" in page
    assert ' / <a href="root">Root</a> / <a href="child">Child</a>' in page
    assert '<main>Hello <a href="/n/root">back</a></main>' in page
    assert '<li><a class="file" href="grandchild">Grandchild</a></li>' in page
    assert '<footer><small class="id">b</small></footer>' in page
    assert 'href="/edit/b"' in page
    assert 'href="/new/child"' in page


def test_viewer_empty_body(renderer: Renderer) -> None:
    documents = load_documents([DocFile(id="z", body=":empty Empty\n\n")])

    assert "<main></main>" in renderer.viewer(documents, "empty")


def test_viewer_missing_document(renderer: Renderer, documents: DocumentMap) -> None:
    page = renderer.viewer(documents, "nope")

    assert MISSING_DOCUMENT in page
    assert '<ul class="links"></ul>' in page
    assert "<footer>" not in page
    assert "/edit/" not in page


def test_viewer_placeholder_has_no_edit_link(renderer: Renderer, documents: DocumentMap) -> None:
    page = renderer.viewer(documents, "ghost")

    assert "<main><h1>Ghost</h1></main>" in page
    assert "/edit/" not in page
    assert 'href="/new/ghost"' in page


def test_viewer_marks_duplicates(renderer: Renderer) -> None:
    documents = load_documents(
        [DocFile(id="a", body=":foo Foo\n\n"), DocFile(id="b", body=":foo Other\n\n")]
    )

    page = renderer.viewer(documents, "foo-duplicate")

    assert '<p class="notice">Duplicate of foo</p>' in page


def test_viewer_explicit_notice_and_base(renderer: Renderer, documents: DocumentMap) -> None:
    page = renderer.viewer(documents, "child", base="/n/", notice="Generation 1 of b")

    assert '<p class="notice">Generation 1 of b</p>' in page
    assert '<a class="file" href="/n/grandchild">' in page


def test_editor_page(renderer: Renderer) -> None:
    form = DocumentForm(id="c", host="ghost", slug="leaf", title="A & B", body="<x>")

    page = renderer.editor(form, generation=2)

    assert '<input type="hidden" name="Id" value="c">' in page
    assert 'value="A &amp; B"' in page
    assert "&lt;x&gt;</textarea>" in page
    assert 'action="/delete/c"' in page
    assert "Restoring generation 2" in page


def test_editor_page_for_new_note(renderer: Renderer) -> None:
    page = renderer.editor(DocumentForm(host="root"))

    assert 'name="Host" value="root"' in page
    assert "/delete/" not in page
    assert "Restoring" not in page


def test_history_page_lists_newest_first(renderer: Renderer) -> None:
    doc = Document(id="a", slug="root", title="Root")

    page = renderer.history(doc, [1, 2])

    assert page.index("generation 2") < page.index("generation 1")
    assert 'href="/history/a/2"' in page
    assert 'href="/edit/a?v=1"' in page


def test_history_page_without_generations(renderer: Renderer) -> None:
    page = renderer.history(Document(id="a", slug="root", title="Root"), [])

    assert "No earlier versions." in page


def test_error_page(renderer: Renderer) -> None:
    page = renderer.error("Failed to open file x", status=404, correlation="abcd1234")

    assert "<h2>Failed to open file x</h2>" in page
    assert "Error 404" in page
    assert "abcd1234" in page


def test_template_failure_raises_render_error(documents: DocumentMap) -> None:
    renderer = Renderer(Environment(loader=DictLoader({"app.html": "{{ body }}"})))

    with pytest.raises(RenderError, match="Failed to generate page header"):
        renderer.viewer(documents, "child")
