"""Compose full HTML pages from the document tree."""

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape
from markupsafe import Markup

from manesei.config import ROOT_TITLE, SITE_NAME
from manesei.core.markup.parser import parse_document
from manesei.core.tree.navigation import get_breadcrumbs, split_children
from manesei.errors import RenderError
from manesei.models.document import Breadcrumb, Document, DocumentMap

MISSING_DOCUMENT = "<main><h2>This document does not exist.</h2></main>"


def create_environment() -> Environment:
    """Return the Jinja2 environment with the packaged templates."""
    return Environment(
        loader=PackageLoader("manesei", "templates"),
        autoescape=select_autoescape(["html"]),
    )


def breadcrumbs_html(breadcrumbs: tuple[Breadcrumb, ...], *, base: str = "") -> Markup:
    """Return the path bar: the root, then one link per ancestor.

    Links are relative to ``base``; the empty base makes them relative to the
    viewer URL.
    """
    html = Markup('<div class="path"><a class="root" href="/n/">{}</a>').format(ROOT_TITLE)
    for b in breadcrumbs:
        html += Markup(' / <a href="{}{}">{}</a>').format(base, b.slug, b.title)
    return html + Markup("</div>")


def children_html(documents: DocumentMap, slug: str, *, base: str = "") -> Markup:
    """Return the links to the children of ``slug``.

    Children without children of their own form one flat list. Each child with
    children gets its own heading link followed by the list of its children.
    """
    leaves, branches = split_children(documents, slug)
    link = Markup('<li><a class="file" href="{}{}">{}</a></li>')

    html = Markup('<ul class="links">')
    for child in leaves:
        html += link.format(base, child, documents[child].title)
    html += Markup("</ul>")
    for child in branches:
        html += Markup('<a class="file" href="{}{}">{}</a><ul class="links">').format(
            base, child, documents[child].title
        )
        for grandchild in documents[child].children:
            html += link.format(base, grandchild, documents[grandchild].title)
        html += Markup("</ul>")
    return html


class Renderer:
    """Render pages from the packaged templates.

    Template failures are raised as RenderError.
    """

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env or create_environment()

    def _render(self, template: str, description: str, /, **context: object) -> str:
        try:
            return self.env.get_template(template).render(**context)
        except TemplateError as e:
            raise RenderError(description, cause=e) from e

    def page(self, title: str, body: Markup) -> str:
        """Return a full HTML document."""
        return self._render("app.html", "Failed to create HTML document", title=title, body=body)

    def header(
        self, documents: DocumentMap, doc: Document, *, base: str = "", notice: str = ""
    ) -> Markup:
        path = breadcrumbs_html(get_breadcrumbs(documents, doc.slug), base=base)
        return Markup(
            self._render(
                "header.html",
                "Failed to generate page header",
                path=path,
                id=doc.id,
                slug=doc.slug,
                notice=notice,
            )
        )

    def viewer(
        self,
        documents: DocumentMap,
        slug: str | None,
        *,
        base: str = "",
        notice: str = "",
    ) -> str:
        """Return the page showing document ``slug``.

        Args:
            documents: Linked document map.
            slug: Document to show. Unknown slugs (and None) get a "does not
                exist" page that still has the path bar.
            base: Prefix for document links (empty = relative to the viewer).
            notice: Optional line shown below the header.
        """
        doc = documents.get(slug) if slug is not None else None
        if doc is None:
            doc = Document()
            body = Markup(MISSING_DOCUMENT)
            slug = None
        else:
            if doc.is_duplicate and not notice:
                notice = f"Duplicate of {doc.duplicate_of}"
            body = Markup("<main>") + Markup(parse_document(doc.content)) + Markup("</main>")

        html = self.header(documents, doc, base=base, notice=notice) + body
        if slug is None:
            html += Markup('<ul class="links"></ul>')
        else:
            html += children_html(documents, slug, base=base)
        if doc.id:
            html += Markup('<footer><small class="id">{}</small></footer>').format(doc.id)
        return self.page(f"{SITE_NAME}: {doc.title}", html)

    def editor(self, form: object, *, generation: int = 0) -> str:
        """Return the editor page for ``form`` (a DocumentForm)."""
        body = self._render(
            "editor.html", "Failed to generate editor page", form=form, generation=generation
        )
        return self.page(f"{SITE_NAME} (edit)", Markup(body))

    def history(self, doc: Document, generations: list[int]) -> str:
        """Return the list of stored generations of ``doc``."""
        body = self._render(
            "history.html",
            "Failed to generate history page",
            doc=doc,
            generations=sorted(generations, reverse=True),
        )
        return self.page(f"{SITE_NAME} (history): {doc.title}", Markup(body))

    def error(self, description: str, *, status: int, correlation: str) -> str:
        body = self._render(
            "error.html",
            "Failed to generate error page",
            description=description,
            status=status,
            correlation=correlation,
        )
        return self.page(f"{SITE_NAME}: error", Markup(body))

