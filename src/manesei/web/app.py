"""Flask application serving the wiki."""

import uuid
from pathlib import Path

from flask import Blueprint, Flask, current_app, redirect, request, send_from_directory
from loguru import logger
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers import Response

from manesei.config import resolve_notes_directory
from manesei.core.notes.header import parse_note
from manesei.core.notes.resolver import (
    find_by_id,
    load_documents,
    load_files,
    read_file,
    resolve_documents,
)
from manesei.errors import AppError, RenderError, StoreError
from manesei.protocols import StoreProtocol
from manesei.render.viewer import Renderer
from manesei.store import FileStore
from manesei.web.forms import DocumentForm, new_document_id

FONTS_DIR = Path(__file__).resolve().parent.parent / "static" / "fonts"

bp = Blueprint("wiki", __name__)


def _store() -> StoreProtocol:
    return current_app.extensions["manesei.store"]


def _renderer() -> Renderer:
    return current_app.extensions["manesei.renderer"]


@bp.route("/")
def index() -> Response:
    return redirect("/n/", code=307)


@bp.route("/n/", defaults={"slug": ""})
@bp.route("/n/<path:slug>")
def view(slug: str) -> tuple[str, int]:
    documents = resolve_documents(_store())
    status = 200 if slug in documents else 404
    return _renderer().viewer(documents, slug), status


@bp.route("/nid/<path:doc_id>")
def view_by_id(doc_id: str) -> Response | tuple[str, int]:
    documents = resolve_documents(_store())
    doc = find_by_id(documents, doc_id)
    if doc is None:
        return _renderer().viewer(documents, None), 404
    return redirect("/n/" + doc.slug, code=302)


@bp.route("/edit/<path:doc_id>", methods=["GET"])
def edit(doc_id: str) -> Response | str:
    generation = request.args.get("v", 0, type=int)
    store = _store()
    if generation == 0:
        doc = find_by_id(resolve_documents(store), doc_id)
    else:
        try:
            doc_file = read_file(store, doc_id, generation)
        except StoreError as e:
            if e.status != 404:
                raise
            doc = None
        else:
            doc = parse_note(doc_file.id, doc_file.body)
    if doc is None:
        # Document does not exist.
        return redirect("/new/", code=307)
    return _renderer().editor(DocumentForm.from_document(doc), generation=generation)


@bp.route("/new/", defaults={"host": ""}, methods=["GET"])
@bp.route("/new/<path:host>", methods=["GET"])
def new(host: str) -> str:
    return _renderer().editor(DocumentForm(host=host))


def _exists(store: StoreProtocol, doc_id: str) -> bool:
    try:
        store.stat(doc_id, follow_symlinks=False)
    except (FileNotFoundError, ValueError):
        return False
    return True


@bp.route("/edit/<path:doc_id>", methods=["POST"])
@bp.route("/new/", defaults={"host": ""}, methods=["POST"])
@bp.route("/new/<path:host>", methods=["POST"])
def save(doc_id: str = "", host: str = "") -> Response:
    """Write the submitted note and show it.

    The ``Id`` form field decides which file is written. A fresh id is minted
    when it is empty or names no existing file.
    """
    form = DocumentForm.from_request(request.form)
    contents = form.to_file()
    store = _store()

    file_id = form.id
    if not file_id or not _exists(store, file_id):
        file_id = new_document_id()
    try:
        with store.write(file_id) as f:
            f.write(contents)
    except (OSError, ValueError) as e:
        raise StoreError(f"Failed to write file {file_id}", cause=e) from e

    logger.info("Saved {!r} as {!r}", form.slug, file_id)
    return redirect("/n/" + form.slug, code=303)


@bp.route("/delete/<path:doc_id>", methods=["POST"])
def delete(doc_id: str) -> Response:
    try:
        _store().remove(doc_id)
    except FileNotFoundError as e:
        raise StoreError(f"Failed to delete file {doc_id}", cause=e, status=404) from e
    except (OSError, ValueError) as e:
        raise StoreError(f"Failed to delete file {doc_id}", cause=e) from e
    return redirect("/n/", code=303)


@bp.route("/history/<doc_id>")
def history(doc_id: str) -> tuple[str, int]:
    store = _store()
    documents = resolve_documents(store)
    doc = find_by_id(documents, doc_id)
    if doc is None:
        return _renderer().viewer(documents, None), 404
    try:
        generations = store.file_history(doc_id)
    except (OSError, ValueError) as e:
        raise StoreError(f"Failed to read history of {doc_id}", cause=e) from e
    return _renderer().history(doc, generations), 200


@bp.route("/history/<doc_id>/<int:rev>")
def history_version(doc_id: str, rev: int) -> tuple[str, int]:
    """Show generation ``rev`` of a note in the context of the current tree."""
    store = _store()
    doc_files = load_files(store)
    try:
        old = read_file(store, doc_id, rev)
    except StoreError as e:
        if e.status != 404:
            raise
        return _renderer().viewer(load_documents(doc_files), None), 404

    doc_files = [f for f in doc_files if f.id != doc_id] + [old]
    documents = load_documents(doc_files)
    doc = find_by_id(documents, doc_id)
    slug = doc.slug if doc is not None else None
    page = _renderer().viewer(
        documents, slug, base="/n/", notice=f"Generation {rev} of {doc_id}"
    )
    return page, 200


@bp.route("/fonts/<path:filename>")
def fonts(filename: str) -> Response:
    return send_from_directory(FONTS_DIR, filename)


def _error_page(description: str, status: int, correlation: str, fallback: str) -> str:
    try:
        return _renderer().error(description, status=status, correlation=correlation)
    except RenderError:
        logger.exception("Failed to render error page")
        return fallback


def handle_app_error(e: AppError) -> tuple[str, int]:
    correlation = uuid.uuid4().hex[:8]
    logger.opt(exception=e.cause or e).error("error ({}; {}): {}", correlation, request.url, e)
    return _error_page(e.description or "Unknown error", e.status, correlation, str(e)), e.status


def handle_unknown_error(e: Exception) -> Response | tuple[str, int]:
    if isinstance(e, HTTPException):
        return e.get_response()
    correlation = uuid.uuid4().hex[:8]
    logger.opt(exception=e).error("error ({}; {}): {}", correlation, request.url, e)
    return _error_page("Unknown error", 500, correlation, f"(Unknown error) {e}"), 500


def create_app(
    store: StoreProtocol | None = None,
    *,
    notes_dir: Path | None = None,
    renderer: Renderer | None = None,
) -> Flask:
    """Create the wiki application.

    Args:
        store: Note store. Defaults to a FileStore on the notes directory.
        notes_dir: Notes directory used when no store is given.
        renderer: Page renderer. Defaults to the packaged templates.
    """
    app = Flask(__name__)
    if store is None:
        store = FileStore(resolve_notes_directory(notes_dir))
    app.extensions["manesei.store"] = store
    app.extensions["manesei.renderer"] = renderer or Renderer()
    app.register_blueprint(bp)
    app.register_error_handler(AppError, handle_app_error)
    app.register_error_handler(Exception, handle_unknown_error)
    return app
