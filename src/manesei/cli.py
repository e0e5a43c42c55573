"""CLI for the Manesei wiki (serve, tree, show)."""

from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from manesei.config import DEFAULT_HOST, DEFAULT_PORT, resolve_notes_directory
from manesei.core.markup.parser import parse_document
from manesei.core.notes.resolver import resolve_documents
from manesei.core.tree.outline import render_tree_as_markdown
from manesei.errors import AppError
from manesei.logging_config import configure_logging
from manesei.store import FileStore

app = typer.Typer(help="Manesei: a personal wiki of plain-text notes.")

NotesDirOption = Annotated[
    Path | None,
    typer.Option("--notes-dir", "-d", help="Directory with note files"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Also write log records to this file"),
    ] = None,
) -> None:
    configure_logging(verbose=verbose, log_file=log_file)


def _open_store(notes_dir: Path | None) -> FileStore:
    directory = resolve_notes_directory(notes_dir)
    logger.debug("Serving notes from {}", directory)
    return FileStore(directory)


@app.command()
def serve(
    notes_dir: NotesDirOption = None,
    host: str = typer.Option(DEFAULT_HOST, "--host", help="Interface to listen on"),
    port: int = typer.Option(DEFAULT_PORT, "--port", "-p", help="Port to listen on"),
) -> None:
    """Serve the wiki over HTTP."""
    from manesei.web.app import create_app

    flask_app = create_app(_open_store(notes_dir))
    logger.info("Listening on http://{}:{}/", host, port)
    flask_app.run(host=host, port=port, threaded=True)


@app.command()
def tree(
    notes_dir: NotesDirOption = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-n", help="Max levels to show"),
    ] = None,
) -> None:
    """Print the note tree as a markdown outline."""
    try:
        documents = resolve_documents(_open_store(notes_dir))
    except AppError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    typer.echo(render_tree_as_markdown(documents, max_depth=max_depth), nl=False)


@app.command()
def show(
    slug: str = typer.Argument(..., help="Slug of the note"),
    notes_dir: NotesDirOption = None,
) -> None:
    """Print the rendered HTML body of a note."""
    try:
        documents = resolve_documents(_open_store(notes_dir))
    except AppError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    doc = documents.get(slug)
    if doc is None:
        typer.echo(f"Note '{slug}' not found.")
        raise typer.Exit(1)
    typer.echo(parse_document(doc.content))
