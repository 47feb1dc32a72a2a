"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from postref.config import Settings, load_config
from postref.core.errors import BuildError
from postref.core.export import ExportRenderer
from postref.core.pipeline import build_collection, load_documents, run_build, run_resolve
from postref.core.resolve import find_target, references
from postref.logging_setup import configure_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging from it."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def _load(path: str, settings: Settings):
    """Load and index path, mapping build failures onto a CLI error."""
    try:
        return build_collection(load_documents(path, settings))
    except (BuildError, FileNotFoundError) as e:
        _fail(str(e))


def build_cmd(
    path: Annotated[str, typer.Argument(help="Source file or directory")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--no-strict", help="Reject unknown front matter keys")] = None,
    permalink: Annotated[Optional[str], typer.Option("--permalink", help="Public path template")] = None,
    ):
    """Run the full build: load -> index -> resolve -> write."""
    settings = _settings(overrides={"output_dir": out, "strict_frontmatter": strict, "permalink": permalink})
    output_dir = Path(settings.output_dir)
    renderer = ExportRenderer(output_dir)
    try:
        result = run_build(path, settings, renderer)
    except (BuildError, FileNotFoundError) as e:
        _fail(str(e))
    except OSError as e:
        _fail("Write failed", e)
    for doc_path, dest in renderer.written:
        typer.echo(f"  {doc_path} -> {dest}")
    typer.echo(
        f"Built {result.count} document(s), "
        f"{result.references} reference(s) resolved, output in {output_dir}/"
    )


def check_cmd(
    path: Annotated[str, typer.Argument(help="Source file or directory")],
    strict: Annotated[Optional[bool], typer.Option("--strict/--no-strict", help="Reject unknown front matter keys")] = None,
    ):
    """Validate front matter, paths, and cross-references without writing anything."""
    settings = _settings(overrides={"strict_frontmatter": strict})
    collection = _load(path, settings)
    try:
        result = run_resolve(collection)
    except BuildError as e:
        _fail(str(e))
    typer.echo(f"OK - {result.count} document(s), {result.references} reference(s)")


def list_cmd(
    path: Annotated[str, typer.Argument(help="Source file or directory")],
    tag: Annotated[Optional[str], typer.Option("--tag", help="Only documents with this tag")] = None,
    title: Annotated[Optional[str], typer.Option("--title", help="Only documents with this exact title")] = None,
    ):
    """List documents as path, public url, and title."""
    settings = _settings()
    collection = _load(path, settings)
    if title is not None:
        docs = [d for d in collection.lookup_by_title(title) if tag is None or tag in d.tags]
    elif tag is not None:
        docs = list(collection.lookup_by_tag(tag))
    else:
        docs = list(collection)
    if not docs:
        typer.echo("No documents found.")
        raise typer.Exit(1)
    for doc in docs:
        typer.echo(f"{doc.path}\t{doc.url}\t{doc.title}")


def refs_cmd(
    path: Annotated[str, typer.Argument(help="Source file or directory")],
    ):
    """Show every post_url reference and the document it resolves to."""
    settings = _settings()
    collection = _load(path, settings)
    for doc in collection:
        frags = references(doc.body)
        if not frags:
            continue
        typer.echo(doc.path)
        for frag in frags:
            try:
                target = find_target(frag, collection, doc.path)
            except BuildError as e:
                _fail(str(e))
            typer.echo(f"  {frag} -> {target.path} ({target.url})")
