"""Pipeline step functions: load, index, resolve, and render orchestration"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from postref.config import Settings
from postref.core.errors import BuildError, DuplicateUrl
from postref.core.index import Collection
from postref.core.models import BuildResult, Document, ResolvedDocument
from postref.core.parse import discover_files, parse_file
from postref.core.resolve import resolve_document


logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Consumes (metadata, resolved body) per document.

    prepare() sees the whole result before the first render() and must raise if any document
    cannot be rendered; finish() runs once after the last one.
    """

    def prepare(self, result: BuildResult): ...

    def render(self, resolved: ResolvedDocument): ...

    def finish(self, result: BuildResult): ...


def load_documents(path: str | Path, settings: Settings) -> list[Document]:
    """Parse every source file under path. The first failing file aborts the load."""
    root = Path(path)
    if not root.exists():
        raise FileNotFoundError(f"No such file or directory: {root}")
    base = root if root.is_dir() else root.parent
    docs = []
    for p in discover_files(root, settings.source_extensions):
        try:
            docs.append(parse_file(p, base, settings))
        except UnicodeDecodeError as e:
            raise BuildError(p.relative_to(base).as_posix(), f"not valid UTF-8: {e}") from e
    logger.info("Loaded %d document(s) from %s", len(docs), root)
    return docs


def check_unique_urls(docs) -> None:
    """Fail if two documents share a public path; post_url links to either would be ambiguous."""
    owners: dict[str, str] = {}
    for doc in docs:
        if doc.url in owners:
            raise DuplicateUrl(doc.path, doc.url, owners[doc.url])
        owners[doc.url] = doc.path


def build_collection(docs: list[Document]) -> Collection:
    """Insert every document, check public paths are distinct, then seal so resolution can begin."""
    collection = Collection(docs)
    check_unique_urls(collection)
    return collection.seal()


def run_resolve(collection: Collection) -> BuildResult:
    """Resolve every document body in insertion order."""
    result = BuildResult()
    for doc in collection:
        resolved, count = resolve_document(doc, collection)
        result.resolved.append(resolved)
        result.references += count
    logger.info("Resolved %d reference(s) across %d document(s)", result.references, result.count)
    return result


def run_build(
    path: str | Path,
    settings: Settings,
    renderer: Optional[Renderer] = None,
    ) -> BuildResult:
    """Load -> index -> resolve -> render. All-or-nothing: nothing is rendered if any phase fails."""
    collection = build_collection(load_documents(path, settings))
    result = run_resolve(collection)
    if renderer is not None:
        renderer.prepare(result)
        for resolved in result.resolved:
            renderer.render(resolved)
        renderer.finish(result)
        logger.info("Rendered %d document(s)", result.count)
    return result
