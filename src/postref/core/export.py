"""Export renderer: write resolved documents and a JSON manifest to the output directory"""

import json
import logging
from pathlib import Path, PurePosixPath

from postref.core.errors import BuildError, DuplicateUrl
from postref.core.models import BuildResult, ResolvedDocument
from postref.core.parse import dump_frontmatter


logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.json"


def build_page(resolved: ResolvedDocument) -> str:
    """Return the resolved body with the document's original front matter prepended."""
    return dump_frontmatter(dict(resolved.metadata), resolved.resolved_body)


def build_manifest(resolved: list[ResolvedDocument]) -> dict:
    """Build the manifest dict: one entry per document, in build order.

    description falls back to the body's first paragraph when front matter has none.
    """
    return {
        "documents": [
            {
                "path": r.document.path,
                "url": r.document.url,
                "title": r.document.title,
                "description": r.document.description or r.document.excerpt,
                "layout": r.document.layout,
                "tags": list(r.document.tags),
                "date": r.document.date.isoformat() if r.document.date else None,
                "hash": r.document.hash,
            }
            for r in resolved
        ],
    }


def output_path(output_dir: Path, url: str, doc_path: str) -> Path:
    """Map a public url onto a file under output_dir ('/a/' -> a/index.html)."""
    rel = PurePosixPath(url.lstrip('/'))
    if '..' in rel.parts:
        raise BuildError(doc_path, f"permalink escapes the output directory: {url}")
    if url.endswith('/') or not rel.parts:
        rel = rel / 'index.html'
    return output_dir.joinpath(*rel.parts)


class ExportRenderer:
    """Default rendering collaborator: one file per document at its url, plus manifest.json."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.written: list[tuple[str, Path]] = []
        self._planned: dict[str, Path] = {}

    def prepare(self, result: BuildResult) -> None:
        """Compute every destination up front; nothing is written if any is invalid or shared."""
        planned: dict[str, Path] = {}
        owners: dict[Path, str] = {}
        for r in result.resolved:
            dest = output_path(self.output_dir, r.document.url, r.document.path)
            if dest == self.output_dir / MANIFEST_FILE:
                raise BuildError(r.document.path, f"public path {r.document.url} collides with the build manifest")
            if dest in owners:
                raise DuplicateUrl(r.document.path, r.document.url, owners[dest])
            owners[dest] = r.document.path
            planned[r.document.path] = dest
        self._planned = planned

    def render(self, resolved: ResolvedDocument) -> Path:
        dest = self._planned.get(resolved.document.path) or output_path(
            self.output_dir, resolved.document.url, resolved.document.path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(build_page(resolved), encoding='utf-8')
        self.written.append((resolved.document.path, dest))
        logger.debug("wrote %s -> %s", resolved.document.path, dest)
        return dest

    def finish(self, result: BuildResult) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        manifest = self.output_dir / MANIFEST_FILE
        manifest.write_text(json.dumps(build_manifest(result.resolved), indent=2), encoding='utf-8')
        return manifest
