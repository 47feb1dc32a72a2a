"""Cross-reference resolution: rewrite {% post_url %} placeholders into public paths"""

import logging
import re

from postref.core.errors import AmbiguousReference, CollectionNotSealed, UnresolvedReference
from postref.core.index import Collection
from postref.core.models import Document, ResolvedDocument


logger = logging.getLogger(__name__)

POST_URL_RE = re.compile(r'\{%-?\s*post_url\s+(?P<fragment>.+?)\s*-?%\}')
RAW_RE = re.compile(r'\{%-?\s*raw\s*-?%\}.*?\{%-?\s*endraw\s*-?%\}', re.DOTALL)
SOURCE_SUFFIXES = ('.md', '.markdown', '.html')


def normalize_fragment(fragment: str) -> str:
    """Strip quotes, whitespace, a leading '/' and a source extension from a post_url argument."""
    frag = fragment.strip().strip('"\'').strip().replace('\\', '/').lstrip('/')
    for suffix in SOURCE_SUFFIXES:
        if frag.endswith(suffix):
            return frag[:-len(suffix)]
    return frag


def _segments(body: str):
    """Yield (is_raw, text) chunks; {% raw %} regions are passed through untouched."""
    pos = 0
    for m in RAW_RE.finditer(body):
        if m.start() > pos:
            yield False, body[pos:m.start()]
        yield True, m.group(0)
        pos = m.end()
    if pos < len(body):
        yield False, body[pos:]


def references(body: str) -> list[str]:
    """Return normalized post_url fragments in body order, skipping raw regions."""
    return [
        normalize_fragment(m.group('fragment'))
        for is_raw, text in _segments(body) if not is_raw
        for m in POST_URL_RE.finditer(text)
    ]


def find_target(fragment: str, collection: Collection, doc_path: str | None = None) -> Document:
    """Return the single document a normalized fragment names.

    An exact path match is deliberately preferred, even when other paths also end with the
    fragment. Without an exact match the fragment must match exactly one path suffix;
    zero or several suffix matches fail.
    """
    candidates = collection.find_by_suffix(fragment)
    exact = [d for d in candidates if d.path == fragment]
    if exact:
        return exact[0]
    if not candidates:
        raise UnresolvedReference(doc_path, fragment)
    if len(candidates) > 1:
        raise AmbiguousReference(doc_path, fragment, [d.path for d in candidates])
    return candidates[0]


def _resolve_text(doc: Document, text: str, collection: Collection) -> tuple[str, int]:
    count = 0

    def _sub(m: re.Match) -> str:
        nonlocal count
        target = find_target(normalize_fragment(m.group('fragment')), collection, doc.path)
        logger.debug("%s: post_url %s -> %s", doc.path, m.group('fragment'), target.url)
        count += 1
        return target.url

    return POST_URL_RE.sub(_sub, text), count


def _require_sealed(collection: Collection) -> None:
    if not collection.sealed:
        raise CollectionNotSealed(None, "resolve")


def resolve_document(doc: Document, collection: Collection) -> tuple[ResolvedDocument, int]:
    """Resolve one document's body. Returns (resolved, number of references substituted)."""
    _require_sealed(collection)
    parts = []
    total = 0
    for is_raw, text in _segments(doc.body):
        if is_raw:
            parts.append(text)
            continue
        resolved, count = _resolve_text(doc, text, collection)
        parts.append(resolved)
        total += count
    return ResolvedDocument(document=doc, resolved_body=''.join(parts)), total


def resolve_body(doc: Document, collection: Collection) -> str:
    """Return doc.body with every post_url placeholder replaced by its target's public path."""
    resolved, _ = resolve_document(doc, collection)
    return resolved.resolved_body


def resolve_all(collection: Collection) -> list[ResolvedDocument]:
    """Resolve every document in insertion order; the first failure aborts."""
    return [resolve_document(doc, collection)[0] for doc in collection]
