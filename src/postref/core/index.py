"""In-memory collection index: path -> Document, with title/tag/suffix lookups"""

import logging
from collections.abc import Callable, Iterator

from postref.core.errors import CollectionSealed, DuplicatePath, NotFound
from postref.core.models import Document


logger = logging.getLogger(__name__)


class DocumentView:
    """Lazy, finite, restartable sequence of documents matching a predicate, in insertion order.

    Every iteration re-scans the collection, so the view can be consumed more than once.
    """

    def __init__(self, docs: dict[str, Document], predicate: Callable[[Document], bool]):
        self._docs = docs
        self._predicate = predicate

    def __iter__(self) -> Iterator[Document]:
        return (d for d in self._docs.values() if self._predicate(d))

    def __bool__(self) -> bool:
        return any(True for _ in self)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"DocumentView({[d.path for d in self]!r})"


class Collection:
    """All documents of one build pass.

    Built by inserting documents one at a time, then sealed; once sealed it is read-only.
    """

    def __init__(self, docs=()):
        self._docs: dict[str, Document] = {}
        self._sealed = False
        for doc in docs:
            self.insert(doc)

    # --- write phase ---

    def insert(self, doc: Document) -> None:
        """Add doc; fails if its path is already present or the collection is sealed."""
        if self._sealed:
            raise CollectionSealed(doc.path, "insert")
        if doc.path in self._docs:
            raise DuplicatePath(doc.path, "path")
        self._docs[doc.path] = doc

    def seal(self) -> "Collection":
        """End the write phase. Returns self for chaining."""
        if not self._sealed:
            self._sealed = True
            logger.debug("collection sealed with %d document(s)", len(self._docs))
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    # --- read phase ---

    def lookup(self, path: str) -> Document:
        try:
            return self._docs[path]
        except KeyError:
            raise NotFound(path, "path") from None

    def lookup_by_title(self, title: str) -> DocumentView:
        return DocumentView(self._docs, lambda d: d.title == title)

    def lookup_by_tag(self, tag: str) -> DocumentView:
        return DocumentView(self._docs, lambda d: tag in d.tags)

    def find_by_suffix(self, fragment: str) -> list[Document]:
        """Return documents whose path is fragment or ends with it on a '-' or '/' boundary."""
        if not fragment:
            return []
        tails = ('-' + fragment, '/' + fragment)
        return [d for d in self._docs.values() if d.path == fragment or d.path.endswith(tails)]

    def __contains__(self, path: object) -> bool:
        return path in self._docs

    def __iter__(self) -> Iterator[Document]:
        return iter(self._docs.values())

    def __len__(self) -> int:
        return len(self._docs)
