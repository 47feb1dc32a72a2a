"""Build errors: every failure names the offending document path and the field or reference at fault"""


class BuildError(Exception):
    """Base class for all build-time failures. A single one aborts the whole build."""

    def __init__(self, doc_path: str | None, detail: str):
        self.doc_path = doc_path
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        prefix = f"{self.doc_path}: " if self.doc_path else ""
        return f"{prefix}{self.describe()}"

    def describe(self) -> str:
        return self.detail

    def with_path(self, doc_path: str) -> "BuildError":
        """Return a copy of this error attributed to doc_path (used when parsing had no path yet)."""
        err = type(self).__new__(type(self))
        err.__dict__.update(self.__dict__)
        err.doc_path = doc_path
        Exception.__init__(err, err._format())
        return err


class MalformedFrontMatter(BuildError):
    def describe(self) -> str:
        return f"malformed front matter: {self.detail}"


class UnknownKey(BuildError):
    def describe(self) -> str:
        return f"unknown front matter key '{self.detail}'"


class UnknownLayout(BuildError):
    def describe(self) -> str:
        return f"unknown layout '{self.detail}'"


class DuplicatePath(BuildError):
    def describe(self) -> str:
        return "duplicate document path"


class NotFound(BuildError):
    def describe(self) -> str:
        return "no such document"


class UnresolvedReference(BuildError):
    def describe(self) -> str:
        return f"post_url '{self.detail}' does not match any document"


class AmbiguousReference(BuildError):
    """Raised when a post_url fragment matches more than one document path."""

    def __init__(self, doc_path: str | None, detail: str, candidates: list[str] = ()):
        self.candidates = list(candidates)
        super().__init__(doc_path, detail)

    def describe(self) -> str:
        return f"post_url '{self.detail}' is ambiguous, matches: {', '.join(self.candidates)}"


class CollectionSealed(BuildError):
    def describe(self) -> str:
        return "collection is sealed; no further documents can be inserted"


class CollectionNotSealed(BuildError):
    def describe(self) -> str:
        return "references cannot be resolved before every document is loaded"


class DuplicateUrl(BuildError):
    """Raised when two documents would be published at the same public path."""

    def __init__(self, doc_path: str | None, detail: str, other_path: str = ""):
        self.other_path = other_path
        super().__init__(doc_path, detail)

    def describe(self) -> str:
        return f"public path '{self.detail}' is already used by {self.other_path}"
