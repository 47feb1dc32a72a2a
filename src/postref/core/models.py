"""Data models for parsed documents and build results"""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date as Date
from types import MappingProxyType
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Document(BaseModel):
    """A single article: front matter metadata plus the raw, unresolved body. Immutable once built."""
    model_config = ConfigDict(frozen=True, validate_default=True)

    path:        str                     # unique id: source path relative to root, no extension
    layout:      str
    title:       str
    description: Optional[str] = None
    tags:        tuple[str, ...] = ()
    date:        Optional[Date] = None
    slug:        str
    url:         str                     # resolved public path substituted for post_url references
    metadata:    Mapping[str, Any] = {}  # full front matter (read-only), unknown keys preserved
    body:        str = ""
    excerpt:     Optional[str] = None    # first paragraph of body
    hash:        str = ""                # sha256 of the raw source

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value):
        return MappingProxyType(copy.deepcopy(dict(value)))

    @property
    def tag(self) -> Optional[str]:
        """The primary classification label, or None."""
        return self.tags[0] if self.tags else None


@dataclass(frozen=True)
class ResolvedDocument:
    """What the rendering layer consumes: a document and its body with references substituted."""
    document:      Document
    resolved_body: str

    @property
    def metadata(self) -> Mapping[str, Any]:
        return self.document.metadata


@dataclass
class BuildResult:
    """Outcome of a full load -> index -> resolve -> render pass."""
    resolved: list[ResolvedDocument] = field(default_factory=list)
    references: int = 0                 # post_url placeholders substituted across all bodies

    @property
    def count(self) -> int:
        return len(self.resolved)
