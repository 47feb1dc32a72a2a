"""File discovery, front matter splitting/serialization, and Document construction"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt
from pydantic import ValidationError

from postref.config import DEFAULT_KNOWN_KEYS, Settings
from postref.core.errors import BuildError, MalformedFrontMatter, UnknownKey, UnknownLayout
from postref.core.models import Document
from postref.core.utils.dates import coerce_date, split_date_prefix
from postref.core.utils.hashing import sha256
from postref.core.utils.permalink import expand_permalink
from postref.core.utils.slug import slugify, titleize


logger = logging.getLogger(__name__)

FENCE = '---'
BOM = '\ufeff'


def _is_fence(line: str) -> bool:
    return line.rstrip() == FENCE


def parse_frontmatter(
    text: str,
    strict: bool = False,
    known_keys: Iterable[str] = DEFAULT_KNOWN_KEYS,
    ) -> tuple[dict[str, Any], str]:
    """Return (metadata, body) with the fenced YAML header removed.

    Text that does not open with a fence line has no front matter and is returned whole.
    """
    text = text.removeprefix(BOM)
    lines = text.splitlines(keepends=True)
    if not lines or not _is_fence(lines[0]):
        return {}, text

    for end, line in enumerate(lines[1:], start=1):
        if _is_fence(line):
            break
    else:
        raise MalformedFrontMatter(None, "opening '---' fence is never closed")

    block = ''.join(lines[1:end])
    body = ''.join(lines[end + 1:])
    try:
        metadata = yaml.safe_load(block) if block.strip() else {}
    except yaml.YAMLError as e:
        raise MalformedFrontMatter(None, f"invalid YAML: {e}") from e
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise MalformedFrontMatter(None, f"expected a mapping, got {type(metadata).__name__}")
    for key in metadata:
        if not isinstance(key, str):
            raise MalformedFrontMatter(None, f"non-string key {key!r}; quote it to use it as a name")

    if strict:
        allowed = set(known_keys)
        for key in metadata:
            if key not in allowed:
                raise UnknownKey(None, str(key))
    return metadata, body


def dump_frontmatter(metadata: dict[str, Any], body: str) -> str:
    """Serialize metadata back into a fenced YAML header followed by body, preserving key order."""
    if not metadata:
        return f"{FENCE}\n{FENCE}\n{body}"
    header = yaml.safe_dump(metadata, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"{FENCE}\n{header}{FENCE}\n{body}"


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def extract_excerpt(body: str, parser_config: str = 'gfm-like') -> str | None:
    """Return the text of the first paragraph in body, or None if there is none."""
    tokens = _make_parser(parser_config).parse(body)
    for i, tok in enumerate(tokens):
        if tok.type == 'paragraph_open' and i + 1 < len(tokens) and tokens[i + 1].type == 'inline':
            content = tokens[i + 1].content.strip()
            if content:
                return ' '.join(content.split())
    return None


def _collect_tags(metadata: dict[str, Any]) -> tuple[str, ...]:
    """Gather labels from the single-valued `tag` key and the `tags` key (string or list)."""
    tags: list[str] = []
    if metadata.get('tag') is not None:
        tags.append(str(metadata['tag']))
    raw = metadata.get('tags')
    if isinstance(raw, str):
        tags.extend(raw.split())
    elif isinstance(raw, (list, tuple)):
        tags.extend(str(t) for t in raw if t is not None)
    return tuple(dict.fromkeys(tags))


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)


def build_document(doc_path: str, raw: str, settings: Settings) -> Document:
    """Parse raw source text into an immutable Document identified by doc_path."""
    try:
        metadata, body = parse_frontmatter(raw, settings.strict_frontmatter, settings.known_keys)
    except BuildError as e:
        raise e.with_path(doc_path) from e

    layout = _as_text(metadata.get('layout')) or settings.default_layout
    if settings.layouts and layout not in settings.layouts:
        raise UnknownLayout(doc_path, layout)

    stem = doc_path.rsplit('/', 1)[-1]
    prefix_date, name = split_date_prefix(stem)
    try:
        date = coerce_date(metadata.get('date')) or prefix_date
    except ValueError as e:
        raise MalformedFrontMatter(doc_path, f"invalid date: {e}") from e
    slug = slugify(str(metadata['slug'])) if metadata.get('slug') else (slugify(name) or name)
    title = _as_text(metadata.get('title')) or titleize(name)

    permalink = _as_text(metadata.get('permalink'))
    url = permalink or expand_permalink(settings.permalink, doc_path=doc_path, slug=slug, post_date=date)

    try:
        doc = Document(
            path=doc_path,
            layout=layout,
            title=title,
            description=_as_text(metadata.get('description')),
            tags=_collect_tags(metadata),
            date=date,
            slug=slug,
            url=url,
            metadata=metadata,
            body=body,
            excerpt=extract_excerpt(body, settings.parser_config),
            hash=sha256(raw),
        )
    except ValidationError as e:
        raise MalformedFrontMatter(doc_path, f"invalid document fields: {e}") from e
    logger.debug("parsed %s (layout=%s, url=%s)", doc_path, layout, url)
    return doc


def doc_path_for(path: Path, root: Path) -> str:
    """Return the document identifier: path relative to root, POSIX separators, extension removed."""
    return path.relative_to(root).with_suffix('').as_posix()


def discover_files(path: Path, extensions: Iterable[str]) -> list[Path]:
    """Return sorted source files under path, or [path] if a single file. Dot-prefixed entries are skipped."""
    exts = {e.lower() for e in extensions}
    if path.is_file():
        return [path] if path.suffix.lower() in exts else []
    return sorted(
        p for p in path.rglob('*')
        if p.is_file()
        and p.suffix.lower() in exts
        and not any(part.startswith('.') for part in p.relative_to(path).parts)
    )


def parse_file(path: Path, root: Path, settings: Settings) -> Document:
    """Read a single source file and build its Document."""
    raw = path.read_text(encoding='utf-8')
    base = root if root.is_dir() else root.parent
    return build_document(doc_path_for(path, base), raw, settings)
