"""Slug and title generation for document identifiers"""

import re


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def titleize(slug: str) -> str:
    """Turn a hyphenated slug back into a capitalized title ('raw-pointers' -> 'Raw Pointers')."""
    words = re.split(r'[-_\s]+', slug)
    return ' '.join(w[:1].upper() + w[1:] for w in words if w)
