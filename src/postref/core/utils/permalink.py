"""Permalink template expansion (':year/:month/:day/:title' style)"""

import re
from datetime import date


TOKEN_RE = re.compile(r':(year|month|day|title|path)\b')
DATE_TOKENS = (':year', ':month', ':day')


def expand_permalink(template: str, doc_path: str, slug: str, post_date: date | None) -> str:
    """Expand template tokens for one document.

    Path segments holding a date token are dropped when the document has no date.
    """
    segments = template.split('/')
    if post_date is None:
        segments = [s for s in segments if not any(t in s for t in DATE_TOKENS)]
    values = {'title': slug, 'path': doc_path}
    if post_date is not None:
        values.update(year=f"{post_date.year:04d}", month=f"{post_date.month:02d}", day=f"{post_date.day:02d}")

    url = TOKEN_RE.sub(lambda m: values[m.group(1)], '/'.join(segments))
    url = re.sub(r'/{2,}', '/', url)
    return url if url.startswith('/') else '/' + url
