"""Post date handling: file name prefixes and front matter values"""

import re
from datetime import date, datetime


DATE_PREFIX_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})-(.+)$')


def split_date_prefix(stem: str) -> tuple[date | None, str]:
    """Split '2014-06-19-some-title' into (date(2014, 6, 19), 'some-title').

    Stems without a valid date prefix come back as (None, stem).
    """
    m = DATE_PREFIX_RE.match(stem)
    if not m:
        return None, stem
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3))), m.group(4)
    except ValueError:
        return None, stem


def coerce_date(value) -> date | None:
    """Normalize a front matter date (YAML date/datetime or ISO-ish string) to a date.

    Raises ValueError for strings that do not start with YYYY-MM-DD.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])
