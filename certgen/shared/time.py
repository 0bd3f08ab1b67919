from __future__ import annotations

import re
from datetime import date, datetime

DISPLAY_DATE_FORMAT = "%d/%m/%Y"

_ISO_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")


def parse_iso_date(value: date | str | None) -> date | None:
    """Return a ``date`` for ``YYYY-MM-DD`` strings or date objects, else ``None``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = _ISO_DATE_RE.fullmatch(value.strip())
    if not match:
        return None
    try:
        return date(*(int(part) for part in match.groups()))
    except ValueError:
        return None


def fmt_display_date(value: date | str | None) -> str:
    """Render dates as DD/MM/YYYY; absent or unparsable input yields ``""``."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return ""
    return parsed.strftime(DISPLAY_DATE_FORMAT)
