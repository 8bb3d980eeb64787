# formatter.py
import logging
from typing import Any, Dict, List, Optional

from .escaping import csv_escape
from .models import GUID, ID, SLUG, Partition

LOG = logging.getLogger(__name__)

PARTITION_HEADERS = [
    (ID, "IDs:"),
    (GUID, "GUIDs:"),
    (SLUG, "Slugs:"),
]


def bold(text: str) -> str:
    """Make the text bold for output on the terminal."""
    return f"\x1b[1m{text}\x1b[0m"


def _raw(value: Any) -> str:
    return "" if value is None else str(value)


def format_rows(columns: List[str], rows: List[Dict[str, Any]], expected: Optional[int] = None) -> str:
    """
    Render result rows. A single column prints bare values one per line; several
    columns print CSV (commas backslash-escaped) with a header when there is data.
    If fewer rows than `expected` came back, the shortfall is logged as a warning.
    """
    if len(columns) > 1:
        lines = [",".join(csv_escape(row.get(c)) for c in columns) for row in rows]
        if lines:
            lines.insert(0, ",".join(columns))
    else:
        lines = [_raw(row.get(columns[0])) for row in rows]

    if expected is not None and len(rows) < expected:
        LOG.warning("Warning: %d entries were not found", expected - len(rows))
    return "\n".join(lines)


def format_partition(parts: Partition, sections: Optional[List[str]] = None) -> str:
    # with an explicit section filter the output is a flat list without headers
    buckets = {ID: parts.ids, GUID: parts.guids, SLUG: parts.other}
    out = []
    for name, header in PARTITION_HEADERS:
        values = buckets[name]
        if not values or (sections and name not in sections):
            continue
        text = "\n".join(values)
        out.append(text if sections else bold(header) + "\n" + text)
    return ("\n" if sections else "\n\n").join(out)
