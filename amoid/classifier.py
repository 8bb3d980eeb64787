# classifier.py
# Regex heuristics that tell numeric ids, guids and slugs apart
import re
from typing import Iterable, List

from .models import GUID, ID, SLUG, Partition

RE_IDS = re.compile(r"^[0-9]+$")
# legacy {uuid} guids, or the email-like ids WebExtensions use
RE_GUID = re.compile(
    r"^(\{[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\}"
    r"|[a-z0-9\-._]*@[a-z0-9\-._]+)$",
    re.IGNORECASE,
)


def detect_line_type(line: str) -> str:
    """Classify a single line as id, guid or slug. Anything unrecognised is a slug."""
    if not line:
        return SLUG
    if RE_IDS.fullmatch(line):
        return ID
    if RE_GUID.fullmatch(line):
        return GUID
    return SLUG


def partition_ids(lines: Iterable[str]) -> Partition:
    parts = Partition()
    for line in lines:
        kind = detect_line_type(line)
        if kind == ID:
            parts.ids.append(line)
        elif kind == GUID:
            parts.guids.append(line)
        else:
            parts.other.append(line)
    return parts


def detect_id_type(lines: List[str]) -> str:
    """
    Pick the type for a whole batch: id if every non-empty line is an id, guid if
    every one is a guid, otherwise slug. Mixed input falls back to slug.
    """
    data = [line for line in lines if line]
    parts = partition_ids(data)
    if len(parts.ids) == len(data):
        return ID
    if len(parts.guids) == len(data):
        return GUID
    return SLUG
