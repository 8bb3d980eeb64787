# models.py
# simple containers passed between the query clients and the formatter
from dataclasses import dataclass, field
from typing import Any, Dict, List

ID = "id"
GUID = "guid"
SLUG = "slug"
USER_ID = "user_id"
AUTO = "auto"

ID_TYPES = (ID, GUID, SLUG, USER_ID)


@dataclass
class QueryResult:
    columns: List[str]
    rows: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class Partition:
    ids: List[str] = field(default_factory=list)
    guids: List[str] = field(default_factory=list)
    other: List[str] = field(default_factory=list)

    def __len__(self):
        return len(self.ids) + len(self.guids) + len(self.other)
