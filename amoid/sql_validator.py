# sql_validator.py
import re
from typing import Tuple

from .config import ALLOWED_TABLES

# Block dangerous keywords
BAD_KEYWORDS = [
    r"\b(insert|update|delete|drop|create|alter|truncate|merge|grant|revoke|replace|shutdown)\b",
    r";",                         # disallow multiple statements
    r"\binto\s+|outfile\b",       # disallow write/export style
]

SELECT_ONLY = re.compile(r"^\s*select\s+", re.IGNORECASE)
# quoted literals carry user input (slugs like "delete-tabs"), so keywords are only searched outside them
STRING_LITERAL = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"", re.DOTALL)
TABLE_REF = re.compile(r"\b(?:from|join)\s+([a-z0-9_\.]+)", re.IGNORECASE)


def is_safe_sql(sql: str) -> Tuple[bool, str]:
    if not sql or not sql.strip():
        return False, "empty query"
    if not SELECT_ONLY.match(sql):
        return False, "only SELECT queries are allowed"
    stripped = STRING_LITERAL.sub("''", sql)
    if "'" in stripped.replace("''", "") or '"' in stripped:
        return False, "unterminated string literal"
    for pat in BAD_KEYWORDS:
        if re.search(pat, stripped, re.IGNORECASE):
            return False, "disallowed pattern found in SQL"
    allowed = [x.lower() for x in ALLOWED_TABLES]
    for t in TABLE_REF.findall(stripped):
        if t.lower() not in allowed:
            return False, f"table '{t}' is not permitted"
    return True, "ok"
