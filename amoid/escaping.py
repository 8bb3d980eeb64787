# escaping.py

# backslash goes first so the escapes added below are not escaped again
MYSQL_ESCAPES = [
    ("\\", "\\\\"),
    ("'", "\\'"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\x00", "\\0"),
    ("\x1a", "\\Z"),
]


def mysql_escape(value: str) -> str:
    for raw, escaped in MYSQL_ESCAPES:
        value = value.replace(raw, escaped)
    return value


def sql_literal(value: str) -> str:
    return "'" + mysql_escape(value) + "'"


def csv_escape(value) -> str:
    """Backslash-escape commas in place. None becomes an empty field."""
    if value is None:
        return ""
    return str(value).replace(",", "\\,")
