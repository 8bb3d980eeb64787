# query_builder.py
import textwrap
from typing import List

from . import config
from .errors import InvalidInput
from .escaping import sql_literal
from .models import ID_TYPES, USER_ID
from .query_templates import (
    COLUMN_MAP,
    DEFAULT_COLUMN_PREFIX,
    GROUP_KEY,
    TEMPLATES,
    USER_ID_LOOKUP_FILTER,
    WX_FILTER,
    WX_JOIN,
)


def column_expression(column: str) -> str:
    if column in COLUMN_MAP:
        return COLUMN_MAP[column]
    return DEFAULT_COLUMN_PREFIX + column


def grouped_expression(column: str) -> str:
    """
    Select expression for queries grouped by add-on. Everything but the group key is
    wrapped in MIN() so stricter SQL dialects accept the GROUP BY.
    """
    expression = column_expression(column)
    if expression == GROUP_KEY:
        return expression
    return f"MIN({expression}) AS {column}"


def in_list(identifiers: List[str]) -> str:
    return ",".join(sql_literal(line) for line in identifiers)


def build_convert_query(input_type: str, identifiers: List[str], columns: List[str],
                        expand_users: bool = False, wx_only: bool = False) -> str:
    """
    Build the SQL for a convert request.

    input_type: one of id, guid, slug, user_id (auto must already be resolved)
    identifiers: raw identifier lines, escaped here
    columns: requested output columns, order preserved
    expand_users: return all add-ons of every user owning a matching add-on
    wx_only: only add-ons with at least one WebExtension file
    """
    if input_type not in ID_TYPES:
        raise InvalidInput(f"invalid input type: {input_type}")
    if not identifiers:
        raise InvalidInput("no identifiers given")
    if not columns:
        raise InvalidInput("no output columns given")

    values = in_list(identifiers)
    select_clause = ",".join(grouped_expression(c) for c in columns)
    wx_join = WX_JOIN if wx_only else ""
    wx_filter = WX_FILTER if wx_only else ""
    # filter on the (unrestricted) ownership join
    owner_filter = f"{column_expression(input_type)} IN ({values})"

    if expand_users:
        sql = TEMPLATES["expand_users"].format(
            select_clause=select_clause,
            wx_join=wx_join,
            wx_filter=wx_filter,
            input_filter=owner_filter,
            guid_reuse=config.GUID_REUSE_PATTERN,
        )
    elif columns == [USER_ID]:
        sql = TEMPLATES["user_ids"].format(input_filter=owner_filter)
    else:
        if input_type == USER_ID:
            lookup_filter = USER_ID_LOOKUP_FILTER.format(values=values)
        else:
            lookup_filter = owner_filter
        sql = TEMPLATES["lookup"].format(
            select_clause=select_clause,
            wx_join=wx_join,
            wx_filter=wx_filter,
            input_filter=lookup_filter,
            guid_reuse=config.GUID_REUSE_PATTERN,
        )

    # drop the blank lines left by empty optional fragments
    lines = [line for line in textwrap.dedent(sql).splitlines() if line.strip()]
    return "\n".join(lines)


def display_columns(columns: List[str], expand_users: bool = False) -> List[str]:
    """Columns to print. User expansion adds user_id when more than one column was asked for."""
    columns = list(columns)
    if expand_users and len(columns) > 1:
        columns.append(USER_ID)
    return columns
