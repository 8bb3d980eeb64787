# query_templates.py
# SQL shapes used by the convert command, all against the AMO schema:
#   addons a, addons_users au, versions v, files f

# output column -> select expression; anything else is read from the addons table
COLUMN_MAP = {
    "id": "a.id",
    "guid": "a.guid",
    "slug": "a.slug",
    "user_id": "au.user_id",
}
DEFAULT_COLUMN_PREFIX = "a."
# grouped queries return one row per add-on
GROUP_KEY = "a.id"

TEMPLATES = {
    # every add-on of every user owning at least one of the given add-ons
    "expand_users": """
        SELECT {select_clause},MIN(au.user_id) AS user_id
        FROM addons_users au
        LEFT JOIN addons a ON (a.id = au.addon_id)
        {wx_join}
        WHERE
          au.user_id IN (
            SELECT au.user_id
            FROM addons a
            RIGHT JOIN addons_users au ON (a.id = au.addon_id)
            WHERE {input_filter}
            GROUP BY au.user_id
          )
          AND a.guid NOT LIKE '{guid_reuse}'
          {wx_filter}
        GROUP BY a.id
    """,

    # owners of the given add-ons
    "user_ids": """
        SELECT au.user_id
        FROM addons_users au
        LEFT JOIN addons a ON (a.id = au.addon_id)
        WHERE {input_filter}
    """,

    # one row per add-on, joined to its primary owner
    "lookup": """
        SELECT {select_clause}
        FROM addons a
        {wx_join}
        LEFT JOIN addons_users au ON (au.addon_id = a.id AND au.position = 0)
        WHERE
          {input_filter}
          AND a.guid NOT LIKE '{guid_reuse}'
          {wx_filter}
        GROUP BY a.id
    """,
}

WX_JOIN = """INNER JOIN versions v ON (v.addon_id = a.id)
        INNER JOIN files f ON (f.version_id = v.id)"""
WX_FILTER = "AND f.is_webextension = 1"

# user ids are not a column of addons; the lookup query selects add-ons through any ownership
USER_ID_LOOKUP_FILTER = "a.id IN (SELECT addon_id FROM addons_users WHERE user_id IN ({values}))"
