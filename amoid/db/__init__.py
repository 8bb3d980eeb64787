# db/__init__.py
from .base import QueryClient
from .databricks_client import DatabricksClient
from .redash_client import RedashClient


def make_client(cfg: dict, debug: bool = False) -> QueryClient:
    """Build the query client selected by the loaded config."""
    if cfg["backend"] == "databricks":
        return DatabricksClient(debug=debug, **cfg["databricks"])
    redash = cfg["redash"]
    return RedashClient(
        redash["api_key"],
        url=redash["url"],
        data_source_id=redash["data_source_id"],
        debug=debug,
    )


__all__ = ["QueryClient", "RedashClient", "DatabricksClient", "make_client"]
