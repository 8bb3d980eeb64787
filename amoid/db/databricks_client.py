# db/databricks_client.py
import logging

from databricks import sql as dbsql

from ..config import QUERY_TIMEOUT
from ..errors import RemoteQueryError
from ..models import QueryResult
from .base import QueryClient

LOG = logging.getLogger(__name__)


class DatabricksClient(QueryClient):
    """Runs queries on a Databricks SQL warehouse holding a copy of the AMO tables."""

    def __init__(self, server_hostname, http_path, access_token, timeout=QUERY_TIMEOUT, debug=False):
        super().__init__(debug=debug)
        self.server_hostname = server_hostname
        self.http_path = http_path
        self.access_token = access_token
        self.timeout = timeout

    def run_query(self, query: str) -> QueryResult:
        try:
            conn = dbsql.connect(server_hostname=self.server_hostname, http_path=self.http_path,
                                 access_token=self.access_token, _socket_timeout=self.timeout)
        except Exception as e:
            raise RemoteQueryError(f"Could not connect to {self.server_hostname}: {e}") from e
        try:
            cur = conn.cursor()
            try:
                cur.execute(query)
                cols = [c[0] for c in cur.description] if cur.description else []
                rows = cur.fetchall() if cur.description else []
            finally:
                cur.close()
        except Exception as e:
            raise RemoteQueryError(f"Query failed: {e}") from e
        finally:
            conn.close()
        LOG.debug("Databricks returned %d rows", len(rows))
        return QueryResult(columns=cols, rows=[dict(zip(cols, row)) for row in rows])
