# db/redash_client.py
"""
Redash API client for the AMO database.

Submits a query against a data source, polls the resulting job until it
finishes and fetches the query result. One request is in flight at a time and
nothing is retried: any failure surfaces as RemoteQueryError.
"""

import logging
import time
from urllib.parse import urljoin

import requests

from ..config import POLL_INTERVAL, QUERY_TIMEOUT, REDASH_AMO_DB, REDASH_URL
from ..errors import ConfigError, RemoteQueryError
from ..models import QueryResult
from .base import QueryClient

LOG = logging.getLogger(__name__)

# Redash job states
JOB_PENDING = 1
JOB_STARTED = 2
JOB_SUCCESS = 3
JOB_FAILURE = 4
JOB_CANCELLED = 5


class RedashClient(QueryClient):
    def __init__(self, api_key, url=REDASH_URL, data_source_id=REDASH_AMO_DB,
                 timeout=QUERY_TIMEOUT, poll_interval=POLL_INTERVAL, debug=False):
        super().__init__(debug=debug)
        if not api_key:
            raise ConfigError("Missing redash API key")
        self.api_key = api_key
        self.url = url if url.endswith("/") else url + "/"
        self.data_source_id = data_source_id
        self.timeout = timeout
        self.poll_interval = poll_interval

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Key {api_key}",
                "Accept": "application/json",
            }
        )

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = urljoin(self.url, path)
        LOG.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RemoteQueryError(f"Request to {url} failed: {e}") from e

        if response.status_code in (401, 403):
            raise RemoteQueryError(f"Redash rejected the API key (HTTP {response.status_code})")
        if response.status_code >= 400:
            raise RemoteQueryError(f"Redash returned HTTP {response.status_code} for {path}: {response.text[:200]}")
        try:
            body = response.json()
        except ValueError as e:
            raise RemoteQueryError(f"Invalid JSON from {url}") from e
        if not isinstance(body, dict):
            raise RemoteQueryError(f"Unexpected JSON from {url}: expected an object")
        return body

    def _wait_for_job(self, job: dict) -> int:
        """Poll a job until it finishes, returning its query_result_id."""
        while True:
            status = job.get("status")
            if status == JOB_SUCCESS:
                if job.get("query_result_id") is None:
                    raise RemoteQueryError("Redash job finished without a query_result_id")
                return job["query_result_id"]
            if status in (JOB_FAILURE, JOB_CANCELLED):
                raise RemoteQueryError(job.get("error") or "Query job failed")
            LOG.debug("Waiting for job %s (status %s)", job.get("id"), status)
            time.sleep(self.poll_interval)
            body = self._request("GET", f"api/jobs/{job.get('id')}")
            job = body.get("job")
            if not isinstance(job, dict):
                raise RemoteQueryError("Unexpected response from Redash: no job in status reply")

    def run_query(self, query: str) -> QueryResult:
        payload = {
            "query": query,
            "data_source_id": self.data_source_id,
            "max_age": 0,
        }
        body = self._request("POST", "api/query_results", json=payload)
        if "query_result" not in body:
            if not isinstance(body.get("job"), dict):
                raise RemoteQueryError("Unexpected response from Redash: no job or query result")
            result_id = self._wait_for_job(body["job"])
            body = self._request("GET", f"api/query_results/{result_id}")

        try:
            data = body["query_result"]["data"]
            columns = [c["name"] for c in data.get("columns", [])]
        except (KeyError, TypeError, AttributeError) as e:
            raise RemoteQueryError(f"Malformed query result from Redash: {e!r}") from e
        rows = data.get("rows", [])
        LOG.debug("Redash returned %d rows", len(rows))
        return QueryResult(columns=columns, rows=rows)
