# db/base.py
import logging
from abc import ABC, abstractmethod

from ..models import QueryResult

LOG = logging.getLogger(__name__)


class QueryClient(ABC):
    """Submits SQL to the remote query service and waits for the full result."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    def sql(self, query: str) -> QueryResult:
        if self.debug:
            LOG.debug(query)
        return self.run_query(query)

    @abstractmethod
    def run_query(self, query: str) -> QueryResult:
        raise NotImplementedError
