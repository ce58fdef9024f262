import logging
from typing import Any, Callable, Dict
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from ..config import redact_url
from ..exceptions import ConnectionError, QueryError

logger = logging.getLogger(__name__)

class MongoConnector:
    """
    Handle on a single MongoDB session, backed by pymongo.MongoClient.

    The client is created in connect() and dropped in close(). Extra keyword
    arguments are handed to the client as-is (e.g. serverSelectionTimeoutMS).
    """
    def __init__(
        self,
        connection_string: str,
        client_factory: Callable[..., Any] = MongoClient,
        **client_options: Any,
    ):
        self.connection_string = connection_string
        self._client_factory = client_factory
        self._client_options = client_options
        self._client = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        if self._client is not None:
            return
        try:
            self._client = self._client_factory(self.connection_string, **self._client_options)
            # MongoClient connects lazily; force a round trip so failures surface here
            self._client.admin.command("ping")
        except PyMongoError as e:
            raise ConnectionError(str(e)) from e
        logger.debug("Connected to %s", redact_url(self.connection_string))

    def fetch_stats(self, database_name: str) -> Dict[str, Any]:
        if self._client is None:
            raise QueryError("Not connected: call connect() before fetching stats")
        try:
            stats = self._client[database_name].command("dbstats")
        except PyMongoError as e:
            raise QueryError(str(e)) from e
        return dict(stats)

    def close(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            client.close()
            logger.debug("Closed connection to %s", redact_url(self.connection_string))
