from typing import Any, Dict, List, Optional, Set
import threading
import time

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import (
    ConfigurationError,
    ConnectionFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from storefront.core.exceptions import DatabaseError
from storefront.core.logging import get_logger

logger = get_logger(__name__)


class MongoDBClient:
    """
    MongoDB client implementation.

    Wraps a pymongo ``MongoClient`` (which pools connections internally),
    retries the initial connection with exponential backoff and exposes
    collection access, index creation and health checks.
    """

    def __init__(
        self,
        connection_uri: str,
        database_name: str,
        pool_size: int = 10,
        connect_timeout: int = 5000,
        connect_retries: int = 3,
        client: Optional[MongoClient] = None,
        **kwargs
    ):
        """
        Initialize MongoDB client.

        Args:
            connection_uri: MongoDB connection URI
            database_name: Name of the database to connect to
            pool_size: Size of the connection pool
            connect_timeout: Connection and server selection timeout (ms)
            connect_retries: Attempts made when opening the connection
            client: Pre-built client, used instead of opening a new one
            **kwargs: Additional connection options
        """
        self.connection_uri = connection_uri
        self.database_name = database_name
        self.connection_options = {
            "maxPoolSize": pool_size,
            "connectTimeoutMS": connect_timeout,
            "serverSelectionTimeoutMS": connect_timeout,
            "retryWrites": True,
            **kwargs
        }
        self.connect_retries = max(1, connect_retries)
        self._client: Optional[MongoClient] = client
        self.stats: Dict[str, Any] = {
            "connections_created": 0,
            "last_connection_error": None,
            "last_successful_connection": None,
        }
        self._indexed_collections: Set[str] = set()
        self._index_lock = threading.Lock()

    def _open(self) -> MongoClient:
        @retry(
            stop=stop_after_attempt(self.connect_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type((ConnectionFailure, ServerSelectionTimeoutError)),
            reraise=True,
        )
        def connect() -> MongoClient:
            client = MongoClient(self.connection_uri, **self.connection_options)
            try:
                client.admin.command("ping")
            except PyMongoError:
                client.close()
                raise
            return client

        return connect()

    def get_connection(self) -> MongoClient:
        """
        Get MongoDB client.

        Returns:
            MongoDB client

        Raises:
            DatabaseError: If the client cannot be opened
        """
        if self._client is not None:
            return self._client

        try:
            self._client = self._open()
        except (ConnectionFailure, ServerSelectionTimeoutError, ConfigurationError) as e:
            logger.error(f"Failed to connect to MongoDB: {str(e)}")
            self.stats["last_connection_error"] = {"timestamp": time.time(), "error": str(e)}
            raise DatabaseError(f"MongoDB connection failed: {str(e)}")

        self.stats["connections_created"] += 1
        self.stats["last_successful_connection"] = time.time()
        logger.info("Successfully connected to MongoDB", extra={"database_name": self.database_name})
        return self._client

    def get_database(self) -> Database:
        return self.get_connection()[self.database_name]

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get MongoDB collection.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB collection
        """
        return self.get_database()[collection_name]

    def create_indexes(self, collection_name: str, indexes: List[Dict[str, Any]]) -> List[str]:
        """
        Create indexes for a MongoDB collection.

        Args:
            collection_name: Name of the collection
            indexes: List of index specifications (``key`` plus index options)

        Returns:
            List of created index names

        Raises:
            DatabaseError: If index creation fails
        """
        collection = self.get_collection(collection_name)
        names = []
        try:
            for spec in indexes:
                options = {k: v for k, v in spec.items() if k != "key"}
                names.append(collection.create_index(list(spec["key"].items()), **options))
        except PyMongoError as e:
            logger.error(f"Failed to create indexes for collection {collection_name}: {str(e)}")
            raise DatabaseError(f"Failed to create indexes: {str(e)}")

        logger.debug(
            f"Ensured indexes for collection {collection_name}",
            extra={"index_count": len(indexes)}
        )
        return names

    def ensure_indexes(self, collection_name: str, indexes: List[Dict[str, Any]]) -> bool:
        """
        Create the indexes of a collection once for this client.

        A failed attempt is logged and retried on the next call.

        Returns:
            True when the indexes are in place
        """
        if not indexes or collection_name in self._indexed_collections:
            return True

        with self._index_lock:
            if collection_name in self._indexed_collections:
                return True
            try:
                self.create_indexes(collection_name, indexes)
            except DatabaseError as e:
                logger.warning(f"Indexes for {collection_name} not created yet: {e.detail}")
                return False
            self._indexed_collections.add(collection_name)
        return True

    def ping(self) -> bool:
        """
        Test connection to MongoDB.

        Raises:
            DatabaseError: If the ping fails
        """
        try:
            self.get_connection().admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"MongoDB ping failed: {str(e)}")
            raise DatabaseError(f"MongoDB ping failed: {str(e)}")

    def health_check(self) -> Dict[str, Any]:
        """
        Check MongoDB health status.

        Returns:
            Dictionary containing health check results
        """
        try:
            start_time = time.time()
            self.ping()
            return {
                "status": "ok",
                "response_time_ms": round((time.time() - start_time) * 1000, 2),
                "database": self.database_name,
                "stats": self.stats
            }
        except DatabaseError as e:
            return {
                "status": "unavailable",
                "error": e.detail,
                "stats": self.stats
            }

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.debug("Closed MongoDB client connection")
