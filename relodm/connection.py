import logging
import os
from pymongo import MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)


class MongoConnectionManager:
    """
    Process-wide pymongo client configured from the environment.

    MONGO_URL         connection string (default mongodb://localhost:27017)
    MONGO_DB          default database name (default relodm)
    MONGO_TIMEOUT_MS  server selection timeout in milliseconds (default 5000)
    """
    _client: MongoClient | None = None

    @classmethod
    def get_client(cls) -> MongoClient:
        if cls._client is None:
            url = os.getenv("MONGO_URL", "mongodb://localhost:27017")
            timeout_ms = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))
            cls._client = MongoClient(url, serverSelectionTimeoutMS=timeout_ms)
            logger.info("Created MongoDB client (timeout %sms)", timeout_ms)
        return cls._client

    @classmethod
    def get_database(cls, name: str | None = None) -> Database:
        return cls.get_client()[name or os.getenv("MONGO_DB", "relodm")]

    @classmethod
    def close(cls):
        if cls._client is not None:
            cls._client.close()
            cls._client = None
