"""MongoDB utility for the portal API"""

from typing import Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from .errors import NotFoundError
from .logging import logger
from ..config import settings


class MongoDBManager:
    """MongoDB manager for the portal collections"""

    def __init__(self, client: Optional[MongoClient] = None):
        self.client: Optional[MongoClient] = client
        self.db: Optional[Database] = None
        self._connect()

    def _connect(self):
        """Create the client; the first real round-trip happens on ``ping``."""
        uri = settings.MONGODB_URI
        database_name = settings.DATABASE_NAME

        logger.log_step("mongodb_connection_attempt", {
            "database": database_name,
        })

        if self.client is None:
            self.client = MongoClient(uri, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS)
        self.db = self.client[database_name]

    def ping(self) -> bool:
        """Return True when the server answers"""
        try:
            self.client.admin.command('ping')
            return True
        except Exception as e:
            logger.log_error("mongodb_ping_failed", {"error": str(e)})
            return False

    def close(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            logger.log_step("mongodb_connection_closed")


def ensure_indexes(db: Database) -> None:
    """Create the indexes every collection relies on."""
    db[settings.USERS_COLLECTION].create_index([("email", ASCENDING)], unique=True)
    db[settings.DOCUMENTS_COLLECTION].create_index([("storedName", ASCENDING)], unique=True)
    db[settings.DOCUMENTS_COLLECTION].create_index([("uploadedAt", DESCENDING)])
    db[settings.ISSUES_COLLECTION].create_index([("storedName", ASCENDING)], unique=True)
    db[settings.ISSUES_COLLECTION].create_index([("publishDate", DESCENDING)])
    db[settings.NEWS_COLLECTION].create_index([("date", DESCENDING)])
    db[settings.CAMPS_COLLECTION].create_index([("status", ASCENDING)])
    logger.log_step("mongodb_indexes_ready", {"database": db.name})


def parse_object_id(record_id: str, label: str) -> ObjectId:
    """Turn a path parameter into an ObjectId or report the record as missing."""
    if not record_id or not ObjectId.is_valid(record_id):
        raise NotFoundError(f"{label} not found (invalid ID format).")
    return ObjectId(record_id)


# Global MongoDB manager instance
mongo_manager = MongoDBManager()
