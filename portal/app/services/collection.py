from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import ValidationError
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError, WriteError

from ..models.common import MongoRecord, utc_now
from ..utils.errors import (
    NotFoundError,
    PortalError,
    RecordValidationError,
    ServerError,
)
from ..utils.logging import logger
from ..utils.mongo import parse_object_id

# MongoDB's DocumentValidationFailure
DOCUMENT_VALIDATION_FAILURE = 121


def describe_validation_error(exc) -> str:
    """Flatten pydantic or FastAPI request validation errors into one line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


class CollectionService:
    """Typed CRUD over one MongoDB collection with classified failures."""

    record_model: Type[MongoRecord] = MongoRecord
    label = "Record"

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    @property
    def _event_prefix(self) -> str:
        return self.label.lower().replace(" ", "_")

    def _find_many(
        self,
        query: Optional[Mapping[str, Any]] = None,
        sort_field: Optional[str] = None,
    ) -> List[MongoRecord]:
        try:
            cursor = self.collection.find(dict(query or {}))
            if sort_field:
                cursor = cursor.sort(sort_field, DESCENDING)
            return [self.record_model.from_mongo(document) for document in cursor]
        except (PyMongoError, ValidationError) as exc:
            logger.log_error(f"{self._event_prefix}_list_failed", {"error": str(exc)})
            raise ServerError(f"Server error while fetching {self.label.lower()}s.") from exc

    def _find_one(self, record_id: str) -> MongoRecord:
        object_id = parse_object_id(record_id, self.label)
        try:
            document = self.collection.find_one({"_id": object_id})
        except PyMongoError as exc:
            logger.log_error(f"{self._event_prefix}_lookup_failed", {
                "record_id": record_id,
                "error": str(exc),
            })
            raise ServerError(f"Server error while fetching {self.label.lower()}.") from exc

        if document is None:
            raise NotFoundError(f"{self.label} not found.")
        return self._load(document)

    def _load(self, document: Mapping[str, Any]) -> MongoRecord:
        try:
            return self.record_model.from_mongo(document)
        except ValidationError as exc:
            logger.log_error(f"{self._event_prefix}_record_invalid", {
                "record_id": str(document.get("_id")),
                "error": str(exc),
            })
            raise ServerError(f"Stored {self.label.lower()} is malformed.") from exc

    def _insert(self, record: MongoRecord) -> MongoRecord:
        try:
            result = self.collection.insert_one(record.to_mongo())
        except Exception as exc:
            raise self._classify_write_error("insert", exc) from exc

        record.id = str(result.inserted_id)
        return record

    def _update(self, record_id: str, changes: Dict[str, Any]) -> MongoRecord:
        object_id = parse_object_id(record_id, self.label)
        changes = dict(changes, updatedAt=utc_now())
        try:
            document = self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except Exception as exc:
            raise self._classify_write_error("update", exc) from exc

        if document is None:
            raise NotFoundError(f"{self.label} not found.")
        return self._load(document)

    def _delete(self, record_id: str) -> None:
        object_id = parse_object_id(record_id, self.label)
        try:
            result = self.collection.delete_one({"_id": object_id})
        except PyMongoError as exc:
            logger.log_error(f"{self._event_prefix}_delete_failed", {
                "record_id": record_id,
                "error": str(exc),
            })
            raise ServerError(f"Server error while deleting {self.label.lower()}.") from exc

        if result.deleted_count == 0:
            raise NotFoundError(f"{self.label} not found.")

    def _classify_write_error(self, action: str, exc: Exception) -> PortalError:
        if isinstance(exc, WriteError) and exc.code == DOCUMENT_VALIDATION_FAILURE:
            logger.log_error(f"{self._event_prefix}_schema_rejected", {
                "action": action,
                "error": str(exc),
            })
            return RecordValidationError(f"{self.label} failed validation: {exc}")

        logger.log_error(f"{self._event_prefix}_{action}_failed", {"error": str(exc)})
        return ServerError(f"Server error while saving {self.label.lower()}.")
