"""Blob + metadata workflows shared by every file-backed collection.

Upload writes the blob first and removes it again if anything after that
fails. Delete removes the blob first and only then the record, so a record is
never dropped while the fate of its blob is unknown. The reverse window (blob
gone, record delete failed) is reported as ``MetadataDeletionError`` and shows
up on retrieval as ``BlobInconsistencyError``.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import ValidationError
from pymongo.collection import Collection

from ..models.files import (
    DEFAULT_MIME_TYPE,
    BlobDownload,
    FileRecord,
    IncomingFile,
    StoredBlob,
)
from ..utils.errors import (
    BlobInconsistencyError,
    ClientInputError,
    MetadataDeletionError,
    NotFoundError,
    PayloadTooLargeError,
    PortalError,
    RecordValidationError,
    ServerError,
)
from ..utils.logging import logger
from ..utils.mongo import parse_object_id
from ..utils.security import Caller
from .blob_store import BlobStore, BlobTooLargeError
from .collection import CollectionService, describe_validation_error


class FileRecordService(CollectionService):
    """Keeps one collection of file records consistent with its blob store."""

    record_model: Type[FileRecord] = FileRecord
    label = "File"
    sort_field = "uploadedAt"

    def __init__(self, collection: Collection, blob_store: BlobStore) -> None:
        super().__init__(collection)
        self.blob_store = blob_store

    def list_records(self, caller: Caller) -> List[FileRecord]:
        """All records, newest first."""
        records = self._find_many(sort_field=self.sort_field)
        logger.log_step(f"{self._event_prefix}_listed", {
            "count": len(records),
            "caller": caller.user_id,
        })
        return records

    def get_record(self, record_id: str) -> FileRecord:
        return self._find_one(record_id)

    def open_download(self, record_id: str, caller: Caller) -> BlobDownload:
        """Resolve a record to the blob that should be streamed back."""
        record = self.get_record(record_id)

        try:
            path = self.blob_store.path_for(record.stored_name)
        except ValueError as exc:
            logger.log_error("blob_path_rejected", {
                "record_id": record.id,
                "stored_name": record.stored_name,
            })
            raise BlobInconsistencyError("File not found on server.") from exc

        if not path.is_file():
            logger.log_warning("blob_missing_for_record", {
                "record_id": record.id,
                "stored_name": record.stored_name,
            })
            raise BlobInconsistencyError("File not found on server.")

        logger.log_step(f"{self._event_prefix}_download_started", {
            "record_id": record.id,
            "caller": caller.user_id,
        })
        return BlobDownload(
            path=path,
            filename=record.original_name,
            media_type=record.mime_type,
        )

    def delete(self, record_id: str, caller: Caller) -> str:
        """Remove the blob, then the record."""
        caller.require_admin()
        record = self.get_record(record_id)

        try:
            removed = self.blob_store.delete(record.stored_name)
        except (OSError, ValueError) as exc:
            logger.log_error("blob_delete_failed", {
                "record_id": record.id,
                "stored_name": record.stored_name,
                "error": str(exc),
            })
            raise ServerError(
                f"Error deleting {self.label.lower()} file from disk. Metadata not deleted."
            ) from exc

        if not removed:
            logger.log_warning("blob_already_absent", {
                "record_id": record.id,
                "stored_name": record.stored_name,
            })

        try:
            result = self.collection.delete_one({"_id": parse_object_id(record.id, self.label)})
        except Exception as exc:
            logger.log_error("metadata_delete_failed", {
                "record_id": record.id,
                "blob_removed": removed,
                "error": str(exc),
            })
            file_status = "deleted" if removed else "was not found"
            raise MetadataDeletionError(
                f"Error deleting {self.label.lower()} metadata. File status: {file_status}."
            ) from exc

        if result.deleted_count == 0:
            raise NotFoundError(f"{self.label} not found.")

        logger.log_step(f"{self._event_prefix}_deleted", {
            "record_id": record.id,
            "blob_removed": removed,
            "caller": caller.user_id,
        })
        return f"{self.label} (file and metadata) deleted successfully."

    def _store_blob(self, incoming: Optional[IncomingFile]) -> StoredBlob:
        if incoming is None:
            raise ClientInputError("No file uploaded.")

        try:
            return self.blob_store.write(incoming.filename or "", incoming.stream)
        except BlobTooLargeError as exc:
            max_mb = self.blob_store.max_bytes // (1024 * 1024)
            raise PayloadTooLargeError(f"File exceeds the maximum size of {max_mb} MB.") from exc
        except OSError as exc:
            logger.log_error("blob_write_failed", {
                "filename": incoming.filename,
                "error": str(exc),
            })
            raise ServerError("Server error while storing the uploaded file.") from exc

    def _discard_blob(self, stored_name: str, reason: str) -> None:
        """Best-effort compensation; failures are logged, never raised."""
        try:
            self.blob_store.delete(stored_name)
        except (OSError, ValueError) as exc:
            logger.log_error("blob_cleanup_failed", {
                "stored_name": stored_name,
                "reason": reason,
                "error": str(exc),
            })
            return
        logger.log_blob_cleanup(stored_name, reason)

    def _insert_record(
        self,
        blob: StoredBlob,
        incoming: IncomingFile,
        fields: Dict[str, Any],
    ) -> FileRecord:
        try:
            record = self.record_model(
                stored_name=blob.stored_name,
                original_name=incoming.filename or "",
                mime_type=incoming.content_type or DEFAULT_MIME_TYPE,
                size_bytes=blob.size_bytes,
                **fields,
            )
        except ValidationError as exc:
            self._discard_blob(blob.stored_name, "record_validation_failed")
            raise RecordValidationError(describe_validation_error(exc)) from exc

        try:
            record = self._insert(record)
        except PortalError:
            self._discard_blob(blob.stored_name, "metadata_insert_failed")
            raise

        logger.log_step(f"{self._event_prefix}_uploaded", {
            "record_id": record.id,
            "stored_name": record.stored_name,
            "size_bytes": record.size_bytes,
        })
        return record
