from typing import Optional

from ..models.documents import DocumentRecord
from ..models.files import IncomingFile
from ..utils.errors import ClientInputError
from ..utils.security import Caller
from .file_records import FileRecordService


class DocumentService(FileRecordService):
    """Downloadable documents (forms, regulations, circulars)."""

    record_model = DocumentRecord
    label = "Document"
    sort_field = "uploadedAt"

    def upload(
        self,
        incoming: Optional[IncomingFile],
        title: Optional[str],
        caller: Caller,
    ) -> DocumentRecord:
        """Store the payload, then check the title, then insert the record."""
        caller.require_admin()
        blob = self._store_blob(incoming)

        clean_title = title.strip() if isinstance(title, str) else ""
        if not clean_title:
            self._discard_blob(blob.stored_name, "missing_title")
            raise ClientInputError("Title is required and must be a non-empty string.")

        return self._insert_record(blob, incoming, {"title": clean_title})
