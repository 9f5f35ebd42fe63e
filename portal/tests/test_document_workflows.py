import io
import unittest
from datetime import datetime, timedelta, timezone
from unittest import mock

from bson import ObjectId
from pymongo.errors import PyMongoError, WriteError

from portal.app.models.files import DEFAULT_MIME_TYPE, IncomingFile
from portal.app.services.blob_store import BlobStore
from portal.app.services.document_service import DocumentService
from portal.app.utils.errors import (
    BlobInconsistencyError,
    ClientInputError,
    ForbiddenError,
    MetadataDeletionError,
    NotFoundError,
    PayloadTooLargeError,
    RecordValidationError,
    ServerError,
)
from portal.app.utils.logging import logger
from portal.tests.support import PortalTestCase


def pdf(size=1000, filename="a.pdf", content_type="application/pdf"):
    return IncomingFile(filename=filename, content_type=content_type, stream=io.BytesIO(b"%" * size))


class DocumentWorkflowTestCase(PortalTestCase):

    def setUp(self):
        super().setUp()
        self.store = BlobStore(self.storage_root / "documents", max_bytes=10 * 1024 * 1024)
        self.service = DocumentService(self.database["documents"], self.store)

    def record_count(self):
        return self.database["documents"].count_documents({})


class TestDocumentUpload(DocumentWorkflowTestCase):

    def test_upload_stores_blob_and_metadata(self):
        record = self.service.upload(pdf(), "Modulo A", self.admin)

        self.assertIsNotNone(record.id)
        self.assertEqual(record.title, "Modulo A")
        self.assertEqual(record.original_name, "a.pdf")
        self.assertEqual(record.mime_type, "application/pdf")
        self.assertEqual(record.size_bytes, 1000)
        self.assertTrue(record.stored_name.endswith("-a.pdf"))

        stored = self.storage_root / "documents" / record.stored_name
        self.assertEqual(stored.stat().st_size, 1000)

        document = self.database["documents"].find_one({"_id": ObjectId(record.id)})
        self.assertEqual(document["storedName"], record.stored_name)
        self.assertEqual(document["title"], "Modulo A")

    def test_title_is_stripped(self):
        record = self.service.upload(pdf(), "  Regolamento  ", self.admin)
        self.assertEqual(record.title, "Regolamento")

    def test_missing_mime_type_defaults(self):
        record = self.service.upload(pdf(content_type=None), "Modulo B", self.admin)
        self.assertEqual(record.mime_type, DEFAULT_MIME_TYPE)

    def test_blank_title_leaves_no_blob_and_no_record(self):
        for title in (None, "", "   "):
            with self.assertRaises(ClientInputError):
                self.service.upload(pdf(), title, self.admin)

        self.assertEqual(self.blobs("documents"), [])
        self.assertEqual(self.record_count(), 0)

    def test_missing_file_is_rejected(self):
        with self.assertRaises(ClientInputError) as ctx:
            self.service.upload(None, "Modulo A", self.admin)
        self.assertEqual(ctx.exception.message, "No file uploaded.")
        self.assertEqual(self.record_count(), 0)

    def test_non_admin_cannot_upload(self):
        with self.assertRaises(ForbiddenError):
            self.service.upload(pdf(), "Modulo A", self.member)
        self.assertEqual(self.blobs("documents"), [])

    def test_oversized_payload_leaves_nothing(self):
        self.service.blob_store = BlobStore(self.storage_root / "documents", max_bytes=500)
        with self.assertRaises(PayloadTooLargeError):
            self.service.upload(pdf(size=501), "Modulo A", self.admin)
        self.assertEqual(self.blobs("documents"), [])
        self.assertEqual(self.record_count(), 0)

    def test_insert_failure_removes_blob(self):
        with mock.patch.object(self.service.collection, "insert_one", side_effect=PyMongoError("connection reset")):
            with self.assertRaises(ServerError):
                self.service.upload(pdf(), "Modulo A", self.admin)

        self.assertEqual(self.blobs("documents"), [])
        self.assertEqual(self.record_count(), 0)

    def test_schema_rejection_is_a_validation_error(self):
        rejection = WriteError("Document failed validation", code=121)
        with mock.patch.object(self.service.collection, "insert_one", side_effect=rejection):
            with self.assertRaises(RecordValidationError):
                self.service.upload(pdf(), "Modulo A", self.admin)

        self.assertEqual(self.blobs("documents"), [])

    def test_record_validation_failure_removes_blob(self):
        with self.assertRaises(RecordValidationError):
            self.service.upload(pdf(filename=""), "Modulo A", self.admin)

        self.assertEqual(self.blobs("documents"), [])
        self.assertEqual(self.record_count(), 0)

    def test_cleanup_failure_does_not_mask_original_error(self):
        with mock.patch.object(self.store, "delete", side_effect=PermissionError("read-only")), \
                mock.patch.object(logger, "log_error") as log_error:
            with self.assertRaises(ClientInputError):
                self.service.upload(pdf(), "", self.admin)

        events = [call.args[0] for call in log_error.call_args_list]
        self.assertIn("blob_cleanup_failed", events)


class TestDocumentRetrieval(DocumentWorkflowTestCase):

    def test_list_is_newest_first(self):
        now = datetime.now(timezone.utc)
        for days_ago, title in ((3, "Vecchio"), (0, "Nuovo"), (1, "Medio")):
            self.database["documents"].insert_one({
                "storedName": f"{days_ago}-x.pdf",
                "originalName": "x.pdf",
                "mimeType": "application/pdf",
                "sizeBytes": 1,
                "title": title,
                "uploadedAt": now - timedelta(days=days_ago),
            })

        titles = [record.title for record in self.service.list_records(self.member)]
        self.assertEqual(titles, ["Nuovo", "Medio", "Vecchio"])

    def test_download_resolves_original_name(self):
        record = self.service.upload(pdf(), "Modulo A", self.admin)

        download = self.service.open_download(record.id, self.member)

        self.assertEqual(download.filename, "a.pdf")
        self.assertEqual(download.media_type, "application/pdf")
        self.assertEqual(download.path.read_bytes(), b"%" * 1000)

    def test_download_of_missing_blob_is_inconsistent(self):
        record = self.service.upload(pdf(), "Modulo A", self.admin)
        (self.storage_root / "documents" / record.stored_name).unlink()

        with self.assertRaises(BlobInconsistencyError):
            self.service.open_download(record.id, self.member)

    def test_malformed_stored_row_is_a_server_error(self):
        inserted = self.database["documents"].insert_one({"storedName": "1-x.pdf", "title": "Senza metadati"})

        with self.assertRaises(ServerError):
            self.service.get_record(str(inserted.inserted_id))

    def test_download_of_unknown_id(self):
        with self.assertRaises(NotFoundError):
            self.service.open_download(str(ObjectId()), self.member)
        with self.assertRaises(NotFoundError):
            self.service.open_download("not-an-id", self.member)


class TestDocumentDelete(DocumentWorkflowTestCase):

    def test_delete_removes_blob_then_record(self):
        record = self.service.upload(pdf(), "Modulo A", self.admin)

        message = self.service.delete(record.id, self.admin)

        self.assertEqual(message, "Document (file and metadata) deleted successfully.")
        self.assertEqual(self.blobs("documents"), [])
        with self.assertRaises(NotFoundError):
            self.service.get_record(record.id)

    def test_second_delete_is_not_found(self):
        record = self.service.upload(pdf(), "Modulo A", self.admin)
        self.service.delete(record.id, self.admin)

        with self.assertRaises(NotFoundError):
            self.service.delete(record.id, self.admin)

    def test_delete_of_unknown_id_changes_nothing(self):
        self.service.upload(pdf(), "Modulo A", self.admin)

        with self.assertRaises(NotFoundError):
            self.service.delete(str(ObjectId()), self.admin)
        with self.assertRaises(NotFoundError):
            self.service.delete("12345", self.admin)

        self.assertEqual(len(self.blobs("documents")), 1)
        self.assertEqual(self.record_count(), 1)

    def test_non_admin_cannot_delete(self):
        record = self.service.upload(pdf(), "Modulo A", self.admin)

        with self.assertRaises(ForbiddenError):
            self.service.delete(record.id, self.member)
        self.assertEqual(self.record_count(), 1)

    def test_delete_succeeds_when_blob_already_gone(self):
        record = self.service.upload(pdf(), "Modulo A", self.admin)
        (self.storage_root / "documents" / record.stored_name).unlink()

        self.service.delete(record.id, self.admin)

        self.assertEqual(self.record_count(), 0)
        with self.assertRaises(NotFoundError):
            self.service.open_download(record.id, self.member)

    def test_blob_delete_failure_keeps_metadata(self):
        record = self.service.upload(pdf(), "Modulo A", self.admin)

        with mock.patch.object(self.store, "delete", side_effect=PermissionError("denied")):
            with self.assertRaises(ServerError) as ctx:
                self.service.delete(record.id, self.admin)

        self.assertNotIsInstance(ctx.exception, MetadataDeletionError)
        self.assertEqual(self.service.get_record(record.id).stored_name, record.stored_name)
        self.assertEqual(len(self.blobs("documents")), 1)

    def test_metadata_delete_failure_is_reported(self):
        record = self.service.upload(pdf(), "Modulo A", self.admin)

        with mock.patch.object(self.service.collection, "delete_one", side_effect=PyMongoError("timeout")):
            with self.assertRaises(MetadataDeletionError) as ctx:
                self.service.delete(record.id, self.admin)

        self.assertIn("File status: deleted", ctx.exception.message)
        self.assertEqual(self.blobs("documents"), [])
        with self.assertRaises(BlobInconsistencyError):
            self.service.open_download(record.id, self.member)


if __name__ == '__main__':
    unittest.main()
