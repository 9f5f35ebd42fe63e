from .common import NonEmptyStr
from .files import FileRecord, FileRecordResponse


class DocumentRecord(FileRecord):
    title: NonEmptyStr


class DocumentResponse(FileRecordResponse):
    title: str
