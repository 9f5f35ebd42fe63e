from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Optional

from pydantic import Field

from .common import MongoRecord, PortalModel, utc_now

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass
class IncomingFile:
    """An uploaded payload as handed over by the HTTP layer."""

    filename: str
    content_type: Optional[str]
    stream: BinaryIO


@dataclass
class StoredBlob:
    stored_name: str
    size_bytes: int


@dataclass
class BlobDownload:
    path: Path
    filename: str
    media_type: str


class FileRecord(MongoRecord):
    """Metadata describing one blob in the blob store."""

    stored_name: str = Field(min_length=1)
    original_name: str = Field(min_length=1)
    mime_type: str = Field(min_length=1)
    size_bytes: int = Field(ge=0)
    uploaded_at: datetime = Field(default_factory=utc_now)


class FileRecordResponse(PortalModel):
    """Public view of a file record; the stored name stays server-side."""

    id: str
    original_name: str
    mime_type: str
    size_bytes: int
    uploaded_at: datetime
    created_at: datetime
    updated_at: datetime
