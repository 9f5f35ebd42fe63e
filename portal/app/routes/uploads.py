from typing import Optional

from fastapi import UploadFile
from fastapi.responses import FileResponse

from ..models.files import BlobDownload, IncomingFile


def to_incoming_file(upload: Optional[UploadFile]) -> Optional[IncomingFile]:
    """Hand the spooled multipart file to the workflows without FastAPI types."""
    if upload is None:
        return None
    return IncomingFile(
        filename=upload.filename or "",
        content_type=upload.content_type,
        stream=upload.file,
    )


def download_response(download: BlobDownload) -> FileResponse:
    return FileResponse(
        download.path,
        filename=download.filename,
        media_type=download.media_type,
    )
