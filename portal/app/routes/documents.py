import time
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from ..dependencies import get_current_caller, get_document_service
from ..models.common import MessageResponse
from ..models.documents import DocumentResponse
from ..services.document_service import DocumentService
from ..utils.logging import logger
from ..utils.security import Caller
from .uploads import download_response, to_incoming_file

router = APIRouter(prefix="/api/documents", tags=["Documents"])


@router.get("", response_model=List[DocumentResponse])
async def list_documents(
    caller: Caller = Depends(get_current_caller),
    service: DocumentService = Depends(get_document_service),
):
    """List all document metadata, newest upload first"""
    records = service.list_records(caller)
    return [DocumentResponse.from_record(record) for record in records]


@router.post("", response_model=DocumentResponse, status_code=201)
async def upload_document(
    request: Request,
    document_file: Optional[UploadFile] = File(None, alias="documentFile"),
    title: Optional[str] = Form(None),
    caller: Caller = Depends(get_current_caller),
    service: DocumentService = Depends(get_document_service),
):
    """Upload a new document (admin only)"""
    start_time = time.time()

    logger.log_step("document_upload_received", {
        "client": request.client.host if request.client else "unknown",
        "filename": document_file.filename if document_file else None,
        "content_type": document_file.content_type if document_file else None,
        "caller": caller.user_id,
    })

    try:
        record = service.upload(to_incoming_file(document_file), title, caller)
    finally:
        if document_file is not None:
            await document_file.close()

    logger.log_step("document_upload_completed", {
        "record_id": record.id,
        "process_time": time.time() - start_time,
    })
    return DocumentResponse.from_record(record)


@router.get("/{document_id}/download")
async def download_document(
    document_id: str,
    caller: Caller = Depends(get_current_caller),
    service: DocumentService = Depends(get_document_service),
):
    """Stream the stored file back under its original name"""
    return download_response(service.open_download(document_id, caller))


@router.delete("/{document_id}", response_model=MessageResponse)
async def delete_document(
    document_id: str,
    caller: Caller = Depends(get_current_caller),
    service: DocumentService = Depends(get_document_service),
):
    """Delete a document, file first and metadata second (admin only)"""
    return MessageResponse(message=service.delete(document_id, caller))
