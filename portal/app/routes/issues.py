import time
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from ..dependencies import get_current_caller, get_issue_service
from ..models.common import MessageResponse
from ..models.issues import IssueResponse
from ..services.issue_service import IssueService
from ..utils.logging import logger
from ..utils.security import Caller
from .uploads import download_response, to_incoming_file

router = APIRouter(prefix="/api/issues", tags=["Magazine"])


@router.get("", response_model=List[IssueResponse])
async def list_issues(
    caller: Caller = Depends(get_current_caller),
    service: IssueService = Depends(get_issue_service),
):
    records = service.list_records(caller)
    return [IssueResponse.from_record(record) for record in records]


@router.post("", response_model=IssueResponse, status_code=201)
async def upload_issue(
    request: Request,
    issue_file: Optional[UploadFile] = File(None, alias="issueFile"),
    issue_number: Optional[str] = Form(None, alias="issueNumber"),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    publish_date: Optional[str] = Form(None, alias="publishDate"),
    caller: Caller = Depends(get_current_caller),
    service: IssueService = Depends(get_issue_service),
):
    """Publish a new magazine number (admin only)"""
    start_time = time.time()

    logger.log_step("issue_upload_received", {
        "client": request.client.host if request.client else "unknown",
        "issue_number": issue_number,
        "filename": issue_file.filename if issue_file else None,
        "caller": caller.user_id,
    })

    try:
        record = service.upload(
            to_incoming_file(issue_file),
            issue_number=issue_number,
            title=title,
            description=description,
            publish_date=publish_date,
            caller=caller,
        )
    finally:
        if issue_file is not None:
            await issue_file.close()

    logger.log_step("issue_upload_completed", {
        "record_id": record.id,
        "process_time": time.time() - start_time,
    })
    return IssueResponse.from_record(record)


@router.get("/{issue_id}/download")
async def download_issue(
    issue_id: str,
    caller: Caller = Depends(get_current_caller),
    service: IssueService = Depends(get_issue_service),
):
    return download_response(service.open_download(issue_id, caller))


@router.delete("/{issue_id}", response_model=MessageResponse)
async def delete_issue(
    issue_id: str,
    caller: Caller = Depends(get_current_caller),
    service: IssueService = Depends(get_issue_service),
):
    return MessageResponse(message=service.delete(issue_id, caller))
