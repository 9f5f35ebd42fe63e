from datetime import datetime

from .common import NonEmptyStr
from .files import FileRecord, FileRecordResponse


class IssueRecord(FileRecord):
    """One published number of the regional magazine."""

    issue_number: NonEmptyStr
    title: NonEmptyStr
    description: str = ""
    publish_date: datetime


class IssueResponse(FileRecordResponse):
    issue_number: str
    title: str
    description: str
    publish_date: datetime
