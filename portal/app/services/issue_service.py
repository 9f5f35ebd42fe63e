from datetime import date, datetime, timezone
from typing import Optional

from ..models.files import IncomingFile
from ..models.issues import IssueRecord
from ..utils.errors import ClientInputError
from ..utils.security import Caller
from .file_records import FileRecordService


def parse_publish_date(value: Optional[str]) -> datetime:
    """``YYYY-MM-DD`` to midnight UTC."""
    if not value or not value.strip():
        raise ValueError("publishDate is required")
    day = date.fromisoformat(value.strip()[:10])
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


class IssueService(FileRecordService):
    """Numbers of the regional magazine, each backed by one PDF."""

    record_model = IssueRecord
    label = "Issue"
    sort_field = "publishDate"

    def upload(
        self,
        incoming: Optional[IncomingFile],
        issue_number: Optional[str],
        title: Optional[str],
        description: Optional[str],
        publish_date: Optional[str],
        caller: Caller,
    ) -> IssueRecord:
        caller.require_admin()
        blob = self._store_blob(incoming)

        clean_number = issue_number.strip() if isinstance(issue_number, str) else ""
        clean_title = title.strip() if isinstance(title, str) else ""
        if not clean_number or not clean_title:
            self._discard_blob(blob.stored_name, "missing_issue_fields")
            raise ClientInputError("Issue number and title are required.")

        try:
            published = parse_publish_date(publish_date)
        except ValueError as exc:
            self._discard_blob(blob.stored_name, "invalid_publish_date")
            raise ClientInputError("publishDate must be a date in YYYY-MM-DD format.") from exc

        return self._insert_record(blob, incoming, {
            "issue_number": clean_number,
            "title": clean_title,
            "description": (description or "").strip(),
            "publish_date": published,
        })
