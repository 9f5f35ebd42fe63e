from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import MongoRecord, NonEmptyStr, PortalModel, utc_now


class NewsFields(PortalModel):
    title: NonEmptyStr
    content: NonEmptyStr
    excerpt: NonEmptyStr
    author: NonEmptyStr
    categories: List[NonEmptyStr] = Field(min_length=1)


class NewsCreate(NewsFields):
    date: Optional[datetime] = None


class NewsUpdate(PortalModel):
    title: Optional[NonEmptyStr] = None
    content: Optional[NonEmptyStr] = None
    excerpt: Optional[NonEmptyStr] = None
    author: Optional[NonEmptyStr] = None
    categories: Optional[List[NonEmptyStr]] = Field(default=None, min_length=1)
    date: Optional[datetime] = None


class NewsRecord(NewsFields, MongoRecord):
    date: datetime = Field(default_factory=utc_now)
