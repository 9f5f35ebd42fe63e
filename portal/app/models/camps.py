from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import Field, StringConstraints

from .common import MongoRecord, NonEmptyStr, PortalModel, utc_now

Province = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_upper=True, min_length=2, max_length=2),
]
LowerEmail = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=3)]


class CampStatus(str, Enum):
    approved = "approved"
    pending = "pending"
    rejected = "rejected"


class Contact(PortalModel):
    phone: NonEmptyStr
    email: LowerEmail
    responsible: NonEmptyStr


class CampFields(PortalModel):
    name: NonEmptyStr
    description: NonEmptyStr
    address: NonEmptyStr
    city: NonEmptyStr
    province: Province
    contact: Contact
    capacity: int = Field(ge=1)
    services: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)


class CampCreate(CampFields):
    """Camp proposal as submitted by a member."""

    status: Optional[CampStatus] = None


class CampUpdate(PortalModel):
    """Partial update; only the supplied fields are written."""

    name: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    address: Optional[NonEmptyStr] = None
    city: Optional[NonEmptyStr] = None
    province: Optional[Province] = None
    contact: Optional[Contact] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    services: Optional[List[str]] = None
    images: Optional[List[str]] = None
    status: Optional[CampStatus] = None


class CampRecord(CampFields, MongoRecord):
    status: CampStatus = CampStatus.pending
    added_by: Optional[str] = None
    added_date: datetime = Field(default_factory=utc_now)
