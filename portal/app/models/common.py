from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PortalModel(BaseModel):
    """camelCase on the wire and in MongoDB, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    @classmethod
    def from_record(cls, record: BaseModel):
        """Project a stored record onto this (usually narrower) model."""
        return cls.model_validate(record.model_dump())


class MongoRecord(PortalModel):
    """A row of one of the portal collections."""

    id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_mongo(cls, document: Mapping[str, Any]):
        data = dict(document)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)

    def to_mongo(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"})


class MessageResponse(BaseModel):
    message: str
