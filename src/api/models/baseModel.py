from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimeStampedModel(SQLModel):
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None


class ApiSchema(BaseModel):
    """
    Base for request and response bodies.
    Attributes stay snake_case in Python, the wire format is camelCase;
    both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TimeStampReadModel(ApiSchema):
    created_at: datetime
    updated_at: Optional[datetime] = None
