# src/api/models/announcementModel.py
from typing import Optional
from datetime import datetime
from enum import Enum
from pydantic import Field as PydanticField
from sqlmodel import Field

from src.api.models.baseModel import ApiSchema, TimeStampedModel, TimeStampReadModel


class AnnouncementType(str, Enum):
    INFO = "INFO"
    COUPON = "COUPON"
    EVENT = "EVENT"


class Announcement(TimeStampedModel, table=True):
    __tablename__ = "announcements"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=191)
    message: str
    type: AnnouncementType = Field(default=AnnouncementType.INFO)
    cta_label: Optional[str] = Field(default=None, max_length=100)
    cta_url: Optional[str] = None
    active: bool = Field(default=True, index=True)
    # open ended when unset
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None


class AnnouncementCreate(ApiSchema):
    title: str = PydanticField(min_length=1, max_length=191)
    message: str = PydanticField(min_length=1)
    type: AnnouncementType = AnnouncementType.INFO
    cta_label: Optional[str] = None
    cta_url: Optional[str] = None
    active: bool = True
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None


class AnnouncementUpdate(ApiSchema):
    title: Optional[str] = PydanticField(default=None, min_length=1, max_length=191)
    message: Optional[str] = PydanticField(default=None, min_length=1)
    type: Optional[AnnouncementType] = None
    cta_label: Optional[str] = None
    cta_url: Optional[str] = None
    active: Optional[bool] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None


class AnnouncementRead(TimeStampReadModel):
    id: int
    title: str
    message: str
    type: AnnouncementType
    cta_label: Optional[str] = None
    cta_url: Optional[str] = None
    active: bool
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
