import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.user import UserBrief


class AnnouncementCreate(BaseModel):
    title: Optional[str] = None
    message: Optional[str] = None
    category: str = "general"
    notice_url: Optional[str] = None


class AnnouncementUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    message: Optional[str] = None
    category: Optional[str] = None
    notice_url: Optional[str] = None


class AnnouncementResponse(BaseModel):
    id: uuid.UUID
    title: str
    message: str
    category: str
    notice_url: Optional[str]
    author: UserBrief
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
