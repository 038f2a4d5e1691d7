import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.models.issue import IssueCategory, IssueStatus
from app.schemas.user import UserBrief


class IssueCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None


class IssueUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None


class IssueStatusUpdate(BaseModel):
    status: IssueStatus


class IssueResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    category: IssueCategory
    status: IssueStatus
    raised_by: uuid.UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class IssueCommentCreate(BaseModel):
    issue_id: Optional[uuid.UUID] = None
    comment_text: Optional[str] = None


class IssueCommentUpdate(BaseModel):
    comment_text: Optional[str] = None


class IssueCommentResponse(BaseModel):
    id: uuid.UUID
    issue_id: uuid.UUID
    comment_text: str
    author: UserBrief
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
