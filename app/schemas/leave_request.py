import uuid
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from app.models.leave_request import LeaveStatus
from app.schemas.user import UserBrief


class LeaveRequestCreate(BaseModel):
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    destination: Optional[str] = None
    reason: Optional[str] = None


class LeaveStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]


class LeaveRequestResponse(BaseModel):
    id: uuid.UUID
    student_id: uuid.UUID
    from_date: date
    to_date: date
    destination: str
    reason: str
    status: LeaveStatus
    approver: Optional[UserBrief] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
