import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.models.disciplinary_case import CaseStatus
from app.schemas.user import UserBrief


class DisciplinaryCaseCreate(BaseModel):
    student_id: Optional[uuid.UUID] = None
    reason: Optional[str] = None
    fine_amount: int = 0


class DisciplinaryCaseUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: Optional[str] = None
    fine_amount: Optional[int] = None
    status: Optional[CaseStatus] = None


class DisciplinaryCaseResponse(BaseModel):
    id: uuid.UUID
    student_id: uuid.UUID
    reason: str
    fine_amount: int
    status: CaseStatus
    decider: UserBrief
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
