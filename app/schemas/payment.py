import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.models.payment import PaymentStatus
from app.schemas.user import UserBrief


class PaymentCreate(BaseModel):
    user_id: Optional[uuid.UUID] = None
    amount: Optional[int] = None
    status: Optional[str] = None
    transaction_id: Optional[str] = None


class PaymentUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: Optional[int] = None
    status: Optional[PaymentStatus] = None
    transaction_id: Optional[str] = None


class PaymentResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: int
    status: PaymentStatus
    transaction_id: Optional[str]
    user: UserBrief
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
