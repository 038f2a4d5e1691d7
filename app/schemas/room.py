import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import UserBrief


class RoomCreate(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    room_number: str = Field(..., min_length=1, examples=["203"])
    block: str = Field(..., min_length=1, examples=["a"])
    floor: int = Field(..., ge=0, examples=[2])
    capacity: int = Field(1, ge=1, examples=[2])
    yearly_rent: Optional[int] = Field(None, ge=0, examples=[85000])


# occupancy 는 입사/퇴사 흐름에서만 바뀌므로 수정 요청에 포함할 수 없다 (extra="forbid")
class RoomUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    room_number: Optional[str] = Field(None, min_length=1)
    block: Optional[str] = Field(None, min_length=1)
    floor: Optional[int] = Field(None, ge=0)
    capacity: Optional[int] = Field(None, ge=1)
    yearly_rent: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class RoomResponse(BaseModel):
    id: uuid.UUID
    room_number: str
    block: str
    floor: Optional[int]
    capacity: int
    occupancy: int
    is_active: bool
    yearly_rent: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OccupantResponse(BaseModel):
    id: uuid.UUID
    sid: str
    branch: str
    user: UserBrief

    model_config = ConfigDict(from_attributes=True)


class RoomDetailResponse(RoomResponse):
    occupants: List[OccupantResponse] = []
