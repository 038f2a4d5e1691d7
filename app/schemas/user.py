import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.models.user import Role, UserStatus


# 🔹 관리자/직원의 사용자 추가 요청
# 형식 검증은 services.users.validate_user_fields 에서 순서대로 수행하므로 여기서는 타입만 받는다
class UserCreate(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


# 🔹 관리자 계정 상태 변경 요청용
class UserStatusUpdate(BaseModel):
    status: UserStatus


# 🔹 유저 응답용 (password_hash 는 절대 포함하지 않음)
class UserResponse(BaseModel):
    id: uuid.UUID
    full_name: str
    email: str
    phone: str
    role: Role
    status: UserStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# 🔹 다른 응답에 끼워 넣는 요약 정보 (populate 용)
class UserBrief(BaseModel):
    id: uuid.UUID
    full_name: str
    email: str
    role: Role

    model_config = ConfigDict(from_attributes=True)
