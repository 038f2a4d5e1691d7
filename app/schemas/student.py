import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.user import UserResponse


# 🔹 입사(Enrollment) 요청
# 필수값/형식 검증 순서가 정해져 있으므로 모든 필드를 Optional 로 받고
# services.enrollment 에서 순서대로 검증한다
class EnrollRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None

    sid: Optional[str] = None
    permanent_address: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_contact: Optional[str] = None
    branch: Optional[str] = None
    room_number: Optional[str] = None
    block: Optional[str] = None


# 🔹 학생 본인이 수정 가능한 항목
class StudentSelfUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    permanent_address: Optional[str] = None
    guardian_name: Optional[str] = None


# 🔹 관리자/직원이 수정 가능한 항목
# block + room_number 를 보내면 해당 방으로 이동 (비정규화 값은 Room 에서 다시 계산)
class StudentAdminUpdate(StudentSelfUpdate):
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    guardian_contact: Optional[str] = None
    branch: Optional[str] = None
    leaving_date: Optional[date] = None
    block: Optional[str] = None
    room_number: Optional[str] = None


class StudentResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    room_id: uuid.UUID
    sid: str
    permanent_address: str
    guardian_name: Optional[str]
    guardian_contact: str
    branch: str
    block: str
    room_number: str
    leaving_date: Optional[date]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StudentWithUserResponse(StudentResponse):
    user: UserResponse


class EnrollResponse(BaseModel):
    user: UserResponse
    student: StudentResponse
