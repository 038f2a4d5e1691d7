"""
users.py

사용자(User) 계정 관리 API 모음.

주요 기능:
- 관리자/직원의 사용자 추가 (학생 프로필 없이 계정만 생성, 주로 staff/admin 계정)
- 로그인한 사용자 본인 정보 조회 (학생이면 학생 프로필 포함)
- 관리자용 사용자 목록 조회
- 관리자용 계정 활성/비활성 전환 (사용자는 삭제하지 않음)

관련 파일:
- app.services.users       : 검증 / 생성 / 상태 변경
- app.core.deps            : 권한 의존성

"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette import status

from app.core.deps import get_current_admin, get_current_staff, get_current_user, get_db
from app.core.exceptions import Conflict, ValidationError
from app.models.user import Role, User, UserStatus
from app.schemas.student import StudentResponse
from app.schemas.user import UserCreate, UserResponse, UserStatusUpdate
from app.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def add_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_staff),
):
    values = data.model_dump()
    user_service.validate_user_fields(values)
    role = user_service.parse_role(values.get("role"))

    # 직원은 관리자 계정을 만들 수 없음
    if role == Role.ADMIN and current.role != Role.ADMIN:
        raise ValidationError("Only admin can create admin users", field="role")

    user_service.ensure_identity_available(
        db, email=values["email"].strip().lower(), phone=values["phone"].strip()
    )

    try:
        user = user_service.create_user(
            db,
            full_name=values["full_name"],
            email=values["email"],
            phone=values["phone"],
            password=values["password"],
            role=role,
        )
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise Conflict("User with this email or phone already exists")

    return {
        "success": True,
        "message": "User added successfully",
        "data": UserResponse.model_validate(user).model_dump(mode="json"),
    }


# 본인 정보 조회 (학생이면 학생 프로필 포함)
@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    data = UserResponse.model_validate(current_user).model_dump(mode="json")
    if current_user.student is not None:
        data["student"] = StudentResponse.model_validate(current_user.student).model_dump(mode="json")
    return {"success": True, "message": "User fetched successfully", "data": data}


@router.get("")
def list_users(
    role: Role | None = None,
    status_: UserStatus | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    stmt = select(User)
    if role is not None:
        stmt = stmt.where(User.role == role)
    if status_ is not None:
        stmt = stmt.where(User.status == status_)
    users = db.scalars(stmt.order_by(User.created_at.desc())).all()
    return {
        "success": True,
        "message": "Users fetched successfully",
        "data": [UserResponse.model_validate(u).model_dump(mode="json") for u in users],
    }


# 계정 활성/비활성 전환 (관리자 전용)
@router.patch("/{user_id}/status")
def set_user_status(
    user_id: uuid.UUID,
    data: UserStatusUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    user = user_service.set_status(db, actor=current_admin, user_id=user_id, status=data.status)
    db.commit()
    db.refresh(user)
    return {
        "success": True,
        "message": f"User is now {user.status.value}",
        "data": UserResponse.model_validate(user).model_dump(mode="json"),
    }
