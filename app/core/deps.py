from typing import Generator
import uuid

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from sqlalchemy import select

from app.core.exceptions import Forbidden, Unauthenticated
from app.core.security import decode_access_token
from app.db.session import SessionLocal
from app.models.student import Student
from app.models.user import Role, User, UserStatus

# Swagger Authorize에서 "Bearer 토큰" 입력받는 스키마
bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if cred is None:
        raise Unauthenticated("Unauthorized access")

    try:
        sub, token_version = decode_access_token(cred.credentials)
        # User.id가 UUID라서 변환
        user_id = uuid.UUID(sub)
    except Exception:
        raise Unauthenticated("Token expired or invalid")

    user = db.scalar(select(User).where(User.id == user_id))
    if not user:
        raise Unauthenticated("User not found")

    # 로그아웃/비활성화로 token_version 이 올라갔으면 기존 토큰은 무효
    if token_version != user.token_version:
        raise Unauthenticated("Token expired or invalid")

    if user.status != UserStatus.ACTIVE:
        raise Forbidden("Account is inactive")

    # 학생 계정은 관리자가 프로필을 만들어야 사용 가능
    if user.role == Role.STUDENT:
        has_profile = db.scalar(select(Student.id).where(Student.user_id == user.id))
        if not has_profile:
            raise Forbidden("Student profile not created yet. Contact admin.")

    return user


def require_roles(*roles: Role):
    allowed = set(roles)

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise Forbidden(f"Requires role in {sorted(r.value for r in allowed)}")
        return current_user
    return _checker

get_current_admin = require_roles(Role.ADMIN)
get_current_staff = require_roles(Role.ADMIN, Role.STAFF)
get_current_student = require_roles(Role.STUDENT)
