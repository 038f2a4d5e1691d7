"""
services/users.py

사용자(Identity Store) 관련 비즈니스 로직 모음.

이 파일은 사용자 생성/인증/상태 변경과
입사(enrollment) 흐름에서 공통으로 쓰는 사용자 입력 검증을 담당한다.

주요 기능:
- 사용자 입력 검증 (필수값 → 이메일 → 전화번호 → 비밀번호 → 권한 순)
- 이메일/전화번호 중복 검사
- 사용자 생성 (비밀번호 해싱 포함)
- 로그인 인증
- 계정 활성/비활성 전환

설계 원칙:
- HTTP / FastAPI 의존성 없음 (실패는 app.core.exceptions 로 표현)
- commit 은 호출 측(라우터 / unit_of_work)에서 수행
- 참조 무결성을 위해 사용자는 삭제하지 않고 비활성화만 허용

관련 파일:
- app.models.user          : User / Role / UserStatus 모델
- app.services.enrollment  : 입사 트랜잭션에서 검증/생성 함수 재사용
- app.routers.users        : 사용자 API

"""

import re
import uuid

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.core.exceptions import Conflict, Forbidden, NotFound, Unauthenticated, ValidationError
from app.core.security import get_password_hash, verify_password
from app.models.user import Role, User, UserStatus


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\d{10}$")
MIN_PASSWORD_LENGTH = 6


def require_fields(values: dict, names: list[str]) -> None:
    missing = [n for n in names if values.get(n) is None or not str(values.get(n)).strip()]
    if missing:
        raise ValidationError("All required fields must be provided", field=missing[0])


def validate_email(email: str) -> None:
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format", field="email")


def validate_phone(phone: str) -> None:
    if not PHONE_RE.match(phone):
        raise ValidationError("Phone number must be 10 digits", field="phone")


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", field="password"
        )


def parse_role(role: str | None) -> Role:
    if not role:
        return Role.STUDENT
    try:
        return Role(role)
    except ValueError:
        raise ValidationError("Invalid role. Must be one of: student, admin, staff", field="role")


"""
이메일 또는 전화번호 중복 검사

- 둘 중 하나라도 이미 사용 중이면 Conflict
- 어떤 필드가 겹쳤는지 field 로 알려준다

"""

def ensure_identity_available(db: Session, *, email: str, phone: str) -> None:
    existing = db.scalar(select(User).where(or_(User.email == email, User.phone == phone)))
    if existing:
        if existing.email == email:
            raise Conflict("User with this email already exists", field="email")
        raise Conflict("User with this phone number already exists", field="phone")


def validate_user_fields(values: dict) -> None:
    require_fields(values, ["full_name", "email", "phone", "password"])
    validate_email(values["email"].strip().lower())
    validate_phone(values["phone"].strip())
    validate_password(values["password"])
    parse_role(values.get("role"))


"""
사용자 생성

- 입력값은 이미 validate_user_fields 를 통과했다고 가정
- 비밀번호는 bcrypt 해시로만 저장
- flush 까지만 수행하여 같은 트랜잭션 안에서 id 를 참조할 수 있게 한다

"""

def create_user(
    db: Session,
    *,
    full_name: str,
    email: str,
    phone: str,
    password: str,
    role: Role = Role.STUDENT,
) -> User:
    user = User(
        full_name=full_name.strip(),
        email=email.strip().lower(),
        phone=phone.strip(),
        password_hash=get_password_hash(password),
        role=role,
        status=UserStatus.ACTIVE,
    )
    db.add(user)
    db.flush()
    return user


def authenticate(db: Session, *, email: str, password: str) -> User:
    if not email or not password:
        raise ValidationError("Please provide all the necessary details")

    user = db.scalar(select(User).where(User.email == email.strip().lower()))
    if not user:
        raise Unauthenticated("Invalid email or password")

    if user.status != UserStatus.ACTIVE:
        raise Forbidden("Account is inactive. Please contact administrator")

    if not verify_password(password, user.password_hash):
        raise Unauthenticated("Invalid email or password")

    return user


def get_user(db: Session, user_id: uuid.UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found", field="user_id")
    return user


"""
계정 활성/비활성 전환

- 자기 자신은 비활성화할 수 없음
- 비활성화 시 token_version 을 올려 발급된 토큰을 즉시 무효화

"""

def set_status(db: Session, *, actor: User, user_id: uuid.UUID, status: UserStatus) -> User:
    user = get_user(db, user_id)

    if user.id == actor.id:
        raise ValidationError("Cannot change your own status")

    if user.status == status:
        raise ValidationError(f"User already {status.value}")

    user.status = status
    if status == UserStatus.INACTIVE:
        user.token_version += 1
    return user
