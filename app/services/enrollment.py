"""
services/enrollment.py

입사(Enrollment) 트랜잭션.

관리자 요청 한 번으로
  1) 사용자(User) 계정 생성
  2) 방 배정 (없는 방이면 생성, 가득 찬 방이면 실패)
  3) 학생 프로필(Student) 생성
을 하나의 트랜잭션으로 처리한다.
어느 단계에서 실패하든 앞 단계의 쓰기(User 포함)는 모두 rollback 된다.

검증 순서 (첫 번째 위반에서 즉시 실패, DB 쓰기 전):
  필수값 → 학번(8자리) → 보호자 연락처(10자리) → 이메일 형식
  → 전화번호(10자리) → 비밀번호 길이(6자 이상) → 권한 값(student 만 허용)
  → 이메일/전화번호 중복 → 학번 중복

관련 파일:
- app.services.users      : 사용자 검증/생성
- app.services.rooms      : allocate (조건부 UPDATE)
- app.services.students   : 학번/보호자 연락처 검증
- app.db.session          : unit_of_work (commit / rollback / 제한 시간)
- app.routers.students    : POST /students/create

"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Conflict, Forbidden, HostelError, InternalError, ValidationError
from app.db.session import unit_of_work
from app.models.student import Student
from app.models.user import Role, User
from app.services import rooms as room_service
from app.services import users as user_service
from app.services.students import validate_guardian_contact, validate_sid

logger = logging.getLogger(__name__)


REQUIRED_FIELDS = [
    "full_name", "email", "phone", "password",
    "sid", "permanent_address", "guardian_contact", "branch", "room_number", "block",
]

# 고유 제약 위반 메시지에서 어떤 컬럼이 겹쳤는지 찾을 때 사용 (PostgreSQL / SQLite 공통)
UNIQUE_FIELDS = ("email", "phone", "sid")


def _conflict_from_integrity_error(exc: IntegrityError) -> Conflict | None:
    text = str(exc.orig).lower()
    for field in UNIQUE_FIELDS:
        if field in text:
            return Conflict(f"User with this {field} already exists", field=field)
    return None


def validate_enrollment(db: Session, data: dict) -> Role:
    user_service.require_fields(data, REQUIRED_FIELDS)
    validate_sid(data["sid"].strip())
    validate_guardian_contact(data["guardian_contact"].strip())
    user_service.validate_email(data["email"].strip().lower())
    user_service.validate_phone(data["phone"].strip())
    user_service.validate_password(data["password"])
    role = user_service.parse_role(data.get("role"))
    # 학생 프로필은 student 권한 사용자에게만 생성
    if role != Role.STUDENT:
        raise ValidationError("Enrollment can only create users with the student role", field="role")

    user_service.ensure_identity_available(
        db, email=data["email"].strip().lower(), phone=data["phone"].strip()
    )
    if db.scalar(select(Student.id).where(Student.sid == data["sid"].strip())):
        raise Conflict("Student ID already exists", field="sid")

    return role


"""
입사 처리

- actor 는 ADMIN 이어야 함 (라우터 의존성과 별개로 서비스에서도 확인)
- 성공 시 (user, student) 반환, commit 완료 상태
- 실패 시 HostelError 하위 예외 (DB 장애는 InternalError 로 변환)

"""

def enroll(db: Session, *, actor: User, data: dict, timeout: float | None = None) -> tuple[User, Student]:
    if actor.role != Role.ADMIN:
        raise Forbidden("User must have admin role")

    role = validate_enrollment(db, data)
    timeout = settings.ENROLLMENT_TIMEOUT_SECONDS if timeout is None else timeout

    try:
        with unit_of_work(db, timeout=timeout) as uow:
            user = user_service.create_user(
                db,
                full_name=data["full_name"],
                email=data["email"],
                phone=data["phone"],
                password=data["password"],
                role=role,
            )
            uow.checkpoint()

            room = room_service.allocate(db, block=data["block"], room_number=data["room_number"])
            uow.checkpoint()

            guardian_name = (data.get("guardian_name") or "").strip() or None
            student = Student(
                user=user,
                room=room,
                sid=data["sid"].strip(),
                permanent_address=data["permanent_address"].strip(),
                guardian_name=guardian_name,
                guardian_contact=data["guardian_contact"].strip(),
                branch=data["branch"].strip(),
            )
            db.add(student)
            db.flush()
    except HostelError as exc:
        logger.warning("enrollment rolled back: %s", exc.message)
        raise
    except IntegrityError as exc:
        conflict = _conflict_from_integrity_error(exc)
        logger.warning("enrollment rolled back on integrity error")
        if conflict:
            raise conflict from exc
        raise InternalError("Failed to create student") from exc
    except SQLAlchemyError as exc:
        logger.exception("enrollment failed")
        raise InternalError("Failed to create student") from exc

    db.refresh(user)
    db.refresh(student)
    logger.info(
        "student enrolled",
        extra={"user_id": user.id, "student_id": student.id, "room_id": student.room_id},
    )
    return user, student
