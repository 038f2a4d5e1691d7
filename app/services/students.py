"""
services/students.py

학생 프로필(Student Registry) 관련 비즈니스 로직 모음.

이 파일은 학생 프로필 조회/검색, 수정, 삭제를 담당한다.
신규 프로필 생성은 입사 트랜잭션(app.services.enrollment)에서만 수행한다.

주요 기능:
- user_id 기준 프로필 조회
- 목록 조회 (block / branch 필터, 이름·이메일·학번 검색, 페이지네이션)
- 프로필 수정 (본인: 주소/보호자명, 관리자·직원: 전체 + 방 이동)
- 프로필 삭제 (배정된 방 인원 반납 포함)

설계 원칙:
- Student.block / room_number 는 항상 Room 에서 파생 (요청 값으로 직접 쓰지 않음)
- 방 이동은 새 방 allocate + 기존 방 release 를 한 트랜잭션 안에서 수행
- 모든 수정은 StudentHistory 에 변경 전 값을 남김
- commit 은 호출 측(unit_of_work)에서 수행

관련 파일:
- app.models.student       : Student / StudentHistory 모델
- app.services.rooms       : allocate / release
- app.routers.students     : 학생 API

"""

import re
import uuid
from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import NotFound, ValidationError
from app.models.room import normalize_block
from app.models.student import Student, StudentHistory
from app.models.user import Role, User
from app.services import rooms as room_service


SID_RE = re.compile(r"^\d{8}$")
GUARDIAN_CONTACT_RE = re.compile(r"^\d{10}$")

SELF_EDITABLE_FIELDS = ("permanent_address", "guardian_name")
ADMIN_EDITABLE_FIELDS = SELF_EDITABLE_FIELDS + ("guardian_contact", "branch", "leaving_date")
# null 을 명시적으로 보내면 값을 지움
CLEARABLE_FIELDS = ("leaving_date",)


def validate_sid(sid: str) -> None:
    if not SID_RE.match(sid):
        raise ValidationError("Student ID must be exactly 8 digits", field="sid")


def validate_guardian_contact(contact: str) -> None:
    if not GUARDIAN_CONTACT_RE.match(contact):
        raise ValidationError("Guardian contact must be 10 digits", field="guardian_contact")


def get_by_user_id(db: Session, user_id: uuid.UUID) -> Student:
    student = db.scalar(
        select(Student).options(joinedload(Student.user)).where(Student.user_id == user_id)
    )
    if not student:
        raise NotFound("Student profile not found", field="user_id")
    return student


def get_by_id(db: Session, student_id: uuid.UUID) -> Student:
    student = db.get(Student, student_id)
    if not student:
        raise NotFound("Student not found", field="student_id")
    return student


"""
학생 목록 조회

- block  : 정확히 일치 (소문자 변환)
- branch : 대소문자 무시 부분 일치
- search : 이름 / 이메일 / 학번 중 하나라도 부분 일치
- 최근 생성 순 정렬, (rows, total) 반환

"""

def list_students(
    db: Session,
    *,
    page: int,
    limit: int,
    block: str | None = None,
    branch: str | None = None,
    search: str | None = None,
) -> tuple[list[Student], int]:
    stmt = select(Student).join(User, User.id == Student.user_id)

    if block:
        stmt = stmt.where(Student.block == normalize_block(block))
    if branch:
        stmt = stmt.where(Student.branch.ilike(f"%{branch.strip()}%"))
    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Student.sid.ilike(pattern),
                User.full_name.ilike(pattern),
                User.email.ilike(pattern),
            )
        )

    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        stmt.options(joinedload(Student.user))
        .order_by(Student.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return list(rows), total


def _normalize(value):
    return value.strip() if isinstance(value, str) else value


"""
학생 프로필 수정

- admin=False : 본인 수정 (주소, 보호자명만)
- admin=True  : 관리자/직원 수정 (보호자 연락처, 학과, 퇴사 예정일, 방 이동 포함)
- 퇴사 예정일은 null 을 보내면 해제
- 실제로 바뀌는 값이 없으면 ValidationError("No changes detected")
- 방 이동 시 새 방을 먼저 배정(정원 초과면 RoomFullError)하고 기존 방을 반납

"""

def update_profile(
    db: Session,
    *,
    actor: User,
    student: Student,
    changes: dict,
    admin: bool,
) -> Student:
    allowed = ADMIN_EDITABLE_FIELDS if admin else SELF_EDITABLE_FIELDS
    updates = {
        k: _normalize(v) for k, v in changes.items()
        if k in allowed
        and (v is not None or k in CLEARABLE_FIELDS)
        and _normalize(v) != getattr(student, k)
    }

    move_to = None
    if admin and (changes.get("block") or changes.get("room_number")):
        target_block = normalize_block(changes.get("block") or student.block)
        target_number = (changes.get("room_number") or student.room_number).strip()
        if (target_block, target_number) != (student.block, student.room_number):
            move_to = (target_block, target_number)

    if not updates and not move_to:
        raise ValidationError("No changes detected")

    if "guardian_contact" in updates:
        validate_guardian_contact(updates["guardian_contact"])

    old_data = {k: getattr(student, k) for k in updates}
    for k, v in old_data.items():
        if isinstance(v, date):
            old_data[k] = v.isoformat()

    if move_to:
        old_room_id = student.room_id
        old_data.update({"room_id": str(old_room_id), "block": student.block, "room_number": student.room_number})
        new_room = room_service.allocate(db, block=move_to[0], room_number=move_to[1])
        student.room = new_room
        room_service.release(db, old_room_id)

    for k, v in updates.items():
        setattr(student, k, v)

    db.add(StudentHistory(student_id=student.id, updated_by=actor.id, old_data=old_data))
    db.flush()
    return student


"""
학생 프로필 삭제

- 배정된 방의 인원을 반납(release)
- User 계정은 유지 (필요 시 관리자가 별도로 비활성화)

"""

def delete_student(db: Session, *, user_id: uuid.UUID) -> Student:
    student = db.scalar(select(Student).where(Student.user_id == user_id))
    if not student:
        raise NotFound("Student profile not found", field="user_id")

    room_id = student.room_id
    db.delete(student)
    db.flush()
    room_service.release(db, room_id)
    return student


def require_student_profile(db: Session, user: User) -> Student:
    if user.role != Role.STUDENT:
        raise ValidationError("Only students have a student profile")
    return get_by_user_id(db, user.id)
