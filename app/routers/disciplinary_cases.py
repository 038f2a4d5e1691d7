"""
disciplinary_cases.py

징계(Disciplinary Case) API 모음.

- 생성 / 수정 : ADMIN / STAFF
- 조회 : 학생은 본인 기록만, 관리자/직원은 전체 (student_user_id 필터)
- 삭제 : ADMIN 전용
- 목록 응답에 open 상태 벌금 합계(total_open_fines) 포함

"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from starlette import status

from app.core.deps import get_current_admin, get_current_staff, get_current_user, get_db
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.disciplinary_case import CaseStatus, DisciplinaryCase
from app.models.student import Student
from app.models.user import Role, User
from app.schemas.common import clamp_page, page_meta
from app.schemas.disciplinary_case import (
    DisciplinaryCaseCreate,
    DisciplinaryCaseResponse,
    DisciplinaryCaseUpdate,
)
from app.services.students import get_by_id as get_student, require_student_profile

router = APIRouter(prefix="/disciplinary-cases", tags=["disciplinary-cases"])

MIN_REASON_LENGTH = 10


def _case(case: DisciplinaryCase) -> dict:
    return DisciplinaryCaseResponse.model_validate(case).model_dump(mode="json")


def _get_case(db: Session, case_id: uuid.UUID) -> DisciplinaryCase:
    case = db.get(DisciplinaryCase, case_id)
    if not case:
        raise NotFound("Disciplinary case not found")
    return case


def _validate(reason: str | None, fine_amount: int | None) -> None:
    if reason is not None and len(reason.strip()) < MIN_REASON_LENGTH:
        raise ValidationError(
            f"Reason must be at least {MIN_REASON_LENGTH} characters long", field="reason"
        )
    if fine_amount is not None and fine_amount < 0:
        raise ValidationError("Fine amount cannot be negative", field="fine_amount")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_case(
    data: DisciplinaryCaseCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_staff),
):
    if not data.student_id or not data.reason:
        raise ValidationError("Student ID and reason are required")
    _validate(data.reason, data.fine_amount)

    student = get_student(db, data.student_id)

    case = DisciplinaryCase(
        student_id=student.id,
        reason=data.reason.strip(),
        fine_amount=data.fine_amount,
        decided_by=current.id,
    )
    db.add(case)
    db.commit()
    db.refresh(case)
    return {"success": True, "message": "Disciplinary case created successfully", "data": _case(case)}


@router.get("")
def list_cases(
    page: int = 1,
    limit: int = 10,
    status_filter: CaseStatus | None = Query(None, alias="status"),
    student_user_id: uuid.UUID | None = None,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    page, limit = clamp_page(page, limit)
    conditions = []

    if current.role == Role.STUDENT:
        conditions.append(DisciplinaryCase.student_id == require_student_profile(db, current).id)
    elif student_user_id:
        conditions.append(
            DisciplinaryCase.student_id.in_(select(Student.id).where(Student.user_id == student_user_id))
        )

    if status_filter is not None:
        conditions.append(DisciplinaryCase.status == status_filter)

    stmt = select(DisciplinaryCase).where(*conditions)
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        stmt.order_by(DisciplinaryCase.created_at.desc()).offset((page - 1) * limit).limit(limit)
    ).all()

    # 미납 벌금 = open 상태 징계의 fine_amount 합계
    open_fines = db.scalar(
        select(func.coalesce(func.sum(DisciplinaryCase.fine_amount), 0)).where(
            *conditions, DisciplinaryCase.status == CaseStatus.OPEN
        )
    )

    return {
        "success": True,
        "message": "Disciplinary cases fetched successfully",
        "data": [_case(c) for c in rows],
        "total_open_fines": int(open_fines or 0),
        "pagination": page_meta(page, limit, total).model_dump(),
    }


@router.get("/{case_id}")
def get_case(
    case_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    case = _get_case(db, case_id)
    if current.role == Role.STUDENT and case.student_id != require_student_profile(db, current).id:
        raise Forbidden("Access denied")
    return {"success": True, "message": "Disciplinary case fetched successfully", "data": _case(case)}


@router.patch("/{case_id}")
def update_case(
    case_id: uuid.UUID,
    data: DisciplinaryCaseUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_staff),
):
    case = _get_case(db, case_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("No changes provided")
    _validate(changes.get("reason"), changes.get("fine_amount"))

    if "reason" in changes:
        case.reason = changes["reason"].strip()
    if "fine_amount" in changes:
        case.fine_amount = changes["fine_amount"]
    if "status" in changes:
        case.status = changes["status"]

    db.commit()
    db.refresh(case)
    return {"success": True, "message": "Disciplinary case updated successfully", "data": _case(case)}


@router.delete("/{case_id}")
def delete_case(
    case_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    case = _get_case(db, case_id)
    db.delete(case)
    db.commit()
    return {"success": True, "message": "Disciplinary case deleted successfully"}
