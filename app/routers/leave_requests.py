"""
leave_requests.py

외박/휴가 신청(Leave Request) API 모음.

주요 기능:
- 학생 본인 신청 (기간 중복 / 과거 날짜 방지)
- 목록 조회 (학생: 본인 것만, 관리자/직원: 상태·학생 필터)
- 승인 / 거절 (관리자/직원, pending 상태에서만)
- 삭제 (학생: 본인 pending 건만, 관리자/직원: 전체)

"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session
from starlette import status

from app.core.deps import get_current_staff, get_current_student, get_current_user, get_db
from app.core.exceptions import Conflict, Forbidden, NotFound, ValidationError
from app.models.leave_request import LeaveRequest, LeaveStatus
from app.models.student import Student
from app.models.user import Role, User
from app.schemas.common import clamp_page, page_meta
from app.schemas.leave_request import LeaveRequestCreate, LeaveRequestResponse, LeaveStatusUpdate
from app.services.students import require_student_profile

router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


def _leave(leave: LeaveRequest) -> dict:
    return LeaveRequestResponse.model_validate(leave).model_dump(mode="json")


def _get_leave(db: Session, leave_id: uuid.UUID) -> LeaveRequest:
    leave = db.get(LeaveRequest, leave_id)
    if not leave:
        raise NotFound("Leave request not found")
    return leave


@router.post("/new", status_code=status.HTTP_201_CREATED)
def create_leave_request(
    data: LeaveRequestCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_student),
):
    if not data.from_date or not data.to_date:
        raise ValidationError("From date and to date are required")
    if not (data.destination or "").strip() or not (data.reason or "").strip():
        raise ValidationError("Destination and reason are required")
    if data.from_date < date.today():
        raise ValidationError("From date cannot be in the past", field="from_date")
    if data.to_date < data.from_date:
        raise ValidationError("To date must be same as or after from date", field="to_date")

    student = require_student_profile(db, current)

    # 같은 기간에 대기/승인된 신청이 있으면 중복
    overlapping = db.scalar(
        select(LeaveRequest.id).where(
            LeaveRequest.student_id == student.id,
            LeaveRequest.status.in_([LeaveStatus.PENDING, LeaveStatus.APPROVED]),
            LeaveRequest.from_date <= data.to_date,
            LeaveRequest.to_date >= data.from_date,
        )
    )
    if overlapping:
        raise Conflict("You already have a leave request for this period")

    leave = LeaveRequest(
        student_id=student.id,
        from_date=data.from_date,
        to_date=data.to_date,
        destination=data.destination.strip(),
        reason=data.reason.strip(),
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)
    return {"success": True, "message": "Leave request created successfully", "data": _leave(leave)}


@router.get("")
def list_leave_requests(
    page: int = 1,
    limit: int = 10,
    status_filter: LeaveStatus | None = Query(None, alias="status"),
    student_user_id: uuid.UUID | None = None,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    page, limit = clamp_page(page, limit)
    stmt = select(LeaveRequest)

    if current.role == Role.STUDENT:
        stmt = stmt.where(LeaveRequest.student_id == require_student_profile(db, current).id)
    elif student_user_id:
        stmt = stmt.join(Student, Student.id == LeaveRequest.student_id).where(
            Student.user_id == student_user_id
        )

    if status_filter is not None:
        stmt = stmt.where(LeaveRequest.status == status_filter)

    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        stmt.order_by(LeaveRequest.created_at.desc()).offset((page - 1) * limit).limit(limit)
    ).all()
    return {
        "success": True,
        "message": "Leave requests fetched successfully",
        "data": [_leave(r) for r in rows],
        "pagination": page_meta(page, limit, total).model_dump(),
    }


@router.get("/{leave_id}")
def get_leave_request(
    leave_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    leave = _get_leave(db, leave_id)
    if current.role == Role.STUDENT and leave.student_id != require_student_profile(db, current).id:
        raise Forbidden("Access denied")
    return {"success": True, "message": "Leave request fetched successfully", "data": _leave(leave)}


# 승인/거절은 pending 인 건에 대해서만 조건부 UPDATE 로 처리
@router.patch("/{leave_id}/status")
def update_leave_status(
    leave_id: uuid.UUID,
    data: LeaveStatusUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_staff),
):
    result = db.execute(
        update(LeaveRequest)
        .where(LeaveRequest.id == leave_id, LeaveRequest.status == LeaveStatus.PENDING)
        .values(status=LeaveStatus(data.status), approved_by=current.id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        _get_leave(db, leave_id)
        raise Conflict("Leave request already processed")
    db.commit()

    leave = _get_leave(db, leave_id)
    db.refresh(leave)
    return {"success": True, "message": f"Leave request {data.status} successfully", "data": _leave(leave)}


@router.delete("/{leave_id}")
def delete_leave_request(
    leave_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    leave = _get_leave(db, leave_id)

    if current.role == Role.STUDENT:
        if leave.student_id != require_student_profile(db, current).id:
            raise Forbidden("Access denied")
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError("You can only delete pending leave requests")

    db.delete(leave)
    db.commit()
    return {"success": True, "message": "Leave request deleted successfully"}
