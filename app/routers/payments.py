"""
payments.py

기숙사비 납부(Payment) 기록 API 모음.

주요 기능:
- 납부 기록 생성 (학생: 본인 것만, 관리자/직원: 모든 사용자)
- 목록 조회 (상태 / 기간 필터, 성공 건 합계 total_amount 포함)
- 통계 조회 (관리자/직원)
- 수정 (관리자/직원), 삭제 (ADMIN 전용)

"""

import uuid
from datetime import date, datetime, time, timedelta, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy import case, func, select
from sqlalchemy.orm import Session, joinedload
from starlette import status

from app.core.deps import get_current_admin, get_current_staff, get_current_user, get_db
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.payment import Payment, PaymentStatus
from app.models.user import Role, User
from app.schemas.common import clamp_page, page_meta
from app.schemas.payment import PaymentCreate, PaymentResponse, PaymentUpdate

router = APIRouter(prefix="/payments", tags=["payments"])


def _payment(payment: Payment) -> dict:
    return PaymentResponse.model_validate(payment).model_dump(mode="json")


def _get_payment(db: Session, payment_id: uuid.UUID) -> Payment:
    payment = db.get(Payment, payment_id)
    if not payment:
        raise NotFound("Payment not found")
    return payment


def _parse_status(value: str) -> PaymentStatus:
    try:
        return PaymentStatus(value.strip().lower())
    except ValueError:
        raise ValidationError("Status must be either success or failed", field="status")


def _validate_amount(amount: int) -> None:
    if amount <= 0:
        raise ValidationError("Amount must be greater than 0", field="amount")


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_payment(
    data: PaymentCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    if data.amount is None or not data.status:
        raise ValidationError("Amount and status are required")
    _validate_amount(data.amount)
    payment_status = _parse_status(data.status)

    # 학생은 본인 납부만 기록 가능 (user_id 생략 시 본인)
    user_id = data.user_id or current.id
    if current.role == Role.STUDENT and user_id != current.id:
        raise Forbidden("You can record payments only for yourself")
    if not db.get(User, user_id):
        raise NotFound("User not found", field="user_id")

    payment = Payment(
        user_id=user_id,
        amount=data.amount,
        status=payment_status,
        transaction_id=(data.transaction_id or "").strip() or None,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return {"success": True, "message": "Payment recorded successfully", "data": _payment(payment)}


@router.get("")
def list_payments(
    page: int = 1,
    limit: int = 10,
    status_filter: PaymentStatus | None = Query(None, alias="status"),
    user_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    page, limit = clamp_page(page, limit)
    if start_date and end_date and end_date < start_date:
        raise ValidationError("End date must be same as or after start date", field="end_date")

    conditions = []
    if current.role == Role.STUDENT:
        conditions.append(Payment.user_id == current.id)
    elif user_id:
        conditions.append(Payment.user_id == user_id)

    if status_filter is not None:
        conditions.append(Payment.status == status_filter)
    if start_date:
        conditions.append(Payment.created_at >= _start_of(start_date))
    if end_date:
        # end_date 당일 포함
        conditions.append(Payment.created_at < _start_of(end_date + timedelta(days=1)))

    stmt = select(Payment).where(*conditions)
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(
        stmt.options(joinedload(Payment.user))
        .order_by(Payment.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()

    total_amount = db.scalar(
        select(func.coalesce(func.sum(Payment.amount), 0)).where(
            *conditions, Payment.status == PaymentStatus.SUCCESS
        )
    )

    return {
        "success": True,
        "message": "Payments fetched successfully",
        "data": [_payment(p) for p in rows],
        "total_amount": int(total_amount or 0),
        "pagination": page_meta(page, limit, total).model_dump(),
    }


# /{payment_id} 보다 먼저 등록
@router.get("/stats")
def payment_stats(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_staff),
):
    row = db.execute(
        select(
            func.count(Payment.id),
            func.coalesce(func.sum(case((Payment.status == PaymentStatus.SUCCESS, 1), else_=0)), 0),
            func.coalesce(func.sum(case((Payment.status == PaymentStatus.FAILED, 1), else_=0)), 0),
            func.coalesce(
                func.sum(case((Payment.status == PaymentStatus.SUCCESS, Payment.amount), else_=0)), 0
            ),
        )
    ).one()
    total_payments, successful, failed, total_amount = row
    return {
        "success": True,
        "message": "Payment stats fetched successfully",
        "data": {
            "total_payments": int(total_payments),
            "successful_payments": int(successful),
            "failed_payments": int(failed),
            "total_amount": int(total_amount),
        },
    }


@router.get("/{payment_id}")
def get_payment(
    payment_id: uuid.UUID,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    payment = _get_payment(db, payment_id)
    if current.role == Role.STUDENT and payment.user_id != current.id:
        raise Forbidden("Access denied")
    return {"success": True, "message": "Payment fetched successfully", "data": _payment(payment)}


@router.patch("/{payment_id}")
def update_payment(
    payment_id: uuid.UUID,
    data: PaymentUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_staff),
):
    payment = _get_payment(db, payment_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationError("No changes provided")

    if "amount" in changes:
        _validate_amount(changes["amount"])
        payment.amount = changes["amount"]
    if "status" in changes:
        payment.status = changes["status"]
    if "transaction_id" in changes:
        payment.transaction_id = changes["transaction_id"].strip() or None

    db.commit()
    db.refresh(payment)
    return {"success": True, "message": "Payment updated successfully", "data": _payment(payment)}


@router.delete("/{payment_id}")
def delete_payment(
    payment_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    payment = _get_payment(db, payment_id)
    db.delete(payment)
    db.commit()
    return {"success": True, "message": "Payment deleted successfully"}
