import uuid
from enum import Enum

from sqlalchemy import Enum as SAEnum, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin
from app.models.user import User


class PaymentStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class Payment(TimestampMixin, Base):
    """기숙사비 납부 기록.

    - amount: 원 단위 정수
    - status: 결제 게이트웨이 결과 (success / failed)
    """

    __tablename__ = "payments"
    __table_args__ = (
        Index("ix_payments_user_id", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(PaymentStatus, name="payment_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    transaction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    user: Mapped[User] = relationship()
