import uuid
from enum import Enum

from sqlalchemy import Enum as SAEnum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin
from app.models.student import Student
from app.models.user import User


class CaseStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class DisciplinaryCase(TimestampMixin, Base):
    """징계 기록. fine_amount 는 open 상태일 때 미납 벌금으로 집계된다."""

    __tablename__ = "disciplinary_cases"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("students.id", ondelete="CASCADE"), index=True, nullable=False
    )
    reason: Mapped[str] = mapped_column(String(500), nullable=False)
    fine_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[CaseStatus] = mapped_column(
        SAEnum(CaseStatus, name="case_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=CaseStatus.OPEN,
    )
    decided_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    student: Mapped[Student] = relationship()
    decider: Mapped[User] = relationship()
