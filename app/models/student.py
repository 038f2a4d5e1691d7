"""
student.py

학생 프로필(Student) 및 프로필 변경 이력(StudentHistory) 모델 정의 파일.

- Student 는 role=student 인 User 와 1:1, Room 과 N:1 관계
- block / room_number 는 조회 편의를 위한 비정규화(denormalized) 값으로,
  room 관계가 할당될 때마다 Room 에서 다시 복사된다.
  호출 측이 직접 값을 넣는 경로는 없다.
- StudentHistory 는 프로필 수정 직전 값을 보관하는 감사(Audit) 로그

"""

import uuid
from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.db.base import Base, TimestampMixin, utcnow
from app.models.room import Room
from app.models.user import User


class Student(TimestampMixin, Base):
    __tablename__ = "students"
    __table_args__ = (
        Index("ix_students_branch_created_at", "branch", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), unique=True, index=True, nullable=False)
    room_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("rooms.id"), index=True, nullable=False)

    sid: Mapped[str] = mapped_column(String(8), unique=True, index=True, nullable=False)
    permanent_address: Mapped[str] = mapped_column(String(255), nullable=False)
    guardian_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    guardian_contact: Mapped[str] = mapped_column(String(10), nullable=False)
    branch: Mapped[str] = mapped_column(String(100), nullable=False)
    leaving_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Room 에서 파생되는 값 (직접 수정 금지)
    block: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    room_number: Mapped[str] = mapped_column(String(20), index=True, nullable=False)

    user: Mapped[User] = relationship(back_populates="student")
    room: Mapped[Room] = relationship(back_populates="occupants")

    @validates("room")
    def _derive_room_fields(self, key, room: Room) -> Room:
        self.block = room.block
        self.room_number = room.room_number
        return room


class StudentHistory(Base):
    __tablename__ = "student_history"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("students.id", ondelete="CASCADE"), index=True, nullable=False
    )
    updated_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    old_data: Mapped[dict] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
