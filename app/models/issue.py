"""
issue.py

민원(Issue) 및 민원 댓글(IssueComment) 모델 정의 파일.

- Issue 는 학생 프로필(Student)이 제기하고, 관리자/직원이 처리(resolved)한다.
- IssueComment 는 민원에 대해 누구든(접근 권한이 있다면) 남길 수 있는 댓글이다.

"""

import uuid
from enum import Enum
from typing import List

from sqlalchemy import Enum as SAEnum, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin
from app.models.student import Student
from app.models.user import User


class IssueCategory(str, Enum):
    DRINKING_WATER = "drinking-water"
    PLUMBING = "plumbing"
    FURNITURE = "furniture"
    ELECTRICITY = "electricity"
    OTHER = "other"


class IssueStatus(str, Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class Issue(TimestampMixin, Base):
    __tablename__ = "issues"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[IssueCategory] = mapped_column(
        SAEnum(IssueCategory, name="issue_category", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=IssueCategory.OTHER,
    )
    status: Mapped[IssueStatus] = mapped_column(
        SAEnum(IssueStatus, name="issue_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=IssueStatus.PENDING,
    )
    raised_by: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("students.id", ondelete="CASCADE"), index=True, nullable=False
    )

    student: Mapped[Student] = relationship()
    comments: Mapped[List["IssueComment"]] = relationship(
        back_populates="issue", cascade="all, delete-orphan"
    )


class IssueComment(TimestampMixin, Base):
    __tablename__ = "issue_comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    issue_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("issues.id", ondelete="CASCADE"), index=True, nullable=False
    )
    commented_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    comment_text: Mapped[str] = mapped_column(String(500), nullable=False)

    issue: Mapped[Issue] = relationship(back_populates="comments")
    author: Mapped[User] = relationship()
